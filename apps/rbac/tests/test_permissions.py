from types import SimpleNamespace

import pytest

from apps.accounts.session import SESSION_KEY
from apps.rbac.permissions import (
    ALL_PERMISSION,
    HasCollaboratorSession,
    has_any_permission,
    has_permission,
    permissions_required,
    visible_actions,
)
from apps.rbac.templatetags.rbac_tags import has_perm


def _action(name, required):
    return SimpleNamespace(name=name, required_permission=required)


CANDIDATES = [
    _action("View", "view_patient"),
    _action("Open", None),
    _action("Edit", "edit_patient"),
    _action("Delete", "delete_patient"),
]


@pytest.mark.parametrize(
    "permissions, expected",
    [
        (set(), ["Open"]),
        ({"view_patient"}, ["View", "Open"]),
        ({"delete_patient", "edit_patient"}, ["Open", "Edit", "Delete"]),
        ({ALL_PERMISSION}, ["View", "Open", "Edit", "Delete"]),
    ],
)
def test_visible_actions_keeps_order(permissions, expected):
    assert [a.name for a in visible_actions(CANDIDATES, permissions)] == expected


def test_visible_actions_does_not_mutate_candidates():
    before = list(CANDIDATES)
    visible_actions(CANDIDATES, set())
    assert CANDIDATES == before


def test_has_permission_wildcard_and_ungated():
    assert has_permission(set(), None)
    assert has_permission({ALL_PERMISSION}, "anything")
    assert not has_permission({"view_patient"}, "edit_patient")
    assert has_any_permission({"edit_patient"}, "view_patient", "edit_patient")


def test_has_perm_filter():
    assert has_perm(frozenset({"view_patient"}), "view_patient, edit_patient")
    assert not has_perm(frozenset({"view_patient"}), "delete_patient")
    assert not has_perm(frozenset({"view_patient"}), "")
    assert has_perm(frozenset({ALL_PERMISSION}), "delete_patient")


def _request(rf, permissions=None):
    request = rf.get("/")
    request.session = {} if permissions is None else {
        SESSION_KEY: {"token": "tok", "permissions": permissions}
    }
    return request


def test_drf_session_gate(rf):
    assert not HasCollaboratorSession().has_permission(_request(rf), None)
    assert HasCollaboratorSession().has_permission(_request(rf, []), None)


def test_drf_permissions_required(rf):
    perm = permissions_required("delete_patient")()
    assert not perm.has_permission(_request(rf), None)
    assert not perm.has_permission(_request(rf, ["view_patient"]), None)
    assert perm.has_permission(_request(rf, ["delete_patient"]), None)
    assert perm.has_permission(_request(rf, [ALL_PERMISSION]), None)


@pytest.mark.django_db
def test_api_delete_enforces_csrf():
    from django.urls import reverse
    from rest_framework.test import APIClient

    api = APIClient(enforce_csrf_checks=True)
    api.get(reverse("session_start"))
    api.post(
        reverse("session_start"),
        {"token": "abc", "permissions": "delete_patient", "csrfmiddlewaretoken": api.cookies["csrftoken"].value},
    )

    res = api.delete("/api/v1/patients/p1/")

    assert res.status_code == 403
    assert "CSRF" in res.json()["detail"]
