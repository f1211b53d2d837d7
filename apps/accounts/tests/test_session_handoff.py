import pytest
from django.urls import reverse

from apps.accounts.session import SESSION_KEY, PendingSelection, SessionContext, parse_permissions
from apps.audit.models import AuditEvent


def test_parse_permissions_accepts_strings_and_lists():
    assert parse_permissions("view_patient, edit_patient  all_permission") == {
        "view_patient",
        "edit_patient",
        "all_permission",
    }
    assert parse_permissions(["view_patient", " ", ""]) == {"view_patient"}
    assert parse_permissions(None) == frozenset()


def test_session_context_round_trip():
    ctx = SessionContext(token="tok", permissions=frozenset({"b", "a"}), username="nurse")
    data = ctx.to_session()
    assert data["permissions"] == ["a", "b"]
    assert SessionContext.from_session(data) == ctx
    assert SessionContext.from_session({"token": "  "}) is None
    assert SessionContext.from_session(None) is None


def test_pending_selection():
    assert PendingSelection.from_value(" 42 ").as_query() == {"patientId": "42"}
    assert PendingSelection.from_value("") is None
    assert PendingSelection.from_value(None) is None


@pytest.mark.django_db
def test_handoff_stores_token_and_permissions(client):
    res = client.post(
        reverse("session_start"),
        {"token": "Bearer abc", "permissions": "view_patient,delete_patient", "username": "nurse"},
    )

    assert res.status_code == 302
    assert res["Location"] == "/console/patients/"
    stored = client.session[SESSION_KEY]
    assert stored["token"] == "abc"
    assert stored["permissions"] == ["delete_patient", "view_patient"]
    assert AuditEvent.objects.filter(action="session.start", actor="nurse").exists()


@pytest.mark.django_db
def test_handoff_honours_safe_next_only(client):
    res = client.post(reverse("session_start"), {"token": "abc", "next": "/console/biometrics/"})
    assert res["Location"] == "/console/biometrics/"

    res = client.post(reverse("session_start"), {"token": "abc", "next": "https://evil.example/"})
    assert res["Location"] == "/console/patients/"


@pytest.mark.django_db
def test_handoff_without_token_is_rejected(client):
    res = client.post(reverse("session_start"), {"token": "  "})
    assert res.status_code == 400
    assert SESSION_KEY not in client.session


def test_handoff_form_renders(client):
    res = client.get(reverse("session_start"), {"next": "/console/progress/"})
    assert res.status_code == 200
    assert 'value="/console/progress/"' in res.content.decode()


@pytest.mark.django_db
def test_end_session_clears_credential(client):
    client.post(reverse("session_start"), {"token": "abc", "username": "nurse"})

    res = client.post(reverse("session_end"))

    assert res.status_code == 302
    assert SESSION_KEY not in client.session
    assert AuditEvent.objects.filter(action="session.end", actor="nurse").exists()
