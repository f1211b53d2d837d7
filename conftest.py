# conftest.py
from unittest.mock import patch

import pytest
from django.urls import reverse


def make_record(
    patient_id="p1",
    first="Ada",
    other=None,
    surname="Obi",
    sex="FEMALE",
    dob="1990-05-01",
    hospital_number="H123",
    city="Abuja",
):
    """A collaborator PatientRecord as the listing endpoints return it."""
    return {
        "id": patient_id,
        "firstName": first,
        "otherName": other,
        "surname": surname,
        "sex": sex,
        "dateOfBirth": dob,
        "identifier": {
            "identifier": [
                {"type": "NationalId", "value": "N-999"},
                {"type": "HospitalNumber", "value": hospital_number},
            ]
        },
        "address": {"address": [{"city": city}]} if city else None,
    }


@pytest.fixture
def record():
    return make_record


@pytest.fixture
def page_body(record):
    def _build(count=10, total=25, start=0):
        return {
            "records": [record(patient_id=f"p{start + i}", hospital_number=f"H{start + i}") for i in range(count)],
            "totalRecords": total,
        }
    return _build


def _login(client, permissions="all_permission", username="nurse"):
    res = client.post(
        reverse("session_start"),
        {"token": "Bearer tok-123", "permissions": permissions, "username": username},
    )
    assert res.status_code == 302, res.content
    return client


@pytest.fixture
def console(client, db):
    """Django test client with a handed-over collaborator session."""
    def _console(permissions="all_permission", username="nurse"):
        return _login(client, permissions, username)
    return _console


@pytest.fixture
def api_console(db):
    from rest_framework.test import APIClient

    def _api_console(permissions="all_permission", username="nurse"):
        return _login(APIClient(), permissions, username)
    return _api_console


@pytest.fixture
def ui_api():
    """Stands in for the collaborator client used by the console views."""
    with patch("apps.patients.ui_views.PatientApiClient") as cls:
        yield cls.return_value


@pytest.fixture
def json_api():
    """Stands in for the collaborator client used by the JSON endpoints."""
    with patch("apps.patients.api.PatientApiClient") as cls:
        yield cls.return_value
