from unittest.mock import MagicMock

import pytest
import requests

from apps.accounts.session import SessionContext
from apps.patients.client import CollaboratorError, PatientApiClient


def _response(status=200, content=b"", json_body=None):
    res = MagicMock()
    res.status_code = status
    res.ok = 200 <= status < 300
    res.content = content
    if json_body is not None:
        res.json.return_value = json_body
    else:
        res.json.side_effect = ValueError("no json")
    return res


@pytest.fixture
def http():
    session = MagicMock()
    session.headers = {}
    return session


@pytest.fixture
def api(http):
    ctx = SessionContext(token="tok-123", permissions=frozenset({"view_patient"}))
    return PatientApiClient(ctx, base_url="http://collab/api/v1", timeout=5, session=http)


def test_bearer_header_from_session_context(api, http):
    assert http.headers["Authorization"] == "Bearer tok-123"
    assert api.base_url == "http://collab/api/v1/"


def test_list_patients_query(api, http):
    body = {"records": [], "totalRecords": 0}
    http.request.return_value = _response(content=b"{}", json_body=body)

    assert api.list_patients(10, 2, "ada") == body
    http.request.assert_called_once_with(
        "GET",
        "http://collab/api/v1/patient",
        params={"pageSize": 10, "pageNo": 2, "searchParam": "ada"},
        timeout=5,
    )


def test_biometric_listings(api, http):
    http.request.return_value = _response(content=b"[]", json_body=[])

    api.list_patients_with_biometrics(20, 0, "")
    args, kwargs = http.request.call_args
    assert args[1].endswith("/patient/getall-patients-with-biometric")
    assert kwargs["params"] == {"pageSize": 20, "pageNo": 0, "searchParam": ""}

    api.list_patients_without_biometrics(20, 1, "ignored")
    args, kwargs = http.request.call_args
    assert args[1].endswith("/patient/getall-patients-without-biometric")
    assert kwargs["params"] == {"page": 1, "size": 20}


def test_empty_body_reads_as_none(api, http):
    http.request.return_value = _response(content=b"  ")
    assert api.list_patients(10, 0) is None


def test_malformed_json_raises(api, http):
    http.request.return_value = _response(content=b"<html>")
    with pytest.raises(CollaboratorError):
        api.list_patients(10, 0)


def test_non_2xx_raises_with_status(api, http):
    http.request.return_value = _response(status=401)
    with pytest.raises(CollaboratorError) as exc:
        api.list_patients(10, 0)
    assert exc.value.status_code == 401


def test_unreachable_collaborator(api, http):
    http.request.side_effect = requests.ConnectionError("refused")
    with pytest.raises(CollaboratorError) as exc:
        api.delete_patient("p1")
    assert exc.value.status_code is None


def test_delete_paths(api, http):
    http.request.return_value = _response(status=204)

    api.delete_patient("p1")
    assert http.request.call_args[0] == ("DELETE", "http://collab/api/v1/patient/p1")

    api.delete_patient("p1", "entered twice/by mistake")
    assert http.request.call_args[0] == (
        "DELETE",
        "http://collab/api/v1/patient/p1/entered%20twice%2Fby%20mistake",
    )


@pytest.mark.parametrize(
    "fault",
    [requests.TooManyRedirects("loop"), requests.exceptions.ChunkedEncodingError("cut"), requests.exceptions.InvalidURL("bad")],
)
def test_any_transport_fault_is_mapped(api, http, fault):
    http.request.side_effect = fault
    with pytest.raises(CollaboratorError):
        api.delete_patient("p1", "duplicate")
