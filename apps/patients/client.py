# apps/patients/client.py
"""
Thin HTTP client for the collaborator patient service.

One instance per request: it carries the bearer credential from the caller's
SessionContext. No retries and no caching; every page/search change is a new
call.
"""
from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import quote

import requests
from django.conf import settings

from apps.accounts.session import SessionContext

logger = logging.getLogger(__name__)

PATIENTS_PATH = "patient"
WITH_BIOMETRICS_PATH = "patient/getall-patients-with-biometric"
WITHOUT_BIOMETRICS_PATH = "patient/getall-patients-without-biometric"


class CollaboratorError(Exception):
    """Raised when the collaborator cannot be reached or answers non-2xx."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class PatientApiClient:
    def __init__(
        self,
        context: SessionContext,
        *,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        base = base_url if base_url is not None else settings.COLLABORATOR_API_URL
        self.base_url = base if base.endswith("/") else base + "/"
        self.timeout = timeout if timeout is not None else settings.COLLABORATOR_TIMEOUT
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {context.token}",
            "Accept": "application/json",
        })

    # ---- Transport -----------------------------------------------------------

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _send(self, method: str, path: str, params: Optional[dict] = None) -> requests.Response:
        url = self._url(path)
        try:
            response = self.session.request(method, url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("Collaborator %s %s unreachable: %s", method, url, e)
            raise CollaboratorError(f"Patient service unreachable: {e}") from e

        if not response.ok:
            logger.warning("Collaborator %s %s answered HTTP %s", method, url, response.status_code)
            raise CollaboratorError(
                f"Patient service answered HTTP {response.status_code}",
                status_code=response.status_code,
            )
        logger.debug("Collaborator %s %s -> HTTP %s", method, url, response.status_code)
        return response

    @staticmethod
    def _json_or_none(response: requests.Response) -> Any:
        # Some listing endpoints answer an empty body instead of an empty page.
        if not (response.content or b"").strip():
            return None
        try:
            return response.json()
        except ValueError as e:
            raise CollaboratorError("Patient service returned malformed JSON", response.status_code) from e

    # ---- Reads ---------------------------------------------------------------

    def list_patients(self, page_size: int, page_no: int, search: str = "") -> Any:
        params = {"pageSize": page_size, "pageNo": page_no, "searchParam": search}
        return self._json_or_none(self._send("GET", PATIENTS_PATH, params))

    def list_patients_with_biometrics(self, page_size: int, page_no: int, search: str = "") -> Any:
        params = {"pageSize": page_size, "pageNo": page_no, "searchParam": search}
        return self._json_or_none(self._send("GET", WITH_BIOMETRICS_PATH, params))

    def list_patients_without_biometrics(self, page_size: int, page_no: int, search: str = "") -> Any:
        # Spring Pageable naming; this endpoint does not search.
        params = {"page": page_no, "size": page_size}
        return self._json_or_none(self._send("GET", WITHOUT_BIOMETRICS_PATH, params))

    # ---- Writes --------------------------------------------------------------

    def delete_patient(self, patient_id, reason: Optional[str] = None) -> None:
        path = f"{PATIENTS_PATH}/{quote(str(patient_id), safe='')}"
        if reason is not None:
            path = f"{path}/{quote(reason, safe='')}"
        self._send("DELETE", path)
        logger.info("Deleted patient %s (reason given: %s)", patient_id, reason is not None)

    def close(self) -> None:
        self.session.close()
