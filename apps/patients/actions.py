# apps/patients/actions.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Mapping, Optional
from urllib.parse import urlencode

from django.conf import settings
from django.urls import reverse

from apps.accounts.session import PendingSelection

LINK = "link"
DELETE = "delete"

VIEW_PATIENT = "view_patient"
EDIT_PATIENT = "edit_patient"
DELETE_PATIENT = "delete_patient"


@dataclass(frozen=True)
class ActionDescriptor:
    name: str
    kind: str
    icon: str
    route: str
    state: Mapping[str, str] = field(default_factory=dict)
    required_permission: Optional[str] = None
    delete_url: Optional[str] = None

    @property
    def href(self) -> str:
        """Where a link action navigates: host app route plus its state."""
        if self.kind == DELETE:
            return self.delete_url or "#"
        base = f"{settings.PATIENT_APP_URL.rstrip('/')}{self.route}"
        return f"{base}?{urlencode(self.state)}" if self.state else base

    @property
    def is_delete(self) -> bool:
        return self.kind == DELETE


def _selection(record) -> Optional[PendingSelection]:
    return PendingSelection.from_value(record.get("id"))


def _state(selection: Optional[PendingSelection]) -> dict:
    return selection.as_query() if selection else {}


def listing_actions(record) -> List[ActionDescriptor]:
    """
    Candidates for the general patient listing, in menu order.
    Every entry is gated; the permission filter decides what shows.
    """
    selection = _selection(record)
    state = _state(selection)
    delete_url = (
        reverse("patients_ui:delete_confirm", args=[selection.patient_id]) if selection else None
    )
    return [
        ActionDescriptor("View", LINK, "eye", "/view-patient", state, VIEW_PATIENT),
        ActionDescriptor("Dashboard", LINK, "person", "/patient-dashboard", state, VIEW_PATIENT),
        ActionDescriptor("Edit", LINK, "edit", "/register-patient", state, EDIT_PATIENT),
        ActionDescriptor("Delete", DELETE, "delete", "#", state, DELETE_PATIENT, delete_url),
    ]


def biometrics_actions(record) -> List[ActionDescriptor]:
    """
    Candidates for the biometric listing. View is open to every session on
    this screen; Dashboard still needs view_patient.
    """
    state = _state(_selection(record))
    return [
        ActionDescriptor("View", LINK, "eye", "/patient-biometrics", state, None),
        ActionDescriptor("Dashboard", LINK, "person", "/patient-biometrics", state, VIEW_PATIENT),
    ]
