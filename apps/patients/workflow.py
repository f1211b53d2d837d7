# apps/patients/workflow.py
"""
Delete confirmation workflow.

    IDLE --begin(id)--> CONFIRM_PENDING --confirm(reason)--> DELETING --> IDLE
                               |                                  (refreshed | error)
                               +--cancel()--> IDLE (cancelled)

The patient record set itself lives in the collaborator; this object only
holds the transient confirmation state and issues the one delete call.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from .client import CollaboratorError

logger = logging.getLogger(__name__)

DELETE_SUCCESS_MESSAGE = "Patient Deleted Successfully"
DELETE_ERROR_MESSAGE = "An error occurred while deleting!!!"


class WorkflowError(Exception):
    """Raised on a transition the current state does not allow."""


class State(enum.Enum):
    IDLE = "idle"
    CONFIRM_PENDING = "confirm_pending"
    DELETING = "deleting"


class Outcome(enum.Enum):
    REFRESHED = "refreshed"
    ERROR = "error"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class DeleteRequest:
    patient_id: str
    reason: Optional[str] = None


# delete_call(patient_id, reason) for the reason variant,
# delete_call(patient_id, None) for the id-only variant.
DeleteCall = Callable[[str, Optional[str]], None]


class DeleteWorkflow:
    def __init__(
        self,
        delete_call: DeleteCall,
        *,
        require_reason: bool = True,
        on_refresh: Optional[Callable[[], None]] = None,
    ) -> None:
        self._delete_call = delete_call
        self.require_reason = require_reason
        self._on_refresh = on_refresh
        self.state = State.IDLE
        self.patient_id: Optional[str] = None
        self.outcome: Optional[Outcome] = None
        self.error: Optional[str] = None

    def _expect(self, state: State) -> None:
        if self.state is not state:
            raise WorkflowError(f"Cannot do that while {self.state.value}")

    def _reset(self, outcome: Outcome) -> Outcome:
        self.state = State.IDLE
        self.patient_id = None
        self.outcome = outcome
        return outcome

    def begin(self, patient_id) -> None:
        self._expect(State.IDLE)
        text = str(patient_id or "").strip()
        if not text:
            raise WorkflowError("A patient id is required to start a delete")
        self.patient_id = text
        self.outcome = None
        self.error = None
        self.state = State.CONFIRM_PENDING

    def cancel(self) -> Outcome:
        self._expect(State.CONFIRM_PENDING)
        logger.debug("Delete of %s cancelled", self.patient_id)
        return self._reset(Outcome.CANCELLED)

    def confirm(self, reason: Optional[str] = None) -> Outcome:
        self._expect(State.CONFIRM_PENDING)
        if self.require_reason:
            reason = (reason or "").strip()
            if not reason:
                raise ValueError("A reason is required to delete a patient")
        else:
            reason = None

        request = DeleteRequest(self.patient_id, reason)
        self.state = State.DELETING
        try:
            self._delete_call(request.patient_id, request.reason)
        except CollaboratorError as e:
            logger.warning("Delete of patient %s failed: %s", request.patient_id, e)
            self.error = DELETE_ERROR_MESSAGE
            return self._reset(Outcome.ERROR)

        outcome = self._reset(Outcome.REFRESHED)
        if self._on_refresh is not None:
            self._on_refresh()
        return outcome

    @property
    def message(self) -> Optional[str]:
        if self.outcome is Outcome.REFRESHED:
            return DELETE_SUCCESS_MESSAGE
        if self.outcome is Outcome.ERROR:
            return self.error
        return None
