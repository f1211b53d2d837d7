# apps/accounts/session.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Optional

SESSION_KEY = "collaborator"


def _norm(s: str) -> str:
    return (s or "").strip()


def parse_permissions(raw) -> FrozenSet[str]:
    """
    Accept either an iterable of names or a comma/whitespace separated string.
    Blank entries are dropped; names are kept case-sensitive because the
    collaborator issues them that way (e.g. "view_patient", "all_permission").
    """
    if raw is None:
        return frozenset()
    if isinstance(raw, str):
        raw = raw.replace(",", " ").split()
    return frozenset(p for p in (_norm(x) for x in raw) if p)


@dataclass(frozen=True)
class SessionContext:
    """
    Who is driving the console: the bearer credential used against the
    collaborator API plus the permission set the host app granted.

    Built per request from the Django session and handed explicitly to the
    client, loaders and views. Nothing else reads the credential.
    """

    token: str
    permissions: FrozenSet[str] = field(default_factory=frozenset)
    username: str = ""

    def to_session(self) -> dict:
        return {
            "token": self.token,
            "permissions": sorted(self.permissions),
            "username": self.username,
        }

    @classmethod
    def from_session(cls, data) -> Optional["SessionContext"]:
        if not data or not _norm(data.get("token", "")):
            return None
        return cls(
            token=data["token"].strip(),
            permissions=parse_permissions(data.get("permissions")),
            username=_norm(data.get("username", "")),
        )


def get_session_context(request) -> Optional[SessionContext]:
    session = getattr(request, "session", None)
    if session is None:
        return None
    return SessionContext.from_session(session.get(SESSION_KEY))


def start_session(request, ctx: SessionContext) -> None:
    # Fresh key so a handed-over credential never reuses an old session id.
    request.session.cycle_key()
    request.session[SESSION_KEY] = ctx.to_session()


def end_session(request) -> None:
    request.session.pop(SESSION_KEY, None)
    request.session.flush()


def permissions_of(request) -> FrozenSet[str]:
    ctx = get_session_context(request)
    return ctx.permissions if ctx else frozenset()


@dataclass(frozen=True)
class PendingSelection:
    """
    A patient picked on one screen and handed to the next through navigation
    (URL path or query string), never through ambient storage.
    """

    patient_id: str

    @classmethod
    def from_value(cls, value) -> Optional["PendingSelection"]:
        text = _norm(str(value)) if value is not None else ""
        return cls(text) if text else None

    def as_query(self) -> dict:
        return {"patientId": self.patient_id}

