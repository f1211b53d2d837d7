# apps/rbac/permissions.py
from typing import Iterable, List, Optional, Protocol, Sequence, Set, TypeVar

from rest_framework.permissions import BasePermission

from apps.accounts.session import get_session_context

ALL_PERMISSION = "all_permission"


def _norm(s: str) -> str:
    """I normalize permission names for reliable comparisons."""
    return (s or "").strip()


def has_permission(permissions: Iterable[str], required: Optional[str]) -> bool:
    """
    True when `required` is None (ungated), or the permission set holds it,
    or the set holds the `all_permission` wildcard.
    """
    if required is None:
        return True
    have = {_norm(p) for p in permissions or ()}
    return ALL_PERMISSION in have or _norm(required) in have


def has_any_permission(permissions: Iterable[str], *required: str) -> bool:
    return any(has_permission(permissions, r) for r in required)


class Gated(Protocol):
    required_permission: Optional[str]


G = TypeVar("G", bound=Gated)


def visible_actions(candidates: Sequence[G], permissions: Iterable[str]) -> List[G]:
    """
    Keep candidate order; append a descriptor only when its predicate holds.
    """
    have = frozenset(_norm(p) for p in permissions or ())
    visible: List[G] = []
    for action in candidates:
        if has_permission(have, action.required_permission):
            visible.append(action)
    return visible


# ---- DRF permission classes -------------------------------------------------


class HasCollaboratorSession(BasePermission):
    """
    I gate API views on a handed-over collaborator credential being present
    in the session.
    """

    message = "No collaborator session. Hand over a token at /session/ first."

    def has_permission(self, request, view) -> bool:
        return get_session_context(request) is not None


class HasPermission(HasCollaboratorSession):
    """
    Session required, plus ANY of `required_permissions` (or all_permission).
    Subclasses (or the permissions_required() factory below) set the set.
    """

    message = "You do not have permission to perform this action."
    required_permissions: Set[str] = set()

    def has_permission(self, request, view) -> bool:
        ctx = get_session_context(request)
        if ctx is None:
            return False
        # No permissions configured → any session passes.
        if not self.required_permissions:
            return True
        return has_any_permission(ctx.permissions, *self.required_permissions)

    def has_object_permission(self, request, view, obj) -> bool:
        return self.has_permission(request, view)


def permissions_required(*names: str):
    """
    I return a concrete DRF permission class that requires ANY of the given
    permission names.

    Usage:
        permission_classes = [permissions_required("delete_patient")]
    """
    required = {_norm(n) for n in names if isinstance(n, str) and n.strip()}

    class PermissionsRequired(HasPermission):
        required_permissions = required

    return PermissionsRequired
