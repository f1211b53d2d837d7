# apps/accounts/context_processors.py
from .session import get_session_context


def session_context(request):
    """
    Exposes the collaborator session to templates as `console_session`
    (None when no credential was handed over).
    """
    return {"console_session": get_session_context(request)}
