import logging

from apps.audit.models import AuditEvent

logger = logging.getLogger(__name__)


def _client_ip(request) -> str | None:
    xff = request.META.get("HTTP_X_FORWARDED_FOR")
    if xff:
        return xff.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR")


def _session_actor(request) -> str:
    # Local import keeps audit free of an accounts dependency at import time.
    from apps.accounts.session import get_session_context

    ctx = get_session_context(request)
    return ctx.username if ctx else ""


def log_event(
    request,
    action: str,
    object_type: str = "",
    object_id: str | int | None = None,
    *,
    actor: str | None = None,
    detail: str = "",
):
    #  centralizing audit insert so it stays consistent across the app.
    event = AuditEvent.objects.create(
        actor=(actor if actor is not None else _session_actor(request))[:150],
        action=action,
        object_type=object_type,
        object_id=str(object_id or "")[:64],
        detail=(detail or "")[:255],
        ip=_client_ip(request),
        user_agent=request.META.get("HTTP_USER_AGENT", ""),
    )
    logger.debug("audit %s %s:%s", action, object_type, event.object_id)
    return event
