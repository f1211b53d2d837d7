# apps/accounts/signals.py
from django.dispatch import Signal, receiver

from apps.audit.utils import log_event

# Sent with request= and context= (a SessionContext)
session_started = Signal()
session_ended = Signal()


@receiver(session_started)
def audit_session_started(sender, request, context, **kwargs):
    #  record the credential handoff, never the token itself.
    log_event(request, "session.start", "Session", context.username, actor=context.username)


@receiver(session_ended)
def audit_session_ended(sender, request, context, **kwargs):
    username = getattr(context, "username", "")
    log_event(request, "session.end", "Session", username, actor=username)
