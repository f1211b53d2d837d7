# apps/progress/ui_views.py
from django.conf import settings
from django.shortcuts import render

from apps.rbac.utils import session_required

# Shown until the first message arrives on the topic.
WAITING_TEXT = "Waiting for check-in/out progress..."


def panel_config() -> dict:
    """
    I describe the live channel for the browser. The subscription itself runs
    client side (SockJS + STOMP); nothing here talks to the broker.
    """
    return {
        "ws_url": settings.COLLABORATOR_WS_URL,
        "topic": settings.PROGRESS_TOPIC,
    }


@session_required
def progress_panel(request):
    ctx = {"title": "Check-in/out progress", "waiting_text": WAITING_TEXT, "channel": panel_config()}
    return render(request, "progress/panel.html", ctx)
