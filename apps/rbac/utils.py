# apps/rbac/utils.py
from functools import wraps
from urllib.parse import urlencode

from django.conf import settings
from django.http import HttpResponseForbidden
from django.shortcuts import redirect

from apps.accounts.session import get_session_context
from apps.rbac.permissions import has_any_permission


def _handoff_redirect(request):
    login_url = getattr(settings, "LOGIN_URL", "/session/")
    return redirect(f"{login_url}?{urlencode({'next': request.get_full_path()})}")


def session_required(view_func):
    """
    Decorator for plain Django views: the collaborator credential must have
    been handed over. Attaches it as `request.console_session`.
    """
    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        ctx = get_session_context(request)
        if ctx is None:
            return _handoff_redirect(request)
        request.console_session = ctx
        return view_func(request, *args, **kwargs)
    return _wrapped


def require_permission(*names: str):
    """
    Decorator for plain Django views.
    Example:
        @require_permission("delete_patient")
        def my_view(request): ...
    `all_permission` always passes; missing session goes to the handoff page.
    """
    def deco(view_func):
        @wraps(view_func)
        def _wrapped(request, *args, **kwargs):
            ctx = get_session_context(request)
            if ctx is None:
                return _handoff_redirect(request)
            if names and not has_any_permission(ctx.permissions, *names):
                return HttpResponseForbidden("Not allowed.")
            request.console_session = ctx
            return view_func(request, *args, **kwargs)
        return _wrapped
    return deco
