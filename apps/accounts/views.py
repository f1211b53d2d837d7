# apps/accounts/views.py
import logging

from django.conf import settings
from django.contrib import messages
from django.shortcuts import redirect, render
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.generic import TemplateView, View

from .forms import SessionHandoffForm
from .session import SessionContext, end_session, get_session_context, start_session
from .signals import session_ended, session_started

logger = logging.getLogger(__name__)


# ----------------------- Credential handoff from the host app -----------------------
class SessionStartView(TemplateView):
    template_name = "accounts/session.html"

    def _next_url(self, request) -> str:
        next_url = request.POST.get("next") or request.GET.get("next") or ""
        if next_url and url_has_allowed_host_and_scheme(next_url, allowed_hosts={request.get_host()}):
            return next_url
        return getattr(settings, "LOGIN_REDIRECT_URL", "/console/patients/")

    def get(self, request, *args, **kwargs):
        form = SessionHandoffForm()
        return render(request, self.template_name, {"form": form, "next": request.GET.get("next", "")})

    def post(self, request, *args, **kwargs):
        form = SessionHandoffForm(request.POST or None)
        next_url = self._next_url(request)
        if not form.is_valid():
            messages.error(request, "Please provide an access token.")
            return render(request, self.template_name, {"form": form, "next": next_url}, status=400)

        ctx = SessionContext(
            token=form.cleaned_data["token"],
            permissions=form.cleaned_data["permissions"],
            username=form.cleaned_data.get("username") or "",
        )
        start_session(request, ctx)
        session_started.send(sender=self.__class__, request=request, context=ctx)
        logger.info("Console session started for %s with %d permission(s)", ctx.username or "-", len(ctx.permissions))
        return redirect(next_url)


class SessionEndView(View):
    def post(self, request, *args, **kwargs):
        ctx = get_session_context(request)
        if ctx is not None:
            session_ended.send(sender=self.__class__, request=request, context=ctx)
        end_session(request)
        return redirect("session_start")

    def get(self, request, *args, **kwargs):
        return redirect("session_start")
