# config/urls.py
from django.http import JsonResponse
from django.urls import include, path
from django.views.generic import RedirectView

from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from apps.accounts.views import SessionEndView, SessionStartView

urlpatterns = [
    # ---------- Site ----------
    path("", RedirectView.as_view(pattern_name="patients_ui:patients_home", permanent=False), name="home"),

    # Healthcheck
    path("health/", lambda r: JsonResponse({"ok": True}, status=200), name="health"),

    # OpenAPI schema + Swagger UI
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),

    # ---------- v1 APIs ----------
    path("api/v1/", include(("apps.patients.api_urls", "patients_api"), namespace="patients_api")),

    # ---------- Console (UI) ----------
    path("console/", include(("apps.patients.ui_urls", "patients_ui"), namespace="patients_ui")),
    path("console/", include(("apps.progress.ui_urls", "progress_ui"), namespace="progress_ui")),

    # ---------- Session handoff ----------
    path("session/", SessionStartView.as_view(), name="session_start"),
    path("session/end/", SessionEndView.as_view(), name="session_end"),
]
