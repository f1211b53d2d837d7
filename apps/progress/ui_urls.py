# apps/progress/ui_urls.py
from django.urls import path

from . import ui_views

app_name = "progress_ui"

urlpatterns = [
    path("progress/", ui_views.progress_panel, name="progress_panel"),
]
