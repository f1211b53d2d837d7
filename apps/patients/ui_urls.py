# apps/patients/ui_urls.py
from django.urls import path
from . import ui_views as v

app_name = "patients_ui"

urlpatterns = [
    # Patients list + paging/search fragments (HTMX)
    path("patients/", v.patients_home, name="patients_home"),
    path("patients/<str:patient_id>/delete/", v.delete_confirm, name="delete_confirm"),

    # Biometric status listing (with / without)
    path("biometrics/", v.biometrics_home, name="biometrics_home"),
    path("biometrics/<str:patient_id>/delete/", v.biometrics_delete_confirm, name="biometrics_delete_confirm"),
]
