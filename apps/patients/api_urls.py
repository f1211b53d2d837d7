# apps/patients/api_urls.py
from django.urls import path

from .api import BiometricPageView, PatientDeleteView, PatientPageView

app_name = "patients_api"

urlpatterns = [
    path("patients/", PatientPageView.as_view(), name="patient-page"),
    path("patients/biometrics/", BiometricPageView.as_view(), name="biometric-page"),
    path("patients/<str:patient_id>/", PatientDeleteView.as_view(), name="patient-delete"),
]
