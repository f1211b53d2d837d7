# apps/patients/ui_views.py
from __future__ import annotations

import logging
from urllib.parse import urlencode

from django.conf import settings
from django.contrib import messages
from django.http import HttpRequest, HttpResponse
from django.shortcuts import redirect, render
from django.template.response import TemplateResponse
from django.urls import reverse
from django.utils.http import url_has_allowed_host_and_scheme

from apps.accounts.session import PendingSelection
from apps.audit.utils import log_event
from apps.rbac.permissions import has_any_permission
from apps.rbac.utils import require_permission, session_required

from .actions import DELETE_PATIENT, VIEW_PATIENT
from .client import PatientApiClient
from .forms import DeleteReasonForm
from .tables import (
    BIOMETRIC_STATUSES,
    WITH_BIOMETRICS,
    WITHOUT_BIOMETRICS,
    biometrics_table,
    page_query_from,
    patient_table,
)
from .workflow import DELETE_SUCCESS_MESSAGE, DeleteWorkflow, Outcome

logger = logging.getLogger(__name__)


# -------------------------
# Internal helpers
# -------------------------


def _is_htmx(request: HttpRequest) -> bool:
    return request.headers.get("HX-Request") == "true"


def _client(request: HttpRequest) -> PatientApiClient:
    return PatientApiClient(request.console_session)


def _can_view_pii(request: HttpRequest) -> bool:
    return has_any_permission(request.console_session.permissions, VIEW_PATIENT)


def _table_context(request: HttpRequest, query, result, **extra) -> dict:
    can_view_pii = _can_view_pii(request)
    ctx = {
        "query": query,
        "result": result,
        "rows": result.rows,
        "q": query.search_text,
        "page_sizes": settings.PATIENT_PAGE_SIZES,
        "can_view_pii": can_view_pii,
        # Names stay hidden until the user opts in, and only with view_patient.
        "show_pii": can_view_pii and request.GET.get("pii") == "1",
        "list_url": request.path,
    }
    ctx.update(extra)
    return ctx


def _page_params(query, page_index: int, **extra) -> str:
    params = {"page": page_index, "size": query.page_size}
    if query.search_text:
        params["q"] = query.search_text
    params.update({k: v for k, v in extra.items() if v})
    return urlencode(params)


def _pager(query, **extra) -> dict:
    return {
        "prev_params": _page_params(query, max(query.page_index - 1, 0), **extra),
        "next_params": _page_params(query, query.page_index + 1, **extra),
    }


def _return_url(request: HttpRequest, default_name: str) -> str:
    next_url = request.POST.get("next") or request.GET.get("next") or ""
    if next_url and url_has_allowed_host_and_scheme(next_url, allowed_hosts={request.get_host()}):
        return next_url
    return reverse(default_name)


def _back_to_list(request: HttpRequest, url: str) -> HttpResponse:
    if _is_htmx(request):
        # Full reload so the table re-fetches its current page.
        response = HttpResponse(status=204)
        response["HX-Redirect"] = url
        return response
    return redirect(url)


# -------------------------
# Listings
# -------------------------


@session_required
def patients_home(request: HttpRequest):
    query = page_query_from(request.GET)
    client = _client(request)
    try:
        result = patient_table(client, request.console_session.permissions).load(query)
    finally:
        client.close()

    if query.search_text:
        log_event(request, "patient.search", "Patient", "", detail=query.search_text)

    ctx = _table_context(
        request,
        query,
        result,
        title="Patients",
        pii_param="1" if request.GET.get("pii") == "1" else "",
    )
    ctx.update(_pager(query, pii=ctx["pii_param"]))

    if _is_htmx(request):
        return TemplateResponse(request, "patients/_table.html", ctx)
    return render(request, "patients/list.html", ctx)


@session_required
def biometrics_home(request: HttpRequest):
    status = request.GET.get("status") or WITH_BIOMETRICS
    if status not in BIOMETRIC_STATUSES:
        status = WITH_BIOMETRICS

    query = page_query_from(request.GET)
    client = _client(request)
    table = biometrics_table(client, request.console_session.permissions, status)
    try:
        result = table.load(query)
    finally:
        client.close()

    ctx = _table_context(
        request,
        query,
        result,
        title="Biometrics",
        status=status,
        statuses=[
            (WITH_BIOMETRICS, "Patient with Biometrics"),
            (WITHOUT_BIOMETRICS, "Patient without Biometrics"),
        ],
        searchable=table.searchable,
        pii_param="1" if request.GET.get("pii") == "1" else "",
    )
    ctx.update(_pager(query, status=status, pii=ctx["pii_param"]))

    if _is_htmx(request):
        return TemplateResponse(request, "patients/_table.html", ctx)
    return render(request, "patients/biometrics.html", ctx)


# -------------------------
# Delete (confirmation workflow)
# -------------------------


def _delete_call(request: HttpRequest):
    def call(patient_id, reason):
        client = _client(request)
        try:
            client.delete_patient(patient_id, reason)
        finally:
            client.close()
    return call


def _run_delete(request: HttpRequest, patient_id: str, *, require_reason: bool, list_name: str):
    selection = PendingSelection.from_value(patient_id)
    return_url = _return_url(request, list_name)

    workflow = DeleteWorkflow(
        _delete_call(request),
        require_reason=require_reason,
        on_refresh=lambda: messages.success(request, DELETE_SUCCESS_MESSAGE),
    )
    workflow.begin(selection.patient_id)

    form = DeleteReasonForm(request.POST or None) if require_reason else None
    ctx = {
        "patient_id": selection.patient_id,
        "form": form,
        "next": return_url,
        "require_reason": require_reason,
        "action_url": request.path,
    }
    partial = "patients/_delete_modal.html" if _is_htmx(request) else "patients/delete_confirm.html"

    if request.method != "POST":
        return render(request, partial, ctx)

    if "cancel" in request.POST:
        workflow.cancel()
        return _back_to_list(request, return_url)

    if form is not None and not form.is_valid():
        if _is_htmx(request):
            # htmx only swaps 2xx; the modal shows the field error inline.
            return render(request, partial, ctx)
        messages.error(request, "Kindly provide a reason before deleting.")
        return render(request, partial, ctx, status=400)

    outcome = workflow.confirm(form.cleaned_data["reason"] if form is not None else None)
    if outcome is Outcome.REFRESHED:
        log_event(request, "patient.delete", "Patient", selection.patient_id,
                  detail=form.cleaned_data["reason"] if form is not None else "")
    else:
        log_event(request, "patient.delete_failed", "Patient", selection.patient_id)
        messages.error(request, workflow.message)
    return _back_to_list(request, return_url)


@require_permission(DELETE_PATIENT)
def delete_confirm(request: HttpRequest, patient_id: str):
    return _run_delete(
        request,
        patient_id,
        require_reason=True,
        list_name="patients_ui:patients_home",
    )


@require_permission(DELETE_PATIENT)
def biometrics_delete_confirm(request: HttpRequest, patient_id: str):
    return _run_delete(
        request,
        patient_id,
        require_reason=False,
        list_name="patients_ui:biometrics_home",
    )
