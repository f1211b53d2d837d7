# apps/patients/api.py
"""
JSON rendition of the two listings and the delete call, for table widgets
that page remotely. Every page response echoes the caller's `generation`
so a client can drop responses that arrive after a newer request.
"""
import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import APIView

from drf_spectacular.utils import OpenApiParameter, extend_schema
from drf_spectacular.types import OpenApiTypes

from apps.accounts.session import PendingSelection, get_session_context
from apps.audit.utils import log_event
from apps.rbac.permissions import HasCollaboratorSession, permissions_required

from .actions import DELETE_PATIENT
from .client import CollaboratorError, PatientApiClient
from .serializers import DeleteQuerySerializer, PageQuerySerializer, PageResultSerializer
from .services import PageQuery
from .tables import WITHOUT_BIOMETRICS, biometrics_table, patient_table
from .workflow import DELETE_ERROR_MESSAGE, DeleteWorkflow, Outcome

logger = logging.getLogger(__name__)


class CollaboratorUnavailable(APIException):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "The patient service could not be reached."
    default_code = "collaborator_unavailable"


PAGE_PARAMETERS = [
    OpenApiParameter(name="pageSize", description="Rows per page (default 10)", required=False, type=OpenApiTypes.INT),
    OpenApiParameter(name="pageNo", description="Zero-based page index", required=False, type=OpenApiTypes.INT),
    OpenApiParameter(name="searchParam", description="Search text", required=False, type=OpenApiTypes.STR),
    OpenApiParameter(
        name="generation",
        description="Opaque request counter, echoed back so stale responses can be discarded",
        required=False,
        type=OpenApiTypes.INT,
    ),
]


class _PageView(APIView):
    permission_classes = [HasCollaboratorSession]

    def table_for(self, client, permissions, params):
        raise NotImplementedError

    def get(self, request):
        params = PageQuerySerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        data = params.validated_data

        ctx = get_session_context(request)
        client = PatientApiClient(ctx)
        table = self.table_for(client, ctx.permissions, data)
        query = PageQuery(
            page_size=data["pageSize"],
            page_index=data["pageNo"],
            search_text=data["searchParam"].strip(),
        )
        try:
            result = table.load(query)
        except CollaboratorError as e:
            logger.warning("Page %s fetch failed: %s", query.page_index, e)
            raise CollaboratorUnavailable(str(e))
        finally:
            client.close()

        body = PageResultSerializer(result).data
        if "generation" in data:
            body["generation"] = data["generation"]
        return Response(body)


class PatientPageView(_PageView):
    @extend_schema(
        summary="One page of the patient listing",
        parameters=PAGE_PARAMETERS,
        responses={200: PageResultSerializer},
    )
    def get(self, request):
        return super().get(request)

    def table_for(self, client, permissions, params):
        return patient_table(client, permissions)


class BiometricPageView(_PageView):
    @extend_schema(
        summary="One page of the biometric-status listing",
        description="`status=without` lists patients with no biometrics; that endpoint ignores search.",
        parameters=PAGE_PARAMETERS + [
            OpenApiParameter(name="status", description="`with` (default) or `without`", required=False, type=OpenApiTypes.STR),
        ],
        responses={200: PageResultSerializer},
    )
    def get(self, request):
        return super().get(request)

    def table_for(self, client, permissions, params):
        return biometrics_table(client, permissions, params["status"])


class PatientDeleteView(APIView):
    permission_classes = [permissions_required(DELETE_PATIENT)]

    @extend_schema(
        summary="Delete a patient",
        description="Sends `reason` along when given; otherwise the id-only delete is used.",
        parameters=[
            OpenApiParameter(name="reason", description="Why the record is removed", required=False, type=OpenApiTypes.STR),
        ],
        responses={204: None},
    )
    def delete(self, request, patient_id: str):
        raw = {}
        reason = request.query_params.get("reason")
        if reason is None and hasattr(request.data, "get"):
            reason = request.data.get("reason")
        if reason is not None:
            raw["reason"] = reason
        params = DeleteQuerySerializer(data=raw)
        params.is_valid(raise_exception=True)
        reason = params.validated_data.get("reason")

        selection = PendingSelection.from_value(patient_id)
        client = PatientApiClient(get_session_context(request))
        workflow = DeleteWorkflow(client.delete_patient, require_reason=reason is not None)
        workflow.begin(selection.patient_id)
        try:
            outcome = workflow.confirm(reason)
        finally:
            client.close()

        if outcome is Outcome.ERROR:
            log_event(request, "patient.delete_failed", "Patient", selection.patient_id)
            return Response({"detail": DELETE_ERROR_MESSAGE}, status=status.HTTP_502_BAD_GATEWAY)

        log_event(request, "patient.delete", "Patient", selection.patient_id, detail=reason or "")
        return Response(status=status.HTTP_204_NO_CONTENT)
