# lab_requests/views.py

from __future__ import annotations

from rest_framework import generics
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from lab_requests.filters import LabRequestFilter
from lab_requests.models import LabRequest, Patient
from lab_requests.permissions import CanViewLab, DjangoAuthorizationGate
from lab_requests.repositories import DjangoLabRepository
from lab_requests.serializers import (
    LabRequestSerializer,
    LabSerializer,
    LabSubmissionSerializer,
    PatientSummarySerializer,
)
from lab_requests.services.lab_workflow import LabWorkflowService
from lab_requests.workflows import required_permission, workflow_definition
from lab_requests.workflows.entity import LabSubmission
from lab_requests.workflows.exceptions import LabValidationFailed


def get_workflow_service() -> LabWorkflowService:
    return LabWorkflowService(
        repository=DjangoLabRepository(),
        gate=DjangoAuthorizationGate(),
    )


# =============================================================
# Read
# =============================================================

class LabListView(generics.ListAPIView):
    """
    GET /api/labs/?status=requested&patient=<uuid>&code=L-12
    """

    queryset = LabRequest.objects.select_related("patient")
    serializer_class = LabRequestSerializer
    permission_classes = [IsAuthenticated, CanViewLab]
    filterset_class = LabRequestFilter


class LabDetailView(APIView):
    """
    GET /api/labs/<pk>/

    Returns the lab, its patient, and the actions this user may be
    offered for it in its current state.
    """

    permission_classes = [IsAuthenticated, CanViewLab]

    def get(self, request, pk):
        service = get_workflow_service()
        lab = service.view(str(pk))
        patient = Patient.objects.filter(pk=lab.patient).first()

        return Response(
            {
                "lab": LabSerializer(lab).data,
                "patient": PatientSummarySerializer(patient).data if patient else None,
                "actions": service.offerable_actions_for(lab, request.user),
            }
        )


class LabWorkflowDefinitionView(APIView):
    """
    GET /api/labs/workflow/
    """

    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(workflow_definition())


# =============================================================
# Write (AUTHORITATIVE)
# =============================================================

class LabActionView(APIView):
    """
    POST /api/labs/<pk>/update/
    POST /api/labs/<pk>/complete/
    POST /api/labs/<pk>/cancel/

    Body:
        { "result": "...", "note": "..." }   both optional

    Permission is checked here, before and independently of the
    workflow's state rules.
    """

    permission_classes = [IsAuthenticated, CanViewLab]
    lab_action = None

    def post(self, request, pk):
        service = get_workflow_service()

        permission = required_permission(self.lab_action)
        if not service.gate.has_permission(request.user, permission):
            raise PermissionDenied(f"{permission} permission is required to {self.lab_action} a lab request.")

        serializer = LabSubmissionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        submission = LabSubmission(
            action=self.lab_action,
            pending_result=serializer.validated_data.get("result"),
            pending_note=serializer.validated_data.get("note"),
        )

        result = service.submit(str(pk), submission)
        if not result.ok:
            raise LabValidationFailed.from_outcome(result.outcome)

        return Response(LabSerializer(result.lab).data)
