# lab_requests/serializers.py
from __future__ import annotations

from rest_framework import serializers

from lab_requests.models import LabRequest, Patient


class PatientSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Patient
        fields = ["id", "code", "full_name"]


class LabRequestSerializer(serializers.ModelSerializer):
    """Read-only listing representation of stored lab requests."""

    patient_name = serializers.CharField(source="patient.full_name", read_only=True)

    class Meta:
        model = LabRequest
        fields = [
            "id",
            "code",
            "patient",
            "patient_name",
            "type",
            "status",
            "result",
            "notes",
            "requested_on",
            "completed_on",
            "canceled_on",
        ]
        read_only_fields = fields


class LabSerializer(serializers.Serializer):
    """Renders a workflow Lab entity."""

    id = serializers.CharField()
    code = serializers.CharField()
    patient = serializers.CharField()
    type = serializers.CharField()
    status = serializers.CharField()
    result = serializers.CharField(allow_null=True)
    notes = serializers.ListField(child=serializers.CharField())
    requested_on = serializers.DateTimeField()
    completed_on = serializers.DateTimeField(allow_null=True)
    canceled_on = serializers.DateTimeField(allow_null=True)


class LabSubmissionSerializer(serializers.Serializer):
    """
    Body of update / complete / cancel requests: the edits made in the
    same submission as the action.
    """

    result = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, trim_whitespace=False
    )
    note = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, trim_whitespace=False
    )
