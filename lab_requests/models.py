# lab_requests/models.py

import uuid

from django.db import models
from django.db.models import Q
from django.utils import timezone

from lab_requests.guards import WorkflowWriteGuardMixin
from lab_requests.workflows import TERMINAL_STATUSES
from lab_requests.workflows.entity import LabStatus


# ============================================================
# Base
# ============================================================
class TimeStampedModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


# ============================================================
# Patient
# ============================================================
class Patient(TimeStampedModel):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    code = models.CharField(max_length=30, unique=True)
    full_name = models.CharField(max_length=255)

    class Meta:
        ordering = ["full_name"]

    def __str__(self):
        return f"{self.code} - {self.full_name}"


# ============================================================
# Lab request
# ============================================================
class LabRequest(WorkflowWriteGuardMixin, TimeStampedModel):
    WORKFLOW_FIELD = "status"
    TERMINAL_STATES = frozenset(TERMINAL_STATUSES)

    STATUS_CHOICES = [
        (LabStatus.REQUESTED, "Requested"),
        (LabStatus.COMPLETED, "Completed"),
        (LabStatus.CANCELED, "Canceled"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    code = models.CharField(max_length=30, unique=True)

    patient = models.ForeignKey(
        Patient,
        on_delete=models.PROTECT,
        related_name="labs",
    )

    type = models.CharField(max_length=255)
    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=LabStatus.REQUESTED,
        db_index=True,
    )

    result = models.TextField(null=True, blank=True)
    notes = models.JSONField(default=list, blank=True)

    requested_on = models.DateTimeField(default=timezone.now)
    completed_on = models.DateTimeField(null=True, blank=True)
    canceled_on = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-requested_on"]
        permissions = [
            ("complete_lab", "Can complete lab requests"),
            ("cancel_lab", "Can cancel lab requests"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(status=LabStatus.REQUESTED, completed_on__isnull=True, canceled_on__isnull=True)
                    | Q(
                        status=LabStatus.COMPLETED,
                        completed_on__isnull=False,
                        canceled_on__isnull=True,
                        result__isnull=False,
                    )
                    | Q(status=LabStatus.CANCELED, completed_on__isnull=True, canceled_on__isnull=False)
                ),
                name="lab_request_status_timestamps",
            ),
        ]

    def __str__(self):
        return f"{self.code} ({self.status})"
