# lab_requests/repositories.py
"""
Django ORM implementation of the lab repository port.

This is the only place that writes LabRequest.status. Everything else
must go through lab_requests.services.lab_workflow.
"""

from __future__ import annotations

import logging

from django.core.exceptions import PermissionDenied
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError, transaction

from lab_requests.models import LabRequest
from lab_requests.workflows.entity import Lab, has_text
from lab_requests.workflows.exceptions import InvalidStateError, NotFoundError, PersistenceError
from lab_requests.workflows.ports import LabRepository

logger = logging.getLogger(__name__)


IMMUTABLE_FIELDS = ("code", "patient", "type", "requested_on")


def to_entity(row: LabRequest) -> Lab:
    return Lab(
        id=str(row.pk),
        code=row.code,
        patient=str(row.patient_id),
        type=row.type,
        status=row.status,
        result=row.result,
        notes=row.notes or [],
        requested_on=row.requested_on,
        completed_on=row.completed_on,
        canceled_on=row.canceled_on,
    )


def _stored_values(row: LabRequest) -> dict:
    return {
        "code": row.code,
        "patient": str(row.patient_id),
        "type": row.type,
        "requested_on": row.requested_on,
    }


def _check_history(row: LabRequest, lab: Lab) -> None:
    """
    Refuse writes that would rewrite what the record already holds:
    immutable fields, earlier notes, or a result that was already set.
    """
    stored = _stored_values(row)
    changed = [name for name in IMMUTABLE_FIELDS if stored[name] != getattr(lab, name)]
    if changed:
        raise PersistenceError(
            f"Lab {lab.id} immutable fields cannot change: {', '.join(changed)}",
            code="IMMUTABLE_FIELD",
            detail={"fields": changed},
        )

    stored_notes = list(row.notes or [])
    if list(lab.notes[: len(stored_notes)]) != stored_notes:
        raise PersistenceError(
            f"Lab {lab.id} notes can only be appended to.",
            code="NOTES_HISTORY_CONFLICT",
        )

    if has_text(row.result) and not has_text(lab.result):
        raise PersistenceError(
            f"Lab {lab.id} result cannot be cleared.",
            code="RESULT_CLEARED",
        )


class DjangoLabRepository(LabRepository):
    def find(self, lab_id: str) -> Lab:
        try:
            row = LabRequest.objects.get(pk=lab_id)
        except (LabRequest.DoesNotExist, ValueError, DjangoValidationError):
            raise NotFoundError(f"Lab {lab_id} does not exist.", detail={"id": str(lab_id)})
        return to_entity(row)

    def save_or_update(self, lab: Lab) -> Lab:
        try:
            with transaction.atomic():
                row = LabRequest.objects.select_for_update().filter(pk=lab.id).first()

                if row is None:
                    row = LabRequest(
                        id=lab.id,
                        code=lab.code,
                        patient_id=lab.patient,
                        type=lab.type,
                        requested_on=lab.requested_on,
                    )
                else:
                    _check_history(row, lab)

                row.status = lab.status
                row.result = lab.result
                row.notes = list(lab.notes)
                row.completed_on = lab.completed_on
                row.canceled_on = lab.canceled_on
                row.save(_workflow_bypass=True)
        except PermissionDenied as exc:
            raise InvalidStateError(str(exc), detail={"id": lab.id})
        except (DjangoValidationError, ValueError) as exc:
            logger.warning("Malformed identifiers on lab %s (patient %s)", lab.id, lab.patient)
            raise PersistenceError(
                f"Lab {lab.id} could not be saved.",
                code="INVALID_LAB_ID",
                detail={"id": str(lab.id), "patient": str(lab.patient)},
            ) from exc
        except DatabaseError as exc:
            logger.exception("Database error while saving lab %s", lab.id)
            raise PersistenceError(f"Lab {lab.id} could not be saved.") from exc

        return to_entity(row)
