# lab_requests/workflows/engine.py

from __future__ import annotations

from dataclasses import replace
from typing import Optional

from lab_requests.workflows import target_status
from lab_requests.workflows.entity import Lab, LabStatus, LabSubmission, effective_result, has_text
from lab_requests.workflows.exceptions import LabValidationFailed
from lab_requests.workflows.ports import Clock, SystemClock
from lab_requests.workflows.validators import ensure_action_allowed, validate_lab_complete


class TransitionEngine:
    """
    Produces the next Lab for a submission.

    Even when the validator was skipped, the engine refuses to touch a
    terminal Lab and refuses to complete one without a result. Each call
    reads the clock at most once, and never before those checks pass.
    """

    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or SystemClock()

    def apply(self, lab: Lab, submission: LabSubmission) -> Lab:
        action = ensure_action_allowed(lab, submission.action)
        next_status = target_status(lab.status, action)
        result = effective_result(lab, submission.pending_result)

        if next_status == LabStatus.COMPLETED and not has_text(result):
            raise LabValidationFailed.from_outcome(
                validate_lab_complete(lab, submission.pending_result)
            )

        changes = {
            "result": result,
            "notes": self.append_note(lab.notes, submission.pending_note),
        }

        if next_status == LabStatus.COMPLETED:
            changes.update(status=LabStatus.COMPLETED, completed_on=self.clock.now())
        elif next_status == LabStatus.CANCELED:
            changes.update(status=LabStatus.CANCELED, canceled_on=self.clock.now())

        return replace(lab, **changes)

    @staticmethod
    def append_note(notes, note: Optional[str]):
        notes = tuple(notes or ())
        if not has_text(note):
            return notes
        return notes + (note,)
