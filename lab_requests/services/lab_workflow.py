# lab_requests/services/lab_workflow.py
"""
Authoritative lab request workflow service.

All lab status changes and result/note edits MUST go through this
service. Never write status directly in views, serializers or admin.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from lab_requests.workflows import offerable_actions
from lab_requests.workflows.engine import TransitionEngine
from lab_requests.workflows.entity import Lab, LabAction, LabSubmission, Permission
from lab_requests.workflows.exceptions import InvalidStateError, PersistenceError
from lab_requests.workflows.ports import AuthorizationGate, LabRepository
from lab_requests.workflows.validators import ValidationOutcome, validate_submission

logger = logging.getLogger(__name__)


ALL_PERMISSIONS = (Permission.VIEW_LAB, Permission.COMPLETE_LAB, Permission.CANCEL_LAB)


@dataclass(frozen=True)
class SubmissionResult:
    """
    Outcome of one submission.

    `lab` is the persisted Lab when the submission was saved, otherwise
    the Lab exactly as it was loaded.
    """

    lab: Lab
    outcome: ValidationOutcome
    saved: bool = False

    @property
    def ok(self) -> bool:
        return self.saved and self.outcome.is_valid


class LabWorkflowService:
    def __init__(
        self,
        *,
        repository: LabRepository,
        gate: Optional[AuthorizationGate] = None,
        engine: Optional[TransitionEngine] = None,
    ):
        self.repository = repository
        self.gate = gate
        self.engine = engine or TransitionEngine()

    # -----------------------------------------------------------
    # Read side
    # -----------------------------------------------------------

    def view(self, lab_id: str) -> Lab:
        return self.repository.find(lab_id)

    def granted_permissions(self, principal) -> List[str]:
        if self.gate is None:
            return []
        return [p for p in ALL_PERMISSIONS if self.gate.has_permission(principal, p)]

    def offerable_actions_for(self, lab: Lab, principal) -> List[str]:
        return offerable_actions(lab.status, self.granted_permissions(principal))

    # -----------------------------------------------------------
    # Write side
    # -----------------------------------------------------------

    def submit(self, lab_id: str, submission: LabSubmission) -> SubmissionResult:
        """
        find -> validate -> apply -> save_or_update, in that order.

        Returns a SubmissionResult for content validation failures
        (nothing is persisted). Raises InvalidStateError, NotFoundError
        and PersistenceError.
        """
        lab = self.repository.find(lab_id)
        return self.submit_lab(lab, submission)

    def submit_lab(self, lab: Lab, submission: LabSubmission) -> SubmissionResult:
        try:
            outcome = validate_submission(lab, submission)
        except InvalidStateError:
            logger.warning(
                "Rejected %s on lab %s in state %s", submission.action, lab.id, lab.status
            )
            raise

        if not outcome.is_valid:
            logger.warning(
                "Lab %s %s blocked: %s", lab.id, submission.action, outcome.code
            )
            return SubmissionResult(lab=lab, outcome=outcome, saved=False)

        updated = self.engine.apply(lab, submission)

        try:
            saved = self.repository.save_or_update(updated)
        except PersistenceError:
            logger.exception("Saving lab %s after %s failed", lab.id, submission.action)
            raise

        logger.info(
            "Lab %s %s: %s -> %s", saved.id, submission.action, lab.status, saved.status
        )
        return SubmissionResult(lab=saved, outcome=outcome, saved=True)

    def update(self, lab_id: str, *, result: Optional[str] = None, note: Optional[str] = None) -> SubmissionResult:
        return self.submit(lab_id, LabSubmission(LabAction.UPDATE, result, note))

    def complete(self, lab_id: str, *, result: Optional[str] = None, note: Optional[str] = None) -> SubmissionResult:
        return self.submit(lab_id, LabSubmission(LabAction.COMPLETE, result, note))

    def cancel(self, lab_id: str, *, result: Optional[str] = None, note: Optional[str] = None) -> SubmissionResult:
        return self.submit(lab_id, LabSubmission(LabAction.CANCEL, result, note))
