# lab_requests/workflows/validators.py

"""
Admissibility checks for lab submissions.

Pure functions: no I/O, no mutation. Content problems are *reported*
through a ValidationOutcome; acting on a terminal Lab or asking for an
action the workflow does not know is raised as InvalidStateError.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from lab_requests.workflows import (
    LAB_ACTIONS,
    LAB_STATUSES,
    allowed_actions,
    normalize_action,
    normalize_status,
)
from lab_requests.workflows.entity import Lab, LabAction, LabSubmission, effective_result, has_text
from lab_requests.workflows.exceptions import InvalidStateError


RESULT_REQUIRED_MESSAGE = "Unable to complete lab request."
RESULT_REQUIRED_FEEDBACK = "A result is required to complete a lab request."


@dataclass(frozen=True)
class ValidationOutcome:
    is_valid: bool
    code: str = ""
    message: str = ""
    feedback: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def ok(cls) -> "ValidationOutcome":
        return cls(is_valid=True)

    @classmethod
    def failure(cls, code: str, message: str, **feedback: str) -> "ValidationOutcome":
        return cls(is_valid=False, code=code, message=message, feedback=dict(feedback))

    def __bool__(self) -> bool:
        return self.is_valid


def validate_lab_complete(lab: Lab, pending_result: Optional[str] = None) -> ValidationOutcome:
    if not has_text(effective_result(lab, pending_result)):
        return ValidationOutcome.failure(
            "RESULT_REQUIRED",
            RESULT_REQUIRED_MESSAGE,
            result=RESULT_REQUIRED_FEEDBACK,
        )
    return ValidationOutcome.ok()


def ensure_action_allowed(lab: Lab, action: str) -> str:
    act = normalize_action(action)
    if act not in LAB_ACTIONS:
        raise InvalidStateError(f"Unknown lab action: {action}", code="UNKNOWN_LAB_ACTION")

    if normalize_status(lab.status) not in LAB_STATUSES:
        raise InvalidStateError(
            f"Lab {lab.id} has unknown status '{lab.status}'.",
            code="UNKNOWN_LAB_STATUS",
            detail={"status": lab.status, "action": act},
        )

    if act not in allowed_actions(lab.status):
        raise InvalidStateError(
            f"Lab {lab.id} is in terminal state '{lab.status}' and cannot be modified.",
            detail={"status": lab.status, "action": act},
        )
    return act


def validate(lab: Lab, action: str, pending_result: Optional[str] = None) -> ValidationOutcome:
    """
    Decide whether `action` is admissible on `lab`.

    `pending_result` is the unsaved result submitted together with the
    action; completion is judged against the merged value.
    """
    act = ensure_action_allowed(lab, action)

    if act == LabAction.COMPLETE:
        return validate_lab_complete(lab, pending_result)

    # update and cancel carry no content precondition
    return ValidationOutcome.ok()


def validate_submission(lab: Lab, submission: LabSubmission) -> ValidationOutcome:
    return validate(lab, submission.action, submission.pending_result)
