# lab_requests/workflows/entity.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple


# ===============================================================
# Status / action / permission vocabularies
# ===============================================================

class LabStatus:
    REQUESTED = "requested"
    COMPLETED = "completed"
    CANCELED = "canceled"


class LabAction:
    UPDATE = "update"
    COMPLETE = "complete"
    CANCEL = "cancel"


class Permission:
    VIEW_LAB = "ViewLab"
    COMPLETE_LAB = "CompleteLab"
    CANCEL_LAB = "CancelLab"


# ===============================================================
# Entity
# ===============================================================

@dataclass(frozen=True)
class Lab:
    """
    A laboratory test request.

    Instances are values: the transition engine returns a new Lab and
    never mutates the one it was given. `notes` is chronological and
    only ever grows at the end.
    """

    id: str
    code: str
    patient: str
    type: str
    requested_on: datetime
    status: str = LabStatus.REQUESTED
    result: Optional[str] = None
    notes: Tuple[str, ...] = field(default_factory=tuple)
    completed_on: Optional[datetime] = None
    canceled_on: Optional[datetime] = None

    def __post_init__(self):
        # Accept any iterable (lists from JSON columns, None from legacy rows)
        object.__setattr__(self, "notes", tuple(self.notes or ()))


@dataclass(frozen=True)
class LabSubmission:
    """
    One "edit then act" submission: the in-progress result/note buffer
    plus the action to perform with it.
    """

    action: str
    pending_result: Optional[str] = None
    pending_note: Optional[str] = None


def has_text(value: Optional[str]) -> bool:
    return bool((value or "").strip())


def effective_result(lab: Lab, pending_result: Optional[str] = None) -> Optional[str]:
    """
    The result a submission would leave on the Lab.

    A blank pending value never clears a stored result.
    """
    if has_text(pending_result):
        return pending_result
    return lab.result
