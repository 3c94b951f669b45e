# lab_requests/workflows/__init__.py
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Set

from .entity import LabAction, LabStatus, Permission


# ===============================================================
# Canonical lab request workflow
# ===============================================================

LAB_STATUSES: Set[str] = {
    LabStatus.REQUESTED,
    LabStatus.COMPLETED,
    LabStatus.CANCELED,
}

LAB_ACTIONS: List[str] = [
    LabAction.UPDATE,
    LabAction.COMPLETE,
    LabAction.CANCEL,
]

# action -> status reached; update keeps the Lab where it is
LAB_TRANSITIONS: Dict[str, Dict[str, str]] = {
    LabStatus.REQUESTED: {
        LabAction.UPDATE: LabStatus.REQUESTED,
        LabAction.COMPLETE: LabStatus.COMPLETED,
        LabAction.CANCEL: LabStatus.CANCELED,
    },
    LabStatus.COMPLETED: {},
    LabStatus.CANCELED: {},
}

TERMINAL_STATUSES: Set[str] = {
    status for status, actions in LAB_TRANSITIONS.items() if not actions
}

ACTION_PERMISSIONS: Dict[str, str] = {
    LabAction.UPDATE: Permission.VIEW_LAB,
    LabAction.COMPLETE: Permission.COMPLETE_LAB,
    LabAction.CANCEL: Permission.CANCEL_LAB,
}


def normalize_status(value: Optional[str]) -> str:
    return str(value or "").strip().lower()


def normalize_action(value: Optional[str]) -> str:
    return str(value or "").strip().lower()


def is_terminal(status: str) -> bool:
    return normalize_status(status) in TERMINAL_STATUSES


def allowed_actions(status: str) -> List[str]:
    """
    State-based legality only, independent of permissions.
    Ordered the way the actions are presented: update, complete, cancel.
    """
    legal = LAB_TRANSITIONS.get(normalize_status(status), {})
    return [a for a in LAB_ACTIONS if a in legal]


def target_status(status: str, action: str) -> Optional[str]:
    return LAB_TRANSITIONS.get(normalize_status(status), {}).get(normalize_action(action))


def required_permission(action: str) -> str:
    act = normalize_action(action)
    if act not in ACTION_PERMISSIONS:
        raise ValueError(f"Unknown lab action: {action}")
    return ACTION_PERMISSIONS[act]


def offerable_actions(status: str, permissions: Iterable[str]) -> List[str]:
    """
    Which actions a caller should present for a Lab in `status` to a
    principal holding `permissions`.

    This is an affordance filter. It never replaces the validator:
    state rules are enforced again when the action is submitted.
    """
    granted = set(permissions or ())
    if Permission.VIEW_LAB not in granted:
        return []
    return [a for a in allowed_actions(status) if ACTION_PERMISSIONS[a] in granted]


def workflow_definition() -> Dict[str, Any]:
    """
    Stable JSON-serializable definition for UI and API introspection.
    """
    return {
        "kind": "lab",
        "statuses": sorted(LAB_STATUSES),
        "actions": list(LAB_ACTIONS),
        "transitions": {
            status: dict(sorted(actions.items()))
            for status, actions in sorted(LAB_TRANSITIONS.items())
        },
        "terminal_states": sorted(TERMINAL_STATUSES),
        "permissions": dict(ACTION_PERMISSIONS),
    }


__all__ = [
    "LAB_STATUSES",
    "LAB_ACTIONS",
    "LAB_TRANSITIONS",
    "TERMINAL_STATUSES",
    "ACTION_PERMISSIONS",
    "normalize_status",
    "normalize_action",
    "is_terminal",
    "allowed_actions",
    "target_status",
    "required_permission",
    "offerable_actions",
    "workflow_definition",
]
