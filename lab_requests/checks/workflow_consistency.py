# lab_requests/checks/workflow_consistency.py

from django.core.checks import Error, register

from lab_requests.models import LabRequest
from lab_requests.permissions import PERMISSION_CODENAMES
from lab_requests.workflows import ACTION_PERMISSIONS, LAB_STATUSES, LAB_TRANSITIONS, TERMINAL_STATUSES


@register()
def check_lab_workflow(app_configs, **kwargs):
    """
    Django system check: the ORM model, the permission map and the
    workflow table must describe the same lifecycle.
    """
    errors = []

    model_statuses = {value for value, _label in LabRequest.STATUS_CHOICES}
    if model_statuses != LAB_STATUSES:
        errors.append(
            Error(
                "LabRequest.STATUS_CHOICES does not match the lab workflow statuses",
                hint=f"model={sorted(model_statuses)} workflow={sorted(LAB_STATUSES)}",
                id="lab_requests.E001",
            )
        )

    for status, actions in LAB_TRANSITIONS.items():
        for action, target in actions.items():
            if target not in LAB_STATUSES:
                errors.append(
                    Error(
                        f"Action '{action}' from '{status}' leads to unknown status '{target}'",
                        id="lab_requests.E002",
                    )
                )

    if not TERMINAL_STATUSES:
        errors.append(Error("Lab workflow defines no terminal status", id="lab_requests.E003"))

    for action, permission in ACTION_PERMISSIONS.items():
        if permission not in PERMISSION_CODENAMES:
            errors.append(
                Error(
                    f"Permission '{permission}' required by '{action}' has no Django codename",
                    id="lab_requests.E004",
                )
            )

    return errors
