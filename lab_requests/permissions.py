# lab_requests/permissions.py
from __future__ import annotations

from rest_framework.permissions import BasePermission

from lab_requests.workflows.entity import Permission
from lab_requests.workflows.ports import AuthorizationGate


# ------------------------------------------------------------------
# Workflow permission -> Django permission codename
# ------------------------------------------------------------------
PERMISSION_CODENAMES = {
    Permission.VIEW_LAB: "lab_requests.view_labrequest",
    Permission.COMPLETE_LAB: "lab_requests.complete_lab",
    Permission.CANCEL_LAB: "lab_requests.cancel_lab",
}


class DjangoAuthorizationGate(AuthorizationGate):
    """
    Authorization backed by django.contrib.auth permissions
    (user, group and superuser grants all apply).
    """

    def has_permission(self, principal, permission: str) -> bool:
        if not principal or not getattr(principal, "is_authenticated", False):
            return False

        codename = PERMISSION_CODENAMES.get(permission)
        if not codename:
            return False

        return principal.has_perm(codename)


# ------------------------------------------------------------------
# Permission class
# ------------------------------------------------------------------
class CanViewLab(BasePermission):
    message = "You do not have permission to view lab requests."

    def has_permission(self, request, view):
        return DjangoAuthorizationGate().has_permission(
            getattr(request, "user", None), Permission.VIEW_LAB
        )
