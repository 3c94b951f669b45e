# lab_requests/guards.py

from django.core.exceptions import PermissionDenied
from django.db import models


class WorkflowWriteGuardMixin(models.Model):
    """
    Prevent modification of workflow-controlled records outside the workflow.

    - Direct .save() changes to WORKFLOW_FIELD are blocked unless bypassed.
    - A row whose stored status is terminal can never be saved again,
      bypass or not.

    Escape hatch for the status field only:
      - pass _workflow_bypass=True to save(), OR
      - set instance._workflow_bypass = True
    The lab repository is the only intended caller.
    """

    WORKFLOW_FIELD = "status"
    WORKFLOW_BYPASS_KWARG = "_workflow_bypass"
    TERMINAL_STATES = frozenset()

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        bypass = bool(
            kwargs.pop(self.WORKFLOW_BYPASS_KWARG, False)
            or getattr(self, "_workflow_bypass", False)
        )

        if self.pk is not None and self.WORKFLOW_FIELD and not self._state.adding:
            old = (
                self.__class__.objects.filter(pk=self.pk)
                .values_list(self.WORKFLOW_FIELD, flat=True)
                .first()
            )
            new = getattr(self, self.WORKFLOW_FIELD, None)

            if old in self.TERMINAL_STATES:
                raise PermissionDenied(
                    f"{self.__class__.__name__} is in terminal state '{old}' and cannot be modified."
                )

            if not bypass and old is not None and old != new:
                raise PermissionDenied(
                    f"Direct modification of '{self.WORKFLOW_FIELD}' is forbidden. "
                    "Use workflow transition APIs."
                )

        return super().save(*args, **kwargs)
