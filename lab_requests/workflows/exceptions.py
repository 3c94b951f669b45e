"""
Lab workflow error taxonomy.

Every error carries:
- type:        error family (invalid_state / not_found / persistence / validation_error)
- code:        stable machine-readable code
- message:     human readable description
- detail:      optional extra payload (dict / list / None)
- http_status: status the API layer renders it with

The workflow core raises these; the DRF exception handler formats them.
"""


class LabWorkflowError(Exception):
    """Base class for all lab workflow errors."""

    type = "error"
    code = "LAB_WORKFLOW_ERROR"
    http_status = 500

    def __init__(self, message, code=None, detail=None, http_status=None):
        self.message = message
        if code is not None:
            self.code = code
        if http_status is not None:
            self.http_status = http_status
        self.detail = detail
        super().__init__(message)


class InvalidStateError(LabWorkflowError):
    """Action attempted on a Lab whose status does not allow it (stale view or caller bug)."""

    type = "invalid_state"
    code = "INVALID_LAB_STATE"
    http_status = 409


class NotFoundError(LabWorkflowError):
    """The repository cannot locate the Lab."""

    type = "not_found"
    code = "LAB_NOT_FOUND"
    http_status = 404


class PersistenceError(LabWorkflowError):
    """The repository failed to confirm a save. Not retried by the core."""

    type = "persistence"
    code = "LAB_SAVE_FAILED"
    http_status = 503


class LabValidationFailed(LabWorkflowError):
    """
    HTTP-facing form of a reported ValidationOutcome.

    The core returns outcomes; only the API caller raises this.
    """

    type = "validation_error"
    code = "VALIDATION_ERROR"
    http_status = 400

    def __init__(self, message, code=None, detail=None, http_status=None, feedback=None):
        super().__init__(message, code=code, detail=detail, http_status=http_status)
        self.feedback = dict(feedback or {})

    @classmethod
    def from_outcome(cls, outcome) -> "LabValidationFailed":
        return cls(
            outcome.message,
            code=outcome.code,
            detail=dict(outcome.feedback),
            feedback=outcome.feedback,
        )
