"""
Unified exception handler.

Wired through REST_FRAMEWORK["EXCEPTION_HANDLER"]. Workflow errors are
rendered as:

{
    "type":     "invalid_state" | "not_found" | "persistence" | "validation_error",
    "code":     "RESULT_REQUIRED",
    "message":  "Unable to complete lab request.",
    "detail":   { ... },                                                     // optional
    "feedback": { "result": "A result is required to complete a lab request." }  // validation only
}

`feedback` is always a field -> message mapping, so form clients can put
each message next to its input whether the refusal came from the lab
workflow or from request parsing.
"""

from django.http import JsonResponse
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.views import exception_handler as drf_default_handler

from lab_requests.workflows.exceptions import LabValidationFailed, LabWorkflowError


def field_feedback(detail):
    """Flatten DRF error detail into one message per field."""
    if not isinstance(detail, dict):
        return {}
    feedback = {}
    for field, errors in detail.items():
        if isinstance(errors, (list, tuple)):
            errors = " ".join(str(e) for e in errors)
        feedback[field] = str(errors)
    return feedback


def unified_exception_handler(exc, context):
    """
    Priority:
    1. LabWorkflowError and subclasses -> unified shape
    2. DRF ValidationError (serializer.is_valid) -> unified shape
    3. anything else -> DRF default handling
    """

    if isinstance(exc, LabWorkflowError):
        body = {
            "type": exc.type,
            "code": exc.code,
            "message": exc.message,
        }
        if exc.detail is not None:
            body["detail"] = exc.detail
        if isinstance(exc, LabValidationFailed):
            body["feedback"] = dict(exc.feedback)
        return JsonResponse(body, status=exc.http_status)

    if isinstance(exc, DRFValidationError):
        body = {
            "type": "validation_error",
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "detail": exc.detail,
            "feedback": field_feedback(exc.detail),
        }
        return JsonResponse(body, status=400)

    return drf_default_handler(exc, context)
