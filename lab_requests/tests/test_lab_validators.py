from __future__ import annotations

from dataclasses import replace

import pytest

from lab_requests.workflows.entity import LabAction, LabStatus, LabSubmission
from lab_requests.workflows.exceptions import InvalidStateError
from lab_requests.workflows.validators import (
    RESULT_REQUIRED_FEEDBACK,
    RESULT_REQUIRED_MESSAGE,
    validate,
    validate_lab_complete,
    validate_submission,
)


def test_update_is_always_admissible_while_requested(mock_lab):
    assert validate(mock_lab, LabAction.UPDATE).is_valid
    assert validate(replace(mock_lab, result="x"), LabAction.UPDATE).is_valid


def test_cancel_needs_no_result(mock_lab):
    assert mock_lab.result is None
    assert validate(mock_lab, LabAction.CANCEL).is_valid


@pytest.mark.parametrize("result", [None, "", "   ", "\n\t"])
def test_complete_without_result_is_reported_not_raised(mock_lab, result):
    outcome = validate(replace(mock_lab, result=result), LabAction.COMPLETE)

    assert not outcome
    assert outcome.code == "RESULT_REQUIRED"
    assert outcome.message == RESULT_REQUIRED_MESSAGE
    assert outcome.feedback == {"result": RESULT_REQUIRED_FEEDBACK}


def test_complete_with_stored_result(mock_lab):
    assert validate(replace(mock_lab, result="expected result"), LabAction.COMPLETE).is_valid


def test_complete_considers_the_pending_result(mock_lab):
    assert validate(mock_lab, LabAction.COMPLETE, pending_result="expected result").is_valid
    assert validate_submission(
        mock_lab, LabSubmission(LabAction.COMPLETE, pending_result="expected result")
    ).is_valid


def test_blank_pending_result_does_not_hide_stored_result(mock_lab):
    lab = replace(mock_lab, result="stored")
    assert validate_lab_complete(lab, pending_result="  ").is_valid


@pytest.mark.parametrize("status", [LabStatus.COMPLETED, LabStatus.CANCELED])
@pytest.mark.parametrize("action", [LabAction.UPDATE, LabAction.COMPLETE, LabAction.CANCEL])
def test_any_action_on_terminal_lab_is_rejected(mock_lab, status, action):
    lab = replace(mock_lab, status=status, result="expected result")

    with pytest.raises(InvalidStateError) as exc_info:
        validate(lab, action)

    assert exc_info.value.code == "INVALID_LAB_STATE"
    assert exc_info.value.http_status == 409
    assert "terminal" in exc_info.value.message


def test_unknown_action_is_rejected(mock_lab):
    with pytest.raises(InvalidStateError) as exc_info:
        validate(mock_lab, "archive")

    assert exc_info.value.code == "UNKNOWN_LAB_ACTION"


@pytest.mark.parametrize("status", ["pending", "", None])
def test_unknown_status_is_not_reported_as_terminal(mock_lab, status):
    lab = replace(mock_lab, status=status)

    with pytest.raises(InvalidStateError) as exc_info:
        validate(lab, LabAction.UPDATE)

    assert exc_info.value.code == "UNKNOWN_LAB_STATUS"
    assert exc_info.value.http_status == 409
    assert "terminal" not in exc_info.value.message


def test_status_is_matched_case_insensitively(mock_lab):
    lab = replace(mock_lab, status=" Requested ")

    assert validate(lab, LabAction.UPDATE).is_valid


def test_validation_is_pure(mock_lab):
    before = replace(mock_lab)
    validate(mock_lab, LabAction.COMPLETE, pending_result="x")
    assert mock_lab == before
