"""Error Hierarchy — codes, statuses, and the response envelope."""

import pytest

from app.core.errors import (
    ConcurrencyConflictError,
    DatabaseError,
    ErrorCategory,
    ErrorContext,
    FundingGoalExceededError,
    FundraisingError,
    InvalidStateTransitionError,
    MilestonePlanLockedError,
    NothingToWithdrawError,
    NotFoundError,
    OutOfOrderMilestoneError,
    ProjectNotAcceptingFundsError,
    ProofAlreadySubmittedError,
    ProofNotSubmittedError,
    ValidationError,
)


@pytest.mark.parametrize(
    "error, code, status",
    [
        (ValidationError("bad", "amount"), "VALIDATION_ERROR", 400),
        (NotFoundError("Project", "abc"), "RESOURCE_NOT_FOUND", 404),
        (OutOfOrderMilestoneError(2, 3), "OUT_OF_ORDER_MILESTONE", 409),
        (ProjectNotAcceptingFundsError("pending"), "PROJECT_NOT_ACCEPTING_FUNDS", 409),
        (FundingGoalExceededError(10), "FUNDING_GOAL_EXCEEDED", 409),
        (InvalidStateTransitionError("completed", "verified"), "INVALID_STATE_TRANSITION", 409),
        (ProofNotSubmittedError(1), "PROOF_NOT_SUBMITTED", 409),
        (ProofAlreadySubmittedError(1), "PROOF_ALREADY_SUBMITTED", 409),
        (MilestonePlanLockedError(1), "MILESTONE_PLAN_LOCKED", 409),
        (NothingToWithdrawError(), "NOTHING_TO_WITHDRAW", 409),
        (ConcurrencyConflictError("busy"), "CONCURRENCY_CONFLICT", 409),
        (DatabaseError("timeout", "commit"), "DATABASE_ERROR", 503),
    ],
)
def test_codes_and_statuses(error, code, status):
    assert isinstance(error, FundraisingError)
    assert error.code == code
    assert error.http_status == status


def test_envelope_shape():
    ctx = ErrorContext(project_id="p-1", wallet="0xabc")
    body = OutOfOrderMilestoneError(2, 4, ctx).to_response()["error"]

    assert body["code"] == "OUT_OF_ORDER_MILESTONE"
    assert body["category"] == ErrorCategory.BUSINESS_RULE.value
    assert body["context"] == {
        "project_id": "p-1",
        "milestone_number": 4,
        "wallet": "0xabc",
        "field": None,
    }
    assert "next milestone is 2" in body["message"]
    assert body["timestamp"]


def test_validation_error_records_field_in_context():
    error = ValidationError("amount must be greater than zero", "amount")
    assert error.to_response()["error"]["context"]["field"] == "amount"


def test_debug_info_is_not_exposed():
    error = FundingGoalExceededError(5, ErrorContext(debug_info={"amount": 99}))
    assert "debug_info" not in error.to_response()["error"]["context"]
