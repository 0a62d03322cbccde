"""Error Hierarchy — typed, categorized exceptions for all fundraising failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400/404/409) are scoped to one operation; infrastructure errors are 5xx
    - to_response() produces the REST envelope consumed by api/error_handlers.py
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with FundraisingError base: one FastAPI handler catches all
    - ErrorContext as dataclass: carries project/milestone/wallet identifiers for logs
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    INTERNAL = "internal"
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Identifiers attached to an error for the response envelope and logs."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    project_id: str | None = None
    milestone_number: int | None = None
    wallet: str | None = None
    field: str | None = None
    debug_info: dict[str, Any] | None = None


class FundraisingError(Exception):
    """Base exception for all fundraising errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "project_id": self.context.project_id,
                    "milestone_number": self.context.milestone_number,
                    "wallet": self.context.wallet,
                    "field": self.context.field,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class ValidationError(FundraisingError):
    """Malformed input; the caller can correct the named field and retry."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.field = field
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, ctx, 400,
        )
        self.field = field


class NotFoundError(FundraisingError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class OutOfOrderMilestoneError(FundraisingError):
    """Milestone addressed before every preceding milestone completed."""
    def __init__(
        self, expected: int, requested: int, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.milestone_number = requested
        super().__init__(
            f"Milestone {requested} is out of order; next milestone is {expected}",
            "OUT_OF_ORDER_MILESTONE", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, ctx, 409,
        )
        self.expected = expected
        self.requested = requested


class ProjectNotAcceptingFundsError(FundraisingError):
    """Donation attempted against a project that is not verified."""
    def __init__(self, status: str, context: ErrorContext | None = None):
        super().__init__(
            f"Project is not accepting donations (status: {status})",
            "PROJECT_NOT_ACCEPTING_FUNDS", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 409,
        )
        self.status = status


class FundingGoalExceededError(FundraisingError):
    """Donation would raise the project above its total goal."""
    def __init__(self, remaining: int, context: ErrorContext | None = None):
        super().__init__(
            f"Donation exceeds the remaining goal of {remaining}",
            "FUNDING_GOAL_EXCEEDED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 409,
        )
        self.remaining = remaining


class InvalidStateTransitionError(FundraisingError):
    """Project status change not allowed from its current status."""
    def __init__(
        self, current: str, target: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Project cannot move from '{current}' to '{target}'",
            "INVALID_STATE_TRANSITION", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 409,
        )
        self.current = current
        self.target = target


class ProofNotSubmittedError(FundraisingError):
    """Review requested for a milestone with no proof awaiting review."""
    def __init__(self, milestone_number: int, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.milestone_number = milestone_number
        super().__init__(
            f"Milestone {milestone_number} has no proof awaiting review",
            "PROOF_NOT_SUBMITTED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, ctx, 409,
        )


class ProofAlreadySubmittedError(FundraisingError):
    """Proof uploaded again while the previous one is still under review."""
    def __init__(self, milestone_number: int, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.milestone_number = milestone_number
        super().__init__(
            f"Milestone {milestone_number} already has proof under review",
            "PROOF_ALREADY_SUBMITTED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, ctx, 409,
        )


class MilestonePlanLockedError(FundraisingError):
    """Plan replacement attempted after work on the current plan began."""
    def __init__(self, current_milestone: int, context: ErrorContext | None = None):
        super().__init__(
            "Milestone plan can no longer be replaced: "
            f"{current_milestone} milestone(s) completed or proof submitted",
            "MILESTONE_PLAN_LOCKED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 409,
        )
        self.current_milestone = current_milestone


class NothingToWithdrawError(FundraisingError):
    """Withdrawal requested while no released funds are available."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "No released funds are available for withdrawal",
            "NOTHING_TO_WITHDRAW", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 409,
        )


class ConcurrencyConflictError(FundraisingError):
    """Concurrent writer on the same project detected a stale read. Retry."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONCURRENCY_CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(FundraisingError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
