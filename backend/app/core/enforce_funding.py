"""Funding Enforcement — donation accounting and withdrawal release rules.

Invariants:
    - 0 <= current_amount <= total_amount at all times
    - A donation increases current_amount by exactly its amount
    - Only verified projects accept donations
    - released = min(current_amount, sum of completed milestone targets)
    - can_withdraw iff status == verified and released - withdrawn_amount > 0

Design Decisions:
    - check_* functions raise, apply_* functions mutate; the shell wraps both
      in the per-project lock and one DB transaction
"""

from app.core.domain_types import Amount, ProjectStatus
from app.core.errors import (
    ErrorContext,
    FundingGoalExceededError,
    NothingToWithdrawError,
    ProjectNotAcceptingFundsError,
    ValidationError,
)
from app.core.repository_protocols import ProjectLike


def check_donation_amount(amount: Amount) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValidationError("amount must be a whole number", "amount")
    if amount <= 0:
        raise ValidationError("amount must be greater than zero", "amount")


def check_accepting_funds(project: ProjectLike) -> None:
    if project.status != ProjectStatus.VERIFIED.value:
        raise ProjectNotAcceptingFundsError(project.status)


def remaining_goal(project: ProjectLike) -> Amount:
    return Amount(project.total_amount - project.current_amount)


def check_within_goal(project: ProjectLike, amount: Amount) -> None:
    remaining = remaining_goal(project)
    if amount > remaining:
        raise FundingGoalExceededError(
            remaining, ErrorContext(debug_info={"amount": amount}),
        )


def apply_donation(project: ProjectLike, amount: Amount) -> Amount:
    """Validate and add `amount` to the project. Returns the new current_amount."""
    check_donation_amount(amount)
    check_accepting_funds(project)
    check_within_goal(project, amount)
    project.current_amount += amount
    refresh_can_withdraw(project)
    return project.current_amount


def released_amount(project: ProjectLike) -> Amount:
    """Funds unlocked by completed milestones and actually raised."""
    unlocked = sum(m.target_amount for m in project.milestones if m.completed)
    return Amount(min(project.current_amount, unlocked))


def available_to_withdraw(project: ProjectLike) -> Amount:
    return Amount(max(0, released_amount(project) - project.withdrawn_amount))


def compute_can_withdraw(project: ProjectLike) -> bool:
    if project.status != ProjectStatus.VERIFIED.value:
        return False
    return available_to_withdraw(project) > 0


def refresh_can_withdraw(project: ProjectLike) -> bool:
    project.can_withdraw = compute_can_withdraw(project)
    return project.can_withdraw


def apply_withdrawal(project: ProjectLike) -> Amount:
    """Release every available unit to the fundraiser. Returns the amount."""
    if not compute_can_withdraw(project):
        raise NothingToWithdrawError()
    amount = available_to_withdraw(project)
    project.withdrawn_amount += amount
    refresh_can_withdraw(project)
    return amount
