"""Funding Enforcement — donation accounting and withdrawal release rules.

Tests cover:
    - apply_donation increments current_amount by exactly the amount
    - non-positive / non-integer amounts raise ValidationError
    - only verified projects accept funds
    - donations beyond the goal raise FundingGoalExceededError
    - can_withdraw false whenever status != verified
    - withdrawal releases min(raised, completed targets) minus prior withdrawals
"""

import pytest

from app.core.enforce_funding import (
    apply_donation,
    apply_withdrawal,
    available_to_withdraw,
    check_donation_amount,
    compute_can_withdraw,
    released_amount,
)
from app.core.errors import (
    FundingGoalExceededError,
    NothingToWithdrawError,
    ProjectNotAcceptingFundsError,
    ValidationError,
)


# ─── donations ────────────────────────────────────────────────────

def test_donation_increments_current_amount(make_project):
    project = make_project()
    assert apply_donation(project, 15_000) == 15_000
    assert project.current_amount == 15_000


def test_sum_of_donations_is_order_independent(make_project):
    amounts = [500, 1_000, 2_500, 7_000, 300]
    forward, backward = make_project(), make_project()
    for amount in amounts:
        apply_donation(forward, amount)
    for amount in reversed(amounts):
        apply_donation(backward, amount)
    assert forward.current_amount == backward.current_amount == sum(amounts)


@pytest.mark.parametrize("amount", [0, -5, -1_000])
def test_non_positive_amount_is_validation_error(make_project, amount):
    project = make_project()
    with pytest.raises(ValidationError) as exc:
        apply_donation(project, amount)
    assert exc.value.field == "amount"
    assert project.current_amount == 0


@pytest.mark.parametrize("amount", [True, 10.5, "100"])
def test_non_integer_amount_is_validation_error(amount):
    with pytest.raises(ValidationError):
        check_donation_amount(amount)


@pytest.mark.parametrize("status", ["pending", "under_review", "completed"])
def test_only_verified_projects_accept_funds(make_project, status):
    project = make_project(status=status)
    with pytest.raises(ProjectNotAcceptingFundsError) as exc:
        apply_donation(project, 100)
    assert exc.value.status == status
    assert exc.value.http_status == 409
    assert project.current_amount == 0


def test_donation_beyond_goal_is_rejected(make_project):
    project = make_project(targets=(1_000,))
    apply_donation(project, 800)
    with pytest.raises(FundingGoalExceededError) as exc:
        apply_donation(project, 201)
    assert exc.value.remaining == 200
    assert project.current_amount == 800


def test_donation_can_fill_goal_exactly(make_project):
    project = make_project(targets=(1_000,))
    apply_donation(project, 1_000)
    assert project.current_amount == project.total_amount


# ─── withdrawals ──────────────────────────────────────────────────

def test_nothing_released_before_any_milestone_completes(make_project):
    project = make_project(current_amount=45_000)
    assert released_amount(project) == 0
    assert compute_can_withdraw(project) is False


def test_release_is_capped_by_completed_targets(make_project, complete_milestones):
    project = make_project(current_amount=45_000)
    complete_milestones(project, 1)
    assert released_amount(project) == 30_000
    complete_milestones(project, 2)
    assert released_amount(project) == 45_000


def test_release_is_capped_by_amount_raised(make_project, complete_milestones):
    project = make_project(current_amount=10_000)
    complete_milestones(project, 2)
    assert released_amount(project) == 10_000


@pytest.mark.parametrize("status", ["pending", "under_review", "completed"])
def test_can_withdraw_false_unless_verified(make_project, complete_milestones, status):
    project = make_project(status=status, current_amount=45_000)
    complete_milestones(project, 2)
    assert available_to_withdraw(project) > 0
    assert compute_can_withdraw(project) is False


def test_withdrawal_releases_available_funds_once(make_project, complete_milestones):
    project = make_project(current_amount=45_000)
    complete_milestones(project, 1)
    assert compute_can_withdraw(project) is True

    assert apply_withdrawal(project) == 30_000
    assert project.withdrawn_amount == 30_000
    assert project.can_withdraw is False

    with pytest.raises(NothingToWithdrawError):
        apply_withdrawal(project)


def test_further_donations_unlock_more_after_withdrawal(make_project, complete_milestones):
    project = make_project(current_amount=20_000)
    complete_milestones(project, 1)
    assert apply_withdrawal(project) == 20_000

    apply_donation(project, 15_000)
    assert project.can_withdraw is True
    assert apply_withdrawal(project) == 10_000
