"""Milestone Enforcement — plan validation, proof upload, and review sequencing.

Tests cover:
    - plan validation: titles, positive targets, total
    - upload only for current_milestone + 1; moves project under review
    - duplicate upload while awaiting review is rejected
    - accept advances current_milestone; reject clears proof
    - accepting the last milestone completes the project
    - review without pending proof is rejected
    - a project reviewed while pending cannot complete before verification
    - a plan is locked once any milestone has proof or is completed
"""

from datetime import datetime, timezone

import pytest

from app.core.domain_types import ReviewDecision
from app.core.enforce_milestones import (
    PlannedMilestone,
    apply_proof_upload,
    apply_review,
    check_plan_replaceable,
    get_milestone,
    validate_milestone_plan,
)
from app.core.errors import (
    InvalidStateTransitionError,
    MilestonePlanLockedError,
    NotFoundError,
    OutOfOrderMilestoneError,
    ProofAlreadySubmittedError,
    ProofNotSubmittedError,
    ValidationError,
)


NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _upload(project, number, ref="ipfs://proof"):
    return apply_proof_upload(project, number, ref, "receipts", NOW)


# ─── plan validation ─────────────────────────────────────────────

def test_plan_total_is_sum_of_targets():
    plan = [
        PlannedMilestone("Foundation", "", 30_000),
        PlannedMilestone("Walls", "", 25_000),
    ]
    assert validate_milestone_plan(plan) == 55_000


def test_empty_plan_totals_zero():
    assert validate_milestone_plan([]) == 0


def test_plan_rejects_blank_title():
    plan = [PlannedMilestone("Ok", "", 10), PlannedMilestone("  ", "", 10)]
    with pytest.raises(ValidationError) as exc:
        validate_milestone_plan(plan)
    assert exc.value.field == "milestones.1.title"


@pytest.mark.parametrize("target", [0, -100])
def test_plan_rejects_non_positive_target(target):
    with pytest.raises(ValidationError) as exc:
        validate_milestone_plan([PlannedMilestone("Roof", "", target)])
    assert exc.value.field == "milestones.0.target_amount"


# ─── proof upload ─────────────────────────────────────────────────

def test_upload_next_milestone_moves_project_under_review(make_project):
    project = make_project()
    milestone = _upload(project, 1)

    assert milestone.proof_uploaded is True
    assert milestone.proof_url == "ipfs://proof"
    assert milestone.proof_description == "receipts"
    assert milestone.proof_submitted_at == NOW
    assert project.status == "under_review"
    assert project.status_before_review == "verified"


def test_upload_out_of_order_is_rejected(make_project, complete_milestones):
    project = make_project()
    complete_milestones(project, 1)

    with pytest.raises(OutOfOrderMilestoneError) as exc:
        _upload(project, 3)
    assert exc.value.expected == 2
    assert exc.value.requested == 3
    assert project.status == "verified"
    assert get_milestone(project, 3).proof_uploaded is False


def test_upload_of_already_completed_milestone_is_out_of_order(
    make_project, complete_milestones,
):
    project = make_project()
    complete_milestones(project, 2)
    with pytest.raises(OutOfOrderMilestoneError):
        _upload(project, 1)


def test_duplicate_upload_awaiting_review_is_rejected(make_project):
    project = make_project()
    _upload(project, 1)
    with pytest.raises(ProofAlreadySubmittedError):
        _upload(project, 1, "ipfs://second")
    assert get_milestone(project, 1).proof_url == "ipfs://proof"


def test_upload_requires_file_reference(make_project):
    project = make_project()
    with pytest.raises(ValidationError) as exc:
        _upload(project, 1, "   ")
    assert exc.value.field == "file_reference"
    assert project.status == "verified"


def test_upload_beyond_plan_is_not_found(make_project, complete_milestones):
    project = make_project(targets=(1_000,), status="verified")
    complete_milestones(project, 1)
    with pytest.raises(NotFoundError):
        _upload(project, 2)


def test_upload_on_completed_project_is_rejected(make_project):
    project = make_project(status="completed")
    with pytest.raises(InvalidStateTransitionError):
        _upload(project, 1)


def test_upload_while_pending_returns_to_pending_on_reject(make_project):
    project = make_project(status="pending")
    _upload(project, 1)
    assert project.status_before_review == "pending"

    apply_review(project, 1, ReviewDecision.REJECT, NOW)
    assert project.status == "pending"


def test_accepting_only_milestone_while_pending_stays_pending(make_project):
    project = make_project(targets=(50_000,), status="pending")
    _upload(project, 1)

    status = apply_review(project, 1, ReviewDecision.ACCEPT, NOW)

    assert status.value == "pending"
    assert project.status == "pending"
    assert project.current_milestone == 1
    assert get_milestone(project, 1).completed is True
    assert project.can_withdraw is False


# ─── review ───────────────────────────────────────────────────────

def test_accept_advances_current_milestone(make_project):
    project = make_project(current_amount=40_000)
    _upload(project, 1)

    status = apply_review(project, 1, ReviewDecision.ACCEPT, NOW, note="looks good")

    milestone = get_milestone(project, 1)
    assert status.value == "verified"
    assert project.status == "verified"
    assert project.status_before_review is None
    assert project.current_milestone == 1
    assert milestone.completed is True
    assert milestone.completed_date == NOW
    assert milestone.review_note == "looks good"
    assert project.can_withdraw is True


def test_reject_clears_proof_and_keeps_position(make_project):
    project = make_project()
    _upload(project, 1)

    apply_review(project, 1, ReviewDecision.REJECT, NOW, note="blurry")

    milestone = get_milestone(project, 1)
    assert project.current_milestone == 0
    assert project.status == "verified"
    assert milestone.completed is False
    assert milestone.proof_uploaded is False
    assert milestone.proof_url is None
    assert milestone.proof_submitted_at is None
    assert milestone.review_note == "blurry"

    _upload(project, 1, "ipfs://retry")
    assert get_milestone(project, 1).proof_url == "ipfs://retry"


def test_accept_skipping_a_milestone_is_out_of_order(make_project, complete_milestones):
    project = make_project()
    complete_milestones(project, 1)
    _upload(project, 2)
    with pytest.raises(OutOfOrderMilestoneError):
        apply_review(project, 3, ReviewDecision.ACCEPT, NOW)
    assert project.current_milestone == 1


def test_review_without_pending_proof_is_rejected(make_project):
    project = make_project()
    with pytest.raises(ProofNotSubmittedError):
        apply_review(project, 1, ReviewDecision.ACCEPT, NOW)


def test_accepting_last_milestone_completes_project(make_project, complete_milestones):
    project = make_project(current_amount=100_000)
    complete_milestones(project, 3)
    _upload(project, 4)

    status = apply_review(project, 4, ReviewDecision.ACCEPT, NOW)

    assert status.value == "completed"
    assert project.status == "completed"
    assert project.current_milestone == 4
    assert project.can_withdraw is False


def test_completion_is_monotone(make_project):
    project = make_project()
    for number in range(1, 5):
        _upload(project, number)
        apply_review(project, number, ReviewDecision.ACCEPT, NOW)
        completed = [m.completed for m in project.milestones]
        assert completed == [True] * number + [False] * (4 - number)


# ─── plan replacement ────────────────────────────────────────────

def test_untouched_plan_is_replaceable(make_project):
    check_plan_replaceable(make_project(status="pending"))


def test_plan_with_completed_milestone_is_locked(make_project, complete_milestones):
    project = make_project(status="pending")
    complete_milestones(project, 1)
    with pytest.raises(MilestonePlanLockedError) as exc:
        check_plan_replaceable(project)
    assert exc.value.current_milestone == 1


def test_plan_with_proof_awaiting_review_is_locked(make_project):
    project = make_project(status="pending")
    _upload(project, 1)
    with pytest.raises(MilestonePlanLockedError):
        check_plan_replaceable(project)


def test_plan_with_rejected_proof_is_replaceable_again(make_project):
    project = make_project(status="pending")
    _upload(project, 1)
    apply_review(project, 1, ReviewDecision.REJECT, NOW)
    check_plan_replaceable(project)
