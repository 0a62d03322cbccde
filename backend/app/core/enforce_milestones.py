"""Milestone Enforcement — plan validation, proof upload, and review sequencing.

Invariants:
    - Milestones are addressed strictly in order: only current_milestone + 1
    - Proof can be uploaded once per review cycle; a reject clears it
    - Completion is monotone: an accepted milestone never reverts
    - current_milestone equals the count of completed milestones
    - Sum of planned targets is the project's total_amount

Design Decisions:
    - PlannedMilestone is the plan-policy input; the caller decides the plan
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

from app.core.domain_types import Amount, MilestoneNumber, ProjectStatus, ReviewDecision
from app.core.enforce_funding import refresh_can_withdraw
from app.core.errors import (
    ErrorContext,
    InvalidStateTransitionError,
    MilestonePlanLockedError,
    NotFoundError,
    OutOfOrderMilestoneError,
    ProofAlreadySubmittedError,
    ProofNotSubmittedError,
    ValidationError,
)
from app.core.project_lifecycle import can_transition, close_review, transition
from app.core.repository_protocols import MilestoneLike, ProjectLike


@dataclass(frozen=True)
class PlannedMilestone:
    title: str
    description: str
    target_amount: Amount


def validate_milestone_plan(plan: Sequence[PlannedMilestone]) -> Amount:
    """Check every planned milestone. Returns the plan total."""
    total = Amount(0)
    for index, item in enumerate(plan):
        if not item.title.strip():
            raise ValidationError(
                f"milestone {index + 1} needs a title", f"milestones.{index}.title",
            )
        if isinstance(item.target_amount, bool) or item.target_amount <= 0:
            raise ValidationError(
                f"milestone {index + 1} needs a positive target_amount",
                f"milestones.{index}.target_amount",
            )
        total += item.target_amount
    return total


def check_plan_replaceable(project: ProjectLike) -> None:
    """A plan is replaceable only while no milestone has been worked on."""
    if project.current_milestone > 0 or any(
        m.completed or m.proof_uploaded for m in project.milestones
    ):
        raise MilestonePlanLockedError(project.current_milestone)


def next_milestone_number(project: ProjectLike) -> MilestoneNumber:
    return MilestoneNumber(project.current_milestone + 1)


def check_in_order(project: ProjectLike, milestone_number: MilestoneNumber) -> None:
    expected = next_milestone_number(project)
    if milestone_number != expected:
        raise OutOfOrderMilestoneError(expected, milestone_number)


def get_milestone(project: ProjectLike, milestone_number: MilestoneNumber) -> MilestoneLike:
    for milestone in project.milestones:
        if milestone.sequence == milestone_number:
            return milestone
    raise NotFoundError(
        "Milestone", str(milestone_number),
        ErrorContext(milestone_number=milestone_number),
    )


def apply_proof_upload(
    project: ProjectLike,
    milestone_number: MilestoneNumber,
    file_reference: str,
    description: str,
    now: datetime,
) -> MilestoneLike:
    """Attach proof to the next milestone and move the project under review."""
    current = ProjectStatus(project.status)
    if current == ProjectStatus.COMPLETED:
        raise InvalidStateTransitionError(
            current.value, ProjectStatus.UNDER_REVIEW.value,
        )
    if not file_reference.strip():
        raise ValidationError("file_reference is required", "file_reference")
    check_in_order(project, milestone_number)
    milestone = get_milestone(project, milestone_number)
    if milestone.proof_uploaded:
        raise ProofAlreadySubmittedError(milestone_number)
    if not can_transition(current, ProjectStatus.UNDER_REVIEW):
        raise InvalidStateTransitionError(
            current.value, ProjectStatus.UNDER_REVIEW.value,
        )

    milestone.proof_uploaded = True
    milestone.proof_url = file_reference.strip()
    milestone.proof_description = description.strip() or None
    milestone.proof_submitted_at = now
    transition(project, ProjectStatus.UNDER_REVIEW)
    refresh_can_withdraw(project)
    return milestone


def apply_review(
    project: ProjectLike,
    milestone_number: MilestoneNumber,
    decision: ReviewDecision,
    now: datetime,
    note: str | None = None,
) -> ProjectStatus:
    """Accept or reject the proof of the next milestone. Returns the new status."""
    check_in_order(project, milestone_number)
    milestone = get_milestone(project, milestone_number)
    if not milestone.proof_uploaded or milestone.completed:
        raise ProofNotSubmittedError(milestone_number)

    milestone.review_note = note
    if decision == ReviewDecision.ACCEPT:
        milestone.completed = True
        milestone.completed_date = now
        project.current_milestone += 1
    else:
        milestone.proof_uploaded = False
        milestone.proof_url = None
        milestone.proof_description = None
        milestone.proof_submitted_at = None

    status = close_review(project)
    refresh_can_withdraw(project)
    return status
