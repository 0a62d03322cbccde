"""Project Schemas — milestone plans, project views, and withdrawal results.

Invariants:
    - MilestoneResponse.id is the 1-based sequence position
    - available_to_withdraw mirrors core/enforce_funding.available_to_withdraw
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from app.core.enforce_funding import available_to_withdraw
from app.core.enforce_milestones import PlannedMilestone


class MilestonePlanItem(BaseModel):
    """One planned milestone, supplied by the plan policy at submission time."""
    title: str = Field(max_length=200)
    description: str = Field("", max_length=2000)
    target_amount: int

    def to_planned(self) -> PlannedMilestone:
        return PlannedMilestone(
            title=self.title.strip(),
            description=self.description.strip(),
            target_amount=self.target_amount,
        )


class MilestonePlanUpdate(BaseModel):
    """Replacement plan for a pending project."""
    milestones: list[MilestonePlanItem] = Field(max_length=50)


class MilestoneResponse(BaseModel):
    id: int
    title: str
    description: str
    target_amount: int
    completed: bool
    proof_uploaded: bool
    completed_date: datetime | None = None
    proof_url: str | None = None
    review_note: str | None = None

    @classmethod
    def from_model(cls, milestone) -> "MilestoneResponse":
        return cls(
            id=milestone.sequence,
            title=milestone.title,
            description=milestone.description,
            target_amount=milestone.target_amount,
            completed=milestone.completed,
            proof_uploaded=milestone.proof_uploaded,
            completed_date=milestone.completed_date,
            proof_url=milestone.proof_url,
            review_note=milestone.review_note,
        )


class ProjectSummary(BaseModel):
    """List view — no milestone detail."""
    id: UUID
    name: str
    fundraiser_name: str
    wallet_address: str
    total_amount: int
    current_amount: int
    current_milestone: int
    status: str

    @classmethod
    def from_model(cls, project) -> "ProjectSummary":
        return cls(
            id=project.id,
            name=project.name,
            fundraiser_name=project.fundraiser_name,
            wallet_address=project.wallet_address,
            total_amount=project.total_amount,
            current_amount=project.current_amount,
            current_milestone=project.current_milestone,
            status=project.status,
        )


class ProjectResponse(ProjectSummary):
    """Full project progress view with its milestone sequence."""
    description: str
    withdrawn_amount: int
    available_to_withdraw: int
    can_withdraw: bool
    created_at: datetime
    verified_at: datetime | None = None
    completed_at: datetime | None = None
    milestones: list[MilestoneResponse]

    @classmethod
    def from_model(cls, project) -> "ProjectResponse":
        return cls(
            id=project.id,
            name=project.name,
            description=project.description,
            fundraiser_name=project.fundraiser_name,
            wallet_address=project.wallet_address,
            total_amount=project.total_amount,
            current_amount=project.current_amount,
            withdrawn_amount=project.withdrawn_amount,
            available_to_withdraw=available_to_withdraw(project),
            current_milestone=project.current_milestone,
            status=project.status,
            can_withdraw=project.can_withdraw,
            created_at=project.created_at,
            verified_at=project.verified_at,
            completed_at=project.completed_at,
            milestones=[
                MilestoneResponse.from_model(m) for m in project.milestones
            ],
        )


class WithdrawalResponse(BaseModel):
    project_id: UUID
    amount: int
    withdrawn_amount: int
    can_withdraw: bool
