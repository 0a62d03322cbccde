"""Milestone Proofs & Reviews — organizer uploads, external reviewer decides.

Invariants:
    - POST /api/v1/milestone-proofs returns 202: proof is queued, not yet accepted
    - POST /api/v1/milestone-reviews applies accept/reject and returns the project
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import MilestoneNumber, ProjectId, ReviewDecision
from app.infrastructure.database import get_db
from app.infrastructure.project_locks import ProjectLockRegistry, get_project_locks
from app.schemas.milestone import MilestoneReview, ProofAcknowledgement, ProofUpload
from app.schemas.project import ProjectResponse
from app.services.handle_milestones import MilestoneHandlers

router = APIRouter(prefix="/api/v1", tags=["milestones"])


def get_milestone_handlers(
    db: AsyncSession = Depends(get_db),
    locks: ProjectLockRegistry = Depends(get_project_locks),
) -> MilestoneHandlers:
    return MilestoneHandlers(db, locks)


@router.post(
    "/milestone-proofs", response_model=ProofAcknowledgement,
    status_code=status.HTTP_202_ACCEPTED,
)
async def upload_milestone_proof(
    body: ProofUpload,
    handlers: MilestoneHandlers = Depends(get_milestone_handlers),
):
    """Queue proof of the next milestone for external review."""
    project, milestone = await handlers.upload_proof(
        ProjectId(body.project_id), MilestoneNumber(body.milestone_number),
        body.file_reference, body.description,
    )
    return ProofAcknowledgement(
        project_id=project.id,
        milestone_number=milestone.sequence,
        project_status=project.status,
        proof_submitted_at=milestone.proof_submitted_at,
        message=f"Proof for milestone {milestone.sequence} is under review.",
    )


@router.post("/milestone-reviews", response_model=ProjectResponse)
async def review_milestone(
    body: MilestoneReview,
    handlers: MilestoneHandlers = Depends(get_milestone_handlers),
):
    """Accept or reject the queued proof of a milestone."""
    project = await handlers.review(
        ProjectId(body.project_id), MilestoneNumber(body.milestone_number),
        ReviewDecision(body.decision), body.note,
    )
    return ProjectResponse.from_model(project)
