"""Projects — progress lookup, listing, plan changes, verification, withdrawals.

Invariants:
    - GET /api/v1/projects/{id_or_wallet} accepts a project id, a fundraiser
      wallet, or a project name
    - Writes delegate to ProjectHandlers, which hold the project lock
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import ProjectId, ProjectStatus
from app.infrastructure.database import get_db
from app.infrastructure.project_locks import ProjectLockRegistry, get_project_locks
from app.schemas.project import (
    MilestonePlanUpdate,
    ProjectResponse,
    ProjectSummary,
    WithdrawalResponse,
)
from app.services.handle_projects import ProjectHandlers

router = APIRouter(prefix="/api/v1/projects", tags=["projects"])


def get_project_handlers(
    db: AsyncSession = Depends(get_db),
    locks: ProjectLockRegistry = Depends(get_project_locks),
) -> ProjectHandlers:
    return ProjectHandlers(db, locks)


@router.get("", response_model=list[ProjectSummary])
async def list_projects(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    status_filter: ProjectStatus | None = Query(None, alias="status"),
    handlers: ProjectHandlers = Depends(get_project_handlers),
):
    """List projects, newest first, optionally filtered by status."""
    projects = await handlers.list_projects(status_filter, limit, offset)
    return [ProjectSummary.from_model(p) for p in projects]


@router.get("/{id_or_wallet}", response_model=ProjectResponse)
async def get_project_progress(
    id_or_wallet: str,
    handlers: ProjectHandlers = Depends(get_project_handlers),
):
    """Project with its milestone sequence."""
    project = await handlers.find_project(id_or_wallet)
    return ProjectResponse.from_model(project)


@router.put("/{project_id}/milestones", response_model=ProjectResponse)
async def replace_milestone_plan(
    project_id: UUID,
    body: MilestonePlanUpdate,
    handlers: ProjectHandlers = Depends(get_project_handlers),
):
    """Replace the milestone plan while the project is pending."""
    project = await handlers.set_milestone_plan(
        ProjectId(project_id), [item.to_planned() for item in body.milestones],
    )
    return ProjectResponse.from_model(project)


@router.post("/{project_id}/verification", response_model=ProjectResponse)
async def verify_project(
    project_id: UUID,
    handlers: ProjectHandlers = Depends(get_project_handlers),
):
    """Mark a pending project verified; it starts accepting donations."""
    project = await handlers.verify(ProjectId(project_id))
    return ProjectResponse.from_model(project)


@router.post("/{project_id}/withdrawals", response_model=WithdrawalResponse)
async def withdraw_funds(
    project_id: UUID,
    handlers: ProjectHandlers = Depends(get_project_handlers),
):
    """Release funds unlocked by completed milestones to the fundraiser."""
    project, amount = await handlers.withdraw(ProjectId(project_id))
    return WithdrawalResponse(
        project_id=project.id,
        amount=amount,
        withdrawn_amount=project.withdrawn_amount,
        can_withdraw=project.can_withdraw,
    )
