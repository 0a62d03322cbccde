"""Fundraiser Applications — submission creates a pending project.

Invariants:
    - POST /api/v1/applications returns 201 with the pending project
    - The milestone plan travels in the request body (external plan policy)
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.database import get_db
from app.schemas.application import ApplicationCreate
from app.schemas.project import ProjectResponse
from app.services.handle_applications import ApplicationHandlers

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/applications", tags=["applications"])


@router.post(
    "", response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_application(
    body: ApplicationCreate, db: AsyncSession = Depends(get_db),
):
    """Submit a fundraiser application."""
    project = await ApplicationHandlers(db).submit(
        body.to_fields(), [item.to_planned() for item in body.milestones],
    )
    return ProjectResponse.from_model(project)
