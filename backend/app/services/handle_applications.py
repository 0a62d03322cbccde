"""Application Handlers — turn an accepted fundraiser application into a pending project.

Invariants:
    - Exactly one Project (status pending) per stored application
    - total_amount is the sum of the supplied milestone plan (0 for an empty plan)
    - Application and project are committed together or not at all
"""

import logging
import uuid
from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import ApplicationId, ProjectId, ProjectStatus
from app.core.enforce_application import ApplicationFields, validate_application
from app.core.enforce_milestones import PlannedMilestone, validate_milestone_plan
from app.infrastructure.database import commit_or_conflict
from app.models.application import FundraiserApplication
from app.models.project import Project
from app.services.handle_projects import (
    annotate_errors, build_milestones, load_project,
)

logger = logging.getLogger(__name__)


class ApplicationHandlers:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def submit(
        self, fields: ApplicationFields, plan: Sequence[PlannedMilestone] = (),
    ) -> Project:
        """Validate the application and create its pending project."""
        with annotate_errors(wallet=fields.wallet_address.strip() or None):
            clean = validate_application(fields)
            total = validate_milestone_plan(plan)

        project = Project(
            name=clean.project_name,
            description=clean.project_description,
            fundraiser_name=clean.full_name,
            wallet_address=clean.wallet_address,
            total_amount=total,
            current_amount=0,
            withdrawn_amount=0,
            current_milestone=0,
            status=ProjectStatus.PENDING.value,
            status_before_review=None,
            can_withdraw=False,
            verified_at=None,
            completed_at=None,
            milestones=build_milestones(plan),
        )
        self.db.add(project)
        await self.db.flush()

        application = FundraiserApplication(
            id=ApplicationId(uuid.uuid4()),
            full_name=clean.full_name,
            project_name=clean.project_name,
            wallet_address=clean.wallet_address,
            phone_number=clean.phone_number,
            project_description=clean.project_description,
            file_reference=clean.file_reference,
            project_id=project.id,
        )
        self.db.add(application)
        await commit_or_conflict(self.db)
        project = await load_project(self.db, ProjectId(project.id), refresh=True)

        logger.info(
            f"Application accepted for '{project.name}' "
            f"({len(plan)} milestones, goal {total})",
            extra={
                "project_id": project.id,
                "application_id": application.id,
                "wallet": project.wallet_address,
            },
        )
        return project
