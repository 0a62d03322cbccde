"""Milestone Handlers — proof upload and externally triggered review decisions.

Invariants:
    - Both operations run under the project's lock and commit once
    - Proof upload queues the milestone for review (project -> under_review)
    - Review accept completes the milestone and advances current_milestone;
      review reject clears the proof so the organizer resubmits
    - completed_at stamped when the last acceptance completes the project
"""

import logging
from datetime import datetime, timezone
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import (
    MilestoneNumber,
    ProjectId,
    ProjectStatus,
    ReviewDecision,
)
from app.core.enforce_milestones import apply_proof_upload, apply_review
from app.infrastructure.database import commit_or_conflict
from app.infrastructure.project_locks import ProjectLockRegistry
from app.models.milestone import Milestone
from app.models.project import Project
from app.services.handle_projects import annotate_errors, load_project

logger = logging.getLogger(__name__)


class MilestoneHandlers:
    """Proof submission and review for the next milestone of a project."""

    def __init__(self, db: AsyncSession, locks: ProjectLockRegistry):
        self.db = db
        self.locks = locks

    async def upload_proof(
        self,
        project_id: ProjectId,
        milestone_number: MilestoneNumber,
        file_reference: str,
        description: str = "",
    ) -> tuple[Project, Milestone]:
        async with self.locks.hold(project_id):
            project = await load_project(self.db, project_id, refresh=True)
            with annotate_errors(project_id):
                milestone = apply_proof_upload(
                    project, milestone_number, file_reference, description,
                    now=datetime.now(timezone.utc),
                )
            await commit_or_conflict(self.db)

        logger.info(
            f"Proof queued for review of milestone {milestone_number}",
            extra={"project_id": project_id, "milestone_number": milestone_number},
        )
        return project, milestone

    async def review(
        self,
        project_id: ProjectId,
        milestone_number: MilestoneNumber,
        decision: ReviewDecision,
        note: str | None = None,
    ) -> Project:
        """Apply an accept/reject signal from the external reviewer."""
        async with self.locks.hold(project_id):
            project = await load_project(self.db, project_id, refresh=True)
            now = datetime.now(timezone.utc)
            with annotate_errors(project_id):
                status = apply_review(
                    project, milestone_number, decision, now=now, note=note,
                )
            if status == ProjectStatus.COMPLETED:
                project.completed_at = now
            await commit_or_conflict(self.db)

        logger.info(
            f"Milestone {milestone_number} review: {decision.value}; "
            f"project now {status.value}",
            extra={"project_id": project_id, "milestone_number": milestone_number},
        )
        return project
