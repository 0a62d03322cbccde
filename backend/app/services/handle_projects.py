"""Project Handlers — progress lookups, plan changes, verification, withdrawals.

Invariants:
    - Every write loads the project under its lock with populate_existing,
      applies core rules, then commits once
    - Reads take no lock and see committed state
    - find_project resolves a UUID, then a wallet address, then a project name

Design Decisions:
    - load_project / annotate_errors shared by the other handler modules
"""

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, Sequence
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import Amount, ProjectId, ProjectStatus
from app.core.enforce_funding import apply_withdrawal, refresh_can_withdraw
from app.core.enforce_milestones import (
    PlannedMilestone,
    check_plan_replaceable,
    validate_milestone_plan,
)
from app.core.errors import (
    ErrorContext,
    FundraisingError,
    InvalidStateTransitionError,
    NotFoundError,
    ValidationError,
)
from app.core.project_lifecycle import all_milestones_completed, transition
from app.core.wallet_address import is_valid_wallet, normalize_wallet
from app.infrastructure.database import commit_or_conflict
from app.infrastructure.project_locks import ProjectLockRegistry
from app.models.milestone import Milestone
from app.models.project import Project

logger = logging.getLogger(__name__)


@contextmanager
def annotate_errors(
    project_id: ProjectId | None = None, wallet: str | None = None,
) -> Iterator[None]:
    """Attach identifiers to domain errors raised by core rules."""
    try:
        yield
    except FundraisingError as e:
        if project_id is not None and e.context.project_id is None:
            e.context.project_id = str(project_id)
        if wallet is not None and e.context.wallet is None:
            e.context.wallet = wallet
        raise


async def load_project(
    db: AsyncSession, project_id: ProjectId, *, refresh: bool = False,
) -> Project:
    """Get project with milestones or raise NotFoundError."""
    query = select(Project).where(Project.id == project_id)
    if refresh:
        query = query.execution_options(populate_existing=True)
    result = await db.execute(query)
    project = result.scalar_one_or_none()
    if project is None:
        raise NotFoundError(
            "Project", str(project_id), ErrorContext(project_id=str(project_id)),
        )
    return project


def build_milestones(plan: Sequence[PlannedMilestone]) -> list[Milestone]:
    return [
        Milestone(
            sequence=index,
            title=item.title,
            description=item.description,
            target_amount=item.target_amount,
            completed=False,
            proof_uploaded=False,
            completed_date=None,
            proof_url=None,
            proof_description=None,
            proof_submitted_at=None,
            review_note=None,
        )
        for index, item in enumerate(plan, start=1)
    ]


class ProjectHandlers:
    """Project reads and project-level writes."""

    def __init__(self, db: AsyncSession, locks: ProjectLockRegistry):
        self.db = db
        self.locks = locks

    async def get_project(self, project_id: ProjectId) -> Project:
        return await load_project(self.db, project_id)

    async def find_project(self, id_or_wallet: str) -> Project:
        """Resolve a project id, a fundraiser wallet, or a project name."""
        key = id_or_wallet.strip()
        try:
            return await self.get_project(ProjectId(UUID(key)))
        except ValueError:
            pass

        query = select(Project).order_by(Project.created_at.desc()).limit(1)
        if is_valid_wallet(key):
            query = query.where(Project.wallet_address == normalize_wallet(key))
        else:
            query = query.where(func.lower(Project.name) == key.lower())
        result = await self.db.execute(query)
        project = result.scalar_one_or_none()
        if project is None:
            raise NotFoundError("Project", key)
        return project

    async def list_projects(
        self, status: ProjectStatus | None = None, limit: int = 20, offset: int = 0,
    ) -> list[Project]:
        query = select(Project).order_by(Project.created_at.desc())
        if status is not None:
            query = query.where(Project.status == status.value)
        result = await self.db.execute(query.limit(limit).offset(offset))
        return list(result.scalars().all())

    async def set_milestone_plan(
        self, project_id: ProjectId, plan: Sequence[PlannedMilestone],
    ) -> Project:
        """Replace the plan of a pending project before any milestone work starts."""
        async with self.locks.hold(project_id):
            project = await load_project(self.db, project_id, refresh=True)
            with annotate_errors(project_id):
                if project.status != ProjectStatus.PENDING.value:
                    raise InvalidStateTransitionError(
                        project.status, ProjectStatus.PENDING.value,
                    )
                check_plan_replaceable(project)
                total = validate_milestone_plan(plan)
            project.milestones.clear()
            await self.db.flush()
            project.milestones.extend(build_milestones(plan))
            project.total_amount = total
            await commit_or_conflict(self.db)
            project = await load_project(self.db, project_id, refresh=True)
        logger.info(
            f"Milestone plan replaced ({len(plan)} milestones, total {total})",
            extra={"project_id": project_id},
        )
        return project

    async def verify(self, project_id: ProjectId) -> Project:
        """Record the off-model verification outcome: pending -> verified.

        A project whose milestones were all accepted while pending moves on
        to completed in the same step.
        """
        async with self.locks.hold(project_id):
            project = await load_project(self.db, project_id, refresh=True)
            with annotate_errors(project_id):
                if project.status != ProjectStatus.PENDING.value:
                    raise InvalidStateTransitionError(
                        project.status, ProjectStatus.VERIFIED.value,
                    )
                if not project.milestones:
                    raise ValidationError(
                        "project needs a milestone plan before verification",
                        "milestones",
                    )
                transition(project, ProjectStatus.VERIFIED)
                if all_milestones_completed(project):
                    transition(project, ProjectStatus.COMPLETED)
            now = datetime.now(timezone.utc)
            project.verified_at = now
            if project.status == ProjectStatus.COMPLETED.value:
                project.completed_at = now
            refresh_can_withdraw(project)
            await commit_or_conflict(self.db)
        logger.info(
            f"Project verified (status {project.status})",
            extra={"project_id": project_id},
        )
        return project

    async def withdraw(self, project_id: ProjectId) -> tuple[Project, Amount]:
        """Release all funds unlocked by completed milestones."""
        async with self.locks.hold(project_id):
            project = await load_project(self.db, project_id, refresh=True)
            with annotate_errors(project_id):
                amount = apply_withdrawal(project)
            await commit_or_conflict(self.db)
        logger.info(
            f"Withdrawal of {amount} released",
            extra={"project_id": project_id, "wallet": project.wallet_address},
        )
        return project, amount
