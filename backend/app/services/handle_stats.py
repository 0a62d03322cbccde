"""Stats Handlers — platform-wide fundraising totals.

Invariants:
    - Read-only; no project lock taken, committed state only
    - total_raised equals the sum of every project's current_amount
    - active_donors counts distinct normalized donor wallets across all donations
"""

from dataclasses import dataclass

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import Amount, ProjectStatus
from app.models.donation import Donation
from app.models.project import Project


@dataclass(frozen=True)
class PlatformTotals:
    total_raised: Amount
    projects_funded: int
    projects_completed: int
    active_donors: int


class StatsHandlers:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def platform_totals(self) -> PlatformTotals:
        project_row = (await self.db.execute(
            select(
                func.coalesce(func.sum(Project.current_amount), 0),
                func.coalesce(func.sum(case((Project.current_amount > 0, 1), else_=0)), 0),
                func.coalesce(func.sum(case(
                    (Project.status == ProjectStatus.COMPLETED.value, 1), else_=0,
                )), 0),
            ),
        )).one()
        donors = await self.db.execute(
            select(func.count(func.distinct(Donation.donor_wallet))),
        )
        return PlatformTotals(
            total_raised=Amount(int(project_row[0])),
            projects_funded=int(project_row[1]),
            projects_completed=int(project_row[2]),
            active_donors=int(donors.scalar_one()),
        )
