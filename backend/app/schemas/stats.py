"""Stats Schemas — platform totals for the landing page."""

from pydantic import BaseModel


class PlatformStatsResponse(BaseModel):
    total_raised: int
    projects_funded: int
    projects_completed: int
    active_donors: int

    @classmethod
    def from_totals(cls, totals) -> "PlatformStatsResponse":
        return cls(
            total_raised=totals.total_raised,
            projects_funded=totals.projects_funded,
            projects_completed=totals.projects_completed,
            active_donors=totals.active_donors,
        )
