"""Platform Stats — aggregate totals across every project.

Invariants:
    - GET /api/v1/stats is read-only and takes no project lock
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.database import get_db
from app.schemas.stats import PlatformStatsResponse
from app.services.handle_stats import StatsHandlers

router = APIRouter(prefix="/api/v1", tags=["stats"])


@router.get("/stats", response_model=PlatformStatsResponse)
async def platform_stats(db: AsyncSession = Depends(get_db)):
    """Funds raised, funded and completed projects, distinct donors."""
    totals = await StatsHandlers(db).platform_totals()
    return PlatformStatsResponse.from_totals(totals)
