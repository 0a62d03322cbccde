"""Donations & NFTs — record a donation, list a wallet's NFTs.

Invariants:
    - POST /api/v1/donations returns 201 with the NFT issued for the donation
    - GET /api/v1/nfts?wallet= is read-only
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.core.domain_types import Amount, ProjectId
from app.infrastructure.database import get_db
from app.infrastructure.project_locks import ProjectLockRegistry, get_project_locks
from app.schemas.donation import DonationCreate, NFTResponse
from app.services.handle_donations import DonationHandlers

router = APIRouter(prefix="/api/v1", tags=["donations"])


def get_donation_handlers(
    db: AsyncSession = Depends(get_db),
    locks: ProjectLockRegistry = Depends(get_project_locks),
) -> DonationHandlers:
    settings = get_settings()
    return DonationHandlers(
        db, locks, settings.tier_table, settings.nft_token_prefix,
    )


@router.post(
    "/donations", response_model=NFTResponse,
    status_code=status.HTTP_201_CREATED,
)
async def record_donation(
    body: DonationCreate,
    handlers: DonationHandlers = Depends(get_donation_handlers),
):
    """Record a donation and issue the donor's NFT."""
    nft = await handlers.record_donation(
        body.donor_wallet, ProjectId(body.project_id), Amount(body.amount),
    )
    return NFTResponse.from_model(nft)


@router.get("/nfts", response_model=list[NFTResponse])
async def list_nfts(
    wallet: str = Query(..., max_length=66),
    handlers: DonationHandlers = Depends(get_donation_handlers),
):
    """NFTs held by a donor wallet, newest first."""
    nfts = await handlers.nfts_for_wallet(wallet)
    return [NFTResponse.from_model(n) for n in nfts]
