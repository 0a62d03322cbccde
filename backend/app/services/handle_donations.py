"""Donation Handlers — record donations, issue NFTs, and look NFTs up by wallet.

Invariants:
    - record_donation runs entirely under the project's lock: the prior
      current_amount and the donor's prior cumulative total are read, the
      project is incremented, and Donation + NFT are written in one commit
    - One NFT per donation; token_id never reused (primary key)
    - NFT tier computed from the donor's cumulative total to that project

Design Decisions:
    - token_id = "<prefix>-<16 uppercase hex>" from uuid4
    - nfts_for_wallet is a plain read: no lock, newest first
"""

import logging
import uuid
from datetime import datetime, timezone
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import (
    Amount,
    DonationId,
    ProjectId,
    TokenId,
    WalletAddress,
)
from app.core.enforce_funding import apply_donation, check_donation_amount
from app.core.nft_tiers import TierTable
from app.core.wallet_address import normalize_wallet
from app.infrastructure.database import commit_or_conflict
from app.infrastructure.project_locks import ProjectLockRegistry
from app.models.donation import Donation
from app.models.nft import NFT
from app.services.handle_projects import annotate_errors, load_project

logger = logging.getLogger(__name__)


def new_token_id(prefix: str) -> TokenId:
    return TokenId(f"{prefix}-{uuid.uuid4().hex[:16].upper()}")


class DonationHandlers:
    """Donation recording and NFT queries."""

    def __init__(
        self,
        db: AsyncSession,
        locks: ProjectLockRegistry,
        tier_table: TierTable,
        token_prefix: str = "NFT",
    ):
        self.db = db
        self.locks = locks
        self.tier_table = tier_table
        self.token_prefix = token_prefix

    async def cumulative_donated(
        self, project_id: ProjectId, donor_wallet: WalletAddress,
    ) -> Amount:
        result = await self.db.execute(
            select(func.coalesce(func.sum(Donation.amount), 0))
            .where(Donation.project_id == project_id)
            .where(Donation.donor_wallet == donor_wallet),
        )
        return Amount(int(result.scalar_one()))

    async def record_donation(
        self, donor_wallet: str, project_id: ProjectId, amount: Amount,
    ) -> NFT:
        """Apply a donation and issue its NFT. Returns the NFT."""
        with annotate_errors(project_id, donor_wallet.strip() or None):
            wallet = normalize_wallet(donor_wallet, "donor_wallet")
            check_donation_amount(amount)

        async with self.locks.hold(project_id):
            project = await load_project(self.db, project_id, refresh=True)
            prior = await self.cumulative_donated(project_id, wallet)
            with annotate_errors(project_id, wallet):
                apply_donation(project, amount)

            now = datetime.now(timezone.utc)
            donation = Donation(
                id=DonationId(uuid.uuid4()),
                project_id=project_id,
                donor_wallet=wallet,
                amount=amount,
                created_at=now,
            )
            self.db.add(donation)
            await self.db.flush()

            cumulative = Amount(prior + amount)
            nft = NFT(
                token_id=new_token_id(self.token_prefix),
                donation_id=donation.id,
                project_id=project_id,
                project_name=project.name,
                donor_wallet=wallet,
                tier=self.tier_table.tier_for(cumulative),
                amount_donated=amount,
                cumulative_amount=cumulative,
                issued_at=now,
            )
            self.db.add(nft)
            await commit_or_conflict(self.db)

        logger.info(
            f"Donation of {amount} recorded; project at "
            f"{project.current_amount}/{project.total_amount}, tier {nft.tier}",
            extra={
                "project_id": project_id,
                "donor_wallet": wallet,
                "token_id": nft.token_id,
            },
        )
        return nft

    async def nfts_for_wallet(self, wallet: str) -> list[NFT]:
        """Every NFT issued to `wallet`, newest first. Read-only."""
        normalized = normalize_wallet(wallet, "wallet")
        result = await self.db.execute(
            select(NFT)
            .where(NFT.donor_wallet == normalized)
            .order_by(NFT.issued_at.desc(), NFT.token_id),
        )
        return list(result.scalars().all())
