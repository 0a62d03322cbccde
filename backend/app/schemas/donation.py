"""Donation & NFT Schemas."""

import datetime as dt
from uuid import UUID

from pydantic import BaseModel, Field


class DonationCreate(BaseModel):
    donor_wallet: str = Field(max_length=66)
    project_id: UUID
    amount: int  # positivity enforced by core/enforce_funding


class NFTResponse(BaseModel):
    """Donor recognition token, as shown on the wallet's NFT page."""
    token_id: str
    tier: str
    amount_donated: int
    cumulative_amount: int
    project_id: UUID
    project_name: str
    donor_wallet: str
    date: dt.date
    issued_at: dt.datetime

    @classmethod
    def from_model(cls, nft) -> "NFTResponse":
        return cls(
            token_id=nft.token_id,
            tier=nft.tier,
            amount_donated=nft.amount_donated,
            cumulative_amount=nft.cumulative_amount,
            project_id=nft.project_id,
            project_name=nft.project_name,
            donor_wallet=nft.donor_wallet,
            date=nft.issued_at.date(),
            issued_at=nft.issued_at,
        )
