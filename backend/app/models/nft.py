"""NFT ORM — donor recognition token issued once per donation.

Invariants:
    - token_id is the primary key (unique, never reused)
    - donation_id is unique: exactly one NFT per donation
    - tier derived from cumulative_amount via core/nft_tiers.py at issuance
    - project_name denormalized at issuance; never updated

Design Decisions:
    - Non-owning reference to Project and Donation (plain FKs, no relationship())
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import BigInteger, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from app.db.base import Base


class NFT(Base):
    __tablename__ = "nfts"

    token_id: Mapped[str] = mapped_column(String(40), primary_key=True)
    donation_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("donations.id"),
        nullable=False, unique=True,
    )
    project_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("projects.id"), nullable=False,
    )
    project_name: Mapped[str] = mapped_column(String(200), nullable=False)
    donor_wallet: Mapped[str] = mapped_column(
        String(66), nullable=False, index=True,
    )
    tier: Mapped[str] = mapped_column(String(60), nullable=False)
    amount_donated: Mapped[int] = mapped_column(BigInteger, nullable=False)
    cumulative_amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    issued_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
