"""Project ORM — the fundraising aggregate root.

Invariants:
    - id is UUID primary key
    - 0 <= current_amount <= total_amount (check constraints)
    - total_amount equals the sum of milestone targets (kept by services)
    - status transitions follow core/project_lifecycle.py
    - version is the optimistic concurrency counter (version_id_col)

Design Decisions:
    - can_withdraw stored, recomputed by core/enforce_funding on every write
    - cascade delete for milestones: project owns its milestone sequence
    - wallet_address stored normalized (lowercase) and indexed for lookups
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    BigInteger, Boolean, CheckConstraint, DateTime, Integer, String, Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from app.db.base import Base


class Project(Base):
    """Project aggregate root — owns its ordered milestones."""
    __tablename__ = "projects"
    __table_args__ = (
        CheckConstraint("current_amount >= 0", name="ck_projects_current_nonneg"),
        CheckConstraint(
            "current_amount <= total_amount", name="ck_projects_current_le_total",
        ),
        CheckConstraint(
            "withdrawn_amount >= 0", name="ck_projects_withdrawn_nonneg",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    fundraiser_name: Mapped[str] = mapped_column(String(200), nullable=False)
    wallet_address: Mapped[str] = mapped_column(
        String(66), nullable=False, index=True,
    )
    total_amount: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0,
    )
    current_amount: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0,
    )
    withdrawn_amount: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0,
    )
    current_milestone: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="pending", index=True,
    )
    status_before_review: Mapped[str | None] = mapped_column(
        String(20), nullable=True,
    )
    can_withdraw: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    verified_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )

    milestones: Mapped[list["Milestone"]] = relationship(
        "Milestone", back_populates="project",
        cascade="all, delete-orphan", lazy="selectin",
        order_by="Milestone.sequence",
    )

    __mapper_args__ = {"version_id_col": version}
