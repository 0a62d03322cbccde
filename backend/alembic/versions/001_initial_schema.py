"""Initial schema — projects, milestones, applications, donations, nfts.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "projects",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("fundraiser_name", sa.String(200), nullable=False),
        sa.Column("wallet_address", sa.String(66), nullable=False),
        sa.Column("total_amount", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("current_amount", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("withdrawn_amount", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("current_milestone", sa.Integer, nullable=False, server_default="0"),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("status_before_review", sa.String(20), nullable=True),
        sa.Column("can_withdraw", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("version", sa.Integer, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("verified_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("current_amount >= 0", name="ck_projects_current_nonneg"),
        sa.CheckConstraint("current_amount <= total_amount", name="ck_projects_current_le_total"),
        sa.CheckConstraint("withdrawn_amount >= 0", name="ck_projects_withdrawn_nonneg"),
    )
    op.create_index("ix_projects_name", "projects", ["name"])
    op.create_index("ix_projects_wallet_address", "projects", ["wallet_address"])
    op.create_index("ix_projects_status", "projects", ["status"])

    op.create_table(
        "milestones",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("project_id", UUID(as_uuid=True), sa.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False),
        sa.Column("sequence", sa.Integer, nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("target_amount", sa.BigInteger, nullable=False),
        sa.Column("completed", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("proof_uploaded", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("completed_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("proof_url", sa.String(500), nullable=True),
        sa.Column("proof_description", sa.Text, nullable=True),
        sa.Column("proof_submitted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("review_note", sa.Text, nullable=True),
        sa.UniqueConstraint("project_id", "sequence", name="uq_milestones_project_sequence"),
    )

    op.create_table(
        "applications",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("full_name", sa.String(200), nullable=False),
        sa.Column("project_name", sa.String(200), nullable=False),
        sa.Column("wallet_address", sa.String(66), nullable=False),
        sa.Column("phone_number", sa.String(32), nullable=False),
        sa.Column("project_description", sa.Text, nullable=False),
        sa.Column("file_reference", sa.String(500), nullable=True),
        sa.Column("project_id", UUID(as_uuid=True), sa.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, unique=True),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "donations",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("project_id", UUID(as_uuid=True), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("donor_wallet", sa.String(66), nullable=False),
        sa.Column("amount", sa.BigInteger, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("amount > 0", name="ck_donations_amount_positive"),
    )
    op.create_index("ix_donations_project_wallet", "donations", ["project_id", "donor_wallet"])

    op.create_table(
        "nfts",
        sa.Column("token_id", sa.String(40), primary_key=True),
        sa.Column("donation_id", UUID(as_uuid=True), sa.ForeignKey("donations.id"), nullable=False, unique=True),
        sa.Column("project_id", UUID(as_uuid=True), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("project_name", sa.String(200), nullable=False),
        sa.Column("donor_wallet", sa.String(66), nullable=False),
        sa.Column("tier", sa.String(60), nullable=False),
        sa.Column("amount_donated", sa.BigInteger, nullable=False),
        sa.Column("cumulative_amount", sa.BigInteger, nullable=False),
        sa.Column("issued_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_nfts_donor_wallet", "nfts", ["donor_wallet"])


def downgrade() -> None:
    op.drop_index("ix_nfts_donor_wallet", table_name="nfts")
    op.drop_table("nfts")
    op.drop_index("ix_donations_project_wallet", table_name="donations")
    op.drop_table("donations")
    op.drop_table("applications")
    op.drop_table("milestones")
    op.drop_index("ix_projects_status", table_name="projects")
    op.drop_index("ix_projects_wallet_address", table_name="projects")
    op.drop_index("ix_projects_name", table_name="projects")
    op.drop_table("projects")
