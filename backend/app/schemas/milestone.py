"""Milestone Proof & Review Schemas.

Invariants:
    - milestone_number >= 1 (ordering against current_milestone checked in core)
    - MilestoneReview.decision is accept | reject
"""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field


class ProofUpload(BaseModel):
    project_id: UUID
    milestone_number: int = Field(ge=1)
    description: str = Field("", max_length=5000)
    file_reference: str = Field(max_length=500)


class ProofAcknowledgement(BaseModel):
    """Returned once proof is queued for external review."""
    project_id: UUID
    milestone_number: int
    project_status: str
    proof_submitted_at: datetime
    message: str


class MilestoneReview(BaseModel):
    """Externally triggered accept/reject signal for a queued proof."""
    project_id: UUID
    milestone_number: int = Field(ge=1)
    decision: Literal["accept", "reject"]
    note: str | None = Field(None, max_length=2000)
