"""Request/response schemas — plan items, proof uploads, reviews, NFT views.

Invariants:
    - MilestonePlanItem.to_planned strips text fields
    - milestone_number >= 1; decision is accept | reject
    - NFTResponse.date is the issue date of the token
"""

import uuid
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest
from pydantic import ValidationError

from app.schemas.application import ApplicationCreate
from app.schemas.donation import NFTResponse
from app.schemas.milestone import MilestoneReview, ProofUpload
from app.schemas.project import MilestonePlanItem


# --- MilestonePlanItem --------------------------------------------------------

def test_plan_item_to_planned_strips_text():
    planned = MilestonePlanItem(
        title="  Roof ", description=" tiles ", target_amount=500,
    ).to_planned()
    assert (planned.title, planned.description, planned.target_amount) == (
        "Roof", "tiles", 500,
    )


def test_plan_item_description_defaults_empty():
    assert MilestonePlanItem(title="Roof", target_amount=1).description == ""


# --- ApplicationCreate --------------------------------------------------------

def test_application_milestones_default_to_empty_plan():
    body = ApplicationCreate(
        full_name="Ada", project_name="Water", wallet_address="0x1234567890abcdef",
        phone_number="08035550101", project_description="Wells",
    )
    assert body.milestones == []
    assert body.to_fields().file_reference is None


# --- ProofUpload / MilestoneReview -------------------------------------------

def test_proof_upload_rejects_milestone_zero():
    with pytest.raises(ValidationError):
        ProofUpload(project_id=uuid.uuid4(), milestone_number=0, file_reference="x")


def test_review_accepts_known_decisions_only():
    pid = uuid.uuid4()
    assert MilestoneReview(project_id=pid, milestone_number=1, decision="reject").note is None
    with pytest.raises(ValidationError):
        MilestoneReview(project_id=pid, milestone_number=1, decision="approve")


# --- NFTResponse --------------------------------------------------------------

def test_nft_response_date_is_issue_date():
    issued = datetime(2026, 5, 17, 23, 30, tzinfo=timezone.utc)
    nft = SimpleNamespace(
        token_id="NFT-0123456789ABCDEF", tier="Silver Supporter",
        amount_donated=2_000, cumulative_amount=6_000,
        project_id=uuid.uuid4(), project_name="Water",
        donor_wallet="0x1234567890abcdef", issued_at=issued,
    )
    resp = NFTResponse.from_model(nft)
    assert resp.date.isoformat() == "2026-05-17"
    assert resp.cumulative_amount == 6_000
