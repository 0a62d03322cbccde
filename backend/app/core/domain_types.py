"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - ProjectId, DonationId, ApplicationId wrap UUIDs
    - WalletAddress is always the normalized (lowercase) form
    - Amounts are whole currency units (int), never float
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

ProjectId = NewType("ProjectId", UUID)
DonationId = NewType("DonationId", UUID)
ApplicationId = NewType("ApplicationId", UUID)
TokenId = NewType("TokenId", str)
WalletAddress = NewType("WalletAddress", str)


# ─── Value Types ─────────────────────────────────────────────────

Amount = NewType("Amount", int)             # whole currency units, >= 0
MilestoneNumber = NewType("MilestoneNumber", int)   # 1-based sequence position


# ─── Enums ───────────────────────────────────────────────────────

class ProjectStatus(str, Enum):
    """Project lifecycle states — maps to DB `status` column."""
    PENDING = "pending"
    VERIFIED = "verified"
    UNDER_REVIEW = "under_review"
    COMPLETED = "completed"


class ReviewDecision(str, Enum):
    """External reviewer verdict on an uploaded milestone proof."""
    ACCEPT = "accept"
    REJECT = "reject"
