"""Boundary Protocols — structural contracts between core rules and ORM objects.

Invariants:
    - Core NEVER imports from models/ — rules read and write through these Protocols
    - ORM models in app/models satisfy them structurally

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Tests drive core rules with plain dataclasses that match these shapes
"""

from datetime import datetime
from typing import Protocol, Sequence


class MilestoneLike(Protocol):
    """Structural contract for one milestone of a project."""
    sequence: int
    title: str
    target_amount: int
    completed: bool
    proof_uploaded: bool
    completed_date: datetime | None
    proof_url: str | None
    proof_description: str | None
    proof_submitted_at: datetime | None
    review_note: str | None


class ProjectLike(Protocol):
    """Structural contract for a project aggregate and its milestone sequence."""
    status: str
    status_before_review: str | None
    total_amount: int
    current_amount: int
    withdrawn_amount: int
    current_milestone: int
    can_withdraw: bool

    @property
    def milestones(self) -> Sequence[MilestoneLike]: ...
