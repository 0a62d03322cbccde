"""Core test fixtures — plain dataclasses shaped like the ORM aggregates.

Invariants:
    - FakeProject / FakeMilestone satisfy core/repository_protocols structurally
    - make_project builds a project whose total equals the sum of targets
"""

from dataclasses import dataclass, field
from datetime import datetime

import pytest


@dataclass
class FakeMilestone:
    sequence: int
    title: str
    target_amount: int
    completed: bool = False
    proof_uploaded: bool = False
    completed_date: datetime | None = None
    proof_url: str | None = None
    proof_description: str | None = None
    proof_submitted_at: datetime | None = None
    review_note: str | None = None


@dataclass
class FakeProject:
    status: str = "verified"
    status_before_review: str | None = None
    total_amount: int = 0
    current_amount: int = 0
    withdrawn_amount: int = 0
    current_milestone: int = 0
    can_withdraw: bool = False
    milestones: list[FakeMilestone] = field(default_factory=list)


@pytest.fixture
def make_project():
    """Factory: make_project(targets=[...], status=..., **overrides)."""
    def _make(targets=(30_000, 25_000, 25_000, 20_000), status="verified", **overrides):
        milestones = [
            FakeMilestone(sequence=i, title=f"Milestone {i}", target_amount=t)
            for i, t in enumerate(targets, start=1)
        ]
        project = FakeProject(
            status=status, total_amount=sum(targets), milestones=milestones,
        )
        for key, value in overrides.items():
            setattr(project, key, value)
        return project
    return _make


@pytest.fixture
def complete_milestones():
    """Mark the first `count` milestones of `project` completed."""
    def _complete(project, count):
        for milestone in project.milestones[:count]:
            milestone.proof_uploaded = True
            milestone.completed = True
        project.current_milestone = count
    return _complete
