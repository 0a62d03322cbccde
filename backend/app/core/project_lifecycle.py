"""Project Lifecycle — status state machine for a fundraising project.

Invariants:
    - pending -> verified -> completed; completed is terminal
    - under_review is entered only from pending or verified (on proof upload)
    - under_review exits to the status it was entered from; it exits to
      completed only when entered from verified and every milestone is complete
    - A pending project whose milestones are all complete stays pending;
      verification then takes it straight to completed
    - ALLOWED_TRANSITIONS is the single source of truth; anything else raises

Design Decisions:
    - Functions mutate the ProjectLike passed in; the shell commits
"""

from app.core.domain_types import ProjectStatus
from app.core.errors import InvalidStateTransitionError
from app.core.repository_protocols import ProjectLike


ALLOWED_TRANSITIONS: dict[ProjectStatus, frozenset[ProjectStatus]] = {
    ProjectStatus.PENDING: frozenset({
        ProjectStatus.VERIFIED, ProjectStatus.UNDER_REVIEW,
    }),
    ProjectStatus.VERIFIED: frozenset({
        ProjectStatus.UNDER_REVIEW, ProjectStatus.COMPLETED,
    }),
    ProjectStatus.UNDER_REVIEW: frozenset({
        ProjectStatus.PENDING, ProjectStatus.VERIFIED, ProjectStatus.COMPLETED,
    }),
    ProjectStatus.COMPLETED: frozenset(),
}


def can_transition(current: ProjectStatus, target: ProjectStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def transition(project: ProjectLike, target: ProjectStatus) -> None:
    """Move `project` to `target` or raise InvalidStateTransitionError."""
    current = ProjectStatus(project.status)
    if not can_transition(current, target):
        raise InvalidStateTransitionError(current.value, target.value)
    if target == ProjectStatus.UNDER_REVIEW:
        project.status_before_review = current.value
    elif current == ProjectStatus.UNDER_REVIEW:
        project.status_before_review = None
    project.status = target.value


def all_milestones_completed(project: ProjectLike) -> bool:
    return bool(project.milestones) and all(
        m.completed for m in project.milestones
    )


def close_review(project: ProjectLike) -> ProjectStatus:
    """Leave under_review after an accept/reject decision. Returns new status."""
    previous = ProjectStatus(
        project.status_before_review or ProjectStatus.VERIFIED.value,
    )
    if previous == ProjectStatus.VERIFIED and all_milestones_completed(project):
        target = ProjectStatus.COMPLETED
    else:
        target = previous
    transition(project, target)
    return target
