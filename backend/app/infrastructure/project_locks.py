"""Per-Project Locks — mutual exclusion for writes against one project.

Invariants:
    - At most one write operation per project id runs at a time
    - Writes on different projects never wait on each other
    - Lock entries are dropped once no holder or waiter remains
    - Acquisition is bounded by a timeout; expiry raises ConcurrencyConflictError

Design Decisions:
    - In-process asyncio.Lock registry: single-process uvicorn, one worker.
      Multi-process deployments rely on the projects.version counter instead
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Hashable

from app.core.errors import ConcurrencyConflictError, ErrorContext

logger = logging.getLogger(__name__)

DEFAULT_ACQUIRE_TIMEOUT_SECONDS = 10.0


class ProjectLockRegistry:
    """Hands out one asyncio.Lock per project id."""

    def __init__(self, acquire_timeout: float = DEFAULT_ACQUIRE_TIMEOUT_SECONDS):
        self.acquire_timeout = acquire_timeout
        self._locks: dict[Hashable, asyncio.Lock] = {}
        self._holders: dict[Hashable, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    def is_locked(self, project_id: Hashable) -> bool:
        lock = self._locks.get(project_id)
        return lock is not None and lock.locked()

    @asynccontextmanager
    async def hold(self, project_id: Hashable) -> AsyncIterator[None]:
        lock = self._locks.setdefault(project_id, asyncio.Lock())
        self._holders[project_id] = self._holders.get(project_id, 0) + 1
        try:
            try:
                await asyncio.wait_for(lock.acquire(), self.acquire_timeout)
            except asyncio.TimeoutError:
                logger.warning(
                    "Timed out waiting for project lock",
                    extra={"project_id": project_id},
                )
                raise ConcurrencyConflictError(
                    "Project is busy; retry the operation",
                    ErrorContext(project_id=str(project_id)),
                )
            try:
                yield
            finally:
                lock.release()
        finally:
            self._holders[project_id] -= 1
            if self._holders[project_id] == 0:
                del self._holders[project_id]
                del self._locks[project_id]


# Singleton shared by all requests in this process
project_locks = ProjectLockRegistry()


def get_project_locks() -> ProjectLockRegistry:
    """FastAPI dependency for the per-project lock registry."""
    return project_locks
