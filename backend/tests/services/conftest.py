"""Service test fixtures — async DB, FastAPI test client, seeded projects.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager patched so the readiness check sees the test engine
    - Each test gets its own ProjectLockRegistry

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (PostgreSQL-specific features not exercised here)
    - Concurrency tests build their own file-backed engine (file_session_factory)
      so each session owns a real connection
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import NullPool
from httpx import ASGITransport, AsyncClient

import app.models  # noqa: F401  (registers every table on Base.metadata)
from app.core.nft_tiers import DEFAULT_TIERS, build_tier_table
from app.db.base import Base
from app.infrastructure.database import get_db, DatabaseSessionManager
from app.infrastructure.project_locks import ProjectLockRegistry, get_project_locks
import app.infrastructure.database as db_module
from app.main import app
from app.services.handle_applications import ApplicationHandlers
from app.services.handle_projects import ProjectHandlers
from tests.services.factories import DEFAULT_PLAN, application_fields


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def locks():
    return ProjectLockRegistry(acquire_timeout=5.0)


@pytest.fixture
def tier_table():
    return build_tier_table(DEFAULT_TIERS)


@pytest.fixture
async def file_session_factory(tmp_path):
    """Session factory over a file database; one real connection per session."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'fund.db'}", poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
async def client(test_engine, test_session_factory, locks):
    """FastAPI test client with DB and lock dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_project_locks] = lambda: locks

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


async def _seed(session_factory, locks, *, verify: bool, plan=DEFAULT_PLAN, **fields):
    async with session_factory() as db:
        project = await ApplicationHandlers(db).submit(
            application_fields(**fields), plan,
        )
        if verify:
            project = await ProjectHandlers(db, locks).verify(project.id)
        return project


@pytest.fixture
async def pending_project(test_session_factory, locks):
    """A pending project with the default four-milestone plan (goal 100000)."""
    return await _seed(test_session_factory, locks, verify=False)


@pytest.fixture
async def verified_project(test_session_factory, locks):
    """A verified project with the default four-milestone plan (goal 100000)."""
    return await _seed(test_session_factory, locks, verify=True)


@pytest.fixture
def seed_project(test_session_factory, locks):
    """Factory for extra projects: await seed_project(verify=..., **fields)."""
    async def _make(verify: bool = True, plan=DEFAULT_PLAN, **fields):
        return await _seed(
            test_session_factory, locks, verify=verify, plan=plan, **fields,
        )
    return _make
