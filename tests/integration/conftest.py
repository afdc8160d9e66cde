"""
Fixtures for integration tests.

Services run against a real SQL engine: an in-memory SQLite database reached
through aiosqlite, with the schema built from the ORM metadata. Every test gets
a fresh database.
"""

from uuid import uuid4

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from medclaims.core.enums import UserRole
from medclaims.models import Base, User


@pytest_asyncio.fixture
async def engine():
    # One shared connection keeps the in-memory database alive for the whole test
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    """A session configured like the application's."""
    session_maker = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )
    async with session_maker() as session:
        yield session


@pytest.fixture
def add_user(db_session):
    """Persist a user with the given role."""

    async def _add(role: UserRole = UserRole.PATIENT, **overrides) -> User:
        values = {
            "email": f"{role.value.lower()}-{uuid4().hex[:8]}@demo.com",
            "name": f"Demo {role.value.title()}",
            "role": role,
            "phone": "+1-555-0100",
            "address": "1 Demo Street",
            "is_active": True,
        }
        values.update(overrides)
        user = User(**values)
        db_session.add(user)
        await db_session.flush()
        return user

    return _add
