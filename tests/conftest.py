"""
Alumni Portal - Test Configuration and Fixtures
"""
import os
from dataclasses import dataclass
from typing import AsyncGenerator, Optional

import pytest
from faker import Faker
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

# Set testing environment
os.environ["ENVIRONMENT"] = "test"
os.environ["DEBUG"] = "false"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test_alumni.db"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["SERVICE_ROLE_KEY"] = "test-service-key"
os.environ["EVENT_PROMOTE_THRESHOLD"] = "5"

from app.database import Base, create_engine_from_url, create_session_factory, get_db, get_session_factory
from app.main import app
from app.models.profile import Profile, UserRole
from app.models.user import User
from app.policies import Caller
from app.routers.auth import create_access_token

fake = Faker()


@dataclass
class Member:
    """A signed-up user with a profile, detached from any session."""
    user: User
    profile: Profile

    @property
    def id(self) -> int:
        return self.user.id

    @property
    def caller(self) -> Caller:
        return Caller.for_profile(self.user.id, self.profile)

    @property
    def headers(self) -> dict:
        token = create_access_token({"sub": str(self.user.id)})
        return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """A fresh SQLite database per test."""
    test_engine = create_engine_from_url(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine

    await test_engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(engine)


@pytest.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database overrides"""
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def make_member(session_factory):
    """Factory: create a user + profile in its own session."""
    async def _make(
        role: UserRole = UserRole.ALUMNI,
        verified: bool = False,
        email: Optional[str] = None,
        **profile_fields,
    ) -> Member:
        async with session_factory() as session:
            user = User(
                email=email or fake.unique.email(),
                full_name=profile_fields.pop("full_name", None) or fake.name(),
                oauth_provider="google",
                oauth_id=fake.uuid4(),
            )
            session.add(user)
            await session.flush()

            profile = Profile(
                user_id=user.id,
                full_name=user.full_name,
                contact_email=user.email,
                role=role,
                verified=verified,
                **profile_fields,
            )
            session.add(profile)
            await session.commit()
            await session.refresh(user)
            await session.refresh(profile)
            return Member(user=user, profile=profile)

    return _make


@pytest.fixture
async def alumnus(make_member) -> Member:
    return await make_member()


@pytest.fixture
async def admin(make_member) -> Member:
    return await make_member(role=UserRole.ADMIN, verified=True)


@pytest.fixture
def service_headers() -> dict:
    return {"Authorization": "Bearer test-service-key"}
