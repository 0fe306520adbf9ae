"""
Shared test fixtures.

Database-backed tests run against an in-memory SQLite database created from
the ORM metadata; service tests that only check control flow use
``mock_db``.
"""

from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core import rate_limit
from app.core.database import Base
from app.modules.academic_records import models as academic_records_models  # noqa: F401
from app.modules.applicant_profiles.models import ApplicantProfile, SchoolLevel
from app.modules.applications import repository as application_repository
from app.modules.applications.models import Application
from app.modules.documents import models as documents_models  # noqa: F401
from app.modules.notifications import models as notifications_models  # noqa: F401
from app.modules.users.models import User, UserRole


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.refresh = AsyncMock()
    db.get = AsyncMock()
    db.execute = AsyncMock()
    db.add = MagicMock()
    db.add_all = MagicMock()
    return db


@pytest.fixture(autouse=True)
def clear_rate_limits():
    """Reset the in-memory rate limit store between tests."""
    rate_limit._memory_store.clear()
    yield
    rate_limit._memory_store.clear()


@pytest_asyncio.fixture
async def session_factory():
    """Session factory bound to a fresh in-memory database."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


class Factory:
    """Creates committed rows for database-backed tests."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self._counter = 0

    def _next(self) -> int:
        self._counter += 1
        return self._counter

    async def user(
        self, role: UserRole = UserRole.APPLICANT, email: str | None = None, **kwargs
    ) -> User:
        n = self._next()
        user = User(
            email=email or f"user{n}@example.com",
            password_hash="not-a-real-hash",
            full_name=kwargs.pop("full_name", f"User {n}"),
            role=role,
            **kwargs,
        )
        self.session.add(user)
        await self.session.commit()
        await self.session.refresh(user)
        return user

    async def admin(self, **kwargs) -> User:
        return await self.user(role=UserRole.ADMIN, **kwargs)

    async def profile(
        self, user: User | None = None, school_level: SchoolLevel = SchoolLevel.JUNIOR_HIGH
    ) -> ApplicantProfile:
        user = user or await self.user()
        profile = ApplicantProfile(
            user_id=user.id,
            date_of_birth=date(2010, 5, 17),
            address="12 Harbour Road",
            phone_number="+23276000000",
            parent_full_name="Parent Name",
            parent_phone_number="+23276111111",
            parent_email="parent@example.com",
            school_level=school_level,
        )
        self.session.add(profile)
        await self.session.commit()
        await self.session.refresh(profile)
        return profile

    async def application(self, profile: ApplicantProfile | None = None) -> Application:
        profile = profile or await self.profile()
        application = Application(
            applicant_id=profile.id,
            application_number=application_repository.generate_application_number(profile.id)
            + f"-{self._next()}",
        )
        self.session.add(application)
        await self.session.commit()
        await self.session.refresh(application)
        return application


@pytest.fixture
def factory(db) -> Factory:
    return Factory(db)
