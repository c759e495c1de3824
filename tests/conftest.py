"""
Test configuration and fixtures for PartyRoll tests.
"""
import os

# Must be set before partyroll.core.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")

import pytest_asyncio
from datetime import date
from typing import AsyncGenerator, Callable
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool

from partyroll.main import app
from partyroll.db.base import Base, get_db, enable_sqlite_foreign_keys
from partyroll.core.security import get_password_hash, create_access_token
from partyroll.models.user import User, StaffRole
from partyroll.models.member import Member, MemberStatus, Gender
from partyroll.models.event import Event, EventStatus


# Use a file-based SQLite DB to avoid :memory: multiple-connection issues
# with SQLAlchemy + aiosqlite (each new connection would see an empty DB).
TEST_DATABASE_URL = "sqlite+aiosqlite:///./test.db"


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=NullPool,
    )
    enable_sqlite_foreign_keys(engine.sync_engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()
    # Clean up test database file
    try:
        os.remove("./test.db")
    except OSError:
        pass


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session_maker = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False
    )
    async with async_session_maker() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with database session override."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def _create_user(db_session: AsyncSession, email: str, name: str, role: StaffRole) -> User:
    user = User(
        email=email,
        name=name,
        password_hash=get_password_hash("TestPass123"),
        role=role,
        jurisdiction="National",
        is_active=True,
    )
    db_session.add(user)
    await db_session.flush()
    return user


@pytest_asyncio.fixture
async def admin_user(db_session: AsyncSession) -> User:
    """A National Admin."""
    return await _create_user(db_session, "admin@example.com", "National Admin User", StaffRole.NATIONAL_ADMIN)


@pytest_asyncio.fixture
async def provincial_admin(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "provincial@example.com", "Provincial Admin User", StaffRole.PROVINCIAL_ADMIN)


@pytest_asyncio.fixture
async def staff_user(db_session: AsyncSession) -> User:
    """A signed-in account without an admin role."""
    return await _create_user(db_session, "staff@example.com", "Staff User", StaffRole.MEMBER)


@pytest_asyncio.fixture
async def auth_headers(admin_user: User) -> dict:
    """Authorization headers for the National Admin."""
    return {"Authorization": f"Bearer {create_access_token(subject=admin_user.id)}"}


@pytest_asyncio.fixture
async def provincial_headers(provincial_admin: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(subject=provincial_admin.id)}"}


@pytest_asyncio.fixture
async def staff_headers(staff_user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(subject=staff_user.id)}"}


@pytest_asyncio.fixture
async def member_factory(db_session: AsyncSession) -> Callable:
    """Insert members directly. Each call gets a distinct NRC and membership id."""
    counter = {"n": 0}

    async def make(**overrides) -> Member:
        counter["n"] += 1
        n = counter["n"]
        values = dict(
            membership_id=f"UPND{n:011d}",
            full_name=f"Member {n}",
            nrc_number=f"{n:06d}/11/1",
            date_of_birth=date(1990, 1, 1),
            gender=Gender.FEMALE,
            phone=f"+260977{n:06d}",
            residential_address=f"Plot {n}, Cairo Road",
            province="Lusaka",
            district="Lusaka",
            constituency="Lusaka Central",
            ward="Ward 1",
            branch="Central Branch",
            section="Section A",
            status=MemberStatus.PENDING_SECTION_REVIEW,
        )
        values.update(overrides)
        member = Member(**values)
        db_session.add(member)
        await db_session.flush()
        return member

    return make


@pytest_asyncio.fixture
async def test_member(member_factory) -> Member:
    """A pending member in Lusaka."""
    return await member_factory(full_name="Chanda Mwila")


@pytest_asyncio.fixture
async def test_event(db_session: AsyncSession) -> Event:
    """A planned rally."""
    event = Event(
        event_name="Lusaka Youth Rally",
        event_type="Rally",
        event_date=date(2099, 6, 1),
        location="Heroes Stadium",
        province="Lusaka",
        organizer="Youth Wing",
        expected_attendees=500,
        status=EventStatus.PLANNED,
    )
    db_session.add(event)
    await db_session.flush()
    return event


@pytest_asyncio.fixture
async def registration_data() -> dict:
    """A valid public registration body."""
    return {
        "full_name": "Mutale Banda",
        "nrc_number": "123456/78/1",
        "date_of_birth": "1992-04-15",
        "gender": "Male",
        "phone": "+260977123456",
        "email": "mutale@example.com",
        "residential_address": "Plot 12, Kabwata",
        "province": "Lusaka",
        "district": "Lusaka",
        "constituency": "Kabwata",
        "ward": "Ward 7",
        "branch": "Kabwata Branch",
        "section": "Section B",
        "skills": ["Mobilisation", "Public speaking"],
    }
