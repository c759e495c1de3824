"""
Tests for the per-request unit of work in ``get_db``.

These run without the shared-session override from conftest: each request
gets its own session from ``async_session_maker`` and either commits as a
whole or rolls back as a whole. Assertions read through a fresh session.
"""
import pytest
import pytest_asyncio
from datetime import date
from typing import AsyncGenerator
from httpx import AsyncClient, ASGITransport
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from partyroll.main import app
from partyroll.db import base as db_base
from partyroll.core.errors import ActionError
from partyroll.core.security import get_password_hash, create_access_token
from partyroll.models.user import User, StaffRole
from partyroll.models.member import Member, MemberStatus, Gender
from partyroll.models.communication import Communication, CommunicationStatus
from partyroll.models.communication_recipient import CommunicationRecipient
from partyroll.services.delivery import delivery_service


@pytest_asyncio.fixture
async def session_maker(db_engine, monkeypatch) -> async_sessionmaker:
    """Point the real ``get_db`` at the test database."""
    maker = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    monkeypatch.setattr(db_base, "async_session_maker", maker)
    return maker


@pytest_asyncio.fixture
async def committing_client(session_maker) -> AsyncGenerator[AsyncClient, None]:
    app.dependency_overrides.clear()
    # Unhandled errors come back as the 500 response instead of being re-raised
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def admin_headers(session_maker) -> dict:
    async with session_maker() as session:
        admin = User(
            email="admin@example.com",
            name="National Admin User",
            password_hash=get_password_hash("TestPass123"),
            role=StaffRole.NATIONAL_ADMIN,
            is_active=True,
        )
        session.add(admin)
        for n in range(1, 4):
            session.add(Member(
                membership_id=f"UPND{n:011d}",
                full_name=f"Member {n}",
                nrc_number=f"{n:06d}/11/1",
                date_of_birth=date(1990, 1, 1),
                gender=Gender.MALE,
                phone=f"+260977{n:06d}",
                residential_address=f"Plot {n}, Cairo Road",
                province="Lusaka",
                district="Lusaka",
                constituency="Lusaka Central",
                ward="Ward 1",
                branch="Central Branch",
                section="Section A",
                status=MemberStatus.APPROVED,
            ))
        await session.commit()
        return {"Authorization": f"Bearer {create_access_token(subject=admin.id)}"}


async def _create_draft(client: AsyncClient, headers: dict) -> str:
    response = await client.post(
        "/api/communications",
        json={"type": "SMS", "subject": "Rally", "message": "Join us at Heroes Stadium on Saturday."},
        headers=headers
    )
    assert response.status_code == 201, response.text
    return response.json()["id"]


async def _send_state(session_maker: async_sessionmaker, communication_id: str) -> tuple:
    async with session_maker() as session:
        recipients = await session.scalar(select(func.count()).select_from(CommunicationRecipient))
        communication = await session.get(Communication, communication_id)
        return recipients, communication.status, communication.sent_count


def _fail_on_second_member(monkeypatch, error: Exception) -> None:
    real_deliver = delivery_service.deliver
    calls = {"n": 0}

    def deliver(*args, **kwargs):
        calls["n"] += 1
        if calls["n"] == 2:
            raise error
        return real_deliver(*args, **kwargs)

    monkeypatch.setattr(delivery_service, "deliver", deliver)


class TestRequestTransaction:
    """Test that each request commits or rolls back as one unit."""

    @pytest.mark.asyncio
    async def test_successful_send_is_committed(
        self, committing_client: AsyncClient, admin_headers: dict, session_maker
    ):
        communication_id = await _create_draft(committing_client, admin_headers)

        response = await committing_client.patch(
            f"/api/communications/{communication_id}", json={"action": "send"}, headers=admin_headers
        )
        assert response.status_code == 200, response.text

        recipients, status, sent_count = await _send_state(session_maker, communication_id)
        assert recipients == 3
        assert status == CommunicationStatus.SENT
        assert sent_count == 3

    @pytest.mark.asyncio
    async def test_failure_mid_send_rolls_back(
        self, committing_client: AsyncClient, admin_headers: dict, session_maker, monkeypatch
    ):
        communication_id = await _create_draft(committing_client, admin_headers)
        _fail_on_second_member(monkeypatch, RuntimeError("gateway down"))

        response = await committing_client.patch(
            f"/api/communications/{communication_id}", json={"action": "send"}, headers=admin_headers
        )
        assert response.status_code == 500

        recipients, status, sent_count = await _send_state(session_maker, communication_id)
        assert recipients == 0
        assert status == CommunicationStatus.DRAFT
        assert sent_count == 0

        # Nothing was left half-sent, so a retry goes out to everyone
        response = await committing_client.patch(
            f"/api/communications/{communication_id}", json={"action": "send"}, headers=admin_headers
        )
        assert response.status_code == 200, response.text
        assert response.json()["recipients_count"] == 3

    @pytest.mark.asyncio
    async def test_rejected_request_leaves_no_partial_writes(
        self, committing_client: AsyncClient, admin_headers: dict, session_maker, monkeypatch
    ):
        communication_id = await _create_draft(committing_client, admin_headers)
        _fail_on_second_member(monkeypatch, ActionError("Message rejected by the gateway"))

        response = await committing_client.patch(
            f"/api/communications/{communication_id}", json={"action": "send"}, headers=admin_headers
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Message rejected by the gateway"

        recipients, status, sent_count = await _send_state(session_maker, communication_id)
        assert recipients == 0
        assert status == CommunicationStatus.DRAFT
        assert sent_count == 0

    @pytest.mark.asyncio
    async def test_rejected_registration_writes_nothing(
        self, committing_client: AsyncClient, session_maker, registration_data: dict
    ):
        response = await committing_client.post("/api/members", json=registration_data)
        assert response.status_code == 201, response.text

        response = await committing_client.post(
            "/api/members", json=dict(registration_data, full_name="Someone Else")
        )
        assert response.status_code == 400

        async with session_maker() as session:
            names = (await session.scalars(select(Member.full_name))).all()
        assert names == ["Mutale Banda"]
