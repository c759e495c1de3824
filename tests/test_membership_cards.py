"""
Tests for membership cards: issue, renewal and expiry tracking.
"""
import pytest
from datetime import date, timedelta
from dateutil.relativedelta import relativedelta
from httpx import AsyncClient
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from partyroll.models.member import Member
from partyroll.models.membership_card import MembershipCard, CardStatus
from partyroll.services import membership_cards as card_service


async def _add_card(db_session: AsyncSession, member: Member, expiry: date, **overrides) -> MembershipCard:
    card = MembershipCard(
        member_id=member.id,
        expiry_date=expiry,
        qr_code=f"UPND-test-{member.membership_id}",
        **overrides
    )
    db_session.add(card)
    await db_session.flush()
    return card


class TestIssueCards:
    """Test issuing and editing cards."""

    @pytest.mark.asyncio
    async def test_issue_card(self, client: AsyncClient, auth_headers: dict, test_member: Member):
        response = await client.post(
            "/api/membership-cards",
            json={"member_id": test_member.id},
            headers=auth_headers
        )
        assert response.status_code == 201, response.text
        data = response.json()
        assert data["card_type"] == "Standard"
        assert data["status"] == "Active"
        assert data["issue_date"] == date.today().isoformat()
        assert data["expiry_date"] == (date.today() + relativedelta(years=2)).isoformat()
        assert data["qr_code"].startswith("UPND-")
        assert data["renewal_reminder_sent"] is False
        assert data["member"]["membership_id"] == test_member.membership_id

    @pytest.mark.asyncio
    async def test_one_card_per_member(self, client: AsyncClient, auth_headers: dict, test_member: Member):
        first = await client.post("/api/membership-cards", json={"member_id": test_member.id}, headers=auth_headers)
        assert first.status_code == 201

        second = await client.post(
            "/api/membership-cards",
            json={"member_id": test_member.id, "card_type": "Gold"},
            headers=auth_headers
        )
        assert second.status_code == 400
        assert second.json()["error"] == "Card already exists for this member"

    @pytest.mark.asyncio
    async def test_card_issued_between_check_and_insert(
        self, client: AsyncClient, auth_headers: dict, db_session: AsyncSession,
        test_member: Member, monkeypatch
    ):
        member_id = test_member.id
        await _add_card(db_session, test_member, date.today() + timedelta(days=365))

        async def no_card_yet(*args):
            return False

        monkeypatch.setattr(card_service, "_has_card", no_card_yet)

        response = await client.post(
            "/api/membership-cards", json={"member_id": member_id, "card_type": "Gold"}, headers=auth_headers
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Card already exists for this member"

        count = await db_session.scalar(select(func.count()).select_from(MembershipCard))
        assert count == 1

    @pytest.mark.asyncio
    async def test_issue_requires_admin(self, client: AsyncClient, staff_headers: dict, test_member: Member):
        response = await client.post("/api/membership-cards", json={"member_id": test_member.id}, headers=staff_headers)
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_member_card_lookup(self, client: AsyncClient, auth_headers: dict, test_member: Member):
        issued = await client.post("/api/membership-cards", json={"member_id": test_member.id}, headers=auth_headers)
        response = await client.get(f"/api/members/{test_member.id}/membership-card", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["id"] == issued.json()["id"]

    @pytest.mark.asyncio
    async def test_update_card(self, client: AsyncClient, auth_headers: dict, test_member: Member):
        issued = await client.post("/api/membership-cards", json={"member_id": test_member.id}, headers=auth_headers)
        card_id = issued.json()["id"]

        response = await client.put(
            f"/api/membership-cards/{card_id}",
            json={"card_type": "Platinum", "status": "Suspended"},
            headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json()["card_type"] == "Platinum"
        assert response.json()["status"] == "Suspended"

    @pytest.mark.asyncio
    async def test_null_status_rejected(self, client: AsyncClient, auth_headers: dict, test_member: Member):
        issued = await client.post("/api/membership-cards", json={"member_id": test_member.id}, headers=auth_headers)
        card_id = issued.json()["id"]

        response = await client.put(
            f"/api/membership-cards/{card_id}",
            json={"status": None},
            headers=auth_headers
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Validation failed"

        # expiry_date is nullable
        response = await client.put(
            f"/api/membership-cards/{card_id}",
            json={"expiry_date": None},
            headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json()["expiry_date"] is None
        assert response.json()["status"] == "Active"

    @pytest.mark.asyncio
    async def test_search_by_holder(self, client: AsyncClient, auth_headers: dict, member_factory):
        chanda = await member_factory(full_name="Chanda Mwila")
        natasha = await member_factory(full_name="Natasha Phiri")
        for member in (chanda, natasha):
            await client.post("/api/membership-cards", json={"member_id": member.id}, headers=auth_headers)

        response = await client.get("/api/membership-cards?search=natasha", headers=auth_headers)
        items = response.json()["items"]
        assert [c["member_id"] for c in items] == [natasha.id]

    @pytest.mark.asyncio
    async def test_delete_card(self, client: AsyncClient, auth_headers: dict, test_member: Member):
        issued = await client.post("/api/membership-cards", json={"member_id": test_member.id}, headers=auth_headers)
        card_id = issued.json()["id"]

        response = await client.delete(f"/api/membership-cards/{card_id}", headers=auth_headers)
        assert response.status_code == 200
        response = await client.get(f"/api/membership-cards/{card_id}", headers=auth_headers)
        assert response.status_code == 404


class TestRenewal:
    """Test renewal, reminders and expiry windows."""

    @pytest.mark.asyncio
    async def test_renew_resets_reminder(
        self, client: AsyncClient, auth_headers: dict, db_session: AsyncSession, test_member: Member
    ):
        card = await _add_card(
            db_session, test_member, date.today() - timedelta(days=3),
            status=CardStatus.EXPIRED, renewal_reminder_sent=True
        )

        response = await client.post(f"/api/membership-cards/{card.id}/renew", headers=auth_headers)
        assert response.status_code == 200, response.text
        data = response.json()
        assert data["status"] == "Active"
        assert data["expiry_date"] == (date.today() + relativedelta(years=2)).isoformat()
        assert data["renewal_reminder_sent"] is False
        assert data["last_renewed_at"] is not None

    @pytest.mark.asyncio
    async def test_send_reminder(
        self, client: AsyncClient, staff_headers: dict, db_session: AsyncSession, test_member: Member
    ):
        card = await _add_card(db_session, test_member, date.today() + timedelta(days=10))

        response = await client.patch(f"/api/membership-cards/{card.id}/send-reminder", headers=staff_headers)
        assert response.status_code == 200
        assert response.json()["renewal_reminder_sent"] is True
        assert response.json()["renewal_reminder_sent_at"] is not None

    @pytest.mark.asyncio
    async def test_expiring_window(
        self, client: AsyncClient, auth_headers: dict, db_session: AsyncSession, member_factory
    ):
        today = date.today()
        on_edge = await _add_card(db_session, await member_factory(), today + timedelta(days=30))
        lapsed = await _add_card(db_session, await member_factory(), today - timedelta(days=5))
        await _add_card(db_session, await member_factory(), today + timedelta(days=31))
        await _add_card(
            db_session, await member_factory(), today + timedelta(days=5), status=CardStatus.REVOKED
        )

        response = await client.get("/api/membership-cards/expiring", headers=auth_headers)
        assert response.status_code == 200
        assert [c["id"] for c in response.json()] == [lapsed.id, on_edge.id]

        response = await client.get("/api/membership-cards/expiring?days=60", headers=auth_headers)
        assert len(response.json()) == 3

        response = await client.get("/api/membership-cards?expiring_soon=true", headers=auth_headers)
        assert response.json()["totalItems"] == 2
