"""
Tests for member registration, the review workflow and related records.

Tests cover:
- Public registration (JSON and form bodies), generated membership ids
- NRC uniqueness (including a concurrent duplicate) and field validation
- Listing filters, search, sort and pagination
- Status changes, bulk approval and cascade delete
"""
import pytest
from datetime import date, timedelta
from httpx import AsyncClient
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from partyroll.models.member import Member, MemberStatus
from partyroll.models.event import Event
from partyroll.models.event_rsvp import EventRsvp
from partyroll.models.disciplinary_case import DisciplinaryCase
from partyroll.models.membership_card import MembershipCard
from partyroll.services import members as member_service


class TestRegistration:
    """Test public member registration."""

    @pytest.mark.asyncio
    async def test_register_member(self, client: AsyncClient, registration_data: dict):
        response = await client.post("/api/members", json=registration_data)
        assert response.status_code == 201, response.text
        data = response.json()
        assert data["full_name"] == "Mutale Banda"
        assert data["status"] == "Pending Section Review"
        assert data["membership_id"].startswith("UPND")
        assert len(data["membership_id"]) == 15
        assert data["membership_level"] == "General"
        assert data["notification_preferences"] == {"sms": True, "email": True, "push": True}
        assert data["skills"] == ["Mobilisation", "Public speaking"]

    @pytest.mark.asyncio
    async def test_status_in_payload_is_ignored(self, client: AsyncClient, registration_data: dict):
        registration_data["status"] = "Approved"
        response = await client.post("/api/members", json=registration_data)
        assert response.status_code == 201
        assert response.json()["status"] == "Pending Section Review"

    @pytest.mark.asyncio
    async def test_membership_ids_are_distinct(self, client: AsyncClient, registration_data: dict):
        ids = set()
        for i in range(5):
            body = dict(registration_data, nrc_number=f"20000{i}/10/1", phone=f"097700000{i}")
            response = await client.post("/api/members", json=body)
            assert response.status_code == 201, response.text
            ids.add(response.json()["membership_id"])
        assert len(ids) == 5
        assert all(ids)

    @pytest.mark.asyncio
    async def test_register_with_form_body(self, client: AsyncClient, registration_data: dict):
        form = {k: v for k, v in registration_data.items() if k != "skills"}
        form["skills"] = ["Logistics", "Driving"]
        response = await client.post("/api/members", data=form)
        assert response.status_code == 201, response.text
        assert response.json()["skills"] == ["Logistics", "Driving"]

    @pytest.mark.asyncio
    async def test_register_with_nested_jurisdiction(self, client: AsyncClient, registration_data: dict):
        jurisdiction = {
            key: registration_data.pop(key)
            for key in ("province", "district", "constituency", "ward", "branch", "section")
        }
        registration_data["jurisdiction"] = jurisdiction
        response = await client.post("/api/members", json=registration_data)
        assert response.status_code == 201, response.text
        assert response.json()["constituency"] == "Kabwata"

    @pytest.mark.asyncio
    async def test_duplicate_nrc_rejected(
        self, client: AsyncClient, registration_data: dict, db_session: AsyncSession
    ):
        first = await client.post("/api/members", json=registration_data)
        assert first.status_code == 201

        second = await client.post("/api/members", json=dict(registration_data, full_name="Someone Else"))
        assert second.status_code == 400
        assert second.json()["error"] == "NRC number already registered"

        count = await db_session.scalar(select(func.count()).select_from(Member))
        assert count == 1

    @pytest.mark.asyncio
    async def test_nrc_taken_between_check_and_insert(
        self, client: AsyncClient, registration_data: dict, db_session: AsyncSession,
        member_factory, monkeypatch
    ):
        await member_factory(nrc_number=registration_data["nrc_number"])

        async def nrc_looks_free(*args, **kwargs):
            return None

        monkeypatch.setattr(member_service, "_ensure_nrc_free", nrc_looks_free)

        response = await client.post("/api/members", json=registration_data)
        assert response.status_code == 400
        assert response.json()["error"] == "NRC number already registered"

        # The request's session is still usable after the failed insert
        response = await client.post("/api/members", json=dict(registration_data, nrc_number="654321/78/1"))
        assert response.status_code == 201, response.text

        count = await db_session.scalar(select(func.count()).select_from(Member))
        assert count == 2

    @pytest.mark.asyncio
    async def test_invalid_nrc_format(self, client: AsyncClient, registration_data: dict):
        response = await client.post("/api/members", json=dict(registration_data, nrc_number="12345/78/1"))
        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "Validation failed"
        assert data["details"][0]["loc"] == ["nrc_number"]

    @pytest.mark.asyncio
    async def test_invalid_phone(self, client: AsyncClient, registration_data: dict):
        response = await client.post("/api/members", json=dict(registration_data, phone="+1555123456"))
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_under_age_rejected(self, client: AsyncClient, registration_data: dict):
        born = date.today() - timedelta(days=17 * 365)
        response = await client.post("/api/members", json=dict(registration_data, date_of_birth=born.isoformat()))
        assert response.status_code == 400
        assert "18" in response.json()["details"][0]["msg"]

    @pytest.mark.asyncio
    async def test_blank_email_allowed(self, client: AsyncClient, registration_data: dict):
        response = await client.post("/api/members", json=dict(registration_data, email=""))
        assert response.status_code == 201
        assert response.json()["email"] is None


class TestMemberListing:
    """Test listing members."""

    @pytest.mark.asyncio
    async def test_requires_auth(self, client: AsyncClient):
        response = await client.get("/api/members")
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_list_empty(self, client: AsyncClient, auth_headers: dict):
        response = await client.get("/api/members", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["page"] == 1
        assert data["totalItems"] == 0
        assert data["totalPages"] == 1
        assert data["items"] == []

    @pytest.mark.asyncio
    async def test_filters_and_search(self, client: AsyncClient, staff_headers: dict, member_factory):
        await member_factory(full_name="Chanda Mwila", province="Lusaka")
        await member_factory(full_name="Natasha Phiri", province="Copperbelt", district="Ndola")
        await member_factory(full_name="Bwalya Tembo", province="Copperbelt", status=MemberStatus.APPROVED)

        response = await client.get("/api/members?province=Copperbelt", headers=staff_headers)
        assert response.json()["totalItems"] == 2

        response = await client.get("/api/members?province=Copperbelt&status=Approved", headers=staff_headers)
        items = response.json()["items"]
        assert [m["full_name"] for m in items] == ["Bwalya Tembo"]

        response = await client.get("/api/members?search=phiri", headers=staff_headers)
        assert [m["full_name"] for m in response.json()["items"]] == ["Natasha Phiri"]

    @pytest.mark.asyncio
    async def test_sort_and_pagination(self, client: AsyncClient, auth_headers: dict, member_factory):
        for name in ("Charlie", "Alice", "Bob"):
            await member_factory(full_name=name)

        response = await client.get("/api/members?sort=full_name&perPage=2", headers=auth_headers)
        data = response.json()
        assert data["totalItems"] == 3
        assert data["totalPages"] == 2
        assert [m["full_name"] for m in data["items"]] == ["Alice", "Bob"]

        response = await client.get("/api/members?sort=-full_name&perPage=2&page=2", headers=auth_headers)
        assert [m["full_name"] for m in response.json()["items"]] == ["Alice"]

    @pytest.mark.asyncio
    async def test_invalid_status_filter(self, client: AsyncClient, auth_headers: dict):
        response = await client.get("/api/members?status=Bogus", headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["error"] == "Validation failed"


class TestMemberUpdates:
    """Test get, update, status and delete."""

    @pytest.mark.asyncio
    async def test_get_member(self, client: AsyncClient, staff_headers: dict, test_member: Member):
        response = await client.get(f"/api/members/{test_member.id}", headers=staff_headers)
        assert response.status_code == 200
        assert response.json()["membership_id"] == test_member.membership_id

    @pytest.mark.asyncio
    async def test_get_member_not_found(self, client: AsyncClient, staff_headers: dict):
        response = await client.get("/api/members/nonexistent123", headers=staff_headers)
        assert response.status_code == 404
        assert response.json() == {"error": "Member not found"}

    @pytest.mark.asyncio
    async def test_partial_update(self, client: AsyncClient, staff_headers: dict, test_member: Member):
        response = await client.put(
            f"/api/members/{test_member.id}",
            json={"occupation": "Teacher", "ward": "Ward 9"},
            headers=staff_headers
        )
        assert response.status_code == 200, response.text
        data = response.json()
        assert data["occupation"] == "Teacher"
        assert data["ward"] == "Ward 9"
        assert data["full_name"] == "Chanda Mwila"

    @pytest.mark.asyncio
    async def test_null_required_field_rejected(
        self, client: AsyncClient, staff_headers: dict, test_member: Member
    ):
        response = await client.put(
            f"/api/members/{test_member.id}",
            json={"full_name": None, "occupation": None},
            headers=staff_headers
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Validation failed"

        # Nullable columns may still be cleared
        response = await client.put(
            f"/api/members/{test_member.id}",
            json={"occupation": None},
            headers=staff_headers
        )
        assert response.status_code == 200
        assert response.json()["occupation"] is None
        assert response.json()["full_name"] == "Chanda Mwila"

    @pytest.mark.asyncio
    async def test_update_to_taken_nrc(self, client: AsyncClient, staff_headers: dict, member_factory):
        first = await member_factory()
        second = await member_factory()
        response = await client.put(
            f"/api/members/{second.id}",
            json={"nrc_number": first.nrc_number},
            headers=staff_headers
        )
        assert response.status_code == 400
        assert response.json()["error"] == "NRC number already registered"

    @pytest.mark.asyncio
    async def test_set_status(self, client: AsyncClient, staff_headers: dict, test_member: Member):
        response = await client.put(
            f"/api/members/{test_member.id}/status",
            json={"status": "Pending Ward Review"},
            headers=staff_headers
        )
        assert response.status_code == 200
        assert response.json()["status"] == "Pending Ward Review"

        # Any status may follow any other
        response = await client.put(
            f"/api/members/{test_member.id}/status",
            json={"status": "Pending Section Review"},
            headers=staff_headers
        )
        assert response.json()["status"] == "Pending Section Review"

    @pytest.mark.asyncio
    async def test_bulk_approve(self, client: AsyncClient, auth_headers: dict, member_factory):
        members = [await member_factory() for _ in range(3)]
        response = await client.post(
            "/api/members/bulk-approve",
            json={"member_ids": [members[0].id, members[1].id, "missing0000000"]},
            headers=auth_headers
        )
        assert response.status_code == 200, response.text
        assert response.json() == {"message": "2 members approved", "approved": 2}

        response = await client.get("/api/members?status=Approved", headers=auth_headers)
        assert response.json()["totalItems"] == 2

    @pytest.mark.asyncio
    async def test_bulk_approve_requires_admin(self, client: AsyncClient, staff_headers: dict, test_member: Member):
        response = await client.post(
            "/api/members/bulk-approve",
            json={"member_ids": [test_member.id]},
            headers=staff_headers
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_bulk_approve_empty_list(self, client: AsyncClient, auth_headers: dict):
        response = await client.post("/api/members/bulk-approve", json={"member_ids": []}, headers=auth_headers)
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_delete_cascades(
        self, client: AsyncClient, auth_headers: dict, db_session: AsyncSession, test_member: Member, test_event: Event
    ):
        db_session.add(EventRsvp(event_id=test_event.id, member_id=test_member.id))
        db_session.add(DisciplinaryCase(
            case_number="DC2026000001",
            member_id=test_member.id,
            violation_type="Misconduct",
            description="Disrupted a branch meeting",
            reporting_officer="Branch Chair",
        ))
        db_session.add(MembershipCard(member_id=test_member.id, qr_code="UPND-1-abc"))
        await db_session.flush()

        response = await client.delete(f"/api/members/{test_member.id}", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["message"] == "Member deleted successfully"

        for model in (EventRsvp, DisciplinaryCase, MembershipCard):
            count = await db_session.scalar(select(func.count()).select_from(model))
            assert count == 0

    @pytest.mark.asyncio
    async def test_delete_requires_admin(self, client: AsyncClient, staff_headers: dict, test_member: Member):
        response = await client.delete(f"/api/members/{test_member.id}", headers=staff_headers)
        assert response.status_code == 403


class TestMemberRelated:
    """Test a member's RSVPs, cases and card."""

    @pytest.mark.asyncio
    async def test_related_records(
        self, client: AsyncClient, auth_headers: dict, db_session: AsyncSession, test_member: Member, test_event: Event
    ):
        db_session.add(EventRsvp(event_id=test_event.id, member_id=test_member.id))
        await db_session.flush()

        response = await client.get(f"/api/members/{test_member.id}/rsvps", headers=auth_headers)
        assert response.status_code == 200
        rsvps = response.json()
        assert len(rsvps) == 1
        assert rsvps[0]["event_id"] == test_event.id
        assert rsvps[0]["response"] == "Maybe"

        response = await client.get(f"/api/members/{test_member.id}/disciplinary-cases", headers=auth_headers)
        assert response.json() == []

        response = await client.get(f"/api/members/{test_member.id}/membership-card", headers=auth_headers)
        assert response.status_code == 404
