"""
Member actions: registration, review workflow and related records.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from sqlalchemy import select, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from partyroll.core.errors import ActionError, NotFoundError
from partyroll.models.member import Member, MemberStatus
from partyroll.models.event_rsvp import EventRsvp
from partyroll.models.disciplinary_case import DisciplinaryCase
from partyroll.models.membership_card import MembershipCard
from partyroll.schemas.member import MemberCreate, MemberUpdate
from partyroll.services.identifiers import unique_membership_id
from partyroll.services.listing import apply_sort, paginate

logger = logging.getLogger(__name__)


async def list_members(
    db: AsyncSession,
    *,
    page: int,
    per_page: int,
    sort: Optional[str] = None,
    status: Optional[MemberStatus] = None,
    province: Optional[str] = None,
    district: Optional[str] = None,
    constituency: Optional[str] = None,
    ward: Optional[str] = None,
    branch: Optional[str] = None,
    section: Optional[str] = None,
    membership_level: Optional[str] = None,
    search: Optional[str] = None,
) -> dict:
    query = select(Member)

    if status:
        query = query.where(Member.status == status)

    exact_filters = {
        Member.province: province,
        Member.district: district,
        Member.constituency: constituency,
        Member.ward: ward,
        Member.branch: branch,
        Member.section: section,
        Member.membership_level: membership_level,
    }
    for column, value in exact_filters.items():
        if value:
            query = query.where(column == value)

    if search:
        pattern = f"%{search}%"
        query = query.where(
            or_(
                Member.full_name.ilike(pattern),
                Member.membership_id.ilike(pattern),
                Member.nrc_number.ilike(pattern),
            )
        )

    query = apply_sort(query, Member, sort, Member.created.desc())
    return await paginate(db, query, page, per_page)


async def get_member(db: AsyncSession, member_id: str) -> Member:
    result = await db.execute(select(Member).where(Member.id == member_id))
    member = result.scalar_one_or_none()
    if member is None:
        raise NotFoundError("Member not found")
    return member


async def _ensure_nrc_free(db: AsyncSession, nrc_number: str, exclude_id: Optional[str] = None) -> None:
    query = select(Member.id).where(Member.nrc_number == nrc_number)
    if exclude_id:
        query = query.where(Member.id != exclude_id)
    result = await db.execute(query.limit(1))
    if result.scalar_one_or_none() is not None:
        raise ActionError("NRC number already registered")


@asynccontextmanager
async def _nrc_guard(db: AsyncSession, nrc_number: str):
    """
    Run the write in a savepoint so a concurrent registration of the same
    NRC number comes back as a 400 instead of aborting the request.
    """
    try:
        async with db.begin_nested():
            yield
            await db.flush()
    except IntegrityError as exc:
        logger.warning("NRC %s taken by a concurrent request", nrc_number)
        raise ActionError("NRC number already registered") from exc


async def register_member(db: AsyncSession, data: MemberCreate) -> Member:
    """
    Register a member from the public form.

    New members always start at Pending Section Review, whatever the payload
    says, and get a freshly generated membership id.
    """
    await _ensure_nrc_free(db, data.nrc_number)

    member = Member(
        membership_id=await unique_membership_id(db),
        status=MemberStatus.PENDING_SECTION_REVIEW,
        **data.model_dump(),
    )
    async with _nrc_guard(db, member.nrc_number):
        db.add(member)
    await db.refresh(member)

    logger.info("Registered member %s (%s)", member.membership_id, member.id)
    return member


async def update_member(db: AsyncSession, member_id: str, data: MemberUpdate) -> Member:
    member = await get_member(db, member_id)
    changes = data.model_dump(exclude_unset=True)

    if changes.get("nrc_number") and changes["nrc_number"] != member.nrc_number:
        await _ensure_nrc_free(db, changes["nrc_number"], exclude_id=member.id)

    async with _nrc_guard(db, changes.get("nrc_number", member.nrc_number)):
        for field, value in changes.items():
            setattr(member, field, value)
    await db.refresh(member)
    return member


async def set_member_status(db: AsyncSession, member_id: str, status: MemberStatus) -> Member:
    """Move a member to any workflow status. Transitions are not restricted."""
    member = await get_member(db, member_id)
    previous = member.status
    member.status = status
    await db.flush()
    await db.refresh(member)

    logger.info("Member %s status %s -> %s", member.membership_id, previous.value, status.value)
    return member


async def bulk_approve(db: AsyncSession, member_ids: list[str]) -> int:
    """Approve every listed member that exists. Returns how many were approved."""
    result = await db.execute(select(Member).where(Member.id.in_(member_ids)))
    members = result.scalars().all()
    for member in members:
        member.status = MemberStatus.APPROVED
    await db.flush()

    logger.info("Bulk approved %d of %d requested members", len(members), len(member_ids))
    return len(members)


async def delete_member(db: AsyncSession, member_id: str) -> None:
    """Delete a member. RSVPs, cases, card and recipient rows go with it."""
    member = await get_member(db, member_id)
    await db.delete(member)
    await db.flush()
    logger.info("Deleted member %s", member.membership_id)


async def member_rsvps(db: AsyncSession, member_id: str) -> list[EventRsvp]:
    await get_member(db, member_id)
    result = await db.execute(
        select(EventRsvp)
        .where(EventRsvp.member_id == member_id)
        .options(selectinload(EventRsvp.member))
        .order_by(EventRsvp.responded_at.desc())
    )
    return list(result.scalars().all())


async def member_cases(db: AsyncSession, member_id: str) -> list[DisciplinaryCase]:
    await get_member(db, member_id)
    result = await db.execute(
        select(DisciplinaryCase)
        .where(DisciplinaryCase.member_id == member_id)
        .options(selectinload(DisciplinaryCase.member))
        .order_by(DisciplinaryCase.date_reported.desc(), DisciplinaryCase.created.desc())
    )
    return list(result.scalars().all())


async def member_card(db: AsyncSession, member_id: str) -> MembershipCard:
    await get_member(db, member_id)
    result = await db.execute(
        select(MembershipCard)
        .where(MembershipCard.member_id == member_id)
        .options(selectinload(MembershipCard.member))
    )
    card = result.scalar_one_or_none()
    if card is None:
        raise NotFoundError("Membership card not found")
    return card
