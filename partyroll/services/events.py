"""
Event actions, including RSVPs and check-in.
"""
import logging
from datetime import date
from typing import Optional

from sqlalchemy import select, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from partyroll.core.errors import NotFoundError
from partyroll.models.base import utcnow
from partyroll.models.event import Event, EventStatus
from partyroll.models.event_rsvp import EventRsvp
from partyroll.schemas.event import EventCreate, EventUpdate, RsvpUpsert, RsvpUpdate
from partyroll.services.listing import apply_sort, paginate
from partyroll.services.members import get_member

logger = logging.getLogger(__name__)


async def list_events(
    db: AsyncSession,
    *,
    page: int,
    per_page: int,
    sort: Optional[str] = None,
    status: Optional[EventStatus] = None,
    event_type: Optional[str] = None,
    province: Optional[str] = None,
    district: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    search: Optional[str] = None,
) -> dict:
    query = select(Event)

    if status:
        query = query.where(Event.status == status)
    if event_type:
        query = query.where(Event.event_type == event_type)
    if province:
        query = query.where(Event.province == province)
    if district:
        query = query.where(Event.district == district)
    if start_date:
        query = query.where(Event.event_date >= start_date)
    if end_date:
        query = query.where(Event.event_date <= end_date)
    if search:
        pattern = f"%{search}%"
        query = query.where(
            or_(
                Event.event_name.ilike(pattern),
                Event.location.ilike(pattern),
                Event.organizer.ilike(pattern),
            )
        )

    query = apply_sort(query, Event, sort, Event.event_date.desc())
    return await paginate(db, query, page, per_page)


async def get_event(db: AsyncSession, event_id: str, with_rsvps: bool = False) -> Event:
    query = select(Event).where(Event.id == event_id)
    if with_rsvps:
        query = query.options(
            selectinload(Event.rsvps).selectinload(EventRsvp.member)
        ).execution_options(populate_existing=True)
    result = await db.execute(query)
    event = result.scalar_one_or_none()
    if event is None:
        raise NotFoundError("Event not found")
    return event


async def create_event(db: AsyncSession, data: EventCreate) -> Event:
    event = Event(**data.model_dump())
    db.add(event)
    await db.flush()
    await db.refresh(event)

    logger.info("Created event %s on %s", event.id, event.event_date)
    return event


async def update_event(db: AsyncSession, event_id: str, data: EventUpdate) -> Event:
    event = await get_event(db, event_id)
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(event, field, value)
    await db.flush()
    await db.refresh(event)
    return event


async def set_event_status(db: AsyncSession, event_id: str, status: EventStatus) -> Event:
    event = await get_event(db, event_id)
    event.status = status
    await db.flush()
    await db.refresh(event)

    logger.info("Event %s status -> %s", event.id, status.value)
    return event


async def delete_event(db: AsyncSession, event_id: str) -> None:
    event = await get_event(db, event_id)
    await db.delete(event)
    await db.flush()
    logger.info("Deleted event %s", event_id)


# ============================================================================
# RSVPs
# ============================================================================

async def _load_rsvp(db: AsyncSession, *criteria) -> Optional[EventRsvp]:
    result = await db.execute(
        select(EventRsvp)
        .where(*criteria)
        .options(selectinload(EventRsvp.member))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def list_event_rsvps(db: AsyncSession, event_id: str) -> list[EventRsvp]:
    await get_event(db, event_id)
    result = await db.execute(
        select(EventRsvp)
        .where(EventRsvp.event_id == event_id)
        .options(selectinload(EventRsvp.member))
        .order_by(EventRsvp.responded_at.desc())
    )
    return list(result.scalars().all())


async def upsert_rsvp(db: AsyncSession, event_id: str, data: RsvpUpsert) -> tuple[EventRsvp, bool]:
    """
    Record a member's response to an event.

    There is at most one RSVP per (event, member): a second submission
    replaces the response and notes of the first. Returns the RSVP and
    whether it was newly created.
    """
    await get_event(db, event_id)
    await get_member(db, data.member_id)

    criteria = (EventRsvp.event_id == event_id, EventRsvp.member_id == data.member_id)
    rsvp = await _load_rsvp(db, *criteria)
    created = rsvp is None
    if created:
        try:
            async with db.begin_nested():
                rsvp = EventRsvp(
                    event_id=event_id,
                    member_id=data.member_id,
                    response=data.response,
                    notes=data.notes,
                    responded_at=utcnow(),
                )
                db.add(rsvp)
                await db.flush()
        except IntegrityError:
            # A concurrent submission inserted the pair first; update that row
            created = False
            rsvp = await _load_rsvp(db, *criteria)

    if not created:
        rsvp.response = data.response
        rsvp.notes = data.notes
        rsvp.responded_at = utcnow()
        await db.flush()

    logger.info(
        "%s RSVP %s for member %s at event %s",
        "Created" if created else "Updated", data.response.value, data.member_id, event_id
    )
    return await get_rsvp(db, rsvp.id), created


async def get_rsvp(db: AsyncSession, rsvp_id: str) -> EventRsvp:
    rsvp = await _load_rsvp(db, EventRsvp.id == rsvp_id)
    if rsvp is None:
        raise NotFoundError("RSVP not found")
    return rsvp


async def update_rsvp(db: AsyncSession, rsvp_id: str, data: RsvpUpdate) -> EventRsvp:
    rsvp = await get_rsvp(db, rsvp_id)
    changes = data.model_dump(exclude_unset=True)

    if "response" in changes and changes["response"] is not None:
        rsvp.response = changes["response"]
        rsvp.responded_at = utcnow()
    if "notes" in changes:
        rsvp.notes = changes["notes"]
    if "checked_in" in changes and changes["checked_in"] is not None:
        if changes["checked_in"] and not rsvp.checked_in:
            rsvp.checked_in_at = utcnow()
        elif not changes["checked_in"]:
            rsvp.checked_in_at = None
        rsvp.checked_in = changes["checked_in"]

    await db.flush()
    return await get_rsvp(db, rsvp.id)


async def delete_rsvp(db: AsyncSession, rsvp_id: str) -> None:
    rsvp = await get_rsvp(db, rsvp_id)
    await db.delete(rsvp)
    await db.flush()


async def check_in(db: AsyncSession, event_id: str, member_id: str) -> EventRsvp:
    """Mark a member as present. Requires an RSVP; the first check-in time is kept."""
    rsvp = await _load_rsvp(db, EventRsvp.event_id == event_id, EventRsvp.member_id == member_id)
    if rsvp is None:
        raise NotFoundError("RSVP not found")

    if not rsvp.checked_in:
        rsvp.checked_in = True
        rsvp.checked_in_at = utcnow()
        await db.flush()
        logger.info("Checked in member %s at event %s", member_id, event_id)

    return await get_rsvp(db, rsvp.id)
