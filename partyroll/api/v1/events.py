"""
Event endpoints, including the per-event RSVP and check-in routes.
"""
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from partyroll.api.deps import Pagination, pagination, parse_body
from partyroll.core.deps import get_current_user, require_admin
from partyroll.db.base import get_db
from partyroll.models.user import User
from partyroll.models.event import EventStatus
from partyroll.schemas.common import MessageResponse, PaginatedResponse
from partyroll.schemas.event import (
    EventCreate, EventUpdate, EventStatusUpdate, EventResponse, EventDetailResponse,
    RsvpUpsert, CheckInRequest, EventRsvpResponse
)
from partyroll.services import events as event_service

router = APIRouter()


@router.get("", response_model=PaginatedResponse[EventResponse])
async def list_events(
    paging: Pagination = Depends(pagination),
    sort: Optional[str] = None,
    status_filter: Optional[EventStatus] = Query(None, alias="status"),
    event_type: Optional[str] = None,
    province: Optional[str] = None,
    district: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    search: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """List events, most recent date first unless ``sort`` says otherwise."""
    return await event_service.list_events(
        db,
        page=paging.page,
        per_page=paging.per_page,
        sort=sort,
        status=status_filter,
        event_type=event_type,
        province=province,
        district=district,
        start_date=start_date,
        end_date=end_date,
        search=search,
    )


@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    event_data: EventCreate = Depends(parse_body(EventCreate)),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    return await event_service.create_event(db, event_data)


@router.get("/{event_id}", response_model=EventDetailResponse)
async def get_event(
    event_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get an event together with its RSVPs."""
    return await event_service.get_event(db, event_id, with_rsvps=True)


@router.put("/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: str,
    event_data: EventUpdate = Depends(parse_body(EventUpdate)),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    return await event_service.update_event(db, event_id, event_data)


@router.put("/{event_id}/status", response_model=EventResponse)
async def update_event_status(
    event_id: str,
    status_data: EventStatusUpdate = Depends(parse_body(EventStatusUpdate)),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    return await event_service.set_event_status(db, event_id, status_data.status)


@router.delete("/{event_id}", response_model=MessageResponse)
async def delete_event(
    event_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    await event_service.delete_event(db, event_id)
    return MessageResponse(message="Event deleted successfully")


# ============================================================================
# RSVPs
# ============================================================================

@router.get("/{event_id}/rsvps", response_model=list[EventRsvpResponse])
async def list_event_rsvps(
    event_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await event_service.list_event_rsvps(db, event_id)


@router.post("/{event_id}/rsvps", response_model=EventRsvpResponse, status_code=status.HTTP_201_CREATED)
async def upsert_rsvp(
    event_id: str,
    response: Response,
    rsvp_data: RsvpUpsert = Depends(parse_body(RsvpUpsert)),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Create or replace a member's RSVP.

    Returns 201 when the RSVP is new and 200 when an existing one was updated.
    """
    rsvp, created = await event_service.upsert_rsvp(db, event_id, rsvp_data)
    if not created:
        response.status_code = status.HTTP_200_OK
    return rsvp


@router.post("/{event_id}/check-in", response_model=EventRsvpResponse)
async def check_in(
    event_id: str,
    check_in_data: CheckInRequest = Depends(parse_body(CheckInRequest)),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Check a member in. The member must have an RSVP for the event."""
    return await event_service.check_in(db, event_id, check_in_data.member_id)
