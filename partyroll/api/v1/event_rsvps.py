"""
RSVP endpoints addressed by RSVP id.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from partyroll.api.deps import parse_body
from partyroll.core.deps import get_current_user
from partyroll.db.base import get_db
from partyroll.models.user import User
from partyroll.schemas.common import MessageResponse
from partyroll.schemas.event import RsvpUpdate, EventRsvpResponse
from partyroll.services import events as event_service

router = APIRouter()


@router.get("/{rsvp_id}", response_model=EventRsvpResponse)
async def get_rsvp(
    rsvp_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await event_service.get_rsvp(db, rsvp_id)


@router.put("/{rsvp_id}", response_model=EventRsvpResponse)
async def update_rsvp(
    rsvp_id: str,
    rsvp_data: RsvpUpdate = Depends(parse_body(RsvpUpdate)),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Change the response or notes, or set/clear the check-in."""
    return await event_service.update_rsvp(db, rsvp_id, rsvp_data)


@router.delete("/{rsvp_id}", response_model=MessageResponse)
async def delete_rsvp(
    rsvp_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    await event_service.delete_rsvp(db, rsvp_id)
    return MessageResponse(message="RSVP deleted successfully")
