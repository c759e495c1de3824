"""
Pydantic schemas for Event and Event RSVP endpoints.
"""
from typing import ClassVar, Optional
from datetime import datetime, date, time
from decimal import Decimal
from pydantic import BaseModel, Field, model_validator

from partyroll.models.event import EventStatus
from partyroll.models.event_rsvp import RsvpResponse
from partyroll.schemas.common import MemberSummary, reject_nulls


class EventCreate(BaseModel):
    """Event creation request."""
    event_name: str = Field(..., min_length=3, max_length=200)
    event_type: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    event_date: date
    event_time: Optional[time] = None
    location: str = Field(..., min_length=3, max_length=300)
    latitude: Optional[Decimal] = None
    longitude: Optional[Decimal] = None
    province: Optional[str] = Field(None, max_length=100)
    district: Optional[str] = Field(None, max_length=100)
    organizer: str = Field(..., min_length=2, max_length=200)
    expected_attendees: int = Field(default=0, ge=0)
    actual_attendees: int = Field(default=0, ge=0)
    status: EventStatus = EventStatus.PLANNED


class EventUpdate(BaseModel):
    """Event update request. Only fields that are set are written."""
    event_name: Optional[str] = Field(None, min_length=3, max_length=200)
    event_type: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    event_date: Optional[date] = None
    event_time: Optional[time] = None
    location: Optional[str] = Field(None, min_length=3, max_length=300)
    latitude: Optional[Decimal] = None
    longitude: Optional[Decimal] = None
    province: Optional[str] = Field(None, max_length=100)
    district: Optional[str] = Field(None, max_length=100)
    organizer: Optional[str] = Field(None, min_length=2, max_length=200)
    expected_attendees: Optional[int] = Field(None, ge=0)
    actual_attendees: Optional[int] = Field(None, ge=0)
    status: Optional[EventStatus] = None

    NOT_NULL_FIELDS: ClassVar[tuple[str, ...]] = (
        "event_name", "event_type", "event_date", "location", "organizer",
        "expected_attendees", "actual_attendees", "status",
    )

    @model_validator(mode="after")
    def required_columns_not_null(self) -> "EventUpdate":
        return reject_nulls(self, self.NOT_NULL_FIELDS)


class EventStatusUpdate(BaseModel):
    status: EventStatus


class EventResponse(BaseModel):
    """Event response."""
    id: str
    event_name: str
    event_type: str
    description: Optional[str] = None
    event_date: date
    event_time: Optional[time] = None
    location: str
    latitude: Optional[Decimal] = None
    longitude: Optional[Decimal] = None
    province: Optional[str] = None
    district: Optional[str] = None
    organizer: str
    expected_attendees: int
    actual_attendees: int
    status: EventStatus
    created: datetime
    updated: datetime

    class Config:
        from_attributes = True


# ============================================================================
# RSVPs
# ============================================================================

class RsvpUpsert(BaseModel):
    """Record a member's response to an event, replacing any earlier one."""
    member_id: str = Field(..., min_length=1)
    response: RsvpResponse = RsvpResponse.MAYBE
    notes: Optional[str] = None


class RsvpUpdate(BaseModel):
    response: Optional[RsvpResponse] = None
    checked_in: Optional[bool] = None
    notes: Optional[str] = None


class CheckInRequest(BaseModel):
    member_id: str = Field(..., min_length=1)


class EventRsvpResponse(BaseModel):
    """RSVP response, with the responding member."""
    id: str
    event_id: str
    member_id: str
    response: RsvpResponse
    responded_at: datetime
    checked_in: bool
    checked_in_at: Optional[datetime] = None
    notes: Optional[str] = None
    member: Optional[MemberSummary] = None
    created: datetime
    updated: datetime

    class Config:
        from_attributes = True


class EventDetailResponse(EventResponse):
    """Event with its RSVPs."""
    rsvps: list[EventRsvpResponse] = []
