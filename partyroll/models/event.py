"""
Event model for rallies, meetings and other party gatherings.
"""
from typing import Optional, TYPE_CHECKING
from datetime import date, time
from decimal import Decimal
from enum import Enum
from sqlalchemy import String, Text, Date, Time, Integer, Numeric, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from partyroll.models.base import BaseModel, enum_values

if TYPE_CHECKING:
    from partyroll.models.event_rsvp import EventRsvp


class EventStatus(str, Enum):
    """Event lifecycle status."""
    PLANNED = "Planned"
    ACTIVE = "Active"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class Event(BaseModel):
    """Scheduled party event with location and attendance counters."""
    __tablename__ = "events"

    event_name: Mapped[str] = mapped_column(String(200), nullable=False)
    event_type: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Scheduling
    event_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    event_time: Mapped[Optional[time]] = mapped_column(Time, nullable=True)

    # Location
    location: Mapped[str] = mapped_column(String(300), nullable=False)
    latitude: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 8), nullable=True)
    longitude: Mapped[Optional[Decimal]] = mapped_column(Numeric(11, 8), nullable=True)
    province: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, index=True)
    district: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    organizer: Mapped[str] = mapped_column(String(200), nullable=False)
    expected_attendees: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    actual_attendees: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    status: Mapped[EventStatus] = mapped_column(
        SQLEnum(EventStatus, name="eventstatus", values_callable=enum_values),
        default=EventStatus.PLANNED,
        nullable=False,
        index=True
    )

    rsvps: Mapped[list["EventRsvp"]] = relationship(
        "EventRsvp",
        back_populates="event",
        cascade="all, delete-orphan",
        passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<Event {self.event_name} on {self.event_date} ({self.status.value})>"
