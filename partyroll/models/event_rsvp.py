"""
Event RSVP model.
"""
from typing import Optional, TYPE_CHECKING
from datetime import datetime
from enum import Enum
from sqlalchemy import String, Text, Boolean, ForeignKey, DateTime, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from partyroll.models.base import BaseModel, enum_values, utcnow

if TYPE_CHECKING:
    from partyroll.models.event import Event
    from partyroll.models.member import Member


class RsvpResponse(str, Enum):
    """A member's answer to an event invitation."""
    ATTENDING = "Attending"
    NOT_ATTENDING = "Not Attending"
    MAYBE = "Maybe"


class EventRsvp(BaseModel):
    """One member's response to one event. At most one row per (event, member)."""
    __tablename__ = "event_rsvps"
    __table_args__ = (
        UniqueConstraint("event_id", "member_id", name="uq_event_rsvps_event_member"),
    )

    event_id: Mapped[str] = mapped_column(
        String(15),
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    member_id: Mapped[str] = mapped_column(
        String(15),
        ForeignKey("members.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    response: Mapped[RsvpResponse] = mapped_column(
        SQLEnum(RsvpResponse, name="rsvpresponse", values_callable=enum_values),
        default=RsvpResponse.MAYBE,
        nullable=False
    )
    responded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    # Check-in is tracked independently of the response
    checked_in: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    checked_in_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    event: Mapped["Event"] = relationship("Event", back_populates="rsvps")
    member: Mapped["Member"] = relationship("Member", back_populates="rsvps")

    def __repr__(self) -> str:
        return f"<EventRsvp {self.member_id} -> {self.event_id} ({self.response.value})>"
