"""
Communication model - a broadcast message fanned out to members.
"""
from typing import Optional, TYPE_CHECKING
from datetime import datetime
from enum import Enum
from sqlalchemy import String, Text, Integer, DateTime, JSON, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from partyroll.models.base import BaseModel, enum_values

if TYPE_CHECKING:
    from partyroll.models.communication_recipient import CommunicationRecipient


class CommunicationType(str, Enum):
    """Channel the message goes out on."""
    SMS = "SMS"
    EMAIL = "Email"
    PUSH_NOTIFICATION = "Push Notification"
    ANNOUNCEMENT = "Announcement"


class CommunicationStatus(str, Enum):
    """Lifecycle: Draft -> Sending -> Sent."""
    DRAFT = "Draft"
    SCHEDULED = "Scheduled"
    SENDING = "Sending"
    SENT = "Sent"
    FAILED = "Failed"


class Communication(BaseModel):
    """Broadcast message with the member filter it is resolved against on send."""
    __tablename__ = "communications"

    type: Mapped[CommunicationType] = mapped_column(
        SQLEnum(CommunicationType, name="communicationtype", values_callable=enum_values),
        nullable=False,
        index=True
    )
    subject: Mapped[Optional[str]] = mapped_column(String(300), nullable=True)
    message: Mapped[str] = mapped_column(Text, nullable=False)

    # Serialized RecipientFilter; NULL or {} means every member
    recipient_filter: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)

    recipients_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    sent_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    failed_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    status: Mapped[CommunicationStatus] = mapped_column(
        SQLEnum(CommunicationStatus, name="communicationstatus", values_callable=enum_values),
        default=CommunicationStatus.DRAFT,
        nullable=False,
        index=True
    )
    sent_by: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    sent_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    recipients: Mapped[list["CommunicationRecipient"]] = relationship(
        "CommunicationRecipient",
        back_populates="communication",
        cascade="all, delete-orphan",
        passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<Communication {self.type.value} {self.subject!r} ({self.status.value})>"
