"""
Communication recipient model - one fan-out row per member per communication.
"""
from typing import Optional, TYPE_CHECKING
from datetime import datetime
from enum import Enum
from sqlalchemy import String, ForeignKey, DateTime, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from partyroll.models.base import BaseModel, enum_values

if TYPE_CHECKING:
    from partyroll.models.communication import Communication
    from partyroll.models.member import Member


class RecipientStatus(str, Enum):
    PENDING = "Pending"
    SENT = "Sent"
    DELIVERED = "Delivered"
    FAILED = "Failed"


class CommunicationRecipient(BaseModel):
    """Delivery record for one member. Delivery itself is simulated."""
    __tablename__ = "communication_recipients"
    __table_args__ = (
        UniqueConstraint("communication_id", "member_id", name="uq_communication_recipients_comm_member"),
    )

    communication_id: Mapped[str] = mapped_column(
        String(15),
        ForeignKey("communications.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    member_id: Mapped[str] = mapped_column(
        String(15),
        ForeignKey("members.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    status: Mapped[RecipientStatus] = mapped_column(
        SQLEnum(RecipientStatus, name="recipientstatus", values_callable=enum_values),
        default=RecipientStatus.PENDING,
        nullable=False
    )
    sent_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    delivered_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    error_message: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    communication: Mapped["Communication"] = relationship("Communication", back_populates="recipients")
    member: Mapped["Member"] = relationship("Member")

    def __repr__(self) -> str:
        return f"<CommunicationRecipient {self.member_id} ({self.status.value})>"
