"""
Membership card model.
"""
from typing import Optional, TYPE_CHECKING
from datetime import date, datetime
from enum import Enum
from sqlalchemy import String, Boolean, Date, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from partyroll.models.base import BaseModel, enum_values

if TYPE_CHECKING:
    from partyroll.models.member import Member


class CardType(str, Enum):
    STANDARD = "Standard"
    GOLD = "Gold"
    PLATINUM = "Platinum"


class CardStatus(str, Enum):
    ACTIVE = "Active"
    EXPIRED = "Expired"
    SUSPENDED = "Suspended"
    REVOKED = "Revoked"


class MembershipCard(BaseModel):
    """Physical/digital card issued to a member. One card per member."""
    __tablename__ = "membership_cards"

    member_id: Mapped[str] = mapped_column(
        String(15),
        ForeignKey("members.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
        index=True
    )
    card_type: Mapped[CardType] = mapped_column(
        SQLEnum(CardType, name="cardtype", values_callable=enum_values),
        default=CardType.STANDARD,
        nullable=False
    )

    issue_date: Mapped[date] = mapped_column(Date, default=date.today, nullable=False)
    expiry_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True, index=True)

    # Token encoded in the card's QR code
    qr_code: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)

    status: Mapped[CardStatus] = mapped_column(
        SQLEnum(CardStatus, name="cardstatus", values_callable=enum_values),
        default=CardStatus.ACTIVE,
        nullable=False,
        index=True
    )

    # Renewal bookkeeping
    renewal_reminder_sent: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    renewal_reminder_sent_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    last_renewed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    member: Mapped["Member"] = relationship("Member", back_populates="card")

    def __repr__(self) -> str:
        return f"<MembershipCard {self.member_id} {self.card_type.value} exp={self.expiry_date}>"
