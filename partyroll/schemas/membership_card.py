"""
Pydantic schemas for membership cards.
"""
from typing import ClassVar, Optional
from datetime import datetime, date
from pydantic import BaseModel, Field, model_validator

from partyroll.models.membership_card import CardType, CardStatus
from partyroll.schemas.common import MemberSummary, reject_nulls


class CardIssue(BaseModel):
    """Issue a card. Expiry defaults to the configured validity period."""
    member_id: str = Field(..., min_length=1)
    card_type: CardType = CardType.STANDARD
    expiry_date: Optional[date] = None


class CardUpdate(BaseModel):
    card_type: Optional[CardType] = None
    expiry_date: Optional[date] = None
    status: Optional[CardStatus] = None

    NOT_NULL_FIELDS: ClassVar[tuple[str, ...]] = ("card_type", "status")

    @model_validator(mode="after")
    def required_columns_not_null(self) -> "CardUpdate":
        return reject_nulls(self, self.NOT_NULL_FIELDS)


class CardResponse(BaseModel):
    id: str
    member_id: str
    card_type: CardType
    issue_date: date
    expiry_date: Optional[date] = None
    qr_code: str
    status: CardStatus
    renewal_reminder_sent: bool
    renewal_reminder_sent_at: Optional[datetime] = None
    last_renewed_at: Optional[datetime] = None
    member: Optional[MemberSummary] = None
    created: datetime
    updated: datetime

    class Config:
        from_attributes = True
