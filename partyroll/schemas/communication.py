"""
Pydantic schemas for communications and their recipients.
"""
from typing import Any, ClassVar, Literal, Optional
from datetime import datetime
from pydantic import AliasChoices, BaseModel, Field, model_validator

from partyroll.models.communication import CommunicationType, CommunicationStatus
from partyroll.models.communication_recipient import RecipientStatus
from partyroll.models.member import MemberStatus
from partyroll.schemas.common import MemberSummary, reject_nulls

# Singular keys accepted from older clients, mapped to the list field they narrow
SINGULAR_FILTER_KEYS = {
    "province": "provinces",
    "district": "districts",
    "constituency": "constituencies",
    "ward": "wards",
    "branch": "branches",
    "section": "sections",
    "membership_level": "membership_levels",
    "status": "statuses",
}


class RecipientFilter(BaseModel):
    """
    Which members a communication goes to.

    Each non-empty list narrows the member set to rows whose column is one of
    the listed values. Missing or empty lists do not narrow anything, so an
    empty filter selects every member.
    """
    provinces: Optional[list[str]] = None
    districts: Optional[list[str]] = None
    constituencies: Optional[list[str]] = None
    wards: Optional[list[str]] = None
    branches: Optional[list[str]] = None
    sections: Optional[list[str]] = None
    membership_levels: Optional[list[str]] = Field(
        None, validation_alias=AliasChoices("membership_levels", "membershipLevels")
    )
    statuses: Optional[list[MemberStatus]] = None

    @model_validator(mode="before")
    @classmethod
    def accept_singular_keys(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for singular, plural in SINGULAR_FILTER_KEYS.items():
            if singular not in data:
                continue
            value = data.pop(singular)
            if plural in data or value in (None, ""):
                continue
            data[plural] = value if isinstance(value, list) else [value]
        return data

    def is_empty(self) -> bool:
        return not any(self.model_dump().values())


class CommunicationCreate(BaseModel):
    """Draft a communication. Nothing is sent until the send action."""
    type: CommunicationType
    subject: Optional[str] = Field(None, max_length=300)
    message: str = Field(..., min_length=10)
    recipient_filter: RecipientFilter = Field(default_factory=RecipientFilter)
    sent_by: Optional[str] = Field(None, max_length=200)


class CommunicationUpdate(BaseModel):
    type: Optional[CommunicationType] = None
    subject: Optional[str] = Field(None, max_length=300)
    message: Optional[str] = Field(None, min_length=10)
    recipient_filter: Optional[RecipientFilter] = None
    status: Optional[CommunicationStatus] = None

    NOT_NULL_FIELDS: ClassVar[tuple[str, ...]] = ("type", "message", "status")

    @model_validator(mode="after")
    def required_columns_not_null(self) -> "CommunicationUpdate":
        return reject_nulls(self, self.NOT_NULL_FIELDS)


class CommunicationAction(BaseModel):
    action: Literal["send"]


class CommunicationResponse(BaseModel):
    id: str
    type: CommunicationType
    subject: Optional[str] = None
    message: str
    recipient_filter: Optional[dict] = None
    recipients_count: int
    sent_count: int
    failed_count: int
    status: CommunicationStatus
    sent_by: Optional[str] = None
    sent_at: Optional[datetime] = None
    created: datetime
    updated: datetime

    class Config:
        from_attributes = True


class SendResponse(BaseModel):
    """Result of the send action."""
    recipients_count: int
    communication: CommunicationResponse


class RecipientResponse(BaseModel):
    id: str
    communication_id: str
    member_id: str
    status: RecipientStatus
    sent_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    error_message: Optional[str] = None
    member: Optional[MemberSummary] = None
    created: datetime

    class Config:
        from_attributes = True
