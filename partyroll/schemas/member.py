"""
Pydantic schemas for Member endpoints.
"""
import re
from typing import Annotated, Any, ClassVar, Optional
from datetime import datetime, date
from decimal import Decimal
from pydantic import AfterValidator, BaseModel, Field, EmailStr, model_validator

from partyroll.models.member import MemberStatus, Gender
from partyroll.schemas.common import reject_nulls

NRC_PATTERN = re.compile(r"^\d{6}/\d{2}/\d$")
PHONE_PATTERN = re.compile(r"^\+260[0-9]{9}$|^[0-9]{10}$")
MINIMUM_AGE = 18

JURISDICTION_FIELDS = ("province", "district", "constituency", "ward", "branch", "section")


def age_on(born: date, today: date) -> int:
    return today.year - born.year - ((today.month, today.day) < (born.month, born.day))


def _check_nrc(value: str) -> str:
    if not NRC_PATTERN.match(value):
        raise ValueError("Invalid NRC format. Should be XXXXXX/XX/X")
    return value


def _check_phone(value: str) -> str:
    if not PHONE_PATTERN.match(value):
        raise ValueError("Invalid Zambian phone number")
    return value


def _check_adult(value: date) -> date:
    if age_on(value, date.today()) < MINIMUM_AGE:
        raise ValueError(f"Member must be at least {MINIMUM_AGE} years old")
    return value


NrcNumber = Annotated[str, AfterValidator(_check_nrc)]
PhoneNumber = Annotated[str, AfterValidator(_check_phone)]
BirthDate = Annotated[date, AfterValidator(_check_adult)]


def _flatten_payload(data: Any) -> Any:
    """
    Accept the nested ``jurisdiction`` object older clients post and treat
    blank e-mail as no e-mail.
    """
    if not isinstance(data, dict):
        return data
    data = dict(data)
    jurisdiction = data.pop("jurisdiction", None)
    if isinstance(jurisdiction, dict):
        for key in JURISDICTION_FIELDS:
            if key in jurisdiction and key not in data:
                data[key] = jurisdiction[key]
    if data.get("email") == "":
        data["email"] = None
    return data


class MemberCreate(BaseModel):
    """Public registration of a new member."""
    full_name: str = Field(..., min_length=2, max_length=200)
    nrc_number: NrcNumber
    date_of_birth: BirthDate
    gender: Gender = Gender.MALE
    phone: PhoneNumber
    email: Optional[EmailStr] = None
    residential_address: str = Field(..., min_length=5)
    latitude: Optional[Decimal] = None
    longitude: Optional[Decimal] = None
    province: str = Field(..., min_length=2, max_length=100)
    district: str = Field(..., min_length=2, max_length=100)
    constituency: str = Field(..., min_length=2, max_length=100)
    ward: str = Field(..., min_length=2, max_length=100)
    branch: str = Field(..., min_length=2, max_length=100)
    section: str = Field(..., min_length=2, max_length=100)
    education: Optional[str] = Field(None, max_length=200)
    occupation: Optional[str] = Field(None, max_length=200)
    skills: Optional[list[str]] = None
    membership_level: str = Field(default="General", max_length=50)
    party_role: Optional[str] = Field(None, max_length=200)
    party_commitment: Optional[str] = None
    profile_image: Optional[str] = Field(None, max_length=500)

    @model_validator(mode="before")
    @classmethod
    def flatten_jurisdiction(cls, data: Any) -> Any:
        return _flatten_payload(data)


class MemberUpdate(BaseModel):
    """Partial update of a member. Only fields that are set are written."""
    full_name: Optional[str] = Field(None, min_length=2, max_length=200)
    nrc_number: Optional[NrcNumber] = None
    date_of_birth: Optional[BirthDate] = None
    gender: Optional[Gender] = None
    phone: Optional[PhoneNumber] = None
    email: Optional[EmailStr] = None
    residential_address: Optional[str] = Field(None, min_length=5)
    latitude: Optional[Decimal] = None
    longitude: Optional[Decimal] = None
    province: Optional[str] = Field(None, min_length=2, max_length=100)
    district: Optional[str] = Field(None, min_length=2, max_length=100)
    constituency: Optional[str] = Field(None, min_length=2, max_length=100)
    ward: Optional[str] = Field(None, min_length=2, max_length=100)
    branch: Optional[str] = Field(None, min_length=2, max_length=100)
    section: Optional[str] = Field(None, min_length=2, max_length=100)
    education: Optional[str] = Field(None, max_length=200)
    occupation: Optional[str] = Field(None, max_length=200)
    skills: Optional[list[str]] = None
    membership_level: Optional[str] = Field(None, max_length=50)
    party_role: Optional[str] = Field(None, max_length=200)
    party_commitment: Optional[str] = None
    profile_image: Optional[str] = Field(None, max_length=500)
    notification_preferences: Optional[dict[str, bool]] = None
    status: Optional[MemberStatus] = None

    NOT_NULL_FIELDS: ClassVar[tuple[str, ...]] = (
        "full_name", "nrc_number", "date_of_birth", "gender", "phone", "residential_address",
        "province", "district", "constituency", "ward", "branch", "section",
        "membership_level", "status",
    )

    @model_validator(mode="before")
    @classmethod
    def flatten_jurisdiction(cls, data: Any) -> Any:
        return _flatten_payload(data)

    @model_validator(mode="after")
    def required_columns_not_null(self) -> "MemberUpdate":
        return reject_nulls(self, self.NOT_NULL_FIELDS)


class MemberStatusUpdate(BaseModel):
    """Move a member to another workflow status."""
    status: MemberStatus


class BulkApproveRequest(BaseModel):
    member_ids: list[str] = Field(..., min_length=1)


class BulkApproveResponse(BaseModel):
    message: str
    approved: int


class MemberResponse(BaseModel):
    """Member response."""
    id: str
    membership_id: str
    full_name: str
    nrc_number: str
    date_of_birth: date
    gender: Gender
    phone: str
    email: Optional[str] = None
    residential_address: str
    latitude: Optional[Decimal] = None
    longitude: Optional[Decimal] = None
    province: str
    district: str
    constituency: str
    ward: str
    branch: str
    section: str
    education: Optional[str] = None
    occupation: Optional[str] = None
    skills: Optional[list[str]] = None
    membership_level: str
    party_role: Optional[str] = None
    party_commitment: Optional[str] = None
    status: MemberStatus
    profile_image: Optional[str] = None
    notification_preferences: Optional[dict] = None
    registration_date: datetime
    created: datetime
    updated: datetime

    class Config:
        from_attributes = True


class MemberListResponse(BaseModel):
    """Paginated list of members."""
    page: int
    perPage: int
    totalItems: int
    totalPages: int
    items: list[MemberResponse]
