"""
Member model for party membership tracking.

Members register through the public portal and move through a review
workflow (section, branch, ward, district, provincial) towards approval.
Status changes are not constrained: any status may be set to any other.
"""
from typing import Optional, TYPE_CHECKING
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from sqlalchemy import String, Text, Date, DateTime, Numeric, JSON, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from partyroll.models.base import BaseModel, enum_values, utcnow

if TYPE_CHECKING:
    from partyroll.models.event_rsvp import EventRsvp
    from partyroll.models.disciplinary_case import DisciplinaryCase
    from partyroll.models.membership_card import MembershipCard


class MemberStatus(str, Enum):
    """Position of a member in the approval workflow."""
    PENDING_SECTION_REVIEW = "Pending Section Review"
    PENDING_BRANCH_REVIEW = "Pending Branch Review"
    PENDING_WARD_REVIEW = "Pending Ward Review"
    PENDING_DISTRICT_REVIEW = "Pending District Review"
    PENDING_PROVINCIAL_REVIEW = "Pending Provincial Review"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    SUSPENDED = "Suspended"
    EXPELLED = "Expelled"

    @property
    def is_pending(self) -> bool:
        return self.value.startswith("Pending")


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


def default_notification_preferences() -> dict:
    return {"sms": True, "email": True, "push": True}


class Member(BaseModel):
    """
    Party member.

    Carries identity, contact details and the jurisdiction hierarchy
    (province > district > constituency > ward > branch > section) that
    communications and statistics filter on.
    """
    __tablename__ = "members"

    # Generated identifier printed on the membership card
    membership_id: Mapped[str] = mapped_column(String(32), unique=True, nullable=False, index=True)

    # Identity
    full_name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    nrc_number: Mapped[str] = mapped_column(String(20), unique=True, nullable=False, index=True)
    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False)
    gender: Mapped[Gender] = mapped_column(
        SQLEnum(Gender, name="gender", values_callable=enum_values),
        default=Gender.MALE,
        nullable=False
    )

    # Contact
    phone: Mapped[str] = mapped_column(String(20), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    residential_address: Mapped[str] = mapped_column(Text, nullable=False)
    latitude: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 8), nullable=True)
    longitude: Mapped[Optional[Decimal]] = mapped_column(Numeric(11, 8), nullable=True)

    # Jurisdiction
    province: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    district: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    constituency: Mapped[str] = mapped_column(String(100), nullable=False)
    ward: Mapped[str] = mapped_column(String(100), nullable=False)
    branch: Mapped[str] = mapped_column(String(100), nullable=False)
    section: Mapped[str] = mapped_column(String(100), nullable=False)

    # Background
    education: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    occupation: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    skills: Mapped[Optional[list]] = mapped_column(JSON, nullable=True)

    # Party membership
    membership_level: Mapped[str] = mapped_column(String(50), default="General", nullable=False)
    party_role: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    party_commitment: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[MemberStatus] = mapped_column(
        SQLEnum(MemberStatus, name="memberstatus", values_callable=enum_values),
        default=MemberStatus.PENDING_SECTION_REVIEW,
        nullable=False,
        index=True
    )

    profile_image: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    notification_preferences: Mapped[Optional[dict]] = mapped_column(
        JSON,
        default=default_notification_preferences,
        nullable=True
    )
    registration_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
        index=True
    )

    # Child rows are removed by the database (ON DELETE CASCADE)
    rsvps: Mapped[list["EventRsvp"]] = relationship(
        "EventRsvp",
        back_populates="member",
        cascade="all, delete-orphan",
        passive_deletes=True
    )
    disciplinary_cases: Mapped[list["DisciplinaryCase"]] = relationship(
        "DisciplinaryCase",
        back_populates="member",
        cascade="all, delete-orphan",
        passive_deletes=True
    )
    card: Mapped[Optional["MembershipCard"]] = relationship(
        "MembershipCard",
        back_populates="member",
        cascade="all, delete-orphan",
        passive_deletes=True,
        uselist=False
    )

    def __repr__(self) -> str:
        return f"<Member {self.membership_id} {self.full_name} ({self.status.value})>"
