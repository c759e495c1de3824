"""
Staff user model.

Staff users sign in to the admin API. They are separate from party members,
who register publicly and never authenticate.
"""
from typing import Optional
from enum import Enum
from sqlalchemy import String, Boolean, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column
from partyroll.models.base import BaseModel, enum_values


class StaffRole(str, Enum):
    """Staff role. Any role containing 'Admin' may manage records."""
    NATIONAL_ADMIN = "National Admin"
    PROVINCIAL_ADMIN = "Provincial Admin"
    DISTRICT_ADMIN = "District Admin"
    BRANCH_ADMIN = "Branch Admin"
    MEMBER = "Member"

    @property
    def is_admin(self) -> bool:
        return "Admin" in self.value


class User(BaseModel):
    """User model for authentication and profile."""
    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)

    role: Mapped[StaffRole] = mapped_column(
        SQLEnum(StaffRole, name="staffrole", values_callable=enum_values),
        default=StaffRole.MEMBER,
        nullable=False
    )

    # Where the account's authority applies, e.g. "National" or "Lusaka"
    jurisdiction: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    level: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    party_position: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<User {self.email} ({self.role.value})>"
