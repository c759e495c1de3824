"""
Authentication and staff user schemas.
"""
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, model_validator
from datetime import datetime

from partyroll.models.user import StaffRole
from partyroll.schemas.common import reject_nulls


class UserCreate(BaseModel):
    """Staff user creation request."""
    email: EmailStr
    password: str = Field(..., min_length=6)
    name: str = Field(..., min_length=2, max_length=200)
    role: StaffRole = StaffRole.MEMBER
    jurisdiction: Optional[str] = Field(None, max_length=200)
    level: Optional[str] = Field(None, max_length=50)
    party_position: Optional[str] = Field(None, max_length=200)


class UserUpdate(BaseModel):
    """Change a staff user's role or jurisdiction. Only fields that are set are written."""
    role: Optional[StaffRole] = None
    jurisdiction: Optional[str] = Field(None, max_length=200)
    level: Optional[str] = Field(None, max_length=50)
    party_position: Optional[str] = Field(None, max_length=200)

    @model_validator(mode="after")
    def role_not_null(self) -> "UserUpdate":
        return reject_nulls(self, ("role",))


class UserLogin(BaseModel):
    """Login request."""
    email: EmailStr
    password: str = Field(..., min_length=6)


class UserResponse(BaseModel):
    """Staff user - never includes the password hash."""
    id: str
    email: str
    name: str
    role: StaffRole
    jurisdiction: Optional[str] = None
    level: Optional[str] = None
    party_position: Optional[str] = None
    is_active: bool = True
    created: datetime
    updated: datetime

    class Config:
        from_attributes = True


class TokenResponse(BaseModel):
    """Auth token response."""
    token: str
    user: UserResponse
