"""
Pydantic schemas for disciplinary cases.
"""
from typing import ClassVar, Optional
from datetime import datetime, date
from pydantic import BaseModel, Field, model_validator

from partyroll.models.disciplinary_case import CaseSeverity, CaseStatus
from partyroll.schemas.common import MemberSummary, reject_nulls


class DisciplinaryCaseCreate(BaseModel):
    """Open a case against a member. The case number is generated."""
    member_id: str = Field(..., min_length=1)
    violation_type: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=10)
    severity: CaseSeverity = CaseSeverity.MEDIUM
    status: CaseStatus = CaseStatus.ACTIVE
    date_reported: Optional[date] = None
    date_incident: Optional[date] = None
    reporting_officer: str = Field(..., min_length=2, max_length=200)
    assigned_officer: Optional[str] = Field(None, max_length=200)


class DisciplinaryCaseUpdate(BaseModel):
    violation_type: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=10)
    severity: Optional[CaseSeverity] = None
    status: Optional[CaseStatus] = None
    date_incident: Optional[date] = None
    reporting_officer: Optional[str] = Field(None, min_length=2, max_length=200)
    assigned_officer: Optional[str] = Field(None, max_length=200)

    NOT_NULL_FIELDS: ClassVar[tuple[str, ...]] = (
        "violation_type", "description", "severity", "status", "reporting_officer",
    )

    @model_validator(mode="after")
    def required_columns_not_null(self) -> "DisciplinaryCaseUpdate":
        return reject_nulls(self, self.NOT_NULL_FIELDS)


class DisciplinaryCaseResponse(BaseModel):
    id: str
    case_number: str
    member_id: str
    violation_type: str
    description: str
    severity: CaseSeverity
    status: CaseStatus
    date_reported: date
    date_incident: Optional[date] = None
    reporting_officer: str
    assigned_officer: Optional[str] = None
    member: Optional[MemberSummary] = None
    created: datetime
    updated: datetime

    class Config:
        from_attributes = True
