"""
Disciplinary case model.
"""
from typing import Optional, TYPE_CHECKING
from datetime import date
from enum import Enum
from sqlalchemy import String, Text, Date, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from partyroll.models.base import BaseModel, enum_values

if TYPE_CHECKING:
    from partyroll.models.member import Member


class CaseSeverity(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class CaseStatus(str, Enum):
    ACTIVE = "Active"
    UNDER_INVESTIGATION = "Under Investigation"
    RESOLVED = "Resolved"
    CLOSED = "Closed"
    APPEALED = "Appealed"


class DisciplinaryCase(BaseModel):
    """A reported violation against a member."""
    __tablename__ = "disciplinary_cases"

    case_number: Mapped[str] = mapped_column(String(32), unique=True, nullable=False, index=True)
    member_id: Mapped[str] = mapped_column(
        String(15),
        ForeignKey("members.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    violation_type: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    severity: Mapped[CaseSeverity] = mapped_column(
        SQLEnum(CaseSeverity, name="caseseverity", values_callable=enum_values),
        default=CaseSeverity.MEDIUM,
        nullable=False
    )
    status: Mapped[CaseStatus] = mapped_column(
        SQLEnum(CaseStatus, name="casestatus", values_callable=enum_values),
        default=CaseStatus.ACTIVE,
        nullable=False,
        index=True
    )

    date_reported: Mapped[date] = mapped_column(Date, default=date.today, nullable=False)
    date_incident: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    reporting_officer: Mapped[str] = mapped_column(String(200), nullable=False)
    assigned_officer: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)

    member: Mapped["Member"] = relationship("Member", back_populates="disciplinary_cases")

    def __repr__(self) -> str:
        return f"<DisciplinaryCase {self.case_number} ({self.status.value})>"
