"""
Dashboard statistics schema.
"""
from pydantic import BaseModel


class MemberStatistics(BaseModel):
    total: int = 0
    pending: int = 0
    approved: int = 0
    rejected: int = 0
    suspended: int = 0
    by_province: dict[str, int] = {}
    by_status: dict[str, int] = {}
    monthly_registrations: dict[str, int] = {}


class EventStatistics(BaseModel):
    total: int = 0
    active: int = 0
    upcoming: int = 0
    completed: int = 0


class DisciplinaryStatistics(BaseModel):
    total: int = 0
    active: int = 0


class CardStatistics(BaseModel):
    total: int = 0
    active: int = 0
    expiring: int = 0


class StatisticsResponse(BaseModel):
    """Headline numbers for the admin dashboard."""
    members: MemberStatistics
    events: EventStatistics
    disciplinary: DisciplinaryStatistics
    cards: CardStatistics
