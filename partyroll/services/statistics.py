"""
Dashboard statistics aggregated across members, events, cases and cards.
"""
from collections import Counter
from datetime import date

from dateutil.relativedelta import relativedelta
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from partyroll.models.base import utcnow
from partyroll.models.member import Member, MemberStatus
from partyroll.models.event import Event, EventStatus
from partyroll.models.disciplinary_case import DisciplinaryCase, CaseStatus
from partyroll.models.membership_card import MembershipCard, CardStatus
from partyroll.schemas.statistics import (
    StatisticsResponse, MemberStatistics, EventStatistics,
    DisciplinaryStatistics, CardStatistics
)
from partyroll.services.membership_cards import expiring_clause

PENDING_STATUSES = [status for status in MemberStatus if status.is_pending]


async def _count(db: AsyncSession, model, *criteria) -> int:
    query = select(func.count()).select_from(model)
    if criteria:
        query = query.where(*criteria)
    result = await db.execute(query)
    return result.scalar() or 0


async def _grouped(db: AsyncSession, column) -> dict[str, int]:
    result = await db.execute(select(column, func.count()).group_by(column))
    return {
        (key.value if hasattr(key, "value") else str(key)): count
        for key, count in result.all()
    }


async def member_statistics(db: AsyncSession) -> MemberStatistics:
    since = utcnow() - relativedelta(months=12)
    result = await db.execute(
        select(Member.registration_date).where(Member.registration_date >= since)
    )
    months = Counter(registered.strftime("%Y-%m") for registered in result.scalars())

    return MemberStatistics(
        total=await _count(db, Member),
        pending=await _count(db, Member, Member.status.in_(PENDING_STATUSES)),
        approved=await _count(db, Member, Member.status == MemberStatus.APPROVED),
        rejected=await _count(db, Member, Member.status == MemberStatus.REJECTED),
        suspended=await _count(db, Member, Member.status == MemberStatus.SUSPENDED),
        by_province=await _grouped(db, Member.province),
        by_status=await _grouped(db, Member.status),
        monthly_registrations=dict(sorted(months.items())),
    )


async def get_statistics(db: AsyncSession) -> StatisticsResponse:
    today = date.today()
    return StatisticsResponse(
        members=await member_statistics(db),
        events=EventStatistics(
            total=await _count(db, Event),
            active=await _count(db, Event, Event.status == EventStatus.ACTIVE),
            upcoming=await _count(
                db, Event, Event.status == EventStatus.PLANNED, Event.event_date >= today
            ),
            completed=await _count(db, Event, Event.status == EventStatus.COMPLETED),
        ),
        disciplinary=DisciplinaryStatistics(
            total=await _count(db, DisciplinaryCase),
            active=await _count(db, DisciplinaryCase, DisciplinaryCase.status == CaseStatus.ACTIVE),
        ),
        cards=CardStatistics(
            total=await _count(db, MembershipCard),
            active=await _count(db, MembershipCard, MembershipCard.status == CardStatus.ACTIVE),
            expiring=await _count(db, MembershipCard, expiring_clause()),
        ),
    )
