"""
Disciplinary case actions.
"""
import logging
from datetime import date
from typing import Optional

from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from partyroll.core.errors import NotFoundError
from partyroll.models.member import Member
from partyroll.models.disciplinary_case import DisciplinaryCase, CaseSeverity, CaseStatus
from partyroll.schemas.disciplinary import DisciplinaryCaseCreate, DisciplinaryCaseUpdate
from partyroll.services.identifiers import unique_case_number
from partyroll.services.listing import apply_sort, paginate
from partyroll.services.members import get_member

logger = logging.getLogger(__name__)


async def list_cases(
    db: AsyncSession,
    *,
    page: int,
    per_page: int,
    sort: Optional[str] = None,
    status: Optional[CaseStatus] = None,
    severity: Optional[CaseSeverity] = None,
    member_id: Optional[str] = None,
    search: Optional[str] = None,
) -> dict:
    query = select(DisciplinaryCase).options(selectinload(DisciplinaryCase.member))

    if status:
        query = query.where(DisciplinaryCase.status == status)
    if severity:
        query = query.where(DisciplinaryCase.severity == severity)
    if member_id:
        query = query.where(DisciplinaryCase.member_id == member_id)
    if search:
        pattern = f"%{search}%"
        query = query.join(Member, DisciplinaryCase.member_id == Member.id).where(
            or_(
                DisciplinaryCase.case_number.ilike(pattern),
                DisciplinaryCase.violation_type.ilike(pattern),
                Member.full_name.ilike(pattern),
                Member.membership_id.ilike(pattern),
            )
        )

    query = apply_sort(query, DisciplinaryCase, sort, DisciplinaryCase.created.desc())
    return await paginate(db, query, page, per_page)


async def get_case(db: AsyncSession, case_id: str) -> DisciplinaryCase:
    result = await db.execute(
        select(DisciplinaryCase)
        .where(DisciplinaryCase.id == case_id)
        .options(selectinload(DisciplinaryCase.member))
        .execution_options(populate_existing=True)
    )
    case = result.scalar_one_or_none()
    if case is None:
        raise NotFoundError("Disciplinary case not found")
    return case


async def create_case(db: AsyncSession, data: DisciplinaryCaseCreate) -> DisciplinaryCase:
    await get_member(db, data.member_id)

    values = data.model_dump()
    values["date_reported"] = values["date_reported"] or date.today()
    case = DisciplinaryCase(case_number=await unique_case_number(db), **values)
    db.add(case)
    await db.flush()

    logger.info("Opened disciplinary case %s against member %s", case.case_number, case.member_id)
    return await get_case(db, case.id)


async def update_case(db: AsyncSession, case_id: str, data: DisciplinaryCaseUpdate) -> DisciplinaryCase:
    case = await get_case(db, case_id)
    changes = data.model_dump(exclude_unset=True)
    for field, value in changes.items():
        setattr(case, field, value)
    await db.flush()

    if "status" in changes:
        logger.info("Disciplinary case %s status -> %s", case.case_number, case.status.value)
    return await get_case(db, case.id)


async def delete_case(db: AsyncSession, case_id: str) -> None:
    case = await get_case(db, case_id)
    await db.delete(case)
    await db.flush()
    logger.info("Deleted disciplinary case %s", case.case_number)
