"""
Disciplinary case endpoints. Admin only; deletion needs National Admin.
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from partyroll.api.deps import Pagination, pagination, parse_body
from partyroll.core.deps import require_admin, require_national_admin
from partyroll.db.base import get_db
from partyroll.models.user import User
from partyroll.models.disciplinary_case import CaseSeverity, CaseStatus
from partyroll.schemas.common import MessageResponse, PaginatedResponse
from partyroll.schemas.disciplinary import (
    DisciplinaryCaseCreate, DisciplinaryCaseUpdate, DisciplinaryCaseResponse
)
from partyroll.services import disciplinary as case_service

router = APIRouter()


@router.get("", response_model=PaginatedResponse[DisciplinaryCaseResponse])
async def list_cases(
    paging: Pagination = Depends(pagination),
    sort: Optional[str] = None,
    status_filter: Optional[CaseStatus] = Query(None, alias="status"),
    severity: Optional[CaseSeverity] = None,
    member_id: Optional[str] = None,
    search: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    return await case_service.list_cases(
        db,
        page=paging.page,
        per_page=paging.per_page,
        sort=sort,
        status=status_filter,
        severity=severity,
        member_id=member_id,
        search=search,
    )


@router.post("", response_model=DisciplinaryCaseResponse, status_code=status.HTTP_201_CREATED)
async def create_case(
    case_data: DisciplinaryCaseCreate = Depends(parse_body(DisciplinaryCaseCreate)),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Open a case against an existing member. The case number is generated."""
    return await case_service.create_case(db, case_data)


@router.get("/{case_id}", response_model=DisciplinaryCaseResponse)
async def get_case(
    case_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    return await case_service.get_case(db, case_id)


@router.put("/{case_id}", response_model=DisciplinaryCaseResponse)
async def update_case(
    case_id: str,
    case_data: DisciplinaryCaseUpdate = Depends(parse_body(DisciplinaryCaseUpdate)),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    return await case_service.update_case(db, case_id, case_data)


@router.delete("/{case_id}", response_model=MessageResponse)
async def delete_case(
    case_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_national_admin)
):
    await case_service.delete_case(db, case_id)
    return MessageResponse(message="Disciplinary case deleted successfully")
