"""
Member endpoints.

Registration is public; everything else needs a staff token, and deletion and
bulk approval need an admin role.
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from partyroll.api.deps import Pagination, pagination, parse_body
from partyroll.core.deps import get_current_user, require_admin
from partyroll.db.base import get_db
from partyroll.models.user import User
from partyroll.models.member import MemberStatus
from partyroll.schemas.common import MessageResponse
from partyroll.schemas.member import (
    MemberCreate, MemberUpdate, MemberStatusUpdate, MemberResponse, MemberListResponse,
    BulkApproveRequest, BulkApproveResponse
)
from partyroll.schemas.event import EventRsvpResponse
from partyroll.schemas.disciplinary import DisciplinaryCaseResponse
from partyroll.schemas.membership_card import CardResponse
from partyroll.services import members as member_service

router = APIRouter()


@router.get("", response_model=MemberListResponse)
async def list_members(
    paging: Pagination = Depends(pagination),
    sort: Optional[str] = None,
    status_filter: Optional[MemberStatus] = Query(None, alias="status"),
    province: Optional[str] = None,
    district: Optional[str] = None,
    constituency: Optional[str] = None,
    ward: Optional[str] = None,
    branch: Optional[str] = None,
    section: Optional[str] = None,
    membership_level: Optional[str] = None,
    search: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """List members with jurisdiction filters and free-text search."""
    return await member_service.list_members(
        db,
        page=paging.page,
        per_page=paging.per_page,
        sort=sort,
        status=status_filter,
        province=province,
        district=district,
        constituency=constituency,
        ward=ward,
        branch=branch,
        section=section,
        membership_level=membership_level,
        search=search,
    )


@router.post("", response_model=MemberResponse, status_code=status.HTTP_201_CREATED)
async def register_member(
    member_data: MemberCreate = Depends(parse_body(MemberCreate)),
    db: AsyncSession = Depends(get_db)
):
    """
    Public member registration.

    Rejects an NRC number that is already registered. The new member starts
    at Pending Section Review.
    """
    return await member_service.register_member(db, member_data)


@router.post("/bulk-approve", response_model=BulkApproveResponse)
async def bulk_approve(
    request_data: BulkApproveRequest = Depends(parse_body(BulkApproveRequest)),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    approved = await member_service.bulk_approve(db, request_data.member_ids)
    return BulkApproveResponse(message=f"{approved} members approved", approved=approved)


@router.get("/{member_id}", response_model=MemberResponse)
async def get_member(
    member_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await member_service.get_member(db, member_id)


@router.put("/{member_id}", response_model=MemberResponse)
async def update_member(
    member_id: str,
    member_data: MemberUpdate = Depends(parse_body(MemberUpdate)),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await member_service.update_member(db, member_id, member_data)


@router.put("/{member_id}/status", response_model=MemberResponse)
async def update_member_status(
    member_id: str,
    status_data: MemberStatusUpdate = Depends(parse_body(MemberStatusUpdate)),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Move a member through the review workflow."""
    return await member_service.set_member_status(db, member_id, status_data.status)


@router.delete("/{member_id}", response_model=MessageResponse)
async def delete_member(
    member_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    await member_service.delete_member(db, member_id)
    return MessageResponse(message="Member deleted successfully")


@router.get("/{member_id}/rsvps", response_model=list[EventRsvpResponse])
async def member_rsvps(
    member_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await member_service.member_rsvps(db, member_id)


@router.get("/{member_id}/disciplinary-cases", response_model=list[DisciplinaryCaseResponse])
async def member_cases(
    member_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    return await member_service.member_cases(db, member_id)


@router.get("/{member_id}/membership-card", response_model=CardResponse)
async def member_card(
    member_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await member_service.member_card(db, member_id)
