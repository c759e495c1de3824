"""
Membership card endpoints.

Staff can read cards; issuing, editing, renewing and deleting need an admin
role.
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from partyroll.api.deps import Pagination, pagination, parse_body
from partyroll.core.deps import get_current_user, require_admin
from partyroll.db.base import get_db
from partyroll.models.user import User
from partyroll.models.membership_card import CardStatus, CardType
from partyroll.schemas.common import MessageResponse, PaginatedResponse
from partyroll.schemas.membership_card import CardIssue, CardUpdate, CardResponse
from partyroll.services import membership_cards as card_service

router = APIRouter()


@router.get("", response_model=PaginatedResponse[CardResponse])
async def list_cards(
    paging: Pagination = Depends(pagination),
    sort: Optional[str] = None,
    status_filter: Optional[CardStatus] = Query(None, alias="status"),
    card_type: Optional[CardType] = None,
    member_id: Optional[str] = None,
    expiring_soon: bool = False,
    search: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """List cards; ``search`` matches the holder's name, membership id or NRC."""
    return await card_service.list_cards(
        db,
        page=paging.page,
        per_page=paging.per_page,
        sort=sort,
        status=status_filter,
        card_type=card_type,
        member_id=member_id,
        expiring_soon=expiring_soon,
        search=search,
    )


@router.post("", response_model=CardResponse, status_code=status.HTTP_201_CREATED)
async def issue_card(
    card_data: CardIssue = Depends(parse_body(CardIssue)),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Issue a member's card. A member can hold only one."""
    return await card_service.issue_card(db, card_data)


@router.get("/expiring", response_model=list[CardResponse])
async def expiring_cards(
    days: Optional[int] = Query(None, ge=0, le=3650),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Active cards expiring within ``days`` (default 30), lapsed ones included."""
    return await card_service.expiring_cards(db, days)


@router.get("/{card_id}", response_model=CardResponse)
async def get_card(
    card_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await card_service.get_card(db, card_id)


@router.put("/{card_id}", response_model=CardResponse)
async def update_card(
    card_id: str,
    card_data: CardUpdate = Depends(parse_body(CardUpdate)),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    return await card_service.update_card(db, card_id, card_data)


@router.post("/{card_id}/renew", response_model=CardResponse)
async def renew_card(
    card_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    return await card_service.renew_card(db, card_id)


@router.patch("/{card_id}/send-reminder", response_model=CardResponse)
async def send_reminder(
    card_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Record that a renewal reminder went out for this card."""
    return await card_service.mark_reminder_sent(db, card_id)


@router.delete("/{card_id}", response_model=MessageResponse)
async def delete_card(
    card_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    await card_service.delete_card(db, card_id)
    return MessageResponse(message="Membership card deleted successfully")
