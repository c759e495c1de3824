"""
Membership card actions: issue, renewal and expiry tracking.

A member holds at most one card. Cards are valid for
``CARD_VALIDITY_YEARS`` from issue or renewal, and count as expiring once
their expiry date falls within ``CARD_EXPIRY_WARNING_DAYS`` of today
(already lapsed Active cards included).
"""
import logging
from datetime import date, timedelta
from typing import Optional

from dateutil.relativedelta import relativedelta
from sqlalchemy import select, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from partyroll.core.config import settings
from partyroll.core.errors import ActionError, NotFoundError
from partyroll.models.base import utcnow
from partyroll.models.member import Member
from partyroll.models.membership_card import MembershipCard, CardStatus, CardType
from partyroll.schemas.membership_card import CardIssue, CardUpdate
from partyroll.services.identifiers import unique_qr_token
from partyroll.services.listing import apply_sort, paginate
from partyroll.services.members import get_member

logger = logging.getLogger(__name__)


def default_expiry(start: Optional[date] = None) -> date:
    return (start or date.today()) + relativedelta(years=settings.CARD_VALIDITY_YEARS)


def expiring_cutoff(days: Optional[int] = None) -> date:
    if days is None:
        days = settings.CARD_EXPIRY_WARNING_DAYS
    return date.today() + timedelta(days=days)


def expiring_clause(days: Optional[int] = None):
    """Active cards whose expiry date is on or before today + ``days``."""
    return (
        (MembershipCard.status == CardStatus.ACTIVE)
        & MembershipCard.expiry_date.is_not(None)
        & (MembershipCard.expiry_date <= expiring_cutoff(days))
    )


async def list_cards(
    db: AsyncSession,
    *,
    page: int,
    per_page: int,
    sort: Optional[str] = None,
    status: Optional[CardStatus] = None,
    card_type: Optional[CardType] = None,
    member_id: Optional[str] = None,
    expiring_soon: bool = False,
    search: Optional[str] = None,
) -> dict:
    query = select(MembershipCard).options(selectinload(MembershipCard.member))

    if status:
        query = query.where(MembershipCard.status == status)
    if card_type:
        query = query.where(MembershipCard.card_type == card_type)
    if member_id:
        query = query.where(MembershipCard.member_id == member_id)
    if expiring_soon:
        query = query.where(expiring_clause())
    if search:
        pattern = f"%{search}%"
        query = query.join(Member, MembershipCard.member_id == Member.id).where(
            or_(
                Member.full_name.ilike(pattern),
                Member.membership_id.ilike(pattern),
                Member.nrc_number.ilike(pattern),
            )
        )

    query = apply_sort(query, MembershipCard, sort, MembershipCard.created.desc())
    return await paginate(db, query, page, per_page)


async def expiring_cards(db: AsyncSession, days: Optional[int] = None) -> list[MembershipCard]:
    result = await db.execute(
        select(MembershipCard)
        .where(expiring_clause(days))
        .options(selectinload(MembershipCard.member))
        .order_by(MembershipCard.expiry_date.asc())
    )
    return list(result.scalars().all())


async def get_card(db: AsyncSession, card_id: str) -> MembershipCard:
    result = await db.execute(
        select(MembershipCard)
        .where(MembershipCard.id == card_id)
        .options(selectinload(MembershipCard.member))
        .execution_options(populate_existing=True)
    )
    card = result.scalar_one_or_none()
    if card is None:
        raise NotFoundError("Membership card not found")
    return card


async def _has_card(db: AsyncSession, member_id: str) -> bool:
    result = await db.execute(select(MembershipCard.id).where(MembershipCard.member_id == member_id))
    return result.scalar_one_or_none() is not None


async def issue_card(db: AsyncSession, data: CardIssue) -> MembershipCard:
    await get_member(db, data.member_id)

    if await _has_card(db, data.member_id):
        raise ActionError("Card already exists for this member")

    today = date.today()
    card = MembershipCard(
        member_id=data.member_id,
        card_type=data.card_type,
        issue_date=today,
        expiry_date=data.expiry_date or default_expiry(today),
        qr_code=await unique_qr_token(db),
        status=CardStatus.ACTIVE,
    )
    try:
        async with db.begin_nested():
            db.add(card)
            await db.flush()
    except IntegrityError as exc:
        # Issued to the same member by a concurrent request
        raise ActionError("Card already exists for this member") from exc

    logger.info("Issued %s card to member %s, expires %s", card.card_type.value, card.member_id, card.expiry_date)
    return await get_card(db, card.id)


async def update_card(db: AsyncSession, card_id: str, data: CardUpdate) -> MembershipCard:
    card = await get_card(db, card_id)
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(card, field, value)
    await db.flush()
    return await get_card(db, card.id)


async def renew_card(db: AsyncSession, card_id: str) -> MembershipCard:
    """Extend a card from today, reactivate it and clear the reminder flag."""
    card = await get_card(db, card_id)
    card.expiry_date = default_expiry()
    card.status = CardStatus.ACTIVE
    card.last_renewed_at = utcnow()
    card.renewal_reminder_sent = False
    card.renewal_reminder_sent_at = None
    await db.flush()

    logger.info("Renewed card %s until %s", card.id, card.expiry_date)
    return await get_card(db, card.id)


async def mark_reminder_sent(db: AsyncSession, card_id: str) -> MembershipCard:
    card = await get_card(db, card_id)
    card.renewal_reminder_sent = True
    card.renewal_reminder_sent_at = utcnow()
    await db.flush()

    logger.info("Renewal reminder recorded for card %s", card.id)
    return await get_card(db, card.id)


async def delete_card(db: AsyncSession, card_id: str) -> None:
    card = await get_card(db, card_id)
    await db.delete(card)
    await db.flush()
    logger.info("Deleted card %s", card_id)
