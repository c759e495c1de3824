"""
Communication actions and the send fan-out.

Sending resolves the communication's recipient filter against the member
table, writes one recipient row per member and stamps the totals on the
communication. Everything happens in the caller's transaction, so a failure
part-way leaves no recipient rows behind.
"""
import logging
from typing import Optional

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from partyroll.core.errors import ActionError, NotFoundError
from partyroll.models.base import utcnow
from partyroll.models.member import Member
from partyroll.models.communication import Communication, CommunicationStatus, CommunicationType
from partyroll.models.communication_recipient import CommunicationRecipient, RecipientStatus
from partyroll.schemas.communication import (
    CommunicationCreate, CommunicationUpdate, RecipientFilter
)
from partyroll.services.delivery import delivery_service
from partyroll.services.listing import apply_sort, paginate

logger = logging.getLogger(__name__)

# Filter field -> member column it narrows
FILTER_COLUMNS = {
    "provinces": Member.province,
    "districts": Member.district,
    "constituencies": Member.constituency,
    "wards": Member.ward,
    "branches": Member.branch,
    "sections": Member.section,
    "membership_levels": Member.membership_level,
    "statuses": Member.status,
}


def build_recipient_query(recipient_filter: Optional[RecipientFilter]) -> Select:
    """Select the members a filter resolves to. An empty filter selects everyone."""
    query = select(Member)
    if recipient_filter is None or recipient_filter.is_empty():
        return query
    for field, column in FILTER_COLUMNS.items():
        values = getattr(recipient_filter, field)
        if values:
            query = query.where(column.in_(values))
    return query


def stored_filter(communication: Communication) -> RecipientFilter:
    return RecipientFilter.model_validate(communication.recipient_filter or {})


async def count_recipients(db: AsyncSession, recipient_filter: Optional[RecipientFilter]) -> int:
    query = build_recipient_query(recipient_filter)
    result = await db.execute(select(func.count()).select_from(query.subquery()))
    return result.scalar() or 0


async def list_communications(
    db: AsyncSession,
    *,
    page: int,
    per_page: int,
    sort: Optional[str] = None,
    type: Optional[CommunicationType] = None,
    status: Optional[CommunicationStatus] = None,
    sent_by: Optional[str] = None,
    search: Optional[str] = None,
) -> dict:
    query = select(Communication)

    if type:
        query = query.where(Communication.type == type)
    if status:
        query = query.where(Communication.status == status)
    if sent_by:
        query = query.where(Communication.sent_by == sent_by)
    if search:
        pattern = f"%{search}%"
        query = query.where(
            or_(
                Communication.subject.ilike(pattern),
                Communication.message.ilike(pattern),
            )
        )

    query = apply_sort(query, Communication, sort, Communication.created.desc())
    return await paginate(db, query, page, per_page)


async def get_communication(db: AsyncSession, communication_id: str, for_update: bool = False) -> Communication:
    query = select(Communication).where(Communication.id == communication_id)
    if for_update:
        query = query.with_for_update().execution_options(populate_existing=True)
    result = await db.execute(query)
    communication = result.scalar_one_or_none()
    if communication is None:
        raise NotFoundError("Communication not found")
    return communication


async def create_communication(
    db: AsyncSession,
    data: CommunicationCreate,
    sent_by: Optional[str] = None
) -> Communication:
    """Store a Draft. ``sent_by`` defaults to the signed-in staff user's name."""
    communication = Communication(
        type=data.type,
        subject=data.subject,
        message=data.message,
        recipient_filter=data.recipient_filter.model_dump(mode="json", exclude_none=True),
        recipients_count=0,
        sent_count=0,
        failed_count=0,
        status=CommunicationStatus.DRAFT,
        sent_by=data.sent_by or sent_by,
    )
    db.add(communication)
    await db.flush()
    await db.refresh(communication)

    logger.info("Drafted %s communication %s", communication.type.value, communication.id)
    return communication


async def update_communication(
    db: AsyncSession,
    communication_id: str,
    data: CommunicationUpdate
) -> Communication:
    communication = await get_communication(db, communication_id)
    if communication.status == CommunicationStatus.SENT:
        raise ActionError("Cannot edit a communication that has already been sent")

    changes = data.model_dump(exclude_unset=True)
    if changes.get("status") in (CommunicationStatus.SENDING, CommunicationStatus.SENT):
        raise ActionError("Use the send action to send a communication")

    if "recipient_filter" in changes:
        recipient_filter = data.recipient_filter or RecipientFilter()
        changes["recipient_filter"] = recipient_filter.model_dump(mode="json", exclude_none=True)

    for field, value in changes.items():
        setattr(communication, field, value)
    await db.flush()
    await db.refresh(communication)
    return communication


async def delete_communication(db: AsyncSession, communication_id: str) -> None:
    communication = await get_communication(db, communication_id)
    await db.delete(communication)
    await db.flush()
    logger.info("Deleted communication %s", communication_id)


async def send_communication(
    db: AsyncSession,
    communication_id: str,
    sent_by: Optional[str] = None
) -> tuple[int, Communication]:
    """
    Fan a communication out to the members its filter resolves to.

    The communication row is locked for the rest of the transaction, so two
    concurrent sends serialize and the second sees status Sent and is
    rejected. Returns the recipient count and the updated communication.
    """
    communication = await get_communication(db, communication_id, for_update=True)
    if communication.status == CommunicationStatus.SENT:
        raise ActionError("Communication has already been sent")

    communication.status = CommunicationStatus.SENDING
    result = await db.execute(
        build_recipient_query(stored_filter(communication)).order_by(Member.created.asc())
    )
    members = result.scalars().all()

    now = utcnow()
    sent = failed = 0
    for member in members:
        delivered = delivery_service.deliver(
            communication.type, member, communication.subject, communication.message
        )
        if delivered:
            sent += 1
            recipient = CommunicationRecipient(
                communication_id=communication.id,
                member_id=member.id,
                status=RecipientStatus.SENT,
                sent_at=now,
                delivered_at=now,
            )
        else:
            failed += 1
            recipient = CommunicationRecipient(
                communication_id=communication.id,
                member_id=member.id,
                status=RecipientStatus.FAILED,
                error_message="Delivery failed",
            )
        db.add(recipient)

    communication.recipients_count = len(members)
    communication.sent_count = sent
    communication.failed_count = failed
    communication.status = CommunicationStatus.SENT if sent or not failed else CommunicationStatus.FAILED
    communication.sent_at = now
    if sent_by:
        communication.sent_by = sent_by

    await db.flush()
    await db.refresh(communication)

    logger.info(
        "Sent %s communication %s to %d members (%d failed)",
        communication.type.value, communication.id, sent, failed
    )
    return len(members), communication


async def list_recipients(
    db: AsyncSession,
    communication_id: str,
    *,
    page: int,
    per_page: int,
    status: Optional[RecipientStatus] = None,
) -> dict:
    await get_communication(db, communication_id)
    query = (
        select(CommunicationRecipient)
        .where(CommunicationRecipient.communication_id == communication_id)
        .options(selectinload(CommunicationRecipient.member))
    )
    if status:
        query = query.where(CommunicationRecipient.status == status)
    query = query.order_by(CommunicationRecipient.created.asc())
    return await paginate(db, query, page, per_page)
