"""
Communication endpoints. Admin only.

Endpoints:
- GET/POST /api/communications - List / draft
- POST /api/communications/recipient-count - Preview how many members a filter reaches
- GET/PUT/DELETE /api/communications/{id} - Detail / edit draft / delete
- PATCH /api/communications/{id} - Actions; {"action": "send"} fans the message out
- GET /api/communications/{id}/recipients - Delivery rows with member info
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from partyroll.api.deps import Pagination, pagination, parse_body
from partyroll.core.deps import require_admin
from partyroll.db.base import get_db
from partyroll.models.user import User
from partyroll.models.communication import CommunicationStatus, CommunicationType
from partyroll.models.communication_recipient import RecipientStatus
from partyroll.schemas.common import CountResponse, MessageResponse, PaginatedResponse
from partyroll.schemas.communication import (
    CommunicationCreate, CommunicationUpdate, CommunicationAction, CommunicationResponse,
    RecipientFilter, RecipientResponse, SendResponse
)
from partyroll.services import communications as communication_service

router = APIRouter()


@router.get("", response_model=PaginatedResponse[CommunicationResponse])
async def list_communications(
    paging: Pagination = Depends(pagination),
    sort: Optional[str] = None,
    type_filter: Optional[CommunicationType] = Query(None, alias="type"),
    status_filter: Optional[CommunicationStatus] = Query(None, alias="status"),
    sent_by: Optional[str] = None,
    search: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    return await communication_service.list_communications(
        db,
        page=paging.page,
        per_page=paging.per_page,
        sort=sort,
        type=type_filter,
        status=status_filter,
        sent_by=sent_by,
        search=search,
    )


@router.post("", response_model=CommunicationResponse, status_code=status.HTTP_201_CREATED)
async def create_communication(
    communication_data: CommunicationCreate = Depends(parse_body(CommunicationCreate)),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Save a Draft. Nothing is sent until the send action."""
    return await communication_service.create_communication(
        db, communication_data, sent_by=current_user.name
    )


@router.post("/recipient-count", response_model=CountResponse)
async def recipient_count(
    recipient_filter: RecipientFilter = Depends(parse_body(RecipientFilter)),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Number of members a filter currently resolves to."""
    count = await communication_service.count_recipients(db, recipient_filter)
    return CountResponse(count=count)


@router.get("/{communication_id}", response_model=CommunicationResponse)
async def get_communication(
    communication_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    return await communication_service.get_communication(db, communication_id)


@router.put("/{communication_id}", response_model=CommunicationResponse)
async def update_communication(
    communication_id: str,
    communication_data: CommunicationUpdate = Depends(parse_body(CommunicationUpdate)),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Edit a communication that has not been sent yet."""
    return await communication_service.update_communication(db, communication_id, communication_data)


@router.patch("/{communication_id}", response_model=SendResponse)
async def communication_action(
    communication_id: str,
    action: CommunicationAction = Depends(parse_body(CommunicationAction)),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """
    Run an action on a communication. The only action is ``send``.

    Sending twice is rejected with 400 and writes no further recipient rows.
    """
    recipients_count, communication = await communication_service.send_communication(
        db, communication_id, sent_by=current_user.name
    )
    return SendResponse(
        recipients_count=recipients_count,
        communication=CommunicationResponse.model_validate(communication),
    )


@router.delete("/{communication_id}", response_model=MessageResponse)
async def delete_communication(
    communication_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    await communication_service.delete_communication(db, communication_id)
    return MessageResponse(message="Communication deleted successfully")


@router.get("/{communication_id}/recipients", response_model=PaginatedResponse[RecipientResponse])
async def list_recipients(
    communication_id: str,
    paging: Pagination = Depends(pagination),
    status_filter: Optional[RecipientStatus] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    return await communication_service.list_recipients(
        db,
        communication_id,
        page=paging.page,
        per_page=paging.per_page,
        status=status_filter,
    )
