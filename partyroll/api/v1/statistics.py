"""
Dashboard statistics endpoint.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from partyroll.core.deps import get_current_user
from partyroll.db.base import get_db
from partyroll.models.user import User
from partyroll.schemas.statistics import StatisticsResponse
from partyroll.services.statistics import get_statistics

router = APIRouter()


@router.get("", response_model=StatisticsResponse)
async def statistics(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Headline numbers for the dashboard:
    - Members by status family, province and registration month
    - Events, disciplinary cases and membership cards
    """
    return await get_statistics(db)
