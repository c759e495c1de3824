"""
API routers for PartyRoll.

Provides endpoints for:
- Staff authentication
- Members, events and RSVPs
- Disciplinary cases and membership cards
- Communications and dashboard statistics
"""
from fastapi import APIRouter

from partyroll.api.v1.auth import router as auth_router
from partyroll.api.v1.members import router as members_router
from partyroll.api.v1.events import router as events_router
from partyroll.api.v1.event_rsvps import router as event_rsvps_router
from partyroll.api.v1.disciplinary_cases import router as disciplinary_cases_router
from partyroll.api.v1.membership_cards import router as membership_cards_router
from partyroll.api.v1.communications import router as communications_router
from partyroll.api.v1.statistics import router as statistics_router

# Combined API router, mounted under settings.API_PREFIX
api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(members_router, prefix="/members", tags=["members"])
api_router.include_router(events_router, prefix="/events", tags=["events"])
api_router.include_router(event_rsvps_router, prefix="/event-rsvps", tags=["event-rsvps"])
api_router.include_router(
    disciplinary_cases_router,
    prefix="/disciplinary-cases",
    tags=["disciplinary-cases"]
)
api_router.include_router(
    membership_cards_router,
    prefix="/membership-cards",
    tags=["membership-cards"]
)
api_router.include_router(communications_router, prefix="/communications", tags=["communications"])
api_router.include_router(statistics_router, prefix="/statistics", tags=["statistics"])

__all__ = ["api_router"]
