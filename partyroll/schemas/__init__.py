"""
Pydantic schemas for request/response validation.
"""
from partyroll.schemas.auth import (
    UserCreate, UserUpdate, UserLogin, UserResponse, TokenResponse
)
from partyroll.schemas.member import (
    MemberCreate, MemberUpdate, MemberStatusUpdate, MemberResponse, MemberListResponse,
    BulkApproveRequest, BulkApproveResponse
)
from partyroll.schemas.event import (
    EventCreate, EventUpdate, EventStatusUpdate, EventResponse, EventDetailResponse,
    RsvpUpsert, RsvpUpdate, CheckInRequest, EventRsvpResponse
)
from partyroll.schemas.disciplinary import (
    DisciplinaryCaseCreate, DisciplinaryCaseUpdate, DisciplinaryCaseResponse
)
from partyroll.schemas.membership_card import (
    CardIssue, CardUpdate, CardResponse
)
from partyroll.schemas.communication import (
    RecipientFilter, CommunicationCreate, CommunicationUpdate, CommunicationAction,
    CommunicationResponse, SendResponse, RecipientResponse
)
from partyroll.schemas.statistics import StatisticsResponse
from partyroll.schemas.common import (
    PaginatedResponse, MessageResponse, CountResponse, HealthResponse, ErrorResponse,
    MemberSummary
)

__all__ = [
    # Auth
    "UserCreate", "UserUpdate", "UserLogin", "UserResponse", "TokenResponse",
    # Members
    "MemberCreate", "MemberUpdate", "MemberStatusUpdate", "MemberResponse", "MemberListResponse",
    "BulkApproveRequest", "BulkApproveResponse",
    # Events
    "EventCreate", "EventUpdate", "EventStatusUpdate", "EventResponse", "EventDetailResponse",
    "RsvpUpsert", "RsvpUpdate", "CheckInRequest", "EventRsvpResponse",
    # Disciplinary
    "DisciplinaryCaseCreate", "DisciplinaryCaseUpdate", "DisciplinaryCaseResponse",
    # Cards
    "CardIssue", "CardUpdate", "CardResponse",
    # Communications
    "RecipientFilter", "CommunicationCreate", "CommunicationUpdate", "CommunicationAction",
    "CommunicationResponse", "SendResponse", "RecipientResponse",
    # Statistics
    "StatisticsResponse",
    # Common
    "PaginatedResponse", "MessageResponse", "CountResponse", "HealthResponse", "ErrorResponse",
    "MemberSummary",
]
