"""
SQLAlchemy models for PartyRoll.

- Staff: User
- Membership: Member, MembershipCard
- Events: Event, EventRsvp
- Discipline: DisciplinaryCase
- Communications: Communication, CommunicationRecipient
"""
from partyroll.models.user import User, StaffRole
from partyroll.models.member import Member, MemberStatus, Gender
from partyroll.models.event import Event, EventStatus
from partyroll.models.event_rsvp import EventRsvp, RsvpResponse
from partyroll.models.disciplinary_case import DisciplinaryCase, CaseSeverity, CaseStatus
from partyroll.models.membership_card import MembershipCard, CardType, CardStatus
from partyroll.models.communication import Communication, CommunicationType, CommunicationStatus
from partyroll.models.communication_recipient import CommunicationRecipient, RecipientStatus

__all__ = [
    # Staff
    "User",
    "StaffRole",
    # Membership
    "Member",
    "MemberStatus",
    "Gender",
    "MembershipCard",
    "CardType",
    "CardStatus",
    # Events
    "Event",
    "EventStatus",
    "EventRsvp",
    "RsvpResponse",
    # Discipline
    "DisciplinaryCase",
    "CaseSeverity",
    "CaseStatus",
    # Communications
    "Communication",
    "CommunicationType",
    "CommunicationStatus",
    "CommunicationRecipient",
    "RecipientStatus",
]
