"""
Generated identifiers: membership ids, case numbers and card QR tokens.

Each generator draws a candidate from the clock plus random digits. The
``unique_*`` helpers check the candidate against its table and draw again on
a collision; the unique constraints on the columns stay the final guard.
"""
import logging
import secrets
import string
import time
from datetime import date
from typing import Callable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from partyroll.core.config import settings
from partyroll.core.errors import ActionError
from partyroll.models.member import Member
from partyroll.models.disciplinary_case import DisciplinaryCase
from partyroll.models.membership_card import MembershipCard

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 5
TOKEN_ALPHABET = string.ascii_lowercase + string.digits


def _millis() -> str:
    return str(int(time.time() * 1000))


def new_membership_id() -> str:
    """``UPND`` + last 8 digits of the millisecond clock + 3 random digits."""
    return f"{settings.MEMBERSHIP_ID_PREFIX}{_millis()[-8:]}{secrets.randbelow(1000):03d}"


def new_case_number() -> str:
    """``DC`` + year + last 3 digits of the millisecond clock + 3 random digits."""
    return f"DC{date.today().year}{_millis()[-3:]}{secrets.randbelow(1000):03d}"


def new_qr_token() -> str:
    suffix = "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(9))
    return f"{settings.MEMBERSHIP_ID_PREFIX}-{_millis()}-{suffix}"


async def _unique(db: AsyncSession, column, generate: Callable[[], str]) -> str:
    for attempt in range(MAX_ATTEMPTS):
        candidate = generate()
        result = await db.execute(select(column).where(column == candidate).limit(1))
        if result.scalar_one_or_none() is None:
            return candidate
        logger.warning("Generated %s %s already taken (attempt %d)", column.key, candidate, attempt + 1)
    raise ActionError(f"Could not generate a unique {column.key.replace('_', ' ')}")


async def unique_membership_id(db: AsyncSession) -> str:
    return await _unique(db, Member.membership_id, new_membership_id)


async def unique_case_number(db: AsyncSession) -> str:
    return await _unique(db, DisciplinaryCase.case_number, new_case_number)


async def unique_qr_token(db: AsyncSession) -> str:
    return await _unique(db, MembershipCard.qr_code, new_qr_token)
