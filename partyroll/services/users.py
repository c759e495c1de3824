"""
Staff user accounts.
"""
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from partyroll.core.errors import ActionError, NotFoundError
from partyroll.core.security import get_password_hash, verify_password
from partyroll.models.user import User
from partyroll.schemas.auth import UserCreate, UserUpdate

logger = logging.getLogger(__name__)


async def get_user(db: AsyncSession, user_id: str) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email.lower()))
    return result.scalar_one_or_none()


async def authenticate(db: AsyncSession, email: str, password: str) -> Optional[User]:
    """Return the active user matching the credentials, or None."""
    user = await get_user_by_email(db, email)
    if user is None or not user.is_active or not verify_password(password, user.password_hash):
        logger.info("Failed login for %s", email)
        return None
    return user


async def create_user(db: AsyncSession, data: UserCreate) -> User:
    if await get_user_by_email(db, data.email) is not None:
        raise ActionError("Email already registered")

    user = User(
        email=data.email.lower(),
        password_hash=get_password_hash(data.password),
        name=data.name,
        role=data.role,
        jurisdiction=data.jurisdiction,
        level=data.level,
        party_position=data.party_position,
        is_active=True,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)

    logger.info("Created %s account %s", user.role.value, user.email)
    return user


async def update_user(db: AsyncSession, user_id: str, data: UserUpdate) -> User:
    """Apply role and jurisdiction changes. E-mail and password are not editable here."""
    user = await get_user(db, user_id)
    previous_role = user.role

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(user, field, value)

    await db.flush()
    await db.refresh(user)

    if user.role != previous_role:
        logger.info("Changed role of %s from %s to %s", user.email, previous_role.value, user.role.value)
    return user
