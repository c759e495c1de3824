"""
Authentication endpoints for staff users.

Endpoints:
- POST /api/auth/login - Login with e-mail and password
- GET /api/auth/me - Current user profile
- POST /api/auth/users - Create a staff user (National Admin)
- PUT /api/auth/users/{id} - Change a staff user's role or jurisdiction (National Admin)

Logout is handled client-side by discarding the token.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from partyroll.api.deps import parse_body
from partyroll.core.deps import get_current_user, require_national_admin
from partyroll.core.security import create_access_token
from partyroll.db.base import get_db
from partyroll.models.user import User
from partyroll.schemas.auth import UserCreate, UserUpdate, UserLogin, UserResponse, TokenResponse
from partyroll.services import users as user_service

router = APIRouter()


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: UserLogin = Depends(parse_body(UserLogin)),
    db: AsyncSession = Depends(get_db)
):
    """Authenticate a staff user with e-mail/password."""
    user = await user_service.authenticate(db, credentials.email, credentials.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password"
        )

    token = create_access_token(
        subject=user.id,
        additional_claims={"role": user.role.value}
    )
    return TokenResponse(token=token, user=UserResponse.model_validate(user))


@router.get("/me", response_model=UserResponse)
async def me(current_user: User = Depends(get_current_user)):
    return current_user


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserCreate = Depends(parse_body(UserCreate)),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_national_admin)
):
    """Create a staff account. National Admin only."""
    return await user_service.create_user(db, user_data)


@router.put("/users/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    user_data: UserUpdate = Depends(parse_body(UserUpdate)),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_national_admin)
):
    """Change a staff user's role, jurisdiction, level or party position. National Admin only."""
    return await user_service.update_user(db, user_id, user_data)
