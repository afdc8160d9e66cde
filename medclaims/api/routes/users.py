"""
User Routes
Account creation and profile completion
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from medclaims.api.deps import get_current_user
from medclaims.db.connection import get_session
from medclaims.models.user import User
from medclaims.schemas.user import (
    ProfileUpdate,
    ProfileUpdateResponse,
    UserCreate,
    UserResponse,
    UserSummary,
)
from medclaims.services.users_service import UsersService

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_account(
    user_data: UserCreate,
    session: AsyncSession = Depends(get_session),
) -> User:
    """Create an account. Role defaults to PATIENT; a duplicate email answers 409."""
    return await UsersService(session).create_account(user_data)


@router.get("", response_model=UserSummary)
async def get_me(current_user: User = Depends(get_current_user)) -> User:
    return current_user


@router.get("/complete-profile", response_model=UserResponse)
async def get_profile(current_user: User = Depends(get_current_user)) -> User:
    """Current profile, including whether it is complete."""
    return current_user


@router.put("/complete-profile", response_model=ProfileUpdateResponse)
async def complete_profile(
    profile: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> ProfileUpdateResponse:
    """
    Set phone and address. The role may be changed in the same request only
    while the profile is still incomplete.
    """
    user = await UsersService(session).complete_profile(current_user, profile)
    return ProfileUpdateResponse(
        message="Profile updated successfully",
        user=UserResponse.model_validate(user),
    )


@router.get("/doctors", response_model=list[UserSummary])
async def list_doctors(
    current_user: User = Depends(get_current_user),  # noqa: ARG001
    session: AsyncSession = Depends(get_session),
) -> list[User]:
    """Active doctors, for appointment booking."""
    return await UsersService(session).list_doctors()
