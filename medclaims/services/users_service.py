"""
Users Service.

Account creation, credential checks and profile completion.
"""

from datetime import UTC, datetime
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from medclaims.core.enums import UserRole
from medclaims.models.user import User
from medclaims.schemas.user import ProfileUpdate, UserCreate
from medclaims.services.exceptions import (
    DuplicateResourceError,
    ForbiddenActionError,
    InvalidInputError,
)
from medclaims.utils.auth import get_password_hash, verify_password
from medclaims.utils.logging import get_logger

logger = get_logger(__name__)


class UsersService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(
            select(User).where(func.lower(User.email) == email.lower())
        )
        return result.scalar_one_or_none()

    async def create_account(self, data: UserCreate) -> User:
        """
        Create an account with a hashed password.

        Raises:
            DuplicateResourceError: Email already registered
        """
        if await self.get_by_email(data.email) is not None:
            raise DuplicateResourceError("Email already registered")

        user = User(
            email=data.email.lower(),
            name=data.name,
            hashed_password=get_password_hash(data.password),
            role=data.role,
            phone=data.phone,
            address=data.address,
            is_active=True,
        )
        self.session.add(user)
        await self.session.flush()

        logger.info(f"New account created: {user.email} ({user.role.value})")
        return user

    async def authenticate(self, email: str, password: str) -> Optional[User]:
        """Return the active user matching the credentials, stamping last_login."""
        user = await self.get_by_email(email)
        if user is None or not verify_password(password, user.hashed_password):
            return None
        if not user.is_active:
            return None

        user.last_login = datetime.now(UTC)
        await self.session.flush()
        return user

    async def complete_profile(self, user: User, data: ProfileUpdate) -> User:
        """
        Update phone, address and (while the profile is incomplete) role.

        Raises:
            InvalidInputError: Nothing to update, or the result would still lack phone/address
            ForbiddenActionError: Role change requested after the profile was completed
        """
        if data.phone is None and data.address is None and data.role is None:
            raise InvalidInputError("No profile fields provided")

        if data.role is not None and data.role != user.role:
            if user.profile_complete:
                raise ForbiddenActionError("Role can no longer be changed")
            logger.info(f"User {user.id} role changed: {user.role.value} -> {data.role.value}")
            user.role = data.role

        if data.phone is not None:
            user.phone = data.phone.strip()
        if data.address is not None:
            user.address = data.address.strip()

        if not user.profile_complete:
            raise InvalidInputError("Phone and address are both required")

        await self.session.flush()
        return user

    async def list_doctors(self) -> list[User]:
        result = await self.session.execute(
            select(User)
            .where(User.role == UserRole.DOCTOR, User.is_active.is_(True))
            .order_by(User.name)
        )
        return list(result.scalars().all())
