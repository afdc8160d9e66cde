"""
FastAPI Dependencies
Dependency injection for authentication, role checks and shared services
Source: https://fastapi.tiangolo.com/tutorial/dependencies/
"""

from collections.abc import Awaitable, Callable
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from medclaims.api.config import settings
from medclaims.core.enums import UserRole
from medclaims.db.connection import get_session
from medclaims.models.user import User
from medclaims.services.notifications import NotificationCenter
from medclaims.utils.auth import decode_token
from medclaims.utils.errors import AuthenticationError, PermissionDeniedError

# Bearer header is optional; the session cookie is accepted as well
security = HTTPBearer(auto_error=False)


def _extract_token(
    request: Request, credentials: HTTPAuthorizationCredentials | None
) -> str | None:
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.SESSION_COOKIE_NAME)


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    session: AsyncSession = Depends(get_session),
) -> User:
    """
    Get current authenticated user from the session token.

    The token is read from the ``Authorization: Bearer`` header, falling back to
    the session cookie set at login.

    Raises:
        AuthenticationError: Missing or invalid token, unknown or inactive user
    """
    token = _extract_token(request, credentials)
    if not token:
        raise AuthenticationError("Not authenticated")

    payload = decode_token(token)
    if payload is None:
        raise AuthenticationError("Invalid token")

    if payload.get("type") != "access":
        raise AuthenticationError("Invalid token type")

    user_id_str: str | None = payload.get("sub")
    if user_id_str is None:
        raise AuthenticationError("Invalid token payload")

    try:
        user_id = UUID(user_id_str)
    except ValueError as err:
        raise AuthenticationError("Invalid user ID in token") from err

    result = await session.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if user is None:
        raise AuthenticationError("User not found")

    if not user.is_active:
        raise AuthenticationError("User account is inactive")

    return user


def require_roles(*roles: UserRole) -> Callable[..., Awaitable[User]]:
    """
    Dependency factory restricting a route to the given roles.

    Usage:
        current_user: User = Depends(require_roles(UserRole.BANK))
    """
    allowed = frozenset(roles)

    async def checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            raise PermissionDeniedError(
                f"Requires role: {', '.join(sorted(r.value for r in allowed))}"
            )
        return current_user

    return checker


def get_notification_center(request: Request) -> NotificationCenter:
    """Notification center of the running application."""
    return request.app.state.notifications
