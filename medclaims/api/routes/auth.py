"""
Authentication Routes
JWT session tokens, delivered in the body and as an HTTP-only cookie
Source: https://fastapi.tiangolo.com/tutorial/security/oauth2-jwt/
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from medclaims.api.config import settings
from medclaims.db.connection import get_session
from medclaims.models.user import User
from medclaims.schemas.auth import LoginRequest, RefreshTokenRequest, Token
from medclaims.services.users_service import UsersService
from medclaims.utils.auth import create_access_token, create_refresh_token, decode_token
from medclaims.utils.errors import AuthenticationError
from medclaims.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _issue_tokens(user: User, response: Response) -> Token:
    claims = {"sub": str(user.id), "role": user.role.value}
    access_token = create_access_token(data=claims)
    refresh_token = create_refresh_token(data=claims)

    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=access_token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )

    return Token(
        access_token=access_token,
        refresh_token=refresh_token,
        token_type="bearer",  # nosec B106
    )


async def _login(email: str, password: str, session: AsyncSession, response: Response) -> Token:
    user = await UsersService(session).authenticate(email, password)
    if user is None:
        raise AuthenticationError("Incorrect email or password")

    logger.info(f"User logged in: {user.email}")
    return _issue_tokens(user, response)


@router.post("/login", response_model=Token)
async def login(
    response: Response,
    form_data: OAuth2PasswordRequestForm = Depends(),
    session: AsyncSession = Depends(get_session),
) -> Token:
    """Login with email (``username`` field) and password as form data."""
    return await _login(form_data.username, form_data.password, session, response)


@router.post("/login/json", response_model=Token)
async def login_json(
    login_data: LoginRequest,
    response: Response,
    session: AsyncSession = Depends(get_session),
) -> Token:
    """Login with a JSON body."""
    return await _login(login_data.email, login_data.password, session, response)


@router.post("/refresh", response_model=Token)
async def refresh_token(
    refresh_data: RefreshTokenRequest,
    response: Response,
    session: AsyncSession = Depends(get_session),
) -> Token:
    """Exchange a refresh token for a new token pair."""
    payload = decode_token(refresh_data.refresh_token)
    if payload is None or payload.get("type") != "refresh":
        raise AuthenticationError("Invalid refresh token")

    try:
        user_id = UUID(payload.get("sub", ""))
    except ValueError as err:
        raise AuthenticationError("Invalid token payload") from err

    result = await session.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if not user or not user.is_active:
        raise AuthenticationError("User not found or inactive")

    logger.info(f"Tokens refreshed for user: {user.email}")
    return _issue_tokens(user, response)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(response: Response) -> None:
    """Clear the session cookie."""
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
