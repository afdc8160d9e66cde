"""
Authentication Schemas
Pydantic models for authentication endpoints
Source: https://fastapi.tiangolo.com/tutorial/security/oauth2-jwt/
"""

from pydantic import BaseModel, EmailStr


class Token(BaseModel):
    """JWT token response (RFC 6749 section 5.1)."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class LoginRequest(BaseModel):
    """Login credentials"""

    email: EmailStr
    password: str


class RefreshTokenRequest(BaseModel):
    """Refresh token request"""

    refresh_token: str
