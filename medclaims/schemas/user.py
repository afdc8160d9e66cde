"""
User Schemas
Pydantic models for account and profile API contracts
Source: https://docs.pydantic.dev/latest/
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from medclaims.core.enums import UserRole
from medclaims.utils.auth import BCRYPT_MAX_PASSWORD_BYTES


class UserCreate(BaseModel):
    """
    Schema for account creation.

    Role defaults to PATIENT when omitted.
    """

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72, description="Password (8 chars to 72 bytes)")
    role: UserRole = UserRole.PATIENT
    phone: str | None = Field(None, max_length=50)
    address: str | None = Field(None, max_length=1000)

    @field_validator("password")
    @classmethod
    def password_strength(cls, v: str) -> str:
        """Require at least one letter and one digit, within bcrypt's byte limit."""
        if len(v.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
            raise ValueError(f"Password cannot exceed {BCRYPT_MAX_PASSWORD_BYTES} bytes")
        if not any(c.isalpha() for c in v):
            raise ValueError("Password must contain at least one letter")
        if not any(c.isdigit() for c in v):
            raise ValueError("Password must contain at least one digit")
        return v


class ProfileUpdate(BaseModel):
    """Schema for profile completion (PUT /api/users/complete-profile)."""

    phone: str | None = Field(None, min_length=1, max_length=50)
    address: str | None = Field(None, min_length=1, max_length=1000)
    role: UserRole | None = None


class UserSummary(BaseModel):
    """Minimal user representation embedded in other responses."""

    id: UUID
    name: str | None = None
    email: EmailStr
    role: UserRole

    model_config = {"from_attributes": True}


class UserResponse(UserSummary):
    """Schema for user profile responses (excludes password)"""

    phone: str | None = None
    address: str | None = None
    is_active: bool = True
    profile_complete: bool
    created_at: datetime
    last_login: datetime | None = None


class ProfileUpdateResponse(BaseModel):
    message: str
    user: UserResponse
