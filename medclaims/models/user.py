"""
User Model
Accounts for every actor role (patient, doctor, insurance agent, bank representative)
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from medclaims.core.enums import UserRole
from medclaims.models.base import Base, TimeStampedModel, UUIDModel


class User(Base, UUIDModel, TimeStampedModel):
    """
    User account.

    Passwords are stored as bcrypt hashes. Accounts first created through an
    OAuth provider have no password hash. The role is chosen at signup and may
    be changed once more while the profile is still incomplete.
    """

    __tablename__ = "users"

    # Authentication
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    hashed_password: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Profile
    name: Mapped[str | None] = mapped_column(String(255))
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, name="user_role"),
        nullable=False,
        default=UserRole.PATIENT,
        index=True,
    )
    phone: Mapped[str | None] = mapped_column(String(50))
    address: Mapped[str | None] = mapped_column(Text)

    # Account Status
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    # OAuth
    oauth_provider: Mapped[str | None] = mapped_column(String(50))

    # Activity Tracking
    last_login: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    @property
    def profile_complete(self) -> bool:
        """A profile is complete once both phone and address are known."""
        return bool(self.phone) and bool(self.address)

    def __repr__(self) -> str:
        return f"<User {self.email} ({self.role.value if self.role else None})>"
