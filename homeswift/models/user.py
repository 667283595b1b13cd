"""
User model with authentication and role management.
Covers buyers/renters, listing agents and administrators, including email verification,
password reset and Google sign-in state.
"""

from sqlalchemy import String, Boolean, DateTime, JSON, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column
from homeswift.database import Base
from homeswift.config import settings
from passlib.context import CryptContext
from email_validator import validate_email, EmailNotValidError
from datetime import datetime
import enum
import uuid
from typing import Any, Dict, Optional

# Password hashing context
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds
)


def enum_values(enum_class) -> list:
    """Persist enum values rather than member names."""
    return [member.value for member in enum_class]


class UserRole(str, enum.Enum):
    """User role enumeration for role-based access control."""
    USER = "user"
    AGENT = "agent"
    ADMIN = "admin"


class AuthProvider(str, enum.Enum):
    EMAIL = "email"
    GOOGLE = "google"


class User(Base):
    """
    User account.
    Password hashes are optional so that Google-only accounts can exist.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="Lowercased email address"
    )

    password_hash: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        comment="Bcrypt hashed password, empty for OAuth-only accounts"
    )

    # Profile
    first_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    last_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    avatar_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    preferences: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    # Role and status
    role: Mapped[UserRole] = mapped_column(
        SQLEnum(UserRole, values_callable=enum_values, native_enum=False, length=20),
        nullable=False,
        default=UserRole.USER,
        index=True
    )

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)

    # Email verification and password reset
    email_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    verification_token: Mapped[Optional[str]] = mapped_column(String(128), nullable=True, index=True)
    reset_password_token: Mapped[Optional[str]] = mapped_column(String(128), nullable=True, index=True)
    reset_password_expires: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    # Identity provider
    auth_provider: Mapped[AuthProvider] = mapped_column(
        SQLEnum(AuthProvider, values_callable=enum_values, native_enum=False, length=20),
        nullable=False,
        default=AuthProvider.EMAIL
    )
    google_id: Mapped[Optional[str]] = mapped_column(String(64), unique=True, nullable=True)

    last_login_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"

    @classmethod
    def validate_email_format(cls, email: str) -> str:
        """
        Validate email format using email-validator.

        Args:
            email: Email address to validate

        Returns:
            Normalized, lowercased email address

        Raises:
            ValueError: If email format is invalid
        """
        try:
            valid_email = validate_email(email.strip(), check_deliverability=False)
            return valid_email.normalized.lower()
        except EmailNotValidError as e:
            raise ValueError(f"Invalid email format: {str(e)}")

    @classmethod
    def hash_password(cls, password: str) -> str:
        """
        Hash a password using bcrypt.

        Raises:
            ValueError: If the password is shorter than 8 characters
        """
        if not password or len(password) < 8:
            raise ValueError("Password must be at least 8 characters long")

        return pwd_context.hash(password)

    def verify_password(self, password: str) -> bool:
        """Verify a password against the stored hash. Accounts without a hash never match."""
        if not self.password_hash or not password:
            return False
        return pwd_context.verify(password, self.password_hash)

    def set_password(self, password: str) -> None:
        self.password_hash = self.hash_password(password)

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_agent(self) -> bool:
        return self.role == UserRole.AGENT

    def can_manage_property(self, owner_id: Optional[uuid.UUID]) -> bool:
        """
        Check if user can manage a specific property.

        Admins manage every listing, other users only the listings they own.
        """
        if self.is_admin:
            return True
        return owner_id is not None and self.id == owner_id

    def to_dict(self) -> dict:
        """Convert user to dictionary (excluding secrets and tokens)."""
        return {
            "id": str(self.id),
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "full_name": self.full_name,
            "phone": self.phone,
            "address": self.address,
            "avatar_url": self.avatar_url,
            "preferences": self.preferences or {},
            "role": self.role.value,
            "is_active": self.is_active,
            "email_verified": self.email_verified,
            "auth_provider": self.auth_provider.value,
            "last_login_at": self.last_login_at.isoformat() if self.last_login_at else None,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
