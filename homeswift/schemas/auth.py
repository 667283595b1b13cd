"""
Pydantic schemas for authentication requests and responses.
Covers email/password login, Google sign-in, token refresh, email verification and password reset.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import List, Optional
from homeswift.schemas.user import UserResponse


class RegisterRequest(BaseModel):
    """Account registration schema."""

    email: EmailStr = Field(..., description="User's email address", examples=["buyer@example.com"])
    password: str = Field(
        ...,
        min_length=8,
        max_length=128,
        description="Password with at least one letter and one number",
        examples=["securepassword123"]
    )
    first_name: str = Field(..., min_length=1, max_length=100, examples=["Ada"])
    last_name: str = Field(..., min_length=1, max_length=100, examples=["Obi"])
    phone: Optional[str] = Field(None, max_length=30)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        return v.lower().strip()

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip()

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        """Validate password strength."""
        if not any(c.isalpha() for c in v):
            raise ValueError("Password must contain at least one letter")
        if not any(c.isdigit() for c in v):
            raise ValueError("Password must contain at least one number")
        return v


class LoginRequest(BaseModel):
    """Login request schema."""

    email: EmailStr = Field(..., description="User's email address", examples=["buyer@example.com"])
    password: str = Field(..., max_length=128, description="User's password", examples=["securepassword123"])
    remember_me: bool = Field(False, description="Also open a server session kept in a cookie")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.lower().strip()


class GoogleAuthRequest(BaseModel):
    """Authorization code returned to the frontend by Google's consent screen."""

    code: Optional[str] = Field(None, description="Authorization code")
    redirect_uri: Optional[str] = Field(None, description="Redirect URI the code was issued for")


class RefreshTokenRequest(BaseModel):
    refresh_token: str = Field(..., description="Valid refresh token")


class AccessTokenResponse(BaseModel):
    """Access token response schema."""

    access_token: str = Field(..., description="New JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Access token expiration time in seconds", examples=[604800])


class CurrentUserResponse(UserResponse):
    """Current user with the permissions granted by their role."""

    permissions: List[str] = Field(
        default_factory=list,
        description="User's permissions based on role",
        examples=[["save_property", "create_property", "update_own_property"]]
    )


class LoginResponse(BaseModel):
    """Complete login response schema."""

    user: CurrentUserResponse = Field(..., description="Authenticated user information")
    access_token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., description="JWT refresh token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Access token expiration time in seconds")
    provider: Optional[str] = Field(None, description="Identity provider for social sign-in", examples=["google"])


class VerifyEmailRequest(BaseModel):
    token: str = Field(..., min_length=1, description="Token from the verification link")


class ForgotPasswordRequest(BaseModel):
    email: EmailStr = Field(..., description="Account email address")


class ResetPasswordRequest(BaseModel):
    token: str = Field(..., min_length=1, description="Token from the reset link")
    new_password: str = Field(..., min_length=8, max_length=128, description="New password")


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    success: bool = True
    message: str
