"""
Pydantic schemas for user profile requests and responses.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, List, Optional
from datetime import datetime
from homeswift.models.user import UserRole, AuthProvider
import uuid


class UserResponse(BaseModel):
    """User response schema (excluding passwords and one-time tokens)."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID = Field(..., description="User's unique identifier")
    email: str = Field(..., description="User's email address", examples=["buyer@example.com"])
    first_name: str = Field("", description="First name", examples=["Ada"])
    last_name: str = Field("", description="Last name", examples=["Obi"])
    full_name: str = Field("", description="First and last name", examples=["Ada Obi"])
    phone: Optional[str] = Field(None, description="Phone number")
    address: Optional[str] = Field(None, description="Postal address")
    avatar_url: Optional[str] = Field(None, description="Profile picture URL")
    preferences: Dict[str, Any] = Field(default_factory=dict, description="Saved search preferences")
    role: UserRole = Field(..., description="User's role", examples=["user"])
    is_active: bool = Field(..., description="Whether the account is active")
    email_verified: bool = Field(False, description="Whether the email address was confirmed")
    auth_provider: AuthProvider = Field(AuthProvider.EMAIL, description="How the account signs in")
    last_login_at: Optional[datetime] = Field(None, description="Last successful login")
    created_at: datetime = Field(..., description="Account creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    @field_validator("preferences", mode="before")
    @classmethod
    def default_preferences(cls, v):
        return v or {}


class UserProfileUpdate(BaseModel):
    """Schema for updating the current user's profile. Omitted fields are left unchanged."""

    first_name: Optional[str] = Field(None, max_length=100, examples=["Ada"])
    last_name: Optional[str] = Field(None, max_length=100, examples=["Obi"])
    phone: Optional[str] = Field(None, max_length=30, examples=["+2348012345678"])
    address: Optional[str] = Field(None, max_length=255)
    avatar_url: Optional[str] = Field(None, max_length=500)
    preferences: Optional[Dict[str, Any]] = Field(
        None,
        description="Search preferences",
        examples=[{"city": "Lagos", "maxPrice": 3000000}]
    )

    @field_validator("first_name", "last_name", "phone", "address", "avatar_url")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if v is not None else v


class PasswordChangeRequest(BaseModel):
    """Change the password of the signed-in user."""

    current_password: str = Field(..., max_length=128, description="Current password")
    new_password: str = Field(
        ...,
        min_length=8,
        max_length=128,
        description="New password (minimum 8 characters)",
        examples=["newpassword123"]
    )


class UserListResponse(BaseModel):
    """Paginated user list for administrators."""

    success: bool = True
    count: int = Field(..., description="Users on this page")
    total: int = Field(..., description="Users matching the search")
    page: int = Field(..., description="Current page number", examples=[1])
    page_size: int = Field(..., description="Users per page", examples=[20])
    total_pages: int = Field(..., description="Total number of pages")
    data: List[UserResponse]
