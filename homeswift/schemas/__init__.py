"""
Pydantic schemas for request and response validation.
"""

from homeswift.schemas.user import UserResponse, UserProfileUpdate, PasswordChangeRequest, UserListResponse
from homeswift.schemas.auth import (
    RegisterRequest,
    LoginRequest,
    LoginResponse,
    GoogleAuthRequest,
    RefreshTokenRequest,
    AccessTokenResponse,
    CurrentUserResponse,
    MessageResponse
)
from homeswift.schemas.property import (
    PropertyCreate,
    PropertyUpdate,
    PropertyResponse,
    PropertyImageCreate,
    PropertyImageResponse,
    PropertyListResponse,
    PropertySearchResponse,
    FeaturedPropertiesResponse,
    SavedPropertiesResponse
)
from homeswift.schemas.error import ErrorDetail, ErrorResponse, APIErrorResponse

__all__ = [
    "UserResponse",
    "UserProfileUpdate",
    "PasswordChangeRequest",
    "UserListResponse",
    "RegisterRequest",
    "LoginRequest",
    "LoginResponse",
    "GoogleAuthRequest",
    "RefreshTokenRequest",
    "AccessTokenResponse",
    "CurrentUserResponse",
    "MessageResponse",
    "PropertyCreate",
    "PropertyUpdate",
    "PropertyResponse",
    "PropertyImageCreate",
    "PropertyImageResponse",
    "PropertyListResponse",
    "PropertySearchResponse",
    "FeaturedPropertiesResponse",
    "SavedPropertiesResponse",
    "ErrorDetail",
    "ErrorResponse",
    "APIErrorResponse",
]
