"""
FastAPI dependency injection utilities for authentication, services and external clients.
Provides reusable dependencies for route protection and user extraction.
"""

from functools import lru_cache
from typing import Optional, Union
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from homeswift.config import settings
from homeswift.database import get_db
from homeswift.catalog import MemoryCatalog, SupabaseCatalog
from homeswift.integrations.google import GoogleOAuthClient
from homeswift.models.user import User, UserRole
from homeswift.services.auth import AuthService
from homeswift.services.session import SessionService
from homeswift.services.property import PropertyService
from homeswift.services.user import UserService
from homeswift.services.waitlist import WaitlistService
from homeswift.utils.exceptions import (
    UnauthorizedError,
    InvalidTokenError,
    TokenExpiredError,
    InactiveUserError,
    InsufficientPermissionsError,
    ServiceUnavailableError
)


# HTTP Bearer token security scheme
security = HTTPBearer(auto_error=False)

# Process-wide in-memory catalog
_memory_catalog = MemoryCatalog()


def get_google_client() -> Optional[GoogleOAuthClient]:
    """Google OAuth client, or None when GOOGLE_CLIENT_ID is not set."""
    if not settings.google_client_id:
        return None
    return GoogleOAuthClient(
        client_id=settings.google_client_id,
        client_secret=settings.google_client_secret,
        token_url=settings.google_token_url,
        userinfo_url=settings.google_userinfo_url
    )


@lru_cache()
def _supabase_catalog(url: str, api_key: str) -> SupabaseCatalog:
    # One client per project and key, created on first query
    return SupabaseCatalog(url, api_key)


def get_catalog() -> Union[MemoryCatalog, SupabaseCatalog]:
    """
    Catalog backend selected by CATALOG_BACKEND.

    Raises:
        ServiceUnavailableError: If Supabase is selected but not configured
    """
    if settings.catalog_backend == "supabase":
        if not settings.supabase_configured:
            raise ServiceUnavailableError("Supabase is not configured")
        return _supabase_catalog(settings.supabase_url, settings.supabase_key)
    return _memory_catalog


async def get_auth_service(
    db: AsyncSession = Depends(get_db),
    google_client: Optional[GoogleOAuthClient] = Depends(get_google_client)
) -> AuthService:
    return AuthService(db, google_client=google_client)


async def get_session_service(db: AsyncSession = Depends(get_db)) -> SessionService:
    return SessionService(db)


async def get_property_service(db: AsyncSession = Depends(get_db)) -> PropertyService:
    return PropertyService(db)


async def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)


async def get_waitlist_service(db: AsyncSession = Depends(get_db)) -> WaitlistService:
    return WaitlistService(db)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service),
    session_service: SessionService = Depends(get_session_service)
) -> User:
    """
    Get current authenticated user.
    A Bearer token wins; otherwise the "remember me" session cookie is used.

    Raises:
        UnauthorizedError: If neither a valid token nor a valid session is present
        TokenExpiredError: If token is expired
        InactiveUserError: If user account is inactive
    """
    if credentials:
        try:
            return await auth_service.get_current_user(credentials.credentials)
        except (InvalidTokenError, TokenExpiredError, InactiveUserError):
            raise
        except Exception as e:
            raise UnauthorizedError(f"Authentication failed: {str(e)}")

    user = await session_service.get_session_user(request.cookies.get(settings.session_cookie_name))
    if user is None:
        raise UnauthorizedError("Authentication token required")
    return user


async def get_current_active_user(
    current_user: User = Depends(get_current_user)
) -> User:
    """
    Raises:
        InactiveUserError: If user account is inactive
    """
    if not current_user.is_active:
        raise InactiveUserError()

    return current_user


async def get_current_admin_user(
    current_user: User = Depends(get_current_active_user)
) -> User:
    """
    Get current user with admin role.

    Raises:
        InsufficientPermissionsError: If user is not an admin
    """
    if current_user.role != UserRole.ADMIN:
        raise InsufficientPermissionsError("access admin resources")

    return current_user

