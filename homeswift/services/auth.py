"""
Authentication service for registration, login, Google sign-in and token management.
Also owns the email verification and password reset flows.
"""

from typing import Optional, Tuple, List
from datetime import timedelta
from sqlalchemy.ext.asyncio import AsyncSession
from homeswift.config import settings
from homeswift.database import utcnow, as_utc
from homeswift.integrations.google import GoogleOAuthClient, GoogleOAuthError
from homeswift.repositories.user import UserRepository
from homeswift.models.user import User, UserRole, AuthProvider
from homeswift.schemas.auth import RegisterRequest
from homeswift.utils.auth import (
    create_access_token,
    create_refresh_token,
    verify_token,
    generate_secure_token
)
from homeswift.utils.exceptions import (
    APIException,
    InvalidCredentialsError,
    InvalidTokenError,
    TokenExpiredError,
    InactiveUserError,
    NotFoundError,
    ValidationError,
    BadRequestError,
    DuplicateResourceError,
    EmailAlreadyVerifiedError,
    GoogleSignInError,
    GoogleSignInUnavailableError,
    InvalidLinkTokenError
)
from jose import JWTError
import uuid
import logging

logger = logging.getLogger(__name__)


ROLE_PERMISSIONS = {
    UserRole.USER: [
        "view_properties",
        "save_property",
        "update_profile"
    ],
    UserRole.AGENT: [
        "view_properties",
        "save_property",
        "update_profile",
        "create_property",
        "update_own_property",
        "delete_own_property"
    ],
    UserRole.ADMIN: [
        "view_properties",
        "save_property",
        "update_profile",
        "create_property",
        "update_any_property",
        "delete_any_property",
        "manage_users",
        "view_waitlist"
    ],
}


class AuthService:
    """
    Authentication service for managing user authentication and account security flows.
    Google sign-in is available when a GoogleOAuthClient is supplied.
    """

    def __init__(self, db_session: AsyncSession, google_client: Optional[GoogleOAuthClient] = None):
        self.db = db_session
        self.user_repo = UserRepository(db_session)
        self.google_client = google_client

    async def register(self, data: RegisterRequest) -> Tuple[User, str, str]:
        """
        Register a new email/password account with the USER role.

        Returns:
            Tuple of (user, access_token, refresh_token)

        Raises:
            DuplicateResourceError: If the email is already registered
            ValidationError: If the email or password is rejected
        """
        try:
            if await self.user_repo.get_by_email(data.email):
                logger.warning(f"Registration attempt with existing email: {data.email}")
                raise DuplicateResourceError("User", data.email)

            user = await self.user_repo.create_user({
                "email": data.email,
                "password": data.password,
                "first_name": data.first_name,
                "last_name": data.last_name,
                "phone": data.phone,
                "role": UserRole.USER,
                "auth_provider": AuthProvider.EMAIL,
                "verification_token": generate_secure_token(),
            })

            self._log_verification_link(user)
            access_token, refresh_token = await self.create_tokens(user)

            logger.info(f"User registered: {user.email} (ID: {user.id})")
            return user, access_token, refresh_token

        except APIException:
            raise
        except ValueError as e:
            raise ValidationError(str(e))
        except Exception as e:
            logger.error(f"Registration failed for {data.email}: {e}")
            raise BadRequestError(f"Failed to register user: {str(e)}")

    async def authenticate_user(self, email: str, password: str) -> User:
        """
        Authenticate user with email and password.

        Raises:
            ValidationError: If email or password is empty
            InvalidCredentialsError: If credentials are invalid
            InactiveUserError: If user account is inactive
        """
        if not email or not email.strip():
            raise ValidationError("Email is required")

        if not password or not password.strip():
            raise ValidationError("Password is required")

        try:
            user = await self.user_repo.authenticate_user(email, password)
        except Exception as e:
            logger.error(f"Authentication error for {email}: {e}")
            raise InvalidCredentialsError()

        if not user:
            logger.warning(f"Failed authentication attempt for email: {email}")
            raise InvalidCredentialsError()

        if not user.is_active:
            logger.warning(f"Login attempt on inactive account: {email}")
            raise InactiveUserError()

        logger.info(f"User authenticated successfully: {user.email}")
        return user

    async def create_tokens(self, user: User) -> Tuple[str, str]:
        """Create access and refresh tokens for user."""
        access_token = create_access_token(
            user_id=user.id,
            email=user.email,
            role=user.role
        )

        refresh_token = create_refresh_token(
            user_id=user.id,
            email=user.email
        )

        return access_token, refresh_token

    async def login(self, email: str, password: str) -> Tuple[User, str, str]:
        """
        Authenticate user, stamp the login time and create tokens.

        Returns:
            Tuple of (user, access_token, refresh_token)
        """
        user = await self.authenticate_user(email, password)

        user.last_login_at = utcnow()
        await self.user_repo.save(user)

        access_token, refresh_token = await self.create_tokens(user)
        return user, access_token, refresh_token

    async def google_login(self, code: Optional[str], redirect_uri: Optional[str]) -> Tuple[User, str, str]:
        """
        Sign in with a Google authorization code.
        The account is matched by Google id, then linked by email when Google has
        verified the address, else created.

        Raises:
            BadRequestError: If the code or redirect_uri is missing
            GoogleSignInError: If Google rejects the code or the profile
            GoogleSignInUnavailableError: If Google sign-in is unavailable
            InactiveUserError: If the matched account is inactive
        """
        if not code or not redirect_uri:
            raise BadRequestError("Missing code or redirect_uri")

        if self.google_client is None:
            raise GoogleSignInUnavailableError("Google sign-in is not configured")

        try:
            _, profile = await self.google_client.authenticate(code, redirect_uri)
        except GoogleOAuthError as e:
            if e.unreachable:
                raise GoogleSignInUnavailableError()
            raise GoogleSignInError(str(e))

        google_id = profile.get("id") or profile.get("sub")
        email = profile.get("email")
        if not google_id or not email:
            raise GoogleSignInError("profile is missing an id or email address")

        verified = bool(profile.get("verified_email", profile.get("email_verified", False)))

        try:
            user = await self.user_repo.get_by_google_id(str(google_id))
            if user is None:
                user = await self.user_repo.get_by_email(email)
                if user is not None:
                    if not verified:
                        raise GoogleSignInError("email address is not verified with Google")
                    user.google_id = str(google_id)
                    user.email_verified = True
                    if not user.avatar_url:
                        user.avatar_url = profile.get("picture")
                    logger.info(f"Linked Google account to existing user: {user.email}")
                else:
                    user = await self.user_repo.create_user({
                        "email": email,
                        "first_name": profile.get("given_name") or "",
                        "last_name": profile.get("family_name") or "",
                        "avatar_url": profile.get("picture"),
                        "google_id": str(google_id),
                        "auth_provider": AuthProvider.GOOGLE,
                        "email_verified": verified,
                        "role": UserRole.USER,
                    })
                    logger.info(f"Created user from Google sign-in: {user.email}")
        except ValueError as e:
            raise GoogleSignInError(f"account could not be used: {e}")

        if not user.is_active:
            raise InactiveUserError()

        user.last_login_at = utcnow()
        await self.user_repo.save(user)

        access_token, refresh_token = await self.create_tokens(user)
        return user, access_token, refresh_token

    async def refresh_access_token(self, refresh_token: str) -> str:
        """
        Create new access token from refresh token.

        Raises:
            InvalidTokenError: If refresh token is invalid
            TokenExpiredError: If refresh token is expired
            NotFoundError: If user not found
            InactiveUserError: If user account is inactive
        """
        try:
            token_payload = verify_token(refresh_token, token_type="refresh")
            user = await self.get_user_by_id(uuid.UUID(token_payload.user_id))

            if not user.is_active:
                raise InactiveUserError()

            return create_access_token(
                user_id=user.id,
                email=user.email,
                role=user.role
            )

        except JWTError as e:
            if "expired" in str(e).lower():
                raise TokenExpiredError()
            raise InvalidTokenError(str(e))
        except ValueError:
            raise InvalidTokenError("Invalid token subject")

    async def get_current_user(self, token: str) -> User:
        """
        Get current user from access token.

        Raises:
            InvalidTokenError: If token is invalid or its user is gone
            TokenExpiredError: If token is expired
            InactiveUserError: If user account is inactive
        """
        try:
            token_payload = verify_token(token, token_type="access")
            user = await self.user_repo.get_by_id(uuid.UUID(token_payload.user_id))

            if not user:
                raise InvalidTokenError("User no longer exists")

            if not user.is_active:
                raise InactiveUserError()

            return user

        except JWTError as e:
            if "expired" in str(e).lower():
                raise TokenExpiredError()
            raise InvalidTokenError(str(e))
        except ValueError:
            raise InvalidTokenError("Invalid token subject")

    async def get_user_by_id(self, user_id: uuid.UUID) -> User:
        """
        Get user by ID.

        Raises:
            NotFoundError: If user not found
        """
        user = await self.user_repo.get_by_id(user_id)

        if not user:
            raise NotFoundError("User", str(user_id))

        return user

    async def verify_email(self, token: str) -> User:
        """
        Confirm an email address with the token from the verification link.

        Raises:
            InvalidLinkTokenError: If the token is unknown
        """
        user = await self.user_repo.get_by_verification_token(token) if token else None
        if user is None:
            raise InvalidLinkTokenError("verification")

        user.email_verified = True
        user.verification_token = None
        await self.user_repo.save(user)

        logger.info(f"Email verified for user: {user.email}")
        return user

    async def resend_verification(self, user: User) -> None:
        """
        Issue a new verification token.

        Raises:
            EmailAlreadyVerifiedError: If the email is already verified
        """
        if user.email_verified:
            raise EmailAlreadyVerifiedError()

        user.verification_token = generate_secure_token()
        await self.user_repo.save(user)
        self._log_verification_link(user)

    async def request_password_reset(self, email: str) -> None:
        """
        Issue a password reset token.
        Unknown or inactive accounts are ignored so callers cannot probe for emails.
        """
        user = await self.user_repo.get_by_email(email)
        if user is None or not user.is_active:
            logger.info(f"Password reset requested for unknown or inactive email: {email}")
            return

        user.reset_password_token = generate_secure_token()
        user.reset_password_expires = utcnow() + timedelta(minutes=settings.password_reset_expire_minutes)
        await self.user_repo.save(user)

        logger.info(
            f"Password reset link for {user.email}: "
            f"{settings.frontend_url}/reset-password?token={user.reset_password_token}"
        )

    async def reset_password(self, token: str, new_password: str) -> User:
        """
        Set a new password with a reset token.

        Raises:
            InvalidLinkTokenError: If the token is unknown or expired
            ValidationError: If the new password is rejected
        """
        user = await self.user_repo.get_by_reset_token(token) if token else None
        expires = as_utc(user.reset_password_expires) if user else None
        if user is None or expires is None or expires <= utcnow():
            raise InvalidLinkTokenError("reset")

        try:
            user.set_password(new_password)
        except ValueError as e:
            raise ValidationError(str(e))

        user.reset_password_token = None
        user.reset_password_expires = None
        await self.user_repo.save(user)

        logger.info(f"Password reset completed for user: {user.email}")
        return user

    async def change_password(self, user: User, current_password: str, new_password: str) -> User:
        """
        Change the password of a signed-in user.
        Accounts created through Google have no password yet and may set one directly.

        Raises:
            InvalidCredentialsError: If the current password is wrong
            ValidationError: If the new password is rejected
        """
        if user.password_hash and not user.verify_password(current_password):
            logger.warning(f"Password change with wrong current password: {user.email}")
            raise InvalidCredentialsError("Current password is incorrect")

        try:
            user.set_password(new_password)
        except ValueError as e:
            raise ValidationError(str(e))

        await self.user_repo.save(user)
        logger.info(f"Password changed for user: {user.id}")
        return user

    def get_user_permissions(self, user: User) -> List[str]:
        return list(ROLE_PERMISSIONS.get(user.role, []))

    def _log_verification_link(self, user: User) -> None:
        logger.info(
            f"Email verification link for {user.email}: "
            f"{settings.frontend_url}/verify-email?token={user.verification_token}"
        )
