"""
Authentication API endpoints: registration, login, Google sign-in, tokens and
the email verification and password reset flows.
"""

from fastapi import APIRouter, Depends, Request, Response, status
from homeswift.config import settings
from homeswift.models.user import User
from homeswift.services.auth import AuthService
from homeswift.services.session import SessionService
from homeswift.schemas.auth import (
    RegisterRequest,
    LoginRequest,
    LoginResponse,
    GoogleAuthRequest,
    RefreshTokenRequest,
    AccessTokenResponse,
    CurrentUserResponse,
    VerifyEmailRequest,
    ForgotPasswordRequest,
    ResetPasswordRequest,
    MessageResponse
)
from homeswift.schemas.error import get_auth_error_responses, get_error_responses
from homeswift.utils.dependencies import (
    get_auth_service,
    get_session_service,
    get_current_active_user
)
from homeswift.utils.exceptions import (
    APIException,
    BadRequestError,
    GoogleSignInError,
    InvalidCredentialsError,
    InvalidTokenError
)
from typing import Optional
import logging

logger = logging.getLogger(__name__)


router = APIRouter(prefix="/auth", tags=["Authentication"])


def _login_response(
    auth_service: AuthService,
    user: User,
    access_token: str,
    refresh_token: str,
    provider: Optional[str] = None
) -> LoginResponse:
    user_response = CurrentUserResponse.model_validate({
        **user.to_dict(),
        "permissions": auth_service.get_user_permissions(user)
    })
    return LoginResponse(
        user=user_response,
        access_token=access_token,
        refresh_token=refresh_token,
        token_type="bearer",
        expires_in=settings.access_token_expire_minutes * 60,
        provider=provider
    )


@router.post(
    "/register",
    response_model=LoginResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new account",
    description="Create an email/password account and return JWT tokens",
    responses=get_error_responses(400, 409, 422)
)
async def register(
    register_data: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> LoginResponse:
    """
    Register a new user. A verification link is issued for the email address.

    Raises:
        DuplicateResourceError: If the email is already registered
    """
    try:
        user, access_token, refresh_token = await auth_service.register(register_data)
        return _login_response(auth_service, user, access_token, refresh_token)
    except APIException:
        raise
    except Exception as e:
        raise BadRequestError(f"Failed to register user: {str(e)}")


@router.post(
    "/login",
    response_model=LoginResponse,
    status_code=status.HTTP_200_OK,
    summary="User login",
    description="Authenticate user with email and password, returns JWT tokens",
    responses=get_auth_error_responses()
)
async def login(
    login_data: LoginRequest,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service),
    session_service: SessionService = Depends(get_session_service)
) -> LoginResponse:
    """
    Authenticate user and return JWT tokens.
    With remember_me a server session is opened and its id set as an httpOnly cookie.

    Raises:
        InvalidCredentialsError: If credentials are invalid
        InactiveUserError: If user account is inactive
    """
    try:
        user, access_token, refresh_token = await auth_service.login(
            email=login_data.email,
            password=login_data.password
        )

        if login_data.remember_me:
            session = await session_service.create_session(user, {"remember_me": True})
            response.set_cookie(
                key=settings.session_cookie_name,
                value=session.sid,
                max_age=settings.session_expire_days * 24 * 60 * 60,
                httponly=True,
                secure=settings.is_production,
                samesite="lax"
            )

        return _login_response(auth_service, user, access_token, refresh_token)

    except APIException:
        raise
    except Exception as e:
        logger.error(f"Login failed for {login_data.email}: {e}")
        raise InvalidCredentialsError()


@router.post(
    "/google",
    response_model=LoginResponse,
    status_code=status.HTTP_200_OK,
    summary="Sign in with Google",
    description="Exchange a Google authorization code for HomeSwift tokens",
    responses=get_error_responses(400, 401, 503)
)
async def google_login(
    google_data: GoogleAuthRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> LoginResponse:
    """
    Sign in with Google. Unknown Google accounts are registered on first use.
    """
    try:
        user, access_token, refresh_token = await auth_service.google_login(
            code=google_data.code,
            redirect_uri=google_data.redirect_uri
        )
        return _login_response(auth_service, user, access_token, refresh_token, provider="google")
    except APIException:
        raise
    except Exception as e:
        raise GoogleSignInError(str(e))


@router.post(
    "/refresh",
    response_model=AccessTokenResponse,
    status_code=status.HTTP_200_OK,
    summary="Refresh access token",
    description="Generate new access token using refresh token",
    responses=get_auth_error_responses()
)
async def refresh_token(
    refresh_data: RefreshTokenRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> AccessTokenResponse:
    try:
        access_token = await auth_service.refresh_access_token(
            refresh_token=refresh_data.refresh_token
        )

        return AccessTokenResponse(
            access_token=access_token,
            token_type="bearer",
            expires_in=settings.access_token_expire_minutes * 60
        )

    except APIException:
        raise
    except Exception:
        raise InvalidTokenError("Failed to refresh token")


@router.get(
    "/me",
    response_model=CurrentUserResponse,
    status_code=status.HTTP_200_OK,
    summary="Get current user",
    description="Get current authenticated user information with permissions",
    responses=get_auth_error_responses()
)
async def get_current_user_info(
    current_user: User = Depends(get_current_active_user),
    auth_service: AuthService = Depends(get_auth_service)
) -> CurrentUserResponse:
    return CurrentUserResponse.model_validate({
        **current_user.to_dict(),
        "permissions": auth_service.get_user_permissions(current_user)
    })


@router.post(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="User logout",
    description="Destroy the cookie session. Bearer tokens are discarded client-side."
)
async def logout(
    request: Request,
    session_service: SessionService = Depends(get_session_service)
) -> Response:
    sid = request.cookies.get(settings.session_cookie_name)
    if await session_service.destroy_session(sid):
        logger.info("Session closed on logout")

    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    response.delete_cookie(settings.session_cookie_name)
    return response


@router.post(
    "/verify-email",
    response_model=MessageResponse,
    summary="Verify email address",
    responses=get_error_responses(400, 422)
)
async def verify_email(
    verify_data: VerifyEmailRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> MessageResponse:
    await auth_service.verify_email(verify_data.token)
    return MessageResponse(message="Email verified successfully")


@router.post(
    "/resend-verification",
    response_model=MessageResponse,
    summary="Resend verification email",
    responses=get_error_responses(400, 401)
)
async def resend_verification(
    current_user: User = Depends(get_current_active_user),
    auth_service: AuthService = Depends(get_auth_service)
) -> MessageResponse:
    await auth_service.resend_verification(current_user)
    return MessageResponse(message="Verification email sent")


@router.post(
    "/forgot-password",
    response_model=MessageResponse,
    summary="Request a password reset",
    description="Always succeeds so that registered addresses cannot be discovered",
    responses=get_error_responses(422)
)
async def forgot_password(
    forgot_data: ForgotPasswordRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> MessageResponse:
    await auth_service.request_password_reset(forgot_data.email)
    return MessageResponse(message="If an account exists for that email, a reset link has been sent")


@router.post(
    "/reset-password",
    response_model=MessageResponse,
    summary="Reset password",
    responses=get_error_responses(400, 422)
)
async def reset_password(
    reset_data: ResetPasswordRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> MessageResponse:
    await auth_service.reset_password(reset_data.token, reset_data.new_password)
    return MessageResponse(message="Password has been reset")
