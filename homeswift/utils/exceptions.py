"""
Exception hierarchy for the HomeSwift API.
Every exception carries its HTTP status and the error code rendered as
{"error": {"code": ..., "message": ...}} by the error handler.
"""

from typing import Any, Dict, Optional, List
from fastapi import HTTPException, status


class APIException(HTTPException):
    """
    Base API exception.
    Subclasses set status_code, error_code and default_detail; instances may
    override the message and add response headers.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: Optional[str] = None
    default_detail: str = "Request failed"

    def __init__(self, detail: Optional[str] = None, headers: Optional[Dict[str, Any]] = None):
        super().__init__(
            status_code=type(self).status_code,
            detail=detail or self.default_detail,
            headers=headers
        )


# Generic HTTP errors
class BadRequestError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "BAD_REQUEST"
    default_detail = "Bad request"


class UnauthorizedError(APIException):
    """Authentication missing or rejected. Answers with a Bearer challenge."""

    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "UNAUTHORIZED"
    default_detail = "Authentication required"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class ForbiddenError(APIException):
    status_code = status.HTTP_403_FORBIDDEN
    error_code = "FORBIDDEN"
    default_detail = "Access forbidden"


class NotFoundError(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"

    def __init__(self, resource: str, resource_id: Optional[str] = None):
        detail = f"{resource} not found"
        if resource_id:
            detail += f" with ID: {resource_id}"
        super().__init__(detail)


class ConflictError(APIException):
    status_code = status.HTTP_409_CONFLICT
    error_code = "CONFLICT"
    default_detail = "Resource already exists"


class ValidationError(APIException):
    """Business validation failure, optionally with per-field details."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    error_code = "VALIDATION_ERROR"

    def __init__(self, detail: str, field_errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(detail)
        self.field_errors = field_errors or []


class RateLimitExceededError(APIException):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    error_code = "RATE_LIMIT_EXCEEDED"
    default_detail = "Rate limit exceeded"

    def __init__(self, retry_after: int):
        super().__init__(headers={"Retry-After": str(retry_after)})


class UpstreamServiceError(APIException):
    """Supabase or Google answered with an error."""

    status_code = status.HTTP_502_BAD_GATEWAY
    error_code = "UPSTREAM_ERROR"

    def __init__(self, service: str, detail: str):
        super().__init__(f"{service} error: {detail}")


class ServiceUnavailableError(APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    error_code = "SERVICE_UNAVAILABLE"
    default_detail = "Service temporarily unavailable"


# Accounts and sign-in
class InvalidCredentialsError(UnauthorizedError):
    default_detail = "Invalid email or password"


class TokenExpiredError(UnauthorizedError):
    default_detail = "Token has expired"


class InvalidTokenError(UnauthorizedError):
    default_detail = "Invalid token"


class InactiveUserError(UnauthorizedError):
    default_detail = "User account is inactive"


class InsufficientPermissionsError(ForbiddenError):
    def __init__(self, action: str):
        super().__init__(f"Insufficient permissions to {action}")


class DuplicateResourceError(ConflictError):
    def __init__(self, resource: str, identifier: str):
        super().__init__(f"{resource} with identifier '{identifier}' already exists")


class InvalidLinkTokenError(BadRequestError):
    """Unknown or expired token from an emailed verification or reset link."""

    def __init__(self, purpose: str):
        super().__init__(f"Invalid or expired {purpose} token")


class EmailAlreadyVerifiedError(BadRequestError):
    default_detail = "Email is already verified"


class GoogleSignInError(BadRequestError):
    """Google rejected the authorization code or returned an unusable profile."""

    def __init__(self, reason: str):
        super().__init__(f"Google authentication failed: {reason}")


class GoogleSignInUnavailableError(ServiceUnavailableError):
    default_detail = "Google sign-in is temporarily unavailable"


# Listings and user management
class PropertyNotFoundError(NotFoundError):
    def __init__(self, property_id: str):
        super().__init__("Property", property_id)


class PropertyOwnershipError(ForbiddenError):
    default_detail = "You don't own this property"


class SelfDeletionError(BadRequestError):
    default_detail = "Use DELETE /api/users/me to delete your own account"
