"""
Business logic layer.
Services validate permissions and business rules on top of the repositories.
"""

from homeswift.services.auth import AuthService
from homeswift.services.session import SessionService
from homeswift.services.property import PropertyService, parse_bedrooms_filter, resolve_sort
from homeswift.services.user import UserService
from homeswift.services.waitlist import WaitlistService
from homeswift.services.error_handler import ErrorHandlerService

__all__ = [
    "AuthService",
    "SessionService",
    "PropertyService",
    "parse_bedrooms_filter",
    "resolve_sort",
    "UserService",
    "WaitlistService",
    "ErrorHandlerService",
]
