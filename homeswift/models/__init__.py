"""
Database models for the HomeSwift API.
Includes users, property listings with images, favorites, web sessions and the waitlist.
"""

from homeswift.models.user import User, UserRole, AuthProvider
from homeswift.models.property import Property, PropertyType, ListingType, PropertyStatus
from homeswift.models.image import PropertyImage
from homeswift.models.favorite import Favorite
from homeswift.models.session import UserSession
from homeswift.models.waitlist import WaitlistEntry

__all__ = [
    "User",
    "UserRole",
    "AuthProvider",
    "Property",
    "PropertyType",
    "ListingType",
    "PropertyStatus",
    "PropertyImage",
    "Favorite",
    "UserSession",
    "WaitlistEntry",
]
