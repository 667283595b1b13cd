"""
Repository layer for data access operations.
Wraps async SQLAlchemy queries with consistent error handling and logging.
"""

from homeswift.repositories.base import BaseRepository
from homeswift.repositories.property import PropertyRepository, PropertySearchFilters
from homeswift.repositories.user import UserRepository
from homeswift.repositories.image import ImageRepository
from homeswift.repositories.favorite import FavoriteRepository
from homeswift.repositories.session import SessionRepository
from homeswift.repositories.waitlist import WaitlistRepository

__all__ = [
    "BaseRepository",
    "PropertyRepository",
    "PropertySearchFilters",
    "UserRepository",
    "ImageRepository",
    "FavoriteRepository",
    "SessionRepository",
    "WaitlistRepository"
]
