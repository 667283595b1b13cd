"""
API route handlers for the HomeSwift API.
"""

from .auth import router as auth_router
from .properties import router as properties_router
from .users import router as users_router
from .search import router as search_router
from .waitlist import router as waitlist_router
from .catalog import router as catalog_router

__all__ = [
    "auth_router",
    "properties_router",
    "users_router",
    "search_router",
    "waitlist_router",
    "catalog_router",
]
