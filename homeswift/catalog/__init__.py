"""
Hosted listing catalog: an in-memory store for development and a Supabase client.
"""

from homeswift.catalog.filters import CatalogFilters, CatalogPage, paginate
from homeswift.catalog.memory import MemoryCatalog, SAMPLE_LISTINGS
from homeswift.catalog.supabase import SupabaseCatalog, SupabaseError

__all__ = [
    "CatalogFilters",
    "CatalogPage",
    "paginate",
    "MemoryCatalog",
    "SAMPLE_LISTINGS",
    "SupabaseCatalog",
    "SupabaseError",
]
