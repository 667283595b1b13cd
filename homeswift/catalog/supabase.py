"""
Supabase catalog client.
Queries the listings table through the supabase async client.
"""

import logging
from typing import Any, Dict, Optional

import httpx
from postgrest.exceptions import APIError
from supabase import AsyncClient, acreate_client

from homeswift.catalog.filters import CatalogFilters, CatalogPage

logger = logging.getLogger(__name__)

LISTING_SELECT = "*,property_images(url,caption,is_primary,display_order)"
DETAIL_SELECT = "*,property_images(url,caption,alt_text,display_order,is_primary)"

# Postgres invalid_text_representation, e.g. "abc" compared with an integer id
INVALID_TEXT_CODE = "22P02"

# Characters with meaning inside a PostgREST or=(...) expression
_RESERVED = str.maketrans({",": " ", "(": " ", ")": " ", "*": " ", "%": " "})


class SupabaseError(Exception):
    """Supabase was unreachable or answered with an error."""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.code = code


def _clean(term: Optional[str]) -> str:
    return (term or "").translate(_RESERVED).strip()


class SupabaseCatalog:
    """
    Listing catalog stored in a Supabase project.
    Only active listings are served, newest first.
    """

    def __init__(
        self,
        url: str,
        api_key: str,
        table: str = "properties",
        client: Optional[AsyncClient] = None
    ):
        self.url = url
        self.api_key = api_key
        self.table = table
        self._client = client

    async def get_client(self) -> AsyncClient:
        """
        Create the supabase client on first use.

        Raises:
            SupabaseError: If the URL or key is rejected
        """
        if self._client is None:
            try:
                self._client = await acreate_client(self.url, self.api_key)
                logger.info("Supabase client initialized")
            except Exception as e:
                raise SupabaseError(f"Failed to create Supabase client: {e}")
        return self._client

    async def _select(self, columns: str, count: Optional[str] = None):
        client = await self.get_client()
        return client.table(self.table).select(columns, count=count)

    @staticmethod
    async def _execute(query):
        try:
            return await query.execute()
        except APIError as e:
            logger.error(f"Supabase returned {e.code}: {e.message}")
            raise SupabaseError(e.message or "Supabase request failed", code=e.code)
        except httpx.HTTPError as e:
            logger.error(f"Supabase request failed: {e}")
            raise SupabaseError(f"Could not reach Supabase: {e}")

    @staticmethod
    def _apply_filters(query, filters: CatalogFilters):
        query = query.eq("status", filters.status or "active")
        if filters.listing_type:
            query = query.eq("listing_type", filters.listing_type)
        if filters.property_type:
            query = query.eq("property_type", filters.property_type)
        if filters.min_price is not None:
            query = query.gte("price", filters.min_price)
        if filters.max_price is not None:
            query = query.lte("price", filters.max_price)
        if filters.bedrooms is not None:
            query = query.eq("bedrooms", filters.bedrooms)
        if filters.bathrooms is not None:
            query = query.gte("bathrooms", filters.bathrooms)
        if filters.city:
            query = query.ilike("city", f"%{filters.city.strip()}%")
        if filters.state:
            query = query.ilike("state", f"%{filters.state.strip()}%")
        if filters.location:
            term = _clean(filters.location)
            query = query.or_(f"street_address.ilike.%{term}%,city.ilike.%{term}%,state.ilike.%{term}%")
        return query

    async def _page(self, query, page: int, limit: int) -> CatalogPage:
        page = max(page, 1)
        limit = max(limit, 1)
        start = (page - 1) * limit

        response = await self._execute(
            query.order("created_at", desc=True).range(start, start + limit - 1)
        )

        rows = response.data or []
        total = response.count if response.count is not None else len(rows)
        return CatalogPage(properties=rows, total_count=total, current_page=page, limit=limit)

    async def get_properties(
        self,
        page: int = 1,
        limit: int = 20,
        filters: Optional[CatalogFilters] = None
    ) -> CatalogPage:
        """
        Active listings with their images, filtered and paged.

        Raises:
            SupabaseError: On transport or API failure
        """
        query = self._apply_filters(
            await self._select(LISTING_SELECT, count="exact"),
            filters or CatalogFilters()
        )

        result = await self._page(query, page, limit)
        logger.debug(f"Supabase returned {len(result.properties)} of {result.total_count} listings")
        return result

    async def search_properties(
        self,
        query: str,
        filters: Optional[CatalogFilters] = None,
        page: int = 1,
        limit: int = 20
    ) -> CatalogPage:
        """Active listings whose title, description, street address or city contain the term."""
        term = _clean(query)
        select = self._apply_filters(
            await self._select(LISTING_SELECT, count="exact"),
            filters or CatalogFilters()
        ).or_(
            f"title.ilike.%{term}%,description.ilike.%{term}%,"
            f"street_address.ilike.%{term}%,city.ilike.%{term}%"
        )

        return await self._page(select, page, limit)

    async def get_property(self, listing_id: Any) -> Optional[Dict[str, Any]]:
        """
        Single listing with images, or None when it does not exist.
        An id the column cannot hold counts as not found.

        Raises:
            SupabaseError: On transport or API failure
        """
        query = (await self._select(DETAIL_SELECT)).eq("id", listing_id).limit(1)
        try:
            response = await self._execute(query)
        except SupabaseError as e:
            if e.code == INVALID_TEXT_CODE:
                return None
            raise

        return response.data[0] if response.data else None

    async def check_connection(self) -> bool:
        """Select one id to prove the URL, key and table are usable."""
        await self._execute((await self._select("id")).limit(1))
        return True
