"""
In-memory listing catalog.
Used for local development and demos when no hosted database is configured.
"""

import copy
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from homeswift.catalog.filters import CatalogFilters, CatalogPage, paginate

logger = logging.getLogger(__name__)


SAMPLE_LISTINGS: List[Dict[str, Any]] = [
    {
        "id": 1,
        "title": "Modern 2BR Apartment in Victoria Island",
        "price": 2500000,
        "location": "Victoria Island, Lagos",
        "bedrooms": 2,
        "bathrooms": 2,
        "area": 1200,
        "type": "apartment",
        "listing_type": "rent",
        "status": "for-rent",
        "images": ["/2bedroommainland.jpg"],
        "description": "Beautiful modern apartment with ocean views",
        "amenities": ["Swimming Pool", "Gym", "Security", "Parking"],
        "coordinates": {"lat": 6.4281, "lng": 3.4219},
        "createdAt": "2024-01-15T10:30:00Z",
    },
    {
        "id": 2,
        "title": "Luxury 3BR House in Lekki",
        "price": 5000000,
        "location": "Lekki Phase 1, Lagos",
        "bedrooms": 3,
        "bathrooms": 3,
        "area": 2000,
        "type": "house",
        "listing_type": "sale",
        "status": "for-sale",
        "images": ["/EkoAtlanticCity.jpg"],
        "description": "Spacious family home in prime location",
        "amenities": ["Garden", "Garage", "Security", "Generator"],
        "coordinates": {"lat": 6.4698, "lng": 3.5852},
        "createdAt": "2024-01-20T14:15:00Z",
    },
]


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _contains(haystack: Optional[str], needle: str) -> bool:
    return needle.lower() in (haystack or "").lower()


class MemoryCatalog:
    """
    Listing store backed by a Python list.
    Filtering is a linear scan; paging slices the filtered list.
    """

    def __init__(self, listings: Optional[List[Dict[str, Any]]] = None):
        source = SAMPLE_LISTINGS if listings is None else listings
        self.properties: List[Dict[str, Any]] = copy.deepcopy(source)

    async def get_all_properties(self, filters: Optional[CatalogFilters] = None) -> List[Dict[str, Any]]:
        """
        All listings matching the filters, in insertion order.

        Args:
            filters: Type, status, price range, bedrooms, bathrooms and location filters
        """
        filters = filters or CatalogFilters()
        results = list(self.properties)

        if filters.property_type:
            results = [p for p in results if p.get("type") == filters.property_type]
        if filters.listing_type:
            results = [p for p in results if p.get("listing_type") == filters.listing_type]
        if filters.status:
            results = [p for p in results if p.get("status") == filters.status]
        if filters.min_price is not None:
            results = [p for p in results if p.get("price", 0) >= filters.min_price]
        if filters.max_price is not None:
            results = [p for p in results if p.get("price", 0) <= filters.max_price]
        if filters.bedrooms is not None:
            results = [p for p in results if p.get("bedrooms") == filters.bedrooms]
        if filters.bathrooms is not None:
            results = [p for p in results if (p.get("bathrooms") or 0) >= filters.bathrooms]

        # The in-memory listings keep the whole address in "location"
        for needle in (filters.location, filters.city, filters.state):
            if needle:
                results = [p for p in results if _contains(p.get("location"), needle)]

        return results

    async def search_properties(
        self,
        query: Optional[str] = None,
        filters: Optional[CatalogFilters] = None,
        page: int = 1,
        limit: int = 20
    ) -> CatalogPage:
        """Filtered listings whose title, location or description contain the query."""
        results = await self.get_all_properties(filters)

        if query:
            term = query.strip().lower()
            results = [
                p for p in results
                if _contains(p.get("title"), term)
                or _contains(p.get("location"), term)
                or _contains(p.get("description"), term)
            ]

        logger.debug(f"Memory catalog search '{query}' matched {len(results)} listings")
        return paginate(results, page, limit)

    async def get_properties(
        self,
        page: int = 1,
        limit: int = 20,
        filters: Optional[CatalogFilters] = None
    ) -> CatalogPage:
        return paginate(await self.get_all_properties(filters), page, limit)

    async def get_property(self, listing_id: Any) -> Optional[Dict[str, Any]]:
        """Listing by id, or None. String ids are accepted."""
        try:
            wanted = int(listing_id)
        except (TypeError, ValueError):
            return None
        for listing in self.properties:
            if listing.get("id") == wanted:
                return listing
        return None

    async def create_property(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Append a listing with the next integer id and a creation stamp."""
        next_id = max((p.get("id", 0) for p in self.properties), default=0) + 1
        listing = {"id": next_id, **data, "createdAt": _now_iso()}
        self.properties.append(listing)
        logger.info(f"Memory catalog created listing {next_id}")
        return listing

    async def update_property(self, listing_id: Any, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Merge the data into a listing. Returns None when the listing is missing."""
        listing = await self.get_property(listing_id)
        if listing is None:
            return None
        changes = {key: value for key, value in data.items() if key != "id"}
        listing.update(changes, updatedAt=_now_iso())
        return listing

    async def delete_property(self, listing_id: Any) -> bool:
        listing = await self.get_property(listing_id)
        if listing is None:
            return False
        self.properties.remove(listing)
        return True

    async def check_connection(self) -> bool:
        return True
