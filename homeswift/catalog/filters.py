"""
Filter and paging types shared by the catalog backends.
"""

import math
from typing import Any, Dict, List, Optional, Sequence


class CatalogFilters:
    """Listing filters accepted by every catalog backend."""

    def __init__(
        self,
        listing_type: Optional[str] = None,
        property_type: Optional[str] = None,
        status: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        bedrooms: Optional[int] = None,
        bathrooms: Optional[float] = None,
        city: Optional[str] = None,
        state: Optional[str] = None,
        location: Optional[str] = None
    ):
        self.listing_type = listing_type
        self.property_type = property_type
        self.status = status
        self.min_price = min_price
        self.max_price = max_price
        self.bedrooms = bedrooms  # exact
        self.bathrooms = bathrooms  # minimum
        self.city = city
        self.state = state
        self.location = location

    def to_dict(self) -> Dict[str, Any]:
        """Filters that are set, by name."""
        return {key: value for key, value in vars(self).items() if value not in (None, "")}

    def __repr__(self) -> str:
        return f"<CatalogFilters({self.to_dict()})>"


class CatalogPage:
    """One page of catalog listings with its paging metadata."""

    def __init__(self, properties: List[Dict[str, Any]], total_count: int, current_page: int, limit: int):
        self.properties = properties
        self.total_count = total_count
        self.current_page = current_page
        self.limit = limit

    @property
    def total_pages(self) -> int:
        if self.limit <= 0:
            return 0
        return math.ceil(self.total_count / self.limit)

    def pagination(self) -> Dict[str, int]:
        return {
            "currentPage": self.current_page,
            "totalPages": self.total_pages,
            "totalCount": self.total_count,
            "limit": self.limit,
        }


def paginate(rows: Sequence[Dict[str, Any]], page: int, limit: int) -> CatalogPage:
    """
    Slice one page out of already filtered rows.

    Args:
        rows: All matching rows
        page: 1-based page number (values below 1 are treated as 1)
        limit: Page size (values below 1 are treated as 1)

    Returns:
        CatalogPage with rows [(page-1)*limit, page*limit)
    """
    page = max(page, 1)
    limit = max(limit, 1)
    start = (page - 1) * limit
    return CatalogPage(
        properties=list(rows[start:start + limit]),
        total_count=len(rows),
        current_page=page,
        limit=limit
    )
