"""
Hosted catalog endpoints.
Serve listings from the configured catalog backend (Supabase or the in-memory store).
"""

from fastapi import APIRouter, Depends, Query, Path
from typing import Optional, Union

from homeswift.catalog import CatalogFilters, CatalogPage, MemoryCatalog, SupabaseCatalog, SupabaseError
from homeswift.config import settings
from homeswift.schemas.catalog import CatalogListResponse, CatalogPagination, CatalogPropertyResponse
from homeswift.schemas.error import get_error_responses
from homeswift.utils.dependencies import get_catalog
from homeswift.utils.exceptions import BadRequestError, NotFoundError, UpstreamServiceError
import logging

logger = logging.getLogger(__name__)


router = APIRouter(prefix="/catalog", tags=["Catalog"])

Catalog = Union[MemoryCatalog, SupabaseCatalog]


def get_catalog_filters(
    listing_type: Optional[str] = Query(None, alias="listingType", description="sale or rent"),
    property_type: Optional[str] = Query(None, alias="propertyType"),
    status: Optional[str] = Query(None, description="Listing status"),
    min_price: Optional[float] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[float] = Query(None, alias="maxPrice", ge=0),
    bedrooms: Optional[int] = Query(None, ge=0, description="Exact bedrooms"),
    bathrooms: Optional[float] = Query(None, ge=0, description="Minimum bathrooms"),
    city: Optional[str] = Query(None),
    state: Optional[str] = Query(None),
    location: Optional[str] = Query(None, description="Matches address, city or state")
) -> CatalogFilters:
    return CatalogFilters(
        listing_type=listing_type,
        property_type=property_type,
        status=status,
        min_price=min_price,
        max_price=max_price,
        bedrooms=bedrooms,
        bathrooms=bathrooms,
        city=city,
        state=state,
        location=location
    )


def _page_response(result: CatalogPage) -> CatalogListResponse:
    return CatalogListResponse(
        data=result.properties,
        pagination=CatalogPagination(
            current_page=result.current_page,
            total_pages=result.total_pages,
            total_count=result.total_count,
            limit=result.limit
        )
    )


def _upstream_error(error: SupabaseError) -> UpstreamServiceError:
    logger.error(f"Catalog backend error: {error}")
    return UpstreamServiceError("Supabase", str(error))


@router.get(
    "/properties",
    response_model=CatalogListResponse,
    summary="List catalog properties",
    responses=get_error_responses(422, 502, 503)
)
async def list_catalog_properties(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
    filters: CatalogFilters = Depends(get_catalog_filters),
    catalog: Catalog = Depends(get_catalog)
) -> CatalogListResponse:
    try:
        result = await catalog.get_properties(page, min(limit, settings.max_page_size), filters)
    except SupabaseError as e:
        raise _upstream_error(e)
    return _page_response(result)


@router.get(
    "/properties/search",
    response_model=CatalogListResponse,
    summary="Search catalog properties",
    responses=get_error_responses(400, 422, 502, 503)
)
async def search_catalog_properties(
    q: Optional[str] = Query(None, description="Search text"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
    filters: CatalogFilters = Depends(get_catalog_filters),
    catalog: Catalog = Depends(get_catalog)
) -> CatalogListResponse:
    if not q or not q.strip():
        raise BadRequestError("Search query is required")

    try:
        result = await catalog.search_properties(q, filters, page, min(limit, settings.max_page_size))
    except SupabaseError as e:
        raise _upstream_error(e)
    return _page_response(result)


@router.get(
    "/properties/{listing_id}",
    response_model=CatalogPropertyResponse,
    summary="Get catalog property",
    responses=get_error_responses(404, 502, 503)
)
async def get_catalog_property(
    listing_id: str = Path(..., description="Listing ID"),
    catalog: Catalog = Depends(get_catalog)
) -> CatalogPropertyResponse:
    try:
        listing = await catalog.get_property(listing_id)
    except SupabaseError as e:
        raise _upstream_error(e)

    if listing is None:
        raise NotFoundError("Property", listing_id)
    return CatalogPropertyResponse(data=listing)
