"""
Quick search and autocomplete endpoints used by the search bar.
"""

from fastapi import APIRouter, Depends, Query, status
from typing import Optional
import time

from homeswift.repositories.property import PropertySearchFilters
from homeswift.services.property import PropertyService
from homeswift.schemas.property import PropertyResponse
from homeswift.schemas.search import QuickSearchRequest, QuickSearchResponse, QuickSearchData, SuggestionsResponse
from homeswift.schemas.error import get_error_responses
from homeswift.utils.dependencies import get_property_service
from homeswift.utils.exceptions import APIException, BadRequestError


router = APIRouter(prefix="/search", tags=["Search"])


@router.get(
    "/suggestions",
    response_model=SuggestionsResponse,
    summary="Search suggestions",
    description="Up to 8 listing titles and cities containing the text"
)
async def get_suggestions(
    q: Optional[str] = Query(None, max_length=200, description="Partial search text"),
    property_service: PropertyService = Depends(get_property_service)
) -> SuggestionsResponse:
    suggestions = await property_service.get_suggestions(q)
    return SuggestionsResponse(data=suggestions)


@router.post(
    "",
    response_model=QuickSearchResponse,
    status_code=status.HTTP_200_OK,
    summary="Quick search",
    description="Free-text search over active listings with a few quick filters",
    responses=get_error_responses(400, 422)
)
async def quick_search(
    search_data: QuickSearchRequest,
    property_service: PropertyService = Depends(get_property_service)
) -> QuickSearchResponse:
    started = time.perf_counter()

    try:
        query = search_data.query.strip()
        quick_filters = search_data.filters

        filters = PropertySearchFilters(
            search_text=query or None,
            min_price=quick_filters.min_price,
            max_price=quick_filters.max_price,
            min_bedrooms=quick_filters.bedrooms,
            property_type=quick_filters.property_type
        )

        properties, total, _ = await property_service.search_properties(filters, page=1)

        return QuickSearchResponse(
            data=QuickSearchData(
                query=query,
                results=[PropertyResponse.model_validate(prop.to_dict()) for prop in properties],
                total_results=total,
                search_time=int((time.perf_counter() - started) * 1000)
            )
        )

    except APIException:
        raise
    except Exception as e:
        raise BadRequestError(f"Search failed: {str(e)}")
