"""
Pydantic schemas for the quick-search endpoints used by the chat-style search page.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from decimal import Decimal
from homeswift.models.property import PropertyType
from homeswift.schemas.property import PropertyResponse


class QuickSearchFilters(BaseModel):
    """Filters sent by the frontend with camelCase names."""

    model_config = ConfigDict(populate_by_name=True)

    min_price: Optional[Decimal] = Field(None, alias="minPrice", ge=0)
    max_price: Optional[Decimal] = Field(None, alias="maxPrice", ge=0)
    bedrooms: Optional[int] = Field(None, ge=0, le=50, description="Minimum bedrooms")
    property_type: Optional[PropertyType] = Field(None, alias="type")


class QuickSearchRequest(BaseModel):
    query: str = Field("", max_length=200, examples=["3 bedroom in Lagos"])
    filters: QuickSearchFilters = Field(default_factory=QuickSearchFilters)


class QuickSearchData(BaseModel):
    query: str
    results: List[PropertyResponse]
    total_results: int = Field(..., serialization_alias="totalResults")
    search_time: int = Field(..., serialization_alias="searchTime", description="Milliseconds")


class QuickSearchResponse(BaseModel):
    success: bool = True
    data: QuickSearchData


class SuggestionsResponse(BaseModel):
    success: bool = True
    data: List[str] = Field(..., examples=[["Luxury 3BR House in Lekki", "Lagos"]])
