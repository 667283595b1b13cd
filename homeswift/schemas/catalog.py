"""
Pydantic schemas for the hosted catalog endpoints.
Catalog rows are passed through as stored, so listings are plain objects.
"""

from pydantic import BaseModel, Field
from typing import Any, Dict, List


class CatalogPagination(BaseModel):
    current_page: int = Field(..., serialization_alias="currentPage")
    total_pages: int = Field(..., serialization_alias="totalPages")
    total_count: int = Field(..., serialization_alias="totalCount")
    limit: int


class CatalogListResponse(BaseModel):
    success: bool = True
    data: List[Dict[str, Any]]
    pagination: CatalogPagination


class CatalogPropertyResponse(BaseModel):
    success: bool = True
    data: Dict[str, Any]
