"""
Property listing API endpoints: listing, search, featured, CRUD and image galleries.
Query parameters use the camelCase names sent by the frontend.
"""

from fastapi import APIRouter, Depends, status, Query, Path, Response
from typing import Optional
from decimal import Decimal
from uuid import UUID

from homeswift.models.user import User
from homeswift.models.property import PropertyType, ListingType, PropertyStatus
from homeswift.repositories.property import PropertySearchFilters
from homeswift.services.property import PropertyService, parse_bedrooms_filter
from homeswift.schemas.property import (
    PropertyCreate,
    PropertyUpdate,
    PropertyResponse,
    PropertyListResponse,
    PropertySearchResponse,
    FeaturedPropertiesResponse,
    PropertyImageCreate,
    PropertyImageResponse
)
from homeswift.schemas.error import get_crud_error_responses, get_error_responses
from homeswift.utils.dependencies import get_current_active_user, get_property_service
from homeswift.utils.exceptions import APIException, BadRequestError


router = APIRouter(prefix="/properties", tags=["Properties"])


@router.get(
    "",
    response_model=PropertyListResponse,
    status_code=status.HTTP_200_OK,
    summary="List properties",
    description="Offset-paginated listings with filters and sorting",
    responses=get_error_responses(400, 422)
)
async def list_properties(
    min_price: Optional[Decimal] = Query(None, alias="minPrice", ge=0, description="Minimum price"),
    max_price: Optional[Decimal] = Query(None, alias="maxPrice", ge=0, description="Maximum price"),
    bedrooms: Optional[str] = Query(None, description="Exact bedrooms ('3') or at least ('3+')"),
    min_bathrooms: Optional[Decimal] = Query(None, alias="minBathrooms", ge=0),
    max_bathrooms: Optional[Decimal] = Query(None, alias="maxBathrooms", ge=0),
    property_type: Optional[PropertyType] = Query(None, alias="propertyType"),
    listing_type: Optional[ListingType] = Query(None, alias="listingType"),
    status_filter: Optional[PropertyStatus] = Query(None, alias="status"),
    city: Optional[str] = Query(None, description="City (partial match)"),
    state: Optional[str] = Query(None, description="State (partial match)"),
    min_sqft: Optional[int] = Query(None, alias="minSqft", ge=0),
    max_sqft: Optional[int] = Query(None, alias="maxSqft", ge=0),
    year_built: Optional[int] = Query(None, alias="yearBuilt", description="Built in or after this year"),
    sort_by: Optional[str] = Query(None, alias="sortBy", description="price, bedrooms, bathrooms, squareFeet, yearBuilt or createdAt"),
    sort_order: Optional[str] = Query(None, alias="sortOrder", description="asc or desc"),
    limit: int = Query(10, ge=1, description="Page size, capped at 50"),
    offset: int = Query(0, ge=0, description="Listings to skip"),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyListResponse:
    try:
        exact_bedrooms, min_bedrooms = parse_bedrooms_filter(bedrooms)

        filters = PropertySearchFilters(
            city=city,
            state=state,
            min_price=min_price,
            max_price=max_price,
            bedrooms=exact_bedrooms,
            min_bedrooms=min_bedrooms,
            min_bathrooms=min_bathrooms,
            max_bathrooms=max_bathrooms,
            min_area=min_sqft,
            max_area=max_sqft,
            min_year_built=year_built,
            property_type=property_type,
            listing_type=listing_type,
            status=status_filter
        )

        properties, total, effective_limit = await property_service.list_properties(
            filters, limit=limit, offset=offset, sort_by=sort_by, sort_order=sort_order
        )

        return PropertyListResponse(
            count=len(properties),
            total=total,
            limit=effective_limit,
            offset=offset,
            data=[PropertyResponse.model_validate(prop.to_dict()) for prop in properties]
        )

    except APIException:
        raise
    except Exception as e:
        raise BadRequestError(f"Failed to list properties: {str(e)}")


@router.get(
    "/search",
    response_model=PropertySearchResponse,
    status_code=status.HTTP_200_OK,
    summary="Search properties",
    description="Page-numbered search over active listings",
    responses=get_error_responses(400, 422)
)
async def search_properties(
    q: Optional[str] = Query(None, description="Free text over title, description and address"),
    location: Optional[str] = Query(None, description="City, state or zip code"),
    min_price: Optional[Decimal] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[Decimal] = Query(None, alias="maxPrice", ge=0),
    bedrooms: Optional[str] = Query(None, description="Exact bedrooms ('3') or at least ('3+')"),
    property_type: Optional[PropertyType] = Query(None, alias="propertyType"),
    listing_type: Optional[ListingType] = Query(None, alias="listingType"),
    status_filter: Optional[PropertyStatus] = Query(None, alias="status", description="Defaults to active"),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query(None, alias="sortOrder"),
    limit: Optional[int] = Query(None, ge=1, description="Page size, default 12, capped at 50"),
    page: int = Query(1, ge=1, description="Page number (starts from 1)"),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertySearchResponse:
    try:
        exact_bedrooms, min_bedrooms = parse_bedrooms_filter(bedrooms)

        filters = PropertySearchFilters(
            search_text=q,
            location=location,
            min_price=min_price,
            max_price=max_price,
            bedrooms=exact_bedrooms,
            min_bedrooms=min_bedrooms,
            property_type=property_type,
            listing_type=listing_type,
            status=status_filter
        )

        properties, total, total_pages = await property_service.search_properties(
            filters, page=page, limit=limit, sort_by=sort_by, sort_order=sort_order
        )

        return PropertySearchResponse(
            count=len(properties),
            total=total,
            page=page,
            total_pages=total_pages,
            data=[PropertyResponse.model_validate(prop.to_dict()) for prop in properties]
        )

    except APIException:
        raise
    except Exception as e:
        raise BadRequestError(f"Failed to search properties: {str(e)}")


@router.get(
    "/featured",
    response_model=FeaturedPropertiesResponse,
    status_code=status.HTTP_200_OK,
    summary="Featured properties"
)
async def get_featured_properties(
    property_service: PropertyService = Depends(get_property_service)
) -> FeaturedPropertiesResponse:
    properties = await property_service.get_featured_properties()
    return FeaturedPropertiesResponse(
        count=len(properties),
        data=[PropertyResponse.model_validate(prop.to_dict()) for prop in properties]
    )


@router.get(
    "/{property_id}",
    response_model=PropertyResponse,
    status_code=status.HTTP_200_OK,
    summary="Get property details",
    description="Get a listing with its image gallery",
    responses=get_error_responses(404, 422)
)
async def get_property(
    property_id: UUID = Path(..., description="Property ID"),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyResponse:
    property_obj = await property_service.get_property(property_id)
    return PropertyResponse.model_validate(property_obj.to_dict())


@router.post(
    "",
    response_model=PropertyResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create new property",
    description="Create a new property listing. Requires agent or admin role.",
    responses=get_crud_error_responses()
)
async def create_property(
    property_data: PropertyCreate,
    current_user: User = Depends(get_current_active_user),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyResponse:
    """
    Create a new property listing owned by the caller.

    Raises:
        InsufficientPermissionsError: If user is not an agent or admin
        ValidationError: If property data is invalid
    """
    try:
        property_obj = await property_service.create_property(property_data, current_user)
        return PropertyResponse.model_validate(property_obj.to_dict())

    except APIException:
        raise
    except Exception as e:
        raise BadRequestError(f"Failed to create property: {str(e)}")


@router.put(
    "/{property_id}",
    response_model=PropertyResponse,
    status_code=status.HTTP_200_OK,
    summary="Update property",
    description="Update a listing. Only its owner or an admin may do so.",
    responses=get_crud_error_responses()
)
async def update_property(
    property_data: PropertyUpdate,
    property_id: UUID = Path(..., description="Property ID"),
    current_user: User = Depends(get_current_active_user),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyResponse:
    try:
        property_obj = await property_service.update_property(property_id, property_data, current_user)
        return PropertyResponse.model_validate(property_obj.to_dict())

    except APIException:
        raise
    except Exception as e:
        raise BadRequestError(f"Failed to update property: {str(e)}")


@router.delete(
    "/{property_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete property",
    description="Delete a listing with its images. Only its owner or an admin may do so.",
    responses=get_crud_error_responses()
)
async def delete_property(
    property_id: UUID = Path(..., description="Property ID"),
    current_user: User = Depends(get_current_active_user),
    property_service: PropertyService = Depends(get_property_service)
) -> Response:
    await property_service.delete_property(property_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{property_id}/images",
    response_model=PropertyImageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add image",
    description="Attach an image URL to a listing's gallery",
    responses=get_crud_error_responses()
)
async def add_property_image(
    image_data: PropertyImageCreate,
    property_id: UUID = Path(..., description="Property ID"),
    current_user: User = Depends(get_current_active_user),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyImageResponse:
    image = await property_service.add_image(property_id, image_data, current_user)
    return PropertyImageResponse.model_validate(image.to_dict())


@router.delete(
    "/{property_id}/images/{image_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove image",
    responses=get_crud_error_responses()
)
async def remove_property_image(
    property_id: UUID = Path(..., description="Property ID"),
    image_id: UUID = Path(..., description="Image ID"),
    current_user: User = Depends(get_current_active_user),
    property_service: PropertyService = Depends(get_property_service)
) -> Response:
    await property_service.remove_image(property_id, image_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
