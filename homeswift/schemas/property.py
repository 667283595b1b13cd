"""
Pydantic schemas for property requests and responses.
Handles listing create/update validation, image attachments and the list/search envelopes.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from homeswift.models.property import PropertyType, ListingType, PropertyStatus
import uuid


class PropertyImageCreate(BaseModel):
    """Image attached to a listing by URL."""

    image_url: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Public image URL",
        examples=["https://cdn.example.com/listings/1/front.jpg"]
    )
    caption: Optional[str] = Field(None, max_length=255, description="Image caption")
    is_primary: bool = Field(False, description="Use as the listing's main image")
    display_order: Optional[int] = Field(None, ge=0, description="Position in the gallery")

    @field_validator("image_url")
    @classmethod
    def validate_image_url(cls, v):
        v = v.strip()
        if not (v.startswith("http://") or v.startswith("https://") or v.startswith("/")):
            raise ValueError("Image URL must be an http(s) URL or an absolute path")
        return v


class PropertyImageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    property_id: uuid.UUID
    image_url: str
    caption: Optional[str] = None
    is_primary: bool
    display_order: int
    created_at: datetime


class PropertyBase(BaseModel):
    """Base property schema with common fields."""

    title: str = Field(
        ...,
        min_length=5,
        max_length=255,
        description="Property listing title",
        examples=["Luxury 3BR House in Lekki"]
    )
    description: str = Field(
        "",
        max_length=5000,
        description="Detailed property description",
        examples=["Spacious family home in prime location"]
    )
    price: Decimal = Field(..., gt=0, description="Asking price or monthly rent", examples=[5000000])

    address: str = Field(..., min_length=1, max_length=255, examples=["12 Admiralty Way"])
    city: str = Field(..., min_length=1, max_length=100, examples=["Lagos"])
    state: str = Field(..., min_length=1, max_length=100, examples=["Lagos"])
    zip_code: Optional[str] = Field(None, max_length=20, examples=["106104"])
    country: str = Field("US", max_length=100)

    bedrooms: int = Field(0, ge=0, le=50, description="Number of bedrooms", examples=[3])
    bathrooms: Decimal = Field(Decimal("0"), ge=0, le=50, description="Bathrooms, half baths allowed", examples=[2.5])
    area_sqft: Optional[int] = Field(None, gt=0, le=1000000, description="Area in square feet", examples=[2000])
    year_built: Optional[int] = Field(None, ge=1800, description="Year of construction", examples=[2015])

    property_type: PropertyType = Field(..., description="Kind of building", examples=["house"])
    listing_type: ListingType = Field(ListingType.SALE, description="For sale or for rent")
    status: PropertyStatus = Field(PropertyStatus.ACTIVE, description="Listing status")
    is_featured: bool = Field(False, description="Show on the featured strip")

    latitude: Optional[Decimal] = Field(None, ge=-90, le=90, examples=[6.4698])
    longitude: Optional[Decimal] = Field(None, ge=-180, le=180, examples=[3.5852])

    @field_validator("title", "address", "city", "state")
    @classmethod
    def strip_required_text(cls, v):
        if not v or not v.strip():
            raise ValueError("Field cannot be empty")
        return v.strip()

    @field_validator("description")
    @classmethod
    def strip_description(cls, v):
        return v.strip()

    @field_validator("price")
    @classmethod
    def validate_price(cls, v):
        """Validate price value."""
        if v > Decimal("999999999.99"):
            raise ValueError("Price exceeds maximum allowed value")
        return v

    @model_validator(mode="after")
    def validate_coordinates(self):
        """Validate that both coordinates are provided together or both are None."""
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("Both latitude and longitude must be provided together, or both must be None")
        return self


class PropertyCreate(PropertyBase):
    """Schema for creating a new property, optionally with its first images."""

    images: List[PropertyImageCreate] = Field(default_factory=list, description="Initial gallery")


class PropertyUpdate(BaseModel):
    """Schema for updating an existing property. Omitted fields are left unchanged."""

    title: Optional[str] = Field(None, min_length=5, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)
    price: Optional[Decimal] = Field(None, gt=0)
    address: Optional[str] = Field(None, min_length=1, max_length=255)
    city: Optional[str] = Field(None, min_length=1, max_length=100)
    state: Optional[str] = Field(None, min_length=1, max_length=100)
    zip_code: Optional[str] = Field(None, max_length=20)
    country: Optional[str] = Field(None, max_length=100)
    bedrooms: Optional[int] = Field(None, ge=0, le=50)
    bathrooms: Optional[Decimal] = Field(None, ge=0, le=50)
    area_sqft: Optional[int] = Field(None, gt=0, le=1000000)
    year_built: Optional[int] = Field(None, ge=1800)
    property_type: Optional[PropertyType] = None
    listing_type: Optional[ListingType] = None
    status: Optional[PropertyStatus] = None
    is_featured: Optional[bool] = None
    latitude: Optional[Decimal] = Field(None, ge=-90, le=90)
    longitude: Optional[Decimal] = Field(None, ge=-180, le=180)

    @field_validator("title", "address", "city", "state")
    @classmethod
    def strip_text(cls, v):
        if v is not None:
            if not v.strip():
                raise ValueError("Field cannot be empty")
            return v.strip()
        return v

    @field_validator("price")
    @classmethod
    def validate_price(cls, v):
        if v is not None and v > Decimal("999999999.99"):
            raise ValueError("Price exceeds maximum allowed value")
        return v

    @model_validator(mode="after")
    def validate_coordinates(self):
        if self.latitude is not None or self.longitude is not None:
            if (self.latitude is None) != (self.longitude is None):
                raise ValueError("Both latitude and longitude must be provided together, or both must be None")
        return self


class PropertyResponse(BaseModel):
    """Listing as returned by the API. Money and measures are plain numbers."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    description: str
    price: float
    address: str
    city: str
    state: str
    zip_code: Optional[str] = None
    country: str
    bedrooms: int
    bathrooms: float
    area_sqft: Optional[int] = None
    year_built: Optional[int] = None
    property_type: PropertyType
    listing_type: ListingType
    status: PropertyStatus
    is_featured: bool
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    owner_id: Optional[uuid.UUID] = None
    created_at: datetime
    updated_at: datetime
    images: List[PropertyImageResponse] = Field(default_factory=list)
    primary_image: Optional[PropertyImageResponse] = None


class PropertyListResponse(BaseModel):
    """Offset-paginated listing page."""

    success: bool = True
    count: int = Field(..., description="Listings on this page")
    total: int = Field(..., description="Listings matching the filters")
    limit: int
    offset: int
    data: List[PropertyResponse]


class PropertySearchResponse(BaseModel):
    """Page-numbered search results."""

    success: bool = True
    count: int
    total: int
    page: int
    total_pages: int = Field(..., serialization_alias="totalPages")
    data: List[PropertyResponse]


class FeaturedPropertiesResponse(BaseModel):
    success: bool = True
    count: int
    data: List[PropertyResponse]


class SavedPropertiesResponse(BaseModel):
    """A user's saved listings, most recently saved first."""

    success: bool = True
    count: int
    data: List[PropertyResponse]
