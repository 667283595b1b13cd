"""
Property model for sale and rental listings.
Handles address, pricing, size and status data with the listing's image gallery.
"""

from sqlalchemy import (
    String, Text, Integer, Numeric, Boolean, Enum as SQLEnum, Index, ForeignKey, Uuid
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from homeswift.database import Base, utcnow
from homeswift.models.user import enum_values
from decimal import Decimal
import enum
import uuid
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from homeswift.models.image import PropertyImage


class PropertyType(str, enum.Enum):
    """Kind of building being listed."""
    HOUSE = "house"
    APARTMENT = "apartment"
    CONDO = "condo"
    TOWNHOUSE = "townhouse"
    LAND = "land"


class ListingType(str, enum.Enum):
    """Whether the property is offered for sale or for rent."""
    SALE = "sale"
    RENT = "rent"


class PropertyStatus(str, enum.Enum):
    """Lifecycle status of a listing."""
    ACTIVE = "active"
    PENDING = "pending"
    SOLD = "sold"
    RENTED = "rented"
    INACTIVE = "inactive"


class Property(Base):
    """
    Property listing.
    Owned by the user who created it; the owner reference is cleared if that account is removed.
    """

    __tablename__ = "properties"

    title: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    price: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=False,
        index=True,
        comment="Asking price or monthly rent"
    )

    # Address
    address: Mapped[str] = mapped_column(String(255), nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    state: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    zip_code: Mapped[Optional[str]] = mapped_column(String(20), nullable=True, index=True)
    country: Mapped[str] = mapped_column(String(100), nullable=False, default="US")

    # Rooms and size
    bedrooms: Mapped[int] = mapped_column(Integer, nullable=False, default=0, index=True)
    bathrooms: Mapped[Decimal] = mapped_column(
        Numeric(precision=4, scale=1),
        nullable=False,
        default=Decimal("0"),
        comment="Bathrooms, half baths allowed"
    )
    area_sqft: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    year_built: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    property_type: Mapped[PropertyType] = mapped_column(
        SQLEnum(PropertyType, values_callable=enum_values, native_enum=False, length=20),
        nullable=False,
        index=True
    )
    listing_type: Mapped[ListingType] = mapped_column(
        SQLEnum(ListingType, values_callable=enum_values, native_enum=False, length=10),
        nullable=False,
        default=ListingType.SALE,
        index=True
    )
    status: Mapped[PropertyStatus] = mapped_column(
        SQLEnum(PropertyStatus, values_callable=enum_values, native_enum=False, length=20),
        nullable=False,
        default=PropertyStatus.ACTIVE,
        index=True
    )
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)

    latitude: Mapped[Optional[Decimal]] = mapped_column(Numeric(precision=10, scale=8), nullable=True)
    longitude: Mapped[Optional[Decimal]] = mapped_column(Numeric(precision=11, scale=8), nullable=True)

    owner_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    images: Mapped[List["PropertyImage"]] = relationship(
        "PropertyImage",
        back_populates="property_rel",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="(PropertyImage.is_primary.desc(), PropertyImage.display_order.asc())"
    )

    def __repr__(self) -> str:
        return f"<Property(id={self.id}, title={self.title[:30]}..., price={self.price})>"

    @property
    def primary_image(self) -> Optional["PropertyImage"]:
        """Primary image, or the first image when none is flagged."""
        for image in self.images:
            if image.is_primary:
                return image
        return self.images[0] if self.images else None

    @property
    def full_address(self) -> str:
        parts = [self.address, self.city, self.state]
        return ", ".join(part for part in parts if part)

    def validate_price(self) -> None:
        """
        Validate property price.

        Raises:
            ValueError: If price is invalid
        """
        if self.price is None or Decimal(str(self.price)) <= 0:
            raise ValueError("Property price must be greater than 0")

        if Decimal(str(self.price)) > Decimal("999999999.99"):
            raise ValueError("Property price exceeds maximum allowed value")

    def validate_bedrooms(self) -> None:
        if self.bedrooms is None:
            return
        if self.bedrooms < 0:
            raise ValueError("Number of bedrooms cannot be negative")
        if self.bedrooms > 50:
            raise ValueError("Number of bedrooms exceeds reasonable limit")

    def validate_bathrooms(self) -> None:
        if self.bathrooms is None:
            return
        if Decimal(str(self.bathrooms)) < 0:
            raise ValueError("Number of bathrooms cannot be negative")
        if Decimal(str(self.bathrooms)) > 50:
            raise ValueError("Number of bathrooms exceeds reasonable limit")

    def validate_area(self) -> None:
        if self.area_sqft is None:
            return
        if self.area_sqft <= 0:
            raise ValueError("Property area must be greater than 0")
        if self.area_sqft > 1000000:
            raise ValueError("Property area exceeds reasonable limit")

    def validate_year_built(self) -> None:
        if self.year_built is None:
            return
        latest = utcnow().year + 1
        if not (1800 <= self.year_built <= latest):
            raise ValueError(f"Year built must be between 1800 and {latest}")

    def validate_coordinates(self) -> None:
        """
        Validate latitude and longitude coordinates.

        Raises:
            ValueError: If coordinates are invalid
        """
        if self.latitude is not None and not (-90 <= self.latitude <= 90):
            raise ValueError("Latitude must be between -90 and 90 degrees")

        if self.longitude is not None and not (-180 <= self.longitude <= 180):
            raise ValueError("Longitude must be between -180 and 180 degrees")

    def validate_all(self) -> None:
        """
        Run all validation checks on the property.

        Raises:
            ValueError: If any validation fails
        """
        self.validate_price()
        self.validate_bedrooms()
        self.validate_bathrooms()
        self.validate_area()
        self.validate_year_built()
        self.validate_coordinates()

    def to_dict(self, include_images: bool = True) -> dict:
        """
        Convert property to dictionary.

        Args:
            include_images: Whether to include the image gallery

        Returns:
            Dictionary representation of property
        """
        result = {
            "id": str(self.id),
            "title": self.title,
            "description": self.description,
            "price": float(self.price),
            "address": self.address,
            "city": self.city,
            "state": self.state,
            "zip_code": self.zip_code,
            "country": self.country,
            "bedrooms": self.bedrooms,
            "bathrooms": float(self.bathrooms) if self.bathrooms is not None else 0.0,
            "area_sqft": self.area_sqft,
            "year_built": self.year_built,
            "property_type": self.property_type.value,
            "listing_type": self.listing_type.value,
            "status": self.status.value,
            "is_featured": self.is_featured,
            "latitude": float(self.latitude) if self.latitude is not None else None,
            "longitude": float(self.longitude) if self.longitude is not None else None,
            "owner_id": str(self.owner_id) if self.owner_id else None,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

        if include_images:
            result["images"] = [image.to_dict() for image in self.images]
            primary = self.primary_image
            result["primary_image"] = primary.to_dict() if primary else None

        return result


# Composite indexes for the common search patterns
location_price_index = Index(
    "idx_properties_city_state_price",
    Property.city,
    Property.state,
    Property.price
)

status_created_index = Index(
    "idx_properties_status_created",
    Property.status,
    Property.created_at.desc()
)

featured_updated_index = Index(
    "idx_properties_featured_updated",
    Property.is_featured,
    Property.updated_at.desc()
)

search_optimization_index = Index(
    "idx_properties_search_optimization",
    Property.status,
    Property.property_type,
    Property.price,
    Property.bedrooms
)
