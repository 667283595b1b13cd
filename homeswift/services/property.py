"""
Property service for managing listings with business rules.
Handles ownership checks, filter parsing, sorting and the image gallery.
"""

from typing import Optional, List, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from homeswift.config import settings
from homeswift.repositories.property import PropertyRepository, PropertySearchFilters, SORTABLE_FIELDS
from homeswift.repositories.image import ImageRepository
from homeswift.models.property import Property, PropertyStatus
from homeswift.models.image import PropertyImage
from homeswift.models.user import User
from homeswift.schemas.property import PropertyCreate, PropertyUpdate, PropertyImageCreate
from homeswift.utils.exceptions import (
    APIException,
    NotFoundError,
    ValidationError,
    BadRequestError,
    InsufficientPermissionsError,
    PropertyNotFoundError,
    PropertyOwnershipError
)
import math
import uuid
import logging

logger = logging.getLogger(__name__)


# camelCase sort keys sent by the frontend
SORT_ALIASES = {
    "squareFeet": "area_sqft",
    "areaSqft": "area_sqft",
    "yearBuilt": "year_built",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}

SORT_WHITELIST = ("price", "bedrooms", "bathrooms", "area_sqft", "year_built", "created_at")


def parse_bedrooms_filter(value: Optional[str]) -> Tuple[Optional[int], Optional[int]]:
    """
    Parse the bedrooms filter.

    Args:
        value: "3" for exactly three bedrooms, "3+" for three or more

    Returns:
        Tuple of (exact, minimum); at most one is set

    Raises:
        ValidationError: If the value is not a non-negative number
    """
    if value is None or not str(value).strip():
        return None, None

    text = str(value).strip()
    at_least = text.endswith("+")
    number = text[:-1].strip() if at_least else text

    if not number.isdigit():
        raise ValidationError(
            "bedrooms must be a number or a number followed by '+'",
            field_errors=[{"field": "bedrooms", "message": f"Invalid value: {value}"}]
        )

    return (None, int(number)) if at_least else (int(number), None)


def resolve_sort(sort_by: Optional[str], sort_order: Optional[str]) -> Tuple[str, str]:
    """
    Map a requested sort onto a sortable column.
    Unknown fields fall back to newest first.

    Returns:
        Tuple of (column name, "asc" | "desc")
    """
    field = SORT_ALIASES.get(sort_by or "", sort_by or "")
    if field not in SORT_WHITELIST or field not in SORTABLE_FIELDS:
        return "created_at", "desc"

    direction = (sort_order or "desc").lower()
    if direction not in ("asc", "desc"):
        direction = "desc"
    return field, direction


class PropertyService:
    """
    Property service for listings and their galleries.
    Agents and admins create listings; owners and admins change them.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.property_repo = PropertyRepository(db_session)
        self.image_repo = ImageRepository(db_session)

    async def create_property(self, property_data: PropertyCreate, current_user: User) -> Property:
        """
        Create a new listing owned by the current user.

        Raises:
            InsufficientPermissionsError: If the user is not an agent or admin
            ValidationError: If the listing fails model validation
        """
        if not (current_user.is_agent or current_user.is_admin):
            raise InsufficientPermissionsError("create properties")

        try:
            create_data = property_data.model_dump(exclude={"images"})
            create_data["owner_id"] = current_user.id

            property_obj = await self.property_repo.create_property(create_data)

            for image in property_data.images:
                await self.image_repo.add_image(property_obj.id, image.model_dump())

            logger.info(f"Property created by user {current_user.email}: {property_obj.title} (ID: {property_obj.id})")
            return await self.property_repo.get_property_with_details(property_obj.id)

        except APIException:
            raise
        except ValueError as e:
            raise ValidationError(str(e))
        except Exception as e:
            logger.error(f"Failed to create property for user {current_user.id}: {e}")
            raise BadRequestError(f"Failed to create property: {str(e)}")

    async def get_property(self, property_id: uuid.UUID) -> Property:
        """
        Get a listing with its images.

        Raises:
            PropertyNotFoundError: If the property doesn't exist
        """
        property_obj = await self.property_repo.get_property_with_details(property_id)

        if not property_obj:
            raise PropertyNotFoundError(str(property_id))

        return property_obj

    async def update_property(
        self,
        property_id: uuid.UUID,
        property_data: PropertyUpdate,
        current_user: User
    ) -> Property:
        """
        Update a listing. Only the owner or an admin may do so.

        Raises:
            PropertyNotFoundError: If the property doesn't exist
            PropertyOwnershipError: If the user doesn't own the property
            ValidationError: If the updated listing fails validation
        """
        property_obj = await self.get_property(property_id)
        self._check_ownership(property_obj, current_user)

        update_data = property_data.model_dump(exclude_none=True)
        if not update_data:
            return property_obj

        try:
            updated = await self.property_repo.update_property(property_id, update_data)
            logger.info(f"Property {property_id} updated by {current_user.email}")
            return updated
        except ValueError as e:
            raise ValidationError(str(e))
        except Exception as e:
            logger.error(f"Failed to update property {property_id}: {e}")
            raise BadRequestError(f"Failed to update property: {str(e)}")

    async def delete_property(self, property_id: uuid.UUID, current_user: User) -> None:
        """
        Delete a listing with its images. Only the owner or an admin may do so.

        Raises:
            PropertyNotFoundError: If the property doesn't exist
            PropertyOwnershipError: If the user doesn't own the property
        """
        property_obj = await self.get_property(property_id)
        self._check_ownership(property_obj, current_user)

        deleted = await self.property_repo.delete_property(property_id)
        if not deleted:
            raise PropertyNotFoundError(str(property_id))

        logger.info(f"Property {property_id} deleted by {current_user.email}")

    async def list_properties(
        self,
        filters: PropertySearchFilters,
        limit: int = 10,
        offset: int = 0,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None
    ) -> Tuple[List[Property], int, int]:
        """
        Offset-paginated listing.

        Returns:
            Tuple of (properties, total, effective limit)
        """
        limit = min(max(limit, 1), settings.max_page_size)
        offset = max(offset, 0)
        order_by, direction = resolve_sort(sort_by, sort_order)

        properties, total = await self.property_repo.search_properties(
            filters,
            skip=offset,
            limit=limit,
            order_by=order_by,
            order_direction=direction
        )
        return properties, total, limit

    async def search_properties(
        self,
        filters: PropertySearchFilters,
        page: int = 1,
        limit: Optional[int] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None
    ) -> Tuple[List[Property], int, int]:
        """
        Page-numbered search. Only active listings are searched unless a status is given.

        Returns:
            Tuple of (properties, total, total_pages)
        """
        if filters.status is None:
            filters.status = PropertyStatus.ACTIVE

        page = max(page, 1)
        limit = min(max(limit or settings.default_page_size, 1), settings.max_page_size)
        order_by, direction = resolve_sort(sort_by, sort_order)

        properties, total = await self.property_repo.search_properties(
            filters,
            skip=(page - 1) * limit,
            limit=limit,
            order_by=order_by,
            order_direction=direction
        )

        total_pages = math.ceil(total / limit) if total else 0
        logger.debug(f"Search page {page} returned {len(properties)} of {total} listings")
        return properties, total, total_pages

    async def get_featured_properties(self) -> List[Property]:
        return await self.property_repo.get_featured_properties(limit=settings.featured_limit)

    async def add_image(
        self,
        property_id: uuid.UUID,
        image_data: PropertyImageCreate,
        current_user: User
    ) -> PropertyImage:
        """
        Attach an image to a listing the user manages.

        Raises:
            PropertyNotFoundError: If the property doesn't exist
            PropertyOwnershipError: If the user doesn't own the property
        """
        property_obj = await self.get_property(property_id)
        self._check_ownership(property_obj, current_user)

        image = await self.image_repo.add_image(property_id, image_data.model_dump())
        logger.info(f"Image {image.id} added to property {property_id} by {current_user.email}")
        return image

    async def remove_image(self, property_id: uuid.UUID, image_id: uuid.UUID, current_user: User) -> None:
        """
        Remove an image from a listing the user manages.

        Raises:
            NotFoundError: If the image is not part of the listing
        """
        property_obj = await self.get_property(property_id)
        self._check_ownership(property_obj, current_user)

        removed = await self.image_repo.remove_image(property_id, image_id)
        if not removed:
            raise NotFoundError("Image", str(image_id))

    async def get_suggestions(self, text: Optional[str], limit: int = 8) -> List[str]:
        """Autocomplete suggestions from listing titles and cities."""
        if not text or not text.strip():
            return []
        return await self.property_repo.suggest_terms(text, limit=limit)

    def _check_ownership(self, property_obj: Property, current_user: User) -> None:
        if not current_user.can_manage_property(property_obj.owner_id):
            logger.warning(f"User {current_user.email} denied access to property {property_obj.id}")
            raise PropertyOwnershipError()
