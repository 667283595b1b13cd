"""
Property repository for managing listings with search and filtering.
Builds one set of filter conditions shared by the page query and its count.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, and_, or_, func, desc, asc
from sqlalchemy.orm import selectinload
from homeswift.repositories.base import BaseRepository, LIKE_ESCAPE, contains_pattern
from homeswift.models.property import Property, PropertyType, ListingType, PropertyStatus
from homeswift.models.favorite import Favorite
from typing import Optional, List, Dict, Any, Tuple
from decimal import Decimal
import uuid
import logging

logger = logging.getLogger(__name__)


class PropertySearchFilters:
    """Data class for property search filters."""

    def __init__(
        self,
        search_text: Optional[str] = None,
        location: Optional[str] = None,
        city: Optional[str] = None,
        state: Optional[str] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        bedrooms: Optional[int] = None,
        min_bedrooms: Optional[int] = None,
        min_bathrooms: Optional[Decimal] = None,
        max_bathrooms: Optional[Decimal] = None,
        min_area: Optional[int] = None,
        max_area: Optional[int] = None,
        min_year_built: Optional[int] = None,
        property_type: Optional[PropertyType] = None,
        listing_type: Optional[ListingType] = None,
        status: Optional[PropertyStatus] = None,
        is_featured: Optional[bool] = None,
        owner_id: Optional[uuid.UUID] = None
    ):
        self.search_text = search_text
        self.location = location
        self.city = city
        self.state = state
        self.min_price = min_price
        self.max_price = max_price
        self.bedrooms = bedrooms
        self.min_bedrooms = min_bedrooms
        self.min_bathrooms = min_bathrooms
        self.max_bathrooms = max_bathrooms
        self.min_area = min_area
        self.max_area = max_area
        self.min_year_built = min_year_built
        self.property_type = property_type
        self.listing_type = listing_type
        self.status = status
        self.is_featured = is_featured
        self.owner_id = owner_id


# Columns accepted by search_properties(order_by=...)
SORTABLE_FIELDS = ("price", "bedrooms", "bathrooms", "area_sqft", "year_built", "created_at", "updated_at")


class PropertyRepository(BaseRepository[Property]):
    """
    Repository for property listings.
    Images are always eager-loaded with the listings returned.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Property, db)

    async def create_property(self, property_data: Dict[str, Any]) -> Property:
        """
        Create a new property after model validation.

        Raises:
            ValueError: If validation fails
        """
        try:
            Property(**property_data).validate_all()

            created_property = await self.create(property_data)
            logger.info(f"Created property: {created_property.title} (ID: {created_property.id})")
            return await self.get_property_with_details(created_property.id)
        except ValueError as e:
            logger.error(f"Property validation failed: {e}")
            raise
        except Exception as e:
            logger.error(f"Failed to create property: {e}")
            raise

    async def update_property(self, property_id: uuid.UUID, update_data: Dict[str, Any]) -> Optional[Property]:
        """
        Update a property and re-validate it.

        Raises:
            ValueError: If the updated listing fails validation
        """
        try:
            property_obj = await self.get_by_id(property_id)
            if property_obj is None:
                return None

            for field, value in update_data.items():
                if value is not None and hasattr(Property, field):
                    setattr(property_obj, field, value)
            property_obj.validate_all()

            await self.db.commit()
            logger.info(f"Updated property {property_id}")
            return await self.get_property_with_details(property_id)
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to update property {property_id}: {e}")
            raise

    async def get_property_with_details(self, property_id: uuid.UUID) -> Optional[Property]:
        """
        Get property with its image gallery, re-read from the database.

        Args:
            property_id: UUID of the property

        Returns:
            Property with loaded images or None if not found
        """
        try:
            query = (
                select(Property)
                .options(selectinload(Property.images))
                .where(Property.id == property_id)
                .execution_options(populate_existing=True)
            )

            result = await self.db.execute(query)
            property_obj = result.scalar_one_or_none()

            if property_obj:
                logger.debug(f"Retrieved property with details: {property_id}")

            return property_obj
        except Exception as e:
            logger.error(f"Failed to get property with details {property_id}: {e}")
            raise

    async def search_properties(
        self,
        filters: PropertySearchFilters,
        skip: int = 0,
        limit: int = 20,
        order_by: str = "created_at",
        order_direction: str = "desc"
    ) -> Tuple[List[Property], int]:
        """
        Search properties with filtering and pagination.

        Args:
            filters: PropertySearchFilters instance with search criteria
            skip: Number of records to skip for pagination
            limit: Maximum number of records to return
            order_by: Field to order by
            order_direction: 'asc' or 'desc'

        Returns:
            Tuple of (properties list, total count)
        """
        try:
            query = select(Property).options(selectinload(Property.images))
            count_query = select(func.count(Property.id))

            conditions = self._build_filter_conditions(filters)
            if conditions:
                query = query.where(and_(*conditions))
                count_query = count_query.where(and_(*conditions))

            count_result = await self.db.execute(count_query)
            total_count = count_result.scalar()

            if order_by not in SORTABLE_FIELDS:
                order_by, order_direction = "created_at", "desc"
            order_field = getattr(Property, order_by)
            if order_direction.lower() == "asc":
                query = query.order_by(asc(order_field), asc(Property.id))
            else:
                query = query.order_by(desc(order_field), desc(Property.id))

            query = query.offset(skip).limit(limit)

            result = await self.db.execute(query)
            properties = result.scalars().all()

            logger.debug(f"Property search returned {len(properties)} of {total_count} total results")
            return list(properties), total_count
        except Exception as e:
            logger.error(f"Failed to search properties: {e}")
            raise

    def _build_filter_conditions(self, filters: PropertySearchFilters) -> List:
        """
        Build SQLAlchemy filter conditions from search filters.

        Args:
            filters: PropertySearchFilters instance

        Returns:
            List of SQLAlchemy conditions
        """
        conditions = []

        # Free text across the descriptive and address columns
        if filters.search_text:
            term = contains_pattern(filters.search_text)
            conditions.append(
                or_(
                    Property.title.ilike(term, escape=LIKE_ESCAPE),
                    Property.description.ilike(term, escape=LIKE_ESCAPE),
                    Property.address.ilike(term, escape=LIKE_ESCAPE),
                    Property.city.ilike(term, escape=LIKE_ESCAPE),
                    Property.state.ilike(term, escape=LIKE_ESCAPE),
                    Property.zip_code.ilike(term, escape=LIKE_ESCAPE)
                )
            )

        if filters.location:
            term = contains_pattern(filters.location)
            conditions.append(
                or_(
                    Property.city.ilike(term, escape=LIKE_ESCAPE),
                    Property.state.ilike(term, escape=LIKE_ESCAPE),
                    Property.zip_code.ilike(term, escape=LIKE_ESCAPE)
                )
            )

        if filters.city:
            conditions.append(Property.city.ilike(contains_pattern(filters.city), escape=LIKE_ESCAPE))
        if filters.state:
            conditions.append(Property.state.ilike(contains_pattern(filters.state), escape=LIKE_ESCAPE))

        # Price range
        if filters.min_price is not None:
            conditions.append(Property.price >= filters.min_price)
        if filters.max_price is not None:
            conditions.append(Property.price <= filters.max_price)

        # Bedrooms: exact count or "N+"
        if filters.bedrooms is not None:
            conditions.append(Property.bedrooms == filters.bedrooms)
        if filters.min_bedrooms is not None:
            conditions.append(Property.bedrooms >= filters.min_bedrooms)

        if filters.min_bathrooms is not None:
            conditions.append(Property.bathrooms >= filters.min_bathrooms)
        if filters.max_bathrooms is not None:
            conditions.append(Property.bathrooms <= filters.max_bathrooms)

        if filters.min_area is not None:
            conditions.append(Property.area_sqft >= filters.min_area)
        if filters.max_area is not None:
            conditions.append(Property.area_sqft <= filters.max_area)

        if filters.min_year_built is not None:
            conditions.append(Property.year_built >= filters.min_year_built)

        if filters.property_type:
            conditions.append(Property.property_type == filters.property_type)
        if filters.listing_type:
            conditions.append(Property.listing_type == filters.listing_type)
        if filters.status:
            conditions.append(Property.status == filters.status)
        if filters.is_featured is not None:
            conditions.append(Property.is_featured == filters.is_featured)
        if filters.owner_id:
            conditions.append(Property.owner_id == filters.owner_id)

        return conditions

    async def get_featured_properties(self, limit: int = 6) -> List[Property]:
        """Featured active listings, most recently updated first."""
        try:
            query = (
                select(Property)
                .options(selectinload(Property.images))
                .where(
                    and_(
                        Property.is_featured.is_(True),
                        Property.status == PropertyStatus.ACTIVE
                    )
                )
                .order_by(desc(Property.updated_at))
                .limit(limit)
            )

            result = await self.db.execute(query)
            properties = result.scalars().all()

            logger.debug(f"Retrieved {len(properties)} featured properties")
            return list(properties)
        except Exception as e:
            logger.error(f"Failed to get featured properties: {e}")
            raise

    async def delete_property(self, property_id: uuid.UUID) -> bool:
        """
        Delete a property together with its images and the favorites pointing at it.

        Returns:
            True if the property existed and was deleted
        """
        try:
            property_obj = await self.get_property_with_details(property_id)
            if property_obj is None:
                return False

            await self.db.execute(delete(Favorite).where(Favorite.property_id == property_id))
            await self.db.delete(property_obj)
            await self.db.commit()

            logger.info(f"Deleted property {property_id}")
            return True
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to delete property {property_id}: {e}")
            raise

    async def suggest_terms(self, text: str, limit: int = 8) -> List[str]:
        """
        Autocomplete terms: distinct listing titles and cities containing the text.

        Args:
            text: Partial search text
            limit: Maximum number of suggestions

        Returns:
            Titles first, then cities, without duplicates
        """
        try:
            term = contains_pattern(text)

            title_query = (
                select(Property.title)
                .where(Property.title.ilike(term, escape=LIKE_ESCAPE))
                .distinct()
                .order_by(Property.title)
                .limit(limit)
            )
            city_query = (
                select(Property.city)
                .where(Property.city.ilike(term, escape=LIKE_ESCAPE))
                .distinct()
                .order_by(Property.city)
                .limit(limit)
            )

            titles = (await self.db.execute(title_query)).scalars().all()
            cities = (await self.db.execute(city_query)).scalars().all()

            suggestions: List[str] = []
            for value in list(titles) + list(cities):
                if value not in suggestions:
                    suggestions.append(value)

            return suggestions[:limit]
        except Exception as e:
            logger.error(f"Failed to build suggestions for '{text}': {e}")
            raise
