"""
Repository for PropertyImage model operations.
Keeps at most one primary image per property.
"""

import uuid
import logging
from typing import Any, Dict, List, Optional
from sqlalchemy import select, update, func
from sqlalchemy.ext.asyncio import AsyncSession

from homeswift.models.image import PropertyImage
from homeswift.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class ImageRepository(BaseRepository[PropertyImage]):
    """Repository for PropertyImage database operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(PropertyImage, db)

    async def get_by_property_id(self, property_id: uuid.UUID) -> List[PropertyImage]:
        """
        Get all images for a specific property.

        Returns:
            List of property images, primary first then by display order
        """
        query = (
            select(PropertyImage)
            .where(PropertyImage.property_id == property_id)
            .order_by(
                PropertyImage.is_primary.desc(),
                PropertyImage.display_order.asc(),
                PropertyImage.created_at.asc()
            )
            .execution_options(populate_existing=True)
        )

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def count_by_property_id(self, property_id: uuid.UUID) -> int:
        query = select(func.count(PropertyImage.id)).where(PropertyImage.property_id == property_id)
        result = await self.db.execute(query)
        return result.scalar() or 0

    async def add_image(self, property_id: uuid.UUID, image_data: Dict[str, Any]) -> PropertyImage:
        """
        Attach an image to a property.
        The first image of a property always becomes primary; a new primary
        image clears the flag on the others.

        Args:
            property_id: ID of the property
            image_data: image_url, caption, is_primary, display_order

        Returns:
            Created image
        """
        try:
            existing = await self.count_by_property_id(property_id)
            is_primary = bool(image_data.get("is_primary")) or existing == 0

            if is_primary and existing:
                await self.db.execute(
                    update(PropertyImage)
                    .where(PropertyImage.property_id == property_id)
                    .values(is_primary=False)
                )

            display_order = image_data.get("display_order")
            if display_order is None:
                display_order = existing

            image = await self.create({
                "property_id": property_id,
                "image_url": image_data["image_url"],
                "caption": image_data.get("caption"),
                "is_primary": is_primary,
                "display_order": display_order,
            })
            logger.info(f"Added image {image.id} to property {property_id}")
            return image
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to add image to property {property_id}: {e}")
            raise

    async def remove_image(self, property_id: uuid.UUID, image_id: uuid.UUID) -> bool:
        """
        Remove an image from a property.
        When the primary image goes, the next image in order is promoted.

        Returns:
            True if the image belonged to the property and was removed
        """
        try:
            image = await self.get_by_id(image_id)
            if image is None or image.property_id != property_id:
                return False

            was_primary = image.is_primary
            await self.db.delete(image)
            await self.db.flush()

            if was_primary:
                remaining = await self.get_by_property_id(property_id)
                if remaining:
                    remaining[0].is_primary = True

            await self.db.commit()
            logger.info(f"Removed image {image_id} from property {property_id}")
            return True
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to remove image {image_id}: {e}")
            raise
