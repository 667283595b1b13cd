"""
Repository for saved properties (favorites).
"""

import uuid
import logging
from typing import List
from sqlalchemy import select, delete, and_, desc
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from homeswift.models.favorite import Favorite
from homeswift.models.property import Property
from homeswift.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class FavoriteRepository(BaseRepository[Favorite]):
    """A user's saved properties, one row per (user, property) pair."""

    def __init__(self, db: AsyncSession):
        super().__init__(Favorite, db)

    async def get_property_ids(self, user_id: uuid.UUID) -> List[uuid.UUID]:
        query = (
            select(Favorite.property_id)
            .where(Favorite.user_id == user_id)
            .order_by(desc(Favorite.created_at))
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_properties(self, user_id: uuid.UUID) -> List[Property]:
        """Saved properties with images, most recently saved first."""
        try:
            query = (
                select(Property)
                .join(Favorite, Favorite.property_id == Property.id)
                .options(selectinload(Property.images))
                .where(Favorite.user_id == user_id)
                .order_by(desc(Favorite.created_at))
            )
            result = await self.db.execute(query)
            properties = result.scalars().all()

            logger.debug(f"Retrieved {len(properties)} saved properties for user {user_id}")
            return list(properties)
        except Exception as e:
            logger.error(f"Failed to get saved properties for user {user_id}: {e}")
            raise

    async def is_saved(self, user_id: uuid.UUID, property_id: uuid.UUID) -> bool:
        query = select(Favorite.id).where(
            and_(Favorite.user_id == user_id, Favorite.property_id == property_id)
        )
        result = await self.db.execute(query)
        return result.first() is not None

    async def add(self, user_id: uuid.UUID, property_id: uuid.UUID) -> bool:
        """
        Save a property for a user.

        Returns:
            True if newly saved, False if it was already saved
        """
        if await self.is_saved(user_id, property_id):
            return False

        await self.create({"user_id": user_id, "property_id": property_id})
        logger.info(f"User {user_id} saved property {property_id}")
        return True

    async def remove(self, user_id: uuid.UUID, property_id: uuid.UUID) -> bool:
        try:
            result = await self.db.execute(
                delete(Favorite).where(
                    and_(Favorite.user_id == user_id, Favorite.property_id == property_id)
                )
            )
            await self.db.commit()
            return result.rowcount > 0
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to remove saved property {property_id} for user {user_id}: {e}")
            raise
