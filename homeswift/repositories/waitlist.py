"""
Repository for waitlist signups.
"""

import logging
from typing import List, Optional
from sqlalchemy import select, desc
from sqlalchemy.ext.asyncio import AsyncSession

from homeswift.models.waitlist import WaitlistEntry
from homeswift.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class WaitlistRepository(BaseRepository[WaitlistEntry]):

    def __init__(self, db: AsyncSession):
        super().__init__(WaitlistEntry, db)

    async def get_by_email(self, email: str) -> Optional[WaitlistEntry]:
        return await self.get_by_field("email", email.strip().lower())

    async def list_entries(self) -> List[WaitlistEntry]:
        """All signups, newest first."""
        try:
            query = select(WaitlistEntry).order_by(desc(WaitlistEntry.created_at), desc(WaitlistEntry.id))
            result = await self.db.execute(query)
            return list(result.scalars().all())
        except Exception as e:
            logger.error(f"Failed to list waitlist entries: {e}")
            raise
