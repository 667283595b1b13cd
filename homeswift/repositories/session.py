"""
Repository for server-side web sessions.
"""

import uuid
import logging
from datetime import datetime
from typing import Any, Dict, Optional
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from homeswift.database import utcnow
from homeswift.models.session import UserSession
from homeswift.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class SessionRepository(BaseRepository[UserSession]):
    """Session rows keyed by their opaque sid."""

    def __init__(self, db: AsyncSession):
        super().__init__(UserSession, db)

    async def create_session(
        self,
        sid: str,
        expires_at: datetime,
        user_id: Optional[uuid.UUID] = None,
        data: Optional[Dict[str, Any]] = None
    ) -> UserSession:
        return await self.create({
            "sid": sid,
            "user_id": user_id,
            "data": data or {},
            "expires_at": expires_at,
        })

    async def get_active(self, sid: str) -> Optional[UserSession]:
        """Session for the sid, or None when unknown or expired."""
        session = await self.get_by_field("sid", sid)
        if session is None or session.is_expired():
            return None
        return session

    async def delete_by_sid(self, sid: str) -> bool:
        try:
            result = await self.db.execute(delete(UserSession).where(UserSession.sid == sid))
            await self.db.commit()
            return result.rowcount > 0
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to delete session: {e}")
            raise

    async def delete_for_user(self, user_id: uuid.UUID) -> int:
        try:
            result = await self.db.execute(delete(UserSession).where(UserSession.user_id == user_id))
            await self.db.commit()
            return result.rowcount
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to delete sessions for user {user_id}: {e}")
            raise

    async def purge_expired(self) -> int:
        """
        Delete every expired session.

        Returns:
            Number of sessions removed
        """
        try:
            result = await self.db.execute(
                select(UserSession).where(UserSession.expires_at <= utcnow())
            )
            expired = list(result.scalars().all())
            for session in expired:
                await self.db.delete(session)
            await self.db.commit()

            logger.info(f"Purged {len(expired)} expired sessions")
            return len(expired)
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to purge expired sessions: {e}")
            raise
