"""
Server-side sessions behind the "remember me" login cookie.
"""

from typing import Any, Dict, Optional
from datetime import timedelta
from sqlalchemy.ext.asyncio import AsyncSession
from homeswift.config import settings
from homeswift.database import utcnow
from homeswift.models.session import UserSession
from homeswift.models.user import User
from homeswift.repositories.session import SessionRepository
from homeswift.repositories.user import UserRepository
from homeswift.utils.auth import generate_secure_token
import logging

logger = logging.getLogger(__name__)


class SessionService:
    """Creates, resolves and destroys cookie sessions."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.session_repo = SessionRepository(db_session)
        self.user_repo = UserRepository(db_session)

    async def create_session(self, user: User, data: Optional[Dict[str, Any]] = None) -> UserSession:
        """
        Open a session for the user, valid for session_expire_days.

        Returns:
            The stored session; its sid goes into the cookie
        """
        payload = {"email": user.email, "role": user.role.value}
        payload.update(data or {})

        session = await self.session_repo.create_session(
            sid=generate_secure_token(32),
            expires_at=utcnow() + timedelta(days=settings.session_expire_days),
            user_id=user.id,
            data=payload
        )
        logger.info(f"Session opened for user {user.email}")
        return session

    async def get_session_user(self, sid: Optional[str]) -> Optional[User]:
        """Active user behind a session id, or None."""
        if not sid:
            return None

        session = await self.session_repo.get_active(sid)
        if session is None or session.user_id is None:
            return None

        user = await self.user_repo.get_by_id(session.user_id)
        if user is None or not user.is_active:
            return None
        return user

    async def destroy_session(self, sid: Optional[str]) -> bool:
        if not sid:
            return False
        return await self.session_repo.delete_by_sid(sid)

    async def purge_expired(self) -> int:
        return await self.session_repo.purge_expired()
