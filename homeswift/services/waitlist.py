"""
Waitlist service for the pre-launch landing page.
"""

from typing import List, Tuple
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from homeswift.models.waitlist import WaitlistEntry
from homeswift.repositories.waitlist import WaitlistRepository
from homeswift.utils.exceptions import ValidationError
import logging

logger = logging.getLogger(__name__)


class WaitlistService:

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.waitlist_repo = WaitlistRepository(db_session)

    async def join(self, email: str, name: str = "") -> Tuple[WaitlistEntry, bool]:
        """
        Add an email to the waitlist.

        Returns:
            Tuple of (entry, created); created is False when the email was already listed
        """
        email = (email or "").strip().lower()
        if not email:
            raise ValidationError("Email is required")

        existing = await self.waitlist_repo.get_by_email(email)
        if existing:
            return existing, False

        try:
            entry = await self.waitlist_repo.create({"email": email, "name": (name or "").strip()})
        except IntegrityError:
            # Concurrent signup with the same email
            existing = await self.waitlist_repo.get_by_email(email)
            if existing is None:
                raise
            return existing, False

        logger.info(f"Waitlist signup: {email}")
        return entry, True

    async def list_entries(self) -> List[WaitlistEntry]:
        return await self.waitlist_repo.list_entries()
