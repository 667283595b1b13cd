"""
User service for profiles, saved properties and account administration.
"""

from typing import List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from homeswift.repositories.user import UserRepository
from homeswift.repositories.property import PropertyRepository
from homeswift.repositories.favorite import FavoriteRepository
from homeswift.models.user import User
from homeswift.models.property import Property
from homeswift.schemas.user import UserProfileUpdate
from homeswift.utils.exceptions import (
    SelfDeletionError,
    NotFoundError,
    InsufficientPermissionsError,
    PropertyNotFoundError
)
import uuid
import logging

logger = logging.getLogger(__name__)


class UserService:
    """Profile management for the signed-in user and user administration for admins."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.user_repo = UserRepository(db_session)
        self.property_repo = PropertyRepository(db_session)
        self.favorite_repo = FavoriteRepository(db_session)

    async def get_profile(self, user: User) -> User:
        return user

    async def update_profile(self, user: User, data: UserProfileUpdate) -> User:
        """Apply the provided profile fields to the user."""
        changes = data.model_dump(exclude_none=True)
        for field, value in changes.items():
            setattr(user, field, value)

        if changes:
            await self.user_repo.save(user)
            logger.info(f"Profile updated for user {user.email}: {sorted(changes)}")
        return user

    async def list_users(
        self,
        current_user: User,
        page: int = 1,
        page_size: int = 20,
        search: Optional[str] = None
    ) -> Tuple[List[User], int]:
        """
        Paginated user search for administrators.

        Raises:
            InsufficientPermissionsError: If the caller is not an admin
        """
        if not current_user.is_admin:
            raise InsufficientPermissionsError("list users")

        page = max(page, 1)
        page_size = min(max(page_size, 1), 100)
        return await self.user_repo.search_users(
            search_term=search,
            skip=(page - 1) * page_size,
            limit=page_size
        )

    async def delete_user(self, current_user: User, user_id: uuid.UUID) -> None:
        """
        Delete another user's account (admin only).

        Raises:
            InsufficientPermissionsError: If the caller is not an admin
            SelfDeletionError: If admins target their own account
            NotFoundError: If the user doesn't exist
        """
        if not current_user.is_admin:
            raise InsufficientPermissionsError("delete users")

        if current_user.id == user_id:
            raise SelfDeletionError()

        if not await self.user_repo.delete_user(user_id):
            raise NotFoundError("User", str(user_id))

        logger.info(f"User {user_id} deleted by admin {current_user.email}")

    async def delete_me(self, user: User) -> None:
        """Delete the signed-in user's own account."""
        await self.user_repo.delete_user(user.id)
        logger.info(f"User {user.email} deleted their account")

    async def get_saved_properties(self, user: User) -> List[Property]:
        return await self.favorite_repo.get_properties(user.id)

    async def save_property(self, user: User, property_id: uuid.UUID) -> bool:
        """
        Save a property to the user's favorites. Saving twice is harmless.

        Returns:
            True if newly saved

        Raises:
            PropertyNotFoundError: If the property doesn't exist
        """
        if not await self.property_repo.exists(property_id):
            raise PropertyNotFoundError(str(property_id))

        return await self.favorite_repo.add(user.id, property_id)

    async def unsave_property(self, user: User, property_id: uuid.UUID) -> None:
        """
        Remove a property from the user's favorites.

        Raises:
            NotFoundError: If the property was not saved
        """
        if not await self.favorite_repo.remove(user.id, property_id):
            raise NotFoundError("Saved property", str(property_id))
