"""
User repository for authentication and account management.
Handles password hashing, token lookups and account removal.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, or_, func, desc
from homeswift.repositories.base import BaseRepository, LIKE_ESCAPE, contains_pattern
from homeswift.models.user import User, UserRole
from homeswift.models.property import Property
from homeswift.models.favorite import Favorite
from homeswift.models.session import UserSession
from typing import Optional, List, Dict, Any, Tuple
import uuid
import logging

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """
    Repository for user accounts.
    Emails are stored lowercased and looked up the same way.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def create_user(self, user_data: Dict[str, Any]) -> User:
        """
        Create a new user with email validation and password hashing.

        Args:
            user_data: Dictionary containing user information.
                       Must include email; password is optional for OAuth accounts.
                       Role defaults to USER.

        Returns:
            Created user instance

        Raises:
            ValueError: If validation fails or the email is taken
        """
        try:
            email = User.validate_email_format(user_data["email"])

            existing_user = await self.get_by_email(email)
            if existing_user:
                raise ValueError(f"User with email {email} already exists")

            data = dict(user_data)
            password = data.pop("password", None)

            create_data = {
                **data,
                "email": email,
                "password_hash": User.hash_password(password) if password else None,
                "role": data.get("role", UserRole.USER),
                "is_active": data.get("is_active", True)
            }

            created_user = await self.create(create_data)
            logger.info(f"Created user: {created_user.email} (ID: {created_user.id})")
            return created_user
        except ValueError as e:
            logger.error(f"User validation failed: {e}")
            raise
        except Exception as e:
            logger.error(f"Failed to create user: {e}")
            raise

    async def get_by_email(self, email: str) -> Optional[User]:
        """
        Get user by email address.

        Args:
            email: Email address to search for (case-insensitive)

        Returns:
            User instance if found, None otherwise
        """
        try:
            normalized_email = email.lower().strip()

            result = await self.db.execute(select(User).where(User.email == normalized_email))
            user = result.scalar_one_or_none()

            if user:
                logger.debug(f"Retrieved user by email: {email}")
            else:
                logger.debug(f"User with email {email} not found")

            return user
        except Exception as e:
            logger.error(f"Failed to get user by email {email}: {e}")
            raise

    async def get_by_google_id(self, google_id: str) -> Optional[User]:
        return await self.get_by_field("google_id", google_id)

    async def get_by_verification_token(self, token: str) -> Optional[User]:
        return await self.get_by_field("verification_token", token)

    async def get_by_reset_token(self, token: str) -> Optional[User]:
        return await self.get_by_field("reset_password_token", token)

    async def authenticate_user(self, email: str, password: str) -> Optional[User]:
        """
        Authenticate user with email and password.

        Args:
            email: User's email address
            password: Plain text password

        Returns:
            User instance if authentication successful, None otherwise
        """
        try:
            user = await self.get_by_email(email)

            if not user:
                logger.debug(f"Authentication failed: user {email} not found")
                return None

            if not user.verify_password(password):
                logger.debug(f"Authentication failed: invalid password for {email}")
                return None

            return user
        except Exception as e:
            logger.error(f"Failed to authenticate user {email}: {e}")
            raise

    async def update_password(self, user_id: uuid.UUID, new_password: str) -> Optional[User]:
        """
        Update user's password with proper hashing.

        Raises:
            ValueError: If password validation fails
        """
        try:
            password_hash = User.hash_password(new_password)
            updated_user = await self.update(user_id, {"password_hash": password_hash})

            if updated_user:
                logger.info(f"Password updated for user: {updated_user.email}")

            return updated_user
        except ValueError as e:
            logger.error(f"Password validation failed for user {user_id}: {e}")
            raise
        except Exception as e:
            logger.error(f"Failed to update password for user {user_id}: {e}")
            raise

    async def save(self, user: User) -> User:
        """Commit pending attribute changes on a loaded user."""
        try:
            await self.db.commit()
            await self.db.refresh(user)
            return user
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to save user {user.id}: {e}")
            raise

    async def search_users(
        self,
        search_term: Optional[str] = None,
        role: Optional[UserRole] = None,
        skip: int = 0,
        limit: int = 20
    ) -> Tuple[List[User], int]:
        """
        Search users by email or name.

        Args:
            search_term: Term to search for in email, first or last name
            role: Optional role filter
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            Tuple of (users list, total count)
        """
        try:
            conditions = []
            if search_term:
                pattern = contains_pattern(search_term)
                conditions.append(
                    or_(
                        User.email.ilike(pattern, escape=LIKE_ESCAPE),
                        User.first_name.ilike(pattern, escape=LIKE_ESCAPE),
                        User.last_name.ilike(pattern, escape=LIKE_ESCAPE)
                    )
                )
            if role:
                conditions.append(User.role == role)

            query = select(User).where(*conditions)
            count_query = select(func.count(User.id)).where(*conditions)

            count_result = await self.db.execute(count_query)
            total_count = count_result.scalar()

            query = query.order_by(desc(User.created_at), desc(User.id)).offset(skip).limit(limit)
            result = await self.db.execute(query)
            users = result.scalars().all()

            logger.debug(f"User search returned {len(users)} of {total_count} users")
            return list(users), total_count
        except Exception as e:
            logger.error(f"Failed to search users: {e}")
            raise

    async def delete_user(self, user_id: uuid.UUID) -> bool:
        """
        Delete a user account.
        Favorites and sessions go with it; owned listings stay, without an owner.

        Returns:
            True if the user existed and was deleted
        """
        try:
            if not await self.exists(user_id):
                return False

            await self.db.execute(delete(Favorite).where(Favorite.user_id == user_id))
            await self.db.execute(delete(UserSession).where(UserSession.user_id == user_id))
            await self.db.execute(
                update(Property)
                .where(Property.owner_id == user_id)
                .values(owner_id=None)
                .execution_options(synchronize_session=False)
            )
            await self.db.execute(delete(User).where(User.id == user_id))
            await self.db.commit()

            logger.info(f"Deleted user {user_id}")
            return True
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to delete user {user_id}: {e}")
            raise
