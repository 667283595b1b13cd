"""
Test configuration and fixtures for the HomeSwift API.
Provides database fixtures, test data factories, and common test utilities.
"""

import os

# Settings are read on import, so the environment must be in place first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "testing"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["CATALOG_BACKEND"] = "memory"

import pytest
import uuid
from typing import AsyncGenerator, Optional
from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport

from homeswift.main import app
from homeswift.database import Base, get_db
from homeswift.models.user import User, UserRole
from homeswift.models.property import Property, PropertyType, ListingType, PropertyStatus
from homeswift.repositories.user import UserRepository
from homeswift.repositories.property import PropertyRepository
from homeswift.repositories.image import ImageRepository
from homeswift.services.auth import AuthService
from homeswift.services.property import PropertyService
from homeswift.services.user import UserService
from homeswift.utils.auth import create_access_token
from homeswift.utils.dependencies import get_catalog, get_google_client
from homeswift.catalog import MemoryCatalog


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def db_engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False}
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine) -> async_sessionmaker:
    return async_sessionmaker(bind=db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def memory_catalog() -> MemoryCatalog:
    return MemoryCatalog()


@pytest.fixture
async def async_client(session_factory, memory_catalog) -> AsyncGenerator[AsyncClient, None]:
    """
    Async client against the app.
    Each request gets its own session on the test database.
    """
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_catalog] = lambda: memory_catalog
    app.dependency_overrides[get_google_client] = lambda: None

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# Repository fixtures
@pytest.fixture
def user_repository(db_session: AsyncSession) -> UserRepository:
    return UserRepository(db_session)


@pytest.fixture
def property_repository(db_session: AsyncSession) -> PropertyRepository:
    return PropertyRepository(db_session)


@pytest.fixture
def image_repository(db_session: AsyncSession) -> ImageRepository:
    return ImageRepository(db_session)


# Service fixtures
@pytest.fixture
def auth_service(db_session: AsyncSession) -> AuthService:
    return AuthService(db_session)


@pytest.fixture
def property_service(db_session: AsyncSession) -> PropertyService:
    return PropertyService(db_session)


@pytest.fixture
def user_service(db_session: AsyncSession) -> UserService:
    return UserService(db_session)


# Test data factories
class UserFactory:
    """Factory for creating test users."""

    @staticmethod
    def create_user_data(
        email: Optional[str] = None,
        password: str = "testpassword123",
        first_name: str = "Test",
        last_name: str = "User",
        role: UserRole = UserRole.USER,
        is_active: bool = True
    ) -> dict:
        return {
            "email": email or f"test{uuid.uuid4().hex[:8]}@example.com",
            "password": password,
            "first_name": first_name,
            "last_name": last_name,
            "role": role,
            "is_active": is_active
        }

    @staticmethod
    async def create_user(user_repo: UserRepository, **kwargs) -> User:
        """Create a test user in the database."""
        return await user_repo.create_user(UserFactory.create_user_data(**kwargs))


class PropertyFactory:
    """Factory for creating test properties."""

    @staticmethod
    def create_property_data(
        title: str = "Test Property",
        description: str = "A beautiful test property",
        price: Decimal = Decimal("250000.00"),
        address: str = "12 Test Street",
        city: str = "Austin",
        state: str = "TX",
        zip_code: str = "73301",
        bedrooms: int = 3,
        bathrooms: Decimal = Decimal("2.0"),
        area_sqft: int = 1500,
        year_built: int = 2005,
        property_type: PropertyType = PropertyType.HOUSE,
        listing_type: ListingType = ListingType.SALE,
        status: PropertyStatus = PropertyStatus.ACTIVE,
        is_featured: bool = False,
        owner_id: Optional[uuid.UUID] = None
    ) -> dict:
        return {
            "title": title,
            "description": description,
            "price": price,
            "address": address,
            "city": city,
            "state": state,
            "zip_code": zip_code,
            "bedrooms": bedrooms,
            "bathrooms": bathrooms,
            "area_sqft": area_sqft,
            "year_built": year_built,
            "property_type": property_type,
            "listing_type": listing_type,
            "status": status,
            "is_featured": is_featured,
            "owner_id": owner_id
        }

    @staticmethod
    async def create_property(property_repo: PropertyRepository, **kwargs) -> Property:
        """Create a test property in the database."""
        return await property_repo.create_property(PropertyFactory.create_property_data(**kwargs))


# Common test fixtures
@pytest.fixture
async def test_user(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(user_repository, email="buyer@example.com")


@pytest.fixture
async def test_agent(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(
        user_repository,
        email="agent@example.com",
        first_name="Test",
        last_name="Agent",
        role=UserRole.AGENT
    )


@pytest.fixture
async def other_agent(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(
        user_repository,
        email="other.agent@example.com",
        role=UserRole.AGENT
    )


@pytest.fixture
async def test_admin(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(
        user_repository,
        email="admin@example.com",
        first_name="Test",
        last_name="Admin",
        role=UserRole.ADMIN
    )


@pytest.fixture
async def test_inactive_user(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(
        user_repository,
        email="inactive@example.com",
        is_active=False
    )


@pytest.fixture
async def test_property(property_repository: PropertyRepository, test_agent: User) -> Property:
    return await PropertyFactory.create_property(
        property_repository,
        owner_id=test_agent.id,
        title="Sunny Family House in Austin"
    )


def auth_headers(user: User) -> dict:
    """Bearer header for the given user."""
    token = create_access_token(user_id=user.id, email=user.email, role=user.role)
    return {"Authorization": f"Bearer {token}"}
