"""
Tests for the repository layer against an in-memory SQLite database.
"""

import pytest
import uuid
from datetime import timedelta
from decimal import Decimal

from homeswift.database import utcnow
from homeswift.models.user import User, UserRole
from homeswift.models.property import PropertyType, ListingType, PropertyStatus
from homeswift.repositories import (
    UserRepository,
    PropertyRepository,
    PropertySearchFilters,
    ImageRepository,
    FavoriteRepository,
    SessionRepository,
    WaitlistRepository
)
from homeswift.repositories.base import contains_pattern
from tests.conftest import UserFactory, PropertyFactory


class TestBaseRepository:
    """Generic CRUD behaviour, exercised through UserRepository."""

    @pytest.mark.asyncio
    async def test_get_by_id_missing(self, user_repository: UserRepository):
        assert await user_repository.get_by_id(uuid.uuid4()) is None

    @pytest.mark.asyncio
    async def test_update_ignores_none_and_empty(self, user_repository: UserRepository, test_user: User):
        """None values and empty strings leave fields untouched."""
        updated = await user_repository.update(
            test_user.id,
            {"first_name": "Ada", "last_name": "", "phone": None}
        )

        assert updated.first_name == "Ada"
        assert updated.last_name == "User"
        assert updated.phone is None

    @pytest.mark.asyncio
    async def test_get_multi_filters_and_orders(self, user_repository: UserRepository):
        """Field filters and '-field' ordering."""
        await UserFactory.create_user(user_repository, email="a.agent@example.com", role=UserRole.AGENT)
        await UserFactory.create_user(user_repository, email="b.agent@example.com", role=UserRole.AGENT)
        await UserFactory.create_user(user_repository, email="c.user@example.com")

        agents = await user_repository.get_multi(filters={"role": UserRole.AGENT}, order_by="-email")

        assert [u.email for u in agents] == ["b.agent@example.com", "a.agent@example.com"]
        assert await user_repository.count({"role": UserRole.AGENT}) == 2

    @pytest.mark.asyncio
    async def test_get_by_field_unknown_field(self, user_repository: UserRepository):
        with pytest.raises(ValueError, match="does not exist"):
            await user_repository.get_by_field("shoe_size", 42)

    @pytest.mark.asyncio
    async def test_delete_and_exists(self, user_repository: UserRepository, test_user: User):
        assert await user_repository.exists(test_user.id)
        assert await user_repository.delete(test_user.id)
        assert not await user_repository.exists(test_user.id)
        assert not await user_repository.delete(test_user.id)


class TestUserRepository:
    """Test UserRepository functionality."""

    @pytest.mark.asyncio
    async def test_create_user_normalizes_email_and_hashes(self, user_repository: UserRepository):
        user = await user_repository.create_user({
            "email": "New.Buyer@Example.com",
            "password": "testpassword123",
            "first_name": "New",
            "last_name": "Buyer"
        })

        assert user.email == "new.buyer@example.com"
        assert user.role == UserRole.USER
        assert user.password_hash and user.password_hash != "testpassword123"

    @pytest.mark.asyncio
    async def test_create_user_duplicate_email(self, user_repository: UserRepository, test_user: User):
        with pytest.raises(ValueError, match="already exists"):
            await user_repository.create_user({"email": "BUYER@example.com", "password": "testpassword123"})

    @pytest.mark.asyncio
    async def test_create_user_without_password(self, user_repository: UserRepository):
        """OAuth accounts are created without a password hash."""
        user = await user_repository.create_user({"email": "oauth@example.com", "google_id": "g-123"})

        assert user.password_hash is None
        assert (await user_repository.get_by_google_id("g-123")).id == user.id

    @pytest.mark.asyncio
    async def test_get_by_email_case_insensitive(self, user_repository: UserRepository, test_user: User):
        found = await user_repository.get_by_email("  Buyer@EXAMPLE.com ")
        assert found.id == test_user.id

    @pytest.mark.asyncio
    async def test_authenticate_user(self, user_repository: UserRepository, test_user: User):
        assert (await user_repository.authenticate_user(test_user.email, "testpassword123")).id == test_user.id
        assert await user_repository.authenticate_user(test_user.email, "wrongpassword") is None
        assert await user_repository.authenticate_user("nobody@example.com", "testpassword123") is None

    @pytest.mark.asyncio
    async def test_update_password(self, user_repository: UserRepository, test_user: User):
        updated = await user_repository.update_password(test_user.id, "brandnewpass456")

        assert updated.verify_password("brandnewpass456")
        assert not updated.verify_password("testpassword123")

    @pytest.mark.asyncio
    async def test_token_lookups(self, user_repository: UserRepository, test_user: User):
        test_user.verification_token = "verify-me"
        test_user.reset_password_token = "reset-me"
        await user_repository.save(test_user)

        assert (await user_repository.get_by_verification_token("verify-me")).id == test_user.id
        assert (await user_repository.get_by_reset_token("reset-me")).id == test_user.id
        assert await user_repository.get_by_reset_token("unknown") is None

    @pytest.mark.asyncio
    async def test_search_users(self, user_repository: UserRepository):
        await UserFactory.create_user(user_repository, email="ada@example.com", first_name="Ada")
        await UserFactory.create_user(user_repository, email="bola@example.com", first_name="Bola")
        await UserFactory.create_user(user_repository, email="chidi@example.com", last_name="Adaeze")

        users, total = await user_repository.search_users(search_term="ada")

        assert total == 2
        assert {u.email for u in users} == {"ada@example.com", "chidi@example.com"}

        page, total_all = await user_repository.search_users(skip=0, limit=2)
        assert total_all == 3
        assert len(page) == 2

        _, wildcard_total = await user_repository.search_users(search_term="a_a")
        assert wildcard_total == 0

    @pytest.mark.asyncio
    async def test_delete_user_orphans_listings(
        self,
        db_session,
        user_repository: UserRepository,
        property_repository: PropertyRepository,
        test_agent: User,
        test_user: User
    ):
        """Deleting a user clears favorites and sessions and keeps listings without an owner."""
        property_obj = await PropertyFactory.create_property(property_repository, owner_id=test_agent.id)
        await FavoriteRepository(db_session).add(test_agent.id, property_obj.id)
        await SessionRepository(db_session).create_session(
            sid="agent-session", expires_at=utcnow() + timedelta(days=1), user_id=test_agent.id
        )

        assert await user_repository.delete_user(test_agent.id)

        listing = await property_repository.get_property_with_details(property_obj.id)
        assert listing is not None
        assert listing.owner_id is None
        assert await SessionRepository(db_session).get_active("agent-session") is None
        assert await user_repository.delete_user(uuid.uuid4()) is False


class TestPropertyRepository:
    """Test PropertyRepository search and filtering."""

    @pytest.fixture
    async def listings(self, property_repository: PropertyRepository, test_agent: User):
        """Four listings spread over two cities and both listing types."""
        return [
            await PropertyFactory.create_property(
                property_repository, owner_id=test_agent.id,
                title="Modern Apartment Downtown", city="Austin", state="TX",
                price=Decimal("1800"), bedrooms=2, listing_type=ListingType.RENT,
                property_type=PropertyType.APARTMENT, area_sqft=900, year_built=2018
            ),
            await PropertyFactory.create_property(
                property_repository, owner_id=test_agent.id,
                title="Family House with Garden", city="Austin", state="TX",
                price=Decimal("450000"), bedrooms=4, bathrooms=Decimal("2.5"),
                area_sqft=2600, year_built=1998, is_featured=True
            ),
            await PropertyFactory.create_property(
                property_repository, owner_id=test_agent.id,
                title="Lakeside Condo", city="Chicago", state="IL", zip_code="60601",
                price=Decimal("320000"), bedrooms=3, property_type=PropertyType.CONDO,
                is_featured=True
            ),
            await PropertyFactory.create_property(
                property_repository, owner_id=test_agent.id,
                title="Sold Townhouse", city="Chicago", state="IL",
                price=Decimal("280000"), bedrooms=3, property_type=PropertyType.TOWNHOUSE,
                status=PropertyStatus.SOLD
            ),
        ]

    @pytest.mark.asyncio
    async def test_create_property_validates(self, property_repository: PropertyRepository):
        data = PropertyFactory.create_property_data(year_built=1700)
        with pytest.raises(ValueError, match="Year built"):
            await property_repository.create_property(data)

    @pytest.mark.asyncio
    async def test_search_text(self, property_repository: PropertyRepository, listings):
        results, total = await property_repository.search_properties(
            PropertySearchFilters(search_text="garden")
        )
        assert total == 1
        assert results[0].title == "Family House with Garden"

    @pytest.mark.asyncio
    async def test_wildcards_in_search_text_are_literal(self, property_repository: PropertyRepository, listings):
        _, percent = await property_repository.search_properties(PropertySearchFilters(search_text="%"))
        _, underscore = await property_repository.search_properties(PropertySearchFilters(location="Aust_n"))

        assert percent == 0
        assert underscore == 0
        assert await property_repository.suggest_terms("_") == []

    @pytest.mark.asyncio
    async def test_location_and_text_are_combined(self, property_repository: PropertyRepository, listings):
        """Free text and location must both match."""
        _, total = await property_repository.search_properties(
            PropertySearchFilters(search_text="condo", location="austin")
        )
        assert total == 0

        results, total = await property_repository.search_properties(
            PropertySearchFilters(search_text="condo", location="60601")
        )
        assert total == 1
        assert results[0].city == "Chicago"

    @pytest.mark.asyncio
    async def test_price_and_bedroom_filters(self, property_repository: PropertyRepository, listings):
        _, total = await property_repository.search_properties(
            PropertySearchFilters(min_price=Decimal("300000"), max_price=Decimal("500000"))
        )
        assert total == 2

        _, exact = await property_repository.search_properties(PropertySearchFilters(bedrooms=3))
        _, at_least = await property_repository.search_properties(PropertySearchFilters(min_bedrooms=3))
        assert exact == 2
        assert at_least == 3

    @pytest.mark.asyncio
    async def test_type_status_and_range_filters(self, property_repository: PropertyRepository, listings):
        _, rentals = await property_repository.search_properties(
            PropertySearchFilters(listing_type=ListingType.RENT)
        )
        _, sold = await property_repository.search_properties(
            PropertySearchFilters(status=PropertyStatus.SOLD)
        )
        _, large = await property_repository.search_properties(PropertySearchFilters(min_area=2000))
        _, recent = await property_repository.search_properties(PropertySearchFilters(min_year_built=2010))
        _, baths = await property_repository.search_properties(
            PropertySearchFilters(min_bathrooms=Decimal("2.5"))
        )

        assert (rentals, sold, large, recent, baths) == (1, 1, 1, 1, 1)

    @pytest.mark.asyncio
    async def test_sorting_and_paging(self, property_repository: PropertyRepository, listings):
        page_one, total = await property_repository.search_properties(
            PropertySearchFilters(), skip=0, limit=2, order_by="price", order_direction="asc"
        )
        page_two, _ = await property_repository.search_properties(
            PropertySearchFilters(), skip=2, limit=2, order_by="price", order_direction="asc"
        )

        prices = [float(p.price) for p in page_one + page_two]
        assert total == 4
        assert prices == sorted(prices)

    @pytest.mark.asyncio
    async def test_unknown_sort_field_falls_back(self, property_repository: PropertyRepository, listings):
        results, total = await property_repository.search_properties(
            PropertySearchFilters(), order_by="password_hash"
        )
        assert total == len(results) == 4

    @pytest.mark.asyncio
    async def test_featured_properties(self, property_repository: PropertyRepository, listings):
        featured = await property_repository.get_featured_properties(limit=6)
        assert {p.title for p in featured} == {"Family House with Garden", "Lakeside Condo"}

    @pytest.mark.asyncio
    async def test_update_property_revalidates(self, property_repository: PropertyRepository, listings):
        listing = listings[0]

        updated = await property_repository.update_property(listing.id, {"price": Decimal("1950")})
        assert float(updated.price) == 1950.0

        with pytest.raises(ValueError):
            await property_repository.update_property(listing.id, {"bedrooms": 99})
        assert await property_repository.update_property(uuid.uuid4(), {"price": Decimal("1")}) is None

    @pytest.mark.asyncio
    async def test_delete_property_removes_images_and_favorites(
        self,
        db_session,
        property_repository: PropertyRepository,
        image_repository: ImageRepository,
        test_property,
        test_user: User
    ):
        await image_repository.add_image(test_property.id, {"image_url": "/front.jpg"})
        favorites = FavoriteRepository(db_session)
        await favorites.add(test_user.id, test_property.id)

        assert await property_repository.delete_property(test_property.id)

        assert await image_repository.count_by_property_id(test_property.id) == 0
        assert await favorites.get_property_ids(test_user.id) == []
        assert not await property_repository.delete_property(test_property.id)

    @pytest.mark.asyncio
    async def test_suggest_terms(self, property_repository: PropertyRepository, listings):
        """Titles come first, then cities, without duplicates."""
        suggestions = await property_repository.suggest_terms("ch")
        assert suggestions == ["Chicago"]

        suggestions = await property_repository.suggest_terms("a", limit=3)
        assert len(suggestions) == 3


class TestImageRepository:
    """Test gallery ordering and primary image rules."""

    @pytest.mark.asyncio
    async def test_first_image_becomes_primary(self, image_repository: ImageRepository, test_property):
        first = await image_repository.add_image(test_property.id, {"image_url": "/one.jpg"})
        second = await image_repository.add_image(test_property.id, {"image_url": "/two.jpg"})

        assert first.is_primary
        assert not second.is_primary
        assert second.display_order == 1

    @pytest.mark.asyncio
    async def test_new_primary_clears_others(self, image_repository: ImageRepository, test_property):
        await image_repository.add_image(test_property.id, {"image_url": "/one.jpg"})
        await image_repository.add_image(test_property.id, {"image_url": "/two.jpg", "is_primary": True})

        images = await image_repository.get_by_property_id(test_property.id)
        assert [i.image_url for i in images if i.is_primary] == ["/two.jpg"]
        assert images[0].image_url == "/two.jpg"

    @pytest.mark.asyncio
    async def test_removing_primary_promotes_next(self, image_repository: ImageRepository, test_property):
        first = await image_repository.add_image(test_property.id, {"image_url": "/one.jpg"})
        await image_repository.add_image(test_property.id, {"image_url": "/two.jpg"})

        assert await image_repository.remove_image(test_property.id, first.id)

        images = await image_repository.get_by_property_id(test_property.id)
        assert len(images) == 1
        assert images[0].is_primary

    @pytest.mark.asyncio
    async def test_remove_image_of_other_property(self, image_repository: ImageRepository, test_property):
        image = await image_repository.add_image(test_property.id, {"image_url": "/one.jpg"})
        assert not await image_repository.remove_image(uuid.uuid4(), image.id)


class TestFavoriteRepository:
    """Test saved properties."""

    @pytest.mark.asyncio
    async def test_add_is_idempotent(self, db_session, test_user: User, test_property):
        favorites = FavoriteRepository(db_session)

        assert await favorites.add(test_user.id, test_property.id)
        assert not await favorites.add(test_user.id, test_property.id)
        assert await favorites.is_saved(test_user.id, test_property.id)
        assert [p.id for p in await favorites.get_properties(test_user.id)] == [test_property.id]

    @pytest.mark.asyncio
    async def test_remove(self, db_session, test_user: User, test_property):
        favorites = FavoriteRepository(db_session)
        await favorites.add(test_user.id, test_property.id)

        assert await favorites.remove(test_user.id, test_property.id)
        assert not await favorites.remove(test_user.id, test_property.id)


class TestSessionRepository:
    """Test cookie session storage."""

    @pytest.mark.asyncio
    async def test_get_active_skips_expired(self, db_session, test_user: User):
        sessions = SessionRepository(db_session)
        await sessions.create_session("live", utcnow() + timedelta(hours=1), test_user.id, {"a": 1})
        await sessions.create_session("stale", utcnow() - timedelta(hours=1), test_user.id)

        live = await sessions.get_active("live")
        assert live.data == {"a": 1}
        assert await sessions.get_active("stale") is None
        assert await sessions.get_active("missing") is None

    @pytest.mark.asyncio
    async def test_purge_expired(self, db_session, test_user: User):
        sessions = SessionRepository(db_session)
        await sessions.create_session("live", utcnow() + timedelta(hours=1), test_user.id)
        await sessions.create_session("stale-1", utcnow() - timedelta(hours=1), test_user.id)
        await sessions.create_session("stale-2", utcnow() - timedelta(days=2), test_user.id)

        assert await sessions.purge_expired() == 2
        assert await sessions.get_active("live") is not None

    @pytest.mark.asyncio
    async def test_delete_by_sid_and_user(self, db_session, test_user: User):
        sessions = SessionRepository(db_session)
        await sessions.create_session("one", utcnow() + timedelta(hours=1), test_user.id)
        await sessions.create_session("two", utcnow() + timedelta(hours=1), test_user.id)

        assert await sessions.delete_by_sid("one")
        assert not await sessions.delete_by_sid("one")
        assert await sessions.delete_for_user(test_user.id) == 1


class TestWaitlistRepository:
    """Test waitlist lookups."""

    @pytest.mark.asyncio
    async def test_get_by_email_and_order(self, db_session):
        waitlist = WaitlistRepository(db_session)
        await waitlist.create({"email": "first@example.com", "name": "First"})
        await waitlist.create({"email": "second@example.com", "name": "Second"})

        assert (await waitlist.get_by_email("FIRST@example.com")).name == "First"
        entries = await waitlist.list_entries()
        assert {e.email for e in entries} == {"first@example.com", "second@example.com"}


class TestLikePatterns:
    """Test escaping of user text for ILIKE."""

    def test_contains_pattern_escapes_wildcards(self):
        assert contains_pattern(" 50% off_plan ") == "%50\\% off\\_plan%"
        assert contains_pattern("C:\\temp") == "%C:\\\\temp%"
