"""
Tests for the SQLAlchemy models: validation rules, password handling and serialization.
"""

import pytest
import uuid
from datetime import timedelta
from decimal import Decimal

from homeswift.database import utcnow
from homeswift.models.user import User, UserRole, AuthProvider
from homeswift.models.property import Property, PropertyType, ListingType, PropertyStatus
from homeswift.models.image import PropertyImage
from homeswift.models.session import UserSession
from tests.conftest import UserFactory, PropertyFactory


class TestUserModel:
    """Test User model behaviour."""

    def test_validate_email_format_normalizes(self):
        """Emails are trimmed and lowercased."""
        assert User.validate_email_format("  Buyer@Example.COM ") == "buyer@example.com"

    def test_validate_email_format_invalid(self):
        """Malformed emails are rejected."""
        with pytest.raises(ValueError, match="Invalid email format"):
            User.validate_email_format("not-an-email")

    def test_hash_password_too_short(self):
        """Passwords under 8 characters are rejected."""
        with pytest.raises(ValueError, match="at least 8 characters"):
            User.hash_password("short")

    def test_set_and_verify_password(self):
        """A set password verifies, a wrong one does not."""
        user = User(email="buyer@example.com")
        user.set_password("testpassword123")

        assert user.password_hash != "testpassword123"
        assert user.verify_password("testpassword123")
        assert not user.verify_password("wrongpassword")

    def test_verify_password_without_hash(self):
        """OAuth-only accounts never match a password."""
        user = User(email="google@example.com", password_hash=None)
        assert not user.verify_password("anything123")

    def test_full_name(self):
        """Full name joins first and last name."""
        assert User(first_name="Ada", last_name="Obi").full_name == "Ada Obi"
        assert User(first_name="Ada", last_name="").full_name == "Ada"

    def test_can_manage_property(self):
        """Owners and admins manage a listing, other users do not."""
        owner = User(id=uuid.uuid4(), role=UserRole.AGENT)
        stranger = User(id=uuid.uuid4(), role=UserRole.AGENT)
        admin = User(id=uuid.uuid4(), role=UserRole.ADMIN)

        assert owner.can_manage_property(owner.id)
        assert not stranger.can_manage_property(owner.id)
        assert admin.can_manage_property(owner.id)
        assert not owner.can_manage_property(None)

    def test_roles(self):
        assert User(role=UserRole.AGENT).is_agent
        assert not User(role=UserRole.USER).is_agent
        assert User(role=UserRole.ADMIN).is_admin

    @pytest.mark.asyncio
    async def test_to_dict_excludes_secrets(self, user_repository):
        """Serialized users carry no password hash or tokens."""
        user = await UserFactory.create_user(user_repository, email="secret@example.com")
        data = user.to_dict()

        assert data["email"] == "secret@example.com"
        assert data["role"] == "user"
        assert data["auth_provider"] == AuthProvider.EMAIL.value
        assert data["preferences"] == {}
        assert "password_hash" not in data
        assert "verification_token" not in data
        assert "reset_password_token" not in data


class TestPropertyModel:
    """Test Property model validation."""

    def _property(self, **overrides) -> Property:
        data = PropertyFactory.create_property_data()
        data.update(overrides)
        return Property(**data)

    def test_validate_all_accepts_valid_listing(self):
        """A complete listing passes every check."""
        self._property().validate_all()

    @pytest.mark.parametrize("price", [Decimal("0"), Decimal("-5"), Decimal("1000000000.00")])
    def test_validate_price_out_of_range(self, price):
        """Prices must be positive and below one billion."""
        with pytest.raises(ValueError):
            self._property(price=price).validate_price()

    def test_validate_bedrooms_limits(self):
        """Bedrooms must be between 0 and 50."""
        self._property(bedrooms=0).validate_bedrooms()
        with pytest.raises(ValueError):
            self._property(bedrooms=51).validate_bedrooms()
        with pytest.raises(ValueError):
            self._property(bedrooms=-1).validate_bedrooms()

    def test_validate_bathrooms_allows_half_baths(self):
        """Half bathrooms are valid."""
        self._property(bathrooms=Decimal("2.5")).validate_bathrooms()
        with pytest.raises(ValueError):
            self._property(bathrooms=Decimal("50.5")).validate_bathrooms()

    def test_validate_year_built(self):
        """Construction year must be between 1800 and next year."""
        self._property(year_built=utcnow().year + 1).validate_year_built()
        with pytest.raises(ValueError):
            self._property(year_built=1799).validate_year_built()
        with pytest.raises(ValueError):
            self._property(year_built=utcnow().year + 2).validate_year_built()

    def test_validate_coordinates(self):
        """Latitude and longitude must be on the globe."""
        self._property(latitude=Decimal("6.4698"), longitude=Decimal("3.5852")).validate_coordinates()
        with pytest.raises(ValueError, match="Latitude"):
            self._property(latitude=Decimal("91")).validate_coordinates()
        with pytest.raises(ValueError, match="Longitude"):
            self._property(longitude=Decimal("-181")).validate_coordinates()

    def test_primary_image_prefers_flagged_image(self):
        """The flagged image wins, otherwise the first one is used."""
        first = PropertyImage(image_url="/a.jpg", is_primary=False, display_order=0)
        flagged = PropertyImage(image_url="/b.jpg", is_primary=True, display_order=1)

        assert self._property(images=[first, flagged]).primary_image is flagged
        assert self._property(images=[first]).primary_image is first
        assert self._property(images=[]).primary_image is None

    @pytest.mark.asyncio
    async def test_to_dict_serializes_numbers_and_enums(self, property_repository, test_agent):
        """Decimals become floats and enums become their values."""
        property_obj = await PropertyFactory.create_property(
            property_repository,
            owner_id=test_agent.id,
            bathrooms=Decimal("2.5"),
            property_type=PropertyType.CONDO,
            listing_type=ListingType.RENT
        )
        data = property_obj.to_dict()

        assert data["price"] == 250000.0
        assert data["bathrooms"] == 2.5
        assert data["property_type"] == "condo"
        assert data["listing_type"] == "rent"
        assert data["status"] == PropertyStatus.ACTIVE.value
        assert data["owner_id"] == str(test_agent.id)
        assert data["images"] == []
        assert data["primary_image"] is None

        assert "images" not in property_obj.to_dict(include_images=False)


class TestUserSessionModel:
    """Test UserSession expiry."""

    def test_is_expired(self):
        now = utcnow()
        assert UserSession(sid="a", expires_at=now - timedelta(seconds=1)).is_expired(now)
        assert not UserSession(sid="b", expires_at=now + timedelta(days=1)).is_expired(now)

    def test_is_expired_with_naive_timestamp(self):
        """Timestamps read back without an offset are treated as UTC."""
        now = utcnow()
        naive = (now + timedelta(hours=1)).replace(tzinfo=None)
        assert not UserSession(sid="c", expires_at=naive).is_expired(now)
