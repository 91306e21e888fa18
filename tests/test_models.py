"""
Tests for the catalog value objects, entities and schemas.
"""

import pytest
from decimal import Decimal

from pydantic import ValidationError

from app.models.property import PropertyType
from app.models.user import UserRole
from app.schemas.property import (
    BrokerContact,
    Location,
    Money,
    PaginatedResult,
    Property,
    PropertySearchFilters,
)
from app.schemas.user import User


class TestLocation:
    """Test the Location value object."""

    def test_str_format(self):
        location = Location(street="12 Main St", city="Springfield", postal_code="12345")

        assert str(location) == "12 Main St, Springfield, 12345"

    def test_contains_is_case_insensitive(self):
        location = Location(street="12 Main St", city="Downtown", postal_code="12345")

        assert location.contains("down")
        assert location.contains("MAIN")
        assert location.contains("123")
        assert not location.contains("uptown")

    def test_parts_are_stripped(self):
        location = Location(street="  12 Main St ", city="Springfield", postal_code=" 12345")

        assert location.street == "12 Main St"
        assert location.postal_code == "12345"

    @pytest.mark.parametrize("field", ["street", "city", "postal_code"])
    def test_delimiter_rejected_in_any_part(self, field):
        values = {"street": "a", "city": "b", "postal_code": "c"}
        values[field] = "x|y"

        with pytest.raises(ValidationError):
            Location(**values)

    def test_value_equality(self):
        assert Location(street="a", city="b", postal_code="c") == Location(street="a", city="b", postal_code="c")

    def test_is_immutable(self):
        location = Location(street="a", city="b", postal_code="c")

        with pytest.raises(ValidationError):
            location.city = "d"


class TestMoney:
    """Test the Money value object."""

    def test_default_currency(self):
        assert Money(amount=Decimal("10")).currency == "USD"

    def test_str_format(self):
        assert str(Money(amount=Decimal("99.50"), currency="EUR")) == "99.50 EUR"

    def test_currency_must_be_three_letters(self):
        with pytest.raises(ValidationError):
            Money(amount=Decimal("10"), currency="EURO")


class TestProperty:
    """Test the Property entity."""

    def _property(self, **overrides) -> Property:
        data = {
            "property_type": PropertyType.APARTMENT,
            "location": Location(street="1 A St", city="Town", postal_code="111"),
            "price": Money(amount=Decimal("100000.00")),
            "broker_id": 1,
        }
        data.update(overrides)
        return Property(**data)

    def test_creation_defaults(self):
        property_obj = self._property()

        assert property_obj.id is None
        assert property_obj.created_date is None
        assert property_obj.description is None
        assert property_obj.image_urls == []

    def test_property_type_from_name(self):
        assert self._property(property_type="House").property_type is PropertyType.HOUSE

    def test_unknown_property_type_rejected(self):
        with pytest.raises(ValidationError):
            self._property(property_type="Castle")

    def test_update_price_keeps_currency(self):
        property_obj = self._property(price=Money(amount=Decimal("100"), currency="EUR"))

        property_obj.update_price(Decimal("125.50"))

        assert property_obj.price.amount == Decimal("125.50")
        assert property_obj.price.currency == "EUR"

    def test_add_image_ignores_blank_and_duplicates(self):
        property_obj = self._property()

        property_obj.add_image("https://img.test/a.jpg")
        property_obj.add_image("https://img.test/a.jpg")
        property_obj.add_image("   ")
        property_obj.add_image("")
        property_obj.add_image("https://img.test/b.jpg")

        assert property_obj.image_urls == ["https://img.test/a.jpg", "https://img.test/b.jpg"]

    def test_remove_image(self):
        property_obj = self._property(image_urls=["https://img.test/a.jpg", "https://img.test/b.jpg"])

        property_obj.remove_image("https://img.test/a.jpg")
        property_obj.remove_image("https://img.test/missing.jpg")

        assert property_obj.image_urls == ["https://img.test/b.jpg"]

    def test_image_lists_are_not_shared(self):
        first = self._property()
        second = self._property()

        first.add_image("https://img.test/a.jpg")

        assert second.image_urls == []


class TestBrokerContact:
    """Test the broker projection."""

    def test_full_name(self):
        broker = BrokerContact(id=3, first_name="Jane", last_name="Doe", email="jane@example.com")

        assert broker.full_name == "Jane Doe"
        assert broker.model_dump()["full_name"] == "Jane Doe"


class TestPropertySearchFilters:
    """Test search filter validation."""

    def test_defaults(self):
        filters = PropertySearchFilters()

        assert filters.location is None
        assert filters.min_price is None
        assert filters.max_price is None
        assert filters.property_type is None
        assert filters.page == 1
        assert filters.page_size == 20

    @pytest.mark.parametrize("kwargs", [
        {"page": 0},
        {"page": -1},
        {"page_size": 0},
        {"page_size": 101},
    ])
    def test_out_of_range_paging_rejected(self, kwargs):
        with pytest.raises(ValidationError):
            PropertySearchFilters(**kwargs)

    def test_max_page_size_accepted(self):
        assert PropertySearchFilters(page_size=100).page_size == 100

    def test_blank_text_filters_become_none(self):
        filters = PropertySearchFilters(location="   ", property_type="")

        assert filters.location is None
        assert filters.property_type is None

    def test_property_type_enum_converted_to_name(self):
        filters = PropertySearchFilters(property_type=PropertyType.CONDO)

        assert filters.property_type == "Condo"

    def test_prices_parsed_as_decimal(self):
        filters = PropertySearchFilters(min_price="100000", max_price=250000.5)

        assert filters.min_price == Decimal("100000")
        assert filters.max_price == Decimal("250000.5")


class TestPaginatedResult:
    """Test the pagination envelope."""

    @pytest.mark.parametrize("total_count,page_size,expected", [
        (45, 20, 3),
        (40, 20, 2),
        (1, 20, 1),
        (0, 20, 0),
    ])
    def test_total_pages(self, total_count, page_size, expected):
        result = PaginatedResult[int](items=[], page=1, page_size=page_size, total_count=total_count)

        assert result.total_pages == expected

    def test_items_preserved_in_order(self):
        result = PaginatedResult[int](items=[3, 1, 2], page=2, page_size=3, total_count=9)

        assert result.items == [3, 1, 2]
        assert result.model_dump()["total_pages"] == 3


class TestUser:
    """Test the User schema."""

    def test_email_normalized(self):
        user = User(email="  Jane@Example.COM ", password_hash="x")

        assert user.email == "jane@example.com"

    @pytest.mark.parametrize("email", ["no-at-sign", "@example.com", "jane@"])
    def test_invalid_email_rejected(self, email):
        with pytest.raises(ValidationError):
            User(email=email, password_hash="x")

    def test_role_defaults_to_broker(self):
        user = User(email="jane@example.com", password_hash="x")

        assert user.role == UserRole.BROKER
        assert user.is_broker is True

    def test_seeker_is_not_broker(self):
        user = User(email="sam@example.com", password_hash="x", role=UserRole.SEEKER)

        assert user.is_broker is False
