"""
Test configuration and fixtures for the property catalog.
Provides a fresh in-memory database per test, store and service fixtures,
test data factories, and common assertions.
"""

import pytest
import uuid
from decimal import Decimal
from typing import AsyncGenerator, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncEngine

from app.database import DatabaseConnectionFactory, create_engine, create_tables
from app.models.property import PropertyType
from app.models.user import UserRole
from app.repositories.property import PropertyStore
from app.repositories.user import UserStore
from app.schemas.property import Location, Money, Property
from app.schemas.user import User
from app.services.property import PropertyService


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create an isolated in-memory database with the catalog schema."""
    test_engine = create_engine(TEST_DATABASE_URL, echo=False)
    await create_tables(test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def connection_factory(engine: AsyncEngine) -> DatabaseConnectionFactory:
    return DatabaseConnectionFactory(engine)


# Store fixtures
@pytest.fixture
def user_store(connection_factory: DatabaseConnectionFactory) -> UserStore:
    """Create a user store instance."""
    return UserStore(connection_factory)


@pytest.fixture
def property_store(connection_factory: DatabaseConnectionFactory) -> PropertyStore:
    """Create a property store instance."""
    return PropertyStore(connection_factory)


# Service fixtures
@pytest.fixture
def property_service(property_store: PropertyStore) -> PropertyService:
    """Create a property service instance."""
    return PropertyService(property_store)


# Test data factories
class UserFactory:
    """Factory for creating test users."""

    @staticmethod
    def create_user_data(
        email: str = None,
        first_name: str = "Test",
        last_name: str = "Broker",
        role: UserRole = UserRole.BROKER
    ) -> User:
        """Create an unsaved user."""
        return User(
            email=email or f"test{uuid.uuid4().hex[:8]}@example.com",
            first_name=first_name,
            last_name=last_name,
            password_hash="hashed-password",
            role=role
        )

    @staticmethod
    async def create_user(
        user_store: UserStore,
        email: str = None,
        first_name: str = "Test",
        last_name: str = "Broker",
        role: UserRole = UserRole.BROKER
    ) -> User:
        """Create a test user in the database."""
        user = UserFactory.create_user_data(
            email=email,
            first_name=first_name,
            last_name=last_name,
            role=role
        )
        await user_store.add(user)
        return user


class PropertyFactory:
    """Factory for creating test properties."""

    @staticmethod
    def create_property_data(
        broker_id: int = 1,
        property_type: PropertyType = PropertyType.APARTMENT,
        street: str = "1 Test Street",
        city: str = "Test City",
        postal_code: str = "12345",
        price: Decimal = Decimal("150000.00"),
        description: Optional[str] = "A beautiful test property",
        features: Optional[str] = "Parking",
        image_urls: Optional[List[str]] = None
    ) -> Property:
        """Create an unsaved property."""
        return Property(
            property_type=property_type,
            location=Location(street=street, city=city, postal_code=postal_code),
            price=Money(amount=price),
            description=description,
            features=features,
            broker_id=broker_id,
            image_urls=list(image_urls or [])
        )

    @staticmethod
    async def create_property(property_store: PropertyStore, broker_id: int, **kwargs) -> Property:
        """Create a test property in the database."""
        property_obj = PropertyFactory.create_property_data(broker_id=broker_id, **kwargs)
        await property_store.add(property_obj)
        return property_obj


# Common test fixtures
@pytest.fixture
async def test_broker(user_store: UserStore) -> User:
    """Create a test broker."""
    return await UserFactory.create_user(
        user_store,
        email="broker@test.com",
        first_name="Jane",
        last_name="Doe"
    )


@pytest.fixture
async def other_broker(user_store: UserStore) -> User:
    """Create a second broker."""
    return await UserFactory.create_user(
        user_store,
        email="other@test.com",
        first_name="John",
        last_name="Smith"
    )


@pytest.fixture
async def test_property(property_store: PropertyStore, test_broker: User) -> Property:
    """Create a test property with two images."""
    return await PropertyFactory.create_property(
        property_store,
        broker_id=test_broker.id,
        city="Downtown",
        price=Decimal("300000.00"),
        image_urls=["https://img.test/a.jpg", "https://img.test/b.jpg"]
    )


# Utility functions for tests
async def count_rows(engine: AsyncEngine, model) -> int:
    """Count rows in a table directly, bypassing the stores."""
    async with engine.connect() as conn:
        result = await conn.execute(select(func.count()).select_from(model))
        return result.scalar()


def assert_property_equal(prop1: Property, prop2: Property):
    """Assert that two properties hold the same stored values."""
    assert prop1.id == prop2.id
    assert prop1.property_type == prop2.property_type
    assert prop1.location == prop2.location
    assert prop1.price.amount == prop2.price.amount
    assert prop1.description == prop2.description
    assert prop1.features == prop2.features
    assert prop1.broker_id == prop2.broker_id
    assert prop1.image_urls == prop2.image_urls
