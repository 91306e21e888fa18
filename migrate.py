#!/usr/bin/env python3
"""
Database schema management script.
Creates, resets and seeds the catalog tables.
"""

import asyncio
import sys
import argparse
import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from app.config import settings
from app.database import DatabaseConnectionFactory, create_engine, create_tables, drop_tables
from app.models.property import PropertyType
from app.models.user import UserRole
from app.repositories.property import PropertyStore
from app.repositories.user import UserStore
from app.schemas.property import Location, Money, Property
from app.schemas.user import User
from app.utils.exceptions import StoreError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

SEED_BROKER_EMAIL = "broker@example.com"


class MigrationManager:
    """Manages the catalog schema for one database URL."""

    def __init__(self, database_url: Optional[str] = None):
        self.engine = create_engine(database_url)
        self.connection_factory = DatabaseConnectionFactory(self.engine)

    async def init_database(self) -> None:
        """Create tables and indexes that do not exist yet."""
        logger.info("Initializing database schema")
        await create_tables(self.engine)

    async def seed_database(self) -> List[Property]:
        """
        Seed the database with a demo broker and sample listings.
        Does nothing if the demo broker already exists.
        """
        logger.info("Seeding database with initial data")

        user_store = UserStore(self.connection_factory)
        property_store = PropertyStore(self.connection_factory)

        if await user_store.get_by_email(SEED_BROKER_EMAIL):
            logger.info("Demo broker already exists, skipping seed")
            return []

        broker = User(
            first_name="Demo",
            last_name="Broker",
            email=SEED_BROKER_EMAIL,
            # Not a usable credential; the auth layer sets real hashes
            password_hash="!seed",
            role=UserRole.BROKER,
        )
        await user_store.add(broker)

        listings = [
            Property(
                property_type=PropertyType.APARTMENT,
                location=Location(street="1 Harbour Rd", city="Downtown", postal_code="10001"),
                price=Money(amount=Decimal("250000.00")),
                description="Two-bedroom apartment with a view",
                features="Balcony, Elevator",
                broker_id=broker.id,
                image_urls=["https://images.example.com/harbour/1.jpg"],
            ),
            Property(
                property_type=PropertyType.HOUSE,
                location=Location(street="42 Oak Ave", city="Greenfield", postal_code="20002"),
                price=Money(amount=Decimal("480000.00")),
                description="Family house with garden",
                features="Garage, Garden",
                broker_id=broker.id,
            ),
        ]
        for listing in listings:
            await property_store.add(listing)

        logger.info(f"Database seeded with broker {broker.email} and {len(listings)} listings")
        return listings

    async def reset_database(self) -> None:
        """Reset the database by dropping and recreating all tables."""
        logger.warning("Resetting database - all data will be lost!")

        if settings.is_production:
            raise RuntimeError("Database reset is not allowed in production")

        await drop_tables(self.engine)
        await create_tables(self.engine)
        logger.info("Database reset completed")

    async def close(self) -> None:
        await self.connection_factory.dispose()


async def run_command(command: str, database_url: Optional[str] = None) -> None:
    manager = MigrationManager(database_url)
    try:
        if command == "init":
            await manager.init_database()
        elif command == "seed":
            await manager.init_database()
            await manager.seed_database()
        elif command == "reset":
            await manager.reset_database()
    finally:
        await manager.close()


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI interface for schema management."""
    parser = argparse.ArgumentParser(description="Property catalog schema management")
    parser.add_argument("--database-url", help="Override the configured database URL")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("init", help="Create tables and indexes")
    subparsers.add_parser("seed", help="Create tables and seed demo data")

    reset_parser = subparsers.add_parser("reset", help="Drop and recreate all tables")
    reset_parser.add_argument("--confirm", action="store_true", help="Confirm database reset")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.command == "reset" and not args.confirm:
        print("Database reset requires --confirm flag")
        return 1

    try:
        asyncio.run(run_command(args.command, args.database_url))
    except (StoreError, SQLAlchemyError, RuntimeError) as e:
        logger.error(f"Command failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
