"""
User store for broker and seeker accounts.
The catalog only needs to create users and look them up; credential
checks belong to the authentication layer.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import insert, select

from app.models.user import UserRecord, UserRole
from app.repositories.base import BaseStore
from app.schemas.user import User
import logging

logger = logging.getLogger(__name__)


def _user_from_row(row: Any) -> User:
    return User(
        id=row.id,
        first_name=row.first_name,
        last_name=row.last_name,
        email=row.email,
        password_hash=row.password_hash,
        role=UserRole(row.role),
        created_date=row.created_date,
    )


class UserStore(BaseStore):
    """Store for users."""

    entity_name = "user"

    async def add(self, user: User) -> None:
        """
        Insert a user and write back its id and created_date.

        Raises:
            ConstraintError: If the email is already registered
        """
        async with self.operation("add", user.email):
            async with self.connection_factory.create_connection() as conn:
                async with conn.begin():
                    created_date = datetime.now(timezone.utc)
                    result = await conn.execute(
                        insert(UserRecord).values(
                            first_name=user.first_name,
                            last_name=user.last_name,
                            email=user.email,
                            password_hash=user.password_hash,
                            role=user.role.value,
                            created_date=created_date,
                        )
                    )
                    user_id = result.inserted_primary_key[0]

            user.id = user_id
            user.created_date = created_date

        logger.info(f"Created user: {user.email} (ID: {user.id})")

    async def get_by_id(self, user_id: int) -> Optional[User]:
        """
        Get user by id.

        Returns:
            User if found, None otherwise
        """
        async with self.operation("get", user_id):
            async with self.connection_factory.create_connection() as conn:
                result = await conn.execute(select(UserRecord).where(UserRecord.id == user_id))
                row = result.first()

        return _user_from_row(row) if row is not None else None

    async def get_by_email(self, email: str) -> Optional[User]:
        """
        Get user by email address (case-insensitive).

        Returns:
            User if found, None otherwise
        """
        async with self.operation("get by email", email):
            async with self.connection_factory.create_connection() as conn:
                result = await conn.execute(
                    select(UserRecord).where(UserRecord.email == email.strip().lower())
                )
                row = result.first()

        if row is None:
            logger.debug(f"User not found by email: {email}")
            return None
        return _user_from_row(row)
