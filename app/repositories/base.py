"""
Base store class shared by the catalog stores.
Owns the connection provider and translates driver errors into the
store error taxonomy.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError

from app.config import settings
from app.database import DatabaseConnectionFactory
from app.utils.exceptions import ConstraintError, StoreConnectionError, StoreError
import logging

logger = logging.getLogger(__name__)


class BaseStore:
    """
    Base class for stores.
    Every operation runs inside `operation()` so failures reach the caller
    as StoreError subclasses carrying the operation name and entity id.
    """

    entity_name = "record"

    def __init__(self, connection_factory: DatabaseConnectionFactory, currency: Optional[str] = None):
        """
        Initialize store with its connection provider.

        Args:
            connection_factory: Supplies one scoped connection per operation
            currency: Currency attached to prices read back, defaults to settings

        Raises:
            ValueError: If currency is not a three-letter code
        """
        self.connection_factory = connection_factory
        self.currency = self._validate_currency(currency or settings.default_currency)

    @staticmethod
    def _validate_currency(currency: str) -> str:
        """Currency codes are three letters, stored upper-case."""
        if len(currency) != 3 or not currency.isalpha():
            raise ValueError(f"Currency must be a three-letter code, got {currency!r}")
        return currency.upper()

    @asynccontextmanager
    async def operation(self, name: str, entity_id: Optional[Any] = None) -> AsyncIterator[None]:
        """
        Wrap one store operation.

        Raises:
            ConstraintError: If storage rejects a write on an integrity rule
            StoreConnectionError: If the connection is lost mid-operation
            StoreError: For any other storage failure
        """
        try:
            yield
        except StoreError as e:
            e.with_context(name, entity_id)
            logger.error(f"Failed to {name} {self.entity_name} {entity_id}: {e}")
            raise
        except IntegrityError as e:
            logger.error(f"Constraint violation during {name} of {self.entity_name} {entity_id}: {e.orig}")
            raise ConstraintError(str(e.orig), operation=name, entity_id=entity_id) from e
        except DBAPIError as e:
            if e.connection_invalidated:
                logger.error(f"Connection lost during {name} of {self.entity_name} {entity_id}: {e.orig}")
                raise StoreConnectionError(str(e.orig), operation=name, entity_id=entity_id) from e
            logger.error(f"Failed to {name} {self.entity_name} {entity_id}: {e.orig}")
            raise StoreError(str(e.orig), operation=name, entity_id=entity_id) from e
        except SQLAlchemyError as e:
            logger.error(f"Failed to {name} {self.entity_name} {entity_id}: {e}")
            raise StoreError(str(e), operation=name, entity_id=entity_id) from e
