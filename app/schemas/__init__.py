"""
Pydantic schemas for the property catalog.
"""

from .property import (
    LOCATION_DELIMITER,
    Location,
    Money,
    Property,
    BrokerContact,
    PropertyWithBroker,
    PropertySearchFilters,
    PaginatedResult
)

from .user import User

__all__ = [
    "LOCATION_DELIMITER",
    "Location",
    "Money",
    "Property",
    "BrokerContact",
    "PropertyWithBroker",
    "PropertySearchFilters",
    "PaginatedResult",
    "User",
]
