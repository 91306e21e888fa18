"""
Utility modules for the property catalog.
"""

from .exceptions import (
    StoreError,
    StoreConnectionError,
    ConstraintError,
    DecodeError,
    ServiceError,
    NotFoundError,
    ForbiddenError,
    PropertyNotFoundError,
    PropertyOwnershipError
)

__all__ = [
    # Store errors
    "StoreError",
    "StoreConnectionError",
    "ConstraintError",
    "DecodeError",

    # Service errors
    "ServiceError",
    "NotFoundError",
    "ForbiddenError",
    "PropertyNotFoundError",
    "PropertyOwnershipError",
]
