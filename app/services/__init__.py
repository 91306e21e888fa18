"""
Service layer for business logic implementation.
"""

from .property import PropertyService

__all__ = [
    "PropertyService",
]
