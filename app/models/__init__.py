"""
Table models for the property catalog.
"""

from .user import UserRecord, UserRole
from .property import PropertyRecord, PropertyType
from .image import PropertyImageRecord

__all__ = [
    "UserRecord",
    "UserRole",
    "PropertyRecord",
    "PropertyType",
    "PropertyImageRecord",
]
