"""
Store layer for data access.
Contains the property and user stores plus the shared query helpers.
"""

from .base import BaseStore
from .property import PropertyStore
from .user import UserStore

__all__ = [
    "BaseStore",
    "PropertyStore",
    "UserStore",
]
