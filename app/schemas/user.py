"""
Pydantic schema for catalog users.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime

from app.models.user import UserRole


class User(BaseModel):
    """A broker or seeker account as the catalog sees it."""

    id: Optional[int] = None
    first_name: str = Field("", max_length=50)
    last_name: str = Field("", max_length=50)
    email: str = Field(..., min_length=3, max_length=100)
    password_hash: str = Field(..., min_length=1)
    role: UserRole = UserRole.BROKER
    created_date: Optional[datetime] = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        """Normalize email and check its basic shape."""
        v = v.strip().lower()
        if "@" not in v or v.startswith("@") or v.endswith("@"):
            raise ValueError("Invalid email format")
        return v

    @property
    def is_broker(self) -> bool:
        return self.role == UserRole.BROKER
