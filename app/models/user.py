"""
User table for brokers and seekers.
Only brokers own listings; the catalog reads their contact columns.
"""

from sqlalchemy import String, Text, Integer, DateTime, CheckConstraint, func
from sqlalchemy.orm import Mapped, mapped_column
from app.database import Base
from datetime import datetime
import enum


class UserRole(str, enum.Enum):
    """User role enumeration."""
    BROKER = "Broker"
    SEEKER = "Seeker"


class UserRecord(Base):
    """
    Stored user row.
    Email is unique; role is restricted to the UserRole values.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    first_name: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default="",
        comment="User's first name"
    )

    last_name: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default="",
        comment="User's last name"
    )

    email: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
        index=True,
        comment="User's email address (unique)"
    )

    password_hash: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Password hash produced by the authentication layer"
    )

    role: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        comment="User role - Broker or Seeker"
    )

    created_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    __table_args__ = (
        CheckConstraint("role IN ('Broker', 'Seeker')", name="ck_users_role"),
    )

    def __repr__(self) -> str:
        """String representation of the user."""
        return f"<UserRecord(id={self.id}, email='{self.email}', role='{self.role}')>"
