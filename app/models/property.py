"""
Property table for catalog listings.
Location is stored as one encoded column and price as its amount only;
the value codecs in app.utils.codecs translate both directions.
"""

from sqlalchemy import String, Text, Integer, Numeric, Index, ForeignKey, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column
from app.database import Base
from datetime import datetime
from decimal import Decimal
from typing import Optional
import enum


class PropertyType(str, enum.Enum):
    """Property type enumeration, stored by symbolic name."""
    APARTMENT = "Apartment"
    HOUSE = "House"
    CONDO = "Condo"
    TOWNHOUSE = "Townhouse"
    LAND = "Land"
    COMMERCIAL = "Commercial"


class PropertyRecord(Base):
    """
    Stored property row.
    Image URLs live in property_images and are removed with their property.
    """

    __tablename__ = "properties"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    property_type: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="Symbolic PropertyType name"
    )

    location: Mapped[str] = mapped_column(
        String(300),
        nullable=False,
        comment="Encoded street|city|postal_code"
    )

    price: Mapped[Decimal] = mapped_column(
        Numeric(precision=18, scale=2),
        nullable=False,
        comment="Price amount; currency is not persisted"
    )

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    features: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    broker_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
        comment="ID of the broker who owns this listing"
    )

    created_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    __table_args__ = (
        Index("ix_properties_location", "location"),
        Index("ix_properties_price", "price"),
        Index("ix_properties_property_type", "property_type"),
        Index("ix_properties_created_date", "created_date"),
    )

    def __repr__(self) -> str:
        """String representation of the property."""
        return f"<PropertyRecord(id={self.id}, type='{self.property_type}', price={self.price})>"
