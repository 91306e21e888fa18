"""
Image URL table for property listings.
Rows are owned by their property and ordered by display_order.
"""

from sqlalchemy import String, Integer, ForeignKey, Index, DateTime, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column
from app.database import Base
from datetime import datetime


class PropertyImageRecord(Base):
    """
    Stored image row.
    A URL appears at most once per property.
    """

    __tablename__ = "property_images"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    property_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        comment="ID of the property this image belongs to"
    )

    image_url: Mapped[str] = mapped_column(String(500), nullable=False)

    display_order: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Position in the property's image list, starting at 0"
    )

    created_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    __table_args__ = (
        UniqueConstraint("property_id", "image_url", name="uq_property_images_url"),
        Index("ix_property_images_property_order", "property_id", "display_order"),
    )

    def __repr__(self) -> str:
        """String representation of the image."""
        return f"<PropertyImageRecord(property_id={self.property_id}, order={self.display_order})>"
