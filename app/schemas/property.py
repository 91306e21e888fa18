"""
Pydantic schemas for the property aggregate.
Holds the Location and Money value objects, the Property entity, the
broker-joined projection, search filters and the paginated result envelope.
"""

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from typing import Generic, List, Optional, TypeVar
from datetime import datetime
from decimal import Decimal
import math

from app.config import settings
from app.models.property import PropertyType

LOCATION_DELIMITER = "|"

T = TypeVar("T")


class Location(BaseModel):
    """Composite address value object."""

    model_config = ConfigDict(frozen=True)

    street: str = Field("", max_length=100, description="Street address", examples=["12 Main St"])
    city: str = Field("", max_length=100, description="City", examples=["Springfield"])
    postal_code: str = Field("", max_length=20, description="Postal code", examples=["12345"])

    @field_validator("street", "city", "postal_code")
    @classmethod
    def validate_part(cls, v):
        """Parts are stored delimiter-joined, so the delimiter cannot appear inside one."""
        if LOCATION_DELIMITER in v:
            raise ValueError(f"Location parts cannot contain '{LOCATION_DELIMITER}'")
        return v.strip()

    def contains(self, query: str) -> bool:
        """Case-insensitive substring match against any part."""
        needle = query.casefold()
        return any(needle in part.casefold() for part in (self.street, self.city, self.postal_code))

    def __str__(self) -> str:
        return f"{self.street}, {self.city}, {self.postal_code}"


class Money(BaseModel):
    """Decimal amount with a currency code."""

    model_config = ConfigDict(frozen=True)

    amount: Decimal
    currency: str = Field(default_factory=lambda: settings.default_currency, min_length=3, max_length=3)

    def __str__(self) -> str:
        return f"{self.amount} {self.currency}"


class Property(BaseModel):
    """
    Property aggregate root.
    id and created_date are assigned by the store when the property is added.
    """

    id: Optional[int] = None
    property_type: PropertyType
    location: Location
    price: Money
    description: Optional[str] = None
    features: Optional[str] = None
    broker_id: int
    created_date: Optional[datetime] = None
    image_urls: List[str] = Field(default_factory=list)

    def update_price(self, new_amount: Decimal) -> None:
        """Replace the price amount, keeping the currency."""
        self.price = self.price.model_copy(update={"amount": Decimal(new_amount)})

    def add_image(self, image_url: str) -> None:
        """Append an image URL unless it is blank or already present."""
        if image_url and image_url.strip() and image_url not in self.image_urls:
            self.image_urls.append(image_url)

    def remove_image(self, image_url: str) -> None:
        """Remove an image URL if present."""
        if image_url in self.image_urls:
            self.image_urls.remove(image_url)


class BrokerContact(BaseModel):
    """Read-only contact projection of the owning broker."""

    id: int
    first_name: str = ""
    last_name: str = ""
    email: str = ""

    @computed_field
    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class PropertyWithBroker(BaseModel):
    """Property joined with its broker's contact details."""

    id: int
    property_type: PropertyType
    location: Location
    price: Money
    description: Optional[str] = None
    features: Optional[str] = None
    created_date: Optional[datetime] = None
    image_urls: List[str] = Field(default_factory=list)
    broker: BrokerContact


class PropertySearchFilters(BaseModel):
    """
    Search criteria. Every filter is optional; page is 1-based.
    Out-of-range paging is rejected rather than clamped.
    """

    location: Optional[str] = Field(None, description="Case-insensitive location substring")
    min_price: Optional[Decimal] = Field(None, description="Inclusive lower price bound")
    max_price: Optional[Decimal] = Field(None, description="Inclusive upper price bound")
    property_type: Optional[str] = Field(None, description="Exact property type name")
    page: int = Field(1, ge=1, description="1-based page number")
    page_size: int = Field(
        default_factory=lambda: settings.default_page_size,
        ge=1,
        le=settings.max_page_size,
        description="Items per page"
    )

    @field_validator("location", "property_type", mode="before")
    @classmethod
    def empty_to_none(cls, v):
        """Blank text filters are treated as absent."""
        if isinstance(v, PropertyType):
            return v.value
        if isinstance(v, str) and not v.strip():
            return None
        return v


class PaginatedResult(BaseModel, Generic[T]):
    """One page of results with the total size of the filtered set."""

    items: List[T]
    page: int
    page_size: int
    total_count: int

    @computed_field
    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return math.ceil(self.total_count / self.page_size)
