"""Row-mapping utilities shared by the stores.

Join queries return one flat row per (property, broker) match; these helpers
fold such rows back into one entity per property id and attach image lists
loaded by a separate query.
"""

from dataclasses import dataclass
from itertools import groupby
from typing import Any, Callable, Dict, Generic, Hashable, Iterable, TypeVar

from app.schemas.property import BrokerContact, Property, PropertyWithBroker
from app.utils.codecs import DEFAULT_CURRENCY, decode_location, decode_money, decode_property_type

K = TypeVar("K", bound=Hashable)
T = TypeVar("T")


@dataclass
class PagedRow(Generic[T]):
    """An entity together with the window total its row carried."""

    entity: T
    total_count: int


def flatten_rows(
    rows: Iterable[Any],
    key: Callable[[Any], K],
    build: Callable[[Any], T],
) -> Dict[K, T]:
    """
    Collapse a row stream into one entity per key.

    The first row seen for a key builds the entity; later rows with the same
    key are dropped without touching it. Dict order is first-seen order.
    """
    entities: Dict[K, T] = {}
    for row in rows:
        entity_key = key(row)
        if entity_key not in entities:
            entities[entity_key] = build(row)
    return entities


def attach_images(entities: Dict[int, Any], image_rows: Iterable[Any]) -> None:
    """
    Assign image URLs to their entities (mutates in place).

    image_rows must be ordered by (property_id, display_order); each
    property's run of rows becomes its image_urls list.
    """
    for property_id, group in groupby(image_rows, key=lambda r: r.property_id):
        entity = entities.get(property_id)
        if entity is not None:
            entity.image_urls = [r.image_url for r in group]


def property_from_row(row: Any, currency: str = DEFAULT_CURRENCY) -> Property:
    """Build a Property (without images) from a properties row."""
    return Property(
        id=row.id,
        property_type=decode_property_type(row.property_type),
        location=decode_location(row.location),
        price=decode_money(row.price, currency),
        description=row.description,
        features=row.features,
        broker_id=row.broker_id,
        created_date=row.created_date,
    )


def broker_from_row(row: Any) -> BrokerContact:
    """Build the broker projection from the joined user columns."""
    return BrokerContact(
        id=row.broker_user_id,
        first_name=row.broker_first_name or "",
        last_name=row.broker_last_name or "",
        email=row.broker_email or "",
    )


def property_with_broker_from_row(row: Any, currency: str = DEFAULT_CURRENCY) -> PropertyWithBroker:
    """Build a PropertyWithBroker (without images) from a joined row."""
    return PropertyWithBroker(
        id=row.id,
        property_type=decode_property_type(row.property_type),
        location=decode_location(row.location),
        price=decode_money(row.price, currency),
        description=row.description,
        features=row.features,
        created_date=row.created_date,
        broker=broker_from_row(row),
    )
