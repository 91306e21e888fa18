"""
Value codecs between domain value objects and their flat storage columns.
Pure functions; nothing here touches a connection.
"""

from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from app.models.property import PropertyType
from app.schemas.property import LOCATION_DELIMITER, Location, Money
from app.utils.exceptions import DecodeError

DEFAULT_CURRENCY = "USD"


def encode_location(location: Location) -> str:
    """Join street, city and postal code into one column value."""
    return LOCATION_DELIMITER.join((location.street, location.city, location.postal_code))


def decode_location(value: Any) -> Location:
    """
    Split a stored location back into its three parts.

    Absent or malformed values decode to an empty Location instead of
    failing, so legacy rows stay readable.
    """
    if not isinstance(value, str):
        return Location(street="", city="", postal_code="")

    parts = value.split(LOCATION_DELIMITER, 2)
    if len(parts) != 3:
        return Location(street="", city="", postal_code="")

    try:
        return Location(street=parts[0], city=parts[1], postal_code=parts[2])
    except PydanticValidationError:
        return Location(street="", city="", postal_code="")


def encode_money(money: Money) -> Decimal:
    """Only the amount is persisted."""
    return money.amount


def decode_money(value: Any, currency: str = DEFAULT_CURRENCY) -> Money:
    """
    Rebuild Money from a stored amount, attaching the given currency.

    Raises:
        DecodeError: If the value is absent or not numeric
    """
    if value is None or isinstance(value, bool):
        raise DecodeError("Money", value)
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise DecodeError("Money", value) from e
    if not amount.is_finite():
        raise DecodeError("Money", value)
    return Money(amount=amount, currency=currency)


def encode_property_type(property_type: PropertyType) -> str:
    """Store the symbolic name."""
    return PropertyType(property_type).value


def decode_property_type(value: Any) -> PropertyType:
    """
    Map a stored name back to PropertyType.

    Raises:
        DecodeError: If the name is not a known property type
    """
    try:
        return PropertyType(value)
    except ValueError as e:
        raise DecodeError("PropertyType", value) from e
