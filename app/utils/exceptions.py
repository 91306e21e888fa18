"""
Custom exception classes for the property catalog.
Store errors describe persistence failures; service errors describe
business-rule outcomes the calling layer maps to its own responses.
"""

from typing import Any, Optional


class StoreError(Exception):
    """Base class for every failure surfaced by a store."""

    error_code = "STORE_ERROR"

    def __init__(
        self,
        detail: str,
        operation: Optional[str] = None,
        entity_id: Optional[Any] = None
    ):
        self.detail = detail
        self.operation = operation
        self.entity_id = entity_id
        super().__init__(self._format())

    def _format(self) -> str:
        if self.operation is None:
            return self.detail
        target = f" for id {self.entity_id}" if self.entity_id is not None else ""
        return f"{self.operation} failed{target}: {self.detail}"

    def with_context(self, operation: str, entity_id: Optional[Any] = None) -> "StoreError":
        """Fill in operation context the raising code did not know."""
        if self.operation is None:
            self.operation = operation
        if self.entity_id is None:
            self.entity_id = entity_id
        self.args = (self._format(),)
        return self


class StoreConnectionError(StoreError):
    """A connection could not be obtained or opened."""

    error_code = "STORE_UNAVAILABLE"


class ConstraintError(StoreError):
    """Storage rejected a write because of a referential or uniqueness rule."""

    error_code = "CONSTRAINT_VIOLATION"


class DecodeError(StoreError):
    """A stored scalar cannot be reconstructed into its value type."""

    error_code = "DECODE_ERROR"

    def __init__(self, target: str, value: Any):
        self.target = target
        self.value = value
        super().__init__(f"cannot decode {value!r} as {target}")


class ServiceError(Exception):
    """Base class for application service errors."""

    error_code = "SERVICE_ERROR"

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)


class NotFoundError(ServiceError):
    """Resource not found exception."""

    error_code = "NOT_FOUND"

    def __init__(self, resource: str, resource_id: Optional[Any] = None):
        detail = f"{resource} not found"
        if resource_id is not None:
            detail += f" with ID: {resource_id}"
        super().__init__(detail)


class ForbiddenError(ServiceError):
    """Access forbidden exception."""

    error_code = "FORBIDDEN"

    def __init__(self, detail: str = "Access forbidden"):
        super().__init__(detail)


# Property specific exceptions
class PropertyNotFoundError(NotFoundError):
    """Property not found exception."""

    def __init__(self, property_id: int):
        super().__init__("Property", property_id)
        self.property_id = property_id


class PropertyOwnershipError(ForbiddenError):
    """Property ownership violation exception."""

    def __init__(self, detail: str = "You don't own this property"):
        super().__init__(detail)
