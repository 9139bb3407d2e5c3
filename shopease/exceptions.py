"""
Error taxonomy raised by the data access services.

The API layer never inspects storage errors directly; it renders these
exceptions through the handlers in `shopease.api.errors`.
"""
from typing import Any, Optional


class ShopEaseError(Exception):
    """Base class for every error the data access services raise."""
    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.kind, "detail": self.message}


class ValidationError(ShopEaseError):
    """Malformed or out-of-range input. Never retried."""
    kind = "validation_error"

    def __init__(self, field: str, reason: str):
        super().__init__(f"Invalid value for '{field}': {reason}")
        self.field = field
        self.reason = reason

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update(field=self.field, reason=self.reason)
        return data


class NotFound(ShopEaseError):
    """A referenced entity does not exist."""
    kind = "not_found"

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(f"{entity.capitalize()} with ID {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update(entity=self.entity, id=self.entity_id)
        return data


class Conflict(ShopEaseError):
    """The request is well-formed but clashes with current state."""
    kind = "conflict"

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class InsufficientStockError(Conflict):
    """Raised when there's not enough stock to fulfill a sale."""

    def __init__(self, product_id: int, requested: int, available: Optional[int] = None):
        reason = f"Insufficient stock for product {product_id}. Requested: {requested}"
        if available is not None:
            reason += f", Available: {available}"
        super().__init__(reason)
        self.product_id = product_id
        self.requested = requested
        self.available = available


class StorageUnavailable(ShopEaseError):
    """Transient storage failure. Safe for the caller to retry with backoff."""
    kind = "storage_unavailable"
    retryable = True

    def __init__(self, reason: str = "Storage is temporarily unavailable"):
        super().__init__(reason)


class DeadlineExceeded(StorageUnavailable):
    """The operation's deadline passed before its unit of work committed."""
    kind = "deadline_exceeded"

    def __init__(self, reason: str = "Operation deadline exceeded; no changes were applied"):
        super().__init__(reason)
