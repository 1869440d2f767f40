"""
Error taxonomy for detection, product lookup and inventory operations.

None of these are fatal: each one leaves the state it was raised from intact.
"""

from __future__ import annotations

from typing import Optional


class FridgeScannerError(Exception):
    """Base class for all application errors."""


class DetectionError(FridgeScannerError):
    """A detection or lookup request could not produce a usable result."""


class NetworkError(DetectionError):
    """Transport failure or non-2xx status from a remote endpoint."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(DetectionError):
    """Response body does not match the expected contract."""


class MetadataConnectionError(NetworkError):
    """Product metadata lookup failed for a reason other than 'not found'."""


class ProductNotFoundError(FridgeScannerError):
    """The product backend has no record for the requested id."""

    def __init__(self, product_id: str) -> None:
        super().__init__(f"Product not found: {product_id}")
        self.product_id = product_id


class CaptureError(FridgeScannerError):
    """The camera did not deliver an encodable frame."""


class InventoryError(FridgeScannerError):
    """Inventory precondition violation."""

    def __init__(self, message: str, item_id: str) -> None:
        super().__init__(message)
        self.item_id = item_id


class DuplicateIdError(InventoryError):
    def __init__(self, item_id: str) -> None:
        super().__init__(f"Item with id {item_id!r} is already in the inventory", item_id)


class NotFoundError(InventoryError):
    def __init__(self, item_id: str) -> None:
        super().__init__(f"No inventory item with id {item_id!r}", item_id)
