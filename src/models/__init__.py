"""
Typed models for the fridge scanner.

Use the ``from_dict``/``to_dict`` adapters to convert from wire and config dicts.
"""

from .frame import CapturedFrame
from .detection import DetectedBox, Point
from .inventory import InventoryItem, ItemDraft, ProductInfo
from .selection import Resolved, SelectionOutcome, Unresolved, UnresolvedReason
from .errors import (
    CaptureError,
    DetectionError,
    DuplicateIdError,
    FridgeScannerError,
    InventoryError,
    MalformedResponseError,
    MetadataConnectionError,
    NetworkError,
    NotFoundError,
    ProductNotFoundError,
)
from .config import (
    Config,
    CameraConfig,
    DetectorConfig,
    MetadataConfig,
    ScanConfig,
    InventoryConfig,
    WebConfig,
)

__all__ = [
    # Frame
    "CapturedFrame",
    # Detection
    "DetectedBox",
    "Point",
    # Inventory
    "InventoryItem",
    "ItemDraft",
    "ProductInfo",
    # Selection
    "Resolved",
    "Unresolved",
    "UnresolvedReason",
    "SelectionOutcome",
    # Errors
    "FridgeScannerError",
    "DetectionError",
    "NetworkError",
    "MalformedResponseError",
    "MetadataConnectionError",
    "ProductNotFoundError",
    "CaptureError",
    "InventoryError",
    "DuplicateIdError",
    "NotFoundError",
    # Config
    "Config",
    "CameraConfig",
    "DetectorConfig",
    "MetadataConfig",
    "ScanConfig",
    "InventoryConfig",
    "WebConfig",
]
