from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class PointModel(BaseModel):
    x: float
    y: float


class BoxResponse(BaseModel):
    id: str
    top_left: PointModel
    bottom_right: PointModel
    label: str
    confidence: Optional[float] = None
    product_id: Optional[str] = None


class DetectionsResponse(BaseModel):
    sequence_id: Optional[int] = Field(None, description="Frame the boxes belong to")
    updated_at: Optional[float] = None
    boxes: List[BoxResponse]


class DraftModel(BaseModel):
    id: str
    name: str
    category: str = ""
    expiration_date: Optional[datetime] = None


class SelectionResponse(BaseModel):
    status: str = Field(..., description="resolved|unresolved")
    box_id: str
    draft: Optional[DraftModel] = None
    reason: Optional[str] = Field(None, description="unknown_box|not_found|connection_error")
    detail: Optional[str] = None


class ItemRequest(BaseModel):
    """Item to confirm into the inventory; ``id`` is generated when omitted."""
    id: Optional[str] = None
    name: str = Field(..., min_length=1)
    category: str = ""
    expiration_date: Optional[datetime] = None


class ItemResponse(BaseModel):
    id: str
    name: str
    category: str
    added_at: datetime
    expiration_date: Optional[datetime] = None


class InventoryResponse(BaseModel):
    items: List[ItemResponse]
    has_pending: bool = Field(..., description="True if a deletion can be undone")


class UndoResponse(BaseModel):
    restored: Optional[str] = Field(None, description="Name of the restored item, null if nothing to undo")
    has_pending: bool


class ScanStartRequest(BaseModel):
    interval_ms: Optional[int] = Field(None, gt=0)


class ScanStatusResponse(BaseModel):
    running: bool
    generation: int
    interval_ms: Optional[int] = None
    in_flight: bool
    ticks_dispatched: int
    ticks_skipped: int
    ticks_failed: int
    frames_applied: int
    frames_discarded: int
    last_applied_ts: Optional[float] = None
    errors: List[Dict[str, Any]] = Field(default_factory=list)


class ProductResponse(BaseModel):
    id: str
    name: str
    category: str
    expiration_date: Optional[datetime] = None


class ProductListResponse(BaseModel):
    products: List[ProductResponse]
