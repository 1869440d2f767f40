"""
Inventory models: kept items, drafts produced by box selection, and the
product records served by the metadata backend.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from typing import Any, Dict, Optional, Union

from .detection import DetectedBox

TimestampLike = Union[datetime, date, str, int, float, None]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: TimestampLike) -> Optional[datetime]:
    """
    Coerce an ISO string, epoch seconds, date or datetime into an aware datetime.

    Naive values are assumed to be UTC. Empty values map to None.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(float(value), tz=timezone.utc)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        dt = datetime.fromisoformat(text)
    else:
        raise ValueError(f"Unsupported timestamp value: {value!r}")
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def derive_item_id(box: DetectedBox, timestamp: float) -> str:
    """Build an item id from a box's integer coordinates and a timestamp."""
    x1, y1, x2, y2 = box.as_int_tuple()
    return f"{x1}-{y1}-{x2}-{y2}-{int(timestamp * 1000)}"


@dataclass(frozen=True)
class InventoryItem:
    """
    An item kept in the fridge inventory.

    Attributes:
        id: Unique among currently kept items.
        name: Display name.
        category: Product category.
        added_at: When the item was confirmed into the inventory.
        expiration_date: Optional best-before timestamp.
    """
    id: str
    name: str
    category: str = ""
    added_at: datetime = field(default_factory=utc_now)
    expiration_date: Optional[datetime] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "InventoryItem":
        """Adapter: accepts both snake_case and the camelCase keys used by UIs."""
        added = d.get("added_at", d.get("addedAt", d.get("date")))
        expiration = d.get("expiration_date", d.get("expirationDate"))
        return cls(
            id=str(d["id"]),
            name=str(d["name"]),
            category=str(d.get("category") or ""),
            added_at=parse_timestamp(added) or utc_now(),
            expiration_date=parse_timestamp(expiration),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "added_at": _iso(self.added_at),
            "expiration_date": _iso(self.expiration_date),
        }


@dataclass(frozen=True)
class ItemDraft:
    """A candidate item awaiting the user's confirmation."""
    id: str
    name: str
    category: str = ""
    expiration_date: Optional[datetime] = None

    def to_item(self, added_at: Optional[datetime] = None) -> InventoryItem:
        return InventoryItem(
            id=self.id,
            name=self.name,
            category=self.category,
            added_at=added_at or utc_now(),
            expiration_date=self.expiration_date,
        )

    def with_id(self, item_id: str) -> "ItemDraft":
        return replace(self, id=item_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "expiration_date": _iso(self.expiration_date),
        }


@dataclass(frozen=True)
class ProductInfo:
    """Product record as returned by ``GET /product/:id``."""
    id: str
    name: str
    category: str = ""
    expiration_date: Optional[datetime] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ProductInfo":
        return cls(
            id=str(d["id"]),
            name=str(d["name"]),
            category=str(d.get("category") or ""),
            expiration_date=parse_timestamp(d.get("expiration_date")),
        )

    def to_draft(self) -> ItemDraft:
        return ItemDraft(
            id=self.id,
            name=self.name,
            category=self.category,
            expiration_date=self.expiration_date,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "expiration_date": _iso(self.expiration_date),
        }
