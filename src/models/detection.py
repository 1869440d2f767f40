"""
Detection models for boxes reported by the remote detector.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class Point:
    """A point in frame pixel coordinates."""
    x: float
    y: float

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class DetectedBox:
    """
    A single box reported by the detector for one frame.

    Coordinates are relative to the frame the box was detected in, so a box
    is only meaningful together with the rest of its frame's set.

    Attributes:
        id: Identifier, stable within one frame.
        top_left: Upper-left corner.
        bottom_right: Lower-right corner.
        label: Human-readable label (or the detector's product id).
        confidence: Optional detector score (0-1).
        product_id: Identifier used for a follow-up metadata lookup.
    """
    id: str
    top_left: Point
    bottom_right: Point
    label: str
    confidence: Optional[float] = None
    product_id: Optional[str] = None

    @property
    def width(self) -> float:
        return self.bottom_right.x - self.top_left.x

    @property
    def height(self) -> float:
        return self.bottom_right.y - self.top_left.y

    @property
    def center(self) -> Tuple[float, float]:
        return (
            (self.top_left.x + self.bottom_right.x) / 2,
            (self.top_left.y + self.bottom_right.y) / 2,
        )

    @property
    def area(self) -> float:
        return self.width * self.height

    def is_valid(self) -> bool:
        """True when bottom_right is not above or left of top_left."""
        return self.bottom_right.x >= self.top_left.x and self.bottom_right.y >= self.top_left.y

    def as_tuple(self) -> Tuple[float, float, float, float]:
        """Return as (x1, y1, x2, y2) tuple."""
        return (self.top_left.x, self.top_left.y, self.bottom_right.x, self.bottom_right.y)

    def as_int_tuple(self) -> Tuple[int, int, int, int]:
        """Return as integer (x1, y1, x2, y2) tuple."""
        return tuple(int(v) for v in self.as_tuple())  # type: ignore[return-value]

    @classmethod
    def from_corners(
        cls,
        box_id: str,
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        label: str,
        confidence: Optional[float] = None,
        product_id: Optional[str] = None,
    ) -> "DetectedBox":
        """Create from x1, y1, x2, y2 coordinates."""
        return cls(
            id=box_id,
            top_left=Point(x1, y1),
            bottom_right=Point(x2, y2),
            label=label,
            confidence=confidence,
            product_id=product_id,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "topLeft": self.top_left.to_dict(),
            "bottomRight": self.bottom_right.to_dict(),
            "label": self.label,
            "confidence": self.confidence,
            "productId": self.product_id,
        }
