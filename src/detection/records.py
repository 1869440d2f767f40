"""
Normalisation of raw detector records into DetectedBox.

The detector has been seen answering with two record shapes:

    {"topLeft": {x, y}, "bottomRight": {x, y}, "label": "milk"}
    {"topRight": {x, y}, "bottomLeft": {x, y}, "id": 17}

Both are mapped onto the canonical top-left/bottom-right box. Anything else
is a contract violation and fails the whole response.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional, Tuple

from models.detection import DetectedBox, Point
from models.errors import MalformedResponseError


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _point(raw: Any, key: str, index: int) -> Point:
    if not isinstance(raw, Mapping) or not _is_number(raw.get("x")) or not _is_number(raw.get("y")):
        raise MalformedResponseError(f"Record {index}: '{key}' must be an object with numeric x and y")
    return Point(float(raw["x"]), float(raw["y"]))


def _corners(record: Mapping[str, Any], index: int) -> Tuple[Point, Point]:
    if "topLeft" in record and "bottomRight" in record:
        return _point(record["topLeft"], "topLeft", index), _point(record["bottomRight"], "bottomRight", index)
    if "topRight" in record and "bottomLeft" in record:
        top_right = _point(record["topRight"], "topRight", index)
        bottom_left = _point(record["bottomLeft"], "bottomLeft", index)
        return Point(bottom_left.x, top_right.y), Point(top_right.x, bottom_left.y)
    raise MalformedResponseError(f"Record {index}: unknown corner pair {sorted(record.keys())}")


def _identity(record: Mapping[str, Any], index: int) -> Tuple[str, Optional[str]]:
    """Return (label, product_id) from whichever of label/id the record carries."""
    label = record.get("label")
    raw_id = record.get("id")
    product_id = str(raw_id) if raw_id is not None and raw_id != "" else None
    if isinstance(label, str) and label:
        return label, product_id
    if product_id is not None:
        return product_id, product_id
    raise MalformedResponseError(f"Record {index}: missing 'label' or 'id'")


def _confidence(record: Mapping[str, Any]) -> Optional[float]:
    value = record.get("confidence", record.get("score"))
    return float(value) if _is_number(value) else None


def normalize_record(record: Any, index: int) -> Optional[DetectedBox]:
    """
    Map one raw record to a DetectedBox.

    Returns None for a well-formed record whose box is inverted.
    Raises MalformedResponseError for an unknown shape.
    """
    if not isinstance(record, Mapping):
        raise MalformedResponseError(f"Record {index}: expected an object, got {type(record).__name__}")

    top_left, bottom_right = _corners(record, index)
    label, product_id = _identity(record, index)
    box = DetectedBox(
        id=f"box-{index}",
        top_left=top_left,
        bottom_right=bottom_right,
        label=label,
        confidence=_confidence(record),
        product_id=product_id,
    )
    if not box.is_valid():
        logging.warning(f"Dropping inverted detection {index} ({label}): {box.as_tuple()}")
        return None
    return box


def parse_detections(payload: Any) -> List[DetectedBox]:
    """Normalise a full detector response body."""
    if not isinstance(payload, list):
        raise MalformedResponseError(f"Expected a JSON array of detections, got {type(payload).__name__}")

    boxes: List[DetectedBox] = []
    for index, record in enumerate(payload):
        box = normalize_record(record, index)
        if box is not None:
            boxes.append(box)

    dropped = len(payload) - len(boxes)
    if dropped:
        logging.debug(f"Detector response: kept {len(boxes)} boxes, dropped {dropped}")
    return boxes
