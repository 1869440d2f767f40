"""
Holder of the current frame's detected boxes.
"""

from __future__ import annotations

import threading
import time
from typing import Iterable, Optional, Tuple

from models.detection import DetectedBox
from models.selection import SelectionOutcome, Unresolved, UnresolvedReason

from .resolvers import BoxResolver


class DetectionBoxStore:
    """
    Current box set, replaced wholesale per successful detection.

    Boxes are frame-relative, so sets are never merged: ``replace`` swaps in
    a new immutable tuple and readers see either the old or the new set.
    ``select`` captures the box under the lock and resolves it outside, so a
    pending resolution is unaffected by later replacements.
    """

    def __init__(self, resolver: BoxResolver):
        self._resolver = resolver
        self._boxes: Tuple[DetectedBox, ...] = ()
        self._sequence_id: Optional[int] = None
        self._updated_at: Optional[float] = None
        self._lock = threading.Lock()

    def replace(self, boxes: Iterable[DetectedBox], sequence_id: Optional[int] = None) -> None:
        new_boxes = tuple(boxes)
        with self._lock:
            self._boxes = new_boxes
            self._sequence_id = sequence_id
            self._updated_at = time.time()

    def clear(self) -> None:
        self.replace(())

    def snapshot(self) -> Tuple[DetectedBox, ...]:
        with self._lock:
            return self._boxes

    @property
    def sequence_id(self) -> Optional[int]:
        with self._lock:
            return self._sequence_id

    @property
    def updated_at(self) -> Optional[float]:
        with self._lock:
            return self._updated_at

    def get(self, box_id: str) -> Optional[DetectedBox]:
        with self._lock:
            for box in self._boxes:
                if box.id == box_id:
                    return box
        return None

    def select(self, box_id: str) -> SelectionOutcome:
        box = self.get(box_id)
        if box is None:
            return Unresolved(UnresolvedReason.UNKNOWN_BOX, box_id, f"No box {box_id!r} in the current frame")
        return self._resolver.resolve(box)

    def __len__(self) -> int:
        return len(self.snapshot())
