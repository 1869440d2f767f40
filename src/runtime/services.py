from __future__ import annotations

import logging
import threading
import time
from collections import deque
from typing import Any, Deque, Dict, List, Optional

from camera.capture import FrameGrabber
from detection.box_store import DetectionBoxStore
from detection.client import DetectionClient
from inventory.store import InventoryStore
from models.inventory import InventoryItem, ItemDraft
from models.selection import SelectionOutcome
from runtime.scheduler import CaptureScheduler


class DetectionService:
    """
    One detection tick: capture a frame, classify it remotely, and publish
    the boxes if the scheduler generation that started the tick is still live.

    Also acts as the scheduler's error sink, keeping the most recent failures
    for the status endpoint.
    """

    def __init__(
        self,
        grabber: FrameGrabber,
        client: DetectionClient,
        box_store: DetectionBoxStore,
        scheduler: Optional[CaptureScheduler] = None,
        max_errors: int = 20,
        timeout_follows_interval: bool = False,
    ):
        self.grabber = grabber
        self.client = client
        self.box_store = box_store
        # Without a configured detector timeout, each request may take up to one interval
        self.timeout_follows_interval = timeout_follows_interval
        self.scheduler = scheduler or CaptureScheduler(on_error=self.record_error, name="detection")
        self._errors: Deque[Dict[str, Any]] = deque(maxlen=max_errors)
        self._errors_lock = threading.Lock()
        self.frames_applied = 0
        self.frames_discarded = 0
        self.last_applied_ts: Optional[float] = None

    def start(self, interval_ms: int, fire_immediately: bool = True) -> int:
        if self.timeout_follows_interval:
            self.client.timeout_s = interval_ms / 1000.0
        generation = self.scheduler.start(interval_ms / 1000.0, self.tick, fire_immediately=fire_immediately)
        logging.info(f"Detection started every {interval_ms} ms")
        return generation

    def stop(self) -> None:
        self.scheduler.stop()
        logging.info("Detection stopped")

    def trigger(self) -> bool:
        """Request a single detection right now (subject to the single-flight guard)."""
        return self.scheduler.fire()

    def tick(self, generation: int) -> None:
        frame = self.grabber.grab()
        boxes = self.client.detect(frame)

        applied = self.scheduler.apply_if_current(
            generation,
            lambda: self.box_store.replace(boxes, sequence_id=frame.sequence_id),
        )
        if applied:
            self.frames_applied += 1
            self.last_applied_ts = time.time()
        else:
            self.frames_discarded += 1
            logging.debug(f"Discarding detections for frame {frame.sequence_id}: scheduler generation changed")

    def record_error(self, error: Exception) -> None:
        with self._errors_lock:
            self._errors.append({
                "timestamp": time.time(),
                "type": type(error).__name__,
                "message": str(error),
            })

    def recent_errors(self) -> List[Dict[str, Any]]:
        with self._errors_lock:
            return list(self._errors)

    def status(self) -> Dict[str, Any]:
        sched = self.scheduler
        return {
            "running": sched.is_running,
            "generation": sched.generation,
            "interval_ms": int(sched.interval_s * 1000) if sched.interval_s else None,
            "in_flight": sched.in_flight,
            "ticks_dispatched": sched.ticks_dispatched,
            "ticks_skipped": sched.ticks_skipped,
            "ticks_failed": sched.ticks_failed,
            "frames_applied": self.frames_applied,
            "frames_discarded": self.frames_discarded,
            "last_applied_ts": self.last_applied_ts,
            "errors": self.recent_errors(),
        }


class InventoryService:
    """Confirms selection outcomes into the inventory store."""

    def __init__(self, box_store: DetectionBoxStore, inventory: InventoryStore):
        self.box_store = box_store
        self.inventory = inventory

    def select(self, box_id: str) -> SelectionOutcome:
        return self.box_store.select(box_id)

    def confirm(self, draft: ItemDraft) -> InventoryItem:
        item = draft.to_item()
        self.inventory.add(item)
        return item
