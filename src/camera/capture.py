"""
Frame grabbing: read from a camera, encode to JPEG, stamp a sequence id.
"""

from __future__ import annotations

import itertools
import threading
import time

import cv2

from models.errors import CaptureError
from models.frame import CapturedFrame

from .base import Camera


class FrameGrabber:
    """Turns raw camera frames into CapturedFrame payloads for the detector."""

    def __init__(self, camera: Camera, jpeg_quality: int = 70) -> None:
        self.camera = camera
        self.jpeg_quality = max(1, min(100, int(jpeg_quality)))
        self._sequence = itertools.count(1)
        self._lock = threading.Lock()

    def grab(self) -> CapturedFrame:
        ok, frame = self.camera.read()
        if not ok or frame is None:
            raise CaptureError("Camera did not return a frame")

        ok, buf = cv2.imencode(".jpg", frame, [int(cv2.IMWRITE_JPEG_QUALITY), self.jpeg_quality])
        if not ok:
            raise CaptureError("Failed to encode frame as JPEG")

        with self._lock:
            sequence_id = next(self._sequence)
        height, width = frame.shape[:2]
        return CapturedFrame(
            image=buf.tobytes(),
            sequence_id=sequence_id,
            timestamp=time.time(),
            width=width,
            height=height,
        )

    def release(self) -> None:
        self.camera.release()
