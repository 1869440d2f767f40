"""
OpenCV camera backend.

Supports:
- USB webcams (device_id as int, e.g. 0)
- Network cameras (device_id as str URL, e.g. "rtsp://..." or "http://.../video")
"""

from __future__ import annotations

import logging
import time
from typing import Optional, Tuple, Union

import cv2
import numpy as np

from ..base import Camera


class OpenCVCamera(Camera):
    """
    Lazily opened OpenCV capture.

    The device is opened on the first read, so building the runtime does not
    block on a missing camera; a failed read releases the device and the next
    read tries to reopen it.
    """

    def __init__(
        self,
        device_id: Union[int, str] = 0,
        resolution: Tuple[int, int] = (1280, 720),
        fps: int = 30,
        buffer_size: int = 1,
        max_retries: int = 3,
    ) -> None:
        self.device_id = device_id
        self.resolution = resolution
        self.fps = fps
        self.buffer_size = buffer_size
        self.max_retries = max_retries

        self._cap: Optional[cv2.VideoCapture] = None

    def _open(self) -> bool:
        for attempt in range(1, self.max_retries + 1):
            cap = cv2.VideoCapture(self.device_id)
            if cap.isOpened():
                # Only USB cameras accept capture properties
                if isinstance(self.device_id, int):
                    cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.resolution[0])
                    cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.resolution[1])
                    cap.set(cv2.CAP_PROP_FPS, self.fps)
                    cap.set(cv2.CAP_PROP_BUFFERSIZE, self.buffer_size)
                self._cap = cap
                logging.info(f"Camera opened (backend=opencv, id={self.device_id}, res={self.resolution})")
                return True
            cap.release()
            logging.warning(f"Failed to open camera {self.device_id} (attempt {attempt}/{self.max_retries})")
            if attempt < self.max_retries:
                time.sleep(min(2 ** attempt, 10) * 0.1)
        logging.error(f"Failed to open camera {self.device_id} after {self.max_retries} attempts")
        return False

    def read(self) -> Tuple[bool, Optional[np.ndarray]]:
        if self._cap is None or not self._cap.isOpened():
            if not self._open():
                return False, None

        assert self._cap is not None
        ok, frame = self._cap.read()
        if not ok:
            logging.warning(f"Failed to read frame from camera {self.device_id}; will reopen on next read")
            self.release()
            return False, None
        return True, frame

    def release(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None
            logging.info("Camera released")
