"""
Still-image camera backend: every read returns the same picture.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

import cv2
import numpy as np

from ..base import Camera


class ImageFileCamera(Camera):
    def __init__(self, path: str) -> None:
        self.path = path
        self._frame: Optional[np.ndarray] = None

    def read(self) -> Tuple[bool, Optional[np.ndarray]]:
        if self._frame is None:
            self._frame = cv2.imread(self.path)
            if self._frame is None:
                logging.error(f"Could not read image file {self.path}")
                return False, None
        return True, self._frame.copy()

    def release(self) -> None:
        self._frame = None
