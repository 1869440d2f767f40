"""
Camera interface.

Backends:
- OpenCV VideoCapture (USB cameras, RTSP/HTTP streams)
- Still image file (demo runs and bench testing without a camera)
"""

from __future__ import annotations

from typing import Optional, Tuple

import numpy as np


class Camera:
    def read(self) -> Tuple[bool, Optional[np.ndarray]]:
        raise NotImplementedError

    def release(self) -> None:
        raise NotImplementedError
