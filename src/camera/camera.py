"""
Camera factory.

This is the single entrypoint the rest of the project should use to create a camera.
"""

from __future__ import annotations

import cv2

from models.config import CameraConfig

from .base import Camera
from .backends.image import ImageFileCamera
from .backends.opencv import OpenCVCamera

_ROTATIONS = {
    90: cv2.ROTATE_90_CLOCKWISE,
    180: cv2.ROTATE_180,
    270: cv2.ROTATE_90_COUNTERCLOCKWISE,
}


class OrientedCamera(Camera):
    """Applies the configured rotation and flips to every frame of an inner camera."""

    def __init__(self, inner: Camera, rotate: int = 0, flip_horizontal: bool = False, flip_vertical: bool = False):
        self._inner = inner
        self.rotate = rotate
        self.flip_horizontal = flip_horizontal
        self.flip_vertical = flip_vertical

    def read(self):
        ok, frame = self._inner.read()
        if not ok or frame is None:
            return ok, frame
        if self.rotate in _ROTATIONS:
            frame = cv2.rotate(frame, _ROTATIONS[self.rotate])
        if self.flip_horizontal or self.flip_vertical:
            if self.flip_horizontal and self.flip_vertical:
                flip_code = -1
            else:
                flip_code = 1 if self.flip_horizontal else 0
            frame = cv2.flip(frame, flip_code)
        return ok, frame

    def release(self) -> None:
        self._inner.release()


def create_camera(cfg: CameraConfig) -> Camera:
    if cfg.backend == "image":
        if not cfg.image_path:
            raise ValueError("camera.image_path is required for the 'image' backend")
        base_cam: Camera = ImageFileCamera(cfg.image_path)
    else:
        base_cam = OpenCVCamera(
            device_id=cfg.device_id,
            resolution=tuple(cfg.resolution),
            fps=int(cfg.fps),
        )

    if cfg.rotate in _ROTATIONS or cfg.flip_horizontal or cfg.flip_vertical:
        return OrientedCamera(base_cam, cfg.rotate, cfg.flip_horizontal, cfg.flip_vertical)
    return base_cam
