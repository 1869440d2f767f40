"""
CapturedFrame model for frames submitted to the detector.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CapturedFrame:
    """
    One encoded camera image on its way to the detector.

    Attributes:
        image: Encoded image payload (JPEG bytes).
        sequence_id: Monotonically increasing number assigned at capture.
        timestamp: Unix timestamp when the frame was captured.
        width: Frame width in pixels.
        height: Frame height in pixels.
        content_type: MIME type of ``image``.
    """
    image: bytes
    sequence_id: int
    timestamp: float
    width: int = 0
    height: int = 0
    content_type: str = "image/jpeg"

    @property
    def filename(self) -> str:
        return "frame.jpg" if self.content_type == "image/jpeg" else "frame.png"

    @property
    def size(self):
        """Return (width, height)."""
        return (self.width, self.height)
