"""
HTTP client for the remote object detector.
"""

from __future__ import annotations

import logging
from typing import List, Optional

import httpx

from models.detection import DetectedBox
from models.errors import MalformedResponseError, NetworkError
from models.frame import CapturedFrame

from .records import parse_detections


class DetectionClient:
    """
    Sends one captured frame per call to ``POST <url>`` as a multipart upload
    (part name ``image``) and returns the normalised boxes.

    Raises:
        NetworkError: transport failure, timeout, or status outside 200-299.
        MalformedResponseError: body is not a JSON array of known records.
    """

    def __init__(
        self,
        url: str,
        timeout_s: float = 5.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.url = url
        self.timeout_s = timeout_s
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout_s)

    def detect(self, frame: CapturedFrame) -> List[DetectedBox]:
        files = {"image": (frame.filename, frame.image, frame.content_type)}
        try:
            response = self._client.post(self.url, files=files, timeout=self.timeout_s)
        except httpx.HTTPError as e:
            raise NetworkError(f"Detector request failed for frame {frame.sequence_id}: {e}") from e

        if not 200 <= response.status_code < 300:
            raise NetworkError(
                f"Detector returned HTTP {response.status_code} for frame {frame.sequence_id}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise MalformedResponseError(f"Detector response is not valid JSON: {e}") from e

        boxes = parse_detections(payload)
        logging.debug(f"Frame {frame.sequence_id}: {len(boxes)} boxes detected")
        return boxes

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "DetectionClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
