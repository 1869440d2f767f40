"""
Pytest configuration and shared fixtures.
"""

import os
import sys
import time

import httpx
import numpy as np
import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from camera.base import Camera  # noqa: E402


class FakeCamera(Camera):
    """Camera returning a blank frame, or failing when told to."""

    def __init__(self, width: int = 64, height: int = 48, fail: bool = False):
        self.width = width
        self.height = height
        self.fail = fail
        self.reads = 0
        self.released = False

    def read(self):
        self.reads += 1
        if self.fail:
            return False, None
        return True, np.zeros((self.height, self.width, 3), dtype=np.uint8)

    def release(self) -> None:
        self.released = True


def mock_http_client(handler) -> httpx.Client:
    """httpx client whose requests are answered by ``handler(request)``."""
    return httpx.Client(transport=httpx.MockTransport(handler))


@pytest.fixture
def fake_camera():
    return FakeCamera()


@pytest.fixture
def milk_record():
    return {"topLeft": {"x": 10, "y": 10}, "bottomRight": {"x": 50, "y": 60}, "label": "milk"}


@pytest.fixture
def temp_config_dir(tmp_path):
    """Create a temporary config directory with default.yaml."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()

    default_yaml = config_dir / "default.yaml"
    default_yaml.write_text("""
camera:
  backend: "opencv"
  device_id: 0
  resolution: [640, 480]
  fps: 30

detector:
  url: "http://localhost:5000/detect"

metadata:
  base_url: "http://localhost:3000/api"

scan:
  interval_ms: 1000
  resolve_mode: "label"

log_path: "logs/test.log"
log_level: "INFO"
""")

    return config_dir


@pytest.fixture
def valid_config():
    """Return a valid configuration dictionary."""
    return {
        "camera": {
            "backend": "opencv",
            "device_id": 0,
            "resolution": [1280, 720],
            "fps": 30,
        },
        "detector": {
            "url": "http://localhost:5000/detect",
        },
        "metadata": {
            "base_url": "http://localhost:3000/api",
            "timeout_s": 5.0,
        },
        "scan": {
            "interval_ms": 1000,
            "resolve_mode": "label",
        },
        "inventory": {
            "max_undo": None,
        },
        "log_path": "logs/test.log",
        "log_level": "INFO",
    }


def wait_until(predicate, timeout: float = 2.0) -> bool:
    """Poll ``predicate`` until it holds or ``timeout`` seconds pass."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()
