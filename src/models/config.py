"""
Typed configuration models matching the YAML config structure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


@dataclass
class CameraConfig:
    """Camera configuration."""
    backend: str = "opencv"
    device_id: Union[int, str] = 0
    image_path: Optional[str] = None
    resolution: List[int] = field(default_factory=lambda: [1280, 720])
    fps: int = 30
    jpeg_quality: int = 70
    rotate: int = 0
    flip_horizontal: bool = False
    flip_vertical: bool = False

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "CameraConfig":
        """Adapter: Create from config dictionary."""
        return cls(
            backend=d.get("backend", "opencv"),
            device_id=d.get("device_id", 0),
            image_path=d.get("image_path"),
            resolution=d.get("resolution", [1280, 720]),
            fps=d.get("fps", 30),
            jpeg_quality=d.get("jpeg_quality", 70),
            rotate=d.get("rotate", 0) or 0,
            flip_horizontal=d.get("flip_horizontal", False),
            flip_vertical=d.get("flip_vertical", False),
        )

    def to_dict(self) -> Dict[str, Any]:
        d = {
            "backend": self.backend,
            "device_id": self.device_id,
            "resolution": self.resolution,
            "fps": self.fps,
            "jpeg_quality": self.jpeg_quality,
            "rotate": self.rotate,
            "flip_horizontal": self.flip_horizontal,
            "flip_vertical": self.flip_vertical,
        }
        if self.image_path is not None:
            d["image_path"] = self.image_path
        return d


@dataclass
class DetectorConfig:
    """Remote detector endpoint. ``timeout_s`` of None means 'use the tick interval'."""
    url: str = "http://localhost:5000/detect"
    timeout_s: Optional[float] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "DetectorConfig":
        return cls(
            url=d.get("url", "http://localhost:5000/detect"),
            timeout_s=d.get("timeout_s"),
        )

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"url": self.url}
        if self.timeout_s is not None:
            d["timeout_s"] = self.timeout_s
        return d


@dataclass
class MetadataConfig:
    """Product metadata backend."""
    base_url: str = "http://localhost:3000/api"
    timeout_s: float = 10.0

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "MetadataConfig":
        return cls(
            base_url=d.get("base_url", "http://localhost:3000/api"),
            timeout_s=d.get("timeout_s", 10.0),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"base_url": self.base_url, "timeout_s": self.timeout_s}


@dataclass
class ScanConfig:
    """Capture cadence and box selection behaviour."""
    interval_ms: int = 1000
    resolve_mode: str = "label"
    default_category: str = "uncategorized"
    auto_start: bool = False

    @property
    def interval_s(self) -> float:
        return self.interval_ms / 1000.0

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ScanConfig":
        return cls(
            interval_ms=d.get("interval_ms", 1000),
            resolve_mode=d.get("resolve_mode", "label"),
            default_category=d.get("default_category", "uncategorized"),
            auto_start=d.get("auto_start", False),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "interval_ms": self.interval_ms,
            "resolve_mode": self.resolve_mode,
            "default_category": self.default_category,
            "auto_start": self.auto_start,
        }


@dataclass
class InventoryConfig:
    """Inventory store settings. ``max_undo`` of None keeps the full history."""
    max_undo: Optional[int] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "InventoryConfig":
        return cls(max_undo=d.get("max_undo"))

    def to_dict(self) -> Dict[str, Any]:
        return {"max_undo": self.max_undo}


@dataclass
class WebConfig:
    host: str = "0.0.0.0"
    port: int = 8000

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "WebConfig":
        return cls(host=d.get("host", "0.0.0.0"), port=d.get("port", 8000))

    def to_dict(self) -> Dict[str, Any]:
        return {"host": self.host, "port": self.port}


@dataclass
class Config:
    """Root configuration."""
    camera: CameraConfig = field(default_factory=CameraConfig)
    detector: DetectorConfig = field(default_factory=DetectorConfig)
    metadata: MetadataConfig = field(default_factory=MetadataConfig)
    scan: ScanConfig = field(default_factory=ScanConfig)
    inventory: InventoryConfig = field(default_factory=InventoryConfig)
    web: WebConfig = field(default_factory=WebConfig)
    log_path: str = "logs/fridge_scanner.log"
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Config":
        """Adapter: Create from the merged YAML dictionary."""
        return cls(
            camera=CameraConfig.from_dict(d.get("camera", {}) or {}),
            detector=DetectorConfig.from_dict(d.get("detector", {}) or {}),
            metadata=MetadataConfig.from_dict(d.get("metadata", {}) or {}),
            scan=ScanConfig.from_dict(d.get("scan", {}) or {}),
            inventory=InventoryConfig.from_dict(d.get("inventory", {}) or {}),
            web=WebConfig.from_dict(d.get("web", {}) or {}),
            log_path=d.get("log_path", "logs/fridge_scanner.log"),
            log_level=d.get("log_level", "INFO"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "camera": self.camera.to_dict(),
            "detector": self.detector.to_dict(),
            "metadata": self.metadata.to_dict(),
            "scan": self.scan.to_dict(),
            "inventory": self.inventory.to_dict(),
            "web": self.web.to_dict(),
            "log_path": self.log_path,
            "log_level": self.log_level,
        }
