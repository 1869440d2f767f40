from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from camera.base import Camera
from camera.camera import create_camera
from camera.capture import FrameGrabber
from detection.box_store import DetectionBoxStore
from detection.client import DetectionClient
from detection.resolvers import create_resolver
from inventory.store import InventoryStore
from metadata.client import MetadataClient
from models.config import Config
from runtime.services import DetectionService, InventoryService


@dataclass
class RuntimeContext:
    """Holds runtime state and service references; avoids global singletons."""

    config: Config
    grabber: FrameGrabber
    detection_client: DetectionClient
    metadata_client: MetadataClient
    box_store: DetectionBoxStore
    inventory: InventoryStore
    detection: DetectionService
    inventory_service: InventoryService

    # Observability
    system_stats: dict = field(default_factory=dict)

    def close(self) -> None:
        self.detection.scheduler.shutdown()
        self.detection_client.close()
        self.metadata_client.close()
        self.grabber.release()
        logging.info("Runtime closed")


def build_runtime(
    config: Config,
    camera: Optional[Camera] = None,
    detection_client: Optional[DetectionClient] = None,
    metadata_client: Optional[MetadataClient] = None,
) -> RuntimeContext:
    """Wire all services from configuration. Collaborators may be injected for tests."""
    camera = camera or create_camera(config.camera)
    grabber = FrameGrabber(camera, jpeg_quality=config.camera.jpeg_quality)

    timeout_s = config.detector.timeout_s or config.scan.interval_s
    detection_client = detection_client or DetectionClient(config.detector.url, timeout_s=timeout_s)
    metadata_client = metadata_client or MetadataClient(
        config.metadata.base_url, timeout_s=config.metadata.timeout_s
    )

    resolver = create_resolver(
        config.scan.resolve_mode,
        metadata_client=metadata_client,
        default_category=config.scan.default_category,
    )
    box_store = DetectionBoxStore(resolver)
    inventory = InventoryStore(max_undo=config.inventory.max_undo)

    detection = DetectionService(
        grabber,
        detection_client,
        box_store,
        timeout_follows_interval=config.detector.timeout_s is None,
    )
    inventory_service = InventoryService(box_store, inventory)

    return RuntimeContext(
        config=config,
        grabber=grabber,
        detection_client=detection_client,
        metadata_client=metadata_client,
        box_store=box_store,
        inventory=inventory,
        detection=detection,
        inventory_service=inventory_service,
    )
