from __future__ import annotations

import os
import platform
import time
from dataclasses import dataclass
from typing import Any, Dict

from runtime.context import RuntimeContext


@dataclass
class HealthService:
    ctx: RuntimeContext

    def get_health_summary(self) -> Dict[str, Any]:
        cfg = self.ctx.config
        start_time = self.ctx.system_stats.get("start_time")
        return {
            "timestamp": time.time(),
            "platform": platform.platform(),
            "python": platform.python_version(),
            "cwd": os.getcwd(),
            "log_path": cfg.log_path,
            "uptime_seconds": int(time.time() - start_time) if start_time else None,
            "detector_url": cfg.detector.url,
            "metadata_url": cfg.metadata.base_url,
            "resolve_mode": cfg.scan.resolve_mode,
            "scanning": self.ctx.detection.scheduler.is_running,
            "inventory_size": len(self.ctx.inventory),
        }
