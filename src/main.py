"""
Fridge scanner service.

Samples camera frames on a fixed cadence, sends them to the remote detector,
and serves the current detections and the session inventory over HTTP.

Usage:
    python src/main.py --config config/config.yaml --auto-start

Arguments:
    --config: Path to configuration file
    --host / --port: Override the web server bind address
    --interval-ms: Override the capture cadence
    --auto-start: Start scanning immediately
"""

import argparse
import logging
import os
import sys
import time
from typing import Any, Dict, Optional, Tuple

import uvicorn
import yaml

from models.config import Config
from ops.logging import setup_logging
from runtime.context import build_runtime
from web.app import create_app

VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
VALID_RESOLVE_MODES = ('label', 'metadata')


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into base and return base."""
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            _deep_merge(base[k], v)
        else:
            base[k] = v
    return base


def _read_yaml(path: str) -> Dict[str, Any]:
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load configuration with layering:
    - `config/default.yaml` (checked in)
    - `config/config.yaml` (local overrides)
    - plus any explicitly provided `--config` path (treated as overrides)
    """
    try:
        config_dir = os.path.dirname(config_path)
        base_path = os.path.join(config_dir, "default.yaml")
        merged: Dict[str, Any] = _read_yaml(base_path) if os.path.exists(base_path) else {}

        local_overrides_path = os.path.join(config_dir, "config.yaml")
        if os.path.exists(local_overrides_path):
            merged = _deep_merge(merged, _read_yaml(local_overrides_path))

        if os.path.exists(config_path) and os.path.abspath(config_path) != os.path.abspath(local_overrides_path):
            merged = _deep_merge(merged, _read_yaml(config_path))

        return merged
    except Exception as e:
        logging.error(f"Failed to load configuration: {e}")
        sys.exit(1)


def _is_positive_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0


def validate_config(config: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """
    Validate configuration file structure and values.

    Args:
        config: Configuration dictionary

    Returns:
        Tuple of (is_valid, error_message)
    """
    required_sections = ['camera', 'detector', 'scan', 'log_path', 'log_level']
    for section in required_sections:
        if section not in config:
            return False, f"Missing required configuration section: {section}"

    # Camera
    camera = config.get('camera') or {}
    backend = camera.get('backend', 'opencv')
    if backend not in ('opencv', 'image'):
        return False, "camera.backend must be one of: opencv, image"
    if backend == 'image' and not camera.get('image_path'):
        return False, "camera.image_path is required when camera.backend is 'image'"
    device_id = camera.get('device_id', 0)
    if isinstance(device_id, bool) or not isinstance(device_id, (int, str)):
        return False, "camera.device_id must be an integer (index) or string (URL)"
    if isinstance(device_id, int) and device_id < 0:
        return False, "camera.device_id integer must be non-negative"
    if 'resolution' in camera:
        res = camera['resolution']
        if not isinstance(res, list) or len(res) != 2 or not all(isinstance(x, int) and x > 0 for x in res):
            return False, "camera.resolution must be a list of two positive integers [width, height]"
    if 'jpeg_quality' in camera:
        q = camera['jpeg_quality']
        if not isinstance(q, int) or not (1 <= q <= 100):
            return False, "camera.jpeg_quality must be an integer between 1 and 100"
    if camera.get('rotate', 0) not in (0, 90, 180, 270):
        return False, "camera.rotate must be one of: 0, 90, 180, 270"

    # Detector
    detector = config.get('detector') or {}
    url = detector.get('url')
    if not isinstance(url, str) or not url.startswith(('http://', 'https://')):
        return False, "detector.url must be an http(s) URL"
    if detector.get('timeout_s') is not None and not _is_positive_number(detector['timeout_s']):
        return False, "detector.timeout_s must be a positive number"

    # Scan
    scan = config.get('scan') or {}
    if 'interval_ms' not in scan:
        return False, "Missing scan.interval_ms"
    if isinstance(scan['interval_ms'], bool) or not isinstance(scan['interval_ms'], int) or scan['interval_ms'] <= 0:
        return False, "scan.interval_ms must be a positive integer"
    mode = scan.get('resolve_mode', 'label')
    if mode not in VALID_RESOLVE_MODES:
        return False, f"scan.resolve_mode must be one of: {', '.join(VALID_RESOLVE_MODES)}"

    # Metadata backend (required when selection looks products up)
    metadata = config.get('metadata') or {}
    if mode == 'metadata':
        base_url = metadata.get('base_url')
        if not isinstance(base_url, str) or not base_url.startswith(('http://', 'https://')):
            return False, "metadata.base_url must be an http(s) URL when scan.resolve_mode is 'metadata'"
    if 'timeout_s' in metadata and not _is_positive_number(metadata['timeout_s']):
        return False, "metadata.timeout_s must be a positive number"

    # Inventory
    inventory = config.get('inventory') or {}
    max_undo = inventory.get('max_undo')
    if max_undo is not None and (isinstance(max_undo, bool) or not isinstance(max_undo, int) or max_undo < 0):
        return False, "inventory.max_undo must be a non-negative integer or null"

    # Web
    web = config.get('web') or {}
    if 'port' in web and (not isinstance(web['port'], int) or not (0 < web['port'] < 65536)):
        return False, "web.port must be an integer between 1 and 65535"

    # Logging
    if config['log_level'] not in VALID_LOG_LEVELS:
        return False, f"log_level must be one of: {', '.join(VALID_LOG_LEVELS)}"

    return True, None


def main():
    """Main application function."""
    parser = argparse.ArgumentParser(description='Fridge Scanner')
    parser.add_argument('--config', type=str, default='config/config.yaml',
                        help='Path to configuration file')
    parser.add_argument('--host', type=str, default=None,
                        help='Web server bind address (overrides web.host)')
    parser.add_argument('--port', type=int, default=None,
                        help='Web server port (overrides web.port)')
    parser.add_argument('--interval-ms', type=int, default=None,
                        help='Capture cadence in milliseconds (overrides scan.interval_ms)')
    parser.add_argument('--auto-start', action='store_true',
                        help='Start scanning as soon as the server is up')
    args = parser.parse_args()

    raw_config = load_config(args.config)
    if args.interval_ms is not None:
        raw_config.setdefault('scan', {})['interval_ms'] = args.interval_ms

    is_valid, error_msg = validate_config(raw_config)
    if not is_valid:
        logging.error(f"Configuration validation failed: {error_msg}")
        sys.exit(1)

    config = Config.from_dict(raw_config)
    setup_logging(config.log_path, config.log_level)
    logging.info("Starting Fridge Scanner")

    ctx = build_runtime(config)
    ctx.system_stats["start_time"] = time.time()
    try:
        if args.auto_start or config.scan.auto_start:
            ctx.detection.start(config.scan.interval_ms)

        uvicorn.run(
            create_app(ctx),
            host=args.host or config.web.host,
            port=args.port or config.web.port,
            log_level=config.log_level.lower(),
        )
    except KeyboardInterrupt:
        logging.info("Interrupted by user")
    finally:
        ctx.close()
        logging.info("Fridge Scanner stopped")


if __name__ == "__main__":
    main()
