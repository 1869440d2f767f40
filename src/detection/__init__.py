"""
Fridge Scanner - Detection Module

Remote detector client, record normalisation, and the current-frame box store.
"""

from .box_store import DetectionBoxStore
from .client import DetectionClient
from .records import normalize_record, parse_detections
from .resolvers import BoxResolver, LabelResolver, MetadataResolver, create_resolver

__all__ = [
    'DetectionBoxStore',
    'DetectionClient',
    'normalize_record',
    'parse_detections',
    'BoxResolver',
    'LabelResolver',
    'MetadataResolver',
    'create_resolver',
]
