"""
Strategies turning a selected box into an item draft.

- "label": the detector's label is all we need (no network).
- "metadata": the box carries a product id that is looked up remotely.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

from models.detection import DetectedBox
from models.errors import DetectionError, ProductNotFoundError
from models.inventory import ItemDraft, derive_item_id
from models.selection import Resolved, SelectionOutcome, Unresolved, UnresolvedReason

RESOLVE_MODES = ("label", "metadata")


class BoxResolver:
    """Resolver interface: one box in, one selection outcome out."""

    def resolve(self, box: DetectedBox) -> SelectionOutcome:
        raise NotImplementedError


class LabelResolver(BoxResolver):
    """Builds the draft from the box alone."""

    def __init__(self, default_category: str = "uncategorized", clock: Callable[[], float] = time.time):
        self.default_category = default_category
        self._clock = clock

    def resolve(self, box: DetectedBox) -> SelectionOutcome:
        draft = ItemDraft(
            id=derive_item_id(box, self._clock()),
            name=box.label,
            category=self.default_category,
        )
        return Resolved(draft=draft, box_id=box.id)


class MetadataResolver(BoxResolver):
    """Looks the box's product up on the metadata backend."""

    def __init__(self, metadata_client):
        self._client = metadata_client

    def resolve(self, box: DetectedBox) -> SelectionOutcome:
        product_id = box.product_id or box.label
        try:
            product = self._client.get_product(product_id)
        except ProductNotFoundError as e:
            logging.info(f"Selection of {box.id}: {e}")
            return Unresolved(UnresolvedReason.NOT_FOUND, box.id, str(e))
        except DetectionError as e:
            logging.warning(f"Selection of {box.id}: metadata lookup failed: {e}")
            return Unresolved(UnresolvedReason.CONNECTION_ERROR, box.id, str(e))
        return Resolved(draft=product.to_draft(), box_id=box.id)


def create_resolver(
    mode: str,
    metadata_client=None,
    default_category: str = "uncategorized",
) -> BoxResolver:
    """Factory keyed by ``scan.resolve_mode``."""
    if mode == "label":
        return LabelResolver(default_category=default_category)
    if mode == "metadata":
        if metadata_client is None:
            raise ValueError("resolve_mode 'metadata' requires a metadata client")
        return MetadataResolver(metadata_client)
    raise ValueError(f"Unknown resolve mode: {mode!r} (expected one of {RESOLVE_MODES})")
