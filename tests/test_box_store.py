"""
Tests for the detection box store and selection resolvers.
"""

import threading
from unittest.mock import MagicMock

import pytest

from detection.box_store import DetectionBoxStore
from detection.resolvers import LabelResolver, MetadataResolver, create_resolver
from models.detection import DetectedBox
from models.errors import MalformedResponseError, MetadataConnectionError, ProductNotFoundError
from models.inventory import ProductInfo
from models.selection import Resolved, Unresolved, UnresolvedReason


def box(index: int, label: str = "milk", product_id: str = None) -> DetectedBox:
    return DetectedBox.from_corners(f"box-{index}", 10, 10, 50, 60, label, product_id=product_id)


class TestDetectionBoxStore:
    def test_starts_empty(self):
        store = DetectionBoxStore(LabelResolver())
        assert store.snapshot() == ()
        assert store.sequence_id is None
        assert len(store) == 0

    def test_replace_swaps_whole_set(self):
        store = DetectionBoxStore(LabelResolver())
        store.replace([box(0), box(1)], sequence_id=1)
        store.replace([box(0, "butter")], sequence_id=2)

        assert [b.label for b in store.snapshot()] == ["butter"]
        assert store.sequence_id == 2
        assert store.updated_at is not None

    def test_replace_with_empty_clears(self):
        store = DetectionBoxStore(LabelResolver())
        store.replace([box(0)])
        store.replace([])
        assert store.snapshot() == ()

    def test_snapshot_is_immutable(self):
        store = DetectionBoxStore(LabelResolver())
        store.replace([box(0)])
        snap = store.snapshot()
        store.replace([box(0), box(1)])
        assert len(snap) == 1

    def test_readers_never_see_partial_sets(self):
        store = DetectionBoxStore(LabelResolver())
        sets = [[box(i) for i in range(n)] for n in (2, 5)]
        stop = threading.Event()
        seen = set()

        def writer():
            n = 0
            while not stop.is_set():
                store.replace(sets[n % 2])
                n += 1

        t = threading.Thread(target=writer)
        t.start()
        try:
            for _ in range(2000):
                seen.add(len(store.snapshot()))
        finally:
            stop.set()
            t.join()

        assert seen <= {0, 2, 5}

    def test_select_unknown_box(self):
        store = DetectionBoxStore(LabelResolver())
        store.replace([box(0)])

        outcome = store.select("box-7")

        assert isinstance(outcome, Unresolved)
        assert outcome.reason == UnresolvedReason.UNKNOWN_BOX
        assert outcome.ok is False

    def test_select_resolves_label(self):
        store = DetectionBoxStore(LabelResolver(default_category="fridge", clock=lambda: 1.5))
        store.replace([box(0)])

        outcome = store.select("box-0")

        assert isinstance(outcome, Resolved)
        assert outcome.draft.name == "milk"
        assert outcome.draft.category == "fridge"
        assert outcome.draft.id == "10-10-50-60-1500"

    def test_pending_selection_survives_replacement(self):
        """A selection in progress completes even after a newer frame replaces the set."""
        entered = threading.Event()
        release = threading.Event()

        class SlowResolver(LabelResolver):
            def resolve(self, b):
                entered.set()
                release.wait(2)
                return super().resolve(b)

        store = DetectionBoxStore(SlowResolver())
        store.replace([box(0, "milk")])

        result = {}
        t = threading.Thread(target=lambda: result.setdefault("outcome", store.select("box-0")))
        t.start()
        assert entered.wait(2)
        store.replace([box(0, "butter")])
        release.set()
        t.join(2)

        assert result["outcome"].draft.name == "milk"
        assert [b.label for b in store.snapshot()] == ["butter"]


class TestMetadataResolver:
    def test_found_product_becomes_draft(self):
        client = MagicMock()
        client.get_product.return_value = ProductInfo(id="17", name="Yoghurt", category="dairy")
        resolver = MetadataResolver(client)

        outcome = resolver.resolve(box(0, label="17", product_id="17"))

        client.get_product.assert_called_once_with("17")
        assert outcome.ok
        assert outcome.draft.id == "17"
        assert outcome.draft.name == "Yoghurt"

    def test_label_used_when_no_product_id(self):
        client = MagicMock()
        client.get_product.return_value = ProductInfo(id="milk", name="Milk")
        MetadataResolver(client).resolve(box(0, label="milk"))
        client.get_product.assert_called_once_with("milk")

    def test_not_found(self):
        client = MagicMock()
        client.get_product.side_effect = ProductNotFoundError("17")

        outcome = MetadataResolver(client).resolve(box(0, product_id="17"))

        assert outcome.reason == UnresolvedReason.NOT_FOUND

    @pytest.mark.parametrize("error", [
        MetadataConnectionError("refused"),
        MalformedResponseError("bad body"),
    ])
    def test_connection_error(self, error):
        client = MagicMock()
        client.get_product.side_effect = error

        outcome = MetadataResolver(client).resolve(box(0, product_id="17"))

        assert outcome.reason == UnresolvedReason.CONNECTION_ERROR
        assert outcome.box_id == "box-0"

    def test_to_dict(self):
        client = MagicMock()
        client.get_product.side_effect = ProductNotFoundError("17")
        data = MetadataResolver(client).resolve(box(0, product_id="17")).to_dict()
        assert data["status"] == "unresolved"
        assert data["reason"] == "not_found"


class TestCreateResolver:
    def test_label_mode(self):
        assert isinstance(create_resolver("label"), LabelResolver)

    def test_metadata_mode(self):
        assert isinstance(create_resolver("metadata", metadata_client=MagicMock()), MetadataResolver)

    def test_metadata_mode_requires_client(self):
        with pytest.raises(ValueError):
            create_resolver("metadata")

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            create_resolver("barcode")
