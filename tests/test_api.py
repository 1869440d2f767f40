"""
Tests for the REST API under /api.
"""

import httpx
import pytest
from fastapi.testclient import TestClient

from conftest import FakeCamera, mock_http_client, wait_until
from detection.client import DetectionClient
from metadata.client import MetadataClient
from models.config import Config, ScanConfig
from models.detection import DetectedBox
from runtime.context import build_runtime
from web.app import create_app

MILK = [{"topLeft": {"x": 10, "y": 10}, "bottomRight": {"x": 50, "y": 60}, "label": "milk"}]

PRODUCTS = {
    "17": {"id": 17, "name": "Yoghurt", "category": "dairy", "expiration_date": "2024-05-08T00:00:00Z"},
}


def detector(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json=MILK)


def metadata_backend(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/api/product":
        return httpx.Response(200, json=list(PRODUCTS.values()))
    product_id = request.url.path.rsplit("/", 1)[-1]
    if product_id == "down":
        return httpx.Response(503)
    if product_id in PRODUCTS:
        return httpx.Response(200, json=PRODUCTS[product_id])
    return httpx.Response(404)


def make_ctx(resolve_mode: str = "label"):
    config = Config(scan=ScanConfig(interval_ms=60000, resolve_mode=resolve_mode))
    return build_runtime(
        config,
        camera=FakeCamera(),
        detection_client=DetectionClient("http://detector.local/detect", client=mock_http_client(detector)),
        metadata_client=MetadataClient("http://meta.local/api", client=mock_http_client(metadata_backend)),
    )


@pytest.fixture
def ctx():
    context = make_ctx()
    yield context
    context.detection.scheduler.shutdown(wait=True)


@pytest.fixture
def client(ctx):
    return TestClient(create_app(ctx))


class TestHealth:
    def test_health(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["resolve_mode"] == "label"
        assert data["scanning"] is False
        assert data["inventory_size"] == 0


class TestInventoryEndpoints:
    def test_empty_inventory(self, client):
        response = client.get("/api/inventory")

        assert response.status_code == 200
        assert response.json() == {"items": [], "has_pending": False}

    def test_add_item(self, client):
        response = client.post("/api/inventory", json={"id": "1", "name": "Milk", "category": "dairy"})

        assert response.status_code == 201
        assert response.json()["name"] == "Milk"
        assert [i["id"] for i in client.get("/api/inventory").json()["items"]] == ["1"]

    def test_add_generates_id(self, client):
        response = client.post("/api/inventory", json={"name": "Butter"})

        assert response.status_code == 201
        assert response.json()["id"]

    def test_add_duplicate_is_conflict(self, client):
        client.post("/api/inventory", json={"id": "1", "name": "Milk"})

        response = client.post("/api/inventory", json={"id": "1", "name": "Other"})

        assert response.status_code == 409
        items = client.get("/api/inventory").json()["items"]
        assert [i["name"] for i in items] == ["Milk"]

    def test_add_requires_name(self, client):
        response = client.post("/api/inventory", json={"id": "1", "name": ""})
        assert response.status_code == 422

    def test_expiration_date_round_trips(self, client):
        client.post("/api/inventory", json={"id": "1", "name": "Milk", "expiration_date": "2024-05-08T00:00:00Z"})

        item = client.get("/api/inventory").json()["items"][0]

        assert item["expiration_date"].startswith("2024-05-08T00:00:00")

    def test_delete_and_undo(self, client):
        client.post("/api/inventory", json={"id": "1", "name": "Milk"})

        response = client.delete("/api/inventory/1")
        assert response.status_code == 200
        assert response.json() == {"items": [], "has_pending": True}

        response = client.post("/api/inventory/undo")
        assert response.json() == {"restored": "Milk", "has_pending": False}
        assert [i["id"] for i in client.get("/api/inventory").json()["items"]] == ["1"]

    def test_undo_with_nothing_pending(self, client):
        response = client.post("/api/inventory/undo")

        assert response.status_code == 200
        assert response.json() == {"restored": None, "has_pending": False}

    def test_delete_unknown_is_not_found(self, client):
        response = client.delete("/api/inventory/missing")
        assert response.status_code == 404

    def test_undo_is_lifo(self, client):
        client.post("/api/inventory", json={"id": "a", "name": "A"})
        client.post("/api/inventory", json={"id": "b", "name": "B"})
        client.delete("/api/inventory/a")
        client.delete("/api/inventory/b")

        assert client.post("/api/inventory/undo").json()["restored"] == "B"
        assert client.post("/api/inventory/undo").json()["restored"] == "A"


class TestDetectionEndpoints:
    def test_detections_empty(self, client):
        data = client.get("/api/detections").json()
        assert data["boxes"] == []
        assert data["sequence_id"] is None

    def test_detections_lists_current_boxes(self, client, ctx):
        ctx.box_store.replace([DetectedBox.from_corners("box-0", 10, 10, 50, 60, "milk")], sequence_id=4)

        data = client.get("/api/detections").json()

        assert data["sequence_id"] == 4
        assert data["boxes"][0]["label"] == "milk"
        assert data["boxes"][0]["top_left"] == {"x": 10, "y": 10}
        assert data["boxes"][0]["bottom_right"] == {"x": 50, "y": 60}

    def test_select_resolves_label(self, client, ctx):
        ctx.box_store.replace([DetectedBox.from_corners("box-0", 10, 10, 50, 60, "milk")])

        data = client.post("/api/detections/box-0/select").json()

        assert data["status"] == "resolved"
        assert data["draft"]["name"] == "milk"
        assert data["draft"]["id"].startswith("10-10-50-60-")

    def test_select_then_confirm(self, client, ctx):
        ctx.box_store.replace([DetectedBox.from_corners("box-0", 10, 10, 50, 60, "milk")])
        draft = client.post("/api/detections/box-0/select").json()["draft"]

        response = client.post("/api/inventory", json=draft)

        assert response.status_code == 201
        assert client.get("/api/inventory").json()["items"][0]["name"] == "milk"

    def test_select_unknown_box(self, client):
        data = client.post("/api/detections/box-9/select").json()

        assert data["status"] == "unresolved"
        assert data["reason"] == "unknown_box"


class TestMetadataSelection:
    @pytest.fixture
    def meta_client(self):
        context = make_ctx(resolve_mode="metadata")
        yield TestClient(create_app(context)), context
        context.detection.scheduler.shutdown(wait=True)

    def test_known_product(self, meta_client):
        client, ctx = meta_client
        ctx.box_store.replace([DetectedBox.from_corners("box-0", 0, 0, 5, 5, "17", product_id="17")])

        data = client.post("/api/detections/box-0/select").json()

        assert data["status"] == "resolved"
        assert data["draft"]["id"] == "17"
        assert data["draft"]["name"] == "Yoghurt"

    def test_unknown_product(self, meta_client):
        client, ctx = meta_client
        ctx.box_store.replace([DetectedBox.from_corners("box-0", 0, 0, 5, 5, "99", product_id="99")])

        data = client.post("/api/detections/box-0/select").json()

        assert data["reason"] == "not_found"

    def test_backend_down(self, meta_client):
        client, ctx = meta_client
        ctx.box_store.replace([DetectedBox.from_corners("box-0", 0, 0, 5, 5, "down", product_id="down")])

        data = client.post("/api/detections/box-0/select").json()

        assert data["reason"] == "connection_error"


class TestProductEndpoint:
    def test_found(self, client):
        data = client.get("/api/products/17").json()
        assert data["name"] == "Yoghurt"
        assert data["category"] == "dairy"

    def test_not_found(self, client):
        assert client.get("/api/products/99").status_code == 404

    def test_backend_failure(self, client):
        assert client.get("/api/products/down").status_code == 502

    def test_list(self, client):
        data = client.get("/api/products").json()
        assert [p["name"] for p in data["products"]] == ["Yoghurt"]
        assert data["products"][0]["id"] == "17"

    def test_list_backend_failure(self, ctx):
        down = MetadataClient("http://meta.local/api", client=mock_http_client(lambda r: httpx.Response(503)))
        ctx.metadata_client = down
        response = TestClient(create_app(ctx)).get("/api/products")
        assert response.status_code == 502


class TestScanEndpoints:
    def test_start_and_stop(self, client, ctx):
        response = client.post("/api/scan/start", json={"interval_ms": 60000})

        assert response.status_code == 200
        assert response.json()["running"] is True
        assert response.json()["interval_ms"] == 60000

        # Start fires one detection right away
        assert wait_until(lambda: len(ctx.box_store.snapshot()) == 1)

        response = client.post("/api/scan/stop")
        assert response.json()["running"] is False

    def test_start_uses_configured_interval(self, client):
        data = client.post("/api/scan/start").json()
        assert data["interval_ms"] == 60000

    def test_start_rescales_detector_timeout(self, client, ctx):
        client.post("/api/scan/start", json={"interval_ms": 10000})
        assert ctx.detection_client.timeout_s == 10.0

    def test_invalid_interval(self, client):
        response = client.post("/api/scan/start", json={"interval_ms": 0})
        assert response.status_code == 422

    def test_trigger_when_stopped(self, client):
        assert client.post("/api/scan/trigger").json() == {"dispatched": False}

    def test_status(self, client):
        data = client.get("/api/scan/status").json()
        assert data["running"] is False
        assert data["errors"] == []
