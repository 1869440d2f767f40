from __future__ import annotations

import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request

from models.detection import DetectedBox
from models.errors import DetectionError, DuplicateIdError, NotFoundError, ProductNotFoundError
from models.inventory import InventoryItem, ItemDraft, ProductInfo
from models.selection import Resolved
from runtime.context import RuntimeContext
from ..api_models import (
    BoxResponse,
    DetectionsResponse,
    DraftModel,
    InventoryResponse,
    ItemRequest,
    ItemResponse,
    PointModel,
    ProductListResponse,
    ProductResponse,
    ScanStartRequest,
    ScanStatusResponse,
    SelectionResponse,
    UndoResponse,
)
from ..services.health_service import HealthService

router = APIRouter()


def get_context(request: Request) -> RuntimeContext:
    """The runtime is attached to the app by ``create_app``."""
    return request.app.state.ctx


def _box_response(box: DetectedBox) -> BoxResponse:
    return BoxResponse(
        id=box.id,
        top_left=PointModel(x=box.top_left.x, y=box.top_left.y),
        bottom_right=PointModel(x=box.bottom_right.x, y=box.bottom_right.y),
        label=box.label,
        confidence=box.confidence,
        product_id=box.product_id,
    )


def _item_response(item: InventoryItem) -> ItemResponse:
    return ItemResponse(
        id=item.id,
        name=item.name,
        category=item.category,
        added_at=item.added_at,
        expiration_date=item.expiration_date,
    )


def _product_response(product: ProductInfo) -> ProductResponse:
    return ProductResponse(
        id=product.id,
        name=product.name,
        category=product.category,
        expiration_date=product.expiration_date,
    )


def _inventory_response(ctx: RuntimeContext) -> InventoryResponse:
    return InventoryResponse(
        items=[_item_response(item) for item in ctx.inventory.items()],
        has_pending=ctx.inventory.has_pending(),
    )


@router.get("/health")
def health(ctx: RuntimeContext = Depends(get_context)):
    return HealthService(ctx=ctx).get_health_summary()


# --- Capture cadence -------------------------------------------------------

@router.post("/scan/start", response_model=ScanStatusResponse)
def scan_start(req: Optional[ScanStartRequest] = None, ctx: RuntimeContext = Depends(get_context)):
    interval_ms = (req.interval_ms if req else None) or ctx.config.scan.interval_ms
    ctx.detection.start(interval_ms)
    return ScanStatusResponse(**ctx.detection.status())


@router.post("/scan/stop", response_model=ScanStatusResponse)
def scan_stop(ctx: RuntimeContext = Depends(get_context)):
    ctx.detection.stop()
    return ScanStatusResponse(**ctx.detection.status())


@router.post("/scan/trigger")
def scan_trigger(ctx: RuntimeContext = Depends(get_context)):
    """Manual 'detect now'; only dispatches while scanning and no tick is in flight."""
    return {"dispatched": ctx.detection.trigger()}


@router.get("/scan/status", response_model=ScanStatusResponse)
def scan_status(ctx: RuntimeContext = Depends(get_context)):
    return ScanStatusResponse(**ctx.detection.status())


# --- Detections -------------------------------------------------------------

@router.get("/detections", response_model=DetectionsResponse)
def detections(ctx: RuntimeContext = Depends(get_context)):
    store = ctx.box_store
    return DetectionsResponse(
        sequence_id=store.sequence_id,
        updated_at=store.updated_at,
        boxes=[_box_response(box) for box in store.snapshot()],
    )


@router.post("/detections/{box_id}/select", response_model=SelectionResponse)
def select_box(box_id: str, ctx: RuntimeContext = Depends(get_context)):
    outcome = ctx.inventory_service.select(box_id)
    if isinstance(outcome, Resolved):
        draft = outcome.draft
        return SelectionResponse(
            status="resolved",
            box_id=outcome.box_id,
            draft=DraftModel(
                id=draft.id,
                name=draft.name,
                category=draft.category,
                expiration_date=draft.expiration_date,
            ),
        )
    return SelectionResponse(
        status="unresolved",
        box_id=outcome.box_id,
        reason=outcome.reason.value,
        detail=outcome.detail,
    )


# --- Inventory --------------------------------------------------------------

@router.get("/inventory", response_model=InventoryResponse)
def inventory(ctx: RuntimeContext = Depends(get_context)):
    return _inventory_response(ctx)


@router.post("/inventory", response_model=ItemResponse, status_code=201)
def add_item(req: ItemRequest, ctx: RuntimeContext = Depends(get_context)):
    draft = ItemDraft(
        id=req.id or uuid.uuid4().hex,
        name=req.name,
        category=req.category,
        expiration_date=req.expiration_date,
    )
    try:
        item = ctx.inventory_service.confirm(draft)
    except DuplicateIdError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _item_response(item)


@router.delete("/inventory/{item_id}", response_model=InventoryResponse)
def remove_item(item_id: str, ctx: RuntimeContext = Depends(get_context)):
    try:
        ctx.inventory.remove(item_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _inventory_response(ctx)


@router.post("/inventory/undo", response_model=UndoResponse)
def undo_delete(ctx: RuntimeContext = Depends(get_context)):
    restored = ctx.inventory.undo()
    return UndoResponse(restored=restored, has_pending=ctx.inventory.has_pending())


# --- Product details --------------------------------------------------------

@router.get("/products", response_model=ProductListResponse)
def product_list(ctx: RuntimeContext = Depends(get_context)):
    """Everything the metadata backend knows, newest first."""
    try:
        products = ctx.metadata_client.list_products()
    except DetectionError as e:
        logging.warning(f"Product listing failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))
    return ProductListResponse(products=[_product_response(p) for p in products])


@router.get("/products/{product_id}", response_model=ProductResponse)
def product_details(product_id: str, ctx: RuntimeContext = Depends(get_context)):
    try:
        product = ctx.metadata_client.get_product(product_id)
    except ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DetectionError as e:
        logging.warning(f"Product lookup for {product_id} failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))
    return _product_response(product)
