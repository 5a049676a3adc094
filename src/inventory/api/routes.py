"""FastAPI routes for the Inventory domain.

The router is a thin collaborator over the OperationEngine: it turns request
bodies into ledger inputs and ledger errors into HTTP responses.
"""

from contextlib import contextmanager

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Response

from inventory.api.schemas import (
    AdjustQuantityRequest,
    CreateInventoryRequest,
    InventoryPageResponse,
    InventoryRecordResponse,
    RestockRequest,
    StockMovementResponse,
    UpdateInventoryRequest,
)
from inventory.record.engine import OperationEngine
from inventory.record.errors import (
    CapacityExceededError,
    NegativeQuantityError,
    RecordNotFoundError,
    ValidationError,
)
from inventory.record.inputs import CreateInput, RecordFilter, RestockMeta, UpdateInput
from inventory.record.status import InventoryStatus

logger = structlog.get_logger(__name__)

_engine = OperationEngine()


def get_engine() -> OperationEngine:
    """Engine shared by all requests of this process."""
    return _engine


def _messages(exc):
    raw = exc.messages if isinstance(exc.messages, dict) else {"error": exc.messages}
    return {
        field: [str(m) for m in (msgs if isinstance(msgs, list | tuple) else [msgs])] for field, msgs in raw.items()
    }


@contextmanager
def _translate_errors():
    """Map ledger errors onto HTTP status codes."""
    try:
        yield
    except RecordNotFoundError as exc:
        raise HTTPException(status_code=404, detail={"code": "NOT_FOUND", "messages": _messages(exc)}) from exc
    except CapacityExceededError as exc:
        raise HTTPException(status_code=400, detail={"code": "EXCEEDS_CAPACITY", "messages": _messages(exc)}) from exc
    except NegativeQuantityError as exc:
        raise HTTPException(
            status_code=400, detail={"code": "INVALID_ADJUSTMENT", "messages": _messages(exc)}
        ) from exc
    except ValidationError as exc:
        logger.info("Inventory request rejected", messages=_messages(exc))
        raise HTTPException(status_code=400, detail={"code": "VALIDATION_ERROR", "messages": _messages(exc)}) from exc


def _not_found(record_id):
    return HTTPException(
        status_code=404,
        detail={"code": "NOT_FOUND", "messages": {"record_id": [f"Inventory record not found with id: {record_id}"]}},
    )


def _page(records, page, size):
    start = page * size
    return InventoryPageResponse(
        items=[InventoryRecordResponse.from_record(r) for r in records[start : start + size]],
        page=page,
        size=size,
        total=len(records),
    )


inventory_router = APIRouter(prefix="/inventory", tags=["inventory"])


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------
@inventory_router.get("", response_model=InventoryPageResponse)
async def list_inventory(
    warehouse_id: str | None = None,
    product_id: str | None = None,
    status: InventoryStatus | None = None,
    page: int = Query(default=0, ge=0),
    size: int = Query(default=20, ge=1, le=100),
    engine: OperationEngine = Depends(get_engine),
) -> InventoryPageResponse:
    records = engine.list(RecordFilter(warehouse_id=warehouse_id, product_id=product_id, status=status))
    return _page(records, page, size)


@inventory_router.get("/low-stock", response_model=InventoryPageResponse)
async def list_low_stock(
    warehouse_id: str | None = None,
    page: int = Query(default=0, ge=0),
    size: int = Query(default=20, ge=1, le=100),
    engine: OperationEngine = Depends(get_engine),
) -> InventoryPageResponse:
    return _page(engine.low_stock(warehouse_id), page, size)


@inventory_router.get("/product/{product_id}", response_model=list[InventoryRecordResponse])
async def list_inventory_for_product(
    product_id: str, engine: OperationEngine = Depends(get_engine)
) -> list[InventoryRecordResponse]:
    return [InventoryRecordResponse.from_record(r) for r in engine.list(RecordFilter(product_id=product_id))]


@inventory_router.get("/{record_id}", response_model=InventoryRecordResponse)
async def get_inventory(record_id: str, engine: OperationEngine = Depends(get_engine)) -> InventoryRecordResponse:
    record = engine.get(record_id)
    if record is None:
        raise _not_found(record_id)
    return InventoryRecordResponse.from_record(record)


@inventory_router.get("/{record_id}/movements", response_model=list[StockMovementResponse])
async def get_movements(
    record_id: str, engine: OperationEngine = Depends(get_engine)
) -> list[StockMovementResponse]:
    history = engine.movement_history(record_id)
    if not history and engine.get(record_id) is None:
        raise _not_found(record_id)
    return [StockMovementResponse.from_movement(m) for m in history]


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------
@inventory_router.post("", status_code=201, response_model=InventoryRecordResponse)
async def create_inventory(
    body: CreateInventoryRequest, engine: OperationEngine = Depends(get_engine)
) -> InventoryRecordResponse:
    with _translate_errors():
        record = engine.create(CreateInput(**body.model_dump()))
    return InventoryRecordResponse.from_record(record)


@inventory_router.put("/{record_id}", response_model=InventoryRecordResponse)
async def update_inventory(
    record_id: str, body: UpdateInventoryRequest, engine: OperationEngine = Depends(get_engine)
) -> InventoryRecordResponse:
    with _translate_errors():
        record = engine.update(record_id, UpdateInput(**body.model_dump()))
    return InventoryRecordResponse.from_record(record)


@inventory_router.patch("/{record_id}/quantity", response_model=InventoryRecordResponse)
async def adjust_quantity(
    record_id: str, body: AdjustQuantityRequest, engine: OperationEngine = Depends(get_engine)
) -> InventoryRecordResponse:
    with _translate_errors():
        record = engine.apply_adjustment(
            record_id,
            delta=body.adjustment,
            reason=body.reason,
            reference_type=body.reference_type,
            reference_id=body.reference_id,
            adjustment_type=body.adjustment_type,
        )
    return InventoryRecordResponse.from_record(record)


@inventory_router.post("/{record_id}/restock", response_model=InventoryRecordResponse)
async def restock_inventory(
    record_id: str, body: RestockRequest, engine: OperationEngine = Depends(get_engine)
) -> InventoryRecordResponse:
    meta = RestockMeta(
        batch_number=body.batch_number,
        unit_cost=body.unit_cost,
        supplier_id=body.supplier_id,
        purchase_order_id=body.purchase_order_id,
        notes=body.notes,
    )
    with _translate_errors():
        record = engine.restock(record_id, body.quantity, meta)
    return InventoryRecordResponse.from_record(record)


@inventory_router.delete("/{record_id}", status_code=204)
async def delete_inventory(record_id: str, engine: OperationEngine = Depends(get_engine)) -> Response:
    if not engine.delete(record_id):
        raise _not_found(record_id)
    return Response(status_code=204)
