"""
FastAPI application for the store operator console.

This application provides:
1. The tracking API used by the admin tracking screen and the public
   tracking page (/api/tracking)
2. Order status updates for the orders screen (/api/orders/status)

Every status change goes through StatusService, so the API and the console
write the same ledger entries.

Run with:
    uvicorn api.main:app --reload

Then visit http://localhost:8000/docs for interactive API documentation.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(name)-24s | %(levelname)-5s | %(message)s",
    datefmt="%H:%M:%S",
)

from api.schemas import OrderStatusRequest, TrackingCreateRequest, TrackingUpdateRequest
from operator_console.status_service import OrderStatusService, TrackingStatusService
from operator_console.tracking import create_tracking
from shared.auth import validate_admin_token
from shared.data_store import Collections, DataStore, get_data_store
from shared.errors import ConsoleError
from shared.models import TrackingRecord
from shared.settings import get_settings

logger = logging.getLogger("tracking_api")


# Application lifespan
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    logging.info("Starting Store Operator Console API")
    yield
    logging.info("Shutting down")


app = FastAPI(
    title="Store Operator Console API",
    description="""
    Shipment tracking and order status endpoints for the store's admin console.

    Admin endpoints require an admin token in `X-Admin-Token` or
    `Authorization: Bearer <token>`.
    """,
    version="1.0.0",
    lifespan=lifespan,
)


# Module-level store (replaced in tests)
_data_store: Optional[DataStore] = None


def get_store() -> DataStore:
    """Get the data store instance."""
    global _data_store
    if _data_store is None:
        _data_store = get_data_store()
    return _data_store


def reset_api_state(data_store: Optional[DataStore] = None) -> None:
    """Reset API state (for testing)."""
    global _data_store
    _data_store = data_store


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _admin_payload(request: Request) -> Optional[dict[str, Any]]:
    token = request.headers.get("x-admin-token")
    if not token:
        auth = request.headers.get("authorization", "")
        if auth.startswith("Bearer "):
            token = auth[len("Bearer "):]
    return validate_admin_token(token)


def _actor(payload: dict[str, Any], explicit: Optional[str] = None) -> str:
    return explicit or payload.get("adminId") or get_settings().operator_name


def _newest_first(trackings: list[TrackingRecord]) -> list[dict[str, Any]]:
    def key(t: TrackingRecord) -> datetime:
        created = t.created_at
        if created.tzinfo is None:
            created = created.replace(tzinfo=timezone.utc)
        return created

    return [t.model_dump(mode="json") for t in sorted(trackings, key=key, reverse=True)]


@app.exception_handler(ConsoleError)
async def console_error_handler(request: Request, exc: ConsoleError):
    logger.error(f"Tracking API Error: {exc}")
    return _error(500, str(exc) or "Erro interno do servidor")


# =============================================================================
# Health Check
# =============================================================================

@app.get("/health", tags=["Health"])
def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "store-operator-console"}


# =============================================================================
# Tracking
# =============================================================================

@app.get("/api/tracking", tags=["Tracking"])
def get_tracking(
    request: Request,
    code: Optional[str] = None,
    all: Optional[str] = None,
    customer_email: Optional[str] = None,
    data_store: DataStore = Depends(get_store),
):
    """
    Look up tracking records.

    - `all=true` (admin): every record, newest first
    - `customer_email=`: a customer's records, newest first
    - `code=`: one record by tracking code or order number
    """
    if all == "true":
        if _admin_payload(request) is None:
            return _error(403, "Acesso negado")
        return {"trackings": _newest_first(data_store.get_trackings())}

    if customer_email:
        email = customer_email.lower()
        mine = [t for t in data_store.get_trackings() if (t.customer_email or "").lower() == email]
        return {"trackings": _newest_first(mine)}

    if code:
        tracking = data_store.find_tracking_by_code(code)
        if tracking is None:
            return _error(404, "Rastreio não encontrado")
        return {"tracking": tracking.model_dump(mode="json")}

    return _error(400, "Parâmetro code, all ou customer_email é obrigatório")


@app.post("/api/tracking", status_code=201, tags=["Tracking"])
def post_tracking(
    body: TrackingCreateRequest,
    request: Request,
    data_store: DataStore = Depends(get_store),
):
    """Create a tracking record with a generated code and a "posted" entry."""
    payload = _admin_payload(request)
    if payload is None:
        return _error(403, "Acesso negado")

    if body.missing_fields():
        return _error(400, "Campos obrigatórios: order_number, customer_name, destination_city")

    settings = get_settings()
    tracking = create_tracking(
        data_store,
        order_number=body.order_number,
        customer_name=body.customer_name,
        destination_city=body.destination_city,
        destination_state=body.destination_state or "",
        destination_cep=body.destination_cep or "",
        customer_email=body.customer_email,
        customer_phone=body.customer_phone,
        items=body.items,
        total=body.total,
        origin_city=settings.origin_city,
        origin_state=settings.origin_state,
        actor=_actor(payload),
    )
    return {
        "success": True,
        "tracking": tracking.model_dump(mode="json"),
        "message": f"Rastreio {tracking.tracking_code} criado com sucesso",
    }


@app.put("/api/tracking", tags=["Tracking"])
def put_tracking(
    body: TrackingUpdateRequest,
    request: Request,
    data_store: DataStore = Depends(get_store),
):
    """Append a timeline entry and/or correct the destination."""
    payload = _admin_payload(request)
    if payload is None:
        return _error(403, "Acesso negado")

    if not body.id:
        return _error(400, "ID do rastreio é obrigatório")

    tracking = data_store.get_tracking(body.id)
    if tracking is None:
        return _error(404, "Rastreio não encontrado")

    service = TrackingStatusService(data_store)
    if body.changes_destination or not body.adds_entry:
        tracking = service.update_destination(
            body.id,
            city=body.destination_city,
            state=body.destination_state,
            cep=body.destination_cep,
        )
    if body.adds_entry:
        tracking = service.apply(
            body.id,
            body.new_status,
            _actor(payload),
            description=body.status_description,
            location=body.status_location or None,
            details=body.status_details or None,
        )

    if tracking is None:
        return _error(404, "Rastreio não encontrado")

    return {
        "success": True,
        "tracking": tracking.model_dump(mode="json"),
        "message": "Rastreio atualizado com sucesso",
    }


@app.delete("/api/tracking", tags=["Tracking"])
def delete_tracking(
    request: Request,
    id: Optional[str] = None,
    data_store: DataStore = Depends(get_store),
):
    """Remove a tracking record."""
    if _admin_payload(request) is None:
        return _error(403, "Acesso negado")

    if not id:
        return _error(400, "ID do rastreio é obrigatório")

    if not data_store.delete_record(Collections.TRACKINGS, id):
        return _error(404, "Rastreio não encontrado")

    logger.info(f"Tracking {id} deleted")
    return {"success": True, "message": "Rastreio deletado com sucesso"}


# =============================================================================
# Orders
# =============================================================================

@app.put("/api/orders/status", tags=["Orders"])
def put_order_status(
    body: OrderStatusRequest,
    request: Request,
    data_store: DataStore = Depends(get_store),
):
    """Change an order's status, appending to its history."""
    payload = _admin_payload(request)
    if payload is None:
        return _error(403, "Acesso negado")

    if not body.id or not body.new_status:
        return _error(400, "Campos obrigatórios: id, new_status")

    order = OrderStatusService(data_store).apply(body.id, body.new_status, _actor(payload, body.actor))
    if order is None:
        return _error(404, "Pedido não encontrado")

    return {"success": True, "order": order.model_dump(mode="json")}
