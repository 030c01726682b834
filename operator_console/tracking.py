"""
Creation of shipment tracking records.

A tracking record starts its life already "posted": the "generate tracking
code" action writes the record together with the first timeline entry,
stamped at the store's own city.
"""

import logging
import random
import string
from typing import Any, Optional
from uuid import uuid4

from operator_console.ledger import Ledger
from shared.data_store import Collections, DataStore
from shared.models import TrackingRecord, utcnow
from shared.status_catalog import TrackingStatus

logger = logging.getLogger("tracking")

TRACKING_CODE_PREFIX = "DC"
TRACKING_CODE_LENGTH = 8
_CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_tracking_code(rng: Optional[random.Random] = None) -> str:
    """A new code: "DC" followed by 8 uppercase letters or digits."""
    rng = rng or random.Random()
    return TRACKING_CODE_PREFIX + "".join(rng.choice(_CODE_ALPHABET) for _ in range(TRACKING_CODE_LENGTH))


def new_tracking_record(
    tracking_code: str,
    order_number: str,
    customer_name: str,
    destination_city: str,
    destination_state: str = "",
    destination_cep: str = "",
    customer_email: Optional[str] = None,
    customer_phone: Optional[str] = None,
    items: Optional[list[Any]] = None,
    total: float = 0,
    origin_city: str = "Sapiranga",
    origin_state: str = "RS",
    actor: str = "Admin",
) -> TrackingRecord:
    """
    Build a tracking record with its implicit "posted" entry.

    Order numbers are stored uppercase and emails lowercase, so lookups by
    either are case-insensitive.
    """
    now = utcnow()
    record = TrackingRecord(
        id=uuid4().hex,
        tracking_code=tracking_code,
        order_number=order_number.upper(),
        customer_name=customer_name,
        customer_email=customer_email.lower() if customer_email else None,
        customer_phone=customer_phone or None,
        origin_city=origin_city,
        origin_state=origin_state,
        destination_city=destination_city,
        destination_state=destination_state or "",
        destination_cep=destination_cep or "",
        current_status=TrackingStatus.POSTED.value,
        items=items or [],
        total=total or 0,
        created_at=now,
        updated_at=now,
    )
    Ledger.open(
        record,
        TrackingStatus.POSTED.value,
        actor,
        description="Objeto postado",
        location=f"{origin_city} - {origin_state}",
        details="Objeto recebido na unidade de origem",
    )
    return record


def create_tracking(
    data_store: DataStore,
    order_number: str,
    customer_name: str,
    destination_city: str,
    rng: Optional[random.Random] = None,
    **fields: Any,
) -> TrackingRecord:
    """
    Generate a tracking code, build the record and append it to the store.

    A code that collides with an existing one is regenerated once.
    """
    records = data_store.read(Collections.TRACKINGS)
    existing_codes = {r.get("tracking_code") for r in records}

    code = generate_tracking_code(rng)
    if code in existing_codes:
        code = generate_tracking_code(rng)

    record = new_tracking_record(
        tracking_code=code,
        order_number=order_number,
        customer_name=customer_name,
        destination_city=destination_city,
        **fields,
    )
    records.append(record.model_dump(mode="json"))
    data_store.write(Collections.TRACKINGS, records)

    logger.info(f"Tracking {code} created for order {record.order_number}")
    return record
