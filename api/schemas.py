"""
Request models for the console API.

Required fields are declared Optional on purpose: the endpoints check them
and answer 400 with a message the admin screens show verbatim, instead of
FastAPI's generic 422 validation payload.
"""

from typing import Any, Optional
from pydantic import BaseModel, Field


class TrackingCreateRequest(BaseModel):
    """Body of POST /api/tracking."""
    order_number: Optional[str] = Field(default=None, description="Order this shipment belongs to")
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    destination_city: Optional[str] = None
    destination_state: Optional[str] = None
    destination_cep: Optional[str] = None
    items: list[Any] = Field(default_factory=list)
    total: float = 0

    def missing_fields(self) -> list[str]:
        required = ("order_number", "customer_name", "destination_city")
        return [name for name in required if not getattr(self, name)]


class TrackingUpdateRequest(BaseModel):
    """
    Body of PUT /api/tracking.

    A timeline entry is appended only when both new_status and
    status_description are present; destination fields may be corrected
    on their own.
    """
    id: Optional[str] = None
    new_status: Optional[str] = None
    status_description: Optional[str] = None
    status_location: Optional[str] = None
    status_details: Optional[str] = None
    destination_city: Optional[str] = None
    destination_state: Optional[str] = None
    destination_cep: Optional[str] = None

    @property
    def adds_entry(self) -> bool:
        return bool(self.new_status and self.status_description)

    @property
    def changes_destination(self) -> bool:
        return bool(self.destination_city or self.destination_state or self.destination_cep)


class OrderStatusRequest(BaseModel):
    """Body of PUT /api/orders/status."""
    id: Optional[str] = None
    new_status: Optional[str] = None
    actor: Optional[str] = Field(default=None, description="Defaults to the token's admin id")
