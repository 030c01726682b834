"""
Domain models for the store operator console.

Design decisions:
- Using Pydantic for validation and serialization
- Persisted records keep unknown fields (extra="allow"): the collections are
  shared with the storefront and other admin screens, and a read-modify-write
  here must not drop what they wrote
- Statuses are plain strings on the records; the catalogs in
  shared.status_catalog know the recognized values but never reject others
- Notifications are never persisted, they only live in a NotificationQueue
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, ClassVar, Optional
from pydantic import AliasChoices, BaseModel, Field, ConfigDict


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


# =============================================================================
# Notifications
# =============================================================================

class NotificationCategory(str, Enum):
    """Visual category of a toast; also the fallback audio cue key."""
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"
    WARNING = "warning"


class NotificationRequest(BaseModel):
    """
    A notification as requested by a caller, before the queue assigns it an
    id and a creation time.
    """
    category: NotificationCategory = Field(default=NotificationCategory.INFO)
    title: str = Field(..., description="Short toast title")
    message: str = Field(default="", description="Toast body")
    ttl_ms: Optional[int] = Field(
        default=None,
        gt=0,
        description="Time to live; the queue default applies when omitted"
    )
    sound_key: Optional[str] = Field(
        default=None,
        description="Audio cue to play; the category is used when omitted"
    )


class Notification(BaseModel):
    """An ephemeral, user-facing notification held by a NotificationQueue."""
    id: str
    category: NotificationCategory
    title: str
    message: str
    created_at: float = Field(..., description="Scheduler clock, in seconds")
    ttl_ms: int = Field(..., gt=0)
    sound_key: Optional[str] = None

    @property
    def expires_at(self) -> float:
        return self.created_at + self.ttl_ms / 1000.0

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


# =============================================================================
# Ledger
# =============================================================================

class LedgerEntry(BaseModel):
    """
    One immutable status change on an order or a shipment.

    Entries are only ever appended to a record's history; the record's
    current status is the status of its last entry.
    """
    status: str = Field(..., description="Status value after this change")
    timestamp: datetime = Field(default_factory=utcnow)
    actor: str = Field(
        default="",
        validation_alias=AliasChoices("actor", "updatedBy"),
        description="Who made the change; older admin screens wrote it as updatedBy"
    )
    description: Optional[str] = Field(default=None)
    location: Optional[str] = Field(default=None)
    details: Optional[str] = Field(default=None)

    model_config = ConfigDict(frozen=True)


class LedgerRecord(BaseModel):
    """
    Base for records carrying a status and an append-only history.

    Subclasses name the two fields that hold them, since orders and tracking
    records were designed by different screens and spell them differently.
    """
    STATUS_FIELD: ClassVar[str] = "status"
    HISTORY_FIELD: ClassVar[str] = "status_history"

    id: str = Field(..., description="Unique record identifier")
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: Optional[datetime] = Field(default=None)

    model_config = ConfigDict(extra="allow")

    @property
    def status_value(self) -> str:
        return getattr(self, self.STATUS_FIELD)

    @property
    def entries(self) -> list[LedgerEntry]:
        return getattr(self, self.HISTORY_FIELD)


# =============================================================================
# Orders and customers
# =============================================================================

class OrderCustomer(BaseModel):
    """Buyer details captured at checkout."""
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    document: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class OrderItem(BaseModel):
    """A purchased product line."""
    name: str
    price: float = Field(..., ge=0)
    quantity: int = Field(default=1, ge=1)

    model_config = ConfigDict(extra="allow")


class OrderRecord(LedgerRecord):
    """
    A completed purchase.

    Created by the checkout flow; this console only changes its status.
    """
    customer: OrderCustomer = Field(default_factory=OrderCustomer)
    items: list[OrderItem] = Field(default_factory=list)
    total: float = Field(default=0, ge=0)
    status: str = Field(default="pending")
    status_history: list[LedgerEntry] = Field(default_factory=list)


class Customer(BaseModel):
    """A registered storefront customer."""
    id: str
    name: str = ""
    email: str = ""
    phone: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)

    model_config = ConfigDict(extra="allow")


# =============================================================================
# Shipment tracking
# =============================================================================

class TrackingRecord(LedgerRecord):
    """
    A shipment with its public tracking code and delivery timeline.

    Created by the "generate tracking code" action with a first "posted"
    entry already in its history.
    """
    STATUS_FIELD: ClassVar[str] = "current_status"
    HISTORY_FIELD: ClassVar[str] = "history"

    tracking_code: str
    order_number: str
    customer_name: str
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    origin_city: str = ""
    origin_state: str = ""
    destination_city: str
    destination_state: str = ""
    destination_cep: str = ""
    current_status: str = Field(default="posted")
    history: list[LedgerEntry] = Field(default_factory=list)
    items: list[Any] = Field(default_factory=list)
    total: float = Field(default=0)

    @property
    def destination(self) -> str:
        """Destination as shown in timeline entries, e.g. "Canoas - RS"."""
        return f"{self.destination_city} - {self.destination_state}"
