"""
Recognized order and tracking statuses with their display metadata.

Two independent catalogs exist. Both contain "delivered", but an order being
delivered and a parcel being delivered are different facts shown on
different screens, so the enums are never mixed.

No transition graph is enforced: any status may follow any other, and values
outside a catalog are accepted everywhere. Lookups degrade to the raw value
instead of raising.
"""

from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable


class OrderStatus(str, Enum):
    """Order lifecycle states as used by checkout and the orders screen."""
    PENDING = "pending"
    WAITING_PAYMENT = "waiting_payment"
    PAID = "paid"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


class TrackingStatus(str, Enum):
    """Parcel states shown on the public tracking timeline."""
    POSTED = "posted"
    IN_TRANSIT = "in_transit"
    HUB = "hub"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERY_ATTEMPT = "delivery_attempt"
    AWAITING_PICKUP = "awaiting_pickup"
    DELIVERED = "delivered"
    RETURNED = "returned"


class StatusCategory(str, Enum):
    """Severity tag used to color status badges."""
    WARNING = "warning"
    SUCCESS = "success"
    INFO = "info"
    DANGER = "danger"
    UNCLASSIFIED = "unclassified"


@dataclass(frozen=True)
class StatusInfo:
    value: str
    label: str
    category: StatusCategory


class StatusCatalog:
    """
    Lookup table for one family of statuses.

    Example:
        ORDER_CATALOG.label_of("paid")        # "Pago"
        ORDER_CATALOG.label_of("on_hold")     # "on_hold"
        ORDER_CATALOG.category_of("on_hold")  # StatusCategory.UNCLASSIFIED
    """

    def __init__(self, name: str, entries: Iterable[StatusInfo]):
        self.name = name
        self._entries: dict[str, StatusInfo] = {e.value: e for e in entries}

    @staticmethod
    def _key(status: Any) -> str:
        if isinstance(status, Enum):
            return str(status.value)
        return str(status)

    def is_known(self, status: Any) -> bool:
        return self._key(status) in self._entries

    def info(self, status: Any) -> StatusInfo:
        """Metadata for a status; unknown values get their own raw label."""
        key = self._key(status)
        found = self._entries.get(key)
        if found is None:
            return StatusInfo(value=key, label=key, category=StatusCategory.UNCLASSIFIED)
        return found

    def label_of(self, status: Any) -> str:
        """Display label, or the raw value when the status is not recognized."""
        return self.info(status).label

    def category_of(self, status: Any) -> StatusCategory:
        """Badge category, UNCLASSIFIED when the status is not recognized."""
        return self.info(status).category

    def options(self) -> list[tuple[str, str]]:
        """(value, label) pairs in catalog order, for select boxes."""
        return [(e.value, e.label) for e in self._entries.values()]

    def count_by_status(self, statuses: Iterable[Any]) -> dict[str, int]:
        """How many times each status occurs, keyed by raw value."""
        return dict(Counter(self._key(s) for s in statuses))

    def __contains__(self, status: Any) -> bool:
        return self.is_known(status)


ORDER_CATALOG = StatusCatalog("order", [
    StatusInfo(OrderStatus.PENDING.value, "Pendente", StatusCategory.WARNING),
    StatusInfo(OrderStatus.WAITING_PAYMENT.value, "Aguardando Pagamento", StatusCategory.WARNING),
    StatusInfo(OrderStatus.PAID.value, "Pago", StatusCategory.SUCCESS),
    StatusInfo(OrderStatus.PROCESSING.value, "Processando", StatusCategory.INFO),
    StatusInfo(OrderStatus.SHIPPED.value, "Enviado", StatusCategory.INFO),
    StatusInfo(OrderStatus.DELIVERED.value, "Entregue", StatusCategory.SUCCESS),
    StatusInfo(OrderStatus.COMPLETED.value, "Concluído", StatusCategory.SUCCESS),
    StatusInfo(OrderStatus.CANCELLED.value, "Cancelado", StatusCategory.DANGER),
    StatusInfo(OrderStatus.REFUNDED.value, "Reembolsado", StatusCategory.DANGER),
])

TRACKING_CATALOG = StatusCatalog("tracking", [
    StatusInfo(TrackingStatus.POSTED.value, "Objeto Postado", StatusCategory.WARNING),
    StatusInfo(TrackingStatus.IN_TRANSIT.value, "Em Trânsito", StatusCategory.INFO),
    StatusInfo(TrackingStatus.HUB.value, "Em Centro de Distribuição", StatusCategory.INFO),
    StatusInfo(TrackingStatus.OUT_FOR_DELIVERY.value, "Saiu para Entrega", StatusCategory.INFO),
    StatusInfo(TrackingStatus.DELIVERY_ATTEMPT.value, "Tentativa de Entrega", StatusCategory.WARNING),
    StatusInfo(TrackingStatus.AWAITING_PICKUP.value, "Aguardando Retirada", StatusCategory.WARNING),
    StatusInfo(TrackingStatus.DELIVERED.value, "Entregue", StatusCategory.SUCCESS),
    StatusInfo(TrackingStatus.RETURNED.value, "Devolvido", StatusCategory.DANGER),
])


# Dashboard groupings
ORDER_GROUPS: dict[str, set[str]] = {
    "pending": {OrderStatus.PENDING.value, OrderStatus.WAITING_PAYMENT.value},
    "processing": {OrderStatus.PROCESSING.value, OrderStatus.PAID.value},
    "completed": {OrderStatus.DELIVERED.value, OrderStatus.COMPLETED.value},
}

TRACKING_GROUPS: dict[str, set[str]] = {
    "awaiting": {TrackingStatus.POSTED.value},
    "in_transit": {
        TrackingStatus.IN_TRANSIT.value,
        TrackingStatus.HUB.value,
        TrackingStatus.OUT_FOR_DELIVERY.value,
    },
    "delivered": {TrackingStatus.DELIVERED.value},
}


def summarize(statuses: Iterable[Any], groups: dict[str, set[str]]) -> dict[str, int]:
    """
    Count statuses into dashboard groups.

    Statuses belonging to no group are only counted in "total".
    """
    keys = [StatusCatalog._key(s) for s in statuses]
    summary = {"total": len(keys)}
    for group, members in groups.items():
        summary[group] = sum(1 for k in keys if k in members)
    return summary
