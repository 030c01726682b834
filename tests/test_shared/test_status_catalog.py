"""
Tests for the order and tracking status catalogs.
"""

import pytest

from shared.status_catalog import (
    ORDER_CATALOG,
    ORDER_GROUPS,
    TRACKING_CATALOG,
    TRACKING_GROUPS,
    OrderStatus,
    StatusCategory,
    TrackingStatus,
    summarize,
)


class TestOrderCatalog:
    """Tests for order status labels and categories."""

    @pytest.mark.parametrize("status,label,category", [
        ("pending", "Pendente", StatusCategory.WARNING),
        ("waiting_payment", "Aguardando Pagamento", StatusCategory.WARNING),
        ("paid", "Pago", StatusCategory.SUCCESS),
        ("shipped", "Enviado", StatusCategory.INFO),
        ("cancelled", "Cancelado", StatusCategory.DANGER),
    ])
    def test_known_statuses(self, status, label, category):
        assert ORDER_CATALOG.label_of(status) == label
        assert ORDER_CATALOG.category_of(status) == category
        assert status in ORDER_CATALOG

    def test_accepts_enum_members(self):
        """Enum members and their raw values are the same status."""
        assert ORDER_CATALOG.label_of(OrderStatus.DELIVERED) == "Entregue"
        assert ORDER_CATALOG.is_known(OrderStatus.REFUNDED)

    def test_catalog_size(self):
        assert len(ORDER_CATALOG.options()) == len(OrderStatus) == 9

    def test_options_follow_catalog_order(self):
        options = ORDER_CATALOG.options()
        assert options[0] == ("pending", "Pendente")
        assert [value for value, _ in options] == [s.value for s in OrderStatus]


class TestUnknownStatuses:
    """label_of never raises; unknown values degrade to themselves."""

    @pytest.mark.parametrize("status", ["on_hold", "", "PAID", "posted"])
    def test_order_label_is_raw_value(self, status):
        assert ORDER_CATALOG.label_of(status) == status
        assert ORDER_CATALOG.category_of(status) == StatusCategory.UNCLASSIFIED
        assert status not in ORDER_CATALOG

    def test_non_string_input(self):
        assert ORDER_CATALOG.label_of(42) == "42"
        assert TRACKING_CATALOG.label_of(None) == "None"


class TestTrackingCatalog:
    """Tests for parcel timeline statuses."""

    def test_labels(self):
        assert TRACKING_CATALOG.label_of("posted") == "Objeto Postado"
        assert TRACKING_CATALOG.label_of(TrackingStatus.IN_TRANSIT) == "Em Trânsito"
        assert TRACKING_CATALOG.label_of("out_for_delivery") == "Saiu para Entrega"

    def test_delivered_exists_in_both_catalogs(self):
        """Same value, independent catalogs."""
        assert ORDER_CATALOG.is_known("delivered")
        assert TRACKING_CATALOG.is_known("delivered")
        assert OrderStatus.DELIVERED is not TrackingStatus.DELIVERED

    def test_returned_is_danger(self):
        assert TRACKING_CATALOG.category_of("returned") == StatusCategory.DANGER


class TestSummaries:
    """Tests for dashboard counters."""

    def test_count_by_status(self):
        counts = ORDER_CATALOG.count_by_status(["paid", "paid", OrderStatus.SHIPPED, "on_hold"])
        assert counts == {"paid": 2, "shipped": 1, "on_hold": 1}

    def test_order_summary(self):
        summary = summarize(["pending", "waiting_payment", "paid", "delivered", "cancelled"], ORDER_GROUPS)

        assert summary == {"total": 5, "pending": 2, "processing": 1, "completed": 1}

    def test_tracking_summary(self):
        summary = summarize(["posted", "hub", "in_transit", "delivered", "returned"], TRACKING_GROUPS)

        assert summary["total"] == 5
        assert summary["awaiting"] == 1
        assert summary["in_transit"] == 2
        assert summary["delivered"] == 1
