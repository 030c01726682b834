"""
Tests for OperatorSession.

These tests verify the session lifecycle and that remote failures become
error toasts instead of exceptions.
"""

import httpx
import pytest

from operator_console.scheduler import ManualScheduler
from operator_console.session import OperatorSession
from operator_console.tracking_client import TrackingClient
from shared.data_store import Collections, DataStore
from shared.models import NotificationCategory
from shared.settings import ConsoleSettings
from shared.sounds import SoundPlayer


@pytest.fixture
def session(data_store: DataStore, scheduler: ManualScheduler, sound_player: SoundPlayer,
            settings: ConsoleSettings) -> OperatorSession:
    return OperatorSession(data_store, scheduler, operator="Maria", sound_player=sound_player, settings=settings)


def _client(handler) -> TrackingClient:
    http = httpx.Client(base_url="http://console.test", transport=httpx.MockTransport(handler))
    return TrackingClient("http://console.test", admin_token="tok", client=http)


def _tracking_json(**overrides) -> dict:
    tracking = {
        "id": "trk_9",
        "tracking_code": "DCNEW00001",
        "order_number": "ORD_9",
        "customer_name": "Ana",
        "destination_city": "Canoas",
        "destination_state": "RS",
        "current_status": "posted",
        "history": [],
        "created_at": "2026-10-10T10:00:00+00:00",
    }
    tracking.update(overrides)
    return tracking


class TestSessionLifecycle:
    """Tests for start/end."""

    def test_start_greets_and_arms_detector(self, session: OperatorSession):
        session.start()

        [welcome] = session.notifications.list()
        assert welcome.title == "Bem-vindo!"
        assert welcome.message == "Login realizado com sucesso"
        assert session.detector.running
        assert session.detector.baseline.last_order_count == 4

    def test_new_sale_during_session(self, session: OperatorSession, scheduler: ManualScheduler,
                                     data_store: DataStore, sound_player: SoundPlayer):
        session.start()
        orders = data_store.read(Collections.ORDERS)
        orders.append({"id": "ord_5", "customer": {"name": "Eva Martins"}})
        data_store.write(Collections.ORDERS, orders)

        scheduler.advance(10)

        [toast] = session.notifications.list()
        assert toast.title == "Nova venda!"
        assert "Eva Martins" in toast.message
        assert sound_player.played_keys() == ["success", "sale"]

    def test_end_stops_polling_and_clears(self, session: OperatorSession, scheduler: ManualScheduler):
        session.start()
        session.end()

        assert not session.detector.running
        assert session.notifications.list() == []
        assert scheduler.pending() == 0

    def test_end_twice(self, session: OperatorSession):
        session.start()
        session.end()
        session.end()

        with pytest.raises(RuntimeError):
            session.start()

    def test_context_manager(self, session: OperatorSession):
        with session as active:
            assert active.active
        assert not session.active

    def test_operator_defaults_to_settings(self, data_store, scheduler, settings):
        session = OperatorSession(data_store, scheduler, settings=settings)

        assert session.operator == "Admin"

    def test_end_without_start_closes_client(self, data_store, scheduler, settings):
        http = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200, json={})))
        client = TrackingClient("http://console.test", client=http)
        session = OperatorSession(data_store, scheduler, tracking_client=client, settings=settings)

        session.end()

        assert http.is_closed
        assert not session.active


class TestLocalUpdates:
    """Tests for status updates as the session's operator."""

    def test_update_order_status(self, session: OperatorSession, data_store: DataStore, paid_order_id: str):
        assert session.update_order_status(paid_order_id, "shipped") is True

        assert data_store.get_order(paid_order_id).status_history[-1].actor == "Maria"
        assert session.notifications.list()[-1].title == "Status atualizado"

    def test_missing_order_toasts_error(self, session: OperatorSession):
        assert session.update_order_status("ord_404", "shipped") is False

        [toast] = session.notifications.list()
        assert toast.category == NotificationCategory.ERROR
        assert toast.message == "Pedido ord_404 não encontrado"

    def test_update_tracking_status(self, session: OperatorSession, data_store: DataStore,
                                    in_transit_tracking_id: str):
        assert session.update_tracking_status(in_transit_tracking_id, "hub", "Em centro de distribuição")

        assert data_store.get_tracking(in_transit_tracking_id).current_status == "hub"

    def test_unreadable_orders_toast_error(self, session: OperatorSession, data_store: DataStore, paid_order_id: str):
        session.start()
        (data_store.data_dir / "orders.json").write_text("not json", encoding="utf-8")

        assert session.update_order_status(paid_order_id, "shipped") is False

        toast = session.notifications.list()[-1]
        assert toast.category == NotificationCategory.ERROR
        assert toast.message == "Erro ao atualizar status"

    def test_unreadable_trackings_toast_error(self, session: OperatorSession, data_store: DataStore,
                                              in_transit_tracking_id: str):
        session.start()
        (data_store.data_dir / "trackings.json").write_text("[{", encoding="utf-8")

        assert session.update_tracking_status(in_transit_tracking_id, "hub", "No centro") is False

        toast = session.notifications.list()[-1]
        assert toast.category == NotificationCategory.ERROR
        assert toast.message == "Erro ao atualizar rastreio"


class TestRemoteTracking:
    """Tests for tracking API calls made through the session."""

    def test_create_success(self, data_store, scheduler, settings):
        client = _client(lambda request: httpx.Response(201, json={"success": True, "tracking": _tracking_json()}))
        session = OperatorSession(data_store, scheduler, tracking_client=client, settings=settings)

        tracking = session.create_tracking_remote(order_number="ORD_9", customer_name="Ana", destination_city="Canoas")

        assert tracking.tracking_code == "DCNEW00001"
        assert session.notifications.list()[-1].message == "Rastreio DCNEW00001 criado!"

    def test_remote_error_becomes_toast(self, data_store, scheduler, settings):
        client = _client(lambda request: httpx.Response(403, json={"error": "Acesso negado"}))
        session = OperatorSession(data_store, scheduler, tracking_client=client, settings=settings)

        assert session.create_tracking_remote(order_number="X", customer_name="Y", destination_city="Z") is None

        [toast] = session.notifications.list()
        assert toast.category == NotificationCategory.ERROR
        assert toast.title == "Erro"
        assert toast.message == "Acesso negado"

    def test_update_requires_status_and_description(self, data_store, scheduler, settings):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json={"tracking": _tracking_json()})

        session = OperatorSession(data_store, scheduler, tracking_client=_client(handler), settings=settings)

        assert session.update_tracking_remote("trk_9", "in_transit", "") is None
        assert calls == []
        assert session.notifications.list()[-1].message == "Selecione um status e digite a descrição"

    def test_update_success(self, data_store, scheduler, settings):
        client = _client(lambda request: httpx.Response(
            200, json={"success": True, "tracking": _tracking_json(current_status="in_transit")}
        ))
        session = OperatorSession(data_store, scheduler, tracking_client=client, settings=settings)

        tracking = session.update_tracking_remote("trk_9", "in_transit", "Objeto em trânsito")

        assert tracking.current_status == "in_transit"

    def test_delete_resets_detector(self, data_store, scheduler, settings):
        client = _client(lambda request: httpx.Response(200, json={"success": True}))
        session = OperatorSession(data_store, scheduler, tracking_client=client, settings=settings)
        session.start()

        assert session.delete_tracking_remote("trk_1") is True
        assert not session.detector.baseline.initialized

    def test_delete_failure(self, data_store, scheduler, settings):
        client = _client(lambda request: httpx.Response(404, json={"error": "Rastreio não encontrado"}))
        session = OperatorSession(data_store, scheduler, tracking_client=client, settings=settings)

        assert session.delete_tracking_remote("trk_404") is False
        assert session.notifications.list()[-1].message == "Rastreio não encontrado"

    def test_remote_call_without_client(self, session: OperatorSession):
        with pytest.raises(RuntimeError):
            session.delete_tracking_remote("trk_1")
