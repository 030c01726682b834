"""
One logged-in operator session.

The session object owns everything that used to be ambient state in the
admin screens: the notification queue, the change detector with its
baseline, and the status services. It is built at login, handed to whatever
renders the console, and ended at logout. Two sessions (two tabs, two
machines) each have their own and do not coordinate.
"""

import logging
from typing import Any, Optional

from operator_console.change_detector import ChangeDetector
from operator_console.notification_queue import NotificationQueue
from operator_console.scheduler import Scheduler
from operator_console.status_service import OrderStatusService, TrackingStatusService
from operator_console.tracking_client import TrackingClient
from shared.data_store import DataStore
from shared.errors import StoreError, TrackingAPIError
from shared.models import NotificationCategory, TrackingRecord
from shared.settings import ConsoleSettings, get_settings
from shared.sounds import SoundPlayer

logger = logging.getLogger("session")


class OperatorSession:
    """
    Per-session console services.

    Example:
        with OperatorSession(store, scheduler, operator="Maria") as session:
            session.notifications.subscribe(render_toast)
            session.update_order_status("ord_1", "shipped")
    """

    def __init__(
        self,
        data_store: DataStore,
        scheduler: Scheduler,
        operator: Optional[str] = None,
        sound_player: Optional[SoundPlayer] = None,
        tracking_client: Optional[TrackingClient] = None,
        settings: Optional[ConsoleSettings] = None,
    ):
        """
        Initialize the session (nothing runs until start()).

        Args:
            data_store: Shared store of orders, customers and trackings
            scheduler: Event loop timers for polling and toast expiry
            operator: Name written as the actor of ledger entries
            sound_player: Plays notification cues; defaults to a logging player
            tracking_client: Client for the remote tracking API, if used
            settings: Defaults to the process settings
        """
        self.settings = settings or get_settings()
        self.data_store = data_store
        self.scheduler = scheduler
        self.operator = operator or self.settings.operator_name
        self.tracking_client = tracking_client

        if sound_player is None:
            sound_player = SoundPlayer(sounds=self.settings.sounds, muted=self.settings.muted)

        self.notifications = NotificationQueue(
            scheduler,
            sound_player=sound_player,
            default_ttl_ms=self.settings.default_ttl_ms,
        )
        self.detector = ChangeDetector(
            data_store,
            self.notifications,
            scheduler,
            interval=self.settings.poll_interval_seconds,
            ttl_ms=self.settings.detector_ttl_ms,
        )
        self.orders = OrderStatusService(data_store, self.notifications)
        self.trackings = TrackingStatusService(data_store, self.notifications)

        self._active = False
        self._ended = False

    @property
    def active(self) -> bool:
        return self._active

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(self) -> None:
        """Begin the session: greet the operator and start polling."""
        if self._ended:
            raise RuntimeError("An ended session cannot be restarted")
        if self._active:
            return
        self._active = True
        self.notifications.notify(
            NotificationCategory.SUCCESS,
            "Bem-vindo!",
            "Login realizado com sucesso",
        )
        self.detector.start()
        logger.info(f"Session started for {self.operator}")

    def end(self) -> None:
        """
        End the session: stop polling and drop every pending toast.

        The tracking client is closed even if the session never started.
        """
        self._ended = True
        if self.tracking_client is not None:
            self.tracking_client.close()
        if not self._active:
            return
        self._active = False
        self.detector.stop()
        self.notifications.clear()
        logger.info(f"Session ended for {self.operator}")

    def __enter__(self) -> "OperatorSession":
        self.start()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.end()

    # =========================================================================
    # Local status updates
    # =========================================================================

    def update_order_status(self, order_id: str, new_status: str) -> bool:
        """Change an order's status as this operator; toasts the outcome."""
        try:
            updated = self.orders.update_status(order_id, new_status, self.operator)
        except StoreError as e:
            logger.error(f"Order {order_id} update failed: {e}")
            self._error("Erro ao atualizar status")
            return False
        if updated:
            return True
        self._error(f"Pedido {order_id} não encontrado")
        return False

    def update_tracking_status(
        self,
        tracking_id: str,
        new_status: str,
        description: str,
        location: Optional[str] = None,
        details: Optional[str] = None,
    ) -> bool:
        """Append a tracking timeline entry in the local store."""
        try:
            updated = self.trackings.update_status(
                tracking_id, new_status, self.operator, description, location, details
            )
        except StoreError as e:
            logger.error(f"Tracking {tracking_id} update failed: {e}")
            self._error("Erro ao atualizar rastreio")
            return False
        if updated:
            return True
        self._error("Rastreio não encontrado")
        return False

    # =========================================================================
    # Remote tracking operations
    # =========================================================================

    def _require_client(self) -> TrackingClient:
        if self.tracking_client is None:
            raise RuntimeError("Session has no tracking client")
        return self.tracking_client

    def create_tracking_remote(self, **fields: Any) -> Optional[TrackingRecord]:
        """Create a tracking record through the API; None on failure."""
        client = self._require_client()
        try:
            tracking = client.create(**fields)
        except TrackingAPIError as e:
            self._error(e.message)
            return None
        self.notifications.notify(
            NotificationCategory.SUCCESS,
            "Sucesso",
            f"Rastreio {tracking.tracking_code} criado!",
        )
        return tracking

    def update_tracking_remote(
        self,
        tracking_id: str,
        new_status: str,
        description: str,
        location: Optional[str] = None,
        details: Optional[str] = None,
    ) -> Optional[TrackingRecord]:
        """Append a timeline entry through the API; None on failure."""
        if not new_status or not description:
            self._error("Selecione um status e digite a descrição")
            return None
        client = self._require_client()
        try:
            tracking = client.update(tracking_id, new_status, description, location, details)
        except TrackingAPIError as e:
            self._error(e.message)
            return None
        self.notifications.notify(NotificationCategory.SUCCESS, "Sucesso", "Status atualizado com sucesso!")
        return tracking

    def delete_tracking_remote(self, tracking_id: str) -> bool:
        """Delete a tracking record through the API; False on failure."""
        client = self._require_client()
        try:
            client.delete(tracking_id)
        except TrackingAPIError as e:
            self._error(e.message)
            return False
        self.detector.reset()
        self.notifications.notify(NotificationCategory.SUCCESS, "Sucesso", "Rastreio deletado com sucesso!")
        return True

    def _error(self, message: str) -> None:
        self.notifications.notify(NotificationCategory.ERROR, "Erro", message)
