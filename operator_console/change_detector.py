"""
New-sale and new-customer detection by polling the store.

The storefront appends orders and customers to the shared store; nothing
tells the console when it does. The detector polls the two collections on a
fixed interval and compares their sizes with the sizes it saw last time.

State machine:
- uninitialized: the first cycle only records the current counts (the
  baseline). Records that existed before the session started are not news.
- armed: every later cycle compares counts with the baseline. Growth of k
  records yields ONE notification, not k, and the baseline moves to the new
  count.

A cycle that cannot read the store is skipped: the error is logged, the
baseline stays as it was, and the next tick tries again. Nothing raised in
a cycle reaches the scheduler.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from operator_console.notification_queue import NotificationQueue
from operator_console.scheduler import ScheduledTask, Scheduler
from shared.data_store import Collections, DataStore
from shared.errors import StoreError
from shared.models import NotificationCategory, NotificationRequest

logger = logging.getLogger("change_detector")

DEFAULT_POLL_INTERVAL = 10.0
DETECTOR_TTL_MS = 8000

SALE_SOUND = "sale"
CUSTOMER_SOUND = "customer"


@dataclass
class ChangeBaseline:
    """Record counts seen by the last successful cycle."""
    last_order_count: int = 0
    last_customer_count: int = 0
    initialized: bool = False


def _customer_name_of_order(order: Any) -> Optional[str]:
    if not isinstance(order, dict):
        return None
    customer = order.get("customer")
    if isinstance(customer, dict) and customer.get("name"):
        return str(customer["name"])
    return None


def _name_of_customer(customer: Any) -> Optional[str]:
    if isinstance(customer, dict) and customer.get("name"):
        return str(customer["name"])
    return None


class ChangeDetector:
    """
    Polls orders and customers and announces growth.

    Example:
        detector = ChangeDetector(data_store, queue, scheduler)
        detector.start()   # first cycle now: records the baseline
        ...                # every 10s: "Nova venda!" when orders grow
        detector.stop()    # on logout
    """

    def __init__(
        self,
        data_store: DataStore,
        notifications: NotificationQueue,
        scheduler: Scheduler,
        interval: float = DEFAULT_POLL_INTERVAL,
        ttl_ms: int = DETECTOR_TTL_MS,
    ):
        """
        Initialize the detector.

        Args:
            data_store: Store to poll
            notifications: Queue receiving the new sale / new customer toasts
            scheduler: Runs the polling cycle
            interval: Seconds between cycles
            ttl_ms: How long detector toasts stay up
        """
        self.data_store = data_store
        self.notifications = notifications
        self.scheduler = scheduler
        self.interval = interval
        self.ttl_ms = ttl_ms

        self.baseline = ChangeBaseline()
        self._task: Optional[ScheduledTask] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.cancelled

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(self) -> None:
        """
        Run a cycle now, then one every interval until stop().

        The immediate cycle establishes the baseline on a fresh detector.
        """
        if self.running:
            logger.warning("ChangeDetector already running")
            return
        self.check_once()
        self._task = self.scheduler.call_every(self.interval, self._tick)
        logger.info(f"ChangeDetector started - polling every {self.interval:g}s")

    def stop(self) -> bool:
        """
        Stop polling. Safe to call more than once.

        Returns:
            True if this call stopped a running detector.
        """
        if self._task is None:
            return False
        task, self._task = self._task, None
        stopped = task.cancel()
        if stopped:
            logger.info("ChangeDetector stopped")
        return stopped

    def reset(self) -> None:
        """
        Forget the baseline; the next cycle re-initializes it silently.

        Used after records are deleted, when counts can no longer be
        compared with what was seen before.
        """
        self.baseline = ChangeBaseline()
        logger.info("ChangeDetector baseline reset")

    # =========================================================================
    # Polling
    # =========================================================================

    def _tick(self) -> None:
        try:
            self.check_once()
        except Exception as e:
            logger.error(f"Change detection cycle failed: {e}")

    def check_once(self) -> list[str]:
        """
        Run one detection cycle.

        Returns:
            Ids of the notifications pushed (empty on the first cycle, when
            nothing grew, or when the store could not be read).
        """
        try:
            orders = self.data_store.read(Collections.ORDERS)
            customers = self.data_store.read(Collections.CUSTOMERS)
        except StoreError as e:
            logger.warning(f"Skipping change detection cycle: {e}")
            return []

        order_count = len(orders)
        customer_count = len(customers)

        if not self.baseline.initialized:
            self.baseline = ChangeBaseline(
                last_order_count=order_count,
                last_customer_count=customer_count,
                initialized=True,
            )
            logger.info(f"Baseline set: {order_count} orders, {customer_count} customers")
            return []

        # The baseline moves before announcing, so a failed push is never repeated
        previous_orders = self.baseline.last_order_count
        previous_customers = self.baseline.last_customer_count
        self.baseline.last_order_count = order_count
        self.baseline.last_customer_count = customer_count

        pushed = []

        if order_count > previous_orders:
            delta = order_count - previous_orders
            pushed.append(self._announce_sales(delta, _customer_name_of_order(orders[-1])))
        elif order_count < previous_orders:
            logger.info(f"Order count dropped to {order_count}, re-syncing baseline")

        if customer_count > previous_customers:
            delta = customer_count - previous_customers
            pushed.append(self._announce_customers(delta, _name_of_customer(customers[-1])))
        elif customer_count < previous_customers:
            logger.info(f"Customer count dropped to {customer_count}, re-syncing baseline")

        return pushed

    def _announce_sales(self, delta: int, customer_name: Optional[str]) -> str:
        if delta == 1:
            title = "Nova venda!"
            message = f"{customer_name} acabou de fazer um pedido" if customer_name else "Um novo pedido foi recebido"
        else:
            title = "Novas vendas!"
            message = f"{delta} novos pedidos recebidos"
            if customer_name:
                message += f" (último: {customer_name})"
        return self._push(title, message, SALE_SOUND)

    def _announce_customers(self, delta: int, name: Optional[str]) -> str:
        if delta == 1:
            title = "Novo cliente!"
            message = f"{name} acabou de se cadastrar" if name else "Um novo cliente se cadastrou"
        else:
            title = "Novos clientes!"
            message = f"{delta} novos clientes cadastrados"
            if name:
                message += f" (último: {name})"
        return self._push(title, message, CUSTOMER_SOUND)

    def _push(self, title: str, message: str, sound_key: str) -> str:
        request = NotificationRequest(
            category=NotificationCategory.SUCCESS,
            title=title,
            message=message,
            ttl_ms=self.ttl_ms,
            sound_key=sound_key,
        )
        return self.notifications.push(request)
