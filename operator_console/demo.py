"""
Demonstration scripts for the operator console.

Both demos run on a ManualScheduler, so ten seconds of polling take no time
at all. They work on a scratch copy of the sample data, never on data/.
"""

import json
import logging
import shutil
import tempfile
from pathlib import Path
from typing import Optional

from operator_console.scheduler import ManualScheduler
from operator_console.session import OperatorSession
from shared.data_store import Collections, DataStore
from shared.models import Notification
from shared.settings import get_settings
from shared.status_catalog import ORDER_CATALOG
from shared.sounds import SoundPlayer


def _scratch_store(source_dir: Optional[Path] = None) -> DataStore:
    source_dir = Path(source_dir or get_settings().data_dir)
    scratch = Path(tempfile.mkdtemp(prefix="store-console-"))
    for collection in (Collections.ORDERS, Collections.CUSTOMERS, Collections.TRACKINGS):
        src = source_dir / f"{collection}.json"
        if src.exists():
            shutil.copy(src, scratch / src.name)
    return DataStore(scratch)


def _print_toast(notification: Notification) -> None:
    print(f"  [toast:{notification.category.value}] {notification.title} - {notification.message}")


def run_new_sale_demo(source_dir: Optional[Path] = None) -> list[Notification]:
    """
    Demonstrate new-sale detection.

    This shows:
    1. The first poll only records the baseline (no toast for old orders)
    2. Two orders arrive between polls
    3. The next poll raises ONE "Novas vendas!" toast with the sale sound
    4. The toast disappears after 8 seconds
    """
    print("\n" + "=" * 70)
    print("DEMO: New sale detection")
    print("=" * 70 + "\n")

    store = _scratch_store(source_dir)
    scheduler = ManualScheduler()
    player = SoundPlayer()
    session = OperatorSession(store, scheduler, operator="Demo", sound_player=player)
    session.notifications.subscribe(_print_toast)
    session.start()

    baseline = session.detector.baseline
    print(f"\nBaseline: {baseline.last_order_count} orders, {baseline.last_customer_count} customers\n")

    print("-" * 70)
    print("ACTION: Storefront receives two orders")
    print("-" * 70)
    orders = store.read(Collections.ORDERS)
    for n in (1, 2):
        orders.append({
            "id": f"ord_demo_{n}",
            "customer": {"name": f"Cliente Demo {n}", "email": f"demo{n}@example.com"},
            "items": [{"name": "Faca Campeira", "price": 189.9, "quantity": 1}],
            "total": 189.9,
            "status": "waiting_payment",
            "status_history": [],
        })
    store.write(Collections.ORDERS, orders)

    scheduler.advance(10)
    toasts = session.notifications.list()
    print(f"\nLive toasts after next poll: {len(toasts)}")
    print(f"Sounds played: {player.played_keys()}")

    scheduler.advance(8)
    print(f"Live toasts 8s later: {len(session.notifications.list())}")

    session.end()
    return toasts


def run_status_update_demo(source_dir: Optional[Path] = None) -> list[dict]:
    """
    Demonstrate the status ledger.

    Moves the first order through paid -> shipped -> delivered and prints the
    resulting history.
    """
    print("\n" + "=" * 70)
    print("DEMO: Order status ledger")
    print("=" * 70 + "\n")

    store = _scratch_store(source_dir)
    scheduler = ManualScheduler()
    session = OperatorSession(store, scheduler, operator="Demo", sound_player=SoundPlayer(muted=True))
    session.notifications.subscribe(_print_toast)
    session.start()

    orders = store.get_orders()
    if not orders:
        print("No orders in sample data.")
        session.end()
        return []

    order_id = orders[0].id
    for status in ("paid", "shipped", "delivered"):
        session.update_order_status(order_id, status)

    order = store.get_order(order_id)
    print(f"\nHistory of {order_id}:")
    for entry in order.status_history:
        print(f"  {entry.timestamp:%Y-%m-%d %H:%M:%S}  {ORDER_CATALOG.label_of(entry.status):<22} by {entry.actor}")

    session.end()
    return [json.loads(e.model_dump_json()) for e in order.status_history]


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(name)-24s | %(levelname)-5s | %(message)s",
        datefmt="%H:%M:%S",
    )
    run_new_sale_demo()
    run_status_update_demo()
