#!/usr/bin/env python3
"""
Command-line interface for the store operator console.

Usage:
    python cli.py [command] [options]

Commands:
    demo             Run demo scenarios
    watch            Poll the store and print toasts as they arrive
    update-order     Change an order's status
    update-tracking  Append a tracking timeline entry
    statuses         List statuses with record counts
    token            Issue an admin token
    test             Run the test suite
    serve            Start the API server

Examples:
    python cli.py demo all
    python cli.py watch --interval 5
    python cli.py update-order ord_1 shipped --actor Maria
    python cli.py update-tracking 3f2a... in_transit "Objeto em trânsito"
    python cli.py serve --reload
"""

import argparse
import asyncio
import logging
import subprocess
import sys
from pathlib import Path
from typing import Optional


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(name)-24s | %(levelname)-5s | %(message)s",
        datefmt="%H:%M:%S",
    )


def _store(data_dir: Optional[str]):
    from shared.data_store import DataStore
    from shared.settings import get_settings
    return DataStore(Path(data_dir) if data_dir else get_settings().data_dir)


def run_demo(scenario: str) -> None:
    """Run a demo scenario."""
    from operator_console.demo import run_new_sale_demo, run_status_update_demo

    if scenario == "new-sale":
        run_new_sale_demo()
    elif scenario == "status-ledger":
        run_status_update_demo()
    elif scenario == "all":
        run_new_sale_demo()
        run_status_update_demo()
    else:
        print(f"Unknown scenario: {scenario}")
        sys.exit(1)


async def _watch(data_dir: Optional[str], interval: Optional[float], operator: Optional[str]) -> None:
    from operator_console.scheduler import AsyncioScheduler
    from operator_console.session import OperatorSession
    from shared.settings import get_settings
    from shared.sounds import BellSoundPlayer

    settings = get_settings()
    if interval:
        settings = settings.model_copy(update={"poll_interval_seconds": interval})

    session = OperatorSession(
        _store(data_dir),
        AsyncioScheduler(),
        operator=operator,
        sound_player=BellSoundPlayer(sounds=settings.sounds, muted=settings.muted),
        settings=settings,
    )
    session.notifications.subscribe(
        lambda n: print(f"[{n.category.value.upper():7}] {n.title} - {n.message}", flush=True)
    )
    session.start()
    print(f"Watching for new sales and customers every {settings.poll_interval_seconds:g}s (Ctrl+C to stop)")
    try:
        await asyncio.Event().wait()
    finally:
        session.end()


def run_watch(data_dir: Optional[str], interval: Optional[float], operator: Optional[str]) -> None:
    """Run a session until interrupted."""
    try:
        asyncio.run(_watch(data_dir, interval, operator))
    except KeyboardInterrupt:
        print("\nSession ended")


def run_update_order(data_dir: Optional[str], order_id: str, status: str, actor: Optional[str]) -> None:
    """Change an order's status and print its history."""
    from operator_console.ledger import Ledger
    from operator_console.status_service import OrderStatusService
    from shared.settings import get_settings
    from shared.status_catalog import ORDER_CATALOG

    order = OrderStatusService(_store(data_dir)).apply(order_id, status, actor or get_settings().operator_name)
    if order is None:
        print(f"Order not found: {order_id}")
        sys.exit(1)

    latest = Ledger.current_entry(order)
    print(f"Order {order.id}: {ORDER_CATALOG.label_of(order.status)} (by {latest.actor})")
    for entry in order.status_history:
        print(f"  {entry.timestamp:%Y-%m-%d %H:%M}  {ORDER_CATALOG.label_of(entry.status):<22} {entry.actor}")


def run_update_tracking(
    data_dir: Optional[str],
    tracking_id: str,
    status: str,
    description: str,
    location: Optional[str],
    details: Optional[str],
    actor: Optional[str],
) -> None:
    """Append a tracking timeline entry and print the timeline."""
    from operator_console.status_service import TrackingStatusService
    from shared.settings import get_settings
    from shared.status_catalog import TRACKING_CATALOG

    tracking = TrackingStatusService(_store(data_dir)).apply(
        tracking_id,
        status,
        actor or get_settings().operator_name,
        description=description,
        location=location,
        details=details,
    )
    if tracking is None:
        print(f"Tracking not found: {tracking_id}")
        sys.exit(1)

    print(f"{tracking.tracking_code}: {TRACKING_CATALOG.label_of(tracking.current_status)}")
    for entry in tracking.history:
        print(f"  {entry.timestamp:%Y-%m-%d %H:%M}  {entry.location or '':<24} {entry.description or ''}")


def run_statuses(data_dir: Optional[str]) -> None:
    """Print both status catalogs with how many stored records are in each status."""
    from shared.status_catalog import ORDER_CATALOG, ORDER_GROUPS, TRACKING_CATALOG, TRACKING_GROUPS, summarize

    store = _store(data_dir)
    families = [
        (ORDER_CATALOG, ORDER_GROUPS, [o.status for o in store.get_orders()]),
        (TRACKING_CATALOG, TRACKING_GROUPS, [t.current_status for t in store.get_trackings()]),
    ]
    for catalog, groups, statuses in families:
        counts = catalog.count_by_status(statuses)
        print(f"{catalog.name} statuses:")
        for value, label in catalog.options():
            print(f"  {value:<18} {label:<28} {catalog.category_of(value).value:<13} {counts.get(value, 0)}")
        print("  " + ", ".join(f"{group}: {n}" for group, n in summarize(statuses, groups).items()))
        print()


def run_token(admin_id: str, hours: Optional[float]) -> None:
    """Print a fresh admin token."""
    from shared.auth import generate_admin_token
    from shared.settings import get_settings

    print(generate_admin_token(admin_id, hours or get_settings().admin_token_ttl_hours))


def run_tests(args: list[str]) -> None:
    """Run the test suite."""
    cmd = [sys.executable, "-m", "pytest"] + args
    subprocess.run(cmd)


def run_server(host: str, port: int, reload: bool) -> None:
    """Start the API server."""
    cmd = [sys.executable, "-m", "uvicorn", "api.main:app", f"--host={host}", f"--port={port}"]
    if reload:
        cmd.append("--reload")

    print(f"Starting server at http://{host}:{port}")
    print(f"API docs available at http://{host}:{port}/docs")
    subprocess.run(cmd)


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Store Operator Console CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s demo new-sale
  %(prog)s watch --interval 5
  %(prog)s update-order ord_1 shipped
  %(prog)s token admin_001
  %(prog)s serve --reload
        """,
    )
    parser.add_argument("--data-dir", default=None, help="Directory holding the JSON collections")
    parser.add_argument("--log-level", default=None, help="Logging level (default from settings)")

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Demo command
    demo_parser = subparsers.add_parser("demo", help="Run demo scenarios")
    demo_parser.add_argument(
        "scenario",
        choices=["new-sale", "status-ledger", "all"],
        help="Which scenario to run",
    )

    # Watch command
    watch_parser = subparsers.add_parser("watch", help="Poll the store and print toasts")
    watch_parser.add_argument("--interval", type=float, default=None, help="Seconds between polls")
    watch_parser.add_argument("--operator", default=None, help="Operator name")

    # Update order command
    order_parser = subparsers.add_parser("update-order", help="Change an order's status")
    order_parser.add_argument("order_id")
    order_parser.add_argument("status")
    order_parser.add_argument("--actor", default=None)

    # Update tracking command
    tracking_parser = subparsers.add_parser("update-tracking", help="Append a tracking timeline entry")
    tracking_parser.add_argument("tracking_id")
    tracking_parser.add_argument("status")
    tracking_parser.add_argument("description")
    tracking_parser.add_argument("--location", default=None)
    tracking_parser.add_argument("--details", default=None)
    tracking_parser.add_argument("--actor", default=None)

    # Statuses command
    subparsers.add_parser("statuses", help="List statuses with record counts")

    # Token command
    token_parser = subparsers.add_parser("token", help="Issue an admin token")
    token_parser.add_argument("admin_id")
    token_parser.add_argument("--hours", type=float, default=None)

    # Test command
    test_parser = subparsers.add_parser("test", help="Run the test suite")
    test_parser.add_argument(
        "pytest_args",
        nargs="*",
        default=[],
        help="Arguments to pass to pytest",
    )

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Start the API server")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Host to bind to")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to bind to")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")

    args = parser.parse_args()

    from shared.settings import get_settings
    _configure_logging(args.log_level or get_settings().log_level)

    if args.command == "demo":
        run_demo(args.scenario)
    elif args.command == "watch":
        run_watch(args.data_dir, args.interval, args.operator)
    elif args.command == "update-order":
        run_update_order(args.data_dir, args.order_id, args.status, args.actor)
    elif args.command == "update-tracking":
        run_update_tracking(
            args.data_dir,
            args.tracking_id,
            args.status,
            args.description,
            args.location,
            args.details,
            args.actor,
        )
    elif args.command == "statuses":
        run_statuses(args.data_dir)
    elif args.command == "token":
        run_token(args.admin_id, args.hours)
    elif args.command == "test":
        run_tests(args.pytest_args)
    elif args.command == "serve":
        run_server(args.host, args.port, args.reload)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
