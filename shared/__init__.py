"""
Shared infrastructure for the store operator console.

This package contains code used by the console core, the API and the CLI:
- Domain models (OrderRecord, TrackingRecord, LedgerEntry, Notification, etc.)
- Data store for JSON-backed collections
- Status catalogs with display labels
- Audio cue players, admin tokens and settings
"""

from shared.models import (
    Customer,
    LedgerEntry,
    Notification,
    NotificationCategory,
    NotificationRequest,
    OrderRecord,
    TrackingRecord,
)
from shared.data_store import Collections, DataStore
from shared.errors import ConsoleError, StoreError, StoreReadError, StoreWriteError, TrackingAPIError
from shared.status_catalog import ORDER_CATALOG, TRACKING_CATALOG, OrderStatus, StatusCatalog, TrackingStatus

__all__ = [
    "Customer",
    "LedgerEntry",
    "Notification",
    "NotificationCategory",
    "NotificationRequest",
    "OrderRecord",
    "TrackingRecord",
    "Collections",
    "DataStore",
    "ConsoleError",
    "StoreError",
    "StoreReadError",
    "StoreWriteError",
    "TrackingAPIError",
    "ORDER_CATALOG",
    "TRACKING_CATALOG",
    "OrderStatus",
    "StatusCatalog",
    "TrackingStatus",
]
