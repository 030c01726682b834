"""
Operator console core.

This package holds the parts of the admin console with temporal behavior:
- ChangeDetector polls the store and announces new sales and customers
- NotificationQueue keeps self-expiring toasts and plays their cues
- Ledger and StatusService record every order/shipment status change
- OperatorSession ties them together for one logged-in operator
"""

from operator_console.change_detector import ChangeBaseline, ChangeDetector
from operator_console.ledger import Ledger
from operator_console.notification_queue import NotificationQueue
from operator_console.scheduler import AsyncioScheduler, ManualScheduler, ScheduledTask, Scheduler
from operator_console.session import OperatorSession
from operator_console.status_service import OrderStatusService, StatusService, TrackingStatusService
from operator_console.tracking import create_tracking, generate_tracking_code, new_tracking_record
from operator_console.tracking_client import TrackingClient

__all__ = [
    "ChangeBaseline",
    "ChangeDetector",
    "Ledger",
    "NotificationQueue",
    "AsyncioScheduler",
    "ManualScheduler",
    "ScheduledTask",
    "Scheduler",
    "OperatorSession",
    "OrderStatusService",
    "StatusService",
    "TrackingStatusService",
    "create_tracking",
    "generate_tracking_code",
    "new_tracking_record",
    "TrackingClient",
]
