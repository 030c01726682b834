"""
Status updates for orders and shipments.

An update is a read-modify-write of the whole collection: read every
record, append a ledger entry to the one being changed, write every record
back. There is no version check, so when two sessions update the same
collection at once the last write wins and the other change is lost. Only
this service mutates statuses; the storefront creates records and never
touches them again.

The stored dict is edited in place: status, history and updated_at change,
every other field (including ones the models would default) is written back
exactly as it was read.

Outcomes:
- record found: ledger entry appended, collection written, True
- record missing: nothing written, False (an expected outcome, not an error)
- store unreadable/unwritable: StoreError propagates to the caller
"""

import logging
from typing import Optional

from pydantic import ValidationError

from operator_console.ledger import Ledger
from operator_console.notification_queue import NotificationQueue
from shared.data_store import Collections, DataStore
from shared.errors import StoreReadError
from shared.models import LedgerRecord, NotificationCategory, OrderRecord, TrackingRecord, utcnow
from shared.status_catalog import ORDER_CATALOG, TRACKING_CATALOG, StatusCatalog

logger = logging.getLogger("status_service")


class StatusService:
    """
    Changes the status of records in one collection.

    Subclasses pick the collection, the record model and the status catalog.
    """

    collection: str = ""
    model: type[LedgerRecord] = LedgerRecord
    catalog: StatusCatalog = ORDER_CATALOG

    def __init__(
        self,
        data_store: DataStore,
        notifications: Optional[NotificationQueue] = None,
    ):
        """
        Initialize the service.

        Args:
            data_store: Store holding the collection
            notifications: When given, every successful update pushes a
                          confirmation toast here
        """
        self.data_store = data_store
        self.notifications = notifications

    def update_status(
        self,
        record_id: str,
        new_status: str,
        actor: str,
        description: Optional[str] = None,
        location: Optional[str] = None,
        details: Optional[str] = None,
    ) -> bool:
        """
        Change a record's status and append it to the record's history.

        Returns:
            True if the record was found and written back, False otherwise.
        """
        return self.apply(record_id, new_status, actor, description, location, details) is not None

    def apply(
        self,
        record_id: str,
        new_status: str,
        actor: str,
        description: Optional[str] = None,
        location: Optional[str] = None,
        details: Optional[str] = None,
    ) -> Optional[LedgerRecord]:
        """
        Same as update_status, returning the updated record (or None).
        """
        raw_records = self.data_store.read(self.collection)
        index = next(
            (i for i, r in enumerate(raw_records) if r.get("id") == record_id),
            None,
        )
        if index is None:
            logger.warning(f"{self.model.__name__} not found: {record_id}")
            return None

        raw = raw_records[index]
        try:
            record = self.model.model_validate(raw)
        except ValidationError as e:
            raise StoreReadError(self.collection, f"record {record_id}: {e}") from e

        new_status = str(getattr(new_status, "value", new_status))
        if not self.catalog.is_known(new_status):
            logger.debug(f"Unrecognized {self.catalog.name} status accepted: {new_status}")

        previous = record.status_value
        if location is None:
            location = self.default_location(record)
        entry = Ledger.append(record, new_status, actor, description, location, details)

        # Only the status, the new entry and updated_at change in the stored dict
        stored_entry = entry.model_dump(mode="json")
        raw[record.STATUS_FIELD] = entry.status
        raw[record.HISTORY_FIELD] = list(raw.get(record.HISTORY_FIELD) or []) + [stored_entry]
        raw["updated_at"] = stored_entry["timestamp"]
        self.data_store.write(self.collection, raw_records)

        logger.info(f"{self.model.__name__} {record_id}: {previous} -> {new_status} (by {actor})")
        self._confirm(record)
        return record

    def default_location(self, record: LedgerRecord) -> Optional[str]:
        """Location recorded when the caller gives none."""
        return None

    def confirmation(self, record: LedgerRecord) -> tuple[str, str]:
        """Title and message of the confirmation toast."""
        label = self.catalog.label_of(record.status_value)
        return "Status atualizado", f"Registro {record.id} atualizado para {label}"

    def _confirm(self, record: LedgerRecord) -> None:
        if self.notifications is None:
            return
        title, message = self.confirmation(record)
        self.notifications.notify(NotificationCategory.SUCCESS, title, message)


class OrderStatusService(StatusService):
    """Status updates on the orders collection."""

    collection = Collections.ORDERS
    model = OrderRecord
    catalog = ORDER_CATALOG

    def confirmation(self, record: LedgerRecord) -> tuple[str, str]:
        label = self.catalog.label_of(record.status_value)
        return "Status atualizado", f"Pedido {record.id} atualizado para {label}"


class TrackingStatusService(StatusService):
    """
    Status updates on shipment tracking records.

    Timeline entries always carry a location; when the operator leaves it
    blank the parcel's destination is used.
    """

    collection = Collections.TRACKINGS
    model = TrackingRecord
    catalog = TRACKING_CATALOG

    def default_location(self, record: LedgerRecord) -> Optional[str]:
        return record.destination

    def confirmation(self, record: LedgerRecord) -> tuple[str, str]:
        label = self.catalog.label_of(record.status_value)
        return "Rastreio atualizado", f"Rastreio {record.tracking_code} atualizado para {label}"

    def update_destination(
        self,
        record_id: str,
        city: Optional[str] = None,
        state: Optional[str] = None,
        cep: Optional[str] = None,
    ) -> Optional[TrackingRecord]:
        """
        Correct a shipment's destination without adding a timeline entry.

        Blank values leave the current ones untouched.

        Returns:
            The updated record, or None if it does not exist.
        """
        changes = {
            "destination_city": city,
            "destination_state": state,
            "destination_cep": cep,
        }
        changes = {k: v for k, v in changes.items() if v}

        def mutate(raw: dict) -> None:
            raw.update(changes)
            raw["updated_at"] = utcnow().isoformat()

        updated = self.data_store.update_record(self.collection, record_id, mutate)
        if updated is None:
            logger.warning(f"TrackingRecord not found: {record_id}")
            return None
        return TrackingRecord.model_validate(updated)
