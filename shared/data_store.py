"""
JSON-backed data store for the operator console.

The store is shared with the storefront and the other admin screens. The
console treats it as an opaque set of named collections, each a JSON array,
with two primitives: read the whole collection, write the whole collection.

Design decisions:
- One JSON file per collection under data_dir
- No caching: every read goes to disk, so the next read observes the last
  write, and nothing stronger is promised
- No locking, versioning or merging between concurrent writers; the last
  full-collection write wins
- A missing collection reads as empty; an unreadable one raises StoreReadError
"""

import json
import logging
from pathlib import Path
from typing import Any, Callable, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from shared.errors import StoreReadError, StoreWriteError
from shared.models import Customer, OrderRecord, TrackingRecord

logger = logging.getLogger("data_store")

ModelT = TypeVar("ModelT", bound=BaseModel)


class Collections:
    """Names of the persisted collections."""
    ORDERS = "orders"
    CUSTOMERS = "customers"
    TRACKINGS = "trackings"
    SETTINGS = "settings"
    ADMIN_SESSION = "admin_session"


class DataStore:
    """
    Read/write access to the persisted collections.

    Example:
        store = DataStore(Path("data"))
        orders = store.read(Collections.ORDERS)
        orders[0]["status"] = "paid"
        store.write(Collections.ORDERS, orders)
    """

    def __init__(self, data_dir: Optional[Path] = None):
        """
        Initialize the data store.

        Args:
            data_dir: Directory holding one <collection>.json file per
                     collection. Defaults to ./data relative to project root.
        """
        if data_dir is None:
            data_dir = Path(__file__).parent.parent / "data"

        self.data_dir = Path(data_dir)

    def _path(self, collection: str) -> Path:
        return self.data_dir / f"{collection}.json"

    # =========================================================================
    # Primitives
    # =========================================================================

    def read(self, collection: str) -> list[dict[str, Any]]:
        """
        Read a whole collection.

        Returns:
            The stored records, or an empty list if the collection was never
            written.

        Raises:
            StoreReadError: If the file cannot be read or is not a JSON array.
        """
        filepath = self._path(collection)
        if not filepath.exists():
            return []
        try:
            with open(filepath, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise StoreReadError(collection, str(e)) from e

        if not isinstance(data, list):
            raise StoreReadError(collection, "expected a JSON array")
        return data

    def write(self, collection: str, records: list[dict[str, Any]]) -> None:
        """
        Replace a whole collection.

        Raises:
            StoreWriteError: If the records cannot be serialized or written.
        """
        filepath = self._path(collection)
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            payload = json.dumps(records, ensure_ascii=False, indent=2)
            filepath.write_text(payload, encoding="utf-8")
        except (OSError, TypeError, ValueError) as e:
            raise StoreWriteError(collection, str(e)) from e
        logger.debug(f"Wrote {len(records)} records to '{collection}'")

    def count(self, collection: str) -> int:
        """Number of records in a collection."""
        return len(self.read(collection))

    # =========================================================================
    # Typed access
    # =========================================================================

    def read_models(self, collection: str, model: type[ModelT]) -> list[ModelT]:
        """
        Read a collection and parse every record into a model.

        Raises:
            StoreReadError: If a record does not fit the model.
        """
        try:
            return [model.model_validate(r) for r in self.read(collection)]
        except ValidationError as e:
            raise StoreReadError(collection, str(e)) from e

    def get_orders(self) -> list[OrderRecord]:
        """Get all orders, in stored (insertion) order."""
        return self.read_models(Collections.ORDERS, OrderRecord)

    def get_order(self, order_id: str) -> Optional[OrderRecord]:
        """Get an order by ID."""
        return next((o for o in self.get_orders() if o.id == order_id), None)

    def get_customers(self) -> list[Customer]:
        """Get all customers, in stored (insertion) order."""
        return self.read_models(Collections.CUSTOMERS, Customer)

    def get_trackings(self) -> list[TrackingRecord]:
        """Get all tracking records, in stored (insertion) order."""
        return self.read_models(Collections.TRACKINGS, TrackingRecord)

    def get_tracking(self, tracking_id: str) -> Optional[TrackingRecord]:
        """Get a tracking record by ID."""
        return next((t for t in self.get_trackings() if t.id == tracking_id), None)

    def find_tracking_by_code(self, code: str) -> Optional[TrackingRecord]:
        """
        Find a tracking record by tracking code or order number.

        Customers may type either one on the public tracking page, in any case.
        """
        code = code.upper()
        for tracking in self.get_trackings():
            if tracking.tracking_code == code or tracking.order_number == code:
                return tracking
        return None

    def update_record(
        self,
        collection: str,
        record_id: str,
        mutate: Callable[[dict[str, Any]], None],
    ) -> Optional[dict[str, Any]]:
        """
        Read-modify-write a single record by ID.

        Args:
            collection: Collection holding the record
            record_id: Value of the record's "id" field
            mutate: Called with the stored dict; changes it in place

        Returns:
            The mutated record, or None if no record has that ID (nothing is
            written in that case).
        """
        records = self.read(collection)
        for record in records:
            if record.get("id") == record_id:
                mutate(record)
                self.write(collection, records)
                return record
        return None

    def delete_record(self, collection: str, record_id: str) -> bool:
        """Remove a record by ID. Returns False if it did not exist."""
        records = self.read(collection)
        remaining = [r for r in records if r.get("id") != record_id]
        if len(remaining) == len(records):
            return False
        self.write(collection, remaining)
        return True


# Module-level singleton for convenience
# In tests, create a new DataStore instance pointing at a temp directory
_default_store: Optional[DataStore] = None


def get_data_store() -> DataStore:
    """Get the default data store singleton, rooted at the configured data_dir."""
    global _default_store
    if _default_store is None:
        from shared.settings import get_settings
        _default_store = DataStore(get_settings().data_dir)
    return _default_store


def reset_data_store(data_store: Optional[DataStore] = None) -> Optional[DataStore]:
    """Replace the default data store (useful for testing)."""
    global _default_store
    _default_store = data_store
    return _default_store
