"""
Append-only status history for orders and shipments.

Every status change becomes a LedgerEntry appended to the record's history,
and the record's status field is set to match. Entries are never edited or
removed, so the history is the audit trail of who changed what and when.

The ledger only touches the in-memory record. Writing it back to the store
is the caller's job (see StatusService).
"""

import logging
from typing import Optional

from shared.models import LedgerEntry, LedgerRecord, utcnow

logger = logging.getLogger("ledger")


class Ledger:
    """Operations on a record's status history."""

    @staticmethod
    def append(
        record: LedgerRecord,
        new_status: str,
        actor: str,
        description: Optional[str] = None,
        location: Optional[str] = None,
        details: Optional[str] = None,
    ) -> LedgerEntry:
        """
        Record a status change.

        Appends exactly one entry stamped with the current time, sets the
        record's status to new_status and bumps updated_at.

        Returns:
            The appended entry.
        """
        entry = LedgerEntry(
            status=str(new_status),
            timestamp=utcnow(),
            actor=actor,
            description=description,
            location=location,
            details=details,
        )
        history = getattr(record, record.HISTORY_FIELD)
        history.append(entry)
        setattr(record, record.STATUS_FIELD, entry.status)
        record.updated_at = entry.timestamp

        logger.debug(f"{type(record).__name__} {record.id}: +{entry.status} by {actor} ({len(history)} entries)")
        return entry

    @staticmethod
    def open(
        record: LedgerRecord,
        status: str,
        actor: str,
        description: Optional[str] = None,
        location: Optional[str] = None,
        details: Optional[str] = None,
    ) -> LedgerEntry:
        """
        Write the first entry of a new record.

        Raises:
            ValueError: If the record already has history.
        """
        if getattr(record, record.HISTORY_FIELD):
            raise ValueError(f"{type(record).__name__} {record.id} already has history")
        return Ledger.append(record, status, actor, description, location, details)

    @staticmethod
    def current_entry(record: LedgerRecord) -> Optional[LedgerEntry]:
        """The most recent entry, or None for a record never updated."""
        history = getattr(record, record.HISTORY_FIELD)
        return history[-1] if history else None
