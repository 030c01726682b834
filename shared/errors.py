"""
Exception types shared by the operator console.

Only conditions the caller must act on are exceptions. A missing record is
not one of them: services return None/False for that, the same way the data
store does.
"""

from typing import Optional


class ConsoleError(Exception):
    """Base class for all operator console errors."""


class StoreError(ConsoleError):
    """The backing store could not be read or written."""

    def __init__(self, collection: str, message: str):
        self.collection = collection
        super().__init__(f"{collection}: {message}")


class StoreReadError(StoreError):
    """A collection exists but could not be read or parsed."""


class StoreWriteError(StoreError):
    """A collection could not be written back."""


class TrackingAPIError(ConsoleError):
    """
    A tracking HTTP call failed.

    The message is the human-readable error from the response body when the
    server sent one, so it can be shown to the operator as-is.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)
