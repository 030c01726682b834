"""
Ephemeral toast notifications for one operator session.

The queue holds notifications in push order. Each entry gets its own
one-shot expiry timer; dismissing an entry cancels that timer. The
presentation layer either calls list() when it renders, or subscribes to be
told about every new notification.

Errors never leave the queue: a failing audio cue or subscriber is logged
and the push still succeeds.
"""

import itertools
import logging
import time
from collections import OrderedDict
from typing import Callable, Optional

from operator_console.scheduler import ScheduledTask, Scheduler
from shared.models import Notification, NotificationCategory, NotificationRequest
from shared.sounds import SoundPlayer

logger = logging.getLogger("notification_queue")

DEFAULT_TTL_MS = 5000

NotificationHandler = Callable[[Notification], None]

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


class NotificationQueue:
    """
    Ordered, self-expiring collection of notifications.

    Example:
        queue = NotificationQueue(scheduler)
        nid = queue.notify(NotificationCategory.ERROR, "Erro", "Falha ao salvar")
        queue.list()        # [Notification(id=nid, ...)]
        queue.dismiss(nid)  # removed now; the expiry timer is cancelled
    """

    def __init__(
        self,
        scheduler: Scheduler,
        sound_player: Optional[SoundPlayer] = None,
        default_ttl_ms: int = DEFAULT_TTL_MS,
    ):
        """
        Initialize the queue.

        Args:
            scheduler: Clock and timers for expiry
            sound_player: Plays audio cues; no cues are played when None
            default_ttl_ms: TTL for notifications that do not set their own
        """
        self.scheduler = scheduler
        self.sound_player = sound_player
        self.default_ttl_ms = default_ttl_ms

        self._entries: "OrderedDict[str, Notification]" = OrderedDict()
        self._timers: dict[str, ScheduledTask] = {}
        self._subscribers: list[NotificationHandler] = []
        self._seq = itertools.count(1)

    # =========================================================================
    # Push / dismiss
    # =========================================================================

    def _new_id(self, category: NotificationCategory) -> str:
        token = _base36(int(time.time() * 1000))
        return f"{token}{_base36(next(self._seq))}_{category.value}"

    def push(
        self,
        request: NotificationRequest,
        ttl_ms_default: Optional[int] = None,
        play_sound: bool = True,
    ) -> str:
        """
        Add a notification.

        Args:
            request: What to show
            ttl_ms_default: TTL when the request has none; falls back to the
                           queue default
            play_sound: False suppresses the audio cue

        Returns:
            The new notification's id.
        """
        ttl_ms = request.ttl_ms or ttl_ms_default or self.default_ttl_ms
        notification = Notification(
            id=self._new_id(request.category),
            category=request.category,
            title=request.title,
            message=request.message,
            created_at=self.scheduler.now(),
            ttl_ms=ttl_ms,
            sound_key=request.sound_key,
        )
        nid = notification.id

        self._entries[nid] = notification
        self._timers[nid] = self.scheduler.call_later(ttl_ms / 1000.0, self._expire, nid)
        logger.info(f"[{notification.category.value.upper()}] {notification.title}: {notification.message}")

        if play_sound:
            self._play(notification)
        self._publish(notification)
        return nid

    def notify(
        self,
        category: NotificationCategory,
        title: str,
        message: str = "",
        ttl_ms: Optional[int] = None,
        sound_key: Optional[str] = None,
        play_sound: bool = True,
    ) -> str:
        """Shorthand for push(NotificationRequest(...))."""
        request = NotificationRequest(
            category=category,
            title=title,
            message=message,
            ttl_ms=ttl_ms,
            sound_key=sound_key,
        )
        return self.push(request, play_sound=play_sound)

    def dismiss(self, notification_id: str) -> bool:
        """
        Remove a notification now, whatever its remaining TTL.

        Returns:
            True if it was present. Dismissing an unknown or already expired
            id is a no-op.
        """
        timer = self._timers.pop(notification_id, None)
        if timer is not None:
            timer.cancel()
        removed = self._entries.pop(notification_id, None) is not None
        if removed:
            logger.debug(f"Dismissed notification {notification_id}")
        return removed

    def _expire(self, notification_id: str) -> None:
        self._timers.pop(notification_id, None)
        if self._entries.pop(notification_id, None) is not None:
            logger.debug(f"Expired notification {notification_id}")

    def clear(self) -> None:
        """Remove every notification and cancel every pending expiry."""
        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()
        self._entries.clear()

    # =========================================================================
    # Reading
    # =========================================================================

    def list(self) -> list[Notification]:
        """
        Live notifications, oldest first.

        Entries whose TTL has elapsed are left out even if their expiry
        timer has not run yet.
        """
        now = self.scheduler.now()
        return [n for n in self._entries.values() if not n.is_expired(now)]

    def get(self, notification_id: str) -> Optional[Notification]:
        notification = self._entries.get(notification_id)
        if notification is None or notification.is_expired(self.scheduler.now()):
            return None
        return notification

    def __len__(self) -> int:
        return len(self.list())

    # =========================================================================
    # Subscriptions and sound
    # =========================================================================

    def subscribe(self, handler: NotificationHandler) -> None:
        """Call handler with every notification pushed from now on."""
        self._subscribers.append(handler)

    def unsubscribe(self, handler: NotificationHandler) -> bool:
        try:
            self._subscribers.remove(handler)
            return True
        except ValueError:
            return False

    def _publish(self, notification: Notification) -> None:
        for handler in list(self._subscribers):
            try:
                handler(notification)
            except Exception as e:
                logger.error(f"Notification subscriber raised for {notification.id}: {e}")

    def _play(self, notification: Notification) -> None:
        if self.sound_player is None:
            return
        key = notification.sound_key or notification.category.value
        try:
            self.sound_player.play(key)
        except Exception as e:
            logger.warning(f"Could not play sound '{key}': {e}")
