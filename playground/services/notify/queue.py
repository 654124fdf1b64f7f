"""In-memory notifier drained by the view layer.

The view layer polls ``GET /session/notifications`` and shows each entry
once, the way a browser shows a toast.
"""

import logging
from collections import deque

from common.config import settings
from playground.services.notify.provider import Notification, Notifier

logger = logging.getLogger(__name__)


class QueueNotifier(Notifier):
    """Buffers notifications until drained; the oldest are dropped when full."""

    def __init__(self, max_size: int | None = None):
        self._buffer: deque[Notification] = deque(
            maxlen=max_size or settings.notification_buffer_size
        )

    def notify(self, notification: Notification) -> None:
        logger.debug(
            "Queued notification",
            extra={"level": notification.level.value, "notification_message": notification.message},
        )
        self._buffer.append(notification)

    def drain(self) -> list[Notification]:
        """Return and clear all pending notifications, oldest first."""
        items = list(self._buffer)
        self._buffer.clear()
        return items

    def __len__(self) -> int:
        return len(self._buffer)
