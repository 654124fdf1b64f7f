"""Abstract notifier interface and factory.

The concrete implementation is selected at runtime via the ``NOTIFIER``
setting, which must be the fully-qualified Python class name of a
:class:`Notifier` subclass (e.g.
``playground.services.notify.queue.QueueNotifier``).
"""

import importlib
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from functools import lru_cache

from common.config import settings

logger = logging.getLogger(__name__)


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@dataclass(frozen=True)
class Notification:
    """A transient message for the user (a toast, in a browser)."""

    level: NotificationLevel
    message: str
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))


class Notifier(ABC):
    """Receives user-facing notifications emitted by the session controller."""

    @abstractmethod
    def notify(self, notification: Notification) -> None:
        """Deliver one notification. Must not raise."""
        ...

    def success(self, message: str) -> None:
        self.notify(Notification(NotificationLevel.SUCCESS, message))

    def error(self, message: str) -> None:
        self.notify(Notification(NotificationLevel.ERROR, message))


def _load_notifier_class(class_path: str) -> type[Notifier]:
    """Resolve the ``NOTIFIER`` setting to a notifier class.

    Args:
        class_path: Dotted module path plus class name, e.g.
            ``"playground.services.notify.log.LogNotifier"``.

    Raises:
        ValueError: If the setting does not point at a Notifier implementation.
    """
    module_path, _, class_name = class_path.rpartition(".")
    if not module_path or not class_name:
        raise ValueError(
            f"NOTIFIER='{class_path}' does not name a notifier class; "
            f"expected 'package.module.ClassName'"
        )

    try:
        module = importlib.import_module(module_path)
    except ModuleNotFoundError as exc:
        raise ValueError(f"Notifier module '{module_path}' could not be imported: {exc}") from exc

    notifier_cls = getattr(module, class_name, None)
    if notifier_cls is None:
        raise ValueError(f"Notifier class '{class_name}' not found in '{module_path}'")

    if not isinstance(notifier_cls, type) or not issubclass(notifier_cls, Notifier):
        raise ValueError(
            f"NOTIFIER='{class_path}' resolves to a {type(notifier_cls).__name__}, "
            f"which does not implement Notifier"
        )

    return notifier_cls


@lru_cache
def get_notifier() -> Notifier:
    """Get the configured notifier instance.

    Falls back to :class:`LogNotifier` when ``NOTIFIER`` is empty.

    Raises:
        ValueError: If the class cannot be loaded or isn't a Notifier.
    """
    class_path = settings.notifier

    if not class_path:
        from playground.services.notify.log import LogNotifier

        logger.debug("Notifier not configured (NOTIFIER not set), using LogNotifier")
        return LogNotifier()

    notifier = _load_notifier_class(class_path)()
    logger.info(f"Notifications delivered by {type(notifier).__name__}")
    return notifier
