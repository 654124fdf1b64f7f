"""User notification module.

Notifications are the transient counterpart of the session error slot.
The concrete implementation is determined by the NOTIFIER setting.
"""

from playground.services.notify.provider import (
    Notification,
    NotificationLevel,
    Notifier,
    get_notifier,
)

__all__ = [
    "Notification",
    "NotificationLevel",
    "Notifier",
    "get_notifier",
]
