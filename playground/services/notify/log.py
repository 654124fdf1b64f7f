"""Notifier that writes notifications to the application log."""

import logging

from playground.services.notify.provider import Notification, NotificationLevel, Notifier

logger = logging.getLogger(__name__)


class LogNotifier(Notifier):
    """Logs errors at WARNING and everything else at INFO."""

    def notify(self, notification: Notification) -> None:
        level = logging.WARNING if notification.level is NotificationLevel.ERROR else logging.INFO
        logger.log(level, notification.message, extra={"notification": notification.level.value})
