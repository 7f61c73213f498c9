"""
Outbound push notification delivery.

There is no APNs integration: ``LoggingNotificationSink`` logs each
notification and keeps the most recent ones in memory so they can be
inspected.  Routers hand notifications to the sink through FastAPI
background tasks, so delivery never delays the response.
"""

import logging
from collections import deque
from typing import Deque, List, Protocol

from ..schemas.device import PushNotification

logger = logging.getLogger(__name__)


class NotificationSink(Protocol):
    def send(self, notification: PushNotification) -> None:
        ...


class LoggingNotificationSink:
    """Mock push transport."""

    def __init__(self, history_size: int = 100) -> None:
        self._sent: Deque[PushNotification] = deque(maxlen=history_size)

    def send(self, notification: PushNotification) -> None:
        delivered = notification.model_copy(update={"status": "sent"})
        self._sent.append(delivered)
        logger.info(
            "Mock push notification %s sent to user %s (device %s): %s",
            delivered.id,
            delivered.user_id,
            delivered.masked_token,
            delivered.title,
        )

    @property
    def sent(self) -> List[PushNotification]:
        return list(self._sent)
