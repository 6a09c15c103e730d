"""
Notification Service - local, fire-and-forget notifications.

Notifications are advisory. A sink that fails never breaks the flow that
triggered it: the failure is logged and the call returns False.
"""

import inspect
from typing import Any, Callable, Dict, List, Optional

from EquipTrack.exceptions import NotificationDeliveryFailedError
from EquipTrack.logging_config import get_logger

logger = get_logger(__name__)


# ============================================================================
# SINKS
# ============================================================================


class LoggingNotificationSink:
    """Writes notifications to the application log."""

    async def emit(self, title: str, body: str, data: Optional[Dict[str, Any]] = None) -> None:
        logger.info(f"[NOTIFICATION] {title}: {body}" + (f" {data}" if data else ""))


class CallbackNotificationSink:
    """
    Forwards notifications to a UI callback.

    The callback receives (title, body, data) and may be a plain function or
    a coroutine function.
    """

    def __init__(self, callback: Callable):
        self.callback = callback

    async def emit(self, title: str, body: str, data: Optional[Dict[str, Any]] = None) -> None:
        result = self.callback(title, body, data)
        if inspect.isawaitable(result):
            await result


class MemoryNotificationSink:
    """Keeps notifications in a list; used by tests and the console entry point."""

    def __init__(self):
        self.notifications: List[Dict[str, Any]] = []

    async def emit(self, title: str, body: str, data: Optional[Dict[str, Any]] = None) -> None:
        self.notifications.append({"title": title, "body": body, "data": data})


# ============================================================================
# SERVICE
# ============================================================================


class NotificationService:
    """Schedules notifications for immediate delivery through a sink."""

    def __init__(self, sink=None):
        self.sink = sink or LoggingNotificationSink()

    async def schedule_notification(
        self, title: str, body: str, data: Optional[Dict[str, Any]] = None
    ) -> bool:
        """
        Deliver a notification now.

        Returns:
            True if the sink accepted it, False otherwise (never raises)
        """
        try:
            await self._deliver(title, body, data)
            return True
        except NotificationDeliveryFailedError as e:
            logger.error(f"Error scheduling notification '{title}': {e.message}", exc_info=True)
            return False

    async def _deliver(self, title, body, data):
        try:
            await self.sink.emit(title, body, data)
        except Exception as e:
            raise NotificationDeliveryFailedError(str(e) or type(e).__name__) from e
