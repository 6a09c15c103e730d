# services/overdue_service.py
"""
Overdue equipment monitor.

Equipment is overdue when it is active, its status is NOT AVAILABLE or
IN WORKSHOP, and it has not been updated for more than the threshold
(30 days by default). One aggregate notification is sent per check that
finds anything; repeated checks send it again.
"""

from typing import Iterable, List, Optional

from EquipTrack.logging_config import get_logger
from EquipTrack.messages import NotificationMessages, format_message
from EquipTrack.models import CRITICAL_STATUSES, Equipment
from EquipTrack.services.notification_service import NotificationService
from EquipTrack.utils import days_to_ms, now_ms

logger = get_logger(__name__)

DEFAULT_THRESHOLD_DAYS = 30


def is_overdue(item: Equipment, now: int, threshold_days: int = DEFAULT_THRESHOLD_DAYS) -> bool:
    return (
        not item.deleted
        and item.status in CRITICAL_STATUSES
        and item.updated_at < now - days_to_ms(threshold_days)
    )


def find_overdue_equipment(
    equipment: Iterable[Equipment], now: int, threshold_days: int = DEFAULT_THRESHOLD_DAYS
) -> List[Equipment]:
    return [item for item in equipment if is_overdue(item, now, threshold_days)]


async def check_overdue_equipment(
    equipment: Iterable[Equipment],
    notifications: NotificationService,
    now: Optional[int] = None,
    threshold_days: int = DEFAULT_THRESHOLD_DAYS,
) -> int:
    """
    Count overdue equipment and notify once if there is any.

    Args:
        equipment: Collection to scan (deleted records are ignored)
        notifications: Where the alert goes
        now: Current time in ms (defaults to the wall clock)
        threshold_days: Days in a critical status before alerting

    Returns:
        Number of overdue records
    """
    now = now_ms() if now is None else now
    overdue_count = len(find_overdue_equipment(equipment, now, threshold_days))

    if overdue_count > 0:
        logger.warning(f"{overdue_count} equipment item(s) overdue (threshold {threshold_days} days)")
        await notifications.schedule_notification(
            NotificationMessages.OVERDUE_TITLE,
            format_message(NotificationMessages.OVERDUE_BODY, count=overdue_count, days=threshold_days),
            {"overdueCount": overdue_count},
        )

    return overdue_count
