"""
Equipment Service - Business logic behind the equipment screens.

This layer handles:
- Input validation (before anything touches storage)
- Orchestration: record store mutation, then change-log append
- Notifications for status updates and overdue equipment
- Converting exceptions to structured responses for the UI

Every flow returns a dictionary:

    {
        "success": True/False,
        "message": "...",
        "error_type": ErrorTypes.*,   # only on failure
        ...                           # flow-specific data
    }

Change-log writes are best-effort: a failed append is logged and the
already-saved record mutation stands.
"""

from datetime import date
from typing import Any, Callable, Dict, List, Optional

from EquipTrack.exceptions import (
    ExportUnavailableError,
    StorageError,
    StorageUnavailableError,
    ValidationFailedError,
)
from EquipTrack.i18n import Translator
from EquipTrack.logging_config import get_logger
from EquipTrack.messages import (
    EquipmentMessages,
    ErrorTypes,
    NotificationMessages,
    SystemMessages,
    format_message,
)
from EquipTrack.models import ChangeAction, ChangeLogEntry, Equipment
from EquipTrack.services.audit_service import AuditService
from EquipTrack.services.export_service import export_to_csv, export_to_workbook
from EquipTrack.services.notification_service import NotificationService
from EquipTrack.services.overdue_service import DEFAULT_THRESHOLD_DAYS, check_overdue_equipment
from EquipTrack.services.storage_service import StorageService
from EquipTrack.services.summary_service import calculate_summaries, get_active_equipment
from EquipTrack.utils import generate_id, now_ms
from EquipTrack.validation_rules import validate_deletion, validate_equipment_input, validate_status

logger = get_logger(__name__)


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================


def _failure(message: str, error_type: str, **extra) -> Dict[str, Any]:
    result = {"success": False, "message": message, "error_type": error_type}
    result.update(extra)
    return result


def _not_found(equipment_id: str) -> Dict[str, Any]:
    return _failure(
        format_message(EquipmentMessages.EQUIPMENT_NOT_FOUND, equipment_id=equipment_id),
        ErrorTypes.NOT_FOUND,
    )


def _json_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Enum members -> values, for change-log payloads."""
    return {key: getattr(value, "value", value) for key, value in fields.items()}


def matches_query(item: Equipment, query: str) -> bool:
    query = query.strip().lower()
    return any(
        query in value.lower()
        for value in (item.tag, item.plant_code, item.type.value, item.status.value)
    )


# ============================================================================
# SERVICE
# ============================================================================


class EquipmentService:
    """Add / edit / status change / delete / list / export flows."""

    def __init__(
        self,
        storage: StorageService,
        audit: AuditService,
        notifications: NotificationService,
        translator: Optional[Translator] = None,
        clock: Callable[[], int] = now_ms,
        id_factory: Callable[[], str] = generate_id,
        overdue_threshold_days: int = DEFAULT_THRESHOLD_DAYS,
        export_dir: str = "exports",
        share_channel=None,
    ):
        self.storage = storage
        self.audit = audit
        self.notifications = notifications
        self.translator = translator or Translator()
        self.clock = clock
        self.id_factory = id_factory
        self.overdue_threshold_days = overdue_threshold_days
        self.export_dir = export_dir
        self.share_channel = share_channel

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _record_change(
        self, equipment_id: str, action: ChangeAction, changes: Dict[str, Any]
    ) -> Optional[ChangeLogEntry]:
        try:
            return await self.audit.record(equipment_id, action, changes)
        except StorageError as e:
            logger.error(
                f"Change log write failed for {action.value} on {equipment_id}: {e.message}",
                exc_info=True,
            )
            return None

    async def _load_all(self) -> List[Equipment]:
        try:
            return await self.storage.get_all_equipment()
        except StorageUnavailableError as e:
            logger.error(f"{SystemMessages.STORAGE_UNAVAILABLE} ({e.message})", exc_info=True)
            return []

    async def _notify_status(self, equipment: Equipment) -> None:
        t = self.translator.t
        await self.notifications.schedule_notification(
            t("newUpdate"),
            format_message(
                NotificationMessages.STATUS_UPDATE_BODY, tag=equipment.tag, status=t(equipment.status)
            ),
        )

    # ------------------------------------------------------------------
    # Mutating flows
    # ------------------------------------------------------------------

    async def add_equipment(
        self, tag: str, plant, equipment_type, status, comments: str = ""
    ) -> Dict[str, Any]:
        """
        Create a new equipment record.

        Returns:
            {"success": True, "message": ..., "equipment": Equipment, "change_log": entry or None}
        """
        try:
            fields = validate_equipment_input(tag, plant, equipment_type, status, comments)
            now = self.clock()
            equipment = Equipment(id=self.id_factory(), created_at=now, updated_at=now, **fields)
            await self.storage.add_equipment(equipment)

        except ValidationFailedError as e:
            logger.warning(f"Validation error while adding equipment: {e.message}")
            return _failure(e.message, ErrorTypes.VALIDATION, field=e.field)
        except StorageError as e:
            logger.error(f"Error adding equipment: {e.message}", exc_info=True)
            return _failure(EquipmentMessages.SAVE_FAILED, ErrorTypes.STORAGE)

        entry = await self._record_change(equipment.id, ChangeAction.CREATE, equipment.to_storage())

        return {
            "success": True,
            "message": self.translator.t("equipmentAdded"),
            "equipment": equipment,
            "change_log": entry,
        }

    async def update_equipment(
        self, equipment_id: str, tag: str, plant, equipment_type, status, comments: str = ""
    ) -> Dict[str, Any]:
        """
        Save the edit form for one record and notify about the new status.

        An unknown id writes nothing and logs nothing.
        """
        try:
            fields = validate_equipment_input(tag, plant, equipment_type, status, comments)
            updated = await self.storage.update_equipment(equipment_id, fields)

        except ValidationFailedError as e:
            logger.warning(f"Validation error while updating {equipment_id}: {e.message}")
            return _failure(e.message, ErrorTypes.VALIDATION, field=e.field)
        except StorageError as e:
            logger.error(f"Error updating equipment {equipment_id}: {e.message}", exc_info=True)
            return _failure(EquipmentMessages.UPDATE_FAILED, ErrorTypes.STORAGE)

        if updated is None:
            return _not_found(equipment_id)

        entry = await self._record_change(equipment_id, ChangeAction.UPDATE, _json_fields(fields))
        await self._notify_status(updated)

        return {
            "success": True,
            "message": self.translator.t("equipmentUpdated"),
            "equipment": updated,
            "change_log": entry,
        }

    async def change_status(self, equipment_id: str, status) -> Dict[str, Any]:
        """Quick status update; logged as STATUS_CHANGE with the previous status."""
        try:
            new_status = validate_status(status)
            change = await self.storage.update_status(equipment_id, new_status)

        except ValidationFailedError as e:
            logger.warning(f"Validation error while changing status of {equipment_id}: {e.message}")
            return _failure(e.message, ErrorTypes.VALIDATION, field=e.field)
        except StorageError as e:
            logger.error(f"Error changing status of {equipment_id}: {e.message}", exc_info=True)
            return _failure(EquipmentMessages.UPDATE_FAILED, ErrorTypes.STORAGE)

        if change is None:
            return _not_found(equipment_id)

        previous, updated = change
        entry = await self._record_change(
            equipment_id,
            ChangeAction.STATUS_CHANGE,
            {"status": new_status.value, "previousStatus": previous.status.value},
        )
        await self._notify_status(updated)

        return {
            "success": True,
            "message": self.translator.t("newUpdate"),
            "equipment": updated,
            "change_log": entry,
        }

    async def delete_equipment(
        self, equipment_id: str, reason, details: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Soft delete one record.

        Details are required for (and only kept with) the OTHER reason.
        """
        try:
            reason, details = validate_deletion(reason, details)
            deleted = await self.storage.delete_equipment(equipment_id, reason, details)

        except ValidationFailedError as e:
            logger.warning(f"Validation error while deleting {equipment_id}: {e.message}")
            return _failure(e.message, ErrorTypes.VALIDATION, field=e.field)
        except StorageError as e:
            logger.error(f"Error deleting equipment {equipment_id}: {e.message}", exc_info=True)
            return _failure(EquipmentMessages.DELETE_FAILED, ErrorTypes.STORAGE)

        if deleted is None:
            return _not_found(equipment_id)

        entry = await self._record_change(
            equipment_id,
            ChangeAction.DELETE,
            {"deletionReason": reason.value, "deletionDetails": details},
        )

        return {
            "success": True,
            "message": self.translator.t("equipmentDeleted"),
            "equipment": deleted,
            "change_log": entry,
        }

    # ------------------------------------------------------------------
    # Read flows (degrade to empty results when storage is unreadable)
    # ------------------------------------------------------------------

    async def list_equipment(self, include_deleted: bool = False) -> List[Equipment]:
        all_equipment = await self._load_all()
        if include_deleted:
            return all_equipment
        return get_active_equipment(all_equipment)

    async def get_equipment(self, equipment_id: str) -> Optional[Equipment]:
        for item in await self._load_all():
            if item.id == equipment_id:
                return item
        return None

    async def search_equipment(self, query: str) -> List[Equipment]:
        """Active records whose tag, plant, type or status contains ``query``."""
        active = await self.list_equipment()
        if not query or not query.strip():
            return active
        return [item for item in active if matches_query(item, query)]

    async def get_change_logs(self, equipment_id: Optional[str] = None) -> List[ChangeLogEntry]:
        try:
            if equipment_id is None:
                return await self.audit.get_all_change_logs()
            return await self.audit.get_logs_for_equipment(equipment_id)
        except StorageUnavailableError as e:
            logger.error(f"Error getting change logs: {e.message}", exc_info=True)
            return []

    async def load_dashboard(self) -> Dict[str, Any]:
        """
        Home screen data: active equipment, per-plant summaries and the
        overdue check (which notifies when anything is overdue).
        """
        active = await self.list_equipment()
        overdue_count = await check_overdue_equipment(
            active, self.notifications, now=self.clock(), threshold_days=self.overdue_threshold_days
        )
        return {
            "equipment": active,
            "summaries": calculate_summaries(active),
            "overdue_count": overdue_count,
        }

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    async def export_equipment(self, fmt: str = "csv", today: Optional[date] = None) -> Dict[str, Any]:
        """
        Export a fresh snapshot of the active equipment and share it.

        Args:
            fmt: "csv" or "xlsx"
        """
        exporters = {"csv": export_to_csv, "xlsx": export_to_workbook}
        if fmt not in exporters:
            return _failure(f"Unsupported export format '{fmt}'", ErrorTypes.VALIDATION, field="fmt")

        try:
            snapshot = await self.storage.get_all_equipment()
            path = exporters[fmt](
                snapshot,
                self.translator.t,
                self.translator.format_date,
                self.export_dir,
                self.share_channel,
                today,
            )
        except StorageUnavailableError as e:
            logger.error(f"Export error: {e.message}", exc_info=True)
            return _failure(self.translator.t("exportError"), ErrorTypes.STORAGE)
        except ExportUnavailableError as e:
            logger.error(f"Export error: {e.message}")
            return _failure(f"{self.translator.t('exportError')}: {e.message}", ErrorTypes.EXPORT)
        except Exception as e:
            # Unexpected error - catch-all so the screen always gets a result
            logger.error(f"Unexpected export error ({fmt}): {e}", exc_info=True)
            return _failure(SystemMessages.UNEXPECTED_ERROR, ErrorTypes.APPLICATION)

        return {"success": True, "message": self.translator.t("exportSuccess"), "path": path}
