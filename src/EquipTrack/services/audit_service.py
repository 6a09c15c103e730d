"""
Audit Service - append-only change log.

All change-log entries are append-only. No updates or deletions, no
compaction. Each entry is also written to the dedicated ``audit`` logger.
"""

import asyncio
from typing import Any, Callable, Dict, List, Optional

from EquipTrack.database.medium import PersistenceMedium
from EquipTrack.logging_config import get_audit_logger, get_logger
from EquipTrack.models import ChangeAction, ChangeLogEntry, DeviceInfo
from EquipTrack.services.device_service import get_device_info
from EquipTrack.services.storage_service import CHANGELOG_KEY, read_collection, write_collection
from EquipTrack.utils import generate_id, now_ms

logger = get_logger(__name__)
audit_logger = get_audit_logger()


class AuditService:
    """Append-only history of every equipment mutation."""

    def __init__(
        self,
        medium: PersistenceMedium,
        device_info_provider: Callable[[], DeviceInfo] = get_device_info,
        clock: Callable[[], int] = now_ms,
        id_factory: Callable[[], str] = generate_id,
    ):
        self.medium = medium
        self.device_info_provider = device_info_provider
        self.clock = clock
        self.id_factory = id_factory
        self._write_lock = asyncio.Lock()

    async def get_all_change_logs(self) -> List[ChangeLogEntry]:
        """
        Every entry in append order.

        Raises:
            StorageUnavailableError: If the medium cannot be read
        """
        return await read_collection(self.medium, CHANGELOG_KEY, ChangeLogEntry)

    async def get_logs_for_equipment(self, equipment_id: str) -> List[ChangeLogEntry]:
        """Entries for one equipment, newest first."""
        logs = [log for log in await self.get_all_change_logs() if log.equipment_id == equipment_id]
        return sorted(logs, key=lambda log: log.timestamp, reverse=True)

    async def append(self, entry: ChangeLogEntry) -> None:
        """
        Append one entry.

        Raises:
            StorageWriteFailedError: If the medium rejects the write
        """
        async with self._write_lock:
            logs = await self.get_all_change_logs()
            logs.append(entry)
            await write_collection(self.medium, CHANGELOG_KEY, logs)

        audit_logger.info(
            f"{entry.action.value} equipment={entry.equipment_id} "
            f"device='{entry.device_info.device_name}' ip={entry.device_info.network_descriptor} "
            f"changes={entry.changes}"
        )

    def build_entry(
        self, equipment_id: str, action: ChangeAction, changes: Optional[Dict[str, Any]] = None
    ) -> ChangeLogEntry:
        device_info = self.device_info_provider()
        return ChangeLogEntry(
            id=self.id_factory(),
            equipment_id=equipment_id,
            action=action,
            timestamp=self.clock(),
            changes=changes or {},
            device_info=device_info.for_change_log(),
        )

    async def record(
        self, equipment_id: str, action: ChangeAction, changes: Optional[Dict[str, Any]] = None
    ) -> ChangeLogEntry:
        """Build an entry with the current device info and append it."""
        entry = self.build_entry(equipment_id, action, changes)
        await self.append(entry)
        return entry
