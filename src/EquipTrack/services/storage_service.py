"""
Storage Service - the equipment record store.

The whole equipment collection lives under one key as a JSON array. Every
mutation is a read-modify-write of that array:

1. Read the full collection.
2. Change it in memory.
3. Write the full collection back in a single medium write.

A failed write leaves the previous blob untouched. Mutations made through
one StorageService are serialized with an asyncio.Lock so two overlapping
flows cannot overwrite each other's changes.

The store knows nothing about the change log; callers append audit entries.
"""

import asyncio
import json
from typing import Any, Callable, Dict, List, Optional, Tuple

from pydantic.alias_generators import to_snake

from EquipTrack.database.medium import PersistenceMedium
from EquipTrack.exceptions import StorageUnavailableError, ValidationFailedError
from EquipTrack.logging_config import get_logger
from EquipTrack.models import DeletionReason, Equipment, EquipmentStatus
from EquipTrack.utils import now_ms

logger = get_logger(__name__)


# Stable storage keys
EQUIPMENT_KEY = "@equipment_data"
CHANGELOG_KEY = "@changelog_data"
USER_KEY = "@user_data"
LANGUAGE_KEY = "@app_language"

# Fields the edit flow may never change
IMMUTABLE_FIELDS = ("id", "created_at")


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================


async def read_collection(medium: PersistenceMedium, key: str, model) -> list:
    """
    Read and decode a stored JSON array.

    Returns:
        List of model instances, empty when the key was never written

    Raises:
        StorageUnavailableError: Medium unreadable or blob undecodable
    """
    raw = await medium.get_item(key)
    if not raw:
        return []

    try:
        return [model.model_validate(item) for item in json.loads(raw)]
    except (ValueError, TypeError) as e:
        logger.error(f"Stored data under '{key}' could not be decoded: {e}")
        raise StorageUnavailableError(f"Stored data under '{key}' is corrupt") from e


async def write_collection(medium: PersistenceMedium, key: str, items: list) -> None:
    """Encode and write a full collection. Raises StorageWriteFailedError."""
    await medium.set_item(key, json.dumps([item.to_storage() for item in items]))


def _find_index(items: List[Equipment], equipment_id: str) -> Optional[int]:
    for index, item in enumerate(items):
        if item.id == equipment_id:
            return index
    return None


# ============================================================================
# RECORD STORE
# ============================================================================


class StorageService:
    """Durable storage of the equipment collection."""

    def __init__(self, medium: PersistenceMedium, clock: Callable[[], int] = now_ms):
        self.medium = medium
        self.clock = clock
        self._write_lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_all_equipment(self) -> List[Equipment]:
        """
        Every record, soft-deleted ones included, in insertion order.

        Raises:
            StorageUnavailableError: If the medium cannot be read
        """
        return await read_collection(self.medium, EQUIPMENT_KEY, Equipment)

    async def get_active_equipment(self) -> List[Equipment]:
        return [e for e in await self.get_all_equipment() if not e.deleted]

    async def get_equipment_by_id(self, equipment_id: str) -> Optional[Equipment]:
        for item in await self.get_all_equipment():
            if item.id == equipment_id:
                return item
        return None

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def save_equipment(self, equipment: List[Equipment]) -> None:
        """
        Replace the stored collection with ``equipment``, in the given order.

        Raises:
            StorageWriteFailedError: If the collection cannot be written; the
                previous collection stays in place
        """
        async with self._write_lock:
            await write_collection(self.medium, EQUIPMENT_KEY, equipment)

        logger.info(f"Equipment collection replaced ({len(equipment)} records)")

    async def add_equipment(self, equipment: Equipment) -> None:
        """
        Append a new record.

        Id uniqueness is the caller's job; a duplicate id is stored as a
        second record.

        Raises:
            StorageWriteFailedError: If the collection cannot be written
        """
        async with self._write_lock:
            all_equipment = await self.get_all_equipment()
            all_equipment.append(equipment)
            await write_collection(self.medium, EQUIPMENT_KEY, all_equipment)

        logger.info(f"Equipment added: {equipment.tag} ({equipment.id})")

    async def update_equipment(self, equipment_id: str, updates: Dict[str, Any]) -> Optional[Equipment]:
        """
        Merge ``updates`` into the matching record and refresh ``updatedAt``.

        Keys may be camelCase or snake_case. ``id`` and ``createdAt`` are
        ignored.

        Returns:
            The updated record, or None (nothing written) for an unknown id

        Raises:
            ValidationFailedError: Unknown field, or the merged record is invalid
            StorageWriteFailedError: If the collection cannot be written
        """
        change = await self._merge_update(equipment_id, updates)
        return change[1] if change else None

    async def update_status(
        self, equipment_id: str, status: EquipmentStatus
    ) -> Optional[Tuple[Equipment, Equipment]]:
        """
        Set a new status.

        Returns:
            (previous, updated) read and written under the same lock, or
            None (nothing written) for an unknown id
        """
        return await self._merge_update(equipment_id, {"status": status})

    async def _merge_update(
        self, equipment_id: str, updates: Dict[str, Any]
    ) -> Optional[Tuple[Equipment, Equipment]]:
        async with self._write_lock:
            all_equipment = await self.get_all_equipment()
            index = _find_index(all_equipment, equipment_id)
            if index is None:
                logger.info(f"Update skipped, equipment not found: {equipment_id}")
                return None

            previous = all_equipment[index]
            merged = previous.model_dump()
            for key, value in updates.items():
                field = to_snake(key)
                if field in IMMUTABLE_FIELDS:
                    logger.warning(f"Ignoring update of immutable field '{key}' on {equipment_id}")
                    continue
                if field not in Equipment.model_fields:
                    raise ValidationFailedError(f"Unknown equipment field '{key}'", field=key)
                merged[field] = value

            merged["updated_at"] = self.clock()
            updated = _build(merged)

            all_equipment[index] = updated
            await write_collection(self.medium, EQUIPMENT_KEY, all_equipment)

        logger.info(f"Equipment updated: {updated.tag} ({equipment_id})")
        return previous, updated

    async def delete_equipment(
        self, equipment_id: str, reason: DeletionReason, details: Optional[str] = None
    ) -> Optional[Equipment]:
        """
        Soft delete: the record stays in storage with ``deleted = True``.

        Returns:
            The deleted record, or None (nothing written) for an unknown id
        """
        async with self._write_lock:
            all_equipment = await self.get_all_equipment()
            index = _find_index(all_equipment, equipment_id)
            if index is None:
                logger.info(f"Delete skipped, equipment not found: {equipment_id}")
                return None

            merged = all_equipment[index].model_dump()
            merged.update(
                deleted=True,
                deletion_reason=reason,
                deletion_details=details,
                updated_at=self.clock(),
            )
            deleted = _build(merged)

            all_equipment[index] = deleted
            await write_collection(self.medium, EQUIPMENT_KEY, all_equipment)

        reason_value = deleted.deletion_reason.value
        logger.info(f"Equipment soft-deleted: {deleted.tag} ({equipment_id}), reason: {reason_value}")
        return deleted


def _build(fields: Dict[str, Any]) -> Equipment:
    try:
        return Equipment.model_validate(fields)
    except ValueError as e:
        raise ValidationFailedError(f"Invalid equipment record: {e}") from e
