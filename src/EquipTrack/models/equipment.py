# models/equipment.py
"""
Domain models for equipment records, change-log entries and summaries.

Stored blobs use camelCase keys (``createdAt``, ``deletionReason`` ...);
Python code uses the snake_case attribute names.
"""

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from .enums import ChangeAction, DeletionReason, EquipmentStatus, EquipmentType, Plant


class CamelModel(BaseModel):
    """Base model that reads/writes camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_storage(self) -> Dict[str, Any]:
        """Dictionary in the stored (camelCase, JSON-safe) format."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Equipment(CamelModel):
    """A single piece of equipment in a plant."""

    id: str
    tag: str
    # Unknown plant codes found in storage are kept as plain strings
    plant: Union[Plant, str] = Field(union_mode="left_to_right")
    type: EquipmentType
    status: EquipmentStatus
    comments: str = ""
    created_at: int
    updated_at: int
    deleted: bool = False
    deletion_reason: Optional[DeletionReason] = None
    deletion_details: Optional[str] = None

    @model_validator(mode="after")
    def check_deletion_fields(self):
        if not self.deleted and self.deletion_reason is not None:
            raise ValueError("an active record cannot carry a deletion reason")
        if self.deletion_reason == DeletionReason.OTHER and not (
            self.deletion_details or ""
        ).strip():
            raise ValueError("deletion reason OTHER requires deletion details")
        return self

    @property
    def is_active(self) -> bool:
        return not self.deleted

    @property
    def plant_code(self) -> str:
        return self.plant.value if isinstance(self.plant, Plant) else self.plant

    def __repr__(self):
        return (
            f"Equipment(id={self.id}, tag='{self.tag}', plant='{self.plant_code}', "
            f"type='{self.type.value}', status='{self.status.value}', deleted={self.deleted})"
        )


class DeviceInfo(CamelModel):
    """Device provenance captured at the moment of a mutating action."""

    device_name: str = "Unknown Device"
    network_descriptor: str = Field("Unknown", alias="ipAddress")
    platform: Optional[str] = None
    os_version: Optional[str] = None

    def for_change_log(self) -> "DeviceInfo":
        """Only the name and network descriptor are embedded in log entries."""
        return DeviceInfo(
            device_name=self.device_name,
            network_descriptor=self.network_descriptor,
        )


class ChangeLogEntry(CamelModel):
    """Append-only audit record. Never modified once stored."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    equipment_id: str
    action: ChangeAction
    timestamp: int
    changes: Dict[str, Any] = Field(default_factory=dict)
    device_info: DeviceInfo = Field(default_factory=DeviceInfo)

    def __repr__(self):
        return (
            f"ChangeLogEntry(id={self.id}, equipment_id={self.equipment_id}, "
            f"action='{self.action.value}', timestamp={self.timestamp})"
        )


class StatusSummary(CamelModel):
    """Per-plant status counts. Derived, never stored."""

    plant: Plant
    available: int = 0
    in_operation: int = 0
    not_available: int = 0
    in_workshop: int = 0
    total: int = 0

    def add(self, status: EquipmentStatus) -> None:
        self.total += 1
        if status == EquipmentStatus.AVAILABLE:
            self.available += 1
        elif status == EquipmentStatus.IN_OPERATION:
            self.in_operation += 1
        elif status == EquipmentStatus.NOT_AVAILABLE:
            self.not_available += 1
        elif status == EquipmentStatus.IN_WORKSHOP:
            self.in_workshop += 1
