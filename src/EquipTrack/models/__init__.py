from .enums import (
    CRITICAL_STATUSES,
    ChangeAction,
    DeletionReason,
    EquipmentStatus,
    EquipmentType,
    Plant,
)
from .equipment import ChangeLogEntry, DeviceInfo, Equipment, StatusSummary

__all__ = [
    "Plant",
    "EquipmentType",
    "EquipmentStatus",
    "DeletionReason",
    "ChangeAction",
    "CRITICAL_STATUSES",
    "Equipment",
    "DeviceInfo",
    "ChangeLogEntry",
    "StatusSummary",
]
