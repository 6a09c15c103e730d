"""EquipTrack - on-device equipment inventory tracking."""

__version__ = "1.0.0"
