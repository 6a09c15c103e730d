"""
Label tables and date formatting for English and Spanish.

The active language is passed around explicitly (a Translator instance),
never kept in a module-level global.
"""

import re
from datetime import datetime
from typing import Dict

DEFAULT_LANGUAGE = "en"

TRANSLATIONS: Dict[str, Dict[str, str]] = {
    "en": {
        # Home screen
        "home": "Home",
        "uploadNewEquipment": "Upload New Equipment",
        "updateEquipmentStatus": "Update Equipment Status",
        "statusSummary": "Status Summary",
        "available": "Available",
        "inOperation": "In Operation",
        "notAvailable": "Not Available",
        "inWorkshop": "In Workshop",
        "total": "Total",
        # Equipment form
        "tag": "TAG",
        "plant": "Plant",
        "type": "Type",
        "status": "Status",
        "comments": "Comments",
        # Equipment types
        "PUMP": "Pump",
        "MOTOR": "Motor",
        "FAN": "Fan",
        "FAN COOLER": "Fan Cooler",
        "BLOWER": "Blower",
        "FURNACE": "Furnace",
        "HEAT EXCHANGER": "Heat Exchanger",
        "CONTROL VALVE": "Control Valve",
        "INSTRUMENT": "Instrument",
        "DRUM": "Drum",
        "TOWER": "Tower",
        "TANK": "Tank",
        # Status
        "AVAILABLE": "Available",
        "IN OPERATION": "In Operation",
        "NOT AVAILABLE": "Not Available",
        "IN WORKSHOP": "In Workshop",
        # Deletion
        "deleteEquipment": "Delete Equipment",
        "deletionReason": "Reason for Deletion",
        "UPLOAD ERROR": "Upload Error",
        "DEVICE DISASSEMBLED": "Device Disassembled",
        "OTHER": "Other",
        "provideDetails": "Please provide details",
        # Messages
        "equipmentAdded": "Equipment added successfully",
        "equipmentUpdated": "Equipment updated successfully",
        "equipmentDeleted": "Equipment deleted successfully",
        "exportSuccess": "Data exported successfully",
        "exportError": "Error exporting data",
        "noEquipment": "No equipment found",
        # Notifications
        "alertTitle": "Equipment Alert",
        "alertMessage": "equipment has been in {{status}} status for more than 30 days",
        "newUpdate": "Equipment status updated",
        # Validation
        "requiredField": "This field is required",
        "invalidTag": "Invalid TAG format",
    },
    "es": {
        "home": "Inicio",
        "uploadNewEquipment": "Cargar Nuevo Equipo",
        "updateEquipmentStatus": "Actualizar Estado del Equipo",
        "statusSummary": "Resumen de Estado",
        "available": "Disponible",
        "inOperation": "En Operación",
        "notAvailable": "No Disponible",
        "inWorkshop": "En Taller",
        "total": "Total",
        "tag": "TAG",
        "plant": "Planta",
        "type": "Tipo",
        "status": "Estado",
        "comments": "Comentarios",
        "PUMP": "Bomba",
        "MOTOR": "Motor",
        "FAN": "Ventilador",
        "FAN COOLER": "Ventilador Enfriador",
        "BLOWER": "Soplador",
        "FURNACE": "Horno",
        "HEAT EXCHANGER": "Intercambiador de Calor",
        "CONTROL VALVE": "Válvula de Control",
        "INSTRUMENT": "Instrumento",
        "DRUM": "Tambor",
        "TOWER": "Torre",
        "TANK": "Tanque",
        "AVAILABLE": "Disponible",
        "IN OPERATION": "En Operación",
        "NOT AVAILABLE": "No Disponible",
        "IN WORKSHOP": "En Taller",
        "deleteEquipment": "Eliminar Equipo",
        "deletionReason": "Razón de Eliminación",
        "UPLOAD ERROR": "Error de Carga",
        "DEVICE DISASSEMBLED": "Dispositivo Desmontado",
        "OTHER": "Otro",
        "provideDetails": "Por favor proporcione detalles",
        "equipmentAdded": "Equipo agregado exitosamente",
        "equipmentUpdated": "Equipo actualizado exitosamente",
        "equipmentDeleted": "Equipo eliminado exitosamente",
        "exportSuccess": "Datos exportados exitosamente",
        "exportError": "Error al exportar datos",
        "noEquipment": "No se encontró equipo",
        "alertTitle": "Alerta de Equipo",
        "alertMessage": "equipo ha estado en estado {{status}} por más de 30 días",
        "newUpdate": "Estado del equipo actualizado",
        "requiredField": "Este campo es obligatorio",
        "invalidTag": "Formato de TAG inválido",
    },
}

SUPPORTED_LANGUAGES = tuple(TRANSLATIONS)

_PLACEHOLDER = re.compile(r"\{\{\s*(\w+)\s*\}\}")


class Translator:
    """
    ``t(key)`` lookup for one language.

    Missing keys fall back to English, then to the key itself. Enum members
    are looked up by their value, so ``t(EquipmentStatus.IN_WORKSHOP)``
    works like ``t("IN WORKSHOP")``.
    """

    def __init__(self, language: str = DEFAULT_LANGUAGE):
        self.language = language if language in TRANSLATIONS else DEFAULT_LANGUAGE

    def t(self, key, **params) -> str:
        key = getattr(key, "value", key)
        text = TRANSLATIONS[self.language].get(key)
        if text is None:
            text = TRANSLATIONS[DEFAULT_LANGUAGE].get(key, key)
        if params:
            text = _PLACEHOLDER.sub(lambda m: str(params.get(m.group(1), m.group(0))), text)
        return text

    __call__ = t

    def format_date(self, timestamp_ms: int) -> str:
        return format_date(timestamp_ms, self.language)


def format_date(timestamp_ms: int, language: str = DEFAULT_LANGUAGE) -> str:
    """
    Calendar date in local time, no time component.

    English: M/D/YYYY, Spanish: D/M/YYYY.
    """
    d = datetime.fromtimestamp(timestamp_ms / 1000)
    if language == "es":
        return f"{d.day}/{d.month}/{d.year}"
    return f"{d.month}/{d.day}/{d.year}"
