from .storage_service import StorageService
from .audit_service import AuditService
from .notification_service import NotificationService
from .equipment_service import EquipmentService
from .profile_service import ProfileService
from .language_service import LanguageService
from . import export_service, overdue_service, summary_service

__all__ = [
    "StorageService",
    "AuditService",
    "NotificationService",
    "EquipmentService",
    "ProfileService",
    "LanguageService",
    "export_service",
    "overdue_service",
    "summary_service",
]
