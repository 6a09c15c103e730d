"""Application wiring for EquipTrack."""

from dataclasses import dataclass
from typing import Optional

from EquipTrack.config import Settings, settings as default_settings
from EquipTrack.database.medium import PersistenceMedium, SqlAlchemyMedium
from EquipTrack.database.session import create_session_factory
from EquipTrack.i18n import Translator
from EquipTrack.logging_config import get_logger, setup_audit_logger, setup_logging
from EquipTrack.services import (
    AuditService,
    EquipmentService,
    LanguageService,
    NotificationService,
    ProfileService,
    StorageService,
)
from EquipTrack.services.export_service import FolderShareChannel

logger = get_logger(__name__)


@dataclass
class EquipTrackApp:
    """All services of one running application, sharing one medium."""

    settings: Settings
    medium: PersistenceMedium
    storage: StorageService
    audit: AuditService
    notifications: NotificationService
    languages: LanguageService
    profiles: ProfileService
    equipment: EquipmentService

    async def set_language(self, language: str) -> Translator:
        """Persist a new language and switch the equipment flows to it."""
        translator = await self.languages.change_language(language)
        self.equipment.translator = translator
        return translator


async def create_app(
    app_settings: Optional[Settings] = None,
    medium: Optional[PersistenceMedium] = None,
    notification_sink=None,
    configure_logging: bool = True,
) -> EquipTrackApp:
    """
    Build every service from settings.

    Args:
        app_settings: Settings to use (defaults to the environment)
        medium: Override the SQLite medium (e.g. InMemoryMedium in tests)
        notification_sink: Where notifications go (defaults to the log)
        configure_logging: Install log handlers (off in tests)
    """
    app_settings = app_settings or default_settings

    if configure_logging:
        setup_logging(app_settings.LOG_LEVEL, app_settings.LOGS_DIR)
        setup_audit_logger(app_settings.LOGS_DIR)

    if medium is None:
        medium = SqlAlchemyMedium(create_session_factory(app_settings.DATABASE_URL))
        logger.info(f"Using database: {app_settings.DATABASE_URL}")

    storage = StorageService(medium)
    audit = AuditService(medium)
    notifications = NotificationService(notification_sink)
    languages = LanguageService(medium, app_settings.DEFAULT_LANGUAGE)
    profiles = ProfileService(medium)

    equipment = EquipmentService(
        storage,
        audit,
        notifications,
        translator=await languages.load_translator(),
        overdue_threshold_days=app_settings.OVERDUE_THRESHOLD_DAYS,
        export_dir=app_settings.EXPORT_DIR,
        share_channel=FolderShareChannel(app_settings.SHARE_DIR) if app_settings.SHARE_DIR else None,
    )

    return EquipTrackApp(
        settings=app_settings,
        medium=medium,
        storage=storage,
        audit=audit,
        notifications=notifications,
        languages=languages,
        profiles=profiles,
        equipment=equipment,
    )
