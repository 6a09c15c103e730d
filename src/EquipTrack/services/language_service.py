"""Persisted language selection."""

from EquipTrack.database.medium import PersistenceMedium
from EquipTrack.exceptions import StorageUnavailableError, ValidationFailedError
from EquipTrack.i18n import DEFAULT_LANGUAGE, SUPPORTED_LANGUAGES, Translator
from EquipTrack.logging_config import get_logger
from EquipTrack.messages import ValidationMessages, format_message
from EquipTrack.services.storage_service import LANGUAGE_KEY

logger = get_logger(__name__)


class LanguageService:
    def __init__(self, medium: PersistenceMedium, default_language: str = DEFAULT_LANGUAGE):
        self.medium = medium
        self.default_language = default_language

    async def load_language(self) -> str:
        """Saved language, or the default when none is saved or storage is unreadable."""
        try:
            saved = await self.medium.get_item(LANGUAGE_KEY)
        except StorageUnavailableError as e:
            logger.error(f"Error loading language: {e.message}")
            saved = None

        if saved in SUPPORTED_LANGUAGES:
            return saved
        return self.default_language

    async def load_translator(self) -> Translator:
        return Translator(await self.load_language())

    async def change_language(self, language: str) -> Translator:
        """
        Save a new language and return a translator for it.

        Raises:
            ValidationFailedError: Unsupported language
            StorageWriteFailedError: Selection could not be saved
        """
        if language not in SUPPORTED_LANGUAGES:
            raise ValidationFailedError(
                format_message(ValidationMessages.UNSUPPORTED_LANGUAGE, language=language),
                field="language",
            )

        await self.medium.set_item(LANGUAGE_KEY, language)
        logger.info(f"Language changed to '{language}'")
        return Translator(language)
