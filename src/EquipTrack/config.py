"""
Application Configuration
Load settings from environment variables (.env file)
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Every setting can be overridden with an ``EQUIPTRACK_`` prefixed
    variable, e.g. ``EQUIPTRACK_LOG_LEVEL=DEBUG``.
    Example: from EquipTrack.config import settings
    """

    # ========================================================================
    # DATABASE CONFIGURATION
    # ========================================================================

    DATABASE_URL: str = "sqlite:///equiptrack.db"
    """SQLAlchemy URL of the local key/value database"""

    # ========================================================================
    # APPLICATION CONFIGURATION
    # ========================================================================

    ENVIRONMENT: str = "development"
    """Environment: development, staging, or production"""

    LOG_LEVEL: str = "INFO"
    """Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL"""

    LOGS_DIR: str = "logs"
    """Directory for rotating log files"""

    # ========================================================================
    # EQUIPMENT RULES
    # ========================================================================

    OVERDUE_THRESHOLD_DAYS: int = 30
    """Days in a critical status before equipment is reported as overdue"""

    DEFAULT_LANGUAGE: str = "en"
    """Language used when no language has been saved yet"""

    # ========================================================================
    # EXPORT CONFIGURATION
    # ========================================================================

    EXPORT_DIR: str = "exports"
    """Where export files are written before being shared"""

    SHARE_DIR: Optional[str] = None
    """Folder exports are shared into; no share channel when unset"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="EQUIPTRACK_",
        case_sensitive=True,
        extra="ignore",  # Ignore extra env variables
    )


# ============================================================================
# INSTANTIATE SETTINGS
# ============================================================================

settings = Settings()
