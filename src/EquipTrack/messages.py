"""
User-friendly messages for EquipTrack.

This module centralizes all user-facing messages to ensure consistency
and make it easy to update messaging across the application.
"""


class EquipmentMessages:
    """Messages related to equipment add/edit/delete flows."""

    EQUIPMENT_NOT_FOUND = "Equipment '{equipment_id}' was not found."
    SAVE_FAILED = "Failed to save equipment"
    UPDATE_FAILED = "Failed to update equipment"
    DELETE_FAILED = "Failed to delete equipment"


class ExportMessages:
    """Messages for exporting equipment data."""

    EXPORT_ERROR = "Error exporting data"
    SHARING_UNAVAILABLE = "Sharing is not available on this device"
    DIALOG_TITLE = "Export Equipment Data"


class NotificationMessages:
    """Titles and bodies for local notifications."""

    OVERDUE_TITLE = "Equipment Alert"
    OVERDUE_BODY = (
        "{count} equipment item(s) have been in critical status "
        "for over {days} days"
    )

    STATUS_UPDATE_BODY = "{tag} - {status}"


class ValidationMessages:
    """Messages for input validation."""

    UNSUPPORTED_LANGUAGE = "Language '{language}' is not supported."


class SystemMessages:
    """General system messages."""

    UNEXPECTED_ERROR = (
        "An unexpected error occurred. "
        "Please try again or contact support if the problem persists."
    )

    STORAGE_UNAVAILABLE = (
        "Stored equipment data could not be read. "
        "Showing an empty list until storage is available again."
    )


class ErrorTypes:
    """
    Standard error type constants for structured error responses.

    These help the UI layer determine how to display errors and
    what actions to offer the user.
    """

    # User-related errors (user can potentially fix)
    VALIDATION = "validation"             # Invalid input
    NOT_FOUND = "not_found"               # Unknown equipment id

    # System-related errors (temporary issues)
    STORAGE = "storage"                   # Persistence medium failure
    EXPORT = "export"                     # No share channel / write target

    # Application errors (bugs)
    APPLICATION = "application"           # Unexpected error


def format_message(message: str, **kwargs) -> str:
    """
    Format a message template with provided values.

    Args:
        message: Message template with {placeholders}
        **kwargs: Values to fill in the placeholders

    Returns:
        Formatted message string

    Example:
        >>> format_message(EquipmentMessages.EQUIPMENT_NOT_FOUND, equipment_id="eq-1")
        "Equipment 'eq-1' was not found."
    """
    try:
        return message.format(**kwargs)
    except KeyError:
        # If placeholder not provided, return original message
        return message
