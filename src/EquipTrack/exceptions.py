"""
Custom exceptions for the EquipTrack inventory system.

This module defines a hierarchy of exceptions used throughout the application
to handle storage, validation, export and notification errors in a clear and
structured way.
"""


class EquipTrackError(Exception):
    """
    Base exception for all EquipTrack errors.

    Use this as a catch-all when you want to handle any application
    issue without caring about the specific type.
    """

    def __init__(self, message: str = "An unexpected error occurred"):
        self.message = message
        super().__init__(self.message)


# ============================================================================
# STORAGE EXCEPTIONS
# ============================================================================


class StorageError(EquipTrackError):
    """Base class for persistence medium errors."""

    pass


class StorageUnavailableError(StorageError):
    """
    Raised when the persistence medium cannot be read.

    Callers continue in degraded mode with an empty collection, but the
    error must still be logged because it hides data from the user.

    Example:
        The local database file is locked or its stored blob is corrupt.
    """

    def __init__(self, message: str = "Storage is unavailable"):
        super().__init__(message)


class StorageWriteFailedError(StorageError):
    """
    Raised when the persistence medium rejects a write.

    The previously committed state is left untouched.

    Example:
        Disk is full while saving the equipment collection.
    """

    def __init__(self, message: str = "Failed to write to storage"):
        super().__init__(message)


# ============================================================================
# VALIDATION EXCEPTIONS
# ============================================================================


class ValidationFailedError(EquipTrackError):
    """
    Raised when user input doesn't meet requirements.

    Always raised before any store operation is attempted.

    Example:
        Empty TAG, or deletion reason OTHER without details.
    """

    def __init__(self, message: str, field: str = None):
        self.field = field
        super().__init__(message)


# ============================================================================
# EXPORT / NOTIFICATION EXCEPTIONS
# ============================================================================


class ExportUnavailableError(EquipTrackError):
    """
    Raised when an export cannot be written or shared.

    Shown to the user as-is; never retried automatically.
    """

    def __init__(self, message: str = "Export is not available"):
        super().__init__(message)


class NotificationDeliveryFailedError(EquipTrackError):
    """
    Raised by the notification layer when a sink rejects a notification.

    Notifications are advisory: this error is logged and swallowed inside
    the notification service and never reaches the caller.
    """

    def __init__(self, message: str = "Notification could not be delivered"):
        super().__init__(message)
