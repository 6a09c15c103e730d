"""
Centralized Validation Rules for EquipTrack.

=============================================================================
PURPOSE:
=============================================================================
This file is the SINGLE SOURCE OF TRUTH for all equipment input rules.
The add/edit/delete flows validate here BEFORE touching storage, so an
invalid form never produces a store write or a change-log entry.

=============================================================================
HOW TO USE:
=============================================================================
For quick UI feedback:

    from EquipTrack.validation_rules import get_tag_validation_error

    error = get_tag_validation_error(tag)
    if error:
        # show error

In services, the validate_* helpers raise ValidationFailedError and
return the normalized values.
=============================================================================
"""

from typing import Optional, Type

from EquipTrack.exceptions import ValidationFailedError
from EquipTrack.models import DeletionReason, EquipmentStatus, EquipmentType, Plant


class TagRules:
    """
    Validation rules for equipment TAGs.

    TAGs are free text; they are stored trimmed and uppercased by the add
    and edit flows.
    """

    MIN_LENGTH = 1
    MAX_LENGTH = 50

    ERRORS = {
        "required": "TAG is required.",
        "too_long": f"TAG must be less than {MAX_LENGTH} characters.",
    }


class CommentRules:
    """Validation rules for free-text comments."""

    MAX_LENGTH = 2000

    ERRORS = {
        "too_long": f"Comments must be less than {MAX_LENGTH} characters.",
    }


class DeletionRules:
    """
    Validation rules for soft deletion.

    Only the OTHER reason needs a free-text explanation.
    """

    REASONS_REQUIRING_DETAILS = (DeletionReason.OTHER,)

    ERRORS = {
        "reason_required": "Reason for deletion is required.",
        "details_required": "Please provide details",
    }


# =============================================================================
# VALIDATION HELPER FUNCTIONS
# =============================================================================


def get_tag_validation_error(tag: str) -> Optional[str]:
    """
    Validate a TAG and return the first error found.

    Args:
        tag: The TAG as typed by the user

    Returns:
        Error message string if invalid, None if valid
    """
    if not tag or not tag.strip():
        return TagRules.ERRORS["required"]

    if len(tag.strip()) > TagRules.MAX_LENGTH:
        return TagRules.ERRORS["too_long"]

    return None


def get_choice_validation_error(value, enum_cls: Type, field: str) -> Optional[str]:
    """
    Validate that a value belongs to one of the fixed enumerations.

    Args:
        value: Enum member or its string value
        enum_cls: Plant, EquipmentType, EquipmentStatus or DeletionReason
        field: Field name used in the message

    Returns:
        Error message string if invalid, None if valid
    """
    if value is None or value == "":
        return f"{field.capitalize()} is required."
    try:
        enum_cls(value)
    except ValueError:
        return f"'{value}' is not a valid {field}."
    return None


def get_deletion_validation_error(reason, details: Optional[str]) -> Optional[str]:
    """
    Validate a deletion request.

    Returns:
        Error message string if invalid, None if valid

    Example:
        error = get_deletion_validation_error("OTHER", "  ")
        # "Please provide details"
    """
    error = get_choice_validation_error(reason, DeletionReason, "deletion reason")
    if error:
        return DeletionRules.ERRORS["reason_required"] if not reason else error

    if DeletionReason(reason) in DeletionRules.REASONS_REQUIRING_DETAILS:
        if not details or not details.strip():
            return DeletionRules.ERRORS["details_required"]

    return None


# =============================================================================
# RAISING VALIDATORS (used by services)
# =============================================================================


def _choice(value, enum_cls, field):
    error = get_choice_validation_error(value, enum_cls, field)
    if error:
        raise ValidationFailedError(error, field=field)
    return enum_cls(value)


def validate_equipment_input(tag, plant, equipment_type, status, comments="") -> dict:
    """
    Validate add/edit form values.

    Returns:
        Normalized snake_case fields: TAG trimmed and uppercased, comments
        trimmed, enumerations converted to their members.

    Raises:
        ValidationFailedError: On the first invalid field
    """
    error = get_tag_validation_error(tag)
    if error:
        raise ValidationFailedError(error, field="tag")

    comments = (comments or "").strip()
    if len(comments) > CommentRules.MAX_LENGTH:
        raise ValidationFailedError(CommentRules.ERRORS["too_long"], field="comments")

    return {
        "tag": tag.strip().upper(),
        "plant": _choice(plant, Plant, "plant"),
        "type": _choice(equipment_type, EquipmentType, "type"),
        "status": _choice(status, EquipmentStatus, "status"),
        "comments": comments,
    }


def validate_status(status) -> EquipmentStatus:
    return _choice(status, EquipmentStatus, "status")


def validate_deletion(reason, details: Optional[str] = None) -> tuple:
    """
    Validate a deletion request.

    Returns:
        (DeletionReason, details) - details are only kept for OTHER

    Raises:
        ValidationFailedError: Missing/unknown reason, or OTHER without details
    """
    error = get_deletion_validation_error(reason, details)
    if error:
        field = "deletion_details" if error == DeletionRules.ERRORS["details_required"] else "deletion_reason"
        raise ValidationFailedError(error, field=field)

    reason = DeletionReason(reason)
    if reason in DeletionRules.REASONS_REQUIRING_DETAILS:
        return reason, details.strip()
    return reason, None
