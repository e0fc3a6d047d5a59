"""Input validation for feedback requests.

All checks here run before any store or analysis call and raise
``ValidationError`` with the exact message returned to the caller.
"""

import re
from typing import Any

from axiom_api.core.exceptions import ValidationError

OBJECT_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")

NEXT_ACTION_MIN_LENGTH = 10
NEXT_ACTION_MAX_LENGTH = 500


def is_valid_object_id(value: Any) -> bool:
    """Check for a 24-character hexadecimal MongoDB ObjectId string."""
    return isinstance(value, str) and OBJECT_ID_PATTERN.fullmatch(value) is not None


def validate_feedback_id(feedback_id: Any) -> str:
    if not is_valid_object_id(feedback_id):
        raise ValidationError("Invalid feedback ID format")
    return feedback_id


def validate_feedback_text(text: Any) -> str:
    if not isinstance(text, str) or not text.strip():
        raise ValidationError("Text is required", {"text": "Text is required"})
    return text


def validate_email(email: Any) -> str | None:
    if email is None or email == "":
        return None
    if not isinstance(email, str):
        raise ValidationError("Email must be a string", {"email": "Email must be a string"})
    return email.strip()


def validate_next_action(next_action: Any) -> str:
    """Validate a next action and return it trimmed."""
    if not isinstance(next_action, str):
        raise ValidationError(
            "nextAction is required and must be a string",
            {"nextAction": "nextAction is required and must be a string"},
        )

    trimmed = next_action.strip()
    if len(trimmed) < NEXT_ACTION_MIN_LENGTH:
        message = f"nextAction must be at least {NEXT_ACTION_MIN_LENGTH} characters"
        raise ValidationError(message, {"nextAction": message})
    if len(trimmed) > NEXT_ACTION_MAX_LENGTH:
        message = f"nextAction must not exceed {NEXT_ACTION_MAX_LENGTH} characters"
        raise ValidationError(message, {"nextAction": message})
    return trimmed


def validate_feedback_ids(ids: Any) -> list[str]:
    """Validate the id list of a bulk delete request."""
    if not isinstance(ids, list):
        raise ValidationError("ids must be an array", {"ids": "ids must be an array"})
    if not ids:
        raise ValidationError("ids array cannot be empty", {"ids": "ids array cannot be empty"})
    if not all(is_valid_object_id(feedback_id) for feedback_id in ids):
        message = "All ids must be valid MongoDB ObjectId strings"
        raise ValidationError(message, {"ids": message})
    return ids
