"""Default (English) message table for field errors and action notices."""
from __future__ import annotations

from typing import Mapping

DEFAULT_MESSAGES: Mapping[str, str] = {
    "required": "This field is required",
    "invalidEmail": "Please enter a valid email address",
    "invalidDate": "Please enter a valid date",
    "mustBePositive": "Must be a positive number",
    "invalidOption": "Please select one of the available options",
    "invalidNumber": "Please enter a number",
    "errorSaving": "Failed to save application. Please try again.",
    "errorSubmitting": "Failed to submit application. Please try again.",
    "errorAI": "Failed to generate suggestion. Please try again.",
    "actionInProgress": "Please wait for the current request to finish.",
}


def message(messages: Mapping[str, str], key: str) -> str:
    """Look up ``key``, falling back to the default table for partial tables."""
    return messages.get(key) or DEFAULT_MESSAGES[key]
