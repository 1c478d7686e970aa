"""
Per-step validation of an application draft.
Each check takes the full draft (model or plain dict) plus a message table and returns
a field -> message mapping; an empty mapping means the step is valid.
Checks never look at fields that belong to another step.
"""
from __future__ import annotations

import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from schemas.application import (
    EMPLOYMENT_STATUS_OPTIONS,
    GENDER_OPTIONS,
    HOUSING_STATUS_OPTIONS,
    MARITAL_STATUS_OPTIONS,
    ApplicationDraft,
)
from services.messages import DEFAULT_MESSAGES, message

ValidationErrors = dict[str, str]

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_RE.match(value))


def is_valid_date(value: str) -> bool:
    try:
        date.fromisoformat(value.strip())
    except ValueError:
        return False
    return True


def _as_dict(draft: ApplicationDraft | Mapping[str, Any]) -> Mapping[str, Any]:
    if isinstance(draft, ApplicationDraft):
        return draft.model_dump()
    return draft


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _require_text(errors: ValidationErrors, data: Mapping[str, Any], field: str, messages: Mapping[str, str]) -> None:
    if _blank(data.get(field)):
        errors[field] = message(messages, "required")


def _require_choice(
    errors: ValidationErrors,
    data: Mapping[str, Any],
    field: str,
    options: tuple[str, ...],
    messages: Mapping[str, str],
) -> None:
    value = data.get(field)
    if _blank(value):
        errors[field] = message(messages, "required")
    elif value not in options:
        errors[field] = message(messages, "invalidOption")


def _require_non_negative(
    errors: ValidationErrors,
    data: Mapping[str, Any],
    field: str,
    messages: Mapping[str, str],
    integral: bool = False,
) -> None:
    """Unset (None / "") is "required"; an explicit 0 is accepted; below 0 is "must be positive"."""
    value = data.get(field)
    if _blank(value):
        errors[field] = message(messages, "required")
        return
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        errors[field] = message(messages, "invalidNumber")
        return
    if not number.is_finite() or (integral and number != number.to_integral_value()):
        errors[field] = message(messages, "invalidNumber")
    elif number < 0:
        errors[field] = message(messages, "mustBePositive")


def validate_step1(
    draft: ApplicationDraft | Mapping[str, Any],
    messages: Mapping[str, str] = DEFAULT_MESSAGES,
) -> ValidationErrors:
    """Personal information."""
    data = _as_dict(draft)
    errors: ValidationErrors = {}

    _require_text(errors, data, "name", messages)
    _require_text(errors, data, "national_id", messages)

    dob = data.get("date_of_birth")
    if _blank(dob):
        errors["date_of_birth"] = message(messages, "required")
    elif not is_valid_date(str(dob)):
        errors["date_of_birth"] = message(messages, "invalidDate")

    _require_choice(errors, data, "gender", GENDER_OPTIONS, messages)

    for field in ("address", "city", "state", "country", "phone"):
        _require_text(errors, data, field, messages)

    email = data.get("email")
    if _blank(email):
        errors["email"] = message(messages, "required")
    elif not is_valid_email(str(email).strip()):
        errors["email"] = message(messages, "invalidEmail")

    return errors


def validate_step2(
    draft: ApplicationDraft | Mapping[str, Any],
    messages: Mapping[str, str] = DEFAULT_MESSAGES,
) -> ValidationErrors:
    """Family & financial information."""
    data = _as_dict(draft)
    errors: ValidationErrors = {}

    _require_choice(errors, data, "marital_status", MARITAL_STATUS_OPTIONS, messages)
    _require_non_negative(errors, data, "dependents", messages, integral=True)
    _require_choice(errors, data, "employment_status", EMPLOYMENT_STATUS_OPTIONS, messages)
    _require_non_negative(errors, data, "monthly_income", messages)
    _require_choice(errors, data, "housing_status", HOUSING_STATUS_OPTIONS, messages)

    return errors


def validate_step3(
    draft: ApplicationDraft | Mapping[str, Any],
    messages: Mapping[str, str] = DEFAULT_MESSAGES,
) -> ValidationErrors:
    """Situation descriptions."""
    data = _as_dict(draft)
    errors: ValidationErrors = {}
    for field in ("financial_situation", "employment_circumstances", "reason_for_applying"):
        _require_text(errors, data, field, messages)
    return errors


STEP_VALIDATORS = {
    1: validate_step1,
    2: validate_step2,
    3: validate_step3,
}


def validate_step(
    step: int,
    draft: ApplicationDraft | Mapping[str, Any],
    messages: Mapping[str, str] = DEFAULT_MESSAGES,
) -> ValidationErrors:
    try:
        validator = STEP_VALIDATORS[step]
    except KeyError:
        raise ValueError(f"Unknown form step: {step}") from None
    return validator(draft, messages)
