from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator

FIRST_STEP = 1
LAST_STEP = 3

GENDER_OPTIONS = ("male", "female", "other", "prefer_not_to_say")
MARITAL_STATUS_OPTIONS = ("single", "married", "divorced", "widowed")
EMPLOYMENT_STATUS_OPTIONS = (
    "employed",
    "part_time",
    "self_employed",
    "unemployed",
    "retired",
    "student",
    "disabled",
)
HOUSING_STATUS_OPTIONS = ("owned", "rented", "mortgage", "with_family", "homeless", "temporary")

PERSONAL_FIELDS = (
    "name",
    "national_id",
    "date_of_birth",
    "gender",
    "address",
    "city",
    "state",
    "country",
    "phone",
    "email",
)
FAMILY_FINANCIAL_FIELDS = (
    "marital_status",
    "dependents",
    "employment_status",
    "monthly_income",
    "housing_status",
)
SITUATION_FIELDS = ("financial_situation", "employment_circumstances", "reason_for_applying")

STEP_FIELDS: dict[int, tuple[str, ...]] = {
    1: PERSONAL_FIELDS,
    2: FAMILY_FINANCIAL_FIELDS,
    3: SITUATION_FIELDS,
}
FORM_FIELDS = PERSONAL_FIELDS + FAMILY_FINANCIAL_FIELDS + SITUATION_FIELDS
NUMERIC_FIELDS = ("dependents", "monthly_income")

SuggestionFieldType = Literal["financial_situation", "employment_circumstances", "reason_for_applying"]
ApplicationStatus = Literal["draft", "submitted"]


def clamp_step(value: Any) -> int:
    """Coerce a stored step into the 1..3 range; unreadable values fall back to step 1."""
    try:
        step = int(value)
    except (TypeError, ValueError):
        return FIRST_STEP
    return max(FIRST_STEP, min(LAST_STEP, step))


class ApplicationDraft(BaseModel):
    """One in-progress (or submitted) application. Every form field is optional while editing."""

    id: Optional[str] = None
    status: ApplicationStatus = "draft"
    current_step: int = FIRST_STEP

    # Step 1
    name: Optional[str] = None
    national_id: Optional[str] = None
    date_of_birth: Optional[str] = None
    gender: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None

    # Step 2
    marital_status: Optional[str] = None
    dependents: Optional[int] = None
    employment_status: Optional[str] = None
    monthly_income: Optional[Decimal] = None
    housing_status: Optional[str] = None

    # Step 3
    financial_situation: Optional[str] = None
    employment_circumstances: Optional[str] = None
    reason_for_applying: Optional[str] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    submitted_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    @field_validator("current_step", mode="before")
    @classmethod
    def _clamp_current_step(cls, v: Any) -> int:
        return clamp_step(v)

    @field_validator("dependents", "monthly_income", mode="before")
    @classmethod
    def _blank_number_is_unset(cls, v: Any) -> Any:
        # "" means "not entered yet"; an explicit 0 stays 0
        if isinstance(v, str):
            v = v.strip()
            if v == "":
                return None
        return v

    def form_values(self) -> dict[str, Any]:
        """Form field values only (no id, status or timestamps)."""
        return self.model_dump(include=set(FORM_FIELDS))


class FieldEdit(BaseModel):
    field: str
    value: Any = None


class SuggestionAccept(BaseModel):
    field: SuggestionFieldType
    text: str


class SuggestionRequest(BaseModel):
    field_type: SuggestionFieldType = Field(..., alias="fieldType")
    prompt: str = ""

    model_config = {"populate_by_name": True}


class SuggestionResponse(BaseModel):
    text: str


class ApplicationSaved(BaseModel):
    id: str
