"""
Three-step application form state machine.

Holds the single active draft, gates navigation on per-step validation and
writes the draft to the local slot after every successful mutation.
Remote persistence (explicit save, final submit) goes through the repository.

States: step 1 / 2 / 3 while editing, then ``submitted`` until the applicant
acknowledges, which starts a fresh empty draft at step 1.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from schemas.application import (
    FIRST_STEP,
    FORM_FIELDS,
    LAST_STEP,
    NUMERIC_FIELDS,
    SITUATION_FIELDS,
    ApplicationDraft,
)
from services.draft_store import DraftStore
from services.exceptions import InvalidTransitionError, PersistenceError
from services.messages import DEFAULT_MESSAGES, message
from services.repository import ApplicationRepository
from services.validation import ValidationErrors, validate_step

logger = logging.getLogger(__name__)

PHASE_EDITING = "editing"
PHASE_SUBMITTED = "submitted"

NOTICE_VALIDATION_FAILED = "validation_failed"
NOTICE_SAVED = "saved"
NOTICE_SAVE_FAILED = "save_failed"
NOTICE_SUBMITTED = "submitted"
NOTICE_SUBMIT_FAILED = "submit_failed"
NOTICE_IN_PROGRESS = "action_in_progress"


@dataclass
class FormState:
    draft: ApplicationDraft = field(default_factory=ApplicationDraft)
    errors: ValidationErrors = field(default_factory=dict)
    phase: str = PHASE_EDITING
    saving: bool = False
    submitting: bool = False
    submitted_id: Optional[str] = None

    @property
    def current_step(self) -> int:
        return self.draft.current_step

    @property
    def busy(self) -> bool:
        """A save or submit is waiting on the repository."""
        return self.saving or self.submitting

    def to_dict(self) -> dict[str, Any]:
        return {
            "phase": self.phase,
            "currentStep": self.current_step,
            "draft": self.draft.model_dump(mode="json"),
            "errors": dict(self.errors),
            "saving": self.saving,
            "submitting": self.submitting,
            "submittedId": self.submitted_id,
        }


@dataclass
class TransitionResult:
    ok: bool
    state: FormState
    notice: Optional[str] = None
    message: Optional[str] = None


class FormController:
    def __init__(
        self,
        draft_store: DraftStore,
        repository: ApplicationRepository,
        messages: Mapping[str, str] = DEFAULT_MESSAGES,
    ):
        self.draft_store = draft_store
        self.repository = repository
        self.messages = messages
        self.state = FormState()

    # --- lifecycle ---

    def start(self) -> FormState:
        """Seed the state from the local slot (if any). Called once per session."""
        saved = self.draft_store.load()
        if saved is None:
            self.state = FormState()
        elif saved.status == "submitted":
            # already went through; nothing left to resume
            self.draft_store.clear()
            self.state = FormState()
        else:
            self.state = FormState(draft=saved)
            logger.info("Resumed saved draft at step %s", saved.current_step)
        return self.state

    def acknowledge_success(self) -> TransitionResult:
        if self.state.phase != PHASE_SUBMITTED:
            raise InvalidTransitionError("Nothing has been submitted yet")
        self.state = FormState()
        return TransitionResult(True, self.state)

    # --- editing ---

    def edit(self, field_name: str, value: Any) -> TransitionResult:
        self._require_editing()
        if field_name not in FORM_FIELDS:
            raise ValueError(f"Unknown form field: {field_name}")
        if self.state.submitting:
            # draft is frozen while it is being submitted
            return self._in_progress()

        try:
            draft = ApplicationDraft.model_validate({**self.state.draft.model_dump(), field_name: value})
        except ValidationError:
            if field_name not in NUMERIC_FIELDS:
                raise ValueError(f"Invalid value for {field_name}") from None
            self.state.errors[field_name] = message(self.messages, "invalidNumber")
            return TransitionResult(False, self.state, NOTICE_VALIDATION_FAILED)

        self.state.draft = draft
        self.state.errors.pop(field_name, None)
        self._save_local()
        return TransitionResult(True, self.state)

    def accept_suggestion(self, field_name: str, text: str) -> TransitionResult:
        """Merge an (optionally edited) AI suggestion through the normal edit path."""
        if field_name not in SITUATION_FIELDS:
            raise ValueError(f"Suggestions are not available for {field_name}")
        return self.edit(field_name, text)

    # --- navigation ---

    def next(self) -> TransitionResult:
        self._require_editing()
        step = self.state.current_step
        if step >= LAST_STEP:
            raise InvalidTransitionError("Already on the last step; submit instead")
        if not self._validate_current_step():
            return TransitionResult(False, self.state, NOTICE_VALIDATION_FAILED)
        self._move_to(step + 1)
        return TransitionResult(True, self.state)

    def previous(self) -> TransitionResult:
        self._require_editing()
        step = self.state.current_step
        if step <= FIRST_STEP:
            raise InvalidTransitionError("Already on the first step")
        if self.state.submitting:
            return self._in_progress()
        self.state.errors = {}
        self._move_to(step - 1)
        return TransitionResult(True, self.state)

    # --- remote persistence ---

    async def save_progress(self) -> TransitionResult:
        self._require_editing()
        if self.state.busy:
            return self._in_progress()

        self.state.saving = True
        try:
            application_id = await self.repository.upsert(self.state.draft)
        except PersistenceError as e:
            logger.warning("Save progress failed: %s", e.message)
            return TransitionResult(False, self.state, NOTICE_SAVE_FAILED, message(self.messages, "errorSaving"))
        finally:
            self.state.saving = False

        self.state.draft = self.state.draft.model_copy(update={"id": application_id})
        self._save_local()
        return TransitionResult(True, self.state, NOTICE_SAVED)

    async def submit(self) -> TransitionResult:
        self._require_editing()
        if self.state.current_step != LAST_STEP:
            raise InvalidTransitionError("Submit is only available on the last step")
        if self.state.busy:
            return self._in_progress()
        if not self._validate_current_step():
            return TransitionResult(False, self.state, NOTICE_VALIDATION_FAILED)

        self.state.submitting = True
        try:
            application_id = self.state.draft.id
            if not application_id:
                application_id = await self.repository.upsert(self.state.draft)
                self.state.draft = self.state.draft.model_copy(update={"id": application_id})
                self._save_local()
            final = self.state.draft.model_copy(update={"status": "submitted"})
            await self.repository.submit(application_id, final)
        except PersistenceError as e:
            logger.warning("Submit failed: %s", e.message)
            return TransitionResult(
                False, self.state, NOTICE_SUBMIT_FAILED, message(self.messages, "errorSubmitting")
            )
        finally:
            self.state.submitting = False

        self.state.draft = self.state.draft.model_copy(update={"status": "submitted"})
        self.state.errors = {}
        self.state.phase = PHASE_SUBMITTED
        self.state.submitted_id = application_id
        self.draft_store.clear()
        logger.info("Application %s submitted; local draft cleared", application_id)
        return TransitionResult(True, self.state, NOTICE_SUBMITTED)

    # --- helpers ---

    def _require_editing(self) -> None:
        if self.state.phase != PHASE_EDITING:
            raise InvalidTransitionError("Application already submitted; acknowledge to start a new one")

    def _validate_current_step(self) -> bool:
        self.state.errors = validate_step(self.state.current_step, self.state.draft, self.messages)
        return not self.state.errors

    def _move_to(self, step: int) -> None:
        self.state.draft = self.state.draft.model_copy(update={"current_step": step})
        self._save_local()

    def _save_local(self) -> None:
        self.draft_store.save(self.state.draft)

    def _in_progress(self) -> TransitionResult:
        return TransitionResult(False, self.state, NOTICE_IN_PROGRESS, message(self.messages, "actionInProgress"))
