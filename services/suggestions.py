"""
AI text suggestions for the free-text situation fields.

One request per call, no retries: the caller offers a manual "regenerate".
Backend failures are classified into the SuggestionError subclasses so the
API layer can tell a setup problem (missing/invalid key, no quota) apart
from a transient generation failure.
"""
from __future__ import annotations

import logging
from typing import Any

import openai

from config import settings
from services.exceptions import (
    AuthenticationError,
    ConfigurationError,
    EmptyResultError,
    GenerationFailedError,
    QuotaExceededError,
)

logger = logging.getLogger(__name__)

SYSTEM_PROMPTS: dict[str, str] = {
    "financial_situation": (
        "You are helping someone describe their current financial situation for a government "
        "assistance application. Write a clear, respectful, and professional description in 2-3 sentences."
    ),
    "employment_circumstances": (
        "You are helping someone describe their employment circumstances for a government "
        "assistance application. Write a clear, respectful, and professional description in 2-3 sentences."
    ),
    "reason_for_applying": (
        "You are helping someone explain why they are applying for government financial "
        "assistance. Write a clear, respectful, and professional explanation in 2-3 sentences."
    ),
}

DEFAULT_PROMPT = "Help me describe my situation for a government assistance application."

MSG_NOT_CONFIGURED = "Suggestion service is not configured. Please add OPENAI_API_KEY to your .env file."
MSG_QUOTA = (
    "OpenAI API quota exceeded. Please check your billing at "
    "https://platform.openai.com/account/billing or add a valid API key with available credits."
)
MSG_BAD_KEY = "Invalid OpenAI API key. Please check OPENAI_API_KEY in the .env file."
MSG_FAILED = "Failed to generate suggestion"
MSG_UNREACHABLE = "Failed to connect to suggestion service"
MSG_EMPTY = "No suggestion generated"


def _error_details(exc: openai.APIStatusError) -> tuple[str | None, str | None]:
    """Pull (code, message) out of a provider error body, tolerating both nested and flat shapes."""
    body = exc.body
    if isinstance(body, dict):
        err = body.get("error", body)
        if isinstance(err, dict):
            return err.get("code"), err.get("message")
    return getattr(exc, "code", None), None


def classify_status_error(exc: openai.APIStatusError) -> Exception:
    code, backend_message = _error_details(exc)
    if exc.status_code == 429 or code == "insufficient_quota":
        return QuotaExceededError(MSG_QUOTA)
    if exc.status_code == 401:
        return AuthenticationError(MSG_BAD_KEY)
    return GenerationFailedError(backend_message or MSG_FAILED)


def _first_text(response: Any) -> str:
    choices = getattr(response, "choices", None) or []
    if not choices:
        return ""
    content = getattr(choices[0].message, "content", None)
    return (content or "").strip()


class SuggestionClient:
    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
        client: Any = None,
    ):
        self.api_key = settings.openai_api_key if api_key is None else api_key
        self.model = model or settings.openai_model
        self.max_tokens = max_tokens or settings.suggestion_max_tokens
        self.temperature = settings.suggestion_temperature if temperature is None else temperature
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            self._client = openai.AsyncOpenAI(api_key=self.api_key, max_retries=0)
        return self._client

    def build_messages(self, field_type: str, prompt_text: str = "") -> list[dict[str, str]]:
        try:
            system_prompt = SYSTEM_PROMPTS[field_type]
        except KeyError:
            raise ValueError(f"No suggestion template for field '{field_type}'") from None
        return [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": prompt_text.strip() or DEFAULT_PROMPT},
        ]

    async def generate(self, field_type: str, prompt_text: str = "") -> str:
        """Return a trimmed suggestion for ``field_type``; raises a SuggestionError subclass on failure."""
        messages = self.build_messages(field_type, prompt_text)
        if not (self.api_key or "").strip():
            raise ConfigurationError(MSG_NOT_CONFIGURED)

        try:
            response = await self._get_client().chat.completions.create(
                model=self.model,
                messages=messages,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except openai.APIStatusError as e:
            logger.warning("Suggestion request for %s failed with status %s", field_type, e.status_code)
            raise classify_status_error(e) from e
        except openai.APIConnectionError as e:
            logger.warning("Suggestion backend unreachable: %s", e)
            raise GenerationFailedError(MSG_UNREACHABLE) from e

        text = _first_text(response)
        if not text:
            raise EmptyResultError(MSG_EMPTY)
        return text
