"""
Tests for the suggestion client: prompt building, success path and error classification.
The provider SDK client is replaced by a fake that returns canned responses or raises
the SDK's own exception types.
"""
import unittest
from types import SimpleNamespace

import httpx
import openai

from services.exceptions import (
    AuthenticationError,
    ConfigurationError,
    EmptyResultError,
    GenerationFailedError,
    QuotaExceededError,
)
from services.suggestions import DEFAULT_PROMPT, SYSTEM_PROMPTS, SuggestionClient

_URL = "https://api.openai.com/v1/chat/completions"


def _completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def _status_error(cls, status, body):
    request = httpx.Request("POST", _URL)
    response = httpx.Response(status, request=request, json=body)
    return cls("provider error", response=response, body=body)


class _FakeCompletions:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response


def _client(response=None, error=None, api_key="sk-test"):
    completions = _FakeCompletions(response=response, error=error)
    fake = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return SuggestionClient(api_key=api_key, model="gpt-test", max_tokens=200, temperature=0.7, client=fake), completions


class TestSuggestionClient(unittest.IsolatedAsyncioTestCase):
    async def test_returns_trimmed_text(self):
        client, _ = _client(_completion("  I am currently between jobs.  \n"))
        text = await client.generate("employment_circumstances", "lost my job")
        self.assertEqual(text, "I am currently between jobs.")

    async def test_request_carries_field_template_and_parameters(self):
        client, completions = _client(_completion("ok"))
        await client.generate("financial_situation", "behind on rent")
        call = completions.calls[0]
        self.assertEqual(call["model"], "gpt-test")
        self.assertEqual(call["max_tokens"], 200)
        self.assertEqual(call["temperature"], 0.7)
        self.assertEqual(
            call["messages"],
            [
                {"role": "system", "content": SYSTEM_PROMPTS["financial_situation"]},
                {"role": "user", "content": "behind on rent"},
            ],
        )

    async def test_blank_prompt_uses_fallback(self):
        client, completions = _client(_completion("ok"))
        await client.generate("reason_for_applying", "   ")
        self.assertEqual(completions.calls[0]["messages"][1]["content"], DEFAULT_PROMPT)

    async def test_unknown_field_type(self):
        client, _ = _client(_completion("ok"))
        with self.assertRaises(ValueError):
            await client.generate("name", "hi")

    async def test_missing_key_is_configuration_error(self):
        client, completions = _client(_completion("ok"), api_key="")
        with self.assertRaises(ConfigurationError):
            await client.generate("reason_for_applying", "hi")
        self.assertEqual(completions.calls, [])

    async def test_rate_limit_is_quota_error(self):
        error = _status_error(openai.RateLimitError, 429, {"error": {"message": "slow down"}})
        client, _ = _client(error=error)
        with self.assertRaises(QuotaExceededError) as ctx:
            await client.generate("reason_for_applying", "hi")
        self.assertIn("billing", ctx.exception.message)

    async def test_insufficient_quota_code_is_quota_error(self):
        error = _status_error(openai.APIStatusError, 403, {"code": "insufficient_quota", "message": "no credits"})
        client, _ = _client(error=error)
        with self.assertRaises(QuotaExceededError):
            await client.generate("reason_for_applying", "hi")

    async def test_unauthorized_is_authentication_error(self):
        error = _status_error(openai.AuthenticationError, 401, {"error": {"message": "bad key"}})
        client, _ = _client(error=error)
        with self.assertRaises(AuthenticationError) as ctx:
            await client.generate("reason_for_applying", "hi")
        self.assertIn("OPENAI_API_KEY", ctx.exception.message)

    async def test_other_failure_carries_backend_message(self):
        error = _status_error(openai.InternalServerError, 500, {"error": {"message": "model overloaded"}})
        client, _ = _client(error=error)
        with self.assertRaises(GenerationFailedError) as ctx:
            await client.generate("reason_for_applying", "hi")
        self.assertEqual(ctx.exception.message, "model overloaded")

    async def test_other_failure_without_message_uses_fallback(self):
        error = _status_error(openai.BadRequestError, 400, None)
        client, _ = _client(error=error)
        with self.assertRaises(GenerationFailedError) as ctx:
            await client.generate("reason_for_applying", "hi")
        self.assertEqual(ctx.exception.message, "Failed to generate suggestion")

    async def test_connection_failure(self):
        error = openai.APIConnectionError(request=httpx.Request("POST", _URL))
        client, _ = _client(error=error)
        with self.assertRaises(GenerationFailedError):
            await client.generate("reason_for_applying", "hi")

    async def test_blank_completion_is_empty_result(self):
        client, _ = _client(_completion("   "))
        with self.assertRaises(EmptyResultError):
            await client.generate("reason_for_applying", "hi")

    async def test_no_choices_is_empty_result(self):
        client, _ = _client(SimpleNamespace(choices=[]))
        with self.assertRaises(EmptyResultError):
            await client.generate("reason_for_applying", "hi")


if __name__ == "__main__":
    unittest.main()
