"""Tests for the OpenAI and Gemini adapters, using fake SDK clients."""

import asyncio
import pytest
import sys
import os
from types import SimpleNamespace

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from google.api_core import exceptions as google_exceptions

from selfintro import prompts
from selfintro.errors import ProviderResponseError
from selfintro.schemas.form import FormData, PersonalInfo
from selfintro.services.providers import GeminiAdapter, ModelProvider, OpenAIAdapter


def _form() -> FormData:
    return FormData(personal_info=PersonalInfo(name="王小明"))


class FakeCompletions:
    def __init__(self, response):
        self.response = response
        self.kwargs = None

    async def create(self, **kwargs):
        self.kwargs = kwargs
        return self.response


class FakeOpenAIClient:
    def __init__(self, response):
        self.completions = FakeCompletions(response)
        self.chat = SimpleNamespace(completions=self.completions)


def _chat_response(content, finish_reason="stop"):
    message = SimpleNamespace(content=content)
    return SimpleNamespace(choices=[SimpleNamespace(message=message, finish_reason=finish_reason)])


class FakeGeminiModel:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.contents = None
        self.generation_config = None

    async def generate_content_async(self, contents, generation_config=None):
        self.contents = contents
        self.generation_config = generation_config
        if self.error is not None:
            raise self.error
        return self.response


class _NoTextResponse:
    candidates = [SimpleNamespace(finish_reason="SAFETY")]

    @property
    def text(self):
        raise ValueError("The response has no parts")


class TestModelProvider:
    """Test the provider enum parse fallback."""

    def test_parse_known(self):
        assert ModelProvider.parse("openai") is ModelProvider.OPENAI
        assert ModelProvider.parse(" Gemini ") is ModelProvider.GEMINI

    def test_parse_unknown(self):
        assert ModelProvider.parse("anthropic") is None
        assert ModelProvider.parse(None) is None


class TestOpenAIAdapter:
    """Test the OpenAI chat completions adapter."""

    def test_success(self):
        client = FakeOpenAIClient(_chat_response("  Hi 王小明  "))
        keys = []

        def factory(api_key):
            keys.append(api_key)
            return client

        reply = asyncio.run(OpenAIAdapter(factory).generate(_form(), "sk-test", "gpt-4o", 500))

        assert reply.content == "Hi 王小明"
        assert "王小明" in reply.prompt
        assert keys == ["sk-test"]
        kwargs = client.completions.kwargs
        assert kwargs["model"] == "gpt-4o"
        assert kwargs["max_tokens"] == 500
        assert kwargs["messages"][0] == {"role": "system", "content": prompts.OPENAI_SYSTEM_PROMPT}
        assert kwargs["messages"][1]["content"] == reply.prompt

    def test_no_choices_raises(self):
        client = FakeOpenAIClient(SimpleNamespace(choices=[]))
        with pytest.raises(ProviderResponseError):
            asyncio.run(OpenAIAdapter(lambda key: client).generate(_form(), "k", "gpt-4o", 100))

    def test_empty_content_raises(self):
        client = FakeOpenAIClient(_chat_response(None, finish_reason="length"))
        with pytest.raises(ProviderResponseError) as exc:
            asyncio.run(OpenAIAdapter(lambda key: client).generate(_form(), "k", "gpt-4o", 100))
        assert "length" in str(exc.value)


class TestGeminiAdapter:
    """Test the Gemini generateContent adapter."""

    def test_success_uses_system_instruction(self):
        model = FakeGeminiModel(SimpleNamespace(candidates=[object()], text="Hi 王小明\n"))
        seen = {}

        def factory(api_key, model_id, system_instruction):
            seen.update(api_key=api_key, model_id=model_id, system_instruction=system_instruction)
            return model

        reply = asyncio.run(GeminiAdapter(factory).generate(_form(), "g-key", "gemini-1.5-pro", 800))

        assert reply.content == "Hi 王小明"
        assert seen["system_instruction"] == prompts.GEMINI_SYSTEM_PROMPT
        assert model.contents == reply.prompt
        assert model.generation_config["max_output_tokens"] == 800

    def test_legacy_model_prepends_system_prompt(self):
        model = FakeGeminiModel(SimpleNamespace(candidates=[object()], text="ok"))
        seen = {}

        def factory(api_key, model_id, system_instruction):
            seen["system_instruction"] = system_instruction
            return model

        asyncio.run(GeminiAdapter(factory).generate(_form(), "k", "gemini-1.0-pro", 100))

        assert seen["system_instruction"] is None
        assert model.contents.startswith(prompts.GEMINI_SYSTEM_PROMPT)

    def test_blocked_prompt_raises(self):
        feedback = SimpleNamespace(block_reason="SAFETY")
        model = FakeGeminiModel(SimpleNamespace(candidates=[], prompt_feedback=feedback))
        with pytest.raises(ProviderResponseError) as exc:
            asyncio.run(GeminiAdapter(lambda *a: model).generate(_form(), "k", "gemini-1.5-pro", 100))
        assert "SAFETY" in str(exc.value)

    def test_no_text_raises(self):
        model = FakeGeminiModel(_NoTextResponse())
        with pytest.raises(ProviderResponseError):
            asyncio.run(GeminiAdapter(lambda *a: model).generate(_form(), "k", "gemini-1.5-pro", 100))

    def test_api_error_mapped(self):
        model = FakeGeminiModel(error=google_exceptions.ResourceExhausted("quota exceeded"))
        with pytest.raises(ProviderResponseError) as exc:
            asyncio.run(GeminiAdapter(lambda *a: model).generate(_form(), "k", "gemini-1.5-pro", 100))
        assert str(exc.value).startswith("Gemini error:")
