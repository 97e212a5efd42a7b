"""Provider adapters — one per text-generation backend.

Each adapter is stateless from the caller's point of view and exposes a
single coroutine:

    await adapter.generate(form_data, api_key, model_id, max_tokens) -> ProviderReply

Adapters build their own prompt (selfintro.services.prompt_builder), apply
their own default system prompt, make exactly one request and raise a
GenerationError subclass on anything other than usable text.
"""

import logging
from enum import Enum
from typing import Callable, Optional

import google.generativeai as genai
import openai
from google.api_core import exceptions as google_exceptions
from openai import AsyncOpenAI

from selfintro import prompts
from selfintro.config import settings
from selfintro.errors import ProviderResponseError
from selfintro.schemas.form import FormData
from selfintro.schemas.generation import ProviderReply
from selfintro.services.prompt_builder import build_prompt, resolve_system_prompt

logger = logging.getLogger(__name__)


class ModelProvider(str, Enum):
    OPENAI = "openai"
    GEMINI = "gemini"

    @classmethod
    def parse(cls, value) -> Optional["ModelProvider"]:
        """Provider for a raw value (e.g. read back from storage), None if unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None

    @property
    def display_name(self) -> str:
        return "OpenAI" if self is ModelProvider.OPENAI else "Google Gemini"


# ─────────────────────────────────────────────────────────────────────────────
# OpenAI — Chat Completions API
# ─────────────────────────────────────────────────────────────────────────────

def _default_openai_client(api_key: str) -> AsyncOpenAI:
    # One attempt per user action: no SDK-level retries
    return AsyncOpenAI(api_key=api_key, max_retries=0)


class OpenAIAdapter:
    provider = ModelProvider.OPENAI
    DEFAULT_SYSTEM_PROMPT = prompts.OPENAI_SYSTEM_PROMPT

    def __init__(self, client_factory: Optional[Callable[[str], AsyncOpenAI]] = None):
        self._client_factory = client_factory or _default_openai_client

    async def generate(
        self,
        form_data: FormData,
        api_key: str,
        model_id: str,
        max_tokens: int,
    ) -> ProviderReply:
        prompt = build_prompt(form_data)
        system_prompt = resolve_system_prompt(form_data.generation_settings, self.DEFAULT_SYSTEM_PROMPT)

        client = self._client_factory(api_key)
        try:
            response = await client.chat.completions.create(
                model=model_id,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": prompt},
                ],
                temperature=settings.LLM_TEMPERATURE,
                max_tokens=max_tokens,
            )
        except openai.APIStatusError as e:
            raise ProviderResponseError("OpenAI", f"HTTP {e.status_code}: {e.message}") from e
        except openai.APIError as e:
            raise ProviderResponseError("OpenAI", str(e)) from e

        choices = getattr(response, "choices", None) or []
        if not choices:
            raise ProviderResponseError("OpenAI", "response contained no choices")
        content = (choices[0].message.content or "").strip()
        if not content:
            finish = getattr(choices[0], "finish_reason", None)
            raise ProviderResponseError("OpenAI", f"empty content (finish_reason={finish})")

        return ProviderReply(content=content, prompt=prompt)


# ─────────────────────────────────────────────────────────────────────────────
# Google Gemini — generateContent
# ─────────────────────────────────────────────────────────────────────────────

GEMINI_SAFETY_SETTINGS = [
    {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_ONLY_HIGH"},
    {"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_ONLY_HIGH"},
    {"category": "HARM_CATEGORY_SEXUALLY_EXPLICIT", "threshold": "BLOCK_ONLY_HIGH"},
    {"category": "HARM_CATEGORY_DANGEROUS_CONTENT", "threshold": "BLOCK_ONLY_HIGH"},
]

# Models that reject system_instruction; the system prompt is prepended instead
_NO_SYSTEM_INSTRUCTION_PREFIXES = ("gemini-pro", "gemini-1.0", "gemma")


def _default_gemini_model(api_key: str, model_id: str, system_instruction: Optional[str]):
    genai.configure(api_key=api_key)
    return genai.GenerativeModel(
        model_id,
        system_instruction=system_instruction,
        safety_settings=GEMINI_SAFETY_SETTINGS,
    )


class GeminiAdapter:
    provider = ModelProvider.GEMINI
    DEFAULT_SYSTEM_PROMPT = prompts.GEMINI_SYSTEM_PROMPT

    def __init__(self, model_factory: Optional[Callable] = None):
        self._model_factory = model_factory or _default_gemini_model

    async def generate(
        self,
        form_data: FormData,
        api_key: str,
        model_id: str,
        max_tokens: int,
    ) -> ProviderReply:
        prompt = build_prompt(form_data)
        system_prompt = resolve_system_prompt(form_data.generation_settings, self.DEFAULT_SYSTEM_PROMPT)

        contents = prompt
        system_instruction: Optional[str] = system_prompt
        if model_id.startswith(_NO_SYSTEM_INSTRUCTION_PREFIXES):
            contents = f"{system_prompt}\n\n{prompt}"
            system_instruction = None

        model = self._model_factory(api_key, model_id, system_instruction)
        try:
            response = await model.generate_content_async(
                contents,
                generation_config={
                    "temperature": settings.LLM_TEMPERATURE,
                    "max_output_tokens": max_tokens,
                    "top_p": 0.95,
                    "top_k": 64,
                },
            )
        except google_exceptions.GoogleAPIError as e:
            raise ProviderResponseError("Gemini", str(e)) from e

        if not getattr(response, "candidates", None):
            feedback = getattr(response, "prompt_feedback", None)
            reason = getattr(feedback, "block_reason", None)
            raise ProviderResponseError("Gemini", f"prompt blocked by safety filter ({reason})")
        try:
            text = response.text
        except ValueError as e:
            # Raised when the candidate has no parts, e.g. finish_reason=SAFETY
            raise ProviderResponseError("Gemini", f"no text in response: {e}") from e
        if not text or not text.strip():
            raise ProviderResponseError("Gemini", "generated content is empty")

        return ProviderReply(content=text.strip(), prompt=prompt)


def default_adapters() -> dict:
    return {
        ModelProvider.OPENAI: OpenAIAdapter(),
        ModelProvider.GEMINI: GeminiAdapter(),
    }
