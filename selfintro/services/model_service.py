"""Dispatch facade over the provider adapters.

    service = ModelService()
    response = await service.generate(form_data, "openai", api_key, "gpt-4o")
    if response.ok:
        print(response.content)
    else:
        print(response.error)

generate() never raises: configuration problems, transport failures and
malformed provider responses all come back as GenerateResponse(error=...).
"""

import asyncio
import logging
from typing import Optional

from selfintro.config import settings
from selfintro.errors import ConfigurationError, GenerationError, UnsupportedProviderError
from selfintro.schemas.form import FormData
from selfintro.schemas.generation import GenerateResponse
from selfintro.services.providers import ModelProvider, default_adapters

logger = logging.getLogger(__name__)

UNSUPPORTED_PROVIDER_MARKER = "Unsupported provider"


def _settings_api_key(provider: ModelProvider) -> str:
    if provider is ModelProvider.OPENAI:
        return settings.OPENAI_API_KEY
    return settings.GEMINI_API_KEY


def default_model_id(provider: ModelProvider) -> str:
    if provider is ModelProvider.OPENAI:
        return settings.OPENAI_MODEL
    return settings.GEMINI_MODEL


class ModelService:
    def __init__(self, adapters: Optional[dict] = None, timeout: Optional[float] = None):
        self._adapters = adapters if adapters is not None else default_adapters()
        self._timeout = settings.PROVIDER_TIMEOUT_SECONDS if timeout is None else timeout

    def supports(self, provider) -> bool:
        parsed = ModelProvider.parse(provider)
        return parsed is not None and parsed in self._adapters

    async def generate(
        self,
        form_data: FormData,
        provider,
        api_key: Optional[str] = None,
        model_id: Optional[str] = None,
        max_tokens: Optional[int] = None,
    ) -> GenerateResponse:
        try:
            return await self._generate(form_data, provider, api_key, model_id, max_tokens)
        except asyncio.TimeoutError:
            logger.error(f"Provider {provider} timed out after {self._timeout}s")
            return GenerateResponse(error=f"Provider request timed out after {self._timeout:g}s")
        except GenerationError as e:
            logger.error(f"Generation with {provider} failed: {e}")
            return GenerateResponse(error=str(e))
        except Exception as e:
            logger.exception(f"Unexpected error generating with {provider}")
            return GenerateResponse(error=str(e) or type(e).__name__)

    async def _generate(
        self,
        form_data: FormData,
        provider,
        api_key: Optional[str],
        model_id: Optional[str],
        max_tokens: Optional[int],
    ) -> GenerateResponse:
        parsed = ModelProvider.parse(provider)
        adapter = self._adapters.get(parsed) if parsed is not None else None
        if adapter is None:
            raise UnsupportedProviderError(str(getattr(provider, "value", provider)))

        key = api_key or _settings_api_key(parsed)
        if not key:
            raise ConfigurationError(f"{parsed.display_name} API key is not set.")

        model_id = model_id or default_model_id(parsed)
        max_tokens = max_tokens or settings.MAX_TOKENS

        logger.info(f"Generating with {parsed.value} model {model_id}")
        call = adapter.generate(form_data, key, model_id, max_tokens)
        if self._timeout and self._timeout > 0:
            # wait_for cancels the call on timeout, so no late reply can surface
            reply = await asyncio.wait_for(call, timeout=self._timeout)
        else:
            reply = await call

        return GenerateResponse(content=reply.content, prompt=reply.prompt)
