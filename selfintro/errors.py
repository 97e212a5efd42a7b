"""Errors raised inside the generation core.

None of these cross the Dispatch Facade: ModelService turns them into a
GenerateResponse error string.
"""


class GenerationError(Exception):
    """Base class for anything that prevents a provider from returning text."""


class ConfigurationError(GenerationError):
    """Detected before any network call: missing API key, unknown model."""


class UnsupportedProviderError(ConfigurationError):
    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(f"Unsupported provider: {provider}")


class ProviderResponseError(GenerationError):
    """Non-2xx response, malformed body, safety block or empty text."""

    def __init__(self, provider: str, message: str):
        self.provider = provider
        super().__init__(f"{provider} error: {message}")
