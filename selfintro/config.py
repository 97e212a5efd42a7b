"""Application configuration loaded from environment variables."""

import logging

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Storage ──────────────────────────────────────────────────────────────
    # Device-scoped key-value storage (history, prompt templates).
    # SQLite file by default; any SQLAlchemy URL works.
    DATABASE_URL: str = "sqlite:///./selfintro.db"

    # ── Providers ────────────────────────────────────────────────────────────
    # Used only when the caller does not pass an explicit key.
    OPENAI_API_KEY: str = ""
    GEMINI_API_KEY: str = ""

    # openai | gemini
    DEFAULT_PROVIDER: str = "openai"
    OPENAI_MODEL: str = "gpt-4o"
    GEMINI_MODEL: str = "gemini-1.5-pro"

    MAX_TOKENS: int = 1500
    LLM_TEMPERATURE: float = 0.7

    # Timeout around a single provider call, in seconds. 0 disables it.
    PROVIDER_TIMEOUT_SECONDS: float = 60.0

    # ── Templates ────────────────────────────────────────────────────────────
    # Unmatched {placeholders} are left in the rendered prompt unless this is on.
    STRIP_UNMATCHED_PLACEHOLDERS: bool = False

    # ── Logging ──────────────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()


def configure_logging(level: str | None = None) -> None:
    """Install a basic log format for the selfintro loggers."""
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
