"""Shared fixtures: throwaway storage and a stub provider adapter."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from selfintro.schemas.generation import ProviderReply
from selfintro.services.prompt_builder import build_prompt
from selfintro.storage import SessionStorage, open_device_storage


class StubAdapter:
    """Records every call; replies with fixed content or raises a configured error."""

    def __init__(self, content: str = "Hi 王小明", prompt: str | None = None, error: Exception | None = None):
        self.content = content
        self.prompt = prompt
        self.error = error
        self.calls: list[dict] = []

    async def generate(self, form_data, api_key, model_id, max_tokens):
        self.calls.append(
            {"form_data": form_data, "api_key": api_key, "model_id": model_id, "max_tokens": max_tokens}
        )
        if self.error is not None:
            raise self.error
        prompt = self.prompt if self.prompt is not None else build_prompt(form_data)
        return ProviderReply(content=self.content, prompt=prompt)


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite:///{tmp_path / 'selfintro.db'}"


@pytest.fixture
def device_storage(db_url):
    return open_device_storage(db_url)


@pytest.fixture
def session_storage():
    return SessionStorage()


@pytest.fixture
def stub_adapter():
    return StubAdapter()
