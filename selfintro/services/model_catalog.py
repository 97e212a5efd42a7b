"""Supported models per provider, plus rough token and cost estimates."""

import math
from typing import Optional

from pydantic import BaseModel, ConfigDict

from selfintro.services.providers import ModelProvider


class ModelInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    default_tokens: int
    cost_per_1k_tokens: Optional[float] = None
    currency: str = "USD"


OPENAI_MODELS: list[ModelInfo] = [
    ModelInfo(id="gpt-4o", name="GPT-4o", description="最強大的 OpenAI 模型，可用於複雜專業自我介紹",
              default_tokens=16000, cost_per_1k_tokens=10),
    ModelInfo(id="gpt-4o-mini", name="GPT-4o Mini", description="速度快、價格低、能力強的模型，適合一般自我介紹",
              default_tokens=8000, cost_per_1k_tokens=2.5),
    ModelInfo(id="gpt-4-turbo", name="GPT-4 Turbo", description="強大且高效的模型，適合複雜用例",
              default_tokens=8000, cost_per_1k_tokens=15),
    ModelInfo(id="gpt-3.5-turbo", name="GPT-3.5 Turbo", description="經濟實惠的選擇，適合一般自我介紹",
              default_tokens=4000, cost_per_1k_tokens=0.5),
]

GEMINI_MODELS: list[ModelInfo] = [
    ModelInfo(id="gemini-2.0-flash", name="Gemini 2.0 Flash", description="多模態模型，100萬詞元脈絡窗口",
              default_tokens=32000, cost_per_1k_tokens=0.1),
    ModelInfo(id="gemini-2.0-flash-lite", name="Gemini 2.0 Flash-Lite", description="最小且最符合成本效益的機型",
              default_tokens=16000, cost_per_1k_tokens=0.075),
    ModelInfo(id="gemini-1.5-pro", name="Gemini 1.5 Pro", description="200 萬個符記脈絡窗口的先進多模態模型",
              default_tokens=128000, cost_per_1k_tokens=1.25),
    ModelInfo(id="gemini-1.5-flash", name="Gemini 1.5 Flash", description="平衡成本與效能，適合大多數生成需求",
              default_tokens=16000, cost_per_1k_tokens=0.0375),
    ModelInfo(id="gemma-3", name="Gemma 3", description="Google 開源語言模型，平衡效能與成本效益",
              default_tokens=8000, cost_per_1k_tokens=0.05),
    ModelInfo(id="gemini-1.0-pro", name="Gemini 1.0 Pro", description="穩定可靠的模型，適合標準文本生成",
              default_tokens=4000, cost_per_1k_tokens=0.5),
]

# Per-token cost assumptions used for the estimate shown with each result
_GPT4_COST_PER_TOKEN = 0.00003
_OPENAI_COST_PER_TOKEN = 0.000002
_GEMINI_COST_PER_TOKEN = 0.0000005


def get_all_models() -> list[ModelInfo]:
    return [*OPENAI_MODELS, *GEMINI_MODELS]


def get_models(provider: ModelProvider) -> list[ModelInfo]:
    return OPENAI_MODELS if provider is ModelProvider.OPENAI else GEMINI_MODELS


def get_model_by_id(model_id: str) -> ModelInfo:
    """Catalog entry for model_id; unknown ids fall back to the first OpenAI model."""
    for model in get_all_models():
        if model.id == model_id:
            return model
    return OPENAI_MODELS[0]


def get_default_model(provider: ModelProvider) -> ModelInfo:
    return get_models(provider)[0]


def estimate_tokens(text: str) -> int:
    """Very rough: one token per four characters."""
    return math.ceil(len(text) / 4)


def estimate_cost(tokens: int, provider, model_id: str) -> float:
    provider = ModelProvider.parse(provider)
    if provider is ModelProvider.OPENAI:
        if "gpt-4" in model_id:
            return tokens * _GPT4_COST_PER_TOKEN
        return tokens * _OPENAI_COST_PER_TOKEN
    if provider is ModelProvider.GEMINI:
        return tokens * _GEMINI_COST_PER_TOKEN
    return 0.0
