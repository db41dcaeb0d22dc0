"""Shared pytest fixtures."""

import json
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from config.config_loader import AppConfig, DefaultsConfig, ModelConfig, PromptsConfig, load_config
from onyxhooks.models import Completion
from onyxhooks.providers.base import CompletionProvider, ProviderError


def hook_review(score: int, justification: str = "Solid hook", suggestion: str | None = None) -> str:
    """A persona reply giving every hook dimension the same score."""
    payload = {key: score for key in ("clarity", "curiosity", "relevance", "urgency", "specificity")}
    payload["justification"] = justification
    if suggestion is not None:
        payload["rewriteSuggestion"] = suggestion
    return json.dumps(payload)


def offer_review(**scores: int) -> str:
    payload = {
        "dreamOutcome": 15,
        "likelihoodOfSuccess": 10,
        "timeToResults": 10,
        "effortAndSacrifice": 8,
        "riskReversal": 7,
        "valueStack": 7,
        "priceFraming": 7,
        "messagingClarity": 8,
        "justification": "Clear promise, weak guarantee",
    }
    payload.update(scores)
    return json.dumps(payload)


class MockProvider(CompletionProvider):
    """Test double CompletionProvider.

    ``replies`` maps a call label to reply text, a ProviderError to raise, or
    a list consumed one item per call. Lookup tries the full label
    ("review:sabien"), then its prefix ("review"), then "default".
    """

    def __init__(self, provider_name: str = "mock", replies: dict | None = None) -> None:
        self._name = provider_name
        self.replies = dict(replies or {})
        self.calls: list[dict] = []
        # Shadow the class method with an AsyncMock at the instance level.
        # ABC check passes because complete is defined in the class body below.
        self.complete = AsyncMock(side_effect=self._reply)  # type: ignore[assignment]

    def name(self) -> str:
        return self._name

    def model_string(self) -> str:
        return "mock-model"

    def labels(self) -> list[str]:
        return [call["label"] for call in self.calls]

    async def _reply(self, prompt: str, *, system=None, json_mode=False, label="") -> Completion:
        self.calls.append({"prompt": prompt, "system": system, "json_mode": json_mode, "label": label})
        for key in (label, label.split(":")[0], "default"):
            if key in self.replies:
                reply = self.replies[key]
                break
        else:
            reply = '{"status": "ok"}'
        if isinstance(reply, list):
            reply = reply.pop(0) if len(reply) > 1 else reply[0]
        if isinstance(reply, Exception):
            raise reply
        return Completion(
            provider=self._name,
            model="mock-model",
            content=reply,
            latency_sec=0.1,
            token_count=10,
        )

    async def complete(self, prompt: str, *, system=None, json_mode=False, label="") -> Completion:  # type: ignore[override]
        """Default implementation; replaced by AsyncMock in __init__."""
        return await self._reply(prompt, system=system, json_mode=json_mode, label=label)


def failing(message: str = "500 Internal Server Error") -> ProviderError:
    return ProviderError("mock", message)


@pytest.fixture
def prompts() -> PromptsConfig:
    """The real prompt templates, so tests catch placeholder mismatches."""
    return load_config().prompts


@pytest.fixture
def sample_model_config() -> ModelConfig:
    return ModelConfig(
        name="test_model",
        sdk="openai",
        model="test-model-1",
        api_key_env="TEST_API_KEY",
        timeout_sec=30,
        max_tokens=1024,
        base_url=None,
    )


@pytest.fixture
def sample_app_config(tmp_path: Path, prompts: PromptsConfig) -> AppConfig:
    model_cfg = ModelConfig(
        name="claude",
        sdk="anthropic",
        model="claude-sonnet-4-20250514",
        api_key_env="ANTHROPIC_API_KEY",
        timeout_sec=60,
        max_tokens=2000,
    )
    return AppConfig(
        defaults=DefaultsConfig(provider="claude", output_dir=tmp_path / "output", tier="free"),
        models={"claude": model_cfg},
        prompts=prompts,
        available_providers={"claude"},
    )

