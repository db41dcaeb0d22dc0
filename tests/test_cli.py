"""Tests for the click CLI in onyxhooks/cli.py. Providers are mocked."""

import json
from pathlib import Path

import click
import pytest
from click.testing import CliRunner

import onyxhooks.cli as cli
from onyxhooks.cli import (
    PROVIDER_CLASSES,
    _build_all_providers,
    _offer_input_from,
    _parse_offer,
    _select_provider,
    main,
)
from onyxhooks.providers.anthropic import AnthropicProvider

from tests.conftest import MockProvider, hook_review, offer_review


@pytest.fixture
def mock_all_providers():
    return {"claude": MockProvider("claude"), "openai": MockProvider("openai")}


@pytest.fixture
def council_provider(monkeypatch) -> MockProvider:
    """Route every CLI run to a single scripted provider."""
    provider = MockProvider("openai", replies={
        "hooks": json.dumps({"hooks": ["Hook A", "Hook B", "Hook C"]}),
        "offer": json.dumps({"offerName": "Reset", "hook": "Still stuck?"}),
        "review": hook_review(15),
        "closer": "Tighten the CTA.",
        "gladiator": "Sharpen the promise.",
    })
    monkeypatch.setattr(cli, "_build_all_providers", lambda config: {"openai": provider})
    return provider


def _invoke(*args: str):
    return CliRunner().invoke(main, ["--skip-health-check", "--no-save", *args])


def test_provider_classes_keyed_by_sdk():
    assert set(PROVIDER_CLASSES) == {"openai", "anthropic", "gemini"}


def test_build_all_providers_uses_sdk(sample_app_config, monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-test")
    providers = _build_all_providers(sample_app_config)
    assert isinstance(providers["claude"], AnthropicProvider)


def test_build_all_providers_skips_unknown_sdk(sample_app_config):
    sample_app_config.models["claude"].sdk = "cohere"
    assert _build_all_providers(sample_app_config) == {}


def test_select_preferred_provider(mock_all_providers):
    assert _select_provider(mock_all_providers, "openai").name() == "openai"


def test_select_falls_back_to_first_available(mock_all_providers):
    assert _select_provider(mock_all_providers, "gemini").name() == "claude"


def test_offer_input_accepts_camel_case():
    offer_input = _offer_input_from({"coachType": "Life coach", "offer_type": "VIP day", "painPoint": "Burnout"})
    assert offer_input.coach_type == "Life coach"
    assert offer_input.offer_type == "VIP day"
    assert offer_input.pain_point == "Burnout"


def test_offer_input_requires_both_types():
    with pytest.raises(click.UsageError):
        _offer_input_from({"coach_type": "Life coach"})


def test_parse_offer_rejects_non_object():
    with pytest.raises(click.UsageError):
        _parse_offer("[1, 2]")
    with pytest.raises(click.UsageError):
        _parse_offer("not json")


def test_hooks_command_free_tier(council_provider):
    result = _invoke("--tier", "free", "hooks", "fitness")
    assert result.exit_code == 0, result.output
    assert "Hook A" in result.output
    assert "Hook C" not in result.output
    assert council_provider.labels() == ["hooks"]


def test_hooks_command_with_scoring(council_provider):
    result = _invoke("--tier", "starter", "hooks", "fitness", "--score")
    assert result.exit_code == 0, result.output
    assert council_provider.labels().count("review:sabien") == 3


def test_offer_command(council_provider):
    council_provider.replies["review"] = offer_review()
    result = _invoke("--tier", "pro", "offer", "--coach-type", "Fitness coach", "--offer-type", "Challenge")
    assert result.exit_code == 0, result.output
    assert "Reset" in result.output
    assert "72/100" in result.output


def test_score_command_hook(council_provider):
    result = _invoke("--tier", "free", "score", "hook", "Stop losing clients")
    assert result.exit_code == 0, result.output
    assert council_provider.labels() == ["review:forge"]


def test_analyze_free_tier_never_builds_provider(monkeypatch):
    def explode(config):
        raise AssertionError("provider should not be built")

    monkeypatch.setattr(cli, "_build_all_providers", explode)
    result = _invoke("--tier", "free", "analyze", "Book a call", "--type", "cta")
    assert result.exit_code == 0, result.output
    assert "Maximus" in result.output


def test_sequence_requires_vault(council_provider):
    result = _invoke("--tier", "pro", "sequence", "Join now")
    assert result.exit_code == 1
    assert "exclusive" in result.output
    assert council_provider.calls == []


def test_missing_content_is_usage_error(council_provider):
    result = _invoke("analyze")
    assert result.exit_code == 2


def test_saves_report(council_provider, tmp_path: Path):
    result = CliRunner().invoke(
        main, ["--skip-health-check", "--output", str(tmp_path), "--tier", "free", "hooks", "fitness"]
    )
    assert result.exit_code == 0, result.output
    reports = list(tmp_path.glob("*_hooks-for-fitness.md"))
    assert len(reports) == 1


def test_inbox_processes_and_archives(council_provider, tmp_path: Path):
    inbox_dir = tmp_path / "inbox"
    inbox_dir.mkdir()
    (inbox_dir / "good.md").write_text("---\nkind: hooks\nindustry: fitness\n---\n", encoding="utf-8")
    (inbox_dir / "bad.md").write_text("---\nkind: sequence\ntier: pro\n---\nJoin now\n", encoding="utf-8")

    result = CliRunner().invoke(
        main, ["--skip-health-check", "--output", str(tmp_path / "out"), "inbox", "--inbox-dir", str(inbox_dir)]
    )

    assert result.exit_code == 0, result.output
    archived = sorted(p.name for p in (inbox_dir / "archive").iterdir())
    assert any(name.startswith("FAILED_") and name.endswith("bad.md") for name in archived)
    assert any(not name.startswith("FAILED_") and name.endswith("good.md") for name in archived)
    assert len(list((tmp_path / "out").glob("*_good.md"))) == 1
