"""Tests for config/config_loader.py."""

from pathlib import Path

import pytest
import yaml

from config.config_loader import _PROMPT_KEYS, AppConfig, ModelConfig, PipelineConfig, PromptsConfig, load_config


@pytest.fixture
def minimal_settings(tmp_path: Path) -> Path:
    """Write a minimal valid settings.yaml to a temp path."""
    settings = {
        "defaults": {
            "provider": "claude",
            "tier": "pro",
            "output_dir": "./output",
        },
        "models": {
            "claude": {
                "sdk": "anthropic",
                "model": "claude-sonnet-4-20250514",
                "api_key_env": "TEST_CLAUDE_KEY",
                "timeout_sec": 90,
                "max_tokens": 2000,
            }
        },
        "prompts": {key: f"{key} template" for key in _PROMPT_KEYS},
    }
    path = tmp_path / "settings.yaml"
    path.write_text(yaml.dump(settings), encoding="utf-8")
    return path


def test_load_config_returns_app_config(minimal_settings):
    config = load_config(minimal_settings)
    assert isinstance(config, AppConfig)


def test_load_config_defaults(minimal_settings):
    config = load_config(minimal_settings)
    assert config.defaults.provider == "claude"
    assert config.defaults.tier == "pro"
    assert isinstance(config.defaults.output_dir, Path)


def test_pipeline_and_inbox_optional(minimal_settings):
    config = load_config(minimal_settings)
    assert config.pipeline == PipelineConfig()
    assert config.pipeline.upgrade_threshold == 90
    assert config.inbox.dir == Path("./inbox")
    assert config.inbox.archive_dir == Path("./inbox/archive")


def test_pipeline_overrides(tmp_path: Path, minimal_settings):
    raw = yaml.safe_load(minimal_settings.read_text(encoding="utf-8"))
    raw["pipeline"] = {"upgrade_threshold": 80, "verify_upgrades": True, "parallel_reviews": False}
    raw["inbox"] = {"dir": "./queue"}
    minimal_settings.write_text(yaml.dump(raw), encoding="utf-8")
    config = load_config(minimal_settings)
    assert config.pipeline.upgrade_threshold == 80
    assert config.pipeline.verify_upgrades is True
    assert config.pipeline.parallel_reviews is False
    assert config.pipeline.hook_count == 2
    assert config.inbox.archive_dir == Path("./queue") / "archive"


def test_load_config_models(minimal_settings):
    config = load_config(minimal_settings)
    assert isinstance(config.models["claude"], ModelConfig)
    assert config.models["claude"].sdk == "anthropic"
    assert config.models["claude"].base_url is None


def test_load_config_prompts(minimal_settings):
    config = load_config(minimal_settings)
    assert isinstance(config.prompts, PromptsConfig)
    assert config.prompts.closer == "closer template"


def test_missing_prompt_template_raises(minimal_settings):
    raw = yaml.safe_load(minimal_settings.read_text(encoding="utf-8"))
    del raw["prompts"]["closer"]
    minimal_settings.write_text(yaml.dump(raw), encoding="utf-8")
    with pytest.raises(KeyError, match="closer"):
        load_config(minimal_settings)


def test_load_config_available_providers_with_key(minimal_settings, monkeypatch):
    monkeypatch.setenv("TEST_CLAUDE_KEY", "sk-test-key")
    config = load_config(minimal_settings)
    assert "claude" in config.available_providers


def test_load_config_no_available_providers_without_key(minimal_settings, monkeypatch):
    monkeypatch.delenv("TEST_CLAUDE_KEY", raising=False)
    config = load_config(minimal_settings)
    assert "claude" not in config.available_providers


def test_load_config_missing_file():
    with pytest.raises(FileNotFoundError):
        load_config(Path("/nonexistent/settings.yaml"))


def test_shipped_settings_load():
    config = load_config()
    assert set(config.models) == {"openai", "claude", "gemini"}
    assert config.defaults.tier == "free"
    assert "{brief}" in config.prompts.hook_review


def test_shipped_prompts_render(prompts):
    """Every shipped template formats without stray braces."""
    prompts.closer.format(kind="hook", artifact="Hook: x", scorecard="{}")
    prompts.sequence.format(content="x", content_type="hook")
    prompts.vault_directive.format()
    prompts.sequence_system.format()
