"""Load settings.yaml into typed dataclasses. Reports which providers have API keys."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

_SETTINGS_PATH = Path(__file__).parent / "settings.yaml"

_PROMPT_KEYS = (
    "offer",
    "hooks",
    "hook_review",
    "offer_review",
    "closer",
    "hook_upgrade",
    "offer_upgrade",
    "gladiator_system",
    "vault_directive",
    "gladiator_user",
    "sequence_system",
    "sequence",
)


@dataclass
class ModelConfig:
    name: str
    sdk: str
    model: str
    api_key_env: str
    timeout_sec: int
    max_tokens: int
    base_url: str | None = None


@dataclass
class PromptsConfig:
    offer: str
    hooks: str
    hook_review: str
    offer_review: str
    closer: str
    hook_upgrade: str
    offer_upgrade: str
    gladiator_system: str
    vault_directive: str
    gladiator_user: str
    sequence_system: str
    sequence: str


@dataclass
class PipelineConfig:
    upgrade_threshold: int = 90
    verify_upgrades: bool = False      # re-score rewrites instead of trusting the model's estimate
    parallel_reviews: bool = True
    hook_count: int = 2


@dataclass
class DefaultsConfig:
    provider: str
    output_dir: Path
    tier: str = "free"


@dataclass
class InboxConfig:
    dir: Path
    archive_dir: Path


@dataclass
class AppConfig:
    defaults: DefaultsConfig
    models: dict[str, ModelConfig]
    prompts: PromptsConfig
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    inbox: InboxConfig = field(
        default_factory=lambda: InboxConfig(dir=Path("./inbox"), archive_dir=Path("./inbox/archive"))
    )
    available_providers: set[str] = field(default_factory=set)


def load_config(settings_path: Path = _SETTINGS_PATH) -> AppConfig:
    """Load and validate configuration from settings.yaml.

    Raises FileNotFoundError if settings file missing, KeyError if a prompt
    template is missing. Logs missing API keys but does not raise; callers
    check available_providers.
    """
    if not settings_path.exists():
        raise FileNotFoundError(f"Settings file not found: {settings_path}")

    with settings_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    defaults_raw = raw["defaults"]
    defaults = DefaultsConfig(
        provider=str(defaults_raw["provider"]),
        output_dir=Path(defaults_raw["output_dir"]),
        tier=str(defaults_raw.get("tier", "free")),
    )

    pipeline_raw = raw.get("pipeline") or {}
    pipeline = PipelineConfig(
        upgrade_threshold=int(pipeline_raw.get("upgrade_threshold", 90)),
        verify_upgrades=bool(pipeline_raw.get("verify_upgrades", False)),
        parallel_reviews=bool(pipeline_raw.get("parallel_reviews", True)),
        hook_count=int(pipeline_raw.get("hook_count", 2)),
    )

    inbox_raw = raw.get("inbox") or {}
    inbox_dir = Path(inbox_raw.get("dir", "./inbox"))
    inbox = InboxConfig(
        dir=inbox_dir,
        archive_dir=Path(inbox_raw.get("archive_dir", inbox_dir / "archive")),
    )

    prompts_raw = raw["prompts"]
    missing = [k for k in _PROMPT_KEYS if k not in prompts_raw]
    if missing:
        raise KeyError(f"Missing prompt templates: {', '.join(missing)}")
    prompts = PromptsConfig(**{k: str(prompts_raw[k]) for k in _PROMPT_KEYS})

    models: dict[str, ModelConfig] = {}
    available_providers: set[str] = set()

    for provider_name, model_raw in raw["models"].items():
        model_cfg = ModelConfig(
            name=provider_name,
            sdk=model_raw["sdk"],
            model=model_raw["model"],
            api_key_env=model_raw["api_key_env"],
            timeout_sec=int(model_raw["timeout_sec"]),
            max_tokens=int(model_raw["max_tokens"]),
            base_url=model_raw.get("base_url"),
        )
        models[provider_name] = model_cfg

        api_key = os.environ.get(model_raw["api_key_env"], "").strip()
        if api_key:
            available_providers.add(provider_name)
            logger.info("Provider available: %s", provider_name)
        else:
            logger.info(
                "Provider skipped (no API key): %s, set %s in .env",
                provider_name,
                model_raw["api_key_env"],
            )

    return AppConfig(
        defaults=defaults,
        models=models,
        prompts=prompts,
        pipeline=pipeline,
        inbox=inbox,
        available_providers=available_providers,
    )
