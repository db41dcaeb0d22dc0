"""Gladiator council critique of a single hook, offer or CTA."""

import asyncio
import logging
import random
import re
import uuid
from datetime import datetime

from config.config_loader import PromptsConfig
from onyxhooks.models import CouncilSession, GladiatorResponse
from onyxhooks.personas import GLADIATORS, Gladiator
from onyxhooks.providers.base import CompletionProvider, ProviderError
from onyxhooks.tiers import Tier

logger = logging.getLogger(__name__)

CONTENT_TYPES = ("hook", "offer", "cta")

_ACTIVE_GLADIATORS: dict[Tier, tuple[str, ...]] = {
    Tier.FREE: ("maximus", "spartacus"),
    Tier.STARTER: ("maximus", "spartacus", "leonidas", "brutus"),
    Tier.PRO: ("maximus", "spartacus", "leonidas", "brutus", "achilles"),
    Tier.VAULT: ("maximus", "spartacus", "leonidas", "brutus", "achilles", "valerius"),
}

_TIER_CONTEXT: dict[Tier, str] = {
    Tier.FREE: "limited preview",
    Tier.STARTER: "full access experience",
    Tier.PRO: "professional collaboration",
    Tier.VAULT: "premium cinematic experience",
}

_DEPTH: dict[Tier, str] = {
    Tier.FREE: "brief",
    Tier.STARTER: "actionable",
    Tier.PRO: "comprehensive",
    Tier.VAULT: "cinematic and detailed",
}

_SYNTHESIS_TAIL: dict[Tier, str] = {
    Tier.FREE: "Basic arena analysis complete.",
    Tier.STARTER: "Complete gladiator analysis with clear next steps.",
    Tier.PRO: "Professional gladiator analysis complete with actionable recommendations.",
    Tier.VAULT: "Elite arena analysis complete with full strategic insights.",
}

NEXT_STEPS = (
    "Review each gladiator's detailed feedback",
    "Prioritize high-impact warrior recommendations",
    "Implement changes systematically",
    "Test with target audience",
    "Monitor conversion metrics closely",
)

_NAMES = "|".join(g.name for g in GLADIATORS.values())
_ATTRIBUTION_RE = re.compile(rf"\*\*({_NAMES})\*\*\s*(\([^)]*\))?\s*:?\s*", re.IGNORECASE)
_PHASE_RE = re.compile(r"\*PHASE\s+\d+:\s*[^*]*\*", re.IGNORECASE)


def active_gladiators(tier: Tier) -> list[Gladiator]:
    return [GLADIATORS[key] for key in _ACTIVE_GLADIATORS[tier]]


def clean_agent_names(text: str) -> str:
    """Strip "**Name** (Focus):" attributions and phase banners from copy."""
    return _PHASE_RE.sub("", _ATTRIBUTION_RE.sub("", text)).strip()


def blur_response(response: str, words_visible: int = 2) -> str:
    """Keep the first few words and mask the rest for locked tiers."""
    words = response.split(" ")
    visible = " ".join(words[:words_visible])
    blurred_length = max(len(response) - len(visible), 20)
    return f"{visible} {'█' * (blurred_length // 3)}..."


def _system_prompt(prompts: PromptsConfig, gladiator: Gladiator, tier: Tier) -> str:
    system = prompts.gladiator_system.format(
        name=gladiator.name,
        title=gladiator.title,
        background=gladiator.background,
        tone=gladiator.tone,
        specialization=gladiator.specialization,
        response_style=gladiator.response_style,
        tier=tier.value,
        tier_context=_TIER_CONTEXT[tier],
        triggers=", ".join(gladiator.triggers),
        depth=_DEPTH[tier],
    )
    if tier is Tier.VAULT:
        system = f"{system}\n{prompts.vault_directive}"
    return system


def _user_prompt(
    prompts: PromptsConfig,
    gladiator: Gladiator,
    content: str,
    content_type: str,
    industry: str = "",
    target_audience: str = "",
    context: str = "",
) -> str:
    lines = [
        f"{label}: {value}"
        for label, value in (
            ("Industry", industry),
            ("Target Audience", target_audience),
            ("Additional Context", context),
        )
        if value
    ]
    return prompts.gladiator_user.format(
        content_type=content_type,
        content=content,
        context_lines="\n".join(lines),
        name=gladiator.name,
        focus=gladiator.focus,
    )


async def _gladiator_response(
    provider: CompletionProvider,
    prompts: PromptsConfig,
    gladiator: Gladiator,
    tier: Tier,
    user_prompt: str,
    rng: random.Random,
) -> GladiatorResponse:
    try:
        completion = await provider.complete(
            user_prompt,
            system=_system_prompt(prompts, gladiator, tier),
            label=f"gladiator:{gladiator.key}",
        )
        text = completion.content
    except ProviderError as exc:
        logger.warning("Gladiator %s failed, using canned feedback: %s", gladiator.key, exc)
        text = gladiator.elite_line if tier is Tier.VAULT else rng.choice(gladiator.preview_lines)

    return GladiatorResponse(
        agent_id=gladiator.key,
        agent_name=gladiator.name,
        response=clean_agent_names(text) or f"{gladiator.name} analysis complete.",
        tone=gladiator.tone,
        blurred=False,
    )


async def analyze_content(
    provider: CompletionProvider,
    prompts: PromptsConfig,
    content: str,
    content_type: str,
    tier: Tier | str,
    industry: str = "",
    target_audience: str = "",
    context: str = "",
    rng: random.Random | None = None,
) -> CouncilSession:
    """Collect one critique per active gladiator.

    The free tier gets canned, blurred previews and makes no API calls. Paid
    tiers call each gladiator concurrently; a failed call is replaced with
    canned copy rather than failing the session.
    """
    tier = Tier.parse(tier)
    if content_type not in CONTENT_TYPES:
        raise ValueError(f"content_type must be one of {', '.join(CONTENT_TYPES)}, got {content_type!r}")
    rng = rng or random.Random()
    gladiators = active_gladiators(tier)
    logger.info("Gladiator analysis (%s tier): %s", tier.value, ", ".join(g.name for g in gladiators))

    if tier is Tier.FREE:
        responses = [
            GladiatorResponse(
                agent_id=g.key,
                agent_name=g.name,
                response=clean_agent_names(rng.choice(g.preview_lines)),
                tone=g.tone,
                blurred=True,
            )
            for g in gladiators
        ]
    else:
        responses = list(
            await asyncio.gather(
                *(
                    _gladiator_response(
                        provider,
                        prompts,
                        g,
                        tier,
                        _user_prompt(prompts, g, content, content_type, industry, target_audience, context),
                        rng,
                    )
                    for g in gladiators
                )
            )
        )

    return CouncilSession(
        session_id=f"council_{uuid.uuid4().hex[:12]}",
        content_type=content_type,
        responses=responses,
        synthesis=(
            f"Council of {len(responses)} gladiators has analyzed your {content_type}. "
            f"{_SYNTHESIS_TAIL[tier]}"
        ),
        next_steps=list(NEXT_STEPS),
        timestamp=datetime.now(),
    )
