"""Subscription tiers and the static policy each one unlocks."""

import logging
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)

BASE_SYSTEM_PROMPT = (
    "You are a world-class offer strategist trained in 1,000+ high-performing coaching funnels. "
    "Your job is to act like a revenue-focused copy mentor guiding a coach through building an "
    "irresistible offer. Use proven formulas (Hook → Problem → Promise → CTA). "
    "Prioritize clarity, emotion, and uniqueness. Avoid fluff."
)


class Tier(str, Enum):
    FREE = "free"
    STARTER = "starter"
    PRO = "pro"
    VAULT = "vault"

    @classmethod
    def parse(cls, value: "str | Tier | None") -> "Tier":
        """Resolve user input to a Tier. Unknown values fall back to FREE."""
        if isinstance(value, Tier):
            return value
        normalized = (value or "").strip().lower()
        for tier in cls:
            if tier.value == normalized:
                return tier
        logger.warning("Unknown tier %r, using %s", value, cls.FREE.value)
        return cls.FREE


# Every table below is keyed by every Tier member; tests enforce that.

_ACTIVE_COUNCIL: dict[Tier, tuple[str, ...]] = {
    Tier.FREE: ("forge",),
    Tier.STARTER: ("sabien", "forge"),
    Tier.PRO: ("sabien", "blaze", "mosaic"),
    Tier.VAULT: ("sabien", "blaze", "mosaic", "methodus", "runrail", "michael"),
}

_PROMPT_SUFFIX: dict[Tier, str] = {
    Tier.FREE: (
        "This user is new — simplify explanations, but still make the copy punchy and sharp. "
        "Focus on foundational effectiveness."
    ),
    Tier.STARTER: (
        "This user is ready to scale — add unlimited creation capabilities, strategic editing "
        "tools, and clear optimization guidance. Focus on actionable improvements."
    ),
    Tier.PRO: (
        "This user has experience — add persuasion layering, social proof cues, and advanced "
        "emotional triggers. Include strategic sophistication."
    ),
    Tier.VAULT: (
        "This user is advanced — implement neuromarketing logic, AI-driven personalization, and "
        "create multiple variant options. Apply maximum conversion psychology."
    ),
}

_HOOK_CAP: dict[Tier, int | None] = {
    Tier.FREE: 2,
    Tier.STARTER: 25,
    Tier.PRO: None,
    Tier.VAULT: None,
}

_HOOK_GUIDANCE: dict[Tier, str] = {
    Tier.FREE: "Focus on clarity and emotional connection",
    Tier.STARTER: "Apply advanced psychology and neuromarketing triggers",
    Tier.PRO: "Add persuasion layers and social proof elements",
    Tier.VAULT: "Apply advanced psychology and neuromarketing triggers",
}

_COUNCIL_INSIGHTS: dict[Tier, str] = {
    Tier.FREE: "Forge agent analysis: Strong curiosity gaps and authority positioning detected.",
    Tier.STARTER: (
        "Sabien & Forge council analysis: Enhanced emotional triggers with scaling focus. "
        "25/month limit creates momentum for Pro upgrade."
    ),
    Tier.PRO: (
        "Unlimited council feedback: Advanced psychological frameworks with social proof "
        "elements. Full generation freedom unlocked."
    ),
    Tier.VAULT: (
        "Elite 6-agent council analysis: Advanced neuromarketing triggers including scarcity, "
        "authority, and insider knowledge patterns. These hooks leverage vulnerability-based "
        "relatability combined with exclusivity positioning."
    ),
}


@dataclass(frozen=True)
class TierPolicy:
    tier: Tier
    personas: tuple[str, ...]
    prompt_suffix: str
    hook_cap: int | None      # None = unlimited


def active_council(tier: Tier) -> tuple[str, ...]:
    """Ordered persona keys reviewing artifacts for this tier."""
    return _ACTIVE_COUNCIL[tier]


def prompt_suffix(tier: Tier) -> str:
    return _PROMPT_SUFFIX[tier]


def system_prompt(tier: Tier) -> str:
    return f"{BASE_SYSTEM_PROMPT} {prompt_suffix(tier)}"


def hook_cap(tier: Tier) -> int | None:
    return _HOOK_CAP[tier]


def hook_guidance(tier: Tier) -> str:
    """Per-tier line appended to the hook generation prompt."""
    return _HOOK_GUIDANCE[tier]


def council_insights(tier: Tier) -> str:
    return _COUNCIL_INSIGHTS[tier]


def apply_hook_cap(hooks: list[str], tier: Tier) -> list[str]:
    cap = hook_cap(tier)
    if cap is None:
        return list(hooks)
    return list(hooks[:cap])


def resolve(tier: "str | Tier | None") -> TierPolicy:
    """Build the full policy for a tier, defaulting unknown input to FREE."""
    resolved = Tier.parse(tier)
    return TierPolicy(
        tier=resolved,
        personas=active_council(resolved),
        prompt_suffix=prompt_suffix(resolved),
        hook_cap=hook_cap(resolved),
    )
