"""Artifact generation: one templated completion per offer or hook batch."""

import logging
from typing import Any

from config.config_loader import PromptsConfig
from onyxhooks.models import HookBatch, HookInput, OfferFramework, OfferInput
from onyxhooks.outcome import GenerationError, Outcome
from onyxhooks.providers.base import CompletionProvider, ProviderError, parse_json_object
from onyxhooks.tiers import Tier, apply_hook_cap, council_insights, hook_guidance, system_prompt

logger = logging.getLogger(__name__)

DEFAULT_OFFER = OfferFramework(
    hook="Are you ready to transform your coaching business?",
    problem="You're working hard but not seeing the results you deserve.",
    promise="I'll show you the exact system to scale your impact and income.",
    cta="Claim your spot - limited availability.",
    offer_name="The Transformation Method",
    price_range="$997 - $2,997",
)

DEFAULT_HOOKS = (
    "Most coaches never realize they're one framework away from 6-figure months",
    "The #1 mistake that keeps talented coaches stuck at $3K months (and how to fix it)",
)

# Static hooks served when the completion call fails; the first N go to each tier.
_FALLBACK_HOOK_TEMPLATES = (
    'Stop Wasting Money on {industry} "Gurus" Who Promise Results but Deliver Excuses',
    "The {industry} Secret That Turned My Biggest Failure Into My Greatest Success",
    "Why 97% of {industry} Professionals Fail (And the 3% Who Don't)",
    "The Uncomfortable Truth About {industry} That No One Talks About",
    "From Zero to {industry} Hero: My Unconventional 90-Day Method",
    'The {industry} Method "They" Don\'t Want You to Know',
    "BREAKING: {industry} Industry Insider Reveals All (Limited Time)",
)

_FALLBACK_HOOK_COUNT: dict[Tier, int] = {
    Tier.FREE: 2,
    Tier.STARTER: 4,
    Tier.PRO: 5,
    Tier.VAULT: 7,
}

# Offer JSON keys as the completion returns them, mapped to OfferFramework fields.
OFFER_WIRE_KEYS = {
    "hook": "hook",
    "problem": "problem",
    "promise": "promise",
    "cta": "cta",
    "offerName": "offer_name",
    "priceRange": "price_range",
}


def coerce_text(value: Any, fallback: str = "") -> str:
    """Turn a JSON value into display text; None and blanks use the fallback."""
    if value is None:
        return fallback
    text = value if isinstance(value, str) else str(value)
    return text.strip() or fallback


def fallback_hooks(industry: str, tier: Tier) -> list[str]:
    count = _FALLBACK_HOOK_COUNT[tier]
    return [t.format(industry=industry) for t in _FALLBACK_HOOK_TEMPLATES[:count]]


def framework_from_dict(data: dict[str, Any], defaults: OfferFramework = DEFAULT_OFFER) -> OfferFramework:
    """Build an OfferFramework from a reply, filling gaps field by field.

    Accepts both the camelCase wire keys and snake_case field names.
    """
    values = {}
    for wire_key, attr in OFFER_WIRE_KEYS.items():
        raw = data.get(wire_key, data.get(attr))
        values[attr] = coerce_text(raw, getattr(defaults, attr))
    return OfferFramework(**values)


def framework_to_wire(framework: OfferFramework) -> dict[str, str]:
    return {wire_key: getattr(framework, attr) for wire_key, attr in OFFER_WIRE_KEYS.items()}


def build_offer_prompt(prompts: PromptsConfig, offer_input: OfferInput) -> str:
    optional = [
        ("Tone Preference", offer_input.tone_preference),
        ("Target Pain Point", offer_input.pain_point),
        ("Specific Challenge", offer_input.challenge_faced),
        ("Desired Transformation", offer_input.desired_feeling),
    ]
    optional_fields = "\n".join(f"- {label}: {value}" for label, value in optional if value)
    return prompts.offer.format(
        coach_type=offer_input.coach_type,
        offer_type=offer_input.offer_type,
        optional_fields=optional_fields,
    )


def build_hooks_prompt(prompts: PromptsConfig, hook_input: HookInput, tier: Tier, count: int) -> str:
    audience_line = f"Target Audience: {hook_input.target_audience}" if hook_input.target_audience else ""
    return prompts.hooks.format(
        count=count,
        coach_type=hook_input.coach_type,
        industry=hook_input.industry,
        audience_line=audience_line,
        tier=tier.value,
        tier_guidance=hook_guidance(tier),
    )


async def generate_offer(
    provider: CompletionProvider,
    prompts: PromptsConfig,
    offer_input: OfferInput,
    tier: Tier | str,
) -> Outcome[OfferFramework]:
    """Generate one Hook/Problem/Promise/CTA offer framework.

    Unparseable replies fall back to DEFAULT_OFFER field by field. A failed
    call yields an error outcome with no value.
    """
    tier = Tier.parse(tier)
    prompt = build_offer_prompt(prompts, offer_input)
    try:
        completion = await provider.complete(
            prompt, system=system_prompt(tier), json_mode=True, label="offer"
        )
    except ProviderError as exc:
        logger.error("Offer generation failed for %s tier: %s", tier.value, exc)
        return Outcome.failure(GenerationError("generate offer", str(exc)))

    data = parse_json_object(completion.content)
    if not data:
        logger.warning("Offer reply was not a JSON object; using default framework fields")
    return Outcome.success(framework_from_dict(data))


async def generate_hooks(
    provider: CompletionProvider,
    prompts: PromptsConfig,
    hook_input: HookInput,
    tier: Tier | str,
    count: int = 2,
) -> Outcome[HookBatch]:
    """Generate hooks and cap them to the tier allowance.

    A failed call is served with the static tier fallback set; the outcome
    is then marked ``fallback`` and still carries the error.
    """
    tier = Tier.parse(tier)
    prompt = build_hooks_prompt(prompts, hook_input, tier, count)
    try:
        completion = await provider.complete(
            prompt, system=system_prompt(tier), json_mode=True, label="hooks"
        )
    except ProviderError as exc:
        logger.warning("Hook generation failed, serving %s fallback hooks: %s", tier.value, exc)
        batch = HookBatch(
            hooks=apply_hook_cap(fallback_hooks(hook_input.industry, tier), tier),
            council_insights=f"Demo mode: {council_insights(tier)}",
        )
        return Outcome.degraded(batch, GenerationError("generate council hooks", str(exc)))

    raw_hooks = parse_json_object(completion.content).get("hooks")
    hooks = []
    if isinstance(raw_hooks, list):
        hooks = [h.strip() for h in raw_hooks if isinstance(h, str) and h.strip()]
    if not hooks:
        logger.warning("Hook reply had no usable hooks; using defaults")
        hooks = list(DEFAULT_HOOKS)

    return Outcome.success(
        HookBatch(hooks=apply_hook_cap(hooks, tier), council_insights=council_insights(tier))
    )
