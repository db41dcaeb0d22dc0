"""Council review: persona scoring, composite scorecard, closer notes and upgrades."""

import asyncio
import dataclasses
import json
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from config.config_loader import PipelineConfig, PromptsConfig
from onyxhooks.generator import coerce_text, framework_to_wire
from onyxhooks.models import (
    CouncilAgentScore,
    HookScorecard,
    HookUpgrade,
    OfferFramework,
    OfferScorecard,
    OfferUpgrade,
    ScoredHookResult,
    ScoredOfferResult,
)
from onyxhooks.outcome import GenerationError, Outcome
from onyxhooks.personas import Persona, council_persona
from onyxhooks.providers.base import CompletionProvider, ProviderError, parse_json_object
from onyxhooks.rubric import HOOK_RUBRIC, OFFER_RUBRIC, Rubric, clamp_score, composite
from onyxhooks.tiers import Tier, active_council

logger = logging.getLogger(__name__)

# Score the upgrade step reports when the model omits its own estimate
_DEFAULT_ESTIMATED_SCORE = 95


@dataclass
class CouncilPass:
    """One round of persona reviews folded into a composite."""

    scorecard: Any
    feedback: list[CouncilAgentScore]
    failed: list[str] = field(default_factory=list)
    last_error: ProviderError | None = None


def should_upgrade(tier: Tier, total: int, threshold: int) -> bool:
    """Only vault artifacts scoring under the threshold get a rewrite."""
    return tier is Tier.VAULT and total < threshold


def scorecard_payload(scorecard: HookScorecard | OfferScorecard) -> dict[str, Any]:
    payload = dataclasses.asdict(scorecard)
    payload["total"] = scorecard.total
    return payload


def _context_line(context: dict[str, str] | None) -> str:
    context = {k: v for k, v in (context or {}).items() if v}
    return f"Context: {json.dumps(context)}" if context else ""


def _agent_score(rubric: Rubric, persona: Persona, data: dict[str, Any]) -> CouncilAgentScore:
    suggestion = coerce_text(data.get("rewriteSuggestion"))
    return CouncilAgentScore(
        persona=persona.key,
        name=persona.name,
        role=persona.role,
        scores={d.key: data[d.key] for d in rubric.dimensions if d.key in data},
        justification=coerce_text(data.get("justification")),
        rewrite_suggestion=suggestion or None,
    )


async def _call_persona(
    provider: CompletionProvider,
    persona: Persona,
    rubric: Rubric,
    prompt: str,
) -> CouncilAgentScore | ProviderError:
    """Run one persona review. Never raises; returns ProviderError on failure."""
    try:
        completion = await provider.complete(prompt, json_mode=True, label=f"review:{persona.key}")
    except ProviderError as exc:
        logger.warning("Persona %s review failed: %s", persona.key, exc)
        return exc
    return _agent_score(rubric, persona, parse_json_object(completion.content))


async def council_pass(
    provider: CompletionProvider,
    rubric: Rubric,
    tier: Tier,
    render_prompt: Callable[[Persona], str],
    parallel: bool = True,
) -> CouncilPass:
    """Ask every active persona for a review and build the composite.

    Feedback keeps the tier's persona order whether calls run concurrently
    or one after another.
    """
    personas = [council_persona(key) for key in active_council(tier)]
    calls: list[Callable[[], Awaitable[CouncilAgentScore | ProviderError]]] = [
        (lambda p=p: _call_persona(provider, p, rubric, render_prompt(p))) for p in personas
    ]

    logger.info("Council review (%s, %s tier): %d persona(s)", rubric.name, tier.value, len(personas))
    if parallel:
        results = await asyncio.gather(*(call() for call in calls))
    else:
        results = [await call() for call in calls]

    feedback: list[CouncilAgentScore] = []
    failed: list[str] = []
    last_error: ProviderError | None = None
    for persona, result in zip(personas, results):
        if isinstance(result, CouncilAgentScore):
            feedback.append(result)
        else:
            failed.append(persona.key)
            last_error = result

    scorecard = composite(rubric, feedback) if feedback else None
    return CouncilPass(scorecard=scorecard, feedback=feedback, failed=failed, last_error=last_error)


def _all_failed(operation: str, result: CouncilPass) -> GenerationError:
    detail = f"all {len(result.failed)} persona review(s) failed"
    if result.last_error is not None:
        detail += f" ({result.last_error})"
    return GenerationError(operation, detail)


async def verify_upgrade(
    provider: CompletionProvider,
    rubric: Rubric,
    tier: Tier,
    render_prompt: Callable[[Persona], str],
    upgrade: HookUpgrade | OfferUpgrade,
    parallel: bool = True,
) -> None:
    """Re-score an upgrade with the same council. Sets verified_scorecard or verification_error."""
    verified = await council_pass(provider, rubric, tier, render_prompt, parallel)
    if verified.scorecard is None:
        upgrade.verification_error = str(_all_failed(f"verify upgraded {rubric.name}", verified))
        logger.warning(
            "%s; reporting the unverified estimate %d", upgrade.verification_error, upgrade.estimated_score
        )
        return
    upgrade.verified_scorecard = verified.scorecard
    logger.info("Upgrade claimed %d, council scored %d", upgrade.estimated_score, verified.scorecard.total)


async def closer_commentary(
    provider: CompletionProvider,
    prompts: PromptsConfig,
    kind: str,
    artifact_line: str,
    scorecard: HookScorecard | OfferScorecard,
) -> str | None:
    """Two or three sentences of closing advice. Returns None when the call fails."""
    prompt = prompts.closer.format(
        kind=kind,
        artifact=artifact_line,
        scorecard=json.dumps(scorecard_payload(scorecard)),
    )
    try:
        completion = await provider.complete(prompt, label="closer")
    except ProviderError as exc:
        logger.warning("Closer commentary failed: %s", exc)
        return None
    return completion.content.strip()


def _feedback_json(feedback: list[CouncilAgentScore]) -> str:
    return json.dumps([dataclasses.asdict(agent) for agent in feedback])


async def upgrade_hook(
    provider: CompletionProvider,
    prompts: PromptsConfig,
    hook: str,
    scorecard: HookScorecard,
    feedback: list[CouncilAgentScore],
    closer_notes: str | None,
) -> HookUpgrade | None:
    prompt = prompts.hook_upgrade.format(
        hook=hook,
        total=scorecard.total,
        feedback=_feedback_json(feedback),
        closer_notes=closer_notes or "",
    )
    try:
        completion = await provider.complete(prompt, json_mode=True, label="upgrade:hook")
    except ProviderError as exc:
        logger.warning("Hook upgrade failed: %s", exc)
        return None

    data = parse_json_object(completion.content)
    social = coerce_text(data.get("socialMediaVersion"))
    landing = coerce_text(data.get("landingPageVersion"))
    return HookUpgrade(
        text=social or landing or hook,
        estimated_score=clamp_score(data.get("estimatedScore"), _DEFAULT_ESTIMATED_SCORE),
        reasoning=coerce_text(data.get("reasoning"), "Optimized based on council feedback"),
        landing_page_version=landing,
    )


async def upgrade_offer(
    provider: CompletionProvider,
    prompts: PromptsConfig,
    offer: dict[str, Any],
    scorecard: OfferScorecard,
    feedback: list[CouncilAgentScore],
    closer_notes: str | None,
) -> OfferUpgrade | None:
    prompt = prompts.offer_upgrade.format(
        offer=json.dumps(offer),
        total=scorecard.total,
        feedback=_feedback_json(feedback),
        closer_notes=closer_notes or "",
    )
    try:
        completion = await provider.complete(prompt, json_mode=True, label="upgrade:offer")
    except ProviderError as exc:
        logger.warning("Offer upgrade failed: %s", exc)
        return None

    data = parse_json_object(completion.content)
    upgraded = data.get("upgradedOffer")
    return OfferUpgrade(
        offer=upgraded if isinstance(upgraded, dict) and upgraded else dict(offer),
        estimated_score=clamp_score(data.get("estimatedScore"), _DEFAULT_ESTIMATED_SCORE),
        reasoning=coerce_text(data.get("reasoning"), "Optimized based on council feedback"),
    )


def _hook_prompt_renderer(prompts: PromptsConfig, hook: str, context: dict[str, str] | None):
    context_line = _context_line(context)

    def render(persona: Persona) -> str:
        return prompts.hook_review.format(
            brief=persona.brief,
            rubric=HOOK_RUBRIC.prompt_lines(),
            hook=hook,
            context_line=context_line,
            json_keys=HOOK_RUBRIC.json_keys(),
        )

    return render


def _offer_prompt_renderer(prompts: PromptsConfig, offer: dict[str, Any], context: dict[str, str] | None):
    context_line = _context_line(context)
    offer_json = json.dumps(offer)

    def render(persona: Persona) -> str:
        return prompts.offer_review.format(
            name=persona.name,
            role=persona.role,
            offer=offer_json,
            context_line=context_line,
            rubric=OFFER_RUBRIC.prompt_lines(),
            json_keys=OFFER_RUBRIC.json_keys(),
        )

    return render


async def review_hook(
    provider: CompletionProvider,
    prompts: PromptsConfig,
    hook: str,
    tier: Tier | str,
    context: dict[str, str] | None = None,
    settings: PipelineConfig | None = None,
) -> Outcome[ScoredHookResult]:
    """Score a hook with the tier's council, then add closer notes and an upgrade.

    Steps past the composite only run where the tier allows: closer notes for
    every paid tier, the rewrite for vault under the threshold.
    """
    tier = Tier.parse(tier)
    settings = settings or PipelineConfig()

    result = await council_pass(
        provider, HOOK_RUBRIC, tier, _hook_prompt_renderer(prompts, hook, context), settings.parallel_reviews
    )
    if result.scorecard is None:
        return Outcome.failure(_all_failed("score hook with council", result))
    scorecard: HookScorecard = result.scorecard

    closer_notes = None
    if tier is not Tier.FREE:
        closer_notes = await closer_commentary(provider, prompts, "hook", f'Hook: "{hook}"', scorecard)

    upgrade = None
    if should_upgrade(tier, scorecard.total, settings.upgrade_threshold):
        logger.info("Hook scored %d < %d, requesting upgrade", scorecard.total, settings.upgrade_threshold)
        upgrade = await upgrade_hook(provider, prompts, hook, scorecard, result.feedback, closer_notes)
        if upgrade is not None and settings.verify_upgrades:
            await verify_upgrade(
                provider,
                HOOK_RUBRIC,
                tier,
                _hook_prompt_renderer(prompts, upgrade.text, context),
                upgrade,
                settings.parallel_reviews,
            )

    return Outcome.success(
        ScoredHookResult(
            original_hook=hook,
            scorecard=scorecard,
            council_feedback=result.feedback,
            upgrade=upgrade,
            closer_notes=closer_notes,
            failed_personas=result.failed,
        )
    )


async def review_offer(
    provider: CompletionProvider,
    prompts: PromptsConfig,
    offer: OfferFramework | dict[str, Any],
    tier: Tier | str,
    context: dict[str, str] | None = None,
    settings: PipelineConfig | None = None,
) -> Outcome[ScoredOfferResult]:
    """Score an offer against the value-equation rubric. Mirrors review_hook."""
    tier = Tier.parse(tier)
    settings = settings or PipelineConfig()
    offer_dict = framework_to_wire(offer) if isinstance(offer, OfferFramework) else dict(offer)

    result = await council_pass(
        provider, OFFER_RUBRIC, tier, _offer_prompt_renderer(prompts, offer_dict, context), settings.parallel_reviews
    )
    if result.scorecard is None:
        return Outcome.failure(_all_failed("score offer with council", result))
    scorecard: OfferScorecard = result.scorecard

    closer_notes = None
    if tier is not Tier.FREE:
        closer_notes = await closer_commentary(
            provider, prompts, "offer", f"Offer: {json.dumps(offer_dict)}", scorecard
        )

    upgrade = None
    if should_upgrade(tier, scorecard.total, settings.upgrade_threshold):
        logger.info("Offer scored %d < %d, requesting upgrade", scorecard.total, settings.upgrade_threshold)
        upgrade = await upgrade_offer(provider, prompts, offer_dict, scorecard, result.feedback, closer_notes)
        if upgrade is not None and settings.verify_upgrades:
            await verify_upgrade(
                provider,
                OFFER_RUBRIC,
                tier,
                _offer_prompt_renderer(prompts, upgrade.offer, context),
                upgrade,
                settings.parallel_reviews,
            )

    return Outcome.success(
        ScoredOfferResult(
            original_offer=offer_dict,
            scorecard=scorecard,
            council_feedback=result.feedback,
            upgrade=upgrade,
            closer_notes=closer_notes,
            failed_personas=result.failed,
        )
    )
