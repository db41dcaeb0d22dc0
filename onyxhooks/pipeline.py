"""Request-level flows: generate, then review where the tier allows."""

import logging

from config.config_loader import PipelineConfig, PromptsConfig
from onyxhooks.council import review_hook, review_offer
from onyxhooks.generator import generate_hooks, generate_offer
from onyxhooks.models import CouncilOffer, HookBatch, HookInput, OfferInput
from onyxhooks.outcome import GenerationError, Outcome
from onyxhooks.providers.base import CompletionProvider
from onyxhooks.tiers import Tier

logger = logging.getLogger(__name__)

# Conversion score reported when no council review ran
BASE_CONVERSION_SCORE = 75


async def generate_council_backed_offer(
    provider: CompletionProvider,
    prompts: PromptsConfig,
    offer_input: OfferInput,
    tier: Tier | str,
    settings: PipelineConfig | None = None,
) -> Outcome[CouncilOffer]:
    """Generate an offer framework and, for paid tiers, put it before the council.

    A failed generation is an error outcome. A failed review keeps the
    generated offer and records ``review_error``.
    """
    tier = Tier.parse(tier)
    settings = settings or PipelineConfig()

    generated = await generate_offer(provider, prompts, offer_input, tier)
    if generated.value is None:
        return Outcome.failure(
            GenerationError("generate council-backed offer", str(generated.error))
        )
    framework = generated.value

    if tier is Tier.FREE:
        return Outcome.success(
            CouncilOffer(
                framework=framework,
                conversion_score=BASE_CONVERSION_SCORE,
                council_feedback="",
                is_council_backed=False,
            )
        )

    context = {"coachType": offer_input.coach_type, "offerType": offer_input.offer_type}
    reviewed = await review_offer(provider, prompts, framework, tier, context=context, settings=settings)
    if reviewed.value is None:
        logger.warning("Council review failed, returning unreviewed offer: %s", reviewed.error)
        return Outcome.success(
            CouncilOffer(
                framework=framework,
                conversion_score=BASE_CONVERSION_SCORE,
                council_feedback="",
                is_council_backed=True,
                review_error=str(reviewed.error),
            )
        )

    scored = reviewed.value
    return Outcome.success(
        CouncilOffer(
            framework=framework,
            conversion_score=scored.scorecard.total,
            council_feedback=scored.closer_notes or "",
            is_council_backed=True,
            scored=scored,
        )
    )


async def generate_council_hooks(
    provider: CompletionProvider,
    prompts: PromptsConfig,
    hook_input: HookInput,
    tier: Tier | str,
    settings: PipelineConfig | None = None,
    score: bool = False,
) -> Outcome[HookBatch]:
    """Generate tier-capped hooks; with ``score`` each hook is reviewed too.

    Hooks whose review fails are left unscored. Fallback batches are never
    scored since they are static copy.
    """
    tier = Tier.parse(tier)
    settings = settings or PipelineConfig()

    outcome = await generate_hooks(provider, prompts, hook_input, tier, count=settings.hook_count)
    batch = outcome.value
    if not score or batch is None or outcome.fallback:
        return outcome

    context = {
        "coachType": hook_input.coach_type,
        "industry": hook_input.industry,
        "targetAudience": hook_input.target_audience,
    }
    for hook in batch.hooks:
        reviewed = await review_hook(provider, prompts, hook, tier, context=context, settings=settings)
        if reviewed.value is None:
            logger.warning("Skipping score for hook %.40r: %s", hook, reviewed.error)
            continue
        batch.scored.append(reviewed.value)

    return outcome
