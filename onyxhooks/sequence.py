"""Vault-only council sequence: one fused asset plus three archetype variants."""

import logging
import uuid
from datetime import datetime
from typing import Any

from config.config_loader import PromptsConfig
from onyxhooks.analysis import CONTENT_TYPES, clean_agent_names
from onyxhooks.generator import coerce_text
from onyxhooks.models import CouncilSequence
from onyxhooks.outcome import GenerationError, Outcome
from onyxhooks.providers.base import CompletionProvider, ProviderError, parse_json_object
from onyxhooks.rubric import clamp_score
from onyxhooks.tiers import Tier

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE = 75

DEFAULT_INSIGHTS = {
    "spartacus": "Battlefield energy analysis needed",
    "leonidas": "Urgency tactics require refinement",
    "maximus": "Outcome certainty optimization required",
    "brutus": "Strategic sequencing needs enhancement",
    "achilles": "Aspirational framing requires elevation",
    "valerius": "Clarity optimization in progress",
}

_MISSING = {
    "fused": "Phase 1 fused council response failed to generate",
    "disruptive": "Phase 2 disruptive archetype failed to generate",
    "sophisticated": "Phase 2 sophisticated archetype failed to generate",
    "structured": "Phase 2 structured archetype failed to generate",
}

_WIRE_KEYS = {
    "fused": "phase1FusedCouncil",
    "disruptive": "phase2Disruptive",
    "sophisticated": "phase2Sophisticated",
    "structured": "phase2Structured",
}


def _fallback_copy(content: str, content_type: str) -> dict[str, str]:
    excerpt = content if len(content) <= 80 else content[:77] + "..."
    subject = {"hook": "hook", "offer": "offer", "cta": "call-to-action"}[content_type]
    return {
        "fused": (
            f'Your {subject} "{excerpt}" has a foundation worth building on. Lead with a certain, '
            "measurable outcome, stack the benefits so each line raises the stakes, give one clear "
            "next step, and frame the decision as an identity upgrade rather than a purchase."
        ),
        "disruptive": (
            "Stop settling. Every day you wait is a day someone else takes your spot. "
            "Act now or stay exactly where you are."
        ),
        "sophisticated": (
            "This is for the few who treat growth as an investment, not an expense. "
            "Step into the results your ambition already expects."
        ),
        "structured": (
            "Here is exactly what happens next: one step, one decision, one clear outcome. "
            "Start today and see the first result this week."
        ),
    }


def _insights(raw: Any) -> dict[str, str]:
    if not isinstance(raw, dict) or not raw:
        return dict(DEFAULT_INSIGHTS)
    return {key: coerce_text(raw.get(key), default) for key, default in DEFAULT_INSIGHTS.items()}


async def generate_council_sequence(
    provider: CompletionProvider,
    prompts: PromptsConfig,
    content: str,
    content_type: str,
    tier: Tier | str,
) -> Outcome[CouncilSequence]:
    """Rewrite content as a fused asset and three archetype variants.

    Only vault may run this; other tiers get an error outcome without any
    API call. A failed call returns static copy marked as fallback.
    """
    tier = Tier.parse(tier)
    if tier is not Tier.VAULT:
        return Outcome.failure(
            GenerationError("generate council sequence", "Council Sequence is exclusive to Vault tier members")
        )
    if content_type not in CONTENT_TYPES:
        raise ValueError(f"content_type must be one of {', '.join(CONTENT_TYPES)}, got {content_type!r}")

    content = content.strip()
    session_id = f"council_sequence_{uuid.uuid4().hex[:12]}"
    prompt = prompts.sequence.format(content=content, content_type=content_type)

    try:
        completion = await provider.complete(
            prompt, system=prompts.sequence_system.strip(), json_mode=True, label="sequence"
        )
    except ProviderError as exc:
        logger.error("Council sequence failed, serving fallback copy: %s", exc)
        copy = _fallback_copy(content, content_type)
        sequence = CouncilSequence(
            **copy,
            confidence_score=DEFAULT_CONFIDENCE,
            insights=dict(DEFAULT_INSIGHTS),
            session_id=session_id,
            timestamp=datetime.now(),
        )
        return Outcome.degraded(sequence, GenerationError("generate council sequence", str(exc)))

    data = parse_json_object(completion.content)
    copy = {
        field: clean_agent_names(coerce_text(data.get(wire_key), _MISSING[field]))
        for field, wire_key in _WIRE_KEYS.items()
    }
    return Outcome.success(
        CouncilSequence(
            **copy,
            confidence_score=clamp_score(data.get("councilConfidenceScore"), DEFAULT_CONFIDENCE),
            insights=_insights(data.get("insights")),
            session_id=session_id,
            timestamp=datetime.now(),
        )
    )
