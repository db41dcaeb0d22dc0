"""Scoring rubrics and the composite aggregation across council personas."""

import logging
import math
from dataclasses import dataclass
from numbers import Real
from typing import Any, Generic, TypeVar

from onyxhooks.models import CouncilAgentScore, HookScorecard, OfferScorecard

logger = logging.getLogger(__name__)

S = TypeVar("S", HookScorecard, OfferScorecard)


@dataclass(frozen=True)
class Dimension:
    field: str          # scorecard attribute
    key: str            # JSON key the completion is asked to return
    label: str
    maximum: int
    question: str


@dataclass(frozen=True)
class Rubric(Generic[S]):
    name: str
    scorecard_type: type[S]
    dimensions: tuple[Dimension, ...]

    def prompt_lines(self) -> str:
        """Bulleted rubric for embedding in a scoring prompt."""
        return "\n".join(
            f"- {d.label} (/{d.maximum}): {d.question}" for d in self.dimensions
        )

    def json_keys(self) -> str:
        """Key/type lines for the JSON reply template."""
        return "\n".join(f'  "{d.key}": number,' for d in self.dimensions)


HOOK_RUBRIC: Rubric[HookScorecard] = Rubric(
    name="hook",
    scorecard_type=HookScorecard,
    dimensions=(
        Dimension("clarity", "clarity", "Clarity", 20, "Can a 5th grader understand it instantly?"),
        Dimension("curiosity", "curiosity", "Curiosity", 20, "Does it open a loop or spark desire?"),
        Dimension("relevance", "relevance", "Relevance", 20, "Does it speak to the reader's pain/goal?"),
        Dimension("urgency", "urgency", "Urgency", 20, 'Is there a sense "this matters NOW"?'),
        Dimension("specificity", "specificity", "Specificity", 20, "Facts, numbers, contrast, visual clarity?"),
    ),
)

OFFER_RUBRIC: Rubric[OfferScorecard] = Rubric(
    name="offer",
    scorecard_type=OfferScorecard,
    dimensions=(
        Dimension("dream_outcome", "dreamOutcome", "Dream Outcome", 20, "Big, believable, emotionally powerful?"),
        Dimension("likelihood_of_success", "likelihoodOfSuccess", "Likelihood of Success", 15,
                  "Believable? Testimonials/guarantees?"),
        Dimension("time_to_results", "timeToResults", "Time to Results", 15, "Fast results? Quick value?"),
        Dimension("effort_and_sacrifice", "effortAndSacrifice", "Effort & Sacrifice", 10,
                  "Frictionless? Easy to complete?"),
        Dimension("risk_reversal", "riskReversal", "Risk Reversal", 10, "Risk-free? Refunds/guarantees?"),
        Dimension("value_stack", "valueStack", "Value Stack", 10, "Bonuses, templates, toolkits?"),
        Dimension("price_framing", "priceFraming", "Price Framing", 10, "Clear ROI? Smart comparisons?"),
        Dimension("messaging_clarity", "messagingClarity", "Messaging Clarity", 10, "Crisp copy, no jargon?"),
    ),
)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 going up (13.5 -> 14)."""
    return int(math.floor(value + 0.5))


def _numeric(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, Real):
        return None
    if math.isnan(value):
        return None
    return float(value)


def clamp_score(value: Any, default: int) -> int:
    """A model-reported 0-100 score as an int; non-numeric values use the default.

    Clamped before rounding, so JSON ``Infinity`` and overflowed literals like
    ``1e999`` land on the bounds.
    """
    numeric = _numeric(value)
    if numeric is None:
        return default
    return round_half_up(min(max(numeric, 0.0), 100.0))


def dimension_mean(values: list[Any], maximum: int) -> int | None:
    """Rounded mean of the numeric values, each clamped into [0, maximum].

    Returns None when no value is numeric.
    """
    numeric = [v for v in (_numeric(x) for x in values) if v is not None]
    if not numeric:
        return None
    clamped = [min(max(v, 0.0), float(maximum)) for v in numeric]
    return round_half_up(sum(clamped) / len(clamped))


def composite(rubric: Rubric[S], feedback: list[CouncilAgentScore]) -> S:
    """Average every persona's scores into one scorecard.

    A dimension no persona scored numerically is set to 0 and listed in
    ``missing_dimensions``.
    """
    means: dict[str, int] = {}
    missing: list[str] = []
    for dim in rubric.dimensions:
        mean = dimension_mean([agent.scores.get(dim.key) for agent in feedback], dim.maximum)
        if mean is None:
            missing.append(dim.field)
            mean = 0
        means[dim.field] = mean

    if missing:
        logger.warning(
            "No numeric %s scores for %s from %d persona(s); scoring them 0",
            rubric.name,
            ", ".join(missing),
            len(feedback),
        )

    return rubric.scorecard_type(
        **means,
        council_notes=" | ".join(f"{agent.name}: {agent.justification}" for agent in feedback),
        improvement_suggestions=[a.rewrite_suggestion for a in feedback if a.rewrite_suggestion],
        missing_dimensions=missing,
    )
