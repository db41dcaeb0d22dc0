"""Dataclasses for the OnyxHooks council pipeline. No I/O, no deps."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, ClassVar


@dataclass
class Completion:
    provider: str          # "openai", "claude", "gemini"
    model: str             # actual model string used
    content: str
    latency_sec: float
    token_count: int | None


@dataclass
class OfferInput:
    coach_type: str
    offer_type: str
    tone_preference: str = ""
    pain_point: str = ""
    challenge_faced: str = ""
    desired_feeling: str = ""


@dataclass
class HookInput:
    industry: str
    coach_type: str
    target_audience: str = ""


@dataclass
class OfferFramework:
    hook: str
    problem: str
    promise: str
    cta: str
    offer_name: str
    price_range: str


class _Scorecard:
    """Shared behaviour for rubric scorecards.

    Subclasses list their dimensions and upper bounds in ``LIMITS``. Values
    outside [0, limit] are rejected at construction so ``total`` always stays
    within 0-100.
    """

    LIMITS: ClassVar[dict[str, int]] = {}

    def __post_init__(self) -> None:
        for name, limit in self.LIMITS.items():
            value = getattr(self, name)
            if not 0 <= value <= limit:
                raise ValueError(f"{type(self).__name__}.{name}={value} outside 0-{limit}")

    @property
    def total(self) -> int:
        return sum(getattr(self, name) for name in self.LIMITS)

    def dimensions(self) -> dict[str, int]:
        return {name: getattr(self, name) for name in self.LIMITS}


@dataclass
class HookScorecard(_Scorecard):
    LIMITS: ClassVar[dict[str, int]] = {
        "clarity": 20,
        "curiosity": 20,
        "relevance": 20,
        "urgency": 20,
        "specificity": 20,
    }

    clarity: int = 0
    curiosity: int = 0
    relevance: int = 0
    urgency: int = 0
    specificity: int = 0
    council_notes: str = ""
    improvement_suggestions: list[str] = field(default_factory=list)
    missing_dimensions: list[str] = field(default_factory=list)


@dataclass
class OfferScorecard(_Scorecard):
    LIMITS: ClassVar[dict[str, int]] = {
        "dream_outcome": 20,
        "likelihood_of_success": 15,
        "time_to_results": 15,
        "effort_and_sacrifice": 10,
        "risk_reversal": 10,
        "value_stack": 10,
        "price_framing": 10,
        "messaging_clarity": 10,
    }

    dream_outcome: int = 0
    likelihood_of_success: int = 0
    time_to_results: int = 0
    effort_and_sacrifice: int = 0
    risk_reversal: int = 0
    value_stack: int = 0
    price_framing: int = 0
    messaging_clarity: int = 0
    council_notes: str = ""
    improvement_suggestions: list[str] = field(default_factory=list)
    missing_dimensions: list[str] = field(default_factory=list)


@dataclass
class CouncilAgentScore:
    persona: str                    # roster key, e.g. "sabien"
    name: str
    role: str
    scores: dict[str, Any]          # raw values keyed by wire key; may be partial
    justification: str
    rewrite_suggestion: str | None = None


@dataclass
class HookUpgrade:
    text: str
    estimated_score: int
    reasoning: str
    landing_page_version: str = ""
    verified_scorecard: HookScorecard | None = None
    verification_error: str | None = None

    @property
    def score(self) -> int:
        if self.verified_scorecard is not None:
            return self.verified_scorecard.total
        return self.estimated_score


@dataclass
class OfferUpgrade:
    offer: dict[str, Any]
    estimated_score: int
    reasoning: str
    verified_scorecard: OfferScorecard | None = None
    verification_error: str | None = None

    @property
    def score(self) -> int:
        if self.verified_scorecard is not None:
            return self.verified_scorecard.total
        return self.estimated_score


@dataclass
class ScoredHookResult:
    original_hook: str
    scorecard: HookScorecard
    council_feedback: list[CouncilAgentScore]
    upgrade: HookUpgrade | None = None
    closer_notes: str | None = None
    failed_personas: list[str] = field(default_factory=list)


@dataclass
class ScoredOfferResult:
    original_offer: dict[str, Any]
    scorecard: OfferScorecard
    council_feedback: list[CouncilAgentScore]
    upgrade: OfferUpgrade | None = None
    closer_notes: str | None = None
    failed_personas: list[str] = field(default_factory=list)


@dataclass
class HookBatch:
    hooks: list[str]
    council_insights: str
    scored: list[ScoredHookResult] = field(default_factory=list)


@dataclass
class CouncilOffer:
    framework: OfferFramework
    conversion_score: int
    council_feedback: str
    is_council_backed: bool
    scored: ScoredOfferResult | None = None
    review_error: str | None = None


@dataclass
class GladiatorResponse:
    agent_id: str
    agent_name: str
    response: str
    tone: str
    blurred: bool


@dataclass
class CouncilSession:
    session_id: str
    content_type: str              # "hook", "offer" or "cta"
    responses: list[GladiatorResponse]
    synthesis: str
    next_steps: list[str]
    timestamp: datetime


@dataclass
class CouncilSequence:
    fused: str
    disruptive: str
    sophisticated: str
    structured: str
    confidence_score: int
    insights: dict[str, str]
    session_id: str
    timestamp: datetime
