"""Tests for onyxhooks/output.py markdown reports and console rendering."""

from datetime import datetime
from pathlib import Path

import pytest

from onyxhooks.generator import DEFAULT_OFFER
from onyxhooks.models import (
    CouncilAgentScore,
    CouncilOffer,
    CouncilSequence,
    CouncilSession,
    GladiatorResponse,
    HookBatch,
    HookScorecard,
    HookUpgrade,
    ScoredHookResult,
)
from onyxhooks.output import (
    _slug,
    console,
    print_hooks,
    print_offer,
    print_sequence,
    print_session,
    render_markdown,
    save_to_file,
    scorecard_table,
)


def test_slug_basic():
    assert _slug("Hooks for Fitness") == "hooks-for-fitness"


def test_slug_max_len():
    assert len(_slug("a" * 100, max_len=40)) == 40


def test_slug_special_chars():
    assert _slug("Score hook: $3K months?!") == "score-hook-3k-months"


def test_slug_never_empty():
    assert _slug("!!!") == "council"


@pytest.fixture
def scored_hook() -> ScoredHookResult:
    return ScoredHookResult(
        original_hook="Stop losing clients",
        scorecard=HookScorecard(
            clarity=18, curiosity=16, relevance=17, urgency=14, specificity=0,
            missing_dimensions=["specificity"],
        ),
        council_feedback=[
            CouncilAgentScore(
                persona="sabien", name="Sabien", role="Persuasion Psychology",
                scores={"clarity": 18}, justification="Strong pain point", rewrite_suggestion="Add a number",
            )
        ],
        upgrade=HookUpgrade(text="Stop losing 3 clients a month", estimated_score=94, reasoning="Specific"),
        closer_notes="Launchable after one rewrite.",
        failed_personas=["blaze"],
    )


@pytest.fixture
def session() -> CouncilSession:
    return CouncilSession(
        session_id="council_abc123",
        content_type="cta",
        responses=[
            GladiatorResponse("maximus", "Maximus", "Strategy requires clarity above all else", "Calm", True),
        ],
        synthesis="Council of 1 gladiators has analyzed your cta.",
        next_steps=["Test with target audience"],
        timestamp=datetime.now(),
    )


def test_render_scored_hook(scored_hook):
    text = render_markdown(scored_hook, "Score hook", "vault")
    assert text.startswith("# OnyxHooks Council: Score hook")
    assert "**Tier:** vault" in text
    assert "| **Total** | **65/100** |" in text
    assert "Unscored dimensions: specificity" in text
    assert "### Sabien (Persuasion Psychology)" in text
    assert "*Suggestion:* Add a number" in text
    assert "No verdict from: blaze" in text
    assert "### Upgrade (94/100)" in text
    assert "Launchable after one rewrite." in text


def test_render_hook_batch_lists_hooks(scored_hook):
    batch = HookBatch(hooks=["First", "Second"], council_insights="Forge says hi", scored=[scored_hook])
    text = render_markdown(batch, "Hooks for fitness", "starter")
    assert "1. First" in text
    assert "2. Second" in text
    assert "## Review: Stop losing clients" in text


def test_render_offer_with_review_error():
    offer = CouncilOffer(
        framework=DEFAULT_OFFER, conversion_score=75, council_feedback="", is_council_backed=True,
        review_error="Failed to score offer with council: down",
    )
    text = render_markdown(offer, "Offer", "pro")
    assert f"- **offerName:** {DEFAULT_OFFER.offer_name}" in text
    assert "**Conversion score:** 75/100" in text
    assert "Council review unavailable" in text


def test_render_session_blurs_locked_responses(session):
    text = render_markdown(session, "Analyze cta", "free")
    assert "## Maximus (Calm)" in text
    assert "Strategy requires █" in text
    assert "above all else" not in text


def test_render_sequence():
    sequence = CouncilSequence(
        fused="Fused copy", disruptive="Go now", sophisticated="For the few", structured="Step one",
        confidence_score=88, insights={"maximus": "Clear"}, session_id="council_sequence_x", timestamp=datetime.now(),
    )
    text = render_markdown(sequence, "Sequence", "vault")
    assert "## Phase 1: Fused Council" in text
    assert "**Council confidence:** 88/100" in text
    assert "- **Maximus:** Clear" in text


def test_render_unknown_type_raises():
    with pytest.raises(TypeError):
        render_markdown("just a string", "x", "free")


def test_save_to_file_creates_output_dir(tmp_path: Path, scored_hook):
    output_dir = tmp_path / "nested" / "output"
    path = save_to_file(scored_hook, output_dir, "Score hook", "pro")
    assert output_dir.exists()
    assert path.exists()
    assert path.name.endswith("_score-hook.md")
    assert "OnyxHooks Council" in path.read_text(encoding="utf-8")


def test_save_to_file_slug_override(tmp_path: Path, scored_hook):
    path = save_to_file(scored_hook, tmp_path, "Score hook", "pro", slug_override="my-brief")
    assert path.name.endswith("_my-brief.md")


def test_console_rendering_does_not_raise(scored_hook, session):
    with console.capture() as capture:
        console.print(scorecard_table(scored_hook.scorecard))
        print_hooks(HookBatch(hooks=["A"], council_insights="x", scored=[scored_hook]), fallback=True)
        print_offer(CouncilOffer(DEFAULT_OFFER, 75, "", False))
        print_session(session)
        print_sequence(
            CouncilSequence("a", "b", "c", "d", 75, {"maximus": "m"}, "id", datetime.now()), fallback=True
        )
    out = capture.get()
    assert "Hook Scorecard" in out
    assert "demo hooks" in out
    assert "Council Sequence" in out


def test_render_failed_upgrade_verification(scored_hook):
    scored_hook.upgrade.verification_error = "Failed to verify upgraded hook: all 6 persona review(s) failed"
    text = render_markdown(scored_hook, "Score hook", "vault")
    assert "### Upgrade (94/100)" in text
    assert "*Verification failed: Failed to verify upgraded hook" in text
