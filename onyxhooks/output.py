"""Rich console output and markdown report save for council results."""

import logging
import re
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from onyxhooks.analysis import blur_response
from onyxhooks.generator import framework_to_wire
from onyxhooks.models import (
    CouncilOffer,
    CouncilSequence,
    CouncilSession,
    HookBatch,
    HookScorecard,
    OfferScorecard,
    ScoredHookResult,
    ScoredOfferResult,
)
from onyxhooks.rubric import HOOK_RUBRIC, OFFER_RUBRIC

logger = logging.getLogger(__name__)

console = Console(legacy_windows=False)

_SEQUENCE_SECTIONS = (
    ("fused", "Phase 1: Fused Council"),
    ("disruptive", "Phase 2: Disruptive"),
    ("sophisticated", "Phase 2: Sophisticated"),
    ("structured", "Phase 2: Structured"),
)


def _slug(text: str, max_len: int = 40) -> str:
    """Convert text to a filename-safe slug."""
    slug = re.sub(r"[^\w\s-]", "", text.lower())
    slug = re.sub(r"[\s_-]+", "-", slug).strip("-")
    return slug[:max_len] or "council"


def _score_style(total: int) -> str:
    if total >= 90:
        return "bold green"
    if total >= 70:
        return "yellow"
    return "red"


def _rubric_for(scorecard: HookScorecard | OfferScorecard):
    return HOOK_RUBRIC if isinstance(scorecard, HookScorecard) else OFFER_RUBRIC


def scorecard_table(scorecard: HookScorecard | OfferScorecard) -> Table:
    rubric = _rubric_for(scorecard)
    table = Table(title=f"{rubric.name.title()} Scorecard", show_header=True, header_style="bold")
    table.add_column("Dimension")
    table.add_column("Score", justify="right")
    for dim in rubric.dimensions:
        value = getattr(scorecard, dim.field)
        label = dim.label + (" (no data)" if dim.field in scorecard.missing_dimensions else "")
        table.add_row(label, f"{value}/{dim.maximum}")
    table.add_row("[bold]Total[/bold]", Text(f"{scorecard.total}/100", style=_score_style(scorecard.total)))
    return table


def print_scored(result: ScoredHookResult | ScoredOfferResult) -> None:
    """Print a scorecard, each persona's verdict, closer notes and any upgrade."""
    console.print(scorecard_table(result.scorecard))

    for agent in result.council_feedback:
        body = agent.justification or "[dim]No justification given[/dim]"
        if agent.rewrite_suggestion:
            body += f"\n\n[italic]Suggestion:[/italic] {agent.rewrite_suggestion}"
        console.print(Panel(body, title=f"[bold]{agent.name}[/bold] ({agent.role})", border_style="dim"))

    if result.failed_personas:
        console.print(f"[yellow]No verdict from:[/yellow] {', '.join(result.failed_personas)}")

    if result.closer_notes:
        console.print(Panel(result.closer_notes, title="[bold]Closer Notes[/bold]", border_style="magenta"))

    upgrade = result.upgrade
    if upgrade is None:
        return
    if isinstance(result, ScoredHookResult):
        body = upgrade.text
        if upgrade.landing_page_version:
            body += f"\n\n[dim]Landing page:[/dim] {upgrade.landing_page_version}"
    else:
        body = "\n".join(f"[bold]{k}:[/bold] {v}" for k, v in upgrade.offer.items())
    verified = " verified" if upgrade.verified_scorecard is not None else " estimated"
    console.print(
        Panel(
            f"{body}\n\n[italic]{upgrade.reasoning}[/italic]",
            title=f"[bold green]Upgrade[/bold green] ({upgrade.score}/100{verified})",
            border_style="green",
        )
    )
    if upgrade.verification_error:
        console.print(f"[yellow]Verification failed:[/yellow] {upgrade.verification_error}")


def print_hooks(batch: HookBatch, fallback: bool = False) -> None:
    console.print(Rule("[bold cyan]Council Hooks[/bold cyan]"))
    if fallback:
        console.print("[yellow]Generation failed, showing demo hooks.[/yellow]")
    for index, hook in enumerate(batch.hooks, 1):
        console.print(f"[bold]{index}.[/bold] {hook}")
    console.print(Text(batch.council_insights, style="dim"))
    for scored in batch.scored:
        console.print(Rule(f"[dim]{scored.original_hook[:60]}[/dim]"))
        print_scored(scored)


def print_offer(offer: CouncilOffer) -> None:
    console.print(Rule("[bold cyan]Council Offer[/bold cyan]"))
    table = Table(show_header=False, box=None)
    table.add_column(style="bold")
    table.add_column()
    for key, value in framework_to_wire(offer.framework).items():
        table.add_row(key, value)
    console.print(table)

    backed = "council-backed" if offer.is_council_backed else "not reviewed"
    console.print(
        Text(f"Conversion score: {offer.conversion_score}/100 ({backed})", style=_score_style(offer.conversion_score))
    )
    if offer.review_error:
        console.print(f"[yellow]Council review unavailable:[/yellow] {offer.review_error}")
    if offer.scored is not None:
        print_scored(offer.scored)


def print_session(session: CouncilSession) -> None:
    console.print(Rule(f"[bold cyan]Gladiator Council: {session.content_type}[/bold cyan]"))
    for resp in session.responses:
        text = blur_response(resp.response) if resp.blurred else resp.response
        console.print(
            Panel(
                Markdown(text) if not resp.blurred else text,
                title=f"[bold]{resp.agent_name}[/bold]",
                subtitle=resp.tone,
                border_style="dim",
            )
        )
    console.print(Text(session.synthesis, style="bold"))
    for step in session.next_steps:
        console.print(f"  - {step}")


def print_sequence(sequence: CouncilSequence, fallback: bool = False) -> None:
    console.print(Rule("[bold magenta]Council Sequence[/bold magenta]"))
    if fallback:
        console.print("[yellow]Council unavailable, showing template copy.[/yellow]")
    for attr, title in _SEQUENCE_SECTIONS:
        console.print(Panel(getattr(sequence, attr), title=f"[bold]{title}[/bold]", border_style="magenta"))
    console.print(Text(f"Council confidence: {sequence.confidence_score}/100", style=_score_style(sequence.confidence_score)))
    for name, insight in sequence.insights.items():
        console.print(f"  [bold]{name.title()}:[/bold] {insight}")


# --- Markdown reports ---


def _scorecard_lines(scorecard: HookScorecard | OfferScorecard) -> list[str]:
    rubric = _rubric_for(scorecard)
    lines = ["| Dimension | Score |", "|---|---|"]
    for dim in rubric.dimensions:
        lines.append(f"| {dim.label} | {getattr(scorecard, dim.field)}/{dim.maximum} |")
    lines.append(f"| **Total** | **{scorecard.total}/100** |")
    if scorecard.missing_dimensions:
        lines += ["", f"*Unscored dimensions: {', '.join(scorecard.missing_dimensions)}*"]
    return lines


def _scored_lines(result: ScoredHookResult | ScoredOfferResult) -> list[str]:
    lines = _scorecard_lines(result.scorecard) + [""]
    for agent in result.council_feedback:
        lines += [f"### {agent.name} ({agent.role})", "", agent.justification, ""]
        if agent.rewrite_suggestion:
            lines += [f"*Suggestion:* {agent.rewrite_suggestion}", ""]
    if result.failed_personas:
        lines += [f"*No verdict from: {', '.join(result.failed_personas)}*", ""]
    if result.closer_notes:
        lines += ["### Closer Notes", "", result.closer_notes, ""]
    if result.upgrade is not None:
        upgrade = result.upgrade
        lines += [f"### Upgrade ({upgrade.score}/100)", ""]
        if isinstance(result, ScoredHookResult):
            lines.append(upgrade.text)
            if upgrade.landing_page_version:
                lines += ["", f"Landing page: {upgrade.landing_page_version}"]
        else:
            lines += [f"- **{k}:** {v}" for k, v in upgrade.offer.items()]
        lines += ["", f"*{upgrade.reasoning}*", ""]
        if upgrade.verification_error:
            lines += [f"*Verification failed: {upgrade.verification_error}*", ""]
    return lines


def render_markdown(
    result: HookBatch | CouncilOffer | ScoredHookResult | ScoredOfferResult | CouncilSession | CouncilSequence,
    title: str,
    tier: str,
) -> str:
    """Render any council result as a markdown report."""
    lines: list[str] = [
        f"# OnyxHooks Council: {title[:80]}",
        "",
        f"**Date:** {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
        f"**Tier:** {tier}",
        "",
        "---",
        "",
    ]

    if isinstance(result, HookBatch):
        lines += ["## Hooks", ""]
        lines += [f"{i}. {hook}" for i, hook in enumerate(result.hooks, 1)]
        lines += ["", f"*{result.council_insights}*", ""]
        for scored in result.scored:
            lines += [f"## Review: {scored.original_hook}", ""] + _scored_lines(scored)
    elif isinstance(result, CouncilOffer):
        lines += ["## Offer", ""]
        lines += [f"- **{k}:** {v}" for k, v in framework_to_wire(result.framework).items()]
        lines += ["", f"**Conversion score:** {result.conversion_score}/100", ""]
        if result.review_error:
            lines += [f"*Council review unavailable: {result.review_error}*", ""]
        if result.scored is not None:
            lines += ["## Council Review", ""] + _scored_lines(result.scored)
    elif isinstance(result, (ScoredHookResult, ScoredOfferResult)):
        lines += ["## Council Review", ""] + _scored_lines(result)
    elif isinstance(result, CouncilSession):
        lines += [f"**Session:** {result.session_id}", ""]
        for resp in result.responses:
            text = blur_response(resp.response) if resp.blurred else resp.response
            lines += [f"## {resp.agent_name} ({resp.tone})", "", text, ""]
        lines += ["## Synthesis", "", result.synthesis, "", "## Next Steps", ""]
        lines += [f"- {step}" for step in result.next_steps]
        lines.append("")
    elif isinstance(result, CouncilSequence):
        lines += [f"**Session:** {result.session_id}", ""]
        for attr, heading in _SEQUENCE_SECTIONS:
            lines += [f"## {heading}", "", getattr(result, attr), ""]
        lines += [f"**Council confidence:** {result.confidence_score}/100", "", "## Insights", ""]
        lines += [f"- **{name.title()}:** {text}" for name, text in result.insights.items()]
        lines.append("")
    else:
        raise TypeError(f"Cannot render {type(result).__name__}")

    return "\n".join(lines)


def save_to_file(
    result: HookBatch | CouncilOffer | ScoredHookResult | ScoredOfferResult | CouncilSession | CouncilSequence,
    output_dir: Path,
    title: str,
    tier: str,
    slug_override: str | None = None,
) -> Path:
    """Save a council result as a markdown file.

    Args:
        result: Any council result.
        output_dir: Directory to save the file in.
        title: Report heading; also the filename slug unless overridden.
        tier: Tier name shown in the header.
        slug_override: Filename stem to use instead of one derived from
            the title. Useful for inbox mode.

    Returns:
        Path to the saved file.
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    slug = slug_override if slug_override is not None else _slug(title)
    filepath = output_dir / f"{timestamp}_{slug}.md"

    filepath.write_text(render_markdown(result, title, tier), encoding="utf-8")
    logger.info("Report saved to: %s", filepath)
    return filepath
