"""Click CLI: orchestrates config loading, provider selection, council runs, and output."""

import asyncio
import json
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import click
from dotenv import load_dotenv
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from config.config_loader import AppConfig, load_config
from onyxhooks.analysis import CONTENT_TYPES, analyze_content
from onyxhooks.council import review_hook, review_offer
from onyxhooks.healthcheck import run_health_checks
from onyxhooks.inbox import Brief, archive_file, ensure_dirs, read_brief, scan_inbox
from onyxhooks.models import HookInput, OfferInput
from onyxhooks.outcome import Outcome
from onyxhooks.output import (
    console,
    print_hooks,
    print_offer,
    print_scored,
    print_sequence,
    print_session,
    save_to_file,
)
from onyxhooks.pipeline import generate_council_backed_offer, generate_council_hooks
from onyxhooks.providers.anthropic import AnthropicProvider
from onyxhooks.providers.base import CompletionProvider
from onyxhooks.providers.gemini import GeminiProvider
from onyxhooks.providers.openai_provider import OpenAIProvider
from onyxhooks.sequence import generate_council_sequence
from onyxhooks.tiers import Tier

logger = logging.getLogger(__name__)

# Keyed by the ``sdk`` field of each model entry in settings.yaml
PROVIDER_CLASSES: dict[str, type[CompletionProvider]] = {
    "openai": OpenAIProvider,
    "anthropic": AnthropicProvider,
    "gemini": GeminiProvider,
}

_OFFER_INPUT_KEYS = {
    "coach_type": ("coach_type", "coachType"),
    "offer_type": ("offer_type", "offerType"),
    "tone_preference": ("tone_preference", "tonePreference", "tone"),
    "pain_point": ("pain_point", "painPoint"),
    "challenge_faced": ("challenge_faced", "challengeFaced"),
    "desired_feeling": ("desired_feeling", "desiredFeeling"),
}


@dataclass
class RunContext:
    """State shared by every subcommand, built once in the group callback."""

    config: AppConfig
    tier: Tier
    provider_name: str
    output_dir: Path
    save: bool
    skip_health_check: bool
    tier_from_flag: bool = False
    _provider: CompletionProvider | None = field(default=None, repr=False)

    def provider(self) -> CompletionProvider:
        """Build and health-check the selected provider on first use."""
        if self._provider is None:
            all_providers = _build_all_providers(self.config)
            if not all_providers:
                console.print("[bold red]Error:[/bold red] No providers available. Check API keys in .env.")
                sys.exit(1)
            if not self.skip_health_check:
                all_providers = _check_and_filter_providers(all_providers)
            self._provider = _select_provider(all_providers, self.provider_name)
        return self._provider


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def _build_all_providers(config: AppConfig) -> dict[str, CompletionProvider]:
    """Build all available providers. Returns dict keyed by name."""
    providers: dict[str, CompletionProvider] = {}
    for name in sorted(config.available_providers):
        model_cfg = config.models[name]
        provider_cls = PROVIDER_CLASSES.get(model_cfg.sdk)
        if provider_cls is None:
            logger.warning("Provider '%s' uses unknown sdk '%s', skipping", name, model_cfg.sdk)
            continue
        try:
            providers[name] = provider_cls(model_cfg)
        except Exception as exc:
            logger.warning("Failed to instantiate provider '%s': %s", name, exc)
    return providers


def _select_provider(all_providers: dict[str, CompletionProvider], preferred: str) -> CompletionProvider:
    """The preferred provider when it is usable, otherwise the first one that is."""
    if preferred in all_providers:
        return all_providers[preferred]
    fallback_name = next(iter(all_providers))
    logger.warning("Provider '%s' unavailable, using '%s'", preferred, fallback_name)
    return all_providers[fallback_name]


def _check_and_filter_providers(all_providers: dict[str, CompletionProvider]) -> dict[str, CompletionProvider]:
    """Run health checks, print results, and ask user what to do on failures.

    Returns the filtered dict of working providers. Exits if the user
    declines to continue or no providers pass.
    """
    console.print("\n[bold]Checking providers...[/bold]")
    results: dict[str, tuple[bool, str]] = asyncio.run(run_health_checks(all_providers))

    failed_names: list[str] = []
    for name in sorted(results):
        ok, err = results[name]
        if ok:
            console.print(f"  [green]OK  [/green] {name}")
        else:
            short_err = err.splitlines()[0][:120] if err else "unknown error"
            console.print(f"  [red]FAIL[/red] {name}: {short_err}")
            failed_names.append(name)

    if not failed_names:
        console.print()
        return all_providers

    working = {n: p for n, p in all_providers.items() if n not in failed_names}

    if not working:
        console.print("\n[bold red]Error:[/bold red] No providers passed the health check.")
        sys.exit(1)

    console.print(f"\n[yellow]{len(failed_names)} provider(s) failed:[/yellow] {', '.join(failed_names)}")
    console.print(f"Working providers: {', '.join(sorted(working))}")

    if not click.confirm("Continue with working providers only?", default=True):
        sys.exit(0)

    console.print()
    return working


def _offer_input_from(data: dict[str, Any]) -> OfferInput:
    """Build an OfferInput from snake_case or camelCase keys."""
    values: dict[str, str] = {}
    for attr, aliases in _OFFER_INPUT_KEYS.items():
        for alias in aliases:
            if data.get(alias):
                values[attr] = str(data[alias])
                break
    if not values.get("coach_type") or not values.get("offer_type"):
        raise click.UsageError("An offer needs both coach_type and offer_type")
    return OfferInput(**values)


def _parse_offer(text: str) -> dict[str, Any]:
    """An offer to score is a JSON object of framework fields."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise click.UsageError(f"Offer must be a JSON object: {exc}") from exc
    if not isinstance(data, dict):
        raise click.UsageError("Offer must be a JSON object")
    return data


def _read_content(content: str | None, content_file: str | None) -> str:
    if content_file:
        return Path(content_file).read_text(encoding="utf-8").strip()
    if content:
        return content.strip()
    raise click.UsageError("Provide CONTENT or --file")


async def _with_spinner(description: str, coro):
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task(description, total=None)
        return await coro


def _finish(run: RunContext, outcome: Outcome, title: str) -> Path | None:
    """Report a failed outcome, or save the value when saving is on."""
    if outcome.value is None:
        console.print(f"[bold red]Error:[/bold red] {outcome.error}")
        sys.exit(1)
    if outcome.fallback:
        logger.warning("%s", outcome.error)
    if not run.save:
        return None
    saved = save_to_file(outcome.value, run.output_dir, title, run.tier.value)
    console.print(f"\n[dim]Saved to: {saved}[/dim]")
    return saved


# --- jobs shared by subcommands and inbox mode ---


async def _hooks_job(run: RunContext, hook_input: HookInput, score: bool) -> Outcome:
    outcome = await _with_spinner(
        "Summoning the council for hooks...",
        generate_council_hooks(
            run.provider(), run.config.prompts, hook_input, run.tier, settings=run.config.pipeline, score=score
        ),
    )
    if outcome.value is not None:
        print_hooks(outcome.value, fallback=outcome.fallback)
    return outcome


async def _offer_job(run: RunContext, offer_input: OfferInput) -> Outcome:
    outcome = await _with_spinner(
        "Building council-backed offer...",
        generate_council_backed_offer(
            run.provider(), run.config.prompts, offer_input, run.tier, settings=run.config.pipeline
        ),
    )
    if outcome.value is not None:
        print_offer(outcome.value)
    return outcome


async def _score_job(run: RunContext, kind: str, content: str, context: dict[str, str]) -> Outcome:
    if kind == "hook":
        coro = review_hook(
            run.provider(), run.config.prompts, content, run.tier, context=context, settings=run.config.pipeline
        )
    else:
        coro = review_offer(
            run.provider(),
            run.config.prompts,
            _parse_offer(content),
            run.tier,
            context=context,
            settings=run.config.pipeline,
        )
    outcome = await _with_spinner(f"Council scoring {kind}...", coro)
    if outcome.value is not None:
        print_scored(outcome.value)
    return outcome


async def _analyze_job(
    run: RunContext, content: str, content_type: str, industry: str, audience: str, context: str
) -> Outcome:
    # free tier serves canned previews and never calls the provider
    provider = run.provider() if run.tier is not Tier.FREE else None
    session = await _with_spinner(
        "Gladiators entering the arena...",
        analyze_content(
            provider,
            run.config.prompts,
            content,
            content_type,
            run.tier,
            industry=industry,
            target_audience=audience,
            context=context,
        ),
    )
    print_session(session)
    return Outcome.success(session)


async def _sequence_job(run: RunContext, content: str, content_type: str) -> Outcome:
    outcome = await _with_spinner(
        "Running the council sequence...",
        generate_council_sequence(run.provider(), run.config.prompts, content, content_type, run.tier),
    )
    if outcome.value is not None:
        print_sequence(outcome.value, fallback=outcome.fallback)
    return outcome


async def _run_brief(run: RunContext, brief: Brief) -> tuple[Outcome, str]:
    """Dispatch one inbox brief. Returns (outcome, report title)."""
    if brief.kind == "hooks":
        hook_input = HookInput(
            industry=brief.get("industry"),
            coach_type=brief.get("coach_type", brief.get("coachType")),
            target_audience=brief.get("target_audience", brief.get("targetAudience")),
        )
        if not hook_input.industry:
            raise ValueError("hooks brief needs an industry")
        score = str(brief.metadata.get("score", "")).lower() in ("true", "1", "yes")
        return await _hooks_job(run, hook_input, score), f"Hooks for {hook_input.industry}"
    if brief.kind == "offer":
        offer_input = _offer_input_from(brief.metadata)
        return await _offer_job(run, offer_input), f"{offer_input.offer_type} for {offer_input.coach_type}"
    if not brief.body:
        raise ValueError(f"{brief.kind} brief needs content in the body")
    if brief.kind == "score":
        target = brief.get("target", "hook")
        if target not in ("hook", "offer"):
            raise ValueError(f"score target must be hook or offer, got {target!r}")
        context = {k: str(v) for k, v in brief.metadata.items() if k != "target" and v}
        return await _score_job(run, target, brief.body, context), f"Score {target}: {brief.body[:40]}"
    content_type = brief.get("content_type", "hook")
    if brief.kind == "analyze":
        outcome = await _analyze_job(
            run,
            brief.body,
            content_type,
            brief.get("industry"),
            brief.get("target_audience"),
            brief.get("context"),
        )
        return outcome, f"Analyze {content_type}: {brief.body[:40]}"
    return await _sequence_job(run, brief.body, content_type), f"Sequence: {brief.body[:40]}"


async def _run_inbox(run: RunContext, inbox_dir: Path, archive_dir: Path) -> None:
    """Process all .md briefs in the inbox folder.

    Precedence for tier: --tier flag > frontmatter > config default.
    """
    ensure_dirs(inbox_dir, archive_dir)
    files = scan_inbox(inbox_dir)

    if not files:
        click.echo("No files in inbox.")
        return

    for file_path in files:
        try:
            brief = read_brief(file_path)
            brief_run = run
            if brief.tier and not run.tier_from_flag:
                brief_run = RunContext(
                    config=run.config,
                    tier=Tier.parse(brief.tier),
                    provider_name=run.provider_name,
                    output_dir=run.output_dir,
                    save=run.save,
                    skip_health_check=True,
                    _provider=run.provider(),
                )
            outcome, title = await _run_brief(brief_run, brief)
            outcome.unwrap()
            saved = save_to_file(
                outcome.value, run.output_dir, title, brief_run.tier.value, slug_override=file_path.stem
            )
            archived = archive_file(file_path, archive_dir)
            click.echo(f"Processed: {file_path.name} -> {saved} (archived: {archived.name})")
        except Exception as e:
            logger.error("Failed: %s -- %s", file_path.name, e)
            archive_file(file_path, archive_dir, failed=True)


@click.group()
@click.option("--tier", default=None, type=click.Choice([t.value for t in Tier], case_sensitive=False),
              help="Membership tier (default: from config)")
@click.option("--provider", "provider_name", default=None, help="Which model runs the council (default: from config)")
@click.option("--output", "output_path", default=None, help="Output directory (default: from config)")
@click.option("--no-save", is_flag=True, default=False, help="Print results without writing a report")
@click.option("--verbose", is_flag=True, help="Enable DEBUG-level logging")
@click.option("--skip-health-check", is_flag=True, default=False,
              help="Skip the API connectivity check before the first call")
@click.pass_context
def main(
    ctx: click.Context,
    tier: str | None,
    provider_name: str | None,
    output_path: str | None,
    no_save: bool,
    verbose: bool,
    skip_health_check: bool,
) -> None:
    """OnyxHooks -- tiered AI council for hooks, offers, and CTAs.

    \b
    Examples:
      onyxhooks --tier starter hooks "fitness" --coach-type "Online trainer"
      onyxhooks --tier vault offer --coach-type "Business coach" --offer-type "Mastermind"
      onyxhooks --tier pro score hook "Stop losing clients to cheaper coaches"
      onyxhooks --tier vault analyze "Book your free call" --type cta
      onyxhooks --tier vault sequence "Join the 30-day reset" --type offer
      onyxhooks inbox
    """
    if sys.platform == "win32":
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8", errors="replace")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8", errors="replace")

    load_dotenv()
    _setup_logging(verbose)

    try:
        config = load_config()
    except (FileNotFoundError, KeyError) as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        sys.exit(1)

    run = RunContext(
        config=config,
        tier=Tier.parse(tier or config.defaults.tier),
        provider_name=provider_name or config.defaults.provider,
        output_dir=Path(output_path) if output_path else config.defaults.output_dir,
        save=not no_save,
        skip_health_check=skip_health_check,
        tier_from_flag=tier is not None,
    )
    ctx.obj = run


@main.command()
@click.argument("industry")
@click.option("--coach-type", default="Coach", show_default=True)
@click.option("--audience", default="", help="Target audience")
@click.option("--score", is_flag=True, default=False, help="Put each hook before the council")
@click.pass_obj
def hooks(run: RunContext, industry: str, coach_type: str, audience: str, score: bool) -> None:
    """Generate tier-capped hooks for INDUSTRY."""
    run.provider()
    hook_input = HookInput(industry=industry, coach_type=coach_type, target_audience=audience)
    outcome = asyncio.run(_hooks_job(run, hook_input, score))
    _finish(run, outcome, f"Hooks for {industry}")


@main.command()
@click.option("--coach-type", required=True)
@click.option("--offer-type", required=True)
@click.option("--tone", "tone_preference", default="")
@click.option("--pain-point", default="")
@click.option("--challenge", "challenge_faced", default="")
@click.option("--feeling", "desired_feeling", default="", help="How buyers should feel")
@click.pass_obj
def offer(run: RunContext, **fields: str) -> None:
    """Generate an offer framework and have the council review it."""
    run.provider()
    offer_input = OfferInput(**fields)
    outcome = asyncio.run(_offer_job(run, offer_input))
    _finish(run, outcome, f"{offer_input.offer_type} for {offer_input.coach_type}")


@main.command()
@click.argument("kind", type=click.Choice(["hook", "offer"]))
@click.argument("content", required=False)
@click.option("--file", "content_file", type=click.Path(exists=True), help="Read content from a file")
@click.option("--industry", default="")
@click.option("--audience", default="")
@click.pass_obj
def score(
    run: RunContext, kind: str, content: str | None, content_file: str | None, industry: str, audience: str
) -> None:
    """Score a hook (text) or offer (JSON object) with the council."""
    text = _read_content(content, content_file)
    run.provider()
    context = {"industry": industry, "targetAudience": audience}
    outcome = asyncio.run(_score_job(run, kind, text, context))
    _finish(run, outcome, f"Score {kind}: {text[:40]}")


@main.command()
@click.argument("content", required=False)
@click.option("--file", "content_file", type=click.Path(exists=True), help="Read content from a file")
@click.option("--type", "content_type", type=click.Choice(CONTENT_TYPES), default="hook", show_default=True)
@click.option("--industry", default="")
@click.option("--audience", default="")
@click.option("--context", default="", help="Anything else the gladiators should know")
@click.pass_obj
def analyze(
    run: RunContext,
    content: str | None,
    content_file: str | None,
    content_type: str,
    industry: str,
    audience: str,
    context: str,
) -> None:
    """Have the gladiator council critique a hook, offer or CTA."""
    text = _read_content(content, content_file)
    if run.tier is not Tier.FREE:
        run.provider()
    outcome = asyncio.run(_analyze_job(run, text, content_type, industry, audience, context))
    _finish(run, outcome, f"Analyze {content_type}: {text[:40]}")


@main.command()
@click.argument("content", required=False)
@click.option("--file", "content_file", type=click.Path(exists=True), help="Read content from a file")
@click.option("--type", "content_type", type=click.Choice(CONTENT_TYPES), default="hook", show_default=True)
@click.pass_obj
def sequence(run: RunContext, content: str | None, content_file: str | None, content_type: str) -> None:
    """Vault only: fused rewrite plus three archetype variants."""
    text = _read_content(content, content_file)
    run.provider()
    outcome = asyncio.run(_sequence_job(run, text, content_type))
    _finish(run, outcome, f"Sequence: {text[:40]}")


@main.command()
@click.option("--inbox-dir", "inbox_dir_override", default=None,
              help="Override inbox folder path (default: from config)")
@click.pass_obj
def inbox(run: RunContext, inbox_dir_override: str | None) -> None:
    """Process every .md brief in the inbox folder."""
    inbox_dir = Path(inbox_dir_override) if inbox_dir_override else run.config.inbox.dir
    archive_dir = Path(inbox_dir_override) / "archive" if inbox_dir_override else run.config.inbox.archive_dir
    run.provider()
    asyncio.run(_run_inbox(run, inbox_dir, archive_dir))


if __name__ == "__main__":
    main()
