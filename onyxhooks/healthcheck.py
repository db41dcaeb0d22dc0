"""Provider health checks: confirm each completion API answers in JSON mode before a run."""

import asyncio
import logging

from onyxhooks.providers.base import CompletionProvider, parse_json_object

logger = logging.getLogger(__name__)

# Every council review is a JSON-mode call, so the ping exercises that path.
_PING_PROMPT = 'Reply with exactly this JSON object: {"status": "ok"}'
_TIMEOUT_SEC = 15.0


async def _check_one(name: str, provider: CompletionProvider) -> tuple[str, bool, str]:
    """Ping a single provider. Returns (name, ok, error_message)."""
    try:
        completion = await asyncio.wait_for(
            provider.complete(_PING_PROMPT, json_mode=True, label="ping"),
            timeout=_TIMEOUT_SEC,
        )
    except Exception as exc:
        logger.debug("Health check failed for %s: %s", name, exc)
        return name, False, str(exc) or type(exc).__name__

    if "status" not in parse_json_object(completion.content):
        return name, False, f"JSON mode reply not parseable: {completion.content[:60]!r}"
    return name, True, ""


async def run_health_checks(
    providers: dict[str, CompletionProvider],
) -> dict[str, tuple[bool, str]]:
    """Ping all providers in parallel.

    Returns:
        Dict mapping provider name -> (ok, error_message).
        error_message is "" when ok is True.
    """
    results = await asyncio.gather(*(_check_one(n, p) for n, p in providers.items()))
    return {name: (ok, err) for name, ok, err in results}
