"""Unit tests for onyxhooks/healthcheck.py. No real API calls."""

import asyncio
from unittest.mock import AsyncMock

import onyxhooks.healthcheck as hc
from onyxhooks.healthcheck import run_health_checks

from tests.conftest import MockProvider, failing


async def test_all_providers_pass():
    """All providers succeed -> all marked ok, no errors."""
    providers = {"claude": MockProvider("claude"), "gemini": MockProvider("gemini")}

    results = await run_health_checks(providers)

    assert results["claude"] == (True, "")
    assert results["gemini"] == (True, "")
    assert providers["claude"].labels() == ["ping"]


async def test_one_provider_fails():
    """A provider that raises returns ok=False with the error message."""
    providers = {
        "claude": MockProvider("claude"),
        "openai": MockProvider("openai", replies={"ping": failing("403 Forbidden")}),
    }

    results = await run_health_checks(providers)

    assert results["claude"] == (True, "")
    ok, err = results["openai"]
    assert ok is False
    assert "403" in err


async def test_unexpected_exception_counts_as_failure():
    providers = {"gemini": MockProvider("gemini")}
    providers["gemini"].complete = AsyncMock(side_effect=RuntimeError("gemini down"))

    results = await run_health_checks(providers)

    ok, err = results["gemini"]
    assert ok is False
    assert "gemini down" in err


async def test_empty_providers():
    """Empty provider dict returns empty results."""
    results = await run_health_checks({})
    assert results == {}


async def test_timeout_counts_as_failure(monkeypatch):
    """A provider that hangs past the timeout is marked as failed."""
    providers = {"slow": MockProvider("slow")}

    async def hang(*args, **kwargs):
        await asyncio.sleep(9999)

    providers["slow"].complete = AsyncMock(side_effect=hang)
    monkeypatch.setattr(hc, "_TIMEOUT_SEC", 0.05)

    results = await run_health_checks(providers)

    ok, err = results["slow"]
    assert ok is False
    assert err == "TimeoutError"


async def test_non_json_reply_counts_as_failure():
    providers = {"openai": MockProvider("openai", replies={"ping": "OK"})}

    results = await run_health_checks(providers)

    ok, err = results["openai"]
    assert ok is False
    assert "not parseable" in err
    assert providers["openai"].calls[0]["json_mode"] is True
