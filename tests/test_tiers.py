"""Tests for onyxhooks/tiers.py."""

import logging

import pytest

from onyxhooks.personas import COUNCIL
from onyxhooks.tiers import (
    BASE_SYSTEM_PROMPT,
    Tier,
    active_council,
    apply_hook_cap,
    council_insights,
    hook_cap,
    hook_guidance,
    prompt_suffix,
    resolve,
    system_prompt,
)

SEVEN_HOOKS = [f"hook {i}" for i in range(7)]


@pytest.mark.parametrize("tier, expected", [
    (Tier.FREE, 1),
    (Tier.STARTER, 2),
    (Tier.PRO, 3),
    (Tier.VAULT, 6),
])
def test_active_council_sizes(tier, expected):
    assert len(active_council(tier)) == expected


def test_active_council_members_are_known_personas():
    for tier in Tier:
        for key in active_council(tier):
            assert key in COUNCIL


def test_vault_council_order():
    assert active_council(Tier.VAULT) == ("sabien", "blaze", "mosaic", "methodus", "runrail", "michael")


def test_every_table_covers_every_tier():
    for tier in Tier:
        assert prompt_suffix(tier)
        assert hook_guidance(tier)
        assert council_insights(tier)
        hook_cap(tier)  # KeyError if missing


def test_system_prompt_appends_suffix():
    prompt = system_prompt(Tier.PRO)
    assert prompt.startswith(BASE_SYSTEM_PROMPT)
    assert prompt.endswith(prompt_suffix(Tier.PRO))


def test_free_caps_seven_hooks_to_two():
    assert apply_hook_cap(SEVEN_HOOKS, Tier.FREE) == SEVEN_HOOKS[:2]


def test_starter_keeps_seven_hooks():
    assert apply_hook_cap(SEVEN_HOOKS, Tier.STARTER) == SEVEN_HOOKS


def test_starter_caps_at_twenty_five():
    hooks = [f"h{i}" for i in range(30)]
    assert len(apply_hook_cap(hooks, Tier.STARTER)) == 25


@pytest.mark.parametrize("tier", [Tier.PRO, Tier.VAULT])
def test_pro_and_vault_unlimited(tier):
    hooks = [f"h{i}" for i in range(100)]
    assert apply_hook_cap(hooks, tier) == hooks


def test_apply_hook_cap_returns_copy():
    hooks = ["a", "b"]
    capped = apply_hook_cap(hooks, Tier.PRO)
    capped.append("c")
    assert hooks == ["a", "b"]


@pytest.mark.parametrize("raw, expected", [
    ("free", Tier.FREE),
    ("STARTER", Tier.STARTER),
    (" Pro ", Tier.PRO),
    ("vault", Tier.VAULT),
    (Tier.VAULT, Tier.VAULT),
])
def test_parse_known(raw, expected):
    assert Tier.parse(raw) is expected


@pytest.mark.parametrize("raw", ["platinum", "", None])
def test_parse_unknown_falls_back_to_free(raw, caplog):
    with caplog.at_level(logging.WARNING):
        assert Tier.parse(raw) is Tier.FREE
    assert "Unknown tier" in caplog.text


def test_resolve_builds_policy():
    policy = resolve("pro")
    assert policy.tier is Tier.PRO
    assert policy.personas == ("sabien", "blaze", "mosaic")
    assert policy.hook_cap is None
    assert policy.prompt_suffix == prompt_suffix(Tier.PRO)


def test_resolve_unknown_is_free():
    policy = resolve("gold")
    assert policy.tier is Tier.FREE
    assert policy.personas == ("forge",)
    assert policy.hook_cap == 2
