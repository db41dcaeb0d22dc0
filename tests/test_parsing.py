"""Tests for reply parsing helpers: parse_json_object and coerce_text."""

import pytest

from onyxhooks.generator import coerce_text, framework_from_dict, framework_to_wire, DEFAULT_OFFER
from onyxhooks.providers.base import ProviderError, parse_json_object


def test_parse_plain_object():
    assert parse_json_object('{"hooks": ["a"]}') == {"hooks": ["a"]}


def test_parse_fenced_object():
    text = 'Here you go:\n```json\n{"clarity": 18}\n```'
    assert parse_json_object(text) == {"clarity": 18}


@pytest.mark.parametrize("text", [None, "", "not json", "[1, 2, 3]", "{broken"])
def test_parse_garbage_returns_empty(text):
    assert parse_json_object(text) == {}


def test_provider_error_message():
    err = ProviderError("claude", "Timeout after 90s")
    assert str(err) == "[claude] Timeout after 90s"
    assert err.provider_name == "claude"


@pytest.mark.parametrize("value, expected", [
    (None, "fb"),
    ("", "fb"),
    ("   ", "fb"),
    (" text ", "text"),
    (42, "42"),
])
def test_coerce_text(value, expected):
    assert coerce_text(value, "fb") == expected


def test_framework_from_dict_accepts_both_key_styles():
    framework = framework_from_dict({"offerName": "Reset", "price_range": "$497"})
    assert framework.offer_name == "Reset"
    assert framework.price_range == "$497"
    assert framework.hook == DEFAULT_OFFER.hook


def test_framework_wire_keys():
    wire = framework_to_wire(DEFAULT_OFFER)
    assert list(wire) == ["hook", "problem", "promise", "cta", "offerName", "priceRange"]
