"""Tests for instruction discriminator lookup."""

from typing import Any

from idlforge.core import ir
from idlforge.core.loader import load_schema
from idlforge.core.lookup import ZERO_DISCRIMINATOR, find_discriminator, get_discriminator


def test_every_instruction_round_trips(gateway_idl: dict[str, Any], gateway_schema: ir.Schema):
    for raw in gateway_idl["instructions"]:
        assert get_discriminator(gateway_schema, raw["name"]) == bytes(raw["discriminator"])


def test_unknown_instruction_returns_zero_sentinel(gateway_schema: ir.Schema):
    assert get_discriminator(gateway_schema, "does_not_exist") == bytes([0, 0, 0, 0, 0, 0, 0, 0])
    assert ZERO_DISCRIMINATOR == bytes(8)


def test_find_discriminator_signals_absence(gateway_schema: ir.Schema):
    assert find_discriminator(gateway_schema, "does_not_exist") is None
    assert find_discriminator(gateway_schema, "deposit") == bytes([242, 35, 198, 137, 82, 225, 242, 182])


def test_zero_discriminator_is_found(ping_idl: dict[str, Any]):
    ping_idl["instructions"][0]["discriminator"] = [0] * 8
    schema = load_schema(ping_idl)
    assert find_discriminator(schema, "ping") == bytes(8)


def test_lookup_is_exact_match(gateway_schema: ir.Schema):
    assert find_discriminator(gateway_schema, "Deposit") is None
    assert find_discriminator(gateway_schema, "deposit ") is None


def test_first_match_wins_for_duplicate_names(ping_idl: dict[str, Any]):
    ping_idl["instructions"].append(
        {"name": "ping", "discriminator": [9, 9, 9, 9, 9, 9, 9, 9], "accounts": [], "args": []}
    )
    schema = load_schema(ping_idl)
    assert get_discriminator(schema, "ping") == bytes([1, 2, 3, 4, 5, 6, 7, 8])


def test_schema_method_matches_function(gateway_schema: ir.Schema):
    assert gateway_schema.get_discriminator("whitelist_spl_mint") == get_discriminator(
        gateway_schema, "whitelist_spl_mint"
    )
    assert gateway_schema.get_discriminator("nope") == ZERO_DISCRIMINATOR
