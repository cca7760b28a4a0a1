"""Shared pytest fixtures for idlforge tests."""

import copy
import json
from pathlib import Path
from typing import Any

import pytest

from idlforge.core import ir
from idlforge.core.loader import load_schema

GATEWAY_IDL: dict[str, Any] = {
    "address": "94U5AHQMKkV5txNJ17QPXWoh474PheGou6cNP2FEuL1d",
    "metadata": {
        "name": "gateway",
        "version": "0.1.0",
        "spec": "0.1.0",
        "description": "ZetaChain Gateway program on Solana",
    },
    "instructions": [
        {
            "name": "deposit",
            "discriminator": [242, 35, 198, 137, 82, 225, 242, 182],
            "accounts": [
                {"name": "signer", "writable": True, "signer": True},
                {
                    "name": "pda",
                    "writable": True,
                    "pda": {"seeds": [{"kind": "const", "value": [109, 101, 116, 97]}]},
                },
                {"name": "system_program", "address": "11111111111111111111111111111111"},
            ],
            "args": [
                {"name": "amount", "type": "u64"},
                {"name": "receiver", "type": {"array": ["u8", 20]}},
                {"name": "revert_options", "type": {"option": {"defined": {"name": "RevertOptions"}}}},
            ],
        },
        {
            "name": "whitelist_spl_mint",
            "discriminator": [30, 110, 162, 42, 208, 147, 254, 219],
            "accounts": [
                {
                    "name": "whitelist_entry",
                    "writable": True,
                    "pda": {
                        "seeds": [
                            {"kind": "const", "value": [119, 104, 105, 116, 101, 108, 105, 115, 116]},
                            {"kind": "account", "path": "whitelist_candidate"},
                        ]
                    },
                },
                {"name": "whitelist_candidate"},
                {"name": "authority", "writable": True, "signer": True},
            ],
            "args": [
                {"name": "signature", "type": {"array": ["u8", 64]}},
                {"name": "nonce", "type": "u64"},
                {"name": "memos", "type": {"vec": {"option": "string"}}},
            ],
        },
    ],
    "accounts": [
        {"name": "Pda", "discriminator": [169, 245, 0, 205, 225, 36, 43, 94]},
        {"name": "WhitelistEntry", "discriminator": [51, 70, 173, 81, 3, 126, 12, 60]},
    ],
    "errors": [
        {"code": 6000, "name": "SignerIsNotAuthority", "msg": "SignerIsNotAuthority"},
        {"code": 6001, "name": "NonceMismatch", "msg": "NonceMismatch"},
        {"code": 6002, "name": "TSSAuthenticationFailed"},
    ],
    "types": [
        {
            "name": "RevertOptions",
            "type": {
                "kind": "struct",
                "fields": [
                    {"name": "revert_address", "type": "pubkey"},
                    {"name": "call_on_revert", "type": "bool"},
                    {"name": "revert_message", "type": "bytes"},
                ],
            },
        },
        {
            "name": "CallableKind",
            "type": {"kind": "enum", "variants": [{"name": "Arbitrary"}, {"name": "Authenticated"}]},
        },
        {"name": "Pda", "type": {"kind": "struct", "fields": [{"name": "nonce", "type": "u64"}]}},
        {
            "name": "WhitelistEntry",
            "type": {"kind": "struct", "fields": []},
        },
    ],
}

PING_IDL: dict[str, Any] = {
    "address": "Ping111111111111111111111111111111111111111",
    "metadata": {"name": "ping", "version": "0.0.1", "spec": "0.1.0", "description": ""},
    "instructions": [
        {
            "name": "ping",
            "discriminator": [1, 2, 3, 4, 5, 6, 7, 8],
            "accounts": [{"name": "signer", "writable": True, "signer": True}],
            "args": [],
        }
    ],
}


@pytest.fixture
def gateway_idl() -> dict[str, Any]:
    """Return a mutable copy of the gateway IDL document."""
    return copy.deepcopy(GATEWAY_IDL)


@pytest.fixture
def ping_idl() -> dict[str, Any]:
    """Return a mutable copy of the minimal one-instruction IDL document."""
    return copy.deepcopy(PING_IDL)


@pytest.fixture
def gateway_schema(gateway_idl: dict[str, Any]) -> ir.Schema:
    """Return the gateway IDL loaded into a Schema."""
    return load_schema(gateway_idl)


@pytest.fixture
def gateway_idl_path(tmp_path: Path, gateway_idl: dict[str, Any]) -> Path:
    """Write the gateway IDL to a temporary JSON file."""
    path = tmp_path / "gateway.json"
    path.write_text(json.dumps(gateway_idl, indent=2))
    return path


@pytest.fixture
def ping_schema() -> ir.Schema:
    """Return the minimal IDL built directly from IR types."""
    return ir.Schema(
        address="Ping111111111111111111111111111111111111111",
        metadata=ir.Metadata(name="ping", version="0.0.1", spec="0.1.0"),
        instructions=[
            ir.Instruction(
                name="ping",
                discriminator=bytes([1, 2, 3, 4, 5, 6, 7, 8]),
                accounts=[ir.AccountRef(name="signer", writable=True, signer=True)],
            )
        ],
    )
