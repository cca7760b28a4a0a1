"""Tests for the load -> emit pipeline entry points."""

import json
from pathlib import Path
from typing import Any

import pytest

from idlforge import generate, generate_file
from idlforge.core import ir
from idlforge.core.errors import EmissionError, IdlIOError, SchemaError, SchemaErrorKind


def test_generate_from_bytes(ping_idl: dict[str, Any], ping_schema: ir.Schema):
    source = generate(json.dumps(ping_idl).encode("utf-8"), "ping_idl", "PING")
    namespace: dict[str, Any] = {}
    exec(compile(source, "<generated>", "exec"), namespace)
    assert namespace["PING"] == ping_schema


def test_generate_rejects_malformed_input(ping_idl: dict[str, Any]):
    ping_idl["instructions"][0]["discriminator"] = [1, 2, 3]
    with pytest.raises(SchemaError) as exc_info:
        generate(json.dumps(ping_idl), "ping_idl", "PING")
    assert exc_info.value.kind == SchemaErrorKind.MALFORMED_DISCRIMINATOR


def test_generate_strict(ping_idl: dict[str, Any]):
    ping_idl["errors"] = [{"code": 1, "name": "A"}, {"code": 1, "name": "B"}]
    generate(json.dumps(ping_idl), "ping_idl", "PING")
    with pytest.raises(SchemaError):
        generate(json.dumps(ping_idl), "ping_idl", "PING", strict=True)


def test_generate_invalid_binding(ping_idl: dict[str, Any]):
    with pytest.raises(EmissionError):
        generate(json.dumps(ping_idl), "ping_idl", "not-valid")


def test_generate_file(tmp_path: Path, gateway_idl_path: Path, gateway_schema: ir.Schema):
    output = tmp_path / "generated" / "gateway_idl.py"
    result = generate_file(gateway_idl_path, output, "generated.gateway_idl", "GATEWAY")

    assert result.files_created == [output]
    namespace: dict[str, Any] = {}
    exec(compile(output.read_text(), str(output), "exec"), namespace)
    assert namespace["GATEWAY"] == gateway_schema


def test_generate_file_leaves_no_output_on_schema_error(tmp_path: Path, ping_idl: dict[str, Any]):
    ping_idl["instructions"][0]["accounts"][0]["pda"] = {"seeds": [{"kind": "bogus"}]}
    idl = tmp_path / "ping.json"
    idl.write_text(json.dumps(ping_idl))
    output = tmp_path / "ping_idl.py"

    with pytest.raises(SchemaError):
        generate_file(idl, output, "ping_idl", "PING")
    assert not output.exists()


def test_generate_file_missing_input(tmp_path: Path):
    with pytest.raises(IdlIOError):
        generate_file(tmp_path / "missing.json", tmp_path / "out.py", "out", "OUT")
