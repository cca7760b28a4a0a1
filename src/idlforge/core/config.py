"""
Project configuration (``idlforge.toml``).

Example:

    [generate]
    module = "gateway_idl"
    binding = "GATEWAY"
    strict = false

    [[targets]]
    idl = "idl/gateway.json"
    output = "generated/gateway_idl.py"
    binding = "GATEWAY"

Relative target paths are resolved against the directory holding the
config file. Target entries fall back to the ``[generate]`` defaults; a
target with no module anywhere is named after its output file.
"""

from __future__ import annotations

import keyword
import logging
import re
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import IdlIOError, make_config_error

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "idlforge.toml"


@dataclass
class GenerateDefaults:
    """Defaults applied to every target."""

    module: str | None = None
    binding: str = "IDL"
    strict: bool = False


@dataclass
class TargetConfig:
    """One IDL file to generate bindings for."""

    idl: Path
    output: Path
    module: str
    binding: str
    strict: bool = False


@dataclass
class ProjectConfig:
    """Parsed ``idlforge.toml``."""

    root: Path
    defaults: GenerateDefaults = field(default_factory=GenerateDefaults)
    targets: list[TargetConfig] = field(default_factory=list)


def load_config(path: Path) -> ProjectConfig:
    """
    Load a project config file.

    Raises:
        IdlIOError: If the file cannot be read
        ConfigError: If the file is not valid TOML or has malformed entries
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise IdlIOError("Failed to read config", path, e) from e

    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise make_config_error(f"Invalid TOML: {e}", path) from e

    root = path.parent
    gen_data = _table(data, "generate", path)
    defaults = GenerateDefaults(
        module=_optional_str(gen_data, "module", path),
        binding=_str(gen_data, "binding", "IDL", path),
        strict=_bool(gen_data, "strict", False, path),
    )

    targets_data = data.get("targets", [])
    if not isinstance(targets_data, list):
        raise make_config_error("'targets' must be an array of tables", path)

    targets: list[TargetConfig] = []
    for i, entry in enumerate(targets_data):
        if not isinstance(entry, dict):
            raise make_config_error(f"targets[{i}] must be a table", path)
        for key in ("idl", "output"):
            if not isinstance(entry.get(key), str):
                raise make_config_error(f"targets[{i}] requires '{key}'", path)
        output = root / entry["output"]
        targets.append(
            TargetConfig(
                idl=root / entry["idl"],
                output=output,
                module=_optional_str(entry, "module", path) or defaults.module or module_name_for(output),
                binding=_str(entry, "binding", defaults.binding, path),
                strict=_bool(entry, "strict", defaults.strict, path),
            )
        )

    logger.debug(f"Loaded config {path} with {len(targets)} targets")
    return ProjectConfig(root=root, defaults=defaults, targets=targets)


def find_config(start: Path) -> Path | None:
    """Return the nearest ``idlforge.toml`` in ``start`` or its parents."""
    for directory in [start, *start.parents]:
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def module_name_for(output: Path) -> str:
    """Module name derived from an output file name, e.g. gateway-idl.py -> gateway_idl."""
    name = re.sub(r"\W", "_", output.stem, flags=re.ASCII) or "_"
    if name[0].isdigit() or keyword.iskeyword(name):
        name = f"_{name}"
    return name


def _table(data: dict[str, Any], key: str, path: Path) -> dict[str, Any]:
    value = data.get(key, {})
    if not isinstance(value, dict):
        raise make_config_error(f"'{key}' must be a table", path)
    return value


def _str(data: dict[str, Any], key: str, default: str, path: Path) -> str:
    value = data.get(key, default)
    if not isinstance(value, str):
        raise make_config_error(f"'{key}' must be a string", path)
    return value


def _optional_str(data: dict[str, Any], key: str, path: Path) -> str | None:
    if key not in data:
        return None
    return _str(data, key, "", path)


def _bool(data: dict[str, Any], key: str, default: bool, path: Path) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise make_config_error(f"'{key}' must be a boolean", path)
    return value
