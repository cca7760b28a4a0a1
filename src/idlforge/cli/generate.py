"""
Generation commands for idlforge CLI.

- generate IDL OUTPUT: write bindings for one IDL file
- generate --config idlforge.toml: write bindings for every configured target
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from idlforge.codegen.base import GeneratorResult
from idlforge.core.config import CONFIG_FILENAME, TargetConfig, find_config, load_config, module_name_for
from idlforge.core.errors import IdlForgeError
from idlforge.core.pipeline import generate_file

from .utils import fail

console = Console()


def generate_command(
    idl: Path | None = typer.Argument(  # noqa: B008
        None,
        help="Path to the Anchor IDL JSON file",
    ),
    output: Path | None = typer.Argument(  # noqa: B008
        None,
        help="Path of the Python module to write",
    ),
    module: str | None = typer.Option(
        None,
        "--module",
        "-m",
        help="Dotted module name of the generated file",
    ),
    binding: str | None = typer.Option(
        None,
        "--binding",
        "-b",
        help="Name of the generated Schema binding",
    ),
    strict: bool | None = typer.Option(
        None,
        "--strict/--no-strict",
        help="Reject duplicate instruction names, discriminators, error codes and type names",
    ),
    config: Path | None = typer.Option(  # noqa: B008
        None,
        "--config",
        "-c",
        help=f"Project config (default: nearest {CONFIG_FILENAME})",
    ),
) -> None:
    """Generate Python bindings from an Anchor IDL."""
    try:
        if idl is not None:
            if output is None:
                raise fail("OUTPUT is required when IDL is given")
            config_path = config or find_config(Path.cwd())
            defaults = load_config(config_path).defaults if config_path else None
            target = TargetConfig(
                idl=idl,
                output=output,
                module=module or (defaults.module if defaults else None) or module_name_for(output),
                binding=binding or (defaults.binding if defaults else "IDL"),
                strict=strict if strict is not None else (defaults.strict if defaults else False),
            )
            targets = [target]
        else:
            config_path = config or find_config(Path.cwd())
            if config_path is None:
                raise fail(f"No IDL given and no {CONFIG_FILENAME} found")
            project = load_config(config_path)
            if not project.targets:
                raise fail(f"{config_path} declares no targets")
            targets = [
                TargetConfig(
                    idl=t.idl,
                    output=t.output,
                    module=module or t.module,
                    binding=binding or t.binding,
                    strict=strict if strict is not None else t.strict,
                )
                for t in project.targets
            ]

        combined = GeneratorResult()
        for target in targets:
            result = generate_file(
                target.idl, target.output, target.module, target.binding, strict=target.strict
            )
            combined.merge(result)
            console.print(f"[green]Generated {escape(str(target.output))}[/green] ({target.module}.{target.binding})")
    except IdlForgeError as e:
        raise fail(str(e)) from e

    for warning in combined.warnings:
        console.print(f"[yellow]Warning:[/yellow] {escape(warning)}")
