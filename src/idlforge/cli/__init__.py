"""
idlforge CLI package.

- generate.py: bindings generation
- lookup.py: discriminator lookup and IDL summaries
- utils.py: shared utilities
"""

from __future__ import annotations

import typer

from idlforge.cli.generate import generate_command
from idlforge.cli.lookup import inspect_command, lookup_command
from idlforge.cli.utils import configure_logging, version_callback

app = typer.Typer(
    help="idlforge - generate Python bindings from Anchor IDL files",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
) -> None:
    """idlforge CLI main callback for global options."""
    configure_logging(verbose)


app.command(name="generate")(generate_command)
app.command(name="lookup")(lookup_command)
app.command(name="inspect")(inspect_command)


def main() -> None:
    app(standalone_mode=True)


__all__ = ["app", "main"]
