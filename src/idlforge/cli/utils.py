"""
idlforge CLI utilities.

Shared helpers used across CLI modules.
"""

from __future__ import annotations

import logging
import platform
import sys
from pathlib import Path

import typer

from idlforge._version import get_version
from idlforge.core.errors import IdlForgeError
from idlforge.core.ir import Schema
from idlforge.core.loader import load_schema_file


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"idlforge {get_version()}")
        typer.echo(f"Python {platform.python_version()} ({platform.python_implementation()})")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Send debug logging to stderr when verbose; warnings reach stderr regardless."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )
        logging.getLogger("idlforge").setLevel(logging.DEBUG)


def fail(message: str) -> typer.Exit:
    """Print an error to stderr and return the exit to raise."""
    typer.echo(f"Error: {message}", err=True)
    return typer.Exit(code=1)


def load_or_exit(idl: Path, strict: bool = False) -> Schema:
    """Load an IDL file, converting failures into a CLI exit."""
    try:
        return load_schema_file(idl, strict=strict)
    except IdlForgeError as e:
        raise fail(str(e)) from e
