"""
Inspection commands for idlforge CLI.

- lookup IDL INSTRUCTION: print an instruction's discriminator
- inspect IDL: summarize instructions, accounts, errors and types
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from idlforge.core.lookup import find_discriminator

from .utils import fail, load_or_exit

console = Console()


def lookup_command(
    idl: Path = typer.Argument(..., help="Path to the Anchor IDL JSON file"),  # noqa: B008
    instruction: str = typer.Argument(..., help="Instruction name"),
    format: str = typer.Option(
        "list",
        "--format",
        "-f",
        help="Output format: list (byte values) or hex",
    ),
) -> None:
    """Print the 8-byte discriminator of an instruction."""
    if format not in ("list", "hex"):
        raise fail(f"Unsupported format: {format}. Use 'list' or 'hex'.")

    schema = load_or_exit(idl)
    discriminator = find_discriminator(schema, instruction)
    if discriminator is None:
        raise fail(f"Instruction '{instruction}' not found in {idl}")

    if format == "hex":
        typer.echo(discriminator.hex())
    else:
        typer.echo(str(list(discriminator)))


def inspect_command(
    idl: Path = typer.Argument(..., help="Path to the Anchor IDL JSON file"),  # noqa: B008
) -> None:
    """Summarize the contents of an IDL."""
    schema = load_or_exit(idl)
    meta = schema.metadata

    console.print(f"[bold]{escape(meta.name or '(unnamed)')}[/bold] v{escape(meta.version)}  {schema.address}")
    if meta.description:
        console.print(escape(meta.description))

    instructions = Table(title="Instructions")
    instructions.add_column("Name", no_wrap=True)
    instructions.add_column("Discriminator", no_wrap=True)
    instructions.add_column("Accounts")
    instructions.add_column("Args")
    for ix in schema.instructions:
        accounts = ", ".join(
            f"{acc.name}[{acc.flags}]" + (" (pda)" if acc.pda else "") for acc in ix.accounts
        )
        args = ", ".join(f"{arg.name}: {arg.type}" for arg in ix.args)
        instructions.add_row(escape(ix.name), ix.discriminator.hex(), escape(accounts), escape(args))
    console.print(instructions)

    if schema.accounts:
        accounts_table = Table(title="Accounts")
        accounts_table.add_column("Name")
        accounts_table.add_column("Discriminator")
        for acc in schema.accounts:
            accounts_table.add_row(escape(acc.name), acc.discriminator.hex() if acc.discriminator else "")
        console.print(accounts_table)

    if schema.errors:
        errors = Table(title="Errors")
        errors.add_column("Code", justify="right")
        errors.add_column("Name", no_wrap=True)
        errors.add_column("Message")
        for err in schema.errors:
            errors.add_row(str(err.code), escape(err.name), escape(err.msg))
        console.print(errors)

    if schema.types:
        types = Table(title="Types")
        types.add_column("Name")
        types.add_column("Definition")
        for typ in schema.types:
            types.add_row(escape(typ.name), escape(str(typ.type)))
        console.print(types)
