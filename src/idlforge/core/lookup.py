"""
Instruction discriminator lookup.

Used at generation time to embed discriminators and at run time by
instruction builders to prefix wire payloads.
"""

from __future__ import annotations

from .ir.accounts import DISCRIMINATOR_SIZE
from .ir.schema import Schema

ZERO_DISCRIMINATOR = bytes(DISCRIMINATOR_SIZE)


def get_discriminator(schema: Schema, name: str) -> bytes:
    """
    Return the 8-byte discriminator for an instruction.

    Scans instructions in declared order and returns the first exact name
    match. When nothing matches, returns ``ZERO_DISCRIMINATOR``; callers must
    treat that value as "not found". Use ``find_discriminator`` when an
    explicit signal is needed.

    Args:
        schema: Loaded schema
        name: Instruction name

    Returns:
        Stored discriminator bytes, or eight zero bytes
    """
    found = find_discriminator(schema, name)
    return ZERO_DISCRIMINATOR if found is None else found


def find_discriminator(schema: Schema, name: str) -> bytes | None:
    """Return the discriminator for an instruction, or None if it does not exist."""
    instr = schema.instruction(name)
    return instr.discriminator if instr is not None else None
