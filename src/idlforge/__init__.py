"""
idlforge - Anchor IDL to Python bindings generator.

Loads a Solana program's Anchor IDL into a typed, immutable schema and
emits Python source that rebuilds it, discriminators and PDA seeds intact.
"""

from __future__ import annotations

# Re-export commonly used types for convenience
from ._version import get_version
from .core import ir
from .core.errors import (
    ConfigError,
    EmissionError,
    IdlForgeError,
    IdlIOError,
    SchemaError,
    SchemaErrorKind,
)
from .core.loader import load_schema, load_schema_file
from .core.lookup import ZERO_DISCRIMINATOR, find_discriminator, get_discriminator
from .core.pipeline import generate, generate_file

__version__ = get_version()

__all__ = [
    "__version__",
    "ir",
    "IdlForgeError",
    "SchemaError",
    "SchemaErrorKind",
    "IdlIOError",
    "EmissionError",
    "ConfigError",
    "load_schema",
    "load_schema_file",
    "get_discriminator",
    "find_discriminator",
    "ZERO_DISCRIMINATOR",
    "generate",
    "generate_file",
]
