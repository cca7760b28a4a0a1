"""
Error types for IDL loading, configuration, and code emission.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


class IdlForgeError(Exception):
    """Base exception for all idlforge errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class SchemaErrorKind(str, Enum):
    """Categories of malformed IDL input."""

    INVALID_DOCUMENT = "invalid_document"
    MISSING_FIELD = "missing_field"
    MALFORMED_DISCRIMINATOR = "malformed_discriminator"
    UNKNOWN_TYPE_SHAPE = "unknown_type_shape"
    UNKNOWN_SEED_KIND = "unknown_seed_kind"
    EMPTY_SEEDS = "empty_seeds"
    DUPLICATE = "duplicate"


class SchemaError(IdlForgeError):
    """
    Raised when an IDL document cannot be loaded into a Schema.

    Examples:
    - Discriminator that is not exactly 8 bytes
    - Type expression with an unrecognized shape
    - PDA seed with an unknown kind
    - Instruction or account without a name
    """

    def __init__(
        self,
        kind: SchemaErrorKind,
        message: str,
        path: str = "",
        file: Path | None = None,
    ):
        self.kind = kind
        self.path = path
        context = ErrorContext(path=path, file=file) if (path or file) else None
        super().__init__(f"{kind.value}: {message}", context)


class IdlIOError(IdlForgeError):
    """
    Raised when the IDL input cannot be read or generated output cannot be written.

    The underlying OSError is kept on ``cause`` and chained.
    """

    def __init__(self, message: str, path: Path, cause: OSError | None = None):
        self.path = path
        self.cause = cause
        super().__init__(f"{message}: {cause}" if cause else message, ErrorContext(file=path))


class EmissionError(IdlForgeError):
    """
    Raised when the emitter is called with arguments it cannot honour.

    Examples:
    - Binding name that is not a Python identifier
    - Module name that is not a dotted Python identifier

    A Schema produced by the loader never causes this error.
    """

    pass


class ConfigError(IdlForgeError):
    """
    Raised when an ``idlforge.toml`` project file is malformed.

    Examples:
    - Invalid TOML syntax
    - Target entry without ``idl`` or ``output``
    """

    pass


@dataclass
class ErrorContext:
    """
    Context information for an error.

    Attributes:
        path: Dotted field path inside the IDL document
            (e.g. ``instructions[2].accounts[0].pda.seeds[1].kind``)
        file: Optional path to the file being processed
    """

    path: str = ""
    file: Path | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "idl/gateway.json: at instructions[0].name"
        """
        if self.file and self.path:
            return f"{self.file}: at {self.path}"
        if self.path:
            return f"at {self.path}"
        return str(self.file)


def make_schema_error(
    kind: SchemaErrorKind,
    message: str,
    path: str = "",
    file: Path | None = None,
) -> SchemaError:
    """
    Helper to create a SchemaError with context.

    Args:
        kind: Error category
        message: Error description
        path: Dotted field path of the offending value
        file: Optional source file path

    Returns:
        SchemaError with context attached
    """
    return SchemaError(kind, message, path=path, file=file)


def make_config_error(message: str, file: Path | None = None) -> ConfigError:
    """
    Helper to create a ConfigError with optional file context.

    Args:
        message: Error description
        file: Optional config file path

    Returns:
        ConfigError with context if a file is provided
    """
    if file:
        return ConfigError(message, ErrorContext(file=file))
    return ConfigError(message)
