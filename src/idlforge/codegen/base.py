"""
Base generator classes for code generation.

A generator turns a loaded Schema into one artifact on disk. Rendering
happens entirely in memory before anything is written, so a failure never
leaves a partially-written file behind.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..core.errors import IdlIOError
from ..core.ir import Schema

logger = logging.getLogger(__name__)


@dataclass
class GeneratorResult:
    """
    Result from a generator execution.

    Attributes:
        files_created: List of file paths that were written
        artifacts: Data to share with callers (binding name, constants, ...)
        warnings: Any warnings to display to user
    """

    files_created: list[Path] = field(default_factory=list)
    artifacts: dict[str, Any] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)

    def add_file(self, path: Path) -> None:
        """Record a file that was created."""
        self.files_created.append(path)

    def add_artifact(self, key: str, value: Any) -> None:
        """Add an artifact for callers."""
        self.artifacts[key] = value

    def add_warning(self, warning: str) -> None:
        """Record a warning."""
        self.warnings.append(warning)

    def merge(self, other: GeneratorResult) -> None:
        """Merge another result into this one."""
        self.files_created.extend(other.files_created)
        self.artifacts.update(other.artifacts)
        self.warnings.extend(other.warnings)


class Generator(ABC):
    """
    Base class for all generators.

    Example:
        class ConstantsGenerator(Generator):
            def generate(self) -> GeneratorResult:
                result = GeneratorResult()
                code = "\\n".join(f"{ix.name.upper()} = {ix.name!r}" for ix in self.schema.instructions)
                self._write_file(self.output_path, code)
                result.add_file(self.output_path)
                return result
    """

    def __init__(self, schema: Schema, output_path: Path):
        """
        Initialize generator.

        Args:
            schema: Loaded schema
            output_path: File the generated source is written to
        """
        self.schema = schema
        self.output_path = output_path

    @abstractmethod
    def generate(self) -> GeneratorResult:
        """
        Generate artifacts.

        Returns:
            GeneratorResult with files created and artifacts
        """
        pass

    def _write_file(self, path: Path, content: str) -> None:
        """Write content to a file, creating parent directories if needed."""
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise IdlIOError("Failed to write generated source", path, e) from e
        logger.debug(f"Wrote {len(content)} characters to {path}")
