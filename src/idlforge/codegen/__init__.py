"""
Code generation from a loaded Schema.

Provides:
- Base generator classes
- Python bindings emitter
"""

from .base import Generator, GeneratorResult
from .python import PythonEmitter, PythonRenderer, constant_name, emit

__all__ = [
    "Generator",
    "GeneratorResult",
    "PythonEmitter",
    "PythonRenderer",
    "constant_name",
    "emit",
]
