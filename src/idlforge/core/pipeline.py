"""Canonical IDL-to-bindings pipeline.

Single implementation of load -> emit. The CLI and library callers that
turn IDL documents into Python bindings should go through here.
"""

from __future__ import annotations

from pathlib import Path

from ..codegen.base import GeneratorResult
from ..codegen.python import PythonEmitter, emit
from .loader import RawDocument, load_schema, load_schema_file


def generate(
    raw: RawDocument,
    module_name: str,
    binding_name: str,
    *,
    strict: bool = False,
) -> str:
    """Load an IDL document and return the generated Python source.

    Either the complete source text is returned or an error is raised;
    there is no partial output.

    Args:
        raw: IDL JSON as text, bytes, or a decoded mapping.
        module_name: Dotted name of the generated module.
        binding_name: Name of the top-level Schema binding.
        strict: Reject duplicate identities while loading.

    Raises:
        SchemaError: If the IDL is malformed.
        EmissionError: If module_name or binding_name is invalid.
    """
    schema = load_schema(raw, strict=strict)
    return emit(schema, module_name, binding_name)


def generate_file(
    input_path: Path,
    output_path: Path,
    module_name: str,
    binding_name: str,
    *,
    strict: bool = False,
) -> GeneratorResult:
    """Read an IDL file and write its Python bindings.

    Raises:
        IdlIOError: If the input cannot be read or the output cannot be written.
        SchemaError: If the IDL is malformed.
        EmissionError: If module_name or binding_name is invalid.
    """
    schema = load_schema_file(input_path, strict=strict)
    return PythonEmitter(schema, output_path, module_name, binding_name).generate()
