"""
Python bindings generation.

Renders a Schema as a Python module whose single top-level binding
rebuilds the same Schema through IR constructor calls:

    GATEWAY = Schema(
        address="94U5AHQMKkV5txNJ17QPXWoh474PheGou6cNP2FEuL1d",
        metadata=Metadata(...),
        instructions=[
            Instruction(
                name="deposit",
                discriminator=bytes([242, 35, 198, 137, 82, 225, 242, 182]),
                ...

Output depends only on the Schema and the names passed in: every list is
rendered in declared order and nothing iterates an unordered collection.
Type expressions too deep to nest on one line are hoisted into
``_type_<n>`` bindings that precede the Schema binding.
"""

from __future__ import annotations

import keyword
import logging
import re
from pathlib import Path

from ..core.errors import EmissionError
from ..core.ir import (
    AccountDefinition,
    AccountRef,
    ArrayType,
    COptionType,
    DefinedType,
    EnumType,
    EnumVariant,
    FieldDef,
    Instruction,
    OptionType,
    PdaRule,
    PdaSeed,
    PrimitiveType,
    Schema,
    SeedKind,
    StructType,
    TypeDefinition,
    TypeExpression,
    VecType,
)
from .base import Generator, GeneratorResult

logger = logging.getLogger(__name__)

IR_MODULE = "idlforge.core.ir"
INDENT = "    "
# Python rejects source with more than 200 nested brackets.
MAX_NESTING = 100

_MODULE_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")


def emit(schema: Schema, module_name: str, binding_name: str) -> str:
    """
    Render a Schema as Python source.

    Args:
        schema: Loaded schema; not re-validated
        module_name: Dotted name the generated module is imported as
        binding_name: Name of the top-level Schema binding

    Returns:
        Complete module source text

    Raises:
        EmissionError: If module_name or binding_name is not a valid Python name
    """
    return PythonRenderer(schema, module_name, binding_name).render()


def constant_name(instruction_name: str) -> str:
    """
    Name of the instruction-name constant for an instruction.

    Examples:
        deposit_and_call -> INSTRUCTION_DEPOSIT_AND_CALL
        depositSplToken  -> INSTRUCTION_DEPOSIT_SPL_TOKEN
    """
    snake = re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", instruction_name)
    snake = re.sub(r"\W", "_", snake, flags=re.ASCII)
    return f"INSTRUCTION_{snake.upper()}"


def _quote(value: str) -> str:
    """Python string literal, double-quoted where repr allows it."""
    text = repr(value)
    if text.startswith("'") and '"' not in value:
        return '"' + text[1:-1] + '"'
    return text


def _bytes_literal(value: bytes) -> str:
    return "bytes([" + ", ".join(str(b) for b in value) + "])"


class PythonRenderer:
    """Renders one Schema to Python source; single use."""

    def __init__(self, schema: Schema, module_name: str, binding_name: str):
        if not _MODULE_NAME.match(module_name) or any(
            keyword.iskeyword(part) for part in module_name.split(".")
        ):
            raise EmissionError(f"Invalid module name: {module_name!r}")
        if not binding_name.isidentifier() or keyword.iskeyword(binding_name):
            raise EmissionError(f"Invalid binding name: {binding_name!r}")

        self.schema = schema
        self.module_name = module_name
        self.binding_name = binding_name
        self.warnings: list[str] = []
        self._used: set[str] = set()
        self._helpers: list[tuple[str, str]] = []

    def render(self) -> str:
        """Render the full module."""
        binding = self._schema()
        body = [f"{name} = {rendered}" for name, rendered in self._helpers]
        if body:
            body.append("")
        body.extend([f"{self.binding_name} = {binding}", ""])

        constants = self._constants()
        for const, name in constants:
            body.append(f"{const} = {_quote(name)}")
        if constants:
            body.append("")

        exports = [self.binding_name] + [const for const, _ in constants]
        body.append("__all__ = [")
        body.extend(f"{INDENT}{_quote(name)}," for name in exports)
        body.append("]")

        header = [
            '"""',
            f"IDL bindings: {self.module_name}.",
            "",
            "Generated by idlforge - DO NOT EDIT.",
            '"""',
            "",
            f"from {IR_MODULE} import (",
            *(f"{INDENT}{name}," for name in sorted(self._used)),
            ")",
            "",
        ]
        return "\n".join(header + body) + "\n"

    # ------------------------------------------------------------------
    # Top level
    # ------------------------------------------------------------------

    def _schema(self) -> str:
        schema = self.schema
        meta = schema.metadata
        return self._call(
            "Schema",
            [
                ("address", _quote(schema.address)),
                (
                    "metadata",
                    self._call(
                        "Metadata",
                        [
                            ("name", _quote(meta.name)),
                            ("version", _quote(meta.version)),
                            ("spec", _quote(meta.spec)),
                            ("description", _quote(meta.description)),
                        ],
                        level=1,
                    ),
                ),
                ("instructions", self._list([self._instruction(ix, 2) for ix in schema.instructions], 1)),
                ("accounts", self._list([self._account(acc, 2) for acc in schema.accounts], 1)),
                (
                    "errors",
                    self._list(
                        [
                            self._inline(
                                "ErrorDefinition",
                                [("code", str(err.code)), ("name", _quote(err.name)), ("msg", _quote(err.msg))],
                            )
                            for err in schema.errors
                        ],
                        1,
                    ),
                ),
                ("types", self._list([self._type_definition(t, 2) for t in schema.types], 1)),
            ],
            level=0,
        )

    def _constants(self) -> list[tuple[str, str]]:
        constants: list[tuple[str, str]] = []
        taken = {self.binding_name}
        seen_names: set[str] = set()
        for ix in self.schema.instructions:
            if ix.name in seen_names:
                continue
            seen_names.add(ix.name)
            const = constant_name(ix.name)
            if const in taken:
                base, n = const, 2
                while f"{base}_{n}" in taken:
                    n += 1
                const = f"{base}_{n}"
                self._warn(f"Instruction constant for '{ix.name}' renamed to {const} to avoid a name clash")
            taken.add(const)
            constants.append((const, ix.name))
        return constants

    # ------------------------------------------------------------------
    # Instructions and accounts
    # ------------------------------------------------------------------

    def _instruction(self, ix: Instruction, level: int) -> str:
        fields = [
            ("name", _quote(ix.name)),
            ("discriminator", _bytes_literal(ix.discriminator)),
            ("accounts", self._list([self._account(acc, level + 2) for acc in ix.accounts], level + 1)),
            (
                "args",
                self._list(
                    [
                        self._inline("Arg", [("name", _quote(arg.name)), ("type", self._type(arg.type, 5))])
                        for arg in ix.args
                    ],
                    level + 1,
                ),
            ),
        ]
        if ix.docs:
            fields.append(("docs", self._strings(ix.docs)))
        return self._call("Instruction", fields, level)

    def _account(self, acc: AccountRef, level: int) -> str:
        fields = [
            ("name", _quote(acc.name)),
            ("writable", str(acc.writable)),
            ("signer", str(acc.signer)),
        ]
        if acc.optional:
            fields.append(("optional", "True"))
        fields.append(("address", _quote(acc.address) if acc.address is not None else "None"))
        fields.append(("pda", self._pda(acc.pda, level + 1) if acc.pda is not None else "None"))
        if acc.docs:
            fields.append(("docs", self._strings(acc.docs)))

        cls = "AccountRef"
        if isinstance(acc, AccountDefinition):
            cls = "AccountDefinition"
            if acc.discriminator is not None:
                fields.append(("discriminator", _bytes_literal(acc.discriminator)))
        return self._call(cls, fields, level)

    def _pda(self, pda: PdaRule, level: int) -> str:
        fields = [("seeds", self._list([self._seed(s) for s in pda.seeds], level + 1))]
        if pda.program is not None:
            fields.append(("program", self._seed(pda.program)))
        return self._call("PdaRule", fields, level)

    def _seed(self, seed: PdaSeed) -> str:
        fields = [("kind", _quote(seed.kind.value))]
        if seed.kind == SeedKind.CONST:
            fields.append(("value", _bytes_literal(seed.value or b"")))
        elif seed.kind == SeedKind.STRING:
            fields.append(("text", _quote(seed.text or "")))
        else:
            fields.append(("path", _quote(seed.path or "")))
            if seed.account is not None:
                fields.append(("account", _quote(seed.account)))
        return self._inline("PdaSeed", fields)

    # ------------------------------------------------------------------
    # Types
    # ------------------------------------------------------------------

    def _type_definition(self, typ: TypeDefinition, level: int) -> str:
        # Fields and variants sit inside Schema( types=[ TypeDefinition( StructType( fields=[
        shape = typ.type
        if isinstance(shape, StructType):
            rendered = self._call(
                "StructType", [("fields", self._list([self._field(f, 5) for f in shape.fields], level + 2))], level + 1
            )
        elif isinstance(shape, EnumType):
            variants = self._list([self._variant(v, 5) for v in shape.variants], level + 2)
            rendered = self._call("EnumType", [("variants", variants)], level + 1)
        else:
            rendered = self._type(shape, 3)

        fields = [("name", _quote(typ.name)), ("type", rendered)]
        if typ.docs:
            fields.append(("docs", self._strings(typ.docs)))
        return self._call("TypeDefinition", fields, level)

    def _type(self, expr: TypeExpression, depth: int) -> str:
        """
        Lower a type expression to a single-line constructor call.

        ``depth`` is the number of brackets already open where the call is
        placed. Sub-expressions that would open more than MAX_NESTING are
        hoisted into helper bindings.
        """
        if depth >= MAX_NESTING:
            return self._hoist(expr)
        inner = depth + 1
        if isinstance(expr, PrimitiveType):
            return self._inline("PrimitiveType", [("name", _quote(expr.name.value))])
        if isinstance(expr, ArrayType):
            return self._inline(
                "ArrayType", [("element", self._type(expr.element, inner)), ("length", str(expr.length))]
            )
        if isinstance(expr, VecType):
            return self._inline("VecType", [("element", self._type(expr.element, inner))])
        if isinstance(expr, OptionType):
            return self._inline("OptionType", [("element", self._type(expr.element, inner))])
        if isinstance(expr, COptionType):
            return self._inline("COptionType", [("element", self._type(expr.element, inner))])
        if isinstance(expr, DefinedType):
            fields = [("name", _quote(expr.name))]
            if expr.generics:
                fields.append(("generics", "[" + ", ".join(self._type(g, inner + 1) for g in expr.generics) + "]"))
            return self._inline("DefinedType", fields)
        if isinstance(expr, StructType):
            return self._inline(
                "StructType", [("fields", "[" + ", ".join(self._field(f, inner + 1) for f in expr.fields) + "]")]
            )
        if isinstance(expr, EnumType):
            return self._inline(
                "EnumType", [("variants", "[" + ", ".join(self._variant(v, inner + 1) for v in expr.variants) + "]")]
            )
        raise EmissionError(f"Unsupported type expression: {type(expr).__name__}")

    def _hoist(self, expr: TypeExpression) -> str:
        # Nested helpers are appended first, so each helper is defined before use.
        rendered = self._type(expr, 0)
        name = f"_type_{len(self._helpers)}"
        if name == self.binding_name:
            name = f"_type_{len(self._helpers)}_"
        self._helpers.append((name, rendered))
        return name

    def _field(self, field: FieldDef, depth: int) -> str:
        fields = [("name", _quote(field.name)), ("type", self._type(field.type, depth + 1))]
        if field.docs:
            fields.append(("docs", self._strings(field.docs)))
        return self._inline("FieldDef", fields)

    def _variant(self, variant: EnumVariant, depth: int) -> str:
        fields = [("name", _quote(variant.name))]
        if variant.fields:
            fields.append(("fields", "[" + ", ".join(self._field(f, depth + 2) for f in variant.fields) + "]"))
        if variant.items:
            fields.append(("items", "[" + ", ".join(self._type(i, depth + 2) for i in variant.items) + "]"))
        return self._inline("EnumVariant", fields)

    # ------------------------------------------------------------------
    # Layout helpers
    # ------------------------------------------------------------------

    def _call(self, cls: str, fields: list[tuple[str, str]], level: int) -> str:
        """Constructor call with one keyword argument per line."""
        self._used.add(cls)
        pad = INDENT * (level + 1)
        lines = [f"{cls}("]
        lines.extend(f"{pad}{key}={value}," for key, value in fields)
        lines.append(f"{INDENT * level})")
        return "\n".join(lines)

    def _inline(self, cls: str, fields: list[tuple[str, str]]) -> str:
        """Constructor call on a single line."""
        self._used.add(cls)
        return f"{cls}(" + ", ".join(f"{key}={value}" for key, value in fields) + ")"

    def _list(self, items: list[str], level: int) -> str:
        """List literal with one item per line, or ``[]`` when empty."""
        if not items:
            return "[]"
        pad = INDENT * (level + 1)
        lines = ["["]
        lines.extend(f"{pad}{item}," for item in items)
        lines.append(f"{INDENT * level}]")
        return "\n".join(lines)

    def _strings(self, values: list[str]) -> str:
        return "[" + ", ".join(_quote(v) for v in values) + "]"

    def _warn(self, message: str) -> None:
        logger.debug(message)
        self.warnings.append(message)


class PythonEmitter(Generator):
    """
    Writes Python bindings for a Schema to a single module file.

    Example:
        result = PythonEmitter(schema, Path("gateway_idl.py"), "gateway_idl", "GATEWAY").generate()
    """

    def __init__(self, schema: Schema, output_path: Path, module_name: str, binding_name: str):
        super().__init__(schema, output_path)
        self.module_name = module_name
        self.binding_name = binding_name

    def generate(self) -> GeneratorResult:
        result = GeneratorResult()

        renderer = PythonRenderer(self.schema, self.module_name, self.binding_name)
        source = renderer.render()
        for warning in renderer.warnings:
            result.add_warning(warning)

        self._write_file(self.output_path, source)
        result.add_file(self.output_path)

        result.add_artifact("binding", self.binding_name)
        result.add_artifact("instructions", [ix.name for ix in self.schema.instructions])
        logger.info(f"Generated {self.module_name} ({len(self.schema.instructions)} instructions) at {self.output_path}")
        return result
