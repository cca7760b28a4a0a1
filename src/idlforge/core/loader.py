"""
IDL loader.

Parses Anchor IDL JSON into the typed Schema model. Loading is a single
pass over the document, validates structure as it goes, and fails with a
SchemaError naming the offending field path. No partially-built Schema is
ever returned.

Type expressions in the raw IDL are open JSON values; they are dispatched
on their shape:

- "u64", "pubkey", ...           -> PrimitiveType
- {"vec": T}                     -> VecType
- {"option": T}, {"coption": T}  -> OptionType, COptionType
- {"array": [T, N]}              -> ArrayType
- {"defined": "Name"} or {"defined": {"name": "Name", "generics": [...]}}
                                 -> DefinedType
- {"kind": "struct" | "enum" | "type", ...}
                                 -> StructType, EnumType, or the alias target
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from .errors import IdlIOError, SchemaError, SchemaErrorKind, make_schema_error
from .ir import (
    DISCRIMINATOR_SIZE,
    LEGACY_PRIMITIVE_ALIASES,
    AccountDefinition,
    AccountRef,
    Arg,
    ArrayType,
    COptionType,
    DefinedType,
    EnumType,
    EnumVariant,
    ErrorDefinition,
    FieldDef,
    Instruction,
    Metadata,
    OptionType,
    PdaRule,
    PdaSeed,
    PrimitiveName,
    PrimitiveType,
    Schema,
    SeedKind,
    StructType,
    TypeDefinition,
    TypeExpression,
    VecType,
    iter_defined_names,
)

logger = logging.getLogger(__name__)

RawDocument = str | bytes | bytearray | Mapping[str, Any]

_CONTAINER_KEYS = ("vec", "option", "coption", "array", "defined")


def load_schema(
    raw: RawDocument,
    *,
    strict: bool = False,
    source: Path | None = None,
) -> Schema:
    """
    Load an IDL document into a Schema.

    Args:
        raw: IDL JSON as text, bytes, or an already-decoded mapping
        strict: Reject duplicate instruction names, discriminators,
            error codes and type names instead of warning about them
        source: Optional file the document came from, for error messages

    Returns:
        Fully-populated, immutable Schema

    Raises:
        SchemaError: If the document is malformed
    """
    if isinstance(raw, Mapping):
        data = raw
    else:
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise make_schema_error(
                SchemaErrorKind.INVALID_DOCUMENT, f"not valid JSON: {e}", file=source
            ) from e

    return _SchemaLoader(source=source, strict=strict).load(data)


def load_schema_file(path: Path | str, *, strict: bool = False) -> Schema:
    """
    Read and load an IDL file.

    Raises:
        IdlIOError: If the file cannot be read
        SchemaError: If the document is malformed
    """
    path = Path(path)
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise IdlIOError("Failed to read IDL", path, e) from e

    logger.debug(f"Read {len(raw)} bytes from {path}")
    return load_schema(raw, strict=strict, source=path)


class _SchemaLoader:
    """Single-use walker that turns decoded JSON into IR models."""

    def __init__(self, source: Path | None, strict: bool):
        self.source = source
        self.strict = strict

    # ------------------------------------------------------------------
    # Document
    # ------------------------------------------------------------------

    def load(self, data: Any) -> Schema:
        doc = self._object(data, "")
        metadata = self._metadata(doc)

        address = self._string(doc, "address", "address", default=None)
        if address is None:
            # Pre-0.30 IDLs keep the program address under metadata
            legacy_meta = doc.get("metadata")
            if isinstance(legacy_meta, Mapping):
                address = self._string(legacy_meta, "address", "metadata.address", default="")
            else:
                address = ""

        instructions = [
            self._instruction(raw, f"instructions[{i}]")
            for i, raw in enumerate(self._list(doc, "instructions", "instructions"))
        ]
        logger.debug(f"Loaded {len(instructions)} instructions")

        accounts = [
            self._account(raw, f"accounts[{i}]", AccountDefinition)
            for i, raw in enumerate(self._list(doc, "accounts", "accounts"))
        ]
        logger.debug(f"Loaded {len(accounts)} account definitions")

        errors = [
            self._error(raw, f"errors[{i}]")
            for i, raw in enumerate(self._list(doc, "errors", "errors"))
        ]
        logger.debug(f"Loaded {len(errors)} error definitions")

        types = [
            self._type_definition(raw, f"types[{i}]")
            for i, raw in enumerate(self._list(doc, "types", "types"))
        ]
        logger.debug(f"Loaded {len(types)} type definitions")

        schema = Schema(
            address=address,
            metadata=metadata,
            instructions=instructions,
            accounts=accounts,
            errors=errors,
            types=types,
        )

        self._check_duplicates(schema)
        self._check_references(schema)

        logger.info(
            f"Loaded IDL '{metadata.name}' v{metadata.version}: "
            f"{len(instructions)} instructions, {len(accounts)} accounts, "
            f"{len(errors)} errors, {len(types)} types"
        )
        return schema

    def _metadata(self, doc: Mapping[str, Any]) -> Metadata:
        meta = self._object(doc.get("metadata") or {}, "metadata")
        return Metadata(
            # Pre-0.30 IDLs carry name and version at the top level
            name=self._string(meta, "name", "metadata.name", default=None)
            or self._string(doc, "name", "name", default=""),
            version=self._string(meta, "version", "metadata.version", default=None)
            or self._string(doc, "version", "version", default=""),
            spec=self._string(meta, "spec", "metadata.spec", default=""),
            description=self._string(meta, "description", "metadata.description", default=""),
        )

    # ------------------------------------------------------------------
    # Instructions and accounts
    # ------------------------------------------------------------------

    def _instruction(self, raw: Any, path: str) -> Instruction:
        obj = self._object(raw, path)
        name = self._name(obj, path)

        accounts: list[AccountRef] = []
        self._collect_accounts(self._list(obj, "accounts", f"{path}.accounts"), f"{path}.accounts", accounts)

        args = [
            self._arg(arg, f"{path}.args[{i}]")
            for i, arg in enumerate(self._list(obj, "args", f"{path}.args"))
        ]

        return Instruction(
            name=name,
            discriminator=self._discriminator(obj.get("discriminator"), f"{path}.discriminator"),
            accounts=accounts,
            args=args,
            docs=self._docs(obj, path),
        )

    def _collect_accounts(self, items: list[Any], path: str, out: list[AccountRef]) -> None:
        """Append account slots to ``out``, flattening composite account groups."""
        for i, raw in enumerate(items):
            item_path = f"{path}[{i}]"
            obj = self._object(raw, item_path)
            if "accounts" in obj:
                self._name(obj, item_path)
                self._collect_accounts(
                    self._list(obj, "accounts", f"{item_path}.accounts"), f"{item_path}.accounts", out
                )
                continue
            out.append(self._account(obj, item_path, AccountRef))

    def _account(self, raw: Any, path: str, model: type[AccountRef]) -> AccountRef:
        obj = self._object(raw, path)
        fields: dict[str, Any] = {
            "name": self._name(obj, path),
            # Absent flags mean false; pre-0.30 IDLs spell them isMut/isSigner/isOptional
            "writable": self._flag(obj, ("writable", "isMut"), path),
            "signer": self._flag(obj, ("signer", "isSigner"), path),
            "optional": self._flag(obj, ("optional", "isOptional"), path),
            "address": self._string(obj, "address", f"{path}.address", default=None),
            "pda": self._pda(obj["pda"], f"{path}.pda") if obj.get("pda") is not None else None,
            "docs": self._docs(obj, path),
        }
        if model is AccountDefinition and obj.get("discriminator") is not None:
            fields["discriminator"] = self._discriminator(obj["discriminator"], f"{path}.discriminator")
        return model(**fields)

    def _pda(self, raw: Any, path: str) -> PdaRule:
        obj = self._object(raw, path)
        seeds_raw = self._list(obj, "seeds", f"{path}.seeds")
        if not seeds_raw:
            raise self._error_at(SchemaErrorKind.EMPTY_SEEDS, "PDA must declare at least one seed", f"{path}.seeds")

        seeds = [self._seed(seed, f"{path}.seeds[{i}]") for i, seed in enumerate(seeds_raw)]
        program = self._seed(obj["program"], f"{path}.program") if obj.get("program") is not None else None
        return PdaRule(seeds=seeds, program=program)

    def _seed(self, raw: Any, path: str) -> PdaSeed:
        obj = self._object(raw, path)
        kind_raw = obj.get("kind")
        try:
            kind = SeedKind(kind_raw)
        except ValueError:
            known = ", ".join(k.value for k in SeedKind)
            raise self._error_at(
                SchemaErrorKind.UNKNOWN_SEED_KIND,
                f"unknown seed kind {kind_raw!r} (expected one of: {known})",
                f"{path}.kind",
            ) from None

        if kind == SeedKind.CONST:
            value = obj.get("value")
            if isinstance(value, str):
                # Pre-0.30 IDLs write string constants as text
                return PdaSeed(kind=kind, value=value.encode("utf-8"))
            return PdaSeed(kind=kind, value=self._bytes(value, f"{path}.value", SchemaErrorKind.INVALID_DOCUMENT))

        if kind == SeedKind.STRING:
            text = self._string(obj, "value", f"{path}.value", default=None)
            if text is None:
                raise self._error_at(SchemaErrorKind.MISSING_FIELD, "string seed requires a value", f"{path}.value")
            return PdaSeed(kind=kind, text=text)

        seed_path = self._string(obj, "path", f"{path}.path", default=None)
        if not seed_path:
            raise self._error_at(SchemaErrorKind.MISSING_FIELD, f"{kind.value} seed requires a path", f"{path}.path")
        account = self._string(obj, "account", f"{path}.account", default=None) if kind == SeedKind.ACCOUNT else None
        return PdaSeed(kind=kind, path=seed_path, account=account)

    def _arg(self, raw: Any, path: str) -> Arg:
        obj = self._object(raw, path)
        name = self._name(obj, path)
        if "type" not in obj:
            raise self._error_at(SchemaErrorKind.MISSING_FIELD, "argument has no type", f"{path}.type")
        return Arg(name=name, type=self._type(obj["type"], f"{path}.type"))

    # ------------------------------------------------------------------
    # Errors and types
    # ------------------------------------------------------------------

    def _error(self, raw: Any, path: str) -> ErrorDefinition:
        obj = self._object(raw, path)
        code = obj.get("code")
        if isinstance(code, bool) or not isinstance(code, int):
            raise self._error_at(SchemaErrorKind.MISSING_FIELD, "error code must be an integer", f"{path}.code")
        return ErrorDefinition(
            code=code,
            name=self._name(obj, path),
            msg=self._string(obj, "msg", f"{path}.msg", default=""),
        )

    def _type_definition(self, raw: Any, path: str) -> TypeDefinition:
        obj = self._object(raw, path)
        name = self._name(obj, path)
        if "type" not in obj:
            raise self._error_at(SchemaErrorKind.MISSING_FIELD, "type definition has no type", f"{path}.type")
        return TypeDefinition(
            name=name,
            type=self._type(obj["type"], f"{path}.type"),
            docs=self._docs(obj, path),
        )

    def _type(self, raw: Any, path: str) -> TypeExpression:
        """Dispatch a raw type expression to its IR variant."""
        if isinstance(raw, str):
            name = LEGACY_PRIMITIVE_ALIASES.get(raw, raw)
            try:
                return PrimitiveType(name=PrimitiveName(name))
            except ValueError:
                raise self._error_at(
                    SchemaErrorKind.UNKNOWN_TYPE_SHAPE, f"unknown primitive type {raw!r}", path
                ) from None

        if not isinstance(raw, Mapping):
            raise self._error_at(
                SchemaErrorKind.UNKNOWN_TYPE_SHAPE, f"expected a type name or object, got {_describe(raw)}", path
            )

        if "kind" in raw:
            return self._kind_type(raw, path)

        keys = [k for k in raw if k in _CONTAINER_KEYS]
        if len(raw) != 1 or not keys:
            raise self._error_at(
                SchemaErrorKind.UNKNOWN_TYPE_SHAPE,
                f"unrecognized type shape with keys {sorted(raw)}",
                path,
            )

        key = keys[0]
        value = raw[key]
        if key == "vec":
            return VecType(element=self._type(value, f"{path}.vec"))
        if key == "option":
            return OptionType(element=self._type(value, f"{path}.option"))
        if key == "coption":
            return COptionType(element=self._type(value, f"{path}.coption"))
        if key == "array":
            return self._array(value, f"{path}.array")
        return self._defined(value, f"{path}.defined")

    def _array(self, raw: Any, path: str) -> ArrayType:
        if not isinstance(raw, list) or len(raw) != 2:
            raise self._error_at(SchemaErrorKind.UNKNOWN_TYPE_SHAPE, "array must be [element, length]", path)
        element, length = raw
        if isinstance(length, bool) or not isinstance(length, int) or length < 0:
            raise self._error_at(
                SchemaErrorKind.UNKNOWN_TYPE_SHAPE,
                f"array length must be a non-negative integer, got {_describe(length)}",
                f"{path}[1]",
            )
        return ArrayType(element=self._type(element, f"{path}[0]"), length=length)

    def _defined(self, raw: Any, path: str) -> DefinedType:
        if isinstance(raw, str) and raw:
            return DefinedType(name=raw)
        if not isinstance(raw, Mapping):
            raise self._error_at(SchemaErrorKind.UNKNOWN_TYPE_SHAPE, "defined type must name a type", path)

        name = self._name(raw, path)
        generics: list[TypeExpression] = []
        for i, generic in enumerate(self._list(raw, "generics", f"{path}.generics")):
            gpath = f"{path}.generics[{i}]"
            gobj = self._object(generic, gpath)
            if gobj.get("kind") != "type" or "type" not in gobj:
                raise self._error_at(
                    SchemaErrorKind.UNKNOWN_TYPE_SHAPE, "only type generic arguments are supported", gpath
                )
            generics.append(self._type(gobj["type"], f"{gpath}.type"))
        return DefinedType(name=name, generics=generics)

    def _kind_type(self, raw: Mapping[str, Any], path: str) -> TypeExpression:
        kind = raw["kind"]
        if kind == "struct":
            return StructType(fields=self._named_fields(raw, path))
        if kind == "enum":
            variants = [
                self._variant(v, f"{path}.variants[{i}]")
                for i, v in enumerate(self._list(raw, "variants", f"{path}.variants"))
            ]
            return EnumType(variants=variants)
        if kind == "type":
            if "alias" not in raw:
                raise self._error_at(SchemaErrorKind.MISSING_FIELD, "type alias has no target", f"{path}.alias")
            return self._type(raw["alias"], f"{path}.alias")
        raise self._error_at(SchemaErrorKind.UNKNOWN_TYPE_SHAPE, f"unknown type kind {kind!r}", f"{path}.kind")

    def _named_fields(self, raw: Mapping[str, Any], path: str) -> list[FieldDef]:
        fields: list[FieldDef] = []
        for i, item in enumerate(self._list(raw, "fields", f"{path}.fields")):
            fpath = f"{path}.fields[{i}]"
            if not isinstance(item, Mapping):
                raise self._error_at(SchemaErrorKind.UNKNOWN_TYPE_SHAPE, "struct fields must be named", fpath)
            fields.append(self._field(item, fpath))
        return fields

    def _field(self, obj: Mapping[str, Any], path: str) -> FieldDef:
        name = self._name(obj, path)
        if "type" not in obj:
            raise self._error_at(SchemaErrorKind.MISSING_FIELD, "field has no type", f"{path}.type")
        return FieldDef(name=name, type=self._type(obj["type"], f"{path}.type"), docs=self._docs(obj, path))

    def _variant(self, raw: Any, path: str) -> EnumVariant:
        obj = self._object(raw, path)
        name = self._name(obj, path)
        items = self._list(obj, "fields", f"{path}.fields")
        if not items:
            return EnumVariant(name=name)

        named = [isinstance(item, Mapping) and "name" in item for item in items]
        if all(named):
            return EnumVariant(
                name=name,
                fields=[self._field(item, f"{path}.fields[{i}]") for i, item in enumerate(items)],
            )
        if not any(named):
            return EnumVariant(
                name=name,
                items=[self._type(item, f"{path}.fields[{i}]") for i, item in enumerate(items)],
            )
        raise self._error_at(
            SchemaErrorKind.UNKNOWN_TYPE_SHAPE, "variant mixes named and positional fields", f"{path}.fields"
        )

    # ------------------------------------------------------------------
    # Whole-schema checks
    # ------------------------------------------------------------------

    def _check_duplicates(self, schema: Schema) -> None:
        """Report duplicate identities; errors in strict mode, warnings otherwise."""
        self._report_duplicates(
            "instruction name", [(f"instructions[{i}].name", ix.name) for i, ix in enumerate(schema.instructions)]
        )
        self._report_duplicates(
            "discriminator",
            [(f"instructions[{i}].discriminator", ix.discriminator) for i, ix in enumerate(schema.instructions)],
        )
        self._report_duplicates("error code", [(f"errors[{i}].code", e.code) for i, e in enumerate(schema.errors)])
        self._report_duplicates("type name", [(f"types[{i}].name", t.name) for i, t in enumerate(schema.types)])

    def _report_duplicates(self, label: str, entries: list[tuple[str, Any]]) -> None:
        first_seen: dict[Any, str] = {}
        for path, value in entries:
            if value not in first_seen:
                first_seen[value] = path
                continue
            shown = list(value) if isinstance(value, bytes) else value
            message = f"duplicate {label} {shown!r} (first declared at {first_seen[value]})"
            if self.strict:
                raise self._error_at(SchemaErrorKind.DUPLICATE, message, path)
            logger.warning(f"{path}: {message}")

    def _check_references(self, schema: Schema) -> None:
        """Warn about DefinedType names that no type or account declares."""
        known = {t.name for t in schema.types} | {a.name for a in schema.accounts}
        expressions: list[tuple[str, TypeExpression]] = []
        for i, ix in enumerate(schema.instructions):
            expressions.extend((f"instructions[{i}].args[{j}]", arg.type) for j, arg in enumerate(ix.args))
        expressions.extend((f"types[{i}]", t.type) for i, t in enumerate(schema.types))

        for path, expr in expressions:
            for name in iter_defined_names(expr):
                if name not in known:
                    logger.warning(f"{path}: reference to undeclared type '{name}'")

    # ------------------------------------------------------------------
    # Primitive readers
    # ------------------------------------------------------------------

    def _error_at(self, kind: SchemaErrorKind, message: str, path: str) -> SchemaError:
        return make_schema_error(kind, message, path=path, file=self.source)

    def _object(self, raw: Any, path: str) -> Mapping[str, Any]:
        if not isinstance(raw, Mapping):
            raise self._error_at(
                SchemaErrorKind.INVALID_DOCUMENT, f"expected an object, got {_describe(raw)}", path or "<root>"
            )
        return raw

    def _list(self, obj: Mapping[str, Any], key: str, path: str) -> list[Any]:
        value = obj.get(key)
        if value is None:
            return []
        if not isinstance(value, list):
            raise self._error_at(SchemaErrorKind.INVALID_DOCUMENT, f"expected a list, got {_describe(value)}", path)
        return value

    def _string(self, obj: Mapping[str, Any], key: str, path: str, default: str | None) -> str | None:
        value = obj.get(key)
        if value is None:
            return default
        if not isinstance(value, str):
            raise self._error_at(SchemaErrorKind.INVALID_DOCUMENT, f"expected a string, got {_describe(value)}", path)
        return value

    def _name(self, obj: Mapping[str, Any], path: str) -> str:
        name = obj.get("name")
        if not isinstance(name, str) or not name:
            raise self._error_at(SchemaErrorKind.MISSING_FIELD, "missing required name", f"{path}.name")
        return name

    def _flag(self, obj: Mapping[str, Any], keys: tuple[str, ...], path: str) -> bool:
        for key in keys:
            value = obj.get(key)
            if value is not None:
                if not isinstance(value, bool):
                    raise self._error_at(
                        SchemaErrorKind.INVALID_DOCUMENT, f"expected a boolean, got {_describe(value)}", f"{path}.{key}"
                    )
                return value
        return False

    def _docs(self, obj: Mapping[str, Any], path: str) -> list[str]:
        docs = self._list(obj, "docs", f"{path}.docs")
        for i, line in enumerate(docs):
            if not isinstance(line, str):
                raise self._error_at(SchemaErrorKind.INVALID_DOCUMENT, "doc lines must be strings", f"{path}.docs[{i}]")
        return list(docs)

    def _discriminator(self, raw: Any, path: str) -> bytes:
        if raw is None:
            raise self._error_at(SchemaErrorKind.MALFORMED_DISCRIMINATOR, "missing discriminator", path)
        value = self._bytes(raw, path, SchemaErrorKind.MALFORMED_DISCRIMINATOR)
        if len(value) != DISCRIMINATOR_SIZE:
            raise self._error_at(
                SchemaErrorKind.MALFORMED_DISCRIMINATOR,
                f"discriminator must be {DISCRIMINATOR_SIZE} bytes, got {len(value)}",
                path,
            )
        return value

    def _bytes(self, raw: Any, path: str, kind: SchemaErrorKind) -> bytes:
        if not isinstance(raw, list):
            raise self._error_at(kind, f"expected a list of byte values, got {_describe(raw)}", path)
        for i, b in enumerate(raw):
            if isinstance(b, bool) or not isinstance(b, int) or not 0 <= b <= 255:
                raise self._error_at(kind, f"invalid byte value {b!r}", f"{path}[{i}]")
        return bytes(raw)


def _describe(value: Any) -> str:
    """Short JSON type name for error messages."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int | float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "list"
    if isinstance(value, Mapping):
        return "object"
    return type(value).__name__
