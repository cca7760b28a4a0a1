"""
Type expressions for the idlforge IR.

A type expression describes the wire type of an instruction argument, a
struct field, or a custom type definition. It is a closed, recursive sum
type selected by the ``kind`` tag:

- Primitive: u64, bool, pubkey, string, ...
- Containers: [T; N], Vec<T>, Option<T>, COption<T>
- Named references: Defined("Config") (by name only, never inlined)
- Inline shapes: struct { ... } and enum { ... }
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


class PrimitiveName(StrEnum):
    """Primitive scalar types understood by Anchor's borsh encoding."""

    BOOL = "bool"
    U8 = "u8"
    I8 = "i8"
    U16 = "u16"
    I16 = "i16"
    U32 = "u32"
    I32 = "i32"
    F32 = "f32"
    U64 = "u64"
    I64 = "i64"
    F64 = "f64"
    U128 = "u128"
    I128 = "i128"
    U256 = "u256"
    I256 = "i256"
    BYTES = "bytes"
    STRING = "string"
    PUBKEY = "pubkey"


# Spellings used by IDLs emitted before Anchor 0.30
LEGACY_PRIMITIVE_ALIASES: dict[str, PrimitiveName] = {
    "publicKey": PrimitiveName.PUBKEY,
}


class PrimitiveType(BaseModel):
    """A primitive scalar, e.g. ``u64``."""

    kind: Literal["primitive"] = "primitive"
    name: PrimitiveName

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return self.name.value


class ArrayType(BaseModel):
    """A fixed-size array, e.g. ``[u8; 32]``."""

    kind: Literal["array"] = "array"
    element: TypeExpression
    length: int = Field(ge=0)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"[{self.element}; {self.length}]"


class VecType(BaseModel):
    """A length-prefixed vector, e.g. ``Vec<u8>``."""

    kind: Literal["vec"] = "vec"
    element: TypeExpression

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"Vec<{self.element}>"


class OptionType(BaseModel):
    """An optional value, e.g. ``Option<pubkey>``."""

    kind: Literal["option"] = "option"
    element: TypeExpression

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"Option<{self.element}>"


class COptionType(BaseModel):
    """A C-compatible optional value with a 4-byte tag."""

    kind: Literal["coption"] = "coption"
    element: TypeExpression

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"COption<{self.element}>"


class DefinedType(BaseModel):
    """
    A reference to a custom type declared in the schema's ``types`` list.

    The reference is resolved by consumers, never by the model itself.

    Attributes:
        name: Name of the referenced TypeDefinition
        generics: Generic arguments, in declared order
    """

    kind: Literal["defined"] = "defined"
    name: str
    generics: list[TypeExpression] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        if self.generics:
            args = ", ".join(str(g) for g in self.generics)
            return f"{self.name}<{args}>"
        return self.name


class FieldDef(BaseModel):
    """A named field of a struct or of a struct-like enum variant."""

    name: str
    type: TypeExpression
    docs: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.name}: {self.type}"


class StructType(BaseModel):
    """An inline struct with ordered, named fields."""

    kind: Literal["struct"] = "struct"
    fields: list[FieldDef] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return "struct { " + ", ".join(str(f) for f in self.fields) + " }"


class EnumVariant(BaseModel):
    """
    One variant of an enum.

    Attributes:
        name: Variant name
        fields: Named fields for struct-like variants
        items: Positional types for tuple-like variants
    """

    name: str
    fields: list[FieldDef] = Field(default_factory=list)
    items: list[TypeExpression] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        if self.fields:
            return f"{self.name} {{ " + ", ".join(str(f) for f in self.fields) + " }"
        if self.items:
            return f"{self.name}(" + ", ".join(str(i) for i in self.items) + ")"
        return self.name


class EnumType(BaseModel):
    """An inline enum with ordered variants."""

    kind: Literal["enum"] = "enum"
    variants: list[EnumVariant] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def variant_names(self) -> list[str]:
        """Variant names in declared order."""
        return [v.name for v in self.variants]

    def __str__(self) -> str:
        return "enum { " + ", ".join(str(v) for v in self.variants) + " }"


TypeExpression = Annotated[
    PrimitiveType
    | ArrayType
    | VecType
    | OptionType
    | COptionType
    | DefinedType
    | StructType
    | EnumType,
    Field(discriminator="kind"),
]

# Rebuild models for recursive forward references
ArrayType.model_rebuild()
VecType.model_rebuild()
OptionType.model_rebuild()
COptionType.model_rebuild()
DefinedType.model_rebuild()
FieldDef.model_rebuild()
StructType.model_rebuild()
EnumVariant.model_rebuild()
EnumType.model_rebuild()


def iter_defined_names(expr: TypeExpression) -> list[str]:
    """
    Collect the names of every DefinedType reachable from an expression.

    Names are returned in first-seen, depth-first order without duplicates.
    """
    seen: list[str] = []

    def _walk(node: TypeExpression) -> None:
        if isinstance(node, DefinedType):
            if node.name not in seen:
                seen.append(node.name)
            for generic in node.generics:
                _walk(generic)
        elif isinstance(node, ArrayType | VecType | OptionType | COptionType):
            _walk(node.element)
        elif isinstance(node, StructType):
            for field in node.fields:
                _walk(field.type)
        elif isinstance(node, EnumType):
            for variant in node.variants:
                for field in variant.fields:
                    _walk(field.type)
                for item in variant.items:
                    _walk(item)

    _walk(expr)
    return seen
