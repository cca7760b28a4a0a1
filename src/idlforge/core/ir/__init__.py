"""
idlforge Intermediate Representation (IR) types.

This package contains the typed model of an Anchor IDL document.
Types are organized into submodules; all of them are re-exported here
so generated bindings need a single import.
"""

# Accounts and PDAs
from .accounts import (
    DISCRIMINATOR_SIZE,
    AccountDefinition,
    AccountRef,
    Discriminator,
    PdaRule,
    PdaSeed,
    SeedKind,
)

# Schema
from .schema import (
    Arg,
    ErrorDefinition,
    Instruction,
    Metadata,
    Schema,
    TypeDefinition,
)

# Type expressions
from .types import (
    LEGACY_PRIMITIVE_ALIASES,
    ArrayType,
    COptionType,
    DefinedType,
    EnumType,
    EnumVariant,
    FieldDef,
    OptionType,
    PrimitiveName,
    PrimitiveType,
    StructType,
    TypeExpression,
    VecType,
    iter_defined_names,
)

__all__ = [
    # Accounts
    "DISCRIMINATOR_SIZE",
    "AccountDefinition",
    "AccountRef",
    "Discriminator",
    "PdaRule",
    "PdaSeed",
    "SeedKind",
    # Schema
    "Arg",
    "ErrorDefinition",
    "Instruction",
    "Metadata",
    "Schema",
    "TypeDefinition",
    # Types
    "LEGACY_PRIMITIVE_ALIASES",
    "ArrayType",
    "COptionType",
    "DefinedType",
    "EnumType",
    "EnumVariant",
    "FieldDef",
    "OptionType",
    "PrimitiveName",
    "PrimitiveType",
    "StructType",
    "TypeExpression",
    "VecType",
    "iter_defined_names",
]
