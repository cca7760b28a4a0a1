"""
Schema root for the idlforge IR.

A Schema is the typed form of one Anchor IDL document: the program
address, metadata, and the ordered instruction, account, error and type
lists. It is immutable once loaded.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .accounts import AccountDefinition, AccountRef, Discriminator
from .types import TypeExpression


class Metadata(BaseModel):
    """Program metadata block."""

    name: str = ""
    version: str = ""
    spec: str = ""
    description: str = ""

    model_config = ConfigDict(frozen=True)


class Arg(BaseModel):
    """A typed instruction argument."""

    name: str
    type: TypeExpression

    model_config = ConfigDict(frozen=True)


class Instruction(BaseModel):
    """
    A callable program instruction.

    Attributes:
        name: Instruction name, unique within the schema
        discriminator: 8-byte tag placed at the start of the instruction data;
            supplied by the IDL, never derived here
        accounts: Account slots in declared order
        args: Arguments in declared (serialization) order
        docs: Documentation lines
    """

    name: str
    discriminator: Discriminator
    accounts: list[AccountRef] = Field(default_factory=list)
    args: list[Arg] = Field(default_factory=list)
    docs: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def account(self, name: str) -> AccountRef | None:
        """Find an account slot by name."""
        for acc in self.accounts:
            if acc.name == name:
                return acc
        return None


class ErrorDefinition(BaseModel):
    """A program error code."""

    code: int
    name: str
    msg: str = ""

    model_config = ConfigDict(frozen=True)


class TypeDefinition(BaseModel):
    """A named custom type, referenced elsewhere through DefinedType."""

    name: str
    type: TypeExpression
    docs: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class Schema(BaseModel):
    """
    Root aggregate of a loaded IDL.

    Attributes:
        address: Program address (base58)
        metadata: Program metadata
        instructions: Instructions in declared order
        accounts: Account layouts in declared order
        errors: Error codes in declared order
        types: Custom types in declared order
    """

    address: str = ""
    metadata: Metadata = Field(default_factory=Metadata)
    instructions: list[Instruction] = Field(default_factory=list)
    accounts: list[AccountDefinition] = Field(default_factory=list)
    errors: list[ErrorDefinition] = Field(default_factory=list)
    types: list[TypeDefinition] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def name(self) -> str:
        """Program name from metadata."""
        return self.metadata.name

    def instruction(self, name: str) -> Instruction | None:
        """Find the first instruction with the given name, in declared order."""
        for instr in self.instructions:
            if instr.name == name:
                return instr
        return None

    def type_definition(self, name: str) -> TypeDefinition | None:
        """Find a custom type by name."""
        for typ in self.types:
            if typ.name == name:
                return typ
        return None

    def error_by_code(self, code: int) -> ErrorDefinition | None:
        """Find an error definition by numeric code."""
        for err in self.errors:
            if err.code == code:
                return err
        return None

    def get_discriminator(self, name: str) -> bytes:
        """
        Return the discriminator for an instruction name.

        Returns eight zero bytes when no instruction matches.
        """
        from ..lookup import get_discriminator

        return get_discriminator(self, name)
