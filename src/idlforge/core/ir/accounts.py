"""
Account types for the idlforge IR.

Covers the account slots an instruction touches, the program-derived
address (PDA) rules attached to them, and the account layouts a program
stores on chain.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, model_validator

DISCRIMINATOR_SIZE = 8

Discriminator = Annotated[bytes, Field(min_length=DISCRIMINATOR_SIZE, max_length=DISCRIMINATOR_SIZE)]


class SeedKind(StrEnum):
    """Kinds of PDA seeds."""

    CONST = "const"  # Constant bytes
    ACCOUNT = "account"  # Key of another account in the instruction
    ARG = "arg"  # Value of an instruction argument
    STRING = "string"  # Literal UTF-8 string


class PdaSeed(BaseModel):
    """
    One input to PDA derivation.

    Attributes:
        kind: Seed category
        value: Raw bytes for ``const`` seeds
        path: Account or argument path for ``account``/``arg`` seeds
            (may be dotted, e.g. ``config.authority``)
        account: Account type owning ``path`` for ``account`` seeds
        text: Literal text for ``string`` seeds
    """

    kind: SeedKind
    value: bytes | None = None
    path: str | None = None
    account: str | None = None
    text: str | None = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def check_payload(self) -> PdaSeed:
        """Ensure the seed carries the payload its kind requires."""
        if self.kind == SeedKind.CONST and self.value is None:
            raise ValueError("const seed requires 'value'")
        if self.kind in (SeedKind.ACCOUNT, SeedKind.ARG) and not self.path:
            raise ValueError(f"{self.kind.value} seed requires 'path'")
        if self.kind == SeedKind.STRING and self.text is None:
            raise ValueError("string seed requires 'text'")
        return self

    @property
    def is_reference(self) -> bool:
        """Whether the seed's bytes depend on runtime accounts or arguments."""
        return self.kind in (SeedKind.ACCOUNT, SeedKind.ARG)

    def encode(self) -> bytes | None:
        """
        Return the bytes this seed contributes to derivation.

        Returns:
            The seed bytes for constant and literal seeds, or None for
            account and argument references, which are only known at call time.
        """
        if self.is_reference:
            return None
        if self.kind == SeedKind.CONST:
            return self.value
        return self.text.encode("utf-8") if self.text is not None else None

    def __str__(self) -> str:
        if self.kind == SeedKind.CONST:
            return f"const({list(self.value or b'')})"
        if self.kind == SeedKind.STRING:
            return f"string({self.text!r})"
        return f"{self.kind.value}({self.path})"


class PdaRule(BaseModel):
    """
    Ordered seed list for deriving a program address.

    Seeds are concatenated in declared order; reordering them changes the
    derived address.

    Attributes:
        seeds: Seeds in derivation order (at least one)
        program: Seed naming the deriving program when it is not the
            program that owns the IDL
    """

    seeds: list[PdaSeed] = Field(min_length=1)
    program: PdaSeed | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def constant_prefix(self) -> bytes:
        """Concatenated bytes of the leading seeds that are known statically."""
        prefix = b""
        for seed in self.seeds:
            if seed.is_reference:
                break
            prefix += seed.encode() or b""
        return prefix

    def __str__(self) -> str:
        return "[" + ", ".join(str(s) for s in self.seeds) + "]"


class AccountRef(BaseModel):
    """
    One account slot in an instruction's account list.

    Attributes:
        name: Slot name, unique within the instruction
        writable: Whether the instruction writes to the account
        signer: Whether the account must sign the transaction
        optional: Whether the caller may omit the account
        address: Well-known fixed address, if any
        pda: Derivation rule, if the account is a PDA
        docs: Documentation lines
    """

    name: str
    writable: bool = False
    signer: bool = False
    optional: bool = False
    address: str | None = None
    pda: PdaRule | None = None
    docs: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def flags(self) -> str:
        """Short flag summary such as ``ws`` (writable, signer)."""
        return ("w" if self.writable else "-") + ("s" if self.signer else "-")


class AccountDefinition(AccountRef):
    """
    A custom account layout the program stores on chain.

    Shares AccountRef's shape; ``discriminator`` is the 8-byte prefix of
    the account data when the IDL declares one.
    """

    discriminator: Discriminator | None = None
