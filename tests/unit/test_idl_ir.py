"""Tests for the IR type expression and account models."""

import pytest
from pydantic import ValidationError

from idlforge.core import ir


class TestTypeExpressions:
    """Structural equality and rendering of type expressions."""

    def test_structural_equality(self):
        a = ir.VecType(element=ir.OptionType(element=ir.DefinedType(name="Config")))
        b = ir.VecType(element=ir.OptionType(element=ir.DefinedType(name="Config")))
        assert a == b

    def test_array_length_is_significant(self):
        assert ir.ArrayType(element=ir.PrimitiveType(name="u8"), length=20) != ir.ArrayType(
            element=ir.PrimitiveType(name="u8"), length=32
        )

    def test_struct_field_order_is_significant(self):
        a = ir.FieldDef(name="a", type=ir.PrimitiveType(name="u8"))
        b = ir.FieldDef(name="b", type=ir.PrimitiveType(name="u8"))
        assert ir.StructType(fields=[a, b]) != ir.StructType(fields=[b, a])

    def test_variants_differ_even_with_same_payload(self):
        element = ir.PrimitiveType(name="u8")
        assert ir.OptionType(element=element) != ir.COptionType(element=element)

    def test_models_are_frozen(self):
        expr = ir.PrimitiveType(name="u64")
        with pytest.raises(ValidationError):
            expr.name = ir.PrimitiveName.U8

    def test_negative_array_length_rejected(self):
        with pytest.raises(ValidationError):
            ir.ArrayType(element=ir.PrimitiveType(name="u8"), length=-1)

    def test_rendering(self):
        expr = ir.DefinedType(name="Wrapper", generics=[ir.ArrayType(element=ir.PrimitiveType(name="u8"), length=4)])
        assert str(expr) == "Wrapper<[u8; 4]>"
        enum = ir.EnumType(
            variants=[
                ir.EnumVariant(name="Idle"),
                ir.EnumVariant(name="Say", items=[ir.PrimitiveType(name="string")]),
            ]
        )
        assert str(enum) == "enum { Idle, Say(string) }"

    def test_iter_defined_names(self):
        expr = ir.StructType(
            fields=[
                ir.FieldDef(name="a", type=ir.DefinedType(name="A")),
                ir.FieldDef(name="b", type=ir.VecType(element=ir.DefinedType(name="B"))),
                ir.FieldDef(name="c", type=ir.OptionType(element=ir.DefinedType(name="A"))),
            ]
        )
        assert ir.iter_defined_names(expr) == ["A", "B"]


class TestSeeds:
    """PDA seed payloads and encoding."""

    def test_const_seed_requires_value(self):
        with pytest.raises(ValidationError):
            ir.PdaSeed(kind=ir.SeedKind.CONST)

    def test_reference_seed_requires_path(self):
        with pytest.raises(ValidationError):
            ir.PdaSeed(kind=ir.SeedKind.ACCOUNT)

    def test_encode(self):
        assert ir.PdaSeed(kind="const", value=b"meta").encode() == b"meta"
        assert ir.PdaSeed(kind="string", text="vault").encode() == b"vault"
        assert ir.PdaSeed(kind="arg", path="nonce").encode() is None

    def test_is_reference(self):
        assert ir.PdaSeed(kind="account", path="mint").is_reference
        assert ir.PdaSeed(kind="arg", path="nonce").is_reference
        assert not ir.PdaSeed(kind="const", value=b"meta").is_reference
        assert not ir.PdaSeed(kind="string", text="vault").is_reference

    def test_constant_prefix_stops_at_first_reference(self):
        rule = ir.PdaRule(
            seeds=[
                ir.PdaSeed(kind="const", value=b"white"),
                ir.PdaSeed(kind="string", text="list"),
                ir.PdaSeed(kind="account", path="mint"),
                ir.PdaSeed(kind="const", value=b"tail"),
            ]
        )
        assert rule.constant_prefix == b"whitelist"

    def test_rule_requires_a_seed(self):
        with pytest.raises(ValidationError):
            ir.PdaRule(seeds=[])


class TestAccounts:
    """Account slots and definitions."""

    def test_flags_default_false(self):
        acc = ir.AccountRef(name="config")
        assert (acc.writable, acc.signer, acc.optional) == (False, False, False)
        assert acc.flags == "--"

    def test_flags_summary(self):
        assert ir.AccountRef(name="payer", writable=True, signer=True).flags == "ws"

    def test_account_definition_discriminator_length(self):
        with pytest.raises(ValidationError):
            ir.AccountDefinition(name="Pda", discriminator=b"\x00\x01")

    def test_instruction_discriminator_length(self):
        with pytest.raises(ValidationError):
            ir.Instruction(name="ping", discriminator=bytes(9))
