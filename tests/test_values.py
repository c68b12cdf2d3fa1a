"""Tests for custom values and value templates."""

import logging

import pytest

from ogmo_schema.codec.fields import FieldReader
from ogmo_schema.errors import (
    MissingFieldError,
    NumericRangeError,
    TypeMismatchError,
    UnknownVariantError,
    UnpackMismatchError,
)
from ogmo_schema.values import (
    ArrayEnumValue,
    ArrayStringValue,
    BooleanValue,
    ColorTemplate,
    ColorValue,
    EnumTemplate,
    EnumValue,
    FloatValue,
    IntegerValue,
    StringValue,
    TextValue,
    Value,
    ValueKind,
    ValueTemplate,
    parse_color,
)


class TestUntypedValues:
    """Values decoded from their JSON shape alone."""

    def test_scalars(self) -> None:
        """Test each JSON scalar maps to its variant."""
        assert Value.from_raw(True) == BooleanValue(True)
        assert Value.from_raw(5) == IntegerValue(5)
        assert Value.from_raw("hello") == StringValue("hello")

        value = Value.from_raw(5.0)
        assert isinstance(value, FloatValue)
        assert isinstance(value.value, float)

    def test_string_list(self) -> None:
        """Test a list of strings becomes an ArrayString value."""
        assert Value.from_raw(["a", "b"]) == ArrayStringValue(("a", "b"))

    @pytest.mark.parametrize("raw", [None, {}, [1, 2], {"x": 1}])
    def test_unmatched_shapes(self, raw: object) -> None:
        """Test shapes no variant accepts are rejected."""
        with pytest.raises(UnknownVariantError):
            Value.from_raw(raw, "$.values.odd")

    def test_integer_uses_full_json_range(self) -> None:
        """Test integers without a template may use the whole 64-bit range."""
        assert Value.from_raw(2**31) == IntegerValue(2**31)
        assert Value.from_raw(-(2**63)) == IntegerValue(-(2**63))
        assert Value.from_raw(2**64 - 1).to_json() == 2**64 - 1

    def test_integer_out_of_range(self) -> None:
        """Test integers beyond 64 bits are rejected."""
        with pytest.raises(NumericRangeError) as exc_info:
            Value.from_raw(2**64, "$.values.big")
        assert exc_info.value.path == "$.values.big"

        with pytest.raises(NumericRangeError):
            IntegerValue(-(2**63) - 1).to_json("$.values.small")


class TestTypedValues:
    """Values decoded with a declared type."""

    def test_color_forms(self) -> None:
        """Test short and long hex colors parse to RGBA."""
        assert ColorValue("#fff").rgba == (255, 255, 255, 255)
        assert ColorValue("#336699").rgba == (0x33, 0x66, 0x99, 255)
        assert Value.from_typed("Color", "#11223344").unpack_as(ValueKind.COLOR) == "#11223344"
        assert parse_color("#11223344") == (0x11, 0x22, 0x33, 0x44)

    @pytest.mark.parametrize("text", ["red", "#12345", "336699", "#gggggg"])
    def test_invalid_color(self, text: str) -> None:
        """Test non-hex colors are rejected with the field path."""
        with pytest.raises(TypeMismatchError) as exc_info:
            Value.from_typed(ValueKind.COLOR, text, "$.values.tint")
        assert exc_info.value.path == "$.values.tint"

    def test_color_value_validates_on_construction(self) -> None:
        """Test ColorValue refuses text that is not a color."""
        with pytest.raises(TypeMismatchError):
            ColorValue("blue")

    def test_float_keeps_integers(self) -> None:
        """Test a JSON integer stays an int inside a Float value."""
        value = Value.from_typed("Float", 5)
        assert isinstance(value, FloatValue)
        assert value.value == 5
        assert isinstance(value.value, int)

    def test_integer_rejects_float(self) -> None:
        """Test an Integer field refuses a float, even a whole one."""
        with pytest.raises(TypeMismatchError) as exc_info:
            Value.from_typed("Integer", 5.0, "$.values.count")
        assert exc_info.value.expected == "integer"
        assert exc_info.value.actual == "number"

    def test_typed_integer_is_32_bit(self) -> None:
        """Test an Integer template keeps the editor's 32-bit limit."""
        with pytest.raises(NumericRangeError) as exc_info:
            Value.from_typed(ValueKind.INTEGER, 2**31, "$.values.count")
        assert exc_info.value.path == "$.values.count"

    def test_string_kinds(self) -> None:
        """Test Enum and Text share the string shape but keep their kind."""
        assert Value.from_typed("Enum", "rain") == EnumValue("rain")
        assert Value.from_typed("Text", "a\nb") == TextValue("a\nb")
        assert Value.from_typed("ArrayEnum", ["x", "y"]) == ArrayEnumValue(("x", "y"))

    def test_unknown_kind(self) -> None:
        """Test an unknown type name is reported as an unknown variant."""
        with pytest.raises(UnknownVariantError):
            Value.from_typed("Vector", 1)

    def test_array_values_encode_as_lists(self) -> None:
        assert ArrayStringValue(("a",)).to_json() == ["a"]


class TestValueUnpack:
    """Test Value.unpack_as."""

    def test_matching_kind(self) -> None:
        assert IntegerValue(3).unpack_as(ValueKind.INTEGER) == 3

    def test_mismatching_kind(self) -> None:
        """Test asking for the wrong kind names both kinds."""
        with pytest.raises(UnpackMismatchError) as exc_info:
            IntegerValue(3).unpack_as(ValueKind.STRING)
        assert exc_info.value.expected is ValueKind.STRING
        assert exc_info.value.actual is ValueKind.INTEGER
        assert str(exc_info.value) == "expected String, found Integer"


class TestValueTemplates:
    """Test value templates from project files."""

    def test_enum_default_resolves_choice(self) -> None:
        """Test the Enum default index selects a choice."""
        template = ValueTemplate.from_dict(FieldReader({
            "name": "weather",
            "definition": "Enum",
            "choices": ["clear", "rain"],
            "defaults": 1,
        }))
        assert isinstance(template, EnumTemplate)
        assert template.kind is ValueKind.ENUM
        assert template.default_value() == EnumValue("rain")

    def test_enum_default_out_of_range(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test a default index without a matching choice falls back to empty and warns."""
        template = EnumTemplate(name="weather", choices=["clear"], defaults=3)
        with caplog.at_level(logging.WARNING, logger="ogmo_schema"):
            assert template.default_value() == EnumValue("")
        messages = [record.getMessage() for record in caplog.records]
        assert any("weather" in message and "3" in message for message in messages)

    def test_color_template(self) -> None:
        template = ValueTemplate.from_dict(FieldReader({
            "name": "tint",
            "definition": "Color",
            "display": 1,
            "defaults": "#ff000080",
            "includeAlpha": True,
        }))
        assert isinstance(template, ColorTemplate)
        assert template.display == 1
        assert template.default_value().rgba == (255, 0, 0, 128)  # type: ignore[attr-defined]

    def test_missing_definition(self) -> None:
        """Test a template without definition names the missing key."""
        with pytest.raises(MissingFieldError) as exc_info:
            ValueTemplate.from_dict(FieldReader({"name": "x"}, "$.levelValues[0]"))
        assert exc_info.value.path == "$.levelValues[0].definition"

    def test_unknown_definition(self) -> None:
        with pytest.raises(UnknownVariantError) as exc_info:
            ValueTemplate.from_dict(FieldReader({"name": "x", "definition": "Vector"}))
        assert exc_info.value.path == "$.definition"

    def test_unknown_keys_round_trip(self) -> None:
        """Test keys the template does not model are kept and written last."""
        source = {"name": "flag", "definition": "Boolean", "defaults": True, "tooltip": "Hi"}
        template = ValueTemplate.from_dict(FieldReader(source))
        assert template.extras == {"tooltip": "Hi"}

        encoded = template.to_dict()
        assert encoded == source
        assert list(encoded)[-1] == "tooltip"


class TestVariantBases:
    """Test the value and template bases cannot be used unfinished."""

    def test_value_base_is_abstract(self) -> None:
        with pytest.raises(TypeError):
            Value()  # type: ignore[abstract]

    def test_value_variant_needs_decode(self) -> None:
        """Test a variant without its own decode cannot be created."""

        class Unfinished(Value):
            pass

        with pytest.raises(TypeError):
            Unfinished()  # type: ignore[abstract]

    def test_template_variant_needs_every_hook(self) -> None:
        """Test a template missing default_value cannot be created."""

        class Unfinished(ValueTemplate):
            kind = ValueKind.STRING

            @classmethod
            def _decode(cls, reader, name, display):  # type: ignore[no-untyped-def]
                return cls(name=name, display=display)

            def _encode(self, writer) -> None:  # type: ignore[no-untyped-def]
                pass

        with pytest.raises(TypeError):
            Unfinished(name="x")  # type: ignore[abstract]
