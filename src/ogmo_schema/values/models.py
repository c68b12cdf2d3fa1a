"""
Custom field values attached to levels, entities and decals.

Level files store values as a plain ``{"name": raw}`` object without type
information, so a value can be decoded two ways:

- untyped (`Value.from_raw`): the JSON shape picks the variant;
- typed (`Value.from_typed`): a declared type name, usually taken from the
  project's value templates, picks the variant and the raw value must match.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Mapping, Optional

from PIL import ImageColor

from ..codec.fields import (
    FieldReader,
    check_json_int,
    check_number,
    expect_bool,
    expect_int,
    expect_number,
    expect_string,
    expect_string_list,
    json_type_name,
    key_path,
)
from ..errors import TypeMismatchError, UnknownVariantError, UnpackMismatchError


class ValueKind(Enum):
    """Value types supported by the editor's custom field system.

    Enum values are the type names used by ``definition`` in project files.
    """

    BOOLEAN = "Boolean"
    COLOR = "Color"
    ENUM = "Enum"
    INTEGER = "Integer"
    FLOAT = "Float"
    STRING = "String"
    TEXT = "Text"
    ARRAY_STRING = "ArrayString"
    ARRAY_ENUM = "ArrayEnum"

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def parse(cls, name: str, path: str = "$") -> "ValueKind":
        try:
            return cls(name)
        except ValueError:
            raise UnknownVariantError(path, f"unknown value type {name!r}") from None


_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")


def parse_color(text: str, path: str = "$") -> tuple[int, int, int, int]:
    """Parse ``#RGB``, ``#RGBA``, ``#RRGGBB`` or ``#RRGGBBAA`` into RGBA.

    Raises:
        TypeMismatchError: If the text is not a hex color
    """
    if not _HEX_COLOR.match(text):
        raise TypeMismatchError(path, "hex color", repr(text))
    rgb = ImageColor.getrgb(text)
    if len(rgb) == 3:
        return (rgb[0], rgb[1], rgb[2], 255)
    return (rgb[0], rgb[1], rgb[2], rgb[3])  # type: ignore[misc]


@dataclass(frozen=True)
class Value(ABC):
    """Base class of all value variants. Each variant holds one ``value``."""

    kind: ClassVar[ValueKind]

    @classmethod
    def from_raw(cls, raw: Any, path: str = "$") -> "Value":
        """Decode a value from its JSON shape alone.

        Raises:
            UnknownVariantError: If the shape matches no variant
        """
        if isinstance(raw, bool):
            return BooleanValue(raw)
        if isinstance(raw, int):
            return IntegerValue(check_json_int(raw, path))
        if isinstance(raw, float):
            return FloatValue(expect_number(raw, path))
        if isinstance(raw, str):
            return StringValue(raw)
        if isinstance(raw, list) and all(isinstance(item, str) for item in raw):
            return ArrayStringValue(tuple(raw))
        raise UnknownVariantError(
            path, f"no value type matches JSON {json_type_name(raw)}"
        )

    @classmethod
    def from_typed(cls, kind: "ValueKind | str", raw: Any, path: str = "$") -> "Value":
        """Decode a value whose type is declared elsewhere.

        Args:
            kind: ValueKind or its type name (e.g. ``"Color"``)
            raw: Raw JSON value
            path: Field path used in error messages

        Raises:
            UnknownVariantError: If the type name is unknown
            TypeMismatchError: If the raw value does not fit the type
        """
        if not isinstance(kind, ValueKind):
            kind = ValueKind.parse(kind, path)
        variant = _VARIANTS[kind]
        return variant.decode(raw, path)

    @classmethod
    @abstractmethod
    def decode(cls, raw: Any, path: str) -> "Value":
        """Decode ``raw`` as this variant."""

    def to_json(self, path: str = "$") -> Any:
        return getattr(self, "value")

    def unpack_as(self, expected: ValueKind) -> Any:
        """Return the inner value if this is an ``expected`` value.

        Raises:
            UnpackMismatchError: If the variant differs
        """
        if self.kind is not expected:
            raise UnpackMismatchError(expected, self.kind)
        return getattr(self, "value")


@dataclass(frozen=True)
class BooleanValue(Value):
    kind: ClassVar[ValueKind] = ValueKind.BOOLEAN
    value: bool

    @classmethod
    def decode(cls, raw: Any, path: str) -> "BooleanValue":
        return cls(expect_bool(raw, path))


@dataclass(frozen=True)
class ColorValue(Value):
    """A color kept as its source hex text.

    The text is stored verbatim so that short and long forms survive a
    round trip; use `rgba` for the parsed channels.
    """

    kind: ClassVar[ValueKind] = ValueKind.COLOR
    value: str

    def __post_init__(self) -> None:
        parse_color(self.value)

    @property
    def rgba(self) -> tuple[int, int, int, int]:
        return parse_color(self.value)

    @classmethod
    def decode(cls, raw: Any, path: str) -> "ColorValue":
        text = expect_string(raw, path)
        parse_color(text, path)
        return cls(text)


@dataclass(frozen=True)
class EnumValue(Value):
    """The selected choice of an enum field, stored by name."""

    kind: ClassVar[ValueKind] = ValueKind.ENUM
    value: str

    @classmethod
    def decode(cls, raw: Any, path: str) -> "EnumValue":
        return cls(expect_string(raw, path))


@dataclass(frozen=True)
class IntegerValue(Value):
    """An integer field.

    Typed decoding through an Integer template is limited to 32 bits, as the
    editor stores them. Integers found without a template may use the whole
    64-bit range.
    """

    kind: ClassVar[ValueKind] = ValueKind.INTEGER
    value: int

    @classmethod
    def decode(cls, raw: Any, path: str) -> "IntegerValue":
        return cls(expect_int(raw, path))

    def to_json(self, path: str = "$") -> Any:
        return check_json_int(self.value, path)


@dataclass(frozen=True)
class FloatValue(Value):
    """A float field.

    JSON integers are accepted and kept as ``int`` so that ``5`` is written
    back as ``5`` rather than ``5.0``.
    """

    kind: ClassVar[ValueKind] = ValueKind.FLOAT
    value: float

    @classmethod
    def decode(cls, raw: Any, path: str) -> "FloatValue":
        return cls(expect_number(raw, path))

    def to_json(self, path: str = "$") -> Any:
        return check_number(self.value, path)


@dataclass(frozen=True)
class StringValue(Value):
    kind: ClassVar[ValueKind] = ValueKind.STRING
    value: str

    @classmethod
    def decode(cls, raw: Any, path: str) -> "StringValue":
        return cls(expect_string(raw, path))


@dataclass(frozen=True)
class TextValue(Value):
    """Multi-line text. Shares the JSON shape of `StringValue`."""

    kind: ClassVar[ValueKind] = ValueKind.TEXT
    value: str

    @classmethod
    def decode(cls, raw: Any, path: str) -> "TextValue":
        return cls(expect_string(raw, path))


@dataclass(frozen=True)
class ArrayStringValue(Value):
    kind: ClassVar[ValueKind] = ValueKind.ARRAY_STRING
    value: tuple[str, ...]

    @classmethod
    def decode(cls, raw: Any, path: str) -> "ArrayStringValue":
        return cls(tuple(expect_string_list(raw, path)))

    def to_json(self, path: str = "$") -> Any:
        return list(self.value)


@dataclass(frozen=True)
class ArrayEnumValue(Value):
    kind: ClassVar[ValueKind] = ValueKind.ARRAY_ENUM
    value: tuple[str, ...]

    @classmethod
    def decode(cls, raw: Any, path: str) -> "ArrayEnumValue":
        return cls(tuple(expect_string_list(raw, path)))

    def to_json(self, path: str = "$") -> Any:
        return list(self.value)


_VARIANTS: dict[ValueKind, type[Value]] = {
    ValueKind.BOOLEAN: BooleanValue,
    ValueKind.COLOR: ColorValue,
    ValueKind.ENUM: EnumValue,
    ValueKind.INTEGER: IntegerValue,
    ValueKind.FLOAT: FloatValue,
    ValueKind.STRING: StringValue,
    ValueKind.TEXT: TextValue,
    ValueKind.ARRAY_STRING: ArrayStringValue,
    ValueKind.ARRAY_ENUM: ArrayEnumValue,
}

Values = dict[str, Value]
"""Custom values by field name, in source order."""

ValueKinds = Mapping[str, ValueKind]
"""Declared value types by field name, used for typed decoding."""


def decode_values(reader: FieldReader, kinds: Optional[ValueKinds] = None) -> Values:
    """Decode a ``{"name": raw}`` object into typed values.

    Names found in ``kinds`` are decoded with their declared type, all
    others by JSON shape.
    """
    values: Values = {}
    for name, raw in reader.data.items():
        path = key_path(reader.path, name)
        kind = kinds.get(name) if kinds else None
        if kind is None:
            values[name] = Value.from_raw(raw, path)
        else:
            values[name] = Value.from_typed(kind, raw, path)
    return values


def encode_values(values: Mapping[str, Value], path: str) -> dict[str, Any]:
    return {name: value.to_json(key_path(path, name)) for name, value in values.items()}
