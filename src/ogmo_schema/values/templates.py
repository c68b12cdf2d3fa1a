"""
Value templates: declarations of custom fields found in project files.

Templates are tagged by their ``definition`` string. Every variant repeats
the common fields (``name``, ``display``) and adds the parameters of its
type; `ValueTemplate.from_dict` dispatches on the tag.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional

from ..codec.fields import FieldReader, FieldWriter, JsonObject
from ..errors import UnknownVariantError
from .models import (
    BooleanValue,
    ColorValue,
    EnumValue,
    FloatValue,
    IntegerValue,
    StringValue,
    TextValue,
    Value,
    ValueKind,
    parse_color,
)

logger = logging.getLogger(__name__)


@dataclass(kw_only=True)
class ValueTemplate(ABC):
    """Common part of every value template."""

    kind: ClassVar[ValueKind]

    name: str
    display: Optional[int] = None
    extras: JsonObject = field(default_factory=dict)

    @classmethod
    def from_dict(cls, reader: FieldReader) -> "ValueTemplate":
        """Decode any value template, dispatching on ``definition``.

        Raises:
            MissingFieldError: If ``definition`` is absent
            UnknownVariantError: If ``definition`` names no known type
        """
        definition = reader.string("definition")
        variant = _TEMPLATES.get(definition)
        if variant is None:
            raise UnknownVariantError(
                reader.field_path("definition"), f"unknown value definition {definition!r}"
            )
        template = variant._decode(reader, reader.string("name"), reader.opt_integer("display"))
        template.extras = reader.extras()
        return template

    @classmethod
    @abstractmethod
    def _decode(cls, reader: FieldReader, name: str, display: Optional[int]) -> "ValueTemplate":
        ...

    @abstractmethod
    def default_value(self) -> Value:
        """Return the value a new instance of this field starts with."""

    def to_dict(self, path: str = "$") -> JsonObject:
        writer = FieldWriter(path)
        writer.put("name", self.name)
        writer.put("definition", self.kind.value)
        writer.opt_integer("display", self.display)
        self._encode(writer)
        return writer.extend(self.extras).result()

    @abstractmethod
    def _encode(self, writer: FieldWriter) -> None:
        ...


@dataclass(kw_only=True)
class BooleanTemplate(ValueTemplate):
    kind: ClassVar[ValueKind] = ValueKind.BOOLEAN
    defaults: bool

    @classmethod
    def _decode(cls, reader: FieldReader, name: str, display: Optional[int]) -> "BooleanTemplate":
        return cls(name=name, display=display, defaults=reader.boolean("defaults"))

    def default_value(self) -> Value:
        return BooleanValue(self.defaults)

    def _encode(self, writer: FieldWriter) -> None:
        writer.put("defaults", self.defaults)


@dataclass(kw_only=True)
class ColorTemplate(ValueTemplate):
    kind: ClassVar[ValueKind] = ValueKind.COLOR
    defaults: str
    include_alpha: bool

    @classmethod
    def _decode(cls, reader: FieldReader, name: str, display: Optional[int]) -> "ColorTemplate":
        defaults = reader.string("defaults")
        parse_color(defaults, reader.field_path("defaults"))
        return cls(
            name=name,
            display=display,
            defaults=defaults,
            include_alpha=reader.boolean("includeAlpha"),
        )

    def default_value(self) -> Value:
        return ColorValue(self.defaults)

    def _encode(self, writer: FieldWriter) -> None:
        writer.put("defaults", self.defaults)
        writer.put("includeAlpha", self.include_alpha)


@dataclass(kw_only=True)
class EnumTemplate(ValueTemplate):
    """Enum field. ``defaults`` is an index into ``choices``."""

    kind: ClassVar[ValueKind] = ValueKind.ENUM
    defaults: int
    choices: list[str]

    @classmethod
    def _decode(cls, reader: FieldReader, name: str, display: Optional[int]) -> "EnumTemplate":
        return cls(
            name=name,
            display=display,
            choices=reader.string_list("choices"),
            defaults=reader.integer("defaults"),
        )

    def default_value(self) -> Value:
        if 0 <= self.defaults < len(self.choices):
            return EnumValue(self.choices[self.defaults])
        logger.warning(
            f"Enum '{self.name}' default index {self.defaults} is outside its "
            f"{len(self.choices)} choice(s), using an empty value"
        )
        return EnumValue("")

    def _encode(self, writer: FieldWriter) -> None:
        writer.put("choices", list(self.choices))
        writer.integer("defaults", self.defaults)


@dataclass(kw_only=True)
class IntegerTemplate(ValueTemplate):
    kind: ClassVar[ValueKind] = ValueKind.INTEGER
    defaults: int
    bounded: bool
    min: int
    max: int

    @classmethod
    def _decode(cls, reader: FieldReader, name: str, display: Optional[int]) -> "IntegerTemplate":
        return cls(
            name=name,
            display=display,
            defaults=reader.integer("defaults"),
            bounded=reader.boolean("bounded"),
            min=reader.integer("min"),
            max=reader.integer("max"),
        )

    def default_value(self) -> Value:
        return IntegerValue(self.defaults)

    def _encode(self, writer: FieldWriter) -> None:
        writer.integer("defaults", self.defaults)
        writer.put("bounded", self.bounded)
        writer.integer("min", self.min)
        writer.integer("max", self.max)


@dataclass(kw_only=True)
class FloatTemplate(ValueTemplate):
    kind: ClassVar[ValueKind] = ValueKind.FLOAT
    defaults: float
    bounded: bool
    min: float
    max: float

    @classmethod
    def _decode(cls, reader: FieldReader, name: str, display: Optional[int]) -> "FloatTemplate":
        return cls(
            name=name,
            display=display,
            defaults=reader.number("defaults"),
            bounded=reader.boolean("bounded"),
            min=reader.number("min"),
            max=reader.number("max"),
        )

    def default_value(self) -> Value:
        return FloatValue(self.defaults)

    def _encode(self, writer: FieldWriter) -> None:
        writer.number("defaults", self.defaults)
        writer.put("bounded", self.bounded)
        writer.number("min", self.min)
        writer.number("max", self.max)


@dataclass(kw_only=True)
class StringTemplate(ValueTemplate):
    kind: ClassVar[ValueKind] = ValueKind.STRING
    defaults: str
    max_length: int
    trim_whitespace: bool

    @classmethod
    def _decode(cls, reader: FieldReader, name: str, display: Optional[int]) -> "StringTemplate":
        return cls(
            name=name,
            display=display,
            defaults=reader.string("defaults"),
            max_length=reader.integer("maxLength"),
            trim_whitespace=reader.boolean("trimWhitespace"),
        )

    def default_value(self) -> Value:
        return StringValue(self.defaults)

    def _encode(self, writer: FieldWriter) -> None:
        writer.put("defaults", self.defaults)
        writer.integer("maxLength", self.max_length)
        writer.put("trimWhitespace", self.trim_whitespace)


@dataclass(kw_only=True)
class TextTemplate(ValueTemplate):
    kind: ClassVar[ValueKind] = ValueKind.TEXT
    defaults: str

    @classmethod
    def _decode(cls, reader: FieldReader, name: str, display: Optional[int]) -> "TextTemplate":
        return cls(name=name, display=display, defaults=reader.string("defaults"))

    def default_value(self) -> Value:
        return TextValue(self.defaults)

    def _encode(self, writer: FieldWriter) -> None:
        writer.put("defaults", self.defaults)


_TEMPLATES: dict[str, type[ValueTemplate]] = {
    t.kind.value: t
    for t in (
        BooleanTemplate,
        ColorTemplate,
        EnumTemplate,
        IntegerTemplate,
        FloatTemplate,
        StringTemplate,
        TextTemplate,
    )
}


def decode_templates(reader: FieldReader, key: str) -> list[ValueTemplate]:
    return [ValueTemplate.from_dict(item) for item in reader.objects(key)]


def encode_templates(templates: list[ValueTemplate], path: str) -> list[Any]:
    return [t.to_dict(f"{path}[{i}]") for i, t in enumerate(templates)]


def template_kinds(templates: list[ValueTemplate]) -> dict[str, ValueKind]:
    """Map each template's field name to its declared kind."""
    return {t.name: t.kind for t in templates}
