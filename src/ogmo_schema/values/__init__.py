"""
Custom field values and their templates.

Values appear in level files (level, entity and decal values); templates
appear in project files and declare the type and default of each field.
"""

from .models import (
    Value,
    ValueKind,
    Values,
    ValueKinds,
    BooleanValue,
    ColorValue,
    EnumValue,
    IntegerValue,
    FloatValue,
    StringValue,
    TextValue,
    ArrayStringValue,
    ArrayEnumValue,
    parse_color,
)
from .templates import (
    ValueTemplate,
    BooleanTemplate,
    ColorTemplate,
    EnumTemplate,
    IntegerTemplate,
    FloatTemplate,
    StringTemplate,
    TextTemplate,
    template_kinds,
)

__all__ = [
    # Values
    "Value",
    "ValueKind",
    "Values",
    "ValueKinds",
    "BooleanValue",
    "ColorValue",
    "EnumValue",
    "IntegerValue",
    "FloatValue",
    "StringValue",
    "TextValue",
    "ArrayStringValue",
    "ArrayEnumValue",
    "parse_color",

    # Templates
    "ValueTemplate",
    "BooleanTemplate",
    "ColorTemplate",
    "EnumTemplate",
    "IntegerTemplate",
    "FloatTemplate",
    "StringTemplate",
    "TextTemplate",
    "template_kinds",
]
