"""
Exception types raised while decoding, encoding and unpacking Ogmo data.

Every decode/encode failure is a `SchemaError` carrying the JSON path of the
offending field (for example ``$.layers[2].entities[0].x``). Unpack helpers
raise `UnpackMismatchError`, which sits outside the
`SchemaError` branch.
"""

from typing import Any, Iterable


class OgmoSchemaError(Exception):
    """Base class for all errors raised by ogmo_schema."""
    pass


class SchemaError(OgmoSchemaError):
    """A document does not match the Ogmo schema."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"{path}: {message}")


class MalformedInputError(SchemaError):
    """The input text is not valid JSON."""

    def __init__(self, detail: str, path: str = "$"):
        self.detail = detail
        super().__init__(path, f"malformed JSON ({detail})")


class MissingFieldError(SchemaError):
    """A required key is absent."""

    def __init__(self, path: str):
        super().__init__(path, "required field is missing")


class TypeMismatchError(SchemaError):
    """A field holds a JSON value of the wrong type or shape."""

    def __init__(self, path: str, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(path, f"expected {expected}, found {actual}")


class AmbiguousVariantError(SchemaError):
    """More than one variant matches an object."""

    def __init__(self, path: str, candidates: Iterable[str]):
        self.candidates = list(candidates)
        super().__init__(
            path, f"ambiguous variant, keys {', '.join(self.candidates)} are mutually exclusive"
        )


class UnknownVariantError(SchemaError):
    """No variant matches an object."""

    def __init__(self, path: str, detail: str = "no known variant matches"):
        super().__init__(path, detail)


class NumericRangeError(SchemaError):
    """A number cannot be represented by the field it belongs to."""

    def __init__(self, path: str, value: Any):
        self.value = value
        super().__init__(path, f"numeric value {value!r} is out of range")


class UnpackMismatchError(OgmoSchemaError):
    """An unpack helper was asked for a variant the object is not."""

    def __init__(self, expected: Any, actual: Any):
        self.expected = expected
        self.actual = actual
        super().__init__(f"expected {_label(expected)}, found {_label(actual)}")


def _label(kind: Any) -> str:
    return str(getattr(kind, "label", kind))
