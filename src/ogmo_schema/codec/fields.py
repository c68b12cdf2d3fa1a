"""
Typed field access over parsed JSON trees.

`FieldReader` wraps one JSON object while it is being decoded: every read
checks the JSON type of the value, reports failures with the full field
path, and remembers which keys were consumed so that the rest can be kept
as ``extras``. `FieldWriter` is the encoding counterpart and rejects numbers
that cannot be written back faithfully.
"""

import math
from enum import IntEnum
from typing import Any, Iterator, Optional, TypeVar, cast

from ..common import Vec2
from ..errors import (
    MissingFieldError,
    NumericRangeError,
    TypeMismatchError,
    UnknownVariantError,
)

# Integer fields in the editor schema are 32-bit; other numbers must fit
# into what orjson can serialize.
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1
JSON_INT_MIN = -(2**63)
JSON_INT_MAX = 2**64 - 1

JsonObject = dict[str, Any]
E = TypeVar("E", bound=IntEnum)


def json_type_name(value: Any) -> str:
    """Return the JSON name of a parsed value's type."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def index_path(path: str, index: int) -> str:
    return f"{path}[{index}]"


def key_path(path: str, key: str) -> str:
    return f"{path}.{key}"


# =============================================================================
# Scalar checks
# =============================================================================

def expect_string(value: Any, path: str) -> str:
    if not isinstance(value, str):
        raise TypeMismatchError(path, "string", json_type_name(value))
    return value


def expect_bool(value: Any, path: str) -> bool:
    if not isinstance(value, bool):
        raise TypeMismatchError(path, "boolean", json_type_name(value))
    return value


def expect_int(value: Any, path: str) -> int:
    """Check a 32-bit integer. Floats are rejected, even integral ones."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeMismatchError(path, "integer", json_type_name(value))
    if not INT32_MIN <= value <= INT32_MAX:
        raise NumericRangeError(path, value)
    return value


def expect_number(value: Any, path: str) -> int | float:
    """Check a JSON number, keeping ints as ints and floats as floats."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeMismatchError(path, "number", json_type_name(value))
    return check_number(value, path)


def expect_list(value: Any, path: str) -> list[Any]:
    if not isinstance(value, list):
        raise TypeMismatchError(path, "array", json_type_name(value))
    return cast(list[Any], value)


def expect_object(value: Any, path: str) -> JsonObject:
    if not isinstance(value, dict):
        raise TypeMismatchError(path, "object", json_type_name(value))
    return cast(JsonObject, value)


def expect_string_list(value: Any, path: str) -> list[str]:
    items = expect_list(value, path)
    for i, item in enumerate(items):
        if not isinstance(item, str):
            expect_string(item, index_path(path, i))
    return list(items)


def expect_int_list(value: Any, path: str) -> list[int]:
    items = expect_list(value, path)
    for i, item in enumerate(items):
        # Hot path for tile data: only build the path on failure.
        if type(item) is not int or not INT32_MIN <= item <= INT32_MAX:
            expect_int(item, index_path(path, i))
    return list(items)


def check_number(value: int | float, path: str) -> int | float:
    """Return ``value`` unchanged if it can round-trip through JSON."""
    if isinstance(value, float):
        if not math.isfinite(value):
            raise NumericRangeError(path, value)
    elif not JSON_INT_MIN <= value <= JSON_INT_MAX:
        raise NumericRangeError(path, value)
    return value


def check_int(value: int, path: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeMismatchError(path, "integer", type(value).__name__)
    if not INT32_MIN <= value <= INT32_MAX:
        raise NumericRangeError(path, value)
    return value


def check_json_int(value: int, path: str) -> int:
    """Like `check_int`, but allows the full 64-bit range JSON integers can hold."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeMismatchError(path, "integer", type(value).__name__)
    return check_number(value, path)


def check_int_tree(values: Any, path: str) -> Any:
    """Check every integer in an arbitrarily nested list of integers."""
    if isinstance(values, list):
        for i, item in enumerate(cast(list[Any], values)):
            if type(item) is int and INT32_MIN <= item <= INT32_MAX:
                continue
            check_int_tree(item, index_path(path, i))
        return values
    return check_int(values, path)


# =============================================================================
# Readers
# =============================================================================

class FieldReader:
    """Read typed fields out of one JSON object.

    Optional readers treat an explicit JSON ``null`` the same as an absent
    key. Keys that were never read are reported by `extras()`.
    """

    def __init__(self, data: Any, path: str = "$"):
        self.data = expect_object(data, path)
        self.path = path
        self._consumed: set[str] = set()

    def field_path(self, key: str) -> str:
        return key_path(self.path, key)

    def has(self, key: str) -> bool:
        """True when ``key`` is present and not null. Does not consume it."""
        return self.data.get(key) is not None

    def present(self, *keys: str) -> list[str]:
        """Return those of ``keys`` that are present, in the given order."""
        return [key for key in keys if self.has(key)]

    def raw(self, key: str) -> Any:
        self._consumed.add(key)
        if key not in self.data:
            raise MissingFieldError(self.field_path(key))
        return self.data[key]

    def opt_raw(self, key: str) -> Any:
        self._consumed.add(key)
        return self.data.get(key)

    def string(self, key: str) -> str:
        return expect_string(self.raw(key), self.field_path(key))

    def opt_string(self, key: str) -> Optional[str]:
        value = self.opt_raw(key)
        return None if value is None else expect_string(value, self.field_path(key))

    def boolean(self, key: str) -> bool:
        return expect_bool(self.raw(key), self.field_path(key))

    def opt_boolean(self, key: str) -> Optional[bool]:
        value = self.opt_raw(key)
        return None if value is None else expect_bool(value, self.field_path(key))

    def integer(self, key: str) -> int:
        return expect_int(self.raw(key), self.field_path(key))

    def opt_integer(self, key: str) -> Optional[int]:
        value = self.opt_raw(key)
        return None if value is None else expect_int(value, self.field_path(key))

    def number(self, key: str) -> int | float:
        return expect_number(self.raw(key), self.field_path(key))

    def opt_number(self, key: str) -> Optional[int | float]:
        value = self.opt_raw(key)
        return None if value is None else expect_number(value, self.field_path(key))

    def array(self, key: str) -> list[Any]:
        return expect_list(self.raw(key), self.field_path(key))

    def string_list(self, key: str) -> list[str]:
        return expect_string_list(self.raw(key), self.field_path(key))

    def string_map(self, key: str) -> dict[str, str]:
        """Read an object whose values are all strings, keeping key order."""
        path = self.field_path(key)
        mapping = expect_object(self.raw(key), path)
        for name, value in mapping.items():
            expect_string(value, key_path(path, name))
        return dict(mapping)

    def obj(self, key: str) -> "FieldReader":
        return FieldReader(self.raw(key), self.field_path(key))

    def opt_obj(self, key: str) -> Optional["FieldReader"]:
        value = self.opt_raw(key)
        return None if value is None else FieldReader(value, self.field_path(key))

    def objects(self, key: str) -> Iterator["FieldReader"]:
        """Iterate over an array of objects, one reader per element."""
        path = self.field_path(key)
        for i, item in enumerate(self.array(key)):
            yield FieldReader(item, index_path(path, i))

    def vec2_int(self, key: str) -> Vec2[int]:
        vec = self.obj(key)
        return Vec2(vec.integer("x"), vec.integer("y"), vec.extras())

    def vec2_number(self, key: str) -> Vec2[Any]:
        return read_vec2_number(self.obj(key))

    def extras(self) -> JsonObject:
        """Return the keys that no read has touched, in source order."""
        return {k: v for k, v in self.data.items() if k not in self._consumed}


def read_vec2_number(vec: FieldReader) -> Vec2[Any]:
    return Vec2(vec.number("x"), vec.number("y"), vec.extras())


# =============================================================================
# Writers
# =============================================================================

class FieldWriter:
    """Build one JSON object, validating numbers as they are written."""

    def __init__(self, path: str = "$"):
        self.path = path
        self.data: JsonObject = {}

    def field_path(self, key: str) -> str:
        return key_path(self.path, key)

    def put(self, key: str, value: Any) -> "FieldWriter":
        self.data[key] = value
        return self

    def opt(self, key: str, value: Any) -> "FieldWriter":
        if value is not None:
            self.data[key] = value
        return self

    def integer(self, key: str, value: int) -> "FieldWriter":
        self.data[key] = check_int(value, self.field_path(key))
        return self

    def opt_integer(self, key: str, value: Optional[int]) -> "FieldWriter":
        if value is not None:
            self.integer(key, value)
        return self

    def number(self, key: str, value: int | float) -> "FieldWriter":
        self.data[key] = check_number(value, self.field_path(key))
        return self

    def opt_number(self, key: str, value: Optional[int | float]) -> "FieldWriter":
        if value is not None:
            self.number(key, value)
        return self

    def int_tree(self, key: str, value: Any) -> "FieldWriter":
        self.data[key] = check_int_tree(value, self.field_path(key))
        return self

    def vec2(self, key: str, value: Vec2[Any]) -> "FieldWriter":
        self.data[key] = write_vec2(value, self.field_path(key))
        return self

    def extend(self, extras: JsonObject) -> "FieldWriter":
        """Append unmodelled keys without overriding modelled ones."""
        for key, value in extras.items():
            self.data.setdefault(key, value)
        return self

    def result(self) -> JsonObject:
        return self.data


def expect_int_enum(enum_cls: type[E], value: Any, path: str) -> E:
    """Check an integer that must be one of ``enum_cls``'s members."""
    number = expect_int(value, path)
    try:
        return enum_cls(number)
    except ValueError:
        raise UnknownVariantError(
            path, f"{number} is not a valid {enum_cls.__name__}"
        ) from None


def write_vec2(value: Vec2[Any], path: str) -> JsonObject:
    """Encode a Vec2, keys it carried from the source included."""
    return (
        FieldWriter(path)
        .number("x", value.x)
        .number("y", value.y)
        .extend(value.extras)
        .result()
    )
