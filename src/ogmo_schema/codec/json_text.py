"""
JSON text handling on top of orjson.

orjson keeps the distinction between ``5`` and ``5.0`` in both directions
and preserves object key order, which is what the schema codec relies on.
"""

import logging
from typing import Any, Optional

import orjson

from ..errors import MalformedInputError, NumericRangeError, SchemaError, TypeMismatchError
from .fields import JSON_INT_MAX, JSON_INT_MIN, index_path, key_path

logger = logging.getLogger(__name__)

JsonSource = str | bytes | bytearray | memoryview | dict[str, Any]


def parse_json(source: JsonSource) -> Any:
    """Turn JSON text into a tree. Already parsed trees are passed through.

    Raises:
        MalformedInputError: If the text is not valid JSON
    """
    if isinstance(source, dict):
        return source
    try:
        return orjson.loads(source)
    except orjson.JSONDecodeError as e:
        raise MalformedInputError(str(e)) from e


def dump_json(tree: Any, indent: bool = False) -> bytes:
    """Serialize a tree produced by the encoder.

    Args:
        tree: JSON-compatible tree
        indent: Pretty-print with two spaces

    Raises:
        NumericRangeError: If an integer does not fit into 64 bits
        TypeMismatchError: If the tree holds something JSON cannot represent,
            such as a set or a non-string object key
    """
    option = orjson.OPT_INDENT_2 if indent else 0
    try:
        return orjson.dumps(tree, option=option)
    except orjson.JSONEncodeError as e:
        error = _find_unencodable(tree, "$") or TypeMismatchError("$", "JSON-compatible tree", str(e))
        logger.error(f"Failed to serialize JSON tree: {error}")
        raise error from e


def _find_unencodable(node: Any, path: str) -> Optional[SchemaError]:
    """Return an error for the first node under ``path`` orjson cannot write."""
    if node is None or isinstance(node, (bool, str, float)):
        return None
    if isinstance(node, int):
        if JSON_INT_MIN <= node <= JSON_INT_MAX:
            return None
        return NumericRangeError(path, node)
    if isinstance(node, (list, tuple)):
        for i, item in enumerate(node):
            error = _find_unencodable(item, index_path(path, i))
            if error:
                return error
        return None
    if isinstance(node, dict):
        for key, item in node.items():
            if not isinstance(key, str):
                return TypeMismatchError(path, "string key", type(key).__name__)
            error = _find_unencodable(item, key_path(path, key))
            if error:
                return error
        return None
    return TypeMismatchError(path, "JSON value", type(node).__name__)
