"""
Entry points for decoding and encoding projects and levels.

Decoding accepts JSON text or an already parsed tree and is atomic: the
first mismatch raises a `SchemaError` naming the field path, and nothing
is returned. Encoding produces a plain JSON tree; `dumps_*` also renders
it to bytes.
"""

import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, Optional

from ..level.models import Level
from ..project.models import Project
from ..values.models import ValueKinds
from .fields import FieldReader, JsonObject
from .json_text import JsonSource, dump_json, parse_json

logger = logging.getLogger(__name__)


@dataclass
class CodecOptions:
    """Options for decoding and encoding.

    Attributes:
        preserve_unknown_fields: Keep keys the models do not know and write
            them back. When False they are dropped with a warning.
        indent: Pretty-print JSON produced by ``dumps_*``.
    """

    preserve_unknown_fields: bool = True
    indent: bool = False


DEFAULT_OPTIONS = CodecOptions()


def decode_project(source: JsonSource, options: Optional[CodecOptions] = None) -> Project:
    """Decode a project file.

    Args:
        source: JSON text (str or bytes) or a parsed JSON object
        options: Codec options, defaults to `CodecOptions()`

    Returns:
        Decoded Project

    Raises:
        SchemaError: If the input is malformed or does not match the schema
    """
    options = options or DEFAULT_OPTIONS
    project = Project.from_dict(FieldReader(parse_json(source)))
    if not options.preserve_unknown_fields:
        _drop_extras(project, "$")
    logger.debug(
        f"Decoded project '{project.name}': {len(project.layers)} layer(s), "
        f"{len(project.tilesets)} tileset(s), {len(project.entities)} entity template(s)"
    )
    return project


def decode_level(
    source: JsonSource,
    project: Optional[Project] = None,
    options: Optional[CodecOptions] = None,
    value_kinds: Optional[ValueKinds] = None,
) -> Level:
    """Decode a level file.

    Args:
        source: JSON text (str or bytes) or a parsed JSON object
        project: Project the level belongs to. When given, custom values
            are typed through its value templates instead of by JSON shape.
        options: Codec options, defaults to `CodecOptions()`
        value_kinds: Declared kinds for level values, by name. They override
            the project's level templates and are the only way to decode
            kinds that share a JSON shape with another, such as `ArrayEnum`.

    Returns:
        Decoded Level

    Raises:
        SchemaError: If the input is malformed or does not match the schema
    """
    options = options or DEFAULT_OPTIONS
    level = Level.from_dict(FieldReader(parse_json(source)), project, value_kinds)
    if not options.preserve_unknown_fields:
        _drop_extras(level, "$")
    logger.debug(
        f"Decoded level {level.width}x{level.height} with {len(level.layers)} layer(s)"
    )
    return level


def encode_project(project: Project) -> JsonObject:
    """Encode a project into a JSON tree.

    Raises:
        NumericRangeError: If a number cannot be represented in JSON
    """
    return project.to_dict()


def encode_level(level: Level) -> JsonObject:
    """Encode a level into a JSON tree.

    Raises:
        NumericRangeError: If a number cannot be represented in JSON
    """
    return level.to_dict()


def dumps_project(project: Project, options: Optional[CodecOptions] = None) -> bytes:
    """Encode a project straight to JSON bytes."""
    options = options or DEFAULT_OPTIONS
    return dump_json(encode_project(project), indent=options.indent)


def dumps_level(level: Level, options: Optional[CodecOptions] = None) -> bytes:
    """Encode a level straight to JSON bytes."""
    options = options or DEFAULT_OPTIONS
    return dump_json(encode_level(level), indent=options.indent)


def _drop_extras(node: Any, path: str) -> None:
    """Clear ``extras`` on a decoded model and everything it contains."""
    if isinstance(node, list):
        for i, item in enumerate(node):
            _drop_extras(item, f"{path}[{i}]")
        return
    if not dataclasses.is_dataclass(node) or isinstance(node, type):
        return

    extras = getattr(node, "extras", None)
    if extras:
        logger.warning(f"Dropping unknown fields at {path}: {', '.join(extras)}")
        extras.clear()
    for f in dataclasses.fields(node):
        if f.name != "extras":
            _drop_extras(getattr(node, f.name), f"{path}.{f.name}")
