"""
ogmo_schema: typed models and a JSON codec for Ogmo Editor 3 files.

Decodes ``.ogmo`` project files and level ``.json`` files into dataclasses
and writes them back without losing numeric types, key order or fields the
models don't know about.
"""

__version__ = "0.1.0"

from .codec.api import (
    CodecOptions,
    decode_level,
    decode_project,
    dumps_level,
    dumps_project,
    encode_level,
    encode_project,
)
from .common import ArrayMode, ExportMode, LayerKind, Vec2
from .errors import (
    AmbiguousVariantError,
    MalformedInputError,
    MissingFieldError,
    NumericRangeError,
    OgmoSchemaError,
    SchemaError,
    TypeMismatchError,
    UnknownVariantError,
    UnpackMismatchError,
)
from .level import Decal, Entity, Layer, Level
from .loaders import OgmoFileLoader, load_level, load_project, save_level, save_project
from .project import EntityTemplate, LayerTemplate, Project, Tileset
from .values import Value, ValueKind, ValueTemplate

__all__ = [
    # Codec
    "CodecOptions",
    "decode_project",
    "decode_level",
    "encode_project",
    "encode_level",
    "dumps_project",
    "dumps_level",

    # Files
    "OgmoFileLoader",
    "load_project",
    "load_level",
    "save_project",
    "save_level",

    # Models
    "Project",
    "Tileset",
    "EntityTemplate",
    "LayerTemplate",
    "Level",
    "Layer",
    "Entity",
    "Decal",
    "Value",
    "ValueKind",
    "ValueTemplate",
    "Vec2",
    "LayerKind",
    "ExportMode",
    "ArrayMode",

    # Errors
    "OgmoSchemaError",
    "SchemaError",
    "MalformedInputError",
    "MissingFieldError",
    "TypeMismatchError",
    "AmbiguousVariantError",
    "UnknownVariantError",
    "NumericRangeError",
    "UnpackMismatchError",
]
