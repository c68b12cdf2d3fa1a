"""
Layer templates: per-project declarations of layer kinds.

The editor writes an explicit ``definition`` tag on every layer template.
Documents without one are still accepted: the kind is then inferred from
which kind-specific keys are present.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional

from ..codec.fields import FieldReader, FieldWriter, JsonObject, expect_int_enum
from ..common import ArrayMode, ExportMode, LayerKind, Vec2
from ..errors import AmbiguousVariantError, UnknownVariantError, UnpackMismatchError
from ..values.templates import ValueTemplate, decode_templates, encode_templates

logger = logging.getLogger(__name__)

# Keys that only appear on one kind of layer template.
TEMPLATE_MARKER_KEYS: dict[str, LayerKind] = {
    "defaultTileset": LayerKind.TILE,
    "legend": LayerKind.GRID,
    "requiredTags": LayerKind.ENTITY,
    "excludedTags": LayerKind.ENTITY,
    "folder": LayerKind.DECAL,
}


@dataclass(kw_only=True)
class LayerTemplate(ABC):
    """Fields shared by every layer template.

    Attributes:
        name: Layer name shown in the editor
        grid_size: Size of each grid cell in pixels
        export_id: Unique export id of the layer
    """

    kind: ClassVar[LayerKind]

    name: str
    grid_size: Vec2[int]
    export_id: str
    extras: JsonObject = field(default_factory=dict)

    @classmethod
    def from_dict(cls, reader: FieldReader) -> "LayerTemplate":
        """Decode a layer template of any kind.

        Raises:
            UnknownVariantError: If the kind cannot be determined
            AmbiguousVariantError: If keys of several kinds are present
        """
        kind = detect_template_kind(reader)
        variant = _TEMPLATES[kind]
        template = variant._decode(
            reader,
            name=reader.string("name"),
            grid_size=reader.vec2_int("gridSize"),
            export_id=reader.string("exportID"),
        )
        template.extras = reader.extras()
        return template

    @classmethod
    @abstractmethod
    def _decode(cls, reader: FieldReader, **common: Any) -> "LayerTemplate":
        """Build the variant from its own keys plus the shared ``common`` fields."""

    def to_dict(self, path: str = "$") -> JsonObject:
        writer = FieldWriter(path)
        writer.put("definition", self.kind.value)
        writer.put("name", self.name)
        writer.vec2("gridSize", self.grid_size)
        writer.put("exportID", self.export_id)
        self._encode(writer)
        return writer.extend(self.extras).result()

    @abstractmethod
    def _encode(self, writer: FieldWriter) -> None:
        ...

    def unpack_as(self, expected: LayerKind) -> "LayerTemplate":
        """Return this template if it is of kind ``expected``.

        Raises:
            UnpackMismatchError: If the kind differs
        """
        if self.kind is not expected:
            raise UnpackMismatchError(expected, self.kind)
        return self


def detect_template_kind(reader: FieldReader) -> LayerKind:
    """Work out which kind of layer template an object describes."""
    definition = reader.opt_string("definition")
    if definition is not None:
        try:
            kind = LayerKind(definition)
        except ValueError:
            kind = None
        if kind is None or kind not in _TEMPLATES:
            raise UnknownVariantError(
                reader.field_path("definition"), f"unknown layer definition {definition!r}"
            )
        return kind

    found = reader.present(*TEMPLATE_MARKER_KEYS)
    kinds = {TEMPLATE_MARKER_KEYS[key] for key in found}
    if not kinds:
        raise UnknownVariantError(reader.path, "layer template matches no known kind")
    if len(kinds) > 1:
        raise AmbiguousVariantError(reader.path, found)
    kind = kinds.pop()
    logger.debug(f"Layer template at {reader.path} has no definition, inferred '{kind.value}'")
    return kind


@dataclass(kw_only=True)
class TileLayerTemplate(LayerTemplate):
    kind: ClassVar[LayerKind] = LayerKind.TILE
    export_mode: ExportMode
    array_mode: ArrayMode
    default_tileset: str

    @classmethod
    def _decode(cls, reader: FieldReader, **common: Any) -> "TileLayerTemplate":
        return cls(
            **common,
            export_mode=expect_int_enum(
                ExportMode, reader.raw("exportMode"), reader.field_path("exportMode")
            ),
            array_mode=expect_int_enum(
                ArrayMode, reader.raw("arrayMode"), reader.field_path("arrayMode")
            ),
            default_tileset=reader.string("defaultTileset"),
        )

    def _encode(self, writer: FieldWriter) -> None:
        writer.put("exportMode", int(self.export_mode))
        writer.put("arrayMode", int(self.array_mode))
        writer.put("defaultTileset", self.default_tileset)


@dataclass(kw_only=True)
class GridLayerTemplate(LayerTemplate):
    """Grid layer. ``legend`` maps cell characters to display colors."""

    kind: ClassVar[LayerKind] = LayerKind.GRID
    array_mode: ArrayMode
    legend: dict[str, str]

    @classmethod
    def _decode(cls, reader: FieldReader, **common: Any) -> "GridLayerTemplate":
        return cls(
            **common,
            array_mode=expect_int_enum(
                ArrayMode, reader.raw("arrayMode"), reader.field_path("arrayMode")
            ),
            legend=reader.string_map("legend"),
        )

    def _encode(self, writer: FieldWriter) -> None:
        writer.put("arrayMode", int(self.array_mode))
        writer.put("legend", dict(self.legend))


@dataclass(kw_only=True)
class EntityLayerTemplate(LayerTemplate):
    kind: ClassVar[LayerKind] = LayerKind.ENTITY
    required_tags: list[str]
    excluded_tags: list[str]

    @classmethod
    def _decode(cls, reader: FieldReader, **common: Any) -> "EntityLayerTemplate":
        return cls(
            **common,
            required_tags=reader.string_list("requiredTags"),
            excluded_tags=reader.string_list("excludedTags"),
        )

    def _encode(self, writer: FieldWriter) -> None:
        writer.put("requiredTags", list(self.required_tags))
        writer.put("excludedTags", list(self.excluded_tags))


@dataclass(kw_only=True)
class DecalLayerTemplate(LayerTemplate):
    """Decal layer.

    Attributes:
        folder: Folder searched for decal images, relative to the project
        include_image_sequence: Whether image sequences are offered as decals
        scaleable: Whether decals on this layer can be scaled
        rotatable: Whether decals on this layer can be rotated
        values: Custom fields every decal on this layer carries
    """

    kind: ClassVar[LayerKind] = LayerKind.DECAL
    folder: str
    include_image_sequence: bool
    scaleable: bool
    rotatable: bool
    values: list[ValueTemplate] = field(default_factory=list)

    @classmethod
    def _decode(cls, reader: FieldReader, **common: Any) -> "DecalLayerTemplate":
        return cls(
            **common,
            folder=reader.string("folder"),
            include_image_sequence=reader.boolean("includeImageSequence"),
            scaleable=reader.boolean("scaleable"),
            rotatable=reader.boolean("rotatable"),
            values=decode_templates(reader, "values"),
        )

    def _encode(self, writer: FieldWriter) -> None:
        writer.put("folder", self.folder)
        writer.put("includeImageSequence", self.include_image_sequence)
        writer.put("scaleable", self.scaleable)
        writer.put("rotatable", self.rotatable)
        writer.put("values", encode_templates(self.values, writer.field_path("values")))


_TEMPLATES: dict[LayerKind, type[LayerTemplate]] = {
    LayerKind.TILE: TileLayerTemplate,
    LayerKind.GRID: GridLayerTemplate,
    LayerKind.ENTITY: EntityLayerTemplate,
    LayerKind.DECAL: DecalLayerTemplate,
}


def find_template(templates: list[LayerTemplate], name: str) -> Optional[LayerTemplate]:
    for template in templates:
        if template.name == name:
            return template
    return None
