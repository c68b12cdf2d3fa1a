"""
Data models for Ogmo project files (``.ogmo``).

A project declares everything levels may contain: layer templates, entity
templates, tilesets and the custom fields of levels. Fields mirror the
editor's JSON schema one to one; keys the models do not know are kept in
``extras`` and written back unchanged.
"""

import base64
import binascii
import io
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional

from PIL import Image, UnidentifiedImageError

from ..codec.fields import FieldReader, FieldWriter, JsonObject, index_path, read_vec2_number, write_vec2
from ..common import Vec2
from ..values.models import ValueKind
from ..values.templates import (
    ValueTemplate,
    decode_templates,
    encode_templates,
    template_kinds,
)
from .layers import DecalLayerTemplate, LayerTemplate, find_template



# =============================================================================
# Tilesets
# =============================================================================

@dataclass(kw_only=True)
class Tileset:
    """A tileset: an image sliced into a grid of tiles.

    Attributes:
        label: Tileset name; tile layers reference tilesets by it
        path: Image path relative to the project file
        image: The image embedded as a base64 data URL
        tile_width: Width of each tile in pixels
        tile_height: Height of each tile in pixels
        tile_separation_x: Empty pixels between tiles on the X axis
        tile_separation_y: Empty pixels between tiles on the Y axis
        tile_margin_x: Empty pixels before the first column (newer editors only)
        tile_margin_y: Empty pixels before the first row (newer editors only)
    """

    label: str
    path: str
    image: str
    tile_width: int
    tile_height: int
    tile_separation_x: int
    tile_separation_y: int
    tile_margin_x: Optional[int] = None
    tile_margin_y: Optional[int] = None
    extras: JsonObject = field(default_factory=dict)

    @classmethod
    def from_dict(cls, reader: FieldReader) -> "Tileset":
        tileset = cls(
            label=reader.string("label"),
            path=reader.string("path"),
            image=reader.string("image"),
            tile_width=reader.integer("tileWidth"),
            tile_height=reader.integer("tileHeight"),
            tile_separation_x=reader.integer("tileSeparationX"),
            tile_separation_y=reader.integer("tileSeparationY"),
            tile_margin_x=reader.opt_integer("tileMarginX"),
            tile_margin_y=reader.opt_integer("tileMarginY"),
        )
        tileset.extras = reader.extras()
        return tileset

    def to_dict(self, path: str = "$") -> JsonObject:
        writer = FieldWriter(path)
        writer.put("label", self.label)
        writer.put("path", self.path)
        writer.put("image", self.image)
        writer.integer("tileWidth", self.tile_width)
        writer.integer("tileHeight", self.tile_height)
        writer.integer("tileSeparationX", self.tile_separation_x)
        writer.integer("tileSeparationY", self.tile_separation_y)
        writer.opt_integer("tileMarginX", self.tile_margin_x)
        writer.opt_integer("tileMarginY", self.tile_margin_y)
        return writer.extend(self.extras).result()

    def tile_coords(self, texture_width: int, texture_height: int) -> Iterator[Vec2[int]]:
        """Yield the pixel position of each tile in the tileset image.

        Tiles are yielded left to right, top to bottom, so the n-th position
        belongs to tile id n. The project does not store the image size, so
        it has to be supplied (see `decode_image` for the embedded copy).
        """
        margin_x = self.tile_margin_x or 0
        margin_y = self.tile_margin_y or 0
        step_x = self.tile_width + self.tile_separation_x
        step_y = self.tile_height + self.tile_separation_y
        if step_x <= 0 or step_y <= 0:
            return

        # The last tile in a row/column needs no trailing separation.
        tiles_x = (texture_width - margin_x + self.tile_separation_x) // step_x
        tiles_y = (texture_height - margin_y + self.tile_separation_y) // step_y

        for tile_y in range(tiles_y):
            for tile_x in range(tiles_x):
                yield Vec2(margin_x + tile_x * step_x, margin_y + tile_y * step_y)

    def decode_image(self) -> Image.Image:
        """Decode the embedded tileset image.

        Raises:
            ValueError: If the embedded data is not a base64 encoded image
        """
        payload = self.image.split(",", 1)[1] if self.image.startswith("data:") else self.image
        try:
            data = base64.b64decode(payload, validate=True)
            image = Image.open(io.BytesIO(data))
            image.load()
        except (binascii.Error, UnidentifiedImageError) as e:
            raise ValueError(f"Tileset '{self.label}' has no valid embedded image: {e}") from e
        return image

    def tile_rects(self) -> list[tuple[int, int, int, int]]:
        """Return ``(left, top, right, bottom)`` boxes of every tile.

        Uses the size of the embedded image. Boxes can be passed straight
        to ``Image.crop``.
        """
        width, height = self.decode_image().size
        return [
            (pos.x, pos.y, pos.x + self.tile_width, pos.y + self.tile_height)
            for pos in self.tile_coords(width, height)
        ]


# =============================================================================
# Entity templates
# =============================================================================

@dataclass(kw_only=True)
class Shape:
    """Outline of an entity icon."""

    label: str
    points: list[Vec2[Any]]
    extras: JsonObject = field(default_factory=dict)

    @classmethod
    def from_dict(cls, reader: FieldReader) -> "Shape":
        shape = cls(
            label=reader.string("label"),
            points=[read_vec2_number(point) for point in reader.objects("points")],
        )
        shape.extras = reader.extras()
        return shape

    def to_dict(self, path: str = "$") -> JsonObject:
        writer = FieldWriter(path)
        writer.put("label", self.label)
        points_path = writer.field_path("points")
        writer.put("points", [
            write_vec2(p, index_path(points_path, i))
            for i, p in enumerate(self.points)
        ])
        return writer.extend(self.extras).result()


@dataclass(kw_only=True)
class EntityTemplate:
    """Declaration of an entity that can be placed on entity layers."""

    name: str
    export_id: str
    limit: int
    size: Vec2[Any]
    origin: Vec2[Any]
    origin_anchored: bool
    shape: Shape
    color: str
    tile_x: bool
    tile_y: bool
    tile_size: Vec2[Any]
    resizeable_x: bool
    resizeable_y: bool
    rotatable: bool
    rotation_degrees: float
    can_flip_x: bool
    can_flip_y: bool
    can_set_color: bool
    has_nodes: bool
    node_limit: int
    node_display: int
    node_ghost: bool
    tags: list[str]
    values: list[ValueTemplate]
    texture: Optional[str] = None
    texture_image: Optional[str] = None
    extras: JsonObject = field(default_factory=dict)

    @classmethod
    def from_dict(cls, reader: FieldReader) -> "EntityTemplate":
        template = cls(
            name=reader.string("name"),
            export_id=reader.string("exportID"),
            limit=reader.integer("limit"),
            size=reader.vec2_number("size"),
            origin=reader.vec2_number("origin"),
            origin_anchored=reader.boolean("originAnchored"),
            shape=Shape.from_dict(reader.obj("shape")),
            color=reader.string("color"),
            tile_x=reader.boolean("tileX"),
            tile_y=reader.boolean("tileY"),
            tile_size=reader.vec2_number("tileSize"),
            resizeable_x=reader.boolean("resizeableX"),
            resizeable_y=reader.boolean("resizeableY"),
            rotatable=reader.boolean("rotatable"),
            rotation_degrees=reader.number("rotationDegrees"),
            can_flip_x=reader.boolean("canFlipX"),
            can_flip_y=reader.boolean("canFlipY"),
            can_set_color=reader.boolean("canSetColor"),
            has_nodes=reader.boolean("hasNodes"),
            node_limit=reader.integer("nodeLimit"),
            node_display=reader.integer("nodeDisplay"),
            node_ghost=reader.boolean("nodeGhost"),
            tags=reader.string_list("tags"),
            values=decode_templates(reader, "values"),
            texture=reader.opt_string("texture"),
            texture_image=reader.opt_string("textureImage"),
        )
        template.extras = reader.extras()
        return template

    def to_dict(self, path: str = "$") -> JsonObject:
        writer = FieldWriter(path)
        writer.put("exportID", self.export_id)
        writer.put("name", self.name)
        writer.integer("limit", self.limit)
        writer.vec2("size", self.size)
        writer.vec2("origin", self.origin)
        writer.put("originAnchored", self.origin_anchored)
        writer.put("shape", self.shape.to_dict(writer.field_path("shape")))
        writer.put("color", self.color)
        writer.put("tileX", self.tile_x)
        writer.put("tileY", self.tile_y)
        writer.vec2("tileSize", self.tile_size)
        writer.put("resizeableX", self.resizeable_x)
        writer.put("resizeableY", self.resizeable_y)
        writer.put("rotatable", self.rotatable)
        writer.number("rotationDegrees", self.rotation_degrees)
        writer.put("canFlipX", self.can_flip_x)
        writer.put("canFlipY", self.can_flip_y)
        writer.put("canSetColor", self.can_set_color)
        writer.put("hasNodes", self.has_nodes)
        writer.integer("nodeLimit", self.node_limit)
        writer.integer("nodeDisplay", self.node_display)
        writer.put("nodeGhost", self.node_ghost)
        writer.put("tags", list(self.tags))
        writer.put("values", encode_templates(self.values, writer.field_path("values")))
        writer.opt("texture", self.texture)
        writer.opt("textureImage", self.texture_image)
        return writer.extend(self.extras).result()


# =============================================================================
# Project
# =============================================================================

@dataclass(kw_only=True)
class Project:
    """Root of a project file.

    Sequence fields keep the order of the file: ``layers`` is the display
    order of layers in the editor.
    """

    name: str
    level_paths: list[str]
    background_color: str
    grid_color: str
    angles_radians: bool
    directory_depth: int
    layer_grid_default_size: Vec2[int]
    level_default_size: Vec2[int]
    level_min_size: Vec2[int]
    level_max_size: Vec2[int]
    level_values: list[ValueTemplate]
    default_export_mode: str
    entity_tags: list[str]
    layers: list[LayerTemplate]
    entities: list[EntityTemplate]
    tilesets: list[Tileset]
    ogmo_version: Optional[str] = None
    compact_export: Optional[bool] = None
    external_script: Optional[str] = None
    play_command: Optional[str] = None
    extras: JsonObject = field(default_factory=dict)

    @classmethod
    def from_dict(cls, reader: FieldReader) -> "Project":
        project = cls(
            name=reader.string("name"),
            ogmo_version=reader.opt_string("ogmoVersion"),
            level_paths=reader.string_list("levelPaths"),
            background_color=reader.string("backgroundColor"),
            grid_color=reader.string("gridColor"),
            angles_radians=reader.boolean("anglesRadians"),
            directory_depth=reader.integer("directoryDepth"),
            layer_grid_default_size=reader.vec2_int("layerGridDefaultSize"),
            level_default_size=reader.vec2_int("levelDefaultSize"),
            level_min_size=reader.vec2_int("levelMinSize"),
            level_max_size=reader.vec2_int("levelMaxSize"),
            level_values=decode_templates(reader, "levelValues"),
            default_export_mode=reader.string("defaultExportMode"),
            compact_export=reader.opt_boolean("compactExport"),
            external_script=reader.opt_string("externalScript"),
            play_command=reader.opt_string("playCommand"),
            entity_tags=reader.string_list("entityTags"),
            layers=[LayerTemplate.from_dict(item) for item in reader.objects("layers")],
            entities=[EntityTemplate.from_dict(item) for item in reader.objects("entities")],
            tilesets=[Tileset.from_dict(item) for item in reader.objects("tilesets")],
        )
        project.extras = reader.extras()
        return project

    def to_dict(self, path: str = "$") -> JsonObject:
        writer = FieldWriter(path)
        writer.put("name", self.name)
        writer.opt("ogmoVersion", self.ogmo_version)
        writer.put("levelPaths", list(self.level_paths))
        writer.put("backgroundColor", self.background_color)
        writer.put("gridColor", self.grid_color)
        writer.put("anglesRadians", self.angles_radians)
        writer.integer("directoryDepth", self.directory_depth)
        writer.vec2("layerGridDefaultSize", self.layer_grid_default_size)
        writer.vec2("levelDefaultSize", self.level_default_size)
        writer.vec2("levelMinSize", self.level_min_size)
        writer.vec2("levelMaxSize", self.level_max_size)
        writer.put("levelValues", encode_templates(self.level_values, writer.field_path("levelValues")))
        writer.put("defaultExportMode", self.default_export_mode)
        writer.opt("compactExport", self.compact_export)
        writer.opt("externalScript", self.external_script)
        writer.opt("playCommand", self.play_command)
        writer.put("entityTags", list(self.entity_tags))
        layers_path = writer.field_path("layers")
        writer.put("layers", [t.to_dict(index_path(layers_path, i)) for i, t in enumerate(self.layers)])
        entities_path = writer.field_path("entities")
        writer.put("entities", [
            e.to_dict(index_path(entities_path, i)) for i, e in enumerate(self.entities)
        ])
        tilesets_path = writer.field_path("tilesets")
        writer.put("tilesets", [
            t.to_dict(index_path(tilesets_path, i)) for i, t in enumerate(self.tilesets)
        ])
        return writer.extend(self.extras).result()

    # === LOOKUPS ===

    def layer_template(self, name: str) -> Optional[LayerTemplate]:
        """Return the layer template called ``name``, if any."""
        return find_template(self.layers, name)

    def tileset(self, label: str) -> Optional[Tileset]:
        """Return the tileset labelled ``label``, if any."""
        return next((t for t in self.tilesets if t.label == label), None)

    def entity_template(self, name: str) -> Optional[EntityTemplate]:
        """Return the entity template called ``name``, if any."""
        return next((e for e in self.entities if e.name == name), None)

    # === VALUE TYPES ===

    def level_value_kinds(self) -> dict[str, ValueKind]:
        return template_kinds(self.level_values)

    def entity_value_kinds(self, entity_name: str) -> dict[str, ValueKind]:
        template = self.entity_template(entity_name)
        return template_kinds(template.values) if template else {}

    def decal_value_kinds(self, layer_name: str) -> dict[str, ValueKind]:
        template = self.layer_template(layer_name)
        if isinstance(template, DecalLayerTemplate):
            return template_kinds(template.values)
        return {}


