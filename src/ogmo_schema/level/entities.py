"""
Entity and decal instances placed on level layers.

Most fields are optional because the editor only writes them when the
template enables the matching feature (resizing, rotation, nodes, ...).
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from ..codec.fields import FieldReader, FieldWriter, JsonObject, index_path, read_vec2_number, write_vec2
from ..common import Vec2
from ..values.models import ValueKinds, Values, decode_values, encode_values


@dataclass(kw_only=True)
class Entity:
    """An entity instance.

    Attributes:
        name: Name of the entity template
        id: Instance id, unique within the level
        export_id: Export id of the entity template (``_eid``)
        x: X position in pixels
        y: Y position in pixels
        width: Only present for resizable entities
        height: Only present for resizable entities
        origin_x: Only present if the template defines an origin
        origin_y: Only present if the template defines an origin
        rotation: Only present for rotatable entities
        flipped_x: Only present for X-flippable entities
        flipped_y: Only present for Y-flippable entities
        nodes: Only present for entities with nodes
        values: Only present for entities with custom values
    """

    name: str
    id: int
    export_id: str
    x: float
    y: float
    width: Optional[float] = None
    height: Optional[float] = None
    origin_x: Optional[float] = None
    origin_y: Optional[float] = None
    rotation: Optional[float] = None
    flipped_x: Optional[bool] = None
    flipped_y: Optional[bool] = None
    nodes: Optional[list[Vec2[Any]]] = None
    values: Optional[Values] = None
    extras: JsonObject = field(default_factory=dict)

    @classmethod
    def from_dict(cls, reader: FieldReader, kinds: Optional[ValueKinds] = None) -> "Entity":
        nodes = None
        if reader.has("nodes"):
            nodes = [read_vec2_number(node) for node in reader.objects("nodes")]
        values_reader = reader.opt_obj("values")

        entity = cls(
            name=reader.string("name"),
            id=reader.integer("id"),
            export_id=reader.string("_eid"),
            x=reader.number("x"),
            y=reader.number("y"),
            width=reader.opt_number("width"),
            height=reader.opt_number("height"),
            origin_x=reader.opt_number("originX"),
            origin_y=reader.opt_number("originY"),
            rotation=reader.opt_number("rotation"),
            flipped_x=reader.opt_boolean("flippedX"),
            flipped_y=reader.opt_boolean("flippedY"),
            nodes=nodes,
            values=decode_values(values_reader, kinds) if values_reader else None,
        )
        entity.extras = reader.extras()
        return entity

    def to_dict(self, path: str = "$") -> JsonObject:
        writer = FieldWriter(path)
        writer.put("name", self.name)
        writer.integer("id", self.id)
        writer.put("_eid", self.export_id)
        writer.number("x", self.x)
        writer.number("y", self.y)
        writer.opt_number("width", self.width)
        writer.opt_number("height", self.height)
        writer.opt_number("originX", self.origin_x)
        writer.opt_number("originY", self.origin_y)
        writer.opt_number("rotation", self.rotation)
        writer.opt("flippedX", self.flipped_x)
        writer.opt("flippedY", self.flipped_y)
        if self.nodes is not None:
            nodes_path = writer.field_path("nodes")
            writer.put("nodes", [
                write_vec2(n, index_path(nodes_path, i))
                for i, n in enumerate(self.nodes)
            ])
        if self.values is not None:
            writer.put("values", encode_values(self.values, writer.field_path("values")))
        return writer.extend(self.extras).result()


@dataclass(kw_only=True)
class Decal:
    """A decal instance. ``texture`` is relative to the layer's folder."""

    x: float
    y: float
    texture: str
    rotation: Optional[float] = None
    scale_x: Optional[float] = None
    scale_y: Optional[float] = None
    values: Optional[Values] = None
    extras: JsonObject = field(default_factory=dict)

    @classmethod
    def from_dict(cls, reader: FieldReader, kinds: Optional[ValueKinds] = None) -> "Decal":
        values_reader = reader.opt_obj("values")
        decal = cls(
            x=reader.number("x"),
            y=reader.number("y"),
            texture=reader.string("texture"),
            rotation=reader.opt_number("rotation"),
            scale_x=reader.opt_number("scaleX"),
            scale_y=reader.opt_number("scaleY"),
            values=decode_values(values_reader, kinds) if values_reader else None,
        )
        decal.extras = reader.extras()
        return decal

    def to_dict(self, path: str = "$") -> JsonObject:
        writer = FieldWriter(path)
        writer.number("x", self.x)
        writer.number("y", self.y)
        writer.put("texture", self.texture)
        writer.opt_number("rotation", self.rotation)
        writer.opt_number("scaleX", self.scale_x)
        writer.opt_number("scaleY", self.scale_y)
        if self.values is not None:
            writer.put("values", encode_values(self.values, writer.field_path("values")))
        return writer.extend(self.extras).result()
