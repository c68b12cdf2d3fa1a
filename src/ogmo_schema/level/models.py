"""
Data model for Ogmo level files.

A level holds its size, its offset in the world and one layer instance per
layer template of the project, in the project's layer order.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from ..codec.fields import FieldReader, FieldWriter, JsonObject, index_path
from ..values.models import ValueKinds, Values, decode_values, encode_values
from .layers import Layer

if TYPE_CHECKING:
    from ..project.models import Project


@dataclass(kw_only=True)
class Level:
    """Root of a level file.

    Attributes:
        width: Level width in pixels
        height: Level height in pixels
        offset_x: Level offset on the X axis, used to place chunked levels
        offset_y: Level offset on the Y axis, used to place chunked levels
        layers: Layer instances in render order
        values: Custom level values; empty when the file declares none
        ogmo_version: Editor version that wrote the file, if recorded
    """

    width: float
    height: float
    offset_x: float
    offset_y: float
    layers: list[Layer]
    values: Values = field(default_factory=dict)
    ogmo_version: Optional[str] = None
    extras: JsonObject = field(default_factory=dict)

    @classmethod
    def from_dict(
        cls,
        reader: FieldReader,
        project: Optional["Project"] = None,
        value_kinds: Optional[ValueKinds] = None,
    ) -> "Level":
        """Decode a level.

        Args:
            reader: Reader over the level document
            project: When given, values are typed through the project's templates
            value_kinds: Declared kinds for level values. They take precedence
                over the project's templates.
        """
        values_reader = reader.opt_obj("values")
        level_kinds = dict(project.level_value_kinds()) if project else {}
        if value_kinds:
            level_kinds.update(value_kinds)
        level = cls(
            ogmo_version=reader.opt_string("ogmoVersion"),
            width=reader.number("width"),
            height=reader.number("height"),
            offset_x=reader.number("offsetX"),
            offset_y=reader.number("offsetY"),
            layers=[Layer.from_dict(item, project) for item in reader.objects("layers")],
            values=decode_values(values_reader, level_kinds or None) if values_reader else {},
        )
        level.extras = reader.extras()
        return level

    def to_dict(self, path: str = "$") -> JsonObject:
        writer = FieldWriter(path)
        writer.opt("ogmoVersion", self.ogmo_version)
        writer.number("width", self.width)
        writer.number("height", self.height)
        writer.number("offsetX", self.offset_x)
        writer.number("offsetY", self.offset_y)
        layers_path = writer.field_path("layers")
        writer.put("layers", [
            layer.to_dict(index_path(layers_path, i)) for i, layer in enumerate(self.layers)
        ])
        writer.put("values", encode_values(self.values, writer.field_path("values")))
        return writer.extend(self.extras).result()

    def layer(self, name: str) -> Optional[Layer]:
        """Return the first layer called ``name``, if any."""
        return next((layer for layer in self.layers if layer.name == name), None)
