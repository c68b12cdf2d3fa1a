"""
Layer instances: the per-level contents of each layer.

All layer kinds share one JSON object shape and are told apart only by
which data key is present. Exactly one of the keys in `LAYER_DATA_KEYS`
must appear; `Layer.from_dict` resolves the variant once and the rest of
the code works with the concrete class.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar, Iterator, Optional, cast

from ..codec.fields import (
    FieldReader,
    FieldWriter,
    JsonObject,
    expect_int_enum,
    expect_int_list,
    expect_list,
    expect_string_list,
    index_path,
)
from ..common import ArrayMode, ExportMode, LayerKind, Vec2
from ..errors import (
    AmbiguousVariantError,
    TypeMismatchError,
    UnknownVariantError,
    UnpackMismatchError,
)
from .entities import Decal, Entity

if TYPE_CHECKING:
    from ..project.models import Project

logger = logging.getLogger(__name__)

# Data key -> (layer kind, storage layout). Keys are mutually exclusive.
LAYER_DATA_KEYS: dict[str, tuple[LayerKind, Optional[ArrayMode]]] = {
    "data": (LayerKind.TILE, ArrayMode.ONE),
    "data2D": (LayerKind.TILE, ArrayMode.TWO),
    "dataCoords": (LayerKind.TILE_COORDS, ArrayMode.ONE),
    "dataCoords2D": (LayerKind.TILE_COORDS, ArrayMode.TWO),
    "grid": (LayerKind.GRID, ArrayMode.ONE),
    "grid2D": (LayerKind.GRID, ArrayMode.TWO),
    "entities": (LayerKind.ENTITY, None),
    "decals": (LayerKind.DECAL, None),
}

EMPTY_TILE = -1


# =============================================================================
# Unpacked cells
# =============================================================================

@dataclass(frozen=True)
class Tile:
    """A tile unpacked from a `TileLayer`. ``id`` is None for empty cells."""

    id: Optional[int]
    grid_position: Vec2[int]
    pixel_position: Vec2[int]


@dataclass(frozen=True)
class TileCoord:
    """A tile unpacked from a `TileCoordsLayer`.

    Attributes:
        grid_coords: Position of the tile inside the tileset, in cells
        pixel_coords: Position of the tile inside the tileset, in pixels
        grid_position: Position of the cell in the layer, in cells
        pixel_position: Position of the cell in the layer, in pixels
    """

    grid_coords: Optional[Vec2[int]]
    pixel_coords: Optional[Vec2[int]]
    grid_position: Vec2[int]
    pixel_position: Vec2[int]


@dataclass(frozen=True)
class GridCell:
    """A grid cell. ``"0"`` means empty unless the layer's legend says otherwise."""

    value: str
    grid_position: Vec2[int]
    pixel_position: Vec2[int]


# =============================================================================
# Layers
# =============================================================================

@dataclass(kw_only=True)
class Layer(ABC):
    """Fields shared by every layer instance.

    Attributes:
        name: Layer name, matching a layer template of the project
        export_id: Export id of the layer template (``_eid``)
        offset_x: Layer offset on the X axis
        offset_y: Layer offset on the Y axis
        grid_cell_width: Width of a grid cell in pixels
        grid_cell_height: Height of a grid cell in pixels
        grid_cells_x: Number of cells on the X axis
        grid_cells_y: Number of cells on the Y axis
    """

    kind: ClassVar[LayerKind]

    name: str
    export_id: str
    offset_x: float
    offset_y: float
    grid_cell_width: int
    grid_cell_height: int
    grid_cells_x: int
    grid_cells_y: int
    extras: JsonObject = field(default_factory=dict)

    @classmethod
    def from_dict(cls, reader: FieldReader, project: Optional["Project"] = None) -> "Layer":
        """Decode a layer instance of any kind.

        Args:
            reader: Reader over the layer object
            project: Optional project used to type entity and decal values

        Raises:
            UnknownVariantError: If no data key is present
            AmbiguousVariantError: If several data keys are present
        """
        data_key = detect_layer_key(reader)
        kind, storage = LAYER_DATA_KEYS[data_key]
        variant = _LAYERS[kind]
        layer = variant._decode(
            reader,
            data_key,
            storage,
            project,
            name=reader.string("name"),
            export_id=reader.string("_eid"),
            offset_x=reader.number("offsetX"),
            offset_y=reader.number("offsetY"),
            grid_cell_width=reader.integer("gridCellWidth"),
            grid_cell_height=reader.integer("gridCellHeight"),
            grid_cells_x=reader.integer("gridCellsX"),
            grid_cells_y=reader.integer("gridCellsY"),
        )
        layer.extras = reader.extras()
        return layer

    @classmethod
    @abstractmethod
    def _decode(
        cls,
        reader: FieldReader,
        data_key: str,
        storage: Optional[ArrayMode],
        project: Optional["Project"],
        **common: Any,
    ) -> "Layer":
        ...

    def to_dict(self, path: str = "$") -> JsonObject:
        writer = FieldWriter(path)
        writer.put("name", self.name)
        writer.put("_eid", self.export_id)
        writer.number("offsetX", self.offset_x)
        writer.number("offsetY", self.offset_y)
        writer.integer("gridCellWidth", self.grid_cell_width)
        writer.integer("gridCellHeight", self.grid_cell_height)
        writer.integer("gridCellsX", self.grid_cells_x)
        writer.integer("gridCellsY", self.grid_cells_y)
        self._encode(writer)
        return writer.extend(self.extras).result()

    @abstractmethod
    def _encode(self, writer: FieldWriter) -> None:
        ...

    # === UNPACK HELPERS ===

    def unpack_as(self, expected: LayerKind) -> "Layer":
        """Return this layer if it is of kind ``expected``.

        Raises:
            UnpackMismatchError: If the layer is of another kind
        """
        if self.kind is not expected:
            raise UnpackMismatchError(expected, self.kind)
        return self

    def as_tile(self) -> "TileLayer":
        return cast(TileLayer, self.unpack_as(LayerKind.TILE))

    def as_tile_coords(self) -> "TileCoordsLayer":
        return cast(TileCoordsLayer, self.unpack_as(LayerKind.TILE_COORDS))

    def as_grid(self) -> "GridLayer":
        return cast(GridLayer, self.unpack_as(LayerKind.GRID))

    def as_entities(self) -> "EntityLayer":
        return cast(EntityLayer, self.unpack_as(LayerKind.ENTITY))

    def as_decals(self) -> "DecalLayer":
        return cast(DecalLayer, self.unpack_as(LayerKind.DECAL))

    # === POSITIONS ===

    def _flat_position(self, index: int) -> tuple[int, int]:
        columns = self.grid_cells_x if self.grid_cells_x > 0 else 1
        return index % columns, index // columns

    def _positions(self, grid_x: int, grid_y: int) -> tuple[Vec2[int], Vec2[int]]:
        return (
            Vec2(grid_x, grid_y),
            Vec2(grid_x * self.grid_cell_width, grid_y * self.grid_cell_height),
        )

    def _cells(self, data: list[Any], storage: ArrayMode) -> Iterator[tuple[Any, int, int]]:
        """Yield ``(cell, grid_x, grid_y)`` for flat or 2D storage."""
        if storage == ArrayMode.ONE:
            for i, cell in enumerate(data):
                grid_x, grid_y = self._flat_position(i)
                yield cell, grid_x, grid_y
        else:
            for grid_y, row in enumerate(data):
                for grid_x, cell in enumerate(row):
                    yield cell, grid_x, grid_y


def detect_layer_key(reader: FieldReader) -> str:
    """Return the single data key that identifies a layer's kind."""
    found = reader.present(*LAYER_DATA_KEYS)
    if not found:
        raise UnknownVariantError(
            reader.path, f"layer has none of the keys {', '.join(LAYER_DATA_KEYS)}"
        )
    if len(found) > 1:
        raise AmbiguousVariantError(reader.path, found)
    return found[0]


def _storage_key(storage: ArrayMode, flat_key: str) -> str:
    return flat_key if storage == ArrayMode.ONE else f"{flat_key}2D"


def _read_rows(raw: Any, path: str, read_row: Any) -> list[Any]:
    rows = expect_list(raw, path)
    return [read_row(row, index_path(path, y)) for y, row in enumerate(rows)]


def _read_echo_modes(reader: FieldReader) -> tuple[Optional[ExportMode], Optional[ArrayMode]]:
    """Read the optional ``exportMode``/``arrayMode`` echoes of newer editors."""
    export_mode = reader.opt_raw("exportMode")
    array_mode = reader.opt_raw("arrayMode")
    return (
        None if export_mode is None
        else expect_int_enum(ExportMode, export_mode, reader.field_path("exportMode")),
        None if array_mode is None
        else expect_int_enum(ArrayMode, array_mode, reader.field_path("arrayMode")),
    )


@dataclass(kw_only=True)
class TileLayer(Layer):
    """Tile layer storing tile ids (``-1`` marks an empty cell).

    ``storage`` records whether the ids came from ``data`` (flat) or
    ``data2D`` (rows); the same key is written back.
    """

    kind: ClassVar[LayerKind] = LayerKind.TILE
    tileset: str
    data: list[Any]
    storage: ArrayMode = ArrayMode.ONE
    export_mode: Optional[ExportMode] = None
    array_mode: Optional[ArrayMode] = None

    @classmethod
    def _decode(cls, reader, data_key, storage, project, **common) -> "TileLayer":  # type: ignore[override]
        path = reader.field_path(data_key)
        raw = reader.raw(data_key)
        if storage == ArrayMode.ONE:
            data: list[Any] = expect_int_list(raw, path)
        else:
            data = _read_rows(raw, path, expect_int_list)
        export_mode, array_mode = _read_echo_modes(reader)
        return cls(
            **common,
            tileset=reader.string("tileset"),
            data=data,
            storage=cast(ArrayMode, storage),
            export_mode=export_mode,
            array_mode=array_mode,
        )

    def _encode(self, writer: FieldWriter) -> None:
        writer.put("tileset", self.tileset)
        writer.int_tree(_storage_key(self.storage, "data"), self.data)
        writer.opt("exportMode", None if self.export_mode is None else int(self.export_mode))
        writer.opt("arrayMode", None if self.array_mode is None else int(self.array_mode))

    def unpack(self) -> Iterator[Tile]:
        """Yield every cell of the layer, empty ones included."""
        for value, grid_x, grid_y in self._cells(self.data, self.storage):
            grid_position, pixel_position = self._positions(grid_x, grid_y)
            yield Tile(
                id=None if value == EMPTY_TILE else value,
                grid_position=grid_position,
                pixel_position=pixel_position,
            )


def _expect_coord(value: Any, path: str) -> list[int]:
    coord = expect_int_list(value, path)
    if len(coord) == 2 or coord == [EMPTY_TILE]:
        return coord
    raise TypeMismatchError(path, "[u, v] or [-1]", f"array of length {len(coord)}")


def _expect_coord_row(value: Any, path: str) -> list[list[int]]:
    return _read_rows(value, path, _expect_coord)


@dataclass(kw_only=True)
class TileCoordsLayer(Layer):
    """Tile layer storing tileset cell co-ordinates (``[-1]`` marks an empty cell)."""

    kind: ClassVar[LayerKind] = LayerKind.TILE_COORDS
    tileset: str
    data: list[Any]
    storage: ArrayMode = ArrayMode.ONE
    export_mode: Optional[ExportMode] = None
    array_mode: Optional[ArrayMode] = None

    @classmethod
    def _decode(cls, reader, data_key, storage, project, **common) -> "TileCoordsLayer":  # type: ignore[override]
        path = reader.field_path(data_key)
        raw = reader.raw(data_key)
        if storage == ArrayMode.ONE:
            data: list[Any] = _read_rows(raw, path, _expect_coord)
        else:
            data = _read_rows(raw, path, _expect_coord_row)
        export_mode, array_mode = _read_echo_modes(reader)
        return cls(
            **common,
            tileset=reader.string("tileset"),
            data=data,
            storage=cast(ArrayMode, storage),
            export_mode=export_mode,
            array_mode=array_mode,
        )

    def _encode(self, writer: FieldWriter) -> None:
        writer.put("tileset", self.tileset)
        writer.int_tree(_storage_key(self.storage, "dataCoords"), self.data)
        writer.opt("exportMode", None if self.export_mode is None else int(self.export_mode))
        writer.opt("arrayMode", None if self.array_mode is None else int(self.array_mode))

    def unpack(self) -> Iterator[TileCoord]:
        """Yield every cell of the layer, empty ones included."""
        for coord, grid_x, grid_y in self._cells(self.data, self.storage):
            grid_position, pixel_position = self._positions(grid_x, grid_y)
            if coord[0] == EMPTY_TILE:
                grid_coords = pixel_coords = None
            else:
                grid_coords, pixel_coords = self._positions(coord[0], coord[1])
            yield TileCoord(
                grid_coords=grid_coords,
                pixel_coords=pixel_coords,
                grid_position=grid_position,
                pixel_position=pixel_position,
            )


@dataclass(kw_only=True)
class GridLayer(Layer):
    """Grid layer storing one string per cell."""

    kind: ClassVar[LayerKind] = LayerKind.GRID
    grid: list[Any]
    storage: ArrayMode = ArrayMode.ONE
    array_mode: Optional[ArrayMode] = None

    @classmethod
    def _decode(cls, reader, data_key, storage, project, **common) -> "GridLayer":  # type: ignore[override]
        path = reader.field_path(data_key)
        raw = reader.raw(data_key)
        if storage == ArrayMode.ONE:
            grid: list[Any] = expect_string_list(raw, path)
        else:
            grid = _read_rows(raw, path, expect_string_list)
        array_mode = reader.opt_raw("arrayMode")
        return cls(
            **common,
            grid=grid,
            storage=cast(ArrayMode, storage),
            array_mode=None if array_mode is None
            else expect_int_enum(ArrayMode, array_mode, reader.field_path("arrayMode")),
        )

    def _encode(self, writer: FieldWriter) -> None:
        key = _storage_key(self.storage, "grid")
        if self.storage == ArrayMode.ONE:
            writer.put(key, list(self.grid))
        else:
            writer.put(key, [list(row) for row in self.grid])
        writer.opt("arrayMode", None if self.array_mode is None else int(self.array_mode))

    def unpack(self) -> Iterator[GridCell]:
        for value, grid_x, grid_y in self._cells(self.grid, self.storage):
            grid_position, pixel_position = self._positions(grid_x, grid_y)
            yield GridCell(value=value, grid_position=grid_position, pixel_position=pixel_position)


@dataclass(kw_only=True)
class EntityLayer(Layer):
    """Entity layer. ``entities`` keep their placement order."""

    kind: ClassVar[LayerKind] = LayerKind.ENTITY
    entities: list[Entity]

    @classmethod
    def _decode(cls, reader, data_key, storage, project, **common) -> "EntityLayer":  # type: ignore[override]
        entities: list[Entity] = []
        for item in reader.objects("entities"):
            kinds = None
            if project:
                name = item.string("name")
                if project.entity_template(name) is None:
                    logger.debug(f"No entity template '{name}' for {item.path}, values stay untyped")
                kinds = project.entity_value_kinds(name)
            entities.append(Entity.from_dict(item, kinds))
        return cls(**common, entities=entities)

    def _encode(self, writer: FieldWriter) -> None:
        path = writer.field_path("entities")
        writer.put("entities", [e.to_dict(index_path(path, i)) for i, e in enumerate(self.entities)])


@dataclass(kw_only=True)
class DecalLayer(Layer):
    """Decal layer. ``folder`` holds the decal images, relative to the project."""

    kind: ClassVar[LayerKind] = LayerKind.DECAL
    decals: list[Decal]
    folder: str

    @classmethod
    def _decode(cls, reader, data_key, storage, project, **common) -> "DecalLayer":  # type: ignore[override]
        kinds = project.decal_value_kinds(common["name"]) if project else None
        return cls(
            **common,
            decals=[Decal.from_dict(item, kinds) for item in reader.objects("decals")],
            folder=reader.string("folder"),
        )

    def _encode(self, writer: FieldWriter) -> None:
        path = writer.field_path("decals")
        writer.put("decals", [d.to_dict(index_path(path, i)) for i, d in enumerate(self.decals)])
        writer.put("folder", self.folder)


_LAYERS: dict[LayerKind, type[Layer]] = {
    LayerKind.TILE: TileLayer,
    LayerKind.TILE_COORDS: TileCoordsLayer,
    LayerKind.GRID: GridLayer,
    LayerKind.ENTITY: EntityLayer,
    LayerKind.DECAL: DecalLayer,
}
