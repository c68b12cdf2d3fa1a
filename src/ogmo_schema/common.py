"""Small value types shared by project and level models."""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Generic, TypeVar

T = TypeVar("T", int, float)


@dataclass(frozen=True)
class Vec2(Generic[T]):
    """An X and Y value, stored on disk as ``{"x": ..., "y": ...}``.

    ``extras`` holds any other keys of the source object. It takes part in
    equality but not in hashing.
    """

    x: T
    y: T
    extras: dict[str, Any] = field(default_factory=dict, repr=False, hash=False)


class LayerKind(Enum):
    """Kinds of layers. Project templates use all but ``TILE_COORDS``."""

    TILE = "tile"
    TILE_COORDS = "tileCoords"
    GRID = "grid"
    ENTITY = "entity"
    DECAL = "decal"

    @property
    def label(self) -> str:
        return _LAYER_LABELS[self]


_LAYER_LABELS = {
    LayerKind.TILE: "Tile",
    LayerKind.TILE_COORDS: "TileCoords",
    LayerKind.GRID: "Grid",
    LayerKind.ENTITY: "Entity",
    LayerKind.DECAL: "Decal",
}


class ExportMode(IntEnum):
    """How tile layers store tiles."""

    IDS = 0
    """Tile ids, counting left to right, top to bottom."""

    COORDS = 1
    """Tile co-ordinates inside the tileset, in cells."""


class ArrayMode(IntEnum):
    """Whether layer data is stored as a flat or a 2D array."""

    ONE = 0
    TWO = 1
