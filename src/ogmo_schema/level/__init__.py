"""
Level file models: layer instances, entities and decals.
"""

from .models import Level
from .layers import (
    Layer,
    TileLayer,
    TileCoordsLayer,
    GridLayer,
    EntityLayer,
    DecalLayer,
    Tile,
    TileCoord,
    GridCell,
    LAYER_DATA_KEYS,
)
from .entities import Entity, Decal

__all__ = [
    "Level",
    "Layer",
    "TileLayer",
    "TileCoordsLayer",
    "GridLayer",
    "EntityLayer",
    "DecalLayer",
    "Tile",
    "TileCoord",
    "GridCell",
    "LAYER_DATA_KEYS",
    "Entity",
    "Decal",
]
