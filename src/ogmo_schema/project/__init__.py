"""
Project file models: tilesets, layer templates and entity templates.
"""

from .models import Project, Tileset, EntityTemplate, Shape
from .layers import (
    LayerTemplate,
    TileLayerTemplate,
    GridLayerTemplate,
    EntityLayerTemplate,
    DecalLayerTemplate,
    TEMPLATE_MARKER_KEYS,
)

__all__ = [
    "Project",
    "Tileset",
    "EntityTemplate",
    "Shape",
    "LayerTemplate",
    "TileLayerTemplate",
    "GridLayerTemplate",
    "EntityLayerTemplate",
    "DecalLayerTemplate",
    "TEMPLATE_MARKER_KEYS",
]
