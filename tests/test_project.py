"""Tests for project files: layer templates, entity templates and tilesets."""

import base64
import io
from typing import Any

import orjson
import pytest
from PIL import Image

from ogmo_schema import Project, decode_project, dumps_project, encode_project
from ogmo_schema.codec.fields import FieldReader
from ogmo_schema.common import ArrayMode, ExportMode, LayerKind, Vec2
from ogmo_schema.errors import AmbiguousVariantError, UnknownVariantError, UnpackMismatchError
from ogmo_schema.project import (
    DecalLayerTemplate,
    EntityLayerTemplate,
    GridLayerTemplate,
    LayerTemplate,
    TileLayerTemplate,
    Tileset,
)
from ogmo_schema.values import ColorTemplate, ValueKind


def template_dict(**fields: Any) -> dict[str, Any]:
    template: dict[str, Any] = {
        "name": "Layer",
        "gridSize": {"x": 8, "y": 8},
        "exportID": "42",
    }
    template.update(fields)
    return template


def minimal_project_dict() -> dict[str, Any]:
    """A project with every required key and none of the optional ones."""
    return {
        "name": "Bare",
        "levelPaths": ["."],
        "backgroundColor": "#282c34ff",
        "gridColor": "#3c4049cc",
        "anglesRadians": True,
        "directoryDepth": 5,
        "layerGridDefaultSize": {"x": 8, "y": 8},
        "levelDefaultSize": {"x": 320, "y": 240},
        "levelMinSize": {"x": 128, "y": 128},
        "levelMaxSize": {"x": 4096, "y": 4096},
        "levelValues": [{"name": "flag", "definition": "Boolean", "defaults": False}],
        "defaultExportMode": ".json",
        "entityTags": [],
        "layers": [],
        "entities": [{
            "exportID": "1",
            "name": "spawn",
            "limit": -1,
            "size": {"x": 8, "y": 8},
            "origin": {"x": 0, "y": 0},
            "originAnchored": True,
            "shape": {"label": "Rectangle", "points": [{"x": 0, "y": 0}, {"x": 8, "y": 0}]},
            "color": "#ff0000ff",
            "tileX": False,
            "tileY": False,
            "tileSize": {"x": 8, "y": 8},
            "resizeableX": False,
            "resizeableY": False,
            "rotatable": False,
            "rotationDegrees": 360,
            "canFlipX": False,
            "canFlipY": False,
            "canSetColor": False,
            "hasNodes": False,
            "nodeLimit": 0,
            "nodeDisplay": 0,
            "nodeGhost": True,
            "tags": [],
            "values": [],
        }],
        "tilesets": [{
            "label": "Terrain",
            "path": "terrain.png",
            "image": "",
            "tileWidth": 8,
            "tileHeight": 8,
            "tileSeparationX": 0,
            "tileSeparationY": 0,
        }],
    }


def png_data_url(width: int, height: int) -> str:
    buffer = io.BytesIO()
    Image.new("RGBA", (width, height), (255, 0, 0, 255)).save(buffer, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode("ascii")


def make_tileset(**fields: Any) -> Tileset:
    values: dict[str, Any] = {
        "label": "Terrain",
        "path": "terrain.png",
        "image": "",
        "tile_width": 16,
        "tile_height": 16,
        "tile_separation_x": 0,
        "tile_separation_y": 0,
    }
    values.update(fields)
    return Tileset(**values)


class TestProjectDecoding:
    """Test decoding the sample project."""

    def test_header_fields(self, project: Project) -> None:
        assert project.name == "Sample Project"
        assert project.ogmo_version == "3.4.0"
        assert project.level_paths == ["levels"]
        assert project.directory_depth == 5
        assert project.level_default_size == Vec2(320, 240)
        assert project.compact_export is False

    def test_layer_order_and_kinds(self, project: Project) -> None:
        """Test layer templates keep file order and get the right variant."""
        assert [t.name for t in project.layers] == ["Tiles", "Collision", "Entities", "Decals"]
        assert [t.kind for t in project.layers] == [
            LayerKind.TILE,
            LayerKind.GRID,
            LayerKind.ENTITY,
            LayerKind.DECAL,
        ]

    def test_layer_template_fields(self, project: Project) -> None:
        tiles = project.layers[0]
        assert isinstance(tiles, TileLayerTemplate)
        assert tiles.export_mode is ExportMode.IDS
        assert tiles.array_mode is ArrayMode.ONE
        assert tiles.default_tileset == "Terrain"

        collision = project.layers[1]
        assert isinstance(collision, GridLayerTemplate)
        assert collision.array_mode is ArrayMode.TWO
        assert list(collision.legend) == ["0", "1"]

        entities = project.layers[2]
        assert isinstance(entities, EntityLayerTemplate)
        assert entities.excluded_tags == ["hidden"]

        decals = project.layers[3]
        assert isinstance(decals, DecalLayerTemplate)
        assert decals.include_image_sequence is True
        assert isinstance(decals.values[0], ColorTemplate)

    def test_entity_template(self, project: Project) -> None:
        player = project.entity_template("player")
        assert player is not None
        assert player.limit == 1
        assert player.origin == Vec2(8, 8)
        assert player.shape.label == "Rectangle"
        assert len(player.shape.points) == 6
        assert player.rotation_degrees == 360
        assert [v.name for v in player.values] == ["health", "speed", "team"]
        assert player.texture == "entities/player.png"

    def test_lookups(self, project: Project) -> None:
        assert isinstance(project.layer_template("Collision"), GridLayerTemplate)
        assert project.layer_template("Nope") is None
        tileset = project.tileset("Terrain")
        assert tileset is not None
        assert tileset.tile_margin_x == 0
        assert project.tileset("Nope") is None
        assert project.entity_template("ghost") is None

    def test_value_kinds(self, project: Project) -> None:
        """Test declared value types are exposed per owner."""
        kinds = project.level_value_kinds()
        assert kinds["tint"] is ValueKind.COLOR
        assert kinds["notes"] is ValueKind.TEXT
        assert project.entity_value_kinds("player")["team"] is ValueKind.ENUM
        assert project.entity_value_kinds("ghost") == {}
        assert project.decal_value_kinds("Decals") == {"glow": ValueKind.COLOR}
        assert project.decal_value_kinds("Tiles") == {}

    def test_template_unpack(self, project: Project) -> None:
        assert project.layers[0].unpack_as(LayerKind.TILE) is project.layers[0]
        with pytest.raises(UnpackMismatchError):
            project.layers[0].unpack_as(LayerKind.GRID)


class TestLayerTemplateDiscrimination:
    """Test how layer templates pick their kind."""

    def test_definition_wins(self) -> None:
        """Test an explicit definition is used even with foreign marker keys."""
        template = LayerTemplate.from_dict(FieldReader(template_dict(
            definition="entity",
            requiredTags=[],
            excludedTags=[],
            folder="decals",
        )))
        assert isinstance(template, EntityLayerTemplate)
        # Unread keys are kept rather than lost
        assert template.extras == {"folder": "decals"}

    def test_inferred_from_marker(self) -> None:
        """Test a template without definition is inferred from its keys."""
        template = LayerTemplate.from_dict(FieldReader(template_dict(
            arrayMode=0,
            legend={"0": "#000000ff"},
        )))
        assert isinstance(template, GridLayerTemplate)
        assert template.to_dict()["definition"] == "grid"

    def test_ambiguous_markers(self) -> None:
        with pytest.raises(AmbiguousVariantError) as exc_info:
            LayerTemplate.from_dict(FieldReader(
                template_dict(defaultTileset="Terrain", folder="decals"), "$.layers[1]"
            ))
        assert exc_info.value.path == "$.layers[1]"
        assert exc_info.value.candidates == ["defaultTileset", "folder"]

    def test_no_markers(self) -> None:
        with pytest.raises(UnknownVariantError):
            LayerTemplate.from_dict(FieldReader(template_dict()))

    @pytest.mark.parametrize("definition", ["bogus", "tileCoords"])
    def test_unknown_definition(self, definition: str) -> None:
        """Test definitions that name no layer template kind."""
        with pytest.raises(UnknownVariantError) as exc_info:
            LayerTemplate.from_dict(FieldReader(template_dict(definition=definition)))
        assert exc_info.value.path == "$.definition"

    def test_invalid_export_mode(self) -> None:
        with pytest.raises(UnknownVariantError) as exc_info:
            LayerTemplate.from_dict(FieldReader(template_dict(
                definition="tile", exportMode=7, arrayMode=0, defaultTileset="Terrain"
            )))
        assert exc_info.value.path == "$.exportMode"


class TestTileset:
    """Test tileset slicing helpers."""

    def test_tile_coords_plain_grid(self) -> None:
        """Test tiles are yielded left to right, top to bottom."""
        tileset = make_tileset()
        assert list(tileset.tile_coords(32, 32)) == [
            Vec2(0, 0), Vec2(16, 0), Vec2(0, 16), Vec2(16, 16)
        ]

    def test_tile_coords_margin_and_separation(self) -> None:
        """Test margins offset the grid and trailing separation is not required."""
        tileset = make_tileset(
            tile_separation_x=2, tile_separation_y=2, tile_margin_x=1, tile_margin_y=1
        )
        assert list(tileset.tile_coords(35, 17)) == [Vec2(1, 1), Vec2(19, 1)]

    def test_tile_coords_partial_tiles_ignored(self) -> None:
        tileset = make_tileset()
        assert list(tileset.tile_coords(40, 15)) == []

    def test_decode_image_and_rects(self) -> None:
        """Test the embedded image is decoded with Pillow and sliced."""
        tileset = make_tileset(image=png_data_url(32, 16))
        image = tileset.decode_image()
        assert image.size == (32, 16)
        assert tileset.tile_rects() == [(0, 0, 16, 16), (16, 0, 32, 16)]

    def test_decode_image_invalid(self) -> None:
        tileset = make_tileset(image="data:image/png;base64,!!!")
        with pytest.raises(ValueError, match="Terrain"):
            tileset.decode_image()

    def test_decode_image_not_an_image(self) -> None:
        payload = base64.b64encode(b"plain text").decode("ascii")
        tileset = make_tileset(image=f"data:image/png;base64,{payload}")
        with pytest.raises(ValueError):
            tileset.decode_image()


class TestProjectRoundTrip:
    """Test projects survive decode and encode."""

    def test_reencode_matches_source(self, project_bytes: bytes) -> None:
        project = decode_project(project_bytes)
        assert orjson.loads(dumps_project(project)) == orjson.loads(project_bytes)

    def test_sample_project_decodes_to_equal_model(self, project: Project) -> None:
        """Test the encoded sample project decodes back to an equal model."""
        assert decode_project(encode_project(project)) == project

    def test_project_without_optional_fields(self) -> None:
        """Test a project that omits every optional field stays that way."""
        project = decode_project(minimal_project_dict())
        assert project.ogmo_version is None
        assert project.compact_export is None
        assert project.external_script is None
        assert project.play_command is None
        assert project.tilesets[0].tile_margin_x is None
        assert project.entities[0].texture is None
        assert project.level_values[0].display is None

        encoded = encode_project(project)
        assert encoded == minimal_project_dict()
        assert decode_project(encoded) == project

    def test_vec2_unknown_keys_kept(self) -> None:
        """Test keys next to x and y survive on sizes and shape points."""
        source = minimal_project_dict()
        source["levelDefaultSize"]["z"] = 1
        source["entities"][0]["shape"]["points"][1]["curve"] = 0.5

        project = decode_project(source)
        assert project.level_default_size == Vec2(320, 240, {"z": 1})
        assert project.entities[0].shape.points[1].extras == {"curve": 0.5}

        encoded = encode_project(project)
        assert encoded["levelDefaultSize"] == {"x": 320, "y": 240, "z": 1}
        assert encoded["entities"][0]["shape"]["points"][1] == {"x": 8, "y": 0, "curve": 0.5}


class TestLayerTemplateBase:
    """Test LayerTemplate variants must supply their own codec hooks."""

    def test_variant_without_encode(self) -> None:
        class Unfinished(LayerTemplate):
            kind = LayerKind.GRID

            @classmethod
            def _decode(cls, reader, **common):  # type: ignore[no-untyped-def]
                return cls(**common)

        with pytest.raises(TypeError):
            Unfinished(name="x", grid_size=Vec2(8, 8), export_id="1")  # type: ignore[abstract]
