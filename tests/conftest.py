"""Shared fixtures for ogmo_schema tests."""

from pathlib import Path
from typing import Any

import pytest

from ogmo_schema import Level, Project, decode_level, decode_project

DATA_DIR = Path(__file__).parent / "data"
PROJECT_FILE = DATA_DIR / "test.ogmo"
LEVELS_DIR = DATA_DIR / "levels"


@pytest.fixture
def project_bytes() -> bytes:
    return PROJECT_FILE.read_bytes()


@pytest.fixture
def level_bytes() -> bytes:
    return (LEVELS_DIR / "uno.json").read_bytes()


@pytest.fixture
def project(project_bytes: bytes) -> Project:
    return decode_project(project_bytes)


@pytest.fixture
def level(level_bytes: bytes, project: Project) -> Level:
    return decode_level(level_bytes, project)


def layer_dict(**fields: Any) -> dict[str, Any]:
    """Build a minimal layer instance with the given data fields."""
    layer: dict[str, Any] = {
        "name": "Layer",
        "_eid": "1",
        "offsetX": 0,
        "offsetY": 0,
        "gridCellWidth": 16,
        "gridCellHeight": 16,
        "gridCellsX": 2,
        "gridCellsY": 1,
    }
    layer.update(fields)
    return layer


def level_dict(*layers: dict[str, Any], **fields: Any) -> dict[str, Any]:
    """Build a minimal level around ``layers``."""
    level: dict[str, Any] = {
        "width": 32,
        "height": 16,
        "offsetX": 0,
        "offsetY": 0,
        "layers": list(layers),
    }
    level.update(fields)
    return level
