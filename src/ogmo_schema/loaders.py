"""
File loaders for Ogmo projects and levels.

Thin wrappers around the codec: they read or write whole files and leave
all schema work to `decode_*`/`dumps_*`. Paths inside the documents
(level paths, tileset images, decal folders) are relative to the project
file and are not resolved here.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from .codec.api import (
    CodecOptions,
    decode_level,
    decode_project,
    dumps_level,
    dumps_project,
)
from .level.models import Level
from .project.models import Project
from .values.models import ValueKinds

PathLike = Union[str, Path]


class OgmoFileLoader:
    """Loads and saves project and level files."""

    def __init__(self, options: Optional[CodecOptions] = None):
        self.options = options or CodecOptions()
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def load_project(self, path: PathLike) -> Project:
        """Load a project from an ``.ogmo`` file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            SchemaError: If the file doesn't match the schema
        """
        path = Path(path)
        self.logger.info(f"Loading project from: {path}")
        with path.open("rb") as f:  # orjson works with bytes
            data = f.read()
        return decode_project(data, self.options)

    def load_level(
        self,
        path: PathLike,
        project: Optional[Project] = None,
        value_kinds: Optional[ValueKinds] = None,
    ) -> Level:
        """Load a level file, optionally typing its values through ``project``
        and ``value_kinds``.

        Raises:
            FileNotFoundError: If the file doesn't exist
            SchemaError: If the file doesn't match the schema
        """
        path = Path(path)
        self.logger.info(f"Loading level from: {path}")
        with path.open("rb") as f:
            data = f.read()
        return decode_level(data, project, self.options, value_kinds)

    def save_project(self, project: Project, path: PathLike) -> None:
        path = Path(path)
        data = dumps_project(project, self.options)
        with path.open("wb") as f:
            f.write(data)
        self.logger.info(f"Saved project '{project.name}' to: {path}")

    def save_level(self, level: Level, path: PathLike) -> None:
        path = Path(path)
        data = dumps_level(level, self.options)
        with path.open("wb") as f:
            f.write(data)
        self.logger.info(f"Saved level to: {path}")

    def level_files(self, project: Project, project_path: PathLike) -> list[Path]:
        """List the level files found under the project's level paths.

        Honours the project's ``directory_depth``. Missing folders are
        skipped with a warning.
        """
        root = Path(project_path).parent
        found: list[Path] = []
        for level_path in project.level_paths:
            folder = (root / level_path).resolve()
            if not folder.is_dir():
                self.logger.warning(f"Level path does not exist: {folder}")
                continue
            for file in sorted(folder.rglob("*.json")):
                depth = len(file.relative_to(folder).parts) - 1
                if depth <= project.directory_depth:
                    found.append(file)
        return found


def load_project(path: PathLike, options: Optional[CodecOptions] = None) -> Project:
    """Load a project file. See `OgmoFileLoader.load_project`."""
    return OgmoFileLoader(options).load_project(path)


def load_level(
    path: PathLike,
    project: Optional[Project] = None,
    options: Optional[CodecOptions] = None,
    value_kinds: Optional[ValueKinds] = None,
) -> Level:
    """Load a level file. See `OgmoFileLoader.load_level`."""
    return OgmoFileLoader(options).load_level(path, project, value_kinds)


def save_project(project: Project, path: PathLike, options: Optional[CodecOptions] = None) -> None:
    OgmoFileLoader(options).save_project(project, path)


def save_level(level: Level, path: PathLike, options: Optional[CodecOptions] = None) -> None:
    OgmoFileLoader(options).save_level(level, path)
