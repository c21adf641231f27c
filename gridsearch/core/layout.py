# gridsearch/core/layout.py
#!/usr/bin/env python3
"""
Grid layouts: where the walls are, where the search starts and ends.

A layout is plain data; build_grid() turns it into a fresh SearchGrid, so a
restart is just another build_grid() call.

JSON map format:
    {
      "name": "two_walls",
      "width": 20, "height": 12,
      "start": [1, 1], "goal": [18, 10],
      "obstacles": [[5, 0], [5, 1], ...]       # or
      "cells": [[0, 0, 1, ...], ...]           # [row][col], 1 = obstacle
    }
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, FrozenSet

from gridsearch.core.search_grid import SearchGrid
from gridsearch.core.types import ConfigurationError, Coord

logger = logging.getLogger(__name__)

# built-in scene: 1920x1080 px window, 20 px boxes
DEFAULT_WINDOW_WIDTH = 1920
DEFAULT_WINDOW_HEIGHT = 1080
DEFAULT_CELL_SIZE = 20
DEFAULT_START: Coord = (10, 10)
DEFAULT_END: Coord = (30, 50)
DEFAULT_WALL_COLUMNS = (5, 15)
DEFAULT_WALL_HEIGHT = 30  # rows 0..29


@dataclass(frozen=True)
class DisplayConfig:
    width_px: int = DEFAULT_WINDOW_WIDTH
    height_px: int = DEFAULT_WINDOW_HEIGHT
    cell_size: int = DEFAULT_CELL_SIZE

    def __post_init__(self):
        if self.cell_size < 1:
            raise ConfigurationError(f"cell size must be positive, got {self.cell_size}")
        if self.columns < 1 or self.rows < 1:
            raise ConfigurationError(
                f"{self.width_px}x{self.height_px} px with {self.cell_size} px cells leaves no grid")

    @property
    def columns(self) -> int:
        return self.width_px // self.cell_size

    @property
    def rows(self) -> int:
        return self.height_px // self.cell_size


@dataclass(frozen=True)
class GridLayout:
    columns: int
    rows: int
    start: Coord
    end: Coord
    obstacles: FrozenSet[Coord] = field(default_factory=frozenset)
    name: str = "custom"

    def build_grid(self) -> SearchGrid:
        return SearchGrid(self.columns, self.rows, self.start, self.end, self.obstacles)


def default_walls(rows: int) -> List[Coord]:
    walls: List[Coord] = []
    for y in range(min(rows, DEFAULT_WALL_HEIGHT)):
        for x in DEFAULT_WALL_COLUMNS:
            walls.append((x, y))
    return walls


def default_layout(display: DisplayConfig = DisplayConfig()) -> GridLayout:
    """The built-in scene: two half-height walls between start and end."""
    return GridLayout(
        columns=display.columns,
        rows=display.rows,
        start=DEFAULT_START,
        end=DEFAULT_END,
        obstacles=frozenset(default_walls(display.rows)),
        name="default",
    )


def _coord(value, what: str, path: Path) -> Coord:
    try:
        x, y = value
        return (int(x), int(y))
    except (TypeError, ValueError) as ex:
        raise ConfigurationError(f"{path}: bad {what} {value!r}") from ex


def parse_layout(data: dict, path: Path = Path("<memory>")) -> GridLayout:
    try:
        width = int(data["width"])
        height = int(data["height"])
        start_raw = data["start"]
        goal_raw = data["goal"] if "goal" in data else data["end"]
    except KeyError as ex:
        raise ConfigurationError(f"{path}: missing key {ex.args[0]!r}") from ex
    except (TypeError, ValueError) as ex:
        raise ConfigurationError(f"{path}: bad dimensions") from ex

    obstacles = set()
    raw_obstacles = data.get("obstacles", [])
    if not isinstance(raw_obstacles, list):
        raise ConfigurationError(f"{path}: obstacles must be a list, got {raw_obstacles!r}")
    for o in raw_obstacles:
        obstacles.add(_coord(o, "obstacle", path))

    cells = data.get("cells")
    if cells is not None:
        if not isinstance(cells, list) or not all(isinstance(r, list) for r in cells):
            raise ConfigurationError(f"{path}: cells must be a list of rows")
        if len(cells) != height or any(len(r) != width for r in cells):
            raise ConfigurationError(f"{path}: cells size mismatch, expected {width}x{height}")
        for row, values in enumerate(cells):
            for col, v in enumerate(values):
                if v == 1:
                    obstacles.add((col, row))

    return GridLayout(
        columns=width,
        rows=height,
        start=_coord(start_raw, "start", path),
        end=_coord(goal_raw, "goal", path),
        obstacles=frozenset(obstacles),
        name=str(data.get("name", path.stem)),
    )


def load_layout(path: Path) -> GridLayout:
    path = Path(path)
    try:
        with open(path, "r") as f:
            data = json.load(f)
    except OSError as ex:
        raise ConfigurationError(f"cannot read layout {path}: {ex}") from ex
    except json.JSONDecodeError as ex:
        raise ConfigurationError(f"{path}: invalid JSON: {ex}") from ex
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path}: expected a JSON object")
    layout = parse_layout(data, path)
    logger.debug("loaded layout %s: %dx%d, %d obstacles",
                 layout.name, layout.columns, layout.rows, len(layout.obstacles))
    return layout
