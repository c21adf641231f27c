# gridsearch/core/display.py
#!/usr/bin/env python3
from enum import Enum

from gridsearch.core.types import CellSnapshot


class DisplayCategory(Enum):
    START = "start"
    END = "end"
    PATH = "path"
    VISITED = "visited"
    OBSTACLE = "obstacle"
    EMPTY = "empty"


def display_category(cell: CellSnapshot) -> DisplayCategory:
    """Pick the role a cell is drawn as; earlier checks win."""
    if cell.is_start:
        return DisplayCategory.START
    if cell.is_end:
        return DisplayCategory.END
    if cell.is_on_path:
        return DisplayCategory.PATH
    if cell.is_visited:
        return DisplayCategory.VISITED
    if cell.is_obstacle:
        return DisplayCategory.OBSTACLE
    return DisplayCategory.EMPTY
