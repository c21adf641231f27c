# gridsearch/core/cell.py
#!/usr/bin/env python3
"""
One grid position and its search state.

Classification flags are fixed at construction. Search state only moves one
way during a run: cost goes down, visited/on-path go from False to True.
The predecessor is an index into the owning grid's cell list, never a
reference to another Cell.
"""

from dataclasses import dataclass
from math import inf
from typing import Optional, Tuple

from gridsearch.core.types import CellSnapshot


@dataclass
class Cell:
    col: int
    row: int
    is_start: bool = False
    is_end: bool = False
    is_obstacle: bool = False

    is_visited: bool = False
    is_on_path: bool = False
    cost_so_far: float = inf
    predecessor: Optional[int] = None  # index into SearchGrid cell storage

    @property
    def coord(self) -> Tuple[int, int]:
        return (self.col, self.row)

    def display_origin(self, cell_size: int) -> Tuple[int, int]:
        """Top-left pixel of this cell for a given cell size."""
        return (self.col * cell_size, self.row * cell_size)

    def try_relax(self, candidate_cost: float, from_index: int) -> bool:
        """Take ``candidate_cost`` via ``from_index`` if it beats the current cost."""
        if candidate_cost < self.cost_so_far:
            self.cost_so_far = candidate_cost
            self.predecessor = from_index
            return True
        return False

    def snapshot(self) -> CellSnapshot:
        return CellSnapshot(
            col=self.col,
            row=self.row,
            is_start=self.is_start,
            is_end=self.is_end,
            is_obstacle=self.is_obstacle,
            is_visited=self.is_visited,
            is_on_path=self.is_on_path,
            cost_so_far=self.cost_so_far,
        )
