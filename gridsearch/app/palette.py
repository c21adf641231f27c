# gridsearch/app/palette.py
"""Cell colors (visuals only; no pygame needed)."""

from typing import Dict, Tuple

from gridsearch.core.display import DisplayCategory, display_category
from gridsearch.core.types import CellSnapshot

RGB = Tuple[int, int, int]

# ---- palette ----
WHITE       = (255, 255, 255)
BLACK       = (  0,   0,   0)
START_GREEN = (  0, 255,   0)
END_RED     = (255,   0,   0)
PATH_YELLOW = (255, 255,   0)
EMPTY_GREY  = (100, 100, 100)
BORDER      = WHITE

VISITED_SHADE_PER_STEP = 10

CATEGORY_COLORS: Dict[DisplayCategory, RGB] = {
    DisplayCategory.START:    START_GREEN,
    DisplayCategory.END:      END_RED,
    DisplayCategory.PATH:     PATH_YELLOW,
    DisplayCategory.OBSTACLE: BLACK,
    DisplayCategory.EMPTY:    EMPTY_GREY,
}


def visited_color(cost: float) -> RGB:
    """Red that deepens with distance from the start, capped at full red."""
    return (int(min(255, max(0, cost * VISITED_SHADE_PER_STEP))), 0, 0)


def cell_color(cell: CellSnapshot) -> RGB:
    category = display_category(cell)
    if category is DisplayCategory.VISITED:
        return visited_color(cell.cost_so_far)
    return CATEGORY_COLORS[category]
