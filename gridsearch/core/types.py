# gridsearch/core/types.py
#!/usr/bin/env python3
from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple, Optional, Dict, Any

Coord = Tuple[int, int]  # (col, row)


class ConfigurationError(ValueError):
    """Invalid grid dimensions, start/end placement or layout file."""


class Phase(Enum):
    SEARCHING = "searching"
    TRACING_PATH = "tracing_path"
    IDLE = "idle"


@dataclass(frozen=True)
class CellSnapshot:
    """Read-only view of one cell, enough to pick a display color."""
    col: int
    row: int
    is_start: bool
    is_end: bool
    is_obstacle: bool
    is_visited: bool
    is_on_path: bool
    cost_so_far: float


@dataclass
class StepResult:
    action: str                   # "expanded" | "discarded" | "reached_end" | "traced" | "finished" | "exhausted" | "noop"
    phase: Phase
    current: Optional[Coord] = None
    metrics: Dict[str, Any] = field(default_factory=dict)
