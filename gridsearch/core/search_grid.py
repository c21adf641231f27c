# gridsearch/core/search_grid.py
#!/usr/bin/env python3
"""
Incremental best-first (A*) search on a fixed grid, one unit of work per step().

Phases:
- SEARCHING     pop one frontier entry per call; stale entries cost a call too.
- TRACING_PATH  walk predecessors back from the end, marking one cell per call.
- IDLE          terminal; step() does nothing.

Heuristic:
- Manhattan distance to the end cell (4-connected, unit edge cost, so the
  first pop of the end cell carries the optimal cost).

Tie-breaking in the frontier:
- (f, seq, index): lower f first, then FIFO by insertion sequence.
"""

import heapq
import logging
from typing import Iterable, Iterator, List, Optional, Tuple

from gridsearch.core.cell import Cell
from gridsearch.core.types import CellSnapshot, ConfigurationError, Coord, Phase, StepResult

logger = logging.getLogger(__name__)

# up, down, left, right
_OFFSETS: Tuple[Coord, ...] = ((0, -1), (0, 1), (-1, 0), (1, 0))


class SearchGrid:
    def __init__(self, columns: int, rows: int, start: Coord, end: Coord,
                 obstacles: Iterable[Coord] = ()):
        if columns < 1 or rows < 1:
            raise ConfigurationError(f"grid dimensions must be positive, got {columns}x{rows}")
        self.columns = int(columns)
        self.rows = int(rows)

        start = (int(start[0]), int(start[1]))
        end = (int(end[0]), int(end[1]))
        if not self.in_bounds(start):
            raise ConfigurationError(f"start {start} outside {self.columns}x{self.rows} grid")
        if not self.in_bounds(end):
            raise ConfigurationError(f"end {end} outside {self.columns}x{self.rows} grid")
        if start == end:
            raise ConfigurationError(f"start and end are the same cell {start}")

        # out-of-bounds obstacle coordinates are ignored
        blocked = {(int(x), int(y)) for x, y in obstacles}
        blocked = {c for c in blocked if self.in_bounds(c)}
        if start in blocked:
            raise ConfigurationError(f"start {start} is on an obstacle")
        if end in blocked:
            raise ConfigurationError(f"end {end} is on an obstacle")

        # column-major storage; predecessors and the frontier refer to these indices
        self._cells: List[Cell] = []
        for col in range(self.columns):
            for row in range(self.rows):
                self._cells.append(Cell(col, row,
                                        is_start=(col, row) == start,
                                        is_end=(col, row) == end,
                                        is_obstacle=(col, row) in blocked))

        self._start_index = self.index_of(start)
        self._end_index = self.index_of(end)
        self._obstacle_count = len(blocked)

        self._phase = Phase.SEARCHING
        self._trace_cursor: Optional[int] = None

        self._frontier: List[Tuple[int, int, int]] = []  # (f, seq, index)
        self._seq = 0
        self._steps = 0
        self._popped = 0
        self._pushed = 0
        self._stale = 0
        self._visited = 0
        self._on_path = 0

        self._cells[self._start_index].cost_so_far = 0
        self._push(self.heuristic(self._start_index), self._start_index)
        logger.debug("grid %dx%d ready: start=%s end=%s obstacles=%d",
                     self.columns, self.rows, start, end, self._obstacle_count)

    # -------------------- topology --------------------

    def in_bounds(self, c: Coord) -> bool:
        x, y = c
        return 0 <= x < self.columns and 0 <= y < self.rows

    def index_of(self, c: Coord) -> int:
        if not self.in_bounds(c):
            raise IndexError(f"{c} outside {self.columns}x{self.rows} grid")
        return c[0] * self.rows + c[1]

    def coord_of(self, index: int) -> Coord:
        return self._cells[index].coord

    def neighbors(self, index: int) -> List[int]:
        """Walkable 4-neighbours of ``index`` in the fixed order up, down, left, right."""
        x, y = self._cells[index].coord
        out: List[int] = []
        for dx, dy in _OFFSETS:
            n = (x + dx, y + dy)
            if self.in_bounds(n):
                ni = self.index_of(n)
                if not self._cells[ni].is_obstacle:
                    out.append(ni)
        return out

    def heuristic(self, index: int) -> int:
        (x, y) = self._cells[index].coord
        (gx, gy) = self._cells[self._end_index].coord
        return abs(gx - x) + abs(gy - y)

    def _push(self, priority: float, index: int) -> None:
        self._seq += 1
        self._pushed += 1
        heapq.heappush(self._frontier, (priority, self._seq, index))

    # -------------------- stepping --------------------

    def step(self) -> StepResult:
        """Advance the search by one bounded unit of work."""
        if self.phase is Phase.SEARCHING:
            self._steps += 1
            return self._search_step()
        if self.phase is Phase.TRACING_PATH:
            self._steps += 1
            return self._trace_step()
        return StepResult(action="noop", phase=self.phase, metrics=self.metrics())

    def _search_step(self) -> StepResult:
        if not self._frontier:
            self._phase = Phase.IDLE
            logger.info("frontier exhausted after %d steps: no path from %s to %s",
                        self._steps, self.start, self.end)
            return StepResult(action="exhausted", phase=self.phase, metrics=self.metrics())

        _, _, u = heapq.heappop(self._frontier)
        current = self._cells[u]

        # stale entry: already finalized through a cheaper push
        if current.is_visited:
            self._stale += 1
            return StepResult(action="discarded", phase=self.phase, current=current.coord,
                              metrics=self.metrics())

        current.is_visited = True
        self._visited += 1
        self._popped += 1

        if u == self._end_index:
            self._phase = Phase.TRACING_PATH
            self._trace_cursor = current.predecessor
            logger.info("reached end %s with cost %s after %d steps",
                        current.coord, current.cost_so_far, self._steps)
            logger.debug("phase -> %s", self.phase.value)
            return StepResult(action="reached_end", phase=self.phase, current=current.coord,
                              metrics=self.metrics())

        for v in self.neighbors(u):
            candidate = current.cost_so_far + 1
            if self._cells[v].try_relax(candidate, u):
                self._push(candidate + self.heuristic(v), v)

        return StepResult(action="expanded", phase=self.phase, current=current.coord,
                          metrics=self.metrics())

    def _trace_step(self) -> StepResult:
        cursor = self._trace_cursor
        if cursor is not None and cursor != self._start_index:
            cell = self._cells[cursor]
            if not cell.is_on_path:
                cell.is_on_path = True
                self._on_path += 1
            self._trace_cursor = cell.predecessor
            return StepResult(action="traced", phase=self.phase, current=cell.coord,
                              metrics=self.metrics())

        self._phase = Phase.IDLE
        self._trace_cursor = None
        logger.debug("phase -> %s (%d path cells marked)", self.phase.value, self._on_path)
        return StepResult(action="finished", phase=self.phase, metrics=self.metrics())

    def run(self, max_steps: Optional[int] = None) -> int:
        """Step until IDLE (or ``max_steps`` calls); return the number of calls made."""
        calls = 0
        while self.phase is not Phase.IDLE:
            if max_steps is not None and calls >= max_steps:
                break
            self.step()
            calls += 1
        return calls

    # -------------------- queries --------------------

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def trace_cursor(self) -> Optional[int]:
        return self._trace_cursor

    @property
    def start(self) -> Coord:
        return self._cells[self._start_index].coord

    @property
    def end(self) -> Coord:
        return self._cells[self._end_index].coord

    @property
    def frontier_size(self) -> int:
        return len(self._frontier)

    @property
    def is_finished(self) -> bool:
        return self.phase is Phase.IDLE

    @property
    def path_found(self) -> bool:
        return self._cells[self._end_index].is_visited

    @property
    def no_path_found(self) -> bool:
        return self.phase is Phase.IDLE and not self.path_found

    def snapshot(self, col: int, row: int) -> CellSnapshot:
        return self._cells[self.index_of((col, row))].snapshot()

    def cell_at(self, col: int, row: int) -> CellSnapshot:
        """Read-only view of the cell at (col, row); same as snapshot()."""
        return self.snapshot(col, row)

    def snapshots(self) -> Iterator[CellSnapshot]:
        """All cells, column by column."""
        for cell in self._cells:
            yield cell.snapshot()

    def predecessor_of(self, col: int, row: int) -> Optional[Coord]:
        p = self._cells[self.index_of((col, row))].predecessor
        return None if p is None else self._cells[p].coord

    def predecessor_chain(self, col: int, row: int) -> List[Coord]:
        """Coordinates from (col, row) back along predecessors, ending at the chain's root."""
        chain: List[Coord] = []
        seen = set()
        index: Optional[int] = self.index_of((col, row))
        while index is not None:
            if index in seen:
                raise RuntimeError(f"predecessor cycle through {self._cells[index].coord}")
            seen.add(index)
            chain.append(self._cells[index].coord)
            index = self._cells[index].predecessor
        return chain

    def path_cells(self) -> List[Coord]:
        """Cells marked on the path so far (start and end are never marked)."""
        return [c.coord for c in self._cells if c.is_on_path]

    def path(self) -> List[Coord]:
        """Full start-to-end path once the end has been reached, else []."""
        if not self.path_found:
            return []
        chain = self.predecessor_chain(*self.end)
        chain.reverse()
        return chain

    def metrics(self) -> dict:
        end = self._cells[self._end_index]
        return {
            "phase": self.phase.value,
            "steps": self._steps,
            "popped": self._popped,
            "pushed": self._pushed,
            "stale_discards": self._stale,
            "visited": self._visited,
            "frontier_size": len(self._frontier),
            "path_len": self._on_path,
            "total_cost": end.cost_so_far if end.is_visited else None,
        }

    def __repr__(self) -> str:
        return (f"SearchGrid({self.columns}x{self.rows}, start={self.start}, end={self.end}, "
                f"phase={self.phase.value})")
