import pytest

from gridsearch.core.search_grid import SearchGrid
from gridsearch.core.types import ConfigurationError, Phase


def _wall(x, rows):
    return [(x, y) for y in range(rows)]


# -------------------- construction --------------------

def test_construction_seeds_frontier_with_start():
    g = SearchGrid(5, 5, (0, 0), (4, 4))
    assert g.phase is Phase.SEARCHING
    assert g.frontier_size == 1
    assert g.snapshot(0, 0).cost_so_far == 0
    assert g.snapshot(0, 0).is_start
    assert g.snapshot(4, 4).is_end
    assert g.trace_cursor is None


@pytest.mark.parametrize("cols, rows, start, end, obstacles", [
    (5, 5, (2, 2), (2, 2), []),          # start == end
    (5, 5, (1, 1), (4, 4), [(1, 1)]),    # start on obstacle
    (5, 5, (0, 0), (3, 3), [(3, 3)]),    # end on obstacle
    (5, 5, (5, 0), (1, 1), []),          # start out of bounds
    (5, 5, (0, 0), (0, -1), []),         # end out of bounds
    (0, 5, (0, 0), (0, 1), []),          # no columns
    (5, -1, (0, 0), (0, 1), []),         # negative rows
])
def test_invalid_configuration_raises(cols, rows, start, end, obstacles):
    with pytest.raises(ConfigurationError):
        SearchGrid(cols, rows, start, end, obstacles)


def test_out_of_bounds_obstacles_are_ignored():
    g = SearchGrid(3, 3, (0, 0), (2, 2), [(-1, 0), (7, 7), (1, 1)])
    assert g.snapshot(1, 1).is_obstacle
    assert sum(s.is_obstacle for s in g.snapshots()) == 1


def test_single_row_grid():
    g = SearchGrid(4, 1, (0, 0), (3, 0))
    g.run()
    assert g.path_found
    assert g.metrics()["total_cost"] == 3


# -------------------- neighbors --------------------

def test_neighbors_fixed_order_up_down_left_right():
    g = SearchGrid(3, 3, (0, 0), (2, 2))
    center = g.index_of((1, 1))
    assert [g.coord_of(i) for i in g.neighbors(center)] == [(1, 0), (1, 2), (0, 1), (2, 1)]


def test_neighbors_clip_to_bounds_and_skip_obstacles():
    g = SearchGrid(3, 3, (0, 0), (2, 2), [(1, 0)])
    assert [g.coord_of(i) for i in g.neighbors(g.index_of((0, 0)))] == [(0, 1)]
    assert [g.coord_of(i) for i in g.neighbors(g.index_of((2, 2)))] == [(2, 1), (1, 2)]


def test_heuristic_is_manhattan_to_end():
    g = SearchGrid(6, 6, (0, 0), (4, 1))
    assert g.heuristic(g.index_of((0, 0))) == 5
    assert g.heuristic(g.index_of((4, 1))) == 0
    assert g.heuristic(g.index_of((5, 5))) == 5


# -------------------- stepping --------------------

def test_start_adjacent_to_end():
    g = SearchGrid(3, 3, (0, 0), (1, 0))

    r1 = g.step()
    assert r1.action == "expanded" and r1.current == (0, 0)
    assert g.snapshot(1, 0).cost_so_far == 1

    r2 = g.step()
    assert r2.action == "reached_end" and r2.current == (1, 0)
    assert g.phase is Phase.TRACING_PATH

    g.step()
    assert g.phase is Phase.IDLE
    assert g.path_found and not g.no_path_found
    assert g.path_cells() == []
    assert g.path() == [(0, 0), (1, 0)]


def test_open_5x5_shortest_path_is_manhattan():
    g = SearchGrid(5, 5, (0, 0), (4, 4))
    g.run()
    assert g.phase is Phase.IDLE
    assert g.snapshot(4, 4).cost_so_far == 8

    path = g.path()
    assert len(path) == 9
    assert path[0] == (0, 0) and path[-1] == (4, 4)
    for (ax, ay), (bx, by) in zip(path, path[1:]):
        assert abs(ax - bx) + abs(ay - by) == 1
    assert set(g.path_cells()) == set(path[1:-1])


def test_tracing_marks_one_cell_per_step():
    g = SearchGrid(5, 5, (0, 0), (4, 4))
    while g.phase is Phase.SEARCHING:
        g.step()
    marked = []
    while g.phase is Phase.TRACING_PATH:
        before = len(g.path_cells())
        g.step()
        marked.append(len(g.path_cells()) - before)
    # seven intermediate cells, then one call that finds the start and stops
    assert marked == [1] * 7 + [0]


def test_complete_wall_means_no_path():
    g = SearchGrid(5, 5, (0, 2), (4, 2), _wall(2, 5))
    g.run()
    assert g.phase is Phase.IDLE
    assert g.no_path_found
    assert g.path_cells() == []
    assert g.path() == []
    assert g.frontier_size == 0
    assert g.metrics()["total_cost"] is None
    assert not g.snapshot(4, 2).is_visited


def test_wall_with_gap_detours():
    walls = [(2, y) for y in range(5) if y != 4]
    g = SearchGrid(5, 5, (0, 0), (4, 0), walls)
    g.run()
    assert g.path_found
    # down to row 4, through the gap, back up
    assert g.metrics()["total_cost"] == 12
    assert (2, 4) in g.path_cells()


def test_step_after_idle_is_noop():
    g = SearchGrid(3, 3, (0, 0), (2, 2))
    g.run()
    before = g.metrics()
    on_path = g.path_cells()
    for _ in range(3):
        r = g.step()
        assert r.action == "noop" and r.phase is Phase.IDLE
    assert g.metrics() == before
    assert g.path_cells() == on_path


def test_frontier_ties_break_fifo_and_runs_are_reproducible():
    def trace(grid):
        out = []
        while not grid.is_finished:
            out.append(grid.step().current)
        return out

    obstacles = [(3, 1), (3, 2), (3, 3), (1, 4)]
    a = trace(SearchGrid(7, 6, (0, 0), (6, 5), obstacles))
    b = trace(SearchGrid(7, 6, (0, 0), (6, 5), obstacles))
    assert a == b

    # from (0,0) toward (2,2): down (0,1) and right (1,0) tie on f; down was pushed first
    g = SearchGrid(3, 3, (0, 0), (2, 2))
    g.step()
    assert g.step().current == (0, 1)


def test_run_respects_max_steps():
    g = SearchGrid(10, 10, (0, 0), (9, 9))
    assert g.run(max_steps=3) == 3
    assert g.phase is Phase.SEARCHING
    assert g.metrics()["steps"] == 3


def test_metrics_account_for_every_call():
    g = SearchGrid(8, 8, (0, 0), (7, 7), [(3, y) for y in range(7)])
    calls = g.run()
    m = g.metrics()
    assert m["steps"] == calls
    # search pops/discards, one trace call per marked cell, one final trace call
    assert m["steps"] == m["popped"] + m["stale_discards"] + m["path_len"] + 1
    assert m["visited"] == m["popped"]
    assert m["phase"] == "idle"


def test_metrics_no_path_ends_with_exhausted_call():
    g = SearchGrid(4, 4, (0, 0), (3, 3), [(2, 3), (3, 2)])
    results = []
    while not g.is_finished:
        results.append(g.step())
    assert results[-1].action == "exhausted"
    m = g.metrics()
    assert m["steps"] == m["popped"] + m["stale_discards"] + 1


def test_obstacles_are_never_relaxed_or_visited():
    obstacles = [(1, 0), (1, 1), (3, 2), (3, 3)]
    g = SearchGrid(5, 5, (0, 0), (4, 4), obstacles)
    g.run()
    for x, y in obstacles:
        snap = g.snapshot(x, y)
        assert not snap.is_visited
        assert snap.cost_so_far == float("inf")
        assert g.predecessor_of(x, y) is None


def test_predecessor_chain_of_start_is_start():
    g = SearchGrid(3, 3, (1, 1), (2, 2))
    assert g.predecessor_chain(1, 1) == [(1, 1)]


def test_snapshot_out_of_bounds_raises():
    g = SearchGrid(3, 3, (0, 0), (2, 2))
    with pytest.raises(IndexError):
        g.snapshot(3, 0)


def test_cell_at_returns_read_only_view():
    g = SearchGrid(3, 3, (0, 0), (2, 2), [(1, 1)])
    snap = g.cell_at(1, 1)
    assert snap == g.snapshot(1, 1)
    assert snap.is_obstacle
    with pytest.raises(AttributeError):
        snap.is_obstacle = False
    assert g.cell_at(0, 0).cost_so_far == 0


def test_phase_and_trace_cursor_cannot_be_assigned():
    g = SearchGrid(3, 3, (0, 0), (2, 2))
    with pytest.raises(AttributeError):
        g.phase = Phase.IDLE
    with pytest.raises(AttributeError):
        g.trace_cursor = 0
    assert g.phase is Phase.SEARCHING
    while g.phase is Phase.SEARCHING:
        g.step()
    assert g.trace_cursor is not None
