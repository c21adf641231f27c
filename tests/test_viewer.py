import types

import pytest

pygame = pytest.importorskip("pygame")

from gridsearch.app import viewer as viewer_mod
from gridsearch.core.layout import GridLayout
from gridsearch.core.types import Phase


@pytest.fixture
def headless(monkeypatch):
    monkeypatch.setenv("SDL_VIDEODRIVER", "dummy")
    monkeypatch.setenv("SDL_AUDIODRIVER", "dummy")
    yield
    pygame.quit()


def _make_viewer(speed=10):
    layout = GridLayout(6, 5, (0, 0), (5, 4), frozenset({(2, 0), (2, 1), (2, 2)}), name="test")
    return viewer_mod.Viewer(layout, speed)


def test_viewer_steps_until_finished(headless):
    v = _make_viewer()
    assert v.running
    for _ in range(500):
        if v.grid.is_finished:
            break
        v._do_step()
    assert v.grid.phase is Phase.IDLE
    assert v.grid.path_found
    assert not v.running
    v._draw()


def test_restart_builds_new_grid(headless):
    v = _make_viewer()
    v._do_step(); v._do_step()
    old = v.grid
    v._restart()
    assert v.grid is not old
    assert v.grid.metrics()["steps"] == 0
    assert not v.running


def test_space_toggles_run(headless, monkeypatch):
    v = _make_viewer()
    events = [pygame.event.Event(pygame.KEYDOWN, key=pygame.K_SPACE)]
    monkeypatch.setattr(pygame.event, "get", lambda: events)
    v._handle_events()
    assert not v.running
    v._handle_events()
    assert v.running


def test_step_key_advances_once(headless, monkeypatch):
    v = _make_viewer()
    events = [pygame.event.Event(pygame.KEYDOWN, key=pygame.K_n)]
    monkeypatch.setattr(pygame.event, "get", lambda: events)
    v._handle_events()
    assert v.grid.metrics()["steps"] == 1


def test_speed_bump_is_clamped(headless):
    v = _make_viewer(speed=1)
    v._bump_speed(-1)
    assert v.steps_per_sec == 1
    v._bump_speed(+1)
    assert v.steps_per_sec == 2


def test_tick_paces_by_wall_clock(headless, monkeypatch):
    v = _make_viewer(speed=10)
    clock = iter([1000.0, 1000.5])
    monkeypatch.setattr(viewer_mod, "time", types.SimpleNamespace(time=lambda: next(clock)))
    v._tick_algorithm()          # first tick takes one step
    v._tick_algorithm()          # 500 ms at 10 steps/s -> five more
    assert v.grid.metrics()["steps"] == 6


def test_main_exits_on_bad_layout(tmp_path):
    with pytest.raises(SystemExit) as exc:
        viewer_mod.main([f"--map={tmp_path / 'missing.json'}"])
    assert exc.value.code == 1


def test_tick_keeps_fractional_steps_across_frames(headless, monkeypatch):
    layout = GridLayout(40, 40, (0, 0), (39, 39), name="open")
    v = viewer_mod.Viewer(layout, 90)
    frames = iter([1000.0 + k / 60 for k in range(61)])
    monkeypatch.setattr(viewer_mod, "time", types.SimpleNamespace(time=lambda: next(frames)))
    for _ in range(61):
        v._tick_algorithm()
    # one step on the first frame, then one second at 90 steps/s
    assert 89 <= v.grid.metrics()["steps"] <= 91


def test_main_exits_on_malformed_cells(tmp_path):
    p = tmp_path / "bad.json"
    p.write_text('{"width": 2, "height": 1, "start": [0, 0], "goal": [1, 0], "cells": [5]}')
    with pytest.raises(SystemExit) as exc:
        viewer_mod.main([f"--map={p}"])
    assert exc.value.code == 1
