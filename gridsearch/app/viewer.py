# gridsearch/app/viewer.py
#!/usr/bin/env python3
"""
Grid Search Viewer — drives a SearchGrid one step at a time and draws it.

- Keyboard:
    [SPACE]      -> run/pause
    [N]          -> single step
    [R]          -> restart (fresh grid, same layout)
    [+]/[-]      -> steps/sec
    [Q]/[ESC]    -> quit

Config:
- ENV: GRIDSEARCH_MAP, GRIDSEARCH_STEPS_PER_SEC, GRIDSEARCH_LOG_LEVEL
- CLI: --map=PATH, --steps-per-sec=N, --log-level=LEVEL
"""

# --- bootstrap import path so `from gridsearch...` works when run as a script ---
import sys, time, logging
from pathlib import Path
_REPO_ROOT = Path(__file__).resolve().parents[2]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))
# -------------------------------------------------------------------------

from typing import List, Optional
import pygame

from gridsearch.app.palette import BORDER, cell_color
from gridsearch.app.settings import ViewerSettings, clamp_speed, resolve_settings
from gridsearch.core.layout import GridLayout, default_layout, load_layout
from gridsearch.core.search_grid import SearchGrid
from gridsearch.core.types import ConfigurationError, Phase

logger = logging.getLogger(__name__)

# ---------- Config ----------
PANEL_W = 320            # right band: metrics + buttons
GRID_MARGIN = 16
CELL_SIZE_DEFAULT = 20
TARGET_GRID_W = 1280
TARGET_GRID_H = 720
MAX_STEPS_PER_FRAME = 64
FPS = 60
FONT_NAME = None  # default pygame font

# Colors
TEXT_LIGHT  = (230,235,240)
ACCENT_GOLD = (255,210,0)
CARD_BG     = (24,28,36,220)
CARD_HI     = (255,255,255,18)

PHASE_LABELS = {
    Phase.SEARCHING: "Searching",
    Phase.TRACING_PATH: "Tracing path",
    Phase.IDLE: "Idle",
}

# ---------- Simple UI Button ----------
class UIButton:
    def __init__(self, label: str, rect: pygame.Rect, callback, *, togglable: bool = False):
        self.label = label
        self.rect = rect
        self.callback = callback
        self.hover = False
        self.togglable = togglable
        self.active = False  # highlight state

    def set_active(self, value: bool):
        self.active = bool(value)

    def draw(self, screen: pygame.Surface, font: pygame.font.Font):
        base = pygame.Surface(self.rect.size, pygame.SRCALPHA)
        bg_idle   = (36, 40, 48, 220)
        bg_hover  = (46, 50, 60, 230)
        bg_active = (58, 86, 160, 235)
        border_active = (120, 170, 255, 255)

        if self.active and self.togglable:
            bg = bg_active
        elif self.hover:
            bg = bg_hover
        else:
            bg = bg_idle

        pygame.draw.rect(base, bg, base.get_rect(), border_radius=10)
        screen.blit(base, self.rect.topleft)

        if self.active and self.togglable:
            pygame.draw.rect(screen, border_active, self.rect, width=2, border_radius=10)

        text = font.render(self.label, True, (235,238,242))
        screen.blit(text, text.get_rect(center=self.rect.center))

    def handle_mouse(self, event: pygame.event.Event):
        if event.type == pygame.MOUSEMOTION:
            self.hover = self.rect.collidepoint(event.pos)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.callback()

# ---------- Viewer ----------
class Viewer:
    def __init__(self, layout: GridLayout, steps_per_sec: int):
        pygame.init()

        self.layout = layout
        self.grid: SearchGrid = layout.build_grid()
        self.cell_size = self._auto_cell_size(layout)
        self.font = pygame.font.Font(FONT_NAME, 18)
        self.font_big = pygame.font.Font(FONT_NAME, 22)

        grid_px_w = GRID_MARGIN*2 + layout.columns * self.cell_size
        grid_px_h = GRID_MARGIN*2 + layout.rows * self.cell_size
        win_w = grid_px_w + PANEL_W
        win_h = max(grid_px_h, 480)

        self.screen = pygame.display.set_mode((win_w, win_h), pygame.RESIZABLE)
        pygame.display.set_caption(f"Grid Search — {layout.name}")

        self._buttons: List[UIButton] = []
        self._layout_window(win_w, win_h)

        self.running = True  # the search starts animating right away
        self.clock = pygame.time.Clock()
        self.steps_per_sec = clamp_speed(steps_per_sec)
        self._last_step_t: Optional[float] = None
        self._refresh_active_states()

    # ---------- layout ----------
    def _layout_window(self, win_w: int, win_h: int):
        """Compute an integer cell_size that fits the window and place the grid."""
        avail_w = max(1, win_w - PANEL_W - 2 * GRID_MARGIN)
        avail_h = max(1, win_h - 2 * GRID_MARGIN)
        self.cell_size = max(2, min(avail_w // self.layout.columns, avail_h // self.layout.rows))

        self._grid_origin = (GRID_MARGIN, GRID_MARGIN)
        grid_right = GRID_MARGIN * 2 + self.layout.columns * self.cell_size
        self._right_band = pygame.Rect(grid_right, 0, max(PANEL_W, win_w - grid_right), win_h)
        self._build_buttons()

    def _auto_cell_size(self, layout: GridLayout) -> int:
        by_w = (TARGET_GRID_W - GRID_MARGIN*2) // layout.columns
        by_h = (TARGET_GRID_H - GRID_MARGIN*2) // layout.rows
        return max(2, min(CELL_SIZE_DEFAULT, by_w, by_h))

    def run(self):
        while True:
            self._handle_events()
            if self.running:
                self._tick_algorithm()
            self._draw()
            self.clock.tick(FPS)

    def _tick_algorithm(self):
        now = time.time()
        if self._last_step_t is None:
            self._last_step_t = now
            self._do_step()
            return
        due = int((now - self._last_step_t) * self.steps_per_sec)
        if due <= 0:
            return
        taken = min(due, MAX_STEPS_PER_FRAME)
        if taken < due:
            # too far behind; drop the backlog instead of catching up
            self._last_step_t = now
        else:
            # keep the leftover fraction of a step for the next frame
            self._last_step_t += taken / self.steps_per_sec
        for _ in range(taken):
            self._do_step()
            if not self.running:
                break

    def _do_step(self):
        self.grid.step()
        if self.grid.is_finished:
            self.running = False
            self._refresh_active_states()

    def _handle_events(self):
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                pygame.quit(); sys.exit(0)
            elif e.type == pygame.KEYDOWN:
                if e.key in (pygame.K_ESCAPE, pygame.K_q):
                    pygame.quit(); sys.exit(0)
                elif e.key == pygame.K_SPACE:
                    self._toggle_run()
                elif e.key == pygame.K_r:
                    self._restart()
                elif e.key == pygame.K_n:
                    self._do_step()
                elif e.key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS):
                    self._bump_speed(+1)
                elif e.key in (pygame.K_MINUS, pygame.K_UNDERSCORE, pygame.K_KP_MINUS):
                    self._bump_speed(-1)
            elif e.type == pygame.VIDEORESIZE:
                self.screen = pygame.display.set_mode((e.w, e.h), pygame.RESIZABLE)
                self._layout_window(e.w, e.h)
            elif e.type in (pygame.MOUSEMOTION, pygame.MOUSEBUTTONDOWN):
                for b in self._buttons:
                    b.handle_mouse(e)

    def _restart(self):
        # a grid is never reused; restarting means building a new one
        self.grid = self.layout.build_grid()
        self.running = False
        self._last_step_t = None
        self._refresh_active_states()
        logger.info("restarted %s", self.layout.name)

    def _toggle_run(self):
        if self.grid.is_finished:
            return
        self.running = not self.running
        self._last_step_t = None
        self._refresh_active_states()

    def _bump_speed(self, direction: int):
        # coarse steps at high rates
        delta = max(1, self.steps_per_sec // 10)
        self.steps_per_sec = clamp_speed(self.steps_per_sec + direction * delta)

    # ---------- drawing ----------
    def _draw(self):
        self.screen.fill((24, 26, 32))
        self._draw_grid()
        self._draw_metrics_and_buttons()
        pygame.display.flip()

    def _draw_grid(self):
        cs = self.cell_size
        ox, oy = self._grid_origin
        for snap in self.grid.snapshots():
            rect = pygame.Rect(ox + snap.col*cs, oy + snap.row*cs, cs, cs)
            pygame.draw.rect(self.screen, cell_color(snap), rect)
            if cs >= 4:
                pygame.draw.rect(self.screen, BORDER, rect, 1)

    # ---------- buttons + metrics ----------
    def _build_buttons(self):
        self._buttons.clear()
        rb = self._right_band
        x = rb.x + 16
        y = rb.y + 250  # leaves space for metrics card above
        w = max(160, rb.width - 32)
        h = 38
        gap = 10

        self.btn_run = UIButton("Run / Pause", pygame.Rect(x, y, w, h), self._toggle_run, togglable=True)
        self._buttons.append(self.btn_run); y += h + gap
        self._buttons.append(UIButton("Step Once", pygame.Rect(x, y, w, h), self._do_step)); y += h + gap
        self._buttons.append(UIButton("Restart", pygame.Rect(x, y, w, h), self._restart)); y += h + gap

        half = (w - 8) // 2
        self._buttons.append(UIButton("Speed -", pygame.Rect(x, y, half, h), lambda: self._bump_speed(-1)))
        self._buttons.append(UIButton("Speed +", pygame.Rect(x + half + 8, y, half, h), lambda: self._bump_speed(+1)))

        self._refresh_active_states()

    def _refresh_active_states(self):
        if hasattr(self, "btn_run"):
            self.btn_run.set_active(getattr(self, "running", False))

    def _status_label(self) -> str:
        if self.grid.no_path_found:
            return "No path"
        if self.grid.is_finished:
            return "Done"
        label = PHASE_LABELS[self.grid.phase]
        return label if self.running else f"{label} (paused)"

    def _draw_metrics_and_buttons(self):
        rb = self._right_band

        card_h = 230
        card = pygame.Surface((rb.width - 20, card_h), pygame.SRCALPHA)
        pygame.draw.rect(card, CARD_BG, card.get_rect(), border_radius=14)
        hi = pygame.Surface((card.get_width(), 24), pygame.SRCALPHA)
        pygame.draw.rect(hi, CARD_HI, hi.get_rect(), border_radius=14)
        card.blit(hi, (0,0))
        self.screen.blit(card, (rb.x + 10, rb.y + 10))

        x0 = rb.x + 24
        y0 = rb.y + 18

        def line(text, big=False, color=TEXT_LIGHT):
            nonlocal y0
            f = self.font_big if big else self.font
            surf = f.render(text, True, color)
            self.screen.blit(surf, (x0, y0))
            y0 += surf.get_height() + 6

        m = self.grid.metrics()
        line("Metrics", big=True, color=ACCENT_GOLD)
        line(f"Status: {self._status_label()}")
        line(f"Steps: {m['steps']}")
        line(f"Visited: {m['visited']}")
        line(f"Frontier: {m['frontier_size']}")
        line(f"Path cells: {m['path_len']}")
        if m["total_cost"] is not None:
            line(f"Total Cost: {m['total_cost']}")
        line(f"Speed: {self.steps_per_sec} steps/s")

        for b in self._buttons:
            b.draw(self.screen, self.font)

# ---------- main ----------
def load_configured_layout(settings: ViewerSettings) -> GridLayout:
    if settings.map_path is None:
        return default_layout()
    return load_layout(settings.map_path)


def main(argv: Optional[List[str]] = None):
    argv = sys.argv[1:] if argv is None else argv
    try:
        settings = resolve_settings(argv)
    except ConfigurationError as ex:
        logging.basicConfig(level=logging.INFO)
        logger.error("Bad settings: %s", ex)
        sys.exit(1)

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        layout = load_configured_layout(settings)
        # validate before a window exists
        layout.build_grid()
    except ConfigurationError as ex:
        logger.error("Failed to load layout: %s", ex)
        sys.exit(1)
    Viewer(layout, settings.steps_per_sec).run()

if __name__ == "__main__":
    main()
