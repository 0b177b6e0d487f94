"""
Interactive terminal demo for areagrid.
Paint a shape's outline with the keyboard, drop a start point inside it and
watch the estimator count its area.
"""

from __future__ import annotations

import logging
import sys
import time
from dataclasses import dataclass, field

import readchar
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from areagrid import (
    MAX_GRID_SIZE,
    AreaEstimator,
    CellState,
    ConfigurationError,
    EstimationRun,
    Grid,
    PreconditionError,
    StateTransitionError,
)
from ascii_render import area_label, render

logger = logging.getLogger(__name__)

DEFAULT_GRID_SIZE = 32
MIN_GRID_SIZE_CYCLE = 8  # Halving below this wraps back to MAX_GRID_SIZE
MIN_CELL_ROWS = 1  # Terminal rows needed per grid row
RESERVED_ROWS = 16  # Panel border, status and key help
FRAME_BUDGET = 1 / 20  # Seconds of stepping between redraws

MOVES = {
    "w": (-1, 0),
    "s": (1, 0),
    "a": (0, -1),
    "d": (0, 1),
    readchar.key.UP: (-1, 0),
    readchar.key.DOWN: (1, 0),
    readchar.key.LEFT: (0, -1),
    readchar.key.RIGHT: (0, 1),
}


def next_grid_size(size: int) -> int:
    """Halve the grid size, wrapping to MAX_GRID_SIZE once it drops below the floor."""
    new_size = size // 2
    if new_size < MIN_GRID_SIZE_CYCLE:
        return MAX_GRID_SIZE
    return new_size


def check_fits_display(size: int, available_rows: int, min_cell_rows: int = MIN_CELL_ROWS) -> None:
    """
    Raises:
        ConfigurationError: If a size x size grid would leave fewer than
            min_cell_rows terminal rows per grid row
    """
    if available_rows // size < min_cell_rows:
        raise ConfigurationError(
            f"A {size}x{size} grid does not fit the display\n"
            f"  Available rows: {available_rows}\n"
            f"  Each cell needs at least {min_cell_rows} row(s)"
        )


@dataclass
class PaintSession:
    """
    Interaction state for painting a grid and driving the estimator.

    Holds everything the painting surface tracks between key presses: the
    cursor, whether the pen is down, which state a drag paints, and the
    run being animated.
    """

    grid: Grid
    available_rows: int | None = None
    cursor: int = 0
    pen_down: bool = False
    drag_paint_state: CellState = CellState.BOUNDARY
    stepped: bool = False
    run: EstimationRun | None = None
    status_message: str = "Ready"
    counter_text: str = field(default_factory=lambda: area_label(0))
    painted_this_stroke: set[int] = field(default_factory=set)
    estimator: AreaEstimator = field(init=False)

    def __post_init__(self) -> None:
        if self.available_rows is not None:
            check_fits_display(self.grid.size, self.available_rows)
        self.estimator = AreaEstimator(self.grid, on_count_updated=self._on_count_updated)

    def _on_count_updated(self, total: int) -> None:
        self.counter_text = area_label(total)

    @property
    def running(self) -> bool:
        return self.run is not None and not self.run.finished

    @property
    def counter_visible(self) -> bool:
        # Hidden for as long as the animation delay is on
        return not self.stepped

    # Painting

    def _paint(self, index: int, state: CellState) -> None:
        cell = self.grid.cell(index)
        if cell.state == CellState.START_POINT or index in self.painted_this_stroke:
            return
        cell.transition(state)
        self.painted_this_stroke.add(index)

    def toggle_boundary(self) -> None:
        """Flip the cursor cell between DEFAULT and BOUNDARY."""
        cell = self.grid.cell(self.cursor)
        if cell.state == CellState.START_POINT:
            # Dragging from the start point always paints boundary
            self.drag_paint_state = CellState.BOUNDARY
            return
        new_state = CellState.DEFAULT if cell.state == CellState.BOUNDARY else CellState.BOUNDARY
        try:
            cell.transition(new_state)
        except StateTransitionError:
            self.status_message = "Reset the grid before painting again"
            return
        self.drag_paint_state = new_state
        self.painted_this_stroke.add(cell.index)

    def toggle_pen(self) -> None:
        """Start or finish a drag stroke at the cursor."""
        if self.pen_down:
            self.pen_down = False
            self.painted_this_stroke.clear()
            self.status_message = "Pen up"
            return
        self.pen_down = True
        self.painted_this_stroke.clear()
        self.toggle_boundary()
        self.status_message = f"Pen down, painting {self.drag_paint_state.value}"

    def move(self, d_row: int, d_col: int) -> None:
        row, col = self.grid.position(self.cursor)
        row = min(max(row + d_row, 0), self.grid.size - 1)
        col = min(max(col + d_col, 0), self.grid.size - 1)
        self.cursor = row * self.grid.size + col
        if self.pen_down:
            try:
                self._paint(self.cursor, self.drag_paint_state)
            except StateTransitionError:
                self.status_message = "Reset the grid before painting again"

    def toggle_start_point(self) -> None:
        """Place the start point on the cursor cell, or remove it if it is there."""
        start = self.grid.start_point
        if start is not None and start.index == self.cursor:
            self.grid.clear_start_point()
            self.status_message = "Start point removed"
            return
        try:
            self.grid.set_start_point(self.cursor)
        except PreconditionError as e:
            self.status_message = str(e).splitlines()[0]
            return
        self.status_message = "Start point set"

    # Running

    def set_stepped(self, stepped: bool) -> None:
        self.stepped = stepped
        self.estimator.set_stepped_mode(stepped)
        self.status_message = "Animation delay enabled" if stepped else "Animation delay disabled"

    def start_run(self) -> None:
        if self.grid.start_point is None:
            self.status_message = (
                "You must set a start location by pressing X on an appropriate cell!"
            )
            return
        try:
            self.run = self.estimator.run()
        except PreconditionError as e:
            self.status_message = str(e).splitlines()[0]
            return
        self.pen_down = False
        if self.run.finished:
            self._finish()
        else:
            self.status_message = "Running..."

    def _finish(self) -> None:
        assert self.run is not None
        self.counter_text = area_label(self.run.total)
        self.status_message = f"Run complete: {self.counter_text}"

    def tick(self) -> bool:
        """Advance an animating run by one step. Returns True while work remains."""
        if not self.running:
            return False
        assert self.run is not None
        if self.run.step():
            return True
        self._finish()
        return False

    def advance(self, budget: float) -> bool:
        """
        Tick an animating run until budget seconds have passed, so one frame
        covers many steps on large grids.

        Returns:
            True while work remains
        """
        deadline = time.monotonic() + budget
        while self.tick():
            if time.monotonic() >= deadline:
                return True
        return False

    def reset(self, size: int | None = None) -> None:
        if size is not None and self.available_rows is not None:
            check_fits_display(size, self.available_rows)
        self.grid.rebuild(size)
        self.run = None
        self.pen_down = False
        self.painted_this_stroke.clear()
        self.cursor = min(self.cursor, len(self.grid.cells) - 1)
        self.counter_text = area_label(0)
        self.status_message = f"Grid reset to {self.grid.size}x{self.grid.size}"

    def cycle_size(self) -> None:
        """Switch to the next grid size in the cycle that fits the display."""
        size = next_grid_size(self.grid.size)
        while size != self.grid.size:
            try:
                self.reset(size)
                return
            except ConfigurationError:
                logger.info("Skipping grid size %d, too large for the display", size)
                size = next_grid_size(size)
        self.status_message = "No other grid size fits the display"


class InteractiveDemo:
    """Keyboard-driven painting surface on top of a PaintSession."""

    def __init__(self, size: int = DEFAULT_GRID_SIZE) -> None:
        self.console = Console()
        available_rows = max(self.console.height - RESERVED_ROWS, 0)
        self.session = PaintSession(Grid(size), available_rows=available_rows)

    def generate_display(self) -> Panel:
        session = self.session
        grid_text = render(session.grid, highlight=session.cursor)

        status = Text()
        if session.counter_visible:
            status.append(session.counter_text + "\n\n", style="bold")
        status.append(Text.from_ansi(grid_text))
        status.append("\n\n")
        status.append("Keys:\n", style="bold cyan")
        status.append("  WASD/arrows - Move cursor\n")
        status.append("  Space - Toggle boundary    P - Pen up/down\n")
        status.append("  X - Toggle start point     G - Run estimator\n")
        status.append(
            f"  T - Animation delay ({'on' if session.stepped else 'off'})"
            f"   R - Reset   N - Grid size ({next_grid_size(session.grid.size)})\n"
        )
        status.append("  Q - Quit\n\n")

        status.append("─" * 40 + "\n", style="dim")
        status.append("Status: ", style="bold")
        status.append(session.status_message)

        return Panel(status, title="Areagrid", border_style="green")

    def handle_key(self, key: str) -> bool:
        """Apply one key press. Returns False when the demo should quit."""
        session = self.session
        lowered = key.lower()
        if lowered == "q":
            return False
        move = MOVES.get(key) or MOVES.get(lowered)
        if move is not None:
            session.move(*move)
        elif key == " ":
            session.toggle_boundary()
        elif lowered == "p":
            session.toggle_pen()
        elif lowered == "x":
            session.toggle_start_point()
        elif lowered == "g":
            session.start_run()
        elif lowered == "t":
            session.set_stepped(not session.stepped)
        elif lowered == "r":
            session.reset()
        elif lowered == "n":
            session.cycle_size()
        else:
            session.status_message = f"Unknown key: {repr(key)}"
        return True

    def run(self) -> None:
        with Live(self.generate_display(), console=self.console, refresh_per_second=20) as live:
            try:
                while True:
                    live.update(self.generate_display())
                    key = readchar.readkey()
                    if not self.handle_key(key):
                        break
                    # Animate a stepped run to completion before reading more keys
                    while self.session.advance(FRAME_BUDGET):
                        live.update(self.generate_display())
            except KeyboardInterrupt:
                self.session.status_message = "Interrupted by user"
                live.update(self.generate_display())


def main(argv: list[str]) -> None:
    size = int(argv[1]) if len(argv) > 1 else DEFAULT_GRID_SIZE
    try:
        demo = InteractiveDemo(size)
    except ConfigurationError as e:
        print(f"ERROR: {e}")
        sys.exit(1)
    demo.run()


if __name__ == "__main__":
    main(sys.argv)
