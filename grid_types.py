"""
Shared type definitions for the areagrid system.

Cells are plain data holders owned by a Grid. Rendering and painting live
elsewhere and only read or write cells through the Grid.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

logger = logging.getLogger(__name__)

MAX_GRID_SIZE = 128


# =============================================================================
# Errors
# =============================================================================


class AreagridError(Exception):
    """Base class for all areagrid errors."""


class ConfigurationError(AreagridError, ValueError):
    """A grid could not be built with the requested configuration."""


class PreconditionError(AreagridError, RuntimeError):
    """An operation was invoked on a grid that is not in a suitable state."""


class StateTransitionError(PreconditionError):
    """A cell was asked to move along an edge its state machine does not have."""


# =============================================================================
# Cells
# =============================================================================


class CellState(Enum):
    """State of a single grid cell."""

    DEFAULT = "default"
    BOUNDARY = "boundary"  # Painted outline of the shape
    START_POINT = "start_point"
    AREA = "area"  # Counted by the flood fill; terminal


ALLOWED_TRANSITIONS: dict[CellState, frozenset[CellState]] = {
    CellState.DEFAULT: frozenset({CellState.BOUNDARY, CellState.START_POINT, CellState.AREA}),
    CellState.BOUNDARY: frozenset({CellState.DEFAULT}),
    CellState.START_POINT: frozenset({CellState.DEFAULT}),
    CellState.AREA: frozenset(),
}


@dataclass(eq=False)
class Cell:
    """A single grid unit."""

    index: int
    state: CellState = CellState.DEFAULT
    counted: bool = False

    def transition(self, new_state: CellState) -> None:
        """
        Move the cell to new_state, enforcing the cell state machine.

        Setting a cell to the state it is already in does nothing.

        Raises:
            StateTransitionError: If the edge does not exist
        """
        if new_state == self.state:
            return
        if new_state not in ALLOWED_TRANSITIONS[self.state]:
            allowed = ", ".join(sorted(s.name for s in ALLOWED_TRANSITIONS[self.state])) or "none"
            raise StateTransitionError(
                f"Illegal cell transition\n"
                f"  Cell: {self.index}\n"
                f"  From: {self.state.name}\n"
                f"  To: {new_state.name}\n"
                f"  Allowed from {self.state.name}: {allowed}"
            )
        self.state = new_state

    def mark_counted(self) -> None:
        self.counted = True


# =============================================================================
# Grid
# =============================================================================


def validate_size(size: int) -> int:
    """
    Check a requested grid size against the traversal-cost bound.

    Returns:
        The size, unchanged

    Raises:
        ConfigurationError: If size is not an integer in [1, MAX_GRID_SIZE]
    """
    if isinstance(size, bool) or not isinstance(size, int):
        raise ConfigurationError(f"Grid size must be an integer, got {size!r}")
    if size < 1:
        raise ConfigurationError(f"Grid size must be at least 1, got {size}")
    if size > MAX_GRID_SIZE:
        raise ConfigurationError(
            f"Grid size {size} is too large\n"
            f"  Having that many cells in the grid would make the traversal hang\n"
            f"  Please use a size of at most {MAX_GRID_SIZE}"
        )
    return size


@dataclass(eq=False)
class Grid:
    """
    A square N x N grid of cells in row-major order.

    Topology is fixed by size: neighbours are computed from the index, never
    stored. Rebuilding discards every cell and the start point.
    """

    size: int
    cells: list[Cell] = field(init=False, repr=False)
    start_point: Cell | None = field(init=False, default=None)
    generation: int = field(init=False, default=0)

    def __post_init__(self) -> None:
        self.rebuild(self.size)

    def rebuild(self, size: int | None = None) -> None:
        """Allocate fresh DEFAULT cells, optionally at a new size."""
        new_size = validate_size(self.size if size is None else size)
        self.size = new_size
        self.cells = [Cell(i) for i in range(new_size * new_size)]
        self.start_point = None
        self.generation += 1
        logger.info("Built %dx%d grid (generation %d)", new_size, new_size, self.generation)

    @property
    def last_row(self) -> int:
        return (len(self.cells) - 1) // self.size

    def cell(self, index: int) -> Cell:
        if not 0 <= index < len(self.cells):
            raise IndexError(f"Cell index {index} out of range for {self.size}x{self.size} grid")
        return self.cells[index]

    def cell_at(self, row: int, col: int) -> Cell:
        if not (0 <= row < self.size and 0 <= col < self.size):
            raise IndexError(f"Cell ({row}, {col}) out of range for {self.size}x{self.size} grid")
        return self.cells[row * self.size + col]

    def position(self, index: int) -> tuple[int, int]:
        """Return (row, col) for a cell index."""
        self.cell(index)
        return divmod(index, self.size)

    def neighbors(self, index: int) -> list[Cell]:
        """
        Von Neumann neighbourhood of a cell, in the order left, up, right, down.

        Neighbours that would cross a grid edge are omitted (no wraparound).
        """
        self.cell(index)
        n = self.size
        row, col = divmod(index, n)
        neighbourhood: list[Cell] = []

        if col > 0:
            neighbourhood.append(self.cells[index - 1])
        if row > 0:
            neighbourhood.append(self.cells[index - n])
        if col < n - 1:
            neighbourhood.append(self.cells[index + 1])
        if row < self.last_row:
            neighbourhood.append(self.cells[index + n])

        return neighbourhood

    def set_start_point(self, target: Cell | int) -> Cell:
        """
        Mark a DEFAULT cell as the start point.

        Raises:
            PreconditionError: If a start point already exists or the cell is not DEFAULT
        """
        cell = self.cell(target if isinstance(target, int) else target.index)
        if self.start_point is not None:
            raise PreconditionError(
                f"Grid already has a start point at cell {self.start_point.index}\n"
                f"  Clear it before placing a new one"
            )
        if cell.state != CellState.DEFAULT:
            raise PreconditionError(
                f"Start point must be placed on a DEFAULT cell\n"
                f"  Cell {cell.index} is {cell.state.name}"
            )
        cell.transition(CellState.START_POINT)
        self.start_point = cell
        logger.debug("Start point set at cell %d", cell.index)
        return cell

    def clear_start_point(self) -> None:
        if self.start_point is None:
            return
        self.start_point.transition(CellState.DEFAULT)
        logger.debug("Start point cleared from cell %d", self.start_point.index)
        self.start_point = None

    def count_states(self) -> dict[CellState, int]:
        counts = {state: 0 for state in CellState}
        for cell in self.cells:
            counts[cell.state] += 1
        return counts
