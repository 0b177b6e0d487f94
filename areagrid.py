"""
Cellular-automaton area estimation over a square grid.

Two-phase algorithm: flood fill from the start point's neighbours, then a
single corner-correction pass for boundary cells the 4-connected fill cannot
reach. Runs either to completion immediately or one unit of work per step.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Iterator

from grid_types import (
    MAX_GRID_SIZE,
    AreagridError,
    Cell,
    CellState,
    ConfigurationError,
    Grid,
    PreconditionError,
    StateTransitionError,
)

logger = logging.getLogger(__name__)

__all__ = [
    "MAX_GRID_SIZE",
    "AreaEstimator",
    "AreagridError",
    "Cell",
    "CellState",
    "ConfigurationError",
    "CountObserver",
    "EstimationRun",
    "Grid",
    "PreconditionError",
    "RunPhase",
    "StateTransitionError",
    "estimate_area",
]

# Type alias for the count-update callback
CountObserver = Callable[[int], None]


class RunPhase(Enum):
    """Which part of the algorithm a run is in."""

    FLOOD = "flood"
    CORNERS = "corners"
    DONE = "done"


class EstimationRun:
    """
    Cooperative handle on a single estimation run.

    Each step performs one unit of work (one cell visit or one corner rescue)
    and hands control back, so a caller can redraw between steps.

    Usage:
        run = estimator.run()
        while run.step():
            redraw(grid)
        print(run.total)
    """

    def __init__(self, estimator: AreaEstimator) -> None:
        self.estimator = estimator
        self.generation = estimator.grid.generation
        self.start = estimator.grid.start_point
        self.phase = RunPhase.FLOOD
        self.flood_total: int | None = None
        self.corner_rescues = 0
        self._iterator: Iterator[int] = estimator._steps(self)

    @property
    def total(self) -> int:
        return self.estimator.total_counted

    @property
    def finished(self) -> bool:
        return self.phase == RunPhase.DONE

    def __iter__(self) -> Iterator[int]:
        return self

    def __next__(self) -> int:
        if self.finished:
            raise StopIteration
        grid = self.estimator.grid
        if grid.generation != self.generation:
            raise PreconditionError(
                "Grid was rebuilt while an estimation run was in progress\n"
                "  Start a new run on the rebuilt grid"
            )
        if grid.start_point is not self.start:
            raise PreconditionError(
                "Start point was moved while an estimation run was in progress\n"
                "  Rebuild the grid and start a new run"
            )
        return next(self._iterator)

    def step(self) -> bool:
        """Perform one unit of work. Returns False once the run has finished."""
        try:
            next(self)
        except StopIteration:
            return False
        return True

    def run_to_completion(self) -> int:
        for _ in self:
            pass
        return self.total


class AreaEstimator:
    """
    Counts the cells enclosed by a painted boundary around the grid's start point.

    The estimator does not own the grid; the painting collaborator edits it
    between runs. Each grid build may be estimated once.
    """

    def __init__(self, grid: Grid, on_count_updated: CountObserver | None = None) -> None:
        self.grid = grid
        self.on_count_updated = on_count_updated
        self.stepped = False
        self.total_counted = 0
        self._last_generation: int | None = None

    def set_stepped_mode(self, stepped: bool) -> None:
        self.stepped = stepped

    def set_observer(self, on_count_updated: CountObserver | None) -> None:
        self.on_count_updated = on_count_updated

    def run(self) -> EstimationRun:
        """
        Estimate the area around the grid's start point.

        In immediate mode the returned run has already finished. In stepped
        mode no work has been done yet; drive it with step() or iteration.

        Raises:
            PreconditionError: If the grid has no start point, or this grid
                build has already been estimated
        """
        if self.grid.start_point is None:
            raise PreconditionError(
                "You must set a start location before running the estimator"
            )
        if self._last_generation == self.grid.generation:
            raise PreconditionError(
                "This grid has already been estimated\n"
                "  Rebuild the grid before running again"
            )
        self._last_generation = self.grid.generation

        # The start point counts itself but is never flagged
        self.total_counted = 1
        run = EstimationRun(self)
        if not self.stepped:
            run.run_to_completion()
        return run

    def _notify(self) -> None:
        if self.on_count_updated is not None:
            self.on_count_updated(self.total_counted)

    def _steps(self, run: EstimationRun) -> Iterator[int]:
        """Internal generator for EstimationRun. Do not call directly."""
        grid = self.grid
        start = run.start
        assert start is not None

        # LIFO worklist with neighbours pushed in reverse, so cells come off
        # in the same order a recursive left/up/right/down visit would reach them
        stack: list[Cell] = list(reversed(grid.neighbors(start.index)))
        while stack:
            cell = stack.pop()
            if cell.counted:
                continue

            # Observers see the total before this cell's own contribution
            self._notify()

            if cell.state == CellState.DEFAULT:
                self.total_counted += 1
                cell.mark_counted()
                cell.transition(CellState.AREA)
                stack.extend(reversed(grid.neighbors(cell.index)))
            elif cell.state == CellState.BOUNDARY:
                # Counted, but the fill does not spread through it
                self.total_counted += 1
                cell.mark_counted()

            yield self.total_counted

        run.flood_total = self.total_counted
        run.phase = RunPhase.CORNERS

        yield from self._correct_corners(run)

        run.phase = RunPhase.DONE
        logger.info(
            "Estimated area: flood=%d, corners=%d, total=%d (grid %dx%d)",
            run.flood_total,
            run.corner_rescues,
            self.total_counted,
            grid.size,
            grid.size,
        )

    def _correct_corners(self, run: EstimationRun) -> Iterator[int]:
        """
        Count boundary cells touching the interior only diagonally.

        One pass in index order. A cell is rescued only by a boundary
        neighbour counted during the flood, not by one rescued in this pass.
        """
        rescued: set[int] = set()
        for cell in self.grid.cells:
            if cell.state != CellState.BOUNDARY or cell.counted:
                continue
            for neighbour in self.grid.neighbors(cell.index):
                if (
                    neighbour.state == CellState.BOUNDARY
                    and neighbour.counted
                    and neighbour.index not in rescued
                ):
                    self.total_counted += 1
                    cell.mark_counted()
                    rescued.add(cell.index)
                    run.corner_rescues += 1
                    self._notify()
                    yield self.total_counted
                    break


def estimate_area(grid: Grid, on_count_updated: CountObserver | None = None) -> int:
    """Run a fresh immediate-mode estimator over grid and return the total."""
    return AreaEstimator(grid, on_count_updated).run().total
