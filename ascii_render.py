"""
ASCII rendering for areagrid grids.

One glyph per cell, coloured by state with simple_chalk. The plain form uses
the same characters as grid_parser.format_grid.
"""

from __future__ import annotations

from typing import Callable

import simple_chalk as chalk  # type: ignore[import-untyped]

from grid_parser import STATE_TO_CHAR
from grid_types import CellState, Grid

__all__ = ["area_label", "render", "render_plain", "state_summary"]

STATE_COLORS: dict[CellState, Callable[[str], str]] = {
    CellState.DEFAULT: chalk.white,
    CellState.BOUNDARY: chalk.blueBright,
    CellState.START_POINT: chalk.yellow,
    CellState.AREA: chalk.red,
}

HIGHLIGHT_COLOR: Callable[[str], str] = chalk.greenBright
HIGHLIGHT_CHAR = "@"


def render_to_buffer(
    grid: Grid,
    color_fn: Callable[[CellState], Callable[[str], str]],
    highlight: int | None = None,
) -> list[list[str]]:
    """Render each cell of grid into a row-major character buffer."""
    buffer: list[list[str]] = [[" " for _ in range(grid.size)] for _ in range(grid.size)]
    for cell in grid.cells:
        row, col = divmod(cell.index, grid.size)
        if cell.index == highlight:
            # Keep the underlying state visible unless it is plain background
            char = HIGHLIGHT_CHAR if cell.state == CellState.DEFAULT else STATE_TO_CHAR[cell.state]
            buffer[row][col] = HIGHLIGHT_COLOR(char)
        else:
            buffer[row][col] = color_fn(cell.state)(STATE_TO_CHAR[cell.state])
    return buffer


def render(grid: Grid, highlight: int | None = None) -> str:
    """
    Render a grid to a string with ANSI colours.

    Args:
        grid: The grid to render
        highlight: Optional cell index to draw as a cursor

    Returns:
        Rendered string, cells separated by spaces so they look roughly square
    """
    buffer = render_to_buffer(grid, lambda state: STATE_COLORS[state], highlight)
    return "\n".join(" ".join(row) for row in buffer)


def render_plain(grid: Grid) -> str:
    """Render a grid without colours, one text row per grid row."""
    buffer = render_to_buffer(grid, lambda state: lambda s: s)
    return "\n".join("".join(row) for row in buffer)


def area_label(total: int) -> str:
    return f"Area: {total} units^2"


def state_summary(grid: Grid) -> str:
    counts = grid.count_states()
    return ", ".join(f"{state.value}={counts[state]}" for state in CellState)
