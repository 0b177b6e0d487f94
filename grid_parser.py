"""
Grid parsing utilities for areagrid.

Grids are written one character per cell, rows separated by | or newlines:
    .  or  _   DEFAULT
    #          BOUNDARY
    S          START_POINT
AREA cells are written as 'o' by format_grid but cannot be parsed back, since
only the estimator produces them.
"""

from __future__ import annotations

from grid_types import MAX_GRID_SIZE, CellState, ConfigurationError, Grid

__all__ = ["parse_grid", "format_grid", "rectangle_outline"]

CHAR_TO_STATE = {
    ".": CellState.DEFAULT,
    "_": CellState.DEFAULT,
    "#": CellState.BOUNDARY,
    "S": CellState.START_POINT,
}

STATE_TO_CHAR = {
    CellState.DEFAULT: ".",
    CellState.BOUNDARY: "#",
    CellState.START_POINT: "S",
    CellState.AREA: "o",
}


def parse_grid(definition: str) -> Grid:
    """
    Parse a square grid from its text form.

    Example:
        "###|#S#|###"
        Creates a 3x3 grid with a boundary ring and the start point at index 4.

    Args:
        definition: Rows separated by | or newlines; surrounding whitespace is ignored

    Returns:
        A freshly built Grid with the described cell states

    Raises:
        ConfigurationError: If the text is empty, not square, too large, has an
            unknown character or more than one start point
    """
    row_strings = [
        row.strip()
        for line in definition.strip().split("\n")
        for row in line.split("|")
        if row.strip()
    ]
    if not row_strings:
        raise ConfigurationError("Empty grid definition")

    size = len(row_strings)
    mismatched = [(i, len(row)) for i, row in enumerate(row_strings) if len(row) != size]
    if mismatched:
        error_msg = (
            f"Grid definition is not square\n"
            f"  Expected: {size} cells per row (one per row)\n"
            f"  Mismatched rows:\n"
        )
        for row_idx, actual_cols in mismatched:
            error_msg += f"    Row {row_idx}: {actual_cols} cells - \"{row_strings[row_idx]}\"\n"
        raise ConfigurationError(error_msg.rstrip("\n"))

    if size > MAX_GRID_SIZE:
        raise ConfigurationError(
            f"Grid definition has {size} rows\n"
            f"  At most {MAX_GRID_SIZE} are allowed"
        )

    grid = Grid(size)
    start_index: int | None = None

    for row_idx, row_str in enumerate(row_strings):
        for col_idx, char in enumerate(row_str):
            state = CHAR_TO_STATE.get(char)
            if state is None:
                raise ConfigurationError(
                    f"Invalid cell character: '{char}'\n"
                    f"  Row {row_idx}: \"{row_str}\"\n"
                    f"  Position: column {col_idx}\n"
                    f"  Valid characters:\n"
                    f"    - '.' or '_': default cell\n"
                    f"    - '#': boundary cell\n"
                    f"    - 'S': start point (at most one)"
                )
            index = row_idx * size + col_idx
            if state == CellState.START_POINT:
                if start_index is not None:
                    start_row, start_col = divmod(start_index, size)
                    raise ConfigurationError(
                        f"Multiple start points\n"
                        f"  First: row {start_row}, column {start_col}\n"
                        f"  Second: row {row_idx}, column {col_idx}"
                    )
                start_index = index
            elif state == CellState.BOUNDARY:
                grid.cells[index].transition(CellState.BOUNDARY)

    if start_index is not None:
        grid.set_start_point(start_index)

    return grid


def format_grid(grid: Grid) -> str:
    """Write a grid in the parse_grid format, rows separated by |."""
    rows = []
    for row in range(grid.size):
        cells = grid.cells[row * grid.size:(row + 1) * grid.size]
        rows.append("".join(STATE_TO_CHAR[cell.state] for cell in cells))
    return "|".join(rows)


def rectangle_outline(
    size: int,
    top: int = 0,
    left: int = 0,
    height: int | None = None,
    width: int | None = None,
    start: tuple[int, int] | None = None,
) -> str:
    """
    Text for a size x size grid with one rectangle outlined in boundary cells.

    Without height/width the rectangle is the grid's own border. The start
    point defaults to the rectangle's centre.
    """
    height = size - top if height is None else height
    width = size - left if width is None else width
    bottom = top + height - 1
    right = left + width - 1
    if start is None:
        start = ((top + bottom) // 2, (left + right) // 2)

    rows = []
    for r in range(size):
        chars = []
        for c in range(size):
            on_edge = (r in (top, bottom) and left <= c <= right) or (
                c in (left, right) and top <= r <= bottom
            )
            if (r, c) == start:
                chars.append("S")
            elif on_edge:
                chars.append("#")
            else:
                chars.append(".")
        rows.append("".join(chars))
    return "|".join(rows)
