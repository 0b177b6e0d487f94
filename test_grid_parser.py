"""Tests for grid_parser module."""

import pytest

from areagrid import AreaEstimator
from grid_parser import format_grid, parse_grid, rectangle_outline
from grid_types import MAX_GRID_SIZE, CellState, ConfigurationError


class TestParseGrid:
    """Tests for parse_grid."""

    def test_simple_grid(self) -> None:
        """Parse a small grid using | separators."""
        grid = parse_grid("#.|.S")

        assert grid.size == 2
        assert grid.cell(0).state == CellState.BOUNDARY
        assert grid.cell(1).state == CellState.DEFAULT
        assert grid.cell(2).state == CellState.DEFAULT
        assert grid.cell(3).state == CellState.START_POINT
        assert grid.start_point is grid.cell(3)

    def test_multiline_with_indentation(self) -> None:
        """Newlines work as row separators and indentation is ignored."""
        grid = parse_grid(
            """
            ###
            #S#
            ###
            """
        )
        assert grid.size == 3
        assert grid.start_point is grid.cell(4)
        assert grid.count_states()[CellState.BOUNDARY] == 8

    def test_underscore_is_default(self) -> None:
        """'_' is accepted as an alternative to '.'."""
        grid = parse_grid("_.|._")
        assert all(cell.state == CellState.DEFAULT for cell in grid.cells)
        assert grid.start_point is None

    def test_cells_are_uncounted(self) -> None:
        """Parsed grids are ready to run."""
        grid = parse_grid("#.|.S")
        assert not any(cell.counted for cell in grid.cells)


class TestParseGridErrors:
    """Tests for parse_grid error reporting."""

    def test_empty_definition(self) -> None:
        """Whitespace alone is not a grid."""
        with pytest.raises(ConfigurationError, match="Empty"):
            parse_grid("   \n  ")

    def test_not_square(self) -> None:
        """Rows must have as many cells as there are rows."""
        with pytest.raises(ConfigurationError, match="not square") as exc_info:
            parse_grid("...|..|...")
        assert "Row 1: 2 cells" in str(exc_info.value)

    def test_rectangular_rejected(self) -> None:
        """Consistent but non-square rows are still rejected."""
        with pytest.raises(ConfigurationError, match="not square"):
            parse_grid("....|....")

    def test_invalid_character(self) -> None:
        """Unknown characters are reported with their position."""
        with pytest.raises(ConfigurationError, match="Invalid cell character") as exc_info:
            parse_grid("..|.x")
        message = str(exc_info.value)
        assert "Row 1" in message
        assert "column 1" in message

    def test_area_cells_cannot_be_parsed(self) -> None:
        """AREA is produced by the estimator only."""
        with pytest.raises(ConfigurationError, match="'o'"):
            parse_grid("o.|.S")

    def test_multiple_start_points(self) -> None:
        """At most one S may appear."""
        with pytest.raises(ConfigurationError, match="Multiple start points"):
            parse_grid("S.|.S")

    def test_too_large(self) -> None:
        """Grids beyond the size bound are refused."""
        size = MAX_GRID_SIZE + 1
        definition = "\n".join("." * size for _ in range(size))
        with pytest.raises(ConfigurationError, match=str(MAX_GRID_SIZE)):
            parse_grid(definition)


class TestFormatGrid:
    """Tests for format_grid."""

    def test_format_matches_input(self) -> None:
        """Formatting a parsed grid gives back the | separated text."""
        text = "#.#|.S.|#.#"
        assert format_grid(parse_grid(text)) == text

    def test_format_after_run_shows_area(self) -> None:
        """Counted default cells are written as 'o'."""
        grid = parse_grid("...|.S.|...")
        AreaEstimator(grid).run()
        assert format_grid(grid) == "ooo|oSo|ooo"


class TestRectangleOutline:
    """Tests for the rectangle helper."""

    def test_border_rectangle(self) -> None:
        """Default rectangle is the grid border with the start in the centre."""
        assert rectangle_outline(5) == "#####|#...#|#.S.#|#...#|#####"

    def test_inner_rectangle(self) -> None:
        """An offset rectangle leaves the outside default."""
        text = rectangle_outline(5, top=1, left=1, height=3, width=3)
        assert text == ".....|.###.|.#S#.|.###.|....."

    def test_explicit_start(self) -> None:
        """The start point can be placed anywhere."""
        grid = parse_grid(rectangle_outline(5, start=(1, 1)))
        assert grid.start_point is grid.cell(6)
