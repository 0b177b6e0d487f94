"""Tests for ascii_render module."""

from areagrid import AreaEstimator
from ascii_render import area_label, render, render_plain, state_summary
from grid_parser import parse_grid, rectangle_outline
from grid_types import Grid


class TestRenderPlain:
    """Tests for uncoloured rendering."""

    def test_fresh_grid(self) -> None:
        """Parsed states map to their text characters."""
        grid = parse_grid("#..|.S.|..#")
        assert render_plain(grid) == "#..\n.S.\n..#"

    def test_after_run(self) -> None:
        """Area cells are drawn as 'o' and the outline is kept."""
        grid = parse_grid(rectangle_outline(5))
        AreaEstimator(grid).run()
        assert render_plain(grid) == "#####\n#ooo#\n#oSo#\n#ooo#\n#####"


class TestRender:
    """Tests for coloured rendering."""

    def test_one_line_per_row(self) -> None:
        """Each grid row becomes one output line."""
        grid = Grid(4)
        assert len(render(grid).split("\n")) == 4

    def test_highlight_default_cell(self) -> None:
        """A highlighted default cell is drawn as the cursor glyph."""
        grid = Grid(3)
        assert "@" not in render(grid)
        assert "@" in render(grid, highlight=4)

    def test_highlight_keeps_state_glyph(self) -> None:
        """Highlighting a painted cell still shows what it is."""
        grid = parse_grid("#.|..")
        assert "@" not in render(grid, highlight=0)
        assert "#" in render(grid, highlight=0)


class TestLabels:
    """Tests for status text helpers."""

    def test_area_label(self) -> None:
        """The counter reads like the original window label."""
        assert area_label(0) == "Area: 0 units^2"
        assert area_label(25) == "Area: 25 units^2"

    def test_state_summary(self) -> None:
        """Summary lists every state with its count."""
        grid = parse_grid("#.|.S")
        assert state_summary(grid) == "default=2, boundary=1, start_point=1, area=0"
