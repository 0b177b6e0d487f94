"""
Demonstration scripts for the areagrid estimator.
"""

import logging
import sys

from areagrid import AreaEstimator, CellState
from ascii_render import area_label, render, state_summary
from grid_parser import parse_grid, rectangle_outline

LAYOUTS = dict(
    open_grid="...|.S.|...",
    rectangle=rectangle_outline(5),
    leaking="""
        .......
        .##.##.
        .#...#.
        .#.S.#.
        .#...#.
        .#####.
        .......
    """,
    diamond="""
        ....#....
        ...#.#...
        ..#...#..
        .#.....#.
        #...S...#
        .#.....#.
        ..#...#..
        ...#.#...
        ....#....
    """,
    ring="""
        ..........
        ..######..
        .#......#.
        .#.####.#.
        .#.#..#.#.
        .#.####.#.
        .#S.....#.
        ..######..
        ..........
        ..........
    """,
)


def show(name: str, stepped: bool = False) -> None:
    grid = parse_grid(LAYOUTS[name])
    updates: list[int] = []
    estimator = AreaEstimator(grid, on_count_updated=updates.append)
    estimator.set_stepped_mode(stepped)

    print("=" * 40)
    print(f"{name} ({grid.size}x{grid.size}, {'stepped' if stepped else 'immediate'}):")
    print("=" * 40)
    print(render(grid))
    print()

    run = estimator.run()
    steps = 0
    while run.step():
        steps += 1

    print(render(grid))
    print()
    print(f"{area_label(run.total)} (flood {run.flood_total}, corners {run.corner_rescues})")
    print(f"Observer updates: {len(updates)}, steps after run(): {steps}")
    print(f"Cells: {state_summary(grid)}")
    uncounted = [
        c.index for c in grid.cells if c.state == CellState.BOUNDARY and not c.counted
    ]
    if uncounted:
        print(f"Boundary cells never counted: {uncounted}")
    print()


def demo(verbose: bool = False) -> None:
    """Run every layout, once immediately and the rectangle once stepped."""
    if verbose:
        logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
    for name in LAYOUTS:
        show(name)
    show("rectangle", stepped=True)


if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] in LAYOUTS:
        show(sys.argv[1], stepped="stepped" in sys.argv[2:])
    else:
        demo(verbose="-v" in sys.argv[1:])
