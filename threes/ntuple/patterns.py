"""
Six-cell patterns of the n-tuple network.

Four base shapes are laid over the board in each of its eight symmetries, giving 32 patterns.
"""

from numpy import arange, rot90

# ##>: Base shapes, as cell indices of the row-major grid.
BASE_SHAPES = (
    (0, 1, 2, 3, 4, 5),
    (4, 5, 6, 7, 8, 9),
    (0, 1, 2, 4, 5, 6),
    (4, 5, 6, 8, 9, 10),
)


def _symmetries() -> list[tuple[int, ...]]:
    """The eight rotations and reflections of the grid, each as a cell permutation."""
    grid = arange(16).reshape(4, 4)
    views = []
    for layout in (grid, grid.T):
        for turns in range(4):
            views.append(tuple(int(cell) for cell in rot90(layout, k=turns).ravel()))
    return views


PATTERNS: tuple[tuple[int, ...], ...] = tuple(
    tuple(view[cell] for cell in shape) for view in _symmetries() for shape in BASE_SHAPES
)
