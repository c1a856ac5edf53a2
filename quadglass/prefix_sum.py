# quadglass/prefix_sum.py
import logging
from typing import Any, Sequence, Tuple, Union

import numpy as np

from .color import Color
from .errors import InvalidInputError

logger = logging.getLogger(__name__)

Coord = Tuple[int, int]  # (row, col)


def as_int_grid(grid: Any) -> np.ndarray:
    """Normalise a list of rows or an ndarray to an int64 (H, W, C) array."""
    if isinstance(grid, np.ndarray):
        if grid.ndim not in (2, 3):
            raise InvalidInputError(f"grid must be 2D or 3D, got {grid.ndim}D")
        if grid.shape[0] == 0:
            raise InvalidInputError("array has height 0")
        if grid.shape[1] == 0:
            raise InvalidInputError("array has width 0")
        arr = grid.astype(np.int64)
        return arr if arr.ndim == 3 else arr[..., np.newaxis]

    rows = list(grid)
    if not rows:
        raise InvalidInputError("array has height 0")
    width = len(rows[0])
    if width == 0:
        raise InvalidInputError("array has width 0")
    for i, row in enumerate(rows):
        if len(row) != width:
            raise InvalidInputError(f"row {i} has width {len(row)}, expected {width}")
    cells = [[c.as_tuple() if isinstance(c, Color) else c for c in row] for row in rows]
    return as_int_grid(np.asarray(cells, dtype=np.int64))


class PrefixSum2D:
    """Summed-area table over an (H, W) or (H, W, C) grid.

    ``table[i+1, j+1]`` holds the sum of ``grid[:i+1, :j+1]``; row 0 and
    column 0 are zero padding, so any inclusive rectangle is answered with
    four lookups.
    """

    def __init__(self, grid: Union[np.ndarray, Sequence[Sequence[Any]]]):
        arr = as_int_grid(grid)
        h, w, c = arr.shape
        table = np.zeros((h + 1, w + 1, c), dtype=np.int64)
        table[1:, 1:] = arr.cumsum(axis=0).cumsum(axis=1)
        table.setflags(write=False)
        self._table = table
        self._height = h
        self._width = w
        self._channels = c
        self._scalar = isinstance(grid, np.ndarray) and grid.ndim == 2
        logger.debug("built %dx%dx%d prefix table", h, w, c)

    @property
    def height(self) -> int:
        return self._height

    @property
    def width(self) -> int:
        return self._width

    @property
    def channels(self) -> int:
        return self._channels

    @property
    def table(self) -> np.ndarray:
        return self._table

    def query_sum(self, top_left: Coord, bottom_right: Coord):
        """Sum over the inclusive rectangle ``top_left..bottom_right``.

        Returns an int for 2D array input, otherwise an int64 vector of
        length ``channels``.
        """
        r0, c0 = top_left
        r1, c1 = bottom_right
        if not (0 <= r0 <= r1 < self._height and 0 <= c0 <= c1 < self._width):
            raise IndexError(
                f"rectangle {top_left}..{bottom_right} outside {self._height}x{self._width}")
        t = self._table
        s = t[r1 + 1, c1 + 1] - t[r0, c1 + 1] - t[r1 + 1, c0] + t[r0, c0]
        if self._scalar:
            return int(s[0])
        return s
