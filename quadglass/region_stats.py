# quadglass/region_stats.py
import logging
from typing import Any, Tuple

import numpy as np
from PIL import Image

from .color import Color
from .errors import InvalidInputError
from .prefix_sum import Coord, PrefixSum2D, as_int_grid

logger = logging.getLogger(__name__)


def pixel_count(top_left: Coord, bottom_right: Coord) -> int:
    rows = bottom_right[0] - top_left[0] + 1
    cols = bottom_right[1] - top_left[1] + 1
    return rows * cols


class RegionStats:
    """Sum, mean and error queries over any rectangle of an RGB grid.

    Holds two summed-area tables built from the same pixels: one over the
    raw channel values and one over their squares. Every query is O(1).
    """

    def __init__(self, grid: Any):
        arr = as_int_grid(grid)
        if arr.shape[2] != 3:
            raise InvalidInputError(f"expected 3 color channels, got {arr.shape[2]}")
        self._sums = PrefixSum2D(arr)
        self._square_sums = PrefixSum2D(arr * arr)
        logger.debug("region stats ready for %dx%d image", self.height, self.width)

    @classmethod
    def from_array(cls, img: np.ndarray) -> "RegionStats":
        if img.ndim != 3 or img.shape[2] != 3:
            raise InvalidInputError("img must be HxW x 3 RGB")
        return cls(img)

    @classmethod
    def from_image(cls, pil: Image.Image) -> "RegionStats":
        return cls(np.asarray(pil.convert("RGB")))

    @property
    def height(self) -> int:
        return self._sums.height

    @property
    def width(self) -> int:
        return self._sums.width

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.height, self.width)

    def sum(self, top_left: Coord, bottom_right: Coord) -> Color:
        return Color.from_pixel(self._sums.query_sum(top_left, bottom_right))

    def square_sum(self, top_left: Coord, bottom_right: Coord) -> Color:
        return Color.from_pixel(self._square_sums.query_sum(top_left, bottom_right))

    def average(self, top_left: Coord, bottom_right: Coord) -> Color:
        return self.sum(top_left, bottom_right) // pixel_count(top_left, bottom_right)

    def error_metric(self, top_left: Coord, bottom_right: Coord) -> int:
        """Total channel variance scaled by pixel count.

        The mean is truncated before squaring and subtracted from the
        truncated mean of squares; refinement order depends on this order.
        """
        n = pixel_count(top_left, bottom_right)
        mean = self.sum(top_left, bottom_right) // n
        variance = self.square_sum(top_left, bottom_right) // n - mean * mean
        return variance.channel_sum() * n
