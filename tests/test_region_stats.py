"""Tests for region statistics: sums, means and the error metric."""
import numpy as np
import pytest
from PIL import Image

from quadglass.color import Color
from quadglass.errors import InvalidInputError
from quadglass.region_stats import RegionStats, pixel_count


def _reference_metric(img, tl, br):
    block = img[tl[0]:br[0] + 1, tl[1]:br[1] + 1].reshape(-1, 3).astype(np.int64)
    n = block.shape[0]
    total = 0
    for ch in range(3):
        s = int(block[:, ch].sum())
        sq = int((block[:, ch] ** 2).sum())
        mean = s // n
        total += sq // n - mean * mean
    return total * n


class TestAverage:

    def test_uniform_image(self, uniform_4x4):
        stats = RegionStats(uniform_4x4)
        assert stats.average((0, 0), (3, 3)) == Color(10, 20, 30)
        assert stats.sum((0, 0), (3, 3)) == Color(160, 320, 480)

    def test_truncating_mean(self, checker_2x2):
        stats = RegionStats(checker_2x2)
        assert stats.average((0, 0), (1, 1)) == Color(127, 127, 127)

    def test_matches_numpy_floor_mean(self, random_image, rng):
        stats = RegionStats(random_image)
        h, w = random_image.shape[:2]
        for _ in range(50):
            r0, r1 = sorted(int(x) for x in rng.integers(0, h, size=2))
            c0, c1 = sorted(int(x) for x in rng.integers(0, w, size=2))
            block = random_image[r0:r1 + 1, c0:c1 + 1].reshape(-1, 3).astype(np.int64)
            expected = tuple(int(v) for v in block.sum(axis=0) // block.shape[0])
            assert stats.average((r0, c0), (r1, c1)).as_tuple() == expected


class TestErrorMetric:

    def test_flat_region_is_zero(self, uniform_4x4):
        stats = RegionStats(uniform_4x4)
        assert stats.error_metric((0, 0), (3, 3)) == 0
        assert stats.error_metric((1, 1), (2, 3)) == 0

    def test_checkerboard_value(self, checker_2x2):
        # per channel: 130050 // 4 - 127 ** 2 = 16383; three channels; four pixels
        stats = RegionStats(checker_2x2)
        assert stats.error_metric((0, 0), (1, 1)) == 16383 * 3 * 4

    def test_single_pixel_is_zero(self, random_image):
        stats = RegionStats(random_image)
        assert stats.error_metric((5, 7), (5, 7)) == 0

    def test_matches_reference_and_non_negative(self, random_image, rng):
        stats = RegionStats(random_image)
        h, w = random_image.shape[:2]
        for _ in range(100):
            r0, r1 = sorted(int(x) for x in rng.integers(0, h, size=2))
            c0, c1 = sorted(int(x) for x in rng.integers(0, w, size=2))
            metric = stats.error_metric((r0, c0), (r1, c1))
            assert metric >= 0
            assert metric == _reference_metric(random_image, (r0, c0), (r1, c1))

    def test_area_weighting(self):
        # same pattern, twice the area -> twice the metric
        small = np.zeros((2, 2, 3), dtype=np.uint8)
        small[0] = 200
        big = np.zeros((4, 2, 3), dtype=np.uint8)
        big[0] = 200
        big[2] = 200
        m_small = RegionStats(small).error_metric((0, 0), (1, 1))
        m_big = RegionStats(big).error_metric((0, 0), (3, 1))
        assert m_small > 0
        assert m_big == 2 * m_small


class TestConstruction:

    def test_pixel_count(self):
        assert pixel_count((0, 0), (0, 0)) == 1
        assert pixel_count((1, 2), (3, 6)) == 15

    def test_from_image_converts_mode(self):
        pil = Image.new("RGBA", (5, 3), (1, 2, 3, 4))
        stats = RegionStats.from_image(pil)
        assert stats.shape == (3, 5)
        assert stats.average((0, 0), (2, 4)) == Color(1, 2, 3)

    def test_rejects_wrong_channels(self):
        with pytest.raises(InvalidInputError):
            RegionStats(np.zeros((3, 3), dtype=np.uint8))
        with pytest.raises(InvalidInputError):
            RegionStats.from_array(np.zeros((3, 3, 4), dtype=np.uint8))

    def test_rejects_empty(self):
        with pytest.raises(InvalidInputError):
            RegionStats(np.zeros((0, 3, 3), dtype=np.uint8))
        with pytest.raises(InvalidInputError):
            RegionStats([])
