"""Tests for the Color accumulator."""
import pytest

from quadglass.color import Color


class TestColor:

    def test_arithmetic(self):
        a = Color(10, 20, 30)
        b = Color(1, 2, 3)
        assert a + b == Color(11, 22, 33)
        assert a - b == Color(9, 18, 27)
        assert a * b == Color(10, 40, 90)
        assert Color(7, 8, 9) // 2 == Color(3, 4, 4)

    def test_zero_is_identity(self):
        c = Color(5, 6, 7)
        assert c + Color.zero() == c
        assert c - Color.zero() == c

    def test_divide_by_zero(self):
        with pytest.raises(ZeroDivisionError):
            Color(1, 1, 1) // 0

    def test_no_overflow_from_u8(self):
        c = Color.from_pixel(bytes([255, 255, 255]))
        assert (c * c).as_tuple() == (65025, 65025, 65025)

    def test_immutable(self):
        c = Color(1, 2, 3)
        with pytest.raises(AttributeError):
            c.r = 9

    def test_to_u8(self):
        assert Color(255, 0, 128).to_u8() == (255, 0, 128)
        assert Color(1, 2, 3).channel_sum() == 6
