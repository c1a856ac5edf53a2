# quadglass/color.py
from dataclasses import dataclass
from typing import Iterable, Tuple


@dataclass(frozen=True)
class Color:
    """Three-channel accumulator.

    Channels are plain Python ints, so sums and squared sums over any image
    size never overflow. Pixels are widened from 8-bit with ``from_pixel``.
    """
    r: int
    g: int
    b: int

    @classmethod
    def zero(cls) -> "Color":
        return cls(0, 0, 0)

    @classmethod
    def from_pixel(cls, px: Iterable[int]) -> "Color":
        r, g, b = (int(c) for c in px)
        return cls(r, g, b)

    def __add__(self, other: "Color") -> "Color":
        return Color(self.r + other.r, self.g + other.g, self.b + other.b)

    def __sub__(self, other: "Color") -> "Color":
        return Color(self.r - other.r, self.g - other.g, self.b - other.b)

    def __mul__(self, other: "Color") -> "Color":
        # elementwise, used for squares
        return Color(self.r * other.r, self.g * other.g, self.b * other.b)

    def __floordiv__(self, n: int) -> "Color":
        if n == 0:
            raise ZeroDivisionError("Color divided by zero")
        return Color(self.r // n, self.g // n, self.b // n)

    def channel_sum(self) -> int:
        return self.r + self.g + self.b

    def as_tuple(self) -> Tuple[int, int, int]:
        return (self.r, self.g, self.b)

    def to_u8(self) -> Tuple[int, int, int]:
        """Truncate each channel to 8 bits for painting."""
        return (self.r & 0xFF, self.g & 0xFF, self.b & 0xFF)
