"""
Two-dimensional cell geometry.

Sizes and positions on the terminal are both expressed as a ``Vec2``:
``x`` counts columns and ``y`` counts rows.
"""

from dataclasses import dataclass
from typing import Iterator, Tuple, Union


@dataclass(frozen=True)
class Vec2:
    """A pair of non-negative cell coordinates (or a size in cells)."""
    x: int = 0
    y: int = 0

    @staticmethod
    def zero() -> "Vec2":
        return Vec2(0, 0)

    @staticmethod
    def of(value: "VecLike") -> "Vec2":
        """Coerce a ``(x, y)`` tuple (or a Vec2) into a Vec2."""
        if isinstance(value, Vec2):
            return value
        x, y = value
        return Vec2(x, y)

    def __iter__(self) -> Iterator[int]:
        yield self.x
        yield self.y

    def __add__(self, other: "VecLike") -> "Vec2":
        other = Vec2.of(other)
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "VecLike") -> "Vec2":
        other = Vec2.of(other)
        return Vec2(self.x - other.x, self.y - other.y)

    def saturating_sub(self, other: "VecLike") -> "Vec2":
        """Subtract component-wise, stopping at zero."""
        other = Vec2.of(other)
        return Vec2(max(0, self.x - other.x), max(0, self.y - other.y))

    def min(self, other: "VecLike") -> "Vec2":
        other = Vec2.of(other)
        return Vec2(min(self.x, other.x), min(self.y, other.y))

    def max(self, other: "VecLike") -> "Vec2":
        other = Vec2.of(other)
        return Vec2(max(self.x, other.x), max(self.y, other.y))

    # Same as min(); reads better at call sites that clamp a reservation.
    or_min = min

    def fits_in(self, other: "VecLike") -> bool:
        """True if both components are <= the other's."""
        other = Vec2.of(other)
        return self.x <= other.x and self.y <= other.y

    def strictly_less(self, other: "VecLike") -> bool:
        """True if both components are < the other's."""
        other = Vec2.of(other)
        return self.x < other.x and self.y < other.y

    def keep_x(self) -> "Vec2":
        return Vec2(self.x, 0)

    def keep_y(self) -> "Vec2":
        return Vec2(0, self.y)


VecLike = Union[Vec2, Tuple[int, int]]
