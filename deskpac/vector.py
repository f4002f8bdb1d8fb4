"""2D vector math shared by the steering engine and the entities."""

from __future__ import annotations
import math
from dataclasses import dataclass


@dataclass
class Vec2:
    x: float = 0.0
    y: float = 0.0

    def __add__(self, o): return Vec2(self.x + o.x, self.y + o.y)
    def __sub__(self, o): return Vec2(self.x - o.x, self.y - o.y)
    def __mul__(self, k): return Vec2(self.x * k, self.y * k)
    def __neg__(self): return Vec2(-self.x, -self.y)
    def __eq__(self, o): return abs(self.x - o.x) < 0.001 and abs(self.y - o.y) < 0.001

    __rmul__ = __mul__

    def mag(self) -> float:
        return math.hypot(self.x, self.y)

    def normalize(self) -> Vec2:
        """Unit vector in the same direction; the zero vector stays zero."""
        m = self.mag()
        if m == 0:
            return Vec2(0.0, 0.0)
        return Vec2(self.x / m, self.y / m)

    def limit(self, max_mag: float) -> Vec2:
        """Scale down to `max_mag` if longer, otherwise return an equal copy."""
        m = self.mag()
        if m > max_mag:
            return self * (max_mag / m)
        return self.copy()

    def dist(self, o) -> float:
        return math.hypot(o.x - self.x, o.y - self.y)

    def dist_sq(self, o) -> float:
        dx = self.x - o.x
        dy = self.y - o.y
        return dx * dx + dy * dy

    def copy(self) -> Vec2:
        return Vec2(self.x, self.y)

    def as_int(self):
        return (int(self.x), int(self.y))

    def __repr__(self):
        return f"({self.x:.2f}, {self.y:.2f})"
