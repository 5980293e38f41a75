from __future__ import annotations
from dataclasses import dataclass
import math


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Segment:
    """An obstacle wall between two endpoints."""
    x1: float
    y1: float
    x2: float
    y2: float

    @property
    def start(self) -> Point:
        return Point(self.x1, self.y1)

    @property
    def end(self) -> Point:
        return Point(self.x2, self.y2)

    @property
    def length(self) -> float:
        return math.hypot(self.x2 - self.x1, self.y2 - self.y1)

    def contains(self, p: Point) -> bool:
        """Exact on-segment test: zero cross product and inside the bounding box."""
        dx = self.x2 - self.x1
        dy = self.y2 - self.y1
        cross = (p.x - self.x1) * dy - (p.y - self.y1) * dx
        if cross != 0:
            return False
        if p.x < min(self.x1, self.x2) or p.x > max(self.x1, self.x2):
            return False
        if p.y < min(self.y1, self.y2) or p.y > max(self.y1, self.y2):
            return False
        return True

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.x1, self.y1, self.x2, self.y2)


@dataclass(frozen=True)
class Ray:
    origin: Point
    direction: Point  # unit length

    @classmethod
    def from_angle(cls, origin: Point, angle: float) -> "Ray":
        return cls(origin, Point(math.cos(angle), math.sin(angle)))

    def point_at(self, u: float) -> Point:
        return Point(self.origin.x + u * self.direction.x, self.origin.y + u * self.direction.y)


@dataclass(frozen=True)
class Hit:
    """A valid intersection: inside the wall's span and ahead of the ray origin."""
    point: Point
    distance: float
