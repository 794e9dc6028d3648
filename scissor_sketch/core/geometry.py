# -*- coding: utf-8 -*-
"""Geometry helpers."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence


# Below this the two crossing rods count as parallel.
PARALLEL_EPS = 1e-6


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)

    def scaled(self, k: float) -> "Point":
        return Point(self.x * k, self.y * k)

    def as_tuple(self) -> tuple[float, float]:
        return self.x, self.y


def as_point(value) -> Point:
    """Accept a Point, an (x, y) pair or anything with .x/.y."""
    if isinstance(value, Point):
        return value
    if hasattr(value, "x") and hasattr(value, "y"):
        return Point(float(value.x), float(value.y))
    x, y = value
    return Point(float(x), float(y))


def line_intersection(p1: Point, p2: Point, p3: Point, p4: Point,
                      eps: float = PARALLEL_EPS) -> Optional[Point]:
    """Intersect line p1-p2 with line p3-p4.

    Returns None when the 2x2 determinant is below ``eps`` or NaN (parallel
    or degenerate input).
    """
    x1, y1, x2, y2 = p1.x, p1.y, p2.x, p2.y
    x3, y3, x4, y4 = p3.x, p3.y, p4.x, p4.y
    d = (x1 - x2) * (y3 - y4) - (y1 - y2) * (x3 - x4)
    if not abs(d) >= eps:
        return None
    t = ((x1 - x3) * (y3 - y4) - (y1 - y3) * (x3 - x4)) / d
    return Point(x1 + t * (x2 - x1), y1 + t * (y2 - y1))


def normal_at(curve: Sequence[Point], idx: int) -> Point:
    """Unit normal from the central difference of the neighbouring samples.

    Indices are clamped at both ends. A zero-length tangent gives (0, 0).
    """
    a = curve[max(0, idx - 1)]
    b = curve[min(len(curve) - 1, idx + 1)]
    dx = b.x - a.x
    dy = b.y - a.y
    length = math.hypot(dx, dy) or 1.0
    return Point(-dy / length, dx / length)


def polyline_length(points: Sequence[Point]) -> float:
    total = 0.0
    for a, b in zip(points, points[1:]):
        total += math.hypot(b.x - a.x, b.y - a.y)
    return total


def distance(a: Point, b: Point) -> float:
    return math.hypot(b.x - a.x, b.y - a.y)


def midpoint(a: Point, b: Point) -> Point:
    return Point((a.x + b.x) * 0.5, (a.y + b.y) * 0.5)
