# -*- coding: utf-8 -*-
"""Free-hand stroke preparation.

A pointer drag produces a dense, noisy polyline. It is simplified with
Ramer-Douglas-Peucker and resampled at a fixed arc-length step so the
geometry builder can treat it like a generated curve.
"""

from __future__ import annotations

from typing import List, Sequence

import numpy as np

from .geometry import Point, as_point

RESAMPLE_STEP = 2.0
MIN_EPSILON = 0.8
EPSILON_SCALE = 0.01


def rdp_epsilon(points: Sequence[Point]) -> float:
    """Scale-adaptive tolerance: 1% of the bounding-box diagonal, at least 0.8."""
    if not points:
        return MIN_EPSILON
    xs = [p.x for p in points]
    ys = [p.y for p in points]
    span = float(np.hypot(max(xs) - min(xs), max(ys) - min(ys)))
    return max(MIN_EPSILON, span * EPSILON_SCALE)


def _chord_distances(arr: np.ndarray) -> np.ndarray:
    """Perpendicular distance of every point to the first-last chord."""
    a = arr[0]
    b = arr[-1]
    # Line through a, b as A*x + B*y + C = 0
    A = b[1] - a[1]
    B = a[0] - b[0]
    C = b[0] * a[1] - a[0] * b[1]
    norm = float(np.hypot(A, B))
    if norm < 1e-12:
        return np.hypot(arr[:, 0] - a[0], arr[:, 1] - a[1])
    return np.abs(A * arr[:, 0] + B * arr[:, 1] + C) / norm


def _rdp(arr: np.ndarray, epsilon: float) -> np.ndarray:
    if len(arr) < 3:
        return arr
    d = _chord_distances(arr)
    d[0] = d[-1] = -1.0
    idx = int(np.argmax(d))
    if d[idx] > epsilon:
        left = _rdp(arr[: idx + 1], epsilon)
        right = _rdp(arr[idx:], epsilon)
        return np.vstack([left[:-1], right])
    return np.vstack([arr[0], arr[-1]])


def simplify_rdp(points: Sequence, epsilon: float) -> List[Point]:
    """Ramer-Douglas-Peucker simplification; endpoints are always kept."""
    pts = [as_point(p) for p in points]
    if len(pts) < 3:
        return pts
    arr = np.array([(p.x, p.y) for p in pts], dtype=float)
    out = _rdp(arr, float(epsilon))
    return [Point(float(x), float(y)) for x, y in out]


def resample_uniform(points: Sequence, step: float = RESAMPLE_STEP) -> List[Point]:
    """Emit one point every ``step`` units of arc length plus the exact end point."""
    pts = [as_point(p) for p in points]
    if len(pts) < 2:
        return pts
    arr = np.array([(p.x, p.y) for p in pts], dtype=float)
    seg = np.hypot(np.diff(arr[:, 0]), np.diff(arr[:, 1]))
    cum = np.concatenate([[0.0], np.cumsum(seg)])
    total = float(cum[-1])
    step = float(step)
    if total <= 0.0 or step <= 0.0:
        return [pts[0], pts[-1]]
    stations = np.arange(0.0, total, step)
    xs = np.interp(stations, cum, arr[:, 0])
    ys = np.interp(stations, cum, arr[:, 1])
    out = [Point(float(x), float(y)) for x, y in zip(xs, ys)]
    last = pts[-1]
    if len(out) > 1 and total - float(stations[-1]) < 1e-9:
        out[-1] = last
    else:
        out.append(last)
    return out


def prepare_free_curve(raw: Sequence, step: float = RESAMPLE_STEP) -> List[Point]:
    """Simplify then resample a captured stroke.

    Returns an empty list when fewer than two points were captured; the
    mechanism falls back to the arc sampler in that case.
    """
    pts = [as_point(p) for p in raw]
    if len(pts) < 2:
        return []
    simplified = simplify_rdp(pts, rdp_epsilon(pts))
    return resample_uniform(simplified, step)
