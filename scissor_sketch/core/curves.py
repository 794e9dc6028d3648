# -*- coding: utf-8 -*-
"""Guide curve samplers.

Points are relative to the mechanism center. Each family has a fixed sample
count so that the 3-point normal estimate in the builder stays stable.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import List

import numpy as np

from .geometry import Point

logger = logging.getLogger(__name__)

ARC_SAMPLES = 200
SINE_SAMPLES = 400


class CurveType(str, Enum):
    ARC = "arc"
    SINE = "sine"
    FREE = "free"

    @classmethod
    def coerce(cls, value) -> "CurveType":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            logger.warning("Unknown curve type %r, using arc", value)
            return cls.ARC


def _to_points(xs: np.ndarray, ys: np.ndarray) -> List[Point]:
    return [Point(float(x), float(y)) for x, y in zip(xs, ys)]


def generate_arc(length: float = 300.0, curvature: float = 1.0) -> List[Point]:
    """Half-circle-like profile; ``curvature`` scales the vertical bulge."""
    t = np.linspace(0.0, 1.0, ARC_SAMPLES + 1)
    theta = np.pi * t
    radius = max(1.0, float(length) / np.pi)
    xs = (theta - np.pi / 2.0) * radius * 2.0
    ys = -np.sin(theta) * radius * float(curvature)
    return _to_points(xs, ys)


def generate_sine(length: float = 300.0, amplitude: float = 1.0) -> List[Point]:
    """One full sine period spanning ``length`` horizontally."""
    t = np.linspace(0.0, 1.0, SINE_SAMPLES + 1)
    amp = (float(length) / 6.0) * float(amplitude) * 0.5
    xs = (t - 0.5) * float(length)
    ys = -np.sin(t * 2.0 * np.pi) * amp
    return _to_points(xs, ys)


def generate_curve(curve_type, length: float, curvature: float) -> List[Point]:
    """Sample a generated family. ``free`` has no sampler and maps to the arc."""
    kind = CurveType.coerce(curve_type)
    if kind is CurveType.SINE:
        return generate_sine(length, curvature)
    return generate_arc(length, curvature)
