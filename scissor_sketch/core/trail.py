# -*- coding: utf-8 -*-
"""Tip trail recorder."""

from __future__ import annotations

import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Iterator, Sequence

TRAIL_CAPACITY = 180


@dataclass
class TrailPoint:
    x: float
    y: float
    t: float


class TrailRecorder:
    """Bounded history of the chain tip (midpoint of the top-level joints)."""

    def __init__(self, capacity: int = TRAIL_CAPACITY, clock: Callable[[], float] = time.time):
        self.capacity = max(1, int(capacity))
        self._clock = clock
        self._points: Deque[TrailPoint] = deque(maxlen=self.capacity)

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[TrailPoint]:
        return iter(self._points)

    @property
    def points(self) -> list[TrailPoint]:
        return list(self._points)

    def clear(self):
        self._points.clear()

    def record(self, joints: Sequence, segments: int) -> bool:
        tops = [j for j in joints if j.level == segments]
        if len(tops) < 2:
            return False
        a, b = tops[0], tops[1]
        self._points.append(TrailPoint((a.x + b.x) / 2.0, (a.y + b.y) / 2.0, float(self._clock())))
        return True

    def translate(self, dx: float, dy: float):
        for p in self._points:
            p.x += dx
            p.y += dy
