# -*- coding: utf-8 -*-
"""Anchor state: pin one node of the mechanism to a fixed model position."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from .geometry import Point

ANCHOR_EPS = 1e-9


@dataclass
class AnchorState:
    """At most one anchor. ``node_id`` refers to a joint or pivot by value."""

    node_id: Optional[str] = None
    target: Optional[Point] = None

    @property
    def active(self) -> bool:
        return bool(self.node_id) and self.target is not None

    def set(self, node_id: str, target: Point):
        self.node_id = str(node_id)
        self.target = target

    def clear(self):
        self.node_id = None
        self.target = None


def anchor_delta(current: Point, target: Point, eps: float = ANCHOR_EPS) -> Optional[Point]:
    """Translation that moves ``current`` onto ``target``, or None if already there."""
    dx = target.x - current.x
    dy = target.y - current.y
    if math.hypot(dx, dy) <= eps:
        return None
    return Point(dx, dy)
