# -*- coding: utf-8 -*-
"""Scissor mechanism geometry engine.

A scissor chain is a stack of segments. Level ``i`` carries two joints,
``L{i}`` and ``R{i}``, offset from the guide curve along its normal by half
the rod length. Segment ``i`` is spanned by two crossing rods,
``L{i} -> R{i+1}`` (type ``a``) and ``R{i} -> L{i+1}`` (type ``b``); their
intersection is the pivot ``P{i}``.

The whole graph is derived from the parameters, the guide curve and the
center, and is rebuilt wholesale whenever the mechanism is dirty. Ids are
deterministic so anchors and external code can track a node across
rebuilds.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .anchor import AnchorState, anchor_delta
from .curves import CurveType, generate_arc, generate_curve
from .geometry import Point, as_point, line_intersection, normal_at, polyline_length
from .parameters import MechanismParams
from .trail import TrailPoint, TrailRecorder

logger = logging.getLogger(__name__)


@dataclass
class Joint:
    id: str
    side: str
    level: int
    x: float
    y: float


@dataclass
class Link:
    id: str
    start: Joint
    end: Joint
    type: str

    @property
    def length(self) -> float:
        return math.hypot(self.end.x - self.start.x, self.end.y - self.start.y)


@dataclass
class Pivot:
    id: str
    segment: int
    x: float
    y: float
    links: Tuple[str, str] = ("", "")


@dataclass(frozen=True)
class Integrity:
    level: str
    text: str


def joint_id(side: str, level: int) -> str:
    return f"{side}{level}"


def pivot_id(segment: int) -> str:
    return f"P{segment}"


def place_joints(base_curve: Sequence[Point], segments: int, link_length: float,
                 center: Point) -> List[Joint]:
    """Two joints per level, ordered L0, R0, L1, R1, ..."""
    joints: List[Joint] = []
    if not base_curve:
        return joints
    n = len(base_curve)
    off = link_length * 0.5
    for i in range(segments + 1):
        t = i / segments
        idx = int(math.floor(t * (n - 1)))
        cpt = base_curve[idx]
        nrm = normal_at(base_curve, idx)
        joints.append(Joint(joint_id("L", i), "L", i,
                            center.x + cpt.x - nrm.x * off, center.y + cpt.y - nrm.y * off))
        joints.append(Joint(joint_id("R", i), "R", i,
                            center.x + cpt.x + nrm.x * off, center.y + cpt.y + nrm.y * off))
    return joints


def cross_segments(joints: Sequence[Joint], segments: int) -> Tuple[List[Link], List[Pivot]]:
    """Intersect the crossing rods of every segment.

    A segment whose rods are numerically parallel contributes neither links
    nor a pivot.
    """
    links: List[Link] = []
    pivots: List[Pivot] = []
    by_id = {j.id: j for j in joints}
    for i in range(segments):
        lb = by_id.get(joint_id("L", i))
        rb = by_id.get(joint_id("R", i))
        lt = by_id.get(joint_id("L", i + 1))
        rt = by_id.get(joint_id("R", i + 1))
        if not (lb and rb and lt and rt):
            continue
        p = line_intersection(lb, rt, rb, lt)
        if p is None:
            logger.debug("Segment %d skipped: crossing rods are parallel", i)
            continue
        link_a = Link(f"{lb.id}-{rt.id}", lb, rt, "a")
        link_b = Link(f"{rb.id}-{lt.id}", rb, lt, "b")
        links.extend((link_a, link_b))
        pivots.append(Pivot(pivot_id(i), i, p.x, p.y, (link_a.id, link_b.id)))
    return links, pivots


def build_geometry(base_curve: Sequence[Point], params: MechanismParams,
                   center: Point) -> Tuple[List[Joint], List[Link], List[Pivot]]:
    """Derive joints, links and pivots. Empty curve -> empty mechanism."""
    if not base_curve:
        return [], [], []
    joints = place_joints(base_curve, params.segments, params.link_length, center)
    links, pivots = cross_segments(joints, params.segments)
    return joints, links, pivots


def classify_integrity(pivot_count: int, segments: int) -> Integrity:
    if pivot_count <= 0:
        return Integrity("error", "No pivot")
    if pivot_count < segments:
        return Integrity("warning", "Partial")
    return Integrity("good", "OK")


class ScissorMechanism:
    """Lazily rebuilt scissor chain with anchor correction and tip trail."""

    def __init__(self, params: Optional[MechanismParams] = None, trail: Optional[TrailRecorder] = None):
        self.params = (params or MechanismParams()).coerced()
        self.center_x = 0.0
        self.center_y = 0.0
        self.free_curve: List[Point] = []
        self.anchor = AnchorState()
        self.trail = trail if trail is not None else TrailRecorder()
        self.trail_enabled = False

        self.base_curve: List[Point] = []
        self.joints: List[Joint] = []
        self.links: List[Link] = []
        self.pivots: List[Pivot] = []
        self._dirty = True

    # ---- parameter access ----
    @property
    def segments(self) -> int:
        return self.params.segments

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def trail_points(self) -> List[TrailPoint]:
        return self.trail.points

    def mark_dirty(self):
        self._dirty = True

    # ---- control surface ----
    def set_params(self, **partial: Any):
        """Accepts any subset of segments/link_length/curvature/curve_length/curve_type."""
        self.params = self.params.merged(**partial)
        self._dirty = True

    def set_center(self, x: float, y: float):
        self.center_x = float(x)
        self.center_y = float(y)
        self._dirty = True

    def set_free_curve(self, points: Optional[Sequence]):
        self.free_curve = [as_point(p) for p in (points or [])]
        self._dirty = True

    def set_anchor(self, node_id: str, target):
        self.anchor.set(node_id, as_point(target))
        self._dirty = True

    def clear_anchor(self):
        self.anchor.clear()
        self._dirty = True

    def set_trail_enabled(self, enabled: bool):
        self.trail_enabled = bool(enabled)
        if not self.trail_enabled:
            self.trail.clear()
        self._dirty = True

    def clear_trail(self):
        self.trail.clear()

    # ---- geometry ----
    def generate_base_curve(self) -> List[Point]:
        p = self.params
        if p.curve_type is CurveType.FREE:
            if len(self.free_curve) >= 2:
                return list(self.free_curve)
            return generate_arc(p.curve_length, p.curvature)
        return generate_curve(p.curve_type, p.curve_length, p.curvature)

    def calculate_geometry(self):
        self.base_curve = self.generate_base_curve()
        center = Point(self.center_x, self.center_y)
        self.joints, self.links, self.pivots = build_geometry(self.base_curve, self.params, center)
        logger.debug(
            "Rebuilt mechanism: %d joints, %d links, %d pivots",
            len(self.joints), len(self.links), len(self.pivots),
        )

    def update(self) -> bool:
        """Rebuild if dirty, then correct the anchor and record the trail.

        Returns True when a rebuild happened.
        """
        if not self._dirty:
            return False
        self.calculate_geometry()
        self.apply_anchor()
        if self.trail_enabled:
            self.trail.record(self.joints, self.segments)
        self._dirty = False
        return True

    def find_node(self, node_id: str):
        for j in self.joints:
            if j.id == node_id:
                return j
        for p in self.pivots:
            if p.id == node_id:
                return p
        return None

    def apply_anchor(self) -> Optional[Point]:
        """Translate everything so the anchored node sits on its target."""
        if not self.anchor.active:
            return None
        node = self.find_node(self.anchor.node_id)
        if node is None:
            logger.debug("Anchor %s not found, skipping correction", self.anchor.node_id)
            return None
        delta = anchor_delta(Point(node.x, node.y), self.anchor.target)
        if delta is not None:
            self.translate_all(delta.x, delta.y)
        return delta

    def translate_all(self, dx: float, dy: float):
        for j in self.joints:
            j.x += dx
            j.y += dy
        for p in self.pivots:
            p.x += dx
            p.y += dy
        self.trail.translate(dx, dy)
        self.center_x += dx
        self.center_y += dy

    def polyline_arc_length(self) -> float:
        return polyline_length(self.base_curve)

    def get_integrity(self) -> Integrity:
        if not self.base_curve:
            return Integrity("error", "No pivot")
        return classify_integrity(len(self.pivots), self.segments)

    def pick_node(self, x: float, y: float, radius: float = 18.0) -> Optional[Tuple[str, str]]:
        """Nearest node within ``radius``; pivots win over joints.

        Returns (node_id, "pivot" | "joint") or None.
        """
        r2 = radius * radius
        for kind, nodes in (("pivot", self.pivots), ("joint", self.joints)):
            best = None
            best_d2 = r2
            for n in nodes:
                d2 = (n.x - x) ** 2 + (n.y - y) ** 2
                if d2 <= best_d2:
                    best, best_d2 = n, d2
            if best is not None:
                return best.id, kind
        return None

    # ---- physics boundary ----
    def to_physics_graph(self) -> Dict[str, List[Dict[str, Any]]]:
        joints = [{"id": j.id, "x": j.x, "y": j.y} for j in self.joints]
        rods = [{"a": lk.start.id, "b": lk.end.id} for lk in self.links]
        return {"joints": joints, "rods": rods}

    def apply_physics_positions(self, positions: Mapping[str, Any]):
        """Overwrite joint coordinates and re-derive links and pivots.

        The base curve is left as is and the mechanism is not marked dirty,
        so the imported pose survives until the next parameter change.
        """
        for j in self.joints:
            pos = positions.get(j.id)
            if pos is None:
                continue
            pt = as_point(pos)
            j.x, j.y = pt.x, pt.y
        self.links, self.pivots = cross_segments(self.joints, self.segments)

    # ---- summary ----
    def status(self) -> Dict[str, Any]:
        integrity = self.get_integrity()
        return {
            "joints": len(self.joints),
            "pivots": len(self.pivots),
            "links": len(self.links),
            "arc_length": self.polyline_arc_length(),
            "integrity": integrity.level,
            "integrity_text": integrity.text,
        }
