# -*- coding: utf-8 -*-
"""Mechanism controller.

The control surface between the widgets and the geometry engine. Widgets
never touch ``ScissorMechanism`` setters directly: edits go through here so
they land on the undo stack, and the free-hand stroke is captured here
before it is prepared and injected.

This module is Qt-free; the window owns a controller and calls ``tick()``
from its timer.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, List, Optional, Tuple

from .animation import AnimationConfig, animated_params
from .commands import CommandStack, state_command
from .curves import CurveType
from .freehand import prepare_free_curve
from .geometry import Point
from .mechanism import ScissorMechanism
from .parameters import MechanismParams, ParameterRegistry
from .svg_export import ExportConfig, export_links_svg

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DisplayOptions:
    """Renderer configuration. ``show_trail`` also gates trail recording."""

    show_curve: bool = True
    show_joints: bool = True
    show_pivots: bool = True
    show_trail: bool = False
    show_labels: bool = False
    show_mfg: bool = False


@dataclass(frozen=True)
class _EditState:
    params: MechanismParams
    free_curve: Tuple[Point, ...]


class MechanismController:
    def __init__(self, mechanism: Optional[ScissorMechanism] = None,
                 on_change: Optional[Callable[[], None]] = None,
                 clock: Callable[[], float] = time.monotonic):
        self.mechanism = mechanism or ScissorMechanism()
        self.parameters = ParameterRegistry()
        self.display = DisplayOptions()
        self.export_config = ExportConfig()
        self.stack = CommandStack(on_change=on_change)
        self._clock = clock

        self._stroke: Optional[List[Point]] = None
        self.animation: Optional[AnimationConfig] = None
        self._anim_start = 0.0

    # ---- undoable edits ----
    def _capture(self) -> _EditState:
        m = self.mechanism
        return _EditState(m.params, tuple(m.free_curve))

    def _restore(self, state: _EditState):
        m = self.mechanism
        m.params = state.params
        m.set_free_curve(list(state.free_curve))

    def _push_edit(self, before: _EditState, desc: str, merge_key: Optional[str] = None):
        after = self._capture()
        if after == before:
            return
        self.stack.push(state_command(self._restore, before, after, desc, merge_key), execute=False)

    def set_params(self, **partial: Any):
        before = self._capture()
        self.mechanism.set_params(**partial)
        key = ",".join(sorted(partial)) if len(partial) == 1 else None
        self._push_edit(before, "Edit parameters", merge_key=key)

    def set_param_expressions(self, exprs: Dict[str, str]) -> Dict[str, str]:
        """Evaluate field expressions against the registry and apply the valid ones.

        Returns the per-field error messages (empty when everything applied).
        """
        values, errors = self.parameters.resolve(exprs)
        if values:
            self.set_params(**values)
        for name, msg in errors.items():
            logger.info("Expression for %s rejected: %s", name, msg)
        return errors

    def set_curve_type(self, curve_type):
        self.stack.break_merge()
        self.set_params(curve_type=CurveType.coerce(curve_type))

    def reset_params(self):
        before = self._capture()
        self.mechanism.params = MechanismParams()
        self.mechanism.set_free_curve([])
        self._push_edit(before, "Reset")

    # ---- free-hand stroke ----
    @property
    def drawing(self) -> bool:
        return self._stroke is not None

    def begin_stroke(self, x: float, y: float):
        self._stroke = [self._to_local(x, y)]

    def extend_stroke(self, x: float, y: float):
        if self._stroke is not None:
            self._stroke.append(self._to_local(x, y))

    def stroke_points(self) -> List[Point]:
        return list(self._stroke or [])

    def end_stroke(self) -> bool:
        """Prepare the captured stroke and switch to the free curve.

        Returns False (and keeps the current curve) for strokes under two points.
        """
        raw, self._stroke = self._stroke or [], None
        curve = prepare_free_curve(raw)
        if len(curve) < 2:
            logger.debug("Stroke of %d point(s) ignored", len(raw))
            return False
        before = self._capture()
        self.mechanism.set_free_curve(curve)
        self.mechanism.set_params(curve_type=CurveType.FREE)
        self._push_edit(before, "Draw curve")
        return True

    def cancel_stroke(self):
        self._stroke = None

    def _to_local(self, x: float, y: float) -> Point:
        m = self.mechanism
        return Point(float(x) - m.center_x, float(y) - m.center_y)

    # ---- anchor ----
    def pick_anchor(self, x: float, y: float, radius: float = 18.0) -> Optional[str]:
        """Anchor the node under (x, y) at its current position."""
        m = self.mechanism
        m.update()
        hit = m.pick_node(x, y, radius)
        if hit is None:
            return None
        node = m.find_node(hit[0])
        m.set_anchor(hit[0], Point(node.x, node.y))
        return hit[0]

    def move_anchor(self, x: float, y: float):
        m = self.mechanism
        if m.anchor.node_id:
            m.set_anchor(m.anchor.node_id, Point(x, y))

    def clear_anchor(self):
        self.mechanism.clear_anchor()

    # ---- display ----
    def set_display(self, **flags: bool):
        self.display = replace(self.display, **flags)
        if "show_trail" in flags:
            self.mechanism.set_trail_enabled(self.display.show_trail)

    def clear_trail(self):
        self.mechanism.clear_trail()

    # ---- animation ----
    @property
    def animating(self) -> bool:
        return self.animation is not None

    def start_animation(self, config: Optional[AnimationConfig] = None):
        self.animation = config or AnimationConfig()
        self._anim_start = self._clock()
        self.stack.break_merge()

    def stop_animation(self):
        self.animation = None

    # ---- frame ----
    def tick(self) -> bool:
        """One frame: advance the animation, then update the mechanism."""
        if self.animation is not None:
            params = animated_params(self.animation, self._clock() - self._anim_start)
            if params:
                self.mechanism.set_params(**params)
        return self.mechanism.update()

    def status_text(self) -> str:
        s = self.mechanism.status()
        return (
            f"Joints: {s['joints']}  Pivots: {s['pivots']}  Links: {s['links']}  "
            f"Arc length: {s['arc_length']:.1f}  Integrity: {s['integrity_text']}"
        )

    # ---- export ----
    def export_svg(self, cfg: Optional[ExportConfig] = None) -> Optional[str]:
        self.mechanism.update()
        return export_links_svg(self.mechanism.links, cfg or self.export_config)

    def save_svg(self, path: str, cfg: Optional[ExportConfig] = None) -> bool:
        svg = self.export_svg(cfg)
        if svg is None:
            return False
        with open(path, "w", encoding="utf-8") as fh:
            fh.write(svg)
        return True
