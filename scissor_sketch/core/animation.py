# -*- coding: utf-8 -*-
"""Time-driven parameter animation.

Each enabled channel maps elapsed seconds to one mechanism parameter. The
controller feeds the result to ``ScissorMechanism.set_params`` once per
tick, so animated frames go through the normal rebuild path (and leave a
trail when trail recording is on).
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class Wave:
    enabled: bool = False
    amplitude: float = 0.0
    frequency: float = 0.0
    base_value: float = 0.0

    def value(self, elapsed: float) -> float:
        return self.base_value + math.sin(elapsed * self.frequency * math.pi * 2.0) * self.amplitude


@dataclass(frozen=True)
class SegmentShift:
    enabled: bool = False
    low: int = 3
    high: int = 8
    frequency: float = 0.1

    def value(self, elapsed: float) -> int:
        s = (math.sin(elapsed * self.frequency * math.pi * 2.0) + 1.0) / 2.0
        return int(round(self.low + s * (self.high - self.low)))


@dataclass(frozen=True)
class AnimationConfig:
    curvature_wave: Wave = field(default_factory=lambda: Wave(True, 0.8, 0.3, 1.0))
    length_pulse: Wave = field(default_factory=lambda: Wave(False, 50.0, 0.2, 300.0))
    segment_shift: SegmentShift = field(default_factory=lambda: SegmentShift(False, 3, 8, 0.1))


PRESETS: Dict[str, AnimationConfig] = {
    "gentle": AnimationConfig(
        curvature_wave=Wave(True, 0.3, 0.2, 1.0),
        length_pulse=Wave(False, 20.0, 0.15, 300.0),
        segment_shift=SegmentShift(False),
    ),
    "dynamic": AnimationConfig(
        curvature_wave=Wave(True, 0.8, 0.5, 1.2),
        length_pulse=Wave(True, 60.0, 0.3, 320.0),
        segment_shift=SegmentShift(True, 4, 7, 0.08),
    ),
    "crazy": AnimationConfig(
        curvature_wave=Wave(True, 1.2, 0.8, 1.5),
        length_pulse=Wave(True, 100.0, 0.6, 350.0),
        segment_shift=SegmentShift(True, 3, 10, 0.12),
    ),
    "breathing": AnimationConfig(
        curvature_wave=Wave(True, 0.4, 0.1, 1.0),
        length_pulse=Wave(True, 30.0, 0.1, 300.0),
        segment_shift=SegmentShift(False),
    ),
}


def preset(name: str) -> AnimationConfig:
    try:
        return PRESETS[name]
    except KeyError:
        raise KeyError(f"Unknown animation preset: {name!r}") from None


def animated_params(config: AnimationConfig, elapsed: float) -> Dict[str, Any]:
    """Partial parameter update for ``elapsed`` seconds since start."""
    out: Dict[str, Any] = {}
    if config.curvature_wave.enabled:
        out["curvature"] = config.curvature_wave.value(elapsed)
    if config.length_pulse.enabled:
        out["curve_length"] = config.length_pulse.value(elapsed)
    if config.segment_shift.enabled:
        out["segments"] = config.segment_shift.value(elapsed)
    return out


def with_segment_range(config: AnimationConfig, rng: Tuple[int, int]) -> AnimationConfig:
    lo, hi = sorted((int(rng[0]), int(rng[1])))
    return replace(config, segment_shift=replace(config.segment_shift, low=max(1, lo), high=max(1, hi)))
