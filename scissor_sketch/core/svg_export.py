# -*- coding: utf-8 -*-
"""Laser-cut SVG export of the current links.

Links are grouped by length (rounded to ``group_tol`` mm), sorted from short
to long and laid out in rows. Every link becomes a capsule outline with a
hole at each end.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple


@dataclass(frozen=True)
class ExportConfig:
    link_width: float = 12.0
    hole_dia: float = 4.0
    group_tol: float = 0.1
    spacing: float = 6.0
    px2mm: float = 1.0
    stroke_w: float = 0.1
    kerf: float = 0.0
    per_row: int = 8


@dataclass(frozen=True)
class Placement:
    x: float
    y: float
    length_mm: float


def _fmt(v: float) -> str:
    return f"{v:.4f}".rstrip("0").rstrip(".") or "0"


def link_lengths_mm(links: Iterable, px2mm: float) -> List[float]:
    out: List[float] = []
    for lk in links:
        if lk.start is None or lk.end is None:
            continue
        out.append(math.hypot(lk.end.x - lk.start.x, lk.end.y - lk.start.y) * px2mm)
    return out


def group_lengths(lengths: Iterable[float], tol: float) -> List[Tuple[float, int]]:
    """(rounded length, count) sorted ascending."""
    step = tol if tol > 0 else 1e-3
    groups: Dict[str, int] = {}
    for length in lengths:
        key = f"{round(length / step) * step:.3f}"
        groups[key] = groups.get(key, 0) + 1
    return sorted(((float(k), n) for k, n in groups.items()), key=lambda kv: kv[0])


def layout(groups: List[Tuple[float, int]], cfg: ExportConfig, body_w: float) -> Tuple[List[Placement], float, float]:
    """Row layout; every group starts on a fresh row. Returns (placements, width, height)."""
    per_row = max(1, int(cfg.per_row))
    margin = cfg.spacing
    row_gap = body_w + cfg.spacing
    x, y, col, max_row_w = margin, margin, 0, 0.0
    place: List[Placement] = []
    for length_mm, count in groups:
        for _ in range(count):
            place.append(Placement(x, y, length_mm))
            x += length_mm + cfg.spacing + body_w
            col += 1
            max_row_w = max(max_row_w, x)
            if col >= per_row:
                col, x = 0, margin
                y += row_gap + body_w
        if col != 0:
            col, x = 0, margin
            y += row_gap + body_w
    width = max(max_row_w, per_row * (cfg.spacing + body_w)) + margin
    height = y + margin + body_w
    return place, width, height


def capsule_path(cx: float, cy: float, length: float, width: float) -> str:
    r = width / 2.0
    x1, x2 = cx - length / 2.0, cx + length / 2.0
    y1, y2 = cy - r, cy + r
    return (
        f"M {_fmt(x1)} {_fmt(y1)} H {_fmt(x2)} A {_fmt(r)} {_fmt(r)} 0 0 1 {_fmt(x2)} {_fmt(y2)} "
        f"H {_fmt(x1)} A {_fmt(r)} {_fmt(r)} 0 0 1 {_fmt(x1)} {_fmt(y1)} Z"
    )


def export_links_svg(links: Iterable, cfg: Optional[ExportConfig] = None) -> Optional[str]:
    """Build the SVG document, or None when there is nothing to cut."""
    cfg = cfg or ExportConfig()
    lengths = link_lengths_mm(links, cfg.px2mm)
    if not lengths:
        return None

    body_w = max(0.1, cfg.link_width + cfg.kerf)
    hole_d = max(0.1, cfg.hole_dia + cfg.kerf)
    place, width, height = layout(group_lengths(lengths, cfg.group_tol), cfg, body_w)

    parts = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{_fmt(width)}mm" height="{_fmt(height)}mm" '
        f'viewBox="0 0 {_fmt(width)} {_fmt(height)}" version="1.1">',
        f"<desc>Scissor links export · linkWidth={_fmt(cfg.link_width)}mm hole={_fmt(cfg.hole_dia)}mm "
        f"tol={_fmt(cfg.group_tol)}mm px2mm={_fmt(cfg.px2mm)} kerf={_fmt(cfg.kerf)}</desc>",
        f'<g fill="none" stroke="#ff0000" stroke-width="{_fmt(cfg.stroke_w)}" '
        f'stroke-linecap="round" stroke-linejoin="round">',
    ]
    r = hole_d / 2.0
    for p in place:
        cx = p.x + p.length_mm / 2.0
        cy = p.y + body_w / 2.0
        parts.append(f'<path d="{capsule_path(cx, cy, p.length_mm, body_w)}"/>')
        parts.append(f'<circle cx="{_fmt(cx - p.length_mm / 2.0)}" cy="{_fmt(cy)}" r="{_fmt(r)}"/>')
        parts.append(f'<circle cx="{_fmt(cx + p.length_mm / 2.0)}" cy="{_fmt(cy)}" r="{_fmt(r)}"/>')
    parts.append("</g></svg>")
    return "\n".join(parts)
