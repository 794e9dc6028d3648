# -*- coding: utf-8 -*-
"""Right-side control panel: parameters, display toggles, animation, status."""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING, Callable, Dict

from PyQt6.QtCore import QSignalBlocker
from PyQt6.QtWidgets import (
    QWidget,
    QVBoxLayout,
    QFormLayout,
    QGroupBox,
    QLabel,
    QSpinBox,
    QDoubleSpinBox,
    QComboBox,
    QCheckBox,
    QLineEdit,
    QPushButton,
    QHBoxLayout,
)

from ..core.animation import PRESETS, preset, with_segment_range
from ..core.curves import CurveType
from ..utils.constants import INTEGRITY_COLORS
from ..utils.qt_safe import safe_slot

if TYPE_CHECKING:
    from ..core.controller import MechanismController


def _dspin(lo: float, hi: float, step: float, decimals: int = 2) -> QDoubleSpinBox:
    s = QDoubleSpinBox()
    s.setRange(lo, hi)
    s.setSingleStep(step)
    s.setDecimals(decimals)
    return s


def parse_assignments(text: str) -> Dict[str, str]:
    """``"a=1; b = 2*a"`` -> ``{"a": "1", "b": "2*a"}``; malformed parts are skipped."""
    out: Dict[str, str] = {}
    for part in (text or "").replace("\n", ";").split(";"):
        if "=" not in part:
            continue
        name, expr = part.split("=", 1)
        name, expr = name.strip(), expr.strip()
        if name and expr:
            out[name] = expr
    return out


class ControlPanel(QWidget):
    def __init__(self, ctrl: "MechanismController", on_changed: Callable[[], None]):
        super().__init__()
        self.ctrl = ctrl
        self._on_changed = on_changed
        layout = QVBoxLayout(self)

        # --- mechanism parameters ---
        box = QGroupBox("Mechanism")
        form = QFormLayout(box)
        self.spin_segments = QSpinBox()
        self.spin_segments.setRange(1, 64)
        self.spin_link = _dspin(1.0, 1000.0, 1.0, 1)
        self.spin_curvature = _dspin(-5.0, 5.0, 0.05)
        self.spin_length = _dspin(10.0, 5000.0, 10.0, 1)
        self.combo_curve = QComboBox()
        for ct in CurveType:
            self.combo_curve.addItem(ct.value.capitalize(), ct.value)
        form.addRow("Segments", self.spin_segments)
        form.addRow("Rod length", self.spin_link)
        form.addRow("Curvature", self.spin_curvature)
        form.addRow("Curve length", self.spin_length)
        form.addRow("Curve", self.combo_curve)
        layout.addWidget(box)

        self.spin_segments.valueChanged.connect(lambda v: self._edit(segments=v))
        self.spin_link.valueChanged.connect(lambda v: self._edit(link_length=v))
        self.spin_curvature.valueChanged.connect(lambda v: self._edit(curvature=v))
        self.spin_length.valueChanged.connect(lambda v: self._edit(curve_length=v))
        self.combo_curve.currentIndexChanged.connect(self._curve_changed)

        # --- expressions ---
        box = QGroupBox("Expressions")
        form = QFormLayout(box)
        self.edit_user = QLineEdit()
        self.edit_user.setPlaceholderText("pitch=30; k=1.5")
        self.edit_fields = QLineEdit()
        self.edit_fields.setPlaceholderText("link_length=2*pitch")
        self.lbl_expr = QLabel("")
        self.lbl_expr.setWordWrap(True)
        btn = QPushButton("Apply")
        btn.clicked.connect(lambda: self._apply_expressions())
        form.addRow("User", self.edit_user)
        form.addRow("Fields", self.edit_fields)
        form.addRow(btn, self.lbl_expr)
        layout.addWidget(box)

        # --- display ---
        box = QGroupBox("Display")
        col = QVBoxLayout(box)
        self.checks: Dict[str, QCheckBox] = {}
        for key, label in (
            ("show_curve", "Curve"),
            ("show_joints", "Joints"),
            ("show_pivots", "Pivots"),
            ("show_labels", "Labels"),
            ("show_trail", "Trail"),
            ("show_mfg", "Manufacturing preview"),
        ):
            cb = QCheckBox(label)
            cb.toggled.connect(lambda checked, k=key: self._toggle(k, checked))
            col.addWidget(cb)
            self.checks[key] = cb
        btn_trail = QPushButton("Clear trail")
        btn_trail.clicked.connect(lambda: self._clear_trail())
        col.addWidget(btn_trail)
        layout.addWidget(box)

        # --- manufacturing ---
        box = QGroupBox("Manufacturing")
        form = QFormLayout(box)
        self.spin_width = _dspin(0.1, 100.0, 0.5)
        self.spin_hole = _dspin(0.1, 50.0, 0.5)
        self.spin_kerf = _dspin(0.0, 5.0, 0.05)
        self.spin_px2mm = _dspin(0.01, 100.0, 0.1)
        form.addRow("Link width (mm)", self.spin_width)
        form.addRow("Hole (mm)", self.spin_hole)
        form.addRow("Kerf (mm)", self.spin_kerf)
        form.addRow("mm per unit", self.spin_px2mm)
        for spin in (self.spin_width, self.spin_hole, self.spin_kerf, self.spin_px2mm):
            spin.valueChanged.connect(self._export_changed)
        layout.addWidget(box)

        # --- animation ---
        box = QGroupBox("Animation")
        form = QFormLayout(box)
        self.combo_preset = QComboBox()
        self.combo_preset.addItems(sorted(PRESETS))
        self.spin_seg_lo = QSpinBox()
        self.spin_seg_hi = QSpinBox()
        for spin, value in ((self.spin_seg_lo, 3), (self.spin_seg_hi, 8)):
            spin.setRange(1, 64)
            spin.setValue(value)
        seg_row = QHBoxLayout()
        seg_row.addWidget(self.spin_seg_lo)
        seg_row.addWidget(self.spin_seg_hi)
        self.btn_anim = QPushButton("Play")
        self.btn_anim.clicked.connect(lambda: self._toggle_animation())
        form.addRow("Preset", self.combo_preset)
        form.addRow("Segment range", seg_row)
        form.addRow(self.btn_anim)
        layout.addWidget(box)

        self.lbl_integrity = QLabel()
        self.lbl_integrity.setStyleSheet("font-weight: 600;")
        layout.addWidget(self.lbl_integrity)
        layout.addStretch(1)
        self.refresh()

    # ---- sync from model ----
    def refresh(self):
        p = self.ctrl.mechanism.params
        for widget, value in (
            (self.spin_segments, p.segments),
            (self.spin_link, p.link_length),
            (self.spin_curvature, p.curvature),
            (self.spin_length, p.curve_length),
        ):
            with QSignalBlocker(widget):
                widget.setValue(value)
        with QSignalBlocker(self.combo_curve):
            self.combo_curve.setCurrentIndex(max(0, self.combo_curve.findData(p.curve_type.value)))
        for key, cb in self.checks.items():
            with QSignalBlocker(cb):
                cb.setChecked(bool(getattr(self.ctrl.display, key)))
        cfg = self.ctrl.export_config
        for widget, value in (
            (self.spin_width, cfg.link_width),
            (self.spin_hole, cfg.hole_dia),
            (self.spin_kerf, cfg.kerf),
            (self.spin_px2mm, cfg.px2mm),
        ):
            with QSignalBlocker(widget):
                widget.setValue(value)
        self.btn_anim.setText("Stop" if self.ctrl.animating else "Play")
        self.refresh_status()

    def refresh_status(self):
        integrity = self.ctrl.mechanism.get_integrity()
        color = INTEGRITY_COLORS.get(integrity.level)
        self.lbl_integrity.setText(f"Integrity: {integrity.text}")
        if color is not None:
            self.lbl_integrity.setStyleSheet(f"font-weight: 600; color: {color.name()};")

    # ---- edits ----
    @safe_slot
    def _edit(self, **partial):
        self.ctrl.set_params(**partial)
        self._on_changed()

    @safe_slot
    def _curve_changed(self, _index: int):
        self.ctrl.set_curve_type(self.combo_curve.currentData())
        self._on_changed()

    @safe_slot
    def _toggle(self, key: str, checked: bool):
        self.ctrl.set_display(**{key: checked})
        self._on_changed()

    @safe_slot
    def _clear_trail(self):
        self.ctrl.clear_trail()
        self._on_changed()

    @safe_slot
    def _export_changed(self, _value: float):
        self.ctrl.export_config = replace(
            self.ctrl.export_config,
            link_width=self.spin_width.value(),
            hole_dia=self.spin_hole.value(),
            kerf=self.spin_kerf.value(),
            px2mm=self.spin_px2mm.value(),
        )
        self._on_changed()

    @safe_slot
    def _apply_expressions(self):
        errors = []
        for name, expr in parse_assignments(self.edit_user.text()).items():
            val, err = self.ctrl.parameters.eval_expr(expr)
            if err is not None:
                errors.append(f"{name}: {err}")
                continue
            try:
                self.ctrl.parameters.set_param(name, val)
            except ValueError as ex:
                errors.append(str(ex))
        field_errors = self.ctrl.set_param_expressions(parse_assignments(self.edit_fields.text()))
        errors.extend(f"{k}: {v}" for k, v in field_errors.items())
        self.lbl_expr.setText("\n".join(errors))
        self.refresh()
        self._on_changed()

    @safe_slot
    def _toggle_animation(self):
        if self.ctrl.animating:
            self.ctrl.stop_animation()
        else:
            cfg = preset(self.combo_preset.currentText())
            if cfg.segment_shift.enabled:
                cfg = with_segment_range(cfg, (self.spin_seg_lo.value(), self.spin_seg_hi.value()))
            self.ctrl.start_animation(cfg)
        self.refresh()
