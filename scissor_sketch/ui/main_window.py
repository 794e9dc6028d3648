# -*- coding: utf-8 -*-
"""Main window + menus."""

from __future__ import annotations

from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtGui import QAction, QActionGroup, QKeySequence
from PyQt6.QtWidgets import (
    QMainWindow, QGraphicsScene, QDockWidget, QStatusBar, QFileDialog, QMessageBox
)

from ..core.controller import MechanismController
from ..core.curves import CurveType
from ..utils.constants import FRAME_INTERVAL_MS
from ..utils.qt_safe import safe_slot
from .panel import ControlPanel
from .view import MechanismView


class MainWindow(QMainWindow):
    def __init__(self):
        super().__init__()
        self.setWindowTitle("Scissor Sketch")
        self.resize(1400, 900)
        self.scene = QGraphicsScene(-2000, -2000, 4000, 4000)
        self.ctrl = MechanismController(on_change=self.update_undo_redo_actions)
        self.view = MechanismView(self.scene, self.ctrl)
        self.setCentralWidget(self.view)
        self.dock = QDockWidget("Parameters", self)
        self.panel = ControlPanel(self.ctrl, self.on_model_changed)
        self.dock.setWidget(self.panel)
        self.addDockWidget(Qt.DockWidgetArea.RightDockWidgetArea, self.dock)
        self.setStatusBar(QStatusBar())
        self._build_menus()

        self.timer = QTimer(self)
        self.timer.setInterval(FRAME_INTERVAL_MS)
        self.timer.timeout.connect(self._frame)
        self.timer.start()

        self.ctrl.tick()
        self.view.refresh()
        self.view.reset_view()
        self.update_undo_redo_actions()
        self.update_status()

    def _build_menus(self):
        mb = self.menuBar()

        m_file = mb.addMenu("&File")
        self.act_export = QAction("Export links as SVG...", self)
        self.act_export.setShortcut(QKeySequence("Ctrl+E"))
        self.act_export.triggered.connect(self.export_svg)
        m_file.addAction(self.act_export)
        m_file.addSeparator()
        act_exit = QAction("Exit", self)
        act_exit.triggered.connect(self.close)
        m_file.addAction(act_exit)

        m_edit = mb.addMenu("&Edit")
        self.act_undo = QAction("Undo", self)
        self.act_undo.setShortcut(QKeySequence.StandardKey.Undo)
        self.act_undo.triggered.connect(lambda: self._history(self.ctrl.stack.undo))
        self.act_redo = QAction("Redo", self)
        self.act_redo.setShortcut(QKeySequence.StandardKey.Redo)
        self.act_redo.triggered.connect(lambda: self._history(self.ctrl.stack.redo))
        act_reset = QAction("Reset parameters", self)
        act_reset.setShortcut(QKeySequence("R"))
        act_reset.triggered.connect(self.reset_params)
        m_edit.addActions([self.act_undo, self.act_redo])
        m_edit.addSeparator()
        m_edit.addAction(act_reset)

        m_tools = mb.addMenu("&Tools")
        group = QActionGroup(self)
        group.setExclusive(True)
        for mode, label, key in (("Idle", "Navigate", "Esc"), ("Draw", "Draw curve", "D"), ("Anchor", "Pick anchor", "A")):
            act = QAction(label, self)
            act.setCheckable(True)
            act.setShortcut(QKeySequence(key))
            act.setChecked(mode == "Idle")
            act.triggered.connect(lambda _checked, m=mode: self.view.set_mode(m))
            group.addAction(act)
            m_tools.addAction(act)
        m_tools.addSeparator()
        act_clear_anchor = QAction("Clear anchor", self)
        act_clear_anchor.triggered.connect(self.clear_anchor)
        m_tools.addAction(act_clear_anchor)

        m_view = mb.addMenu("&View")
        for ct, key in ((CurveType.ARC, "1"), (CurveType.SINE, "2"), (CurveType.FREE, "3")):
            act = QAction(f"{ct.value.capitalize()} curve", self)
            act.setShortcut(QKeySequence(key))
            act.triggered.connect(lambda _checked, c=ct: self._set_curve(c))
            m_view.addAction(act)
        m_view.addSeparator()
        for flag, label, key in (("show_pivots", "Toggle pivots", "P"), ("show_joints", "Toggle joints", "J"),
                                 ("show_curve", "Toggle curve", "C")):
            act = QAction(label, self)
            act.setShortcut(QKeySequence(key))
            act.triggered.connect(lambda _checked, f=flag: self._toggle_display(f))
            m_view.addAction(act)
        m_view.addSeparator()
        act_fit = QAction("Fit all", self)
        act_fit.triggered.connect(self.view.fit_all)
        act_reset_view = QAction("Reset view", self)
        act_reset_view.triggered.connect(self.view.reset_view)
        m_view.addActions([act_fit, act_reset_view])

    # ---- frame loop ----
    @safe_slot
    def _frame(self):
        if self.ctrl.tick():
            self.view.refresh()
            self.update_status()

    def on_model_changed(self):
        self._frame()

    def update_status(self):
        self.statusBar().showMessage(self.ctrl.status_text())
        self.panel.refresh_status()

    def update_undo_redo_actions(self):
        if not hasattr(self, "act_undo"):
            return
        self.act_undo.setEnabled(self.ctrl.stack.can_undo())
        self.act_redo.setEnabled(self.ctrl.stack.can_redo())
        self.act_undo.setText(f"Undo {self.ctrl.stack.undo_text()}".strip())
        self.act_redo.setText(f"Redo {self.ctrl.stack.redo_text()}".strip())

    # ---- actions ----
    def _history(self, op):
        op()
        self.panel.refresh()
        self._frame()

    def reset_params(self):
        self.ctrl.reset_params()
        self.panel.refresh()
        self._frame()

    def clear_anchor(self):
        self.ctrl.clear_anchor()
        self._frame()

    def _set_curve(self, curve_type: CurveType):
        self.ctrl.set_curve_type(curve_type)
        self.panel.refresh()
        self._frame()

    def _toggle_display(self, flag: str):
        self.ctrl.set_display(**{flag: not getattr(self.ctrl.display, flag)})
        self.panel.refresh()
        self.view.refresh()

    def export_svg(self):
        path, _ = QFileDialog.getSaveFileName(self, "Export links", "scissor_links.svg", "SVG (*.svg)")
        if not path:
            return
        try:
            ok = self.ctrl.save_svg(path)
        except OSError as ex:
            QMessageBox.critical(self, "Export failed", str(ex))
            return
        if not ok:
            QMessageBox.information(self, "Export", "No links to export.")
            return
        self.statusBar().showMessage(f"Exported {path}", 4000)
