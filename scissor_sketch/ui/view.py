# -*- coding: utf-8 -*-
"""Graphics view: rendering, pan/zoom, free-hand drawing and anchor picking."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

from PyQt6.QtCore import Qt, QPointF, QRectF
from PyQt6.QtGui import QPainter
from PyQt6.QtWidgets import QGraphicsView, QGraphicsScene, QGraphicsItem

from ..utils.constants import PICK_RADIUS_PX
from ..utils.qt_safe import safe_event
from .items import (
    TextMarker,
    JointItem,
    PivotItem,
    LinkItem,
    CapsuleItem,
    CurveItem,
    TrailItem,
    StrokeItem,
)

if TYPE_CHECKING:
    from ..core.controller import MechanismController


class MechanismView(QGraphicsView):
    """Renders the mechanism and routes pointer input to the controller.

    Modes: ``Idle`` (pan/zoom only), ``Draw`` (left-drag records a stroke)
    and ``Anchor`` (left-click pins the node under the cursor, dragging
    moves the anchor target).
    """

    def __init__(self, scene: QGraphicsScene, ctrl: "MechanismController"):
        super().__init__(scene)
        self.ctrl = ctrl
        self.mode = "Idle"
        self.setRenderHint(QPainter.RenderHint.Antialiasing)
        self.setTransformationAnchor(QGraphicsView.ViewportAnchor.AnchorUnderMouse)
        self.setDragMode(QGraphicsView.DragMode.NoDrag)
        self.setContextMenuPolicy(Qt.ContextMenuPolicy.NoContextMenu)

        self._items: List[QGraphicsItem] = []
        self._stroke_item = StrokeItem()
        self._stroke_item.setVisible(False)
        scene.addItem(self._stroke_item)

        self._rmb_pan = False
        self._rmb_start = QPointF()
        self._anchor_drag = False

    # ---- rendering ----
    def refresh(self):
        scene = self.scene()
        for it in self._items:
            scene.removeItem(it)
        self._items = []

        m = self.ctrl.mechanism
        opts = self.ctrl.display
        anchor_id = m.anchor.node_id

        def add(item: QGraphicsItem):
            scene.addItem(item)
            self._items.append(item)

        if opts.show_curve and len(m.base_curve) >= 2:
            add(CurveItem(m.base_curve, m.center_x, m.center_y))
        if opts.show_trail and len(m.trail) >= 2:
            add(TrailItem(m.trail_points))
        if opts.show_mfg:
            cfg = self.ctrl.export_config
            px2mm = cfg.px2mm or 1.0
            width = (cfg.link_width + cfg.kerf) / px2mm
            hole = (cfg.hole_dia + cfg.kerf) / px2mm
            for lk in m.links:
                add(CapsuleItem(lk, width, hole))
        for lk in m.links:
            add(LinkItem(lk))
        if opts.show_joints:
            for j in m.joints:
                add(JointItem(j, anchored=(j.id == anchor_id)))
                if opts.show_labels:
                    add(self._label(j.id, j.x, j.y, 6, -18))
        if opts.show_pivots:
            for p in m.pivots:
                add(PivotItem(p, anchored=(p.id == anchor_id)))
                if opts.show_labels:
                    add(self._label(p.id, p.x, p.y, 8, 8))

    @staticmethod
    def _label(text: str, x: float, y: float, ox: float, oy: float) -> TextMarker:
        t = TextMarker(text)
        t.setPos(x, y)
        # Offset in device pixels; the marker ignores view transforms.
        t.setTransform(t.transform().translate(ox, oy))
        return t

    def set_mode(self, mode: str):
        self.mode = mode
        self.ctrl.cancel_stroke()
        self._stroke_item.setVisible(False)
        self._restore_cursor()

    def _restore_cursor(self):
        cursor = Qt.CursorShape.CrossCursor if self.mode in ("Draw", "Anchor") else Qt.CursorShape.ArrowCursor
        self.setCursor(cursor)

    def _pick_radius(self) -> float:
        scale = self.transform().m11() or 1.0
        return PICK_RADIUS_PX / abs(scale)

    # ---- events ----
    def wheelEvent(self, e):
        f = 1.25 if e.angleDelta().y() > 0 else 0.8
        self.scale(f, f)

    @safe_event
    def mousePressEvent(self, e):
        sp = self.mapToScene(e.position().toPoint())
        if e.button() == Qt.MouseButton.RightButton:
            self._rmb_pan = True
            self._rmb_start = e.position()
            self.setCursor(Qt.CursorShape.ClosedHandCursor)
            e.accept(); return
        if e.button() == Qt.MouseButton.LeftButton:
            if self.mode == "Draw":
                self.ctrl.begin_stroke(sp.x(), sp.y())
                self._stroke_item.setVisible(True)
                self._sync_stroke()
                e.accept(); return
            if self.mode == "Anchor":
                hit = self.ctrl.pick_anchor(sp.x(), sp.y(), self._pick_radius())
                self._anchor_drag = hit is not None
                self._changed()
                e.accept(); return
        super().mousePressEvent(e)

    @safe_event
    def mouseMoveEvent(self, e):
        if self._rmb_pan:
            d = e.position() - self._rmb_start
            self._rmb_start = e.position()
            self.horizontalScrollBar().setValue(self.horizontalScrollBar().value() - int(d.x()))
            self.verticalScrollBar().setValue(self.verticalScrollBar().value() - int(d.y()))
            e.accept(); return
        sp = self.mapToScene(e.position().toPoint())
        if self.mode == "Draw" and self.ctrl.drawing:
            self.ctrl.extend_stroke(sp.x(), sp.y())
            self._sync_stroke()
            e.accept(); return
        if self.mode == "Anchor" and self._anchor_drag:
            self.ctrl.move_anchor(sp.x(), sp.y())
            self._changed()
            e.accept(); return
        super().mouseMoveEvent(e)

    @safe_event
    def mouseReleaseEvent(self, e):
        if e.button() == Qt.MouseButton.RightButton and self._rmb_pan:
            self._rmb_pan = False
            self._restore_cursor()
            e.accept(); return
        if e.button() == Qt.MouseButton.LeftButton:
            if self.mode == "Draw" and self.ctrl.drawing:
                self.ctrl.end_stroke()
                self._stroke_item.setVisible(False)
                self._changed()
                e.accept(); return
            if self._anchor_drag:
                self._anchor_drag = False
                e.accept(); return
        super().mouseReleaseEvent(e)

    @safe_event
    def keyPressEvent(self, e):
        if e.key() == Qt.Key.Key_Escape:
            self.ctrl.cancel_stroke()
            self._stroke_item.setVisible(False)
            self.set_mode("Idle")
            e.accept(); return
        super().keyPressEvent(e)

    def _sync_stroke(self):
        m = self.ctrl.mechanism
        self._stroke_item.set_points(self.ctrl.stroke_points(), m.center_x, m.center_y)

    def _changed(self):
        self.ctrl.tick()
        self.refresh()

    def reset_view(self):
        self.resetTransform()
        self.centerOn(0, 0)

    def fit_all(self):
        rect: Optional[QRectF] = None
        for it in self._items:
            r = it.sceneBoundingRect()
            rect = r if rect is None else rect.united(r)
        if rect is None or rect.isNull():
            return
        pad = 40
        r = QRectF(rect.left() - pad, rect.top() - pad, rect.width() + 2 * pad, rect.height() + 2 * pad)
        self.fitInView(r, Qt.AspectRatioMode.KeepAspectRatio)
