# -*- coding: utf-8 -*-
"""Graphics items used in the QGraphicsScene."""

from __future__ import annotations

import math
from typing import Sequence

from PyQt6.QtCore import Qt, QPointF, QRectF
from PyQt6.QtGui import QPen, QPainterPath, QBrush, QColor, QTransform
from PyQt6.QtWidgets import (
    QGraphicsItem,
    QGraphicsEllipseItem,
    QGraphicsLineItem,
    QGraphicsPathItem,
    QGraphicsSimpleTextItem,
)

from ..utils.constants import INK, DARK, CURVE, TRAIL, MFG, HILITE, STROKE, JOINT_SIZE, PIVOT_SIZE


def _cosmetic(color: QColor, width: float) -> QPen:
    pen = QPen(color, width)
    pen.setCosmetic(True)
    pen.setCapStyle(Qt.PenCapStyle.RoundCap)
    return pen


def _polyline_path(points: Sequence, dx: float = 0.0, dy: float = 0.0) -> QPainterPath:
    path = QPainterPath()
    for i, p in enumerate(points):
        if i == 0:
            path.moveTo(p.x + dx, p.y + dy)
        else:
            path.lineTo(p.x + dx, p.y + dy)
    return path


class TextMarker(QGraphicsSimpleTextItem):
    def __init__(self, text: str = ""):
        super().__init__(text)
        self.setZValue(30)
        self.setBrush(DARK)
        # Labels must not intercept anchor picking.
        self.setAcceptedMouseButtons(Qt.MouseButton.NoButton)
        self.setFlag(QGraphicsItem.GraphicsItemFlag.ItemIgnoresTransformations, True)


class JointItem(QGraphicsEllipseItem):
    def __init__(self, joint, anchored: bool = False):
        r = JOINT_SIZE / 2.0
        super().__init__(-r, -r, JOINT_SIZE, JOINT_SIZE)
        self.node_id = joint.id
        self.setPos(joint.x, joint.y)
        self.setZValue(10)
        self.setFlag(QGraphicsItem.GraphicsItemFlag.ItemIgnoresTransformations, True)
        self.setBrush(QBrush(HILITE) if anchored else QBrush(Qt.BrushStyle.NoBrush))
        self.setPen(QPen(INK, 1.5))


class PivotItem(QGraphicsEllipseItem):
    """Circle with a cross hair."""

    def __init__(self, pivot, anchored: bool = False):
        r = PIVOT_SIZE / 2.0
        super().__init__(-r, -r, PIVOT_SIZE, PIVOT_SIZE)
        self.node_id = pivot.id
        self.setPos(pivot.x, pivot.y)
        self.setZValue(12)
        self.setFlag(QGraphicsItem.GraphicsItemFlag.ItemIgnoresTransformations, True)
        self.setBrush(QBrush(HILITE) if anchored else QBrush(Qt.BrushStyle.NoBrush))
        self.setPen(QPen(INK, 1.5))
        for x1, y1, x2, y2 in ((-r, 0, r, 0), (0, -r, 0, r)):
            cross = QGraphicsLineItem(x1, y1, x2, y2, self)
            cross.setPen(QPen(INK, 1.0))


class LinkItem(QGraphicsLineItem):
    def __init__(self, link):
        super().__init__(link.start.x, link.start.y, link.end.x, link.end.y)
        self.link_id = link.id
        self.setZValue(5)
        self.setPen(_cosmetic(INK, 1.5))
        self.setAcceptedMouseButtons(Qt.MouseButton.NoButton)


class CapsuleItem(QGraphicsPathItem):
    """Manufacturing outline of one rod: a stadium of ``width`` around the link."""

    def __init__(self, link, width: float, hole_dia: float):
        super().__init__()
        self.setZValue(2)
        self.setPen(_cosmetic(MFG, 1.0))
        self.setAcceptedMouseButtons(Qt.MouseButton.NoButton)
        self.setPath(self.outline(link.start, link.end, width, hole_dia))

    @staticmethod
    def outline(p1, p2, width: float, hole_dia: float) -> QPainterPath:
        path = QPainterPath()
        dx, dy = p2.x - p1.x, p2.y - p1.y
        length = math.hypot(dx, dy)
        if length < 1e-6:
            return path
        r = width / 2.0
        angle = math.degrees(math.atan2(dy, dx))
        body = QPainterPath()
        body.addRoundedRect(QRectF(-r, -r, length + width, width), r, r)
        hr = hole_dia / 2.0
        body.addEllipse(QPointF(0.0, 0.0), hr, hr)
        body.addEllipse(QPointF(length, 0.0), hr, hr)
        tf = QTransform()
        tf.translate(p1.x, p1.y)
        tf.rotate(angle)
        path.addPath(tf.map(body))
        return path


class CurveItem(QGraphicsPathItem):
    """Dashed guide curve; points are mechanism-local and offset by the center."""

    def __init__(self, points: Sequence, cx: float, cy: float):
        super().__init__(_polyline_path(points, cx, cy))
        self.setZValue(-2)
        pen = _cosmetic(CURVE, 1.0)
        pen.setStyle(Qt.PenStyle.DashLine)
        self.setPen(pen)
        self.setAcceptedMouseButtons(Qt.MouseButton.NoButton)


class TrailItem(QGraphicsPathItem):
    def __init__(self, points: Sequence):
        super().__init__(_polyline_path(points))
        self.setZValue(-5)
        self.setPen(_cosmetic(TRAIL, 1.6))
        self.setBrush(QBrush(Qt.BrushStyle.NoBrush))
        self.setAcceptedMouseButtons(Qt.MouseButton.NoButton)


class StrokeItem(QGraphicsPathItem):
    """Live preview of the stroke being drawn (scene coordinates)."""

    def __init__(self):
        super().__init__()
        self.setZValue(40)
        self.setPen(_cosmetic(STROKE, 1.5))
        self.setAcceptedMouseButtons(Qt.MouseButton.NoButton)

    def set_points(self, points: Sequence, cx: float, cy: float):
        self.setPath(_polyline_path(points, cx, cy))
