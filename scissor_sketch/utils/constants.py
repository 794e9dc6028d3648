# -*- coding: utf-8 -*-
"""UI constants and colors."""

from PyQt6.QtGui import QColor

INK = QColor(17, 17, 17)
DARK = QColor(80, 80, 80)
CURVE = QColor(156, 156, 156)
TRAIL = QColor(0, 120, 215, 140)
MFG = QColor(200, 200, 200)
HILITE = QColor(0, 120, 255)
STROKE = QColor(220, 60, 60)

INTEGRITY_COLORS = {
    "good": QColor(60, 160, 80),
    "warning": QColor(210, 160, 20),
    "error": QColor(210, 50, 50),
}

JOINT_SIZE = 8.0
PIVOT_SIZE = 12.0
PICK_RADIUS_PX = 18.0
FRAME_INTERVAL_MS = 16
