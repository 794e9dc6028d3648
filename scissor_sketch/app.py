# -*- coding: utf-8 -*-
"""Application entry point."""

from __future__ import annotations

import logging
import os
import sys
from PyQt6.QtWidgets import QApplication

from .ui.main_window import MainWindow


def main():
    logging.basicConfig(
        level=os.environ.get("SCISSOR_SKETCH_LOG", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = QApplication(sys.argv)
    w = MainWindow()
    w.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
