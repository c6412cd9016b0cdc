# =====================================================================
# System tray
# =====================================================================
# Tray icon with a variant menu, Clear trail and Quit. Picking a variant
# saves it to QSettings and applies it to the running overlay.
# =====================================================================

import math
from typing import Dict

from PyQt5 import QtCore, QtGui, QtWidgets

from cursortrail.colors import Color
from cursortrail.config import APP_NAME, APP_VERSION, VARIANTS
from cursortrail.overlay import Overlay


class Tray(QtWidgets.QSystemTrayIcon):
    """Tray icon: pick the trail variant, clear the trail, quit."""

    def __init__(self, overlay: Overlay, settings: QtCore.QSettings, parent=None):
        super().__init__(parent)
        self.overlay = overlay
        self.settings = settings

        self.setIcon(self._trail_icon())

        menu = QtWidgets.QMenu()
        variants_menu = menu.addMenu("Variant")
        self.variant_group = QtWidgets.QActionGroup(variants_menu)
        self.variant_actions: Dict[str, QtWidgets.QAction] = {}
        for name in VARIANTS:
            action = variants_menu.addAction(name.capitalize())
            action.setCheckable(True)
            action.setChecked(name == overlay.cfg.variant)
            action.triggered.connect(lambda _checked, n=name: self.select_variant(n))
            self.variant_group.addAction(action)
            self.variant_actions[name] = action

        self.action_clear = menu.addAction("Clear trail")
        self.action_clear.triggered.connect(self.overlay.renderer.clear)

        menu.addSeparator()
        quit_action = menu.addAction("Quit")
        quit_action.triggered.connect(QtWidgets.QApplication.quit)

        self.menu = menu  # QSystemTrayIcon doesn't take ownership
        self.setContextMenu(menu)
        self.setToolTip(f"{APP_NAME} {APP_VERSION}")

    def select_variant(self, name: str):
        cfg = self.overlay.cfg.with_variant(name)
        cfg.save(self.settings)
        self.overlay.apply_config(cfg)
        self.variant_actions[name].setChecked(True)

    def _trail_icon(self) -> QtGui.QIcon:
        """A few glowing dots of shrinking size along a diagonal."""
        pm = QtGui.QPixmap(64, 64)
        pm.fill(QtCore.Qt.transparent)
        p = QtGui.QPainter(pm)
        p.setRenderHint(QtGui.QPainter.Antialiasing, True)
        p.setPen(QtCore.Qt.NoPen)
        for i in range(5):
            t = i / 4
            r = 12 - 8 * t
            c = Color(300 - 240 * t).to_qcolor()
            p.setBrush(QtGui.QBrush(c))
            x = 14 + 36 * t
            y = 50 - 36 * t + 4 * math.sin(t * math.pi)
            p.drawEllipse(QtCore.QPointF(x, y), r, r)
        p.end()
        return QtGui.QIcon(pm)
