# =====================================================================
# Overlay window
# =====================================================================
# Always-on-top, click-through, transparent widget covering every
# monitor. It forwards geometry changes and cursor movement to its trail
# renderer and shows the renderer's surface on repaint.
# =====================================================================

import logging
from typing import Optional

from PyQt5 import QtCore, QtGui, QtWidgets

from cursortrail.config import Config
from cursortrail.pointer import PointerMonitor
from cursortrail.renderer import Subscription, TrailRenderer, subscribe

logger = logging.getLogger(__name__)


def virtual_rect() -> Optional[QtCore.QRect]:
    """Bounding rectangle of all connected screens, None without a screen."""
    screen = QtGui.QGuiApplication.primaryScreen()
    if screen is None:
        return None
    return screen.virtualGeometry()


class Overlay(QtWidgets.QWidget):
    """Transparent overlay that draws the cursor trail.

    Signals:
        resized (int, int): New pixel size, emitted from resizeEvent
        pointer_moved (float, float): Cursor position in widget-local pixels
    """
    resized = QtCore.pyqtSignal(int, int)
    pointer_moved = QtCore.pyqtSignal(float, float)

    def __init__(self, cfg: Config, pointer: Optional[PointerMonitor] = None,
                 renderer_factory=TrailRenderer):
        super().__init__()
        self.cfg = cfg

        # Configure window properties for overlay behavior
        self.setAttribute(QtCore.Qt.WA_TranslucentBackground, True)
        self.setAttribute(QtCore.Qt.WA_TransparentForMouseEvents, True)   # Click-through
        self.setAttribute(QtCore.Qt.WA_ShowWithoutActivating, True)
        self.setWindowFlag(QtCore.Qt.FramelessWindowHint, True)
        self.setWindowFlag(QtCore.Qt.WindowStaysOnTopHint, True)
        self.setWindowFlag(QtCore.Qt.WindowTransparentForInput, True)
        self.setWindowFlag(QtCore.Qt.Tool, True)                          # Hide from taskbar

        self.vr = virtual_rect() or QtCore.QRect(0, 0, 0, 0)
        self.setGeometry(self.vr)

        self.pointer = pointer or PointerMonitor(cfg.poll_ms, parent=self)
        self.pointer.moved.connect(self._on_global_move)

        self._screens: Optional[Subscription] = None
        self.renderer = renderer_factory(self, cfg)

    # ----- config -----
    def apply_config(self, cfg: Config):
        self.cfg = cfg
        self.pointer.set_interval(cfg.poll_ms)
        self.renderer.apply_config(cfg)

    # ----- geometry -----
    def follow_screens(self, rect: QtCore.QRect):
        """Cover the new virtual desktop after monitors are added or moved."""
        self.vr = rect
        self.setGeometry(rect)

    def _to_local(self, x: float, y: float):
        return x - self.vr.left(), y - self.vr.top()

    def _on_global_move(self, x: float, y: float):
        lx, ly = self._to_local(x, y)
        self.pointer_moved.emit(lx, ly)

    # ----- Qt events -----
    def resizeEvent(self, ev: QtGui.QResizeEvent):
        super().resizeEvent(ev)
        size = ev.size()
        self.resized.emit(size.width(), size.height())

    def showEvent(self, ev: QtGui.QShowEvent):
        super().showEvent(ev)
        if not self.renderer.mount():
            return
        screen = QtGui.QGuiApplication.primaryScreen()
        if screen is not None and self._screens is None:
            self._screens = subscribe(screen.virtualGeometryChanged, self.follow_screens)
        try:
            self.pointer.start()
        except Exception as e:
            # Trail still renders, it just has nothing to follow
            logger.warning("Cursor tracking unavailable: %s", e)

    def closeEvent(self, ev: QtGui.QCloseEvent):
        self.pointer.stop()
        if self._screens is not None:
            self._screens.release()
            self._screens = None
        self.renderer.unmount()
        super().closeEvent(ev)

    def paintEvent(self, ev: QtGui.QPaintEvent):
        surface = self.renderer.surface
        if surface is None:
            return
        painter = QtGui.QPainter(self)
        painter.setCompositionMode(QtGui.QPainter.CompositionMode_Source)
        painter.drawImage(0, 0, surface.image)
        painter.end()
