# =====================================================================
# Global pointer tracking
# =====================================================================
# The overlay is transparent for mouse input, so it never sees mouse move
# events of its own. Instead the cursor position is sampled on a short
# timer and a moved signal fires whenever it changed.
# =====================================================================

import logging
from typing import Callable, Optional, Tuple

from PyQt5 import QtCore

logger = logging.getLogger(__name__)


def _pyautogui_position() -> Callable[[], Tuple[int, int]]:
    # Imported late: pyautogui talks to the display server on import
    import pyautogui
    pyautogui.FAILSAFE = False  # corner of the screen must not raise
    return pyautogui.position


class PointerMonitor(QtCore.QObject):
    """Emits ``moved(x, y)`` in global screen coordinates.

    Args:
        poll_ms (int): Sampling period
        position: Callable returning the current (x, y); defaults to
            ``pyautogui.position``
    """
    moved = QtCore.pyqtSignal(float, float)

    def __init__(self, poll_ms: int, position: Optional[Callable[[], Tuple[int, int]]] = None,
                 parent: Optional[QtCore.QObject] = None):
        super().__init__(parent)
        self._position = position
        self._last: Optional[Tuple[int, int]] = None
        self._warned = False

        self.timer = QtCore.QTimer(self)
        self.timer.setInterval(poll_ms)
        self.timer.timeout.connect(self.poll)

    @property
    def active(self) -> bool:
        return self.timer.isActive()

    def set_interval(self, poll_ms: int):
        self.timer.setInterval(poll_ms)

    def start(self):
        if self._position is None:
            self._position = _pyautogui_position()
        self._last = None
        self.timer.start()

    def stop(self):
        self.timer.stop()

    def poll(self):
        try:
            x, y = self._position()
        except Exception as e:
            if not self._warned:
                logger.warning("Could not read the cursor position: %s", e)
                self._warned = True
            return
        pos = (int(x), int(y))
        if pos == self._last:
            return
        self._last = pos
        self.moved.emit(float(pos[0]), float(pos[1]))
