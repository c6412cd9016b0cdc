# =====================================================================
# Drawing surface
# =====================================================================
# Off-screen ARGB image the renderer paints into between repaints. Unlike
# a plain widget paint, the image keeps last frame's pixels, which is what
# lets the fade step leave a trail behind instead of clearing.
#
# Alpha is stored as 0..255, so an erase fade of a few percent stops
# shrinking a pixel once the removed amount rounds to zero. The surface
# counts frames that only erased and wipes the leftover coverage once the
# fade has done all it can.
# =====================================================================

import logging
import math
from contextlib import contextmanager
from enum import Enum
from typing import Iterator, Optional, Sequence, Tuple

from PyQt5 import QtCore, QtGui

from cursortrail.colors import Color

logger = logging.getLogger(__name__)


class CompositeMode(Enum):
    NORMAL = QtGui.QPainter.CompositionMode_SourceOver    # paint over
    ADDITIVE = QtGui.QPainter.CompositionMode_Plus        # canvas "lighter"
    ERASE = QtGui.QPainter.CompositionMode_DestinationOut  # remove coverage


# (position along the radius 0..1, colour at that position)
GradientStop = Tuple[float, Color]


def settle_frames(fade_alpha: float) -> int:
    """Erase-only frames after which a fully opaque pixel has faded out.

    That is the smallest n with 255 * (1 - fade_alpha) ** n <= 1.
    """
    if fade_alpha >= 1.0:
        return 1
    if fade_alpha <= 0.0:
        raise ValueError(f"fade_alpha must be positive, got {fade_alpha}")
    return math.ceil(math.log(1 / 255) / math.log(1 - fade_alpha))


class Canvas:
    """Drawing operations for one frame, backed by a QPainter.

    Remembers whether the frame added any coverage (``painted``) and the
    strongest erase fill it applied (``erased``).
    """

    def __init__(self, painter: QtGui.QPainter, width: int, height: int):
        self._painter = painter
        self._rect = QtCore.QRectF(0, 0, width, height)
        self._mode = CompositeMode.NORMAL
        self.painted = False
        self.erased = 0.0

    def set_composite(self, mode: CompositeMode):
        self._mode = mode
        self._painter.setCompositionMode(mode.value)

    def fill(self, color: Color):
        """Fill the whole surface with ``color`` in the current mode."""
        self._painter.fillRect(self._rect, color.to_qcolor())
        if self._mode is CompositeMode.ERASE:
            self.erased = max(self.erased, color.alpha)
        else:
            self.painted = True

    def radial_glow(self, x: float, y: float, radius: float, stops: Sequence[GradientStop]):
        """Paint a disc of ``radius`` filled with a radial gradient centred on (x, y)."""
        if radius <= 0:
            return
        center = QtCore.QPointF(x, y)
        gradient = QtGui.QRadialGradient(center, radius)
        for position, color in stops:
            gradient.setColorAt(position, color.to_qcolor())
        self._painter.setPen(QtCore.Qt.NoPen)
        self._painter.setBrush(QtGui.QBrush(gradient))
        self._painter.drawEllipse(center, radius, radius)
        self.painted = True


class ImageSurface:
    """Full-window pixel buffer.

    Use ``acquire`` rather than the constructor: it returns None when the
    platform can't give us an image of the requested size.
    """

    def __init__(self, image: QtGui.QImage):
        self.image = image
        self._idle_frames = 0

    @classmethod
    def acquire(cls, width: int, height: int) -> Optional["ImageSurface"]:
        image = cls._blank(width, height)
        if image is None:
            logger.debug("Could not allocate a %dx%d drawing surface", width, height)
            return None
        return cls(image)

    @staticmethod
    def _blank(width: int, height: int) -> Optional[QtGui.QImage]:
        if width <= 0 or height <= 0:
            return None
        image = QtGui.QImage(width, height, QtGui.QImage.Format_ARGB32_Premultiplied)
        if image.isNull():
            return None
        image.fill(QtCore.Qt.transparent)
        return image

    @property
    def size(self) -> Tuple[int, int]:
        return self.image.width(), self.image.height()

    def resize(self, width: int, height: int):
        """Match the pixel size exactly. The contents are cleared, like a canvas."""
        if (width, height) == self.size:
            return
        image = self._blank(width, height)
        if image is None:
            # Keep drawing into the old buffer rather than failing the frame
            logger.debug("Ignoring resize to %dx%d", width, height)
            return
        self.image = image
        self._idle_frames = 0

    @contextmanager
    def frame(self) -> Iterator[Canvas]:
        painter = QtGui.QPainter(self.image)
        painter.setRenderHint(QtGui.QPainter.Antialiasing, True)
        canvas = Canvas(painter, self.image.width(), self.image.height())
        try:
            yield canvas
        finally:
            painter.end()
        self._settle(canvas)

    def _settle(self, canvas: Canvas):
        if canvas.painted:
            self._idle_frames = 0
            return
        if canvas.erased <= 0:
            return
        self._idle_frames += 1
        if self._idle_frames == settle_frames(canvas.erased):
            # Whatever the fade left behind is stuck at a few alpha steps
            self.image.fill(QtCore.Qt.transparent)
            logger.debug("Cleared faded trail residue after %d frames", self._idle_frames)

    def release(self):
        self.image = QtGui.QImage()
        self._idle_frames = 0
