# =====================================================================
# Trail colours
# =====================================================================
# Particles carry a structured HSL colour instead of a CSS string, so the
# translucent variants used by the glow gradient are derived with an
# explicit opacity operation.
# =====================================================================

import random
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, List, Tuple

from PyQt5 import QtGui

# Saturation / lightness shared by every trail colour (hsl(h, 90%, 70%))
TRAIL_SATURATION = 0.9
TRAIL_LIGHTNESS  = 0.7

# Hue cycle speed for the time-driven scheme
HUE_DEGREES_PER_SECOND = 120.0

# Hue bands for the random palette, in degrees: reds-yellows, greens-cyans,
# blues-magentas, magentas-reds, yellows-greens, cyans-blues
PALETTE_BANDS: List[Tuple[float, float]] = [
    (0.0, 60.0),
    (120.0, 180.0),
    (240.0, 300.0),
    (300.0, 360.0),
    (60.0, 120.0),
    (180.0, 240.0),
]


def _clamp01(v: float) -> float:
    return max(0.0, min(1.0, v))


@dataclass(frozen=True)
class Color:
    """An HSL colour with opacity.

    Attributes:
        hue (float): Hue in degrees, normalised into [0, 360)
        saturation (float): 0.0 - 1.0
        lightness (float): 0.0 - 1.0
        alpha (float): Opacity, 0.0 (transparent) - 1.0 (opaque)
    """
    hue: float
    saturation: float = TRAIL_SATURATION
    lightness: float = TRAIL_LIGHTNESS
    alpha: float = 1.0

    def __post_init__(self):
        # frozen dataclass, so normalise through object.__setattr__
        object.__setattr__(self, "hue", self.hue % 360.0)
        object.__setattr__(self, "saturation", _clamp01(self.saturation))
        object.__setattr__(self, "lightness", _clamp01(self.lightness))
        object.__setattr__(self, "alpha", _clamp01(self.alpha))

    def with_alpha(self, alpha: float) -> "Color":
        """Return the same colour at opacity ``alpha`` (clamped into [0, 1])."""
        return replace(self, alpha=alpha)

    def to_qcolor(self) -> QtGui.QColor:
        """Convert to a QColor for painting."""
        return QtGui.QColor.fromHslF(self.hue / 360.0, self.saturation, self.lightness, self.alpha)


BLACK = Color(0.0, 0.0, 0.0)


class ColorScheme(Enum):
    PALETTE = "palette"      # random hue from a banded palette
    HUE_CYCLE = "hue_cycle"  # hue follows elapsed time


def palette_color(rng: random.Random) -> Color:
    """Pick a random band, then a random hue inside it."""
    lo, hi = rng.choice(PALETTE_BANDS)
    return Color(lo + rng.random() * (hi - lo))


def hue_cycle_color(elapsed_seconds: float) -> Color:
    return Color((elapsed_seconds * HUE_DEGREES_PER_SECOND) % 360.0)


def color_source(scheme: ColorScheme, rng: random.Random,
                 clock: Callable[[], float]) -> Callable[[], Color]:
    """Build a zero-argument colour factory for ``scheme``.

    ``clock`` returns seconds; the hue cycle measures time from the moment
    the source is created.
    """
    if scheme is ColorScheme.PALETTE:
        return lambda: palette_color(rng)
    started = clock()
    return lambda: hue_cycle_color(clock() - started)
