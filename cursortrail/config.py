# =====================================================================
# Trail configuration
# =====================================================================
# Visual tuning for the trail. Module-level constants are the defaults;
# named variants bundle them; Config persists the chosen values through
# QSettings.
# =====================================================================

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict

from PyQt5 import QtCore

from cursortrail.colors import ColorScheme

logger = logging.getLogger(__name__)

APP_NAME    = "CursorTrail"
APP_VERSION = "1.0.0"
ORG_NAME    = "CursorTrail"   # for QSettings
ORG_DOMAIN  = "cursortrail.local"

FRAME_MS      = 16     # ~60 FPS
POLL_MS       = 8      # cursor sampling period
FADE_ALPHA    = 0.05   # opacity of the per-frame fade fill
MAX_PARTICLES = 1500   # 0 = no cap

# Allowed ranges for the per-variant knobs
SPAWN_RANGE  = (1, 8)
JITTER_RANGE = (0.0, 8.0)
SIZE_RANGE   = (2.0, 12.0)
DECAY_RANGE  = (0.02, 0.05)


class FadeMode(Enum):
    ERASE = "erase"    # wipe a fraction of last frame (transparent overlay)
    DARKEN = "darken"  # translucent black over last frame


def _clamp(v, bounds):
    lo, hi = bounds
    return max(lo, min(hi, v))


@dataclass
class Config:
    spawn_count: int = 8
    jitter_px: float = 8.0
    size_min: float = 4.0
    size_max: float = 12.0
    shrink: bool = True          # radius = size * life, else fixed size
    decay: float = 0.02
    color_scheme: ColorScheme = ColorScheme.PALETTE
    variant: str = "comet"
    max_particles: int = MAX_PARTICLES
    fade_alpha: float = FADE_ALPHA
    fade_mode: FadeMode = FadeMode.ERASE
    frame_ms: int = FRAME_MS
    poll_ms: int = POLL_MS

    def clamped(self) -> "Config":
        """Return a copy with every knob forced into its allowed range."""
        size_min = _clamp(float(self.size_min), SIZE_RANGE)
        size_max = _clamp(float(self.size_max), SIZE_RANGE)
        return replace(
            self,
            spawn_count=int(_clamp(int(self.spawn_count), SPAWN_RANGE)),
            jitter_px=_clamp(float(self.jitter_px), JITTER_RANGE),
            size_min=min(size_min, size_max),
            size_max=max(size_min, size_max),
            decay=_clamp(float(self.decay), DECAY_RANGE),
            max_particles=max(0, int(self.max_particles)),
            fade_alpha=_clamp(float(self.fade_alpha), (0.0, 1.0)),
            frame_ms=max(1, int(self.frame_ms)),
            poll_ms=max(1, int(self.poll_ms)),
        )

    @staticmethod
    def for_variant(name: str) -> "Config":
        """Build the config for a named variant. Raises KeyError if unknown."""
        return replace(VARIANTS[name], variant=name)

    def with_variant(self, name: str) -> "Config":
        """Switch the visual knobs to ``name`` and keep the app-level settings."""
        v = Config.for_variant(name)
        return replace(v, max_particles=self.max_particles, fade_alpha=self.fade_alpha,
                       fade_mode=self.fade_mode, frame_ms=self.frame_ms, poll_ms=self.poll_ms)

    def save(self, s: QtCore.QSettings):
        s.setValue("variant", self.variant)
        s.setValue("spawn_count", self.spawn_count)
        s.setValue("jitter_px", self.jitter_px)
        s.setValue("size_min", self.size_min)
        s.setValue("size_max", self.size_max)
        s.setValue("shrink", self.shrink)
        s.setValue("decay", self.decay)
        s.setValue("color_scheme", self.color_scheme.value)
        s.setValue("max_particles", self.max_particles)
        s.setValue("fade_alpha", self.fade_alpha)
        s.setValue("fade_mode", self.fade_mode.value)
        s.setValue("frame_ms", self.frame_ms)
        s.setValue("poll_ms", self.poll_ms)
        s.sync()

    @staticmethod
    def load(s: QtCore.QSettings) -> "Config":
        variant = s.value("variant", "comet")
        if variant not in VARIANTS:
            logger.warning("Unknown stored variant %r, using 'comet'", variant)
            variant = "comet"
        cfg = Config.for_variant(variant)
        try:
            cfg.spawn_count   = int(s.value("spawn_count", cfg.spawn_count))
            cfg.jitter_px     = float(s.value("jitter_px", cfg.jitter_px))
            cfg.size_min      = float(s.value("size_min", cfg.size_min))
            cfg.size_max      = float(s.value("size_max", cfg.size_max))
            cfg.shrink        = s.value("shrink", cfg.shrink, type=bool)
            cfg.decay         = float(s.value("decay", cfg.decay))
            cfg.max_particles = int(s.value("max_particles", cfg.max_particles))
            cfg.fade_alpha    = float(s.value("fade_alpha", cfg.fade_alpha))
            cfg.frame_ms      = int(s.value("frame_ms", cfg.frame_ms))
            cfg.poll_ms       = int(s.value("poll_ms", cfg.poll_ms))
        except (TypeError, ValueError) as e:
            logger.warning("Ignoring malformed stored settings: %s", e)
            cfg = Config.for_variant(variant)
        try:
            cfg.color_scheme = ColorScheme(s.value("color_scheme", cfg.color_scheme.value))
        except ValueError:
            pass  # keep the variant's scheme
        try:
            cfg.fade_mode = FadeMode(s.value("fade_mode", cfg.fade_mode.value))
        except ValueError:
            cfg.fade_mode = FadeMode.ERASE
        return cfg.clamped()


# Named variants of the trail look
VARIANTS: Dict[str, Config] = {
    # Bulky multicoloured comet
    "comet": Config(),
    "rainbow": Config(spawn_count=3, jitter_px=4.0, size_min=6.0, size_max=6.0,
                      decay=0.03, color_scheme=ColorScheme.HUE_CYCLE, variant="rainbow"),
    # One small dot per move, fixed radius
    "dot": Config(spawn_count=1, jitter_px=0.0, size_min=2.0, size_max=2.0, shrink=False,
                  decay=0.05, color_scheme=ColorScheme.HUE_CYCLE, variant="dot"),
}
