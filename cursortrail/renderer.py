# =====================================================================
# Cursor trail renderer
# =====================================================================
# Spawns particles on pointer movement and runs the frame loop that
# fades the surface, paints every particle as an additive radial glow,
# ages them and drops the expired ones.
#
# The renderer is either STOPPED (no subscriptions, no scheduled work) or
# RUNNING. Everything acquired by mount() sits on one ExitStack, so
# unmount() releases all of it in one go.
# =====================================================================

import logging
import random
import time
from contextlib import ExitStack
from enum import Enum
from typing import Callable, List, Optional

from PyQt5 import QtCore

from cursortrail.colors import BLACK, color_source
from cursortrail.config import Config, FadeMode
from cursortrail.particles import Particle, ParticleField, ParticleSpawner
from cursortrail.surface import Canvas, CompositeMode, ImageSurface

logger = logging.getLogger(__name__)


class RendererState(Enum):
    STOPPED = "stopped"
    RUNNING = "running"


# ===================================================================
# SUBSCRIPTIONS AND FRAME TASK
# ===================================================================

class Subscription:
    """A single signal -> slot connection that can be released once.

    Usable as a context manager so it can be pushed on an ExitStack.
    """

    def __init__(self, signal, slot):
        self._signal = signal
        self._slot = slot
        self._signal.connect(slot)
        self.connected = True

    def release(self):
        if not self.connected:
            return
        self.connected = False
        self._signal.disconnect(self._slot)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.release()
        return False


def subscribe(signal, slot) -> Subscription:
    return Subscription(signal, slot)


class FrameTask:
    """Repeating per-frame callback driven by a precise QTimer."""

    def __init__(self, callback: Callable[[], None], interval_ms: int):
        self._timer = QtCore.QTimer()
        self._timer.setTimerType(QtCore.Qt.PreciseTimer)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(callback)

    @property
    def active(self) -> bool:
        return self._timer.isActive()

    @property
    def interval_ms(self) -> int:
        return self._timer.interval()

    def set_interval(self, interval_ms: int):
        self._timer.setInterval(interval_ms)

    def start(self):
        self._timer.start()

    def stop(self):
        self._timer.stop()


# ===================================================================
# RENDERER
# ===================================================================

class TrailRenderer:
    """Particle trail bound to one window.

    The window supplies ``width()``, ``height()`` and ``update()`` plus two
    signals: ``resized(int, int)`` and ``pointer_moved(float, float)`` in
    window-local pixels.

    Args:
        window: The widget the trail is drawn for
        cfg (Config): Visual tuning
        surface_factory: ``(width, height) -> surface or None``; None means the
            environment can't draw and the renderer stays stopped
        rng (random.Random): Source of jitter, sizes and palette picks
        clock: Seconds, used by the hue-cycle colour scheme
    """

    def __init__(self, window, cfg: Config,
                 surface_factory: Callable[[int, int], Optional[ImageSurface]] = ImageSurface.acquire,
                 rng: Optional[random.Random] = None,
                 clock: Callable[[], float] = time.monotonic):
        self._window = window
        self._surface_factory = surface_factory
        self._rng = rng or random.Random()
        self._clock = clock
        self._surface: Optional[ImageSurface] = None
        self._resources: Optional[ExitStack] = None
        self.state = RendererState.STOPPED

        self.cfg = cfg
        self._field = ParticleField(cfg.decay, cfg.max_particles)
        self._spawner = self._build_spawner(cfg)
        self._task = FrameTask(self.render_frame, cfg.frame_ms)

    def _build_spawner(self, cfg: Config) -> ParticleSpawner:
        colors = color_source(cfg.color_scheme, self._rng, self._clock)
        return ParticleSpawner(cfg.spawn_count, cfg.jitter_px, cfg.size_min, cfg.size_max,
                               colors, self._rng)

    # ----- introspection -----
    @property
    def running(self) -> bool:
        return self.state is RendererState.RUNNING

    @property
    def surface(self) -> Optional[ImageSurface]:
        return self._surface

    @property
    def frame_task(self) -> FrameTask:
        return self._task

    @property
    def particles(self) -> List[Particle]:
        return list(self._field)

    # ----- lifecycle -----
    def mount(self) -> bool:
        """Acquire the surface, subscribe to the window and start the frame loop.

        Returns False, leaving the renderer stopped, when no surface is
        available.
        """
        if self.running:
            return True
        width, height = self._window.width(), self._window.height()
        surface = self._surface_factory(width, height)
        if surface is None:
            logger.debug("No drawing surface for %dx%d; trail disabled", width, height)
            return False

        with ExitStack() as stack:
            stack.callback(self._drop_surface)
            self._surface = surface
            stack.enter_context(subscribe(self._window.resized, self.on_resize))
            stack.enter_context(subscribe(self._window.pointer_moved, self.on_pointer_move))
            stack.callback(self._field.clear)
            self._task.start()
            stack.callback(self._task.stop)
            # Only keep the resources once every step succeeded
            self._resources = stack.pop_all()

        self.state = RendererState.RUNNING
        logger.debug("Trail renderer mounted at %dx%d", width, height)
        return True

    def unmount(self):
        if self._resources is not None:
            resources, self._resources = self._resources, None
            resources.close()
        if self.running:
            logger.debug("Trail renderer unmounted")
        self.state = RendererState.STOPPED

    def _drop_surface(self):
        if self._surface is not None:
            self._surface.release()
        self._surface = None

    def apply_config(self, cfg: Config):
        """Switch tuning live. Particles already on screen keep their look."""
        self.cfg = cfg
        self._field.decay = cfg.decay
        self._field.max_particles = cfg.max_particles
        self._spawner = self._build_spawner(cfg)
        self._task.set_interval(cfg.frame_ms)

    def clear(self):
        self._field.clear()
        if self._surface is not None:
            self._surface.image.fill(QtCore.Qt.transparent)
        self._window.update()

    # ----- event handlers -----
    def on_resize(self, width: int, height: int):
        if self._surface is not None:
            self._surface.resize(width, height)

    def on_pointer_move(self, x: float, y: float):
        if not self.running:
            return
        self._field.add(self._spawner.spawn(x, y))

    # ----- frame loop -----
    def render_frame(self):
        if not self.running or self._surface is None:
            return
        with self._surface.frame() as canvas:
            self._fade(canvas)
            canvas.set_composite(CompositeMode.ADDITIVE)
            self._field.step(lambda p: self._draw_particle(canvas, p))
        self._window.update()

    def _fade(self, canvas: Canvas):
        if self.cfg.fade_mode is FadeMode.DARKEN:
            canvas.set_composite(CompositeMode.NORMAL)
        else:
            canvas.set_composite(CompositeMode.ERASE)
        canvas.fill(BLACK.with_alpha(self.cfg.fade_alpha))

    def _draw_particle(self, canvas: Canvas, particle: Particle):
        radius = particle.radius(self.cfg.shrink)
        if radius <= 0:
            return
        color, life = particle.color, particle.life
        canvas.radial_glow(particle.x, particle.y, radius, (
            (0.0, color.with_alpha(life)),
            (0.5, color.with_alpha(life * 0.5)),
            (1.0, color.with_alpha(0.0)),
        ))
