# =====================================================================
# Trail particles
# =====================================================================
# A particle is a fixed point that fades and shrinks. The field owns the
# active collection: the pointer handler appends to it and the frame loop
# ages it, newest first, removing what has expired.
# =====================================================================

import logging
import random
from typing import Callable, Iterator, List, Optional

from cursortrail.colors import Color

logger = logging.getLogger(__name__)

# Decimal places kept after each decay step so that repeated subtraction
# of steps like 0.05 reaches exactly 0.0
LIFE_PRECISION = 9


class Particle:
    """One glowing point of the trail.

    Position, colour and size are fixed at spawn; only ``life`` changes.

    Attributes:
        x (float): Local X coordinate (pixels)
        y (float): Local Y coordinate (pixels)
        color (Color): Base colour, opaque
        size (float): Radius at full life (pixels)
        life (float): 1.0 when spawned, expired at <= 0
    """
    __slots__ = ("_x", "_y", "_color", "_size", "life")

    def __init__(self, x: float, y: float, color: Color, size: float, life: float = 1.0):
        self._x = x
        self._y = y
        self._color = color
        self._size = size
        self.life = life

    @property
    def x(self) -> float:
        return self._x

    @property
    def y(self) -> float:
        return self._y

    @property
    def color(self) -> Color:
        return self._color

    @property
    def size(self) -> float:
        return self._size

    def __repr__(self):
        return (f"Particle(x={self._x!r}, y={self._y!r}, color={self._color!r}, "
                f"size={self._size!r}, life={self.life!r})")

    def radius(self, shrink: bool = True) -> float:
        if not shrink:
            return self.size if self.life > 0 else 0.0
        return max(0.0, self.size * self.life)

    def decay(self, step: float):
        self.life = round(self.life - step, LIFE_PRECISION)

    @property
    def expired(self) -> bool:
        return self.life <= 0


class ParticleSpawner:
    """Turns one pointer position into ``count`` new particles."""

    def __init__(self, count: int, jitter: float, size_min: float, size_max: float,
                 colors: Callable[[], Color], rng: Optional[random.Random] = None):
        if count < 1:
            raise ValueError(f"spawn count must be at least 1, got {count}")
        if size_min > size_max:
            raise ValueError(f"size_min {size_min} is larger than size_max {size_max}")
        self.count = count
        self.jitter = max(0.0, jitter)
        self.size_min = size_min
        self.size_max = size_max
        self.colors = colors
        self.rng = rng or random.Random()

    def _offset(self) -> float:
        # Uniform in [-jitter/2, +jitter/2]
        return (self.rng.random() - 0.5) * self.jitter

    def _size(self) -> float:
        if self.size_min == self.size_max:
            return self.size_min
        return self.rng.uniform(self.size_min, self.size_max)

    def spawn(self, x: float, y: float) -> List[Particle]:
        return [
            Particle(x + self._offset(), y + self._offset(), self.colors(), self._size())
            for _ in range(self.count)
        ]


class ParticleField:
    """The renderer's active particle collection.

    Particles are kept in insertion order. ``max_particles`` bounds the
    collection: when an append or a lowered cap overflows it the oldest
    particles are dropped first. A cap of 0 leaves the collection unbounded.
    """

    def __init__(self, decay: float, max_particles: int = 0):
        if decay <= 0:
            raise ValueError(f"decay step must be positive, got {decay}")
        self.decay = decay
        self._particles: List[Particle] = []
        self.max_particles = max_particles

    @property
    def max_particles(self) -> int:
        return self._max_particles

    @max_particles.setter
    def max_particles(self, cap: int):
        """Change the cap. Lowering it evicts the overflow immediately."""
        if cap < 0:
            raise ValueError(f"max_particles must be >= 0, got {cap}")
        self._max_particles = cap
        self._evict_overflow()

    def __len__(self) -> int:
        return len(self._particles)

    def __iter__(self) -> Iterator[Particle]:
        # Snapshot so callers can't mutate the owned list
        return iter(list(self._particles))

    def add(self, particles: List[Particle]):
        self._particles.extend(particles)
        self._evict_overflow()

    def _evict_overflow(self):
        cap = self._max_particles
        if cap and len(self._particles) > cap:
            excess = len(self._particles) - cap
            del self._particles[:excess]
            logger.debug("Evicted %d oldest particles (cap %d)", excess, cap)

    def clear(self):
        self._particles.clear()

    def step(self, draw: Callable[[Particle], None]):
        """Run one frame over the collection.

        Walks the particles newest first: each one is drawn, aged by the
        decay step and removed by index once expired. Walking backwards keeps
        the indices of the particles still to visit valid after a removal.
        """
        particles = self._particles
        for i in range(len(particles) - 1, -1, -1):
            particle = particles[i]
            draw(particle)
            particle.decay(self.decay)
            if particle.expired:
                del particles[i]
