# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# Shared fixtures for the trail tests.
#
# Key features:
# - Forces Qt's offscreen platform BEFORE PyQt5 is imported
# - RecordingSurface: stands in for the image surface and logs draw calls
# - FakeWindow: a QObject with the signals and size a renderer expects
# =============================================================================

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import random
from contextlib import contextmanager

import pytest
from PyQt5 import QtCore

from cursortrail.config import Config
from cursortrail.renderer import TrailRenderer


# =============================================================================
# Fakes
# =============================================================================

class RecordingCanvas:
    def __init__(self, calls):
        self.calls = calls

    def set_composite(self, mode):
        self.calls.append(("composite", mode))

    def fill(self, color):
        self.calls.append(("fill", color))

    def radial_glow(self, x, y, radius, stops):
        self.calls.append(("glow", x, y, radius, tuple(stops)))


class RecordingSurface:
    def __init__(self, width, height):
        self.size = (width, height)
        self.calls = []
        self.released = False

    def resize(self, width, height):
        self.size = (width, height)

    @contextmanager
    def frame(self):
        yield RecordingCanvas(self.calls)

    def release(self):
        self.released = True

    def glows(self):
        return [c for c in self.calls if c[0] == "glow"]


class FakeWindow(QtCore.QObject):
    resized = QtCore.pyqtSignal(int, int)
    pointer_moved = QtCore.pyqtSignal(float, float)

    def __init__(self, width=800, height=600):
        super().__init__()
        self._width = width
        self._height = height
        self.updates = 0

    def width(self):
        return self._width

    def height(self):
        return self._height

    def update(self):
        self.updates += 1


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def single_cfg():
    """One particle per move, no jitter, fixed size, decay 0.05, no cap."""
    return Config(spawn_count=1, jitter_px=0.0, size_min=4.0, size_max=4.0,
                  decay=0.05, max_particles=0)


@pytest.fixture
def window():
    return FakeWindow()


@pytest.fixture
def surfaces():
    """Every RecordingSurface handed out by the factory fixture."""
    return []


@pytest.fixture
def surface_factory(surfaces):
    def factory(width, height):
        surface = RecordingSurface(width, height)
        surfaces.append(surface)
        return surface
    return factory


@pytest.fixture
def make_renderer(qapp, window, surface_factory):
    """Build (and afterwards unmount) a renderer around the fake window."""
    created = []

    def make(cfg, mount=True):
        renderer = TrailRenderer(window, cfg, surface_factory=surface_factory,
                                 rng=random.Random(1234), clock=lambda: 0.0)
        if mount:
            assert renderer.mount()
        created.append(renderer)
        return renderer

    yield make
    for renderer in created:
        renderer.unmount()
