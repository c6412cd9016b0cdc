"""Glowing cursor trail overlay for the desktop."""

from cursortrail.config import APP_VERSION as __version__
