# =====================================================================
# CursorTrail - Glowing Cursor Trail Overlay
# =====================================================================
# Glowing cursor trail over the whole desktop:
# - Comet of additive radial glows following the mouse
# - Variants: comet (palette), rainbow and dot (time-cycled hue)
# - Click-through, always-on-top overlay across all monitors
# - System tray: Variant, Clear trail, Quit
#
# BUILD:
# pyinstaller --noconsole --onefile --name "CursorTrail" -p . cursortrail/__main__.py
#
# Requirements: Python 3.9+, PyQt5, pyautogui
# =====================================================================

import argparse
import logging
import signal
import sys
from typing import List, Optional

from PyQt5 import QtCore, QtWidgets

from cursortrail.config import (
    APP_NAME,
    ORG_DOMAIN,
    ORG_NAME,
    VARIANTS,
    Config,
    FadeMode,
)
from cursortrail.overlay import Overlay
from cursortrail.tray import Tray

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cursortrail",
        description="Draw a glowing, fading trail behind the mouse cursor.",
    )
    parser.add_argument("--variant", choices=sorted(VARIANTS), help="Trail look to use")
    parser.add_argument(
        "--max-particles", type=int,
        help="Cap on live particles, oldest dropped first (0 = no cap)",
    )
    parser.add_argument(
        "--fade", choices=[m.value for m in FadeMode],
        help="erase: fade to transparent (default); darken: fade through translucent black",
    )
    parser.add_argument("--reset", action="store_true", help="Forget stored settings")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def resolve_config(args: argparse.Namespace, settings: QtCore.QSettings) -> Config:
    """Stored settings, overridden by the command line. Overrides are saved."""
    if args.reset:
        settings.clear()
        logger.info("Stored settings cleared")
    cfg = Config.load(settings)
    if args.variant:
        cfg = cfg.with_variant(args.variant)
    if args.max_particles is not None:
        cfg.max_particles = args.max_particles
    if args.fade:
        cfg.fade_mode = FadeMode(args.fade)
    cfg = cfg.clamped()
    cfg.save(settings)
    return cfg


def main(argv: Optional[List[str]] = None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    QtWidgets.QApplication.setAttribute(QtCore.Qt.AA_UseHighDpiPixmaps, True)
    app = QtWidgets.QApplication(sys.argv[:1])
    app.setQuitOnLastWindowClosed(False)
    app.setOrganizationName(ORG_NAME); app.setOrganizationDomain(ORG_DOMAIN); app.setApplicationName(APP_NAME)

    settings = QtCore.QSettings(QtCore.QSettings.UserScope, ORG_NAME, APP_NAME)
    cfg = resolve_config(args, settings)
    logger.info("Starting %s with variant %r", APP_NAME, cfg.variant)

    overlay = Overlay(cfg); overlay.show()
    if not overlay.renderer.running:
        logger.info("No drawing surface available; running without a trail")

    tray = None
    if QtWidgets.QSystemTrayIcon.isSystemTrayAvailable():
        tray = Tray(overlay, settings)
        tray.show()
    else:
        logger.info("No system tray; quit with Ctrl+C")

    app.aboutToQuit.connect(overlay.close)
    signal.signal(signal.SIGINT, signal.SIG_DFL)  # let Ctrl+C end the Qt loop
    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
