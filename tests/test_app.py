# =============================================================================
# tests/test_app.py - Command Line Tests
# =============================================================================

import pytest
from PyQt5 import QtCore

from cursortrail.app import build_parser, resolve_config
from cursortrail.config import Config, FadeMode


@pytest.fixture
def settings(tmp_path):
    return QtCore.QSettings(str(tmp_path / "cursortrail.ini"), QtCore.QSettings.IniFormat)


def _resolve(argv, settings):
    return resolve_config(build_parser().parse_args(argv), settings)


class TestParser:

    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.variant is None
        assert args.max_particles is None
        assert args.fade is None
        assert not args.reset and not args.verbose

    def test_rejects_unknown_variant(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--variant", "sparkler"])


class TestResolveConfig:

    def test_no_flags_gives_stored_settings(self, settings):
        Config.for_variant("rainbow").save(settings)
        assert _resolve([], settings).variant == "rainbow"

    def test_flags_override_and_persist(self, settings):
        cfg = _resolve(["--variant", "dot", "--max-particles", "50", "--fade", "darken"], settings)

        assert cfg.variant == "dot"
        assert cfg.max_particles == 50
        assert cfg.fade_mode is FadeMode.DARKEN
        assert Config.load(settings) == cfg

    def test_negative_cap_is_clamped(self, settings):
        assert _resolve(["--max-particles", "-5"], settings).max_particles == 0

    def test_reset_forgets_settings(self, settings):
        Config.for_variant("dot").save(settings)
        assert _resolve(["--reset"], settings) == Config()
