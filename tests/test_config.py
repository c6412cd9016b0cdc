# =============================================================================
# tests/test_config.py - Config, Variant and Persistence Tests
# =============================================================================

import pytest
from PyQt5 import QtCore

from cursortrail.colors import ColorScheme
from cursortrail.config import MAX_PARTICLES, VARIANTS, Config, FadeMode


@pytest.fixture
def settings(tmp_path):
    return QtCore.QSettings(str(tmp_path / "cursortrail.ini"), QtCore.QSettings.IniFormat)


class TestVariants:

    def test_default_is_comet(self):
        cfg = Config()
        assert cfg.variant == "comet"
        assert (cfg.spawn_count, cfg.jitter_px, cfg.decay) == (8, 8.0, 0.02)
        assert (cfg.size_min, cfg.size_max) == (4.0, 12.0)
        assert cfg.color_scheme is ColorScheme.PALETTE
        assert cfg.max_particles == MAX_PARTICLES

    @pytest.mark.parametrize("name", sorted(VARIANTS))
    def test_variants_are_within_ranges(self, name):
        cfg = Config.for_variant(name)
        assert cfg.variant == name
        assert cfg.clamped() == cfg

    def test_dot_variant_has_fixed_radius(self):
        cfg = Config.for_variant("dot")
        assert cfg.spawn_count == 1
        assert cfg.shrink is False
        assert cfg.decay == 0.05

    def test_unknown_variant(self):
        with pytest.raises(KeyError):
            Config.for_variant("sparkler")

    def test_with_variant_keeps_app_settings(self):
        cfg = Config(max_particles=42, fade_mode=FadeMode.DARKEN)
        switched = cfg.with_variant("rainbow")

        assert switched.variant == "rainbow"
        assert switched.color_scheme is ColorScheme.HUE_CYCLE
        assert switched.max_particles == 42
        assert switched.fade_mode is FadeMode.DARKEN


class TestClamp:

    def test_out_of_range_values(self):
        cfg = Config(spawn_count=20, jitter_px=-3.0, size_min=1.0, size_max=40.0,
                     decay=0.5, max_particles=-10, fade_alpha=2.0, frame_ms=0).clamped()

        assert cfg.spawn_count == 8
        assert cfg.jitter_px == 0.0
        assert (cfg.size_min, cfg.size_max) == (2.0, 12.0)
        assert cfg.decay == 0.05
        assert cfg.max_particles == 0
        assert cfg.fade_alpha == 1.0
        assert cfg.frame_ms == 1

    def test_swapped_sizes_are_reordered(self):
        cfg = Config(size_min=10.0, size_max=3.0).clamped()
        assert (cfg.size_min, cfg.size_max) == (3.0, 10.0)


class TestPersistence:

    def test_round_trip(self, settings):
        cfg = Config.for_variant("rainbow")
        cfg.max_particles = 300
        cfg.fade_mode = FadeMode.DARKEN
        cfg.save(settings)

        loaded = Config.load(settings)

        assert loaded == cfg

    def test_empty_settings_give_defaults(self, settings):
        assert Config.load(settings) == Config()

    def test_unknown_stored_variant_falls_back(self, settings):
        settings.setValue("variant", "sparkler")
        assert Config.load(settings).variant == "comet"

    def test_malformed_numbers_fall_back_to_variant(self, settings):
        Config.for_variant("dot").save(settings)
        settings.setValue("spawn_count", "lots")

        assert Config.load(settings) == Config.for_variant("dot")

    def test_bad_enums_fall_back(self, settings):
        Config.for_variant("rainbow").save(settings)
        settings.setValue("color_scheme", "plaid")
        settings.setValue("fade_mode", "dissolve")

        cfg = Config.load(settings)

        assert cfg.color_scheme is ColorScheme.HUE_CYCLE
        assert cfg.fade_mode is FadeMode.ERASE

    def test_stored_values_are_clamped(self, settings):
        settings.setValue("spawn_count", 50)
        settings.setValue("decay", 0.001)
        cfg = Config.load(settings)
        assert cfg.spawn_count == 8
        assert cfg.decay == 0.02
