import json
import logging
import math

import pytest

from fractalview.colormaps import (
    DEFAULT_PALETTE,
    PALETTES,
    Palette,
    get_default_palette,
    get_palette,
    list_palette_names,
)
from fractalview.config import DEFAULTS, load_settings, normalise_settings, snapshot_from_settings
from fractalview.logging_setup import configure_logging, get_logger
from fractalview.params import ViewportSnapshot


def _write(tmp_path, data):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def test_palette_registry():
    assert list_palette_names() == list(PALETTES)
    assert DEFAULT_PALETTE in list_palette_names()
    for name in list_palette_names():
        palette = get_palette(name)
        assert isinstance(palette, Palette)
        assert len(palette.phase) == 3 and len(palette.freq) == 3


def test_default_palette_matches_default_snapshot():
    s = ViewportSnapshot()
    assert get_default_palette() == Palette(s.color_phase, s.color_freq)


def test_unknown_palette_raises_key_error():
    with pytest.raises(KeyError):
        get_palette("Nope")


def test_palette_arrays_for_kernels():
    phase, freq = get_palette("Classic").as_arrays()
    assert phase.dtype.name == "float64" and phase.tolist() == [4.0, 2.0, 1.0]
    assert freq.tolist() == [0.15, 0.15, 0.10]


def test_packaged_settings_match_defaults():
    assert load_settings() == normalise_settings({})


def test_missing_file_falls_back_to_defaults(tmp_path, caplog):
    with caplog.at_level(logging.WARNING, logger="fractalview"):
        settings = load_settings(str(tmp_path / "missing.json"))
    assert settings["depth"] == DEFAULTS["depth"]
    assert "Could not load settings" in caplog.text


def test_malformed_file_falls_back_to_defaults(tmp_path, caplog):
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    with caplog.at_level(logging.WARNING, logger="fractalview"):
        settings = load_settings(str(path))
    assert settings == normalise_settings({})
    assert "Could not load settings" in caplog.text


def test_non_object_file_is_ignored(tmp_path, caplog):
    with caplog.at_level(logging.WARNING, logger="fractalview"):
        settings = load_settings(_write(tmp_path, [1, 2, 3]))
    assert settings == normalise_settings({})
    assert "JSON object" in caplog.text


def test_unreadable_path_falls_back_to_defaults(tmp_path, caplog):
    with caplog.at_level(logging.WARNING, logger="fractalview"):
        settings = load_settings(str(tmp_path))
    assert settings == normalise_settings({})
    assert "Could not load settings" in caplog.text


def test_extents_at_the_limits_are_accepted():
    settings = normalise_settings({"half_extents": [1e-13, 1e-13]})
    assert settings["half_extents"] == [1e-13, 1e-13]
    assert snapshot_from_settings(settings).half_width == 1e-13


def test_file_values_override_defaults(tmp_path):
    path = _write(tmp_path, {"depth": 1200, "center": [-0.5, 0.25], "palette": "Ice"})
    settings = load_settings(path)
    assert settings["depth"] == 1200
    assert settings["center"] == [-0.5, 0.25]
    assert settings["palette"] == "Ice"
    assert settings["half_extents"] == [1.5, 1.2]


def test_overrides_beat_file_and_none_is_skipped(tmp_path):
    path = _write(tmp_path, {"depth": 1200, "width": 300})
    settings = load_settings(path, depth=90, width=None)
    assert settings["depth"] == 90
    assert settings["width"] == 300


def test_unknown_keys_are_warned_about(tmp_path, caplog):
    with caplog.at_level(logging.WARNING, logger="fractalview"):
        settings = load_settings(_write(tmp_path, {"zoom_speed": 2}))
    assert "zoom_speed" not in settings
    assert "zoom_speed" in caplog.text


@pytest.mark.parametrize("raw", [
    {"depth": 0},
    {"width": -1},
    {"worker_multiplier": 0},
    {"center": [1.0]},
    {"center": "origin"},
    {"half_extents": [1.0, 0.0]},
    {"palette": "Nope"},
    {"depth": None},
    {"width": "wide"},
    {"center": [None, 0.0]},
    {"center": [math.inf, 0.0]},
    {"half_extents": [math.nan, 1.0]},
    {"half_extents": [1e-14, 1e-14]},
    {"half_extents": [1.0, 2e3]},
    {"half_extents": [1.04e-13, 950.0]},
])
def test_invalid_values_raise(raw):
    with pytest.raises(ValueError):
        normalise_settings(raw)


def test_snapshot_from_settings():
    settings = normalise_settings({
        "depth": 250, "center": [0.1, -0.2], "half_extents": [0.5, 0.4], "palette": "Ember",
    })
    s = snapshot_from_settings(settings)
    assert (s.center_x, s.center_y) == (0.1, -0.2)
    assert (s.half_width, s.half_height) == (0.5, 0.4)
    assert s.depth == 250
    assert s.color_phase == get_palette("Ember").phase
    assert s.color_freq == get_palette("Ember").freq


def test_get_logger_names():
    assert get_logger().name == "fractalview"
    assert get_logger("fractalview.renderer").name == "fractalview.renderer"
    assert get_logger("viewer").name == "fractalview.viewer"


def test_configure_logging_writes_file(tmp_path):
    log_file = tmp_path / "viewer.log"
    logger = configure_logging(level=logging.DEBUG, console=False, log_file=str(log_file))
    get_logger("fractalview.renderer").debug("frame done")
    for handler in logger.handlers:
        handler.flush()
    text = log_file.read_text(encoding="utf-8")
    assert "DEBUG fractalview.renderer - frame done" in text


def test_configure_logging_replaces_handlers():
    configure_logging(console=True)
    logger = configure_logging(console=True)
    assert len(logger.handlers) == 1
