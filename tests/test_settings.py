import json
from pathlib import Path

from locatorsynth.settings import EngineSettings, load_engine_settings


def test_engine_settings_load_from_json(tmp_path: Path) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text(
        json.dumps(
            {
                "max_selector_depth": 7,
                "dynamic_window_ms": 1500,
                "wait_timeout_ms": 10000,
                "grammar_a_limit": 2,
                "tracker_ttl_seconds": 60,
                "log_level": "DEBUG",
            }
        ),
        encoding="utf-8",
    )
    assert load_engine_settings(config_path) == EngineSettings(
        max_selector_depth=7,
        dynamic_window_ms=1500,
        wait_timeout_ms=10000,
        grammar_a_limit=2,
        tracker_ttl_seconds=60.0,
        log_level="DEBUG",
    )


def test_engine_settings_load_fallbacks(tmp_path: Path) -> None:
    config_path = tmp_path / "config.json"
    assert load_engine_settings(config_path) == EngineSettings()
    config_path.write_text("{invalid", encoding="utf-8")
    assert load_engine_settings(config_path) == EngineSettings()
    config_path.write_text("[1, 2, 3]", encoding="utf-8")
    assert load_engine_settings(config_path) == EngineSettings()


def test_invalid_values_fall_back_per_field(tmp_path: Path) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text(
        json.dumps(
            {
                "max_selector_depth": 0,
                "dynamic_window_ms": "soon",
                "wait_timeout_ms": "3000",
                "log_level": "  ",
                "unknown_key": True,
            }
        ),
        encoding="utf-8",
    )
    loaded = load_engine_settings(config_path)
    assert loaded.max_selector_depth == 5
    assert loaded.dynamic_window_ms == 2000
    assert loaded.wait_timeout_ms == 3000
    assert loaded.log_level == "INFO"
