from __future__ import annotations

from dataclasses import dataclass, fields
import json
from pathlib import Path

CONFIG_DIR = Path.home() / ".locatorsynth"
CONFIG_PATH = CONFIG_DIR / "config.json"


@dataclass(frozen=True, slots=True)
class EngineSettings:
    max_selector_depth: int = 5
    dynamic_window_ms: int = 2000
    wait_timeout_ms: int = 5000
    grammar_a_limit: int = 3
    grammar_b_limit: int = 2
    ancestor_depth: int = 4
    text_limit: int = 50
    tracker_max_entries: int = 5000
    tracker_ttl_seconds: float = 300.0
    log_level: str = "INFO"


def load_engine_settings(config_path: Path | None = None) -> EngineSettings:
    path = config_path or CONFIG_PATH
    if not path.exists() or not path.is_file():
        return EngineSettings()

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, TypeError):
        return EngineSettings()

    if not isinstance(payload, dict):
        return EngineSettings()

    defaults = EngineSettings()
    values: dict[str, object] = {}
    for item in fields(EngineSettings):
        raw = payload.get(item.name)
        default = getattr(defaults, item.name)
        values[item.name] = _coerce(raw, default)
    return EngineSettings(**values)  # type: ignore[arg-type]


def _coerce(raw: object, default: object) -> object:
    if raw is None:
        return default
    try:
        if isinstance(default, bool):
            return bool(raw)
        if isinstance(default, int):
            value = int(raw)  # type: ignore[arg-type]
            return value if value > 0 else default
        if isinstance(default, float):
            value = float(raw)  # type: ignore[arg-type]
            return value if value > 0 else default
    except (TypeError, ValueError):
        return default
    text = str(raw).strip()
    return text or default
