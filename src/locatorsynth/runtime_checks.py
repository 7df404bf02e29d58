from __future__ import annotations

import sys

_MISSING_BROWSER_ERROR_HINTS = (
    "executable doesn't exist",
    "executable does not exist",
    "download new browsers",
    "playwright install",
    "could not find browser",
    "failed to launch chromium because executable",
)

MINIMUM_PYTHON = (3, 11)


def is_missing_browser_error(exc: Exception) -> bool:
    message = str(exc).lower()
    return any(hint in message for hint in _MISSING_BROWSER_ERROR_HINTS)


def check_python_version(version_info: tuple[int, ...] | None = None) -> str | None:
    current = tuple(version_info or sys.version_info[:3])
    if current[:2] >= MINIMUM_PYTHON:
        return None
    required = ".".join(str(part) for part in MINIMUM_PYTHON)
    found = ".".join(str(part) for part in current)
    return f"locatorsynth requires Python {required}+. Current interpreter: {sys.executable} (Python {found})"


def is_url(target: str) -> bool:
    lowered = target.strip().lower()
    return lowered.startswith("http://") or lowered.startswith("https://") or lowered.startswith("file://")
