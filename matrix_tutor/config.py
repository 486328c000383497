"""
MatrixTutor — Local JSON settings store.

Data is persisted in ``<project>/data/matrix_tutor.json``.  Missing keys
and values of the wrong type fall back to ``DEFAULT_SETTINGS``.
"""

import json
import logging
import os

from matrix_tutor.determinant import DEFAULT_MAX_ORDER

LOG = logging.getLogger(__name__)

_DATA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "data")
_DATA_FILE = os.path.join(_DATA_DIR, "matrix_tutor.json")

# ── Default settings ────────────────────────────────────────────────────
DEFAULT_SETTINGS = {
    "max_order": DEFAULT_MAX_ORDER,  # largest determinant order accepted
    "variable_names": ["x", "y", "z", "w", "v", "u"],
    "decimal_places": 3,           # rounding of the "≈" hint next to fractions
    "prefer_sarrus": True,         # 3x3 walkthroughs use Sarrus, not cofactors
}


def _is_count(value, minimum: int) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= minimum


def _check_value(key: str, value) -> None:
    """Raise ValueError if *value* is not acceptable for setting *key*."""
    if key == "max_order" and not _is_count(value, 1):
        raise ValueError("max_order must be a positive integer.")
    if key == "decimal_places" and not _is_count(value, 0):
        raise ValueError("decimal_places must be a non-negative integer.")
    if key == "prefer_sarrus" and not isinstance(value, bool):
        raise ValueError("prefer_sarrus must be true or false.")
    if key == "variable_names" and not (
        isinstance(value, list) and value and all(isinstance(v, str) and v for v in value)
    ):
        raise ValueError("variable_names must be a non-empty list of names.")


def _ensure_dir() -> None:
    os.makedirs(_DATA_DIR, exist_ok=True)


def _load_file() -> dict:
    if os.path.exists(_DATA_FILE):
        try:
            with open(_DATA_FILE, "r", encoding="utf-8") as f:
                data = json.load(f)
            if isinstance(data, dict):
                return data
            LOG.warning("Ignoring settings file %s: not a JSON object", _DATA_FILE)
        except (json.JSONDecodeError, OSError) as exc:
            LOG.warning("Ignoring unreadable settings file %s: %s", _DATA_FILE, exc)
    return {}


def get_settings() -> dict:
    """Return the effective settings (defaults overlaid with the saved file)."""
    settings = dict(DEFAULT_SETTINGS)
    settings["variable_names"] = list(DEFAULT_SETTINGS["variable_names"])
    for key, value in _load_file().items():
        if key not in DEFAULT_SETTINGS:
            continue
        try:
            _check_value(key, value)
        except ValueError as exc:
            LOG.warning("Ignoring saved %s=%r: %s", key, value, exc)
            continue
        settings[key] = value
    return settings


def save_settings(settings: dict) -> dict:
    """Merge *settings* into the saved file.  Unknown keys are rejected."""
    unknown = set(settings) - set(DEFAULT_SETTINGS)
    if unknown:
        raise ValueError(f"Unknown setting(s): {', '.join(sorted(unknown))}")
    for key, value in settings.items():
        _check_value(key, value)
    merged = _load_file()
    merged.update(settings)
    _ensure_dir()
    with open(_DATA_FILE, "w", encoding="utf-8") as f:
        json.dump(merged, f, indent=2, ensure_ascii=False)
    LOG.debug("Saved settings to %s", _DATA_FILE)
    return get_settings()


def reset_settings() -> dict:
    """Delete the saved file so every key returns to its default."""
    if os.path.exists(_DATA_FILE):
        os.remove(_DATA_FILE)
        LOG.debug("Removed settings file %s", _DATA_FILE)
    return get_settings()
