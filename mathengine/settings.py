"""
Engine settings — local JSON storage.

Data is persisted in ``<project>/data/mathengine.json``.  The engine entry
points never read these settings themselves; callers such as the HTTP layer
look them up and pass the values explicitly.
"""

import json
import logging
import os

logger = logging.getLogger(__name__)

_DATA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "data")
_DATA_FILE = os.path.join(_DATA_DIR, "mathengine.json")

# ── Default settings ─────────────────────────────────────────────────────
DEFAULT_SETTINGS = {
    "divide_as_fraction": False,   # render "/" as \frac / ordinal readings
    "language": "ENGLISH",         # Language member name for readings
    "tolerance": 1e-9,             # numeric answer tolerance
    "log_level": "WARNING",
}


def _ensure_dir() -> None:
    os.makedirs(_DATA_DIR, exist_ok=True)


def _load_db() -> dict:
    if os.path.exists(_DATA_FILE):
        try:
            with open(_DATA_FILE, "r", encoding="utf-8") as f:
                db = json.load(f)
            if isinstance(db, dict):
                return db
            logger.warning("Ignoring settings file %s: not a JSON object", _DATA_FILE)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Ignoring unreadable settings file %s: %s", _DATA_FILE, e)
    return {"settings": dict(DEFAULT_SETTINGS)}


def _save_db(db: dict) -> None:
    _ensure_dir()
    with open(_DATA_FILE, "w", encoding="utf-8") as f:
        json.dump(db, f, indent=2, ensure_ascii=False)


def get_settings() -> dict:
    """Return the stored settings merged over the defaults."""
    merged = dict(DEFAULT_SETTINGS)
    merged.update(_load_db().get("settings", {}))
    return merged


def get_setting(key: str):
    if key not in DEFAULT_SETTINGS:
        raise KeyError(f"Unknown setting: {key}")
    return get_settings()[key]


def save_settings(settings: dict) -> None:
    """Persist *settings*; unknown keys are rejected."""
    unknown = set(settings) - set(DEFAULT_SETTINGS)
    if unknown:
        raise KeyError(f"Unknown setting(s): {', '.join(sorted(unknown))}")
    db = _load_db()
    stored = dict(db.get("settings", {}))
    stored.update(settings)
    db["settings"] = stored
    _save_db(db)


def reset_settings() -> None:
    """Restore the defaults."""
    _save_db({"settings": dict(DEFAULT_SETTINGS)})
