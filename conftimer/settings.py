"""Application settings with JSON persistence.

Settings are stored at:
    ~/Library/Application Support/ConfTimer/settings.json

Usage::

    settings = load_settings()
    settings.warning_seconds = 60
    save_settings(settings)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict, fields
from pathlib import Path

log = logging.getLogger(__name__)


APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "ConfTimer"
SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── clock ─────────────────────────────────────────────────────────
    tick_interval_ms: int = 1000
    warning_seconds: int = 30
    alert_color: str = "red"

    # ── notifications ─────────────────────────────────────────────────
    notifications_enabled: bool = True
    notification_timeout: str = "medium"   # short | medium | long | sticky

    # ── history ───────────────────────────────────────────────────────
    record_sessions: bool = True

    # ── logging ───────────────────────────────────────────────────────
    log_level: str = "INFO"
    console_logging: bool = False

    # ── window ────────────────────────────────────────────────────────
    window_width: int = 360
    window_height: int = 220


def load_settings() -> Settings:
    """Load settings from disk, falling back to defaults."""
    if not SETTINGS_PATH.exists():
        return Settings()
    try:
        data = json.loads(SETTINGS_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        log.warning("Could not read %s (%s), using defaults", SETTINGS_PATH, exc)
        return Settings()
    if not isinstance(data, dict):
        log.warning("Ignoring malformed settings file %s", SETTINGS_PATH)
        return Settings()
    # Only use keys that exist in the dataclass
    valid_keys = {f.name for f in fields(Settings)}
    filtered = {k: v for k, v in data.items() if k in valid_keys}
    return Settings(**filtered)


def save_settings(settings: Settings) -> None:
    """Write settings to disk as JSON."""
    APP_SUPPORT_DIR.mkdir(parents=True, exist_ok=True)
    SETTINGS_PATH.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )
