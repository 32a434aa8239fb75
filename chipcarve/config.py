"""Tunable interaction and drawing settings for the editor."""
from __future__ import annotations

import json
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

from loguru import logger

CONFIG_ENV_VAR = "CHIPCARVE_CONFIG"


@dataclass
class EditorConfig:
    """Pixel sizes are screen pixels; they are divided by the zoom scale before use."""

    handle_radius_px: float = 18.0
    active_handle_radius_px: float = 24.0
    rotation_handle_offset_px: float = 30.0
    rotation_handle_hit_px: float = 8.0
    paste_offset_mm: float = 5.0
    jiggle_position_mm: float = 1.0
    jiggle_rotation_deg: float = 5.0
    jiggle_radius_pct: float = 5.0
    stroke_selected: str = "#0078d7"
    stroke_default: str = "#006080"
    stroke_width_px: float = 0.8
    min_stroke_width: float = 0.25

    @property
    def handle_hit_px(self) -> float:
        return max(self.handle_radius_px, self.active_handle_radius_px)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def _coerce(value: Any, default: Any) -> Any:
    if isinstance(default, str):
        if not isinstance(value, str) or not value.strip():
            raise ValueError("expected a non-empty string")
        return value
    if isinstance(value, bool):
        raise ValueError("expected a number")
    return float(value)


def config_from_dict(data: Dict[str, Any]) -> EditorConfig:
    """Build a config from ``data``, skipping unknown keys and bad values."""
    config = EditorConfig()
    known = {f.name for f in fields(config)}
    for key, value in data.items():
        if key not in known:
            logger.debug("Ignoring unknown config key {}", key)
            continue
        try:
            setattr(config, key, _coerce(value, getattr(config, key)))
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid value for config key {}: {!r}", key, value)
    return config


def load_config(path: Optional[Path | str] = None) -> EditorConfig:
    """Load settings from ``path`` or ``$CHIPCARVE_CONFIG``; defaults when absent or unreadable."""
    raw = path if path is not None else os.getenv(CONFIG_ENV_VAR)
    if not raw:
        return EditorConfig()
    config_path = Path(raw)
    if not config_path.exists():
        return EditorConfig()
    try:
        with config_path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Could not read config {}: {}", config_path, exc)
        return EditorConfig()
    if not isinstance(data, dict):
        return EditorConfig()
    return config_from_dict(data)


DEFAULT_CONFIG = EditorConfig()


__all__ = ["CONFIG_ENV_VAR", "EditorConfig", "config_from_dict", "load_config", "DEFAULT_CONFIG"]
