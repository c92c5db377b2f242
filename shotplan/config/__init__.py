"""Configuration helpers for engine constants."""

from __future__ import annotations

import os
from typing import Any


__all__ = [
    "DRAG_END_DEFER_MS",
    "DRAG_THROTTLE_MS",
    "NEGLIGIBLE_YARDS",
    "REFERENCE_TEMP_F",
    "SCORING_CONFIG_ENV",
    "coerce_boolish",
    "env_bool",
]


def env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _float_env(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


SCORING_CONFIG_ENV = "SHOTPLAN_SCORING_CONFIG"

REFERENCE_TEMP_F: float = _float_env("SHOTPLAN_REFERENCE_TEMP_F", 70.0)
NEGLIGIBLE_YARDS: float = _float_env("SHOTPLAN_NEGLIGIBLE_YARDS", 1.0)

DRAG_THROTTLE_MS: int = _int_env("SHOTPLAN_DRAG_THROTTLE_MS", 100)
DRAG_END_DEFER_MS: int = _int_env("SHOTPLAN_DRAG_END_DEFER_MS", 0)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def coerce_boolish(value: Any) -> bool | None:
    """Attempt to coerce *value* into a boolean."""

    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
    return None
