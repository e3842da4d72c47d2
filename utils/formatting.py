"""
Locale display helpers for distances, speeds, paces and durations.

These helpers are for presentation only; computations keep raw floats.
"""

from __future__ import annotations

import math
from typing import Optional

from babel import numbers
from babel.core import UnknownLocaleError

from config import MIN_DISPLAY_SPEED_MPS

LOCALE = "fr_FR"


def set_locale(locale_str: str = "fr_FR") -> None:
    global LOCALE
    try:
        # Validate by formatting a simple number
        numbers.format_decimal(1.0, locale=locale_str)
        LOCALE = locale_str
    except (UnknownLocaleError, ValueError, TypeError):
        LOCALE = "fr_FR"


def _nbsp() -> str:
    return "\u00A0"


def fmt_decimal(value: Optional[float], digits: Optional[int] = None) -> str:
    if value is None:
        return ""
    fmt = None
    if digits is not None:
        fmt = "0" if digits == 0 else "0." + ("0" * digits)
    return numbers.format_decimal(value, format=fmt, locale=LOCALE)


def fmt_distance_km(meters: Optional[float]) -> str:
    """Distance given in meters, shown in km with one decimal."""
    if meters is None:
        return ""
    return f"{fmt_decimal(meters / 1000, 1)}{_nbsp()}km"


def fmt_speed_mps(speed_mps: Optional[float]) -> str:
    if speed_mps is None:
        return ""
    return f"{fmt_decimal(speed_mps, 2)}{_nbsp()}m/s"


def fmt_duration(seconds: float) -> str:
    """HH:MM:SS, floored to the second and never negative."""
    clamped = max(0, int(math.floor(seconds)))
    hours, rest = divmod(clamped, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def fmt_pace(sec_per_km: Optional[float]) -> str:
    """M:SS/km, or '-' when the pace is unavailable."""
    if sec_per_km is None or not math.isfinite(sec_per_km) or sec_per_km <= 0:
        return "-"
    minutes = int(sec_per_km // 60)
    secs = int(round(sec_per_km % 60))
    if secs == 60:
        minutes += 1
        secs = 0
    return f"{minutes}:{secs:02d}/km"


def display_pace(speed_mps: float) -> float:
    """Pace in s/km for a live runner display, bounded for near-stationary runners."""
    return 1000.0 / max(speed_mps, MIN_DISPLAY_SPEED_MPS)
