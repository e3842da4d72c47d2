"""Copyright (C) 2025 Pierre Marrec
SPDX-License-Identifier: GPL-3.0-or-later

Type coercion utilities for decoding loosely typed route and track records.
"""

from __future__ import annotations

import math
from typing import Any, Optional


def safe_float(value: Any, default: float = 0.0) -> float:
    """Safely convert a value to float, handling NaN and None.

    Args:
        value: Value to convert
        default: Default value to return if conversion fails (default: 0.0)

    Returns:
        float: Converted value or default if conversion fails
    """
    result = safe_float_optional(value)
    return default if result is None else result


def safe_float_optional(value: Any) -> Optional[float]:
    """Safely convert a value to float, returning None on failure.

    Handles None, empty strings, "NaN", infinities and math.nan by returning None.
    """
    try:
        if value in (None, "", "NaN"):
            return None
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def clean_optional(value: Any) -> str:
    """Convert None, empty strings and NaN to an empty string, anything else to str."""
    if value in (None, ""):
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    return str(value).strip()
