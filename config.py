"""Copyright (C) 2025 Pierre Marrec
SPDX-License-Identifier: GPL-3.0-or-later
"""

from __future__ import annotations

EARTH_RADIUS_M = 6371000.0

# Fallback coordinate when a route has no points at all
FALLBACK_LAT = 0.0
FALLBACK_LNG = 0.0

MARATHON_DISTANCE_M = 42195.0
FATIGUE_START_M = 30000.0
FATIGUE_MAX_DROP = 0.08

# Water stations slow runners down for a fixed window once they get close
WATER_STATION_RADIUS_M = 50.0
WATER_PENALTY_FACTOR = 0.85
WATER_PENALTY_WINDOW_SEC = 8

# Per-kilometre random multiplier, one seeded stream per runner archetype
RANDOM_SEED_BASE = 100
RANDOM_SEED_STRIDE = 1000
RANDOM_FACTOR_MIN = 0.98
RANDOM_FACTOR_MAX = 1.02

KM_M = 1000.0

# Displayed pace never divides by less than this speed (m/s)
MIN_DISPLAY_SPEED_MPS = 0.1
