"""Copyright (C) 2025 Pierre Marrec
SPDX-License-Identifier: GPL-3.0-or-later

Synthetic runner simulation.

Each archetype is stepped one simulated second at a time along the route.
Speed combines the archetype's base pace, a per-kilometre random factor,
late-race fatigue and a short slow-down around water stations.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence

import numpy as np
from streamlit.logger import get_logger

from config import (
    FATIGUE_MAX_DROP,
    FATIGUE_START_M,
    KM_M,
    MARATHON_DISTANCE_M,
    RANDOM_FACTOR_MAX,
    RANDOM_FACTOR_MIN,
    RANDOM_SEED_BASE,
    RANDOM_SEED_STRIDE,
    WATER_PENALTY_FACTOR,
    WATER_PENALTY_WINDOW_SEC,
    WATER_STATION_RADIUS_M,
)
from services.simulation.models import (
    RUNNER_PROFILES,
    Route,
    RunnerProfile,
    RunnerSample,
    RunnerSeries,
)
from services.simulation.route_profile import RouteProfile, build_route_profile
from utils.config import DEFAULT_MAX_SIMULATION_SEC
from utils.geo import project_onto_polyline

logger = get_logger(__name__)


def runner_seed(archetype_index: int) -> int:
    return RANDOM_SEED_BASE + archetype_index * RANDOM_SEED_STRIDE


def build_random_factors(seed: int, max_km: int) -> np.ndarray:
    """Per-kilometre speed multipliers for kilometres 0..max_km.

    A fresh generator is created from the seed on every call, so the same
    seed always yields the same factors.
    """
    rng = np.random.default_rng(seed)
    return rng.uniform(RANDOM_FACTOR_MIN, RANDOM_FACTOR_MAX, size=max_km + 1)


def fatigue_factor(dist_m: float) -> float:
    """1.0 up to 30 km, then a linear drop reaching 0.92 at the marathon distance."""
    if dist_m <= FATIGUE_START_M:
        return 1.0
    clamped = min(dist_m, MARATHON_DISTANCE_M)
    ratio = (clamped - FATIGUE_START_M) / (MARATHON_DISTANCE_M - FATIGUE_START_M)
    return 1.0 - ratio * FATIGUE_MAX_DROP


def water_station_distances(route: Route) -> list[float]:
    """Along-route distance of each water station."""
    return [
        project_onto_polyline(station.point, route.polyline).dist_along_m
        for station in route.water_stations
    ]


def simulate_runner(
    profile: RunnerProfile,
    archetype_index: int,
    route_profile: RouteProfile,
    water_distances: Sequence[float],
    max_duration_sec: int = DEFAULT_MAX_SIMULATION_SEC,
) -> RunnerSeries:
    """Step one archetype along the route, one sample per simulated second.

    The loop stops once the finish is reached (or ``max_duration_sec`` is
    hit); a final sample pinned at the finish with zero speed closes the
    series.
    """
    total_m = route_profile.total_distance
    base_speed = profile.base_speed_mps
    random_factors = build_random_factors(
        runner_seed(archetype_index), int(math.ceil(total_m / KM_M))
    )

    dist_m = 0.0
    t_sec = 0
    penalty_remaining = 0
    samples: list[RunnerSample] = []

    while dist_m < total_m:
        if t_sec >= max_duration_sec:
            logger.warning(
                "Simulation of %s stopped at %ss (%.0f/%.0f m)",
                profile.type,
                t_sec,
                dist_m,
                total_m,
            )
            break

        km_index = int(dist_m // KM_M)
        random_factor = float(random_factors[km_index]) if km_index < len(random_factors) else 1.0

        # Not retriggered while a window is active, whichever station is near
        if penalty_remaining <= 0 and any(
            abs(water_m - dist_m) <= WATER_STATION_RADIUS_M for water_m in water_distances
        ):
            penalty_remaining = WATER_PENALTY_WINDOW_SEC
        water_penalty = WATER_PENALTY_FACTOR if penalty_remaining > 0 else 1.0

        speed_mps = base_speed * fatigue_factor(dist_m) * random_factor * water_penalty
        position = route_profile.locate(dist_m)
        samples.append(
            RunnerSample(
                t_sec=t_sec,
                dist_m=dist_m,
                speed_mps=speed_mps,
                lat=position.lat,
                lng=position.lng,
            )
        )

        dist_m += speed_mps
        t_sec += 1
        penalty_remaining = max(0, penalty_remaining - 1)

    finish = route_profile.locate(total_m)
    samples.append(
        RunnerSample(t_sec=t_sec, dist_m=total_m, speed_mps=0.0, lat=finish.lat, lng=finish.lng)
    )
    return RunnerSeries(type=profile.type, samples=tuple(samples), duration_sec=t_sec)


def simulate_runners(
    route: Route,
    profiles: Sequence[RunnerProfile] = RUNNER_PROFILES,
    max_duration_sec: Optional[int] = None,
) -> list[RunnerSeries]:
    """Simulate every runner archetype over the route, in profile order."""
    route_profile = build_route_profile(route.polyline)
    if len(route_profile.points) < 2 or route_profile.total_distance <= 0:
        logger.debug("Route %s is too short to simulate", route.id)
        return []

    water_distances = water_station_distances(route)
    cap = max_duration_sec if max_duration_sec is not None else DEFAULT_MAX_SIMULATION_SEC
    return [
        simulate_runner(profile, index, route_profile, water_distances, cap)
        for index, profile in enumerate(profiles)
    ]
