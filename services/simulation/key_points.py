"""Copyright (C) 2025 Pierre Marrec
SPDX-License-Identifier: GPL-3.0-or-later
"""

from __future__ import annotations

import math
from typing import Sequence

from config import KM_M
from services.simulation.models import KeyPoint, Route
from services.simulation.route_profile import RouteProfile
from utils.formatting import fmt_distance_km
from utils.geo import GeoPoint, project_onto_polyline

# Kilometre markers sort before water markers at the same distance
_TYPE_ORDER = {"km": 0, "water": 1}


def build_key_points(route: Route) -> list[KeyPoint]:
    """One marker per completed kilometre plus one per water station, by distance."""
    total_m = route.distance_meters
    km_points = [
        KeyPoint(id=f"km-{km}", type="km", label=f"{km}km", dist_m=km * KM_M)
        for km in range(1, int(math.floor(total_m / KM_M)) + 1)
    ]

    water_points = []
    for index, station in enumerate(route.water_stations):
        projection = project_onto_polyline(station.point, route.polyline)
        water_points.append(
            KeyPoint(
                id=f"water-{station.id}",
                type="water",
                label=station.label or f"Water {index + 1}",
                dist_m=projection.dist_along_m,
            )
        )

    return sort_key_points(km_points + water_points)


def sort_key_points(key_points: Sequence[KeyPoint]) -> list[KeyPoint]:
    """Order by distance; at equal distance kilometre markers come first."""
    return sorted(key_points, key=lambda kp: (kp.dist_m, _TYPE_ORDER[kp.type]))


def key_point_locations(profile: RouteProfile, key_points: Sequence[KeyPoint]) -> dict[str, GeoPoint]:
    """Map each key point id to its coordinate on the route."""
    return {kp.id: profile.locate(kp.dist_m) for kp in key_points}


def format_key_point_label(key_point: KeyPoint) -> str:
    if key_point.type == "km":
        return key_point.label
    return f"{key_point.label} ({fmt_distance_km(key_point.dist_m)})"
