"""Copyright (C) 2025 Pierre Marrec
SPDX-License-Identifier: GPL-3.0-or-later
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from config import FALLBACK_LAT, FALLBACK_LNG
from utils.geo import GeoPoint, distance


@dataclass(frozen=True)
class RouteProfile:
    """Cumulative along-route distance (meters) for each polyline vertex."""

    points: tuple[GeoPoint, ...]
    cumulative: tuple[float, ...]
    _cumulative_array: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if len(self.points) != len(self.cumulative):
            raise ValueError("RouteProfile needs one cumulative distance per point")
        object.__setattr__(self, "_cumulative_array", np.asarray(self.cumulative, dtype=float))

    @property
    def total_distance(self) -> float:
        return self.cumulative[-1] if self.cumulative else 0.0

    def locate(self, target_m: float) -> GeoPoint:
        """Coordinate at ``target_m`` meters along the route.

        The target is clamped to the route length and interpolated linearly
        between the first vertex at or beyond it and its predecessor.
        """
        if not self.points:
            return GeoPoint(FALLBACK_LAT, FALLBACK_LNG)
        if len(self.points) == 1 or target_m <= 0:
            return self.points[0]

        clamped = min(target_m, self.total_distance)
        # left side: first cumulative value >= clamped, same as a forward scan
        idx = int(np.searchsorted(self._cumulative_array, clamped, side="left"))
        if idx == 0:
            return self.points[0]
        if idx >= len(self.points):
            return self.points[-1]

        prev_point = self.points[idx - 1]
        next_point = self.points[idx]
        prev_m = self.cumulative[idx - 1]
        segment_m = (self.cumulative[idx] - prev_m) or 1.0
        ratio = (clamped - prev_m) / segment_m
        return GeoPoint(
            lat=prev_point.lat + (next_point.lat - prev_point.lat) * ratio,
            lng=prev_point.lng + (next_point.lng - prev_point.lng) * ratio,
        )


def build_route_profile(polyline: Sequence[GeoPoint]) -> RouteProfile:
    """Compute the cumulative distance profile of a polyline."""
    points = tuple(polyline)
    if not points:
        return RouteProfile(points=(), cumulative=())
    steps = [0.0] + [distance(points[i - 1], points[i]) for i in range(1, len(points))]
    cumulative = np.cumsum(steps)
    return RouteProfile(points=points, cumulative=tuple(float(d) for d in cumulative))
