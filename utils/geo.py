"""Copyright (C) 2025 Pierre Marrec
SPDX-License-Identifier: GPL-3.0-or-later

Geodesic helpers: great-circle distance and planar projection onto segments.

Projections use a local equirectangular frame anchored at the segment start,
which is accurate enough for the short segments of a running route.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from haversine import Unit, haversine

from config import EARTH_RADIUS_M


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lng: float

    def as_tuple(self) -> tuple[float, float]:
        return (self.lat, self.lng)


@dataclass(frozen=True)
class SegmentProjection:
    projected: GeoPoint
    t: float
    distance_m: float


@dataclass(frozen=True)
class PolylineProjection:
    projected: GeoPoint
    dist_along_m: float
    distance_m: float


def distance(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance in meters using a fixed Earth radius."""
    return haversine(a.as_tuple(), b.as_tuple(), unit=Unit.RADIANS) * EARTH_RADIUS_M


def polyline_distance(points: Sequence[GeoPoint]) -> float:
    """Total length of a polyline in meters (0 for fewer than 2 points)."""
    if len(points) < 2:
        return 0.0
    return sum(distance(points[i - 1], points[i]) for i in range(1, len(points)))


def _to_local_xy(origin: GeoPoint, point: GeoPoint) -> tuple[float, float]:
    lng_factor = EARTH_RADIUS_M * math.cos(math.radians(origin.lat))
    x = math.radians(point.lng - origin.lng) * lng_factor
    y = math.radians(point.lat - origin.lat) * EARTH_RADIUS_M
    return x, y


def _from_local_xy(origin: GeoPoint, x: float, y: float) -> GeoPoint:
    lng_factor = EARTH_RADIUS_M * math.cos(math.radians(origin.lat))
    return GeoPoint(
        lat=origin.lat + math.degrees(y / EARTH_RADIUS_M),
        lng=origin.lng + math.degrees(x / lng_factor),
    )


def project_onto_segment(point: GeoPoint, seg_start: GeoPoint, seg_end: GeoPoint) -> SegmentProjection:
    """Project a point onto a segment in a planar frame anchored at seg_start.

    The projection fraction ``t`` is clamped to [0, 1], so points beyond either
    end snap to that end.

    Args:
        point: Point to project
        seg_start: Segment start, also the origin of the local frame
        seg_end: Segment end

    Returns:
        SegmentProjection with the projected point, fraction t and the
        perpendicular distance in meters
    """
    end_x, end_y = _to_local_xy(seg_start, seg_end)
    px, py = _to_local_xy(seg_start, point)

    length_squared = end_x * end_x + end_y * end_y
    if length_squared == 0:
        return SegmentProjection(projected=seg_start, t=0.0, distance_m=math.hypot(px, py))

    t = (px * end_x + py * end_y) / length_squared
    t = max(0.0, min(1.0, t))

    proj_x = end_x * t
    proj_y = end_y * t
    return SegmentProjection(
        projected=_from_local_xy(seg_start, proj_x, proj_y),
        t=t,
        distance_m=math.hypot(px - proj_x, py - proj_y),
    )


def project_onto_polyline(point: GeoPoint, polyline: Sequence[GeoPoint]) -> PolylineProjection:
    """Snap a point to the closest segment of a polyline.

    The first segment with the smallest perpendicular distance wins. The
    along-route distance is the length of all previous segments plus the
    fractional offset inside the winning one.
    """
    if len(polyline) == 0:
        return PolylineProjection(projected=point, dist_along_m=0.0, distance_m=0.0)
    if len(polyline) == 1:
        return PolylineProjection(
            projected=polyline[0], dist_along_m=0.0, distance_m=distance(point, polyline[0])
        )

    best = PolylineProjection(projected=polyline[0], dist_along_m=0.0, distance_m=math.inf)
    running_m = 0.0
    for start, end in zip(polyline, polyline[1:]):
        segment_m = distance(start, end)
        projection = project_onto_segment(point, start, end)
        if projection.distance_m < best.distance_m:
            best = PolylineProjection(
                projected=projection.projected,
                dist_along_m=running_m + segment_m * projection.t,
                distance_m=projection.distance_m,
            )
        running_m += segment_m

    return best
