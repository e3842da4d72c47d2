"""Copyright (C) 2025 Pierre Marrec
SPDX-License-Identifier: GPL-3.0-or-later
"""

from __future__ import annotations

from typing import Sequence

from streamlit.logger import get_logger

from services.simulation.models import MatchedTrackPoint, TrackPoint
from utils.geo import GeoPoint, project_onto_polyline

logger = get_logger(__name__)


def match_track_to_route(
    track: Sequence[TrackPoint], polyline: Sequence[GeoPoint]
) -> list[MatchedTrackPoint]:
    """Snap each track point to its nearest route segment.

    Output keeps the input order and length. Without at least two route
    points no projection is possible: coordinates pass through and the
    along-route distance is 0.
    """
    if len(polyline) < 2:
        logger.debug("Route has %s point(s), track passed through unmatched", len(polyline))
        return [
            MatchedTrackPoint(t_sec=point.t_sec, dist_m=0.0, lat=point.lat, lng=point.lng)
            for point in track
        ]

    matched = []
    for point in track:
        projection = project_onto_polyline(GeoPoint(point.lat, point.lng), polyline)
        matched.append(
            MatchedTrackPoint(
                t_sec=point.t_sec,
                dist_m=projection.dist_along_m,
                lat=projection.projected.lat,
                lng=projection.projected.lng,
            )
        )
    return matched
