"""Copyright (C) 2025 Pierre Marrec
SPDX-License-Identifier: GPL-3.0-or-later

Resample a matched user track to one sample per elapsed second.

The resulting series can be indexed by elapsed seconds exactly like the
synthetic runner series.
"""

from __future__ import annotations

import math
from typing import Sequence

from services.simulation.models import (
    USER_RUNNER_TYPE,
    MatchedTrackPoint,
    RunnerSample,
    RunnerSeries,
)


def _interpolate(a: MatchedTrackPoint, b: MatchedTrackPoint, t_sec: int) -> tuple[float, float, float]:
    span = (b.t_sec - a.t_sec) or 1.0
    ratio = (t_sec - a.t_sec) / span
    if ratio == 1.0:
        return b.dist_m, b.lat, b.lng
    return (
        a.dist_m + (b.dist_m - a.dist_m) * ratio,
        a.lat + (b.lat - a.lat) * ratio,
        a.lng + (b.lng - a.lng) * ratio,
    )


def build_user_series(track: Sequence[MatchedTrackPoint]) -> RunnerSeries:
    """Interpolate a matched track at every whole second from 0 to its last time.

    Speed at each second is the slope of the bracketing track points, not a
    difference of the interpolated samples.
    """
    if not track:
        return RunnerSeries(type=USER_RUNNER_TYPE, samples=(), duration_sec=0.0)

    ordered = sorted(track, key=lambda point: point.t_sec)
    duration_sec = ordered[-1].t_sec
    last = len(ordered) - 1

    samples = []
    cursor = 0
    for t_sec in range(int(math.floor(duration_sec)) + 1):
        while cursor < last and ordered[cursor + 1].t_sec < t_sec:
            cursor += 1
        current = ordered[cursor]
        following = ordered[cursor + 1] if cursor < last else current

        dist_m, lat, lng = _interpolate(current, following, t_sec)
        if following.t_sec == current.t_sec:
            speed_mps = 0.0
        else:
            speed_mps = (following.dist_m - current.dist_m) / (following.t_sec - current.t_sec)
        samples.append(
            RunnerSample(t_sec=t_sec, dist_m=dist_m, speed_mps=speed_mps, lat=lat, lng=lng)
        )

    return RunnerSeries(type=USER_RUNNER_TYPE, samples=tuple(samples), duration_sec=duration_sec)
