"""Copyright (C) 2025 Pierre Marrec
SPDX-License-Identifier: GPL-3.0-or-later

Per-segment pass time, speed and pace for every runner series.
"""

from __future__ import annotations

import math
from typing import Sequence

import pandas as pd

from services.simulation.models import (
    START_KEY_POINT,
    KeyPoint,
    RunnerSeries,
    SegmentMetric,
)
from utils.formatting import fmt_duration, fmt_pace, fmt_speed_mps


def find_pass_time(series: RunnerSeries, target_m: float) -> float:
    """Time of the first sample at or beyond ``target_m``, else the series duration."""
    for sample in series.samples:
        if sample.dist_m >= target_m:
            return sample.t_sec
    return series.duration_sec


def segment_max_speed(series: RunnerSeries, start_sec: float, end_sec: float) -> float:
    """Highest recorded speed over the whole seconds in [start_sec, end_sec]."""
    if end_sec <= start_sec:
        return 0.0
    first = max(0, int(math.ceil(start_sec)))
    last = min(len(series.samples) - 1, int(math.floor(end_sec)))
    best = 0.0
    for sample in series.samples[first : last + 1]:
        best = max(best, sample.speed_mps)
    return best


def build_segment_metrics(
    series_list: Sequence[RunnerSeries], key_points: Sequence[KeyPoint]
) -> list[SegmentMetric]:
    """One metric row per (series, key point), series-major in input order.

    Key points must already be sorted by distance; a start marker at 0 m is
    prepended so the first segment runs from the start line.
    """
    extended = [START_KEY_POINT, *key_points]
    metrics = []

    for series in series_list:
        for prev, current in zip(extended, extended[1:]):
            start_sec = find_pass_time(series, prev.dist_m)
            end_sec = find_pass_time(series, current.dist_m)
            time_delta = max(1.0, end_sec - start_sec)
            avg_speed = (current.dist_m - prev.dist_m) / time_delta
            metrics.append(
                SegmentMetric(
                    key_point_id=current.id,
                    runner_type=series.type,
                    avg_speed_mps=avg_speed,
                    max_speed_mps=segment_max_speed(series, start_sec, end_sec),
                    pace_sec_per_km=1000.0 / avg_speed if avg_speed > 0 else 0.0,
                    pass_time_sec=end_sec,
                )
            )

    return metrics


def segment_metrics_to_frame(metrics: Sequence[SegmentMetric]) -> pd.DataFrame:
    """Raw metrics as a DataFrame, one row per metric."""
    columns = [
        "keyPointId",
        "runnerType",
        "segmentAvgSpeedMps",
        "segmentMaxSpeedMps",
        "segmentPaceSecPerKm",
        "passTimeSec",
    ]
    rows = [
        {
            "keyPointId": metric.key_point_id,
            "runnerType": metric.runner_type,
            "segmentAvgSpeedMps": metric.avg_speed_mps,
            "segmentMaxSpeedMps": metric.max_speed_mps,
            "segmentPaceSecPerKm": metric.pace_sec_per_km,
            "passTimeSec": metric.pass_time_sec,
        }
        for metric in metrics
    ]
    return pd.DataFrame(rows, columns=columns)


def key_point_metrics_table(metrics: Sequence[SegmentMetric], key_point: KeyPoint) -> pd.DataFrame:
    """Formatted comparison rows for the segment ending at ``key_point``."""
    rows = [
        {
            "runner": metric.runner_type,
            "avgSpeed": fmt_speed_mps(metric.avg_speed_mps),
            "maxSpeed": fmt_speed_mps(metric.max_speed_mps),
            "pace": fmt_pace(metric.pace_sec_per_km),
            "passTime": fmt_duration(metric.pass_time_sec),
        }
        for metric in metrics
        if metric.key_point_id == key_point.id
    ]
    return pd.DataFrame(rows, columns=["runner", "avgSpeed", "maxSpeed", "pace", "passTime"])
