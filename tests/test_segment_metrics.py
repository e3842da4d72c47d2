"""Copyright (C) 2025 Pierre Marrec
SPDX-License-Identifier: GPL-3.0-or-later

Tests for per-segment metrics.
"""

from __future__ import annotations

import pytest

from conftest import make_series
from services.simulation.models import KeyPoint
from services.simulation.segment_metrics import (
    build_segment_metrics,
    find_pass_time,
    key_point_metrics_table,
    segment_max_speed,
    segment_metrics_to_frame,
)


@pytest.fixture
def steady_series():
    return make_series([0, 10, 20, 30, 40], speeds=[10, 12, 9, 11, 0], runner_type="pro")


@pytest.fixture
def key_points():
    return [
        KeyPoint(id="km-a", type="km", label="A", dist_m=20.0),
        KeyPoint(id="water-b", type="water", label="B", dist_m=40.0),
    ]


def test_find_pass_time(steady_series):
    assert find_pass_time(steady_series, 0) == 0
    assert find_pass_time(steady_series, 15) == 2
    assert find_pass_time(steady_series, 40) == 4


def test_find_pass_time_falls_back_to_duration():
    series = make_series([0, 5, 10], duration_sec=7)
    assert find_pass_time(series, 100) == 7


def test_segment_max_speed(steady_series):
    assert segment_max_speed(steady_series, 0, 2) == 12
    assert segment_max_speed(steady_series, 2, 4) == 11
    assert segment_max_speed(steady_series, 3, 3) == 0.0
    assert segment_max_speed(steady_series, 4, 2) == 0.0


def test_build_segment_metrics_values(steady_series, key_points):
    metrics = build_segment_metrics([steady_series], key_points)

    assert [m.key_point_id for m in metrics] == ["km-a", "water-b"]
    first, second = metrics
    assert first.runner_type == "pro"
    assert first.pass_time_sec == 2
    assert first.avg_speed_mps == pytest.approx(10.0)
    assert first.max_speed_mps == 12
    assert first.pace_sec_per_km == pytest.approx(100.0)
    assert second.pass_time_sec == 4
    assert second.max_speed_mps == 11


def test_same_second_key_points_use_one_second_floor():
    series = make_series([0, 10, 20], speeds=[10, 10, 0])
    key_points = [
        KeyPoint(id="k1", type="km", label="k1", dist_m=5.0),
        KeyPoint(id="k2", type="water", label="k2", dist_m=8.0),
    ]

    metrics = build_segment_metrics([series], key_points)

    assert metrics[1].pass_time_sec == metrics[0].pass_time_sec == 1
    assert metrics[1].avg_speed_mps == pytest.approx(3.0)
    assert metrics[1].max_speed_mps == 0.0


def test_unreached_key_point_and_zero_pace():
    series = make_series([0, 5, 10], speeds=[5, 5, 0], duration_sec=2)
    key_points = [
        KeyPoint(id="k1", type="km", label="k1", dist_m=500.0),
        KeyPoint(id="k2", type="km", label="k2", dist_m=500.0),
    ]

    metrics = build_segment_metrics([series], key_points)

    assert metrics[0].pass_time_sec == 2
    assert metrics[0].avg_speed_mps == pytest.approx(250.0)
    assert metrics[1].avg_speed_mps == 0.0
    assert metrics[1].pace_sec_per_km == 0.0


def test_metrics_order_and_distance_sum(steady_series, key_points):
    user = make_series([0, 8, 16, 24, 32, 40], speeds=[8] * 5 + [0], runner_type="user")

    metrics = build_segment_metrics([steady_series, user], key_points)

    assert [(m.runner_type, m.key_point_id) for m in metrics] == [
        ("pro", "km-a"),
        ("pro", "water-b"),
        ("user", "km-a"),
        ("user", "water-b"),
    ]
    for series in (steady_series, user):
        rows = [m for m in metrics if m.runner_type == series.type]
        passes = [0] + [m.pass_time_sec for m in rows]
        deltas = [max(1, b - a) for a, b in zip(passes, passes[1:])]
        assert all(delta >= 1 for delta in deltas)
        covered = sum(m.avg_speed_mps * d for m, d in zip(rows, deltas))
        assert covered == pytest.approx(series.samples[-1].dist_m)
        assert all(m.avg_speed_mps >= 0 for m in rows)


def test_empty_inputs():
    assert build_segment_metrics([], []) == []
    assert build_segment_metrics([make_series([0, 1])], []) == []


def test_metrics_frames(steady_series, key_points):
    metrics = build_segment_metrics([steady_series], key_points)

    frame = segment_metrics_to_frame(metrics)
    assert list(frame.columns) == [
        "keyPointId",
        "runnerType",
        "segmentAvgSpeedMps",
        "segmentMaxSpeedMps",
        "segmentPaceSecPerKm",
        "passTimeSec",
    ]
    assert len(frame) == 2
    assert segment_metrics_to_frame([]).empty

    table = key_point_metrics_table(metrics, key_points[0])
    assert len(table) == 1
    row = table.iloc[0]
    assert row["runner"] == "pro"
    assert row["pace"] == "1:40/km"
    assert row["passTime"] == "00:00:02"
    assert row["avgSpeed"].endswith("m/s")
