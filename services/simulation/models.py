"""Copyright (C) 2025 Pierre Marrec
SPDX-License-Identifier: GPL-3.0-or-later

Value types shared by the race simulation services.

All values are immutable. Derived structures (series, metrics, matched
tracks) are rebuilt from their inputs whenever those inputs change.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Literal, Mapping, Optional

import pandas as pd
from streamlit.logger import get_logger

from utils.coercion import clean_optional, safe_float, safe_float_optional
from utils.geo import GeoPoint, polyline_distance

logger = get_logger(__name__)

RunnerType = Literal["pro", "amateur", "casual", "user"]
KeyPointType = Literal["km", "water"]

USER_RUNNER_TYPE: RunnerType = "user"


@dataclass(frozen=True)
class WaterStation:
    id: str
    lat: float
    lng: float
    label: str = ""
    km_mark: Optional[float] = None

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(self.lat, self.lng)


@dataclass(frozen=True)
class Route:
    """A single open polyline course with its water stations."""

    id: str
    name: str
    polyline: tuple[GeoPoint, ...] = ()
    water_stations: tuple[WaterStation, ...] = ()

    @property
    def distance_meters(self) -> float:
        return polyline_distance(self.polyline)

    @classmethod
    def from_dict(cls, record: Mapping[str, Any]) -> "Route":
        """Build a route from a decoded storage record.

        Points without a usable lat/lng are dropped.
        """
        polyline = []
        for raw in record.get("polyline") or []:
            lat = safe_float_optional(raw.get("lat"))
            lng = safe_float_optional(raw.get("lng"))
            if lat is None or lng is None:
                logger.debug("Skipping invalid polyline point: %s", raw)
                continue
            polyline.append(GeoPoint(lat, lng))

        stations = []
        for index, raw in enumerate(record.get("waterStations") or []):
            lat = safe_float_optional(raw.get("lat"))
            lng = safe_float_optional(raw.get("lng"))
            if lat is None or lng is None:
                logger.debug("Skipping invalid water station: %s", raw)
                continue
            stations.append(
                WaterStation(
                    id=clean_optional(raw.get("id")) or str(index + 1),
                    lat=lat,
                    lng=lng,
                    label=clean_optional(raw.get("label")),
                    km_mark=safe_float_optional(raw.get("kmMark")),
                )
            )

        return cls(
            id=clean_optional(record.get("id")),
            name=clean_optional(record.get("name")),
            polyline=tuple(polyline),
            water_stations=tuple(stations),
        )


@dataclass(frozen=True)
class TrackPoint:
    """Parsed GPS fix, time offset normalized so the first point is at 0."""

    lat: float
    lng: float
    t_sec: float


def track_from_records(records: Iterable[Mapping[str, Any]]) -> list[TrackPoint]:
    """Decode stored track points, skipping entries without coordinates."""
    track = []
    for index, raw in enumerate(records):
        lat = safe_float_optional(raw.get("lat"))
        lng = safe_float_optional(raw.get("lng"))
        if lat is None or lng is None:
            logger.debug("Skipping invalid track point: %s", raw)
            continue
        track.append(TrackPoint(lat=lat, lng=lng, t_sec=safe_float(raw.get("tSec"), float(index))))
    return track


@dataclass(frozen=True)
class RunnerProfile:
    type: RunnerType
    label: str
    base_pace_sec_per_km: float
    color: str

    @property
    def base_speed_mps(self) -> float:
        return 1000.0 / self.base_pace_sec_per_km


RUNNER_PROFILES: tuple[RunnerProfile, ...] = (
    RunnerProfile(type="pro", label="Pro", base_pace_sec_per_km=210, color="#16a34a"),
    RunnerProfile(type="amateur", label="Amateur", base_pace_sec_per_km=330, color="#2563eb"),
    RunnerProfile(type="casual", label="Casual", base_pace_sec_per_km=450, color="#f97316"),
)
USER_COLOR = "#a855f7"


def runner_color(runner_type: str) -> str:
    """Display colour of an archetype, or of the user series."""
    for profile in RUNNER_PROFILES:
        if profile.type == runner_type:
            return profile.color
    return USER_COLOR


@dataclass(frozen=True)
class RunnerSample:
    t_sec: float
    dist_m: float
    speed_mps: float
    lat: float
    lng: float


@dataclass(frozen=True)
class RunnerSeries:
    """Per-second samples of one runner; sample index equals elapsed seconds."""

    type: RunnerType
    samples: tuple[RunnerSample, ...]
    duration_sec: float

    def __post_init__(self) -> None:
        for index, sample in enumerate(self.samples):
            if sample.t_sec != index:
                raise ValueError(
                    f"Sample {index} of {self.type} series is at t={sample.t_sec}s, "
                    "expected one sample per elapsed second"
                )

    def __len__(self) -> int:
        return len(self.samples)

    def sample_at(self, t_sec: float) -> Optional[RunnerSample]:
        """Return the sample at elapsed second ``t_sec``.

        The time is clamped to [0, duration] and floored; indices past the
        last sample return the last sample.
        """
        if not self.samples:
            return None
        clamped = min(max(t_sec, 0.0), self.duration_sec)
        index = int(math.floor(clamped))
        if index >= len(self.samples):
            return self.samples[-1]
        return self.samples[index]

    def to_frame(self) -> pd.DataFrame:
        """Samples as a DataFrame indexed by elapsed second."""
        columns = ["tSec", "distMeters", "speedMps", "lat", "lng"]
        rows = [
            (sample.t_sec, sample.dist_m, sample.speed_mps, sample.lat, sample.lng)
            for sample in self.samples
        ]
        df = pd.DataFrame(rows, columns=columns)
        df["runnerType"] = self.type
        df["color"] = runner_color(self.type)
        return df


@dataclass(frozen=True)
class RunnerState:
    type: RunnerType
    dist_m: float
    speed_mps: float
    lat: float
    lng: float


@dataclass(frozen=True)
class MatchedTrackPoint:
    t_sec: float
    dist_m: float
    lat: float
    lng: float


@dataclass(frozen=True)
class KeyPoint:
    id: str
    type: KeyPointType
    label: str
    dist_m: float


START_KEY_POINT = KeyPoint(id="start", type="km", label="Start", dist_m=0.0)


@dataclass(frozen=True)
class SegmentMetric:
    key_point_id: str
    runner_type: RunnerType
    avg_speed_mps: float
    max_speed_mps: float
    pace_sec_per_km: float
    pass_time_sec: float


@dataclass(frozen=True)
class SimulationData:
    duration_sec: float
    runners: tuple[RunnerSeries, ...]
    key_points: tuple[KeyPoint, ...]
    segment_metrics: tuple[SegmentMetric, ...]
    user: Optional[RunnerSeries] = None
    all_series: tuple[RunnerSeries, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        series = self.runners + ((self.user,) if self.user is not None else ())
        object.__setattr__(self, "all_series", series)
