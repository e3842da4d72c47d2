"""Copyright (C) 2025 Pierre Marrec
SPDX-License-Identifier: GPL-3.0-or-later

Simulation service for comparing synthetic runners and a user track on a route.

Every call recomputes its results from the inputs it receives; nothing is
cached between calls.
"""

from __future__ import annotations

from typing import Optional, Sequence

import pandas as pd
from streamlit.logger import get_logger

from services.simulation.key_points import build_key_points, key_point_locations
from services.simulation.models import (
    KeyPoint,
    MatchedTrackPoint,
    Route,
    RunnerSeries,
    RunnerState,
    SegmentMetric,
    SimulationData,
    TrackPoint,
)
from services.simulation.route_profile import RouteProfile, build_route_profile
from services.simulation.runner_simulator import simulate_runners
from services.simulation.segment_metrics import (
    build_segment_metrics,
    key_point_metrics_table,
    segment_metrics_to_frame,
)
from services.simulation.track_matcher import match_track_to_route
from services.simulation.user_series import build_user_series
from utils.config import Config, load_config
from utils.formatting import set_locale
from utils.geo import GeoPoint

logger = get_logger(__name__)


class SimulationService:
    """Entry points used by the presentation layer."""

    def __init__(self, config: Optional[Config] = None):
        self.config = config or load_config()
        set_locale(self.config.display_locale)

    def build_route_profile(self, polyline: Sequence[GeoPoint]) -> RouteProfile:
        return build_route_profile(polyline)

    def simulate_runners(self, route: Route) -> list[RunnerSeries]:
        return simulate_runners(route, max_duration_sec=self.config.max_simulation_sec)

    def match_track_to_route(
        self, track: Sequence[TrackPoint], polyline: Sequence[GeoPoint]
    ) -> list[MatchedTrackPoint]:
        return match_track_to_route(track, polyline)

    def build_user_series(self, matched_track: Sequence[MatchedTrackPoint]) -> RunnerSeries:
        return build_user_series(matched_track)

    def build_key_points(self, route: Route) -> list[KeyPoint]:
        return build_key_points(route)

    def build_segment_metrics(
        self, series_list: Sequence[RunnerSeries], key_points: Sequence[KeyPoint]
    ) -> list[SegmentMetric]:
        return build_segment_metrics(series_list, key_points)

    def build_simulation(
        self, route: Route, track: Optional[Sequence[TrackPoint]] = None
    ) -> SimulationData:
        """Run the full pipeline for a route and an optional user track.

        Args:
            route: Route with polyline and water stations
            track: Parsed user track points, or None when no activity is uploaded

        Returns:
            SimulationData with all series, key points and segment metrics
        """
        runners = self.simulate_runners(route)

        user: Optional[RunnerSeries] = None
        if track is not None:
            user = self.build_user_series(self.match_track_to_route(track, route.polyline))

        durations = [runner.duration_sec for runner in runners]
        if user is not None:
            durations.append(user.duration_sec)

        key_points = self.build_key_points(route)

        metrics: list[SegmentMetric] = []
        if runners:
            series_list = runners + [user] if user is not None else runners
            metrics = self.build_segment_metrics(series_list, key_points)
        else:
            logger.debug("No runners simulated for route %s, skipping segment metrics", route.id)

        return SimulationData(
            duration_sec=max(durations) if durations else 0.0,
            runners=tuple(runners),
            key_points=tuple(key_points),
            segment_metrics=tuple(metrics),
            user=user,
        )

    def runner_states_at(self, simulation: SimulationData, t_sec: float) -> list[RunnerState]:
        """Snapshot of every series at a playback time, user last."""
        states = []
        for series in simulation.all_series:
            sample = series.sample_at(t_sec)
            if sample is None:
                continue
            states.append(
                RunnerState(
                    type=series.type,
                    dist_m=sample.dist_m,
                    speed_mps=sample.speed_mps,
                    lat=sample.lat,
                    lng=sample.lng,
                )
            )
        return states

    def key_point_locations(self, route: Route, key_points: Sequence[KeyPoint]) -> dict[str, GeoPoint]:
        return key_point_locations(self.build_route_profile(route.polyline), key_points)

    def series_frame(self, simulation: SimulationData) -> pd.DataFrame:
        """All series stacked into one DataFrame."""
        frames = [series.to_frame() for series in simulation.all_series]
        if not frames:
            return pd.DataFrame()
        return pd.concat(frames, ignore_index=True)

    def segment_metrics_frame(self, simulation: SimulationData) -> pd.DataFrame:
        return segment_metrics_to_frame(simulation.segment_metrics)

    def key_point_table(self, simulation: SimulationData, key_point: KeyPoint) -> pd.DataFrame:
        return key_point_metrics_table(simulation.segment_metrics, key_point)
