import math
import sys
from pathlib import Path

import pytest

# Ensure project root is importable for tests
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


from config import EARTH_RADIUS_M
from services.simulation.models import (
    Route,
    RunnerSample,
    RunnerSeries,
    WaterStation,
)
from utils.formatting import set_locale
from utils.geo import GeoPoint


def equator_lng(meters: float) -> float:
    """Longitude (degrees) that lies ``meters`` east of (0, 0) along the equator."""
    return math.degrees(meters / EARTH_RADIUS_M)


def make_series(distances, speeds=None, runner_type="amateur", duration_sec=None) -> RunnerSeries:
    """Series with one sample per second at the given distances."""
    if speeds is None:
        speeds = [0.0] * len(distances)
    samples = tuple(
        RunnerSample(t_sec=t, dist_m=float(d), speed_mps=float(s), lat=0.0, lng=0.0)
        for t, (d, s) in enumerate(zip(distances, speeds))
    )
    if duration_sec is None:
        duration_sec = len(samples) - 1 if samples else 0
    return RunnerSeries(type=runner_type, samples=samples, duration_sec=duration_sec)


@pytest.fixture(autouse=True)
def default_locale():
    set_locale("fr_FR")
    yield
    set_locale("fr_FR")


@pytest.fixture
def straight_route() -> Route:
    """10 km due east along the equator with a water station at 5 km."""
    return Route(
        id="route-10k",
        name="Equator 10k",
        polyline=(GeoPoint(0.0, 0.0), GeoPoint(0.0, equator_lng(10000))),
        water_stations=(
            WaterStation(id="w1", lat=0.0, lng=equator_lng(5000), label="Halfway"),
        ),
    )


@pytest.fixture
def dry_route() -> Route:
    """Same 10 km course without water stations."""
    return Route(
        id="route-10k-dry",
        name="Equator 10k dry",
        polyline=(GeoPoint(0.0, 0.0), GeoPoint(0.0, equator_lng(10000))),
    )


@pytest.fixture
def short_route() -> Route:
    """~200 m east-west line at the equator."""
    return Route(
        id="route-200",
        name="Sprint",
        polyline=(GeoPoint(0.0, 0.0), GeoPoint(0.0, 0.0018)),
    )


@pytest.fixture
def l_route() -> Route:
    """1 km east then 1.5 km north, two segments."""
    corner = GeoPoint(0.0, equator_lng(1000))
    return Route(
        id="route-l",
        name="L shape",
        polyline=(
            GeoPoint(0.0, 0.0),
            corner,
            GeoPoint(math.degrees(1500 / EARTH_RADIUS_M), corner.lng),
        ),
        water_stations=(
            WaterStation(id="corner", lat=corner.lat, lng=corner.lng, label="Corner"),
            WaterStation(id="late", lat=0.01, lng=corner.lng),
        ),
    )
