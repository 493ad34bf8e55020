"""NASA NeoWs (Near Earth Object) feed client with an offline fallback."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Dict, Optional

import requests

from astrolab.logger import get_logger
from astrolab.settings import DEMO_API_KEY

logger = get_logger(__name__)

NASA_NEO_FEED_URL = "https://api.nasa.gov/neo/rest/v1/feed"
EARTH_RADIUS_KM = 6371
ASTEROID_DENSITY = 2500  # kg/m^3
FEED_WINDOW_DAYS = 7
FALLBACK_ETA_DAYS = 183


@dataclass(frozen=True)
class AsteroidData:
    name: str
    diameter: float  # meters
    velocity: float  # km/s
    miss_distance: float  # kilometers
    impact_probability: float  # percent, estimated for gameplay
    eta: int  # days until close approach
    close_approach_date: str


def fallback_asteroid(today: Optional[date] = None) -> AsteroidData:
    today = today or date.today()
    return AsteroidData(
        name="IMPACTOR-2025",
        diameter=780,
        velocity=25.3,
        miss_distance=0,
        impact_probability=87,
        eta=FALLBACK_ETA_DAYS,
        close_approach_date=(today + timedelta(days=FALLBACK_ETA_DAYS)).isoformat(),
    )


def estimate_impact_probability(miss_distance_km: float) -> float:
    threshold = EARTH_RADIUS_KM * 100
    if miss_distance_km >= threshold:
        return 0.0
    return max(0.0, 100 - (miss_distance_km / threshold) * 100)


def calculate_impact_energy(diameter_m: float, velocity_km_s: float) -> float:
    """Kinetic energy in joules of a stony sphere: E = 0.5 * m * v^2."""
    radius = diameter_m / 2
    volume = (4 / 3) * math.pi * radius ** 3
    mass = volume * ASTEROID_DENSITY
    return 0.5 * mass * (velocity_km_s * 1000) ** 2


def _closest_approach(feed: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    closest = None
    closest_distance = math.inf
    for asteroids in feed.get("near_earth_objects", {}).values():
        for asteroid in asteroids:
            approach = asteroid["close_approach_data"][0]
            distance = float(approach["miss_distance"]["kilometers"])
            if distance < closest_distance:
                closest_distance = distance
                closest = {**asteroid, "approach": approach}
    return closest


def parse_feed(feed: Dict[str, Any], today: date) -> AsteroidData:
    closest = _closest_approach(feed)
    if closest is None:
        raise ValueError("No asteroid data found")
    approach = closest["approach"]
    diameter = closest["estimated_diameter"]["meters"]["estimated_diameter_max"]
    velocity = float(approach["relative_velocity"]["kilometers_per_second"])
    miss_distance = float(approach["miss_distance"]["kilometers"])
    approach_date = approach["close_approach_date"]
    eta = (date.fromisoformat(approach_date) - today).days
    return AsteroidData(
        name=closest["name"].replace("(", "").replace(")", ""),
        diameter=round(diameter),
        velocity=round(velocity, 1),
        miss_distance=round(miss_distance),
        impact_probability=round(estimate_impact_probability(miss_distance)),
        eta=eta,
        close_approach_date=approach_date,
    )


def fetch_asteroid_data(
    api_key: str = DEMO_API_KEY,
    *,
    today: Optional[date] = None,
    timeout: float = 10.0,
    session: Optional[requests.Session] = None,
) -> AsteroidData:
    """Closest approaching asteroid of the coming week, or the IMPACTOR-2025 record."""
    today = today or date.today()
    params = {
        "start_date": today.isoformat(),
        "end_date": (today + timedelta(days=FEED_WINDOW_DAYS)).isoformat(),
        "api_key": api_key,
    }
    http = session or requests
    try:
        response = http.get(NASA_NEO_FEED_URL, params=params, timeout=timeout)
        response.raise_for_status()
        return parse_feed(response.json(), today)
    except (requests.RequestException, ValueError, KeyError, IndexError, TypeError) as exc:
        logger.warning("NASA NEO feed unavailable, using fallback asteroid: %s", exc)
        return fallback_asteroid(today)
