"""USGS earthquake and elevation lookups plus derived impact estimates."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

import requests

from astrolab.logger import get_logger

logger = get_logger(__name__)

USGS_EARTHQUAKE_QUERY = "https://earthquake.usgs.gov/fdsnws/event/1/query"
USGS_EPQS = "https://epqs.nationalmap.gov/v1/json"
MOUNTAIN_ELEVATION_M = 1000
TSUNAMI_ARRIVAL_MINUTES = 120


@dataclass(frozen=True)
class EarthquakeData:
    magnitude: float
    location: str
    depth: float  # km
    energy_released: float  # joules


@dataclass(frozen=True)
class ElevationData:
    latitude: float
    longitude: float
    elevation: float  # meters
    terrain: str


@dataclass(frozen=True)
class TsunamiData:
    wave_height: float  # meters
    affected_range: float  # kilometers
    arrival_time: int  # minutes
    casualties: str


@dataclass(frozen=True)
class CraterData:
    diameter: float  # kilometers
    depth: float  # meters
    ejecta_range: float  # kilometers
    seismic_magnitude: float


def magnitude_from_energy(energy_j: float) -> float:
    """Moment magnitude from log10(E) = 1.5 M + 4.8, rounded to one decimal."""
    if energy_j <= 0:
        return 0.0
    return round((math.log10(energy_j) - 4.8) / 1.5, 1)


def classify_terrain(elevation: float) -> str:
    if elevation < 0:
        return "Ocean Floor"
    if elevation > MOUNTAIN_ELEVATION_M:
        return "Mountain"
    return "Land"


def fetch_equivalent_earthquake(
    impact_energy: float,
    *,
    timeout: float = 10.0,
    session: Optional[requests.Session] = None,
) -> EarthquakeData:
    magnitude = magnitude_from_energy(impact_energy)
    params = {
        "format": "geojson",
        "minmagnitude": round(magnitude - 0.5, 1),
        "maxmagnitude": round(magnitude + 0.5, 1),
        "limit": 1,
    }
    http = session or requests
    try:
        response = http.get(USGS_EARTHQUAKE_QUERY, params=params, timeout=timeout)
        response.raise_for_status()
        features = response.json().get("features") or []
        if features:
            quake = features[0]
            return EarthquakeData(
                magnitude=quake["properties"]["mag"],
                location=quake["properties"]["place"],
                depth=quake["geometry"]["coordinates"][2],
                energy_released=impact_energy,
            )
        logger.info("No USGS event near magnitude %.1f, using impact site", magnitude)
    except (requests.RequestException, ValueError, KeyError, IndexError, TypeError) as exc:
        logger.warning("USGS earthquake catalog unavailable: %s", exc)

    return fallback_earthquake(impact_energy)


def fallback_earthquake(impact_energy: float) -> EarthquakeData:
    return EarthquakeData(
        magnitude=magnitude_from_energy(impact_energy),
        location="Impact Site",
        depth=0,
        energy_released=impact_energy,
    )


def fallback_elevation(lat: float, lon: float) -> ElevationData:
    elevation = -150 if lat > 0 and lon < 0 else 200
    return ElevationData(lat, lon, elevation, classify_terrain(elevation))


def fetch_elevation_data(
    lat: float,
    lon: float,
    *,
    timeout: float = 10.0,
    session: Optional[requests.Session] = None,
) -> ElevationData:
    params = {"x": lon, "y": lat, "units": "Meters"}
    http = session or requests
    try:
        response = http.get(USGS_EPQS, params=params, timeout=timeout)
        response.raise_for_status()
        value = response.json().get("value")
        if value is not None:
            elevation = float(value)
            return ElevationData(lat, lon, elevation, classify_terrain(elevation))
        logger.info("USGS elevation service returned no value for %s,%s", lat, lon)
    except (requests.RequestException, ValueError, KeyError, TypeError) as exc:
        logger.warning("USGS elevation service unavailable: %s", exc)
    return fallback_elevation(lat, lon)


def tsunami_for_elevation(elevation: ElevationData, asteroid_diameter: float) -> TsunamiData:
    if elevation.elevation >= 0:
        return TsunamiData(0, 0, 0, "N/A (Land Impact)")
    return TsunamiData(
        wave_height=round(math.sqrt(asteroid_diameter) * 2),
        affected_range=round(asteroid_diameter * 6),
        arrival_time=TSUNAMI_ARRIVAL_MINUTES,
        casualties="50-100 MILLION",
    )


def simulate_tsunami(
    lat: float,
    lon: float,
    asteroid_diameter: float,
    *,
    timeout: float = 10.0,
    session: Optional[requests.Session] = None,
) -> TsunamiData:
    elevation = fetch_elevation_data(lat, lon, timeout=timeout, session=session)
    return tsunami_for_elevation(elevation, asteroid_diameter)


def simulate_crater(
    asteroid_diameter: float, velocity: float, impact_angle: float = 45
) -> CraterData:
    # TODO: scale crater size by sin(impact_angle) once the sandbox exposes the angle
    crater_diameter = 1.8 * asteroid_diameter * (velocity / 12) ** 0.44 / 1000
    crater_depth = crater_diameter * 0.067 * 1000
    ejecta_range = crater_diameter * 40
    energy = 0.5 * asteroid_diameter ** 3 * (velocity * 1000) ** 2 * 2500
    return CraterData(
        diameter=round(crater_diameter, 1),
        depth=round(crater_depth),
        ejecta_range=round(ejecta_range),
        seismic_magnitude=magnitude_from_energy(energy),
    )
