"""Sandbox impact simulator.

Parameters are clamped to the ranges below. The deflection
estimate is a gameplay model: a kinetic impactor's lateral delta-v, scaled by
the asteroid's mass relative to IMPACTOR-2025, applied over the lead time and
compared with Earth's radius.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from astrolab.nasa import EARTH_RADIUS_KM, calculate_impact_energy
from astrolab.usgs import magnitude_from_energy, simulate_crater

DIAMETER_RANGE = (100.0, 2000.0)
VELOCITY_RANGE = (10.0, 50.0)
LEAD_TIME_RANGE = (1, 12)
DEFAULT_DIAMETER = 780.0
DEFAULT_VELOCITY = 25.3
DEFAULT_LEAD_MONTHS = 6

REFERENCE_DIAMETER = 780.0
REFERENCE_DELTA_V = 0.315  # m/s imparted on the reference body
SECONDS_PER_MONTH = 30.44 * 86400
JOULES_PER_MEGATON = 4.184e15


def _clamp(value, lo, hi):
    return max(lo, min(hi, value))


@dataclass(frozen=True)
class SandboxParams:
    diameter: float = DEFAULT_DIAMETER
    velocity: float = DEFAULT_VELOCITY
    lead_months: int = DEFAULT_LEAD_MONTHS

    def clamped(self) -> "SandboxParams":
        return SandboxParams(
            diameter=_clamp(float(self.diameter), *DIAMETER_RANGE),
            velocity=_clamp(float(self.velocity), *VELOCITY_RANGE),
            lead_months=int(_clamp(int(self.lead_months), *LEAD_TIME_RANGE)),
        )


@dataclass(frozen=True)
class SandboxResult:
    params: SandboxParams
    impact_energy: float  # joules
    megatons: float
    crater_diameter: float  # km
    seismic_magnitude: float
    miss_distance_km: float
    deflection_success: int  # percent


def deflection_delta_v(diameter: float) -> float:
    return REFERENCE_DELTA_V * (REFERENCE_DIAMETER / diameter) ** 3


def miss_distance_km(delta_v: float, lead_months: int) -> float:
    """Lateral displacement d = delta_v * t, in kilometers."""
    return abs(delta_v) * max(0.0, lead_months * SECONDS_PER_MONTH) / 1000


def run_simulation(params: SandboxParams) -> SandboxResult:
    params = params.clamped()
    energy = calculate_impact_energy(params.diameter, params.velocity)
    crater = simulate_crater(params.diameter, params.velocity)
    miss = miss_distance_km(deflection_delta_v(params.diameter), params.lead_months)
    success = int(min(100, round(miss / EARTH_RADIUS_KM * 100)))
    return SandboxResult(
        params=params,
        impact_energy=energy,
        megatons=energy / JOULES_PER_MEGATON,
        crater_diameter=crater.diameter,
        seismic_magnitude=magnitude_from_energy(energy),
        miss_distance_km=round(miss),
        deflection_success=success,
    )


def format_result(result: SandboxResult) -> List[str]:
    p = result.params
    return [
        "IMPACT SIMULATOR",
        f"  ASTEROID DIAMETER: {p.diameter:.0f} METERS",
        f"  VELOCITY: {p.velocity:.1f} KM/S",
        f"  DEFLECTION TIME: {p.lead_months} MONTHS",
        "SIMULATION RESULTS",
        f"  IMPACT ENERGY: {result.impact_energy:.2e} JOULES ({result.megatons:,.0f} MT TNT)",
        f"  CRATER DIAMETER: {result.crater_diameter} KM",
        f"  SEISMIC MAGNITUDE: {result.seismic_magnitude}",
        f"  DEFLECTION SUCCESS: {result.deflection_success}%",
    ]
