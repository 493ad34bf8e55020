"""Earth imagery placeholders and threat-level backdrops."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from astrolab.game_state import ThreatLevel


@dataclass(frozen=True)
class EarthImageryData:
    image_url: str
    date: str
    cloud_score: float


@dataclass(frozen=True)
class BackgroundTexture:
    texture_url: str
    description: str


BACKGROUND_TEXTURES = {
    ThreatLevel.SAFE: BackgroundTexture(
        "https://via.placeholder.com/1920x1080/000011/ffffff?text=SAFE+SPACE",
        "Calm starfield with Earth in distance",
    ),
    ThreatLevel.WARNING: BackgroundTexture(
        "https://via.placeholder.com/1920x1080/110000/ff0000?text=WARNING",
        "Red nebula approaching Earth",
    ),
    ThreatLevel.CRITICAL: BackgroundTexture(
        "https://via.placeholder.com/1920x1080/220000/ffff00?text=CRITICAL",
        "Asteroid collision course",
    ),
}


def fetch_earth_imagery(lat: float, lon: float, on_date: Optional[str] = None) -> EarthImageryData:
    # TODO: call the NASA Earth imagery endpoint once it is back in service
    return EarthImageryData(
        image_url="https://via.placeholder.com/512x512/1a1a1a/FFD700?text=Earth+Impact+Site",
        date=on_date or date.today().isoformat(),
        cloud_score=0.2,
    )


def background_texture(threat_level: ThreatLevel) -> BackgroundTexture:
    return BACKGROUND_TEXTURES[ThreatLevel(threat_level)]
