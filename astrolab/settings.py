"""Settings persistence for AstroLab."""

from __future__ import annotations

import json
import os
import sys
import tempfile
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict

_BASE_DIR = Path(__file__).resolve().parent.parent
SETTINGS_PATH = _BASE_DIR / "settings.json"
API_KEY_ENV = "NASA_API_KEY"
DEMO_API_KEY = "DEMO_KEY"


def _clamp(value: float, minimum: float, maximum: float) -> float:
    return max(minimum, min(maximum, value))


@dataclass
class Settings:
    """Runtime configuration toggles that persist between sessions."""

    audio_master: float = 1.0
    audio_sfx: float = 1.0
    audio_narration: float = 1.0
    text_speed: float = 1.0
    reduce_animations: bool = False
    caption_audio_cues: bool = False
    high_contrast: bool = False
    nasa_api_key: str = DEMO_API_KEY
    request_timeout: float = 10.0
    offline: bool = False

    def clamp(self) -> "Settings":
        self.audio_master = _clamp(float(self.audio_master), 0.0, 1.0)
        self.audio_sfx = _clamp(float(self.audio_sfx), 0.0, 1.0)
        self.audio_narration = _clamp(float(self.audio_narration), 0.0, 1.0)
        self.text_speed = _clamp(float(self.text_speed), 0.0, 4.0)
        self.reduce_animations = bool(self.reduce_animations)
        self.caption_audio_cues = bool(self.caption_audio_cues)
        self.high_contrast = bool(self.high_contrast)
        key = str(self.nasa_api_key or "").strip()
        self.nasa_api_key = key or DEMO_API_KEY
        self.request_timeout = _clamp(float(self.request_timeout), 1.0, 60.0)
        self.offline = bool(self.offline)
        return self

    def copy(self) -> "Settings":
        return Settings.from_dict(self.to_dict())

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any] | None) -> "Settings":
        if not isinstance(data, dict):
            return cls()

        def _as_float(key: str, default: float) -> float:
            try:
                return float(data.get(key, default))
            except (TypeError, ValueError):
                return default

        def _as_bool(key: str, default: bool) -> bool:
            value = data.get(key, default)
            if isinstance(value, bool):
                return value
            if isinstance(value, str):
                lowered = value.strip().lower()
                if lowered in {"true", "1", "yes", "on"}:
                    return True
                if lowered in {"false", "0", "no", "off"}:
                    return False
            return bool(value) if value is not None else default

        settings = cls(
            audio_master=_as_float("audio_master", 1.0),
            audio_sfx=_as_float("audio_sfx", 1.0),
            audio_narration=_as_float("audio_narration", 1.0),
            text_speed=_as_float("text_speed", 1.0),
            reduce_animations=_as_bool("reduce_animations", False),
            caption_audio_cues=_as_bool("caption_audio_cues", False),
            high_contrast=_as_bool("high_contrast", False),
            nasa_api_key=str(data.get("nasa_api_key") or DEMO_API_KEY),
            request_timeout=_as_float("request_timeout", 10.0),
            offline=_as_bool("offline", False),
        )
        return settings.clamp()


def load_settings(path: Path | str = SETTINGS_PATH) -> Settings:
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except FileNotFoundError:
        settings = Settings()
    except (OSError, json.JSONDecodeError, TypeError):
        settings = Settings()
    else:
        settings = Settings.from_dict(data)
    env_key = os.environ.get(API_KEY_ENV, "").strip()
    if env_key:
        settings.nasa_api_key = env_key
    return settings


def save_settings(settings: Settings, path: Path | str = SETTINGS_PATH) -> Settings:
    path = Path(path)
    sanitized = settings.copy().clamp()
    path.parent.mkdir(parents=True, exist_ok=True)

    tmp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            "w", delete=False, dir=path.parent, prefix=path.name, suffix=".tmp", encoding="utf-8"
        ) as tmp_file:
            json.dump(sanitized.to_dict(), tmp_file, indent=2)
            tmp_file.write("\n")
            tmp_path = Path(tmp_file.name)
        os.replace(str(tmp_path), str(path))
    except OSError as exc:
        print(f"[Settings] Failed to save settings: {exc}", file=sys.stderr)
        if tmp_path is not None:
            try:
                tmp_path.unlink()
            except OSError:
                pass
    return sanitized
