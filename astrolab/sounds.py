"""Named audio cues for AstroLab.

The terminal build has no mixer; a cue resolves to an effective volume, is
logged, and is captioned when ``caption_audio_cues`` is on.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from astrolab.logger import get_logger
from astrolab.settings import Settings

logger = get_logger(__name__)

PrintFunc = Callable[[str], None]


@dataclass(frozen=True)
class SoundCue:
    source: str
    volume: float
    caption: str


SOUND_CUES: Dict[str, SoundCue] = {
    "buttonHover": SoundCue("sounds/buttonHover.mp3", 0.3, "Soft blip."),
    "buttonClick": SoundCue("sounds/buttonClick.mp3", 0.4, "Click."),
    "choiceSelect": SoundCue("sounds/choiceSelect.mp3", 0.5, "Choice confirmed."),
    "newAct": SoundCue("sounds/newAct.mp3", 0.6, "New act fanfare."),
    "impactWarning": SoundCue("sounds/impactWarning.mp3", 0.5, "Impact warning klaxon."),
    "badgeUnlock": SoundCue("sounds/badgeUnlock.mp3", 0.6, "Badge unlocked."),
}
NARRATION_VOLUME = 0.8


class SoundManager:
    """Play cues by name; unknown names are ignored."""

    def __init__(self, settings: Optional[Settings] = None, *, print_func: PrintFunc = print) -> None:
        self.settings = settings or Settings()
        self.print = print_func
        self.played: List[Tuple[str, float]] = []

    def _effective_volume(self, base: float, channel: float) -> float:
        return round(base * self.settings.audio_master * channel, 3)

    def play(self, name: str) -> Optional[float]:
        cue = SOUND_CUES.get(name)
        if cue is None:
            logger.debug("Ignoring unknown sound cue '%s'", name)
            return None
        volume = self._effective_volume(cue.volume, self.settings.audio_sfx)
        self._emit(name, volume, cue.caption)
        return volume

    def play_narration(self, act_id: str) -> float:
        volume = self._effective_volume(NARRATION_VOLUME, self.settings.audio_narration)
        self._emit(f"narration/{act_id}", volume, f"Narration for {act_id}.")
        return volume

    def _emit(self, name: str, volume: float, caption: str) -> None:
        self.played.append((name, volume))
        logger.debug("Sound cue %s at volume %.2f", name, volume)
        if volume > 0 and self.settings.caption_audio_cues:
            self.print(f"[Audio Cue] {caption}")
