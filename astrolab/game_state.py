"""Playthrough state for AstroLab."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Set

from astrolab.story import DataPoint
from astrolab.story_schema import START_KEY, is_ending_outcome, path_key_for_outcome


class ThreatLevel(str, Enum):
    SAFE = "SAFE"
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"


class Phase(str, Enum):
    DIALOGUE = "DIALOGUE"
    AWAITING_CHOICE = "AWAITING_CHOICE"
    ENDED = "ENDED"


def threat_level_for_act(act: int) -> ThreatLevel:
    """Threat shown during play. SAFE is only the pre-game/sandbox value."""
    if act == 1:
        return ThreatLevel.WARNING
    if act >= 3:
        return ThreatLevel.CRITICAL
    return ThreatLevel.WARNING


@dataclass(frozen=True)
class StorySnapshot:
    act: int
    scene: int
    outcome: Optional[str] = None
    data_point: Optional[DataPoint] = None


class GameState:
    def __init__(self, unlocked_paths: Optional[Iterable[str]] = None):
        self.current_act, self.current_scene = START_KEY
        self.choice_history: List[str] = []
        self.unlocked_paths: Set[str] = set(unlocked_paths or ())
        self.data_collected: Dict[str, str] = {}
        self.ended = False

    @property
    def key(self):
        return self.current_act, self.current_scene

    @property
    def last_outcome(self) -> Optional[str]:
        return self.choice_history[-1] if self.choice_history else None

    def record_choice(self, outcome: str, next_act: int, next_scene: Optional[int]) -> Optional[str]:
        """Append ``outcome`` and move to the next key; return the unlocked path, if any."""
        self.choice_history.append(outcome)
        self.current_act = next_act
        self.current_scene = next_scene or 1
        if not is_ending_outcome(outcome):
            return None
        path_key = path_key_for_outcome(outcome)
        self.unlocked_paths.add(path_key)
        self.ended = True
        return path_key

    def record_data_point(self, data_point: DataPoint) -> None:
        self.data_collected[data_point.type] = data_point.value

    def fresh(self) -> "GameState":
        """Start a new playthrough carrying only the unlocked paths forward."""
        return GameState(self.unlocked_paths)

    def copy(self) -> "GameState":
        clone = GameState(self.unlocked_paths)
        clone.current_act = self.current_act
        clone.current_scene = self.current_scene
        clone.choice_history = list(self.choice_history)
        clone.data_collected = dict(self.data_collected)
        clone.ended = self.ended
        return clone

    def summary(self) -> str:
        data = ", ".join(f"{k}={v}" for k, v in sorted(self.data_collected.items())) or "-"
        paths = ", ".join(sorted(self.unlocked_paths)) or "-"
        return (
            f"ACT {self.current_act} - SCENE {self.current_scene} | CHOICES: {len(self.choice_history)} | "
            f"PATHS: {paths} | DATA: {data}"
        )

    def to_dict(self) -> Dict[str, object]:
        return {
            "currentAct": self.current_act,
            "currentScene": self.current_scene,
            "choiceHistory": list(self.choice_history),
            "unlockedPaths": sorted(self.unlocked_paths),
            "dataCollected": dict(self.data_collected),
        }
