"""Story progression engine.

Walks the content table with a :class:`GameState` as the single source of
truth. Presentation collaborators are injected and only ever receive
snapshots:

- ``sound``: a :class:`SoundManager` (anything with ``play`` and ``play_narration``)
- ``on_threat_level_change(level)``
- ``on_scene_change(act, scene)``
- ``on_story_state_change(snapshot)``
- ``on_data_point(data_point)``
"""

from __future__ import annotations

from typing import Callable, Optional

from astrolab.game_state import GameState, Phase, StorySnapshot, ThreatLevel, threat_level_for_act
from astrolab.logger import get_logger
from astrolab.sounds import SoundManager
from astrolab.story import Choice, DataPoint, StoryContent, StoryNode
from astrolab.story_schema import format_key, is_positive_int

logger = get_logger(__name__)


class StoryError(Exception):
    """Base class for story engine failures."""


class NodeNotFoundError(StoryError):
    """Raised when the content table has no node for a requested key."""

    def __init__(self, act: int, scene: int) -> None:
        super().__init__(f"Story node not found: Act {act}, Scene {scene}")
        self.act = act
        self.scene = scene


class InvalidChoiceError(StoryError):
    """Raised when a choice does not belong to the current node."""


class PlaythroughEndedError(StoryError):
    """Raised when a choice is applied after an ending was reached."""


class StoryEngine:
    def __init__(
        self,
        content: StoryContent,
        *,
        sound: Optional[SoundManager] = None,
        on_threat_level_change: Optional[Callable[[ThreatLevel], None]] = None,
        on_scene_change: Optional[Callable[[int, int], None]] = None,
        on_story_state_change: Optional[Callable[[StorySnapshot], None]] = None,
        on_data_point: Optional[Callable[[DataPoint], None]] = None,
    ) -> None:
        self.content = content
        self.sound = sound
        self.on_threat_level_change = on_threat_level_change
        self.on_scene_change = on_scene_change
        self.on_story_state_change = on_story_state_change
        self.on_data_point = on_data_point
        self.state = GameState()
        self.current_node: Optional[StoryNode] = None
        self.phase = Phase.DIALOGUE
        self.threat_level = ThreatLevel.SAFE
        self.dialogue_index = 0

    # ---------- Lifecycle ----------
    def start(self) -> StoryNode:
        return self.load_node(self.state.current_act, self.state.current_scene)

    def load_node(self, act: int, scene: int) -> StoryNode:
        if self.ended:
            raise PlaythroughEndedError("The playthrough has ended; replay to load another node.")
        if not (is_positive_int(act) and is_positive_int(scene)):
            raise ValueError(f"act and scene must be positive integers (got {act!r}, {scene!r}).")
        node = self.content.find(act, scene)
        if node is None:
            logger.error("Story node not found: Act %s, Scene %s", act, scene)
            raise NodeNotFoundError(act, scene)

        self.current_node = node
        self.state.current_act, self.state.current_scene = act, scene
        self.phase = Phase.DIALOGUE
        self.dialogue_index = 0
        logger.debug("Loaded %s (%s)", format_key(node.key), node.character)

        if scene == 1:
            self._play("newAct")
            if self.sound is not None:
                self.sound.play_narration(f"act{act}")
        if act >= 3:
            self._play("impactWarning")
        if node.data_point is not None:
            self.state.record_data_point(node.data_point)
            if self.on_data_point is not None:
                self.on_data_point(node.data_point)

        self._emit_position(act, scene)
        self._emit_snapshot(
            StorySnapshot(act, scene, self.state.last_outcome, node.data_point)
        )
        return node

    def complete_dialogue(self) -> None:
        if self.phase is not Phase.DIALOGUE:
            return
        if self.current_node is not None:
            self.dialogue_index = len(self.current_node.dialogue)
        self.phase = Phase.AWAITING_CHOICE

    # ---------- Choices ----------
    @property
    def choices(self):
        if self.current_node is None or self.ended:
            return ()
        return self.current_node.choices

    def choose(self, index: int) -> GameState:
        """Apply the current node's choice at zero-based ``index``."""
        choices = self.choices
        if not 0 <= index < len(choices):
            raise InvalidChoiceError(f"No choice #{index + 1} at this point in the story.")
        return self.apply_choice(choices[index])

    def apply_choice(self, choice: Choice) -> GameState:
        if self.ended:
            raise PlaythroughEndedError("The playthrough has ended; replay to choose again.")
        node = self.current_node
        if node is None:
            raise InvalidChoiceError("No story node is loaded.")
        if not any(candidate is choice for candidate in node.choices):
            raise InvalidChoiceError(
                f"Choice '{choice.outcome}' does not belong to {format_key(node.key)}."
            )

        self._play("choiceSelect")
        path_key = self.state.record_choice(choice.outcome, choice.next_act, choice.next_scene)
        act, scene = self.state.key
        logger.info("Choice recorded: %s -> %s", choice.outcome, format_key((act, scene)))
        self._emit_snapshot(StorySnapshot(act, scene, choice.outcome, node.data_point))

        if choice.is_ending:
            logger.info("Ending reached; unlocked %s (%s)", path_key, self.state.summary())
            self.phase = Phase.ENDED
            self._emit_position(act, scene)
            return self.state

        self.load_node(act, scene)
        return self.state

    # ---------- Endings ----------
    @property
    def ended(self) -> bool:
        return self.state.ended

    def replay(self) -> GameState:
        self.state = self.state.fresh()
        self.current_node = None
        self.phase = Phase.DIALOGUE
        logger.info("Starting new playthrough (%d paths unlocked)", len(self.state.unlocked_paths))
        self._emit_snapshot(StorySnapshot(*self.state.key))
        self.start()
        return self.state

    def snapshot(self) -> GameState:
        return self.state.copy()

    # ---------- Signals ----------
    def _play(self, name: str) -> None:
        if self.sound is not None:
            self.sound.play(name)

    def _emit_position(self, act: int, scene: int) -> None:
        self.threat_level = threat_level_for_act(act)
        if self.on_threat_level_change is not None:
            self.on_threat_level_change(self.threat_level)
        if self.on_scene_change is not None:
            self.on_scene_change(act, scene)

    def _emit_snapshot(self, snapshot: StorySnapshot) -> None:
        if self.on_story_state_change is not None:
            self.on_story_state_change(snapshot)
