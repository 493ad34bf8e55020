import logging

import pytest

from astrolab.game_state import GameState, Phase, StorySnapshot, ThreatLevel, threat_level_for_act
from astrolab.settings import Settings
from astrolab.sounds import SoundManager
from astrolab.story import Choice, DataPoint, StoryContent, StoryNode, build_story
from astrolab.story_engine import (
    InvalidChoiceError,
    NodeNotFoundError,
    PlaythroughEndedError,
    StoryEngine,
)


def node(act, scene, choices, *, character="narrator", data_point=None, dialogue=None):
    entry = {
        "act": act,
        "scene": scene,
        "character": character,
        "dialogue": dialogue if dialogue is not None else [f"Line for {act}.{scene}"],
        "choices": choices,
    }
    if data_point is not None:
        entry["dataPoint"] = data_point
    return entry


def choice(outcome, next_act, next_scene=None, text=None):
    entry = {"text": text or outcome.replace("_", " "), "outcome": outcome, "nextAct": next_act}
    if next_scene is not None:
        entry["nextScene"] = next_scene
    return entry


def scenario_story() -> StoryContent:
    return build_story(
        {
            "title": "Scenario",
            "acts": [
                node(1, 1, [choice("kinetic_choice", 2, 1)]),
                node(
                    2,
                    1,
                    [choice("end_phoenix", 5), choice("end_guardian", 5)],
                    character="defender",
                ),
            ],
        }
    )


def data_story() -> StoryContent:
    return build_story(
        {
            "title": "Data",
            "acts": [
                node(1, 1, [choice("look_again", 1, 2)], data_point={"type": "asteroid", "value": "A"}),
                node(1, 2, [choice("to_act_three", 3, 1)], data_point={"type": "earthquake", "value": "M8"}),
                node(3, 1, [choice("end_aegis", 5)], data_point={"type": "asteroid", "value": "B"}),
            ],
        }
    )


class RecordingSound:
    def __init__(self):
        self.events = []

    def play(self, name):
        self.events.append(name)

    def play_narration(self, act_id):
        self.events.append(f"narration:{act_id}")


def test_scenario_kinetic_then_phoenix_ending() -> None:
    engine = StoryEngine(scenario_story())
    engine.start()
    assert engine.state.key == (1, 1)
    assert engine.phase is Phase.DIALOGUE

    engine.complete_dialogue()
    state = engine.apply_choice(engine.current_node.choices[0])
    assert state.key == (2, 1)
    assert state.choice_history == ["kinetic_choice"]
    assert not engine.ended
    assert engine.phase is Phase.DIALOGUE

    engine.complete_dialogue()
    state = engine.choose(0)
    assert engine.ended
    assert state.ended
    assert state.unlocked_paths == {"phoenix_path"}
    assert state.current_act == 5
    assert state.current_scene == 1
    assert engine.choices == ()


def test_load_node_sets_current_for_every_node() -> None:
    story = data_story()
    engine = StoryEngine(story)
    for entry in story:
        loaded = engine.load_node(entry.act, entry.scene)
        assert loaded is entry
        assert engine.current_node is entry
        assert engine.state.key == (entry.act, entry.scene)
        assert engine.phase is Phase.DIALOGUE
        assert engine.dialogue_index == 0


@pytest.mark.parametrize(("act", "scene"), [(0, 1), (1, 0), (-2, 1), ("1", 1)])
def test_load_node_rejects_non_positive_keys(act, scene) -> None:
    engine = StoryEngine(scenario_story())
    with pytest.raises(ValueError):
        engine.load_node(act, scene)


def test_missing_node_is_logged_and_raised(caplog) -> None:
    engine = StoryEngine(scenario_story())
    engine.start()
    with caplog.at_level(logging.ERROR, logger="astrolab.story_engine"):
        with pytest.raises(NodeNotFoundError) as excinfo:
            engine.load_node(9, 9)
    assert (excinfo.value.act, excinfo.value.scene) == (9, 9)
    assert "Act 9, Scene 9" in caplog.text
    assert engine.current_node.key == (1, 1)


def test_choice_into_missing_node_surfaces_error() -> None:
    broken_choice = Choice("Jump", "jump_ahead", 7, 2)
    story = StoryContent(
        title="Broken",
        nodes=[StoryNode(1, 1, "narrator", ("Hello",), (broken_choice,))],
    )
    engine = StoryEngine(story)
    engine.start()
    with pytest.raises(NodeNotFoundError):
        engine.apply_choice(broken_choice)


def test_history_is_ordered_and_monotonic() -> None:
    engine = StoryEngine(data_story())
    engine.start()
    applied = []
    while not engine.ended:
        picked = engine.choices[0]
        engine.apply_choice(picked)
        applied.append(picked.outcome)
        assert len(engine.state.choice_history) == len(applied)
    assert engine.state.choice_history == applied == ["look_again", "to_act_three", "end_aegis"]


def test_choice_from_another_node_is_rejected_without_touching_history() -> None:
    story = data_story()
    engine = StoryEngine(story)
    engine.start()
    foreign = story.find(3, 1).choices[0]
    with pytest.raises(InvalidChoiceError):
        engine.apply_choice(foreign)
    assert engine.state.choice_history == []
    assert engine.state.key == (1, 1)
    assert not engine.state.unlocked_paths


def test_equal_choice_on_another_node_is_not_accepted() -> None:
    story = build_story(
        {
            "title": "Twins",
            "acts": [
                node(1, 1, [choice("hold", 1, 2)]),
                node(1, 2, [choice("hold", 1, 2), choice("end_aegis", 5)]),
            ],
        }
    )
    engine = StoryEngine(story)
    engine.start()
    twin = story.find(1, 2).choices[0]
    assert twin == engine.current_node.choices[0]
    with pytest.raises(InvalidChoiceError):
        engine.apply_choice(twin)
    assert engine.state.choice_history == []


def test_choose_rejects_out_of_range_index() -> None:
    engine = StoryEngine(scenario_story())
    engine.start()
    with pytest.raises(InvalidChoiceError):
        engine.choose(3)
    assert engine.state.choice_history == []


def test_applying_after_ending_raises() -> None:
    engine = StoryEngine(scenario_story())
    engine.start()
    engine.choose(0)
    ending = engine.current_node.choices[1]
    engine.apply_choice(ending)
    with pytest.raises(PlaythroughEndedError):
        engine.apply_choice(ending)
    assert engine.state.choice_history == ["kinetic_choice", "end_guardian"]
    assert engine.state.unlocked_paths == {"guardian_path"}


def test_load_node_after_ending_raises_until_replay() -> None:
    engine = StoryEngine(scenario_story())
    engine.start()
    engine.choose(0)
    engine.choose(0)
    with pytest.raises(PlaythroughEndedError):
        engine.load_node(2, 1)
    assert engine.ended
    assert engine.phase is Phase.ENDED
    assert engine.choices == ()
    assert engine.state.key == (5, 1)
    assert engine.state.choice_history == ["kinetic_choice", "end_phoenix"]

    engine.replay()
    assert not engine.ended
    assert engine.load_node(2, 1).key == (2, 1)


def test_replay_resets_progress_and_keeps_paths() -> None:
    engine = StoryEngine(scenario_story())
    engine.start()
    engine.choose(0)
    engine.choose(0)
    before = set(engine.state.unlocked_paths)

    state = engine.replay()
    assert state.key == (1, 1)
    assert state.choice_history == []
    assert state.data_collected == {}
    assert not state.ended
    assert engine.phase is Phase.DIALOGUE
    assert engine.current_node.key == (1, 1)
    assert before <= state.unlocked_paths

    engine.choose(0)
    engine.choose(0)
    assert engine.state.unlocked_paths == {"phoenix_path"}

    engine.replay()
    engine.choose(0)
    engine.choose(1)
    assert engine.state.unlocked_paths == {"phoenix_path", "guardian_path"}


@pytest.mark.parametrize(
    ("act", "expected"),
    [
        (1, ThreatLevel.WARNING),
        (2, ThreatLevel.WARNING),
        (3, ThreatLevel.CRITICAL),
        (4, ThreatLevel.CRITICAL),
        (5, ThreatLevel.CRITICAL),
        (12, ThreatLevel.CRITICAL),
    ],
)
def test_threat_level_for_act(act: int, expected: ThreatLevel) -> None:
    assert threat_level_for_act(act) is expected


def test_threat_level_starts_safe_and_follows_act() -> None:
    levels = []
    engine = StoryEngine(data_story(), on_threat_level_change=levels.append)
    assert engine.threat_level is ThreatLevel.SAFE
    engine.start()
    engine.choose(0)
    engine.choose(0)
    assert levels == [ThreatLevel.WARNING, ThreatLevel.WARNING, ThreatLevel.CRITICAL]
    assert engine.threat_level is ThreatLevel.CRITICAL


def test_ending_recomputes_threat_for_target_act() -> None:
    levels = []
    scenes = []
    engine = StoryEngine(
        scenario_story(),
        on_threat_level_change=levels.append,
        on_scene_change=lambda act, scene: scenes.append((act, scene)),
    )
    engine.start()
    engine.choose(0)
    assert engine.threat_level is ThreatLevel.WARNING
    engine.choose(0)
    assert engine.threat_level is ThreatLevel.CRITICAL
    assert levels == [ThreatLevel.WARNING, ThreatLevel.WARNING, ThreatLevel.CRITICAL]
    assert scenes == [(1, 1), (2, 1), (5, 1)]


def test_data_collected_keeps_latest_value_per_type() -> None:
    observed = []
    engine = StoryEngine(data_story(), on_data_point=observed.append)
    engine.start()
    assert engine.state.data_collected == {"asteroid": "A"}
    engine.choose(0)
    engine.choose(0)
    assert engine.state.data_collected == {"asteroid": "B", "earthquake": "M8"}
    assert observed == [
        DataPoint("asteroid", "A"),
        DataPoint("earthquake", "M8"),
        DataPoint("asteroid", "B"),
    ]


def test_sound_cues_follow_scene_and_act() -> None:
    sound = RecordingSound()
    engine = StoryEngine(data_story(), sound=sound)
    engine.start()
    engine.choose(0)
    engine.choose(0)
    assert sound.events == [
        "newAct",
        "narration:act1",
        "choiceSelect",
        "choiceSelect",
        "newAct",
        "narration:act3",
        "impactWarning",
    ]


def test_signals_report_position_and_node_left() -> None:
    scenes = []
    snapshots = []
    engine = StoryEngine(
        data_story(),
        on_scene_change=lambda act, scene: scenes.append((act, scene)),
        on_story_state_change=snapshots.append,
    )
    engine.start()
    engine.choose(0)

    assert scenes == [(1, 1), (1, 2)]
    assert snapshots[0] == StorySnapshot(1, 1, None, DataPoint("asteroid", "A"))
    # choice signal carries the data point of the node just left
    assert snapshots[1] == StorySnapshot(1, 2, "look_again", DataPoint("asteroid", "A"))
    assert snapshots[2] == StorySnapshot(1, 2, "look_again", DataPoint("earthquake", "M8"))


def test_snapshot_is_a_copy() -> None:
    engine = StoryEngine(scenario_story())
    engine.start()
    snapshot = engine.snapshot()
    snapshot.choice_history.append("tampered")
    snapshot.unlocked_paths.add("fake_path")
    assert engine.state.choice_history == []
    assert engine.state.unlocked_paths == set()


def test_complete_dialogue_moves_to_awaiting_choice() -> None:
    engine = StoryEngine(scenario_story())
    engine.start()
    engine.complete_dialogue()
    assert engine.phase is Phase.AWAITING_CHOICE
    assert engine.dialogue_index == len(engine.current_node.dialogue)


def test_duplicate_keys_resolve_to_first_node() -> None:
    first = StoryNode(1, 1, "narrator", ("first",), (Choice("Go", "end_phoenix", 5),))
    second = StoryNode(1, 1, "watcher", ("second",), ())
    engine = StoryEngine(StoryContent(title="Dupes", nodes=[first, second]))
    assert engine.start() is first


def test_game_state_record_choice_defaults_scene() -> None:
    state = GameState()
    assert state.record_choice("go_on", 3, None) is None
    assert state.key == (3, 1)
    assert state.record_choice("end_phoenix", 5, None) == "phoenix_path"
    assert state.record_choice("end_phoenix", 5, None) == "phoenix_path"
    assert state.unlocked_paths == {"phoenix_path"}
    assert state.to_dict()["choiceHistory"] == ["go_on", "end_phoenix", "end_phoenix"]


def test_sound_manager_scales_volume_and_captions() -> None:
    captions = []
    settings = Settings(audio_master=0.5, audio_sfx=0.5, caption_audio_cues=True)
    sound = SoundManager(settings, print_func=captions.append)
    assert sound.play("choiceSelect") == 0.125
    assert sound.play("missingCue") is None
    assert sound.play_narration("act2") == 0.4
    assert captions == ["[Audio Cue] Choice confirmed.", "[Audio Cue] Narration for act2."]
    assert [name for name, _ in sound.played] == ["choiceSelect", "narration/act2"]


def test_sound_manager_stays_quiet_when_muted() -> None:
    captions = []
    sound = SoundManager(Settings(audio_master=0.0, caption_audio_cues=True), print_func=captions.append)
    assert sound.play("newAct") == 0.0
    assert captions == []
