import asyncio
import random

import pytest

from astrolab.game_state import GameState
from astrolab.oracle import (
    CONFIDENCES,
    FINAL_PREDICTIONS,
    RISKS,
    SUGGESTIONS,
    ask_oracle,
    confidence_for_act,
    final_prediction,
    format_prediction,
    generate_prediction,
)
from astrolab.report import build_report
from astrolab.story import PathInfo, StoryContent


@pytest.mark.parametrize(
    ("act", "expected"),
    [(1, "Low"), (2, "Moderate"), (3, "High"), (4, "Very High"), (9, "Very High"), (0, "Low")],
)
def test_confidence_for_act(act: int, expected: str) -> None:
    assert confidence_for_act(act) == expected


def test_confidence_never_decreases_with_act() -> None:
    ranks = [CONFIDENCES.index(confidence_for_act(act)) for act in range(1, 8)]
    assert ranks == sorted(ranks)


def test_predictions_stay_in_fixed_domain() -> None:
    rng = random.Random(7)
    for act in range(1, 6):
        prediction = generate_prediction(act, rng)
        assert prediction.risk in RISKS
        assert prediction.suggestion in SUGGESTIONS
        assert prediction.confidence == confidence_for_act(act)
    assert final_prediction(rng) in FINAL_PREDICTIONS


def test_seeded_predictions_repeat() -> None:
    first = generate_prediction(2, random.Random(11))
    second = generate_prediction(2, random.Random(11))
    assert (first.risk, first.suggestion) == (second.risk, second.suggestion)


def test_ask_oracle_without_delay() -> None:
    prediction = asyncio.run(ask_oracle(3, random.Random(1), delay=0))
    lines = format_prediction(prediction)
    assert lines[0] == "THE ORACLE // PREDICTIVE ANALYSIS SYSTEM"
    assert f"CONFIDENCE: {prediction.confidence}" in lines[1]


def test_report_without_matching_path_uses_defaults() -> None:
    story = StoryContent(title="Bare", nodes=[])
    state = GameState()
    state.record_choice("hold_position", 2, None)
    state.record_choice("end_mystery", 5, None)
    lines = build_report(story, state, random.Random(0))
    assert lines[0] == "MISSION COMPLETE"
    assert lines[1] == "Your journey has ended."
    assert "  —" in lines
    assert lines[lines.index("AI ORACLE ANALYSIS") + 1].strip() in FINAL_PREDICTIONS
    assert lines[-1] == "PATHS UNLOCKED: 1 / 3"


def test_report_counts_against_declared_paths() -> None:
    story = StoryContent(
        title="Two",
        nodes=[],
        paths={
            "phoenix_path": PathInfo("phoenix_path", "PHOENIX", "Saved.", "🔥"),
            "aegis_path": PathInfo("aegis_path", "AEGIS"),
        },
    )
    state = GameState(["aegis_path"])
    state.record_choice("end_phoenix", 5, None)
    lines = build_report(story, state)
    assert lines[:3] == ["🔥", "PHOENIX", "Saved."]
    assert lines[-1] == "PATHS UNLOCKED: 2 / 2"
