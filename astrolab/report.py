"""End-of-playthrough timeline report."""

from __future__ import annotations

import random
from typing import List, Optional

from astrolab.game_state import GameState
from astrolab.oracle import final_prediction
from astrolab.story import PathInfo, StoryContent
from astrolab.story_schema import is_ending_outcome, path_key_for_outcome
from astrolab.text import humanize_outcome

DEFAULT_ENDING_NAME = "MISSION COMPLETE"
DEFAULT_ENDING_DESCRIPTION = "Your journey has ended."


def resolve_path_info(story: StoryContent, state: GameState) -> Optional[PathInfo]:
    outcome = state.last_outcome
    if not outcome or not is_ending_outcome(outcome):
        return None
    return story.paths.get(path_key_for_outcome(outcome))


def build_report(
    story: StoryContent, state: GameState, rng: Optional[random.Random] = None
) -> List[str]:
    info = resolve_path_info(story, state)
    lines: List[str] = []
    if info is not None and info.badge:
        lines.append(info.badge)
    lines.append(info.name if info is not None else DEFAULT_ENDING_NAME)
    lines.append(info.description if info is not None and info.description else DEFAULT_ENDING_DESCRIPTION)

    lines.append("")
    lines.append("MISSION DATA")
    if state.data_collected:
        for key, value in state.data_collected.items():
            lines.append(f"  {key.upper()}: {value}")
    else:
        lines.append("  —")

    lines.append("")
    lines.append("DECISION TIMELINE")
    for outcome in state.choice_history:
        lines.append(f"  ▸ {humanize_outcome(outcome)}")

    lines.append("")
    lines.append("AI ORACLE ANALYSIS")
    lines.append(f"  {final_prediction(rng)}")
    lines.append("  [VERIFIED]")

    lines.append("")
    lines.append(f"PATHS UNLOCKED: {len(state.unlocked_paths)} / {story.path_count}")
    return lines
