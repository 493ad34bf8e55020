#!/usr/bin/env python3
"""
AstroLab: terminal edition
- Story mode: branching dialogue through the IMPACTOR-2025 crisis; three endings to unlock.
- Sandbox mode: tweak diameter, velocity and lead time and run the impact simulator.
- Live NASA/USGS data when reachable; fixed fallback records otherwise.
Usage: astrolab [story.json] [--offline] [--instant] [--log-level DEBUG]
"""

import argparse
import asyncio
import math
import random
import sys
import textwrap
from pathlib import Path

if __package__ in (None, ""):
    sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from astrolab.dialogue import DialogueBox
from astrolab.earth import background_texture
from astrolab.game_state import ThreatLevel
from astrolab.logger import LOG_LEVELS, get_logger, setup_logging
from astrolab.nasa import AsteroidData, calculate_impact_energy, fallback_asteroid, fetch_asteroid_data
from astrolab.options_menu import options_menu
from astrolab.oracle import ANALYSIS_DELAY, ask_oracle, format_prediction
from astrolab.report import build_report
from astrolab.sandbox import (
    DEFAULT_DIAMETER,
    DEFAULT_LEAD_MONTHS,
    DEFAULT_VELOCITY,
    SandboxParams,
    format_result,
    run_simulation,
)
from astrolab.settings import SETTINGS_PATH, Settings, load_settings
from astrolab.sounds import SoundManager
from astrolab.story import DEFAULT_STORY_PATH, StoryContent, load_story
from astrolab.story_engine import NodeNotFoundError, StoryEngine
from astrolab.text import (
    BASE_LINE_WIDTH,
    CHARACTER_ICONS,
    DATA_POINT_ICONS,
    compute_text_delay,
    emit_print,
    format_heading,
    humanize_outcome,
    print_formatted,
    read_input,
    separator,
)
from astrolab.usgs import (
    fallback_earthquake,
    fallback_elevation,
    fetch_equivalent_earthquake,
    simulate_tsunami,
    tsunami_for_elevation,
)

logger = get_logger(__name__)


async def fetch_tracking_target(settings: Settings) -> AsteroidData:
    if settings.offline:
        return fallback_asteroid()
    asteroid = await asyncio.to_thread(
        fetch_asteroid_data, settings.nasa_api_key, timeout=settings.request_timeout
    )
    logger.info("NASA asteroid data: %s", asteroid)
    return asteroid


def render_header(engine: StoryEngine, settings: Settings) -> None:
    state = engine.state
    width = BASE_LINE_WIDTH
    emit_print("\n" + separator(width, settings, primary=True))
    emit_print(
        format_heading(
            f"ACT {state.current_act} - SCENE {state.current_scene}"
            f"    THREAT: {engine.threat_level.value}",
            settings,
        )
    )
    emit_print(separator(width, settings, primary=False))
    node = engine.current_node
    if node.data_point is not None:
        icon = DATA_POINT_ICONS.get(node.data_point.type, "◆")
        emit_print(f"{icon} DATA UPLINK: {node.data_point.value}")
        emit_print("")
    info = engine.content.character(node.character)
    icon = CHARACTER_ICONS.get(node.character, "◆")
    emit_print(f"{icon} {info.name}" + (f" — {info.title}" if info.title else ""))


async def run_dialogue(engine: StoryEngine, settings: Settings) -> None:
    plain = settings.high_contrast
    box = DialogueBox(
        delay=compute_text_delay(settings),
        format_line=lambda line: print_formatted(line, plain=plain),
    )
    box.begin(engine.current_node.dialogue)
    try:
        while not box.complete:
            await read_input("")
            box.advance()
    finally:
        box.cancel()
    engine.complete_dialogue()


def render_choices(engine: StoryEngine, settings: Settings) -> None:
    emit_print(separator(BASE_LINE_WIDTH, settings, primary=False))
    for idx, choice in enumerate(engine.choices, start=1):
        text = format_heading(choice.text, settings)
        if settings.high_contrast:
            emit_print(f"  [{idx}] {text}")
        else:
            emit_print(f"  {idx}. {text}")
    emit_print("  O. Oracle    D. Data    H. History    Q. Quit to Title")


def show_data(engine: StoryEngine) -> None:
    if not engine.state.data_collected:
        emit_print("No data collected yet.")
        return
    for key, value in engine.state.data_collected.items():
        emit_print(f"  {key.upper()}: {value}")


def show_history(engine: StoryEngine) -> None:
    if not engine.state.choice_history:
        emit_print("No decisions yet.")
        return
    for idx, outcome in enumerate(engine.state.choice_history, start=1):
        emit_print(f"  {idx}. {humanize_outcome(outcome)}")


async def consult_oracle(engine: StoryEngine, settings: Settings, rng: random.Random) -> None:
    emit_print("ANALYZING DATA STREAMS...")
    delay = 0.0 if settings.reduce_animations else ANALYSIS_DELAY
    prediction = await ask_oracle(engine.state.current_act, rng, delay=delay)
    for line in format_prediction(prediction):
        emit_print(line)


async def show_report(engine: StoryEngine, sound: SoundManager, rng: random.Random) -> None:
    sound.play("badgeUnlock")
    emit_print("\n" + "=" * BASE_LINE_WIDTH)
    for line in build_report(engine.content, engine.state, rng):
        for wrapped in textwrap.wrap(line, width=BASE_LINE_WIDTH) or [""]:
            emit_print(wrapped)
    emit_print("=" * BASE_LINE_WIDTH)


async def prompt_replay() -> bool:
    while True:
        response = (await read_input("Replay to unlock another path? (y/n): ")).strip().lower()
        if response in {"y", "yes"}:
            return True
        if response in {"n", "no"}:
            return False
        emit_print("Enter Y or N.")


async def play_story(story: StoryContent, settings: Settings, sound: SoundManager, rng: random.Random) -> None:
    def announce_threat(level: ThreatLevel) -> None:
        logger.debug("Backdrop: %s", background_texture(level).description)

    engine = StoryEngine(
        story,
        sound=sound,
        on_threat_level_change=announce_threat,
        on_story_state_change=lambda snapshot: logger.debug("Story state: %s", snapshot),
    )
    try:
        engine.start()
    except NodeNotFoundError as exc:
        emit_print(f"[!] {exc}. Returning to title.")
        return

    while True:
        if engine.ended:
            await show_report(engine, sound, rng)
            if not await prompt_replay():
                return
            emit_print("Starting new playthrough...")
            engine.replay()
            continue

        render_header(engine, settings)
        await run_dialogue(engine, settings)
        render_choices(engine, settings)

        while True:
            choice = (await read_input("> ")).strip().lower()
            if choice == "q":
                return
            if choice == "o":
                await consult_oracle(engine, settings, rng)
                continue
            if choice == "d":
                show_data(engine)
                continue
            if choice == "h":
                show_history(engine)
                continue
            if not choice.isdigit() or not (1 <= int(choice) <= len(engine.choices)):
                emit_print("Pick a valid choice number, or O/D/H/Q.")
                continue
            try:
                engine.choose(int(choice) - 1)
            except NodeNotFoundError as exc:
                emit_print(f"[!] {exc}. Returning to title.")
                return
            break


async def prompt_number(label: str, default: float) -> float:
    while True:
        raw = (await read_input(f"{label} [{default}]: ")).strip()
        if not raw:
            return default
        try:
            value = float(raw)
        except ValueError:
            value = math.nan
        if math.isfinite(value):
            return value
        emit_print("Enter a number, or press Enter for the default.")


async def play_sandbox(settings: Settings) -> None:
    emit_print("\nADJUST PARAMETERS AND RUN CUSTOM SIMULATIONS")
    emit_print(f"THREAT: {ThreatLevel.SAFE.value}")
    diameter = await prompt_number("Asteroid diameter (100-2000 m)", DEFAULT_DIAMETER)
    velocity = await prompt_number("Velocity (10-50 km/s)", DEFAULT_VELOCITY)
    months = await prompt_number("Deflection time (1-12 months)", DEFAULT_LEAD_MONTHS)
    result = run_simulation(SandboxParams(diameter, velocity, int(months)))
    for line in format_result(result):
        emit_print(line)

    energy = calculate_impact_energy(result.params.diameter, result.params.velocity)
    if settings.offline:
        quake = fallback_earthquake(energy)
    else:
        quake = await asyncio.to_thread(
            fetch_equivalent_earthquake, energy, timeout=settings.request_timeout
        )
    emit_print(f"  COMPARABLE EARTHQUAKE: M{quake.magnitude} ({quake.location})")

    site = (await read_input("Impact site lat,lon for tsunami model (blank to skip): ")).strip()
    if not site:
        return
    try:
        lat, lon = (float(part) for part in site.split(","))
    except ValueError:
        emit_print("Expected two numbers like 36.5,-40.2.")
        return
    if settings.offline:
        tsunami = tsunami_for_elevation(fallback_elevation(lat, lon), result.params.diameter)
    else:
        tsunami = await asyncio.to_thread(
            simulate_tsunami, lat, lon, result.params.diameter, timeout=settings.request_timeout
        )
    if tsunami.wave_height <= 0:
        emit_print(f"  TSUNAMI: {tsunami.casualties}")
        return
    emit_print(
        f"  TSUNAMI: {tsunami.wave_height:.0f} m waves · {tsunami.affected_range:,.0f} km reach"
        f" · {tsunami.arrival_time} min arrival"
    )


async def main(argv=None):
    parser = argparse.ArgumentParser(description="Play AstroLab in the terminal.")
    parser.add_argument("story", nargs="?", default=str(DEFAULT_STORY_PATH))
    parser.add_argument("--settings", default=str(SETTINGS_PATH), help="Path to settings.json.")
    parser.add_argument("--offline", action="store_true", help="Skip live NASA/USGS requests.")
    parser.add_argument("--instant", action="store_true", help="Print dialogue without the typewriter.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the Oracle.")
    parser.add_argument("--log-level", default="WARNING", choices=LOG_LEVELS)
    parser.add_argument("--log-file", default=None)
    args = parser.parse_args(argv)

    setup_logging(args.log_level, args.log_file)
    try:
        story = load_story(args.story)
    except (OSError, ValueError) as exc:
        emit_print(f"[!] Could not load story: {exc}", file=sys.stderr)
        return 1

    settings = load_settings(args.settings)
    if args.offline:
        settings.offline = True
    if args.instant:
        settings.reduce_animations = True
    sound = SoundManager(settings, print_func=emit_print)
    rng = random.Random(args.seed)

    target = await fetch_tracking_target(settings)
    while True:
        emit_print(f"\n=== {story.title} ===")
        emit_print(
            f"Tracking {target.name}: {target.diameter:.0f} m · {target.velocity} km/s · "
            f"close approach {target.close_approach_date}"
        )
        emit_print("  1. Story Mode")
        emit_print("  2. Sandbox Mode")
        emit_print("  3. Options")
        emit_print("  Q. Quit")
        selection = (await read_input("> ")).strip().lower()
        if selection in {"q", "quit"}:
            emit_print("Goodbye!")
            return 0
        if selection == "1":
            await play_story(story, settings, sound, rng)
            continue
        if selection == "2":
            await play_sandbox(settings)
            continue
        if selection == "3":
            settings, _ = await options_menu(
                settings, path=args.settings, input_func=read_input, print_func=emit_print
            )
            sound.settings = settings
            continue
        emit_print("Pick 1, 2, 3, or Q.")


def run() -> None:
    try:
        sys.exit(asyncio.run(main()))
    except (KeyboardInterrupt, EOFError):
        emit_print("\n[Interrupted] Bye.")


if __name__ == "__main__":
    run()
