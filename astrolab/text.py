"""Terminal text helpers: inline markup, typewriter pacing, layout."""

from __future__ import annotations

import asyncio
import re

from astrolab.settings import Settings

BASE_LINE_WIDTH = 72
BASE_TEXT_DELAY = 0.03
ANSI_RESET = "\033[0m"

INLINE_COLOR_MAP = {
    "asteroid": "\033[33m",
    "earthquake": "\033[35m",
    "tsunami": "\033[34m",
    "crater": "\033[33m",
    "data": "\033[36m",
    "danger": "\033[31m",
}
INLINE_FORMAT_PATTERN = re.compile(r"\{([a-zA-Z_]+):([^}]+)\}")

DATA_POINT_ICONS = {
    "asteroid": "☄",
    "earthquake": "⚠",
    "tsunami": "〰",
    "crater": "◯",
}
CHARACTER_ICONS = {
    "narrator": "▣",
    "watcher": "◉",
    "seeker": "◈",
    "defender": "◆",
}


def emit_print(*args, **kwargs) -> None:
    print(*args, **kwargs)


async def read_input(prompt: str = "") -> str:
    return await asyncio.to_thread(input, prompt)


def print_formatted(text: str, *, plain: bool = False) -> str:
    if not text or "{" not in text:
        return text

    if plain:
        return INLINE_FORMAT_PATTERN.sub(lambda match: match.group(2), text)

    def replace(match: re.Match[str]) -> str:
        kind = match.group(1).strip().lower()
        value = match.group(2)
        color = INLINE_COLOR_MAP.get(kind)
        if not color:
            return value
        return f"{color}{value}{ANSI_RESET}"

    return INLINE_FORMAT_PATTERN.sub(replace, text)


def compute_text_delay(settings: Settings) -> float:
    try:
        speed = float(getattr(settings, "text_speed", 1.0))
    except (TypeError, ValueError):
        speed = 1.0
    if getattr(settings, "reduce_animations", False):
        return 0.0
    if speed <= 0:
        return 0.0
    return BASE_TEXT_DELAY / max(speed, 0.1)


def format_heading(text: str, settings: Settings) -> str:
    return text.upper() if getattr(settings, "high_contrast", False) else text


def separator(width: int, settings: Settings, *, primary: bool) -> str:
    if getattr(settings, "high_contrast", False):
        char = "#" if primary else "="
    else:
        char = "=" if primary else "-"
    return char * width


def humanize_outcome(outcome: str) -> str:
    return outcome.replace("_", " ").upper()
