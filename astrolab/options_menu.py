"""Numbered options menu for the terminal game."""

from __future__ import annotations

import inspect
from pathlib import Path
from typing import Awaitable, Callable, Tuple

from astrolab.settings import SETTINGS_PATH, Settings, save_settings

InputFunc = Callable[[str], "str | Awaitable[str]"]
PrintFunc = Callable[[str], None]

_ENTRIES = (
    ("audio_master", "Master Volume", "volume"),
    ("audio_sfx", "SFX Volume", "volume"),
    ("audio_narration", "Narration Volume", "volume"),
    ("text_speed", "Text Speed", "text_speed"),
    ("reduce_animations", "Reduce Animations", "toggle"),
    ("caption_audio_cues", "Caption Audio Cues", "toggle"),
    ("high_contrast", "High Contrast", "toggle"),
    ("offline", "Offline Mode", "toggle"),
)

_RANGES = {
    "volume": ("Enter volume (0-100, blank to cancel): ", 100.0),
    "text_speed": ("Enter text speed (0-4, 0 = instant, blank to cancel): ", 1.0),
}


def format_value(value, entry_type: str) -> str:
    if entry_type == "volume":
        return f"{float(value) * 100:.0f}%"
    if entry_type == "toggle":
        return "On" if value else "Off"
    speed = float(value)
    return "Instant" if speed <= 0 else f"{speed:.2f}x"


async def _read(input_func: InputFunc, prompt: str) -> str:
    result = input_func(prompt)
    if inspect.isawaitable(result):
        result = await result
    return result or ""


async def _edit_entry(
    settings: Settings, field: str, entry_type: str, input_func: InputFunc, print_func: PrintFunc
) -> bool:
    before = getattr(settings, field)
    if entry_type == "toggle":
        setattr(settings, field, not before)
        return True

    prompt, divisor = _RANGES[entry_type]
    raw = (await _read(input_func, prompt)).strip()
    if not raw:
        return False
    try:
        value = float(raw) / divisor
    except ValueError:
        print_func("Enter a number.")
        return False
    setattr(settings, field, value)
    settings.clamp()
    return getattr(settings, field) != before


async def options_menu(
    current: Settings,
    *,
    path: Path | str = SETTINGS_PATH,
    input_func: InputFunc = input,
    print_func: PrintFunc = print,
) -> Tuple[Settings, bool]:
    """Edit settings until the player backs out; return ``(settings, changed)``.

    Changes are written to ``path`` once, on exit.
    """
    working = current.copy()
    changed = False

    while True:
        print_func("")
        print_func("=== Options ===")
        for idx, (field, label, entry_type) in enumerate(_ENTRIES, start=1):
            print_func(f"  {idx}. {label}: {format_value(getattr(working, field), entry_type)}")
        print_func("  R. Reset all    B. Back")

        command = (await _read(input_func, "Options> ")).strip().lower()
        if command in {"b", "back", "q"}:
            break
        if command in {"r", "reset"}:
            defaults = Settings(nasa_api_key=working.nasa_api_key, request_timeout=working.request_timeout)
            changed = changed or defaults != working
            working = defaults
            continue
        if command.isdigit() and 1 <= int(command) <= len(_ENTRIES):
            field, _, entry_type = _ENTRIES[int(command) - 1]
            if await _edit_entry(working, field, entry_type, input_func, print_func):
                changed = True
            continue
        print_func("Pick an option number, R, or B.")

    if not changed:
        print_func("[Settings] No changes made.")
        return current, False
    saved = save_settings(working, path)
    print_func(f"[Settings] Saved to {Path(path).name}.")
    return saved, True
