"""Typewriter dialogue reveal."""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Callable, Optional, Sequence

from astrolab.text import emit_print

WriteFunc = Callable[[str], None]


def _write_stdout(text: str) -> None:
    emit_print(text, end="", flush=True)


class DialogueStep(str, Enum):
    SKIPPED = "skipped"
    NEXT_LINE = "next_line"
    COMPLETE = "complete"


class DialogueBox:
    """Reveal lines one at a time.

    ``advance`` mirrors the single dialogue button: it finishes a line that is
    still typing, moves to the next line, or reports completion after the
    last one. Beginning a new sequence cancels the reveal task of the previous
    one so stale text is never written.
    """

    def __init__(
        self,
        *,
        delay: float = 0.0,
        write: WriteFunc = _write_stdout,
        format_line: Callable[[str], str] = lambda line: line,
        on_complete: Optional[Callable[[], None]] = None,
    ) -> None:
        self.delay = max(float(delay), 0.0)
        self.write = write
        self.format_line = format_line
        self.on_complete = on_complete
        self.lines: list[str] = []
        self.index = 0
        self.displayed = ""
        self.typing = False
        self.complete = False
        self._task: Optional[asyncio.Task] = None
        self._current = ""

    @property
    def current_line(self) -> Optional[str]:
        if 0 <= self.index < len(self.lines):
            return self.lines[self.index]
        return None

    def begin(self, lines: Sequence[str]) -> None:
        self.cancel()
        self.lines = list(lines)
        self.index = 0
        self.complete = False
        if not self.lines:
            self._finish()
            return
        self._start_line()

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
        self.typing = False

    def skip(self) -> bool:
        """Finish the line being typed. Returns False when nothing was typing."""
        if not self.typing:
            return False
        self.cancel()
        remainder = self._current[len(self.displayed):]
        self.displayed = self._current
        self.write(remainder + "\n")
        return True

    def advance(self) -> DialogueStep:
        if self.complete:
            return DialogueStep.COMPLETE
        if self.skip():
            return DialogueStep.SKIPPED
        if self.index < len(self.lines) - 1:
            self.index += 1
            self._start_line()
            return DialogueStep.NEXT_LINE
        self._finish()
        return DialogueStep.COMPLETE

    async def wait_revealed(self) -> None:
        task = self._task
        if task is None or task.done():
            return
        await asyncio.wait({task})

    def _start_line(self) -> None:
        self.cancel()
        self._current = self.format_line(self.lines[self.index])
        self.displayed = ""
        if self.delay <= 0:
            self.displayed = self._current
            self.write(self._current + "\n")
            return
        self.typing = True
        self._task = asyncio.get_running_loop().create_task(self._reveal(self._current))

    async def _reveal(self, text: str) -> None:
        for char in text:
            self.displayed += char
            self.write(char)
            await asyncio.sleep(self.delay)
        self.typing = False
        self.write("\n")

    def _finish(self) -> None:
        self.cancel()
        self.complete = True
        if self.on_complete is not None:
            self.on_complete()
