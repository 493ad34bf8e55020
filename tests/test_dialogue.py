import asyncio

from astrolab.dialogue import DialogueBox, DialogueStep


def make_box(delay: float = 0.0):
    written = []
    completed = []
    box = DialogueBox(delay=delay, write=written.append, on_complete=lambda: completed.append(True))
    return box, written, completed


def test_instant_lines_advance_then_complete() -> None:
    box, written, completed = make_box()
    box.begin(["First line.", "Second line."])
    assert written == ["First line.\n"]
    assert box.current_line == "First line."

    assert box.advance() is DialogueStep.NEXT_LINE
    assert written[-1] == "Second line.\n"
    assert not box.complete

    assert box.advance() is DialogueStep.COMPLETE
    assert box.complete
    assert completed == [True]
    assert box.advance() is DialogueStep.COMPLETE
    assert completed == [True]


def test_empty_dialogue_completes_immediately() -> None:
    box, written, completed = make_box()
    box.begin([])
    assert box.complete
    assert written == []
    assert completed == [True]


def test_skip_finishes_the_typing_line() -> None:
    async def scenario():
        box, written, _ = make_box(delay=0.05)
        box.begin(["Impact probability rising."])
        await asyncio.sleep(0.12)
        assert box.typing
        assert 0 < len(box.displayed) < len("Impact probability rising.")

        assert box.advance() is DialogueStep.SKIPPED
        assert not box.typing
        assert box.displayed == "Impact probability rising."
        assert "".join(written) == "Impact probability rising.\n"
        assert box.skip() is False

    asyncio.run(scenario())


def test_reveal_runs_to_completion() -> None:
    async def scenario():
        box, written, _ = make_box(delay=0.001)
        box.begin(["Go."])
        await box.wait_revealed()
        assert not box.typing
        assert "".join(written) == "Go.\n"
        assert box.advance() is DialogueStep.COMPLETE

    asyncio.run(scenario())


def test_new_sequence_cancels_stale_reveal() -> None:
    async def scenario():
        box, written, _ = make_box(delay=0.05)
        box.begin(["Old text that should never finish."])
        await asyncio.sleep(0.06)
        stale = "".join(written)

        box.delay = 0.0
        box.begin(["New node."])
        await asyncio.sleep(0.15)
        assert "".join(written) == stale + "New node.\n"
        assert box.current_line == "New node."

    asyncio.run(scenario())


def test_format_line_applies_before_writing() -> None:
    written = []
    box = DialogueBox(write=written.append, format_line=str.upper)
    box.begin(["quiet"])
    assert written == ["QUIET\n"]
