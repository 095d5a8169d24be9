"""Single-line parsing: typed fields, text-only fallback, descriptors and repeat-block headers."""

import pytest

from swimset.parser import extract_round_count, is_descriptor, parse_line


def _only_line(raw: str):
    parsed = parse_line(raw)
    assert parsed.repeat_count == 1
    assert len(parsed.lines) == 1
    return parsed.lines[0]


def test_reps_distance_stroke_sendoff() -> None:
    """'4x100 free @ 1:30' fills reps, distance, stroke and a 90s sendoff."""
    line = _only_line("4x100 free @ 1:30")
    assert (line.reps, line.distance) == (4, 100)
    assert line.stroke == "freestyle"
    assert line.mode is None
    assert line.interval_seconds == 90
    assert line.interval_kind == "sendoff"
    assert line.effort is None
    assert line.text == ""


def test_nested_repeat_collapses_reps() -> None:
    """'3x (4x25 @ :25)' is one line of 12x25."""
    line = _only_line("3x (4x25 @ :25)")
    assert (line.reps, line.distance) == (12, 25)
    assert (line.interval_seconds, line.interval_kind) == (25, "sendoff")
    assert line.text == ""


def test_effort_and_leftover_text() -> None:
    """The first effort keyword is taken; the rest of the words stay as text."""
    line = _only_line("8x50 @ :50 easy/fast by 25")
    assert (line.reps, line.distance) == (8, 50)
    assert line.interval_seconds == 50
    assert line.effort == "easy"
    assert line.text == "/fast by 25"


def test_descend_keeps_its_range_as_text() -> None:
    """'descend 1-4' sets the effort and keeps '1-4' as text."""
    line = _only_line("4x100 free @ 1:30 descend 1-4")
    assert line.effort == "descend"
    assert line.text == "1-4"


def test_stroke_and_mode_together() -> None:
    """Stroke and mode are both kept when a line names both."""
    line = _only_line("4x50 free drill @ 1:00")
    assert (line.stroke, line.mode, line.interval_seconds) == ("freestyle", "drill", 60)
    line = _only_line("200 IM drill")
    assert (line.reps, line.distance, line.stroke, line.mode) == (1, 200, "im", "drill")


def test_rest_interval_and_spaced_reps() -> None:
    """'6 x 50 back :15 rest' gives a 15s rest interval."""
    line = _only_line("6 x 50 back :15 rest")
    assert (line.reps, line.distance, line.stroke) == (6, 50, "backstroke")
    assert (line.interval_seconds, line.interval_kind) == (15, "rest")


def test_parenthetical_becomes_text() -> None:
    """A parenthetical note ends up in the line text."""
    line = _only_line("4x100 pull (light pull) @ 1:40")
    assert line.mode == "pull"
    assert line.interval_seconds == 100
    assert line.text == "light pull"


def test_repeated_stroke_name_is_not_kept_as_text() -> None:
    """'freestyle free' does not leave 'freestyle' behind as text."""
    line = _only_line("4x100 freestyle free")
    assert line.stroke == "freestyle"
    assert line.text == ""


def test_range_label_is_stripped() -> None:
    """A '1-2:' label is removed before the reps are read."""
    line = _only_line("1-2: 4x50 fly @ :55")
    assert (line.reps, line.distance, line.stroke, line.interval_seconds) == (4, 50, "butterfly", 55)


def test_total_lines() -> None:
    """'Total: 600' style lines count as one rep of that distance."""
    line = _only_line("Total: 600")
    assert (line.reps, line.distance, line.text) == (1, 600, "")
    line = _only_line("Preset: 1000")
    assert (line.reps, line.distance) == (1, 1000)


def test_text_only_lines_keep_full_text() -> None:
    """Lines without numbers become text-only lines holding the whole line."""
    line = _only_line("Focus on long strokes")
    assert line.is_text_only
    assert line.text == "Focus on long strokes"
    line = _only_line("A. Kick focus – 400")
    assert line.is_text_only
    assert line.text == "A. Kick focus – 400"


def test_zero_reps_is_text() -> None:
    """'0x100' is not a repeat and stays text."""
    line = _only_line("0x100 free")
    assert line.is_text_only
    assert line.text == "0x100 free"


@pytest.mark.parametrize("raw", ["9" * 5000 + "x100", "1" * 5000, "9" * 5000 + " rounds", "4x" + "5" * 5000])
def test_long_digit_runs_become_text(raw: str) -> None:
    """Numbers too long to be yardage fall back to a text-only line."""
    line = _only_line(raw)
    assert line.is_text_only
    assert line.text == raw


def test_descriptor_detection() -> None:
    """Only dash lines without reps or distance are descriptors."""
    raw = "– notes about previous set"
    parsed = parse_line(raw)
    assert parsed.lines[0].text == "notes about previous set"
    assert is_descriptor(raw, parsed)

    for raw in ("– 3x (4x25 @ :25)", "- 200 easy", "Focus on turns"):
        assert not is_descriptor(raw, parse_line(raw))


def test_dash_line_with_numbers_is_a_set() -> None:
    """A dash before a set does not hide its numbers."""
    line = _only_line("– 3x (4x25 @ :25)")
    assert (line.reps, line.distance) == (12, 25)


@pytest.mark.parametrize(
    "raw",
    [
        "",
        "   ",
        "@@@",
        "x x x",
        "((",
        "))(",
        "3x (",
        "@ :",
        "rest rest",
        "–",
        "9999999999999999999x1",
        "🏊 4x50",
        "9" * 5000 + "x100",
        "9" * 5000 + " rounds",
        "1" * 5000,
        "@ " + "9" * 5000,
        "9" * 5000 + " rest",
    ],
)
def test_parse_line_never_raises(raw: str) -> None:
    """Any string gives exactly one line."""
    parsed = parse_line(raw)
    assert len(parsed.lines) == 1


@pytest.mark.parametrize(
    "line, count",
    [
        ("2x thru", 2),
        ("2X THRU:", 2),
        ("3 rounds", 3),
        ("1 round", 1),
        ("4x:", 4),
        ("2 x through:", 2),
        ("3×rounds", 3),
        ("2:00 rest", 2),
    ],
)
def test_round_count_headers(line: str, count: int) -> None:
    """Repeat-block headers give their round count, including the bare 'N:' form."""
    assert extract_round_count(line) == count


@pytest.mark.parametrize("line", ["4x100 free", "200 easy", "0 rounds", "rounds", "Main Set", "9" * 5000 + " rounds"])
def test_round_count_rejects_other_lines(line: str) -> None:
    """Sets, zero counts, words and oversized counts are not repeat headers."""
    assert extract_round_count(line) is None
