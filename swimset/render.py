"""Commit-style practice text: the printable sheet, written so that parse() can read it back."""

from __future__ import annotations

from datetime import date, time
from typing import Iterable, Optional

from .models import PracticeLine, RenderTextInput, RenderTextOutput, Section
from .normalize import MODE_DISPLAY, PACE_CODES, STROKE_DISPLAY, effort_keyword, format_interval

GROUP_INDENT = "  "


def format_practice_date(day: date) -> str:
    """Mon Jan 5 '26"""
    return f"{day.strftime('%a %b')} {day.day} '{day.strftime('%y')}"


def format_practice_time(at: time) -> str:
    """6:00 AM"""
    hour = at.hour % 12 or 12
    return f"{hour}:{at.minute:02d} {'AM' if at.hour < 12 else 'PM'}"


def format_line(line: PracticeLine) -> str:
    """
    One sheet line: '4x100 Free @ 1:30 descend 1-4'.
    Effort is written as a keyword the parser recognizes; efforts without one fall back to their code in parens.
    """
    parts: list[str] = []
    if line.reps is not None and line.distance is not None:
        parts.append(f"{line.reps}x{line.distance}")
    elif line.distance is not None:
        parts.append(str(line.distance))
    if line.stroke:
        parts.append(STROKE_DISPLAY[line.stroke])
    if line.mode:
        parts.append(MODE_DISPLAY[line.mode])
    if line.interval_kind == "sendoff":
        parts.append(f"@ {format_interval(line.interval_seconds)}")
    elif line.interval_kind == "rest":
        parts.append(f"{format_interval(line.interval_seconds)} rest")
    if line.effort:
        keyword = effort_keyword(line.effort)
        parts.append(keyword if keyword else f"({PACE_CODES[line.effort]})")
    if line.text:
        parts.append(line.text)
    return " ".join(parts)


def render_commit_text(
    sections: Iterable[Section],
    title: Optional[str] = None,
    notes: Optional[str] = None,
    pool_info: Optional[str] = None,
    practice_date: Optional[date] = None,
    practice_time: Optional[time] = None,
) -> str:
    out: list[str] = []
    if title or notes:
        out.append(" | ".join(p for p in (title, notes) if p))
    if practice_date or practice_time:
        stamp = " · ".join(
            p for p in (
                format_practice_date(practice_date) if practice_date else None,
                format_practice_time(practice_time) if practice_time else None,
            ) if p
        )
        out.append(f"{stamp} {pool_info}" if pool_info else stamp)
    if out:
        out.append("")

    for section in sections:
        # Every section is printed, even with 0 yards (instructions only)
        out.append(section.label)
        for practice_set in section.sets:
            if practice_set.title:
                out.append(practice_set.title)
            grouped = practice_set.repeat_count > 1
            if grouped:
                out.append(f"{practice_set.repeat_count} rounds of:")
            for line in practice_set.lines:
                text = format_line(line)
                out.append(GROUP_INDENT + text if grouped else text)
            if grouped:
                # Blank line closes the group for the reader and for the parser.
                out.append("")
        out.append("")
    return "\n".join(out)


def render_text_impl(payload: RenderTextInput) -> RenderTextOutput:
    """Render provided sections; date/time arrive as ISO strings."""
    practice_date = date.fromisoformat(payload.practice_date) if payload.practice_date else None
    practice_time = time.fromisoformat(payload.practice_time) if payload.practice_time else None
    text = render_commit_text(
        payload.sections,
        title=payload.title,
        notes=payload.notes,
        pool_info=payload.pool_info,
        practice_date=practice_date,
        practice_time=practice_time,
    )
    return RenderTextOutput(text=text)
