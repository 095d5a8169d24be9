"""Deterministic yardage over parsed workouts: per line, set, section, total, and per stroke/mode."""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Union

from .models import (
    ComputeYardageInput,
    ComputeYardageOutput,
    MetricsSignature,
    ParseResult,
    PracticeLine,
    PracticeSet,
    Section,
    SectionYardage,
)

METRICS_VERSION = "1.0.0"


def line_yards(line: PracticeLine) -> int:
    """
    A stored yardage_override wins; otherwise distance x reps, reps defaulting to 1.
    No distance counts 0 (text-only lines).
    """
    if line.yardage_override is not None:
        return line.yardage_override
    if line.distance is None:
        return 0
    return line.distance * (line.reps or 1)


def set_yards(practice_set: PracticeSet) -> int:
    return sum(line_yards(line) for line in practice_set.lines) * practice_set.repeat_count


def section_yards(section: Section) -> int:
    return sum(set_yards(s) for s in section.sets)


def _sections_of(source: Union[ParseResult, Iterable[Section]]) -> list[Section]:
    if isinstance(source, ParseResult):
        return source.sections
    return list(source)


def total_yards(source: Union[ParseResult, Iterable[Section]]) -> int:
    return sum(section_yards(s) for s in _sections_of(source))


def _yardage_bucket(line: PracticeLine) -> str | None:
    """
    Which key a line's yards count toward.
    Non-swim mode wins over stroke ("free drill" is drill), swim mode defers to the stroke,
    a lone mode or a lone stroke counts as itself.
    """
    if line.mode and line.stroke:
        return line.stroke if line.mode == "swim" else line.mode
    return line.mode or line.stroke


def stroke_yards(source: Union[ParseResult, Iterable[Section]]) -> dict[str, int]:
    """Yards per stroke or mode across all sections; lines with neither are left out."""
    totals: dict[str, int] = defaultdict(int)
    for section in _sections_of(source):
        for practice_set in section.sets:
            for line in practice_set.lines:
                bucket = _yardage_bucket(line)
                if bucket is None:
                    continue
                totals[bucket] += line_yards(line) * practice_set.repeat_count
    return dict(totals)


def compute_yardage_impl(payload: ComputeYardageInput) -> ComputeYardageOutput:
    """Compute total, per-section and per-stroke yardage from provided sections (stateless)."""
    sections = payload.sections
    return ComputeYardageOutput(
        total_yards=total_yards(sections),
        section_yards=[SectionYardage(label=s.label, yards=section_yards(s)) for s in sections],
        stroke_yards=stroke_yards(sections),
        signature=MetricsSignature(metrics_version=METRICS_VERSION),
    )
