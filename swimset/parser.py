"""
Workout text parser: freeform practice notation -> sections / repeated sets / typed lines.

parse() is a fold over physical lines. Each step takes an immutable ParseContext and returns the next one,
so every transition of the repeat-block state machine can be exercised on its own. Nothing here raises
for string input: lines that cannot be structured become text-only lines, and structural problems are
reported through ParseResult.warnings.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from functools import reduce
from typing import Optional

from .extractors import (
    clean_remainder,
    extract_effort,
    extract_interval,
    extract_mode,
    extract_nested_repeat,
    extract_parenthetical_notes,
    extract_reps_distance,
    extract_stroke,
    extract_total,
    strip_dash_prefix,
    strip_label,
)
from .metrics import total_yards
from .models import (
    ParseOptions,
    ParseResult,
    ParseSignature,
    ParseSummary,
    ParseWorkoutInput,
    ParseWorkoutOutput,
    PracticeLine,
    PracticeSet,
    Section,
)
from .normalize import MAIN_SET, PARSER_VERSION, canonical_sha256, detect_section, generate_id

logger = logging.getLogger(__name__)

NO_SECTIONS_WARNING = "No sections found. Try adding 'Main Set' or 'Warmup'."

# "2x thru", "3 rounds", "2 x through:", "4x:"
_ROUND_HEADER = re.compile(r"^(\d{1,6})\s*[x×]?\s*(?:rounds?|through|thru|:)", re.IGNORECASE)


def extract_round_count(line: str) -> Optional[int]:
    """Return N for a repeat-block header ('2x thru', '3 rounds', '4x:'); None for anything else, e.g. '4x100 free'."""
    m = _ROUND_HEADER.match(line.strip())
    if not m:
        return None
    count = int(m.group(1))
    return count if count >= 1 else None


# --- Single line ---

def _single_line_set(line: PracticeLine) -> PracticeSet:
    return PracticeSet(id=generate_id("set"), repeat_count=1, lines=[line])


def _join_text(*parts: Optional[str]) -> str:
    return " ".join(p for p in parts if p)


def parse_line(raw_line: str) -> PracticeSet:
    """
    Parse one physical line into a one-line PracticeSet (repeat_count is always 1 here; grouping is
    the caller's job). Never fails: without reps/distance the line is returned as a text-only line.
    A leading dash is stripped first; use is_descriptor() to tell annotation lines from sets.
    """
    _, text = strip_dash_prefix(raw_line)
    _, body = strip_label(text)

    # Nested repeats go first so "3x (4x25 @ :25)" is not mistaken for a parenthetical note.
    reps_distance, remainder = extract_nested_repeat(body)
    notes, remainder = extract_parenthetical_notes(remainder)
    remainder = remainder.strip()
    if reps_distance is None:
        reps_distance, remainder = extract_reps_distance(remainder)

    if reps_distance is not None:
        reps, distance = reps_distance
        stroke, remainder = extract_stroke(remainder)
        mode, remainder = extract_mode(remainder)
        interval, remainder = extract_interval(remainder)
        effort, remainder = extract_effort(remainder)
        remainder = clean_remainder(remainder, stroke)
        interval_seconds, interval_kind = interval if interval else (None, "none")
        return _single_line_set(PracticeLine(
            id=generate_id("line"),
            reps=reps,
            distance=distance,
            stroke=stroke,
            mode=mode,
            interval_seconds=interval_seconds,
            interval_kind=interval_kind,
            effort=effort,
            text=_join_text(remainder, notes),
        ))

    total, remainder = extract_total(remainder)
    if total is not None:
        return _single_line_set(PracticeLine(
            id=generate_id("line"),
            reps=1,
            distance=total,
            text=_join_text(clean_remainder(remainder), notes),
        ))

    return _single_line_set(PracticeLine(id=generate_id("line"), text=text))


def has_numeric_data(line: PracticeLine) -> bool:
    return line.reps is not None or line.distance is not None


def is_descriptor(raw_line: str, parsed: PracticeSet) -> bool:
    """A dash-prefixed line with no reps or distance annotates the previous line instead of adding a set."""
    started_with_dash, _ = strip_dash_prefix(raw_line)
    return started_with_dash and not any(has_numeric_data(line) for line in parsed.lines)


# --- Document fold ---

# Buffers are persistent stacks: nested (newest, rest) pairs, () when empty. Pushing and
# touching the newest item never copy the buffer, so a parse stays linear in the line count.
Stack = tuple


def _push(stack: Stack, item) -> Stack:
    return (item, stack)


def _items(stack: Stack) -> list:
    """Stack contents oldest first."""
    items = []
    while stack:
        item, stack = stack
        items.append(item)
    items.reverse()
    return items


@dataclass(frozen=True)
class ParseContext:
    default_section_label: str = MAIN_SET
    sections: Stack = ()  # closed Sections
    current_label: Optional[str] = None  # None = no section open
    current_sets: Stack = ()  # PracticeSets of the open section
    pending_count: int = 1  # repeat count of the open group; 1 = idle
    pending_lines: Stack = ()  # PracticeLines of the open group
    title: Optional[str] = None
    saw_header: bool = False


def _append_set(ctx: ParseContext, practice_set: PracticeSet) -> ParseContext:
    return replace(
        ctx,
        current_label=ctx.current_label or ctx.default_section_label,
        current_sets=_push(ctx.current_sets, practice_set),
    )


def flush_group(ctx: ParseContext) -> ParseContext:
    """Emit the open group as one repeated set. With nothing buffered this only resets the repeat count."""
    if not ctx.pending_lines:
        if ctx.pending_count > 1:
            logger.debug("%dx repeat header closed with no member lines", ctx.pending_count)
        return replace(ctx, pending_count=1)
    lines = _items(ctx.pending_lines)
    grouped = PracticeSet(id=generate_id("set"), repeat_count=ctx.pending_count, lines=lines)
    logger.debug("Flushing %dx group with %d lines", ctx.pending_count, len(lines))
    return replace(_append_set(ctx, grouped), pending_count=1, pending_lines=())


def _close_section(ctx: ParseContext) -> ParseContext:
    if ctx.current_label is None or not ctx.current_sets:
        return replace(ctx, current_label=None, current_sets=())
    section = Section(id=generate_id("sec"), label=ctx.current_label, sets=_items(ctx.current_sets))
    return replace(ctx, sections=_push(ctx.sections, section), current_label=None, current_sets=())


def _with_appended_text(line: PracticeLine, extra: str) -> PracticeLine:
    return line.model_copy(update={"text": _join_text(line.text, extra)})


def _merge_descriptor(ctx: ParseContext, text: str) -> ParseContext:
    """Append descriptor text to the previous line: the open group's last line, else the section's last line."""
    if ctx.pending_lines:
        last, rest = ctx.pending_lines
        return replace(ctx, pending_lines=_push(rest, _with_appended_text(last, text)))
    if ctx.current_sets and ctx.current_sets[0].lines:
        last_set, rest = ctx.current_sets
        lines = last_set.lines[:-1] + [_with_appended_text(last_set.lines[-1], text)]
        return replace(ctx, current_sets=_push(rest, last_set.model_copy(update={"lines": lines})))
    # Nothing to annotate yet; keep the text as its own line.
    logger.debug("Descriptor with no previous line kept as text: %r", text)
    return _append_set(ctx, _single_line_set(PracticeLine(id=generate_id("line"), text=text)))


def step(ctx: ParseContext, raw_line: str) -> ParseContext:
    """Consume one physical line."""
    line = raw_line.strip()
    if not line:
        return flush_group(ctx)
    if line.startswith("//") or line.startswith("#"):
        return ctx

    label = detect_section(line)
    if label is not None:
        ctx = _close_section(flush_group(ctx))
        logger.debug("Section header %r -> %s", line, label)
        return replace(ctx, current_label=label, saw_header=True)

    # Before the first header: first line is the title, the rest are dropped.
    if not ctx.saw_header:
        if ctx.title is None:
            return replace(ctx, title=line)
        logger.debug("Dropping pre-header line: %r", line)
        return ctx

    # "N:" counts too, so a clock line such as "2:00 rest" opens a group; without indented
    # lines after it the header leaves nothing behind.
    rounds = extract_round_count(line)
    if rounds is not None:
        logger.debug("Repeat header %r opens a %dx group", line, rounds)
        return replace(flush_group(ctx), pending_count=rounds)

    parsed = parse_line(line)
    if is_descriptor(line, parsed):
        return _merge_descriptor(ctx, parsed.lines[0].text)

    if ctx.pending_count > 1:
        # Indentation is read from the untrimmed line.
        if raw_line[:1].isspace():
            return replace(ctx, pending_lines=_push(ctx.pending_lines, parsed.lines[0]))
        ctx = flush_group(ctx)
    return _append_set(ctx, parsed)


def finish(ctx: ParseContext, text: str) -> ParseResult:
    """Final flush and assembly."""
    ctx = _close_section(flush_group(ctx))
    warnings: list[str] = []
    if not ctx.sections and text:
        warnings.append(NO_SECTIONS_WARNING)
        logger.warning("Parser warning: %s", NO_SECTIONS_WARNING)
    return ParseResult(sections=_items(ctx.sections), title=ctx.title, warnings=warnings)


def parse(text: str, default_section_label: str = MAIN_SET) -> ParseResult:
    """Parse a whole workout. Pure and synchronous; safe to call concurrently."""
    text = text or ""
    ctx = reduce(step, text.splitlines(), ParseContext(default_section_label=default_section_label))
    return finish(ctx, text)


# --- Tool wrapper ---

def _summarize(result: ParseResult) -> ParseSummary:
    lines = [line for s in result.sections for st in s.sets for line in st.lines]
    return ParseSummary(
        sections_detected=len(result.sections),
        sets_detected=sum(len(s.sets) for s in result.sections),
        lines_detected=len(lines),
        text_only_lines=sum(1 for line in lines if line.is_text_only),
        total_yards=total_yards(result),
    )


def parse_workout_impl(payload: ParseWorkoutInput) -> ParseWorkoutOutput:
    """Parse text and wrap the result with summary and signature. Status ok needs sections and no warnings."""
    options = payload.options or ParseOptions()
    result = parse(payload.text, default_section_label=options.default_section_label)
    status = "ok" if result.sections and not result.warnings else "needs_review"
    return ParseWorkoutOutput(
        status=status,
        result=result,
        summary=_summarize(result),
        signature=ParseSignature(canonical_sha256=canonical_sha256(result), parser_version=PARSER_VERSION),
    )
