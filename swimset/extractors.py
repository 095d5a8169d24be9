"""
Field extractors for a single workout line.

Each extractor is pure: it takes the remaining text and returns (extracted value or None, new remainder).
The line parser chains them so every extractor sees what the previous ones left behind.
Patterns are compiled once at import and only ever read.
"""

from __future__ import annotations

import re
from typing import Optional, Pattern

from .models import IntervalKind, Mode, PacePattern, Stroke
from .normalize import EFFORT_KEYWORDS, MODE_KEYWORDS, STROKE_KEYWORDS

_DASH_PREFIX = re.compile(r"^[–-]\s*")
# "A. Kick focus", "1-2: Fly", "1–2: Fly"
_LABEL_PREFIX = re.compile(r"^[A-Z]\.\s*|^\d+[–-]\d+:\s*")
_PARENTHETICAL = re.compile(r"\(([^)]+)\)")
# Numbers are at most six digits (clock minutes four); longer digit runs never match and stay text.
# "3x (4x25" / "3 x 4 x 50": outer reps, inner reps, distance
_NESTED_REPEAT = re.compile(
    r"^(\d{1,6})\s*[x×]\s*(\()?\s*(\d{1,6})\s*[x×]\s*(\d{1,6})(?!\d)", re.IGNORECASE
)
_REPS_DISTANCE = re.compile(r"^(\d{1,6})\s*[x×]\s*(\d{1,6})(?!\d)", re.IGNORECASE)
_DISTANCE_ONLY = re.compile(r"^(\d{1,6})(?:\s|$)")
_TOTAL_PATTERNS = (
    re.compile(r"(?:total|preset|warmup|cooldown):\s*(\d{1,6})(?!\d)", re.IGNORECASE),
    re.compile(r"^(\d{3,6})\s*$"),
)
# "@ 1:30", "@ :50", "@ :55-1:05" (range keeps its lower bound)
_SENDOFF = re.compile(r"@\s*(?:(\d{0,4}):)?(\d{1,6})(?!\d)(?:\s*[–-]\s*(?:\d*:)?\d+)?")
# ":15 rest", "1:00 rest"
_REST = re.compile(r"(?<!\d)(?:(\d{0,4}):)?(\d{1,6})\s*rest", re.IGNORECASE)
_SEPARATORS = re.compile(r"^[–-]\s*|\s*[–-]$|^,\s*|\s*,$")
_WHITESPACE = re.compile(r"\s+")


def _whole_word(keyword: str) -> Pattern[str]:
    return re.compile(r"\b" + re.escape(keyword) + r"\b", re.IGNORECASE)


_STROKE_PATTERNS = [(_whole_word(k), v) for k, v in STROKE_KEYWORDS]
_MODE_PATTERNS = [(_whole_word(k), v) for k, v in MODE_KEYWORDS]
_EFFORT_PATTERNS = [(_whole_word(k), v) for k, v in EFFORT_KEYWORDS]


def _cut(text: str, match: re.Match) -> str:
    return text[: match.start()] + text[match.end():]


def _extract_keyword(text: str, patterns: list) -> tuple[Optional[str], str]:
    """First keyword in table order that occurs as a whole word; only that occurrence is removed."""
    for pattern, value in patterns:
        m = pattern.search(text)
        if m:
            return value, _cut(text, m)
    return None, text


def _clock_seconds(minutes: str | None, seconds: str) -> int:
    return (int(minutes) if minutes else 0) * 60 + int(seconds)


# --- Prefixes and notes ---

def strip_dash_prefix(text: str) -> tuple[bool, str]:
    """Remove a leading '-' or '–'. Returns (had_dash, remainder)."""
    stripped = text.strip()
    m = _DASH_PREFIX.match(stripped)
    if not m:
        return False, stripped
    return True, stripped[m.end():]


def strip_label(text: str) -> tuple[Optional[str], str]:
    """Remove a set label like 'A. ' or '1-2: '. Returns (label, remainder)."""
    m = _LABEL_PREFIX.match(text)
    if not m:
        return None, text
    return m.group(0).strip(), text[m.end():]


def extract_parenthetical_notes(text: str) -> tuple[Optional[str], str]:
    """Pull every '(...)' out of text. Returns (notes joined by ', ' or None, remainder)."""
    notes = [m.group(1) for m in _PARENTHETICAL.finditer(text)]
    if not notes:
        return None, text
    return ", ".join(notes), _PARENTHETICAL.sub("", text)


# --- Reps and distance ---

def extract_nested_repeat(text: str) -> tuple[Optional[tuple[int, int]], str]:
    """
    Collapse 'A x (B x C' into (A*B, C). The remainder starts right after C; when the match opened a
    parenthesis, the first ')' after it is dropped too.
    """
    m = _NESTED_REPEAT.match(text)
    if not m:
        return None, text
    outer, opened, inner, distance = m.groups()
    if int(outer) * int(inner) < 1:
        return None, text
    remainder = text[m.end():]
    if opened:
        close = remainder.find(")")
        if close != -1:
            remainder = remainder[:close] + remainder[close + 1:]
    return (int(outer) * int(inner), int(distance)), remainder


def extract_reps_distance(text: str) -> tuple[Optional[tuple[int, int]], str]:
    """
    '4x100' -> (4, 100); a leading standalone '200' -> (1, 200). Returns ((reps, distance) or None, remainder).
    Zero reps is not a repeat ('0x100' stays text).
    """
    m = _REPS_DISTANCE.match(text)
    if m and int(m.group(1)) < 1:
        return None, text
    if m:
        return (int(m.group(1)), int(m.group(2))), text[m.end():]
    m = _DISTANCE_ONLY.match(text)
    if m:
        return (1, int(m.group(1))), text[m.end():]
    return None, text


def extract_total(text: str) -> tuple[Optional[int], str]:
    """'Total: 600', 'Preset: 1000' or a bare 3+ digit number. Returns (yards or None, remainder)."""
    for pattern in _TOTAL_PATTERNS:
        m = pattern.search(text)
        if m:
            return int(m.group(1)), _cut(text, m).strip()
    return None, text


# --- Keyword fields ---

def extract_stroke(text: str) -> tuple[Optional[Stroke], str]:
    return _extract_keyword(text, _STROKE_PATTERNS)


def extract_mode(text: str) -> tuple[Optional[Mode], str]:
    return _extract_keyword(text, _MODE_PATTERNS)


def extract_effort(text: str) -> tuple[Optional[PacePattern], str]:
    return _extract_keyword(text, _EFFORT_PATTERNS)


def extract_interval(text: str) -> tuple[Optional[tuple[int, IntervalKind]], str]:
    """Sendoff ('@ 1:30', lower bound of '@ :55-1:05') takes priority over rest (':15 rest')."""
    m = _SENDOFF.search(text)
    if m:
        return (_clock_seconds(m.group(1), m.group(2)), "sendoff"), _cut(text, m)
    m = _REST.search(text)
    if m:
        return (_clock_seconds(m.group(1), m.group(2)), "rest"), _cut(text, m)
    return None, text


def clean_remainder(text: str, stroke: Optional[str] = None) -> str:
    """Tidy what is left after extraction: collapse spaces, drop edge separators, drop a repeated stroke name."""
    cleaned = _WHITESPACE.sub(" ", text).strip()
    cleaned = _SEPARATORS.sub("", cleaned).strip()
    if stroke and cleaned.lower() == stroke.lower():
        return ""
    return cleaned
