"""Normalization: section aliases, stroke/mode/effort vocabularies, interval codecs, canonical hashing."""

from __future__ import annotations

import hashlib
import json
import re
import uuid
from typing import Any, Optional

from .models import Mode, PacePattern, ParseResult, Stroke

PARSER_VERSION = "1.0.0"

WARMUP = "Warmup"
PRE_SET = "Pre-Set"
MAIN_SET = "Main Set"
POST_SET = "Post-Set / Technique"
COOLDOWN = "Cooldown"


def generate_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


# --- Section headers ---

# Overlapping aliases (reset, technique, drills, recovery, post-set) collapse to one label on purpose.
SECTION_ALIASES: dict[str, str] = {
    "warmup": WARMUP,
    "warm-up": WARMUP,
    "warm up": WARMUP,
    "wu": WARMUP,
    "pre-set": PRE_SET,
    "preset": PRE_SET,
    "pre set": PRE_SET,
    "ps": PRE_SET,
    "main": MAIN_SET,
    "main set": MAIN_SET,
    "ms": MAIN_SET,
    "post-set": POST_SET,
    "post set": POST_SET,
    "post": POST_SET,
    "reset": POST_SET,
    "recovery": POST_SET,
    "technique": POST_SET,
    "drills": POST_SET,
    "cooldown": COOLDOWN,
    "cool-down": COOLDOWN,
    "cool down": COOLDOWN,
    "warmdown": COOLDOWN,
    "warm-down": COOLDOWN,
    "warm down": COOLDOWN,
    "cd": COOLDOWN,
}

# Characters allowed right after an alias for a prefix match ("" = end of line)
_SECTION_SEPARATORS = ("", " ", "-", ":", "–")

# Longest first so "main set" wins over "main"; both map to the same label anyway.
_SECTION_ALIASES_BY_LENGTH = sorted(SECTION_ALIASES.items(), key=lambda kv: -len(kv[0]))


def detect_section(line: str) -> Optional[str]:
    """
    Return the canonical section label for a header line, or None.
    Exact alias match first, then alias prefix followed by end, space, dash, colon or en-dash
    (so "Post Set - Pull" matches but "mslowly" does not).
    """
    normalized = (line or "").strip().lower()
    if not normalized:
        return None
    if normalized in SECTION_ALIASES:
        return SECTION_ALIASES[normalized]
    for alias, label in _SECTION_ALIASES_BY_LENGTH:
        if normalized.startswith(alias) and normalized[len(alias):len(alias) + 1] in _SECTION_SEPARATORS:
            return label
    return None


# --- Line vocabularies (order matters: first keyword found wins) ---

STROKE_KEYWORDS: list[tuple[str, Stroke]] = [
    ("free", "freestyle"),
    ("freestyle", "freestyle"),
    ("fr", "freestyle"),
    ("back", "backstroke"),
    ("backstroke", "backstroke"),
    ("bk", "backstroke"),
    ("breast", "breaststroke"),
    ("breaststroke", "breaststroke"),
    ("br", "breaststroke"),
    ("fly", "butterfly"),
    ("butterfly", "butterfly"),
    ("im", "im"),
    ("choice", "choice"),
]

MODE_KEYWORDS: list[tuple[str, Mode]] = [
    ("kick", "kick"),
    ("pull", "pull"),
    ("drill", "drill"),
    ("swim", "swim"),
    ("scull", "scull"),
    ("technique", "technique"),
]

EFFORT_KEYWORDS: list[tuple[str, PacePattern]] = [
    ("easy", "easy"),
    ("aerobic", "cruise"),
    ("moderate", "moderate"),
    ("strong", "moderate"),
    ("threshold", "threshold"),
    ("race", "race_pace"),
    ("sprint", "sprint"),
    ("fast", "fast"),
    ("descend", "descend"),
    ("build", "build"),
]

STROKE_DISPLAY: dict[str, str] = {
    "freestyle": "Free",
    "backstroke": "Back",
    "breaststroke": "Breast",
    "butterfly": "Fly",
    "im": "IM",
    "choice": "Choice",
}

MODE_DISPLAY: dict[str, str] = {
    "swim": "Swim",
    "kick": "Kick",
    "pull": "Pull",
    "drill": "Drill",
    "scull": "Scull",
    "technique": "Technique",
}

# Short codes as printed on a practice sheet
PACE_CODES: dict[str, str] = {
    "easy": "EZ",
    "cruise": "Cruise",
    "moderate": "Mod",
    "fast": "Fast",
    "sprint": "Sp",
    "descend": "DESC",
    "ascend": "ASC",
    "build": "Bld",
    "negative_split": "N/S",
    "even_pace": "Even",
    "best_average": "Best avg",
    "hold_pace": "Hold",
    "race_pace": "Race pace",
    "threshold": "Threshold",
}


def effort_keyword(effort: str) -> Optional[str]:
    """First keyword that parses back to this effort, or None if no keyword exists for it."""
    for keyword, pattern in EFFORT_KEYWORDS:
        if pattern == effort:
            return keyword
    return None


# --- Interval codec ---

def format_interval(seconds: int | None) -> str:
    """Format seconds as a pace-clock string: 50 -> ':50', 90 -> '1:30'. Missing/zero -> ':00'."""
    if not seconds or seconds <= 0:
        return ":00"
    mins, secs = divmod(seconds, 60)
    if mins == 0:
        return f":{secs:02d}"
    return f"{mins}:{secs:02d}"


_INTERVAL_STRING = re.compile(r"^(?:(\d{0,4}):)?(\d{1,6})$")


def parse_interval_string(value: str | None) -> Optional[int]:
    """Parse a legacy interval string ('1:30', ':50', '45', '@ 1:10') into seconds; None if unreadable."""
    if not value:
        return None
    s = value.strip().lstrip("@").strip()
    m = _INTERVAL_STRING.match(s)
    if not m:
        return None
    minutes = int(m.group(1)) if m.group(1) else 0
    return minutes * 60 + int(m.group(2))


# --- Canonical hashing ---

def _strip_ids(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _strip_ids(v) for k, v in value.items() if k != "id"}
    if isinstance(value, list):
        return [_strip_ids(v) for v in value]
    return value


def canonical_sha256(result: ParseResult) -> str:
    """Stable SHA256 of the result's JSON (sorted keys). Ids are random per parse, so they are left out."""
    blob = json.dumps(_strip_ids(result.model_dump()), sort_keys=True)
    return hashlib.sha256(blob.encode()).hexdigest()
