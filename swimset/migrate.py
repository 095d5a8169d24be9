"""
Load-time migration for persisted practice templates.

Stored templates are migrated once, on load, to CURRENT_SCHEMA_VERSION before validation; business logic
only ever sees current-version models. Version 1 payloads come from the older app format: camelCase keys,
a single stroke field that also held modes, interval strings instead of seconds, pace inside `patterns`.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from .models import ParseResult, PracticeTemplate
from .normalize import MODE_DISPLAY, generate_id, parse_interval_string

logger = logging.getLogger(__name__)

CURRENT_SCHEMA_VERSION = 2
UNTITLED = "Untitled Practice"

_CAMEL_KEYS = {
    "intervalSeconds": "interval_seconds",
    "intervalKind": "interval_kind",
    "intervalType": "interval_type",
    "repeatCount": "repeat_count",
    "poolInfo": "pool_info",
    "rawText": "raw_text",
    "createdAt": "created_at",
    "lastEditedAt": "last_edited_at",
    "yardageOverride": "yardage_override",
    "schemaVersion": "schema_version",
}

_LEGACY_PACE = {
    "negativeSplit": "negative_split",
    "evenPace": "even_pace",
    "bestAverage": "best_average",
    "holdPace": "hold_pace",
    "racePace": "race_pace",
}

# Most specific first
_MODE_HINTS = ("drill", "kick", "pull", "scull", "technique", "swim")

_TAGS = ("Sprint", "Distance", "IM", "Recovery", "Threshold", "Skills")


def _rename_keys(raw: dict) -> dict:
    return {_CAMEL_KEYS.get(k, k): v for k, v in raw.items()}


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def infer_mode_from_text(text: str) -> Optional[str]:
    lowered = (text or "").lower()
    for mode in _MODE_HINTS:
        if mode in lowered:
            return mode
    return None


def migrate_tag(value: Any) -> Optional[str]:
    """Map a free-text tag onto the closed tag set (case-insensitive containment); None if nothing fits."""
    if not isinstance(value, str) or not value.strip():
        return None
    if value in _TAGS:
        return value
    lowered = value.lower()
    if "sprint" in lowered:
        return "Sprint"
    if "distance" in lowered:
        return "Distance"
    if "im" in lowered:
        return "IM"
    if "recovery" in lowered:
        return "Recovery"
    if "threshold" in lowered:
        return "Threshold"
    if "skills" in lowered or "drill" in lowered:
        return "Skills"
    return None


def migrate_line(raw: dict) -> dict:
    """v1 -> v2 for one line dict. Already-current fields are kept as they are."""
    line = _rename_keys(raw)
    line.setdefault("id", generate_id("line"))
    line["text"] = line.get("text") or ""

    # v1 kept modes in the stroke field
    stroke = line.get("stroke")
    if stroke in MODE_DISPLAY:
        if line.get("mode") is None:
            line["mode"] = stroke
        line["stroke"] = None
    elif stroke == "other":
        line["stroke"] = None
    if line.get("mode") is None:
        line["mode"] = infer_mode_from_text(line["text"])

    legacy_interval = line.pop("interval", None)
    legacy_type = line.pop("interval_type", None)
    if line.get("interval_seconds") is None:
        line["interval_seconds"] = parse_interval_string(legacy_interval)
    if not line.get("interval_kind"):
        if line["interval_seconds"] is None:
            line["interval_kind"] = "none"
        else:
            line["interval_kind"] = "rest" if legacy_type == "rest" else "sendoff"
    if line["interval_kind"] == "none":
        line["interval_seconds"] = None
    elif line["interval_seconds"] is None:
        line["interval_kind"] = "none"

    patterns = line.pop("patterns", None) or {}
    if line.get("effort") is None and patterns.get("pace"):
        pace = patterns["pace"]
        line["effort"] = _LEGACY_PACE.get(pace, pace)
    return line


def _migrate_set(raw: dict) -> dict:
    practice_set = _rename_keys(raw)
    practice_set.setdefault("id", generate_id("set"))
    practice_set["repeat_count"] = practice_set.get("repeat_count") or 1
    practice_set["lines"] = [migrate_line(line) for line in practice_set.get("lines") or []]
    return practice_set


def _migrate_section(raw: dict) -> dict:
    section = dict(raw)
    section.setdefault("id", generate_id("sec"))
    section["sets"] = [_migrate_set(s) for s in section.get("sets") or []]
    return section


def migrate_template(raw: dict) -> dict:
    """Bring a stored template dict to CURRENT_SCHEMA_VERSION. Raises ValueError when it has no sections list."""
    template = _rename_keys(raw)
    if not isinstance(template.get("sections"), list):
        raise ValueError("template payload has no 'sections' list")
    version = template.get("schema_version") or 1
    if version >= CURRENT_SCHEMA_VERSION:
        return template

    logger.info("Migrating template %s from schema v%s", template.get("id"), version)
    template.setdefault("id", generate_id("tpl"))
    template["title"] = template.get("title") or UNTITLED
    template["tag"] = migrate_tag(template.get("tag"))
    template["sections"] = [_migrate_section(s) for s in template["sections"]]
    now = _now_iso()
    template["created_at"] = template.get("created_at") or now
    template["last_edited_at"] = template.get("last_edited_at") or template["created_at"]
    template["schema_version"] = CURRENT_SCHEMA_VERSION
    return template


def load_template(raw: dict) -> PracticeTemplate:
    return PracticeTemplate.model_validate(migrate_template(raw))


def template_from_parse(
    result: ParseResult,
    raw_text: str,
    title: Optional[str] = None,
    notes: Optional[str] = None,
    pool_info: Optional[str] = None,
    tag: Optional[str] = None,
) -> PracticeTemplate:
    """New template from a parse. The caller's title wins over the parsed one."""
    now = _now_iso()
    return PracticeTemplate(
        id=generate_id("tpl"),
        schema_version=CURRENT_SCHEMA_VERSION,
        title=title or result.title or UNTITLED,
        notes=notes,
        pool_info=pool_info,
        tag=migrate_tag(tag),
        sections=result.sections,
        raw_text=raw_text,
        created_at=now,
        last_edited_at=now,
    )
