"""Template migration from the v1 app format and template creation from a parse."""

import pytest

from swimset.migrate import (
    CURRENT_SCHEMA_VERSION,
    UNTITLED,
    load_template,
    migrate_line,
    migrate_tag,
    migrate_template,
    template_from_parse,
)
from swimset.metrics import total_yards
from swimset.parser import parse

V1_TEMPLATE = {
    "id": "tpl_old",
    "title": "Old Sprint Day",
    "poolInfo": "25 Yards",
    "tag": "sprint work",
    "rawText": "MS\n2x thru\n  4x50 kick @ 1:10\n",
    "createdAt": "2024-01-01T00:00:00+00:00",
    "sections": [
        {
            "id": "sec_1",
            "label": "Main Set",
            "sets": [
                {
                    "id": "set_1",
                    "repeatCount": 2,
                    "lines": [
                        {
                            "id": "line_1",
                            "reps": 4,
                            "distance": 50,
                            "stroke": "kick",
                            "interval": "1:10",
                            "intervalType": "interval",
                            "text": "kick with board",
                            "patterns": {"pace": "racePace"},
                            "yardageOverride": 300,
                        }
                    ],
                }
            ],
        }
    ],
}


def test_migrate_line_moves_mode_out_of_stroke() -> None:
    """v1 kept modes in the stroke field; migration moves them and converts interval and pace."""
    line = migrate_line(V1_TEMPLATE["sections"][0]["sets"][0]["lines"][0])
    assert line["mode"] == "kick"
    assert line["stroke"] is None
    assert line["interval_seconds"] == 70
    assert line["interval_kind"] == "sendoff"
    assert line["effort"] == "race_pace"
    assert line["yardage_override"] == 300
    for legacy in ("interval", "interval_type", "patterns", "yardageOverride"):
        assert legacy not in line


def test_migrate_line_infers_mode_from_text() -> None:
    """Without a mode, one is inferred from the line text."""
    line = migrate_line({"id": "l", "distance": 200, "stroke": "freestyle", "text": "drill/swim by 25"})
    assert line["stroke"] == "freestyle"
    assert line["mode"] == "drill"


def test_migrate_line_rest_and_missing_interval() -> None:
    """Legacy rest intervals convert; missing or unreadable intervals become kind none."""
    rest = migrate_line({"id": "l", "distance": 50, "interval": ":15", "intervalType": "rest"})
    assert (rest["interval_seconds"], rest["interval_kind"]) == (15, "rest")
    bare = migrate_line({"id": "l", "distance": 50})
    assert (bare["interval_seconds"], bare["interval_kind"]) == (None, "none")
    unreadable = migrate_line({"id": "l", "distance": 50, "interval": "soon"})
    assert (unreadable["interval_seconds"], unreadable["interval_kind"]) == (None, "none")


def test_migrate_line_keeps_current_fields() -> None:
    """Fields already in the current shape are kept."""
    line = migrate_line(
        {"id": "l", "distance": 100, "mode": "pull", "text": "kick", "interval_seconds": 90, "interval_kind": "sendoff"}
    )
    assert line["mode"] == "pull"
    assert (line["interval_seconds"], line["interval_kind"]) == (90, "sendoff")


def test_migrate_line_other_stroke_is_dropped() -> None:
    """The legacy 'other' stroke becomes no stroke."""
    assert migrate_line({"id": "l", "distance": 100, "stroke": "other"})["stroke"] is None


@pytest.mark.parametrize(
    "value, tag",
    [
        ("Sprint", "Sprint"),
        ("sprint work", "Sprint"),
        ("Long distance", "Distance"),
        ("IM day", "IM"),
        ("threshold set", "Threshold"),
        ("drill day", "Skills"),
        ("whatever", None),
        ("", None),
        (None, None),
    ],
)
def test_migrate_tag(value, tag) -> None:
    """Free-text tags map onto the closed tag set by containment."""
    assert migrate_tag(value) == tag


def test_load_template_from_v1() -> None:
    """A v1 template loads as a validated current-version template."""
    template = load_template(V1_TEMPLATE)
    assert template.schema_version == CURRENT_SCHEMA_VERSION
    assert template.pool_info == "25 Yards"
    assert template.tag == "Sprint"
    assert template.raw_text.startswith("MS")
    assert template.last_edited_at == template.created_at
    practice_set = template.sections[0].sets[0]
    assert practice_set.repeat_count == 2
    assert practice_set.lines[0].mode == "kick"


def test_migrate_template_does_not_touch_input() -> None:
    """Migration copies; the stored dict is left as it was."""
    migrate_template(V1_TEMPLATE)
    assert "poolInfo" in V1_TEMPLATE
    assert V1_TEMPLATE["sections"][0]["sets"][0]["lines"][0]["stroke"] == "kick"


def test_current_template_is_returned_as_is() -> None:
    """A template already at the current version is returned unchanged."""
    current = load_template(V1_TEMPLATE).model_dump()
    current["tag"] = "Recovery"
    assert migrate_template(current)["tag"] == "Recovery"


def test_template_without_sections_is_rejected() -> None:
    """A payload without a sections list is rejected."""
    with pytest.raises(ValueError):
        migrate_template({"id": "broken", "title": "x"})


def test_untitled_v1_template_gets_default_title() -> None:
    """A v1 template without title or id gets both filled in."""
    template = load_template({"sections": []})
    assert template.title == UNTITLED
    assert template.id.startswith("tpl_")


def test_template_from_parse_title_precedence() -> None:
    """The caller's title wins, then the parsed title, then the untitled default."""
    text = "Tuesday\nMS\n4x100 free @ 1:30\n"
    result = parse(text)
    assert template_from_parse(result, text).title == "Tuesday"
    assert template_from_parse(result, text, title="Override").title == "Override"
    assert template_from_parse(parse("MS\n100\n"), "MS\n100\n").title == UNTITLED


def test_template_from_parse_keeps_sections_and_text() -> None:
    """A new template keeps the parsed sections, the raw text and a mapped tag."""
    text = "MS\n4x100 free @ 1:30\n"
    template = template_from_parse(parse(text), text, pool_info="25 Yards", tag="sprint")
    assert template.raw_text == text
    assert template.tag == "Sprint"
    assert template.sections[0].sets[0].lines[0].distance == 100


def test_load_keeps_stored_yardage() -> None:
    """A v1 line's yardageOverride survives loading, so the template total does not change."""
    # 300 override x 2 rounds; 4x50 x 2 rounds would give 400
    template = load_template(V1_TEMPLATE)
    assert template.sections[0].sets[0].lines[0].yardage_override == 300
    assert total_yards(template.sections) == 600
    assert load_template(template.model_dump()).model_dump() == template.model_dump()
