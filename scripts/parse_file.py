#!/usr/bin/env python3
"""
Run practice text files through swimset parse_workout. Uses the swimset package directly
(no MCP server needed). Usage: python scripts/parse_file.py [file_or_dir ...]
"""
from __future__ import annotations

import sys
from pathlib import Path

# Project root = parent of scripts/
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from swimset.metrics import set_yards, stroke_yards
from swimset.models import ParseWorkoutInput
from swimset.parser import parse_workout_impl
from swimset.render import format_line


SAMPLES_DIR = ROOT / "samples"


def _collect(args: list[str]) -> list[Path]:
    targets = [Path(a) for a in args] or [SAMPLES_DIR]
    files: list[Path] = []
    for t in targets:
        if t.is_dir():
            files.extend(sorted(t.glob("*.txt")))
        elif t.exists():
            files.append(t)
        else:
            print(f"[SKIP] {t} (not found)")
    return files


def main() -> None:
    files = _collect(sys.argv[1:])
    if not files:
        print("Nothing to parse.")
        sys.exit(1)

    for path in files:
        content = path.read_text(encoding="utf-8", errors="replace")
        out = parse_workout_impl(ParseWorkoutInput(text=content))

        print(f"\n{'='*60}")
        print(f"FILE: {path.name}")
        print("=" * 60)
        print(f"Status: {out.status}")
        print(f"Title: {out.result.title or '(none)'}")
        print(f"Summary: sections={out.summary.sections_detected}  sets={out.summary.sets_detected}  "
              f"lines={out.summary.lines_detected}  text_only={out.summary.text_only_lines}  "
              f"yards={out.summary.total_yards}")
        for w in out.result.warnings:
            print(f"  ! {w}")
        for section in out.result.sections:
            print(f"[{section.label}]")
            for s in section.sets:
                head = f"  {s.repeat_count}x round" if s.repeat_count > 1 else "  set"
                print(f"{head} ({set_yards(s)} yds)")
                for line in s.lines:
                    print(f"    {format_line(line)}")
        by_stroke = stroke_yards(out.result)
        if by_stroke:
            print("By stroke: " + ", ".join(f"{k}={v}" for k, v in sorted(by_stroke.items())))
        print()


if __name__ == "__main__":
    main()
