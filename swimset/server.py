"""MCP server: swimset.parse_workout, swimset.compute_yardage, swimset.render_text, swimset.migrate_template."""

from __future__ import annotations

import logging
import os

from fastmcp import FastMCP

from .metrics import compute_yardage_impl
from .migrate import load_template
from .models import ComputeYardageInput, ParseWorkoutInput, RenderTextInput
from .parser import parse_workout_impl
from .render import render_text_impl

logger = logging.getLogger(__name__)

mcp = FastMCP(name="swimset")


def _log_level() -> str:
    """Level name from SWIMSET_LOG_LEVEL, WARNING when unset or blank."""
    return os.environ.get("SWIMSET_LOG_LEVEL", "").strip().upper() or "WARNING"


@mcp.tool(name="swimset.parse_workout")
def swimset_parse_workout(payload: dict) -> dict:
    """
    Parse freeform swim practice text (e.g. "4x100 free @ 1:30 descend 1-4") into sections, repeated sets
    and typed lines. Every non-blank, non-comment line yields output; problems come back as warnings.
    options.default_section_label only names content that arrives with no section open. Lines before
    the first header are title or dropped, so for plain text input it never shows up in the result.
    Returns { status, result, summary, signature }.
    """
    inp = ParseWorkoutInput.model_validate(payload)
    result = parse_workout_impl(inp)
    logger.info("parse_workout: status=%s yards=%d", result.status, result.summary.total_yards)
    return result.model_dump()


@mcp.tool(name="swimset.compute_yardage")
def swimset_compute_yardage(payload: dict) -> dict:
    """
    Compute total, per-section and per-stroke yardage from provided sections (stateless).
    Repeated sets count once per round; text-only lines count 0; a line's yardage_override replaces distance x reps.
    """
    inp = ComputeYardageInput.model_validate(payload)
    return compute_yardage_impl(inp).model_dump()


@mcp.tool(name="swimset.render_text")
def swimset_render_text(payload: dict) -> dict:
    """
    Render sections as commit-style practice text. Optional title, notes, pool_info,
    practice_date (YYYY-MM-DD) and practice_time (HH:MM) build the header.
    """
    inp = RenderTextInput.model_validate(payload)
    return render_text_impl(inp).model_dump()


@mcp.tool(name="swimset.migrate_template")
def swimset_migrate_template(payload: dict) -> dict:
    """Upgrade a stored practice template (any schema version) to the current schema and validate it."""
    return load_template(payload).model_dump()


def run() -> None:
    """Run the MCP server with stdio transport (default). Logs go to stderr."""
    logging.basicConfig(level=_log_level())
    mcp.run()
