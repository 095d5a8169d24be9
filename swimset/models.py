"""Pydantic models for swimset: parsed workout tree, templates, and tool inputs/outputs."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator


Stroke = Literal["freestyle", "backstroke", "breaststroke", "butterfly", "im", "choice"]
Mode = Literal["swim", "kick", "pull", "drill", "scull", "technique"]
IntervalKind = Literal["sendoff", "rest", "none"]
PacePattern = Literal[
    "easy",
    "cruise",
    "moderate",
    "fast",
    "sprint",
    "descend",
    "ascend",
    "build",
    "negative_split",
    "even_pace",
    "best_average",
    "hold_pace",
    "race_pace",
    "threshold",
]
PracticeTag = Literal["Sprint", "Distance", "IM", "Recovery", "Threshold", "Skills"]


# --- Parsed workout tree ---

class PracticeLine(BaseModel):
    """One typed line of a set, e.g. 4x100 free @ 1:30."""
    id: str
    reps: Optional[int] = Field(default=None, ge=1)
    distance: Optional[int] = Field(default=None, ge=0)
    stroke: Optional[Stroke] = None
    mode: Optional[Mode] = None
    interval_seconds: Optional[int] = Field(default=None, ge=0)
    interval_kind: IntervalKind = "none"
    effort: Optional[PacePattern] = None
    text: str = ""  # free-form remainder / notes
    yardage_override: Optional[int] = Field(default=None, ge=0)  # stored yards replacing distance x reps

    @model_validator(mode="after")
    def _check_interval_fields(self) -> "PracticeLine":
        if self.interval_kind == "none":
            if self.interval_seconds is not None:
                raise ValueError("interval_seconds must be null when interval_kind is none")
        elif self.interval_seconds is None:
            raise ValueError(f"interval_seconds required when interval_kind is {self.interval_kind}")
        return self

    @property
    def is_text_only(self) -> bool:
        return self.reps is None and self.distance is None


class PracticeSet(BaseModel):
    id: str
    title: Optional[str] = None
    repeat_count: int = Field(default=1, ge=1)
    lines: list[PracticeLine] = Field(default_factory=list)


class Section(BaseModel):
    id: str
    label: str  # canonical label, or the caller's fallback for unheaded content
    sets: list[PracticeSet] = Field(default_factory=list)


class ParseResult(BaseModel):
    """Output of one parse() call. Total yardage is derived (see metrics), never stored."""
    sections: list[Section] = Field(default_factory=list)
    title: Optional[str] = None
    warnings: list[str] = Field(default_factory=list)


# --- Persisted template ---

class PracticeTemplate(BaseModel):
    id: str
    schema_version: int = 2
    title: str
    notes: Optional[str] = None  # e.g. "Team Practice"
    pool_info: Optional[str] = None  # e.g. "25 Yards"
    tag: Optional[PracticeTag] = None
    sections: list[Section] = Field(default_factory=list)
    raw_text: Optional[str] = None  # original typed workout
    created_at: str  # ISO 8601
    last_edited_at: str


# --- parse_workout tool ---

class ParseOptions(BaseModel):
    default_section_label: str = "Main Set"


class ParseWorkoutInput(BaseModel):
    text: str
    options: Optional[ParseOptions] = None


class ParseSummary(BaseModel):
    sections_detected: int = 0
    sets_detected: int = 0
    lines_detected: int = 0
    text_only_lines: int = 0
    total_yards: int = 0


class ParseSignature(BaseModel):
    canonical_sha256: str
    parser_version: str


class ParseWorkoutOutput(BaseModel):
    status: Literal["ok", "needs_review"]
    result: ParseResult
    summary: ParseSummary
    signature: ParseSignature


# --- compute_yardage tool ---

class ComputeYardageInput(BaseModel):
    sections: list[Section] = Field(default_factory=list)


class SectionYardage(BaseModel):
    label: str
    yards: int = 0


class MetricsSignature(BaseModel):
    metrics_version: str


class ComputeYardageOutput(BaseModel):
    total_yards: int = 0
    section_yards: list[SectionYardage] = Field(default_factory=list)
    stroke_yards: dict[str, int] = Field(default_factory=dict)  # stroke or mode -> yards
    signature: MetricsSignature


# --- render_text tool ---

class RenderTextInput(BaseModel):
    sections: list[Section] = Field(default_factory=list)
    title: Optional[str] = None
    notes: Optional[str] = None
    pool_info: Optional[str] = None
    practice_date: Optional[str] = None  # YYYY-MM-DD
    practice_time: Optional[str] = None  # HH:MM (24h)


class RenderTextOutput(BaseModel):
    text: str
