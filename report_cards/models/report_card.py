from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import Any

from .config_models import SubjectLabel
from .grades import StudentMetrics

"""Render-ready report-card view models.

Plain data only: renderers (HTML templates, PDF, JSON export) consume these
without touching the raw table again.
"""

__all__ = [
    "ReportParams",
    "ScoreDisplay",
    "SubjectRow",
    "ReportCard",
]


@dataclass(frozen=True)
class ReportParams:
    """Selection that identifies one class file."""
    year: str = "2025-2026"
    semester: str = "1"
    class_name: str = "M06"
    issued_on: date | None = None

    @property
    def year_underscore(self) -> str:
        return self.year.replace("-", "_")

    @property
    def semester_label(self) -> str:
        return "1ER" if str(self.semester) == "1" else "2ND"


@dataclass(frozen=True)
class ScoreDisplay:
    score: str      # "ABS", "-", or the raw cell with a decimal comma
    max_score: str  # "/ 20"
    is_absent: bool = False


@dataclass(frozen=True)
class SubjectRow:
    column_index: int
    subject_key: str
    label: SubjectLabel
    score: ScoreDisplay
    class_average: str
    class_min: str
    class_max: str
    discipline_start: bool = False


@dataclass(frozen=True)
class ReportCard:
    last_name: str
    first_name: str
    class_name: str
    teacher: str
    title: str
    semester_header: str
    student_count_label: str
    issued_on: str
    metrics: StudentMetrics
    rows: tuple[SubjectRow, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        category = self.metrics.mention_category
        data["metrics"]["mention_category"] = category.value if category else None
        return data
