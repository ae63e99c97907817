from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

from .columns import ColumnRecord, IndicatorKind

"""Value objects produced by the grade pipeline.

All of them are frozen: a ``GradeTable`` is built once per load and can be
shared between renderers without copying.
"""

__all__ = [
    "Row",
    "RawTable",
    "SubjectStat",
    "MentionCategory",
    "StudentMetrics",
    "GradeTable",
]

Row = tuple[str, ...]
RawTable = Sequence[Sequence[str]]


@dataclass(frozen=True)
class SubjectStat:
    """Class-wide statistics for one scored column.

    ``min``/``max``/``avg`` are ``None`` only for the placeholder returned by
    ``unknown()``; a real stat always has at least one numeric entry.
    """
    min: float | None
    max: float | None
    avg: float | None
    max_score: float

    @staticmethod
    def unknown(default_max_score: float = 20) -> SubjectStat:
        """Placeholder for a subject column with no class statistics."""
        return SubjectStat(min=None, max=None, avg=None, max_score=default_max_score)

    @property
    def is_known(self) -> bool:
        return self.avg is not None


class MentionCategory(Enum):
    """Fixed checkbox categories of the report-card footer, in match priority."""
    FELICITATIONS = "Félicitations"
    ENCOURAGEMENTS = "Encouragements"
    TRAVAIL = "Travail"
    COMPORTEMENT = "Comportement"


@dataclass(frozen=True)
class StudentMetrics:
    """Footer values for one student.

    Attributes:
        displayed_average: Spreadsheet average or formatted computed one ("-" if none)
        rank: Rank with ordinal superscript, or "-"
        mention: Mention cell passed through
        appreciation: Appreciation cell passed through
        mention_category: Checkbox category matched from ``mention``
        computed_average: Weighted average on a 20 point scale, None if no notes
    """
    displayed_average: str
    rank: str
    mention: str
    appreciation: str
    mention_category: MentionCategory | None = None
    computed_average: float | None = None


@dataclass(frozen=True)
class GradeTable:
    """Output of one pipeline run, ready for external rendering.

    ``stats`` is keyed by original column index and only holds subject columns
    with at least one numeric entry. A missing entry means "no class
    statistics available".
    """
    headers: Row
    bareme: Row
    students: tuple[Row, ...]
    stats: Mapping[int, SubjectStat] = field(default_factory=lambda: MappingProxyType({}))
    columns: tuple[ColumnRecord, ...] = ()

    @property
    def subject_columns(self) -> tuple[ColumnRecord, ...]:
        return tuple(c for c in self.columns if c.role.is_subject)

    def indicator_index(self, kind: IndicatorKind) -> int | None:
        """Index of the first column carrying ``kind``, if any."""
        for record in self.columns:
            if record.role.indicator is kind:
                return record.column_index
        return None

    def stat_for(self, column_index: int, default_max_score: float = 20) -> SubjectStat:
        return self.stats.get(column_index) or SubjectStat.unknown(default_max_score)
