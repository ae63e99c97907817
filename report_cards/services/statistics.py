from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from types import MappingProxyType

from ..models.cells import parse_cell, parse_number
from ..models.columns import ColumnRecord
from ..models.grades import SubjectStat

"""Per-subject class statistics.

Only numeric cells are sampled; blanks, absences, remarks and formula errors
are left out instead of counting as zero. A subject column without a single
numeric entry gets no SubjectStat at all.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "build_stats",
    "parse_max_score",
    "column_samples",
]


def _cell(row: Sequence[str], idx: int) -> str:
    return row[idx] if idx < len(row) else ""


def parse_max_score(bareme_row: Sequence[str], idx: int, default: float = 20) -> float:
    """Max score of column ``idx`` from the bareme row, or ``default``."""
    value = parse_number(_cell(bareme_row, idx))
    return default if value is None else value


def column_samples(student_rows: Sequence[Sequence[str]], idx: int) -> list[float]:
    samples: list[float] = []
    for row in student_rows:
        cell = parse_cell(_cell(row, idx))
        if cell.is_numeric:
            samples.append(cell.number)  # type: ignore[arg-type]
    return samples


def build_stats(
    columns: Sequence[ColumnRecord],
    bareme_row: Sequence[str],
    student_rows: Sequence[Sequence[str]],
    default_max_score: float = 20,
) -> Mapping[int, SubjectStat]:
    """Compute min/max/avg/max score for every subject column.

    Args:
        columns: Classified header row
        bareme_row: Second row of the table (max score per column)
        student_rows: Student rows (already filtered)
        default_max_score: Max score when the bareme cell is missing or not a number

    Returns:
        Read-only mapping keyed by original column index
    """
    stats: dict[int, SubjectStat] = {}
    for record in columns:
        if not record.role.is_subject:
            continue
        idx = record.column_index
        samples = column_samples(student_rows, idx)
        if not samples:
            logger.debug("column=%d header=%s has no numeric entry, no stats", idx, record.header)
            continue
        lo, hi = min(samples), max(samples)
        # float rounding of sum/count may step outside [lo, hi]
        avg = min(max(sum(samples) / len(samples), lo), hi)
        stats[idx] = SubjectStat(
            min=lo,
            max=hi,
            avg=avg,
            max_score=parse_max_score(bareme_row, idx, default_max_score),
        )
    return MappingProxyType(stats)
