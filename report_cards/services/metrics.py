from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any

from ..models.cells import (
    NOT_AVAILABLE,
    is_error_token,
    parse_cell,
    to_display_decimal,
)
from ..models.columns import ColumnRecord, IndicatorKind
from ..models.config_models import GradingConfig
from ..models.grades import GradeTable, MentionCategory, StudentMetrics, SubjectStat
from ..models.report_card import ScoreDisplay
from .classifier import ColumnClassifier

"""Per-student footer metrics.

The weighted average puts the student's raw point total on a 20 point scale:
``sum(scores) / sum(max scores of every subject with stats) * 20``. A
spreadsheet-provided average always wins over the computed one when it is
usable; the rank is never recomputed.
"""

__all__ = [
    "MetricsCalculator",
    "compute_metrics",
    "computed_average",
    "format_number",
    "format_rank",
    "format_average",
    "format_score",
    "classify_mention",
]

SCALE = 20
ABSENT_DISPLAY = "ABS"

# first match wins
MENTION_KEYWORDS: tuple[tuple[tuple[str, ...], MentionCategory], ...] = (
    (("FÉLICITATIONS", "FELICITATIONS"), MentionCategory.FELICITATIONS),
    (("ENCOURAGEMENTS",), MentionCategory.ENCOURAGEMENTS),
    (("TRAVAIL",), MentionCategory.TRAVAIL),
    (("COMPORTEMENT",), MentionCategory.COMPORTEMENT),
)


def _cell(row: Sequence[str], idx: int | None) -> str | None:
    if idx is None:
        return None
    return row[idx] if idx < len(row) else ""


def format_number(value: Any, decimals: int = 2) -> str:
    """Round half-up to ``decimals``, trim trailing zeros, use a decimal comma.

    ``None``/NaN/non-numbers render as ``-``.

    >>> format_number(15.0), format_number(12.346), format_number(None)
    ('15', '12,35', '-')
    """
    if value is None or isinstance(value, bool):
        return NOT_AVAILABLE
    try:
        number = float(value)
    except (TypeError, ValueError):
        return NOT_AVAILABLE
    if not math.isfinite(number):
        return NOT_AVAILABLE
    exact = Decimal(number)
    quantum = Decimal(1).scaleb(-decimals)
    # precision must hold every integer digit plus the kept decimals
    with localcontext(prec=max(28, exact.adjusted() + decimals + 2)):
        rounded = exact.quantize(quantum, rounding=ROUND_HALF_UP).normalize()
    if rounded == 0:
        rounded = Decimal(0)
    return format(rounded, "f").replace(".", ",")


def format_rank(raw: str | None) -> str:
    """``1`` → ``1<sup>er</sup>``, ``N`` → ``N<sup>ème</sup>``, unusable → ``-``."""
    if raw is None:
        return NOT_AVAILABLE
    text = raw.strip()
    if text == "" or is_error_token(text):
        return NOT_AVAILABLE
    if text == "1":
        return "1<sup>er</sup>"
    return f"{text}<sup>ème</sup>"


def classify_mention(mention: str | None) -> MentionCategory | None:
    if not mention:
        return None
    upper = mention.upper()
    for keywords, category in MENTION_KEYWORDS:
        if any(k in upper for k in keywords):
            return category
    return None


def computed_average(
    student: Sequence[str],
    columns: Sequence[ColumnRecord],
    stats: Mapping[int, SubjectStat],
) -> float | None:
    """Weighted average on a 20 point scale, or None without any numeric note.

    Columns without stats add neither to the student's sum nor to the total
    max score.
    """
    total_max_score = sum(s.max_score for s in stats.values())
    student_sum = 0.0
    has_any_note = False
    for record in columns:
        if not record.role.is_subject or record.column_index not in stats:
            continue
        cell = parse_cell(_cell(student, record.column_index))
        if cell.is_numeric:
            student_sum += cell.number  # type: ignore[operator]
            has_any_note = True
    if has_any_note and total_max_score > 0:
        return student_sum / total_max_score * SCALE
    return None


def format_average(raw_average: str | None, computed: float | None) -> str:
    """Prefer a usable spreadsheet average, else format the computed one."""
    if raw_average is not None:
        text = raw_average.strip()
        if text != "" and not is_error_token(text):
            return to_display_decimal(text)
    return format_number(computed)


def format_score(cell_text: str | None, stat: SubjectStat | None, default_max_score: float = 20) -> ScoreDisplay:
    """Score cell of one subject row, shown next to the column max score.

    The cell text is displayed as written (decimal comma), not parsed; only
    an empty cell shows ``-``. A column without stats falls back to the
    default max score.
    """
    max_score = stat.max_score if stat is not None else default_max_score
    max_display = f"/ {format_number(max_score)}"
    cell = parse_cell(cell_text)
    if cell.is_absence_mark:
        return ScoreDisplay(score=ABSENT_DISPLAY, max_score=max_display, is_absent=True)
    score = to_display_decimal(cell.raw) if cell.raw else NOT_AVAILABLE
    return ScoreDisplay(score=score, max_score=max_display)


def compute_metrics(
    student: Sequence[str],
    columns: Sequence[ColumnRecord],
    stats: Mapping[int, SubjectStat],
) -> StudentMetrics:
    """Footer metrics for one student row of a classified table."""
    def first(kind: IndicatorKind) -> int | None:
        return next((c.column_index for c in columns if c.role.indicator is kind), None)

    average = computed_average(student, columns, stats)
    mention = _cell(student, first(IndicatorKind.MENTION)) or ""
    return StudentMetrics(
        displayed_average=format_average(_cell(student, first(IndicatorKind.AVERAGE)), average),
        rank=format_rank(_cell(student, first(IndicatorKind.RANK))),
        mention=mention,
        appreciation=_cell(student, first(IndicatorKind.APPRECIATION)) or "",
        mention_category=classify_mention(mention),
        computed_average=average,
    )


class MetricsCalculator:
    """Computes StudentMetrics and subject-row score displays on demand."""

    def __init__(self, config: GradingConfig) -> None:
        self.config = config
        self.classifier = ColumnClassifier(config)

    def compute(self, student: Sequence[str], table: GradeTable) -> StudentMetrics:
        return compute_metrics(student, table.columns, table.stats)

    def compute_for_headers(
        self,
        student: Sequence[str],
        headers: Sequence[str],
        stats: Mapping[int, SubjectStat],
    ) -> StudentMetrics:
        """Same as ``compute`` for callers holding only the header row."""
        return compute_metrics(student, self.classifier.classify_headers(headers), stats)

    def score(self, student: Sequence[str], record: ColumnRecord, table: GradeTable) -> ScoreDisplay:
        return format_score(
            _cell(student, record.column_index),
            table.stats.get(record.column_index),
            self.config.default_max_score,
        )
