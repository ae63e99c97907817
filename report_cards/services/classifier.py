from __future__ import annotations

import unicodedata
from collections.abc import Callable, Sequence
from typing import Any

from ..models.columns import IGNORED, ColumnRecord, ColumnRole, IndicatorKind
from ..models.config_models import GradingConfig, SubjectLabel

"""Column classification from header text.

Rules are an ordered list of ``(predicate, role)`` pairs evaluated top to
bottom; the first predicate that accepts the normalized header decides the
role. Indicator rules come before the ignored-metadata rule so that e.g.
``MOYENNE`` feeds the student average while still being excluded from subject
aggregation.
"""

__all__ = [
    "ColumnClassifier",
    "normalize_header",
    "strip_accents",
]

Predicate = Callable[[str], bool]


def normalize_header(header: Any) -> str:
    if header is None:
        return ""
    return str(header).strip().upper()


def strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


class ColumnClassifier:
    """Decide whether a column is a subject, an indicator, or ignored."""

    def __init__(self, config: GradingConfig) -> None:
        self.config = config
        average_headers = frozenset(config.average_headers)
        appreciation = strip_accents(config.appreciation_token.upper())
        self.rules: tuple[tuple[Predicate, ColumnRole], ...] = (
            (lambda h: h == "", IGNORED),
            (lambda h: h in average_headers, ColumnRole.of_indicator(IndicatorKind.AVERAGE)),
            (lambda h: h == config.rank_header, ColumnRole.of_indicator(IndicatorKind.RANK)),
            (lambda h: h == config.mention_header, ColumnRole.of_indicator(IndicatorKind.MENTION)),
            (lambda h: appreciation in strip_accents(h), ColumnRole.of_indicator(IndicatorKind.APPRECIATION)),
            (lambda h: h in config.ignored_columns, IGNORED),
        )

    def classify(self, header: Any) -> ColumnRole:
        normalized = normalize_header(header)
        for predicate, role in self.rules:
            if predicate(normalized):
                return role
        return ColumnRole.subject(normalized)

    def classify_headers(self, headers: Sequence[Any]) -> tuple[ColumnRecord, ...]:
        """Classify a whole header row, keeping original column positions."""
        return tuple(
            ColumnRecord(column_index=idx, header="" if h is None else str(h), role=self.classify(h))
            for idx, h in enumerate(headers)
        )

    def subject_label(self, record: ColumnRecord) -> SubjectLabel:
        """Display bundle for a subject column (raw header when unknown)."""
        key = record.role.subject_key or normalize_header(record.header)
        return self.config.subject_label(key, record.header.strip())
