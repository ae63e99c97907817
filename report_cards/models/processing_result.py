from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .report_card import ReportCard

"""Batch result models.

Aggregates per-class outcomes of a batch run for the SUMMARY line and the
JSON export.
"""


@dataclass(frozen=True)
class LoadStat:
    """Per-class load statistics."""
    class_name: str
    source: str
    status: str  # success/failed
    student_count: int
    elapsed_seconds: float
    error: str | None = None


@dataclass(frozen=True)
class BatchResult:
    """Aggregated results of generating report cards for several classes."""
    success_classes: int
    failed_classes: int
    total_students: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    load_stats: tuple[LoadStat, ...] = ()
    report_cards: tuple[ReportCard, ...] = ()

    @property
    def total_classes(self) -> int:
        return self.success_classes + self.failed_classes
