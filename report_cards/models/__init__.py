"""Domain models for the report-card generator.

Value objects shared by the grade pipeline, the configuration loader, and the
batch runner.
"""

from .cells import CellKind, CellValue, parse_cell, parse_number
from .columns import ColumnRecord, ColumnRole, IndicatorKind, RoleKind
from .config_models import AppConfig, ClassInfo, GradingConfig, SourceSettings, SubjectLabel
from .grades import GradeTable, MentionCategory, RawTable, Row, StudentMetrics, SubjectStat
from .report_card import ReportCard, ReportParams, ScoreDisplay, SubjectRow

__all__ = [
    # Cells
    "CellKind",
    "CellValue",
    "parse_cell",
    "parse_number",
    # Columns
    "ColumnRecord",
    "ColumnRole",
    "IndicatorKind",
    "RoleKind",
    # Configuration models
    "AppConfig",
    "ClassInfo",
    "GradingConfig",
    "SourceSettings",
    "SubjectLabel",
    # Pipeline output
    "GradeTable",
    "MentionCategory",
    "RawTable",
    "Row",
    "StudentMetrics",
    "SubjectStat",
    # Report cards
    "ReportCard",
    "ReportParams",
    "ScoreDisplay",
    "SubjectRow",
]
