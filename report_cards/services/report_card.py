from __future__ import annotations

from datetime import date

from ..models.config_models import GradingConfig
from ..models.grades import GradeTable, Row
from ..models.report_card import ReportCard, ReportParams, SubjectRow
from .classifier import ColumnClassifier
from .metrics import MetricsCalculator, format_number

"""Report-card view models, one per student of a GradeTable."""

__all__ = [
    "build_report_card",
    "build_report_cards",
]


def _issued_on(params: ReportParams) -> str:
    return (params.issued_on or date.today()).strftime("%d/%m/%Y")


def _subject_rows(student: Row, table: GradeTable, config: GradingConfig) -> tuple[SubjectRow, ...]:
    classifier = ColumnClassifier(config)
    calculator = MetricsCalculator(config)
    rows: list[SubjectRow] = []
    discipline_seen = False
    for record in table.subject_columns:
        key = record.role.subject_key or ""
        is_behavior = key in config.behavior_subjects
        discipline_start = is_behavior and not discipline_seen
        discipline_seen = discipline_seen or is_behavior
        stat = table.stats.get(record.column_index)
        rows.append(
            SubjectRow(
                column_index=record.column_index,
                subject_key=key,
                label=classifier.subject_label(record),
                score=calculator.score(student, record, table),
                class_average=format_number(stat.avg if stat else None),
                class_min=format_number(stat.min if stat else None),
                class_max=format_number(stat.max if stat else None),
                discipline_start=discipline_start,
            )
        )
    return tuple(rows)


def build_report_card(student: Row, table: GradeTable, params: ReportParams, config: GradingConfig) -> ReportCard:
    semester = params.semester_label
    return ReportCard(
        last_name=student[1] if len(student) > 1 else "",
        first_name=student[2] if len(student) > 2 else "",
        class_name=params.class_name,
        teacher=config.teacher_for(params.class_name),
        title=f"BULLETIN DU {semester} SEMESTRE {params.year.replace('-', '/')}",
        semester_header=f"{semester} SEM.",
        student_count_label=f"({len(table.students)} ÉLÈVES)",
        issued_on=_issued_on(params),
        metrics=MetricsCalculator(config).compute(student, table),
        rows=_subject_rows(student, table, config),
    )


def build_report_cards(table: GradeTable, params: ReportParams, config: GradingConfig) -> tuple[ReportCard, ...]:
    """Report cards in student row order."""
    return tuple(build_report_card(student, table, params, config) for student in table.students)
