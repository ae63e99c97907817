from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import replace
from datetime import UTC, date, datetime
from pathlib import Path

from ..config.loader import default_config
from ..logging.error_log import ErrorLogBuffer, ErrorRecord
from ..models.class_load import ClassLoad, LoadStatus
from ..models.config_models import AppConfig, GradingConfig
from ..models.grades import GradeTable, RawTable, Row
from ..models.processing_result import BatchResult, LoadStat
from ..models.report_card import ReportCard, ReportParams
from ..tabular.reader import TransportError, read_grade_csv, resolve_class_path
from .classifier import ColumnClassifier
from .progress import ProgressTracker
from .report_card import build_report_cards
from .statistics import build_stats

"""Grade pipeline orchestration.

``run`` turns one raw table into a GradeTable: row 0 is classified, row 1
gives the max scores, rows 2+ with a last name are the students.
``process_classes`` drives a batch of class files through reader, pipeline
and report-card builder, recording one LoadStat per class.
"""

logger = logging.getLogger(__name__)

MIN_ROWS = 3  # header + bareme + at least one student
NAME_COLUMN = 1


class ProcessingError(Exception):
    """Base exception for processing errors."""
    pass


class MalformedTableError(ProcessingError):
    """Raised when a table is not a usable grade export ("invalid format")."""

    def __init__(self, reason: str, source: str | None = None) -> None:
        prefix = f"invalid format ({source})" if source else "invalid format"
        super().__init__(f"{prefix}: {reason}")
        self.reason = reason
        self.source = source


def _as_row(raw: Iterable[object]) -> Row:
    return tuple("" if v is None else str(v) for v in raw)


def has_student_name(row: Row) -> bool:
    return len(row) > NAME_COLUMN and row[NAME_COLUMN].strip() != ""


def run(raw_table: RawTable, config: GradingConfig | None = None, source: str | None = None) -> GradeTable:
    """Run the grade pipeline on one raw table.

    Args:
        raw_table: Rows of text cells (headers, bareme, students)
        config: Grading dictionaries; defaults to the packaged ones
        source: Path/URL used in error messages

    Returns:
        GradeTable with headers, filtered students, stats and column records

    Raises:
        MalformedTableError: fewer than 3 rows or no student with a name
    """
    config = config or default_config().grading
    rows = [_as_row(r) for r in raw_table]
    if len(rows) < MIN_ROWS:
        raise MalformedTableError(f"expected at least {MIN_ROWS} rows, got {len(rows)}", source)

    headers, bareme = rows[0], rows[1]
    students = tuple(r for r in rows[2:] if has_student_name(r))
    skipped = len(rows) - 2 - len(students)
    if skipped:
        logger.debug("skipped %d rows without a last name", skipped)
    if not students:
        raise MalformedTableError("no student row with a last name", source)

    classifier = ColumnClassifier(config)
    columns = classifier.classify_headers(headers)
    stats = build_stats(columns, bareme, students, config.default_max_score)
    columns = tuple(replace(c, stat=stats.get(c.column_index)) for c in columns)

    return GradeTable(headers=headers, bareme=bareme, students=students, stats=stats, columns=columns)


def process_classes(
    config: AppConfig,
    year: str,
    semester: str,
    class_names: Iterable[str],
    issued_on: date | None = None,
    error_log: ErrorLogBuffer | None = None,
) -> BatchResult:
    """Generate report cards for several classes of one semester.

    A failing class (missing file, malformed table) is recorded and the batch
    continues with the next one. Errors are flushed to the JSON Lines log once
    at the end.
    """
    start_time = datetime.now(UTC)
    error_log = error_log if error_log is not None else ErrorLogBuffer()
    names = list(class_names)

    load_stats: list[LoadStat] = []
    cards: list[ReportCard] = []
    success_count = 0
    failed_count = 0
    total_students = 0

    with ProgressTracker(len(names), description="Generating report cards") as progress:
        for class_name in names:
            params = ReportParams(year=year, semester=semester, class_name=class_name, issued_on=issued_on)
            path = resolve_class_path(config.source, params)
            progress.start_item(class_name)

            load, class_cards = _process_single_class(path, params, config, error_log)
            if load.status is LoadStatus.SUCCESS:
                success_count += 1
                total_students += load.student_count
                cards.extend(class_cards)
            else:
                failed_count += 1

            progress.set_postfix(success=success_count, failed=failed_count, students=total_students)
            progress.finish_item(success=load.status is LoadStatus.SUCCESS)
            load_stats.append(
                LoadStat(
                    class_name=class_name,
                    source=load.source,
                    status=load.status.value,
                    student_count=load.student_count,
                    elapsed_seconds=load.elapsed_seconds,
                    error=load.error,
                )
            )

    try:
        error_log.flush()
    except OSError as e:
        logger.warning("could not write error log: %s", e)

    end_time = datetime.now(UTC)
    return BatchResult(
        success_classes=success_count,
        failed_classes=failed_count,
        total_students=total_students,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        load_stats=tuple(load_stats),
        report_cards=tuple(cards),
    )


def _process_single_class(
    path: Path,
    params: ReportParams,
    config: AppConfig,
    error_log: ErrorLogBuffer,
) -> tuple[ClassLoad, tuple[ReportCard, ...]]:
    """Load one class file and build its report cards.

    Transport and format failures are terminal for this class only.
    """
    source = str(path)
    start_time = datetime.now(UTC)
    error_type = "UNEXPECTED_ERROR"
    try:
        raw = read_grade_csv(path)
        table = run(raw, config.grading, source=source)
        cards = build_report_cards(table, params, config.grading)
    except TransportError as e:
        error_type = "TRANSPORT_ERROR"
        logger.error("class=%s not found or not loadable: %s", params.class_name, e)
        error = str(e)
    except MalformedTableError as e:
        error_type = "MALFORMED_TABLE"
        logger.error("class=%s %s", params.class_name, e)
        error = str(e)
    except Exception as e:
        logger.exception("class=%s unexpected failure", params.class_name)
        error = str(e)
    else:
        logger.info("class=%s students=%d", params.class_name, len(table.students))
        return (
            ClassLoad(
                class_name=params.class_name,
                source=source,
                start_time=start_time,
                end_time=datetime.now(UTC),
                status=LoadStatus.SUCCESS,
                student_count=len(table.students),
            ),
            cards,
        )

    error_log.append(ErrorRecord.create(source, params.class_name, error_type, error))
    return (
        ClassLoad(
            class_name=params.class_name,
            source=source,
            start_time=start_time,
            end_time=datetime.now(UTC),
            status=LoadStatus.FAILED,
            error=error,
        ),
        (),
    )
