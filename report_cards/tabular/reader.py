from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from urllib.error import URLError

import pandas as pd

from ..models.config_models import SourceSettings
from ..models.grades import RawTable, Row
from ..models.report_card import ReportParams

"""Tabular data source for grade CSV exports.

The whole file is read headerless with every cell kept as text: row 0 holds
the column headers, row 1 the max score per column, and the remaining rows
one student each. Interpretation of the cells is left to the grade pipeline.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "TransportError",
    "CsvDataSource",
    "read_grade_csv",
    "resolve_class_path",
]


class TransportError(Exception):
    """Raised when a CSV cannot be fetched or returns no data."""

    def __init__(self, location: str, reason: str) -> None:
        super().__init__(f"{location}: {reason}")
        self.location = location
        self.reason = reason


def _is_url(location: str) -> bool:
    return location.startswith(("http://", "https://", "file://"))


def read_grade_csv(location: str | Path) -> tuple[Row, ...]:
    """Read a CSV file or URL into a fully materialized table of strings.

    Blank lines are skipped. Short rows are padded with empty strings.

    Raises:
        TransportError: file missing, URL unreachable, empty payload, or
            unparsable CSV
    """
    loc = str(location)
    if not _is_url(loc) and not Path(loc).exists():
        raise TransportError(loc, "file not found")
    try:
        df = pd.read_csv(
            loc,
            header=None,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            encoding="utf-8-sig",
        )
    except pd.errors.EmptyDataError as e:
        raise TransportError(loc, "no data") from e
    except pd.errors.ParserError as e:
        raise TransportError(loc, f"parse error: {e}") from e
    except (URLError, OSError) as e:
        raise TransportError(loc, f"loading error: {e}") from e

    rows: list[Row] = []
    for raw in df.itertuples(index=False, name=None):
        rows.append(tuple("" if pd.isna(v) else str(v) for v in raw))
    logger.debug("read %s rows=%d cols=%d", loc, df.shape[0], df.shape[1])
    return tuple(rows)


class CsvDataSource:
    """Single-shot asynchronous source for one CSV payload.

    ``fetch()`` resolves to the whole table or raises ``TransportError``.
    Cancelling the awaiting task abandons the pending read.
    """

    def __init__(self, location: str | Path) -> None:
        self.location = str(location)

    def __repr__(self) -> str:  # pragma: no cover (trivial)
        return f"CsvDataSource({self.location!r})"

    async def fetch(self) -> RawTable:
        return await asyncio.to_thread(read_grade_csv, self.location)


def resolve_class_path(settings: SourceSettings, params: ReportParams) -> Path:
    """Build the CSV path for a class/semester/year selection.

    >>> resolve_class_path(SourceSettings(data_directory="data"), ReportParams("2025-2026", "1", "M06")).as_posix()
    'data/2025-2026/SEMESTRE 1/[AMI] NOTES - 2025_2026 - SEMESTRE 1 - M06.csv'
    """
    relative = settings.path_template.format(
        year=params.year,
        year_underscore=params.year_underscore,
        semester=params.semester,
        class_name=params.class_name,
    )
    return Path(settings.data_directory) / relative
