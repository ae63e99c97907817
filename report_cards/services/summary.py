from __future__ import annotations

from ..models.processing_result import BatchResult

"""SUMMARY line rendering for batch runs."""


def _format_seconds(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # avoid scientific notation
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(round(value, 3))


def render_summary_line(total_classes: int, result: BatchResult) -> str:
    """Render the SUMMARY line of a batch run.

    Format:
    SUMMARY classes={total}/{total} success={success} failed={failed}
    students={students} elapsed_sec={elapsed}

    Examples:
        >>> from datetime import datetime, timezone
        >>> start = datetime(2025, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
        >>> end = datetime(2025, 1, 1, 10, 0, 2, tzinfo=timezone.utc)
        >>> result = BatchResult(
        ...     success_classes=2, failed_classes=1, total_students=41,
        ...     start_time=start, end_time=end, elapsed_seconds=2.0,
        ... )
        >>> render_summary_line(3, result)
        'SUMMARY classes=3/3 success=2 failed=1 students=41 elapsed_sec=2'
    """
    return (
        f"SUMMARY classes={total_classes}/{total_classes} "
        f"success={result.success_classes} "
        f"failed={result.failed_classes} "
        f"students={result.total_students} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )
