from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

"""ClassLoad domain model and LoadStatus enum.

A ClassLoad records the outcome of one class CSV in a batch run.
"""


class LoadStatus(Enum):
    """Final status of a class load."""
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class ClassLoad:
    """Processing context for a single class file."""
    class_name: str
    source: str                          # path or URL of the CSV
    status: LoadStatus
    start_time: datetime | None = None
    end_time: datetime | None = None
    student_count: int = 0
    error: str | None = None             # failure reason summary

    @property
    def elapsed_seconds(self) -> float:
        if self.start_time is None or self.end_time is None:
            return 0.0
        return (self.end_time - self.start_time).total_seconds()
