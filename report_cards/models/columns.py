from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .grades import SubjectStat

"""Column roles derived from the header row of a grade table."""

__all__ = [
    "RoleKind",
    "IndicatorKind",
    "ColumnRole",
    "ColumnRecord",
    "IGNORED",
]


class RoleKind(Enum):
    IGNORED = "ignored"
    SUBJECT = "subject"
    INDICATOR = "indicator"


class IndicatorKind(Enum):
    """Non-subject columns whose cells feed the per-student footer."""
    AVERAGE = "average"
    RANK = "rank"
    MENTION = "mention"
    APPRECIATION = "appreciation"


@dataclass(frozen=True)
class ColumnRole:
    """Tagged role of one column.

    ``subject_key`` is set only for SUBJECT roles, ``indicator`` only for
    INDICATOR roles.
    """
    kind: RoleKind
    subject_key: str | None = None
    indicator: IndicatorKind | None = None

    @staticmethod
    def subject(key: str) -> ColumnRole:
        return ColumnRole(RoleKind.SUBJECT, subject_key=key)

    @staticmethod
    def of_indicator(kind: IndicatorKind) -> ColumnRole:
        return ColumnRole(RoleKind.INDICATOR, indicator=kind)

    @property
    def is_subject(self) -> bool:
        return self.kind is RoleKind.SUBJECT


IGNORED = ColumnRole(RoleKind.IGNORED)


@dataclass(frozen=True)
class ColumnRecord:
    """One column of a loaded table: position, header text, role, and stats.

    ``stat`` stays ``None`` for non-subject columns and for subject columns
    without a single numeric entry.
    """
    column_index: int
    header: str
    role: ColumnRole
    stat: SubjectStat | None = None
