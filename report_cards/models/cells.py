from __future__ import annotations

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

"""Cell normalization for spreadsheet-exported grade tables.

Every raw text cell goes through ``parse_cell`` exactly once so that the
statistics builder and the metrics calculator agree on what counts as a score.
A cell that is not a number is never treated as zero.
"""

__all__ = [
    "CellKind",
    "CellValue",
    "ABSENCE_MARK",
    "NOT_AVAILABLE",
    "DIV_ZERO_TOKEN",
    "parse_cell",
    "parse_number",
    "is_error_token",
    "to_display_decimal",
]

# optional sign, ASCII digits, one '.' or ',' separator, optional fraction digits
NUMERIC_RE = re.compile(r"^[+-]?\d+(?:[.,]\d*)?$", re.ASCII)

ABSENCE_MARK = "abs"
NOT_AVAILABLE = "-"
DIV_ZERO_TOKEN = "#DIV/0!"


class CellKind(Enum):
    """Closed set of interpretations for a raw cell."""
    NUMERIC = "numeric"
    ABSENT = "absent"
    ERROR_TOKEN = "error_token"
    TEXT_REMARK = "text_remark"


@dataclass(frozen=True)
class CellValue:
    """A raw cell together with its interpretation.

    Attributes:
        kind: Interpretation of the cell
        raw: Original text (``""`` for missing cells)
        number: Parsed value, only set when ``kind`` is NUMERIC
    """
    kind: CellKind
    raw: str
    number: float | None = None

    @property
    def is_numeric(self) -> bool:
        return self.kind is CellKind.NUMERIC

    @property
    def is_absence_mark(self) -> bool:
        """True for cells explicitly marked absent (``ABS``, ``Abs.``, ``absent``...)."""
        return ABSENCE_MARK in self.raw.lower()

    @property
    def is_blank(self) -> bool:
        return self.raw.strip() == ""


def _as_text(cell: Any) -> str:
    if cell is None:
        return ""
    if isinstance(cell, float) and math.isnan(cell):
        return ""
    return str(cell)


def parse_number(cell: Any) -> float | None:
    """Parse a decimal number written with either ``.`` or ``,`` as separator.

    Returns ``None`` for anything outside the numeric grammar (empty cells,
    text, several separators, spreadsheet error strings).

    >>> parse_number("12,5") == parse_number("12.5") == 12.5
    True
    >>> parse_number("1,2,3") is None
    True
    """
    text = _as_text(cell).strip()
    if not NUMERIC_RE.match(text):
        return None
    value = float(text.replace(",", "."))
    if not math.isfinite(value):  # pragma: no cover (grammar excludes inf/nan)
        return None
    return value


def is_error_token(cell: Any) -> bool:
    """True for the ``-`` placeholder and for ``#DIV/0!`` formula errors."""
    text = _as_text(cell).strip()
    return text == NOT_AVAILABLE or DIV_ZERO_TOKEN in text


def parse_cell(cell: Any) -> CellValue:
    """Normalize one raw cell into a ``CellValue``.

    Precedence: absence marks and blanks first, then error tokens, then the
    numeric grammar. Whatever is left is a free-text remark.
    """
    raw = _as_text(cell)
    text = raw.strip()
    if text == "" or ABSENCE_MARK in text.lower():
        return CellValue(CellKind.ABSENT, raw)
    if is_error_token(text):
        return CellValue(CellKind.ERROR_TOKEN, raw)
    number = parse_number(text)
    if number is not None:
        return CellValue(CellKind.NUMERIC, raw, number)
    return CellValue(CellKind.TEXT_REMARK, raw)


def to_display_decimal(text: str) -> str:
    """Swap the first decimal point for a comma without parsing the value."""
    return text.replace(".", ",", 1)
