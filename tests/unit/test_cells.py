from __future__ import annotations

import math

import pytest

from report_cards.models.cells import CellKind, is_error_token, parse_cell, parse_number, to_display_decimal


@pytest.mark.parametrize("text", ["12,5", "12.5", " 12,5 ", "+12.5"])
def test_comma_and_point_parse_to_same_float(text):
    assert parse_number(text) == 12.5


@pytest.mark.parametrize("text,expected", [("18", 18.0), ("-3", -3.0), ("7,", 7.0), ("0,25", 0.25)])
def test_parse_number_grammar(text, expected):
    assert parse_number(text) == expected


@pytest.mark.parametrize("text", ["", "  ", "abc", "1,2,3", "1.2.3", "12a", "#DIV/0!", "-", "inf", "nan", None])
def test_parse_number_rejects_non_numeric(text):
    assert parse_number(text) is None


def test_parse_number_handles_float_nan():
    assert parse_number(math.nan) is None


@pytest.mark.parametrize("text", ["\u0661\u0662", "\u0661\u0662,5", "\uff11\uff12"])
def test_non_ascii_digits_are_remarks(text):
    assert parse_number(text) is None
    assert parse_cell(text).kind is CellKind.TEXT_REMARK


@pytest.mark.parametrize(
    "text,kind",
    [
        ("15", CellKind.NUMERIC),
        ("15,5", CellKind.NUMERIC),
        ("", CellKind.ABSENT),
        ("   ", CellKind.ABSENT),
        (None, CellKind.ABSENT),
        ("ABS", CellKind.ABSENT),
        ("Abs.", CellKind.ABSENT),
        ("absent", CellKind.ABSENT),
        ("-", CellKind.ERROR_TOKEN),
        ("#DIV/0!", CellKind.ERROR_TOKEN),
        ("=A1/B1 #DIV/0!", CellKind.ERROR_TOKEN),
        ("peut mieux faire", CellKind.TEXT_REMARK),
    ],
)
def test_parse_cell_kinds(text, kind):
    assert parse_cell(text).kind is kind


def test_numeric_cell_keeps_raw_and_number():
    cell = parse_cell("7,5")
    assert cell.is_numeric
    assert cell.number == 7.5
    assert cell.raw == "7,5"


def test_absence_mark_is_not_blank():
    cell = parse_cell("ABS")
    assert cell.is_absence_mark
    assert not cell.is_blank
    assert parse_cell("").is_blank
    assert not parse_cell("").is_absence_mark


def test_non_numeric_cell_has_no_number():
    assert parse_cell("ABS").number is None
    assert parse_cell("texte").number is None


def test_is_error_token():
    assert is_error_token("-")
    assert is_error_token(" - ")
    assert is_error_token("#DIV/0!")
    assert not is_error_token("-3")
    assert not is_error_token("")


def test_to_display_decimal_replaces_first_point_only():
    assert to_display_decimal("14.5") == "14,5"
    assert to_display_decimal("14,5") == "14,5"
    assert to_display_decimal("1.2.3") == "1,2.3"
