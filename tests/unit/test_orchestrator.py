from __future__ import annotations

import pytest

from report_cards.models.columns import IndicatorKind
from report_cards.models.grades import SubjectStat
from report_cards.services.metrics import compute_metrics
from report_cards.services.orchestrator import MalformedTableError, ProcessingError, run


def test_end_to_end_single_student():
    table = run([
        ["#", "NOM", "PRÉNOM", "QUR'AN", "RANG"],
        ["", "", "", "20", ""],
        ["1", "Ali", "Omar", "18", "1"],
    ])
    assert len(table.students) == 1
    assert table.stats[3] == SubjectStat(min=18.0, max=18.0, avg=18.0, max_score=20.0)
    metrics = compute_metrics(table.students[0], table.columns, table.stats)
    assert metrics.rank == "1<sup>er</sup>"
    assert metrics.computed_average == 18.0
    assert metrics.displayed_average == "18"


def test_blank_name_rows_are_excluded():
    table = run([
        ["#", "NOM", "PRÉNOM", "FIQH"],
        ["", "", "", "20"],
        ["1", "", ""],
        ["2", "Ali", "Omar"],
    ])
    assert len(table.students) == 1
    assert table.students[0][1] == "Ali"


def test_whitespace_name_is_blank():
    table = run([["#", "NOM"], ["", ""], ["1", "   "], ["2", "Ali"]])
    assert [s[1] for s in table.students] == ["Ali"]


@pytest.mark.parametrize("rows", [[], [["#", "NOM"]], [["#", "NOM"], ["", ""]]])
def test_fewer_than_three_rows_is_invalid(rows):
    with pytest.raises(MalformedTableError, match="invalid format"):
        run(rows)


def test_no_named_student_is_invalid():
    with pytest.raises(MalformedTableError):
        run([["#", "NOM"], ["", ""], ["1", ""], ["2", " "]])


def test_malformed_table_error_carries_source():
    with pytest.raises(ProcessingError) as e:
        run([], source="data/M06.csv")
    assert "data/M06.csv" in str(e.value)
    assert e.value.source == "data/M06.csv"


def test_run_is_idempotent(class_table):
    assert run(class_table) == run(class_table)


def test_output_is_immutable(class_table):
    table = run(class_table)
    assert isinstance(table.headers, tuple)
    assert all(isinstance(s, tuple) for s in table.students)
    with pytest.raises(TypeError):
        table.stats[0] = SubjectStat.unknown()  # type: ignore[index]


def test_stats_keyed_by_original_column(class_table):
    table = run(class_table)
    assert set(table.stats) == {3, 4, 5}
    assert table.stats[3] == SubjectStat(min=12.0, max=18.0, avg=15.0, max_score=20.0)
    assert table.stats[4] == SubjectStat(min=5.0, max=7.5, avg=6.25, max_score=10.0)
    assert table.stats[5] == SubjectStat(min=8.0, max=9.0, avg=8.5, max_score=10.0)


def test_column_records_carry_stats(class_table):
    table = run(class_table)
    assert [c.column_index for c in table.subject_columns] == [3, 4, 5]
    assert all(c.stat == table.stats[c.column_index] for c in table.subject_columns)
    assert table.indicator_index(IndicatorKind.AVERAGE) == 6
    assert table.indicator_index(IndicatorKind.RANK) == 7
    assert table.indicator_index(IndicatorKind.MENTION) == 8
    assert table.indicator_index(IndicatorKind.APPRECIATION) == 9


def test_stat_for_missing_column_defaults():
    table = run([["#", "NOM", "FIQH", "NOTE"], ["", "", "10", ""], ["1", "Ali", "5", "bien"]])
    assert table.stat_for(3) == SubjectStat.unknown(20)
    assert table.stat_for(2).max_score == 10.0


def test_class_metrics(class_table):
    table = run(class_table)
    ali, sara, ilyas = (compute_metrics(s, table.columns, table.stats) for s in table.students)

    assert ali.displayed_average == "17,25"
    assert ali.rank == "1<sup>er</sup>"

    # spreadsheet average wins
    assert sara.displayed_average == "13,5"
    assert sara.computed_average == 10.0
    assert sara.rank == "2<sup>ème</sup>"

    # #DIV/0! everywhere: computed fallback, unknown rank
    assert ilyas.displayed_average == "2,5"
    assert ilyas.rank == "-"
    assert ilyas.mention == ""


def test_non_string_cells_are_coerced():
    table = run([["#", "NOM", "FIQH"], ["", "", 20], [1, "Ali", 15]])
    assert table.students[0] == ("1", "Ali", "15")
    assert table.stats[2].max_score == 20.0
