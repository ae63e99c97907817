from __future__ import annotations

import json
from datetime import date

import pytest

from report_cards.config.loader import default_config
from report_cards.models.grades import MentionCategory
from report_cards.models.report_card import ReportParams
from report_cards.services.orchestrator import run
from report_cards.services.report_card import build_report_card, build_report_cards


@pytest.fixture()
def cards(class_table):
    table = run(class_table)
    params = ReportParams(year="2025-2026", semester="1", class_name="M06", issued_on=date(2026, 2, 3))
    return build_report_cards(table, params, default_config().grading)


def test_one_card_per_student(cards):
    assert [(c.last_name, c.first_name) for c in cards] == [("Ali", "Omar"), ("Bakari", "Sara"), ("Chami", "Ilyas")]


def test_header_fields(cards):
    card = cards[0]
    assert card.teacher == "Mawlana Djafar"
    assert card.class_name == "M06"
    assert card.title == "BULLETIN DU 1ER SEMESTRE 2025/2026"
    assert card.semester_header == "1ER SEM."
    assert card.student_count_label == "(3 ÉLÈVES)"
    assert card.issued_on == "03/02/2026"


def test_second_semester_and_unknown_class(class_table):
    table = run(class_table)
    card = build_report_card(
        table.students[0], table, ReportParams("2024-2025", "2", "X99", date(2025, 6, 30)), default_config().grading
    )
    assert card.title == "BULLETIN DU 2ND SEMESTRE 2024/2025"
    assert card.semester_header == "2ND SEM."
    assert card.teacher == "Professeur"


def test_subject_rows(cards):
    rows = cards[1].rows
    assert [r.subject_key for r in rows] == ["QUR'AN", "FIQH", "AKHLAQ"]

    quran, fiqh, akhlaq = rows
    assert quran.label.french == "SAINT-CORAN"
    assert quran.score.score == "12"
    assert quran.score.max_score == "/ 20"
    assert (quran.class_average, quran.class_min, quran.class_max) == ("15", "12", "18")

    assert fiqh.score.score == "ABS"
    assert fiqh.score.is_absent
    assert fiqh.class_average == "6,25"

    assert not quran.discipline_start
    assert akhlaq.discipline_start


def test_footer_metrics(cards):
    ali = cards[0].metrics
    assert ali.displayed_average == "17,25"
    assert ali.rank == "1<sup>er</sup>"
    assert ali.mention_category is MentionCategory.FELICITATIONS
    assert cards[1].metrics.mention_category is MentionCategory.ENCOURAGEMENTS


def test_subject_without_stats_and_unknown_label():
    table = run([
        ["#", "NOM", "PRÉNOM", "CALLIGRAPHIE", "HUDUR", "AKHLAQ"],
        ["", "", "", "", "5", "5"],
        ["1", "Ali", "Omar", "très bien", "4", "5"],
    ])
    params = ReportParams(issued_on=date(2026, 1, 1))
    card = build_report_card(table.students[0], table, params, default_config().grading)
    calligraphy, hudur, akhlaq = card.rows
    assert calligraphy.label.arabic == calligraphy.label.transliteration == calligraphy.label.french == "CALLIGRAPHIE"
    assert calligraphy.score.score == "très bien"
    assert calligraphy.score.max_score == "/ 20"
    assert calligraphy.class_average == calligraphy.class_min == calligraphy.class_max == "-"
    # only the first behavior subject opens the discipline block
    assert hudur.discipline_start
    assert not akhlaq.discipline_start


def test_to_dict_is_json_serializable(cards):
    data = cards[0].to_dict()
    assert data["metrics"]["mention_category"] == "Félicitations"
    assert data["rows"][0]["label"]["french"] == "SAINT-CORAN"
    json.dumps(data, ensure_ascii=False)
