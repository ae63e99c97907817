# Shared pytest fixtures
from __future__ import annotations

import tempfile
from collections.abc import Callable
from pathlib import Path

import pytest

from report_cards.logging.init import reset_logging


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("REPORT_CARDS_CONFIG", raising=False)
        monkeypatch.delenv("REPORT_CARDS_DATA_DIR", raising=False)
        yield p


@pytest.fixture(autouse=True)
def _fresh_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
default_max_score: 20
classes:
  M06: Mawlana Djafar
  M07: Mawlana Haja
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "report_cards.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def class_table() -> list[list[str]]:
    """A small class export: two scored subjects, indicators, one nameless row."""
    return [
        ["#", "NOM", "PRÉNOM", "QUR'AN", "FIQH", "AKHLAQ", "MOYENNE", "RANG", "MENTION", "APPRÉCIATIONS GÉNÉRALES"],
        ["", "", "", "20", "10", "10", "", "", "", ""],
        ["1", "Ali", "Omar", "18", "7,5", "9", "", "1", "Félicitations", "Très bon travail"],
        ["2", "Bakari", "Sara", "12", "ABS", "8", "13,5", "2", "Encouragements", ""],
        ["3", "", "", "", "", "", "", "", "", ""],
        ["4", "Chami", "Ilyas", "#DIV/0!", "5", "", "#DIV/0!", "#DIV/0!", "", ""],
    ]


def _csv_line(row: list[str]) -> str:
    cells = []
    for c in row:
        if any(ch in c for ch in ',"\n'):
            c = '"' + c.replace('"', '""') + '"'
        cells.append(c)
    return ",".join(cells)


@pytest.fixture()
def write_csv() -> Callable[[Path, list[list[str]]], Path]:
    def _write(path: Path, rows: list[list[str]]) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("\n".join(_csv_line(r) for r in rows) + "\n", encoding="utf-8")
        return path
    return _write


@pytest.fixture()
def write_class_csv(temp_workdir: Path, write_csv) -> Callable[..., Path]:
    """Write a class export where the default path template expects it."""
    def _write(rows: list[list[str]], class_name: str = "M06", year: str = "2025-2026", sem: str = "1") -> Path:
        name = f"[AMI] NOTES - {year.replace('-', '_')} - SEMESTRE {sem} - {class_name}.csv"
        return write_csv(temp_workdir / "data" / year / f"SEMESTRE {sem}" / name, rows)
    return _write
