from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

from report_cards.cli import main as cli_main
from report_cards.cli.__main__ import EXIT_FATAL, EXIT_PARTIAL_FAILURE, EXIT_SUCCESS_ALL
from report_cards.services.report_card import build_report_cards

"""Exit code contract tests: 0 all classes ok, 1 fatal, 2 at least one class failed."""


def test_exit_code_values():
    assert (EXIT_SUCCESS_ALL, EXIT_FATAL, EXIT_PARTIAL_FAILURE) == (0, 1, 2)


def test_exit_code_fatal_startup(temp_workdir: Path, capsys):
    (temp_workdir / "config" / "report_cards.yml").write_text("source_directory: 3\n", encoding="utf-8")
    code = cli_main([])
    assert code == 1
    assert "ERROR config:" in capsys.readouterr().out


def test_exit_code_all_success(write_config, write_class_csv, class_table, capsys):
    write_class_csv(class_table, class_name="M06")
    write_class_csv(class_table, class_name="M07")
    code = cli_main([])
    assert code == 0
    assert "SUMMARY classes=2/2 success=2 failed=0" in capsys.readouterr().out


def test_exit_code_partial_failure_on_unexpected_error(write_config, write_class_csv, class_table, capsys):
    write_class_csv(class_table, class_name="M06")
    write_class_csv(class_table, class_name="M07")


    def flaky_build(table, params, config):
        if params.class_name == "M07":
            raise RuntimeError("simulated renderer failure")
        return build_report_cards(table, params, config)

    with patch("report_cards.services.orchestrator.build_report_cards", side_effect=flaky_build):
        code = cli_main([])

    out = capsys.readouterr().out
    assert code == 2
    assert "ERROR class=M07 unexpected failure" in out
    assert "SUMMARY classes=2/2 success=1 failed=1 students=3" in out
