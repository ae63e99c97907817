from __future__ import annotations

import argparse
import json
import os
import sys
from dataclasses import replace
from pathlib import Path

from dotenv import load_dotenv

from report_cards.config.loader import ConfigError, load_config
from report_cards.logging.init import get_logger, log_summary, set_debug, setup_logging
from report_cards.models.config_models import AppConfig
from report_cards.models.report_card import ReportCard, ReportParams
from report_cards.services.classifier import ColumnClassifier
from report_cards.services.orchestrator import MalformedTableError, process_classes, run
from report_cards.services.report_card import build_report_cards
from report_cards.services.summary import render_summary_line
from report_cards.tabular.reader import TransportError, read_grade_csv, resolve_class_path

"""CLI entrypoint.

Two modes, as in the web page it replaces:
- auto: build each selected class path from year/semester/class and
  generate report cards for all of them (batch, SUMMARY line at the end)
- manual: ``--file`` points at one CSV export

Configuration lookup: ``--config``, then $REPORT_CARDS_CONFIG, then
``config/report_cards.yml`` if present, else packaged defaults.
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2

DEFAULT_CONFIG_PATH = Path("config/report_cards.yml")


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env so that REPORT_CARDS_* variables can be kept next to the data."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="report-cards", description="Report card generator for CSV grade exports")
    p.add_argument("--year", default="2025-2026", help="School year, e.g. 2025-2026")
    p.add_argument("--sem", default="1", choices=["1", "2"], help="Semester")
    p.add_argument(
        "--class", dest="classes", action="append", default=None,
        help="Class code (repeatable). Default: every configured class",
    )
    p.add_argument("--file", type=Path, default=None, help="Manual mode: a single CSV export")
    p.add_argument("--output", type=Path, default=None, help="Write report cards as JSON")
    p.add_argument("--config", type=Path, default=None, help="YAML configuration file")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print column roles & stats then exit")
    return p.parse_args(argv)


def _resolve_config(args: argparse.Namespace) -> AppConfig:
    path = args.config
    if path is None and os.getenv("REPORT_CARDS_CONFIG"):
        path = Path(os.environ["REPORT_CARDS_CONFIG"])
    if path is None and DEFAULT_CONFIG_PATH.exists():
        path = DEFAULT_CONFIG_PATH
    cfg = load_config(path)
    data_dir = os.getenv("REPORT_CARDS_DATA_DIR")
    if data_dir:
        cfg = replace(cfg, source=replace(cfg.source, data_directory=data_dir))
    return cfg


def _write_output(path: Path, cards: tuple[ReportCard, ...]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = [c.to_dict() for c in cards]
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")


def _inspect_data(cfg: AppConfig, paths: list[Path]) -> int:
    classifier = ColumnClassifier(cfg.grading)
    for path in paths:
        print(f"FILE: {path}")
        try:
            table = run(read_grade_csv(path), cfg.grading, source=str(path))
        except (TransportError, MalformedTableError) as e:
            print(f"  error={e}")
            continue
        print(f"  students={len(table.students)}")
        for record in table.columns:
            role = record.role
            detail = role.subject_key or (role.indicator.value if role.indicator else "")
            line = f"  [{record.column_index}] {record.header!r} -> {role.kind.value} {detail}".rstrip()
            if record.stat is not None:
                s = record.stat
                line += f" min={s.min} max={s.max} avg={s.avg:.2f} max_score={s.max_score}"
            elif role.is_subject:
                label = classifier.subject_label(record)
                line += f" (no stats) label={label.french!r}"
            print(line)
    return EXIT_SUCCESS_ALL


def _run_manual(cfg: AppConfig, args: argparse.Namespace) -> int:
    logger = get_logger()
    class_name = args.classes[0] if args.classes else "M06"
    params = ReportParams(year=args.year, semester=args.sem, class_name=class_name)
    try:
        table = run(read_grade_csv(args.file), cfg.grading, source=str(args.file))
    except TransportError as e:
        logger.error(f"file not found / loading error: {e}")
        return EXIT_FATAL
    except MalformedTableError as e:
        logger.error(f"{e}")
        return EXIT_FATAL
    cards = build_report_cards(table, params, cfg.grading)
    logger.info(f"report cards generated: {class_name} ({len(table.students)} students)")
    if args.output:
        _write_output(args.output, cards)
        logger.info(f"written: {args.output}")
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None only: an explicit [] must not fall back to sys.argv (pytest args)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    try:
        cfg = _resolve_config(args)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.debug:
        set_debug(logger)
        logger.debug("debug mode enabled")

    class_names = args.classes or sorted(cfg.grading.classes)

    if args.inspect_data:
        if args.file:
            paths = [args.file]
        else:
            paths = [
                resolve_class_path(cfg.source, ReportParams(args.year, args.sem, name))
                for name in class_names
            ]
        return _inspect_data(cfg, paths)

    if args.file is not None:
        return _run_manual(cfg, args)

    directory = Path(cfg.source.data_directory)
    if not directory.exists():
        logger.error(f"directory not found: {directory}")
        return EXIT_FATAL

    logger.info(f"Generating report cards year={args.year} sem={args.sem} classes={len(class_names)}")
    result = process_classes(cfg, args.year, args.sem, class_names)

    if args.output:
        _write_output(args.output, result.report_cards)
        logger.info(f"written: {args.output}")

    summary_line = render_summary_line(result.total_classes, result)
    log_summary(summary_line.removeprefix("SUMMARY "))

    if result.failed_classes > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
