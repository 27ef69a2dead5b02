from __future__ import annotations
import argparse
from dataclasses import replace
from pathlib import Path
from typing import Sequence

from loguru import logger

from tip_tracker.analytics.metrics import format_money
from tip_tracker.config.loader import load_unified_config
from tip_tracker.core.models import Grouping, Metric, SummaryKind
from tip_tracker.observability import configure_logging
from tip_tracker.pipeline import import_csv, run_pipeline

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tip-tracker", description="Hours and tips trends")
    parser.add_argument("--root", default=".", help="repo root holding config/settings.yaml")
    parser.add_argument("--log-level", default="INFO")
    sub = parser.add_subparsers(dest="command")

    report = sub.add_parser("report", help="aggregate records and write reports")
    report.add_argument("--grouping", choices=[g.value for g in Grouping])
    report.add_argument("--metric", choices=[m.value for m in Metric])
    report.add_argument("--summary", choices=[k.value for k in SummaryKind])
    report.add_argument("--page", type=int, help="page index, negative counts from the most recent")
    report.add_argument("--wage", type=float, help="override the configured hourly wage")

    imp = sub.add_parser("import", help="merge a CSV export into the record store")
    imp.add_argument("csv", help="CSV with date, hours and tips columns")
    return parser

def _apply_overrides(cfg, args: argparse.Namespace):
    view = cfg.view
    if args.grouping:
        view = replace(view, grouping=Grouping(args.grouping))
    if args.metric:
        view = replace(view, metric=Metric(args.metric))
    if args.summary:
        view = replace(view, summary=SummaryKind(args.summary))
    if args.page is not None:
        view = replace(view, page_index=args.page)
    tracker = cfg.tracker
    if args.wage is not None:
        if args.wage < 0:
            raise ValueError(f"--wage must be >= 0, got {args.wage}")
        tracker = replace(tracker, hourly_wage=args.wage)
    return replace(cfg, view=view, tracker=tracker)

def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    root = Path(args.root).expanduser().resolve()

    try:
        cfg = load_unified_config(root)
        if args.command == "import":
            added = import_csv(cfg, Path(args.csv).expanduser())
            print(f"Added {added} records.")
            return 0

        if args.command == "report":
            cfg = _apply_overrides(cfg, args)
        result = run_pipeline(cfg)
    except (FileNotFoundError, KeyError, ValueError) as e:
        logger.error("{}", e)
        return 1

    if not result.pages:
        print("No records yet.")
        return 0
    s = result.summary
    sym = cfg.tracker.currency_symbol
    print(f"{result.title} (page {result.page_index + 1} of {len(result.pages)})")
    print(
        f"{result.summary_kind.value}: hours {s.hours:.2f} | tips {format_money(s.tips, sym)}"
        f" | earnings {format_money(s.earnings, sym)} | hourly {format_money(s.hourly_rate, sym)}/hr"
    )
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
