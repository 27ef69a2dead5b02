from __future__ import annotations
import csv
from pathlib import Path
from typing import List

from tip_tracker.analytics.metrics import bucket_label, format_money, format_value, value_for
from tip_tracker.analytics.periods import page_title
from tip_tracker.core.models import Grouping, Metric, Page, SummaryKind, SummaryValues, WeekGroup

_SUMMARY_TITLES = {
  SummaryKind.OVERALL: "Overall Totals",
  SummaryKind.DAILY_AVERAGE: "Daily Average",
  SummaryKind.WEEKLY_AVERAGE: "Weekly Average",
  SummaryKind.MONTHLY_AVERAGE: "Monthly Average",
}

def ensure_dir(p: Path):
  p.mkdir(parents=True, exist_ok=True)

def write_series_csv(data_dir: Path, grouping: Grouping, pages: List[Page]) -> Path:
  """One row per bucket across every page."""
  ensure_dir(data_dir)
  grouping = Grouping(grouping)
  path = data_dir / f"series_{grouping.value}.csv"
  fieldnames = ["page", "period_start", "hours", "tips", "earnings", "hourly_rate"]
  with path.open("w", newline="", encoding="utf-8") as f:
    w = csv.DictWriter(f, fieldnames=fieldnames)
    w.writeheader()
    for i, page in enumerate(pages):
      for p in page:
        w.writerow({
          "page": i,
          "period_start": p.period_start.isoformat(),
          "hours": f"{p.hours:.2f}",
          "tips": f"{p.tips:.2f}",
          "earnings": f"{p.earnings:.2f}",
          "hourly_rate": f"{p.hourly_rate:.2f}",
        })
  return path

def summary_lines(kind: SummaryKind, summary: SummaryValues, currency_symbol: str = "$") -> List[str]:
  kind = SummaryKind(kind)
  label = "Total" if kind == SummaryKind.OVERALL else "Average"
  rate_label = "Hourly Rate" if kind == SummaryKind.OVERALL else "Average Hourly"
  return [
    f"## Summary — {_SUMMARY_TITLES[kind]}\n",
    f"- **{label} Hours:** {summary.hours:.2f}",
    f"- **{label} Earnings:** {format_money(summary.earnings, currency_symbol)}",
    f"- **{label} Tips:** {format_money(summary.tips, currency_symbol)}",
    f"- **{rate_label}:** {format_money(summary.hourly_rate, currency_symbol)}/hr",
  ]

def write_page_md(
  reports_dir: Path,
  grouping: Grouping,
  metric: Metric,
  page: Page,
  page_index: int,
  page_count: int,
  kind: SummaryKind,
  summary: SummaryValues,
  *,
  currency_symbol: str = "$",
) -> Path:
  ensure_dir(reports_dir)
  grouping = Grouping(grouping)
  metric = Metric(metric)
  path = reports_dir / f"trends_{grouping.value}.md"

  lines = []
  title = page_title(page, grouping)
  if title is None:
    lines.append("# Trends\n")
    lines.append("_No records yet._\n")
  else:
    lines.append(f"# {title}\n")
    lines.append(f"_Page {page_index + 1} of {page_count}, {metric.value.replace('_', ' ')} per bucket._\n")
    lines.append("| Bucket | Value |")
    lines.append("|---|---:|")
    for p in page:
      lines.append(f"| {bucket_label(p, grouping)} | {format_value(metric, value_for(p, metric), currency_symbol)} |")
    lines.append("")

  lines.extend(summary_lines(kind, summary, currency_symbol))
  lines.append("")
  path.write_text("\n".join(lines), encoding="utf-8")
  return path

def write_weekly_log_md(reports_dir: Path, groups: List[WeekGroup], *, currency_symbol: str = "$") -> Path:
  """Record log grouped by week, newest first."""
  ensure_dir(reports_dir)
  path = reports_dir / "weekly_log.md"

  lines = ["# Work log\n"]
  if not groups:
    lines.append("_No records yet._")
  for g in groups:
    t = g.totals
    lines.append(f"## Week of {g.week_start:%b} {g.week_start.day}, {g.week_start.year}\n")
    lines.append(
      f"Hours: {t.hours:.2f}  |  Tips: {format_money(t.tips, currency_symbol)}"
      f"  |  Hourly: {format_money(t.hourly_rate, currency_symbol)}/hr"
      f"  |  Total: {format_money(t.earnings, currency_symbol)}\n"
    )
    lines.append("| Date | Hours | Tips |")
    lines.append("|---|---:|---:|")
    for r in g.records:
      lines.append(f"| {r.date:%A, %b} {r.date.day}, {r.date.year} | {r.hours:.2f} | {format_money(r.tips, currency_symbol)} |")
    lines.append("")

  path.write_text("\n".join(lines), encoding="utf-8")
  return path
