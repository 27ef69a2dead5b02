from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import List, Optional

from loguru import logger

from tip_tracker.analytics.aggregate import aggregate
from tip_tracker.analytics.periods import (
  clamp_page_index,
  group_records_by_week,
  page_range,
  page_title,
  records_in_range,
)
from tip_tracker.analytics.summary import coerce_summary_kind, summarize
from tip_tracker.config.loader import UnifiedConfig
from tip_tracker.core.models import DateRange, Page, SummaryKind, SummaryValues
from tip_tracker.ingest.records import JsonRecordStore, merge_records, read_records_csv
from tip_tracker.reports import write_page_md, write_series_csv, write_weekly_log_md

@dataclass
class PipelineResult:
  pages: List[Page]
  page_index: int
  date_range: Optional[DateRange]
  summary_kind: SummaryKind
  summary: SummaryValues
  title: Optional[str] = None
  written: List[Path] = field(default_factory=list)

def run_pipeline(cfg: UnifiedConfig, now: date | None = None, write: bool = True) -> PipelineResult:
  today = now or date.today()
  tracker = cfg.tracker
  view = cfg.view

  # 1) Snapshot of the record store
  records = JsonRecordStore(cfg.paths.records_file).load()
  logger.info("Loaded {} records from {}", len(records), cfg.paths.records_file)

  # 2) Paginated series for the chosen grouping
  pages = aggregate(records, view.grouping, tracker.hourly_wage, tracker.week_start_day, now=today)
  index = clamp_page_index(pages, view.page_index)
  page = pages[index] if pages else []

  # 3) Summary over the selected page's calendar period
  date_range = page_range(page, view.grouping, tracker.week_start_day)
  in_range = records_in_range(records, date_range)
  kind = coerce_summary_kind(view.summary, view.grouping)
  if kind != view.summary:
    logger.warning("{} is not offered for {} pages, showing {}", view.summary.value, view.grouping.value, kind.value)
  summary = summarize(in_range, tracker.hourly_wage, kind, today, tracker.week_start_day)

  result = PipelineResult(
    pages=pages,
    page_index=index,
    date_range=date_range,
    summary_kind=kind,
    summary=summary,
    title=page_title(page, view.grouping),
  )
  if not write:
    return result

  # 4) Reports
  symbol = tracker.currency_symbol
  result.written.append(write_series_csv(cfg.paths.data_dir, view.grouping, pages))
  result.written.append(write_page_md(
    cfg.paths.reports_dir, view.grouping, view.metric, page, index, len(pages), kind, summary,
    currency_symbol=symbol,
  ))
  groups = group_records_by_week(records, tracker.hourly_wage, tracker.week_start_day)
  result.written.append(write_weekly_log_md(cfg.paths.reports_dir, groups, currency_symbol=symbol))
  logger.info("Wrote {} report files", len(result.written))
  return result

def import_csv(cfg: UnifiedConfig, csv_path: Path) -> int:
  """Merge a CSV export into the record store; returns how many records were added."""
  store = JsonRecordStore(cfg.paths.records_file)
  existing = store.load()
  incoming = read_records_csv(csv_path)
  merged = merge_records(existing, incoming)
  added = len(merged) - len(existing)
  if added:
    store.save(merged)
  logger.info("Imported {} of {} rows from {}", added, len(incoming), csv_path.name)
  return added
