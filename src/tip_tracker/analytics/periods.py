from __future__ import annotations
from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Optional

from tip_tracker.analytics.summary import totals
from tip_tracker.core.dates import as_day, period_range, week_start
from tip_tracker.core.models import DateRange, Grouping, Page, SummaryValues, WeekGroup, Weekday, WorkRecord


def default_page_index(pages: List[Page]) -> int:
    # most recent page
    return max(0, len(pages) - 1)


def clamp_page_index(pages: List[Page], index: Optional[int]) -> int:
    if index is None or not pages:
        return default_page_index(pages)
    if index < 0:
        index += len(pages)
    return min(max(index, 0), len(pages) - 1)


def page_range(page: Page, grouping: Grouping, week_start_day: Weekday = Weekday.MON) -> Optional[DateRange]:
    """Calendar period covered by a page, looked up from its first bucket."""
    if not page:
        return None
    return period_range(Grouping(grouping), page[0].period_start, week_start_day)


def records_in_range(records: Iterable[WorkRecord], date_range: Optional[DateRange]) -> List[WorkRecord]:
    if date_range is None:
        return []
    return [r for r in records if date_range.contains(as_day(r.date))]


def page_title(page: Page, grouping: Grouping) -> Optional[str]:
    if not page:
        return None
    first = page[0].period_start
    grouping = Grouping(grouping)
    if grouping == Grouping.WEEK:
        return f"Week of {first:%b} {first.day}, {first.year}"
    if grouping == Grouping.MONTH:
        return f"{first:%B %Y}"
    return f"{first.year}"


def group_records_by_week(
    records: Iterable[WorkRecord], wage: float, week_start_day: Weekday = Weekday.MON
) -> List[WeekGroup]:
    """Newest week first; records inside a week newest first."""
    by_week: Dict[date, List[WorkRecord]] = defaultdict(list)
    for r in records:
        by_week[week_start(r.date, week_start_day)].append(r)

    out: List[WeekGroup] = []
    for start in sorted(by_week, reverse=True):
        recs = sorted(by_week[start], key=lambda r: as_day(r.date), reverse=True)
        out.append(WeekGroup(week_start=start, records=recs, totals=totals(recs, wage)))
    return out


def records_on_day(records: Iterable[WorkRecord], day: date) -> List[WorkRecord]:
    target = as_day(day)
    return [r for r in records if as_day(r.date) == target]


def day_totals(records: Iterable[WorkRecord], day: date, wage: float) -> SummaryValues:
    return totals(records_on_day(records, day), wage)
