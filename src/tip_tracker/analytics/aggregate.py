from __future__ import annotations
from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, Iterable, List, Tuple

from loguru import logger

from tip_tracker.core.dates import add_months, as_day, days_between, month_end, month_start, week_end, week_start
from tip_tracker.core.models import DataPoint, Grouping, Page, Weekday, WorkRecord

MonthKey = Tuple[int, int]   # (year, month)

def _sum_by_day(records: Iterable[WorkRecord]) -> Dict[date, Tuple[float, float]]:
    out: Dict[date, List[float]] = defaultdict(lambda: [0.0, 0.0])
    for r in records:
        acc = out[as_day(r.date)]
        acc[0] += r.hours
        acc[1] += r.tips
    return {k: (v[0], v[1]) for k, v in out.items()}

def _sum_by_month(records: Iterable[WorkRecord]) -> Dict[MonthKey, Tuple[float, float]]:
    out: Dict[MonthKey, List[float]] = defaultdict(lambda: [0.0, 0.0])
    for r in records:
        d = as_day(r.date)
        acc = out[(d.year, d.month)]
        acc[0] += r.hours
        acc[1] += r.tips
    return {k: (v[0], v[1]) for k, v in out.items()}

def _day_points(days: List[date], sums: Dict[date, Tuple[float, float]], wage: float) -> Page:
    page: Page = []
    for d in days:
        hours, tips = sums.get(d, (0.0, 0.0))
        page.append(DataPoint(period_start=d, hours=hours, tips=tips, wage=wage))
    return page

def _span(records: List[WorkRecord], now: date) -> Tuple[date, date]:
    # records are sorted; the span always reaches the period containing "now"
    earliest = as_day(records[0].date)
    latest = as_day(records[-1].date)
    return earliest, max(latest, now)

def _drop_trailing_empty(pages: List[Page]) -> List[Page]:
    if pages and all(p.is_empty for p in pages[-1]):
        pages.pop()
    return pages

def weekly_pages(records: List[WorkRecord], wage: float, week_start_day: Weekday, now: date) -> List[Page]:
    earliest, upper = _span(records, now)
    last = week_start(upper, week_start_day)
    sums = _sum_by_day(records)

    # weeks at either end of the calendar are cut short at date.min / date.max
    pages: List[Page] = []
    start = week_start(earliest, week_start_day)
    while start <= last:
        end = week_end(start, week_start_day)
        pages.append(_day_points(days_between(start, end), sums, wage))
        if end == date.max:
            logger.debug("calendar exhausted after week starting {}", start)
            break
        start = end + timedelta(days=1)
    return _drop_trailing_empty(pages)

def monthly_pages(records: List[WorkRecord], wage: float, now: date) -> List[Page]:
    earliest, upper = _span(records, now)
    first = month_start(earliest)
    last = month_start(upper)
    sums = _sum_by_day(records)

    pages: List[Page] = []
    current = first
    while current <= last:
        pages.append(_day_points(days_between(current, month_end(current)), sums, wage))
        try:
            current = add_months(current, 1)
        except OverflowError:
            logger.debug("calendar exhausted after month {}", current)
            break
    return _drop_trailing_empty(pages)

def yearly_pages(records: List[WorkRecord], wage: float, now: date) -> List[Page]:
    earliest, upper = _span(records, now)
    sums = _sum_by_month(records)
    populated_years = {y for (y, _) in sums}

    pages: List[Page] = []
    for year in range(earliest.year, upper.year + 1):
        # a year with no records at all gets no page instead of twelve zeros
        if year not in populated_years:
            continue
        page: Page = []
        for month in range(1, 13):
            hours, tips = sums.get((year, month), (0.0, 0.0))
            page.append(DataPoint(period_start=date(year, month, 1), hours=hours, tips=tips, wage=wage))
        pages.append(page)
    return _drop_trailing_empty(pages)

def aggregate(
    records: Iterable[WorkRecord],
    grouping: Grouping,
    wage: float,
    week_start_day: Weekday = Weekday.MON,
    now: date | None = None,
) -> List[Page]:
    """
    Bucket records into calendar-aligned, gap-filled pages.

    Pages run from the period holding the earliest record through the period
    holding max(latest record, now), oldest first. A trailing page whose
    buckets are all zero is dropped. Empty input gives an empty list.
    """
    snapshot = sorted(records, key=lambda r: as_day(r.date))
    if not snapshot:
        return []

    today = as_day(now) if now is not None else date.today()
    grouping = Grouping(grouping)
    if grouping == Grouping.WEEK:
        return weekly_pages(snapshot, wage, Weekday.parse(week_start_day), today)
    if grouping == Grouping.MONTH:
        return monthly_pages(snapshot, wage, today)
    if grouping == Grouping.YEAR:
        return yearly_pages(snapshot, wage, today)
    raise ValueError(f"Unknown grouping: {grouping!r}")
