from __future__ import annotations
from datetime import date
from typing import Callable, Iterable, List

from tip_tracker.core.dates import as_day, month_start, week_start
from tip_tracker.core.models import (
    Grouping,
    SummaryKind,
    SummaryValues,
    Weekday,
    WorkRecord,
    earnings_for,
    hourly_rate_for,
)

_KINDS_BY_GROUPING = {
    Grouping.WEEK: [SummaryKind.OVERALL, SummaryKind.DAILY_AVERAGE],
    Grouping.MONTH: [SummaryKind.OVERALL, SummaryKind.DAILY_AVERAGE, SummaryKind.WEEKLY_AVERAGE],
    Grouping.YEAR: [
        SummaryKind.OVERALL,
        SummaryKind.DAILY_AVERAGE,
        SummaryKind.WEEKLY_AVERAGE,
        SummaryKind.MONTHLY_AVERAGE,
    ],
}

def available_summary_kinds(grouping: Grouping) -> List[SummaryKind]:
    return list(_KINDS_BY_GROUPING[Grouping(grouping)])

def coerce_summary_kind(kind: SummaryKind, grouping: Grouping) -> SummaryKind:
    """Fall back to overall totals when `kind` isn't offered for `grouping`."""
    kind = SummaryKind(kind)
    return kind if kind in _KINDS_BY_GROUPING[Grouping(grouping)] else SummaryKind.OVERALL

def totals(records: Iterable[WorkRecord], wage: float) -> SummaryValues:
    hours = 0.0
    tips = 0.0
    for r in records:
        hours += r.hours
        tips += r.tips
    earnings = earnings_for(hours, tips, wage)
    return SummaryValues(hours=hours, tips=tips, earnings=earnings, hourly_rate=hourly_rate_for(hours, earnings))

def _average(records: List[WorkRecord], wage: float, period_key: Callable[[date], date]) -> SummaryValues:
    # divide by the number of distinct periods that actually hold records
    periods = {period_key(as_day(r.date)) for r in records}
    if not periods:
        return SummaryValues()
    total = totals(records, wage)
    n = len(periods)
    hours = total.hours / n
    earnings = total.earnings / n
    return SummaryValues(
        hours=hours,
        tips=total.tips / n,
        earnings=earnings,
        hourly_rate=hourly_rate_for(hours, earnings),
    )

def completed_week_records(
    records: Iterable[WorkRecord], reference_now: date, week_start_day: Weekday = Weekday.MON
) -> List[WorkRecord]:
    current = week_start(reference_now, week_start_day)
    return [r for r in records if week_start(r.date, week_start_day) < current]

def completed_month_records(records: Iterable[WorkRecord], reference_now: date) -> List[WorkRecord]:
    current = month_start(reference_now)
    return [r for r in records if month_start(r.date) < current]

def summarize(
    records: Iterable[WorkRecord],
    wage: float,
    kind: SummaryKind,
    reference_now: date | None = None,
    week_start_day: Weekday = Weekday.MON,
) -> SummaryValues:
    """
    Totals or per-period averages for a set of records.

    Weekly and monthly averages only count periods that ended before the one
    containing `reference_now`, so a half-finished week or month does not drag
    the average down.
    """
    snapshot = list(records)
    kind = SummaryKind(kind)
    now = as_day(reference_now) if reference_now is not None else date.today()
    wsd = Weekday.parse(week_start_day)

    if kind == SummaryKind.OVERALL:
        return totals(snapshot, wage)
    if kind == SummaryKind.DAILY_AVERAGE:
        return _average(snapshot, wage, lambda d: d)
    if kind == SummaryKind.WEEKLY_AVERAGE:
        done = completed_week_records(snapshot, now, wsd)
        return _average(done, wage, lambda d: week_start(d, wsd))
    if kind == SummaryKind.MONTHLY_AVERAGE:
        return _average(completed_month_records(snapshot, now), wage, month_start)
    raise ValueError(f"Unknown summary kind: {kind!r}")
