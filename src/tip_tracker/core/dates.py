from __future__ import annotations
import calendar
from datetime import date, datetime, timedelta
from typing import List

from dateutil.relativedelta import relativedelta

from tip_tracker.core.models import DateRange, Grouping, Weekday

def as_day(value) -> date:
  # time-of-day carries no meaning; everything is bucketed by calendar day
  if isinstance(value, datetime):
    return value.date()
  return value

def week_start(day: date, week_start_day: Weekday = Weekday.MON) -> date:
  d = as_day(day)
  try:
    return d - timedelta(days=(d.weekday() - int(week_start_day)) % 7)
  except OverflowError:
    # first week of the calendar is cut short at date.min
    return date.min

def week_end(day: date, week_start_day: Weekday = Weekday.MON) -> date:
  d = as_day(day)
  try:
    return d + timedelta(days=6 - (d.weekday() - int(week_start_day)) % 7)
  except OverflowError:
    return date.max

def month_start(day: date) -> date:
  d = as_day(day)
  return date(d.year, d.month, 1)

def year_start(day: date) -> date:
  return date(as_day(day).year, 1, 1)

def add_months(day: date, months: int) -> date:
  try:
    return as_day(day) + relativedelta(months=months)
  except ValueError as e:
    # relativedelta reports year overflow as ValueError
    raise OverflowError(str(e)) from e

def days_in_month(year: int, month: int) -> int:
  return calendar.monthrange(year, month)[1]

def month_end(day: date) -> date:
  d = as_day(day)
  return date(d.year, d.month, days_in_month(d.year, d.month))

def days_between(start: date, end: date) -> List[date]:
  """Every calendar day from start to end, both inclusive."""
  out: List[date] = []
  d = as_day(start)
  end = as_day(end)
  while d <= end:
    out.append(d)
    if d == date.max:
      break
    d += timedelta(days=1)
  return out

def period_range(grouping: Grouping, day: date, week_start_day: Weekday = Weekday.MON) -> DateRange:
  """The week, month or year containing `day`."""
  d = as_day(day)
  if grouping == Grouping.WEEK:
    return DateRange(week_start(d, week_start_day), week_end(d, week_start_day))
  if grouping == Grouping.MONTH:
    return DateRange(month_start(d), month_end(d))
  if grouping == Grouping.YEAR:
    return DateRange(year_start(d), date(d.year, 12, 31))
  raise ValueError(f"Unknown grouping: {grouping!r}")
