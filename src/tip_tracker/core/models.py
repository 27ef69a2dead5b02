from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date
from enum import Enum, IntEnum
from typing import List
import uuid

class Weekday(IntEnum):
  MON = 0
  TUE = 1
  WED = 2
  THU = 3
  FRI = 4
  SAT = 5
  SUN = 6

  @classmethod
  def parse(cls, value) -> "Weekday":
    """Accepts "MON", "monday", 0..6 or a Weekday."""
    if isinstance(value, cls):
      return value
    if isinstance(value, int):
      return cls(value)
    key = str(value).strip().upper()[:3]
    try:
      return cls[key]
    except KeyError:
      raise ValueError(f"Unknown weekday: {value!r}") from None

class Grouping(str, Enum):
  WEEK = "week"
  MONTH = "month"
  YEAR = "year"

class Metric(str, Enum):
  HOURS = "hours"
  TIPS = "tips"
  TOTAL_EARNINGS = "total_earnings"
  HOURLY_RATE = "hourly_rate"

class SummaryKind(str, Enum):
  OVERALL = "overall"
  DAILY_AVERAGE = "daily_average"
  WEEKLY_AVERAGE = "weekly_average"
  MONTHLY_AVERAGE = "monthly_average"

def _new_id() -> str:
  return uuid.uuid4().hex

@dataclass(frozen=True)
class WorkRecord:
  hours: float
  tips: float
  date: date
  id: str = field(default_factory=_new_id, compare=False)   # not part of equality

def earnings_for(hours: float, tips: float, wage: float) -> float:
  return hours * wage + tips

def hourly_rate_for(hours: float, earnings: float) -> float:
  return earnings / hours if hours > 0 else 0.0

@dataclass(frozen=True)
class DataPoint:
  period_start: date     # day for week/month pages, 1st of month for year pages
  hours: float
  tips: float
  wage: float

  @property
  def earnings(self) -> float:
    return earnings_for(self.hours, self.tips, self.wage)

  @property
  def hourly_rate(self) -> float:
    return hourly_rate_for(self.hours, self.earnings)

  @property
  def is_empty(self) -> bool:
    return self.hours == 0 and self.tips == 0

Page = List[DataPoint]

@dataclass(frozen=True)
class SummaryValues:
  hours: float = 0.0
  tips: float = 0.0
  earnings: float = 0.0
  hourly_rate: float = 0.0

@dataclass(frozen=True)
class DateRange:
  start: date   # inclusive
  end: date     # inclusive

  def contains(self, day: date) -> bool:
    return self.start <= day <= self.end

@dataclass
class WeekGroup:
  week_start: date
  records: List[WorkRecord]
  totals: SummaryValues
