from __future__ import annotations

from tip_tracker.core.models import DataPoint, Grouping, Metric

def value_for(point: DataPoint, metric: Metric) -> float:
    metric = Metric(metric)
    if metric == Metric.HOURS:
        return point.hours
    if metric == Metric.TIPS:
        return point.tips
    if metric == Metric.TOTAL_EARNINGS:
        return point.earnings
    if metric == Metric.HOURLY_RATE:
        return point.hourly_rate
    raise ValueError(f"Unknown metric: {metric!r}")

def format_money(amount: float, currency_symbol: str = "$") -> str:
    sign = "-" if amount < 0 else ""
    return f"{sign}{currency_symbol}{abs(amount):,.2f}"

def format_value(metric: Metric, value: float, currency_symbol: str = "$") -> str:
    metric = Metric(metric)
    if metric == Metric.HOURS:
        return f"{value:.2f} hours"
    if metric in (Metric.TIPS, Metric.TOTAL_EARNINGS):
        return format_money(value, currency_symbol)
    if metric == Metric.HOURLY_RATE:
        return format_money(value, currency_symbol) + "/hr"
    raise ValueError(f"Unknown metric: {metric!r}")

def bucket_label(point: DataPoint, grouping: Grouping) -> str:
    """Short x-axis label for a bucket."""
    d = point.period_start
    grouping = Grouping(grouping)
    if grouping == Grouping.WEEK:
        return f"{d:%a} {d.day}"
    if grouping == Grouping.MONTH:
        return str(d.day)
    return f"{d:%b}"
