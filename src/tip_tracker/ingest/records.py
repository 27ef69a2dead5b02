from __future__ import annotations
import json
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List

import pandas as pd
from dateutil import parser as dup
from loguru import logger

from tip_tracker.core.dates import as_day
from tip_tracker.core.models import WorkRecord

def parse_record_date(value: Any) -> date:
    """ISO-8601 string, epoch seconds, or a date/datetime."""
    if isinstance(value, (date, datetime)):
        return as_day(value)
    if isinstance(value, bool):
        raise ValueError(f"Not a date: {value!r}")
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc).date()
    s = str(value).strip()
    if not s:
        raise ValueError("Empty date")
    try:
        return dup.isoparse(s).date()
    except ValueError:
        return dup.parse(s).date()

def record_from_payload(payload: Dict[str, Any]) -> WorkRecord:
    if "date" not in payload:
        raise ValueError(f"Record is missing 'date': {payload!r}")
    kwargs: Dict[str, Any] = {
        "hours": float(payload.get("hours", 0) or 0),
        "tips": float(payload.get("tips", 0) or 0),
        "date": parse_record_date(payload["date"]),
    }
    if payload.get("id"):
        kwargs["id"] = str(payload["id"])
    return WorkRecord(**kwargs)

def record_to_payload(record: WorkRecord) -> Dict[str, Any]:
    return {
        "id": record.id,
        "hours": record.hours,
        "tips": record.tips,
        "date": as_day(record.date).isoformat(),
    }

class JsonRecordStore:
    """Records kept as a JSON list of {id, hours, tips, date} objects."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> List[WorkRecord]:
        if not self.path.exists():
            return []
        text = self.path.read_text(encoding="utf-8")
        if not text.strip():
            return []
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"{self.path} is not valid JSON: {e}") from e
        if isinstance(data, dict):
            data = data.get("records", [])
        if not isinstance(data, list):
            raise ValueError(f"{self.path} must hold a list of records")
        return [record_from_payload(item) for item in data]

    def save(self, records: Iterable[WorkRecord]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = [record_to_payload(r) for r in records]
        self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

def _to_num(x) -> float:
    if pd.isna(x) or x == "":
        return 0.0
    s = str(x).replace("$", "").replace(",", "").strip()
    return float(s)

def _find_col(df: pd.DataFrame, names: list[str]) -> str | None:
    low = {c.strip().lower(): c for c in df.columns if isinstance(c, str)}
    for n in names:
        if n in low:
            return low[n]
    return None

def read_records_csv(csv_path: Path) -> List[WorkRecord]:
    df = pd.read_csv(csv_path, dtype=object)

    date_col = _find_col(df, ["date", "day", "work date"])
    hours_col = _find_col(df, ["hours", "hours worked"])
    tips_col = _find_col(df, ["tips", "tips earned"])
    id_col = _find_col(df, ["id"])
    if not date_col or not hours_col or not tips_col:
        raise ValueError(f"Missing expected columns in {csv_path.name}. Found: {list(df.columns)}")

    out: List[WorkRecord] = []
    for i, row in df.iterrows():
        raw_date = row.get(date_col)
        if pd.isna(raw_date) or not str(raw_date).strip():
            logger.warning("{}: row {} has no date, skipped", csv_path.name, i)
            continue
        try:
            day = parse_record_date(str(raw_date))
        except (ValueError, OverflowError):
            logger.warning("{}: row {} has unreadable date {!r}, skipped", csv_path.name, i, raw_date)
            continue
        kwargs: Dict[str, Any] = {
            "hours": _to_num(row.get(hours_col)),
            "tips": _to_num(row.get(tips_col)),
            "date": day,
        }
        if id_col and not pd.isna(row.get(id_col)):
            kwargs["id"] = str(row.get(id_col)).strip()
        out.append(WorkRecord(**kwargs))
    return out

def merge_records(existing: Iterable[WorkRecord], incoming: Iterable[WorkRecord]) -> List[WorkRecord]:
    """Append incoming records that aren't already present (same date, hours and tips)."""
    merged = list(existing)
    seen = set(merged)
    for r in incoming:
        if r in seen:
            continue
        merged.append(r)
        seen.add(r)
    return merged
