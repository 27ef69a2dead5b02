from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from tip_tracker.core.models import Grouping, Metric, SummaryKind, Weekday

@dataclass
class TrackerCfg:
  hourly_wage: float = 0.0
  week_start_day: Weekday = Weekday.MON
  currency_symbol: str = "$"

@dataclass
class ViewCfg:
  grouping: Grouping = Grouping.WEEK
  metric: Metric = Metric.TIPS
  summary: SummaryKind = SummaryKind.OVERALL
  page_index: Optional[int] = None     # None = most recent page

@dataclass
class PathsCfg:
  records_file: Path
  inputs_dir: Path
  data_dir: Path
  reports_dir: Path
  config_dir: Path

@dataclass
class UnifiedConfig:
  tracker: TrackerCfg
  view: ViewCfg
  paths: PathsCfg

def _enum(cls, raw, section: str, key: str):
    try:
        return cls(str(raw).strip().lower())
    except ValueError:
        allowed = ", ".join(m.value for m in cls)
        raise ValueError(f"settings.yaml: {section}.{key} must be one of {allowed}, got {raw!r}") from None

def parse_config(y: Dict[str, Any], repo_root: Path) -> UnifiedConfig:
    # minimal structure checks (fail fast with clear messages)
    for section in ["paths"]:
        if section not in y:
            raise KeyError(f"settings.yaml is missing the '{section}' section")

    tracker = y.get("tracker") or {}
    view = y.get("view") or {}
    paths = y["paths"]
    cfg_dir = repo_root / "config"

    wage = float(tracker.get("hourly_wage", 0.0) or 0.0)
    if wage < 0:
        raise ValueError(f"settings.yaml: tracker.hourly_wage must be >= 0, got {wage}")

    page_index = view.get("page_index")
    return UnifiedConfig(
        tracker=TrackerCfg(
            hourly_wage=wage,
            week_start_day=Weekday.parse(tracker.get("week_start_day", "MON")),
            currency_symbol=str(tracker.get("currency_symbol", "$")),
        ),
        view=ViewCfg(
            grouping=_enum(Grouping, view.get("grouping", "week"), "view", "grouping"),
            metric=_enum(Metric, view.get("metric", "tips"), "view", "metric"),
            summary=_enum(SummaryKind, view.get("summary", "overall"), "view", "summary"),
            page_index=None if page_index is None else int(page_index),
        ),
        paths=PathsCfg(
            records_file=(repo_root / paths["records_file"]).resolve(),
            inputs_dir=(repo_root / paths.get("inputs_dir", "inputs")).resolve(),
            data_dir=(repo_root / paths.get("data_dir", "data")).resolve(),
            reports_dir=(repo_root / paths.get("reports_dir", "reports")).resolve(),
            config_dir=cfg_dir.resolve(),
        ),
    )

def load_unified_config(repo_root: Path) -> UnifiedConfig:
    """Load config/settings.yaml only."""
    cfg_dir = repo_root / "config"
    yaml_cfg = cfg_dir / "settings.yaml"

    # Require PyYAML
    try:
        import yaml  # type: ignore
    except ImportError as e:
        raise ImportError(
            "PyYAML is required to read config/settings.yaml. Install with: pip install pyyaml"
        ) from e

    if not yaml_cfg.exists():
        raise FileNotFoundError(
            f"Missing {yaml_cfg}. Copy config/settings.yaml from the repo and adjust it."
        )

    y: Dict[str, Any] = yaml.safe_load(yaml_cfg.read_text(encoding="utf-8")) or {}
    return parse_config(y, repo_root)
