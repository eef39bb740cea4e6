from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from pathlib import Path

import yaml


ROOT = Path(__file__).resolve().parents[2]
DATASETS_CONFIG = ROOT / "config" / "datasets.yaml"
CANONICAL_DIR = ROOT / "data" / "processed" / "canonical"
DIAG_DIR = ROOT / "outputs" / "diagnostics"

DEFAULT_LOCKDOWNS = (
    ("Lockdown 1", dt.date(2020, 3, 23)),
    ("Lockdown 2", dt.date(2020, 11, 5)),
    ("Lockdown 3", dt.date(2021, 1, 6)),
)


@dataclass(frozen=True)
class PipelineSettings:
    period_anchor: str = "mid"
    min_pairs: int = 2
    lockdowns: tuple = field(default=DEFAULT_LOCKDOWNS)


def load_config(path: Path | None = None) -> dict:
    """Load the whole YAML document (datasets registry + pipeline block)."""
    path = path or DATASETS_CONFIG
    with Path(path).open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_datasets_config(path: Path | None = None) -> dict:
    doc = load_config(path)
    # either {datasets: {...}} or direct mapping
    return doc.get("datasets", doc)


def get_dataset_config(datasets_cfg: dict, key: str) -> dict:
    try:
        return datasets_cfg[key]
    except KeyError:
        raise KeyError(f"Dataset '{key}' not found in config/datasets.yaml")


def resolve_path(meta: dict) -> Path:
    path_str = meta.get("path")
    if not path_str:
        raise ValueError("Dataset config must contain a 'path' field")
    return ROOT / path_str


def load_pipeline_settings(path: Path | None = None) -> PipelineSettings:
    """
    Read the ``pipeline:`` block. Missing keys fall back to the defaults.

    YAML gives ``date: 2020-03-23`` back as a ``datetime.date`` already;
    strings are parsed as ISO dates.
    """
    block = load_config(path).get("pipeline") or {}

    lockdowns = DEFAULT_LOCKDOWNS
    if block.get("lockdowns"):
        parsed = []
        for entry in block["lockdowns"]:
            when = entry["date"]
            if isinstance(when, str):
                when = dt.date.fromisoformat(when)
            parsed.append((str(entry["label"]), when))
        lockdowns = tuple(sorted(parsed, key=lambda item: item[1]))

    return PipelineSettings(
        period_anchor=str(block.get("period_anchor", "mid")),
        min_pairs=int(block.get("min_pairs", 2)),
        lockdowns=lockdowns,
    )
