"""
ScoutAgent: pre-ingestion diagnostics for the appointment pipeline.

This agent:
- Reads the dataset registry from config/datasets.yaml
- Checks each dataset (each appointment extract, the IMD index, the LSOA
  lookup) exists, can be read and has the columns the pipeline needs
- Lists month tokens and category spellings in the extracts that the
  composer would reject
- Writes a JSON report to outputs/diagnostics and prints a summary

Safe to run anytime. Does not modify data and never raises on bad data.
"""

from __future__ import annotations

import datetime as dt
import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from gp_remote.config import DATASETS_CONFIG, DIAG_DIR, ROOT, load_datasets_config, resolve_path
from gp_remote.harmonisation.appointments_canonical import (
    RAW_COLUMNS,
    find_unrecognised_categories,
)
from gp_remote.harmonisation.periods import find_unrecognised_periods
from gp_remote.ingestion.load_imd import IMD_COLUMNS, LOOKUP_LSOA_COLUMN
from gp_remote.ingestion.readers import read_table

# -------------------------------------------------------
# Dataclasses
# -------------------------------------------------------

@dataclass
class FileCheck:
    dataset_key: str
    path: str
    exists: bool
    readable: bool
    n_rows: Optional[int] = None
    missing_columns: List[str] = field(default_factory=list)
    unrecognised_periods: List[str] = field(default_factory=list)
    unrecognised_categories: Dict[str, List[str]] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return (
            self.exists and self.readable and not self.missing_columns
            and not self.unrecognised_periods and not self.unrecognised_categories
        )


@dataclass
class ScoutReport:
    timestamp_utc: str
    repo_root: str
    datasets_registry_path: str
    all_ok: bool
    files: List[FileCheck]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp_utc": self.timestamp_utc,
            "repo_root": self.repo_root,
            "datasets_registry_path": self.datasets_registry_path,
            "all_ok": self.all_ok,
            "files": [dict(asdict(f), ok=f.ok) for f in self.files],
        }


# -------------------------------------------------------
# Checks
# -------------------------------------------------------

def required_columns(key: str, meta: Dict[str, Any]) -> List[str]:
    if key == "gp_appointments":
        return list((meta.get("columns") or RAW_COLUMNS).values())
    if key == "imd_2019":
        return list(IMD_COLUMNS)
    if key == "lsoa_stp_lookup":
        return [LOOKUP_LSOA_COLUMN, meta.get("region_column", "STP21CD")]
    return []


def check_appointment_values(df: pd.DataFrame, column_map: Dict[str, str]):
    """Unrecognised month tokens and category spellings in one raw extract."""
    periods = [str(t) for t in find_unrecognised_periods(df[column_map["period"]])]
    canonical = df.rename(columns={raw: canon for canon, raw in column_map.items()})
    categories = {
        f: [str(v) for v in values]
        for f, values in find_unrecognised_categories(canonical).items()
    }
    return periods, categories


# -------------------------------------------------------
# ScoutAgent
# -------------------------------------------------------

class ScoutAgent:
    def __init__(self, registry_path: Path | None = None):
        self.registry_path = registry_path or DATASETS_CONFIG

    def run(self) -> ScoutReport:
        registry = load_datasets_config(self.registry_path)
        results = []
        for key, meta in registry.items():
            results.extend(self._check_dataset(key, meta))

        return ScoutReport(
            timestamp_utc=dt.datetime.now(dt.timezone.utc).isoformat(timespec="seconds"),
            repo_root=str(ROOT),
            datasets_registry_path=str(self.registry_path),
            all_ok=bool(results) and all(r.ok for r in results),
            files=results,
        )

    def save(self, report: ScoutReport) -> Path:
        DIAG_DIR.mkdir(parents=True, exist_ok=True)
        out_path = DIAG_DIR / "scout_report.json"
        with out_path.open("w", encoding="utf-8") as f:
            json.dump(report.to_dict(), f, indent=2)
        print(f"[ScoutAgent] Report written to {out_path}")
        return out_path

    # ----------------------------
    # Internal: dataset check
    # ----------------------------
    def _check_dataset(self, key: str, meta: Dict[str, Any]) -> List[FileCheck]:
        path = resolve_path(meta)
        if key == "gp_appointments" and path.is_dir():
            files = sorted(path.glob(meta.get("pattern", "*.csv")))
            if not files:
                return [FileCheck(key, str(path), exists=False, readable=False,
                                  errors=[f"No files matching {meta.get('pattern', '*.csv')}"])]
            return [self._check_file(key, meta, f) for f in files]
        return [self._check_file(key, meta, path)]

    def _check_file(self, key: str, meta: Dict[str, Any], path: Path) -> FileCheck:
        check = FileCheck(key, str(path), exists=path.exists(), readable=False)
        if not check.exists:
            check.errors.append(f"File does not exist: {path}")
            return check

        try:
            df = read_table(path, meta)
        except Exception as exc:
            check.errors.append(f"Failed to read file: {exc}")
            return check

        check.readable = True
        check.n_rows = len(df)
        check.missing_columns = [
            c for c in required_columns(key, meta) if c not in df.columns
        ]

        if key == "gp_appointments" and not check.missing_columns:
            column_map = meta.get("columns") or RAW_COLUMNS
            check.unrecognised_periods, check.unrecognised_categories = (
                check_appointment_values(df, column_map)
            )
        return check


# -------------------------------------------------------
# CLI entrypoint
# -------------------------------------------------------

def main() -> int:
    agent = ScoutAgent()
    report = agent.run()
    agent.save(report)
    print("=== ScoutAgent Summary ===")
    print(f"All OK: {report.all_ok}")
    for f in report.files:
        print(f"[{f.dataset_key}] {Path(f.path).name} | Exists={f.exists} | "
              f"Readable={f.readable} | OK={f.ok}")
    return 0 if report.all_ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
