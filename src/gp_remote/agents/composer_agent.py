from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

import pandas as pd

from gp_remote.analysis.correlation import correlation_series
from gp_remote.analysis.phase_summary import summarise_phases
from gp_remote.config import (
    CANONICAL_DIR,
    DIAG_DIR,
    PipelineSettings,
    get_dataset_config,
    load_datasets_config,
    load_pipeline_settings,
    resolve_path,
)
from gp_remote.harmonisation.appointments_canonical import RAW_COLUMNS, union_extracts
from gp_remote.harmonisation.harmonise import join_deprivation, unmatched_regions
from gp_remote.harmonisation.imd_canonical import build_deprivation_summary
from gp_remote.harmonisation.periods import add_anchor_dates
from gp_remote.ingestion.load_appointments import read_appointment_extracts
from gp_remote.ingestion.load_imd import load_imd, load_lsoa_lookup
from gp_remote.scoring.metrics import BOOKING_METRICS, MODE_METRICS, missing_data_table
from gp_remote.scoring.series import build_booking_table, build_mode_table

logger = logging.getLogger(__name__)

DIAG_FILE = DIAG_DIR / "composer_report.json"


@dataclass
class PipelineResult:
    records: pd.DataFrame
    deprivation: pd.DataFrame
    region_mode: pd.DataFrame
    national_mode: pd.DataFrame
    region_booking: pd.DataFrame
    national_booking: pd.DataFrame
    correlations: pd.DataFrame
    missing_data: pd.DataFrame
    phases: pd.DataFrame
    diagnostics: dict = field(default_factory=dict)

    def tables(self) -> dict[str, pd.DataFrame]:
        """Output file name -> table, for everything written by compose()."""
        return {
            "stp_deprivation.csv": self.deprivation,
            "stp_mode_month.csv": self.region_mode,
            "england_mode_month.csv": self.national_mode,
            "stp_booking_month.csv": self.region_booking,
            "england_booking_month.csv": self.national_booking,
            "deprivation_correlation_month.csv": self.correlations,
            "england_missing_data_month.csv": self.missing_data,
            "england_phase_summary.csv": self.phases,
        }


def check_missing_combinations(records: pd.DataFrame) -> dict:
    """Regions absent from each period, relative to all regions ever seen."""
    all_regions = set(records["region_code"])
    report = {}
    for period, group in records.groupby("period"):
        missing = sorted(all_regions - set(group["region_code"]))
        report[period] = {
            "regions": len(all_regions) - len(missing),
            "missing_count": len(missing),
            "missing_examples": missing[:20],
        }
    return report


def combine_correlations(region_mode: pd.DataFrame, region_booking: pd.DataFrame,
                         settings: PipelineSettings) -> pd.DataFrame:
    mode_corr = correlation_series(region_mode, MODE_METRICS, min_pairs=settings.min_pairs)
    booking_corr = correlation_series(region_booking, BOOKING_METRICS, min_pairs=settings.min_pairs)
    merged = mode_corr.drop(columns="date").merge(
        booking_corr.drop(columns="date"), on="period", how="outer"
    )
    merged = add_anchor_dates(merged, settings.period_anchor)
    cols = ["period", "date"] + [c for c in merged.columns if c not in ("period", "date")]
    return merged[cols].sort_values("date").reset_index(drop=True)


def run_pipeline(
    extracts: Iterable[pd.DataFrame],
    imd: pd.DataFrame,
    lookup: pd.DataFrame,
    settings: PipelineSettings | None = None,
    column_map: dict = RAW_COLUMNS,
) -> PipelineResult:
    """
    One pass from raw extracts to every derived table.

    Pure: nothing is read or written here, and the same inputs always give
    the same tables. The deprivation summary is built once and shared by
    every per-region table.
    """
    settings = settings or PipelineSettings()
    anchor = settings.period_anchor
    logger.info("=== ComposerAgent: start composition ===")

    records = union_extracts(extracts, column_map)
    deprivation = build_deprivation_summary(imd, lookup)

    logger.info("Building per-region and England series...")
    region_mode = build_mode_table(records, by_region=True, anchor=anchor)
    national_mode = build_mode_table(records, by_region=False, anchor=anchor)
    region_booking = build_booking_table(records, by_region=True, anchor=anchor)
    national_booking = build_booking_table(records, by_region=False, anchor=anchor)

    logger.info("Joining deprivation summary...")
    region_mode = join_deprivation(region_mode, deprivation)
    region_booking = join_deprivation(region_booking, deprivation)

    logger.info("Correlating metrics with deprivation...")
    correlations = combine_correlations(region_mode, region_booking, settings)

    missing_data = add_anchor_dates(missing_data_table(records, ["period"]), anchor)
    missing_data = missing_data.sort_values("date").reset_index(drop=True)

    national = national_mode[["period", "date"] + MODE_METRICS].merge(
        national_booking[["period"] + BOOKING_METRICS], on="period", how="left"
    )
    phases = summarise_phases(national, MODE_METRICS + BOOKING_METRICS, settings.lockdowns)

    diagnostics = {
        "records": int(len(records)),
        "null_count_records": int(records["count"].isna().sum()),
        "periods": list(national_mode["period"]),
        "regions": int(records["region_code"].nunique()),
        "unmatched_regions": unmatched_regions(region_mode, deprivation),
        "coverage": check_missing_combinations(records),
    }
    logger.info(f"Diagnostics: {len(diagnostics['unmatched_regions'])} unmatched region(s)")
    logger.info("=== ComposerAgent finished successfully ===")

    return PipelineResult(
        records=records,
        deprivation=deprivation,
        region_mode=region_mode,
        national_mode=national_mode,
        region_booking=region_booking,
        national_booking=national_booking,
        correlations=correlations,
        missing_data=missing_data,
        phases=phases,
        diagnostics=diagnostics,
    )


def load_inputs(datasets_cfg: dict):
    """Read the three registry inputs: extracts, IMD index, LSOA lookup."""
    appts_cfg = get_dataset_config(datasets_cfg, "gp_appointments")
    imd_cfg = get_dataset_config(datasets_cfg, "imd_2019")
    lookup_cfg = get_dataset_config(datasets_cfg, "lsoa_stp_lookup")

    extracts = read_appointment_extracts(
        resolve_path(appts_cfg), appts_cfg.get("pattern", "*.csv"), appts_cfg
    )
    imd = load_imd(resolve_path(imd_cfg), imd_cfg.get("sheet", "IMD2019"))
    lookup = load_lsoa_lookup(
        resolve_path(lookup_cfg), lookup_cfg.get("region_column", "STP21CD"), lookup_cfg
    )
    column_map = appts_cfg.get("columns") or RAW_COLUMNS
    return extracts, imd, lookup, column_map


def write_outputs(result: PipelineResult, out_dir: Path = CANONICAL_DIR,
                  diag_file: Path = DIAG_FILE) -> None:
    out_dir.mkdir(parents=True, exist_ok=True)
    for name, table in result.tables().items():
        path = out_dir / name
        logger.info(f"Writing {name} → {path}")
        table.to_csv(path, index=False)

    diag_file.parent.mkdir(parents=True, exist_ok=True)
    with open(diag_file, "w") as f:
        json.dump(result.diagnostics, f, indent=2)


def compose() -> PipelineResult:
    datasets_cfg = load_datasets_config()
    settings = load_pipeline_settings()
    extracts, imd, lookup, column_map = load_inputs(datasets_cfg)
    result = run_pipeline(extracts, imd, lookup, settings, column_map)
    write_outputs(result)
    return result


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")
    compose()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
