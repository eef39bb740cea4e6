from __future__ import annotations

import logging

import pandas as pd
from pandas.errors import MergeError

from gp_remote.errors import SchemaMismatch

logger = logging.getLogger(__name__)

# Deciles 1 and 2: the most deprived national quintile
BOTTOM_QUINTILE_DECILE_BELOW = 3

SUMMARY_COLUMNS = ["region_code", "lsoa_count", "bottomq_count", "bottomq_pc", "mean_rank"]


def build_deprivation_summary(imd: pd.DataFrame, lookup: pd.DataFrame) -> pd.DataFrame:
    """
    Summarise LSOA-level IMD 2019 to one row per region.

    The lookup is left-joined onto the index by LSOA code, so an LSOA missing
    from the index still counts towards ``lsoa_count`` but never towards
    ``bottomq_count``; ``mean_rank`` averages the ranks that are present.

    Returns columns: region_code, lsoa_count, bottomq_count, bottomq_pc,
    mean_rank.
    """
    logger.info("[IMD_CANONICAL] Building region deprivation summary...")

    try:
        lsoas = lookup[["lsoa_code", "region_code"]].merge(
            imd[["lsoa_code", "imd_rank", "imd_decile"]],
            on="lsoa_code",
            how="left",
            validate="many_to_one",
        )
    except MergeError as exc:
        raise SchemaMismatch(f"IMD index has more than one row per LSOA: {exc}") from exc

    n_unmatched = int(lsoas["imd_decile"].isna().sum())
    if n_unmatched:
        logger.warning(f"[IMD_CANONICAL] {n_unmatched} lookup LSOA(s) have no IMD decile")

    lsoas["bottomq"] = (
        lsoas["imd_decile"].astype(float).lt(BOTTOM_QUINTILE_DECILE_BELOW).astype(int)
    )

    summary = (
        lsoas.groupby("region_code", as_index=False)
        .agg(
            lsoa_count=("lsoa_code", "size"),
            bottomq_count=("bottomq", "sum"),
            mean_rank=("imd_rank", "mean"),
        )
    )
    summary["bottomq_pc"] = 100.0 * summary["bottomq_count"] / summary["lsoa_count"]
    summary = summary[SUMMARY_COLUMNS].sort_values("region_code").reset_index(drop=True)

    logger.info(f"[IMD_CANONICAL] Deprivation summary built for {len(summary)} regions")
    return summary
