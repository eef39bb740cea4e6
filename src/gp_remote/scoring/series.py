"""
Monthly series tables, per region and for England.

The England table is never derived from the region tables: the region key
is dropped before grouping and every percentage is recomputed from summed
counts, so each region is weighted by its appointment volume.
"""

from __future__ import annotations

import logging

import pandas as pd

from gp_remote.harmonisation.periods import add_anchor_dates
from gp_remote.harmonisation.reshape import booking_pivot, mode_pivot
from gp_remote.scoring.metrics import add_booking_metrics, add_mode_metrics

logger = logging.getLogger(__name__)


def group_keys(by_region: bool) -> list[str]:
    return ["period", "region_code"] if by_region else ["period"]


def order_by_date(df: pd.DataFrame, by_region: bool, anchor: str) -> pd.DataFrame:
    df = add_anchor_dates(df, anchor)
    sort_cols = ["date", "region_code"] if by_region else ["date"]
    return df.sort_values(sort_cols).reset_index(drop=True)


def build_mode_table(records: pd.DataFrame, by_region: bool = True,
                     anchor: str = "mid") -> pd.DataFrame:
    """GP appointments by status x mode with remote and DNA percentages."""
    wide = mode_pivot(records, group_keys(by_region))
    table = order_by_date(add_mode_metrics(wide), by_region, anchor)
    logger.info(
        f"[SERIES] Mode table ({'region' if by_region else 'England'}): {len(table)} rows"
    )
    return table


def build_booking_table(records: pd.DataFrame, by_region: bool = True,
                        anchor: str = "mid") -> pd.DataFrame:
    """Attended GP appointments by booking interval x remote flag."""
    wide = booking_pivot(records, group_keys(by_region))
    table = order_by_date(add_booking_metrics(wide), by_region, anchor)
    logger.info(
        f"[SERIES] Booking table ({'region' if by_region else 'England'}): {len(table)} rows"
    )
    return table
