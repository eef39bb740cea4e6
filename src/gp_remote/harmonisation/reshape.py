"""
Long-to-wide reshaping of the appointments table.

Two pivots are used throughout:

* mode pivot: status x mode, one column per ``MODE_COLUMNS`` entry
  (``Attended_Face-to-Face``, ``DNA_Video/Online``, ...), GP records only;
* booking pivot: booking interval x remote flag, one column per
  ``BOOKING_COLUMNS`` entry (``SameDay_Remote``, ...), attended GP records
  whose mode is face-to-face, home visit, telephone or video/online.

Both are grouped by ``period`` and, for the per-area tables, ``region_code``.
"""

from __future__ import annotations

import logging
from typing import Sequence

import pandas as pd

from gp_remote.categories import (
    BOOKING_COLUMNS,
    MODE_COLUMNS,
    REMOTE_FLAGS,
    ApptStatus,
    BookingInterval,
    HcpType,
)
from gp_remote.errors import SchemaMismatch, UnrecognizedCategory

logger = logging.getLogger(__name__)


def counts_as_zero(counts: pd.Series) -> pd.Series:
    """
    Appointment counts for summation: a missing count adds nothing.

    Use only where counts are summed. Ratios are computed from the summed
    columns and keep NaN for an empty denominator.
    """
    return counts.fillna(0).astype("int64")


def reshape(records: pd.DataFrame, group_keys: Sequence[str],
            pivot_keys: Sequence[str], columns: Sequence[str],
            value_col: str = "count") -> pd.DataFrame:
    """
    Sum counts per group and spread pivot combinations into columns.

    Pivot combinations are labelled ``"_".join(values)`` and must all be in
    ``columns``; the result has exactly ``group_keys + columns``, with
    combinations never observed for a group filled with 0.
    """
    group_keys = list(group_keys)
    pivot_keys = list(pivot_keys)
    columns = list(columns)

    missing = [c for c in group_keys + pivot_keys + [value_col] if c not in records.columns]
    if missing:
        raise SchemaMismatch("Cannot reshape, missing columns: " + ", ".join(missing))
    if records[group_keys].isna().any().any():
        raise SchemaMismatch("Cannot reshape, null values in group keys " + ", ".join(group_keys))

    if records.empty:
        empty = {k: pd.Series(dtype=object) for k in group_keys}
        empty.update({c: pd.Series(dtype="int64") for c in columns})
        return pd.DataFrame(empty)

    df = records[group_keys].copy()
    df["_column"] = [
        "_".join(str(v) for v in combo)
        for combo in zip(*(records[k] for k in pivot_keys))
    ]
    unexpected = sorted(set(df["_column"]) - set(columns))
    if unexpected:
        raise UnrecognizedCategory(" x ".join(pivot_keys), unexpected)
    df[value_col] = counts_as_zero(records[value_col])

    wide = (
        df.groupby(group_keys + ["_column"])[value_col]
        .sum()
        .unstack("_column", fill_value=0)
        .reindex(columns=columns, fill_value=0)
        .astype("int64")
        .reset_index()
    )
    wide.columns.name = None

    logger.debug(f"[RESHAPE] {len(records)} records -> {len(wide)} rows by {group_keys}")
    return wide


def gp_records(records: pd.DataFrame) -> pd.DataFrame:
    """Appointments with a GP; applied before grouping, never to wide tables."""
    return records[records["hcp_type"] == HcpType.GP.value]


def mode_pivot(records: pd.DataFrame, group_keys: Sequence[str]) -> pd.DataFrame:
    return reshape(gp_records(records), group_keys, ["status", "mode"], MODE_COLUMNS)


def booking_pivot(records: pd.DataFrame, group_keys: Sequence[str]) -> pd.DataFrame:
    gp = gp_records(records)
    attended = gp[gp["status"] == ApptStatus.ATTENDED.value]

    flags = {mode.value: flag.value for mode, flag in REMOTE_FLAGS.items()}
    labels = {interval.value: interval.label for interval in BookingInterval}

    remote = attended["mode"].map(flags)
    attended = attended[remote.notna()].assign(
        remote=remote[remote.notna()],
        interval=lambda d: d["booking_interval"].map(labels),
    )
    return reshape(attended, group_keys, ["interval", "remote"], BOOKING_COLUMNS)
