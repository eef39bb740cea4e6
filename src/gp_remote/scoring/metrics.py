from __future__ import annotations

from typing import Sequence

import numpy as np
import pandas as pd

from gp_remote.categories import (
    FIELDS,
    KNOWN_INTERVALS,
    UNKNOWN_MEMBERS,
    ApptMode,
    ApptStatus,
    BookingInterval,
    RemoteFlag,
    booking_column,
    mode_column,
)
from gp_remote.harmonisation.reshape import reshape

ATTENDED_F2F = mode_column(ApptStatus.ATTENDED, ApptMode.FACE_TO_FACE)
ATTENDED_HOME = mode_column(ApptStatus.ATTENDED, ApptMode.HOME_VISIT)
ATTENDED_PHONE = mode_column(ApptStatus.ATTENDED, ApptMode.TELEPHONE)
ATTENDED_VIDEO = mode_column(ApptStatus.ATTENDED, ApptMode.VIDEO_ONLINE)
DNA_F2F = mode_column(ApptStatus.DNA, ApptMode.FACE_TO_FACE)
DNA_HOME = mode_column(ApptStatus.DNA, ApptMode.HOME_VISIT)
DNA_PHONE = mode_column(ApptStatus.DNA, ApptMode.TELEPHONE)
DNA_VIDEO = mode_column(ApptStatus.DNA, ApptMode.VIDEO_ONLINE)

MODE_METRICS = ["remote_share", "dna_in_person", "dna_remote"]
BOOKING_METRICS = ["same_day_remote_share", "same_day_f2f_share", "same_day_share"]


def safe_pct(numerator: pd.Series, denominator: pd.Series) -> pd.Series:
    """Percentage on a 0-100 scale; NaN where the denominator is 0."""
    denominator = denominator.astype(float).replace({0: np.nan})
    return 100.0 * numerator.astype(float) / denominator


def add_mode_metrics(wide: pd.DataFrame) -> pd.DataFrame:
    """
    Remote and DNA percentages from a mode pivot.

    * remote_share: telephone + video/online as % of all attended
      (face-to-face, home visit, telephone, video/online)
    * dna_in_person: DNA as % of booked face-to-face and home visits
    * dna_remote: DNA as % of booked telephone and video/online
    """
    df = wide.copy()

    attended_remote = df[ATTENDED_PHONE] + df[ATTENDED_VIDEO]
    attended_in_person = df[ATTENDED_F2F] + df[ATTENDED_HOME]
    dna_remote = df[DNA_PHONE] + df[DNA_VIDEO]
    dna_in_person = df[DNA_F2F] + df[DNA_HOME]

    df["remote_share"] = safe_pct(attended_remote, attended_in_person + attended_remote)
    df["dna_in_person"] = safe_pct(dna_in_person, attended_in_person + dna_in_person)
    df["dna_remote"] = safe_pct(dna_remote, attended_remote + dna_remote)
    return df


def add_booking_metrics(wide: pd.DataFrame) -> pd.DataFrame:
    """
    Same-day percentages from a booking pivot.

    Totals run over the seven known booking intervals; the
    ``Unknown_*`` columns are kept in the table but left out of every
    denominator.
    """
    df = wide.copy()

    remote_cols = [booking_column(i, RemoteFlag.REMOTE) for i in KNOWN_INTERVALS]
    f2f_cols = [booking_column(i, RemoteFlag.FACE_TO_FACE) for i in KNOWN_INTERVALS]
    same_day_remote = df[booking_column(BookingInterval.SAME_DAY, RemoteFlag.REMOTE)]
    same_day_f2f = df[booking_column(BookingInterval.SAME_DAY, RemoteFlag.FACE_TO_FACE)]

    df["total_remote"] = df[remote_cols].sum(axis=1)
    df["total_f2f"] = df[f2f_cols].sum(axis=1)
    df["same_day_remote_share"] = safe_pct(same_day_remote, df["total_remote"])
    df["same_day_f2f_share"] = safe_pct(same_day_f2f, df["total_f2f"])
    df["same_day_share"] = safe_pct(
        same_day_remote + same_day_f2f, df["total_remote"] + df["total_f2f"]
    )
    return df


def missing_share(records: pd.DataFrame, field: str,
                  group_keys: Sequence[str]) -> pd.DataFrame:
    """Percentage of appointments whose ``field`` is Unknown, per group."""
    columns = [member.value for member in FIELDS[field]]
    wide = reshape(records, group_keys, [field], columns)
    unknown = UNKNOWN_MEMBERS[field].value
    out = wide[list(group_keys)].copy()
    out[f"{field}_unknown_pc"] = safe_pct(wide[unknown], wide[columns].sum(axis=1))
    return out


def missing_data_table(records: pd.DataFrame, group_keys: Sequence[str]) -> pd.DataFrame:
    """
    Data-quality table: Unknown shares for every categorical field, plus
    ``null_count_records``, the number of records whose count was missing
    (these were summed as zero everywhere else).
    """
    group_keys = list(group_keys)
    table = None
    for field in FIELDS:
        share = missing_share(records, field, group_keys)
        table = share if table is None else table.merge(share, on=group_keys, how="outer")

    nulls = (
        records.assign(null_count=records["count"].isna())
        .groupby(group_keys, as_index=False)["null_count"]
        .sum()
        .rename(columns={"null_count": "null_count_records"})
    )
    table = table.merge(nulls, on=group_keys, how="left")
    table["null_count_records"] = table["null_count_records"].fillna(0).astype("int64")
    return table
