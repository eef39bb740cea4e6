from __future__ import annotations

import logging
from typing import Iterable

import pandas as pd

from gp_remote.categories import FIELDS, parse_category
from gp_remote.errors import SchemaMismatch, UnrecognizedCategory
from gp_remote.harmonisation.periods import normalize_periods

logger = logging.getLogger(__name__)

# Canonical column -> column name in the NHS Digital CCG/STP extracts
RAW_COLUMNS = {
    "period": "Appointment_Month",
    "region_code": "STP_ONS",
    "hcp_type": "HCP_TYPE",
    "status": "APPT_STATUS",
    "mode": "APPT_MODE",
    "booking_interval": "TIME_BETWEEN_BOOK_AND_APPT",
    "count": "COUNT_OF_APPOINTMENTS",
}

CANONICAL_COLUMNS = list(RAW_COLUMNS)


def check_extract_columns(df: pd.DataFrame, column_map: dict = RAW_COLUMNS) -> list[str]:
    """Return the raw columns an extract lacks (empty list when complete)."""
    return [raw for raw in column_map.values() if raw not in df.columns]


def find_unrecognised_categories(df: pd.DataFrame) -> dict[str, list]:
    """Map canonical field -> distinct raw values with no enum member."""
    report = {}
    for field in FIELDS:
        values = pd.unique(df[field])
        bad = [v for v in values if parse_category(field, v) is None]
        if bad:
            report[field] = bad
    return report


def harmonise_categories(df: pd.DataFrame) -> pd.DataFrame:
    """
    Replace each raw categorical spelling with its enum value.

    Raises UnrecognizedCategory for the first field holding a spelling
    the enums do not know.
    """
    df = df.copy()
    bad = find_unrecognised_categories(df)
    if bad:
        field, values = next(iter(bad.items()))
        raise UnrecognizedCategory(field, values)
    for field in FIELDS:
        mapping = {v: parse_category(field, v).value for v in pd.unique(df[field])}
        df[field] = df[field].map(mapping)
    return df


def coerce_counts(counts: pd.Series) -> pd.Series:
    """Counts as nullable integers. Nulls are kept; they are not zeros yet."""
    numeric = pd.to_numeric(counts, errors="coerce")
    bad = counts.notna() & numeric.isna()
    if bad.any():
        raise SchemaMismatch(
            "Non-numeric appointment counts: "
            + ", ".join(map(repr, pd.unique(counts[bad])[:10]))
        )
    if (numeric < 0).any():
        raise SchemaMismatch("Negative appointment counts in extracts")
    if (numeric.notna() & (numeric % 1 != 0)).any():
        raise SchemaMismatch("Fractional appointment counts in extracts")
    return numeric.astype("Int64")


def union_extracts(extracts: Iterable[pd.DataFrame],
                   column_map: dict = RAW_COLUMNS) -> pd.DataFrame:
    """
    Union per-area monthly extracts into one canonical appointments table.

    Every extract must carry every column in ``column_map``. After the union
    the table has the canonical columns only (period, region_code, hcp_type,
    status, mode, booking_interval, count), with month tokens normalised to
    MONYYYY and categories replaced by their enumerated spellings.
    """
    if set(column_map) != set(CANONICAL_COLUMNS):
        raise SchemaMismatch(
            "Column map must name exactly: " + ", ".join(CANONICAL_COLUMNS)
        )

    frames = []
    for i, df in enumerate(extracts):
        missing = check_extract_columns(df, column_map)
        if missing:
            raise SchemaMismatch(
                f"Appointment extract #{i} is missing required columns: "
                + ", ".join(missing)
            )
        frames.append(df[list(column_map.values())])

    if not frames:
        raise SchemaMismatch("No appointment extracts to union")

    union = pd.concat(frames, ignore_index=True)
    union = union.rename(columns={raw: canon for canon, raw in column_map.items()})
    union = union[CANONICAL_COLUMNS]
    logger.info(f"[APPOINTMENTS] Unioned {len(frames)} extract(s): {len(union)} records")

    if union["region_code"].isna().any():
        raise SchemaMismatch("Appointment records with no region code")

    union["region_code"] = union["region_code"].astype(str).str.strip()
    union["period"] = normalize_periods(union["period"])
    union = harmonise_categories(union)
    union["count"] = coerce_counts(union["count"])

    n_null = int(union["count"].isna().sum())
    if n_null:
        logger.info(f"[APPOINTMENTS] {n_null} record(s) with a missing count")
    logger.info(
        f"[APPOINTMENTS] {union['period'].nunique()} periods, "
        f"{union['region_code'].nunique()} regions"
    )
    return union
