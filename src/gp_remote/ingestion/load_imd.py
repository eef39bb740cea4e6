from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from gp_remote.errors import SchemaMismatch
from gp_remote.ingestion.readers import read_table

logger = logging.getLogger(__name__)

IMD_COLUMNS = {
    "LSOA code (2011)": "lsoa_code",
    "Index of Multiple Deprivation (IMD) Rank": "imd_rank",
    "Index of Multiple Deprivation (IMD) Decile": "imd_decile",
}

LOOKUP_LSOA_COLUMN = "LSOA11CD"


def canonicalise_columns(df: pd.DataFrame, columns: dict, source: str) -> pd.DataFrame:
    """Keep and rename the required columns, or fail listing what is missing."""
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise SchemaMismatch(
            f"{source} is missing required columns: " + ", ".join(missing)
        )
    return df[list(columns)].rename(columns=columns)


def load_imd(path: str | Path, sheet: str = "IMD2019") -> pd.DataFrame:
    """
    Load the IMD 2019 LSOA-level index (File 1).

    Returns one row per LSOA: lsoa_code, imd_rank, imd_decile.
    """
    df = read_table(path, {"loader": "excel", "sheet": sheet})
    df = canonicalise_columns(df, IMD_COLUMNS, "IMD index")
    df["imd_rank"] = pd.to_numeric(df["imd_rank"], errors="coerce")
    df["imd_decile"] = pd.to_numeric(df["imd_decile"], errors="coerce")
    logger.info(f"[IMD] Loaded {len(df)} LSOAs")
    return df


def load_lsoa_lookup(path: str | Path, region_column: str = "STP21CD",
                     meta: dict | None = None) -> pd.DataFrame:
    """
    Load the LSOA -> CCG -> STP lookup, keeping the LSOA and the region key.

    ``region_column`` picks the region level (STP21CD or CCG21CD).
    """
    df = read_table(path, meta or {"loader": "csv"})
    df = canonicalise_columns(
        df,
        {LOOKUP_LSOA_COLUMN: "lsoa_code", region_column: "region_code"},
        "LSOA lookup",
    )
    logger.info(
        f"[LOOKUP] Loaded {len(df)} LSOAs across "
        f"{df['region_code'].nunique()} regions ({region_column})"
    )
    return df
