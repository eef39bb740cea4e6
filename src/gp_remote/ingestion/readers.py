from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

logger = logging.getLogger(__name__)


def read_table(path: str | Path, meta: dict | None = None) -> pd.DataFrame:
    """
    Read one raw table according to its registry entry.

    Honours ``loader`` (csv or excel), ``sheet`` and ``header_rows_to_skip``,
    and strips whitespace from column names.
    """
    meta = meta or {}
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Raw file not found at {path}")

    loader = meta.get("loader", "csv")
    read_kwargs = {}
    skip = meta.get("header_rows_to_skip")
    if skip is not None:
        read_kwargs["skiprows"] = skip

    if loader == "excel":
        read_kwargs["sheet_name"] = meta.get("sheet", 0)
        df = pd.read_excel(path, **read_kwargs)
    elif loader == "csv":
        df = pd.read_csv(path, **read_kwargs)
    else:
        raise ValueError(f"Unsupported loader {loader!r} for {path}")

    df.columns = [c.strip() if isinstance(c, str) else c for c in df.columns]
    logger.info(f"[READ] {path.name}: {df.shape[0]} rows x {df.shape[1]} columns")
    return df
