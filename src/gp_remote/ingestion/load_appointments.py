from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from gp_remote.ingestion.readers import read_table

logger = logging.getLogger(__name__)


def list_extract_files(directory: str | Path, pattern: str = "*.csv") -> list[Path]:
    directory = Path(directory)
    if not directory.is_dir():
        raise FileNotFoundError(f"Appointments directory not found: {directory}")
    files = sorted(directory.glob(pattern))
    if not files:
        raise FileNotFoundError(
            f"No appointment extracts matching {pattern!r} in {directory}"
        )
    return files


def read_appointment_extracts(directory: str | Path, pattern: str = "*.csv",
                              meta: dict | None = None) -> list[pd.DataFrame]:
    """
    Load every per-area monthly extract in a directory (one CSV per CCG/STP).

    Files are returned in name order so repeated runs union them identically.
    Columns and values are validated later, by
    harmonisation.appointments_canonical.union_extracts.
    """
    files = list_extract_files(directory, pattern)
    logger.info(f"[APPOINTMENTS] Reading {len(files)} extract(s) from {directory}")
    return [read_table(path, meta) for path in files]
