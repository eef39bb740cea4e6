from __future__ import annotations

import logging
import warnings

import pandas as pd
from pandas.errors import MergeError

from gp_remote.errors import JoinKeyUnmatched, SchemaMismatch

logger = logging.getLogger(__name__)


def unmatched_regions(wide: pd.DataFrame, summary: pd.DataFrame) -> list[str]:
    """Regions present in ``wide`` with no row in the deprivation summary."""
    return sorted(set(wide["region_code"]) - set(summary["region_code"]))


def join_deprivation(wide: pd.DataFrame, summary: pd.DataFrame) -> pd.DataFrame:
    """
    Left-join the static deprivation summary onto a per-region table.

    Rows are never dropped. Regions with no match (boundary changes between
    the lookup and the extracts) keep NaN deprivation fields and are
    reported with a JoinKeyUnmatched warning.
    """
    try:
        joined = wide.merge(summary, on="region_code", how="left", validate="many_to_one")
    except MergeError as exc:
        raise SchemaMismatch(f"Deprivation summary has duplicate regions: {exc}") from exc

    missing = unmatched_regions(wide, summary)
    if missing:
        logger.warning(
            f"[HARMONISE] {len(missing)} region(s) without deprivation data: "
            + ", ".join(missing)
        )
        warnings.warn(
            f"No deprivation summary for regions: {', '.join(missing)}",
            JoinKeyUnmatched,
            stacklevel=2,
        )
    return joined
