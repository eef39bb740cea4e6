from __future__ import annotations

import logging
from typing import Sequence

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)


def pearson(x: pd.Series, y: pd.Series) -> float:
    """Pearson r, or NaN when either side is constant."""
    if x.nunique() < 2 or y.nunique() < 2:
        return np.nan
    return float(x.astype(float).corr(y.astype(float)))


def correlate(metric_column: str, deprivation_column: str, rows: pd.DataFrame,
              min_pairs: int = 2) -> pd.DataFrame:
    """
    Per-period correlation between a metric and deprivation across regions.

    Only regions with both values present in a period count. A period with
    fewer than ``min_pairs`` such regions gets r = NaN; ``n_regions`` holds
    the number of pairs behind each point.
    """
    min_pairs = max(int(min_pairs), 2)
    points = []
    for period, group in rows.groupby("period", sort=False):
        pairs = group[[metric_column, deprivation_column]].dropna()
        n = len(pairs)
        r = pearson(pairs[metric_column], pairs[deprivation_column]) if n >= min_pairs else np.nan
        point = {"period": period, "n_regions": n, "r": r}
        if "date" in group.columns:
            point["date"] = group["date"].iloc[0]
        points.append(point)

    out = pd.DataFrame(points, columns=["period", "date", "n_regions", "r"])
    if out["date"].notna().any():
        out = out.sort_values("date")
    return out.reset_index(drop=True)


def correlation_series(rows: pd.DataFrame, metrics: Sequence[str],
                       deprivation_column: str = "bottomq_pc",
                       min_pairs: int = 2) -> pd.DataFrame:
    """
    One row per period with ``{metric}_r`` and ``{metric}_n`` for each metric.
    """
    series = None
    for metric in metrics:
        points = correlate(metric, deprivation_column, rows, min_pairs).rename(
            columns={"r": f"{metric}_r", "n_regions": f"{metric}_n"}
        )
        if series is None:
            series = points
        else:
            series = series.merge(points.drop(columns="date"), on="period", how="outer")
        logger.info(
            f"[CORRELATION] {metric} vs {deprivation_column}: "
            f"{int(points[f'{metric}_r'].notna().sum())}/{len(points)} periods defined"
        )
    if series is None:
        return pd.DataFrame(columns=["period", "date"])
    # outer merges come back in key order, not date order
    if series["date"].notna().any():
        series = series.sort_values("date").reset_index(drop=True)
    return series
