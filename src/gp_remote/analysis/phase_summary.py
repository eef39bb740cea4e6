from __future__ import annotations

import datetime as dt
from typing import Sequence

import pandas as pd

PRE_PANDEMIC = "Pre-pandemic"


def assign_phase(dates: pd.Series, lockdowns: Sequence[tuple[str, dt.date]]) -> pd.Series:
    """
    Label each date with the latest lockdown that had started by then.

    Dates before the first lockdown are ``Pre-pandemic``.
    """
    phases = pd.Series(PRE_PANDEMIC, index=dates.index, dtype=object)
    for label, start in sorted(lockdowns, key=lambda item: item[1]):
        phases[dates >= pd.Timestamp(start)] = label
    return phases


def summarise_phases(national: pd.DataFrame, metrics: Sequence[str],
                     lockdowns: Sequence[tuple[str, dt.date]]) -> pd.DataFrame:
    """
    Mean of each England metric within each pandemic phase.

    Returns one row per phase, in chronological order, with the number of
    months, the first and last period, and the mean of every metric
    (months with an undefined metric are skipped by the mean).
    """
    df = national.copy()
    df["phase"] = assign_phase(df["date"], lockdowns)

    order = [PRE_PANDEMIC] + [label for label, _ in sorted(lockdowns, key=lambda item: item[1])]
    grouped = df.sort_values("date").groupby("phase", sort=False)

    summary = grouped[list(metrics)].mean()
    summary.insert(0, "months", grouped.size())
    summary.insert(1, "first_period", grouped["period"].first())
    summary.insert(2, "last_period", grouped["period"].last())

    summary = summary.reindex([p for p in order if p in summary.index])
    summary.index.name = "phase"
    return summary.reset_index()
