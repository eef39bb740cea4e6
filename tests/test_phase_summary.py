import datetime as dt

import numpy as np
import pandas as pd
import pytest

from gp_remote.analysis.phase_summary import PRE_PANDEMIC, assign_phase, summarise_phases
from gp_remote.config import DEFAULT_LOCKDOWNS


def national():
    periods = ["JAN2020", "FEB2020", "MAR2020", "APR2020", "NOV2020", "DEC2020", "JAN2021"]
    dates = pd.to_datetime([
        "2020-01-15", "2020-02-15", "2020-03-15", "2020-04-15",
        "2020-11-15", "2020-12-15", "2021-01-15",
    ])
    return pd.DataFrame({
        "period": periods,
        "date": dates,
        "remote_share": [10.0, 12.0, 14.0, 60.0, 50.0, np.nan, 70.0],
    })


def test_assign_phase():
    phases = assign_phase(national()["date"], DEFAULT_LOCKDOWNS)
    assert list(phases) == [
        PRE_PANDEMIC, PRE_PANDEMIC, PRE_PANDEMIC,
        "Lockdown 1", "Lockdown 2", "Lockdown 2", "Lockdown 3",
    ]


def test_phase_boundary_is_inclusive():
    dates = pd.Series(pd.to_datetime(["2020-03-22", "2020-03-23"]))
    phases = assign_phase(dates, [("Lockdown 1", dt.date(2020, 3, 23))])
    assert list(phases) == [PRE_PANDEMIC, "Lockdown 1"]


def test_summarise_phases():
    summary = summarise_phases(national(), ["remote_share"], DEFAULT_LOCKDOWNS)
    assert list(summary["phase"]) == [PRE_PANDEMIC, "Lockdown 1", "Lockdown 2", "Lockdown 3"]
    summary = summary.set_index("phase")
    assert summary.loc[PRE_PANDEMIC, "months"] == 3
    assert summary.loc[PRE_PANDEMIC, "remote_share"] == pytest.approx(12.0)
    assert summary.loc[PRE_PANDEMIC, "first_period"] == "JAN2020"
    assert summary.loc[PRE_PANDEMIC, "last_period"] == "MAR2020"
    # the undefined December value is skipped, not read as zero
    assert summary.loc["Lockdown 2", "remote_share"] == pytest.approx(50.0)
    assert summary.loc["Lockdown 2", "months"] == 2
