"""
Appointment month tokens.

The monthly extracts spell the month two ways: most files use ``APR2020``,
some (re-saved through Excel) use ``Apr-20``. Every token is mapped to the
``MONYYYY`` form before any grouping, otherwise the two spellings of one
month end up as two periods.
"""

from __future__ import annotations

import re

import pandas as pd

from gp_remote.errors import UnrecognizedPeriodToken


MONTHS = ("JAN", "FEB", "MAR", "APR", "MAY", "JUN",
          "JUL", "AUG", "SEP", "OCT", "NOV", "DEC")

CANONICAL_PATTERN = re.compile(r"^(" + "|".join(MONTHS) + r")(\d{4})$")

# Short-form tokens observed in the source files
SHORT_FORM_TOKENS = {
    "Mar-20": "MAR2020",
    "Apr-20": "APR2020",
    "May-20": "MAY2020",
    "Jun-20": "JUN2020",
    "Jul-20": "JUL2020",
    "Aug-20": "AUG2020",
    "Sep-20": "SEP2020",
    "Oct-20": "OCT2020",
    "Nov-20": "NOV2020",
    "Dec-20": "DEC2020",
    "Jan-21": "JAN2021",
    "Feb-21": "FEB2021",
    "Mar-21": "MAR2021",
    "Apr-21": "APR2021",
    "May-21": "MAY2021",
    "Jun-21": "JUN2021",
    "Jul-21": "JUL2021",
    "Aug-21": "AUG2021",
}

ANCHORS = ("start", "mid", "end")


def normalize(token) -> str:
    if not isinstance(token, str):
        raise UnrecognizedPeriodToken(token)
    stripped = token.strip()
    if stripped in SHORT_FORM_TOKENS:
        return SHORT_FORM_TOKENS[stripped]
    if CANONICAL_PATTERN.match(stripped):
        return stripped
    raise UnrecognizedPeriodToken(token)


def find_unrecognised_periods(tokens: pd.Series) -> list:
    bad = []
    for token in pd.unique(tokens):
        try:
            normalize(token)
        except UnrecognizedPeriodToken:
            bad.append(token)
    return bad


def normalize_periods(tokens: pd.Series) -> pd.Series:
    """
    Normalise a whole column of month tokens.

    Each distinct token is normalised once. All unrecognised tokens are
    reported together in a single UnrecognizedPeriodToken.
    """
    bad = find_unrecognised_periods(tokens)
    if bad:
        raise UnrecognizedPeriodToken(bad)
    mapping = {token: normalize(token) for token in pd.unique(tokens)}
    return tokens.map(mapping)


def period_start(period: str) -> pd.Timestamp:
    match = CANONICAL_PATTERN.match(period)
    if match is None:
        raise UnrecognizedPeriodToken(period)
    month = MONTHS.index(match.group(1)) + 1
    return pd.Timestamp(year=int(match.group(2)), month=month, day=1)


def period_anchor_date(period: str, anchor: str = "mid") -> pd.Timestamp:
    """Representative date of a canonical period, used for ordering and plotting."""
    start = period_start(period)
    if anchor == "start":
        return start
    if anchor == "mid":
        return start + pd.Timedelta(days=14)
    if anchor == "end":
        return start + pd.offsets.MonthEnd(0)
    raise ValueError(f"Unknown period anchor {anchor!r}; expected one of {ANCHORS}")


def add_anchor_dates(df: pd.DataFrame, anchor: str = "mid",
                     period_col: str = "period") -> pd.DataFrame:
    df = df.copy()
    dates = {p: period_anchor_date(p, anchor) for p in pd.unique(df[period_col])}
    df["date"] = pd.to_datetime(df[period_col].map(dates))
    return df
