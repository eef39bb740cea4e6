"""
GP appointment trends before and after the COVID-19 lockdowns.

Builds monthly per-STP and England-wide series of remote consultation,
DNA and same-day booking percentages from NHS Digital appointment extracts,
and correlates them with the share of each STP's LSOAs in the most deprived
IMD 2019 quintile.
"""

__version__ = "0.1.0"
