import warnings

import numpy as np
import pandas as pd
import pytest

from gp_remote.errors import JoinKeyUnmatched, SchemaMismatch
from gp_remote.harmonisation.harmonise import join_deprivation, unmatched_regions
from gp_remote.harmonisation.imd_canonical import SUMMARY_COLUMNS, build_deprivation_summary


def test_bottom_quintile_percentage(imd, lookup):
    summary = build_deprivation_summary(imd, lookup).set_index("region_code")
    a = summary.loc["E54000001"]
    assert a["lsoa_count"] == 10
    assert a["bottomq_count"] == 3
    assert a["bottomq_pc"] == 30.0
    assert a["mean_rank"] == pytest.approx(550.0)


def test_lsoa_missing_from_index_counts_but_not_bottom(imd, lookup):
    summary = build_deprivation_summary(imd, lookup).set_index("region_code")
    b = summary.loc["E54000002"]
    assert b["lsoa_count"] == 6
    assert b["bottomq_count"] == 2
    assert b["bottomq_pc"] == pytest.approx(100 * 2 / 6)
    assert b["mean_rank"] == pytest.approx(1300.0)


def test_summary_columns(imd, lookup):
    assert list(build_deprivation_summary(imd, lookup).columns) == SUMMARY_COLUMNS


def test_duplicate_lsoa_in_index_fails(imd, lookup):
    with pytest.raises(SchemaMismatch):
        build_deprivation_summary(pd.concat([imd, imd.head(1)]), lookup)


def test_join_keeps_unmatched_regions_as_null(imd, lookup):
    summary = build_deprivation_summary(imd, lookup)
    wide = pd.DataFrame({
        "period": ["APR2020"] * 3,
        "region_code": ["E54000001", "E54000002", "E54000099"],
        "remote_share": [20.0, 50.0, 10.0],
    })
    with pytest.warns(JoinKeyUnmatched, match="E54000099"):
        joined = join_deprivation(wide, summary)

    assert len(joined) == 3
    assert list(joined["region_code"]) == list(wide["region_code"])
    assert joined.loc[0, "bottomq_pc"] == 30.0
    assert np.isnan(joined.loc[2, "bottomq_pc"])
    assert np.isnan(joined.loc[2, "lsoa_count"])
    assert unmatched_regions(wide, summary) == ["E54000099"]


def test_join_without_unmatched_regions_is_silent(imd, lookup):
    summary = build_deprivation_summary(imd, lookup)
    wide = pd.DataFrame({"period": ["APR2020"], "region_code": ["E54000001"]})
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        joined = join_deprivation(wide, summary)
    assert joined.loc[0, "lsoa_count"] == 10


def test_nullable_decile_with_missing_value(imd, lookup):
    imd = imd.copy()
    deciles = list(imd["imd_decile"])
    deciles[0] = None
    imd["imd_decile"] = pd.array(deciles, dtype="Int64")
    imd["imd_rank"] = imd["imd_rank"].astype("Int64")

    summary = build_deprivation_summary(imd, lookup).set_index("region_code")
    a = summary.loc["E54000001"]
    assert a["lsoa_count"] == 10
    assert a["bottomq_count"] == 2
    assert a["bottomq_pc"] == 20.0
