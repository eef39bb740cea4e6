import numpy as np
import pandas as pd
import pytest

from gp_remote.harmonisation.appointments_canonical import union_extracts
from gp_remote.scoring.series import build_booking_table, build_mode_table

from conftest import extract


def test_remote_share_end_to_end():
    a = extract([
        ("APR2020", "A", "GP", "Attended", "Face-to-Face", "Same Day", 80),
        ("APR2020", "A", "GP", "Attended", "Video/Online", "Same Day", 20),
        ("APR2020", "A", "GP", "Attended", "Telephone", "Same Day", 0),
        ("APR2020", "A", "GP", "Attended", "Home Visit", "Same Day", 0),
    ])
    b = extract([
        ("Apr-20", "B", "GP", "Attended", "Face-to-Face", "1 Day", 50),
        ("Apr-20", "B", "GP", "Attended", "Video/Online", "1 Day", 50),
    ])
    records = union_extracts([a, b])

    region = build_mode_table(records).set_index("region_code")
    assert region.loc["A", "remote_share"] == pytest.approx(20.0)
    assert region.loc["B", "remote_share"] == pytest.approx(50.0)

    national = build_mode_table(records, by_region=False)
    assert len(national) == 1
    assert national.loc[0, "remote_share"] == pytest.approx(100 * 70 / 200)


def test_national_remote_share_weights_regions_by_volume():
    a = extract([
        ("APR2020", "A", "GP", "Attended", "Face-to-Face", "Same Day", 80),
        ("APR2020", "A", "GP", "Attended", "Video/Online", "Same Day", 20),
    ])
    b = extract([
        ("APR2020", "B", "GP", "Attended", "Face-to-Face", "1 Day", 500),
        ("APR2020", "B", "GP", "Attended", "Video/Online", "1 Day", 500),
    ])
    records = union_extracts([a, b])

    region = build_mode_table(records).set_index("region_code")
    assert region.loc["A", "remote_share"] == pytest.approx(20.0)
    assert region.loc["B", "remote_share"] == pytest.approx(50.0)

    national = build_mode_table(records, by_region=False)
    assert national.loc[0, "remote_share"] == pytest.approx(100 * 520 / 1100)
    # not the mean of the two region percentages
    assert national.loc[0, "remote_share"] != pytest.approx(35.0)


def test_national_is_count_weighted(records):
    region = build_mode_table(records)
    national = build_mode_table(records, by_region=False).set_index("period")
    for period, group in region.groupby("period"):
        numerator = (group["Attended_Telephone"] + group["Attended_Video/Online"]).sum()
        denominator = group[[
            "Attended_Face-to-Face", "Attended_Home Visit",
            "Attended_Telephone", "Attended_Video/Online",
        ]].sum().sum()
        assert national.loc[period, "remote_share"] == pytest.approx(100 * numerator / denominator)


def test_mode_table_dates_and_order(records):
    table = build_mode_table(records)
    assert list(table["date"]) == [pd.Timestamp("2020-04-15")] * 2 + [pd.Timestamp("2020-05-15")] * 2
    assert list(table["region_code"]) == ["E54000001", "E54000002"] * 2


def test_mode_table_undefined_metrics_stay_nan(records):
    table = build_mode_table(records).set_index(["period", "region_code"])
    may_b = table.loc[("MAY2020", "E54000002")]
    assert may_b["remote_share"] == 0.0
    assert np.isnan(may_b["dna_remote"])


def test_booking_table(records):
    table = build_booking_table(records, anchor="start").set_index(["period", "region_code"])
    may_a = table.loc[("MAY2020", "E54000001")]
    assert may_a["same_day_remote_share"] == pytest.approx(100.0)
    assert may_a["same_day_f2f_share"] == pytest.approx(0.0)
    assert may_a["date"] == pd.Timestamp("2020-05-01")
    apr_a = table.loc[("APR2020", "E54000001")]
    assert apr_a["same_day_f2f_share"] == pytest.approx(100.0)
    assert apr_a["same_day_remote_share"] == pytest.approx(0.0)
