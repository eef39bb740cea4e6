import pandas as pd
import pytest

from gp_remote.harmonisation.appointments_canonical import RAW_COLUMNS, union_extracts

RAW = list(RAW_COLUMNS.values())


def extract(rows):
    """Raw extract from (month, region, hcp, status, mode, interval, count) tuples."""
    return pd.DataFrame(rows, columns=RAW)


@pytest.fixture
def region_a():
    return extract([
        ("APR2020", "E54000001", "GP", "Attended", "Face-to-Face", "Same Day", 80),
        ("APR2020", "E54000001", "GP", "Attended", "Video/Online", "1 Day", 20),
        ("APR2020", "E54000001", "GP", "DNA", "Face-to-Face", "2 to 7 Days", 5),
        ("APR2020", "E54000001", "Other Practice staff", "Attended", "Telephone", "Same Day", 400),
        ("MAY2020", "E54000001", "GP", "Attended", "Telephone", "Same Day", 30),
        ("MAY2020", "E54000001", "GP", "Attended", "Face-to-Face", "8  to 14 Days", 10),
    ])


@pytest.fixture
def region_b():
    return extract([
        ("Apr-20", "E54000002", "GP", "Attended", "Face-to-Face", "Same Day", 50),
        ("Apr-20", "E54000002", "GP", "Attended", "Video/Online", "Same Day", 50),
        ("Apr-20", "E54000002", "GP", "DNA", "Telephone", "1 Day", None),
        ("Apr-20", "E54000002", "Unknown", "Unknown", "Unknown", "Unknown / Data Issue", 7),
        ("May-20", "E54000002", "GP", "Attended", "Home Visit", "Same Day", 4),
    ])


@pytest.fixture
def records(region_a, region_b):
    return union_extracts([region_a, region_b])


@pytest.fixture
def imd():
    return pd.DataFrame({
        "lsoa_code": [f"E0100{i:04d}" for i in range(15)],
        "imd_rank": [100 * (i + 1) for i in range(15)],
        "imd_decile": [1, 2, 2, 5, 6, 7, 8, 9, 10, 10, 1, 1, 3, 4, 5],
    })


@pytest.fixture
def lookup():
    # A: 10 LSOAs (3 in deciles 1-2); B: 5 LSOAs (2 in deciles 1-2) + 1 not in the index
    codes = [f"E0100{i:04d}" for i in range(15)] + ["E01999999"]
    regions = ["E54000001"] * 10 + ["E54000002"] * 6
    return pd.DataFrame({"lsoa_code": codes, "region_code": regions})
