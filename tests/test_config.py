import datetime as dt

import pytest

from gp_remote.config import (
    DATASETS_CONFIG,
    DEFAULT_LOCKDOWNS,
    get_dataset_config,
    load_datasets_config,
    load_pipeline_settings,
)


def test_repository_registry():
    datasets = load_datasets_config(DATASETS_CONFIG)
    assert {"gp_appointments", "imd_2019", "lsoa_stp_lookup"} <= set(datasets)
    assert datasets["gp_appointments"]["columns"]["period"] == "Appointment_Month"


def test_missing_dataset_key():
    with pytest.raises(KeyError, match="nope"):
        get_dataset_config({"a": {}}, "nope")


def test_pipeline_settings(tmp_path):
    path = tmp_path / "datasets.yaml"
    path.write_text(
        "pipeline:\n"
        "  period_anchor: start\n"
        "  min_pairs: 5\n"
        "  lockdowns:\n"
        "    - {label: Second, date: 2020-11-05}\n"
        "    - {label: First, date: '2020-03-23'}\n"
    )
    settings = load_pipeline_settings(path)
    assert settings.period_anchor == "start"
    assert settings.min_pairs == 5
    assert settings.lockdowns == (
        ("First", dt.date(2020, 3, 23)),
        ("Second", dt.date(2020, 11, 5)),
    )


def test_pipeline_settings_defaults(tmp_path):
    path = tmp_path / "datasets.yaml"
    path.write_text("datasets: {}\n")
    settings = load_pipeline_settings(path)
    assert settings.period_anchor == "mid"
    assert settings.min_pairs == 2
    assert settings.lockdowns == DEFAULT_LOCKDOWNS


def test_repository_settings_match_defaults():
    assert load_pipeline_settings(DATASETS_CONFIG).lockdowns == DEFAULT_LOCKDOWNS
