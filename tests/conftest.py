import os

import pytest

from engine.store import JsonDayStore

_SETTING_KEYS = (
    "PAGE_LEDGER_DATA_PATH",
    "DEFAULT_DOLLAR_RATE",
    "RETURN_LOSS_INCLUDES_COD",
    "DEFAULT_DELIVERY_CHARGE",
    "DEFAULT_PACKAGING_COST",
    "DEFAULT_COD_PERCENT",
    "DEFAULT_RETURN_PERCENT",
)


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """No stray .env or environment overrides leak into a test."""
    monkeypatch.chdir(tmp_path)
    for key in _SETTING_KEYS:
        monkeypatch.delenv(key, raising=False)
    yield
    # .env loading writes straight into os.environ
    for key in _SETTING_KEYS:
        os.environ.pop(key, None)


@pytest.fixture
def store(tmp_path):
    return JsonDayStore(tmp_path / "days.json")
