"""
Shared fixtures.
"""
from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from core.config import reset_settings
from core.schema import RawEntry


BASE_TIME = datetime(2021, 3, 1, 12, 0, 0)


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point settings at a temporary storage directory for every test."""
    for name in ("LOG_LEVEL", "PORT", "CSV_DELIMITER", "INPUT_PATH", "OUTPUT_PATH"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("STORAGE_PATH", str(tmp_path / "files"))
    reset_settings()
    yield
    reset_settings()


def _make_entry(operation, change, coin="BTC", seconds=0, remark=""):
    """Build a RawEntry ``seconds`` after BASE_TIME."""
    timestamp = BASE_TIME + timedelta(seconds=seconds)
    return RawEntry(
        user_id="12345",
        utc_time=timestamp.strftime("%Y-%m-%d %H:%M:%S"),
        timestamp=timestamp,
        account="Spot",
        operation=operation,
        currency=coin,
        change=Decimal(str(change)),
        remark=remark,
    )


@pytest.fixture
def make_entry():
    """Factory for ledger entries relative to BASE_TIME."""
    return _make_entry


HEADER = "User_ID,UTC_Time,Account,Operation,Coin,Change,Remark\n"


@pytest.fixture
def write_export(tmp_path):
    """Write a Binance export with the given data lines and return its path."""
    def _write(lines, name="input.csv", header=HEADER):
        path = tmp_path / name
        path.write_text(header + "".join(line + "\n" for line in lines), encoding="utf-8")
        return str(path)
    return _write
