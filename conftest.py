import dataclasses
import datetime

import pytest

import database
from core.config import settings
from database import connection

TODAY = datetime.date(2026, 3, 10)


@pytest.fixture
def store(tmp_path, monkeypatch):
    """SqlStore backed by a throwaway sqlite file."""
    test_settings = dataclasses.replace(
        settings,
        db_backend="sqlite",
        db_path=str(tmp_path / "hifz_test.db"),
    )
    monkeypatch.setattr(connection, "settings", test_settings)
    database.create_table()
    return database.SqlStore()


@pytest.fixture
def today():
    return TODAY
