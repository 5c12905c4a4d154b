"""Root conftest — shared fixtures and markers."""

from __future__ import annotations

import os

import pytest


def pytest_configure(config):
    config.addinivalue_line("markers", "postgres: requires running PostgreSQL server")


def pytest_collection_modifyitems(config, items):
    if os.environ.get("APPENDGUARD_TEST_POSTGRES"):
        return

    skip_pg = pytest.mark.skip(reason="Postgres not available (set APPENDGUARD_TEST_POSTGRES=1)")
    for item in items:
        if "postgres" in item.keywords:
            item.add_marker(skip_pg)


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path, monkeypatch):
    """Keep tests away from the real ~/.appendguard and APPENDGUARD_* env vars."""
    monkeypatch.setattr("appendguard.settings._SETTINGS_FILE", tmp_path / "settings.toml")
    for var in ("APPENDGUARD_RELATIONS", "APPENDGUARD_DB"):
        monkeypatch.delenv(var, raising=False)
