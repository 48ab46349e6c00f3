"""
Integration Test Fixtures.

Fixtures for integration tests - uses a real SQLite database file and the
real CLI entry point. These build on the root conftest.py fixtures.
"""

from collections.abc import Generator

import pytest
from click.testing import CliRunner

from notorica.core.config import get_app_config, get_settings


@pytest.fixture
def database_file(tmp_path, monkeypatch) -> Generator[str, None, None]:
    """
    Point NOTORICA_DATABASE_URL at a fresh SQLite file for one test.

    Logging to logs/notorica.jsonl is left as configured.
    """
    db_path = tmp_path / "notorica.db"
    monkeypatch.setenv("NOTORICA_DATABASE_URL", f"sqlite+aiosqlite:///{db_path}")
    monkeypatch.delenv("NOTORICA_SYSTEM_THEME", raising=False)
    get_settings.cache_clear()
    get_app_config.cache_clear()
    yield str(db_path)
    get_settings.cache_clear()
    get_app_config.cache_clear()


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()
