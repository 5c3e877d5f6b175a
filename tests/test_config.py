"""Tests for configuration defaults."""
from booksearch.config import Config


def test_database_url():
    config = Config()
    assert config.DATABASE_URL.startswith("postgresql://")
    assert config.DB_NAME in config.DATABASE_URL


def test_search_defaults():
    assert Config.OPEN_LIBRARY_BASE_URL
    assert Config.DEFAULT_TIMEOUT > 0
    assert Config.MAX_RESULTS > 0
