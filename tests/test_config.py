"""Tests for settings loading."""

import pytest

from swipe_split.config import Settings, load_settings
from swipe_split.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep the user's environment and home out of the tests."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("SWIPE_SPLIT_DATABASE_PATH", str(tmp_path / "data" / "db.sqlite"))
    for name in ("DEFAULT_RATIO", "DAY_FIRST", "CURRENCY_SYMBOL"):
        monkeypatch.delenv(f"SWIPE_SPLIT_{name}", raising=False)


def test_defaults(tmp_path):
    """70/30 split, day-first dates, rand symbol."""
    settings = Settings()

    assert settings.default_ratio == 0.7
    assert settings.day_first is True
    assert settings.currency_symbol == "R"


def test_creates_database_directory(tmp_path):
    """The database parent directory exists after loading."""
    settings = Settings()

    assert settings.database_path.parent.is_dir()


def test_environment_overrides(monkeypatch):
    """Prefixed environment variables are read."""
    monkeypatch.setenv("SWIPE_SPLIT_DEFAULT_RATIO", "0.6")
    monkeypatch.setenv("SWIPE_SPLIT_DAY_FIRST", "false")
    monkeypatch.setenv("SWIPE_SPLIT_CURRENCY_SYMBOL", "$")

    settings = load_settings()

    assert settings.default_ratio == 0.6
    assert settings.day_first is False
    assert settings.currency_symbol == "$"


def test_out_of_range_ratio_is_a_configuration_error(monkeypatch):
    """Ratios outside 0.5-0.9 are rejected."""
    monkeypatch.setenv("SWIPE_SPLIT_DEFAULT_RATIO", "0.95")

    with pytest.raises(ConfigurationError, match="Failed to load settings"):
        load_settings()
