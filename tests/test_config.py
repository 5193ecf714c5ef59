"""Startup configuration validation."""

from datetime import date
from pathlib import Path

import pytest

from stock_closes.core.config import (
    MAX_DAY_COUNT,
    ConfigError,
    Settings,
    get_settings,
    load_service_config,
    load_settings,
)
from stock_closes.core.window import compute_closes


@pytest.fixture
def key_file(tmp_path: Path) -> Path:
    path = tmp_path / "stockAPIKey"
    path.write_text("abc123\n", encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch):
    for name in ("NDAYS", "SYMBOL", "STOCK_API_KEY_FILE", "MARKET_TIMEZONE"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def _settings(**overrides: object) -> Settings:
    return Settings(_env_file=None, **overrides)


def test_valid_settings_build_service_config(key_file: Path) -> None:
    """Valid settings should produce a normalized ServiceConfig."""

    config = load_service_config(
        _settings(NDAYS=10, SYMBOL=" MSFT ", STOCK_API_KEY_FILE=str(key_file), STOCK_API_ADDR="https://av.test/")
    )

    assert config.symbol == "MSFT"
    assert config.day_count == 10
    assert config.api_key == "abc123"
    assert config.api_base_url == "https://av.test"
    assert config.market_timezone == "America/New_York"


def test_all_problems_are_reported_together(tmp_path: Path) -> None:
    """Every configuration problem should be collected into one error."""

    settings = _settings(STOCK_API_KEY_FILE=str(tmp_path / "missing"))

    with pytest.raises(ConfigError) as excinfo:
        load_service_config(settings)

    problems = excinfo.value.problems
    assert len(problems) == 3
    assert any("NDAYS" in problem for problem in problems)
    assert any("SYMBOL" in problem for problem in problems)
    assert any("error reading required secret" in problem for problem in problems)


@pytest.mark.parametrize("ndays", [0, -1])
def test_non_positive_ndays_is_rejected(ndays: int, key_file: Path) -> None:
    """NDAYS must be at least one."""

    with pytest.raises(ConfigError, match="must be a positive integer"):
        load_service_config(_settings(NDAYS=ndays, SYMBOL="MSFT", STOCK_API_KEY_FILE=str(key_file)))


def test_oversized_ndays_is_rejected(key_file: Path) -> None:
    """NDAYS beyond the supported window size should fail startup instead of every request."""

    with pytest.raises(ConfigError, match=f"must be at most {MAX_DAY_COUNT}"):
        load_service_config(
            _settings(NDAYS=1_000_000, SYMBOL="MSFT", STOCK_API_KEY_FILE=str(key_file))
        )


def test_largest_ndays_is_accepted(key_file: Path) -> None:
    """The maximum day count should still load and produce a walkable window."""

    config = load_service_config(
        _settings(NDAYS=MAX_DAY_COUNT, SYMBOL="MSFT", STOCK_API_KEY_FILE=str(key_file))
    )

    assert config.day_count == MAX_DAY_COUNT
    assert len(compute_closes(date(2024, 1, 8), config.day_count, {}, "MSFT").daily_closes) == MAX_DAY_COUNT


def test_blank_secret_file_is_rejected(tmp_path: Path) -> None:
    """A whitespace-only secret file should count as empty."""

    blank = tmp_path / "stockAPIKey"
    blank.write_text("  \n", encoding="utf-8")

    with pytest.raises(ConfigError, match="has no content"):
        load_service_config(_settings(NDAYS=5, SYMBOL="MSFT", STOCK_API_KEY_FILE=str(blank)))


def test_unknown_timezone_is_rejected(key_file: Path) -> None:
    """An unknown market timezone should fail startup."""

    settings = _settings(
        NDAYS=5, SYMBOL="MSFT", STOCK_API_KEY_FILE=str(key_file), MARKET_TIMEZONE="Mars/Olympus_Mons"
    )

    with pytest.raises(ConfigError, match="MARKET_TIMEZONE"):
        load_service_config(settings)


def test_environment_is_read(monkeypatch: pytest.MonkeyPatch, key_file: Path) -> None:
    """Settings should be read from environment variables."""

    monkeypatch.setenv("NDAYS", "7")
    monkeypatch.setenv("SYMBOL", "IBM")
    monkeypatch.setenv("STOCK_API_KEY_FILE", str(key_file))

    config = load_service_config()

    assert config.day_count == 7
    assert config.symbol == "IBM"


def test_empty_env_var_counts_as_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    """An empty env var should be treated as unset."""

    monkeypatch.setenv("NDAYS", "")

    assert _settings().NDAYS is None


def test_non_integer_ndays_is_a_config_error(monkeypatch: pytest.MonkeyPatch) -> None:
    """A non-integer NDAYS should surface as a ConfigError."""

    monkeypatch.setenv("NDAYS", "ten")

    with pytest.raises(ConfigError, match="NDAYS"):
        load_settings()
