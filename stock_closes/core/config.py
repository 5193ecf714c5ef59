"""Environment-driven settings and the startup validation that turns them into a ServiceConfig."""

from functools import lru_cache
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from stock_closes.core.types import ServiceConfig

_DEFAULT_API_KEY_FILE = "/mnt/secrets/stockAPIKey"
MAX_DAY_COUNT = 100_000


class ConfigError(ValueError):
    """Raised when startup configuration is missing or invalid."""

    def __init__(self, problems: list[str]) -> None:
        self.problems = list(problems)
        super().__init__("; ".join(self.problems))


class Settings(BaseSettings):
    """Simple application settings loaded from environment variables or a local .env file."""

    APP_NAME: str = "Stock Closes"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    VERSION: str = "0.1.0"
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    NDAYS: int | None = None
    SYMBOL: str = ""
    STOCK_API_KEY_FILE: str = _DEFAULT_API_KEY_FILE
    STOCK_API_ADDR: str = "https://www.alphavantage.co"
    STOCK_API_TIMEOUT_S: float = 15.0
    MARKET_TIMEZONE: str = "America/New_York"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings to avoid repeated environment parsing."""

    return Settings()


def load_settings() -> Settings:
    """Return cached settings, reporting unparseable environment values as a ConfigError."""

    try:
        return get_settings()
    except ValidationError as exc:
        raise ConfigError(
            [f"env '{'.'.join(map(str, err['loc']))}': {err['msg']}" for err in exc.errors()]
        ) from exc


def read_secret_file(path: str) -> str:
    """Return the stripped contents of a secret file, raising ConfigError if unusable."""

    secret_path = Path(path)
    try:
        contents = secret_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError([f"error reading required secret from file ({path}): {exc}"]) from exc

    value = contents.strip()
    if not value:
        raise ConfigError([f"secrets file '{path}' is required but has no content"])
    return value


def load_service_config(settings: Settings | None = None) -> ServiceConfig:
    """Validate settings and the API key secret, collecting every problem before failing."""

    if settings is None:
        settings = load_settings()

    problems: list[str] = []

    day_count = settings.NDAYS or 0
    if settings.NDAYS is None:
        problems.append("env 'NDAYS' is required but not set")
    elif day_count <= 0:
        problems.append(f"env 'NDAYS' must be a positive integer, got {settings.NDAYS}")
    elif day_count > MAX_DAY_COUNT:
        problems.append(f"env 'NDAYS' must be at most {MAX_DAY_COUNT}, got {settings.NDAYS}")

    symbol = settings.SYMBOL.strip()
    if not symbol:
        problems.append("env 'SYMBOL' is required but not set")

    if settings.STOCK_API_TIMEOUT_S <= 0:
        problems.append("env 'STOCK_API_TIMEOUT_S' must be positive")

    try:
        ZoneInfo(settings.MARKET_TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError):
        problems.append(f"env 'MARKET_TIMEZONE' is not a known timezone: {settings.MARKET_TIMEZONE}")

    api_key = ""
    try:
        api_key = read_secret_file(settings.STOCK_API_KEY_FILE)
    except ConfigError as exc:
        problems.extend(exc.problems)

    if problems:
        raise ConfigError(problems)

    return ServiceConfig(
        symbol=symbol,
        day_count=day_count,
        api_key=api_key,
        api_base_url=settings.STOCK_API_ADDR.rstrip("/"),
        request_timeout_s=settings.STOCK_API_TIMEOUT_S,
        market_timezone=settings.MARKET_TIMEZONE,
    )
