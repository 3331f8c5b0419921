"""
Newsdesk Configuration

Centralized configuration. All environment variables MUST be defined here.
No os.getenv() calls allowed elsewhere.
"""
from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass


def _optional_env(name: str, default: str = "") -> str:
    """Get an optional environment variable with a default."""
    return os.environ.get(name, default)


def _optional_env_int(name: str, default: int) -> int:
    """Get an optional integer environment variable with a default."""
    value = os.environ.get(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"Invalid integer value for {name}: {value}")


def _optional_env_float(name: str, default: float) -> float:
    """Get an optional float environment variable with a default."""
    value = os.environ.get(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        raise ConfigurationError(f"Invalid number value for {name}: {value}")


def _optional_env_bool(name: str, default: bool) -> bool:
    """Get an optional boolean environment variable with a default."""
    value = os.environ.get(name)
    if not value:
        return default
    return value.lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class WebSocketServerConfig:
    """WebSocket server configuration for client connections."""
    host: str
    port: int


@dataclass(frozen=True)
class HttpApiConfig:
    """REST API bind address."""
    host: str
    port: int
    enabled: bool = True


@dataclass(frozen=True)
class PipelineConfig:
    """Ingestion pipeline limits."""
    dedup_capacity: int = 5000
    recent_cards: int = 50
    coarse_max_age_hours: float = 48.0
    strict_max_age_hours: float = 8.0
    items_per_feed: int = 3
    initial_items_per_feed: int = 5
    failure_threshold: int = 5
    fetch_timeout_seconds: float = 10.0

    def __post_init__(self) -> None:
        if self.dedup_capacity < 1:
            raise ConfigurationError("DEDUP_CAPACITY must be at least 1")
        if self.recent_cards < 1:
            raise ConfigurationError("RECENT_CARDS must be at least 1")
        if self.strict_max_age_hours > self.coarse_max_age_hours:
            raise ConfigurationError(
                "STRICT_MAX_AGE_HOURS must not exceed COARSE_MAX_AGE_HOURS"
            )


@dataclass(frozen=True)
class ScheduleConfig:
    """Periodic job intervals, in seconds."""
    rss: float = 30.0
    newsapi: float = 300.0
    newsapi_geo: float = 420.0
    market: float = 15.0
    macro: float = 300.0
    fx: float = 30.0
    commodity: float = 60.0
    prediction: float = 60.0
    game_theory: float = 1800.0


@dataclass(frozen=True)
class ApiKeysConfig:
    """Keys for optional third-party collaborators. Empty disables the collaborator."""
    newsapi: str = ""
    fred: str = ""
    groq: str = ""


@dataclass(frozen=True)
class RedisConfig:
    """Redis mirror configuration."""
    url: str = ""

    @property
    def enabled(self) -> bool:
        return bool(self.url)


@dataclass(frozen=True)
class Settings:
    """Root configuration container."""
    websocket_server: WebSocketServerConfig
    http_api: HttpApiConfig
    pipeline: PipelineConfig
    schedule: ScheduleConfig
    api_keys: ApiKeysConfig
    redis: RedisConfig
    log_level: str = "INFO"


def _load_settings() -> Settings:
    """Load all settings from environment variables.

    Every collaborator key is optional so the service starts (and --mock
    mode works) without a .env file.
    """
    websocket_server = WebSocketServerConfig(
        host=_optional_env("WS_HOST", "0.0.0.0"),
        port=_optional_env_int("WS_PORT", 8765),
    )

    http_api = HttpApiConfig(
        host=_optional_env("HTTP_HOST", "0.0.0.0"),
        port=_optional_env_int("HTTP_PORT", 3000),
        enabled=_optional_env_bool("HTTP_ENABLED", True),
    )

    pipeline = PipelineConfig(
        dedup_capacity=_optional_env_int("DEDUP_CAPACITY", 5000),
        recent_cards=_optional_env_int("RECENT_CARDS", 50),
        coarse_max_age_hours=_optional_env_float("COARSE_MAX_AGE_HOURS", 48.0),
        strict_max_age_hours=_optional_env_float("STRICT_MAX_AGE_HOURS", 8.0),
        items_per_feed=_optional_env_int("ITEMS_PER_FEED", 3),
        initial_items_per_feed=_optional_env_int("INITIAL_ITEMS_PER_FEED", 5),
        failure_threshold=_optional_env_int("SOURCE_FAILURE_THRESHOLD", 5),
        fetch_timeout_seconds=_optional_env_float("FETCH_TIMEOUT_SECONDS", 10.0),
    )

    schedule = ScheduleConfig(
        rss=_optional_env_float("RSS_INTERVAL_SECONDS", 30.0),
        newsapi=_optional_env_float("NEWSAPI_INTERVAL_SECONDS", 300.0),
        newsapi_geo=_optional_env_float("NEWSAPI_GEO_INTERVAL_SECONDS", 420.0),
        market=_optional_env_float("MARKET_INTERVAL_SECONDS", 15.0),
        macro=_optional_env_float("MACRO_INTERVAL_SECONDS", 300.0),
        fx=_optional_env_float("FX_INTERVAL_SECONDS", 30.0),
        commodity=_optional_env_float("COMMODITY_INTERVAL_SECONDS", 60.0),
        prediction=_optional_env_float("PREDICTION_INTERVAL_SECONDS", 60.0),
        game_theory=_optional_env_float("GAME_THEORY_INTERVAL_SECONDS", 1800.0),
    )

    api_keys = ApiKeysConfig(
        newsapi=_optional_env("NEWSAPI_KEY", ""),
        fred=_optional_env("FRED_API_KEY", ""),
        groq=_optional_env("GROQ_API_KEY", ""),
    )

    return Settings(
        websocket_server=websocket_server,
        http_api=http_api,
        pipeline=pipeline,
        schedule=schedule,
        api_keys=api_keys,
        redis=RedisConfig(url=_optional_env("REDIS_URL", "")),
        log_level=_optional_env("LOG_LEVEL", "INFO").upper(),
    )


settings = _load_settings()
