"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from environment
variables; defaults are provided for all fields.  Values are resolved
when a ``Settings`` instance is created, so tests may set environment
variables and build a fresh instance (or pass explicit keyword
arguments) instead of reloading this module.
"""

import os
from dataclasses import dataclass, field
from typing import List


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


def _env_list(name: str, default: str) -> List[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


# Origins used by the iOS shell (Capacitor/Ionic) and local web tooling.
DEFAULT_CORS_ORIGINS = ",".join(
    [
        "http://localhost:3000",
        "http://localhost:8080",
        "capacitor://localhost",
        "ionic://localhost",
        "http://localhost",
        "http://localhost:8100",
        "https://localhost:8100",
    ]
)


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = field(default_factory=lambda: os.getenv("PROJECT_NAME", "FitCoach Pro API"))
    api_version: str = field(default_factory=lambda: os.getenv("API_VERSION", "1.0.0"))
    environment: str = field(default_factory=lambda: os.getenv("ENVIRONMENT", "development"))
    debug: bool = field(default_factory=lambda: _env_bool("DEBUG", "false"))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_file: str = field(default_factory=lambda: os.getenv("LOG_FILE", ""))

    # Signing secret for bearer tokens.  Never echoed in responses or logs.
    secret_key: str = field(default_factory=lambda: os.getenv("JWT_SECRET", "fitcoach-pro-secret-key-2024"))
    access_token_expire_minutes: int = field(
        default_factory=lambda: int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7)))
    )

    # All resource routers are mounted below this prefix; ``/health``
    # stays at the root.
    api_prefix: str = field(default_factory=lambda: os.getenv("API_PREFIX", "/api"))
    cors_origins: List[str] = field(default_factory=lambda: _env_list("CORS_ORIGINS", DEFAULT_CORS_ORIGINS))

    # Rate limit expressed in the ``limits`` notation, applied per client IP.
    rate_limit: str = field(default_factory=lambda: os.getenv("RATE_LIMIT", "100 per 15 minutes"))
    rate_limit_enabled: bool = field(default_factory=lambda: _env_bool("RATE_LIMIT_ENABLED", "true"))

    # Responses at least this many bytes long are gzip compressed when
    # the client accepts it.
    gzip_minimum_size: int = field(default_factory=lambda: int(os.getenv("GZIP_MINIMUM_SIZE", "1000")))

    # Pagination
    default_page_size: int = field(default_factory=lambda: int(os.getenv("DEFAULT_PAGE_SIZE", "10")))
    max_page_size: int = field(default_factory=lambda: int(os.getenv("MAX_PAGE_SIZE", "100")))

    # Advertised to the mobile shell through ``/api/ios/app-config``.
    public_base_url: str = field(default_factory=lambda: os.getenv("PUBLIC_BASE_URL", "http://localhost:3000/api"))
    websocket_url: str = field(default_factory=lambda: os.getenv("WEBSOCKET_URL", "ws://localhost:3000"))

    # Load the demo coach, clients and workouts at start-up.
    seed_fixtures: bool = field(default_factory=lambda: _env_bool("SEED_FIXTURES", "true"))

    @property
    def token_lifetime_seconds(self) -> int:
        return self.access_token_expire_minutes * 60

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  ``create_app`` accepts an
# explicit instance when a different configuration is needed.
settings = Settings()
