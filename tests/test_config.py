from __future__ import annotations

from fitcoach_api.app.core.config import Settings


def test_defaults(monkeypatch):
    for name in ("JWT_SECRET", "RATE_LIMIT", "CORS_ORIGINS", "ENVIRONMENT", "ACCESS_TOKEN_EXPIRE_MINUTES"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings()
    assert settings.project_name == "FitCoach Pro API"
    assert settings.api_prefix == "/api"
    assert settings.rate_limit == "100 per 15 minutes"
    assert settings.token_lifetime_seconds == 7 * 24 * 3600
    assert "capacitor://localhost" in settings.cors_origins
    assert settings.is_development


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "from-env")
    monkeypatch.setenv("CORS_ORIGINS", "https://app.example.com, https://admin.example.com ,")
    monkeypatch.setenv("RATE_LIMIT_ENABLED", "false")
    monkeypatch.setenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30")
    monkeypatch.setenv("ENVIRONMENT", "production")
    settings = Settings()
    assert settings.secret_key == "from-env"
    assert settings.cors_origins == ["https://app.example.com", "https://admin.example.com"]
    assert settings.rate_limit_enabled is False
    assert settings.token_lifetime_seconds == 1800
    assert not settings.is_development


def test_explicit_values_win_over_environment(monkeypatch):
    monkeypatch.setenv("DEFAULT_PAGE_SIZE", "50")
    assert Settings(default_page_size=5).default_page_size == 5
    assert Settings().default_page_size == 50
