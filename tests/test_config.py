"""Tests for environment-driven settings."""

from app.core.config import AnalysisSettings, AppSettings, LogSettings, ServerSettings


def test_app_defaults(monkeypatch) -> None:
    for name in (
        "APP_API_KEY",
        "APP_API_KEYS",
        "APP_RATE_LIMIT_PER_MIN",
        "APP_RATE_LIMIT_PER_MIN_PRO",
        "APP_RATE_LIMIT_WINDOW_SECONDS",
        "IA11_API_KEY",
        "IA11_API_KEYS",
        "RATE_LIMIT_PER_MIN",
        "RATE_LIMIT_PER_MIN_PRO",
    ):
        monkeypatch.delenv(name, raising=False)

    app_settings = AppSettings()

    assert app_settings.api_key is None
    assert app_settings.api_key_required is True
    assert app_settings.rate_limit_per_min == 30
    assert app_settings.rate_limit_per_min_pro == 5
    assert app_settings.rate_limit_window_seconds == 60


def test_rate_limits_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("APP_RATE_LIMIT_PER_MIN", "100")
    monkeypatch.setenv("APP_RATE_LIMIT_PER_MIN_PRO", "60")

    app_settings = AppSettings()

    assert app_settings.rate_limit_per_min == 100
    assert app_settings.rate_limit_per_min_pro == 60


def test_legacy_ia11_names_are_accepted(monkeypatch) -> None:
    for name in ("APP_API_KEY", "APP_API_KEYS", "APP_RATE_LIMIT_PER_MIN", "APP_RATE_LIMIT_PER_MIN_PRO"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("IA11_API_KEY", "legacy-key")
    monkeypatch.setenv("IA11_API_KEYS", "old-1,old-2")
    monkeypatch.setenv("RATE_LIMIT_PER_MIN", "40")
    monkeypatch.setenv("RATE_LIMIT_PER_MIN_PRO", "8")

    app_settings = AppSettings()

    assert app_settings.api_key == "legacy-key"
    assert app_settings.api_keys == "old-1,old-2"
    assert app_settings.rate_limit_per_min == 40
    assert app_settings.rate_limit_per_min_pro == 8


def test_app_prefixed_names_win_over_legacy_names(monkeypatch) -> None:
    monkeypatch.setenv("IA11_API_KEY", "legacy-key")
    monkeypatch.setenv("APP_API_KEY", "current-key")
    monkeypatch.setenv("RATE_LIMIT_PER_MIN_PRO", "8")
    monkeypatch.setenv("APP_RATE_LIMIT_PER_MIN_PRO", "12")

    app_settings = AppSettings()

    assert app_settings.api_key == "current-key"
    assert app_settings.rate_limit_per_min_pro == 12


def test_server_port_default_and_aliases(monkeypatch) -> None:
    monkeypatch.delenv("SERVER_PORT", raising=False)
    monkeypatch.delenv("PORT", raising=False)
    assert ServerSettings().port == 3000

    monkeypatch.setenv("PORT", "10000")
    assert ServerSettings().port == 10000

    monkeypatch.setenv("SERVER_PORT", "8080")
    assert ServerSettings().port == 8080


def test_other_sections_defaults(monkeypatch) -> None:
    monkeypatch.delenv("ANALYSIS_ENGINE", raising=False)
    monkeypatch.delenv("LOG_REQUEST_ID_HEADER", raising=False)

    assert AnalysisSettings().engine == "static"
    assert LogSettings().request_id_header == "X-Request-ID"
