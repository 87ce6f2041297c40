from __future__ import annotations

try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import pytest
from pydantic import ValidationError

from settings_sync.core.config import AppSettings, DiscordSettings, PepperSettings


def test_app_settings_load_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SIZE_LIMIT", "2048")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "https://a.example, https://b.example")

    settings = AppSettings()  # type: ignore[call-arg]

    assert settings.size_limit == 2048
    assert settings.cors_allow_origins == ("https://a.example", "https://b.example")
    assert settings.redis.uri.startswith("redis://")
    assert settings.peppers.secrets.get_secret_value() == "test-secrets-pepper"
    assert "test-secrets-pepper" not in repr(settings)


def test_peppers_must_differ() -> None:
    with pytest.raises(ValidationError):
        PepperSettings(PEPPER_SECRETS="same", PEPPER_SETTINGS="same")


def test_peppers_must_be_non_empty() -> None:
    with pytest.raises(ValidationError):
        PepperSettings(PEPPER_SECRETS="", PEPPER_SETTINGS="other")


def test_discord_scopes_accept_comma_separated_string(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DISCORD_SCOPES", "identify, email")

    settings = DiscordSettings()  # type: ignore[call-arg]

    assert settings.scopes == ("identify", "email")
    assert settings.http_timeout_seconds == 10.0


def test_size_limit_must_be_positive(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SIZE_LIMIT", "0")

    with pytest.raises(ValidationError):
        AppSettings()  # type: ignore[call-arg]


def test_settings_fall_back_to_dotenv_file(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / ".env").write_text(
        "SIZE_LIMIT=4096\nREDIS_SOCKET_TIMEOUT=2.5\nUNRELATED_TOOL_SETTING=1\n",
        encoding="utf-8",
    )
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("SIZE_LIMIT", raising=False)
    monkeypatch.delenv("REDIS_SOCKET_TIMEOUT", raising=False)

    settings = AppSettings()  # type: ignore[call-arg]

    assert settings.size_limit == 4096
    assert settings.redis.socket_timeout == 2.5


def test_environment_overrides_dotenv_file(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / ".env").write_text("SIZE_LIMIT=4096\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("SIZE_LIMIT", "2048")

    assert AppSettings().size_limit == 2048  # type: ignore[call-arg]
