"""Tests for configuration parsing."""

import pytest
from pydantic import ValidationError

from immich_share.config import Settings, normalize_base_path, parse_body_size_limit


def test_parse_body_size_limit() -> None:
    assert parse_body_size_limit("500mb") == 500 * 1024 * 1024
    assert parse_body_size_limit("100KB") == 100 * 1024
    assert parse_body_size_limit("1.5gb") == int(1.5 * 1024**3)
    assert parse_body_size_limit("2048") == 2048


def test_parse_body_size_limit_rejects_garbage() -> None:
    with pytest.raises(ValueError):
        parse_body_size_limit("lots")


def test_normalize_base_path() -> None:
    assert normalize_base_path("") == ""
    assert normalize_base_path("/") == ""
    assert normalize_base_path("share") == "/share"
    assert normalize_base_path("/share/") == "/share"
    assert normalize_base_path("//a//b/") == "/a/b"


def test_missing_required_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("IMMICH_SERVER_URL", "IMMICH_API_KEY", "JWT_SECRET", "INVITATION_CODE"):
        monkeypatch.delenv(name, raising=False)

    with pytest.raises(ValidationError):
        Settings(_env_file=None)  # type: ignore[call-arg]


def test_settings_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("IMMICH_SERVER_URL", "http://immich:2283")
    monkeypatch.setenv("IMMICH_API_KEY", "key")
    monkeypatch.setenv("JWT_SECRET", "secret")
    monkeypatch.setenv("INVITATION_CODE", "code")
    monkeypatch.setenv("BASE_PATH", "/share")
    monkeypatch.setenv("TRUSTED_PROXY_HOPS", "2")

    settings = Settings(_env_file=None)  # type: ignore[call-arg]

    assert settings.immich_server_url == "http://immich:2283"
    assert settings.base_path == "/share"
    assert settings.trusted_proxy_hops == 2
    assert settings.default_language == "sv"
    assert settings.is_production is False
