"""Tests for connection settings validation."""

from mediaportal_tv.config import Settings


def test_defaults_are_valid():
    result = Settings(api_host_name="mediaportal.local").validate_connection()

    assert result.is_valid is True
    assert result.summary == ""


def test_base_url():
    settings = Settings(api_host_name="tvserver", api_port_number=4000)

    assert settings.base_url == "http://tvserver:4000/MPExtended/"


def test_missing_host_and_bad_port():
    result = Settings(api_host_name=" ", api_port_number=70000).validate_connection()

    assert result.is_valid is False
    assert "HostName" in result.summary
    assert "Port Number" in result.summary


def test_authentication_needs_credentials():
    result = Settings(
        api_host_name="tvserver", requires_authentication=True, user_name="admin"
    ).validate_connection()

    assert result.is_valid is False
    assert "Password" in result.summary
    assert "UserName" not in result.summary


def test_env_prefix(monkeypatch):
    monkeypatch.setenv("MEDIAPORTAL_TV_ENABLE_RECORDING_IMPORT", "true")

    assert Settings().enable_recording_import is True
