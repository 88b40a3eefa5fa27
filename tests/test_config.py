# tests/test_config.py
import pytest
from pydantic import ValidationError

from core.config import AppSettings, ClientConfig, Environment, write_user_env_vars
from core.domain.language import Language


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("API_BASE_URL", "https://api.example.com///")
    monkeypatch.setenv("API_TIMEOUT_SECONDS", "30")
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.setenv("API_LANGUAGE", "en")

    settings = AppSettings()

    assert settings.api_base_url == "https://api.example.com"
    assert settings.timeout_seconds == 30
    assert settings.environment is Environment.PRODUCTION
    assert settings.language is Language.ENGLISH


def test_settings_defaults():
    settings = AppSettings()

    assert settings.api_base_url == ""
    assert settings.timeout_seconds == 15
    assert settings.environment is Environment.DEVELOPMENT
    assert settings.language is Language.PORTUGUESE


def test_settings_read_dotenv(tmp_path):
    (tmp_path / ".env").write_text("API_BASE_URL=https://dotenv.example.com/\n", encoding="utf-8")

    assert AppSettings().api_base_url == "https://dotenv.example.com"


def test_invalid_timeout_rejected(monkeypatch):
    monkeypatch.setenv("API_TIMEOUT_SECONDS", "0")

    with pytest.raises(ValidationError):
        AppSettings()


def test_client_config_from_settings():
    settings = AppSettings(api_base_url="https://api.example.com/", environment="test")

    config = ClientConfig.from_settings(settings)

    assert config.base_url == "https://api.example.com"
    assert config.timeout_seconds == 15
    assert config.environment is Environment.TEST
    assert not config.is_production
    assert config.default_headers["User-Agent"] == "crm-core/0.1"


def test_client_config_is_immutable():
    config = ClientConfig(base_url="https://api.example.com")

    with pytest.raises(ValidationError):
        config.base_url = "https://other.example.com"


def test_client_config_strips_trailing_slashes():
    assert ClientConfig(base_url=" https://api.example.com/v1// ").base_url == "https://api.example.com/v1"


def test_write_user_env_vars_merges(tmp_path):
    env_path = tmp_path / "cfg" / ".env"
    env_path.parent.mkdir()
    env_path.write_text("# old\nAPI_BASE_URL=https://old\nAPP_ENV=test\n", encoding="utf-8")

    write_user_env_vars({"API_BASE_URL": "https://new", "API_TIMEOUT_SECONDS": "20"}, env_path=env_path)

    lines = env_path.read_text(encoding="utf-8").splitlines()
    assert lines[0].startswith("#")
    assert lines[1:] == [
        "API_BASE_URL=https://new",
        "API_TIMEOUT_SECONDS=20",
        "APP_ENV=test",
    ]
