"""
Configuration Tests

Settings loading, provider URL derivation and fail-fast startup.
"""

import pytest
from pydantic import ValidationError

from auth_gateway.config import Settings, get_settings
from auth_gateway.main import create_app

REQUIRED_ENV = {
    "KEYCLOAK_SERVER_URL": "https://auth.example.com/",
    "KEYCLOAK_REALM_NAME": "shop",
    "KEYCLOAK_CLIENT_ID": "shop-gateway",
    "KEYCLOAK_CLIENT_SECRET": "secret",
    "KEYCLOAK_ADMIN_USERNAME": "admin",
    "KEYCLOAK_ADMIN_PASSWORD": "admin-password",
}


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Run without any provider variables and without a .env file"""
    monkeypatch.chdir(tmp_path)
    for name in list(REQUIRED_ENV) + ["PORT", "ALLOWED_ORIGINS", "LOG_LEVEL"]:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


def test_settings_load_from_environment(clean_env):
    for name, value in REQUIRED_ENV.items():
        clean_env.setenv(name, value)

    settings = get_settings()

    assert settings.KEYCLOAK_SERVER_URL == "https://auth.example.com"
    assert settings.PORT == 3001
    assert settings.PROVIDER_TIMEOUT_SECONDS == 10.0


def test_endpoint_urls(clean_env):
    for name, value in REQUIRED_ENV.items():
        clean_env.setenv(name, value)

    settings = get_settings()

    assert settings.token_endpoint == "https://auth.example.com/realms/shop/protocol/openid-connect/token"
    assert settings.userinfo_endpoint == "https://auth.example.com/realms/shop/protocol/openid-connect/userinfo"
    assert settings.admin_token_endpoint == "https://auth.example.com/realms/master/protocol/openid-connect/token"
    assert settings.admin_realm_base_url == "https://auth.example.com/admin/realms/shop"


def test_default_allowed_origins(clean_env):
    for name, value in REQUIRED_ENV.items():
        clean_env.setenv(name, value)

    assert get_settings().allowed_origins_list == [
        "http://localhost:3000",
        "https://gateway-dawn-wildflower-3519.fly.dev",
    ]


def test_custom_port_and_origins(clean_env):
    for name, value in REQUIRED_ENV.items():
        clean_env.setenv(name, value)
    clean_env.setenv("PORT", "8081")
    clean_env.setenv("ALLOWED_ORIGINS", "https://a.example.com, https://b.example.com,")

    settings = get_settings()

    assert settings.PORT == 8081
    assert settings.allowed_origins_list == ["https://a.example.com", "https://b.example.com"]


@pytest.mark.parametrize("missing", sorted(REQUIRED_ENV))
def test_missing_required_setting_fails(clean_env, missing):
    for name, value in REQUIRED_ENV.items():
        if name != missing:
            clean_env.setenv(name, value)

    with pytest.raises(ValidationError) as exc_info:
        Settings()

    assert missing in str(exc_info.value)


def test_invalid_server_url_fails(clean_env):
    for name, value in REQUIRED_ENV.items():
        clean_env.setenv(name, value)
    clean_env.setenv("KEYCLOAK_SERVER_URL", "auth.example.com")

    with pytest.raises(ValidationError):
        Settings()


def test_settings_are_frozen(mock_settings):
    with pytest.raises(ValidationError):
        mock_settings.KEYCLOAK_REALM_NAME = "other"


def test_create_app_fails_fast_without_configuration(clean_env):
    with pytest.raises(ValidationError):
        create_app()
