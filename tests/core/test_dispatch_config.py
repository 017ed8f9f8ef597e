"""Configuration tests: Settings parsing and DispatchConfig derivation."""

import dataclasses

import pytest

from genapi.config import Settings, get_settings
from genapi.core.dispatch_config import DEFAULT_CONFIG, DispatchConfig
from genapi.core.errors import ConfigurationError
from genapi.core.language_strings import Language


def test_default_config():
    assert DEFAULT_CONFIG.auth_header == "Authorization"
    assert DEFAULT_CONFIG.bearer_prefix == "Bearer "
    assert DEFAULT_CONFIG.docs_language is Language.EN
    assert DEFAULT_CONFIG.name_pattern.fullmatch("SignIn")
    assert not DEFAULT_CONFIG.name_pattern.fullmatch("sign_in")


def test_config_is_frozen():
    with pytest.raises(dataclasses.FrozenInstanceError):
        DEFAULT_CONFIG.bearer_prefix = "Token "


def test_from_settings():
    settings = Settings(
        _env_file=None, mask_internal_errors=True, docs_language="zh", docs_indent=4,
    )
    config = DispatchConfig.from_settings(settings)
    assert config.mask_internal_errors is True
    assert config.docs_language is Language.ZH
    assert config.docs_indent == 4


def test_from_settings_rejects_unknown_language():
    with pytest.raises(ConfigurationError):
        DispatchConfig.from_settings(Settings(_env_file=None, docs_language="fr"))


@pytest.mark.parametrize("raw, expected", [
    ("v1", "/v1"), ("/v1/", "/v1"), ("/api/v2", "/api/v2"), ("/", ""), ("", ""),
])
def test_api_prefix_is_normalised(raw, expected):
    assert Settings(_env_file=None, api_prefix=raw).api_prefix == expected


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("GENAPI_DOCS_LANGUAGE", "zh")
    monkeypatch.setenv("GENAPI_PORT", "9090")
    settings = get_settings()
    assert settings.docs_language == "zh"
    assert settings.port == 9090
    assert get_settings() is settings
