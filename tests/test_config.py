import pytest

from signed_cookies.core.config import Settings
from signed_cookies.utils.errors import CookieConfigurationError, ErrorCode


def test_secret_list_is_ordered_and_trimmed():
    settings = Settings(cookie_secret=" current , previous,, oldest ")
    assert settings.cookie_secret_list == ["current", "previous", "oldest"]


def test_empty_secret_gives_empty_list():
    assert Settings(cookie_secret="").cookie_secret_list == []


def test_secure_accepts_auto():
    assert Settings(cookie_secure="AUTO").cookie_secure == "auto"
    assert Settings(cookie_secure="false").cookie_secure is False


def test_parse_options_only_sets_configured_attributes():
    options = Settings(cookie_secret="k").parse_options()
    assert options.domain is None
    assert options.same_site is None
    assert options.path == "/"
    assert options.secure is True
    assert options.warn_on_safe_limit == 4096


def test_parse_options_from_environment(monkeypatch):
    monkeypatch.setenv("COOKIE_DOMAIN", "example.com")
    monkeypatch.setenv("COOKIE_PRIORITY", "high")
    monkeypatch.setenv("COOKIE_WARN_ON_SAFE_LIMIT", "2048")
    options = Settings().parse_options()
    assert options.domain == "example.com"
    assert options.priority == "high"
    assert options.warn_on_safe_limit == 2048


def test_invalid_attribute_setting_is_a_configuration_error():
    with pytest.raises(CookieConfigurationError) as exc_info:
        Settings(cookie_same_site="sometimes").parse_options()
    assert exc_info.value.code == ErrorCode.CONFIGURATION_ERROR
    assert "sometimes" in exc_info.value.details


def test_forwarded_proto_is_not_trusted_by_default(monkeypatch):
    monkeypatch.delenv("COOKIE_TRUST_FORWARDED_PROTO", raising=False)
    assert Settings().cookie_trust_forwarded_proto is False


def test_forwarded_proto_trust_from_environment(monkeypatch):
    monkeypatch.setenv("COOKIE_TRUST_FORWARDED_PROTO", "true")
    assert Settings().cookie_trust_forwarded_proto is True
