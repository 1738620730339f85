from __future__ import annotations

import pytest

from twilio_sms.client import Client
from twilio_sms.config import DEFAULT_BASE_URL, Settings, get_settings
from twilio_sms.errors import ConfigurationError

ENV_VARS = (
    "TWILIO_ACCOUNT_SID",
    "TWILIO_AUTH_TOKEN",
    "TWILIO_FROM_NUMBER",
    "TWILIO_SMS_URL",
    "TWILIO_BASE_URL",
    "TWILIO_TIMEOUT",
    "TWILIO_NUMBER_COUNTRY",
    "TWILIO_NUMBER_TYPE",
    "TWILIO_NUMBER_REGION",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TWILIO_ACCOUNT_SID", "AC1")
    monkeypatch.setenv("TWILIO_AUTH_TOKEN", "tok")
    monkeypatch.setenv("TWILIO_FROM_NUMBER", "+15550001111")
    monkeypatch.setenv("TWILIO_TIMEOUT", "2.5")
    monkeypatch.setenv("TWILIO_NUMBER_REGION", "CA")

    settings = get_settings()

    assert settings.twilio_account_sid == "AC1"
    assert settings.twilio_auth_token == "tok"
    assert settings.twilio_from_number == "+15550001111"
    assert settings.twilio_timeout == 2.5
    assert settings.number_region == "CA"
    assert settings.twilio_base_url == DEFAULT_BASE_URL


def test_explicit_values_win_over_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TWILIO_FROM_NUMBER", "+15550001111")

    settings = Settings(twilio_from_number="+15552223333")

    assert settings.twilio_from_number == "+15552223333"


def test_from_settings_builds_configured_client() -> None:
    settings = Settings(
        twilio_account_sid="AC1",
        twilio_auth_token="tok",
        twilio_from_number="+15550001111",
        twilio_sms_url="https://example.com/sms",
        number_country="CA",
        number_type="Mobile",
        number_region="",
    )

    with Client.from_settings(settings) as client:
        assert client.account_sid == "AC1"
        assert client.from_number == "+15550001111"
        assert client.sms_url == "https://example.com/sms"
        assert client.number_search.country == "CA"
        assert client.number_search.number_type == "Mobile"
        assert client.number_search.in_region is None


def test_from_settings_requires_credentials() -> None:
    with pytest.raises(ConfigurationError, match="TWILIO_ACCOUNT_SID"):
        Client.from_settings(Settings(twilio_account_sid=None, twilio_auth_token=None))


def test_from_settings_keyword_overrides_win() -> None:
    settings = Settings(
        twilio_account_sid="AC1",
        twilio_auth_token="tok",
        twilio_from_number="+15550001111",
        twilio_sms_url="https://example.com/sms",
    )

    with Client.from_settings(
        settings,
        from_number="+15552223333",
        sms_url="https://example.com/other",
        base_url="https://api.example.test/2010-04-01",
        timeout=1.0,
    ) as client:
        assert client.from_number == "+15552223333"
        assert client.sms_url == "https://example.com/other"
        assert client.number_search.country == settings.number_country
