from __future__ import annotations

import os
from functools import lru_cache

from pydantic import BaseModel, Field

DEFAULT_BASE_URL = "https://api.twilio.com/2010-04-01"
DEFAULT_TIMEOUT = 10.0


def _env(name: str, default: str | None = None):
    return lambda: os.getenv(name, default)


class Settings(BaseModel):
    # Defaults are read from the environment each time a Settings is built,
    # so get_settings.cache_clear() is enough to pick up changes.

    # --- Credentials ---
    twilio_account_sid: str | None = Field(default_factory=_env("TWILIO_ACCOUNT_SID"))
    twilio_auth_token: str | None = Field(default_factory=_env("TWILIO_AUTH_TOKEN"))

    # Default sender for send(); send_with_number() ignores it.
    twilio_from_number: str | None = Field(default_factory=_env("TWILIO_FROM_NUMBER"))

    # SmsUrl attached to purchased numbers, sent verbatim.
    twilio_sms_url: str | None = Field(default_factory=_env("TWILIO_SMS_URL"))

    # --- Transport ---
    twilio_base_url: str = Field(default_factory=_env("TWILIO_BASE_URL", DEFAULT_BASE_URL))
    twilio_timeout: float = Field(
        default_factory=lambda: float(os.getenv("TWILIO_TIMEOUT", str(DEFAULT_TIMEOUT)))
    )

    # --- Number search (US / Local / TX match the query the client always sent) ---
    number_country: str = Field(default_factory=_env("TWILIO_NUMBER_COUNTRY", "US"))
    number_type: str = Field(default_factory=_env("TWILIO_NUMBER_TYPE", "Local"))
    # An empty TWILIO_NUMBER_REGION drops the InRegion filter.
    number_region: str | None = Field(default_factory=_env("TWILIO_NUMBER_REGION", "TX"))


@lru_cache
def get_settings() -> Settings:
    return Settings()
