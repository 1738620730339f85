from __future__ import annotations

from .client import Client, NumberSearch, decode_response
from .errors import (
    ConfigurationError,
    DecodeError,
    NoNumbersAvailable,
    ProviderError,
    TransportError,
    TwilioSmsError,
)
from .models import AvailableNumber, Capabilities, Sms

__all__ = [
    "AvailableNumber",
    "Capabilities",
    "Client",
    "ConfigurationError",
    "DecodeError",
    "NoNumbersAvailable",
    "NumberSearch",
    "ProviderError",
    "Sms",
    "TransportError",
    "TwilioSmsError",
    "decode_response",
]
