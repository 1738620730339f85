from __future__ import annotations


class TwilioSmsError(Exception):
    """Base class for every error raised by twilio_sms."""


class ConfigurationError(TwilioSmsError):
    """A setting the operation needs was not configured."""


class TransportError(TwilioSmsError):
    """The request could not be sent or the response could not be read."""


class DecodeError(TwilioSmsError):
    """The response body was not JSON of the expected shape."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ProviderError(TwilioSmsError):
    """
    The response decoded fine but Twilio reported an error.

    str(err) is exactly the provider's `message` text.
    """

    def __init__(
        self,
        message: str,
        *,
        code: int | None = None,
        status_code: int | None = None,
        more_info: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.more_info = more_info


class NoNumbersAvailable(TwilioSmsError):
    def __init__(self, message: str = "No numbers available") -> None:
        super().__init__(message)
