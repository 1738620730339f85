from __future__ import annotations

from datetime import UTC, datetime
from email.utils import parsedate_to_datetime
from typing import Any, Final

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

# Sort key for messages whose date_sent is missing or malformed.
ZERO_TIME: Final[datetime] = datetime.min.replace(tzinfo=UTC)


def parse_date(value: str | None) -> datetime:
    """Parse a Twilio date, falling back to ZERO_TIME instead of raising."""
    if not value:
        return ZERO_TIME
    # Twilio sends RFC 2822 dates ("Mon, 16 Aug 2010 03:45:01 +0000"); parsed
    # without strptime so day and month names do not depend on the locale.
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return ZERO_TIME
    if parsed.tzinfo is None:
        # "-0000" means UTC with no known offset.
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


class _Payload(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Sms(_Payload):
    sid: str | None = None
    account_sid: str | None = None
    date_created: str | None = None
    date_updated: str | None = None
    date_sent: str | None = None
    to: str | None = None
    from_: str | None = Field(default=None, alias="from")
    body: str | None = None
    direction: str | None = None
    uri: str | None = None

    status: str | None = None
    num_segments: str | int | None = None
    price: str | None = None
    price_unit: str | None = None
    error_code: int | None = None
    error_message: str | None = None
    messaging_service_sid: str | None = None
    api_version: str | None = None

    @property
    def date_sent_at(self) -> datetime:
        return parse_date(self.date_sent)


class MessageList(_Payload):
    # Twilio omits nothing here in practice, but an absent array is just "no messages".
    messages: list[Sms] = Field(default_factory=list)


class Capabilities(_Payload):
    # Incoming numbers use lowercase keys, the search endpoint uses "SMS"/"MMS".
    voice: bool = False
    sms: bool = Field(default=False, validation_alias=AliasChoices("sms", "SMS"))
    mms: bool = Field(default=False, validation_alias=AliasChoices("mms", "MMS"))


class AvailableNumber(_Payload):
    """
    A number returned by the search endpoint or by a purchase.

    Only the fields we read are typed; everything else Twilio sends is kept
    as-is and reachable through `model_extra`.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    sid: str | None = None
    account_sid: str | None = None
    friendly_name: str | None = None
    phone_number: str | None = None
    voice_url: str | None = None
    voice_method: str | None = None
    sms_url: str | None = None
    sms_method: str | None = None
    date_created: str | None = None
    date_updated: str | None = None
    capabilities: Capabilities = Field(default_factory=Capabilities)
    beta: bool | None = None
    api_version: str | None = None
    uri: str | None = None
    region: str | None = None
    locality: str | None = None
    iso_country: str | None = None
    postal_code: str | None = None


class AvailableNumberList(_Payload):
    available_phone_numbers: list[AvailableNumber] = Field(default_factory=list)


class ProviderFailure(_Payload):
    """Error body Twilio sends in place of the requested resource."""

    message: str
    code: int | None = None
    status: int | None = None
    more_info: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> ProviderFailure | None:
        """Return a failure if `payload` carries a non-empty `message`, else None."""
        message = payload.get("message")
        if not isinstance(message, str) or not message:
            return None
        code = payload.get("code")
        status = payload.get("status")
        more_info = payload.get("more_info")
        return cls(
            message=message,
            code=code if isinstance(code, int) else None,
            status=status if isinstance(status, int) else None,
            more_info=more_info if isinstance(more_info, str) else None,
        )
