from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, TypeVar

import httpx
from pydantic import ValidationError

from .config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, Settings, get_settings
from .errors import (
    ConfigurationError,
    DecodeError,
    NoNumbersAvailable,
    ProviderError,
    TransportError,
)
from .models import (
    AvailableNumber,
    AvailableNumberList,
    MessageList,
    ProviderFailure,
    Sms,
)

logger = logging.getLogger(__name__)

PayloadT = TypeVar("PayloadT", MessageList, AvailableNumberList, AvailableNumber, Sms)


@dataclass(frozen=True)
class NumberSearch:
    """
    Filters for the available-numbers search.

    The defaults reproduce the query the client always used to send:
    US local numbers in Texas with SMS enabled.
    """

    country: str = "US"
    number_type: str = "Local"
    in_region: str | None = "TX"
    sms_enabled: bool | None = True
    area_code: str | None = None
    contains: str | None = None
    voice_enabled: bool | None = None
    mms_enabled: bool | None = None

    def params(self) -> dict[str, str]:
        out: dict[str, str] = {}
        if self.area_code:
            out["AreaCode"] = self.area_code
        if self.contains:
            out["Contains"] = self.contains
        if self.in_region:
            out["InRegion"] = self.in_region
        for key, flag in (
            ("SmsEnabled", self.sms_enabled),
            ("VoiceEnabled", self.voice_enabled),
            ("MmsEnabled", self.mms_enabled),
        ):
            if flag is not None:
                out[key] = "true" if flag else "false"
        return out


class Client:
    """
    Thin synchronous wrapper around the Twilio Messages and phone-number APIs.

    Instances hold no mutable state after construction, so one client can be
    shared between threads.
    """

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        *,
        from_number: str | None = None,
        sms_url: str | None = None,
        number_search: NumberSearch | None = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._account_sid = account_sid
        self._from_number = from_number
        self._sms_url = sms_url
        self._number_search = number_search or NumberSearch()
        self._account_url = f"{base_url.rstrip('/')}/Accounts/{account_sid}"
        self._auth = httpx.BasicAuth(account_sid, auth_token)
        self._owns_http = http_client is None
        self._http = http_client if http_client is not None else httpx.Client(timeout=timeout)

    @classmethod
    def from_settings(cls, settings: Settings | None = None, **kwargs: Any) -> Client:
        settings = settings or get_settings()
        if not settings.twilio_account_sid or not settings.twilio_auth_token:
            raise ConfigurationError(
                "Twilio credentials are not configured (TWILIO_ACCOUNT_SID / TWILIO_AUTH_TOKEN)"
            )
        kwargs.setdefault("from_number", settings.twilio_from_number)
        kwargs.setdefault("sms_url", settings.twilio_sms_url)
        kwargs.setdefault("base_url", settings.twilio_base_url)
        kwargs.setdefault("timeout", settings.twilio_timeout)
        kwargs.setdefault(
            "number_search",
            NumberSearch(
                country=settings.number_country,
                number_type=settings.number_type,
                in_region=settings.number_region or None,
            ),
        )
        return cls(
            settings.twilio_account_sid,
            settings.twilio_auth_token,
            **kwargs,
        )

    @property
    def account_sid(self) -> str:
        return self._account_sid

    @property
    def from_number(self) -> str | None:
        return self._from_number

    @property
    def sms_url(self) -> str | None:
        return self._sms_url

    @property
    def number_search(self) -> NumberSearch:
        return self._number_search

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> Client:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # --- Messages ---

    def send(self, to: str, body: str) -> Sms:
        """Send an SMS from the configured default number."""
        if not self._from_number:
            raise ConfigurationError("No default from number configured (TWILIO_FROM_NUMBER)")
        return self.send_with_number(self._from_number, to, body)

    def send_with_number(self, from_number: str, to: str, body: str) -> Sms:
        """Send an SMS from an explicit number, leaving the client untouched."""
        # Field order on the wire is To, From, Body.
        form = {"To": to, "From": from_number, "Body": body}
        return self._request("POST", "/Messages.json", Sms, data=form)

    def list_messages(self, from_number: str | None = None, to: str | None = None) -> list[Sms]:
        """Messages sent from `from_number` to `to`; empty filters are left out."""
        params: dict[str, str] = {}
        if to:
            params["To"] = to
        if from_number:
            params["From"] = from_number
        listing = self._request("GET", "/Messages.json", MessageList, params=params)
        return list(listing.messages)

    def get_thread(self, number_a: str, number_b: str) -> list[Sms]:
        """
        Full conversation between two numbers, most recently sent first.

        Twilio can only filter one direction at a time, so both directions are
        fetched and merged. Messages with a missing or malformed date_sent sort last.
        """
        forward = self.list_messages(from_number=number_a, to=number_b)
        reverse = self.list_messages(from_number=number_b, to=number_a)
        return sorted(forward + reverse, key=lambda sms: sms.date_sent_at, reverse=True)

    # --- Phone numbers ---

    def search_numbers(self, search: NumberSearch | None = None) -> list[AvailableNumber]:
        search = search or self._number_search
        path = f"/AvailablePhoneNumbers/{search.country}/{search.number_type}.json"
        listing = self._request("GET", path, AvailableNumberList, params=search.params())
        return list(listing.available_phone_numbers)

    def purchase_number(
        self,
        phone_number: str,
        *,
        sms_url: str | None = None,
        number_type: str | None = None,
    ) -> AvailableNumber:
        form = {"PhoneNumber": phone_number}
        sms_url = sms_url or self._sms_url
        if sms_url:
            form["SmsUrl"] = sms_url
        number_type = number_type or self._number_search.number_type
        path = f"/IncomingPhoneNumbers/{number_type}.json"
        return self._request("POST", path, AvailableNumber, data=form)

    def acquire_number(self, search: NumberSearch | None = None) -> str:
        """
        Search for a number and buy the first candidate.

        Returns the purchased phone number. Raises NoNumbersAvailable without
        attempting a purchase when the search comes back empty.
        """
        search = search or self._number_search
        candidates = self.search_numbers(search)
        if not candidates or not candidates[0].phone_number:
            raise NoNumbersAvailable()

        purchased = self.purchase_number(
            candidates[0].phone_number, number_type=search.number_type
        )
        if not purchased.phone_number:
            raise DecodeError("Twilio purchase response did not include a phone number")
        return purchased.phone_number

    # --- Plumbing ---

    def _request(
        self,
        method: str,
        path: str,
        model: type[PayloadT],
        *,
        params: dict[str, str] | None = None,
        data: dict[str, str] | None = None,
    ) -> PayloadT:
        url = self._account_url + path
        logger.debug("twilio request %s %s params=%s", method, path, params or {})
        try:
            response = self._http.request(method, url, params=params, data=data, auth=self._auth)
        except httpx.TransportError as exc:
            raise TransportError(f"Twilio request failed: {exc}") from exc

        logger.debug("twilio response %s %s -> %s", method, path, response.status_code)
        return decode_response(response, model)


def decode_response(response: httpx.Response, model: type[PayloadT]) -> PayloadT:
    """
    Decode a Twilio response exactly once.

    The body is either the requested resource or an error object carrying a
    `message`; the latter becomes ProviderError.
    """
    status = response.status_code
    try:
        payload = json.loads(response.content)
    except ValueError as exc:
        raise DecodeError(f"Twilio returned invalid JSON (HTTP {status})", status) from exc

    if not isinstance(payload, dict):
        raise DecodeError(
            f"Twilio returned {type(payload).__name__}, expected an object (HTTP {status})",
            status,
        )

    # Only a non-empty `message` marks an error; the HTTP status is not consulted.
    failure = ProviderFailure.from_payload(payload)
    if failure is not None:
        logger.debug("twilio error %s: %s", failure.code, failure.message)
        raise ProviderError(
            failure.message,
            code=failure.code,
            status_code=status,
            more_info=failure.more_info,
        )

    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise DecodeError(f"Unexpected Twilio response shape: {exc}", status) from exc
