from __future__ import annotations

from collections.abc import Callable, Iterator

import httpx
import pytest

from twilio_sms.client import Client

ACCOUNT_SID = "AC0123456789abcdef"
AUTH_TOKEN = "secret-token"
FROM_NUMBER = "+15550001111"
API = f"https://api.twilio.com/2010-04-01/Accounts/{ACCOUNT_SID}"

Handler = Callable[[httpx.Request], httpx.Response]


class Recorder:
    """Collects every request the fake transport sees."""

    def __init__(self, handler: Handler) -> None:
        self.handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)


@pytest.fixture
def make_client() -> Iterator[Callable[..., tuple[Client, Recorder]]]:
    """Build a Client whose HTTP traffic goes to `handler` instead of the network."""
    opened: list[httpx.Client] = []

    def _make(handler: Handler, **kwargs: object) -> tuple[Client, Recorder]:
        recorder = Recorder(handler)
        http = httpx.Client(transport=httpx.MockTransport(recorder))
        opened.append(http)
        kwargs.setdefault("from_number", FROM_NUMBER)
        client = Client(ACCOUNT_SID, AUTH_TOKEN, http_client=http, **kwargs)  # type: ignore[arg-type]
        return client, recorder

    yield _make

    for http in opened:
        http.close()
