"""Fixtures for the Supabase binding: an httpx mock transport that records requests."""

import json
from collections.abc import Callable

import httpx
import pytest

from infrastructure.supabase.client import SupabaseClient

REST_URL = "https://project.supabase.co/rest/v1"
STORAGE_URL = "https://project.supabase.co/storage/v1"


class RecordingTransport:
    """Answers every request with the next queued response and keeps the request."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.responses: list[httpx.Response | Exception] = []

    def queue(self, body: object = None, status_code: int = 200) -> None:
        if body is None:
            self.responses.append(httpx.Response(status_code))
        else:
            self.responses.append(httpx.Response(status_code, json=body))

    def queue_error(self, exc: Exception) -> None:
        self.responses.append(exc)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.responses.pop(0) if self.responses else httpx.Response(200, json=[])
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> object:
        return json.loads(self.last.content)


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def token() -> dict[str, str | None]:
    return {"value": None}


@pytest.fixture
def make_client(transport: RecordingTransport, token: dict[str, str | None]) -> Callable[[], SupabaseClient]:
    def _make() -> SupabaseClient:
        return SupabaseClient(
            REST_URL,
            "anon-key",
            access_token=lambda: token["value"],
            transport=httpx.MockTransport(transport.handler),
        )

    return _make


@pytest.fixture
async def client(make_client: Callable[[], SupabaseClient]):
    client = make_client()
    yield client
    await client.aclose()
