import json
from typing import Any, List, Optional

import httpx
import pytest

from openai_relay.features.relay_chat.client import OpenAIClient
from openai_relay.features.relay_chat.handler import RelayHandler
from openai_relay.services.key_resolver import KeyResolver

API_KEY = "sk-test-abcdefghijklmnop1234"
BASE_URL = "https://api.openai.test/v1"

HELLO_COMPLETION = {
    "choices": [{"message": {"content": "hello"}}],
    "model": "gpt-4o-mini",
    "usage": {"total_tokens": 5},
}


class FakeUpstream:
    """Stands in for the OpenAI API and records every request it receives."""

    def __init__(
        self,
        status_code: int = 200,
        json_body: Any = None,
        content: Optional[bytes] = None,
        exc: Optional[Exception] = None,
    ):
        self.status_code = status_code
        self.json_body = HELLO_COMPLETION if json_body is None else json_body
        self.content = content
        self.exc = exc
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, json=self.json_body)

    @property
    def last_body(self) -> dict:
        return json.loads(self.requests[-1].content)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def make_handler():
    def _make(upstream: FakeUpstream, api_key: Optional[str] = API_KEY) -> RelayHandler:
        return RelayHandler(
            openai_client=OpenAIClient(http_client=upstream.client(), base_url=BASE_URL),
            key_resolver=KeyResolver(api_key, source="environment"),
        )
    return _make


def body(payload: Any) -> bytes:
    return json.dumps(payload).encode("utf-8")
