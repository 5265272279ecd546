# openai_relay/features/relay_chat/handler.py
import json
from typing import Any, Dict, Optional

from fastapi import Depends
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError

from openai_relay.shared.config import logger
from openai_relay.shared.errors import (
    ContentMissingError, MessageValidationError, RelayError, UnknownRelayError, UpstreamError,
)
from openai_relay.shared.metrics import RELAY_REQUESTS, RELAY_TOKENS
from openai_relay.dependencies import get_key_resolver, get_openai_client
from openai_relay.services.key_resolver import KeyResolver

from .command import RelayFailure, RelayRequest, RelaySuccess
from .client import OpenAIClient

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization, X-Client-Info, Apikey",
}

def parse_relay_request(body: bytes) -> RelayRequest:
    """Decodes the inbound body and applies the request defaults."""
    try:
        payload = json.loads(body)
    except ValueError as e:
        raise MessageValidationError("Invalid JSON body") from e

    if not isinstance(payload, dict):
        payload = {}

    messages = payload.get("messages")
    if not isinstance(messages, list) or not messages:
        raise MessageValidationError("messages array is required")

    fields = {"messages": messages}
    for name in ("model", "temperature", "max_tokens"):
        if payload.get(name) is not None:
            fields[name] = payload[name]

    try:
        return RelayRequest(**fields)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise MessageValidationError(f"Invalid request field '{location}': {first['msg']}") from e

def extract_success(completion: Any) -> RelaySuccess:
    """Builds the success envelope from choices[0].message.content."""
    if not isinstance(completion, dict):
        raise ContentMissingError()

    content = None
    choices = completion.get("choices")
    if isinstance(choices, list) and choices and isinstance(choices[0], dict):
        message = choices[0].get("message")
        if isinstance(message, dict):
            content = message.get("content")
    if not isinstance(content, str) or not content:
        raise ContentMissingError()

    fields: Dict[str, Any] = {"success": True, "content": content}
    for name in ("model", "usage"):
        if name in completion:
            fields[name] = completion[name]
    return RelaySuccess(**fields)

class RelayHandler:
    def __init__(
        self,
        openai_client: OpenAIClient = Depends(get_openai_client),
        key_resolver: KeyResolver = Depends(get_key_resolver),
    ):
        self._client = openai_client
        self._key_resolver = key_resolver
        self.outcome: Optional[str] = None

    async def handle(self, method: str, body: bytes) -> Response:
        if method.upper() == "OPTIONS":
            self.outcome = "preflight"
            return Response(status_code=200, headers=CORS_HEADERS)

        try:
            result = await self.relay(body)
        except UpstreamError as e:
            logger.warning(
                "Relay failed (%s, upstream status %s): %s", e.kind, e.status_code, e.message
            )
            return self._failure(e)
        except RelayError as e:
            logger.warning("Relay failed (%s): %s", e.kind, e.message)
            return self._failure(e)
        except Exception as e:
            logger.exception("Unexpected error while relaying chat completion")
            return self._failure(UnknownRelayError(str(e) or None))

        self.outcome = "success"
        RELAY_REQUESTS.labels(outcome=self.outcome).inc()
        return JSONResponse(
            content=result.model_dump(exclude_unset=True),
            headers=CORS_HEADERS,
        )

    async def relay(self, body: bytes) -> RelaySuccess:
        api_key = self._key_resolver.require_key()
        request = parse_relay_request(body)
        completion = await self._client.create_chat_completion(request.upstream_payload(), api_key)
        result = extract_success(completion)
        self._count_tokens(result.usage)
        return result

    def _failure(self, error: RelayError) -> JSONResponse:
        self.outcome = error.kind
        RELAY_REQUESTS.labels(outcome=error.kind).inc()
        return JSONResponse(
            content=RelayFailure(error=error.message).model_dump(),
            status_code=400,
            headers=CORS_HEADERS,
        )

    @staticmethod
    def _count_tokens(usage: Any) -> None:
        if not isinstance(usage, dict):
            return
        for kind in ("prompt", "completion"):
            tokens = usage.get(f"{kind}_tokens")
            if isinstance(tokens, int) and tokens > 0:
                RELAY_TOKENS.labels(kind=kind).inc(tokens)
