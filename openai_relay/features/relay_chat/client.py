# openai_relay/features/relay_chat/client.py
import time
import httpx
from typing import Dict, Any, Optional, Tuple

from openai_relay.shared.config import logger
from openai_relay.shared.errors import UpstreamError, UnknownRelayError
from openai_relay.shared.metrics import UPSTREAM_LATENCY
from openai_relay.shared.utils import mask_key

class OpenAIClient:
    """Sends single requests to the OpenAI API. No retries."""

    def __init__(self, http_client: httpx.AsyncClient, base_url: str):
        self._client = http_client
        self._base_url = base_url.rstrip("/")

    async def create_chat_completion(
        self, request_data: Dict[str, Any], api_key: str
    ) -> Dict[str, Any]:
        """POSTs the request and returns the decoded completion body."""
        logger.info(
            "Relaying chat completion: using key %s for model '%s'.",
            mask_key(api_key), request_data.get("model")
        )
        start_time = time.time()
        try:
            return await self._send("POST", "/chat/completions", api_key, json=request_data)
        finally:
            UPSTREAM_LATENCY.observe(time.time() - start_time)

    async def list_models(self, api_key: str) -> Dict[str, Any]:
        """GETs the model list; used to check that a key is accepted."""
        logger.info("Listing models with key %s.", mask_key(api_key))
        return await self._send("GET", "/models", api_key)

    async def _send(self, method: str, path: str, api_key: str, **kwargs) -> Dict[str, Any]:
        headers = {"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"}
        try:
            response = await self._client.request(
                method, f"{self._base_url}{path}", headers=headers, **kwargs
            )
        except httpx.RequestError as e:
            logger.error("Request error occurred: %s", e)
            raise UpstreamError(f"Request to OpenAI API failed: {e}") from e

        if not response.is_success:
            logger.error("HTTP error from OpenAI: %s - %s", response.status_code, response.text)
            message, code = self._error_details(response)
            raise UpstreamError(message, status_code=response.status_code, code=code)

        try:
            return response.json()
        except ValueError as e:
            logger.error("OpenAI returned a non-JSON body with status %s", response.status_code)
            raise UnknownRelayError() from e

    @staticmethod
    def _error_details(response: httpx.Response) -> Tuple[str, Optional[str]]:
        """Pulls error.message and error.code out of an upstream error body."""
        try:
            data = response.json()
        except ValueError as e:
            raise UnknownRelayError() from e

        error = data.get("error") if isinstance(data, dict) else None
        if not isinstance(error, dict):
            return UpstreamError.default_message, None

        message = error.get("message")
        code = error.get("code")
        return (
            message if isinstance(message, str) and message else UpstreamError.default_message,
            code if isinstance(code, str) else None,
        )
