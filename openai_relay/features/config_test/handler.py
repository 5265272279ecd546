from fastapi import Depends

from openai_relay.dependencies import get_key_resolver, get_openai_client
from openai_relay.features.relay_chat.client import OpenAIClient
from openai_relay.services.key_resolver import KeyResolver
from openai_relay.shared.config import logger
from openai_relay.shared.errors import ConfigurationError, RelayError, UpstreamError
from .command import ConfigTestResponse

INVALID_KEY_CODE = "invalid_api_key"

class ConfigTestHandler:
    """Checks the configured key by listing models with it."""

    def __init__(
        self,
        openai_client: OpenAIClient = Depends(get_openai_client),
        key_resolver: KeyResolver = Depends(get_key_resolver),
    ):
        self._client = openai_client
        self._key_resolver = key_resolver

    async def handle(self) -> ConfigTestResponse:
        resolution = self._key_resolver.resolve()
        if not resolution.is_configured:
            return ConfigTestResponse(
                success=False,
                configured=False,
                error=ConfigurationError.default_message,
            )

        try:
            await self._client.list_models(resolution.key)
        except RelayError as e:
            logger.error("OpenAI key test failed: %s", e.message)
            if isinstance(e, UpstreamError) and (e.status_code == 401 or e.code == INVALID_KEY_CODE):
                return ConfigTestResponse(
                    success=False, configured=True, error="Invalid API key", error_type="auth"
                )
            return ConfigTestResponse(
                success=False,
                configured=True,
                error=e.message or "Connection test failed",
                error_type="connection",
            )

        return ConfigTestResponse(
            success=True,
            configured=True,
            source=resolution.source,
            masked_key=resolution.masked_key,
            message="OpenAI API key is valid and working",
        )
