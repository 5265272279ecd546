from fastapi import Depends
from openai_relay.dependencies import get_key_resolver
from openai_relay.services.key_resolver import KeyResolver
from .query import ConfigStatusResponse, ProviderStatus

class ConfigStatusHandler:
    """Reports whether the upstream credential is configured, without exposing it."""

    def __init__(self, key_resolver: KeyResolver = Depends(get_key_resolver)):
        self._key_resolver = key_resolver

    def handle(self) -> ConfigStatusResponse:
        resolution = self._key_resolver.resolve()
        return ConfigStatusResponse(
            openai=ProviderStatus(
                is_configured=resolution.is_configured,
                source=resolution.source,
                masked_key=resolution.masked_key,
            )
        )
