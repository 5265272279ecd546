"""
KeyResolver service for OpenAI Relay.
Hands out the upstream credential and reports its configuration state.
"""

from typing import Optional
from pydantic import BaseModel

from openai_relay.shared.config import OpenAIConfig
from openai_relay.shared.errors import ConfigurationError
from openai_relay.shared.utils import mask_key


class KeyResolution(BaseModel):
    key: Optional[str] = None
    source: str
    is_configured: bool
    masked_key: Optional[str] = None


class KeyResolver:
    """Resolves the OpenAI API key from the injected configuration."""
    def __init__(self, api_key: Optional[str], source: str = "unset"):
        self._api_key = api_key or None
        self._source = source

    @classmethod
    def from_config(cls, openai_config: OpenAIConfig) -> "KeyResolver":
        return cls(api_key=openai_config.api_key, source=openai_config.api_key_source)

    def resolve(self) -> KeyResolution:
        if self._api_key:
            return KeyResolution(
                key=self._api_key,
                source=self._source,
                is_configured=True,
                masked_key=mask_key(self._api_key),
            )
        return KeyResolution(source=self._source, is_configured=False)

    def is_configured(self) -> bool:
        return self.resolve().is_configured

    def require_key(self) -> str:
        """Returns the API key, raising ConfigurationError when none is set."""
        resolution = self.resolve()
        if not resolution.is_configured:
            raise ConfigurationError()
        return resolution.key
