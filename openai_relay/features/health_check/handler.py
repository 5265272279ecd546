import httpx
from fastapi import Depends
from openai_relay.dependencies import get_app_config, get_http_client, get_key_resolver
from openai_relay.services.key_resolver import KeyResolver
from openai_relay.shared.config import AppConfig, logger
from .query import HealthCheckResponse

class HealthCheckHandler:
    def __init__(
        self,
        http_client: httpx.AsyncClient = Depends(get_http_client),
        key_resolver: KeyResolver = Depends(get_key_resolver),
        config: AppConfig = Depends(get_app_config),
    ):
        self._http_client = http_client
        self._key_resolver = key_resolver
        self._base_url = config.openai.base_url.rstrip("/")

    async def handle(self) -> HealthCheckResponse:
        services_status = {
            "credential": "configured" if self._key_resolver.is_configured() else "missing"
        }

        # Check OpenAI API reachability; an auth error still means it is up
        try:
            health_resp = await self._http_client.head(
                f"{self._base_url}/models",
                timeout=5.0
            )
            services_status["openai_api"] = "up" if health_resp.status_code < 500 else "down"
        except httpx.HTTPError as e:
            logger.error("OpenAI API health check failed: %s", str(e))
            services_status["openai_api"] = "down"

        healthy = services_status["credential"] == "configured" and services_status["openai_api"] == "up"
        return HealthCheckResponse(status="ok" if healthy else "error", services=services_status)
