#!/usr/bin/env python3
"""
Application factory for OpenAI Relay.
"""

from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI

from openai_relay.shared.config import AppConfig, logger
from openai_relay.shared.middleware import RelayContextMiddleware
from openai_relay.services.key_resolver import KeyResolver
from openai_relay.features.health_check.endpoints import router as health_check_router
from openai_relay.features.metrics.endpoints import router as metrics_router
from openai_relay.features.config_status.endpoints import router as config_status_router
from openai_relay.features.config_test.endpoints import router as config_test_router
from openai_relay.features.relay_chat.endpoints import router as relay_chat_router


def create_app(config: AppConfig, http_client: Optional[httpx.AsyncClient] = None) -> FastAPI:
    """
    Builds the relay application around an already loaded configuration.

    When ``http_client`` is given it is used for every outbound call instead of
    a client built from the config; either way the lifespan closes it.
    """

    @asynccontextmanager
    async def lifespan(app_: FastAPI):
        """Manage application lifespan resources."""
        if http_client is not None:
            app_.state.http_client = http_client
        else:
            client_kwargs = {"timeout": config.openai.timeout}
            if config.requestProxy.enabled and config.requestProxy.url:
                client_kwargs["proxy"] = config.requestProxy.url
                logger.info("Using proxy for httpx client: %s", config.requestProxy.url)
            app_.state.http_client = httpx.AsyncClient(**client_kwargs)

        logger.info("Application startup complete")
        yield
        await app_.state.http_client.aclose()
        logger.info("Application shutdown complete")

    app = FastAPI(
        title="OpenAI Relay",
        description="Relays chat completion requests to OpenAI with a server-held API key",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.key_resolver = KeyResolver.from_config(config.openai)

    # Relay route is a catch-all and must be registered last
    app.include_router(health_check_router, tags=["Monitoring"])
    app.include_router(metrics_router)
    app.include_router(config_status_router)
    app.include_router(config_test_router)
    app.include_router(relay_chat_router)

    app.add_middleware(RelayContextMiddleware)
    return app
