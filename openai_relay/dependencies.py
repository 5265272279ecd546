#!/usr/bin/env python3
"""
Dependency provider functions for the application.
"""

from fastapi import Depends, Request
import httpx

from openai_relay.shared.config import AppConfig
from openai_relay.services.key_resolver import KeyResolver
from openai_relay.features.relay_chat.client import OpenAIClient

def get_app_config(request: Request) -> AppConfig:
    """Returns the configuration the application was created with."""
    return request.app.state.config

def get_http_client(request: Request) -> httpx.AsyncClient:
    """Returns the shared httpx.AsyncClient instance."""
    return request.app.state.http_client

def get_key_resolver(request: Request) -> KeyResolver:
    """Returns the shared KeyResolver instance."""
    return request.app.state.key_resolver

def get_openai_client(
    http_client: httpx.AsyncClient = Depends(get_http_client),
    config: AppConfig = Depends(get_app_config),
) -> OpenAIClient:
    """Builds an OpenAIClient on top of the shared HTTP client."""
    return OpenAIClient(http_client=http_client, base_url=config.openai.base_url)
