#!/usr/bin/env python3
"""
Configuration module for OpenAI Relay.
Loads settings from a YAML file and initializes logging with Pydantic validation.
"""

import os
import sys
import logging
from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

CONFIG_FILE = os.environ.get("RELAY_CONFIG", "config.yml")

logger = logging.getLogger("openai-relay")


class ServerConfig(BaseModel):
    model_config = ConfigDict(extra="allow")

    host: str = "0.0.0.0"
    port: int = 5555
    log_level: str = "INFO"
    http_log_level: str = "INFO"


class OpenAIConfig(BaseModel):
    model_config = ConfigDict(extra="allow")

    api_key: Optional[str] = None
    api_key_source: str = "unset"
    base_url: str = "https://api.openai.com/v1"
    timeout: float = 600.0


class RequestProxyConfig(BaseModel):
    model_config = ConfigDict(extra="allow")

    enabled: bool = False
    url: Optional[str] = None


class AppConfig(BaseModel):
    server: ServerConfig = Field(default_factory=ServerConfig)
    openai: OpenAIConfig = Field(default_factory=OpenAIConfig)
    requestProxy: RequestProxyConfig = Field(default_factory=RequestProxyConfig)


def load_config(path: str = CONFIG_FILE) -> AppConfig:
    """Load and validate configuration with Pydantic models."""
    try:
        try:
            with open(path, encoding="utf-8") as file:
                config_data = yaml.safe_load(file) or {}
        except FileNotFoundError:
            config_data = {}

        openai_data = config_data.setdefault("openai", {}) or {}
        config_data["openai"] = openai_data
        if openai_data.get("api_key"):
            openai_data["api_key_source"] = "config"

        # Environment variable override for the upstream credential
        if os.environ.get("OPENAI_API_KEY"):
            openai_data["api_key"] = os.environ["OPENAI_API_KEY"]
            openai_data["api_key_source"] = "environment"

        return AppConfig(**config_data)
    except (yaml.YAMLError, ValidationError) as e:
        print(f"Error in configuration: {e}")
        sys.exit(1)


def setup_logging(config_: AppConfig) -> logging.Logger:
    """Configure logging based on validated configuration."""
    log_level = config_.server.log_level
    log_level_int = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level_int,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    logger.setLevel(log_level_int)
    logger.info("Logging level set to %s", log_level)
    return logger
