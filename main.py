#!/usr/bin/env python3
"""
OpenAI Relay
Relays chat completion requests to OpenAI, keeping the API key on the server.
"""

import uvicorn

from openai_relay.app import create_app
from openai_relay.shared.config import load_config, setup_logging

config = load_config()
logger = setup_logging(config)

app = create_app(config)

if __name__ == "__main__":
    if not config.openai.api_key:
        logger.warning("No OpenAI API key found in config.yml or OPENAI_API_KEY; relay requests will fail.")

    host = config.server.host
    port = config.server.port

    logger.warning("Starting OpenAI Relay on %s:%s", host, port)
    logger.warning("Metrics: http://%s:%s/metrics", host, port)

    log_config = uvicorn.config.LOGGING_CONFIG
    http_log_level = config.server.http_log_level.upper()
    log_config["loggers"]["uvicorn.access"]["level"] = http_log_level

    uvicorn.run(
        app,
        host=host,
        port=port,
        log_config=log_config,
        timeout_graceful_shutdown=30,
        server_header=False
    )
