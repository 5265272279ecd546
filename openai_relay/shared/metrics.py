#!/usr/bin/env python3
"""
Metrics definitions for OpenAI Relay.
"""

import prometheus_client

RELAY_REQUESTS = prometheus_client.Counter(
    'relay_requests', 'Relayed chat completion requests by outcome', ['outcome']
)
RELAY_TOKENS = prometheus_client.Counter(
    'relay_tokens', 'Tokens reported by the upstream usage object', ['kind']
)
UPSTREAM_LATENCY = prometheus_client.Histogram(
    'relay_upstream_seconds', 'Latency of the outbound chat completion call'
)
