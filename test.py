#!/usr/bin/env python3
"""
Smoke test script for a running OpenAI Relay.
Exercises every endpoint using configuration from config.yml.
"""

import asyncio
import os
from typing import Dict, Any

import httpx
import yaml

MODEL = "gpt-4o-mini"

def load_config() -> Dict[str, Any]:
    """Load configuration from config.yml"""
    try:
        with open(os.environ.get("RELAY_CONFIG", "config.yml"), encoding="utf-8") as file:
            return yaml.safe_load(file) or {}
    except FileNotFoundError:
        return {}

async def test_feature(feature_name: str, test_func: callable):
    """Run a feature test with formatted output"""
    print(f"\n=== Testing {feature_name} ===")
    try:
        await test_func()
        print(f"✅ {feature_name} test passed")
    except Exception as e:
        print(f"❌ {feature_name} test failed: {str(e)}")
        raise

async def test_preflight(client: httpx.AsyncClient, base_url: str):
    """Test the CORS preflight short-circuit"""
    resp = await client.options(f"{base_url}/")
    assert resp.status_code == 200, f"Expected 200, got {resp.status_code}"
    assert resp.headers.get("access-control-allow-origin") == "*"
    assert resp.content == b"", "Expected empty preflight body"

async def test_relay_chat(client: httpx.AsyncClient, base_url: str):
    """Test the Relay Chat feature"""
    request_data = {
        "model": MODEL,
        "messages": [{"role": "user", "content": "Hello!"}],
    }
    resp = await client.post(f"{base_url}/", json=request_data)
    data = resp.json()
    assert data.get("success") is True, f"Relay failed: {data.get('error')}"
    print(f"Completion received from {data.get('model')}: {data['content'][:60]}")

async def test_rejects_empty_messages(client: httpx.AsyncClient, base_url: str):
    """Test that an empty conversation is rejected"""
    resp = await client.post(f"{base_url}/", json={"messages": []})
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "error": "messages array is required"}

async def test_health(client: httpx.AsyncClient, base_url: str):
    """Test the Health Check feature"""
    resp = await client.get(f"{base_url}/health")
    resp.raise_for_status()
    data = resp.json()
    print(f"Health: {data['status']} {data['services']}")

async def test_config_status(client: httpx.AsyncClient, base_url: str):
    """Test the Config Status feature"""
    resp = await client.get(f"{base_url}/config/status")
    resp.raise_for_status()
    data = resp.json()
    assert "isConfigured" in data["openai"]
    print(f"Key configured: {data['openai']['isConfigured']} ({data['openai']['maskedKey']})")

async def run_tests():
    """Run all feature tests"""
    config = load_config()
    server_config = config.get("server") or {}

    host = server_config.get("host", "127.0.0.1")
    host = "127.0.0.1" if host == "0.0.0.0" else host
    port = server_config.get("port", 5555)
    base_url = f"http://{host}:{port}"

    async with httpx.AsyncClient(timeout=60.0) as client:
        await test_feature("Preflight", lambda: test_preflight(client, base_url))
        await test_feature("Health Check", lambda: test_health(client, base_url))
        await test_feature("Config Status", lambda: test_config_status(client, base_url))
        await test_feature("Empty Messages", lambda: test_rejects_empty_messages(client, base_url))
        await test_feature("Relay Chat", lambda: test_relay_chat(client, base_url))

if __name__ == "__main__":
    print("Running OpenAI Relay Smoke Tests")
    asyncio.run(run_tests())
