"""Pytest configuration ensuring project root is importable.

Adds repository root and ``src`` to sys.path explicitly to avoid
interpreter/path quirks when the project is not installed.
"""
from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
SRC = ROOT / "src"
if SRC.exists() and str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

FIXED_NOW = 1700000000.0  # -> first session id "1700000000000"


@pytest.fixture(autouse=True)
def _isolate_config_env(monkeypatch):  # noqa: D401
    """Ensure global config/env/metrics side effects do not leak.

    - Drop CHAT__* and OLLAMA_API_URL overrides from the environment
    - Clear aggregated config + provider caches between tests
    - Reset metrics counters
    """
    from chat_core import metrics
    from chat_core.config import clear_config_cache
    from chat_core.llm.factory import clear_provider_cache

    for key in list(os.environ):
        if key.startswith("CHAT__") or key == "OLLAMA_API_URL":
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("CHAT_CONFIG_DIR", str(ROOT / "configs"))
    clear_config_cache()
    clear_provider_cache()
    metrics.reset_for_tests()
    try:
        yield
    finally:
        clear_config_cache()
        clear_provider_cache()


def ollama_ok(text: str = "こんにちは！"):
    def handler(request):
        import httpx

        return httpx.Response(200, json={"model": "gemma", "response": text})

    return handler


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def make_client(fixed_clock):
    """Build a TestClient whose provider talks to an httpx.MockTransport."""
    import httpx
    from fastapi.testclient import TestClient

    from chat_core.llm import OllamaProvider
    from chat_core.sessions import SessionManager
    from gemma_chat.api.app import create_app

    def _make(handler=None, sessions=None):
        provider = OllamaProvider(
            transport=httpx.MockTransport(handler or ollama_ok())
        )
        manager = sessions or SessionManager(clock=fixed_clock)
        app = create_app(sessions=manager, provider=provider)
        return TestClient(app), manager

    return _make
