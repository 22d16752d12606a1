"""
Test Configuration
------------------
Shared fixtures and configuration for all tests.

Network access is blocked: tests that talk HTTP inject an
httpx.MockTransport into the client under test.
"""

import sys
from pathlib import Path
from typing import Any, Dict, List

import httpx
import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from commands import CommandInterpreter, Intent, get_default_registry
from tools.registry import Executor, ExecutorOutput, ExecutorRegistry


TOKEN = "0x760AfE86e5de5fa0Ee542fc7B7B713e1c5425701"
WALLET = "0xCa810D095e90Daae6e867c19DF6D9A8C56db2c89"


# =============================================================================
# Test Isolation: Block Side Effects
# =============================================================================

@pytest.fixture(autouse=True)
def block_network(monkeypatch):
    """
    Block real HTTP traffic during tests.

    Anything that reaches httpx's default transport raises RuntimeError;
    use httpx.MockTransport instead.
    """
    def _blocked(self, request):
        raise RuntimeError(
            f"Network access is forbidden during tests: {request.method} {request.url}. "
            "Inject an httpx.MockTransport."
        )

    monkeypatch.setattr(httpx.HTTPTransport, "handle_request", _blocked)


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    """Keep MONAD_* overrides and API keys from the host out of tests."""
    import os

    for key in list(os.environ):
        if key.startswith("MONAD_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)


# =============================================================================
# Shared Fixtures
# =============================================================================

@pytest.fixture(scope="session")
def project_root():
    """Return the project root path."""
    return PROJECT_ROOT


@pytest.fixture
def registry():
    """The bundled, frozen command registry."""
    return get_default_registry()


@pytest.fixture
def interpreter(registry):
    return CommandInterpreter(registry)


class RecordingHandler:
    """Executor handler that records the params it was called with."""

    def __init__(self, name: str):
        self.name = name
        self.calls: List[Dict[str, Any]] = []

    def __call__(self, params: Dict[str, Any]) -> ExecutorOutput:
        self.calls.append(params)
        return ExecutorOutput(text=f"{self.name} ok", data=dict(params))


@pytest.fixture
def recorders():
    """One RecordingHandler per intent."""
    return {intent: RecordingHandler(intent.value) for intent in Intent}


@pytest.fixture
def recording_executors(recorders):
    """ExecutorRegistry whose executors only record their calls."""
    registry = ExecutorRegistry()
    for intent, handler in recorders.items():
        registry.register(Executor(
            intent=intent,
            name=f"{intent.value}-recorder",
            description="Records calls",
            handler=handler,
            timeout_seconds=5.0,
        ))
    return registry


def json_transport(status_code: int = 200, payload: Any = None, seen: list = None):
    """MockTransport answering every request with the same JSON body."""
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status_code, json=payload)

    return httpx.MockTransport(handler)


@pytest.fixture
def make_transport():
    return json_transport
