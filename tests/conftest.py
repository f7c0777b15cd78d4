"""
Pytest configuration and fixtures for checkmate-mcp tests.

The FakeDispatcher records every request a tool makes and answers with a
canned payload (or raises a canned exception), so tool behavior can be
tested without a backend.
"""

from dataclasses import dataclass, field
from typing import Any

import pytest

from checkmate_mcp.schema import Settings
from checkmate_mcp.tools.registry import ToolRegistry, default_registry


@dataclass
class DispatchCall:
    """One recorded request."""

    path: str
    method: str
    body: Any


@dataclass
class FakeDispatcher:
    """Dispatcher double: returns `payload` or raises `error` for every call."""

    payload: Any = None
    error: Exception | None = None
    calls: list[DispatchCall] = field(default_factory=list)

    def dispatch(self, path: str, *, method: str = "GET", body: Any = None) -> Any | None:
        self.calls.append(DispatchCall(path=path, method=method, body=body))
        if self.error is not None:
            raise self.error
        return self.payload


@pytest.fixture
def dispatcher() -> FakeDispatcher:
    """A fake dispatcher answering with {"data": {"id": 1}}."""
    return FakeDispatcher(payload={"data": {"id": 1}})


@pytest.fixture
def registry() -> ToolRegistry:
    """The full tool catalogue."""
    return default_registry()


@pytest.fixture
def settings() -> Settings:
    """Valid settings pointing at a local API."""
    return Settings(api_base="http://checkmate.test", api_token="secret-token")


@pytest.fixture
def api_env() -> dict[str, str]:
    """Environment variables for a valid configuration."""
    return {
        "CHECKMATE_API_BASE": "http://checkmate.test",
        "CHECKMATE_API_TOKEN": "secret-token",
    }


@pytest.fixture
def make_dispatcher() -> type[FakeDispatcher]:
    """Factory for fake dispatchers with a specific payload or error."""
    return FakeDispatcher
