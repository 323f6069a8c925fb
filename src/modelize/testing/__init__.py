# src/modelize/testing/__init__.py
"""Test infrastructure for modelize.

Factories for settings and engines with sensible defaults, plus a scripted
in-memory transport. When a constructor changes, update the factory here
and tests need no changes.

Usage:
    from modelize.testing import StubTransport, make_engine

    transport = StubTransport()
    transport.respond({"id": "1", "name": "Ada"})
    engine = make_engine(transport=transport)
"""

from __future__ import annotations

import asyncio
from collections import deque
from dataclasses import dataclass
from typing import Any

from modelize.client.request import WireRequest
from modelize.contracts.errors import TransportError
from modelize.core.config import ModelizeSettings
from modelize.engine import Modelize, TokenProvider

DEFAULT_BASE_URL = "https://api.test/v1"


# =============================================================================
# Settings / Engine
# =============================================================================


def make_settings(**overrides: Any) -> ModelizeSettings:
    """Build ModelizeSettings pointing at a fake API.

    Usage:
        settings = make_settings()
        settings = make_settings(require_auth=True, request_timeout_seconds=0.05)
    """
    values: dict[str, Any] = {"base_url": DEFAULT_BASE_URL}
    values.update(overrides)
    return ModelizeSettings(**values)


def make_engine(
    *,
    transport: Any = None,
    auth_token: TokenProvider | None = None,
    **settings_overrides: Any,
) -> Modelize:
    """Build an engine wired to a StubTransport by default."""
    return Modelize(
        make_settings(**settings_overrides),
        transport=transport if transport is not None else StubTransport(),
        auth_token=auth_token,
    )


# =============================================================================
# Scripted transport
# =============================================================================


@dataclass
class StubResponse:
    """Canned TransportResponse."""

    payload: Any = None
    status: int = 200

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    async def json(self) -> Any:
        return self.payload


class _Hang:
    """Marker: the response never arrives."""


class StubTransport:
    """Transport replaying scripted responses in order.

    Every request is recorded in ``requests``. Sending with nothing scripted
    raises TransportError.

    Usage:
        transport = StubTransport()
        transport.respond({"count": 2, "results": [...]})
        transport.respond(status=500)
        transport.fail(TransportError("connection reset"))
        transport.hang()
    """

    def __init__(self) -> None:
        self.requests: list[WireRequest] = []
        self._script: deque[StubResponse | BaseException | _Hang] = deque()

    def respond(self, payload: Any = None, *, status: int = 200) -> StubTransport:
        self._script.append(StubResponse(payload=payload, status=status))
        return self

    def fail(self, error: BaseException) -> StubTransport:
        self._script.append(error)
        return self

    def hang(self) -> StubTransport:
        self._script.append(_Hang())
        return self

    @property
    def last_request(self) -> WireRequest:
        return self.requests[-1]

    async def send(self, request: WireRequest) -> StubResponse:
        self.requests.append(request)
        if not self._script:
            raise TransportError(f"No scripted response for {request.method.value} {request.url}")
        step = self._script.popleft()
        if isinstance(step, _Hang):
            await asyncio.Event().wait()
        if isinstance(step, BaseException):
            raise step
        assert isinstance(step, StubResponse)
        return step


__all__ = [
    "DEFAULT_BASE_URL",
    "StubResponse",
    "StubTransport",
    "make_engine",
    "make_settings",
]
