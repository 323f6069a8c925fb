"""Transport collaborator: sends a WireRequest, returns a response.

Transports raise TransportError for anything that prevents a response from
being obtained or decoded. The fetch lifecycle converts those into failure
states; it never sees library-specific exceptions.
"""

from __future__ import annotations

from typing import Any, Protocol

import httpx
import structlog

from modelize.client.request import WireRequest
from modelize.contracts.errors import TransportError

logger = structlog.get_logger(__name__)


class TransportResponse(Protocol):
    """Minimal response surface the fetch lifecycle relies on."""

    @property
    def ok(self) -> bool: ...

    @property
    def status(self) -> int: ...

    async def json(self) -> Any: ...


class Transport(Protocol):
    """Anything able to deliver a WireRequest."""

    async def send(self, request: WireRequest) -> TransportResponse: ...


class HttpxResponse:
    """TransportResponse over an httpx.Response."""

    def __init__(self, response: httpx.Response) -> None:
        self.raw = response

    @property
    def ok(self) -> bool:
        return self.raw.is_success

    @property
    def status(self) -> int:
        return self.raw.status_code

    async def json(self) -> Any:
        """Decoded JSON body; None for an empty body (e.g. 204 No Content).

        Raises:
            TransportError: If the body is not valid JSON
        """
        if not self.raw.content:
            return None
        try:
            return self.raw.json()
        except ValueError as e:
            raise TransportError(f"Response body is not valid JSON: {e}", status=self.status, response=self) from e


class HttpxTransport:
    """Transport backed by a shared httpx.AsyncClient.

    The deadline is enforced by the fetch lifecycle, so the client is created
    without its own timeout unless one is passed explicitly.

    Example:
        async with HttpxTransport() as transport:
            engine = Modelize(settings, transport=transport)
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        timeout: float | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        """Wrap an existing client or create one.

        Args:
            client: Client to use; it is NOT closed by aclose()
            timeout: httpx timeout for a client created here
            headers: Default headers for a client created here
        """
        self._owns_client = client is None
        self._client = client if client is not None else httpx.AsyncClient(timeout=timeout, headers=headers)

    async def send(self, request: WireRequest) -> HttpxResponse:
        kwargs: dict[str, Any] = {"headers": dict(request.headers)}
        if request.body is not None:
            kwargs["json"] = request.body
        try:
            response = await self._client.request(request.method.value, request.url, **kwargs)
        except httpx.HTTPError as e:
            raise TransportError(f"{type(e).__name__}: {e}") from e

        logger.debug("response received", method=request.method.value, url=request.url, status=response.status_code)
        return HttpxResponse(response)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> HttpxTransport:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
