# src/modelize/client/request.py
"""Request construction: URL, query string, headers, response payload shape.

URL layout::

    {base_url}/{endpoint}[/{primary_key}][/{action}][?k=v&...]

Query values are rendered then percent-encoded: dates and datetimes in
ISO-8601, booleans as true/false. Parameters set to None are omitted.
"""

from __future__ import annotations

import inspect
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from modelize.contracts.enums import HttpMethod
from modelize.contracts.errors import CredentialsError, TransportError

if TYPE_CHECKING:
    from modelize.core.config import CollectionPattern
    from modelize.model.kind import Model


@dataclass(frozen=True, slots=True)
class RequestOptions:
    """What to request, before it is resolved against a model.

    Attributes:
        method: HTTP verb
        primary_key: Appended as a path segment when set
        action: Sub-action path segment (e.g. "publish")
        params: Query parameters
        extend: For collections, append loaded items instead of replacing
    """

    method: HttpMethod
    primary_key: Any = None
    action: str | None = None
    params: Mapping[str, Any] | None = None
    extend: bool = False


@dataclass(frozen=True, slots=True)
class WireRequest:
    """A fully resolved request handed to the transport."""

    method: HttpMethod
    url: str
    headers: Mapping[str, str]
    body: Any = None


def render_query_value(value: Any) -> str:
    """Render one query parameter value, percent-encoded."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            text = value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")
        else:
            text = value.isoformat()
    elif isinstance(value, date):
        text = value.isoformat()
    elif isinstance(value, bool):
        text = "true" if value else "false"
    else:
        text = str(value)
    return quote(text, safe="")


def build_query_string(params: Mapping[str, Any] | None) -> str:
    if not params:
        return ""
    return "&".join(
        f"{quote(str(key), safe='')}={render_query_value(value)}" for key, value in params.items() if value is not None
    )


def _present(segment: Any) -> bool:
    return segment is not None and segment != ""


def build_request_url(
    base: str,
    *,
    primary_key: Any = None,
    action: str | None = None,
    params: Mapping[str, Any] | None = None,
) -> str:
    """Join the endpoint base with optional key, action and query string.

    Args:
        base: Endpoint base URL, without a trailing slash
        primary_key: Path segment identifying one record
        action: Sub-action path segment
        params: Query parameters (None values are skipped)

    Returns:
        Full request URL
    """
    url = base
    if _present(primary_key):
        url = f"{url}/{quote(str(primary_key), safe='')}"
    if _present(action):
        url = f"{url}/{action.strip('/')}"
    query = build_query_string(params)
    if query:
        url = f"{url}?{query}"
    return url


async def build_headers(model: Model) -> dict[str, str]:
    """JSON headers, plus a bearer token when the model requires auth.

    Raises:
        CredentialsError: If auth is required and the provider yields no token
    """
    headers = {"Content-Type": "application/json", "Accept": "application/json"}
    if model.require_auth:
        token = await model.auth_token()
        if not token:
            raise CredentialsError(f"Impossible to get the auth token to access {model.url}")
        headers["Authorization"] = f"Bearer {token}"
    return headers


async def resolve_token(provider: Any) -> str | None:
    """Call a token provider that may be sync or async."""
    token = provider()
    if inspect.isawaitable(token):
        token = await token
    return token


def split_page(payload: Any, pattern: CollectionPattern) -> tuple[Any, int | None]:
    """Split a page envelope into (items, total_count).

    Only an object carrying both pattern keys is an envelope; anything else
    is returned unchanged with no server count.

    Raises:
        TransportError: If the envelope's count is not a non-negative integer
    """
    if not (isinstance(payload, Mapping) and pattern.count in payload and pattern.data in payload):
        return payload, None

    count = payload[pattern.count]
    if isinstance(count, bool) or not isinstance(count, int) or count < 0:
        raise TransportError(f"Collection count '{pattern.count}' must be a non-negative integer, got {count!r}")
    return payload[pattern.data], count
