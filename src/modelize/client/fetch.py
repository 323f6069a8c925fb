"""Fetch lifecycle: one request against a record, settled into its flags.

perform() drives ``Idle -> InProgress -> Success | Failure`` for the
operation class of the verb (GET is a fetch, anything else a save):

1. Resolve URL and headers. Configuration and credential errors are
   raised to the caller before any state changes.
2. Mark the operation in progress and send the request under the engine's
   deadline.
3. On success, parse the payload into a fresh record and merge it into the
   target in place.
4. On a timeout, a non-success status, any exception raised by the
   transport or a malformed payload, emit FetchFailed and settle in
   Failure. perform() itself resolves normally; callers inspect the flags.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, TypeVar

from modelize.client.request import RequestOptions, WireRequest, build_headers, build_request_url, split_page
from modelize.contracts.errors import TransportError
from modelize.contracts.events import FetchFailed
from modelize.core.logging import request_logger

if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger

    from modelize.client.transport import TransportResponse
    from modelize.model.kind import Model
    from modelize.model.records import Record

R = TypeVar("R", bound="Record")


def parse_response(model: Model, record: Record, payload: Any, options: RequestOptions) -> Record:
    """Build a fresh record of the target's variant from a response payload.

    Raises:
        TransportError: If the payload shape does not match the record
    """
    if record.is_collection:
        payload, total_count = split_page(payload, model.settings.collection_pattern)
        if not isinstance(payload, list):
            raise TransportError(f"Expected a list of {model.name}, got {type(payload).__name__}")
        if total_count is None:
            # Bare array: nothing beyond what is loaded
            total_count = len(payload) + (len(record) if options.extend else 0)
    else:
        if not isinstance(payload, Mapping):
            raise TransportError(f"Expected a {model.name} object, got {type(payload).__name__}")
        total_count = None

    try:
        return model.from_wire(payload, total_count=total_count)
    except (TypeError, ValueError, KeyError, AttributeError) as e:
        raise TransportError(f"Malformed {model.name} payload: {e}") from e


def _fail(
    record: Record,
    request: WireRequest,
    reason: str,
    *,
    status: int | None = None,
    response: Any = None,
    error: BaseException | None = None,
    log: BoundLogger,
) -> None:
    model = record.model
    record.states.fail(request.method.operation)
    log.warning("request failed", status=status, reason=reason)
    model.emit(
        FetchFailed(
            model=model.name,
            method=request.method,
            url=request.url,
            status=status,
            reason=reason,
            response=response,
            error=error,
        )
    )


async def _exchange(model: Model, request: WireRequest) -> Any:
    response: TransportResponse = await model.transport.send(request)
    if not response.ok:
        raise TransportError(f"HTTP {response.status}", status=response.status, response=response)
    return await response.json()


async def perform(record: R, options: RequestOptions) -> R:
    """Issue one request for a record and settle its lifecycle flags.

    Args:
        record: Entity or Collection the response is merged into
        options: Verb, key, action, query and extend flag

    Returns:
        The same record, mutated in place on success

    Raises:
        ConfigurationError: If the model has no endpoint
        CredentialsError: If auth is required and no token is available
    """
    model = record.model
    url = build_request_url(
        model.request_url(),
        primary_key=options.primary_key,
        action=options.action,
        params=options.params,
    )
    headers = await build_headers(model)
    body = record.to_wire() if options.method.sends_body else None
    request = WireRequest(method=options.method, url=url, headers=headers, body=body)

    operation = options.method.operation
    timeout = model.settings.request_timeout_seconds
    record.states.start(operation)
    log = request_logger(__name__, model=model.name, method=request.method, url=url)
    log.debug("request started")

    try:
        async with asyncio.timeout(timeout):
            payload = await _exchange(model, request)
        fresh = parse_response(model, record, payload, options) if payload is not None else None
    except TimeoutError as e:
        _fail(record, request, f"Timed out after {timeout}s", error=e, log=log)
        return record
    except TransportError as e:
        _fail(record, request, str(e), status=e.status, response=e.response, error=e, log=log)
        return record
    except asyncio.CancelledError:
        record.states.fail(operation)
        raise
    except Exception as e:
        # Transports are not required to raise TransportError
        _fail(record, request, f"{type(e).__name__}: {e}", error=e, log=log)
        return record

    if fresh is not None:
        if record.is_collection:
            record.mutate(fresh, extend=options.extend)
        else:
            record.mutate(fresh)
    record.remember_request(options)
    record.states.succeed(operation)
    log.debug("request succeeded")
    return record
